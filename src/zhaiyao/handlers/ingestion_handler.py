"""Handler for the audio ingestion pipeline."""

from zhaiyao.config import AppConfig
from zhaiyao.domain.audio_processor import AudioProcessor
from zhaiyao.domain.media import classify
from zhaiyao.domain.models import (
    IngestionResult,
    MediaFile,
    MediaKind,
    MediaSource,
    StoredObject,
    UploadRecord,
    UploadStatus,
)
from zhaiyao.domain.transcription_dispatcher import TranscriptionDispatcher
from zhaiyao.exceptions import (
    ConfigurationError,
    InvalidInputError,
    UploadPersistenceError,
)
from zhaiyao.infrastructure.interfaces.fetcher import MediaFetcher
from zhaiyao.infrastructure.interfaces.storage import StorageClient
from zhaiyao.logging import setup_logging
from zhaiyao.repositories import UploadRepository

logger = setup_logging()

MISSING_INPUT_MESSAGE = "Upload an audio file or provide an accessible audio link."
UNSUPPORTED_TYPE_MESSAGE = (
    "Only audio or video files are supported, choose another file or check the link."
)
DEFAULT_FILENAME = "audio-file"


class IngestionHandler:
    """Runs one upload or link through conversion, storage and transcription."""

    def __init__(
        self,
        config: AppConfig,
        fetcher: MediaFetcher,
        storage: StorageClient,
        processor: AudioProcessor,
        dispatcher: TranscriptionDispatcher,
        repository: UploadRepository | None = None,
    ):
        self._config = config
        self._fetcher = fetcher
        self._storage = storage
        self._processor = processor
        self._dispatcher = dispatcher
        self._repository = repository

    def process(
        self,
        user_identifier: str,
        upload: MediaFile | None,
        file_url: str | None,
    ) -> IngestionResult:
        """
        Validates the input, then converts, stores and transcribes it.

        Once the input is validated the attempt is written to the upload
        history exactly once, as completed or failed, when a repository is
        configured.

        Args:
            user_identifier: Caller id, empty for anonymous requests.
            upload: The uploaded file; takes precedence over ``file_url``.
            file_url: Public link to fetch when no file was uploaded.

        Returns:
            IngestionResult with the transcript and the stored object.

        Raises:
            ConfigurationError: If required settings are missing.
            InvalidInputError: If there is no input, it is too large or of an
                unsupported type.
            RemoteFetchError: If the link cannot be downloaded.
            AudioExtractionError: If a video cannot be converted.
            StorageUploadError: If the upload to storage fails.
            TranscriptionError: If the speech provider fails.
        """
        missing = self._config.missing_required()
        if missing:
            logger.error("Missing configuration", extra={"missing": missing})
            raise ConfigurationError(missing)

        media, source, remote_url = self._resolve_source(upload, file_url)
        kind = self._validate(media)

        logger.info(
            "File validated",
            extra={
                "file_name": media.filename,
                "size": media.size,
                "content_type": media.content_type,
                "source": source.value,
                "kind": kind.value,
            },
        )

        filename = media.filename or DEFAULT_FILENAME
        stored: StoredObject | None = None
        error_message: str | None = None
        succeeded = False
        try:
            if kind is MediaKind.VIDEO:
                media = self._processor.convert_video(media)
                filename = media.filename

            if source is MediaSource.UPLOAD:
                stored = self._storage.upload(media)
            else:
                stored = self._storage.link(remote_url)

            optimized = self._processor.optimize(media)
            segments = self._processor.segment(optimized)
            transcription = self._dispatcher.transcribe(segments)

            logger.info(
                "Transcription completed",
                extra={
                    "object_key": stored.key,
                    "segments": len(segments),
                    "has_transcript": bool(transcription.transcript),
                },
            )
            succeeded = True
            return IngestionResult(
                transcript=transcription.transcript,
                vendor=transcription.vendor,
                raw=transcription.raw,
                audio_url=stored.url,
                object_key=stored.key,
            )
        except Exception as e:
            error_message = str(e) or type(e).__name__
            logger.exception("Ingestion failed", extra={"file_name": filename})
            raise
        finally:
            if not succeeded and error_message is None:
                error_message = "Ingestion interrupted"
            self._record(user_identifier, filename, stored, error_message)

    def _resolve_source(
        self, upload: MediaFile | None, file_url: str | None
    ) -> tuple[MediaFile, MediaSource, str]:
        if upload is not None:
            return upload, MediaSource.UPLOAD, ""

        remote_url = (file_url or "").strip()
        if not remote_url:
            raise InvalidInputError(MISSING_INPUT_MESSAGE)

        media = self._fetcher.fetch(remote_url, self._config.media.max_file_size)
        return media, MediaSource.URL, remote_url

    def _validate(self, media: MediaFile) -> MediaKind:
        max_size = self._config.media.max_file_size
        if media.size > max_size:
            raise InvalidInputError(
                f"File exceeds the {max_size // (1024 * 1024)}MB limit, compress it and retry"
            )

        kind = classify(media)
        if kind is MediaKind.UNSUPPORTED:
            raise InvalidInputError(UNSUPPORTED_TYPE_MESSAGE)
        return kind

    def _record(
        self,
        user_identifier: str,
        filename: str,
        stored: StoredObject | None,
        error_message: str | None,
    ) -> None:
        if self._repository is None:
            return

        record = UploadRecord(
            user_identifier=user_identifier or "",
            filename=filename,
            object_url=stored.url if stored else "",
            object_key=stored.key if stored else "",
            status=UploadStatus.FAILED if error_message else UploadStatus.COMPLETED,
            error_message=error_message,
        )
        try:
            self._repository.insert(record)
        except UploadPersistenceError:
            logger.exception(
                "Upload history not recorded",
                extra={"file_name": filename, "status": record.status.value},
            )
