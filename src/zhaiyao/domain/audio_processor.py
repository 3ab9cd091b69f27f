"""Core business logic for preparing audio before transcription."""

from zhaiyao.config import MediaConfig
from zhaiyao.exceptions import AudioExtractionError, TranscodeError
from zhaiyao.infrastructure.interfaces.transcoder import MediaTranscoder
from zhaiyao.logging import setup_logging

from .media import ensure_mp3_extension
from .models import MediaFile, TranscriptionSegment

logger = setup_logging()

MP3_CONTENT_TYPE = "audio/mpeg"


class AudioProcessor:
    """Converts, shrinks and splits audio according to the media settings."""

    def __init__(self, transcoder: MediaTranscoder, config: MediaConfig):
        self._transcoder = transcoder
        self._config = config

    def convert_video(self, media: MediaFile) -> MediaFile:
        """
        Extracts a mono MP3 track from a video.

        Args:
            media: The uploaded video.

        Returns:
            The extracted audio, named after the video with an ``.mp3`` extension.

        Raises:
            AudioExtractionError: If the transcoder fails or yields nothing.
        """
        logger.info(
            "Converting video to audio",
            extra={
                "file_name": media.filename,
                "content_type": media.content_type,
                "size": media.size,
            },
        )
        try:
            audio = self._encode(media.data)
        except TranscodeError as e:
            raise AudioExtractionError(media.filename, e) from e

        if not audio:
            raise AudioExtractionError(media.filename)

        return MediaFile(
            data=audio,
            filename=ensure_mp3_extension(media.filename or "video-audio"),
            content_type=MP3_CONTENT_TYPE,
        )

    def optimize(self, media: MediaFile) -> MediaFile:
        """
        Re-encodes oversized audio to the target bitrate and sample rate.

        Files at or below the threshold pass through untouched, and any
        transcoder failure falls back to the original file.
        """
        if not self._config.optimization_enabled:
            return media
        if media.size <= self._config.optimization_threshold:
            return media

        logger.info(
            "Optimizing audio",
            extra={
                "file_name": media.filename,
                "size": media.size,
                "threshold": self._config.optimization_threshold,
            },
        )
        try:
            optimized = self._encode(media.data)
        except TranscodeError:
            logger.exception(
                "Audio optimization failed, using original",
                extra={"file_name": media.filename},
            )
            return media

        if not optimized:
            return media

        return MediaFile(
            data=optimized,
            filename=ensure_mp3_extension(media.filename or "audio-file"),
            content_type=MP3_CONTENT_TYPE,
        )

    def segment(self, media: MediaFile) -> list[TranscriptionSegment]:
        """
        Splits long audio into fixed-duration segments.

        Falls back to a single segment holding the original file when
        segmentation is disabled, the file is small, the duration is not
        positive, ffmpeg fails, or ffmpeg produced at most one piece.
        """
        whole = [
            TranscriptionSegment(
                data=media.data,
                name=media.filename,
                ordinal=0,
                content_type=media.content_type,
            )
        ]
        if not self._config.segment_enabled:
            return whole
        if media.size <= self._config.segment_min_size:
            return whole
        if self._config.segment_duration <= 0:
            return whole

        try:
            pieces = self._transcoder.segment(media.data, self._config.segment_duration)
        except TranscodeError:
            logger.exception(
                "Audio segmentation failed, using original",
                extra={"file_name": media.filename},
            )
            return whole

        if len(pieces) <= 1:
            return whole

        logger.info(
            "Audio segmented",
            extra={"count": len(pieces), "duration": self._config.segment_duration},
        )
        return [
            TranscriptionSegment(
                data=piece,
                name=f"segment-{ordinal:03d}.mp3",
                ordinal=ordinal,
                content_type=MP3_CONTENT_TYPE,
            )
            for ordinal, piece in enumerate(pieces)
        ]

    def _encode(self, data: bytes) -> bytes:
        return self._transcoder.transcode(
            data,
            sample_rate=self._config.target_sample_rate,
            bitrate=self._config.target_bitrate,
        )
