"""FastAPI dependency injection configuration."""

from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import httpx
from fastapi import Header
from sqlmodel import Session, create_engine

from zhaiyao.config import load_config
from zhaiyao.domain.audio_processor import AudioProcessor
from zhaiyao.domain.transcription_dispatcher import TranscriptionDispatcher
from zhaiyao.handlers import ChatHandler, HealthHandler, IngestionHandler, SummaryHandler
from zhaiyao.infrastructure import (
    ChatCompletionsClient,
    FfmpegTranscoder,
    HttpMediaFetcher,
    OssStorageClient,
    WhisperSpeechClient,
)
from zhaiyao.logging import setup_logging
from zhaiyao.repositories import UploadRepository, init_db

logger = setup_logging()

_config = load_config()

# Outbound HTTP
_http_client = httpx.Client(timeout=httpx.Timeout(120.0, connect=10.0))

_storage = OssStorageClient(_http_client, _config.oss)
_fetcher = HttpMediaFetcher(_http_client)
_speech = WhisperSpeechClient(_http_client, _config.speech)
_chat = ChatCompletionsClient(_http_client)

# Media processing
_transcoder = FfmpegTranscoder(_config.media.ffmpeg_path)
_processor = AudioProcessor(_transcoder, _config.media)
_dispatcher = TranscriptionDispatcher(
    _speech,
    vendor=_config.speech.vendor,
    concurrency=_config.media.segment_concurrency,
    simplify=_config.transcript_simplify,
)

# Summary prompt
_summary_prompt_path = Path(__file__).parent / "prompts" / "meeting_summary.txt"
_summary_prompt = _summary_prompt_path.read_text(encoding="utf-8")

# Upload history
_db_engine = None
_repository: UploadRepository | None = None
if _config.database.history_enabled:
    _db_engine = create_engine(_config.database.sqlalchemy_url, pool_pre_ping=True)
    init_db(_db_engine)
    logger.info("Upload history enabled")


@contextmanager
def _session_factory():
    """Creates a database session context manager."""
    with Session(_db_engine) as session:
        yield session


if _db_engine is not None:
    _repository = UploadRepository(_session_factory)

# Service composition
_ingestion_handler = IngestionHandler(
    _config, _fetcher, _storage, _processor, _dispatcher, _repository
)
_summary_handler = SummaryHandler(
    _chat, _config.chat.providers["apimart"], _summary_prompt
)
_chat_handler = ChatHandler(_chat, _config.chat)
_health_handler = HealthHandler(_config, _storage, _chat)


def get_ingestion_handler() -> IngestionHandler:
    """Returns the configured ingestion handler."""
    return _ingestion_handler


def get_summary_handler() -> SummaryHandler:
    return _summary_handler


def get_chat_handler() -> ChatHandler:
    return _chat_handler


def get_health_handler() -> HealthHandler:
    return _health_handler


def get_upload_repository() -> UploadRepository | None:
    """Returns the history repository, or None when history is disabled."""
    return _repository


def get_user_identifier(
    x_user_id: Annotated[str | None, Header()] = None,
) -> str:
    """Returns the caller id set by the auth proxy, empty for anonymous requests."""
    return (x_user_id or "").strip()
