"""Domain layer containing business logic and models."""

from .chat_content import extract_message_content
from .media import build_object_key, classify
from .models import (
    ChatMessage,
    IngestionResult,
    LinkStatus,
    MediaFile,
    MediaKind,
    MediaSource,
    ProviderHealth,
    StoredObject,
    SummaryResult,
    TranscriptionHealth,
    TranscriptionResult,
    TranscriptionSegment,
    UploadRecord,
    UploadStatus,
)

__all__ = [
    "ChatMessage",
    "IngestionResult",
    "LinkStatus",
    "MediaFile",
    "MediaKind",
    "MediaSource",
    "ProviderHealth",
    "StoredObject",
    "SummaryResult",
    "TranscriptionHealth",
    "TranscriptionResult",
    "TranscriptionSegment",
    "UploadRecord",
    "UploadStatus",
    "build_object_key",
    "classify",
    "extract_message_content",
]
