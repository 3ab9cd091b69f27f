"""Domain models for media ingestion, transcription and summarization."""

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


class MediaKind(str, Enum):
    AUDIO = "audio"
    VIDEO = "video"
    UNSUPPORTED = "unsupported"


class MediaSource(str, Enum):
    UPLOAD = "upload"
    URL = "url"


class UploadStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"


class MediaFile(BaseModel, frozen=True):
    """An in-memory media file moving through the pipeline."""

    data: bytes
    filename: str
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.data)


class TranscriptionSegment(BaseModel, frozen=True):
    """A time-bounded slice of audio sent to the speech provider on its own."""

    data: bytes
    name: str
    ordinal: int = Field(ge=0)
    content_type: str = "audio/mpeg"


class StoredObject(BaseModel, frozen=True):
    """Location of an audio object in storage."""

    key: str
    url: str


class TranscriptionResult(BaseModel, frozen=True):
    """Concatenated transcript plus raw provider payloads."""

    transcript: str
    vendor: str
    raw: Any = None


class IngestionResult(BaseModel, frozen=True):
    """Outcome of a successful ingestion request."""

    transcript: str
    vendor: str
    raw: Any = None
    audio_url: str
    object_key: str


class UploadRecord(BaseModel, frozen=True):
    """
    One upload history entry.

    Written once per ingestion attempt; ``error_message`` is only set for
    failed attempts.
    """

    user_identifier: str = ""
    filename: str
    object_url: str = ""
    object_key: str = ""
    status: UploadStatus
    error_message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


IssueType = Literal["code", "config", "service", "network"]


class LinkStatus(BaseModel, frozen=True):
    """Result of a connectivity probe against one external dependency."""

    ok: bool
    latency: int | None = None
    reason: str | None = None
    issue: IssueType | None = None


class ChatMessage(BaseModel, frozen=True):
    role: Literal["system", "user", "assistant"]
    content: str


class SummaryResult(BaseModel, frozen=True):
    """A meeting summary; ``source`` is set when it was built locally."""

    summary: str
    warning: str | None = None
    source: str | None = None


class ProviderHealth(BaseModel, frozen=True):
    """Outcome of a chat provider probe and the HTTP status to answer with."""

    ok: bool
    provider: str
    model: str | None = None
    latency: int | None = None
    message: str | None = None
    reason: str | None = None
    issue: IssueType | None = None
    status_code: int = Field(default=200, exclude=True)


class TranscriptionHealth(BaseModel, frozen=True):
    """Connectivity report for the ingestion pipeline; timestamp is epoch ms."""

    ok: bool
    env: LinkStatus
    oss: LinkStatus
    apimart: LinkStatus
    timestamp: int
