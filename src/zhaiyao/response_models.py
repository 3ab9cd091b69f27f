"""Request and response models for the HTTP API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from zhaiyao.domain.models import UploadStatus


class TranscriptionResponse(BaseModel):
    """Transcript plus the location of the stored audio, in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    transcript: str
    vendor: str
    raw: Any = None
    audio_url: str
    object_key: str


class SummarizeRequest(BaseModel):
    transcript: str
    prompt: str | None = None


class SummaryResponse(BaseModel):
    summary: str
    warning: str | None = None
    source: str | None = None


class ChatRequest(BaseModel):
    """
    Chat payload as sent by the browser.

    Fields accept any JSON value; the chat handler drops invalid messages
    and resolves unknown providers to the default one.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    provider: Any = None
    context_transcript: Any = None
    messages: Any = None


class ChatResponse(BaseModel):
    reply: str


class UploadHistoryItem(BaseModel):
    """One row of the caller's upload history."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    filename: str
    object_url: str
    object_key: str
    status: UploadStatus
    error_message: str | None = None
    created_at: datetime
