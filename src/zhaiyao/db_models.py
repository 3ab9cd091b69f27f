from datetime import datetime, timezone

from sqlalchemy import Column
from sqlalchemy.types import String, Text
from sqlmodel import Field, SQLModel

from zhaiyao.domain.models import UploadStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AudioUpload(SQLModel, table=True):
    __tablename__ = "audio_uploads"

    id: int | None = Field(default=None, primary_key=True)
    user_identifier: str = Field(default="", index=True, max_length=255)
    filename: str = Field(max_length=255)
    object_url: str = ""
    object_key: str = ""
    status: UploadStatus = Field(sa_column=Column(String(50), nullable=False))
    error_message: str | None = Field(default=None, sa_column=Column(Text))
    created_at: datetime = Field(default_factory=_utcnow, index=True)
    updated_at: datetime = Field(default_factory=_utcnow)
