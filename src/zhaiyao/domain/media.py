"""Media classification and naming helpers."""

import os
import re
import time
import uuid
from urllib.parse import unquote, urlparse

from .models import MediaFile, MediaKind

AUDIO_EXTENSIONS = frozenset(
    {"mp3", "m4a", "wav", "flac", "aac", "ogg", "wma", "webm"}
)
VIDEO_EXTENSIONS = frozenset({"mp4", "mkv", "mov", "avi", "flv", "webm"})

OBJECT_KEY_PREFIX = "uploads/audio"
MAX_BASENAME_LENGTH = 40

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")


def _extension(filename: str) -> str:
    return os.path.splitext(filename)[1].lstrip(".").lower()


def is_audio(media: MediaFile) -> bool:
    if media.content_type.startswith("audio/"):
        return True
    return _extension(media.filename) in AUDIO_EXTENSIONS


def is_video(media: MediaFile) -> bool:
    if media.content_type.startswith("video/"):
        return True
    return _extension(media.filename) in VIDEO_EXTENSIONS


def classify(media: MediaFile) -> MediaKind:
    """Audio wins over video, so ``.webm`` with an audio type stays audio."""
    if is_audio(media):
        return MediaKind.AUDIO
    if is_video(media):
        return MediaKind.VIDEO
    return MediaKind.UNSUPPORTED


def sanitize_basename(filename: str) -> str:
    """Lower-cases the name without extension and collapses it to ``[a-z0-9-]``."""
    stem = re.sub(r"\.[^/.]+$", "", filename).lower()
    slug = _NON_ALPHANUMERIC.sub("-", stem).strip("-")
    return slug[:MAX_BASENAME_LENGTH].rstrip("-")


def build_object_key(
    filename: str,
    now_ms: int | None = None,
    random_hex: str | None = None,
) -> str:
    """
    Builds a unique storage key for an uploaded audio file.

    Format: ``uploads/audio/{epochMillis}-{8 hex}[-{basename}][.{ext}]``.

    Args:
        filename: Original file name, used for the readable suffix.
        now_ms: Timestamp override in epoch milliseconds.
        random_hex: Random component override (8 hex characters).
    """
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    random_id = random_hex or uuid.uuid4().hex[:8]
    base = sanitize_basename(filename)
    _, dot, ext = filename.rpartition(".")

    key = f"{OBJECT_KEY_PREFIX}/{timestamp}-{random_id}"
    if base:
        key += f"-{base}"
    if dot and ext:
        key += f".{ext}"
    return key


def ensure_mp3_extension(filename: str) -> str:
    if filename.lower().endswith(".mp3"):
        return filename
    stem = re.sub(r"\.[^/.]+$", "", filename)
    return f"{stem or 'audio'}.mp3"


def filename_from_url(url: str) -> str:
    """Returns the decoded last path component of a URL, or ``remote-audio``."""
    try:
        path = urlparse(url).path
    except ValueError:
        return "remote-audio"
    parts = [part for part in path.split("/") if part]
    return unquote(parts[-1]) if parts else "remote-audio"


def object_key_from_url(url: str) -> str:
    """Decodes the path of a storage URL into an object key."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return url
    if not parsed.scheme or not parsed.netloc:
        return url
    return unquote(parsed.path.lstrip("/"))
