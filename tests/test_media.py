import pytest

from zhaiyao.domain.media import (
    build_object_key,
    classify,
    ensure_mp3_extension,
    filename_from_url,
    object_key_from_url,
    sanitize_basename,
)
from zhaiyao.domain.models import MediaFile, MediaKind


def _media(filename: str, content_type: str = "application/octet-stream") -> MediaFile:
    return MediaFile(data=b"x", filename=filename, content_type=content_type)


@pytest.mark.parametrize(
    "media, kind",
    [
        (_media("call.m4a"), MediaKind.AUDIO),
        (_media("blob", "audio/ogg"), MediaKind.AUDIO),
        (_media("clip.webm", "audio/webm"), MediaKind.AUDIO),
        (_media("clip.webm", "video/webm"), MediaKind.AUDIO),
        (_media("talk.MKV"), MediaKind.VIDEO),
        (_media("blob", "video/mp4"), MediaKind.VIDEO),
        (_media("slides.pdf", "application/pdf"), MediaKind.UNSUPPORTED),
    ],
)
def test_classify(media, kind):
    assert classify(media) == kind


def test_object_key_without_extension_or_readable_name():
    assert (
        build_object_key("!!!", now_ms=1, random_hex="deadbeef")
        == "uploads/audio/1-deadbeef"
    )
    assert (
        build_object_key("README", now_ms=1, random_hex="deadbeef")
        == "uploads/audio/1-deadbeef-readme"
    )


def test_sanitized_basename_is_capped():
    slug = sanitize_basename("A" * 30 + " " + "b" * 30 + ".mp3")

    assert len(slug) <= 40
    assert not slug.endswith("-")


def test_object_keys_are_unique():
    keys = {build_object_key("same.wav") for _ in range(50)}

    assert len(keys) == 50


def test_url_helpers():
    url = "https://bucket.example.com/uploads/audio/%E4%BC%9A%E8%AE%AE.mp3?x=1"

    assert filename_from_url(url) == "会议.mp3"
    assert object_key_from_url(url) == "uploads/audio/会议.mp3"
    assert filename_from_url("https://example.com/") == "remote-audio"
    assert object_key_from_url("not a url") == "not a url"


def test_ensure_mp3_extension():
    assert ensure_mp3_extension("meeting.mov") == "meeting.mp3"
    assert ensure_mp3_extension("meeting.MP3") == "meeting.MP3"
    assert ensure_mp3_extension("meeting") == "meeting.mp3"
