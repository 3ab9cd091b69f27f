import pytest

from zhaiyao.config import MediaConfig
from zhaiyao.domain.audio_processor import AudioProcessor
from zhaiyao.domain.models import MediaFile
from zhaiyao.exceptions import AudioExtractionError

from stubs import StubTranscoder

BIG = MediaFile(data=b"\x00" * 4096, filename="long-call.wav", content_type="audio/wav")


def _processor(transcoder=None, **settings) -> AudioProcessor:
    return AudioProcessor(transcoder or StubTranscoder(), MediaConfig(**settings))


def test_segmentation_disabled_returns_original_file():
    transcoder = StubTranscoder(pieces=5)
    segments = _processor(transcoder, segment_enabled=False, segment_min_size=1).segment(BIG)

    assert len(segments) == 1
    assert segments[0].data == BIG.data
    assert segments[0].name == "long-call.wav"
    assert segments[0].content_type == "audio/wav"
    assert transcoder.segment_calls == 0


@pytest.mark.parametrize(
    "settings, transcoder",
    [
        ({"segment_min_size": 10_000}, StubTranscoder(pieces=5)),
        ({"segment_min_size": 1, "segment_duration": 0}, StubTranscoder(pieces=5)),
        ({"segment_min_size": 1}, StubTranscoder(fail=True)),
        ({"segment_min_size": 1}, StubTranscoder(pieces=1)),
    ],
)
def test_segmentation_falls_back_to_single_segment(settings, transcoder):
    segments = _processor(transcoder, segment_enabled=True, **settings).segment(BIG)

    assert [segment.data for segment in segments] == [BIG.data]


def test_segmentation_names_pieces_by_ordinal():
    segments = _processor(
        StubTranscoder(pieces=3), segment_enabled=True, segment_min_size=1
    ).segment(BIG)

    assert [(s.ordinal, s.name) for s in segments] == [
        (0, "segment-000.mp3"),
        (1, "segment-001.mp3"),
        (2, "segment-002.mp3"),
    ]
    assert all(s.content_type == "audio/mpeg" for s in segments)


def test_small_audio_is_not_optimized():
    transcoder = StubTranscoder()
    result = _processor(transcoder, optimization_threshold=10_000).optimize(BIG)

    assert result is BIG
    assert transcoder.transcode_calls == 0


def test_large_audio_is_reencoded_to_mp3():
    result = _processor(optimization_threshold=1024).optimize(BIG)

    assert result.filename == "long-call.mp3"
    assert result.content_type == "audio/mpeg"
    assert result.size < BIG.size


def test_optimization_failure_keeps_original():
    result = _processor(StubTranscoder(fail=True), optimization_threshold=1).optimize(BIG)

    assert result is BIG


def test_video_conversion_failure_raises():
    video = MediaFile(data=b"moov", filename="demo.mp4", content_type="video/mp4")

    with pytest.raises(AudioExtractionError) as exc_info:
        _processor(StubTranscoder(fail=True)).convert_video(video)

    assert exc_info.value.file_name == "demo.mp4"
