import pytest

from zhaiyao.domain.transcript_parser import extract_transcript, normalize_transcript


@pytest.mark.parametrize(
    "payload, expected",
    [
        ("plain body", "plain body"),
        ({"text": "from text"}, "from text"),
        ({"transcription": "from transcription"}, "from transcription"),
        ({"result": "from result"}, "from result"),
        ({"data": "data string"}, "data string"),
        ({"data": {"text": "nested text"}}, "nested text"),
        ({"data": {"transcription": "nested transcription"}}, "nested transcription"),
        ({"choices": [{"message": {"content": "chat shaped"}}]}, "chat shaped"),
        (
            {"segments": [{"text": "first"}, {"content": "second"}, {"start": 1}]},
            "first\nsecond",
        ),
    ],
)
def test_extracts_known_shapes(payload, expected):
    assert extract_transcript(payload) == expected


def test_earlier_strategy_wins():
    payload = {"text": "", "transcription": "fallback", "segments": [{"text": "late"}]}

    assert extract_transcript(payload) == "fallback"


@pytest.mark.parametrize("payload", [None, {}, {"choices": []}, {"segments": "x"}, 42])
def test_unknown_shapes_yield_empty_string(payload):
    assert extract_transcript(payload) == ""


def test_simplification_is_opt_in():
    text = "這次會開完再錄"

    assert normalize_transcript(text, simplify=False) == text
    assert normalize_transcript(text, simplify=True) == "这次会开完再录"
