"""Transcript extraction from speech-provider payloads."""

from collections.abc import Callable
from typing import Any

Strategy = Callable[[Any], str]

TRADITIONAL_TO_SIMPLIFIED = str.maketrans(
    {
        "體": "体",
        "頭": "头",
        "鬧": "闹",
        "愛": "爱",
        "說": "说",
        "觀": "观",
        "視": "视",
        "願": "愿",
        "變": "变",
        "讓": "让",
        "會": "会",
        "開": "开",
        "對": "对",
        "這": "这",
        "為": "为",
        "於": "于",
        "風": "风",
        "雲": "云",
        "課": "课",
        "將": "将",
        "夢": "梦",
        "餘": "余",
        "電": "电",
        "錄": "录",
        "樂": "乐",
        "醫": "医",
    }
)


def plain_string(payload: Any) -> str:
    return payload if isinstance(payload, str) else ""


def field_path(*path: str | int) -> Strategy:
    """Builds a strategy that walks ``path`` and returns a string leaf."""

    def extract(payload: Any) -> str:
        node = payload
        for step in path:
            if isinstance(step, int):
                if not isinstance(node, list) or len(node) <= step:
                    return ""
            elif not isinstance(node, dict):
                return ""
            node = node[step] if isinstance(step, int) else node.get(step)
        return node if isinstance(node, str) else ""

    return extract


def segment_array(payload: Any) -> str:
    if not isinstance(payload, dict) or not isinstance(payload.get("segments"), list):
        return ""
    pieces = []
    for segment in payload["segments"]:
        if not isinstance(segment, dict):
            continue
        piece = segment.get("text") or segment.get("content")
        if isinstance(piece, str) and piece:
            pieces.append(piece)
    return "\n".join(pieces)


EXTRACTION_STRATEGIES: tuple[Strategy, ...] = (
    plain_string,
    field_path("text"),
    field_path("transcription"),
    field_path("result"),
    field_path("data"),
    field_path("data", "text"),
    field_path("data", "transcription"),
    field_path("choices", 0, "message", "content"),
    segment_array,
)


def extract_transcript(payload: Any) -> str:
    """
    Pulls transcript text out of a provider response.

    Strategies are tried in order and the first non-empty match wins:
    a plain string body, the ``text``/``transcription``/``result`` fields,
    their ``data`` nested equivalents, a chat-completion shaped
    ``choices[0].message.content``, then ``segments[].text`` joined by newlines.

    Returns:
        The transcript, or an empty string when nothing matched.
    """
    for strategy in EXTRACTION_STRATEGIES:
        text = strategy(payload)
        if text:
            return text
    return ""


def normalize_transcript(text: str, simplify: bool) -> str:
    if not text or not simplify:
        return text
    return text.translate(TRADITIONAL_TO_SIMPLIFIED)
