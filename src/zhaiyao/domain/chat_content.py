"""Helpers for reading OpenAI-style chat-completions payloads."""

from typing import Any


def extract_message_content(payload: dict[str, Any] | None) -> str:
    """
    Returns the text of the first choice's message.

    ``content`` may be a plain string or a list of parts carrying ``text``
    or ``content``; parts are concatenated in order.
    """
    if not payload:
        return ""
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    first = choices[0] if isinstance(choices[0], dict) else {}
    message = first.get("message")
    if not isinstance(message, dict):
        return ""

    content = message.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = [
            part.get("text") or part.get("content") or ""
            for part in content
            if isinstance(part, dict)
        ]
        return "".join(str(part) for part in parts).strip()
    return ""
