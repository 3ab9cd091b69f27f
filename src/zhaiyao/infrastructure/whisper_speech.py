"""Whisper-compatible REST implementation of the SpeechClient interface."""

from typing import Any

import httpx

from zhaiyao.config import SpeechConfig
from zhaiyao.domain.models import TranscriptionSegment
from zhaiyao.exceptions import TranscriptionError
from zhaiyao.logging import setup_logging

from .interfaces.speech import SpeechClient

logger = setup_logging()


def _error_message(data: Any, response: httpx.Response) -> str:
    if isinstance(data, dict):
        for field in ("message", "error", "detail"):
            value = data.get(field)
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]
            if value:
                return value if isinstance(value, str) else str(value)
    return response.reason_phrase or "Speech transcription request failed"


class WhisperSpeechClient(SpeechClient):
    """Posts audio to an OpenAI-style ``/audio/transcriptions`` endpoint."""

    def __init__(self, client: httpx.Client, config: SpeechConfig):
        self._client = client
        self._config = config

    def transcribe(self, segment: TranscriptionSegment) -> Any:
        form = {"model": self._config.model, "response_format": "json"}
        if self._config.language:
            form["language"] = self._config.language
        if self._config.prompt:
            form["prompt"] = self._config.prompt

        try:
            response = self._client.post(
                self._config.endpoint,
                headers={"Authorization": f"Bearer {self._config.api_key}"},
                data=form,
                files={
                    "file": (
                        segment.name or "audio-file",
                        segment.data,
                        segment.content_type,
                    )
                },
            )
        except httpx.HTTPError as e:
            logger.exception(
                "Speech request failed", extra={"segment": segment.ordinal}
            )
            raise TranscriptionError(f"Speech provider unreachable: {e}", cause=e) from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success or data is None:
            logger.error(
                "Speech provider returned an error",
                extra={
                    "segment": segment.ordinal,
                    "status_code": response.status_code,
                    "body": response.text[:500],
                },
            )
            raise TranscriptionError(
                _error_message(data, response), status_code=response.status_code
            )

        return data
