"""Abstract interface for speech-to-text providers."""

from abc import ABC, abstractmethod
from typing import Any

from zhaiyao.domain.models import TranscriptionSegment


class SpeechClient(ABC):
    """Abstract base class for transcription backends."""

    @abstractmethod
    def transcribe(self, segment: TranscriptionSegment) -> Any:
        """
        Sends one audio segment for transcription.

        Args:
            segment: The audio to transcribe.

        Returns:
            The decoded provider response.

        Raises:
            TranscriptionError: If the provider rejects the request.
        """
