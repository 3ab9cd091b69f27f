"""Abstract interface for chat-completions providers."""

from abc import ABC, abstractmethod

from pydantic import BaseModel

from zhaiyao.config import ChatProviderConfig
from zhaiyao.domain.models import ChatMessage


class ChatCompletion(BaseModel, frozen=True):
    """A successful (2xx) chat-completions response."""

    payload: dict | None
    raw: str
    latency: int


class ChatClient(ABC):
    """Abstract base class for OpenAI-compatible chat backends."""

    @abstractmethod
    def complete(
        self,
        provider: ChatProviderConfig,
        messages: list[ChatMessage],
        *,
        temperature: float,
        max_tokens: int | None = None,
        top_p: float | None = None,
        timeout: float | None = None,
    ) -> ChatCompletion:
        """
        Requests a non-streaming chat completion.

        Args:
            provider: Endpoint, key and model to use.
            messages: Conversation to send.
            temperature: Sampling temperature.
            max_tokens: Optional completion length cap.
            top_p: Optional nucleus sampling value.
            timeout: Optional request timeout in seconds.

        Returns:
            The response; ``payload`` is None when the body was not JSON.

        Raises:
            ChatServiceError: If the provider answers with a non-2xx status.
            ChatProviderUnavailableError: If the provider cannot be reached.
        """
