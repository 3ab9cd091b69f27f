"""Handler for meeting summaries."""

from zhaiyao.config import ChatProviderConfig
from zhaiyao.domain.chat_content import extract_message_content
from zhaiyao.domain.local_summary import build_local_summary, fallback_warning
from zhaiyao.domain.models import ChatMessage, SummaryResult
from zhaiyao.exceptions import (
    ChatProviderUnavailableError,
    ChatServiceError,
    ConfigurationError,
    InvalidInputError,
)
from zhaiyao.infrastructure.interfaces.chat import ChatClient
from zhaiyao.logging import setup_logging

logger = setup_logging()

SUMMARY_TEMPERATURE = 0.4
LOCAL_FALLBACK_SOURCE = "local-fallback"


class SummaryHandler:
    """Summarizes transcripts with the AI provider, degrading to a local summary."""

    def __init__(
        self,
        chat_client: ChatClient,
        provider: ChatProviderConfig,
        default_prompt: str,
    ):
        self._chat = chat_client
        self._provider = provider
        self._default_prompt = default_prompt

    def summarize(self, transcript: str, prompt: str | None = None) -> SummaryResult:
        """
        Summarizes a transcript.

        When the provider cannot be reached or answers with a body that is
        not JSON, a deterministic local summary is returned instead, tagged
        with a warning and ``source="local-fallback"``.

        Args:
            transcript: Meeting transcript text.
            prompt: Optional system prompt replacing the bundled one.

        Raises:
            InvalidInputError: If the transcript is blank.
            ConfigurationError: If the provider has no API key.
            ChatServiceError: If the provider answers non-2xx with a JSON body
                (with its status) or returns no content (502).
        """
        text = transcript.strip()
        if not text:
            raise InvalidInputError("Transcript cannot be empty.")
        if not self._provider.api_key:
            raise ConfigurationError(
                ["APIMART_API_KEY"], message="APIMART_API_KEY is not configured."
            )

        system_prompt = (prompt or "").strip() or self._default_prompt
        messages = [
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(role="user", content=text),
        ]

        try:
            completion = self._chat.complete(
                self._provider, messages, temperature=SUMMARY_TEMPERATURE
            )
        except ChatProviderUnavailableError:
            logger.exception("Summary provider unreachable, using local summary")
            return self._local_summary(text)
        except ChatServiceError as e:
            if e.body_readable:
                raise
            logger.error(
                "Summary provider failed without a JSON body, using local summary",
                extra={"provider": self._provider.id, "status_code": e.status_code},
            )
            return self._local_summary(text)

        if completion.payload is None:
            logger.error(
                "Summary provider returned an unreadable body, using local summary",
                extra={"provider": self._provider.id},
            )
            return self._local_summary(text)

        summary = extract_message_content(completion.payload)
        if not summary:
            raise ChatServiceError("No content returned from the AI model.", status_code=502)

        logger.info(
            "Summary generated",
            extra={
                "provider": self._provider.id,
                "latency": completion.latency,
                "length": len(summary),
            },
        )
        return SummaryResult(summary=summary)

    def _local_summary(self, transcript: str) -> SummaryResult:
        return SummaryResult(
            summary=build_local_summary(transcript),
            warning=fallback_warning(transcript),
            source=LOCAL_FALLBACK_SOURCE,
        )
