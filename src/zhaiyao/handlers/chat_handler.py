"""Handler for the assistant chat."""

from typing import Any

from zhaiyao.config import ChatConfig
from zhaiyao.domain.chat_content import extract_message_content
from zhaiyao.domain.models import ChatMessage
from zhaiyao.exceptions import ConfigurationError, InvalidInputError
from zhaiyao.infrastructure.interfaces.chat import ChatClient
from zhaiyao.logging import setup_logging

logger = setup_logging()

ASSISTANT_PROMPT = (
    "You are the ZhaiYao assistant that helps users troubleshoot meeting "
    "summarization and transcription workflows. Respond concisely in the same "
    "language as the user. When referencing steps, keep them short and practical."
)
CONTEXT_PROMPT = (
    "Below is the latest meeting transcript provided by the user. Use it as "
    "factual context when answering, quote the user's language, and mention "
    "when information is inferred. Transcript:\n{transcript}"
)
FALLBACK_REPLY = "抱歉，我暂时无法回答，请稍后再试。"

CONTEXT_MAX_CHARS = 10000
ALLOWED_ROLES = {"system", "user", "assistant"}


def normalize_messages(items: Any) -> list[ChatMessage]:
    """Keeps only entries with a known role and string content."""
    if not isinstance(items, list):
        return []
    return [
        ChatMessage(role=item["role"], content=item["content"])
        for item in items
        if isinstance(item, dict)
        and item.get("role") in ALLOWED_ROLES
        and isinstance(item.get("content"), str)
    ]


class ChatHandler:
    """Answers user questions with an optional transcript as context."""

    def __init__(self, chat_client: ChatClient, config: ChatConfig):
        self._chat = chat_client
        self._config = config

    def reply(
        self,
        provider: Any,
        messages: Any,
        context_transcript: Any = None,
    ) -> str:
        """
        Sends the conversation to the selected provider and returns its answer.

        Only the last 10,000 characters of the transcript are sent.

        Raises:
            ConfigurationError: If the provider has no API key.
            InvalidInputError: If no valid message remains after filtering.
            ChatServiceError: If the provider answers non-2xx.
            ChatProviderUnavailableError: If the provider cannot be reached.
        """
        selected = self._config.resolve(provider)
        if not selected.api_key:
            raise ConfigurationError(
                [], message=f"{selected.label} API key is not configured."
            )

        user_messages = normalize_messages(messages)
        if not user_messages:
            raise InvalidInputError("At least one message is required.")

        conversation = [ChatMessage(role="system", content=ASSISTANT_PROMPT)]
        context = context_transcript.strip() if isinstance(context_transcript, str) else ""
        if context:
            conversation.append(
                ChatMessage(
                    role="system",
                    content=CONTEXT_PROMPT.format(transcript=context[-CONTEXT_MAX_CHARS:]),
                )
            )
        conversation.extend(user_messages)

        completion = self._chat.complete(
            selected,
            conversation,
            temperature=0.4,
            max_tokens=400,
            top_p=0.9,
        )
        reply = extract_message_content(completion.payload).strip()

        logger.info(
            "Chat reply generated",
            extra={
                "provider": selected.id,
                "messages": len(user_messages),
                "has_context": bool(context),
                "latency": completion.latency,
            },
        )
        return reply or FALLBACK_REPLY
