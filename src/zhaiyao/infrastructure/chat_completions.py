"""OpenAI-compatible implementation of the ChatClient interface."""

import time

import httpx

from zhaiyao.config import ChatProviderConfig
from zhaiyao.domain.models import ChatMessage
from zhaiyao.exceptions import ChatProviderUnavailableError, ChatServiceError
from zhaiyao.logging import setup_logging

from .interfaces.chat import ChatClient, ChatCompletion

logger = setup_logging()


class ChatCompletionsClient(ChatClient):
    """Calls ``/v1/chat/completions`` on APIMart, DeepSeek and similar hosts."""

    def __init__(self, client: httpx.Client):
        self._client = client

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
        body = {
            "model": provider.model,
            "temperature": temperature,
            "stream": False,
            "messages": [message.model_dump() for message in messages],
        }
        if max_tokens is not None:
            body["max_tokens"] = max_tokens
        if top_p is not None:
            body["top_p"] = top_p

        request_options = {}
        if timeout is not None:
            request_options["timeout"] = timeout

        start = time.monotonic()
        try:
            response = self._client.post(
                provider.endpoint,
                headers={"Authorization": f"Bearer {provider.api_key}"},
                json=body,
                **request_options,
            )
        except httpx.HTTPError as e:
            logger.exception(
                "Chat provider request failed", extra={"provider": provider.id}
            )
            raise ChatProviderUnavailableError(provider.label, cause=e) from e
        latency = int((time.monotonic() - start) * 1000)

        raw = response.text
        try:
            payload = response.json() if raw else None
        except ValueError:
            logger.error(
                "Chat provider returned non-JSON body",
                extra={"provider": provider.id, "preview": raw[:120]},
            )
            payload = None
        if not isinstance(payload, dict):
            payload = None

        if not response.is_success:
            error = (payload or {}).get("error")
            message = error.get("message") if isinstance(error, dict) else None
            raise ChatServiceError(
                message
                or f"{provider.label} error ({response.status_code}): {raw[:120]}",
                status_code=response.status_code,
                body_readable=payload is not None,
            )

        logger.info(
            "Chat completion received",
            extra={"provider": provider.id, "model": provider.model, "latency": latency},
        )
        return ChatCompletion(payload=payload, raw=raw, latency=latency)
