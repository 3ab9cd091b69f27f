"""Handler for connectivity checks against storage and chat providers."""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from zhaiyao.config import AppConfig
from zhaiyao.domain.models import (
    ChatMessage,
    LinkStatus,
    ProviderHealth,
    TranscriptionHealth,
)
from zhaiyao.exceptions import ChatProviderUnavailableError, ChatServiceError
from zhaiyao.infrastructure.interfaces.chat import ChatClient
from zhaiyao.infrastructure.interfaces.storage import StorageClient
from zhaiyao.logging import setup_logging

logger = setup_logging()

PIPELINE_PROBE_MESSAGES = [
    ChatMessage(role="system", content="You are a lightweight probe. Reply with PONG."),
    ChatMessage(role="user", content="ping"),
]
PROVIDER_PROBE_MESSAGES = [
    ChatMessage(
        role="system", content="You are a lightweight health-check probe. Reply with OK."
    ),
    ChatMessage(role="user", content="ping"),
]


class HealthHandler:
    """Probes external dependencies without touching any user data."""

    def __init__(self, config: AppConfig, storage: StorageClient, chat_client: ChatClient):
        self._config = config
        self._storage = storage
        self._chat = chat_client

    @property
    def _timeout(self) -> float:
        return self._config.health_check_timeout_ms / 1000

    def transcription_health(self) -> TranscriptionHealth:
        """
        Reports configuration, storage and speech-provider reachability.

        With incomplete configuration nothing is probed over the network.
        Otherwise the storage and APIMart probes run concurrently, each
        bounded by the configured health-check timeout.
        """
        missing = self._config.missing_required()
        if missing:
            env = LinkStatus(
                ok=False,
                issue="config",
                reason=f"Missing environment variables: {', '.join(missing)}",
            )
            oss = LinkStatus(ok=False, issue="config", reason="OSS is not configured")
            apimart = LinkStatus(
                ok=False, issue="config", reason="APIMart is not configured"
            )
        else:
            env = LinkStatus(ok=True)
            with ThreadPoolExecutor(max_workers=2, thread_name_prefix="health") as executor:
                oss_future = executor.submit(self._storage.probe, self._timeout)
                apimart_future = executor.submit(self._probe_apimart)
                oss = oss_future.result()
                apimart = apimart_future.result()

        health = TranscriptionHealth(
            ok=env.ok and oss.ok and apimart.ok,
            env=env,
            oss=oss,
            apimart=apimart,
            timestamp=int(time.time() * 1000),
        )
        logger.info(
            "Transcription health checked",
            extra={"ok": health.ok, "oss": oss.ok, "apimart": apimart.ok},
        )
        return health

    def provider_health(self, provider: Any = None) -> ProviderHealth:
        """
        Sends a tiny completion to the selected chat provider.

        The returned model carries the HTTP status to answer with: 500 for a
        missing key, the upstream status for a non-2xx answer, 502 for an
        unreadable body and 503 when the provider cannot be reached.
        """
        selected = self._config.chat.resolve(provider)
        if not selected.api_key:
            return ProviderHealth(
                ok=False,
                provider=selected.id,
                issue="config",
                reason=f"{selected.label} API key is not configured.",
                status_code=500,
            )

        try:
            completion = self._chat.complete(
                selected,
                PROVIDER_PROBE_MESSAGES,
                temperature=0,
                max_tokens=8,
                timeout=self._timeout,
            )
        except ChatServiceError as e:
            return ProviderHealth(
                ok=False,
                provider=selected.id,
                issue="service",
                reason=str(e),
                status_code=e.status_code,
            )
        except ChatProviderUnavailableError:
            return ProviderHealth(
                ok=False,
                provider=selected.id,
                issue="network",
                reason=f"Unable to reach {selected.label}.",
                status_code=503,
            )

        if completion.payload is None:
            return ProviderHealth(
                ok=False,
                provider=selected.id,
                issue="service",
                reason=f"{selected.label} returned an unrecognized response, retry later.",
                status_code=502,
            )

        return ProviderHealth(
            ok=True,
            provider=selected.id,
            model=selected.model,
            latency=completion.latency,
            message=f"{selected.label} responded successfully.",
        )

    def _probe_apimart(self) -> LinkStatus:
        apimart = self._config.chat.providers["apimart"]
        try:
            completion = self._chat.complete(
                apimart, PIPELINE_PROBE_MESSAGES, temperature=0, timeout=self._timeout
            )
        except ChatServiceError as e:
            return LinkStatus(ok=False, issue="service", reason=str(e))
        except ChatProviderUnavailableError:
            return LinkStatus(
                ok=False,
                issue="network",
                reason="Unable to reach APIMart, check network or API key",
            )
        return LinkStatus(ok=True, latency=completion.latency)
