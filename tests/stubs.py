"""In-memory stand-ins for the infrastructure interfaces."""

import random
import time

from zhaiyao.config import (
    AppConfig,
    ChatConfig,
    ChatProviderConfig,
    MediaConfig,
    OssConfig,
    SpeechConfig,
)
from zhaiyao.domain.media import build_object_key, object_key_from_url
from zhaiyao.domain.models import LinkStatus, MediaFile, StoredObject
from zhaiyao.exceptions import (
    ChatProviderUnavailableError,
    RemoteFetchError,
    TranscodeError,
    TranscriptionError,
)
from zhaiyao.infrastructure.interfaces import (
    ChatClient,
    ChatCompletion,
    MediaFetcher,
    MediaTranscoder,
    SpeechClient,
    StorageClient,
)

PUBLIC_BASE = "https://meetings.oss-cn-hangzhou.aliyuncs.com"


def make_config(
    api_key: str = "test-key",
    media: MediaConfig | None = None,
    deepseek_key: str = "",
    **oss_overrides,
) -> AppConfig:
    oss = {
        "region": "oss-cn-hangzhou",
        "bucket": "meetings",
        "access_key_id": "AKID",
        "access_key_secret": "secret",
    }
    oss.update(oss_overrides)
    return AppConfig(
        oss=OssConfig(**oss),
        speech=SpeechConfig(api_key=api_key),
        media=media or MediaConfig(),
        chat=ChatConfig(
            providers={
                "apimart": ChatProviderConfig(
                    id="apimart",
                    label="APIMart · Gemini",
                    endpoint="https://api.apimart.ai/v1/chat/completions",
                    api_key=api_key,
                    model="gemini-3-pro-preview",
                ),
                "deepseek": ChatProviderConfig(
                    id="deepseek",
                    label="DeepSeek · Chat",
                    endpoint="https://api.deepseek.com/v1/chat/completions",
                    api_key=deepseek_key,
                    model="deepseek-chat",
                ),
            }
        ),
    )


class StubStorage(StorageClient):
    def __init__(self, probe_status: LinkStatus | None = None):
        self.uploads: list[MediaFile] = []
        self.links: list[str] = []
        self.probes = 0
        self._probe_status = probe_status or LinkStatus(ok=True, latency=12)

    def upload(self, media: MediaFile) -> StoredObject:
        self.uploads.append(media)
        key = build_object_key(media.filename)
        return StoredObject(key=key, url=f"{PUBLIC_BASE}/{key}")

    def link(self, url: str) -> StoredObject:
        self.links.append(url)
        return StoredObject(key=object_key_from_url(url), url=url)

    def probe(self, timeout: float) -> LinkStatus:
        self.probes += 1
        return self._probe_status


class StubFetcher(MediaFetcher):
    def __init__(self, files: dict[str, MediaFile] | None = None):
        self._files = files or {}
        self.calls: list[tuple[str, int]] = []

    def fetch(self, url: str, max_bytes: int) -> MediaFile:
        self.calls.append((url, max_bytes))
        if url not in self._files:
            raise RemoteFetchError(url, "404 Not Found")
        return self._files[url]


class StubTranscoder(MediaTranscoder):
    def __init__(self, pieces: int = 0, fail: bool = False):
        self._pieces = pieces
        self._fail = fail
        self.transcode_calls = 0
        self.segment_calls = 0

    def transcode(self, data: bytes, sample_rate: str, bitrate: str) -> bytes:
        self.transcode_calls += 1
        if self._fail:
            raise TranscodeError("transcode", 1, "Invalid data found when processing input")
        return b"ID3" + data[: len(data) // 4]

    def segment(self, data: bytes, segment_seconds: int) -> list[bytes]:
        self.segment_calls += 1
        if self._fail:
            raise TranscodeError("segment", 1, "Invalid data found when processing input")
        return [f"piece-{index}".encode() for index in range(self._pieces)]


class StubSpeech(SpeechClient):
    """Answers ``{"text": ...}`` built from the segment name."""

    def __init__(self, fail_status: int | None = None, jitter: float = 0.0):
        self._fail_status = fail_status
        self._jitter = jitter
        self.calls: list[str] = []

    def transcribe(self, segment):
        self.calls.append(segment.name)
        if self._jitter:
            time.sleep(random.uniform(0, self._jitter))
        if self._fail_status is not None:
            raise TranscriptionError(
                "Internal Server Error", status_code=self._fail_status
            )
        return {"text": f"text of {segment.name}"}


class StubChat(ChatClient):
    def __init__(
        self,
        payload: dict | None = None,
        error: Exception | None = None,
        latency: int = 42,
    ):
        self._payload = payload
        self._error = error
        self._latency = latency
        self.calls: list[dict] = []

    def complete(
        self,
        provider,
        messages,
        *,
        temperature,
        max_tokens=None,
        top_p=None,
        timeout=None,
    ) -> ChatCompletion:
        self.calls.append(
            {
                "provider": provider.id,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
                "top_p": top_p,
                "timeout": timeout,
            }
        )
        if self._error is not None:
            raise self._error
        return ChatCompletion(payload=self._payload, raw="", latency=self._latency)


def unreachable_chat(label: str = "APIMart · Gemini") -> StubChat:
    return StubChat(error=ChatProviderUnavailableError(label))


def chat_reply(content) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}
