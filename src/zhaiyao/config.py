"""Application configuration loaded from environment variables."""

import os

from pydantic import BaseModel, computed_field

MEBIBYTE = 1024 * 1024


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() == "true"


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    return int(value) if value else default


class OssConfig(BaseModel, frozen=True):
    """Aliyun OSS bucket and credentials."""

    region: str
    bucket: str
    access_key_id: str
    access_key_secret: str
    public_base_url: str = ""
    disable_public_acl: bool = False
    object_acl: str = "public-read"

    @computed_field
    @property
    def endpoint(self) -> str:
        """Returns the virtual-hosted bucket endpoint."""
        return f"https://{self.bucket}.{self.region}.aliyuncs.com"

    @computed_field
    @property
    def public_base(self) -> str:
        """Returns the base used to build public object URLs."""
        return self.public_base_url.rstrip("/") or self.endpoint

    @property
    def sends_acl_header(self) -> bool:
        return not self.disable_public_acl and not self.public_base_url


class SpeechConfig(BaseModel, frozen=True):
    """Whisper-compatible speech-to-text endpoint configuration."""

    api_key: str
    endpoint: str = "https://api.apimart.ai/v1/audio/transcriptions"
    model: str = "openai/whisper-1"
    language: str = ""
    prompt: str = ""
    vendor: str = "apimart-whisper"


class MediaConfig(BaseModel, frozen=True):
    """ffmpeg location and transcoding/segmentation thresholds."""

    ffmpeg_path: str = "ffmpeg"
    max_file_size: int = 50 * MEBIBYTE
    optimization_enabled: bool = True
    optimization_threshold: int = 15 * MEBIBYTE
    target_bitrate: str = "48k"
    target_sample_rate: str = "16000"
    segment_enabled: bool = False
    segment_min_size: int = 18 * MEBIBYTE
    segment_duration: int = 600
    segment_concurrency: int = 4


class ChatProviderConfig(BaseModel, frozen=True):
    """A single OpenAI-compatible chat-completions provider."""

    id: str
    label: str
    endpoint: str
    api_key: str = ""
    model: str


class ChatConfig(BaseModel, frozen=True):
    """Known chat providers and the default selection."""

    providers: dict[str, ChatProviderConfig]
    default_provider: str = "apimart"

    def resolve(self, provider: object = None) -> ChatProviderConfig:
        """Returns the requested provider, falling back to the default one."""
        if isinstance(provider, str) and provider.lower() in self.providers:
            return self.providers[provider.lower()]
        if self.default_provider in self.providers:
            return self.providers[self.default_provider]
        return next(iter(self.providers.values()))


class DatabaseConfig(BaseModel, frozen=True):
    """Upload history database configuration."""

    url: str = ""
    history_disabled: bool = False

    @computed_field
    @property
    def history_enabled(self) -> bool:
        """History is recorded only when a database is configured."""
        return bool(self.url) and not self.history_disabled

    @property
    def sqlalchemy_url(self) -> str:
        """Returns the URL with the psycopg driver selected for PostgreSQL."""
        for prefix in ("postgres://", "postgresql://"):
            if self.url.startswith(prefix):
                return "postgresql+psycopg://" + self.url[len(prefix) :]
        return self.url


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    oss: OssConfig
    speech: SpeechConfig
    media: MediaConfig = MediaConfig()
    chat: ChatConfig
    database: DatabaseConfig = DatabaseConfig()
    transcript_simplify: bool = False
    health_check_timeout_ms: int = 5000

    def missing_required(self) -> list[str]:
        """Returns the names of required environment variables left empty."""
        required = {
            "APIMART_API_KEY": self.speech.api_key,
            "OSS_REGION": self.oss.region,
            "OSS_BUCKET": self.oss.bucket,
            "OSS_ACCESS_KEY_ID": self.oss.access_key_id,
            "OSS_ACCESS_KEY_SECRET": self.oss.access_key_secret,
        }
        return [name for name, value in required.items() if not value]


def load_config() -> AppConfig:
    """Loads configuration from environment variables."""
    apimart_key = os.getenv("APIMART_API_KEY", "")
    return AppConfig(
        oss=OssConfig(
            region=os.getenv("OSS_REGION", ""),
            bucket=os.getenv("OSS_BUCKET", ""),
            access_key_id=os.getenv("OSS_ACCESS_KEY_ID", ""),
            access_key_secret=os.getenv("OSS_ACCESS_KEY_SECRET", ""),
            public_base_url=os.getenv("OSS_PUBLIC_BASE_URL", ""),
            disable_public_acl=bool(os.getenv("OSS_DISABLE_PUBLIC_ACL")),
            object_acl=os.getenv("OSS_OBJECT_ACL") or "public-read",
        ),
        speech=SpeechConfig(
            api_key=apimart_key,
            endpoint=os.getenv("APIMART_WHISPER_ENDPOINT", "").rstrip("/")
            or "https://api.apimart.ai/v1/audio/transcriptions",
            model=os.getenv("APIMART_WHISPER_MODEL") or "openai/whisper-1",
            language=os.getenv("APIMART_WHISPER_LANGUAGE", ""),
            prompt=os.getenv("APIMART_WHISPER_PROMPT", ""),
        ),
        media=MediaConfig(
            ffmpeg_path=os.getenv("FFMPEG_PATH") or "ffmpeg",
            optimization_enabled=os.getenv("AUDIO_OPTIMIZATION_ENABLED") != "false",
            optimization_threshold=_env_int(
                "AUDIO_OPTIMIZATION_THRESHOLD", 15 * MEBIBYTE
            ),
            target_bitrate=os.getenv("AUDIO_OPTIMIZATION_TARGET_BITRATE") or "48k",
            target_sample_rate=os.getenv("AUDIO_OPTIMIZATION_TARGET_SAMPLE_RATE")
            or "16000",
            segment_enabled=_env_flag("AUDIO_SEGMENT_ENABLED"),
            segment_min_size=_env_int("AUDIO_SEGMENT_MIN_SIZE", 18 * MEBIBYTE),
            segment_duration=_env_int("AUDIO_SEGMENT_DURATION", 600),
            segment_concurrency=max(1, _env_int("AUDIO_SEGMENT_CONCURRENCY", 4)),
        ),
        chat=ChatConfig(
            providers={
                "apimart": ChatProviderConfig(
                    id="apimart",
                    label="APIMart · Gemini",
                    endpoint="https://api.apimart.ai/v1/chat/completions",
                    api_key=apimart_key,
                    model=os.getenv("APIMART_MODEL", "").strip()
                    or "gemini-3-pro-preview",
                ),
                "deepseek": ChatProviderConfig(
                    id="deepseek",
                    label="DeepSeek · Chat",
                    endpoint="https://api.deepseek.com/v1/chat/completions",
                    api_key=os.getenv("DEEPSEEK_API_KEY", ""),
                    model=os.getenv("DEEPSEEK_MODEL", "").strip() or "deepseek-chat",
                ),
            },
            default_provider=os.getenv("DEFAULT_CHAT_PROVIDER", "apimart").lower(),
        ),
        database=DatabaseConfig(
            url=os.getenv("DATABASE_URL", ""),
            history_disabled=_env_flag("DISABLE_AUDIO_UPLOAD_HISTORY"),
        ),
        transcript_simplify=_env_flag("TRANSCRIPT_SIMPLIFY"),
        health_check_timeout_ms=_env_int("HEALTH_CHECK_TIMEOUT_MS", 5000),
    )
