"""Infrastructure layer exports."""

from .chat_completions import ChatCompletionsClient
from .ffmpeg_transcoder import FfmpegTranscoder
from .http_fetcher import HttpMediaFetcher
from .oss_storage import OssStorageClient
from .whisper_speech import WhisperSpeechClient

__all__ = [
    "ChatCompletionsClient",
    "FfmpegTranscoder",
    "HttpMediaFetcher",
    "OssStorageClient",
    "WhisperSpeechClient",
]
