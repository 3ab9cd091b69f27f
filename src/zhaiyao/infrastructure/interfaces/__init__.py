"""Infrastructure interface exports."""

from .chat import ChatClient, ChatCompletion
from .fetcher import MediaFetcher
from .speech import SpeechClient
from .storage import StorageClient
from .transcoder import MediaTranscoder

__all__ = [
    "ChatClient",
    "ChatCompletion",
    "MediaFetcher",
    "MediaTranscoder",
    "SpeechClient",
    "StorageClient",
]
