"""Abstract interface for downloading remote media."""

from abc import ABC, abstractmethod

from zhaiyao.domain.models import MediaFile


class MediaFetcher(ABC):
    """Abstract base class for remote media downloaders."""

    @abstractmethod
    def fetch(self, url: str, max_bytes: int) -> MediaFile:
        """
        Downloads the media behind ``url``.

        Args:
            url: Public media link supplied by the user.
            max_bytes: Size cap; larger bodies are rejected.

        Returns:
            The downloaded file named after the URL's last path segment.

        Raises:
            RemoteFetchError: If the link cannot be downloaded.
            InvalidInputError: If the body exceeds ``max_bytes``.
        """
