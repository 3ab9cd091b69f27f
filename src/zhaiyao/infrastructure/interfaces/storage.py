"""Abstract interface for audio object storage."""

from abc import ABC, abstractmethod

from zhaiyao.domain.models import LinkStatus, MediaFile, StoredObject


class StorageClient(ABC):
    """Abstract base class for object storage backends."""

    @abstractmethod
    def upload(self, media: MediaFile) -> StoredObject:
        """
        Uploads a media file under a freshly generated key.

        Args:
            media: The file to store.

        Returns:
            The stored object's key and public URL.

        Raises:
            StorageUploadError: If the upload fails.
        """

    @abstractmethod
    def link(self, url: str) -> StoredObject:
        """
        Describes an object that already lives at ``url`` without uploading it.

        Args:
            url: Public URL of an existing object.
        """

    @abstractmethod
    def probe(self, timeout: float) -> LinkStatus:
        """
        Checks that the storage endpoint is reachable.

        Args:
            timeout: Probe timeout in seconds.
        """
