"""Abstract interface for media transcoding."""

from abc import ABC, abstractmethod


class MediaTranscoder(ABC):
    """Abstract base class for audio/video transcoders."""

    @abstractmethod
    def transcode(self, data: bytes, sample_rate: str, bitrate: str) -> bytes:
        """
        Re-encodes media to mono MP3.

        Args:
            data: Source media bytes (audio or video).
            sample_rate: Target sample rate in Hz, e.g. ``"16000"``.
            bitrate: Target bitrate, e.g. ``"48k"``.

        Returns:
            The encoded MP3 bytes.

        Raises:
            TranscodeError: If the transcoder is missing or fails.
        """

    @abstractmethod
    def segment(self, data: bytes, segment_seconds: int) -> list[bytes]:
        """
        Splits audio into fixed-duration pieces without re-encoding.

        Args:
            data: Source audio bytes.
            segment_seconds: Length of each piece in seconds.

        Returns:
            The pieces in playback order.

        Raises:
            TranscodeError: If the transcoder is missing or fails.
        """
