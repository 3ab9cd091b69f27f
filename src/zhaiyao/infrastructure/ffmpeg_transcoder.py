"""ffmpeg implementation of the MediaTranscoder interface."""

import os
import subprocess
import tempfile

from zhaiyao.exceptions import TranscodeError
from zhaiyao.logging import setup_logging

from .interfaces.transcoder import MediaTranscoder

logger = setup_logging()

SEGMENT_PREFIX = "segment-"


class FfmpegTranscoder(MediaTranscoder):
    """Runs ffmpeg as a child process, feeding media through stdin."""

    def __init__(self, ffmpeg_path: str = "ffmpeg"):
        self._ffmpeg_path = ffmpeg_path

    def transcode(self, data: bytes, sample_rate: str, bitrate: str) -> bytes:
        args = [
            "-i", "pipe:0",
            "-ac", "1",
            "-ar", sample_rate,
            "-b:a", bitrate,
            "-f", "mp3",
            "pipe:1",
        ]
        result = self._run("transcode", args, data)
        logger.info(
            "Media transcoded",
            extra={"input_size": len(data), "output_size": len(result.stdout)},
        )
        return result.stdout

    def segment(self, data: bytes, segment_seconds: int) -> list[bytes]:
        with tempfile.TemporaryDirectory(prefix="transcription-segments-") as temp_dir:
            output_template = os.path.join(temp_dir, f"{SEGMENT_PREFIX}%03d.mp3")
            args = [
                "-i", "pipe:0",
                "-f", "segment",
                "-segment_time", str(segment_seconds),
                "-c", "copy",
                "-reset_timestamps", "1",
                output_template,
            ]
            self._run("segment", args, data)

            names = sorted(
                name for name in os.listdir(temp_dir) if name.startswith(SEGMENT_PREFIX)
            )
            pieces = []
            for name in names:
                with open(os.path.join(temp_dir, name), "rb") as f:
                    pieces.append(f.read())

        logger.info(
            "Audio segmented",
            extra={"segments": len(pieces), "segment_seconds": segment_seconds},
        )
        return pieces

    def _run(
        self, operation: str, args: list[str], data: bytes
    ) -> subprocess.CompletedProcess:
        """Runs ffmpeg with ``data`` on stdin, draining stdout and stderr."""
        command = [self._ffmpeg_path, "-hide_banner", "-loglevel", "error", *args]
        try:
            result = subprocess.run(command, input=data, capture_output=True)
        except OSError as e:
            logger.exception(
                "ffmpeg could not be started",
                extra={"operation": operation, "ffmpeg_path": self._ffmpeg_path},
            )
            raise TranscodeError(operation, cause=e) from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace")
            logger.error(
                "ffmpeg exited with an error",
                extra={
                    "operation": operation,
                    "returncode": result.returncode,
                    "stderr": stderr[-2000:],
                },
            )
            raise TranscodeError(operation, result.returncode, stderr)

        return result
