"""Dispatches audio segments to the speech provider and joins the results."""

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from zhaiyao.exceptions import TranscriptionError
from zhaiyao.infrastructure.interfaces.speech import SpeechClient
from zhaiyao.logging import setup_logging

from .models import TranscriptionResult, TranscriptionSegment
from .transcript_parser import extract_transcript, normalize_transcript

logger = setup_logging()

SEGMENT_SEPARATOR = "\n\n"


class _OrdinalCursor:
    """Hands out each ordinal below ``total`` exactly once across threads."""

    def __init__(self, total: int):
        self._total = total
        self._next = 0
        self._lock = threading.Lock()
        self._stopped = False

    def claim(self) -> int | None:
        with self._lock:
            if self._stopped or self._next >= self._total:
                return None
            ordinal = self._next
            self._next += 1
            return ordinal

    def stop(self) -> None:
        with self._lock:
            self._stopped = True


class TranscriptionDispatcher:
    """Transcribes ordered segments with a bounded pool of worker threads."""

    def __init__(
        self,
        speech_client: SpeechClient,
        vendor: str,
        concurrency: int = 4,
        simplify: bool = False,
    ):
        self._speech = speech_client
        self._vendor = vendor
        self._concurrency = max(1, concurrency)
        self._simplify = simplify

    def transcribe(self, segments: list[TranscriptionSegment]) -> TranscriptionResult:
        """
        Transcribes every segment and concatenates the text in ordinal order.

        A single segment is sent directly. Several segments are spread over
        ``min(concurrency, len(segments))`` workers that claim ordinals from
        a shared cursor and write into a slot per ordinal, so completion
        order never changes the output.

        Args:
            segments: Segments with contiguous ordinals starting at 0.

        Returns:
            TranscriptionResult with the joined transcript and raw responses
            (a list in ordinal order when there were several segments).

        Raises:
            TranscriptionError: If there are no segments or any segment fails.
                The first failure stops the remaining claims and no partial
                transcript is returned.
        """
        if not segments:
            raise TranscriptionError("No audio segments available for transcription")

        ordered = sorted(segments, key=lambda segment: segment.ordinal)
        if len(ordered) == 1:
            text, raw = self._transcribe_segment(ordered[0])
            return TranscriptionResult(
                transcript=normalize_transcript(text, self._simplify),
                vendor=self._vendor,
                raw=raw,
            )

        slots = self._run_pool(ordered)
        transcript = SEGMENT_SEPARATOR.join(text for text, _ in slots if text)
        return TranscriptionResult(
            transcript=normalize_transcript(transcript, self._simplify),
            vendor=self._vendor,
            raw=[raw for _, raw in slots],
        )

    def _run_pool(
        self, segments: list[TranscriptionSegment]
    ) -> list[tuple[str, Any]]:
        total = len(segments)
        workers = min(self._concurrency, total)
        slots: list[tuple[str, Any] | None] = [None] * total
        cursor = _OrdinalCursor(total)
        errors: list[Exception] = []
        errors_lock = threading.Lock()

        logger.info(
            "Processing segments", extra={"segments": total, "concurrency": workers}
        )

        def work(worker_index: int) -> None:
            while True:
                ordinal = cursor.claim()
                if ordinal is None:
                    return
                logger.info(
                    "Segment started",
                    extra={"index": ordinal + 1, "total": total, "worker": worker_index},
                )
                try:
                    slots[ordinal] = self._transcribe_segment(segments[ordinal])
                except Exception as e:
                    cursor.stop()
                    with errors_lock:
                        errors.append(e)
                    return
                logger.info(
                    "Segment finished",
                    extra={"index": ordinal + 1, "total": total, "worker": worker_index},
                )

        with ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="transcription"
        ) as executor:
            for worker_index in range(1, workers + 1):
                executor.submit(work, worker_index)

        if errors:
            raise errors[0]
        return [slot for slot in slots if slot is not None]

    def _transcribe_segment(self, segment: TranscriptionSegment) -> tuple[str, Any]:
        raw = self._speech.transcribe(segment)
        text = extract_transcript(raw)
        if not text:
            raise TranscriptionError("Speech provider returned no transcript text")
        return text, raw
