"""Fire-and-forget persistence of accuracy samples.

Storing a sample must never block or fail the parse/save flow that produced
it. SamplePublisher hands each sample to a sink on a background thread and
logs (but never re-raises) sink failures.

Usage:
    store = InMemorySampleStore()
    with SamplePublisher(store) as publisher:
        publisher.publish(sample)

    report = aggregate(store.window(100))
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional

from ..config import default_config
from ..models.accuracy import AccuracySample

logger = logging.getLogger(__name__)


# Anything that durably stores one sample (database insert, HTTP POST, ...)
SampleSink = Callable[[AccuracySample], None]


class SamplePublisher:
    """Publish samples to a sink on a small thread pool."""

    def __init__(self, sink: SampleSink, max_workers: Optional[int] = None):
        self.sink = sink
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or default_config.publisher_max_workers,
            thread_name_prefix="accuracy-publisher",
        )
        self._lock = threading.Lock()
        self.published = 0
        self.failed = 0

    def _deliver(self, sample: AccuracySample) -> bool:
        try:
            self.sink(sample)
        except Exception:
            logger.exception("Failed to persist accuracy sample for session %s", sample.session_id)
            with self._lock:
                self.failed += 1
            return False
        with self._lock:
            self.published += 1
        return True

    def publish(self, sample: AccuracySample) -> "Future[bool]":
        """
        Queue a sample for persistence and return immediately.

        The returned future resolves to True on success and False when the
        sink raised. It never carries the sink's exception.
        """
        return self._executor.submit(self._deliver, sample)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting samples; optionally wait for queued ones."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "SamplePublisher":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown(wait=True)


class InMemorySampleStore:
    """Thread-safe list of samples, usable as a SampleSink."""

    def __init__(self):
        self._samples: List[AccuracySample] = []
        self._lock = threading.Lock()

    def __call__(self, sample: AccuracySample) -> None:
        with self._lock:
            self._samples.append(sample)

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)

    def all(self) -> List[AccuracySample]:
        with self._lock:
            return list(self._samples)

    def window(self, limit: int) -> List[AccuracySample]:
        """The most recent `limit` samples, in insertion order."""
        if limit <= 0:
            return []
        with self._lock:
            return list(self._samples[-limit:])
