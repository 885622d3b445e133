"""Accuracy session tracking.

One session follows one document from parsing through human review:

    started -> original_recorded -> (corrected_recorded) -> finalized | discarded

finalize() matches the original parse (candidate) against the corrected
parts (truth) and produces exactly one AccuracySample. discard() produces
nothing, so abandoned corrections never reach the statistics.

Usage:
    session = AccuracySession.start(SessionMetadata(provider="claude"))
    session.record_original(parsed_parts)
    session.record_corrected(reviewed_parts)
    sample = session.finalize()
"""

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..comparison.matcher import PartMatcher
from ..config import Config, default_config
from ..errors import EmptySessionError, SessionStateError, UnknownSessionError
from ..evaluation.metrics import compute_accuracy
from ..models.accuracy import AccuracySample
from ..models.part import CutPart
from .publisher import SamplePublisher

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionState(str, Enum):
    STARTED = "started"
    ORIGINAL_RECORDED = "original_recorded"
    CORRECTED_RECORDED = "corrected_recorded"
    FINALIZED = "finalized"
    DISCARDED = "discarded"


_CLOSED = (SessionState.FINALIZED, SessionState.DISCARDED)


@dataclass
class SessionMetadata:
    """
    What is known about the document being parsed.

    Attributes:
        provider: Parser that produced the original parts (e.g. "claude")
        source_type: "pdf", "image", "text", ...
        source_file_name: Uploaded file name, if any
        client_name: Customer the document came from
        few_shot_examples_used: Prior corrected documents given to the provider
        patterns_applied: Learned parse patterns applied
        client_template_used: Whether a client-specific template matched
        document_difficulty: Declared difficulty ("easy", "medium", "hard", ...)
        parse_job_id: Host-side job reference
        organization_id: Host-side tenant reference
    """
    provider: str = "unknown"
    source_type: Optional[str] = None
    source_file_name: Optional[str] = None
    client_name: Optional[str] = None
    few_shot_examples_used: int = 0
    patterns_applied: int = 0
    client_template_used: bool = False
    document_difficulty: Optional[str] = None
    parse_job_id: Optional[str] = None
    organization_id: Optional[str] = None


class AccuracySession:
    """
    Single-owner session object. Not thread-safe: one document flow owns it.
    """

    def __init__(
        self,
        metadata: Optional[SessionMetadata] = None,
        session_id: Optional[str] = None,
        settings: Optional[Config] = None,
        clock: Optional[Clock] = None,
    ):
        self.session_id = session_id or f"acc_{uuid.uuid4().hex[:12]}"
        self.metadata = metadata or SessionMetadata()
        self.settings = settings or default_config
        self._clock = clock or _utcnow
        self.started_at = self._clock()
        self.state = SessionState.STARTED
        self._original: Dict[str, CutPart] = {}
        self._corrected: Dict[str, CutPart] = {}

    @classmethod
    def start(
        cls,
        metadata: Optional[SessionMetadata] = None,
        session_id: Optional[str] = None,
        settings: Optional[Config] = None,
        clock: Optional[Clock] = None,
    ) -> "AccuracySession":
        session = cls(metadata, session_id=session_id, settings=settings, clock=clock)
        logger.debug("Started accuracy session %s (provider=%s)", session.session_id, session.metadata.provider)
        return session

    @property
    def is_closed(self) -> bool:
        return self.state in _CLOSED

    def _require_open(self, action: str) -> None:
        if self.is_closed:
            raise SessionStateError(
                f"Cannot {action}: session {self.session_id} is already {self.state.value}"
            )

    @staticmethod
    def _snapshot(parts: List[CutPart]) -> Dict[str, CutPart]:
        # Keyed by part_id; a repeated id keeps the last copy
        return {p.part_id: p.copy() for p in parts}

    def record_original(self, parts: List[CutPart]) -> None:
        """Store copies of the parser's output. Allowed once."""
        self._require_open("record original parts")
        if self.state != SessionState.STARTED:
            raise SessionStateError(f"Original parts already recorded for session {self.session_id}")
        self._original = self._snapshot(parts)
        self.state = SessionState.ORIGINAL_RECORDED
        logger.debug("Recorded %d original parts for session %s", len(self._original), self.session_id)

    def record_corrected(self, parts: List[CutPart]) -> None:
        """Store copies of the human-reviewed parts. Allowed once, after originals."""
        self._require_open("record corrected parts")
        if self.state == SessionState.STARTED:
            raise SessionStateError(f"Record original parts before corrections (session {self.session_id})")
        if self.state == SessionState.CORRECTED_RECORDED:
            raise SessionStateError(f"Corrected parts already recorded for session {self.session_id}")
        self._corrected = self._snapshot(parts)
        self.state = SessionState.CORRECTED_RECORDED
        logger.debug("Recorded %d corrected parts for session %s", len(self._corrected), self.session_id)

    def update_corrected_part(self, part_id: str, part: CutPart) -> None:
        """
        Replace (or add) one corrected part.

        The first update seeds the corrections from the original parts, so
        untouched parts count as correct.
        """
        self._require_open("update a corrected part")
        if self.state == SessionState.STARTED:
            raise SessionStateError(f"Record original parts before corrections (session {self.session_id})")
        if self.state == SessionState.ORIGINAL_RECORDED:
            self._corrected = {pid: p.copy() for pid, p in self._original.items()}
            self.state = SessionState.CORRECTED_RECORDED
        self._corrected[part_id] = part.copy()

    def finalize(self) -> Optional[AccuracySample]:
        """
        Close the session and measure the original parse against corrections.

        Without corrections the originals are their own truth (nothing was
        changed, so the parse was fully accurate).

        Returns:
            One AccuracySample, or None if there were no parts at all

        Raises:
            SessionStateError: if the session is already finalized or discarded
            EmptySessionError: if original parts were never recorded
        """
        self._require_open("finalize")
        if self.state == SessionState.STARTED:
            raise EmptySessionError(f"No original parts recorded for session {self.session_id}")

        self.state = SessionState.FINALIZED

        original = list(self._original.values())
        truth = list(self._corrected.values()) or original

        if not original and not truth:
            logger.debug("Session %s finalized with no parts; no sample", self.session_id)
            return None

        result = PartMatcher(settings=self.settings).match(original, truth)
        metrics = compute_accuracy(result, len(truth))
        meta = self.metadata

        sample = AccuracySample(
            total_parts=metrics.total_parts,
            correct_parts=metrics.correct_parts,
            accuracy=metrics.accuracy,
            provider=meta.provider,
            created_at=self._clock(),
            dimension_accuracy=metrics.dimension_accuracy,
            material_accuracy=metrics.material_accuracy,
            edging_accuracy=metrics.edging_accuracy,
            grooving_accuracy=metrics.grooving_accuracy,
            quantity_accuracy=metrics.quantity_accuracy,
            label_accuracy=metrics.label_accuracy,
            few_shot_examples_used=meta.few_shot_examples_used,
            patterns_applied=meta.patterns_applied,
            client_template_used=meta.client_template_used,
            document_difficulty=meta.document_difficulty,
            session_id=self.session_id,
            source_type=meta.source_type,
            client_name=meta.client_name,
        )
        logger.debug(
            "Finalized session %s: %d/%d correct (%.1f%%)",
            self.session_id, sample.correct_parts, sample.total_parts, sample.accuracy * 100,
        )
        return sample

    def discard(self) -> None:
        """Close the session without producing a sample."""
        self._require_open("discard")
        self.state = SessionState.DISCARDED
        logger.debug("Discarded session %s", self.session_id)

    def info(self) -> Dict[str, Any]:
        """Debug snapshot of the session."""
        return {
            "sessionId": self.session_id,
            "state": self.state.value,
            "originalCount": len(self._original),
            "correctedCount": len(self._corrected),
            "provider": self.metadata.provider,
            "startedAt": self.started_at.isoformat(),
        }


class AccuracySessionRegistry:
    """
    Sessions in flight for one orchestrating component, keyed by id.

    The map is guarded by a lock; each session is still owned by a single
    document flow. Finalized samples go to the optional publisher.
    """

    def __init__(
        self,
        publisher: Optional[SamplePublisher] = None,
        settings: Optional[Config] = None,
        clock: Optional[Clock] = None,
    ):
        self.publisher = publisher
        self.settings = settings or default_config
        self._clock = clock
        self._sessions: Dict[str, AccuracySession] = {}
        self._lock = threading.Lock()

    def start(self, metadata: Optional[SessionMetadata] = None, session_id: Optional[str] = None) -> AccuracySession:
        session = AccuracySession.start(metadata, session_id=session_id, settings=self.settings, clock=self._clock)
        with self._lock:
            if session.session_id in self._sessions:
                raise SessionStateError(f"Session {session.session_id} is already active")
            self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> AccuracySession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise UnknownSessionError(f"No active session {session_id}")
        return session

    def _remove(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def finalize(self, session_id: str) -> Optional[AccuracySample]:
        """Finalize and forget a session; publish its sample if there is one."""
        session = self.get(session_id)
        try:
            sample = session.finalize()
        finally:
            self._remove(session_id)

        if sample is not None and self.publisher is not None:
            self.publisher.publish(sample)
        return sample

    def discard(self, session_id: str) -> None:
        session = self.get(session_id)
        try:
            session.discard()
        finally:
            self._remove(session_id)

    def active_sessions(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
