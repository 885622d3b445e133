"""Match parsed parts against ground-truth parts.

Matching strategy:
1. Walk the truth list in input order
2. For each truth part, score every unconsumed candidate
3. Take the best candidate if its score exceeds the acceptance threshold
4. Leftover truth parts are unmatched, leftover candidates are extra

Greedy, first-truth-first. Not a global assignment: document part counts
are tens, not thousands.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..config import Config, default_config
from ..models.part import CutPart
from .diff_result import FieldDifference, compute_differences, label_similarity

logger = logging.getLogger(__name__)


@dataclass
class MatchedPair:
    """
    A candidate accepted as the match for a truth part.

    Attributes:
        candidate: Parsed part
        truth: Ground-truth part
        score: Similarity score in [0, 1]
        differences: Field disagreements (empty when the parts agree)
    """
    candidate: CutPart
    truth: CutPart
    score: float
    differences: List[FieldDifference] = field(default_factory=list)

    @property
    def is_correct(self) -> bool:
        return not self.differences

    def to_dict(self) -> Dict[str, Any]:
        return {
            "candidateId": self.candidate.part_id,
            "truthId": self.truth.part_id,
            "score": round(self.score, 4),
            "differences": [d.to_dict() for d in self.differences],
        }


@dataclass
class MatchResult:
    """
    Result of matching a candidate list against a truth list.

    Attributes:
        matched: Accepted pairs, in truth order
        unmatched: Truth parts with no acceptable candidate
        extra: Candidate parts never consumed
    """
    matched: List[MatchedPair] = field(default_factory=list)
    unmatched: List[CutPart] = field(default_factory=list)
    extra: List[CutPart] = field(default_factory=list)

    @property
    def summary(self) -> Dict[str, int]:
        return {
            "matched": len(self.matched),
            "unmatched": len(self.unmatched),
            "extra": len(self.extra),
            "correct": sum(1 for p in self.matched if p.is_correct),
        }

    @property
    def truth_count(self) -> int:
        return len(self.matched) + len(self.unmatched)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "summary": self.summary,
            "matched": [p.to_dict() for p in self.matched],
            "unmatched": [p.part_id for p in self.unmatched],
            "extra": [p.part_id for p in self.extra],
        }


def _override(value: Optional[float], fallback: float) -> float:
    return fallback if value is None else value


class PartMatcher:
    """
    Greedy matcher with a weighted similarity score.

    Score = dimension term (full weight within +-2mm on both axes, partial
    weight within +-10mm) + quantity term (exact) + label term
    (weight x label similarity).

    Usage:
        matcher = PartMatcher()
        result = matcher.match(parsed_parts, truth_parts)

        for pair in result.matched:
            print(pair.truth.part_id, [d.describe() for d in pair.differences])
    """

    def __init__(
        self,
        settings: Optional[Config] = None,
        dimension_tolerance_mm: Optional[float] = None,
        partial_dimension_tolerance_mm: Optional[float] = None,
        dimension_weight: Optional[float] = None,
        partial_dimension_weight: Optional[float] = None,
        quantity_weight: Optional[float] = None,
        label_weight: Optional[float] = None,
        acceptance_threshold: Optional[float] = None,
    ):
        """
        Initialize matcher. Explicit arguments override settings.

        Args:
            settings: Base configuration (default_config when omitted)
            dimension_tolerance_mm: Full-credit tolerance on L and W
            partial_dimension_tolerance_mm: Partial-credit tolerance
            dimension_weight: Score for a full dimension match
            partial_dimension_weight: Score for a partial dimension match
            quantity_weight: Score for an exact quantity match
            label_weight: Maximum score for identical labels
            acceptance_threshold: Score a candidate must exceed to match
        """
        self.settings = settings or default_config
        s = self.settings
        self.dimension_tolerance_mm = _override(dimension_tolerance_mm, s.dimension_tolerance_mm)
        self.partial_dimension_tolerance_mm = _override(
            partial_dimension_tolerance_mm, s.partial_dimension_tolerance_mm)
        self.dimension_weight = _override(dimension_weight, s.dimension_weight)
        self.partial_dimension_weight = _override(partial_dimension_weight, s.partial_dimension_weight)
        self.quantity_weight = _override(quantity_weight, s.quantity_weight)
        self.label_weight = _override(label_weight, s.label_weight)
        self.acceptance_threshold = _override(acceptance_threshold, s.match_acceptance_threshold)

    def similarity(self, candidate: CutPart, truth: CutPart) -> float:
        """Weighted similarity between two parts."""
        score = 0.0

        dl = abs(candidate.size.L - truth.size.L)
        dw = abs(candidate.size.W - truth.size.W)
        if dl <= self.dimension_tolerance_mm and dw <= self.dimension_tolerance_mm:
            score += self.dimension_weight
        elif dl <= self.partial_dimension_tolerance_mm and dw <= self.partial_dimension_tolerance_mm:
            score += self.partial_dimension_weight

        if candidate.qty == truth.qty:
            score += self.quantity_weight

        score += self.label_weight * label_similarity(candidate.label, truth.label)
        return score

    def match(self, candidate: List[CutPart], truth: List[CutPart]) -> MatchResult:
        """
        Pair candidate parts with truth parts.

        Args:
            candidate: Parsed parts (e.g. AI output)
            truth: Ground-truth parts

        Returns:
            MatchResult with matched pairs, unmatched truth and extra candidates
        """
        result = MatchResult()
        used_candidates = set()

        for truth_part in truth:
            best_idx: Optional[int] = None
            best_score = float("-inf")

            for idx, cand in enumerate(candidate):
                if idx in used_candidates:
                    continue
                score = self.similarity(cand, truth_part)
                # Strict comparison keeps the earliest candidate on ties
                if score > best_score:
                    best_idx = idx
                    best_score = score

            if best_idx is not None and best_score > self.acceptance_threshold:
                used_candidates.add(best_idx)
                cand = candidate[best_idx]
                result.matched.append(MatchedPair(
                    candidate=cand,
                    truth=truth_part,
                    score=best_score,
                    differences=compute_differences(cand, truth_part, self.settings),
                ))
            else:
                result.unmatched.append(truth_part)

        result.extra = [c for i, c in enumerate(candidate) if i not in used_candidates]

        logger.debug(
            "Matched %d/%d truth parts (%d extra candidates)",
            len(result.matched), len(truth), len(result.extra),
        )
        return result


def match_parts(
    candidate: List[CutPart],
    truth: List[CutPart],
    settings: Optional[Config] = None,
) -> MatchResult:
    """Convenience wrapper: PartMatcher(settings).match(candidate, truth)."""
    return PartMatcher(settings=settings).match(candidate, truth)
