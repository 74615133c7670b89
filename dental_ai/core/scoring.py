"""
Severity and Confidence Scoring

Pure functions over condition sets and image quality.
"""
from typing import Iterable

from dental_ai.core.models import (
    Condition,
    ImageQuality,
    SeverityLevel,
    aggregate_severity,
    health_score,
)

BASE_CONFIDENCE = 0.8
OVER_DETECTION_THRESHOLD = 3      # more conditions than this is penalized
OVER_DETECTION_FACTOR = 0.9
HEALTHY_ONLY_FACTOR = 1.1


class SeverityAssessor:
    """Aggregate severity is the worst single tier; no weighting."""

    @staticmethod
    def assess(conditions: Iterable[Condition]) -> SeverityLevel:
        return aggregate_severity(conditions)

    @staticmethod
    def health_score(conditions: Iterable[Condition]) -> int:
        return health_score(conditions)


class ConfidenceScorer:

    @staticmethod
    def score(conditions: Iterable[Condition], quality: ImageQuality) -> float:
        """
        0.8 scaled by image quality, adjusted for over-detection and for an
        unambiguous healthy read, clamped to [0, 1].
        """
        conditions = frozenset(conditions)

        confidence = BASE_CONFIDENCE * (quality.score / 100.0)

        if len(conditions) > OVER_DETECTION_THRESHOLD:
            confidence *= OVER_DETECTION_FACTOR

        if conditions == {Condition.HEALTHY}:
            confidence *= HEALTHY_ONLY_FACTOR

        return min(1.0, max(0.0, confidence))
