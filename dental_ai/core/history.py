"""
Analysis History Helpers

Trend derivation, an in-memory history store and sanity checks for stored
results. The analysis pipeline never writes history itself; hosts append
finished results to a store they own.
"""
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
import threading
from typing import Any, Dict, List, Optional, Protocol, Sequence

from dental_ai.core.models import AnalysisResult, HealthTrend
from dental_ai.utils import get_logger

logger = get_logger(__name__)

TREND_WINDOW = 3
DEFAULT_HISTORY_LIMIT = 50
STALE_AFTER = timedelta(days=30)
LOW_CONFIDENCE = 0.3
MAX_PLAUSIBLE_CONDITIONS = 10


def derive_health_trend(history: Sequence[AnalysisResult]) -> HealthTrend:
    """Trend of the health score over the last few results (oldest first)."""
    if len(history) < 2:
        return HealthTrend.STABLE

    scores = [r.overall_health_score for r in list(history)[-TREND_WINDOW:]]
    pairs = list(zip(scores, scores[1:]))

    if all(a < b for a, b in pairs):
        return HealthTrend.IMPROVING
    if all(a > b for a, b in pairs):
        return HealthTrend.DECLINING
    return HealthTrend.STABLE


class HistoryStore(Protocol):
    """Sink for completed analysis results."""

    def append(self, result: AnalysisResult) -> None:
        ...

    def recent(self, n: int) -> List[AnalysisResult]:
        ...


class InMemoryHistoryStore:
    """Bounded, thread-safe history that keeps the newest ``limit`` results."""

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT):
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")
        self.limit = limit
        self._results: deque = deque(maxlen=limit)
        self._lock = threading.Lock()

    def append(self, result: AnalysisResult) -> None:
        with self._lock:
            self._results.append(result)

    def recent(self, n: int) -> List[AnalysisResult]:
        """Up to ``n`` newest results, oldest first."""
        if n <= 0:
            return []
        with self._lock:
            return list(self._results)[-n:]

    def all(self) -> List[AnalysisResult]:
        with self._lock:
            return list(self._results)

    def clear(self) -> None:
        with self._lock:
            self._results.clear()

    def trend(self) -> HealthTrend:
        return derive_health_trend(self.recent(TREND_WINDOW))

    def __len__(self) -> int:
        with self._lock:
            return len(self._results)


class ValidationSeverity(str, Enum):
    NONE = "none"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class ResultValidation:
    """Outcome of validate_result."""
    issues: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def severity(self) -> ValidationSeverity:
        if self.issues:
            return ValidationSeverity.ERROR
        if self.warnings:
            return ValidationSeverity.WARNING
        return ValidationSeverity.NONE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "severity": self.severity.value,
            "issues": self.issues,
            "warnings": self.warnings,
            "suggestions": self.suggestions,
        }


def validate_result(result: Any, now: Optional[datetime] = None) -> ResultValidation:
    """
    Sanity-check a stored or received analysis result.

    Works on anything shaped like an AnalysisResult, since deserialized
    records do not go through the model's own invariants.
    """
    validation = ResultValidation()
    issues, warnings = validation.issues, validation.warnings

    if result.confidence < 0.0 or result.confidence > 1.0:
        issues.append("Invalid confidence value")
    elif result.confidence < LOW_CONFIDENCE:
        warnings.append("Low confidence in analysis results")

    if not result.conditions:
        issues.append("No conditions detected")
    elif len(result.conditions) > MAX_PLAUSIBLE_CONDITIONS:
        warnings.append("Unusually high number of conditions detected")

    if result.overall_health_score < 0 or result.overall_health_score > 100:
        issues.append("Invalid health score")

    if not result.recommendations:
        warnings.append("No recommendations generated")

    now = now or datetime.now(timezone.utc)
    timestamp = result.timestamp
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    age = now - timestamp
    if age < timedelta(0):
        issues.append("Invalid analysis timestamp")
    elif age > STALE_AFTER:
        warnings.append("Analysis result is older than 30 days")

    if any("confidence" in i for i in issues):
        validation.suggestions.append("Retake the photo with better lighting and focus")
    if any("conditions" in i for i in issues):
        validation.suggestions.append("Ensure the image clearly shows your teeth")
    if any("Low confidence" in w for w in warnings):
        validation.suggestions.append("Consider retaking the photo for more accurate analysis")
    if any("recommendations" in w for w in warnings):
        validation.suggestions.append("Contact a dental professional for personalized advice")

    if not validation.is_valid:
        logger.warning(f"Analysis result failed validation: {issues}")
    return validation
