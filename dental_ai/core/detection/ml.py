"""
Pluggable ML Detection

The ML path reports its outcome as an explicit ``MLDetection`` value instead
of raising, so the rule-based detector can inspect it and fall back.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, Optional, Protocol, Tuple, runtime_checkable

import numpy as np

from dental_ai.core.models import Condition
from dental_ai.utils import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MLDetection:
    """Either a set of conditions or an error message, never both."""
    conditions: FrozenSet[Condition] = field(default_factory=frozenset)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, conditions: Iterable[Condition]) -> "MLDetection":
        return cls(conditions=frozenset(conditions))

    @classmethod
    def failure(cls, error: str) -> "MLDetection":
        return cls(error=error)


@runtime_checkable
class MLDetector(Protocol):
    """Optional model-backed condition classifier."""

    def classify(self, image: np.ndarray) -> MLDetection:
        ...


# Classifier label -> condition
LABEL_MAP: Dict[str, Condition] = {
    "cavity": Condition.CAVITY,
    "tooth_decay": Condition.CAVITY,
    "gingivitis": Condition.GINGIVITIS,
    "gum_disease": Condition.GINGIVITIS,
    "discoloration": Condition.DISCOLORATION,
    "staining": Condition.DISCOLORATION,
    "plaque": Condition.PLAQUE,
    "tartar": Condition.TARTAR,
    "calculus": Condition.TARTAR,
    "dead_tooth": Condition.DEAD_TOOTH,
    "non_vital": Condition.DEAD_TOOTH,
    "chipped": Condition.CHIPPED,
    "fractured": Condition.CHIPPED,
    "misaligned": Condition.MISALIGNED,
    "crooked": Condition.MISALIGNED,
    "healthy": Condition.HEALTHY,
    "normal": Condition.HEALTHY,
}

Classifier = Callable[[np.ndarray], Optional[Iterable[Tuple[str, float]]]]


class LabelMappingDetector:
    """
    Adapts a raw image classifier to the MLDetector protocol.

    The classifier returns ``(label, confidence)`` pairs. Unknown labels and
    predictions below ``min_confidence`` are ignored; if nothing maps, the
    image is reported as healthy.
    """

    def __init__(self, classifier: Classifier, min_confidence: float = 0.0):
        self.classifier = classifier
        self.min_confidence = min_confidence

    def classify(self, image: np.ndarray) -> MLDetection:
        try:
            observations = self.classifier(image)
        except Exception as e:
            return MLDetection.failure(f"Classification failed: {e}")

        if observations is None:
            return MLDetection.failure("No classification results")

        conditions = set()
        for label, confidence in observations:
            if confidence < self.min_confidence:
                logger.debug(f"Skipping {label} = {confidence:.2f} < {self.min_confidence}")
                continue
            condition = LABEL_MAP.get(str(label).strip().lower())
            if condition is not None:
                conditions.add(condition)

        return MLDetection.success(conditions or {Condition.HEALTHY})
