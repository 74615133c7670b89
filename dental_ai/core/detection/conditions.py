"""
Condition Detection

Rule-based heuristics over color and enhanced-image signals, optionally
unioned with an injected ML detector. The edge and texture rules are
brightness/contrast thresholds standing in for structural vision; they are
kept exactly as tuned.
"""
from typing import FrozenSet, Optional, Set

import numpy as np

from dental_ai.core.models import ColorAnalysis, Condition, DetectionSignals, ToothColor
from dental_ai.utils import get_logger
from .ml import MLDetector

logger = get_logger(__name__)

# Healthiness thresholds
PLAQUE_HEALTHINESS = 0.4
TARTAR_HEALTHINESS = 0.2
CAVITY_HEALTHINESS = 0.3

# Edge image thresholds
IRREGULARITY_EDGE_CONTRAST = 0.3
MISALIGNMENT_EDGE_BRIGHTNESS = 0.1

# Texture (inflammation) thresholds
INFLAMMATION_MIN_CONTRAST = 0.4
INFLAMMATION_MAX_BLUR = 0.3

_DARK_STAIN_COLORS = {ToothColor.BROWN, ToothColor.DARK_YELLOW}
_LIGHT_STAIN_COLORS = {ToothColor.YELLOW, ToothColor.LIGHT_YELLOW}


class ConditionDetector:
    """
    Produces the set of detected conditions. Never returns an empty set.

    ML failures are logged and swallowed; the result then contains only
    rule-based findings.
    """

    def __init__(self, ml_detector: Optional[MLDetector] = None):
        self.ml_detector = ml_detector

    def detect(
        self,
        signals: DetectionSignals,
        color: ColorAnalysis,
        image: Optional[np.ndarray] = None,
    ) -> FrozenSet[Condition]:
        conditions = self.detect_rule_based(signals, color)

        if self.ml_detector is not None and image is not None:
            conditions |= self._detect_ml(image)

        return frozenset(conditions)

    def detect_rule_based(self, signals: DetectionSignals, color: ColorAnalysis) -> Set[Condition]:
        conditions: Set[Condition] = set()

        conditions |= self._color_rules(color)
        conditions |= self._healthiness_rules(color.healthiness)
        conditions |= self._edge_rules(signals)
        conditions |= self._texture_rules(signals)

        if not conditions:
            conditions.add(Condition.HEALTHY)

        logger.debug(f"Rule-based conditions: {sorted(c.value for c in conditions)}")
        return conditions

    @staticmethod
    def _color_rules(color: ColorAnalysis) -> Set[Condition]:
        found: Set[Condition] = set()
        if color.dominant_color == ToothColor.BLACK:
            found.add(Condition.DEAD_TOOTH)
        elif color.dominant_color in _DARK_STAIN_COLORS:
            found.add(Condition.DISCOLORATION)
            if color.healthiness < CAVITY_HEALTHINESS:
                found.add(Condition.CAVITY)
        elif color.dominant_color in _LIGHT_STAIN_COLORS:
            found.add(Condition.DISCOLORATION)
        return found

    @staticmethod
    def _healthiness_rules(healthiness: float) -> Set[Condition]:
        found: Set[Condition] = set()
        if healthiness < PLAQUE_HEALTHINESS:
            found.add(Condition.PLAQUE)
        if healthiness < TARTAR_HEALTHINESS:
            found.add(Condition.TARTAR)
        return found

    @staticmethod
    def _edge_rules(signals: DetectionSignals) -> Set[Condition]:
        found: Set[Condition] = set()
        if not signals.has_edges:
            return found
        if signals.edge_contrast > IRREGULARITY_EDGE_CONTRAST:
            found.add(Condition.CHIPPED)
        if signals.edge_brightness < MISALIGNMENT_EDGE_BRIGHTNESS:
            found.add(Condition.MISALIGNED)
        return found

    @staticmethod
    def _texture_rules(signals: DetectionSignals) -> Set[Condition]:
        if signals.contrast > INFLAMMATION_MIN_CONTRAST and signals.blur < INFLAMMATION_MAX_BLUR:
            return {Condition.GINGIVITIS}
        return set()

    def _detect_ml(self, image: np.ndarray) -> Set[Condition]:
        try:
            detection = self.ml_detector.classify(image)
        except Exception as e:
            logger.warning(f"ML detection raised, falling back to rules: {e}")
            return set()

        if not detection.ok:
            logger.warning(f"ML detection failed, falling back to rules: {detection.error}")
            return set()

        return set(detection.conditions)
