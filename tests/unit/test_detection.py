"""
Unit Tests for Condition Detection

Tests for the rule-based heuristics, the ML fallback policy and the label
mapping adapter.
"""
import pytest
import logging
import numpy as np

from dental_ai.core.detection import ConditionDetector, LabelMappingDetector, MLDetection
from dental_ai.core.models import ColorAnalysis, Condition, DetectionSignals, ToothColor


NEUTRAL = DetectionSignals(contrast=0.2, blur=0.2, edge_brightness=0.5, edge_contrast=0.1)
WHITE = ColorAnalysis(ToothColor.WHITE, 0.95)
IMAGE = np.zeros((10, 10, 3), dtype=np.uint8)


class StaticDetector:
    """MLDetector returning a fixed outcome."""

    def __init__(self, detection: MLDetection):
        self.detection = detection
        self.calls = 0

    def classify(self, image):
        self.calls += 1
        return self.detection


class RaisingDetector:
    def classify(self, image):
        raise RuntimeError("model not loaded")


@pytest.fixture
def detector() -> ConditionDetector:
    return ConditionDetector()


class TestRuleBasedDetection:
    """Tests for the color, healthiness, edge and texture rules."""

    def test_clean_signals_are_healthy(self, detector):
        assert detector.detect(NEUTRAL, WHITE) == {Condition.HEALTHY}

    @pytest.mark.parametrize("healthiness", [0.05, 0.5, 0.99])
    def test_black_always_dead_tooth(self, detector, healthiness):
        conditions = detector.detect(NEUTRAL, ColorAnalysis(ToothColor.BLACK, healthiness))
        assert Condition.DEAD_TOOTH in conditions

    def test_brown_low_healthiness_adds_cavity(self, detector):
        conditions = detector.detect(NEUTRAL, ColorAnalysis(ToothColor.BROWN, 0.25))
        assert {Condition.DISCOLORATION, Condition.CAVITY, Condition.PLAQUE} <= conditions

    def test_dark_yellow_healthy_enough_no_cavity(self, detector):
        conditions = detector.detect(NEUTRAL, ColorAnalysis(ToothColor.DARK_YELLOW, 0.6))
        assert conditions == {Condition.DISCOLORATION}

    @pytest.mark.parametrize("color", [ToothColor.YELLOW, ToothColor.LIGHT_YELLOW])
    def test_yellow_discoloration(self, detector, color):
        assert detector.detect(NEUTRAL, ColorAnalysis(color, 0.7)) == {Condition.DISCOLORATION}

    @pytest.mark.parametrize("color", [ToothColor.WHITE, ToothColor.OFF_WHITE, ToothColor.UNKNOWN])
    def test_light_colors_add_nothing(self, detector, color):
        assert detector.detect(NEUTRAL, ColorAnalysis(color, 0.9)) == {Condition.HEALTHY}

    def test_low_healthiness_plaque_and_tartar(self, detector):
        conditions = detector.detect(NEUTRAL, ColorAnalysis(ToothColor.WHITE, 0.15))
        assert {Condition.PLAQUE, Condition.TARTAR} <= conditions
        assert Condition.HEALTHY not in conditions

    def test_plaque_only(self, detector):
        conditions = detector.detect(NEUTRAL, ColorAnalysis(ToothColor.WHITE, 0.35))
        assert conditions == {Condition.PLAQUE}

    def test_edge_irregularity_means_chipped(self, detector):
        signals = DetectionSignals(contrast=0.2, blur=0.2, edge_brightness=0.5, edge_contrast=0.35)
        assert detector.detect(signals, WHITE) == {Condition.CHIPPED}

    def test_dark_edges_mean_misaligned(self, detector):
        signals = DetectionSignals(contrast=0.2, blur=0.2, edge_brightness=0.05, edge_contrast=0.1)
        assert detector.detect(signals, WHITE) == {Condition.MISALIGNED}

    def test_missing_edges_skip_edge_rules(self, detector):
        signals = DetectionSignals(contrast=0.2, blur=0.2)
        assert detector.detect(signals, WHITE) == {Condition.HEALTHY}

    def test_texture_means_gingivitis(self, detector):
        signals = DetectionSignals(contrast=0.45, blur=0.1, edge_brightness=0.5, edge_contrast=0.1)
        assert detector.detect(signals, WHITE) == {Condition.GINGIVITIS}

    def test_texture_requires_sharp_image(self, detector):
        signals = DetectionSignals(contrast=0.45, blur=0.3, edge_brightness=0.5, edge_contrast=0.1)
        assert detector.detect(signals, WHITE) == {Condition.HEALTHY}


class TestMLFallback:
    """Tests for the ML union and swallow-on-failure policy."""

    def test_ml_conditions_are_unioned(self):
        ml = StaticDetector(MLDetection.success({Condition.CAVITY}))
        conditions = ConditionDetector(ml).detect(NEUTRAL, WHITE, IMAGE)
        assert conditions == {Condition.HEALTHY, Condition.CAVITY}
        assert ml.calls == 1

    def test_ml_skipped_without_image(self):
        ml = StaticDetector(MLDetection.success({Condition.CAVITY}))
        assert ConditionDetector(ml).detect(NEUTRAL, WHITE) == {Condition.HEALTHY}
        assert ml.calls == 0

    def test_failed_detection_is_swallowed(self, caplog):
        ml = StaticDetector(MLDetection.failure("No classification results"))
        with caplog.at_level(logging.WARNING):
            conditions = ConditionDetector(ml).detect(NEUTRAL, ColorAnalysis(ToothColor.BLACK, 0.5), IMAGE)
        assert conditions == {Condition.DEAD_TOOTH}
        assert "No classification results" in caplog.text

    def test_raising_detector_is_swallowed(self, caplog):
        with caplog.at_level(logging.WARNING):
            conditions = ConditionDetector(RaisingDetector()).detect(NEUTRAL, WHITE, IMAGE)
        assert conditions == {Condition.HEALTHY}
        assert "model not loaded" in caplog.text

    def test_never_empty(self):
        ml = StaticDetector(MLDetection.success(set()))
        assert ConditionDetector(ml).detect(NEUTRAL, WHITE, IMAGE) == {Condition.HEALTHY}


class TestLabelMappingDetector:
    """Tests for the classifier adapter."""

    def test_maps_synonyms(self):
        adapter = LabelMappingDetector(lambda image: [("Tooth_Decay", 0.9), ("calculus", 0.8), ("crooked", 0.7)])
        detection = adapter.classify(IMAGE)
        assert detection.ok
        assert detection.conditions == {Condition.CAVITY, Condition.TARTAR, Condition.MISALIGNED}

    def test_unknown_labels_mean_healthy(self):
        detection = LabelMappingDetector(lambda image: [("sandwich", 0.99)]).classify(IMAGE)
        assert detection.conditions == {Condition.HEALTHY}

    def test_min_confidence(self):
        adapter = LabelMappingDetector(lambda image: [("cavity", 0.2), ("plaque", 0.6)], min_confidence=0.5)
        assert adapter.classify(IMAGE).conditions == {Condition.PLAQUE}

    def test_classifier_error_becomes_failure(self):
        def broken(image):
            raise ValueError("bad tensor shape")

        detection = LabelMappingDetector(broken).classify(IMAGE)
        assert not detection.ok
        assert "bad tensor shape" in detection.error

    def test_no_results_is_failure(self):
        detection = LabelMappingDetector(lambda image: None).classify(IMAGE)
        assert detection.error == "No classification results"
