"""
Pytest Configuration and Fixtures

Shared fixtures and fakes for dental analysis pipeline tests.
"""
import pytest
import numpy as np
from pathlib import Path
from datetime import datetime, timezone
import sys

# Add package root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dental_ai.core.models import (
    AnalysisResult,
    ColorAnalysis,
    Condition,
    ToothColor,
)


class FakeExtractor:
    """
    Scriptable ImageSignalExtractor.

    Signals are fixed numbers; the edge image is recognised by identity so
    it can report its own brightness/contrast.
    """

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        brightness: float = 0.5,
        contrast: float = 0.3,
        blur: float = 0.1,
        color: ColorAnalysis = None,
        edge_brightness: float = 0.5,
        edge_contrast: float = 0.1,
        produce_edges: bool = True,
        edges_raise: bool = False,
        decode_raises: bool = False,
        enhance_fn=None,
        color_fn=None,
    ):
        self.image = np.zeros((height, width, 3), dtype=np.uint8)
        self.enhanced = np.zeros((height, width, 3), dtype=np.uint8)
        self.edge_image = np.zeros((4, 4, 3), dtype=np.uint8)
        self._brightness = brightness
        self._contrast = contrast
        self._blur = blur
        self.color = color or ColorAnalysis(ToothColor.WHITE, 0.95)
        self.edge_brightness = edge_brightness
        self.edge_contrast = edge_contrast
        self.produce_edges = produce_edges
        self.edges_raise = edges_raise
        self.decode_raises = decode_raises
        self.enhance_fn = enhance_fn
        self.color_fn = color_fn
        self.enhance_calls = 0

    def decode(self, image):
        if self.decode_raises:
            raise RuntimeError("corrupt header")
        if image is None:
            return None
        return self.image

    def dimensions(self, image):
        return image.shape[1], image.shape[0]

    def brightness(self, image):
        return self.edge_brightness if image is self.edge_image else self._brightness

    def contrast(self, image):
        return self.edge_contrast if image is self.edge_image else self._contrast

    def blur(self, image):
        return self._blur

    def dominant_color(self, image):
        if self.color_fn is not None:
            self.color_fn()
        return self.color

    def enhance(self, image):
        self.enhance_calls += 1
        if self.enhance_fn is not None:
            self.enhance_fn()
        return self.enhanced

    def edges(self, image):
        if self.edges_raise:
            raise RuntimeError("edge filter unavailable")
        return self.edge_image if self.produce_edges else None


def make_result(conditions, confidence: float = 0.8, when: datetime = None, recommendations=()) -> AnalysisResult:
    """Build an AnalysisResult with sensible defaults."""
    return AnalysisResult(
        conditions=frozenset(conditions),
        confidence=confidence,
        recommendations=tuple(recommendations),
        timestamp=when or datetime.now(timezone.utc),
    )


@pytest.fixture
def fake_extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def white_teeth_image() -> np.ndarray:
    """Bright, near-white frame with enough texture to pass the contrast check."""
    rng = np.random.default_rng(7)
    image = np.full((600, 800, 3), 255, dtype=np.uint8)
    stripes = rng.integers(0, 101, size=(600, 800), dtype=np.uint8)
    image[..., 0] -= stripes
    image[..., 1] -= stripes
    image[..., 2] -= stripes
    return image


@pytest.fixture
def small_image() -> np.ndarray:
    return np.full((200, 200, 3), 128, dtype=np.uint8)


@pytest.fixture
def healthy_result() -> AnalysisResult:
    return make_result({Condition.HEALTHY})


@pytest.fixture
def result_factory():
    """Factory for AnalysisResult instances."""
    return make_result


@pytest.fixture
def extractor_factory():
    """Factory for scripted extractors."""
    return FakeExtractor
