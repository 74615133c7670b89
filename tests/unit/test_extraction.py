"""
Unit Tests for the Reference Signal Extractor

Tests for decoding, luminance statistics, color classification, enhancement
and edge extraction on synthetic arrays.
"""
import pytest
import numpy as np
import cv2

from dental_ai.core.extraction import (
    ImageSignalExtractor,
    NumpySignalExtractor,
    classify_tooth_color,
    color_healthiness,
)
from dental_ai.core.models import ToothColor


@pytest.fixture
def extractor() -> NumpySignalExtractor:
    return NumpySignalExtractor()


def solid(rgb, size=(60, 80)) -> np.ndarray:
    image = np.zeros((size[0], size[1], 3), dtype=np.uint8)
    image[...] = rgb
    return image


class TestDecode:

    def test_protocol_conformance(self, extractor):
        assert isinstance(extractor, ImageSignalExtractor)

    def test_array_passthrough(self, extractor):
        image = solid((10, 20, 30))
        assert extractor.decode(image) is image

    def test_grayscale_expanded(self, extractor):
        decoded = extractor.decode(np.full((5, 7), 100, dtype=np.uint8))
        assert decoded.shape == (5, 7, 3)

    def test_alpha_dropped(self, extractor):
        decoded = extractor.decode(np.zeros((5, 7, 4), dtype=np.uint8))
        assert decoded.shape == (5, 7, 3)

    def test_png_bytes_decoded_as_rgb(self, extractor):
        rgb = solid((200, 100, 50), size=(8, 8))
        ok, encoded = cv2.imencode(".png", cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR))
        assert ok
        decoded = extractor.decode(encoded.tobytes())
        assert decoded.shape == (8, 8, 3)
        assert tuple(decoded[0, 0]) == (200, 100, 50)

    def test_file_path(self, extractor, tmp_path):
        path = tmp_path / "teeth.png"
        cv2.imwrite(str(path), solid((0, 0, 255), size=(4, 4)))  # BGR red
        decoded = extractor.decode(path)
        assert tuple(decoded[0, 0]) == (255, 0, 0)

    @pytest.mark.parametrize("bad", [b"", b"not an image", np.zeros((0, 0, 3)), 42, "/nonexistent/file.jpg"])
    def test_undecodable(self, extractor, bad):
        assert extractor.decode(bad) is None


class TestLuminanceSignals:

    def test_brightness_uses_luma_weights(self, extractor):
        assert extractor.brightness(solid((255, 0, 0))) == pytest.approx(0.299)
        assert extractor.brightness(solid((255, 255, 255))) == pytest.approx(1.0)

    def test_contrast_zero_for_flat_image(self, extractor):
        assert extractor.contrast(solid((120, 120, 120))) == pytest.approx(0.0)

    def test_contrast_half_split(self, extractor):
        image = solid((0, 0, 0))
        image[:, :40] = 255
        assert extractor.contrast(image) == pytest.approx(0.5)

    def test_dimensions(self, extractor):
        assert extractor.dimensions(solid((0, 0, 0), size=(30, 50))) == (50, 30)

    def test_blur_of_black_image_is_zero(self, extractor):
        assert extractor.blur(solid((0, 0, 0))) == 0.0

    def test_flat_image_reads_as_blurry(self, extractor):
        assert extractor.blur(solid((180, 180, 180))) == pytest.approx(1.0)

    def test_sharp_pattern_less_blurry_than_flat(self, extractor):
        stripes = (np.arange(80) // 2) % 2 * 255
        image = np.repeat(np.tile(stripes, (60, 1))[..., np.newaxis], 3, axis=2).astype(np.uint8)
        assert extractor.blur(image) < 0.5


class TestColor:

    @pytest.mark.parametrize("rgb,expected", [
        ((230, 230, 230), ToothColor.WHITE),
        ((190, 190, 160), ToothColor.OFF_WHITE),
        ((170, 170, 130), ToothColor.LIGHT_YELLOW),
        ((150, 150, 110), ToothColor.YELLOW),
        ((130, 130, 90), ToothColor.DARK_YELLOW),
        ((40, 40, 40), ToothColor.BLACK),
        ((130, 90, 60), ToothColor.BROWN),
    ])
    def test_classification(self, rgb, expected):
        assert classify_tooth_color(*rgb) == expected

    def test_healthiness(self):
        assert color_healthiness(255, 255, 255) == pytest.approx(1.0)
        assert color_healthiness(0, 0, 0) == pytest.approx(0.5)
        assert color_healthiness(200, 150, 100) == pytest.approx((150 / 255 + 1 - 100 / 255) / 2)

    def test_healthiness_can_go_negative(self):
        assert color_healthiness(255, 0, 255) == pytest.approx((170 / 255 - 1) / 2)
        assert color_healthiness(255, 0, 255) < 0

    def test_dominant_color(self, extractor):
        analysis = extractor.dominant_color(solid((230, 230, 230)))
        assert analysis.dominant_color == ToothColor.WHITE
        assert analysis.healthiness == pytest.approx(min(1.0, (230 / 255 + 1) / 2))

    def test_empty_image_unknown(self, extractor):
        analysis = extractor.dominant_color(np.zeros((0, 0, 3), dtype=np.uint8))
        assert analysis.dominant_color == ToothColor.UNKNOWN
        assert analysis.healthiness == 0.0


class TestEnhanceAndEdges:

    def test_enhance_preserves_shape_and_dtype(self, extractor, white_teeth_image):
        enhanced = extractor.enhance(white_teeth_image)
        assert enhanced.shape == white_teeth_image.shape
        assert enhanced.dtype == np.uint8

    def test_enhance_brightens(self, extractor):
        image = solid((100, 100, 100))
        assert extractor.brightness(extractor.enhance(image)) > extractor.brightness(image)

    def test_edges_three_channels(self, extractor):
        edges = extractor.edges(solid((10, 10, 10)))
        assert edges.shape == (60, 80, 3)
        assert extractor.brightness(edges) == pytest.approx(0.0)

    def test_edges_none_for_tiny_image(self, extractor):
        assert extractor.edges(np.zeros((2, 2, 3), dtype=np.uint8)) is None

    def test_crop_to_teeth_region(self, extractor):
        crop = extractor.crop_to_teeth_region(solid((0, 0, 0), size=(100, 200)))
        assert crop.shape == (40, 160, 3)

    def test_signals_bundle(self, extractor, white_teeth_image):
        signals = extractor.signals(white_teeth_image)
        assert (signals.width, signals.height) == (800, 600)
        assert 0.0 <= signals.blur <= 1.0
        assert signals.contrast > 0.1
