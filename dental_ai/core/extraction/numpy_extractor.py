"""
Reference Image Signal Extractor

Computes the scalar signals the pipeline consumes from H x W x 3 RGB uint8
arrays. Pure signal processing:
- Brightness / contrast from Rec. 601 luminance
- Blur as edge energy relative to overall brightness
- Dominant tooth color from a sparse pixel sample
- Color-control + unsharp-mask enhancement
"""
from pathlib import Path
from typing import Any, Optional, Tuple

import cv2
import numpy as np
from scipy import ndimage

from dental_ai.core.models import ColorAnalysis, ImageSignals, ToothColor
from dental_ai.utils import get_logger

logger = get_logger(__name__)

# Rec. 601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])

# Every Nth pixel along each axis is sampled for color analysis
COLOR_SAMPLE_STRIDE = 10

# Enhancement parameters
ENHANCE_BRIGHTNESS = 0.1
ENHANCE_CONTRAST = 1.2
ENHANCE_SATURATION = 1.1
UNSHARP_RADIUS = 2.0
UNSHARP_INTENSITY = 0.5

# Central crop that usually contains the teeth: (x, y, width, height) fractions
TEETH_REGION = (0.1, 0.3, 0.8, 0.4)


def classify_tooth_color(red: float, green: float, blue: float) -> ToothColor:
    """Map an average RGB triple (0-255) to a tooth color class."""
    if red > 200 and green > 200 and blue > 200:
        return ToothColor.WHITE
    if red > 180 and green > 180 and blue > 150:
        return ToothColor.OFF_WHITE
    if red > 160 and green > 160 and blue > 120:
        return ToothColor.LIGHT_YELLOW
    if red > 140 and green > 140 and blue > 100:
        return ToothColor.YELLOW
    if red > 120 and green > 120 and blue > 80:
        return ToothColor.DARK_YELLOW
    if red < 100 and green < 100 and blue < 100:
        return ToothColor.BLACK
    return ToothColor.BROWN


def color_healthiness(red: float, green: float, blue: float) -> float:
    """Healthiness from average brightness and channel balance; capped at 1, not floored at 0."""
    mean_level = (red + green + blue) / 3.0
    balance = 1.0 - abs(red - green) / 255.0 - abs(green - blue) / 255.0
    return min(1.0, (mean_level / 255.0 + balance) / 2.0)


class NumpySignalExtractor:
    """
    ImageSignalExtractor implementation on numpy arrays.

    Stateless; one instance can be shared across threads.
    """

    def decode(self, image: Any) -> Optional[np.ndarray]:
        """
        Decode an image into an RGB uint8 array.

        Accepts an ndarray (gray, RGB or RGBA), encoded bytes (JPEG/PNG/...)
        or a filesystem path. Returns None when nothing usable comes out.
        """
        if isinstance(image, np.ndarray):
            return self._normalize_array(image)

        if isinstance(image, (bytes, bytearray, memoryview)):
            buffer = np.frombuffer(bytes(image), dtype=np.uint8)
            if buffer.size == 0:
                return None
            bgr = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
            if bgr is None:
                logger.debug("Encoded bytes could not be decoded")
                return None
            return cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)

        if isinstance(image, (str, Path)):
            bgr = cv2.imread(str(image), cv2.IMREAD_COLOR)
            if bgr is None:
                logger.debug(f"Could not read image from {image}")
                return None
            return cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)

        return None

    def dimensions(self, image: np.ndarray) -> Tuple[int, int]:
        return int(image.shape[1]), int(image.shape[0])

    def brightness(self, image: np.ndarray) -> float:
        luminance = self._luminance(image)
        if luminance.size == 0:
            return 0.0
        return float(np.mean(luminance))

    def contrast(self, image: np.ndarray) -> float:
        """Population standard deviation of the luminance."""
        luminance = self._luminance(image)
        if luminance.size == 0:
            return 0.0
        return float(np.std(luminance))

    def blur(self, image: np.ndarray) -> float:
        """
        Blur estimate in [0, 1].

        Sharp images keep a lot of edge energy relative to their brightness;
        blurry ones lose it. A black image reports 0.
        """
        edge_image = self.edges(image)
        if edge_image is None:
            return 0.0

        original = self.brightness(image)
        if original <= 0:
            return 0.0

        return max(0.0, 1.0 - self.brightness(edge_image) / original)

    def dominant_color(self, image: np.ndarray) -> ColorAnalysis:
        sample = image[::COLOR_SAMPLE_STRIDE, ::COLOR_SAMPLE_STRIDE, :3]
        if sample.size == 0:
            return ColorAnalysis(dominant_color=ToothColor.UNKNOWN, healthiness=0.0)

        red, green, blue = (float(v) for v in sample.reshape(-1, 3).mean(axis=0))
        return ColorAnalysis(
            dominant_color=classify_tooth_color(red, green, blue),
            healthiness=color_healthiness(red, green, blue),
        )

    def enhance(self, image: np.ndarray) -> np.ndarray:
        """Brightness/contrast/saturation lift followed by an unsharp mask."""
        rgb = image.astype(np.float64) / 255.0

        rgb = rgb + ENHANCE_BRIGHTNESS
        rgb = (rgb - 0.5) * ENHANCE_CONTRAST + 0.5

        gray = (rgb @ LUMA_WEIGHTS)[..., np.newaxis]
        rgb = gray + (rgb - gray) * ENHANCE_SATURATION
        rgb = np.clip(rgb, 0.0, 1.0)

        blurred = ndimage.gaussian_filter(rgb, sigma=(UNSHARP_RADIUS, UNSHARP_RADIUS, 0))
        sharpened = rgb + UNSHARP_INTENSITY * (rgb - blurred)

        return (np.clip(sharpened, 0.0, 1.0) * 255.0).round().astype(np.uint8)

    def edges(self, image: np.ndarray) -> Optional[np.ndarray]:
        """Sobel gradient magnitude of the luminance, as a 3-channel image."""
        if image.ndim < 2 or image.shape[0] < 3 or image.shape[1] < 3:
            return None

        luminance = self._luminance(image)
        gx = ndimage.sobel(luminance, axis=1)
        gy = ndimage.sobel(luminance, axis=0)
        magnitude = np.clip(np.hypot(gx, gy), 0.0, 1.0)

        edge_gray = (magnitude * 255.0).round().astype(np.uint8)
        return np.repeat(edge_gray[..., np.newaxis], 3, axis=2)

    def signals(self, image: np.ndarray) -> ImageSignals:
        """Convenience bundle of everything the quality gate needs."""
        width, height = self.dimensions(image)
        return ImageSignals(
            width=width,
            height=height,
            brightness=self.brightness(image),
            contrast=self.contrast(image),
            blur=self.blur(image),
        )

    def crop_to_teeth_region(self, image: np.ndarray) -> Optional[np.ndarray]:
        """Central crop (x 10-90 %, y 30-70 %) where teeth usually sit in a selfie."""
        height, width = image.shape[:2]
        fx, fy, fw, fh = TEETH_REGION
        x0, y0 = int(width * fx), int(height * fy)
        x1, y1 = x0 + int(width * fw), y0 + int(height * fh)

        crop = image[y0:y1, x0:x1]
        if crop.size == 0:
            return None
        return crop

    # ---- internals ----

    @staticmethod
    def _luminance(image: np.ndarray) -> np.ndarray:
        rgb = image[..., :3].astype(np.float64)
        return (rgb @ LUMA_WEIGHTS) / 255.0

    @staticmethod
    def _normalize_array(image: np.ndarray) -> Optional[np.ndarray]:
        if image.size == 0:
            return None
        if image.ndim == 2:
            image = np.stack([image] * 3, axis=2)
        if image.ndim != 3 or image.shape[2] < 3:
            return None
        if image.shape[2] > 3:
            image = image[..., :3]
        if image.dtype != np.uint8:
            image = np.clip(image, 0, 255).astype(np.uint8)
        return image
