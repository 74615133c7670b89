"""
Extraction Module

Image signal extraction contract and the numpy/scipy/OpenCV reference implementation.
"""
from .base import ImageSignalExtractor
from .numpy_extractor import NumpySignalExtractor, classify_tooth_color, color_healthiness

__all__ = [
    "ImageSignalExtractor",
    "NumpySignalExtractor",
    "classify_tooth_color",
    "color_healthiness",
]
