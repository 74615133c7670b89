"""
Image Signal Extractor Contract

The pipeline only talks to pixels through this protocol. Implementations
must be reentrant: no per-call state on the instance, so independent images
can be processed in parallel.
"""
from typing import Any, Optional, Protocol, Tuple, runtime_checkable

import numpy as np

from dental_ai.core.models import ColorAnalysis


@runtime_checkable
class ImageSignalExtractor(Protocol):
    """Pixel-level collaborator used by the analysis pipeline."""

    def decode(self, image: Any) -> Optional[np.ndarray]:
        """Return a decoded image, or None if the input is not an image."""
        ...

    def dimensions(self, image: np.ndarray) -> Tuple[int, int]:
        """Return (width, height) in pixels."""
        ...

    def brightness(self, image: np.ndarray) -> float:
        ...

    def contrast(self, image: np.ndarray) -> float:
        ...

    def blur(self, image: np.ndarray) -> float:
        ...

    def dominant_color(self, image: np.ndarray) -> ColorAnalysis:
        ...

    def enhance(self, image: np.ndarray) -> np.ndarray:
        ...

    def edges(self, image: np.ndarray) -> Optional[np.ndarray]:
        """Return an edge-filtered image, or None when one cannot be produced."""
        ...
