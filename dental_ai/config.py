"""
Pipeline Configuration

Stage budgets, logging and upload limits, read from the environment (and a
local ``.env`` file when present).
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple
import os

from dotenv import load_dotenv

load_dotenv()


DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw not in (None, "") else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw not in (None, "") else default


def log_settings() -> Tuple[str, Optional[str]]:
    """Log level and optional log file, read without validating stage budgets."""
    return os.getenv("DENTAL_AI_LOG_LEVEL", "INFO"), os.getenv("DENTAL_AI_LOG_FILE") or None


@dataclass
class PipelineConfig:
    """Configuration for the analysis pipeline and its HTTP host."""
    enhance_timeout_s: float = field(default_factory=lambda: _env_float("DENTAL_AI_ENHANCE_TIMEOUT", 10.0))
    color_timeout_s: float = field(default_factory=lambda: _env_float("DENTAL_AI_COLOR_TIMEOUT", 5.0))
    detection_timeout_s: float = field(default_factory=lambda: _env_float("DENTAL_AI_DETECTION_TIMEOUT", 15.0))

    log_level: str = field(default_factory=lambda: log_settings()[0])
    log_file: Optional[str] = field(default_factory=lambda: log_settings()[1])

    max_upload_bytes: int = field(default_factory=lambda: _env_int("DENTAL_AI_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES))

    def __post_init__(self):
        for name in ("enhance_timeout_s", "color_timeout_s", "detection_timeout_s"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.max_upload_bytes <= 0:
            raise ValueError(f"max_upload_bytes must be positive, got {self.max_upload_bytes}")
