"""
Validation Module

Quality gate that decides whether an image is fit for analysis.
"""
from .quality_gate import (
    QualityGate,
    QualityThresholds,
    RealtimeThresholds,
    DEFAULT_THRESHOLDS,
    REALTIME_THRESHOLDS,
    LightingAnalysis,
    LightingCondition,
    LightingSeverity,
)

__all__ = [
    "QualityGate",
    "QualityThresholds",
    "RealtimeThresholds",
    "DEFAULT_THRESHOLDS",
    "REALTIME_THRESHOLDS",
    "LightingAnalysis",
    "LightingCondition",
    "LightingSeverity",
]
