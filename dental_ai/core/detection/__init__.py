"""
Detection Module

Rule-based condition detection with an optional ML detector.
"""
from .conditions import ConditionDetector
from .ml import MLDetection, MLDetector, LabelMappingDetector, LABEL_MAP

__all__ = [
    "ConditionDetector",
    "MLDetection",
    "MLDetector",
    "LabelMappingDetector",
    "LABEL_MAP",
]
