"""
Image Quality Gate

Decides whether a photo is good enough to analyse. All rules are evaluated
and every triggered issue is reported; the gate itself never raises. Whether
a poor result aborts anything is the caller's decision.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from dental_ai.core.models import ImageQuality, ImageSignals
from dental_ai.utils import get_logger

logger = get_logger(__name__)


# Issue strings are part of the public result and are matched by suggestions()
ISSUE_RESOLUTION = "resolution too low"
ISSUE_TOO_DARK = "too dark"
ISSUE_TOO_BRIGHT = "too bright"
ISSUE_LOW_CONTRAST = "low contrast"
ISSUE_BLURRY = "blurry"
ISSUE_SLIGHTLY_BLURRY = "warning: slightly blurry"
ISSUE_IMAGE_TOO_SMALL = "image too small"
ISSUE_POOR_LIGHTING = "poor lighting conditions"


@dataclass(frozen=True)
class QualityThresholds:
    """Cut-offs for the full quality gate."""
    min_width: int = 500
    min_height: int = 500
    min_brightness: float = 0.2
    max_brightness: float = 0.9
    min_contrast: float = 0.1
    max_blur: float = 0.6
    warn_blur: float = 0.4


@dataclass(frozen=True)
class RealtimeThresholds:
    """Looser cut-offs for live preview feedback."""
    min_width: int = 300
    min_height: int = 300
    min_brightness: float = 0.1
    max_brightness: float = 0.95


DEFAULT_THRESHOLDS = QualityThresholds()
REALTIME_THRESHOLDS = RealtimeThresholds()


class LightingCondition(str, Enum):
    TOO_DARK = "tooDark"
    TOO_BRIGHT = "tooBright"
    LOW_CONTRAST = "lowContrast"
    HARSH_SHADOWS = "harshShadows"
    OVEREXPOSED = "overexposed"
    UNDEREXPOSED = "underexposed"
    SUBOPTIMAL = "suboptimal"

    @property
    def display_name(self) -> str:
        return _LIGHTING_INFO[self][0]

    @property
    def recommendation(self) -> str:
        return _LIGHTING_INFO[self][1]


_LIGHTING_INFO = {
    LightingCondition.TOO_DARK: ("Too Dark", "Move to a brighter area or turn on more lights"),
    LightingCondition.TOO_BRIGHT: ("Too Bright", "Move to a shaded area or reduce lighting"),
    LightingCondition.LOW_CONTRAST: ("Low Contrast", "Ensure good contrast between teeth and background"),
    LightingCondition.HARSH_SHADOWS: ("Harsh Shadows", "Use diffused lighting to reduce shadows"),
    LightingCondition.OVEREXPOSED: ("Overexposed", "Avoid direct light or flash"),
    LightingCondition.UNDEREXPOSED: ("Underexposed", "Increase lighting or move closer to light source"),
    LightingCondition.SUBOPTIMAL: ("Suboptimal", "Adjust lighting for better image quality"),
}


class LightingSeverity(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


@dataclass
class LightingAnalysis:
    """Lighting diagnosis with per-condition tips."""
    conditions: List[LightingCondition] = field(default_factory=list)
    severity: LightingSeverity = LightingSeverity.GOOD

    @property
    def has_issues(self) -> bool:
        return bool(self.conditions)

    @property
    def recommendations(self) -> List[str]:
        return [c.recommendation for c in self.conditions]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "conditions": [c.value for c in self.conditions],
            "severity": self.severity.value,
            "recommendations": self.recommendations,
        }


# (substring of issue, suggestion); the slightly-blurry warning is matched first
_SUGGESTIONS = [
    ("warning", "Consider retaking the photo for better clarity"),
    ("resolution", "Use a higher resolution camera or move closer to your teeth"),
    ("small", "Use a higher resolution camera or move closer to your teeth"),
    ("dark", "Ensure good lighting when taking the photo"),
    ("lighting", "Ensure good lighting when taking the photo"),
    ("bright", "Avoid direct light or flash that may cause overexposure"),
    ("blurry", "Hold the camera steady and ensure focus is on your teeth"),
    ("contrast", "Ensure good contrast between teeth and background"),
]


class QualityGate:
    """
    Classifies images as acceptable or not for analysis.

    ``assess`` is the full gate used before detection; ``assess_realtime`` is
    the cheaper preview check and never blocks anything.
    """

    def __init__(self, thresholds: Optional[QualityThresholds] = None):
        self.thresholds = thresholds or DEFAULT_THRESHOLDS

    def assess(self, signals: ImageSignals, thresholds: Optional[QualityThresholds] = None) -> ImageQuality:
        t = thresholds or self.thresholds
        issues: List[str] = []
        poor = False

        if signals.width < t.min_width or signals.height < t.min_height:
            issues.append(ISSUE_RESOLUTION)
            poor = True

        if signals.brightness < t.min_brightness:
            issues.append(ISSUE_TOO_DARK)
            poor = True
        elif signals.brightness > t.max_brightness:
            issues.append(ISSUE_TOO_BRIGHT)
            poor = True

        if signals.contrast < t.min_contrast:
            issues.append(ISSUE_LOW_CONTRAST)
            poor = True

        if signals.blur > t.max_blur:
            issues.append(ISSUE_BLURRY)
            poor = True
        elif signals.blur > t.warn_blur:
            # Soft issue: reported but does not fail the gate
            issues.append(ISSUE_SLIGHTLY_BLURRY)

        quality = ImageQuality(poor=poor, issues=issues)
        logger.debug(f"Quality gate: poor={poor} issues={issues} score={quality.score}")
        return quality

    def assess_realtime(self, signals: ImageSignals) -> ImageQuality:
        t = REALTIME_THRESHOLDS
        issues: List[str] = []

        if signals.width < t.min_width or signals.height < t.min_height:
            issues.append(ISSUE_IMAGE_TOO_SMALL)

        if signals.brightness < t.min_brightness or signals.brightness > t.max_brightness:
            issues.append(ISSUE_POOR_LIGHTING)

        return ImageQuality(poor=bool(issues), issues=issues)

    @staticmethod
    def suggestions(quality: ImageQuality) -> List[str]:
        """User-facing retake tips, one per issue, in issue order."""
        tips: List[str] = []
        for issue in quality.issues:
            lowered = issue.lower()
            for needle, tip in _SUGGESTIONS:
                if needle in lowered:
                    if tip not in tips:
                        tips.append(tip)
                    break
        return tips

    @staticmethod
    def assess_lighting(brightness: float, contrast: float) -> LightingAnalysis:
        """Diagnose lighting from brightness and contrast in [0, 1]."""
        conditions: List[LightingCondition] = []
        severity = LightingSeverity.GOOD

        def _flag(condition: LightingCondition, level: LightingSeverity):
            nonlocal severity
            if condition not in conditions:
                conditions.append(condition)
            if level == LightingSeverity.POOR or severity == LightingSeverity.GOOD:
                severity = level

        if brightness < 0.1:
            _flag(LightingCondition.TOO_DARK, LightingSeverity.POOR)
        elif brightness > 0.9:
            _flag(LightingCondition.TOO_BRIGHT, LightingSeverity.POOR)
        elif brightness < 0.2 or brightness > 0.8:
            _flag(LightingCondition.SUBOPTIMAL, LightingSeverity.FAIR)

        if contrast < 0.1:
            _flag(LightingCondition.LOW_CONTRAST, LightingSeverity.POOR)
        elif contrast < 0.2:
            _flag(LightingCondition.SUBOPTIMAL, LightingSeverity.FAIR)

        # Crude shadow proxy: lighting far from mid-grey
        if brightness < 0.3 or brightness > 0.7:
            _flag(LightingCondition.HARSH_SHADOWS, LightingSeverity.FAIR)

        if brightness > 0.9:
            _flag(LightingCondition.OVEREXPOSED, LightingSeverity.POOR)
        elif brightness < 0.1:
            _flag(LightingCondition.UNDEREXPOSED, LightingSeverity.POOR)

        return LightingAnalysis(conditions=conditions, severity=severity)
