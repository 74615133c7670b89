"""
Analysis Data Model

Value types shared by every pipeline stage. Derived fields (severity, health
score, quality score) are computed from their inputs on access rather than
stored, so they cannot drift from the data they describe.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple
import uuid


class SeverityLevel(str, Enum):
    """
    Aggregate or per-condition severity tier.

    Ordered NONE < LOW < MEDIUM < HIGH; comparisons use the tier rank, not
    the string value.
    """
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def penalty(self) -> int:
        """Points deducted from the health score per condition of this tier."""
        return _SEVERITY_PENALTY[self]

    @property
    def color(self) -> str:
        return _SEVERITY_COLOR[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    def __lt__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, SeverityLevel):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {
    SeverityLevel.NONE: 0,
    SeverityLevel.LOW: 1,
    SeverityLevel.MEDIUM: 2,
    SeverityLevel.HIGH: 3,
}

_SEVERITY_PENALTY = {
    SeverityLevel.NONE: 0,
    SeverityLevel.LOW: 10,
    SeverityLevel.MEDIUM: 25,
    SeverityLevel.HIGH: 50,
}

_SEVERITY_COLOR = {
    SeverityLevel.NONE: "green",
    SeverityLevel.LOW: "yellow",
    SeverityLevel.MEDIUM: "orange",
    SeverityLevel.HIGH: "red",
}


class Condition(str, Enum):
    """Dental findings the detector can report. Declaration order is the canonical iteration order."""
    CAVITY = "cavity"
    GINGIVITIS = "gingivitis"
    DISCOLORATION = "discoloration"
    PLAQUE = "plaque"
    TARTAR = "tartar"
    DEAD_TOOTH = "dead_tooth"
    ROOT_CANAL = "root_canal"
    CHIPPED = "chipped"
    MISALIGNED = "misaligned"
    HEALTHY = "healthy"

    @property
    def severity(self) -> SeverityLevel:
        return _CONDITION_INFO[self][0]

    @property
    def display_name(self) -> str:
        return _CONDITION_INFO[self][1]

    @property
    def description(self) -> str:
        return _CONDITION_INFO[self][2]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.value,
            "display_name": self.display_name,
            "description": self.description,
            "severity": self.severity.value,
            "penalty": self.severity.penalty,
        }


# condition -> (severity tier, display name, description)
_CONDITION_INFO: Dict[Condition, Tuple[SeverityLevel, str, str]] = {
    Condition.CAVITY: (SeverityLevel.HIGH, "Cavity", "Tooth decay caused by bacteria"),
    Condition.GINGIVITIS: (SeverityLevel.MEDIUM, "Gingivitis", "Inflammation of the gums"),
    Condition.DISCOLORATION: (SeverityLevel.LOW, "Discoloration", "Staining or yellowing of teeth"),
    Condition.PLAQUE: (SeverityLevel.LOW, "Plaque", "Bacterial film on teeth"),
    Condition.TARTAR: (SeverityLevel.MEDIUM, "Tartar", "Hardened plaque buildup"),
    Condition.DEAD_TOOTH: (SeverityLevel.HIGH, "Dead Tooth", "Non-vital tooth with no blood supply"),
    Condition.ROOT_CANAL: (SeverityLevel.HIGH, "Root Canal", "Treatment for infected tooth pulp"),
    Condition.CHIPPED: (SeverityLevel.MEDIUM, "Chipped Tooth", "Broken or damaged tooth structure"),
    Condition.MISALIGNED: (SeverityLevel.LOW, "Misaligned Teeth", "Teeth that are not properly aligned"),
    Condition.HEALTHY: (SeverityLevel.NONE, "Healthy", "Good oral health"),
}


def ordered_conditions(conditions: Iterable[Condition]) -> List[Condition]:
    """Return the given conditions in declaration order."""
    present = set(conditions)
    return [c for c in Condition if c in present]


def aggregate_severity(conditions: Iterable[Condition]) -> SeverityLevel:
    """Maximum tier across the conditions; NONE for an empty set."""
    return max((c.severity for c in conditions), default=SeverityLevel.NONE)


def health_score(conditions: Iterable[Condition]) -> int:
    """100 minus the summed per-condition penalties, floored at 0."""
    return max(0, 100 - sum(c.severity.penalty for c in set(conditions)))


class ToothColor(str, Enum):
    """Dominant tooth color classes with a fixed display healthiness."""
    WHITE = "white"
    OFF_WHITE = "off-white"
    LIGHT_YELLOW = "light-yellow"
    YELLOW = "yellow"
    DARK_YELLOW = "dark-yellow"
    BROWN = "brown"
    BLACK = "black"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return _TOOTH_COLOR_INFO[self][0]

    @property
    def baseline_healthiness(self) -> float:
        return _TOOTH_COLOR_INFO[self][1]


_TOOTH_COLOR_INFO: Dict[ToothColor, Tuple[str, float]] = {
    ToothColor.WHITE: ("White", 1.0),
    ToothColor.OFF_WHITE: ("Off-White", 0.9),
    ToothColor.LIGHT_YELLOW: ("Light Yellow", 0.7),
    ToothColor.YELLOW: ("Yellow", 0.5),
    ToothColor.DARK_YELLOW: ("Dark Yellow", 0.3),
    ToothColor.BROWN: ("Brown", 0.2),
    ToothColor.BLACK: ("Black", 0.1),
    ToothColor.UNKNOWN: ("Unknown", 0.0),
}


@dataclass(frozen=True)
class ColorAnalysis:
    """
    Dominant color class plus the healthiness computed from the sampled pixels.

    Healthiness is capped at 1 but has no lower clamp: strongly unbalanced
    channels (e.g. saturated magenta) score below 0.
    """
    dominant_color: ToothColor
    healthiness: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dominant_color": self.dominant_color.value,
            "healthiness": round(self.healthiness, 3),
        }


@dataclass(frozen=True)
class ImageSignals:
    """Scalar signals the quality gate consumes."""
    width: int
    height: int
    brightness: float
    contrast: float
    blur: float


@dataclass(frozen=True)
class DetectionSignals:
    """
    Signals of the enhanced image used by the rule-based detector.

    Edge fields are None when no edge image could be produced.
    """
    contrast: float
    blur: float
    edge_brightness: Optional[float] = None
    edge_contrast: Optional[float] = None

    @property
    def has_edges(self) -> bool:
        return self.edge_brightness is not None and self.edge_contrast is not None


@dataclass(frozen=True)
class ImageQuality:
    """Outcome of a quality gate pass."""
    poor: bool
    issues: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "issues", tuple(self.issues))

    @property
    def score(self) -> int:
        if not self.poor:
            return 100
        return max(0, 100 - 20 * len(self.issues))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "poor": self.poor,
            "issues": list(self.issues),
            "score": self.score,
        }


class Priority(str, Enum):
    """Recommendation priority; IMMEDIATE sorts first."""
    IMMEDIATE = "immediate"
    URGENT = "urgent"
    IMPORTANT = "important"
    GENERAL = "general"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


_PRIORITY_RANK = {
    Priority.IMMEDIATE: 0,
    Priority.URGENT: 1,
    Priority.IMPORTANT: 2,
    Priority.GENERAL: 3,
}


class RecommendationCategory(str, Enum):
    HOME_CARE = "home_care"
    PROFESSIONAL = "professional"
    LIFESTYLE = "lifestyle"
    PRODUCTS = "products"
    EMERGENCY = "emergency"

    @property
    def display_name(self) -> str:
        return _CATEGORY_NAMES[self]


_CATEGORY_NAMES = {
    RecommendationCategory.HOME_CARE: "Home Care",
    RecommendationCategory.PROFESSIONAL: "Professional Care",
    RecommendationCategory.LIFESTYLE: "Lifestyle Changes",
    RecommendationCategory.PRODUCTS: "Product Recommendations",
    RecommendationCategory.EMERGENCY: "Emergency Care",
}


@dataclass(frozen=True)
class Recommendation:
    """
    A single piece of advice. Equality and hashing cover every field, which
    is what deduplication relies on.
    """
    title: str
    description: str
    priority: Priority
    category: RecommendationCategory
    action_items: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "action_items", tuple(self.action_items))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "category": self.category.value,
            "action_items": list(self.action_items),
        }


@dataclass(frozen=True)
class AnalysisResult:
    """
    Final product of a successful pipeline run.

    ``severity`` and ``overall_health_score`` are recomputed from
    ``conditions`` on every access.
    """
    conditions: FrozenSet[Condition]
    confidence: float
    recommendations: Tuple[Recommendation, ...] = ()
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: str = field(default_factory=lambda: str(uuid.uuid4()), compare=False)

    def __post_init__(self):
        conditions = frozenset(self.conditions)
        if not conditions:
            raise ValueError("AnalysisResult requires at least one condition")
        object.__setattr__(self, "conditions", conditions)
        object.__setattr__(self, "confidence", min(1.0, max(0.0, float(self.confidence))))
        object.__setattr__(self, "recommendations", tuple(self.recommendations))

    @property
    def severity(self) -> SeverityLevel:
        return aggregate_severity(self.conditions)

    @property
    def overall_health_score(self) -> int:
        return health_score(self.conditions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "conditions": [c.value for c in ordered_conditions(self.conditions)],
            "severity": self.severity.value,
            "overall_health_score": self.overall_health_score,
            "confidence": round(self.confidence, 3),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "timestamp": self.timestamp.isoformat(),
        }


class HealthTrend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


@dataclass
class UserPreferences:
    """Product preferences used by the alternative-product catalog."""
    prefers_natural_products: bool = False
    prefers_fluoride: bool = True
    prefers_xylitol: bool = False
    prefers_hydroxyapatite: bool = False


@dataclass
class UserContext:
    """
    Caller-supplied personalization input.

    ``recent_history`` is ordered oldest first. When ``health_trend`` is
    omitted it is derived from the history.
    """
    age: Optional[int] = None
    recent_history: List[AnalysisResult] = field(default_factory=list)
    health_trend: Optional[HealthTrend] = None
    preferences: UserPreferences = field(default_factory=UserPreferences)
