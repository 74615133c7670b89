"""
Recommendation Engine

Turns detected conditions, severity, color and optional user context into a
deduplicated, priority-ordered list of recommendations.

Sources are appended in a fixed order (per-condition, severity, color, then
personalization) and the final sort is stable, so equal-priority items keep
that order.
"""
from collections import Counter
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence

from dental_ai.core.history import derive_health_trend
from dental_ai.core.models import (
    AnalysisResult,
    ColorAnalysis,
    Condition,
    HealthTrend,
    Recommendation,
    SeverityLevel,
    UserContext,
    UserPreferences,
    ordered_conditions,
)
from dental_ai.utils import get_logger
from .catalog import (
    AGE_RECOMMENDATIONS,
    ALTERNATIVE_PRODUCT_RECOMMENDATIONS,
    COLOR_RECOMMENDATION,
    COMMON_LIFESTYLE_RECOMMENDATIONS,
    COMPREHENSIVE_CAVITY_PREVENTION,
    CONDITION_LIFESTYLE_RECOMMENDATIONS,
    CONDITION_RECOMMENDATIONS,
    CONTINUE_CARE_RECOMMENDATION,
    GENERAL_HEALTH_RECOMMENDATIONS,
    NATURAL_CAVITY_PREVENTION,
    POOR_COLOR_HEALTHINESS,
    PRODUCT_COMPARISONS,
    PRODUCT_RECOMMENDATIONS,
    SEASONAL_RECOMMENDATIONS,
    SEVERITY_RECOMMENDATIONS,
    TREND_RECOMMENDATIONS,
    ProductComparison,
    Season,
    recurring_condition_recommendation,
)

logger = get_logger(__name__)

# Window of recent results inspected for recurring conditions
RECURRENCE_WINDOW = 3
RECURRENCE_MIN_COUNT = 2


def dedupe_and_sort(recommendations: Iterable[Recommendation]) -> List[Recommendation]:
    """Drop value-equal duplicates (first wins) and stably sort by priority rank."""
    unique = list(dict.fromkeys(recommendations))
    return sorted(unique, key=lambda r: r.priority.rank)


class RecommendationEngine:
    """
    Builds recommendation lists from fixed catalogs.

    Args:
        clock: Returns the current time; only the month is used, for the
            seasonal recommendation. Defaults to ``datetime.now``.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or datetime.now

    def generate(
        self,
        conditions: Iterable[Condition],
        severity: SeverityLevel,
        color: ColorAnalysis,
        context: Optional[UserContext] = None,
    ) -> List[Recommendation]:
        """
        Condition, severity and color recommendations, deduplicated and sorted
        by priority.

        Seasonal and general-health advice is part of personalization, so
        without a ``context`` none is added and the list can be empty.
        """
        recommendations: List[Recommendation] = []

        for condition in ordered_conditions(conditions):
            recommendations.extend(CONDITION_RECOMMENDATIONS.get(condition, ()))

        recommendations.extend(SEVERITY_RECOMMENDATIONS.get(severity, ()))

        if color.healthiness < POOR_COLOR_HEALTHINESS:
            recommendations.append(COLOR_RECOMMENDATION)

        if context is not None:
            recommendations.extend(self.personalized(context))

        result = dedupe_and_sort(recommendations)
        logger.debug(f"Generated {len(result)} recommendations ({len(recommendations)} before dedup)")
        return result

    # ---- personalization ----

    def personalized(self, context: UserContext) -> List[Recommendation]:
        """Age, history, trend, seasonal and general-health recommendations, in that order."""
        recommendations: List[Recommendation] = []
        recommendations.extend(self.age_based(context.age))
        recommendations.extend(self.history_based(context.recent_history))

        trend = context.health_trend or derive_health_trend(context.recent_history)
        recommendations.append(TREND_RECOMMENDATIONS[trend])

        recommendations.append(self.seasonal())
        recommendations.extend(GENERAL_HEALTH_RECOMMENDATIONS)
        return recommendations

    @staticmethod
    def age_based(age: Optional[int]) -> List[Recommendation]:
        if age is None or age < 0:
            return []
        for low, high, recommendation in AGE_RECOMMENDATIONS:
            if age >= low and (high is None or age <= high):
                return [recommendation]
        return []

    @staticmethod
    def history_based(history: Sequence[AnalysisResult]) -> List[Recommendation]:
        """
        Recurring conditions in the trailing window, plus positive
        reinforcement when the latest score beat the one before it. Both can
        fire at once; dedup/sort downstream handles the mix.
        """
        recommendations: List[Recommendation] = []

        recent = list(history)[-RECURRENCE_WINDOW:]
        counts = Counter(c for result in recent for c in result.conditions)
        for condition in Condition:
            if counts[condition] >= RECURRENCE_MIN_COUNT:
                recommendations.append(recurring_condition_recommendation(condition))

        if len(history) >= 2 and history[-1].overall_health_score > history[-2].overall_health_score:
            recommendations.append(CONTINUE_CARE_RECOMMENDATION)

        return recommendations

    @staticmethod
    def trend_based(trend: HealthTrend) -> Recommendation:
        return TREND_RECOMMENDATIONS[trend]

    def seasonal(self) -> Recommendation:
        return SEASONAL_RECOMMENDATIONS[Season.from_month(self.clock().month)]

    # ---- catalogs ----

    @staticmethod
    def product_recommendations(conditions: Iterable[Condition]) -> List[Recommendation]:
        return dedupe_and_sort(
            PRODUCT_RECOMMENDATIONS[c] for c in ordered_conditions(conditions) if c in PRODUCT_RECOMMENDATIONS
        )

    @staticmethod
    def lifestyle_recommendations(conditions: Iterable[Condition]) -> List[Recommendation]:
        recommendations = list(COMMON_LIFESTYLE_RECOMMENDATIONS)
        for condition in ordered_conditions(conditions):
            if condition in CONDITION_LIFESTYLE_RECOMMENDATIONS:
                recommendations.append(CONDITION_LIFESTYLE_RECOMMENDATIONS[condition])
        return dedupe_and_sort(recommendations)

    @staticmethod
    def alternative_product_recommendations(
        conditions: Iterable[Condition],
        preferences: Optional[UserPreferences] = None,
    ) -> List[Recommendation]:
        prefers_natural = preferences.prefers_natural_products if preferences else False

        recommendations: List[Recommendation] = []
        for condition in ordered_conditions(conditions):
            if condition == Condition.CAVITY:
                recommendations.append(
                    NATURAL_CAVITY_PREVENTION if prefers_natural else COMPREHENSIVE_CAVITY_PREVENTION
                )
            elif condition in ALTERNATIVE_PRODUCT_RECOMMENDATIONS:
                recommendations.append(ALTERNATIVE_PRODUCT_RECOMMENDATIONS[condition])
        return dedupe_and_sort(recommendations)

    @staticmethod
    def product_comparison() -> List[ProductComparison]:
        return list(PRODUCT_COMPARISONS)
