"""
Unit Tests for the Recommendation Engine

Tests for table lookups, dedup/sort, personalization and the product and
lifestyle catalogs.
"""
import pytest
from datetime import datetime

from dental_ai.core.models import (
    ColorAnalysis,
    Condition,
    HealthTrend,
    Priority,
    RecommendationCategory,
    SeverityLevel,
    ToothColor,
    UserContext,
    UserPreferences,
)
from dental_ai.core.recommendations import RecommendationEngine, Season, dedupe_and_sort
from dental_ai.core.recommendations.catalog import GENERAL_HEALTH_RECOMMENDATIONS

WHITE = ColorAnalysis(ToothColor.WHITE, 0.95)
STAINED = ColorAnalysis(ToothColor.BROWN, 0.3)


@pytest.fixture
def engine() -> RecommendationEngine:
    return RecommendationEngine(clock=lambda: datetime(2024, 1, 15))


def titles(recommendations):
    return [r.title for r in recommendations]


def assert_sorted(recommendations):
    ranks = [r.priority.rank for r in recommendations]
    assert ranks == sorted(ranks)


class TestGenerate:
    """Tests for the base (non-personalized) sources."""

    def test_cavity(self, engine):
        result = engine.generate({Condition.CAVITY}, SeverityLevel.HIGH, WHITE)
        assert titles(result) == [
            "Schedule Dental Appointment",
            "Immediate Professional Care",
            "Improve Oral Hygiene",
        ]
        first = result[0]
        assert first.priority == Priority.IMMEDIATE
        assert first.category == RecommendationCategory.PROFESSIONAL
        assert first.action_items == (
            "Call your dentist within 24 hours",
            "Avoid sugary foods",
            "Use fluoride toothpaste",
        )

    def test_healthy_white(self, engine):
        result = engine.generate({Condition.HEALTHY}, SeverityLevel.NONE, WHITE)
        assert titles(result) == ["Maintain Good Oral Health"]

    def test_poor_color_adds_hygiene(self, engine):
        result = engine.generate({Condition.HEALTHY}, SeverityLevel.NONE, STAINED)
        hygiene = [r for r in result if r.title == "Improve Oral Hygiene"]
        assert len(hygiene) == 1
        assert hygiene[0].priority == Priority.IMPORTANT
        assert hygiene[0].category == RecommendationCategory.HOME_CARE

    def test_two_improve_oral_hygiene_entries_are_distinct(self, engine):
        result = engine.generate({Condition.CAVITY}, SeverityLevel.HIGH, STAINED)
        assert titles(result).count("Improve Oral Hygiene") == 2

    def test_severity_none_contributes_nothing(self, engine):
        assert engine.generate(set(), SeverityLevel.NONE, WHITE) == []

    def test_severity_low(self, engine):
        result = engine.generate(set(), SeverityLevel.LOW, WHITE)
        assert titles(result) == ["Preventive Care"]

    def test_equal_priority_keeps_source_order(self, engine):
        result = engine.generate(
            {Condition.MISALIGNED, Condition.ROOT_CANAL, Condition.GINGIVITIS},
            SeverityLevel.HIGH,
            WHITE,
        )
        important = [r.title for r in result if r.priority == Priority.IMPORTANT]
        assert important == ["Professional Cleaning", "Follow-up Care", "Orthodontic Consultation"]

    def test_all_conditions_sorted_and_unique(self, engine):
        result = engine.generate(set(Condition), SeverityLevel.HIGH, STAINED)
        assert_sorted(result)
        assert len(result) == len(set(result))

    def test_deterministic(self, engine):
        args = ({Condition.PLAQUE, Condition.GINGIVITIS}, SeverityLevel.MEDIUM, STAINED)
        assert engine.generate(*args) == engine.generate(*args)


class TestDedupeAndSort:

    def test_idempotent(self, engine):
        result = engine.generate(set(Condition), SeverityLevel.HIGH, STAINED)
        assert dedupe_and_sort(result) == result

    def test_duplicates_collapse(self, engine):
        result = engine.generate({Condition.PLAQUE}, SeverityLevel.LOW, WHITE)
        assert dedupe_and_sort(result + result) == result


class TestPersonalization:
    """Tests for context-driven recommendations."""

    @pytest.mark.parametrize("age,title", [
        (8, "Child Dental Care"),
        (12, "Child Dental Care"),
        (16, "Teen Dental Health"),
        (30, "Adult Preventive Care"),
        (45, "Midlife Dental Care"),
        (72, "Senior Dental Health"),
    ])
    def test_age_brackets(self, age, title):
        assert titles(RecommendationEngine.age_based(age)) == [title]

    def test_unknown_or_negative_age(self):
        assert RecommendationEngine.age_based(None) == []
        assert RecommendationEngine.age_based(-3) == []

    def test_context_adds_general_health(self, engine):
        result = engine.generate(set(), SeverityLevel.NONE, WHITE, UserContext())
        for rec in GENERAL_HEALTH_RECOMMENDATIONS:
            assert rec in result

    def test_no_context_no_personalization(self, engine):
        result = engine.generate({Condition.HEALTHY}, SeverityLevel.NONE, WHITE)
        assert "Overall Health Connection" not in titles(result)
        assert "Winter Oral Care" not in titles(result)

    def test_no_context_can_be_empty(self, engine):
        assert engine.generate(set(), SeverityLevel.NONE, WHITE) == []
        assert "Winter Oral Care" in titles(engine.generate(set(), SeverityLevel.NONE, WHITE, UserContext()))

    @pytest.mark.parametrize("month,season,title", [
        (1, Season.WINTER, "Winter Oral Care"),
        (12, Season.WINTER, "Winter Oral Care"),
        (4, Season.SPRING, "Spring Dental Checkup"),
        (7, Season.SUMMER, "Summer Oral Health"),
        (10, Season.FALL, "Fall Dental Preparation"),
    ])
    def test_seasonal(self, month, season, title):
        engine = RecommendationEngine(clock=lambda: datetime(2024, month, 1))
        assert Season.from_month(month) == season
        assert engine.seasonal().title == title

    def test_explicit_trend(self, engine):
        context = UserContext(health_trend=HealthTrend.DECLINING)
        result = engine.generate(set(), SeverityLevel.NONE, WHITE, context)
        assert "Address Declining Health" in titles(result)

    def test_trend_derived_from_history(self, engine, result_factory):
        history = [
            result_factory({Condition.CAVITY}),
            result_factory({Condition.PLAQUE}),
            result_factory({Condition.HEALTHY}),
        ]
        result = engine.generate(set(), SeverityLevel.NONE, WHITE, UserContext(recent_history=history))
        assert "Maintain Progress" in titles(result)
        assert "Continue Current Care" in titles(result)

    def test_recurring_condition(self, engine, result_factory):
        history = [
            result_factory({Condition.GINGIVITIS}),
            result_factory({Condition.HEALTHY}),
            result_factory({Condition.GINGIVITIS, Condition.PLAQUE}),
        ]
        recs = engine.history_based(history)
        recurring = [r for r in recs if r.title.startswith("Address Recurring")]
        assert titles(recurring) == ["Address Recurring Gingivitis"]
        assert recurring[0].priority == Priority.URGENT
        assert recurring[0].category == RecommendationCategory.PROFESSIONAL

    def test_recurrence_window_is_last_three(self, engine, result_factory):
        history = [
            result_factory({Condition.TARTAR}),
            result_factory({Condition.TARTAR}),
            result_factory({Condition.HEALTHY}),
            result_factory({Condition.HEALTHY}),
            result_factory({Condition.TARTAR}),
        ]
        recurring = [r.title for r in engine.history_based(history) if r.title.startswith("Address Recurring")]
        assert recurring == ["Address Recurring Healthy"]

    def test_recurring_and_continue_both_emitted(self, engine, result_factory):
        history = [
            result_factory({Condition.CAVITY}),
            result_factory({Condition.CAVITY, Condition.TARTAR}),
            result_factory({Condition.CAVITY}),
        ]
        recs = titles(engine.history_based(history))
        assert "Address Recurring Cavity" in recs
        assert "Continue Current Care" in recs

    def test_personalized_result_sorted(self, engine, result_factory):
        context = UserContext(
            age=45,
            recent_history=[result_factory({Condition.PLAQUE}), result_factory({Condition.PLAQUE})],
        )
        result = engine.generate({Condition.PLAQUE}, SeverityLevel.LOW, STAINED, context)
        assert_sorted(result)
        assert len(result) == len(set(result))
        assert "Midlife Dental Care" in titles(result)
        assert "Address Recurring Plaque" in titles(result)


class TestCatalogs:
    """Tests for product, lifestyle and comparison catalogs."""

    def test_product_recommendations(self):
        result = RecommendationEngine.product_recommendations(
            {Condition.PLAQUE, Condition.CAVITY, Condition.TARTAR}
        )
        assert titles(result) == ["Cavity Prevention Products", "Plaque Control Products"]
        assert all(r.category == RecommendationCategory.PRODUCTS for r in result)

    def test_lifestyle_recommendations(self):
        result = RecommendationEngine.lifestyle_recommendations({Condition.GINGIVITIS})
        assert titles(result) == ["Gum Health Lifestyle", "Oral Hygiene Habits", "Diet and Nutrition"]

    def test_alternative_products_follow_preferences(self):
        natural = RecommendationEngine.alternative_product_recommendations(
            {Condition.CAVITY}, UserPreferences(prefers_natural_products=True)
        )
        default = RecommendationEngine.alternative_product_recommendations({Condition.CAVITY})
        assert titles(natural) == ["Natural Cavity Prevention"]
        assert titles(default) == ["Comprehensive Cavity Prevention"]

    def test_alternative_products_other_conditions(self):
        result = RecommendationEngine.alternative_product_recommendations(
            {Condition.GINGIVITIS, Condition.DISCOLORATION, Condition.PLAQUE, Condition.HEALTHY}
        )
        assert titles(result) == ["Natural Gum Care", "Natural Whitening Options", "Natural Plaque Control"]

    def test_product_comparison(self):
        products = {p.name: p for p in RecommendationEngine.product_comparison()}
        assert set(products) == {"Xylitol", "Fluoride", "Hydroxyapatite"}
        assert products["Fluoride"].effectiveness_rating == "Excellent"
        assert products["Fluoride"].effectiveness_percentage == 95
        assert products["Xylitol"].effectiveness_rating == "Very Good"
        assert products["Hydroxyapatite"].effectiveness_rating == "Good"
