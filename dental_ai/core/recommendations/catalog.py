"""
Recommendation Catalog

Fixed recommendation tables. Text here is shown to users verbatim, so any
wording change is a product change.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple

from dental_ai.core.models import (
    Condition,
    HealthTrend,
    Priority,
    Recommendation,
    RecommendationCategory,
    SeverityLevel,
)

IMMEDIATE = Priority.IMMEDIATE
URGENT = Priority.URGENT
IMPORTANT = Priority.IMPORTANT
GENERAL = Priority.GENERAL

HOME_CARE = RecommendationCategory.HOME_CARE
PROFESSIONAL = RecommendationCategory.PROFESSIONAL
LIFESTYLE = RecommendationCategory.LIFESTYLE
PRODUCTS = RecommendationCategory.PRODUCTS
EMERGENCY = RecommendationCategory.EMERGENCY


# ── Per-condition ─────────────────────────────────────────────────────────

CONDITION_RECOMMENDATIONS: Dict[Condition, Tuple[Recommendation, ...]] = {
    Condition.CAVITY: (
        Recommendation(
            "Schedule Dental Appointment",
            "Cavities require professional treatment to prevent further damage.",
            IMMEDIATE, PROFESSIONAL,
            ("Call your dentist within 24 hours", "Avoid sugary foods", "Use fluoride toothpaste"),
        ),
        Recommendation(
            "Improve Oral Hygiene",
            "Better brushing and flossing can prevent new cavities.",
            URGENT, HOME_CARE,
            ("Brush twice daily with fluoride toothpaste", "Floss daily", "Use mouthwash"),
        ),
    ),
    Condition.GINGIVITIS: (
        Recommendation(
            "Improve Gum Care",
            "Gingivitis can be reversed with proper oral hygiene.",
            URGENT, HOME_CARE,
            ("Brush gently along gum line", "Use soft-bristled toothbrush", "Floss daily",
             "Use antiseptic mouthwash"),
        ),
        Recommendation(
            "Professional Cleaning",
            "Professional cleaning can remove plaque and tartar buildup.",
            IMPORTANT, PROFESSIONAL,
            ("Schedule dental cleaning", "Ask about deep cleaning if needed"),
        ),
    ),
    Condition.DISCOLORATION: (
        Recommendation(
            "Teeth Whitening",
            "Professional whitening can restore your smile's brightness.",
            IMPORTANT, PRODUCTS,
            ("Consider professional whitening", "Use whitening toothpaste", "Avoid staining foods"),
        ),
        Recommendation(
            "Lifestyle Changes",
            "Reduce consumption of staining substances.",
            GENERAL, LIFESTYLE,
            ("Limit coffee and tea", "Quit smoking", "Drink water after meals"),
        ),
    ),
    Condition.PLAQUE: (
        Recommendation(
            "Better Brushing Technique",
            "Proper brushing can remove plaque buildup.",
            URGENT, HOME_CARE,
            ("Brush for 2 minutes twice daily", "Use circular motions", "Don't forget to brush tongue"),
        ),
    ),
    Condition.TARTAR: (
        Recommendation(
            "Professional Cleaning Required",
            "Tartar cannot be removed at home and requires professional treatment.",
            IMMEDIATE, PROFESSIONAL,
            ("Schedule dental cleaning immediately", "Ask about scaling and root planing"),
        ),
    ),
    Condition.DEAD_TOOTH: (
        Recommendation(
            "Emergency Dental Care",
            "A dead tooth requires immediate professional attention.",
            IMMEDIATE, EMERGENCY,
            ("Call dentist immediately", "Consider root canal treatment", "Monitor for pain or swelling"),
        ),
    ),
    Condition.ROOT_CANAL: (
        Recommendation(
            "Follow-up Care",
            "Root canal treatment requires proper follow-up care.",
            IMPORTANT, PROFESSIONAL,
            ("Follow dentist's post-treatment instructions", "Take prescribed medications",
             "Schedule follow-up appointment"),
        ),
    ),
    Condition.CHIPPED: (
        Recommendation(
            "Dental Repair",
            "Chipped teeth should be evaluated by a dentist.",
            URGENT, PROFESSIONAL,
            ("Schedule dental appointment", "Avoid hard foods", "Use dental wax if sharp"),
        ),
    ),
    Condition.MISALIGNED: (
        Recommendation(
            "Orthodontic Consultation",
            "Misaligned teeth can be corrected with orthodontic treatment.",
            IMPORTANT, PROFESSIONAL,
            ("Consult with orthodontist", "Consider braces or aligners", "Maintain good oral hygiene"),
        ),
    ),
    Condition.HEALTHY: (
        Recommendation(
            "Maintain Good Oral Health",
            "Keep up your excellent oral hygiene routine.",
            GENERAL, HOME_CARE,
            ("Continue regular brushing and flossing", "Schedule regular dental checkups",
             "Maintain healthy diet"),
        ),
    ),
}


# ── Severity / color ──────────────────────────────────────────────────────

SEVERITY_RECOMMENDATIONS: Dict[SeverityLevel, Tuple[Recommendation, ...]] = {
    SeverityLevel.HIGH: (
        Recommendation(
            "Immediate Professional Care",
            "Your dental health requires immediate attention from a professional.",
            IMMEDIATE, PROFESSIONAL,
            ("Schedule emergency dental appointment", "Monitor for pain or swelling", "Avoid hard foods"),
        ),
    ),
    SeverityLevel.MEDIUM: (
        Recommendation(
            "Schedule Dental Checkup",
            "Regular dental checkups can prevent minor issues from becoming major problems.",
            IMPORTANT, PROFESSIONAL,
            ("Schedule appointment within 2 weeks", "Prepare questions for your dentist"),
        ),
    ),
    SeverityLevel.LOW: (
        Recommendation(
            "Preventive Care",
            "Focus on preventive measures to maintain good oral health.",
            GENERAL, HOME_CARE,
            ("Maintain regular brushing and flossing", "Use fluoride products", "Eat a balanced diet"),
        ),
    ),
    SeverityLevel.NONE: (),
}

POOR_COLOR_HEALTHINESS = 0.5

COLOR_RECOMMENDATION = Recommendation(
    "Improve Oral Hygiene",
    "Better oral hygiene can improve the appearance and health of your teeth.",
    IMPORTANT, HOME_CARE,
    ("Brush twice daily", "Floss daily", "Use mouthwash", "Consider professional cleaning"),
)


# ── Personalization ───────────────────────────────────────────────────────

# (min age, max age inclusive or None, recommendation)
AGE_RECOMMENDATIONS: List[Tuple[int, Any, Recommendation]] = [
    (0, 12, Recommendation(
        "Child Dental Care",
        "Special care needed for developing teeth.",
        IMPORTANT, HOME_CARE,
        ("Use child-friendly toothpaste", "Supervise brushing until age 8",
         "Limit sugary snacks and drinks", "Schedule regular pediatric dental visits"),
    )),
    (13, 19, Recommendation(
        "Teen Dental Health",
        "Important years for establishing good oral hygiene habits.",
        IMPORTANT, LIFESTYLE,
        ("Establish consistent brushing routine", "Be mindful of sports-related dental injuries",
         "Limit energy drinks and sports drinks", "Consider orthodontic treatment if needed"),
    )),
    (20, 39, Recommendation(
        "Adult Preventive Care",
        "Focus on preventing dental problems before they start.",
        GENERAL, HOME_CARE,
        ("Maintain regular dental checkups", "Consider professional whitening",
         "Be aware of stress-related dental issues", "Maintain good nutrition for oral health"),
    )),
    (40, 59, Recommendation(
        "Midlife Dental Care",
        "Pay attention to gum health and tooth wear.",
        IMPORTANT, PROFESSIONAL,
        ("Monitor gum health closely", "Consider night guards if grinding teeth",
         "Be aware of medication side effects on oral health", "Maintain regular professional cleanings"),
    )),
    (60, None, Recommendation(
        "Senior Dental Health",
        "Special considerations for aging teeth and gums.",
        IMPORTANT, PROFESSIONAL,
        ("Monitor for dry mouth symptoms", "Be aware of medication interactions",
         "Consider dental implants if needed", "Maintain regular dental visits"),
    )),
]


def recurring_condition_recommendation(condition: Condition) -> Recommendation:
    return Recommendation(
        f"Address Recurring {condition.display_name}",
        "This condition has appeared in multiple recent analyses.",
        URGENT, PROFESSIONAL,
        ("Schedule dental consultation", "Discuss treatment options", "Implement preventive measures"),
    )


CONTINUE_CARE_RECOMMENDATION = Recommendation(
    "Continue Current Care",
    "Your dental health is improving. Keep up the good work!",
    GENERAL, HOME_CARE,
    ("Maintain current oral hygiene routine", "Continue regular dental visits",
     "Stay consistent with recommendations"),
)

TREND_RECOMMENDATIONS: Dict[HealthTrend, Recommendation] = {
    HealthTrend.IMPROVING: Recommendation(
        "Maintain Progress",
        "Your dental health is improving. Continue your current routine.",
        GENERAL, HOME_CARE,
        ("Keep up current oral hygiene habits", "Continue regular dental checkups",
         "Stay consistent with recommendations"),
    ),
    HealthTrend.DECLINING: Recommendation(
        "Address Declining Health",
        "Your dental health needs attention. Consider professional consultation.",
        URGENT, PROFESSIONAL,
        ("Schedule dental appointment soon", "Review and improve oral hygiene routine",
         "Consider lifestyle changes", "Monitor for any new symptoms"),
    ),
    HealthTrend.STABLE: Recommendation(
        "Maintain Stability",
        "Your dental health is stable. Focus on preventive care.",
        GENERAL, HOME_CARE,
        ("Continue regular dental checkups", "Maintain good oral hygiene",
         "Stay proactive with preventive care"),
    ),
}


class Season(str, Enum):
    WINTER = "winter"
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"

    @classmethod
    def from_month(cls, month: int) -> "Season":
        if month in (12, 1, 2):
            return cls.WINTER
        if month in (3, 4, 5):
            return cls.SPRING
        if month in (6, 7, 8):
            return cls.SUMMER
        return cls.FALL


SEASONAL_RECOMMENDATIONS: Dict[Season, Recommendation] = {
    Season.WINTER: Recommendation(
        "Winter Oral Care",
        "Cold weather can affect oral health.",
        GENERAL, LIFESTYLE,
        ("Stay hydrated to prevent dry mouth", "Protect lips from chapping",
         "Be mindful of hot beverages", "Maintain regular dental routine"),
    ),
    Season.SPRING: Recommendation(
        "Spring Dental Checkup",
        "Perfect time for a comprehensive dental examination.",
        IMPORTANT, PROFESSIONAL,
        ("Schedule annual dental checkup", "Consider professional cleaning",
         "Review dental insurance benefits", "Plan any needed treatments"),
    ),
    Season.SUMMER: Recommendation(
        "Summer Oral Health",
        "Summer activities can impact dental health.",
        GENERAL, LIFESTYLE,
        ("Stay hydrated in hot weather", "Be careful with sports and activities",
         "Limit sugary summer treats", "Protect teeth during sports"),
    ),
    Season.FALL: Recommendation(
        "Fall Dental Preparation",
        "Prepare for the holiday season ahead.",
        GENERAL, HOME_CARE,
        ("Schedule pre-holiday dental checkup", "Stock up on oral hygiene supplies",
         "Plan for holiday dental care", "Consider whitening before holidays"),
    ),
}

GENERAL_HEALTH_RECOMMENDATIONS: Tuple[Recommendation, ...] = (
    Recommendation(
        "Overall Health Connection",
        "Oral health is connected to overall health.",
        GENERAL, LIFESTYLE,
        ("Maintain a balanced diet", "Stay physically active", "Manage stress levels",
         "Get adequate sleep", "Avoid tobacco products"),
    ),
    Recommendation(
        "Emergency Preparedness",
        "Be prepared for dental emergencies.",
        GENERAL, EMERGENCY,
        ("Keep emergency dental contact information", "Know basic first aid for dental injuries",
         "Have a dental first aid kit", "Know when to seek immediate care"),
    ),
)


# ── Products / lifestyle ──────────────────────────────────────────────────

PRODUCT_RECOMMENDATIONS: Dict[Condition, Recommendation] = {
    Condition.CAVITY: Recommendation(
        "Cavity Prevention Products",
        "Multiple options available for cavity prevention based on your needs.",
        IMPORTANT, PRODUCTS,
        ("Consider xylitol-based products (natural alternative to fluoride)",
         "Use fluoride toothpaste for maximum protection",
         "Try hydroxyapatite toothpaste (remineralizing)",
         "Consider fluoride mouthwash",
         "Ask about professional fluoride treatments"),
    ),
    Condition.GINGIVITIS: Recommendation(
        "Gum Care Products",
        "Specialized products can help improve gum health.",
        IMPORTANT, PRODUCTS,
        ("Use soft-bristled toothbrush",
         "Try xylitol mouthwash (reduces harmful bacteria)",
         "Consider antimicrobial mouthwash",
         "Use gum care toothpaste with xylitol",
         "Try interdental brushes",
         "Consider herbal mouthwashes (aloe vera, tea tree oil)"),
    ),
    Condition.DISCOLORATION: Recommendation(
        "Whitening Products",
        "Multiple whitening options available, including natural alternatives.",
        IMPORTANT, PRODUCTS,
        ("Consider professional whitening",
         "Try natural whitening toothpaste (baking soda, activated charcoal)",
         "Use xylitol-based whitening products",
         "Try whitening strips",
         "Consider whitening mouthwash",
         "Try oil pulling with coconut oil"),
    ),
    Condition.PLAQUE: Recommendation(
        "Plaque Control Products",
        "Specialized products can help control plaque buildup.",
        IMPORTANT, PRODUCTS,
        ("Use plaque control toothpaste with xylitol",
         "Try electric toothbrush",
         "Use plaque disclosing tablets",
         "Consider xylitol-based mouthwash",
         "Try natural plaque control (oil pulling)",
         "Consider plaque control mouthwash"),
    ),
}

COMMON_LIFESTYLE_RECOMMENDATIONS: Tuple[Recommendation, ...] = (
    Recommendation(
        "Diet and Nutrition",
        "What you eat affects your oral health.",
        GENERAL, LIFESTYLE,
        ("Limit sugary foods and drinks", "Eat plenty of fruits and vegetables",
         "Choose water over sugary beverages", "Limit acidic foods", "Eat calcium-rich foods"),
    ),
    Recommendation(
        "Oral Hygiene Habits",
        "Good habits are the foundation of oral health.",
        IMPORTANT, LIFESTYLE,
        ("Brush twice daily for 2 minutes", "Floss daily", "Use mouthwash",
         "Replace toothbrush every 3 months", "Don't share toothbrushes"),
    ),
)

CONDITION_LIFESTYLE_RECOMMENDATIONS: Dict[Condition, Recommendation] = {
    Condition.CAVITY: Recommendation(
        "Cavity Prevention Lifestyle",
        "Lifestyle changes can help prevent new cavities.",
        URGENT, LIFESTYLE,
        ("Reduce sugar intake", "Avoid frequent snacking", "Drink water after meals", "Chew sugar-free gum"),
    ),
    Condition.GINGIVITIS: Recommendation(
        "Gum Health Lifestyle",
        "Lifestyle changes can improve gum health.",
        URGENT, LIFESTYLE,
        ("Quit smoking", "Manage stress", "Eat anti-inflammatory foods", "Stay hydrated"),
    ),
}

NATURAL_CAVITY_PREVENTION = Recommendation(
    "Natural Cavity Prevention",
    "Natural alternatives to fluoride for cavity prevention.",
    IMPORTANT, PRODUCTS,
    ("Use xylitol toothpaste (reduces cavity-causing bacteria)",
     "Try hydroxyapatite toothpaste (remineralizes teeth)",
     "Consider xylitol gum (stimulates saliva production)",
     "Use xylitol mouthwash",
     "Try oil pulling with coconut oil"),
)

COMPREHENSIVE_CAVITY_PREVENTION = Recommendation(
    "Comprehensive Cavity Prevention",
    "Multiple approaches for maximum cavity protection.",
    IMPORTANT, PRODUCTS,
    ("Use fluoride toothpaste for proven protection",
     "Add xylitol products for additional benefits",
     "Consider hydroxyapatite for remineralization",
     "Use xylitol gum between meals",
     "Try xylitol mouthwash"),
)

# Cavity is resolved from user preferences, see NATURAL/COMPREHENSIVE above
ALTERNATIVE_PRODUCT_RECOMMENDATIONS: Dict[Condition, Recommendation] = {
    Condition.GINGIVITIS: Recommendation(
        "Natural Gum Care",
        "Natural alternatives for gum health.",
        IMPORTANT, PRODUCTS,
        ("Use xylitol mouthwash (reduces harmful bacteria)",
         "Try herbal mouthwashes (aloe vera, tea tree oil)",
         "Consider xylitol toothpaste",
         "Use soft-bristled toothbrush",
         "Try oil pulling with coconut oil"),
    ),
    Condition.DISCOLORATION: Recommendation(
        "Natural Whitening Options",
        "Natural alternatives for teeth whitening.",
        IMPORTANT, PRODUCTS,
        ("Try baking soda toothpaste (gentle whitening)",
         "Use activated charcoal toothpaste",
         "Consider xylitol-based whitening products",
         "Try oil pulling with coconut oil",
         "Use xylitol gum (reduces staining)"),
    ),
    Condition.PLAQUE: Recommendation(
        "Natural Plaque Control",
        "Natural methods for plaque control.",
        IMPORTANT, PRODUCTS,
        ("Use xylitol toothpaste (reduces plaque formation)",
         "Try oil pulling with coconut oil",
         "Use xylitol mouthwash",
         "Consider xylitol gum",
         "Try herbal mouthwashes"),
    ),
}


# ── Product comparison ────────────────────────────────────────────────────

@dataclass(frozen=True)
class ProductComparison:
    """Side-by-side summary of an active ingredient."""
    name: str
    benefits: Tuple[str, ...] = field(default_factory=tuple)
    drawbacks: Tuple[str, ...] = field(default_factory=tuple)
    best_for: Tuple[str, ...] = field(default_factory=tuple)
    effectiveness: float = 0.0   # 0-1

    @property
    def effectiveness_percentage(self) -> int:
        return int(round(self.effectiveness * 100))

    @property
    def effectiveness_rating(self) -> str:
        if self.effectiveness >= 0.9:
            return "Excellent"
        if self.effectiveness >= 0.8:
            return "Very Good"
        if self.effectiveness >= 0.7:
            return "Good"
        if self.effectiveness >= 0.6:
            return "Fair"
        return "Limited"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "benefits": list(self.benefits),
            "drawbacks": list(self.drawbacks),
            "best_for": list(self.best_for),
            "effectiveness": self.effectiveness,
            "effectiveness_percentage": self.effectiveness_percentage,
            "effectiveness_rating": self.effectiveness_rating,
        }


PRODUCT_COMPARISONS: Tuple[ProductComparison, ...] = (
    ProductComparison(
        name="Xylitol",
        benefits=("Reduces cavity-causing bacteria", "Stimulates saliva production", "Natural sweetener",
                  "Safe for children", "No fluoride concerns"),
        drawbacks=("Less proven than fluoride", "May cause digestive issues in large amounts",
                   "More expensive than fluoride", "Limited availability"),
        best_for=("Cavity prevention", "Gum health", "Natural alternatives"),
        effectiveness=0.8,
    ),
    ProductComparison(
        name="Fluoride",
        benefits=("Proven cavity prevention", "Strengthens tooth enamel", "Widely available",
                  "Cost-effective", "Extensive research"),
        drawbacks=("Potential toxicity concerns", "Not suitable for young children",
                   "Environmental concerns", "May cause fluorosis"),
        best_for=("Maximum cavity protection", "Enamel strengthening"),
        effectiveness=0.95,
    ),
    ProductComparison(
        name="Hydroxyapatite",
        benefits=("Natural tooth mineral", "Remineralizes teeth", "No toxicity concerns",
                  "Biocompatible", "Gentle on teeth"),
        drawbacks=("Newer technology", "Limited research", "More expensive", "Less proven than fluoride"),
        best_for=("Remineralization", "Sensitive teeth", "Natural alternatives"),
        effectiveness=0.7,
    ),
)
