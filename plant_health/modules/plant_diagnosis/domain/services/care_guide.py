"""
Display helpers for a diagnosis: capped care tips with defaults, recommendations
sorted for display, and the headline severity.

None of these change what is stored; treatment steps keep recommendation order.
"""

from typing import List, Optional

from ..models.diagnosis import CareTip, DiagnosisResult, Recommendation, Severity

MAX_DISPLAYED_CARE_TIPS = 5

DEFAULT_CARE_TIPS = (
    CareTip(
        icon="💡",
        title="Monitor Daily",
        description="Check your plant at the same time each day to catch early warning signs of stress or disease.",
    ),
    CareTip(
        icon="💧",
        title="Water Wisely",
        description="Use the finger test: stick your finger 2 inches into soil. Water only when dry at that depth.",
    ),
    CareTip(
        icon="☀️",
        title="Light Requirements",
        description="Ensure your plant gets appropriate light for its species.",
    ),
    CareTip(
        icon="🌡️",
        title="Temperature Control",
        description=(
            "Most houseplants prefer temperatures between 65-75°F. "
            "Avoid placing near drafty windows or heating vents."
        ),
    ),
)


def care_tips_for_display(diagnosis: Optional[DiagnosisResult]) -> List[CareTip]:
    """At most five tips from the diagnosis, or the general tips when it has none."""
    if diagnosis is not None and diagnosis.care_tips:
        return list(diagnosis.care_tips[:MAX_DISPLAYED_CARE_TIPS])
    return list(DEFAULT_CARE_TIPS)


def prioritized_recommendations(diagnosis: Optional[DiagnosisResult]) -> List[Recommendation]:
    """Recommendations ordered by priority (stable for equal priorities)."""
    if diagnosis is None:
        return []
    return sorted(diagnosis.recommendations, key=lambda recommendation: recommendation.priority)


def primary_severity(diagnosis: Optional[DiagnosisResult]) -> Optional[Severity]:
    """Severity of the first reported issue, used for the plant's status badge."""
    if diagnosis is None or not diagnosis.issues:
        return None
    return diagnosis.issues[0].severity
