# 📄 File: plant_health/modules/plant_diagnosis/domain/models/diagnosis.py
# 🧭 Purpose (Layman Explanation):
# Describes what a plant "check-up report" from the AI looks like: which plant it is, how sure
# the AI is, what problems it found and how serious they are, what to do about them, and
# care tips for that species.
# 🧪 Purpose (Technical Summary):
# Validated pydantic schema for the diagnosis oracle payload (camelCase on the wire,
# snake_case in Python), the Severity enum, and the static general-care fallback diagnosis.
# 🔗 Dependencies:
# pydantic v2, enum
# 🔄 Connected Modules / Calls From:
# Diagnosis oracles (parse boundary), treatment planner, upload pipeline,
# plant repository (JSON column), API schemas

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Matches the plants.plant_name column width
PLANT_NAME_MAX_LENGTH = 255


class Severity(str, Enum):
    """Ordinal classification of a plant issue."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DiagnosisModel(BaseModel):
    """Base for diagnosis payload parts: camelCase aliases, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class PlantIssue(DiagnosisModel):
    """A disease, pest or health problem (or 'Healthy') found on the plant."""

    name: str = Field(..., min_length=1)
    severity: Severity
    description: str = ""
    causes: List[str] = Field(default_factory=list)

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v


class Recommendation(DiagnosisModel):
    """
    One action to take. ``priority`` is a display hint only; it is not
    guaranteed unique or contiguous and never reorders treatment steps.
    """

    action: str = Field(..., min_length=1)
    timeline: str = ""
    priority: int = 1


class CareTip(DiagnosisModel):
    """Species-specific care advice with an icon from the fixed vocabulary."""

    icon: str = "💡"
    title: str
    description: str = ""


class ModelOutput(DiagnosisModel):
    """Which model answered and its raw reply, kept for observability."""

    model: str
    raw_response: Optional[Any] = None


class DiagnosisResult(DiagnosisModel):
    """
    Structured diagnosis returned by the oracle.

    Validated at the oracle boundary so malformed payloads are rejected before
    anything reaches storage. Persisted verbatim (wire form) on the plant row.
    """

    plant_name: str = Field(..., min_length=1, max_length=PLANT_NAME_MAX_LENGTH)
    confidence: float = Field(default=0.90, ge=0.0, le=1.0)
    issues: List[PlantIssue] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)
    care_tips: List[CareTip] = Field(default_factory=list)
    care_summary: Optional[str] = None
    model_output: Optional[ModelOutput] = None

    @field_validator("confidence", mode="before")
    @classmethod
    def default_missing_confidence(cls, v: Any) -> Any:
        # Models sometimes answer 0 or null when unsure
        if v in (None, 0, ""):
            return 0.90
        return v

    @field_validator("issues", "recommendations", "care_tips", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def is_fallback(self) -> bool:
        return self.model_output is not None and self.model_output.model == FALLBACK_MODEL

    def to_storage(self) -> Dict[str, Any]:
        """JSON-compatible wire form for the ``plants.diagnosis`` column."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


# =============================================================================
# FALLBACK DIAGNOSIS
# =============================================================================

FALLBACK_ISSUE_NAME = "General Plant Care"
FALLBACK_MODEL = "general-care-fallback"


def fallback_diagnosis() -> DiagnosisResult:
    """
    Static general-care diagnosis used when the oracle is unavailable.

    Returns a fresh instance on every call.
    """
    return DiagnosisResult(
        plant_name="Plant",
        confidence=0.70,
        issues=[
            PlantIssue(
                name=FALLBACK_ISSUE_NAME,
                severity=Severity.LOW,
                description="AI analysis temporarily unavailable - showing general care tips",
            )
        ],
        recommendations=[
            Recommendation(action="Water when top inch of soil is dry", timeline="Check daily", priority=1),
            Recommendation(action="Provide appropriate light for this plant type", timeline="Ongoing", priority=2),
            Recommendation(
                action="Check for common pests (aphids, mealybugs, spider mites)",
                timeline="Weekly",
                priority=3,
            ),
            Recommendation(action="Fertilize with balanced plant food", timeline="Monthly", priority=4),
        ],
        care_tips=[
            CareTip(
                icon="💡",
                title="Monitor Daily",
                description="Check your plant at the same time each day to catch early warning signs.",
            ),
            CareTip(
                icon="💧",
                title="Water Wisely",
                description="Most plants prefer to dry out slightly between waterings.",
            ),
            CareTip(
                icon="☀️",
                title="Light Requirements",
                description="Ensure your plant gets appropriate light for its species.",
            ),
            CareTip(
                icon="🌡️",
                title="Temperature",
                description="Most houseplants prefer temperatures between 65-75°F.",
            ),
        ],
    )
