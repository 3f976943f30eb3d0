# 📄 File: plant_health/modules/plant_diagnosis/presentation/api/schemas/plant_schemas.py
# 🧭 Purpose (Layman Explanation):
# Defines exactly what the app sends back when you look at your plants and their treatment
# steps, and what it accepts when you tick a step off or ask for a diagnosis.
#
# 🧪 Purpose (Technical Summary):
# Pydantic request/response schemas for the plant, treatment and diagnosis endpoints, with
# conversion from domain entities (including the display helpers for care tips, prioritized
# recommendations and headline severity).
#
# 🔗 Dependencies:
# - pydantic v2
# - plant_diagnosis.domain.models (Plant, Treatment, DiagnosisResult)
# - plant_diagnosis.domain.services.care_guide
#
# 🔄 Connected Modules / Calls From:
# - plant_diagnosis.presentation.api.v1 routers
# - FastAPI request validation and response serialization

"""
Plant Diagnosis API Schemas

Request Schemas:
- UpdateTreatmentRequest: Completion toggle for a treatment step
- DiagnoseRequest: Image URL for a one-off diagnosis

Response Schemas:
- TreatmentResponse: One treatment step
- PlantSummaryResponse: Plant row for list views
- PlantDetailResponse: Plant with diagnosis, display helpers and treatments
"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from plant_health.modules.plant_diagnosis.domain.models.diagnosis import (
    CareTip,
    DiagnosisResult,
    Recommendation,
    Severity,
)
from plant_health.modules.plant_diagnosis.domain.models.plant import Plant, Treatment
from plant_health.modules.plant_diagnosis.domain.services.care_guide import (
    care_tips_for_display,
    primary_severity,
    prioritized_recommendations,
)


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class UpdateTreatmentRequest(BaseModel):
    """Request body for PATCH /treatments/{treatment_id}."""

    completed: bool = Field(..., description="Whether the step is done")


class DiagnoseRequest(BaseModel):
    """Request body for POST /diagnoses, matching the diagnosis worker contract."""

    model_config = ConfigDict(populate_by_name=True)

    image_url: Optional[str] = Field(
        None,
        alias="imageUrl",
        validate_default=True,
        description="Publicly readable image URL",
    )

    @field_validator("image_url")
    @classmethod
    def require_image_url(cls, v: Optional[str]) -> str:
        if v is None or not v.strip():
            raise ValueError("Image URL is required")
        return v.strip()


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class TreatmentResponse(BaseModel):
    """One dated treatment step. The scheduled date is sent as ``date``."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    plant_id: UUID
    step: int
    description: str
    scheduled_date: date = Field(..., alias="date")
    completed: bool

    @classmethod
    def from_domain(cls, treatment: Treatment) -> "TreatmentResponse":
        return cls(
            id=treatment.id,
            plant_id=treatment.plant_id,
            step=treatment.step,
            description=treatment.description,
            scheduled_date=treatment.scheduled_date,
            completed=treatment.completed,
        )


class PlantSummaryResponse(BaseModel):
    """Plant card in the dashboard list."""

    id: UUID
    plant_name: Optional[str] = None
    image_url: str
    severity: Optional[Severity] = None
    created_at: datetime

    @classmethod
    def from_domain(cls, plant: Plant) -> "PlantSummaryResponse":
        return cls(
            id=plant.id,
            plant_name=plant.name,
            image_url=plant.image_url,
            severity=primary_severity(plant.diagnosis),
            created_at=plant.created_at,
        )


class PlantDetailResponse(PlantSummaryResponse):
    """
    Full plant view.

    ``recommendations`` is sorted by priority for display, while
    ``treatments`` keeps step order.
    """

    diagnosis: Optional[DiagnosisResult] = None
    care_tips: List[CareTip] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)
    treatments: List[TreatmentResponse] = Field(default_factory=list)
    completed_treatments: int = 0

    @classmethod
    def from_domain(cls, plant: Plant) -> "PlantDetailResponse":
        return cls(
            id=plant.id,
            plant_name=plant.name,
            image_url=plant.image_url,
            severity=primary_severity(plant.diagnosis),
            created_at=plant.created_at,
            diagnosis=plant.diagnosis,
            care_tips=care_tips_for_display(plant.diagnosis),
            recommendations=prioritized_recommendations(plant.diagnosis),
            treatments=[TreatmentResponse.from_domain(t) for t in plant.treatments],
            completed_treatments=plant.completed_treatment_count,
        )
