# 📄 File: plant_health/modules/plant_diagnosis/domain/models/plant.py
# 🧭 Purpose (Layman Explanation):
# Describes a saved plant (its photo, its name and its check-up report) and the numbered,
# dated treatment steps the owner ticks off one by one.
# 🧪 Purpose (Technical Summary):
# Domain entities for the Plant aggregate and its Treatment children, plus the draft
# value objects handed to the record store before identity and timestamps exist.
# 🔗 Dependencies:
# pydantic v2, datetime, uuid, diagnosis models
# 🔄 Connected Modules / Calls From:
# Plant repository (interface and SQLAlchemy implementation), treatment planner,
# upload pipeline, query handlers, API schemas

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .diagnosis import DiagnosisResult


class TreatmentDraft(BaseModel):
    """A treatment step before it is persisted."""

    model_config = ConfigDict(frozen=True)

    step: int = Field(..., ge=1, description="1-based position, unique within a plant")
    description: str = Field(..., description="Action text copied from a recommendation")
    scheduled_date: date = Field(..., description="Creation date plus (step - 1) days")


class Treatment(BaseModel):
    """A persisted, user-trackable treatment step."""

    id: UUID
    plant_id: UUID
    step: int
    description: str
    scheduled_date: date
    completed: bool = False


class PlantDraft(BaseModel):
    """Everything needed to create a plant record; the store assigns id, and created_at when unset."""

    image_url: str = Field(..., min_length=1, description="Public URL of the uploaded photo")
    name: Optional[str] = Field(None, description="Plant name identified by the diagnosis")
    diagnosis: Optional[DiagnosisResult] = None
    created_at: Optional[datetime] = Field(None, description="UTC creation time the treatment dates count from")


class Plant(BaseModel):
    """
    Plant aggregate root.

    ``treatments`` is populated only when the plant is fetched by id; list
    views leave it empty.
    """

    id: UUID
    owner_id: UUID
    image_url: str
    name: Optional[str] = None
    diagnosis: Optional[DiagnosisResult] = None
    created_at: datetime
    treatments: List[Treatment] = Field(default_factory=list)

    @property
    def completed_treatment_count(self) -> int:
        return sum(1 for treatment in self.treatments if treatment.completed)
