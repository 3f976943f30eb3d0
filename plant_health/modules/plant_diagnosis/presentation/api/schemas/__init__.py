"""Request and response schemas for the plant diagnosis API."""

from plant_health.modules.plant_diagnosis.presentation.api.schemas.plant_schemas import (
    DiagnoseRequest,
    PlantDetailResponse,
    PlantSummaryResponse,
    TreatmentResponse,
    UpdateTreatmentRequest,
)

__all__ = [
    "DiagnoseRequest",
    "PlantDetailResponse",
    "PlantSummaryResponse",
    "TreatmentResponse",
    "UpdateTreatmentRequest",
]
