"""Read-side queries of the plant diagnosis module."""

from plant_health.modules.plant_diagnosis.application.queries.plant_queries import (
    GetPlantQuery,
    ListPlantsQuery,
    ListTreatmentsQuery,
)

__all__ = ["ListPlantsQuery", "GetPlantQuery", "ListTreatmentsQuery"]
