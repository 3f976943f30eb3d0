"""Version 1 routers of the plant diagnosis module."""

from plant_health.modules.plant_diagnosis.presentation.api.v1.diagnoses import diagnoses_router
from plant_health.modules.plant_diagnosis.presentation.api.v1.plants import plants_router
from plant_health.modules.plant_diagnosis.presentation.api.v1.treatments import treatments_router

__all__ = ["plants_router", "treatments_router", "diagnoses_router"]
