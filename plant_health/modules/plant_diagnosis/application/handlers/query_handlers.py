"""
Query handlers for the plant diagnosis module.
Read-only; owner scoping is enforced by the repository.
"""

import logging
from typing import List

from plant_health.modules.plant_diagnosis.application.queries.plant_queries import (
    GetPlantQuery,
    ListPlantsQuery,
    ListTreatmentsQuery,
)
from plant_health.modules.plant_diagnosis.domain.models.plant import Plant, Treatment
from plant_health.modules.plant_diagnosis.domain.repositories.plant_repository import PlantRepository

logger = logging.getLogger(__name__)


class ListPlantsQueryHandler:
    """Lists an owner's plants, newest first."""

    def __init__(self, plant_repository: PlantRepository):
        self._plant_repository = plant_repository

    async def handle(self, query: ListPlantsQuery) -> List[Plant]:
        return await self._plant_repository.list_plants(query.owner_id)


class GetPlantQueryHandler:
    """Loads one plant with its treatments."""

    def __init__(self, plant_repository: PlantRepository):
        self._plant_repository = plant_repository

    async def handle(self, query: GetPlantQuery) -> Plant:
        return await self._plant_repository.get_plant(query.owner_id, query.plant_id)


class ListTreatmentsQueryHandler:
    """Loads one plant's treatments in step order."""

    def __init__(self, plant_repository: PlantRepository):
        self._plant_repository = plant_repository

    async def handle(self, query: ListTreatmentsQuery) -> List[Treatment]:
        plant = await self._plant_repository.get_plant(query.owner_id, query.plant_id)
        logger.debug(f"Loaded {len(plant.treatments)} treatments for plant: {query.plant_id}")
        return plant.treatments
