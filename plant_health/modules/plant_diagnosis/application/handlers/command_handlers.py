# 📄 File: plant_health/modules/plant_diagnosis/application/handlers/command_handlers.py
# 🧭 Purpose (Layman Explanation):
# The "action processors" for plants: run a new photo through diagnosis and saving, tick a
# treatment step on or off, delete a plant, or just ask the AI about a photo link.
#
# 🧪 Purpose (Technical Summary):
# CQRS command handlers orchestrating the upload pipeline, the plant repository and the
# diagnosis oracle for write operations, publishing domain events after each mutation.
#
# 🔗 Dependencies:
# - plant_diagnosis.application.commands (command definitions)
# - plant_diagnosis.application.services.upload_diagnose_pipeline
# - plant_diagnosis.domain.repositories / services / events
# - plant_health.shared.core.event_bus
#
# 🔄 Connected Modules / Calls From:
# - plant_diagnosis.presentation.dependencies (handler construction per request)
# - plant_diagnosis.presentation.api.v1 routers

__all__ = [
    "UploadPlantImageCommandHandler",
    "UpdateTreatmentCommandHandler",
    "DeletePlantCommandHandler",
    "DiagnoseImageCommandHandler",
]

import logging
from typing import Optional

from plant_health.modules.plant_diagnosis.application.commands.delete_plant import DeletePlantCommand
from plant_health.modules.plant_diagnosis.application.commands.diagnose_image import DiagnoseImageCommand
from plant_health.modules.plant_diagnosis.application.commands.update_treatment import UpdateTreatmentCommand
from plant_health.modules.plant_diagnosis.application.commands.upload_plant_image import UploadPlantImageCommand
from plant_health.modules.plant_diagnosis.application.services.upload_diagnose_pipeline import (
    ProgressCallback,
    UploadDiagnosePipeline,
)
from plant_health.modules.plant_diagnosis.domain.events.plant_events import (
    PlantCreatedEvent,
    PlantDeletedEvent,
    TreatmentCompletionChangedEvent,
)
from plant_health.modules.plant_diagnosis.domain.models.diagnosis import DiagnosisResult
from plant_health.modules.plant_diagnosis.domain.models.plant import Plant, Treatment
from plant_health.modules.plant_diagnosis.domain.repositories.plant_repository import PlantRepository
from plant_health.modules.plant_diagnosis.domain.services.gateways import DiagnosisOracle
from plant_health.shared.core.event_bus import EventBus

logger = logging.getLogger(__name__)


class UploadPlantImageCommandHandler:
    """
    Handles the upload command: runs the pipeline, then loads the saved plant.
    """

    def __init__(
        self,
        pipeline: UploadDiagnosePipeline,
        plant_repository: PlantRepository,
        event_bus: EventBus,
    ):
        self._pipeline = pipeline
        self._plant_repository = plant_repository
        self._event_bus = event_bus

    async def handle(
        self,
        command: UploadPlantImageCommand,
        on_progress: Optional[ProgressCallback] = None,
    ) -> Plant:
        """
        Run upload, diagnosis, derivation and persistence for one photo.

        Returns:
            Plant: The saved plant with its treatments

        Raises:
            ValidationError: No image supplied
            PipelineError: A stage failed
        """
        logger.info(f"Starting plant upload for user: {command.owner_id}")

        plant_id = await self._pipeline.run(
            command.owner_id,
            command.image_bytes,
            filename=command.filename,
            on_progress=on_progress,
        )
        plant = await self._plant_repository.get_plant(command.owner_id, plant_id)

        await self._event_bus.publish(
            PlantCreatedEvent(
                aggregate_id=str(plant.id),
                user_id=str(command.owner_id),
                plant_name=plant.name,
                treatment_count=len(plant.treatments),
                used_fallback=bool(plant.diagnosis and plant.diagnosis.is_fallback),
            )
        )
        return plant


class UpdateTreatmentCommandHandler:
    """Handles toggling a treatment step's completion flag."""

    def __init__(self, plant_repository: PlantRepository, event_bus: EventBus):
        self._plant_repository = plant_repository
        self._event_bus = event_bus

    async def handle(self, command: UpdateTreatmentCommand) -> Treatment:
        treatment = await self._plant_repository.update_treatment(
            command.owner_id, command.treatment_id, command.completed
        )

        await self._event_bus.publish(
            TreatmentCompletionChangedEvent(
                aggregate_id=str(treatment.id),
                user_id=str(command.owner_id),
                plant_id=str(treatment.plant_id),
                step=treatment.step,
                completed=treatment.completed,
            )
        )
        return treatment


class DeletePlantCommandHandler:
    """Handles plant deletion; a second delete of the same plant raises NotFoundError."""

    def __init__(self, plant_repository: PlantRepository, event_bus: EventBus):
        self._plant_repository = plant_repository
        self._event_bus = event_bus

    async def handle(self, command: DeletePlantCommand) -> None:
        await self._plant_repository.delete_plant(command.owner_id, command.plant_id)

        await self._event_bus.publish(
            PlantDeletedEvent(aggregate_id=str(command.plant_id), user_id=str(command.owner_id))
        )


class DiagnoseImageCommandHandler:
    """Handles a one-off diagnosis; nothing is stored and no event is published."""

    def __init__(self, diagnosis_oracle: DiagnosisOracle):
        self._oracle = diagnosis_oracle

    async def handle(self, command: DiagnoseImageCommand) -> DiagnosisResult:
        logger.info(f"Diagnosing image URL with provider: {self._oracle.provider_name}")
        return await self._oracle.diagnose(command.image_url)
