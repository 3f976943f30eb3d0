# 📄 File: plant_health/modules/plant_diagnosis/application/services/upload_diagnose_pipeline.py
# 🧭 Purpose (Layman Explanation):
# The "assembly line" behind the upload button: store the photo, ask the AI plant doctor what
# is wrong, turn its advice into a day-by-day treatment plan, and save everything.
#
# 🧪 Purpose (Technical Summary):
# Linear four-stage orchestrator (upload -> diagnosis -> derive -> persist) over injected
# ImageStore, DiagnosisOracle and PlantRepository ports. Emits advisory progress milestones,
# aborts on the first failing stage and wraps the stage error in PipelineError. No retries,
# no timeouts of its own, no rollback of its own.
#
# 🔗 Dependencies:
# - plant_diagnosis.domain.services (gateways, TreatmentPlanner)
# - plant_diagnosis.domain.repositories.plant_repository
# - plant_health.shared.core.exceptions (PipelineError, ValidationError)
#
# 🔄 Connected Modules / Calls From:
# - application.handlers.command_handlers.UploadPlantImageCommandHandler
# - presentation.dependencies (construction per request)

"""
Upload-Diagnose-Persist Pipeline

State machine over one upload:

    IDLE -> UPLOADING(25%) -> DIAGNOSING(50%) -> DERIVING(75%) -> PERSISTING(100%) -> DONE

Any non-terminal stage may end in failure. The failing stage is reported
through ``PipelineError.stage``. Partial outcomes:

- diagnosis failure: the image stays stored, nothing is persisted
- persist failure: the pipeline does not undo a created plant; callers that
  run it inside a transactional session get atomic plant + treatment writes
"""

import inspect
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union
from uuid import UUID

from plant_health.modules.plant_diagnosis.domain.models.plant import PlantDraft
from plant_health.modules.plant_diagnosis.domain.repositories.plant_repository import PlantRepository
from plant_health.modules.plant_diagnosis.domain.services.gateways import DiagnosisOracle, ImageStore
from plant_health.modules.plant_diagnosis.domain.services.treatment_planner import TreatmentPlanner
from plant_health.shared.core.exceptions import PipelineError, PlantHealthException, ValidationError
from plant_health.shared.utils.logging import get_logger

logger = get_logger(__name__)


class PipelineStage(str, Enum):
    """Stages of one upload. Values double as the failure stage names."""
    IDLE = "idle"
    UPLOADING = "upload"
    DIAGNOSING = "diagnosis"
    DERIVING = "derive"
    PERSISTING = "persist"
    DONE = "done"


STAGE_PROGRESS = {
    PipelineStage.UPLOADING: 25,
    PipelineStage.DIAGNOSING: 50,
    PipelineStage.DERIVING: 75,
    PipelineStage.PERSISTING: 100,
}

ProgressCallback = Callable[[PipelineStage, int], Union[None, Awaitable[None]]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UploadDiagnosePipeline:
    """
    Orchestrates upload, diagnosis, treatment derivation and persistence.

    Collaborators are passed in explicitly; the pipeline keeps no state
    between runs, so one instance may serve concurrent uploads.
    """

    def __init__(
        self,
        image_store: ImageStore,
        diagnosis_oracle: DiagnosisOracle,
        plant_repository: PlantRepository,
        treatment_planner: Optional[TreatmentPlanner] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            image_store: Object store gateway
            diagnosis_oracle: Diagnosis oracle (fallback policy, if any, already applied)
            plant_repository: Record store
            treatment_planner: Treatment plan deriver
            clock: Source of the creation timestamp, defaults to the current UTC time
        """
        self._image_store = image_store
        self._oracle = diagnosis_oracle
        self._repository = plant_repository
        self._planner = treatment_planner or TreatmentPlanner()
        self._clock = clock or _utcnow

    async def run(
        self,
        owner_id: UUID,
        image_bytes: bytes,
        filename: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> UUID:
        """
        Upload an image, diagnose it and persist the plant with its treatment plan.

        Args:
            owner_id: Owning user's ID
            image_bytes: Raw image bytes
            filename: Original filename, informational only
            on_progress: Called as ``(stage, percent)`` on entering each stage; may be async

        Returns:
            UUID: ID of the created plant

        Raises:
            ValidationError: If no image was supplied (before any stage runs)
            PipelineError: If a stage fails; ``stage`` names it and ``cause`` holds the error
        """
        if not image_bytes:
            raise ValidationError("An image is required", field="image")

        stage = PipelineStage.IDLE
        try:
            stage = PipelineStage.UPLOADING
            await self._report(on_progress, stage)
            image_url = await self._image_store.upload(owner_id, image_bytes, filename)

            stage = PipelineStage.DIAGNOSING
            await self._report(on_progress, stage)
            diagnosis = await self._oracle.diagnose(image_url)

            stage = PipelineStage.DERIVING
            await self._report(on_progress, stage)
            created_at = self._clock().astimezone(timezone.utc)
            drafts = self._planner.derive(diagnosis.recommendations, created_at.date())

            stage = PipelineStage.PERSISTING
            await self._report(on_progress, stage)
            plant = await self._repository.create_plant(
                owner_id,
                PlantDraft(
                    image_url=image_url,
                    name=diagnosis.plant_name,
                    diagnosis=diagnosis,
                    created_at=created_at,
                ),
            )
            await self._repository.create_treatments(owner_id, plant.id, drafts)

        except PlantHealthException as e:
            logger.warning(
                f"Upload pipeline failed during {stage.value}: {e.message}",
                extra={"stage": stage.value, "error_code": e.error_code, "owner_id": str(owner_id)},
            )
            raise PipelineError(stage.value, e) from e

        logger.log_business_event(
            "plant_uploaded",
            f"Plant {plant.id} diagnosed as {diagnosis.plant_name} with {len(drafts)} treatment steps",
            entity_id=str(plant.id),
            entity_type="plant",
            extra={"owner_id": str(owner_id), "provider": self._oracle.provider_name},
        )
        return plant.id

    @staticmethod
    async def _report(on_progress: Optional[ProgressCallback], stage: PipelineStage) -> None:
        if on_progress is None:
            return
        result: Any = on_progress(stage, STAGE_PROGRESS[stage])
        if inspect.isawaitable(result):
            await result
