# 📄 File: plant_health/modules/plant_diagnosis/presentation/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Hands every plant endpoint the helpers it needs for one request: the photo storage, the AI
# plant doctor, the database access and the ready-made request processors.
# 🧪 Purpose (Technical Summary):
# FastAPI dependency providers that assemble the repository, gateways, pipeline and CQRS
# handlers per request from app.state resources. No module-level singletons; tests swap
# any provider through app.dependency_overrides.
# 🔗 Dependencies:
# FastAPI, SQLAlchemy AsyncSession, plant_health.shared.* (settings, session, event bus),
# plant_diagnosis application handlers and infrastructure adapters
# 🔄 Connected Modules / Calls From:
# plant_diagnosis.presentation.api.v1 (plants, treatments, diagnoses routers), tests

"""
Plant Diagnosis Module Dependencies

Provides per-request wiring for:

- Record store (SqlAlchemyPlantRepository on the request session)
- Object store gateway (SupabasePlantImageStore on the shared storage client)
- Diagnosis oracle (configured provider plus fallback policy)
- Upload pipeline and the command/query handlers built on top of them
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from plant_health.modules.plant_diagnosis.application.handlers.command_handlers import (
    DeletePlantCommandHandler,
    DiagnoseImageCommandHandler,
    UpdateTreatmentCommandHandler,
    UploadPlantImageCommandHandler,
)
from plant_health.modules.plant_diagnosis.application.handlers.query_handlers import (
    GetPlantQueryHandler,
    ListPlantsQueryHandler,
    ListTreatmentsQueryHandler,
)
from plant_health.modules.plant_diagnosis.application.services.upload_diagnose_pipeline import (
    UploadDiagnosePipeline,
)
from plant_health.modules.plant_diagnosis.domain.repositories.plant_repository import PlantRepository
from plant_health.modules.plant_diagnosis.domain.services.gateways import DiagnosisOracle, ImageStore
from plant_health.modules.plant_diagnosis.infrastructure.database.plant_repository_impl import (
    SqlAlchemyPlantRepository,
)
from plant_health.modules.plant_diagnosis.infrastructure.external.oracle_factory import build_diagnosis_oracle
from plant_health.modules.plant_diagnosis.infrastructure.storage.plant_image_store import SupabasePlantImageStore
from plant_health.shared.config.settings import Settings, get_settings
from plant_health.shared.core.dependencies import get_event_bus
from plant_health.shared.core.event_bus import EventBus
from plant_health.shared.core.exceptions import StorageWriteError
from plant_health.shared.infrastructure.database.session import get_db_session
from plant_health.shared.infrastructure.external_apis.api_client import APIClient
from plant_health.shared.infrastructure.storage.supabase_storage import SupabaseStorageClient

logger = logging.getLogger(__name__)


# =========================================================================
# GATEWAYS AND REPOSITORY
# =========================================================================

def get_plant_repository(session: AsyncSession = Depends(get_db_session)) -> PlantRepository:
    """Repository bound to the request's session (one unit of work per request)."""
    return SqlAlchemyPlantRepository(session)


def get_image_store(request: Request) -> ImageStore:
    """
    Object store gateway over the storage client created at startup.

    Raises:
        StorageWriteError: If storage was not initialized
    """
    storage_client: Optional[SupabaseStorageClient] = getattr(request.app.state, "storage_client", None)
    if storage_client is None:
        logger.error("Storage client requested before startup completed")
        raise StorageWriteError("Image storage is not configured")
    return SupabasePlantImageStore(storage_client)


def get_diagnosis_oracle(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> DiagnosisOracle:
    """Configured diagnosis oracle, wrapped in the fallback policy when enabled."""
    api_client: Optional[APIClient] = getattr(request.app.state, "diagnosis_api_client", None)
    return build_diagnosis_oracle(settings, api_client)


def get_upload_pipeline(
    image_store: ImageStore = Depends(get_image_store),
    diagnosis_oracle: DiagnosisOracle = Depends(get_diagnosis_oracle),
    plant_repository: PlantRepository = Depends(get_plant_repository),
) -> UploadDiagnosePipeline:
    return UploadDiagnosePipeline(image_store, diagnosis_oracle, plant_repository)


# =========================================================================
# COMMAND HANDLERS
# =========================================================================

def get_upload_handler(
    pipeline: UploadDiagnosePipeline = Depends(get_upload_pipeline),
    plant_repository: PlantRepository = Depends(get_plant_repository),
    event_bus: EventBus = Depends(get_event_bus),
) -> UploadPlantImageCommandHandler:
    return UploadPlantImageCommandHandler(pipeline, plant_repository, event_bus)


def get_update_treatment_handler(
    plant_repository: PlantRepository = Depends(get_plant_repository),
    event_bus: EventBus = Depends(get_event_bus),
) -> UpdateTreatmentCommandHandler:
    return UpdateTreatmentCommandHandler(plant_repository, event_bus)


def get_delete_plant_handler(
    plant_repository: PlantRepository = Depends(get_plant_repository),
    event_bus: EventBus = Depends(get_event_bus),
) -> DeletePlantCommandHandler:
    return DeletePlantCommandHandler(plant_repository, event_bus)


def get_diagnose_handler(
    diagnosis_oracle: DiagnosisOracle = Depends(get_diagnosis_oracle),
) -> DiagnoseImageCommandHandler:
    return DiagnoseImageCommandHandler(diagnosis_oracle)


# =========================================================================
# QUERY HANDLERS
# =========================================================================

def get_list_plants_handler(
    plant_repository: PlantRepository = Depends(get_plant_repository),
) -> ListPlantsQueryHandler:
    return ListPlantsQueryHandler(plant_repository)


def get_plant_handler(
    plant_repository: PlantRepository = Depends(get_plant_repository),
) -> GetPlantQueryHandler:
    return GetPlantQueryHandler(plant_repository)


def get_list_treatments_handler(
    plant_repository: PlantRepository = Depends(get_plant_repository),
) -> ListTreatmentsQueryHandler:
    return ListTreatmentsQueryHandler(plant_repository)
