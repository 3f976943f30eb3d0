# 📄 File: plant_health/modules/plant_diagnosis/presentation/api/v1/plants.py
# 🧭 Purpose (Layman Explanation):
# The web endpoints behind "My Plants": upload a photo to get a diagnosis and treatment plan,
# list your plants, open one, see its treatment steps, or delete it.
#
# 🧪 Purpose (Technical Summary):
# FastAPI router for the plant aggregate. Upload runs the upload-diagnose-persist pipeline
# through its command handler; reads go through query handlers. Every route is scoped to
# the authenticated owner.
#
# 🔗 Dependencies:
# - FastAPI router, UploadFile/File, status codes
# - plant_diagnosis.application (commands, queries, handlers)
# - plant_diagnosis.presentation.dependencies and schemas
# - plant_health.shared.core.dependencies (CurrentUser)
#
# 🔄 Connected Modules / Calls From:
# - plant_health.api.v1.router (mounted under /api/v1/plants)
# - Web front end (dashboard, plant detail page)

"""
Plants API Endpoints

Endpoints:
- POST /: Upload a photo, diagnose it and save the plant with its treatment plan
- GET /: List the current user's plants, newest first
- GET /{plant_id}: Get a plant with diagnosis, care tips and treatments
- GET /{plant_id}/treatments: Get a plant's treatment steps in order
- DELETE /{plant_id}: Delete a plant and its treatments
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Response, UploadFile, status

from plant_health.modules.plant_diagnosis.application.commands.delete_plant import DeletePlantCommand
from plant_health.modules.plant_diagnosis.application.commands.upload_plant_image import UploadPlantImageCommand
from plant_health.modules.plant_diagnosis.application.handlers.command_handlers import (
    DeletePlantCommandHandler,
    UploadPlantImageCommandHandler,
)
from plant_health.modules.plant_diagnosis.application.handlers.query_handlers import (
    GetPlantQueryHandler,
    ListPlantsQueryHandler,
    ListTreatmentsQueryHandler,
)
from plant_health.modules.plant_diagnosis.application.queries.plant_queries import (
    GetPlantQuery,
    ListPlantsQuery,
    ListTreatmentsQuery,
)
from plant_health.modules.plant_diagnosis.application.services.upload_diagnose_pipeline import PipelineStage
from plant_health.modules.plant_diagnosis.presentation.api.schemas.plant_schemas import (
    PlantDetailResponse,
    PlantSummaryResponse,
    TreatmentResponse,
)
from plant_health.modules.plant_diagnosis.presentation.dependencies import (
    get_delete_plant_handler,
    get_list_plants_handler,
    get_list_treatments_handler,
    get_plant_handler,
    get_upload_handler,
)
from plant_health.shared.config.settings import Settings, get_settings
from plant_health.shared.core.dependencies import CurrentUser, get_current_user
from plant_health.shared.core.exceptions import FileTooLargeError, ValidationError

logger = logging.getLogger(__name__)

plants_router = APIRouter()


@plants_router.post(
    "",
    response_model=PlantDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload and diagnose a plant photo",
    responses={
        201: {"description": "Plant diagnosed and saved with its treatment plan"},
        400: {"description": "File is not an allowed image"},
        401: {"description": "Authentication required"},
        413: {"description": "Image too large"},
        422: {"description": "No image supplied"},
        502: {"description": "Storage or diagnosis failed"},
    }
)
async def upload_plant(
    image: Optional[UploadFile] = File(None, description="Plant photo (JPEG, PNG, WEBP or GIF)"),
    current_user: CurrentUser = Depends(get_current_user),
    handler: UploadPlantImageCommandHandler = Depends(get_upload_handler),
    settings: Settings = Depends(get_settings),
) -> PlantDetailResponse:
    """
    Upload a plant photo and run the full diagnosis pipeline.

    The photo is stored, diagnosed, turned into a dated treatment plan and
    saved. Failures report the stage that failed.
    """
    if image is None:
        raise ValidationError("An image is required", field="image")

    image_bytes = await image.read(settings.MAX_IMAGE_SIZE + 1)
    if len(image_bytes) > settings.MAX_IMAGE_SIZE:
        raise FileTooLargeError(
            f"Image exceeds maximum {settings.MAX_IMAGE_SIZE} bytes",
            max_size_mb=round(settings.MAX_IMAGE_SIZE / (1024 * 1024), 2),
            filename=image.filename,
        )

    def log_progress(stage: PipelineStage, percent: int) -> None:
        logger.info(f"Upload progress {percent}% ({stage.value}) for user: {current_user.user_id}")

    plant = await handler.handle(
        UploadPlantImageCommand(
            owner_id=current_user.user_id,
            image_bytes=image_bytes,
            filename=image.filename,
        ),
        on_progress=log_progress,
    )
    return PlantDetailResponse.from_domain(plant)


@plants_router.get(
    "",
    response_model=List[PlantSummaryResponse],
    summary="List my plants",
)
async def list_plants(
    current_user: CurrentUser = Depends(get_current_user),
    handler: ListPlantsQueryHandler = Depends(get_list_plants_handler),
) -> List[PlantSummaryResponse]:
    """List the current user's plants, newest first. Empty list when there are none."""
    plants = await handler.handle(ListPlantsQuery(owner_id=current_user.user_id))
    return [PlantSummaryResponse.from_domain(plant) for plant in plants]


@plants_router.get(
    "/{plant_id}",
    response_model=PlantDetailResponse,
    summary="Get a plant",
    responses={404: {"description": "Plant not found"}},
)
async def get_plant(
    plant_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    handler: GetPlantQueryHandler = Depends(get_plant_handler),
) -> PlantDetailResponse:
    plant = await handler.handle(GetPlantQuery(owner_id=current_user.user_id, plant_id=plant_id))
    return PlantDetailResponse.from_domain(plant)


@plants_router.get(
    "/{plant_id}/treatments",
    response_model=List[TreatmentResponse],
    summary="Get a plant's treatment steps",
    responses={404: {"description": "Plant not found"}},
)
async def list_plant_treatments(
    plant_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    handler: ListTreatmentsQueryHandler = Depends(get_list_treatments_handler),
) -> List[TreatmentResponse]:
    treatments = await handler.handle(ListTreatmentsQuery(owner_id=current_user.user_id, plant_id=plant_id))
    return [TreatmentResponse.from_domain(treatment) for treatment in treatments]


@plants_router.delete(
    "/{plant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a plant",
    responses={404: {"description": "Plant not found or already deleted"}},
)
async def delete_plant(
    plant_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    handler: DeletePlantCommandHandler = Depends(get_delete_plant_handler),
) -> Response:
    """Delete a plant and its treatments. Deleting it again returns 404."""
    await handler.handle(DeletePlantCommand(owner_id=current_user.user_id, plant_id=plant_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
