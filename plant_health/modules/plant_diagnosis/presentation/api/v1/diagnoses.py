"""
Diagnoses API Endpoints

Endpoints:
- POST /: Diagnose a plant from a public image URL without saving anything
"""

import logging

from fastapi import APIRouter, Depends

from plant_health.modules.plant_diagnosis.application.commands.diagnose_image import DiagnoseImageCommand
from plant_health.modules.plant_diagnosis.application.handlers.command_handlers import DiagnoseImageCommandHandler
from plant_health.modules.plant_diagnosis.domain.models.diagnosis import DiagnosisResult
from plant_health.modules.plant_diagnosis.presentation.api.schemas.plant_schemas import DiagnoseRequest
from plant_health.modules.plant_diagnosis.presentation.dependencies import get_diagnose_handler
from plant_health.shared.core.dependencies import CurrentUser, get_current_user

logger = logging.getLogger(__name__)

diagnoses_router = APIRouter()


@diagnoses_router.post(
    "",
    response_model=DiagnosisResult,
    summary="Diagnose an image URL",
    responses={
        422: {"description": "Image URL is required"},
        502: {"description": "Diagnosis failed and the fallback is disabled"},
    }
)
async def diagnose_image(
    body: DiagnoseRequest,
    current_user: CurrentUser = Depends(get_current_user),
    handler: DiagnoseImageCommandHandler = Depends(get_diagnose_handler),
) -> DiagnosisResult:
    """Run the configured diagnosis oracle, with the fallback policy, on one image."""
    logger.info(f"Direct diagnosis requested by user: {current_user.user_id}")
    return await handler.handle(DiagnoseImageCommand(image_url=body.image_url))
