"""
Treatments API Endpoints

Endpoints:
- PATCH /{treatment_id}: Mark a treatment step done or not done
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from plant_health.modules.plant_diagnosis.application.commands.update_treatment import UpdateTreatmentCommand
from plant_health.modules.plant_diagnosis.application.handlers.command_handlers import UpdateTreatmentCommandHandler
from plant_health.modules.plant_diagnosis.presentation.api.schemas.plant_schemas import (
    TreatmentResponse,
    UpdateTreatmentRequest,
)
from plant_health.modules.plant_diagnosis.presentation.dependencies import get_update_treatment_handler
from plant_health.shared.core.dependencies import CurrentUser, get_current_user

logger = logging.getLogger(__name__)

treatments_router = APIRouter()


@treatments_router.patch(
    "/{treatment_id}",
    response_model=TreatmentResponse,
    summary="Update a treatment step",
    responses={404: {"description": "Treatment not found"}},
)
async def update_treatment(
    treatment_id: UUID,
    body: UpdateTreatmentRequest,
    current_user: CurrentUser = Depends(get_current_user),
    handler: UpdateTreatmentCommandHandler = Depends(get_update_treatment_handler),
) -> TreatmentResponse:
    treatment = await handler.handle(
        UpdateTreatmentCommand(
            owner_id=current_user.user_id,
            treatment_id=treatment_id,
            completed=body.completed,
        )
    )
    return TreatmentResponse.from_domain(treatment)
