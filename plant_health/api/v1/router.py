# 📄 File: plant_health/api/v1/router.py
# 🧭 Purpose (Layman Explanation):
# A traffic director for version 1 of the API, sending plant, treatment and diagnosis requests
# to the right handlers.
# 🧪 Purpose (Technical Summary):
# API v1 router aggregation combining the plant diagnosis module routers under their
# resource prefixes. Mounted by the application factory under API_V1_PREFIX.
# 🔗 Dependencies:
# FastAPI, plant_diagnosis.presentation.api.v1
# 🔄 Connected Modules / Calls From:
# plant_health.main

import logging

from fastapi import APIRouter

from plant_health.modules.plant_diagnosis.presentation.api.v1 import (
    diagnoses_router,
    plants_router,
    treatments_router,
)

logger = logging.getLogger(__name__)

# Create main API v1 router
api_v1_router = APIRouter()

api_v1_router.include_router(plants_router, prefix="/plants", tags=["Plants"])
api_v1_router.include_router(treatments_router, prefix="/treatments", tags=["Treatments"])
api_v1_router.include_router(diagnoses_router, prefix="/diagnoses", tags=["Diagnoses"])
