# 📄 File: plant_health/modules/plant_diagnosis/application/queries/plant_queries.py
# 🧭 Purpose (Layman Explanation):
# The "show me" requests: list my plants, open one plant, or see one plant's treatment steps.
#
# 🧪 Purpose (Technical Summary):
# CQRS query objects for the read side of the plant diagnosis module. Every query carries
# the owner id; scoping happens in the repository.
#
# 🔗 Dependencies:
# - pydantic
#
# 🔄 Connected Modules / Calls From:
# - application.handlers.query_handlers
# - presentation.api.v1.plants

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ListPlantsQuery(BaseModel):
    """All of an owner's plants, newest first."""

    model_config = ConfigDict(frozen=True)

    owner_id: UUID


class GetPlantQuery(BaseModel):
    """One plant with its treatments in step order."""

    model_config = ConfigDict(frozen=True)

    owner_id: UUID
    plant_id: UUID


class ListTreatmentsQuery(BaseModel):
    """The treatment steps of one plant in step order."""

    model_config = ConfigDict(frozen=True)

    owner_id: UUID
    plant_id: UUID
