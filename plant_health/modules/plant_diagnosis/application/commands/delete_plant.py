"""
Delete Plant Command

Deletes a plant and, by cascade, its treatment steps. The stored photo is
left in place.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class DeletePlantCommand(BaseModel):
    """Command for deleting one of the owner's plants."""

    model_config = ConfigDict(frozen=True)

    owner_id: UUID
    plant_id: UUID
