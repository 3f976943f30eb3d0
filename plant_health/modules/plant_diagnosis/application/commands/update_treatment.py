"""
Update Treatment Command

Marks a treatment step done or not done. Ownership is checked by the
repository, which treats someone else's treatment as missing.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UpdateTreatmentCommand(BaseModel):
    """Command for toggling a treatment step's completion flag."""

    model_config = ConfigDict(frozen=True)

    owner_id: UUID
    treatment_id: UUID
    completed: bool = Field(..., description="New completion state")
