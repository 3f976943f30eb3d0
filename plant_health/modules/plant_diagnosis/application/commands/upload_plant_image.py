# 📄 File: plant_health/modules/plant_diagnosis/application/commands/upload_plant_image.py
# 🧭 Purpose (Layman Explanation):
# The "diagnose my plant" request: who is asking and which photo they sent.
#
# 🧪 Purpose (Technical Summary):
# CQRS command carrying the owner id and raw image bytes into the upload-diagnose-persist
# pipeline. An empty image is rejected by the pipeline with ValidationError before any
# stage runs.
#
# 🔗 Dependencies:
# - pydantic for command validation
#
# 🔄 Connected Modules / Calls From:
# - application.handlers.command_handlers (UploadPlantImageCommandHandler)
# - presentation.api.v1.plants (POST /plants)

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UploadPlantImageCommand(BaseModel):
    """
    Command for uploading and diagnosing a plant photo.

    ``image_bytes`` is left out of the repr so raw uploads never end up in logs.
    """

    model_config = ConfigDict(frozen=True)

    owner_id: UUID = Field(..., description="Authenticated owner")
    image_bytes: bytes = Field(b"", repr=False, description="Raw image content")
    filename: Optional[str] = Field(None, description="Original filename")
