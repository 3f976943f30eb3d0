"""
Diagnose Image Command

Runs the configured diagnosis oracle against an image that is already
reachable by URL, without storing anything.
"""

from pydantic import BaseModel, ConfigDict, Field


class DiagnoseImageCommand(BaseModel):
    """Command for a one-off diagnosis of an image URL."""

    model_config = ConfigDict(frozen=True)

    image_url: str = Field(..., min_length=1, description="Network-resolvable image reference")
