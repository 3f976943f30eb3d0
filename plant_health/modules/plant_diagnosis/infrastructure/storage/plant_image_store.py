"""
Supabase-backed ImageStore for the plant diagnosis module.
Adapts the shared SupabaseStorageClient to the domain's ImageStore port.
"""

from typing import Optional
from uuid import UUID

from plant_health.modules.plant_diagnosis.domain.services.gateways import ImageStore
from plant_health.shared.infrastructure.storage.supabase_storage import SupabaseStorageClient


class SupabasePlantImageStore(ImageStore):
    """Stores plant photos in the public Supabase bucket, one folder per owner."""

    def __init__(self, storage_client: SupabaseStorageClient):
        self._storage = storage_client

    async def upload(self, owner_id: UUID, image_bytes: bytes, filename: Optional[str] = None) -> str:
        stored = await self._storage.upload_image(str(owner_id), image_bytes, filename)
        return stored.public_url
