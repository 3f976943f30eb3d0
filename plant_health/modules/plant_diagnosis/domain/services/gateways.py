# 📄 File: plant_health/modules/plant_diagnosis/domain/services/gateways.py
# 🧭 Purpose (Layman Explanation):
# Describes the two outside helpers a diagnosis needs (a place to keep the photo and an AI
# "plant doctor") without caring which company actually provides them.
# 🧪 Purpose (Technical Summary):
# Abstract ports for the object store gateway and the diagnosis oracle. Infrastructure
# adapters implement them; the upload pipeline receives them by constructor injection.
# 🔗 Dependencies:
# abc, uuid, diagnosis models
# 🔄 Connected Modules / Calls From:
# UploadDiagnosePipeline, SupabasePlantImageStore, diagnosis oracle implementations, tests (fakes)

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from ..models.diagnosis import DiagnosisResult


class ImageStore(ABC):
    """
    Object store gateway for plant photos.
    """

    @abstractmethod
    async def upload(self, owner_id: UUID, image_bytes: bytes, filename: Optional[str] = None) -> str:
        """
        Store an image and return a durable, publicly readable URL.

        Objects are namespaced by owner. A single attempt is made; the
        diagnosis oracle fetches the image through the returned URL without
        further authentication.

        Args:
            owner_id: Owning user's ID
            image_bytes: Raw image bytes
            filename: Original filename, informational only

        Returns:
            str: Public image URL

        Raises:
            StorageWriteError: If the write fails (quota, network, permission)
            ValidationError: If no image bytes were supplied
        """
        pass


class DiagnosisOracle(ABC):
    """
    External service that identifies a plant and its health issues from an image.
    """

    provider_name: str = "oracle"

    @abstractmethod
    async def diagnose(self, image_url: str) -> DiagnosisResult:
        """
        Diagnose the plant shown at ``image_url``.

        Every call is a fresh request; results are never cached.

        Args:
            image_url: Network-resolvable image reference

        Returns:
            DiagnosisResult: Validated diagnosis

        Raises:
            DiagnosisTransportError: If the oracle is unreachable or answers non-2xx
            DiagnosisParseError: If the answer is not a valid diagnosis
            DiagnosisError: If the oracle is not configured
        """
        pass
