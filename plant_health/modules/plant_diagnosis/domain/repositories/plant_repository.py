# 📄 File: plant_health/modules/plant_diagnosis/domain/repositories/plant_repository.py
# 🧭 Purpose (Layman Explanation):
# Lists everything we can do with saved plants and their treatment steps (save, list, open,
# tick off a step, delete) and promises that people only ever see their own plants.
# 🧪 Purpose (Technical Summary):
# Abstract repository interface for the Plant aggregate and its Treatments. Every method
# takes the owner id and implementations must enforce owner scoping in the query itself.
# 🔗 Dependencies:
# abc, uuid, domain models
# 🔄 Connected Modules / Calls From:
# UploadDiagnosePipeline, command/query handlers, SqlAlchemyPlantRepository (implementation)

from abc import ABC, abstractmethod
from typing import List, Sequence
from uuid import UUID

from ..models.plant import Plant, PlantDraft, Treatment, TreatmentDraft


class PlantRepository(ABC):
    """
    Abstract repository interface for plant and treatment persistence.

    Records belonging to another owner behave exactly like missing records:
    they are never returned and operations on them raise ``NotFoundError``.
    """

    @abstractmethod
    async def create_plant(self, owner_id: UUID, draft: PlantDraft) -> Plant:
        """
        Create a new plant record.

        The store assigns ``id`` and ``created_at``.

        Args:
            owner_id: Owning user's ID
            draft: Image URL, name and diagnosis

        Returns:
            Plant: Created plant (without treatments)

        Raises:
            ConflictError: If the generated identifier collides
        """
        pass

    @abstractmethod
    async def create_treatments(
        self,
        owner_id: UUID,
        plant_id: UUID,
        drafts: Sequence[TreatmentDraft]
    ) -> List[Treatment]:
        """
        Insert a batch of treatment steps for a plant.

        Args:
            owner_id: Owning user's ID
            plant_id: Plant the steps belong to
            drafts: Steps in order; an empty batch is a no-op

        Returns:
            List[Treatment]: Created treatments, ``completed`` false

        Raises:
            NotFoundError: If the plant does not exist for this owner
            ConflictError: If a step number is already used on the plant
        """
        pass

    @abstractmethod
    async def list_plants(self, owner_id: UUID) -> List[Plant]:
        """
        List an owner's plants, newest first.

        Args:
            owner_id: Owning user's ID

        Returns:
            List[Plant]: Plants ordered by ``created_at`` descending; empty if none
        """
        pass

    @abstractmethod
    async def get_plant(self, owner_id: UUID, plant_id: UUID) -> Plant:
        """
        Get a plant with its treatments embedded, ordered by step ascending.

        Raises:
            NotFoundError: If the plant does not exist for this owner
        """
        pass

    @abstractmethod
    async def update_treatment(self, owner_id: UUID, treatment_id: UUID, completed: bool) -> Treatment:
        """
        Set the completion flag of a treatment step.

        Returns:
            Treatment: Updated treatment

        Raises:
            NotFoundError: If the treatment does not exist for this owner
        """
        pass

    @abstractmethod
    async def delete_plant(self, owner_id: UUID, plant_id: UUID) -> None:
        """
        Delete a plant and, by cascade, all of its treatments.

        Deleting an already deleted plant is an error, not a no-op.

        Raises:
            NotFoundError: If the plant does not exist for this owner
        """
        pass
