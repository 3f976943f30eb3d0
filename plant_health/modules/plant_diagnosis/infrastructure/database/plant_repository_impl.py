# 📄 File: plant_health/modules/plant_diagnosis/infrastructure/database/plant_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Does the actual saving, finding, updating and deleting of plants and treatment steps in the
# database, always filtering by the owner so nobody can reach someone else's plants.
#
# 🧪 Purpose (Technical Summary):
# Concrete implementation of PlantRepository using SQLAlchemy async ORM. Writes only flush;
# the request-scoped session commits or rolls back the whole unit of work. Integrity
# violations map to ConflictError, other SQLAlchemy failures to DatabaseError.
#
# 🔗 Dependencies:
# - plant_diagnosis.domain.repositories.plant_repository (interface)
# - plant_diagnosis.domain.models (Plant, Treatment, drafts, DiagnosisResult)
# - plant_diagnosis.infrastructure.database.models (PlantModel, TreatmentModel)
# - SQLAlchemy async session and query operations
#
# 🔄 Connected Modules / Calls From:
# - presentation dependencies (repository wiring per request)
# - UploadDiagnosePipeline and command/query handlers (through the interface)

"""
Plant Repository Implementation

Handles the mapping between domain Plant/Treatment entities and the
PlantModel/TreatmentModel database records.

Features:
- Owner scoping in every query (foreign records look missing)
- Plant + treatment writes inside the caller's transaction
- Treatments embedded in step order on single-plant reads
- ORM and database-level cascade on delete
"""

import logging
from typing import List, Optional, Sequence
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from plant_health.modules.plant_diagnosis.domain.models.diagnosis import DiagnosisResult
from plant_health.modules.plant_diagnosis.domain.models.plant import (
    Plant,
    PlantDraft,
    Treatment,
    TreatmentDraft,
)
from plant_health.modules.plant_diagnosis.domain.repositories.plant_repository import PlantRepository
from plant_health.modules.plant_diagnosis.infrastructure.database.models import PlantModel, TreatmentModel
from plant_health.shared.core.exceptions import (
    ConflictError,
    DatabaseError,
    PlantNotFoundError,
    TreatmentNotFoundError,
)

logger = logging.getLogger(__name__)


class SqlAlchemyPlantRepository(PlantRepository):
    """
    SQLAlchemy implementation of the PlantRepository interface.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize the plant repository.

        Args:
            session: SQLAlchemy async session for database operations
        """
        self._session = session

    # =========================================================================
    # PLANTS
    # =========================================================================

    async def create_plant(self, owner_id: UUID, draft: PlantDraft) -> Plant:
        """
        Create a new plant in the database.

        Args:
            owner_id: Owning user's ID
            draft: Image URL, name and diagnosis

        Returns:
            Plant: Created plant with generated ID and timestamp

        Raises:
            ConflictError: If the generated ID collides
            DatabaseError: For other database errors
        """
        plant_model = PlantModel(
            user_id=owner_id,
            image_url=draft.image_url,
            plant_name=draft.name,
            diagnosis=draft.diagnosis.to_storage() if draft.diagnosis else None,
            treatments=[],
        )
        if draft.created_at is not None:
            plant_model.created_at = draft.created_at

        try:
            self._session.add(plant_model)
            await self._session.flush()
        except IntegrityError as e:
            logger.warning(f"Plant creation failed - identifier conflict for owner: {owner_id}")
            raise ConflictError(
                "Plant identifier already exists",
                resource_type="plant",
                conflict_field="id",
                existing_value=plant_model.id,
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Database error during plant creation: {e}")
            raise DatabaseError(f"Failed to create plant: {e}", operation="insert", table="plants") from e

        logger.info(f"Created plant with ID: {plant_model.id} for user: {owner_id}")
        return self._plant_to_domain(plant_model, include_treatments=False)

    async def list_plants(self, owner_id: UUID) -> List[Plant]:
        """
        List an owner's plants ordered by creation time, newest first.
        """
        stmt = (
            select(PlantModel)
            .where(PlantModel.user_id == owner_id)
            .order_by(PlantModel.created_at.desc(), PlantModel.id)
        )

        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Database error listing plants for user {owner_id}: {e}")
            raise DatabaseError(f"Failed to list plants: {e}", operation="select", table="plants") from e

        plants = [self._plant_to_domain(model, include_treatments=False) for model in result.scalars().all()]
        logger.debug(f"Listed {len(plants)} plants for user: {owner_id}")
        return plants

    async def get_plant(self, owner_id: UUID, plant_id: UUID) -> Plant:
        """
        Get a plant with its treatments in step order.

        Raises:
            PlantNotFoundError: If the plant does not exist for this owner
        """
        plant_model = await self._find_plant(owner_id, plant_id, with_treatments=True)
        if plant_model is None:
            logger.debug(f"Plant not found: {plant_id}")
            raise PlantNotFoundError(plant_id)

        return self._plant_to_domain(plant_model, include_treatments=True)

    async def delete_plant(self, owner_id: UUID, plant_id: UUID) -> None:
        """
        Delete a plant; its treatments go with it.

        Raises:
            PlantNotFoundError: If the plant does not exist (or was already deleted)
        """
        plant_model = await self._find_plant(owner_id, plant_id, with_treatments=True)
        if plant_model is None:
            raise PlantNotFoundError(plant_id)

        try:
            await self._session.delete(plant_model)
            await self._session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Database error deleting plant {plant_id}: {e}")
            raise DatabaseError(f"Failed to delete plant: {e}", operation="delete", table="plants") from e

        logger.info(f"Deleted plant {plant_id} for user: {owner_id}")

    # =========================================================================
    # TREATMENTS
    # =========================================================================

    async def create_treatments(
        self,
        owner_id: UUID,
        plant_id: UUID,
        drafts: Sequence[TreatmentDraft]
    ) -> List[Treatment]:
        """
        Insert treatment steps for an existing plant.

        Raises:
            PlantNotFoundError: If the plant does not exist for this owner
            ConflictError: If a step is already used on this plant
        """
        plant_model = await self._find_plant(owner_id, plant_id, with_treatments=True)
        if plant_model is None:
            raise PlantNotFoundError(plant_id)

        if not drafts:
            return []

        treatment_models = [
            TreatmentModel(
                step=draft.step,
                description=draft.description,
                scheduled_date=draft.scheduled_date,
                completed=False,
            )
            for draft in drafts
        ]

        try:
            plant_model.treatments.extend(treatment_models)
            await self._session.flush()
        except IntegrityError as e:
            logger.warning(f"Treatment creation failed - duplicate step on plant: {plant_id}")
            raise ConflictError(
                "Treatment step already exists for this plant",
                resource_type="treatment",
                conflict_field="step",
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Database error during treatment creation: {e}")
            raise DatabaseError(
                f"Failed to create treatments: {e}", operation="insert", table="treatments"
            ) from e

        logger.info(f"Created {len(treatment_models)} treatments for plant: {plant_id}")
        return [self._treatment_to_domain(model) for model in treatment_models]

    async def update_treatment(self, owner_id: UUID, treatment_id: UUID, completed: bool) -> Treatment:
        """
        Set a treatment's completion flag.

        Raises:
            TreatmentNotFoundError: If the treatment does not exist for this owner
        """
        stmt = (
            select(TreatmentModel)
            .join(PlantModel, TreatmentModel.plant_id == PlantModel.id)
            .where(TreatmentModel.id == treatment_id, PlantModel.user_id == owner_id)
        )

        try:
            result = await self._session.execute(stmt)
            treatment_model = result.scalar_one_or_none()

            if treatment_model is None:
                raise TreatmentNotFoundError(treatment_id)

            treatment_model.completed = completed
            await self._session.flush()
        except SQLAlchemyError as e:
            logger.error(f"Database error updating treatment {treatment_id}: {e}")
            raise DatabaseError(
                f"Failed to update treatment: {e}", operation="update", table="treatments"
            ) from e

        logger.info(f"Treatment {treatment_id} marked completed={completed}")
        return self._treatment_to_domain(treatment_model)

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _find_plant(
        self,
        owner_id: UUID,
        plant_id: UUID,
        with_treatments: bool
    ) -> Optional[PlantModel]:
        stmt = select(PlantModel).where(PlantModel.id == plant_id, PlantModel.user_id == owner_id)
        if with_treatments:
            stmt = stmt.options(selectinload(PlantModel.treatments))

        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Database error loading plant {plant_id}: {e}")
            raise DatabaseError(f"Failed to load plant: {e}", operation="select", table="plants") from e

        return result.scalar_one_or_none()

    def _plant_to_domain(self, model: PlantModel, include_treatments: bool) -> Plant:
        """
        Convert SQLAlchemy model to domain entity.

        Only touches ``model.treatments`` when asked, since the collection is
        not loaded on list queries and lazy loading is unavailable under asyncio.
        """
        treatments: List[Treatment] = []
        if include_treatments:
            treatments = sorted(
                (self._treatment_to_domain(t) for t in model.treatments),
                key=lambda treatment: treatment.step,
            )

        return Plant(
            id=model.id,
            owner_id=model.user_id,
            image_url=model.image_url,
            name=model.plant_name,
            diagnosis=self._load_diagnosis(model),
            created_at=model.created_at,
            treatments=treatments,
        )

    @staticmethod
    def _load_diagnosis(model: PlantModel) -> Optional[DiagnosisResult]:
        if not model.diagnosis:
            return None
        try:
            return DiagnosisResult.model_validate(model.diagnosis)
        except PydanticValidationError as e:
            # Rows written outside this service may not match the schema
            logger.warning(f"Stored diagnosis for plant {model.id} failed validation: {e}")
            return None

    @staticmethod
    def _treatment_to_domain(model: TreatmentModel) -> Treatment:
        return Treatment(
            id=model.id,
            plant_id=model.plant_id,
            step=model.step,
            description=model.description,
            scheduled_date=model.scheduled_date,
            completed=bool(model.completed),
        )
