"""Tests for SqlAlchemyPlantRepository against an in-memory SQLite database."""

from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy import func, select, update

from plant_health.modules.plant_diagnosis.domain.models.plant import PlantDraft, TreatmentDraft
from plant_health.modules.plant_diagnosis.infrastructure.database.models import PlantModel, TreatmentModel
from plant_health.shared.core.exceptions import (
    ConflictError,
    NotFoundError,
    PlantNotFoundError,
    TreatmentNotFoundError,
)


def _drafts(count: int, start: date = date(2026, 3, 1)):
    return [
        TreatmentDraft(step=i + 1, description=f"Step {i + 1}", scheduled_date=start + timedelta(days=i))
        for i in range(count)
    ]


async def _create(repo, owner_id, diagnosis=None, name="Monstera"):
    return await repo.create_plant(
        owner_id,
        PlantDraft(image_url=f"https://img.test/{uuid4()}.png", name=name, diagnosis=diagnosis),
    )


async def test_create_plant_assigns_identity(plant_repo, owner_id, diagnosis):
    plant = await _create(plant_repo, owner_id, diagnosis)

    assert plant.id is not None
    assert plant.owner_id == owner_id
    assert plant.created_at is not None
    assert plant.diagnosis == diagnosis
    assert plant.treatments == []


async def test_get_plant_embeds_treatments_in_step_order(plant_repo, owner_id):
    plant = await _create(plant_repo, owner_id)
    drafts = _drafts(3)
    await plant_repo.create_treatments(owner_id, plant.id, list(reversed(drafts)))

    loaded = await plant_repo.get_plant(owner_id, plant.id)

    assert [t.step for t in loaded.treatments] == [1, 2, 3]
    assert [t.scheduled_date for t in loaded.treatments] == [d.scheduled_date for d in drafts]
    assert all(t.completed is False for t in loaded.treatments)
    assert all(t.plant_id == plant.id for t in loaded.treatments)


async def test_list_plants_newest_first(plant_repo, session, owner_id):
    older = await _create(plant_repo, owner_id, name="Older")
    newer = await _create(plant_repo, owner_id, name="Newer")
    await session.execute(
        update(PlantModel)
        .where(PlantModel.id == older.id)
        .values(created_at=datetime.now(timezone.utc) - timedelta(days=1))
    )

    plants = await plant_repo.list_plants(owner_id)

    assert [p.id for p in plants] == [newer.id, older.id]
    assert all(p.treatments == [] for p in plants)


async def test_list_plants_empty(plant_repo, owner_id):
    assert await plant_repo.list_plants(owner_id) == []


async def test_other_owners_plants_look_missing(plant_repo, owner_id):
    plant = await _create(plant_repo, owner_id)
    stranger = uuid4()

    assert await plant_repo.list_plants(stranger) == []
    with pytest.raises(PlantNotFoundError):
        await plant_repo.get_plant(stranger, plant.id)
    with pytest.raises(PlantNotFoundError):
        await plant_repo.delete_plant(stranger, plant.id)
    with pytest.raises(PlantNotFoundError):
        await plant_repo.create_treatments(stranger, plant.id, _drafts(1))


async def test_create_treatments_for_unknown_plant(plant_repo, owner_id):
    with pytest.raises(NotFoundError):
        await plant_repo.create_treatments(owner_id, uuid4(), _drafts(2))


async def test_create_treatments_empty_batch(plant_repo, owner_id):
    plant = await _create(plant_repo, owner_id)

    assert await plant_repo.create_treatments(owner_id, plant.id, []) == []


async def test_duplicate_step_is_a_conflict(plant_repo, owner_id):
    plant = await _create(plant_repo, owner_id)
    await plant_repo.create_treatments(owner_id, plant.id, _drafts(2))

    with pytest.raises(ConflictError):
        await plant_repo.create_treatments(owner_id, plant.id, _drafts(1))


async def test_update_treatment_toggles_completion(plant_repo, owner_id):
    plant = await _create(plant_repo, owner_id)
    treatments = await plant_repo.create_treatments(owner_id, plant.id, _drafts(2))

    updated = await plant_repo.update_treatment(owner_id, treatments[1].id, True)
    assert updated.completed is True

    reverted = await plant_repo.update_treatment(owner_id, treatments[1].id, False)
    assert reverted.completed is False


async def test_update_treatment_scoped_to_owner(plant_repo, owner_id):
    plant = await _create(plant_repo, owner_id)
    treatments = await plant_repo.create_treatments(owner_id, plant.id, _drafts(1))

    with pytest.raises(TreatmentNotFoundError):
        await plant_repo.update_treatment(uuid4(), treatments[0].id, True)
    with pytest.raises(TreatmentNotFoundError):
        await plant_repo.update_treatment(owner_id, uuid4(), True)


async def test_delete_cascades_and_second_delete_fails(plant_repo, session, owner_id):
    plant = await _create(plant_repo, owner_id)
    await plant_repo.create_treatments(owner_id, plant.id, _drafts(3))

    await plant_repo.delete_plant(owner_id, plant.id)

    remaining = await session.scalar(
        select(func.count()).select_from(TreatmentModel).where(TreatmentModel.plant_id == plant.id)
    )
    assert remaining == 0
    with pytest.raises(PlantNotFoundError):
        await plant_repo.get_plant(owner_id, plant.id)
    with pytest.raises(PlantNotFoundError):
        await plant_repo.delete_plant(owner_id, plant.id)


async def test_unreadable_stored_diagnosis_is_dropped(plant_repo, session, owner_id):
    plant = await _create(plant_repo, owner_id)
    await session.execute(
        update(PlantModel).where(PlantModel.id == plant.id).values(diagnosis={"confidence": "unknown"})
    )
    session.expire_all()

    loaded = await plant_repo.get_plant(owner_id, plant.id)

    assert loaded.diagnosis is None
