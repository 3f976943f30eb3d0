# 📄 File: plant_health/modules/plant_diagnosis/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# Defines the two database tables: one row per saved plant (photo link, name, AI report) and
# one row per treatment step, which disappear automatically when their plant is deleted.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM models for the `plants` and `treatments` tables (stable external schema),
# with a portable UUID type, JSONB diagnosis on PostgreSQL, ON DELETE CASCADE and a unique
# (plant_id, step) constraint.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - plant_health.shared.config.database (DatabaseBase)
#
# 🔄 Connected Modules / Calls From:
# - plant_repository_impl.py (CRUD operations)
# - migrations/env.py (autogenerate metadata)

"""
SQLAlchemy Models for Plant Diagnosis

Models:
- PlantModel: A diagnosed plant photo owned by one user
- TreatmentModel: One dated, trackable treatment step of a plant
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from plant_health.modules.plant_diagnosis.domain.models.diagnosis import PLANT_NAME_MAX_LENGTH
from plant_health.shared.config.database import DatabaseBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# PLANT MODEL
# =============================================================================

class PlantModel(DatabaseBase):
    """
    SQLAlchemy model for a diagnosed plant.

    ``created_at`` is assigned by the application with microsecond precision
    so newest-first ordering is stable for uploads made in quick succession.
    """
    __tablename__ = "plants"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), nullable=False, index=True)
    image_url = Column(Text, nullable=False)
    plant_name = Column(String(PLANT_NAME_MAX_LENGTH), nullable=True)
    diagnosis = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    treatments = relationship(
        "TreatmentModel",
        back_populates="plant",
        cascade="all, delete-orphan",
        order_by="TreatmentModel.step",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<PlantModel(id={self.id}, user_id={self.user_id}, plant_name={self.plant_name})>"


# =============================================================================
# TREATMENT MODEL
# =============================================================================

class TreatmentModel(DatabaseBase):
    """
    SQLAlchemy model for a treatment step.

    The ``date`` column is exposed as ``scheduled_date`` in Python.
    """
    __tablename__ = "treatments"
    __table_args__ = (
        UniqueConstraint("plant_id", "step", name="uq_treatments_plant_id_step"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    plant_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("plants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    step = Column(Integer, nullable=False)
    description = Column(Text, nullable=False)
    scheduled_date = Column("date", Date, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)

    plant = relationship("PlantModel", back_populates="treatments")

    def __repr__(self) -> str:
        return f"<TreatmentModel(id={self.id}, plant_id={self.plant_id}, step={self.step})>"
