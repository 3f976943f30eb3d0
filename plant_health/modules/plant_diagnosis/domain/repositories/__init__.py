"""Repository interfaces."""

from .plant_repository import PlantRepository

__all__ = ["PlantRepository"]
