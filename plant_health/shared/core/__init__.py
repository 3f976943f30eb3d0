"""
Core utilities package for the Plant Health application.
Provides exceptions, token verification, request dependencies and the event bus.
"""

from .exceptions import (
    ConflictError,
    DatabaseError,
    DiagnosisError,
    NotFoundError,
    PipelineError,
    PlantHealthException,
    StorageWriteError,
    ValidationError,
)

__all__ = [
    "PlantHealthException",
    "ValidationError",
    "StorageWriteError",
    "DiagnosisError",
    "NotFoundError",
    "ConflictError",
    "DatabaseError",
    "PipelineError",
]
