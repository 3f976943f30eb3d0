"""Domain models for plant diagnosis."""

from .diagnosis import (
    CareTip,
    DiagnosisResult,
    ModelOutput,
    PlantIssue,
    Recommendation,
    Severity,
    fallback_diagnosis,
)
from .plant import Plant, PlantDraft, Treatment, TreatmentDraft

__all__ = [
    "CareTip",
    "DiagnosisResult",
    "ModelOutput",
    "PlantIssue",
    "Recommendation",
    "Severity",
    "fallback_diagnosis",
    "Plant",
    "PlantDraft",
    "Treatment",
    "TreatmentDraft",
]
