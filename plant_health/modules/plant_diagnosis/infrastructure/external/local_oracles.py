"""
Diagnosis oracles that never leave the process.

- StaticDiagnosisOracle: always the general-care diagnosis
- MockDiagnosisOracle: one of a few canned diagnoses, for local development
- FallbackDiagnosisOracle: wraps another oracle and substitutes a fallback
  result when it raises ``DiagnosisError``
"""

import random
from typing import Callable, List, Optional

from plant_health.modules.plant_diagnosis.domain.models.diagnosis import (
    FALLBACK_MODEL,
    DiagnosisResult,
    ModelOutput,
    PlantIssue,
    Recommendation,
    Severity,
    fallback_diagnosis,
)
from plant_health.modules.plant_diagnosis.domain.services.gateways import DiagnosisOracle
from plant_health.shared.core.exceptions import DiagnosisError
from plant_health.shared.utils.logging import get_logger

logger = get_logger(__name__)


class StaticDiagnosisOracle(DiagnosisOracle):
    """Returns the general-care fallback diagnosis for every image."""

    provider_name = "static"

    async def diagnose(self, image_url: str) -> DiagnosisResult:
        return fallback_diagnosis()


def _mock_diagnoses() -> List[DiagnosisResult]:
    return [
        DiagnosisResult(
            plant_name="Tomato",
            confidence=0.89,
            issues=[
                PlantIssue(
                    name="Early Blight",
                    severity=Severity.MEDIUM,
                    description="Fungal disease causing dark spots on leaves",
                )
            ],
            recommendations=[
                Recommendation(action="Remove affected leaves and dispose of them properly", timeline="Immediately", priority=1),
                Recommendation(action="Apply copper-based fungicide every 7-10 days", timeline="Week 1-3", priority=2),
                Recommendation(action="Ensure proper spacing between plants for air circulation", timeline="Ongoing", priority=3),
                Recommendation(action="Water at the base of plants, avoid wetting leaves", timeline="Daily", priority=2),
            ],
        ),
        DiagnosisResult(
            plant_name="Rose",
            confidence=0.92,
            issues=[
                PlantIssue(
                    name="Powdery Mildew",
                    severity=Severity.LOW,
                    description="White powdery coating on leaves and stems",
                )
            ],
            recommendations=[
                Recommendation(action="Spray affected areas with neem oil solution", timeline="Every 3 days for 2 weeks", priority=1),
                Recommendation(action="Improve air circulation around the plant", timeline="Immediately", priority=2),
                Recommendation(action="Reduce nitrogen fertilizer application", timeline="Next feeding cycle", priority=3),
            ],
        ),
        DiagnosisResult(
            plant_name="Snake Plant",
            confidence=0.95,
            issues=[
                PlantIssue(
                    name="Root Rot",
                    severity=Severity.HIGH,
                    description="Overwatering causing root decay",
                )
            ],
            recommendations=[
                Recommendation(action="Remove plant from pot and trim rotted roots", timeline="Immediately", priority=1),
                Recommendation(action="Repot in fresh, well-draining soil", timeline="Day 1", priority=2),
                Recommendation(action="Reduce watering frequency to once every 2-3 weeks", timeline="Ongoing", priority=3),
            ],
        ),
    ]


class MockDiagnosisOracle(DiagnosisOracle):
    """
    Picks one of three canned diagnoses at random.

    Pass a seeded ``random.Random`` for repeatable picks in tests.
    """

    provider_name = "mock"

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    async def diagnose(self, image_url: str) -> DiagnosisResult:
        diagnosis = self._rng.choice(_mock_diagnoses())
        logger.debug(f"Mock diagnosis selected: {diagnosis.plant_name}")
        return diagnosis


class FallbackDiagnosisOracle(DiagnosisOracle):
    """
    Wraps a primary oracle and substitutes a fallback diagnosis on failure.

    Only ``DiagnosisError`` (and subclasses) triggers the fallback; anything
    else propagates. Substituted results carry ``FALLBACK_MODEL`` as their
    ``model_output.model`` and are logged as a warning.
    """

    def __init__(
        self,
        primary: DiagnosisOracle,
        fallback: Callable[[], DiagnosisResult] = fallback_diagnosis,
    ):
        self._primary = primary
        self._fallback = fallback
        self.provider_name = primary.provider_name

    @property
    def primary(self) -> DiagnosisOracle:
        return self._primary

    async def diagnose(self, image_url: str) -> DiagnosisResult:
        try:
            return await self._primary.diagnose(image_url)
        except DiagnosisError as e:
            logger.warning(
                "Diagnosis failed, using general-care fallback",
                extra={
                    "provider": self._primary.provider_name,
                    "error_code": e.error_code,
                    "error": e.message,
                },
            )
            diagnosis = self._fallback()
            diagnosis.model_output = ModelOutput(model=FALLBACK_MODEL)
            return diagnosis
