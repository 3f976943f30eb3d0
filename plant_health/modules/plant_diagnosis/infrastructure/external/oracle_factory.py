# 📄 File: plant_health/modules/plant_diagnosis/infrastructure/external/oracle_factory.py
# 🧭 Purpose (Layman Explanation):
# Picks which "plant doctor" the app talks to (OpenAI, a remote worker, or a built-in stand-in)
# based on configuration, and whether to fall back to general care tips when it fails.
#
# 🧪 Purpose (Technical Summary):
# Builds the configured DiagnosisOracle from Settings and the shared diagnosis APIClient,
# wrapping it in FallbackDiagnosisOracle when DIAGNOSIS_FALLBACK_ENABLED is set.
#
# 🔗 Dependencies:
# - plant_health.shared.config.settings
# - openai_vision, worker_oracle, local_oracles
#
# 🔄 Connected Modules / Calls From:
# - plant_health.main (diagnosis API client base URL)
# - presentation.dependencies (oracle per request)

from typing import Optional

from plant_health.modules.plant_diagnosis.domain.services.gateways import DiagnosisOracle
from plant_health.modules.plant_diagnosis.infrastructure.external.local_oracles import (
    FallbackDiagnosisOracle,
    MockDiagnosisOracle,
    StaticDiagnosisOracle,
)
from plant_health.modules.plant_diagnosis.infrastructure.external.openai_vision import (
    OpenAIVisionDiagnosisOracle,
)
from plant_health.modules.plant_diagnosis.infrastructure.external.worker_oracle import (
    RemoteWorkerDiagnosisOracle,
)
from plant_health.shared.config.settings import Settings
from plant_health.shared.core.exceptions import DiagnosisError
from plant_health.shared.infrastructure.external_apis.api_client import APIClient


def diagnosis_api_base_url(settings: Settings) -> Optional[str]:
    """
    Base URL the diagnosis APIClient should target, or None when the
    configured provider makes no HTTP calls.
    """
    if settings.DIAGNOSIS_PROVIDER == "openai":
        return settings.OPENAI_API_URL
    if settings.DIAGNOSIS_PROVIDER == "worker":
        return settings.DIAGNOSIS_WORKER_URL
    return None


def create_diagnosis_api_client(settings: Settings) -> Optional[APIClient]:
    """Create the (uninitialized) HTTP client for the configured provider."""
    base_url = diagnosis_api_base_url(settings)
    if not base_url:
        return None

    api_key = settings.OPENAI_API_KEY if settings.DIAGNOSIS_PROVIDER == "openai" else None
    return APIClient(
        base_url=base_url,
        api_name=f"diagnosis-{settings.DIAGNOSIS_PROVIDER}",
        api_key=api_key,
        timeout=settings.DIAGNOSIS_TIMEOUT_SECONDS,
    )


def build_diagnosis_oracle(settings: Settings, api_client: Optional[APIClient]) -> DiagnosisOracle:
    """
    Build the configured diagnosis oracle.

    Args:
        settings: Application settings
        api_client: Shared diagnosis HTTP client (None for local providers)

    Returns:
        DiagnosisOracle: Provider oracle, wrapped with the fallback policy when enabled

    Raises:
        DiagnosisError: If an HTTP provider is selected but no client is available
    """
    provider = settings.DIAGNOSIS_PROVIDER

    if provider == "mock":
        oracle: DiagnosisOracle = MockDiagnosisOracle()
    elif provider == "static":
        oracle = StaticDiagnosisOracle()
    elif api_client is None:
        oracle = _UnconfiguredOracle(provider)
    elif provider == "worker":
        oracle = RemoteWorkerDiagnosisOracle(api_client)
    else:
        oracle = OpenAIVisionDiagnosisOracle(
            api_client,
            model=settings.OPENAI_MODEL,
            max_tokens=settings.OPENAI_MAX_TOKENS,
            api_key=settings.OPENAI_API_KEY,
        )

    if settings.DIAGNOSIS_FALLBACK_ENABLED:
        return FallbackDiagnosisOracle(oracle)
    return oracle


class _UnconfiguredOracle(DiagnosisOracle):
    """Stands in for an HTTP provider whose base URL is not configured."""

    def __init__(self, provider: str):
        self.provider_name = provider

    async def diagnose(self, image_url: str):
        raise DiagnosisError("Diagnosis service is not configured", provider=self.provider_name)
