# 📄 File: plant_health/modules/plant_diagnosis/infrastructure/external/worker_oracle.py
# 🧭 Purpose (Layman Explanation):
# Asks a separately deployed "diagnosis worker" to look at the plant photo, for setups where
# the AI key lives on that worker instead of on this server.
#
# 🧪 Purpose (Technical Summary):
# DiagnosisOracle over the worker contract: POST {"imageUrl": url} to the worker root and
# receive the diagnosis object as JSON. Non-2xx replies and transport failures become
# DiagnosisTransportError; a reply that is not a valid diagnosis becomes DiagnosisParseError.
#
# 🔗 Dependencies:
# - plant_health.shared.infrastructure.external_apis.api_client
# - diagnosis_parser.validate_diagnosis_payload
#
# 🔄 Connected Modules / Calls From:
# - oracle_factory.build_diagnosis_oracle (DIAGNOSIS_PROVIDER=worker)

from plant_health.modules.plant_diagnosis.domain.models.diagnosis import DiagnosisResult
from plant_health.modules.plant_diagnosis.domain.services.gateways import DiagnosisOracle
from plant_health.modules.plant_diagnosis.infrastructure.external.diagnosis_parser import (
    validate_diagnosis_payload,
)
from plant_health.shared.core.exceptions import DiagnosisTransportError, ExternalAPIError
from plant_health.shared.infrastructure.external_apis.api_client import APIClient
from plant_health.shared.utils.logging import get_logger

logger = get_logger(__name__)


class RemoteWorkerDiagnosisOracle(DiagnosisOracle):
    """Diagnosis oracle that delegates to a remote diagnosis worker."""

    provider_name = "worker"

    def __init__(self, api_client: APIClient):
        self._api_client = api_client

    async def diagnose(self, image_url: str) -> DiagnosisResult:
        try:
            payload = await self._api_client.post("", data={"imageUrl": image_url})
        except ExternalAPIError as e:
            raise DiagnosisTransportError(
                f"Diagnosis worker request failed: {e.message}",
                provider=self.provider_name,
                upstream_status=e.api_status_code,
                upstream_body=e.api_response,
            ) from e

        diagnosis = validate_diagnosis_payload(payload, self.provider_name, raw_content=str(payload)[:2000])
        logger.info(
            f"Diagnosis worker identified {diagnosis.plant_name}",
            extra={"provider": self.provider_name, "issues": len(diagnosis.issues)},
        )
        return diagnosis
