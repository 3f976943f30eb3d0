# 📄 File: plant_health/modules/plant_diagnosis/infrastructure/external/openai_vision.py
# 🧭 Purpose (Layman Explanation):
# Sends the plant photo link to OpenAI's vision model together with a detailed set of
# instructions, then turns the model's written answer into a proper check-up report.
#
# 🧪 Purpose (Technical Summary):
# DiagnosisOracle implementation over the OpenAI chat-completions API. Builds the fixed
# plant-expert prompt with a high-detail image part, makes a single bounded call through the
# shared APIClient, extracts the JSON payload (fenced or bare) and validates it. Transport
# failures map to DiagnosisTransportError, malformed answers to DiagnosisParseError.
#
# 🔗 Dependencies:
# - plant_health.shared.infrastructure.external_apis.api_client (aiohttp transport)
# - diagnosis_parser (fence extraction + schema validation)
# - plant_diagnosis.domain.models.diagnosis (DiagnosisResult, ModelOutput)
#
# 🔄 Connected Modules / Calls From:
# - oracle_factory.build_diagnosis_oracle (DIAGNOSIS_PROVIDER=openai)
# - UploadDiagnosePipeline and the direct diagnosis endpoint (through DiagnosisOracle)

from typing import Any, Dict, Optional

from plant_health.modules.plant_diagnosis.domain.models.diagnosis import DiagnosisResult, ModelOutput
from plant_health.modules.plant_diagnosis.domain.services.gateways import DiagnosisOracle
from plant_health.modules.plant_diagnosis.infrastructure.external.diagnosis_parser import (
    parse_diagnosis_content,
)
from plant_health.shared.core.exceptions import (
    DiagnosisError,
    DiagnosisParseError,
    DiagnosisTransportError,
    ExternalAPIError,
)
from plant_health.shared.infrastructure.external_apis.api_client import APIClient
from plant_health.shared.utils.logging import get_logger

logger = get_logger(__name__)

CHAT_COMPLETIONS_ENDPOINT = "chat/completions"

DIAGNOSIS_PROMPT = """You are a plant health expert. Analyze this plant image and provide a diagnosis in JSON format.

Identify:
1. The plant name (common name)
2. Any diseases, pests, or health issues visible
3. Severity level: "low" (healthy/minor), "medium" (treatable concern), or "high" (serious/urgent)
4. Brief description of the issue (or healthy status)
5. List of possible causes (3-4 bullet points)
6. 3-5 specific actionable recommendations with timeline and priority
7. 4-5 care tips specific to THIS plant species (not generic)

Return ONLY valid JSON in this exact format:
{
  "plantName": "string",
  "confidence": 0.95,
  "issues": [
    {
      "name": "string (disease/pest name or 'Healthy' if no issues)",
      "severity": "low|medium|high",
      "description": "string",
      "causes": [
        "Cause 1",
        "Cause 2",
        "Cause 3"
      ]
    }
  ],
  "recommendations": [
    {
      "action": "string (specific action to take)",
      "timeline": "string (when to do it: 'Immediately', 'Daily', 'Weekly', etc.)",
      "priority": 1
    }
  ],
  "careTips": [
    {
      "icon": "💧",
      "title": "Short tip title",
      "description": "Specific care tip for this exact plant species"
    }
  ]
}

For careTips - BE EXTREMELY SPECIFIC TO THE EXACT PLANT IDENTIFIED:
- Use relevant emojis: 💧 (water), ☀️ (light), 🌡️ (temperature), 🌫️ (humidity), ✂️ (pruning), 🌱 (soil), 🔍 (monitoring), ⚠️ (urgent), 💡 (general)
- NEVER use generic phrases like "this plant", "most plants", "houseplants"
- ALWAYS use the exact plant name in tips (e.g., "Monstera deliciosa needs...", "Fiddle Leaf Figs prefer...")
- Include EXACT care requirements specific to this species:
  * Precise watering frequency (e.g., "Water your Pothos every 7-10 days")
  * Exact light levels (e.g., "Snake Plants thrive in low to bright indirect light")
  * Specific temperature ranges for this species (e.g., "Orchids prefer 65-75°F during day, 60-65°F at night")
  * Humidity percentages if relevant (e.g., "Calatheas need 60-70% humidity")
  * Species-specific quirks and needs (e.g., "Peace Lilies will droop when thirsty - a reliable watering indicator")
- Make each tip actionable and measurable
- Limit to 4-5 tips

If the plant is healthy, return severity "low" and issue name "Healthy" with general care causes."""


class OpenAIVisionDiagnosisOracle(DiagnosisOracle):
    """
    Diagnosis oracle backed by an OpenAI vision-capable chat model.

    Each call is a single request; timeouts come from the underlying
    APIClient session and nothing is retried or cached.
    """

    provider_name = "openai"

    def __init__(
        self,
        api_client: APIClient,
        model: str = "gpt-4o",
        max_tokens: int = 1000,
        api_key: Optional[str] = None,
    ):
        """
        Args:
            api_client: HTTP client pointed at the OpenAI API base URL
            model: Chat model name
            max_tokens: Reply token limit
            api_key: API key; the oracle refuses to run without one
        """
        self._api_client = api_client
        self._model = model
        self._max_tokens = max_tokens
        self._api_key = api_key

    def build_request(self, image_url: str) -> Dict[str, Any]:
        """Build the chat-completions request body for one image."""
        return {
            "model": self._model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": DIAGNOSIS_PROMPT},
                        {
                            "type": "image_url",
                            "image_url": {"url": image_url, "detail": "high"},
                        },
                    ],
                }
            ],
            "max_tokens": self._max_tokens,
        }

    async def diagnose(self, image_url: str) -> DiagnosisResult:
        """
        Diagnose the plant at ``image_url``.

        Raises:
            DiagnosisError: If no API key is configured
            DiagnosisTransportError: Timeout, connection failure or non-2xx reply
            DiagnosisParseError: Reply is missing content or is not a valid diagnosis
        """
        if not self._api_key:
            raise DiagnosisError("Diagnosis service is not configured", provider=self.provider_name)

        logger.info("Requesting plant diagnosis", extra={"provider": self.provider_name, "model": self._model})

        try:
            response = await self._api_client.post(CHAT_COMPLETIONS_ENDPOINT, data=self.build_request(image_url))
        except ExternalAPIError as e:
            raise DiagnosisTransportError(
                f"Diagnosis request failed: {e.message}",
                provider=self.provider_name,
                upstream_status=e.api_status_code,
                upstream_body=e.api_response,
            ) from e

        content = self._extract_content(response)
        diagnosis = parse_diagnosis_content(content, self.provider_name)
        diagnosis.model_output = ModelOutput(model=self._model, raw_response=content)

        logger.log_business_event(
            "plant_diagnosed",
            f"Diagnosed {diagnosis.plant_name} with {len(diagnosis.issues)} issue(s)",
            entity_type="diagnosis",
            extra={"provider": self.provider_name, "confidence": diagnosis.confidence},
        )
        return diagnosis

    def _extract_content(self, response: Dict[str, Any]) -> str:
        try:
            content = response["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise DiagnosisParseError(
                "Diagnosis reply has no message content",
                provider=self.provider_name,
                raw_content=str(response)[:2000],
            ) from e

        if not isinstance(content, str):
            raise DiagnosisParseError(
                "Diagnosis reply content is not text",
                provider=self.provider_name,
                raw_content=str(content)[:2000],
            )
        return content
