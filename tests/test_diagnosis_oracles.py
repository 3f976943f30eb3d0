"""
Tests for the diagnosis oracles: OpenAI vision and remote worker over a local
aiohttp server, the in-process oracles, the fallback policy and the factory.
"""

import asyncio
import json
import random

import pytest
from aiohttp import test_utils, web

from conftest import FakeDiagnosisOracle, make_diagnosis_payload
from plant_health.modules.plant_diagnosis.domain.models.diagnosis import FALLBACK_ISSUE_NAME, PLANT_NAME_MAX_LENGTH
from plant_health.modules.plant_diagnosis.infrastructure.external.diagnosis_parser import (
    extract_structured_payload,
    parse_diagnosis_content,
)
from plant_health.modules.plant_diagnosis.infrastructure.external.local_oracles import (
    FallbackDiagnosisOracle,
    MockDiagnosisOracle,
    StaticDiagnosisOracle,
)
from plant_health.modules.plant_diagnosis.infrastructure.external.openai_vision import (
    DIAGNOSIS_PROMPT,
    OpenAIVisionDiagnosisOracle,
)
from plant_health.modules.plant_diagnosis.infrastructure.external.oracle_factory import (
    build_diagnosis_oracle,
    create_diagnosis_api_client,
)
from plant_health.modules.plant_diagnosis.infrastructure.external.worker_oracle import (
    RemoteWorkerDiagnosisOracle,
)
from plant_health.shared.config.settings import Settings
from plant_health.shared.core.exceptions import (
    DiagnosisError,
    DiagnosisParseError,
    DiagnosisTransportError,
)
from plant_health.shared.infrastructure.external_apis.api_client import APIClient

IMAGE_URL = "https://test-project.supabase.co/storage/v1/object/public/plant-images/u/1.jpg"


def _chat_reply(content):
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


class UpstreamState:
    """What the fake upstream answers, and what it received."""

    def __init__(self):
        self.status = 200
        self.body = None
        self.delay = 0.0
        self.requests = []
        self.headers = []


@pytest.fixture()
async def upstream():
    state = UpstreamState()

    async def respond(request: web.Request) -> web.Response:
        state.requests.append(await request.json())
        state.headers.append(dict(request.headers))
        if state.delay:
            await asyncio.sleep(state.delay)
        if isinstance(state.body, str):
            return web.Response(status=state.status, text=state.body)
        return web.json_response(state.body, status=state.status)

    app = web.Application()
    app.router.add_post("/v1/chat/completions", respond)
    app.router.add_post("/diagnose", respond)

    server = test_utils.TestServer(app)
    await server.start_server()
    yield server, state
    await server.close()


@pytest.fixture()
async def openai_client(upstream):
    server, _ = upstream
    client = APIClient(str(server.make_url("/v1")), "diagnosis-openai", api_key="sk-test", timeout=5)
    await client.initialize()
    yield client
    await client.close()


@pytest.fixture()
async def worker_client(upstream):
    server, _ = upstream
    client = APIClient(str(server.make_url("/diagnose")), "diagnosis-worker", timeout=5)
    await client.initialize()
    yield client
    await client.close()


# ========================== Parser =========================================


@pytest.mark.parametrize(
    "content",
    [
        'Here you go:\n```json\n{"plantName": "Fern"}\n```\nHope it helps',
        '```\n{"plantName": "Fern"}\n```',
        '  {"plantName": "Fern"}  ',
    ],
)
def test_extract_structured_payload(content):
    assert json.loads(extract_structured_payload(content)) == {"plantName": "Fern"}


@pytest.mark.parametrize("content", ["", "   ", "I cannot see a plant", "[1, 2]", '{"confidence": 0.4}'])
def test_parse_rejects_bad_content(content):
    with pytest.raises(DiagnosisParseError):
        parse_diagnosis_content(content, "openai")


def test_parse_rejects_overlong_plant_name():
    content = json.dumps({**make_diagnosis_payload(), "plantName": "x" * (PLANT_NAME_MAX_LENGTH + 1)})

    with pytest.raises(DiagnosisParseError) as exc_info:
        parse_diagnosis_content(content, "openai")

    assert "plantName" in exc_info.value.details["errors"]


async def test_overlong_plant_name_from_worker_falls_back(upstream, worker_client):
    _, state = upstream
    state.body = {**make_diagnosis_payload(), "plantName": "Monstera " * 40}

    diagnosis = await FallbackDiagnosisOracle(RemoteWorkerDiagnosisOracle(worker_client)).diagnose(IMAGE_URL)

    assert diagnosis.is_fallback
    assert diagnosis.plant_name == "Plant"


# ========================== OpenAI vision ==================================


async def test_fenced_and_bare_replies_parse_identically(upstream, openai_client):
    _, state = upstream
    oracle = OpenAIVisionDiagnosisOracle(openai_client, model="gpt-4o", api_key="sk-test")
    payload = json.dumps(make_diagnosis_payload())

    state.body = _chat_reply(f"```json\n{payload}\n```")
    fenced = await oracle.diagnose(IMAGE_URL)
    state.body = _chat_reply(payload)
    bare = await oracle.diagnose(IMAGE_URL)

    assert fenced.model_dump(exclude={"model_output"}) == bare.model_dump(exclude={"model_output"})
    assert fenced.plant_name == "Monstera deliciosa"
    assert fenced.model_output.model == "gpt-4o"


async def test_request_carries_prompt_and_image(upstream, openai_client):
    _, state = upstream
    state.body = _chat_reply(json.dumps(make_diagnosis_payload()))
    oracle = OpenAIVisionDiagnosisOracle(openai_client, model="gpt-4o", max_tokens=1000, api_key="sk-test")

    await oracle.diagnose(IMAGE_URL)

    request = state.requests[0]
    parts = request["messages"][0]["content"]
    assert request["model"] == "gpt-4o"
    assert request["max_tokens"] == 1000
    assert parts[0] == {"type": "text", "text": DIAGNOSIS_PROMPT}
    assert parts[1]["image_url"] == {"url": IMAGE_URL, "detail": "high"}
    assert state.headers[0]["Authorization"] == "Bearer sk-test"


async def test_non_2xx_is_transport_error_with_upstream_details(upstream, openai_client):
    _, state = upstream
    state.status = 429
    state.body = '{"error": {"message": "Rate limit reached"}}'
    oracle = OpenAIVisionDiagnosisOracle(openai_client, api_key="sk-test")

    with pytest.raises(DiagnosisTransportError) as exc_info:
        await oracle.diagnose(IMAGE_URL)

    assert exc_info.value.upstream_status == 429
    assert "Rate limit reached" in exc_info.value.upstream_body
    assert exc_info.value.details["provider"] == "openai"


async def test_malformed_reply_is_parse_error(upstream, openai_client):
    _, state = upstream
    state.body = _chat_reply("Sorry, I can only describe the image: a green leaf.")
    oracle = OpenAIVisionDiagnosisOracle(openai_client, api_key="sk-test")

    with pytest.raises(DiagnosisParseError):
        await oracle.diagnose(IMAGE_URL)


async def test_reply_without_choices_is_parse_error(upstream, openai_client):
    _, state = upstream
    state.body = {"choices": []}
    oracle = OpenAIVisionDiagnosisOracle(openai_client, api_key="sk-test")

    with pytest.raises(DiagnosisParseError):
        await oracle.diagnose(IMAGE_URL)


async def test_missing_api_key_is_not_configured(upstream, openai_client):
    _, state = upstream
    oracle = OpenAIVisionDiagnosisOracle(openai_client, api_key=None)

    with pytest.raises(DiagnosisError) as exc_info:
        await oracle.diagnose(IMAGE_URL)

    assert exc_info.value.error_code == "DIAGNOSIS_ERROR"
    assert state.requests == []


async def test_timeout_is_transport_error(upstream):
    server, state = upstream
    state.delay = 2
    state.body = _chat_reply("{}")
    client = APIClient(str(server.make_url("/v1")), "diagnosis-openai", api_key="sk-test", timeout=1)
    oracle = OpenAIVisionDiagnosisOracle(client, api_key="sk-test")

    try:
        with pytest.raises(DiagnosisTransportError) as exc_info:
            await oracle.diagnose(IMAGE_URL)
    finally:
        await client.close()

    assert exc_info.value.upstream_status is None


# ========================== Remote worker ==================================


async def test_worker_returns_validated_diagnosis(upstream, worker_client):
    _, state = upstream
    state.body = make_diagnosis_payload()

    diagnosis = await RemoteWorkerDiagnosisOracle(worker_client).diagnose(IMAGE_URL)

    assert diagnosis.plant_name == "Monstera deliciosa"
    assert state.requests == [{"imageUrl": IMAGE_URL}]


async def test_worker_error_status(upstream, worker_client):
    _, state = upstream
    state.status = 500
    state.body = {"error": "OpenAI API key not configured"}

    with pytest.raises(DiagnosisTransportError) as exc_info:
        await RemoteWorkerDiagnosisOracle(worker_client).diagnose(IMAGE_URL)

    assert exc_info.value.upstream_status == 500


async def test_worker_invalid_payload(upstream, worker_client):
    _, state = upstream
    state.body = {"issues": []}

    with pytest.raises(DiagnosisParseError):
        await RemoteWorkerDiagnosisOracle(worker_client).diagnose(IMAGE_URL)


# ========================== Local oracles and fallback =====================


async def test_static_oracle_returns_fallback():
    diagnosis = await StaticDiagnosisOracle().diagnose(IMAGE_URL)

    assert diagnosis.issues[0].name == FALLBACK_ISSUE_NAME
    assert not diagnosis.is_fallback


async def test_mock_oracle_is_repeatable_with_seed():
    first = await MockDiagnosisOracle(random.Random(7)).diagnose(IMAGE_URL)
    second = await MockDiagnosisOracle(random.Random(7)).diagnose(IMAGE_URL)

    assert first == second
    assert first.plant_name in {"Tomato", "Rose", "Snake Plant"}


async def test_fallback_passes_through_success(diagnosis):
    oracle = FallbackDiagnosisOracle(FakeDiagnosisOracle(result=diagnosis))

    assert await oracle.diagnose(IMAGE_URL) == diagnosis
    assert oracle.provider_name == "fake"
    assert not diagnosis.is_fallback


async def test_fallback_substitutes_on_diagnosis_error():
    oracle = FallbackDiagnosisOracle(FakeDiagnosisOracle(error=DiagnosisParseError("bad", provider="fake")))

    diagnosis = await oracle.diagnose(IMAGE_URL)

    assert diagnosis.plant_name == "Plant"
    assert len(diagnosis.issues) == 1
    assert diagnosis.is_fallback


async def test_fallback_does_not_hide_other_errors():
    oracle = FallbackDiagnosisOracle(FakeDiagnosisOracle(error=RuntimeError("bug")))

    with pytest.raises(RuntimeError):
        await oracle.diagnose(IMAGE_URL)


# ========================== Factory ========================================


def _settings(**overrides) -> Settings:
    return Settings(**overrides)


def test_local_providers_need_no_http_client():
    assert create_diagnosis_api_client(_settings(DIAGNOSIS_PROVIDER="static")) is None
    assert create_diagnosis_api_client(_settings(DIAGNOSIS_PROVIDER="mock")) is None


def test_openai_http_client_configuration():
    client = create_diagnosis_api_client(
        _settings(DIAGNOSIS_PROVIDER="openai", OPENAI_API_KEY="sk-live", DIAGNOSIS_TIMEOUT_SECONDS=45)
    )

    assert client.base_url == "https://api.openai.com/v1"
    assert client.api_key == "sk-live"
    assert client.timeout == 45


def test_worker_http_client_has_no_key():
    client = create_diagnosis_api_client(
        _settings(DIAGNOSIS_PROVIDER="worker", DIAGNOSIS_WORKER_URL="https://worker.test/", OPENAI_API_KEY="sk")
    )

    assert client.base_url == "https://worker.test"
    assert client.api_key is None


def test_factory_wraps_with_fallback_by_default():
    oracle = build_diagnosis_oracle(_settings(DIAGNOSIS_PROVIDER="mock"), None)

    assert isinstance(oracle, FallbackDiagnosisOracle)
    assert isinstance(oracle.primary, MockDiagnosisOracle)


def test_factory_without_fallback():
    settings = _settings(DIAGNOSIS_PROVIDER="openai", OPENAI_API_KEY="sk", DIAGNOSIS_FALLBACK_ENABLED=False)
    client = create_diagnosis_api_client(settings)

    oracle = build_diagnosis_oracle(settings, client)

    assert isinstance(oracle, OpenAIVisionDiagnosisOracle)


async def test_unconfigured_http_provider():
    strict = build_diagnosis_oracle(
        _settings(DIAGNOSIS_PROVIDER="worker", DIAGNOSIS_FALLBACK_ENABLED=False), None
    )
    lenient = build_diagnosis_oracle(_settings(DIAGNOSIS_PROVIDER="worker"), None)

    with pytest.raises(DiagnosisError):
        await strict.diagnose(IMAGE_URL)
    assert (await lenient.diagnose(IMAGE_URL)).issues[0].name == FALLBACK_ISSUE_NAME


def test_unknown_provider_rejected():
    with pytest.raises(ValueError):
        _settings(DIAGNOSIS_PROVIDER="gemini")
