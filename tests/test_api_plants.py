"""End-to-end API tests: authentication, plants, treatments, diagnoses and health."""

from datetime import timedelta
from uuid import uuid4

import pytest

from conftest import FakeDiagnosisOracle, FakeImageStore, make_access_token
from plant_health.modules.plant_diagnosis.infrastructure.external.local_oracles import FallbackDiagnosisOracle
from plant_health.modules.plant_diagnosis.presentation.dependencies import (
    get_diagnosis_oracle,
    get_image_store,
)
from plant_health.shared.config.settings import Settings, get_settings
from plant_health.shared.core.exceptions import DiagnosisTransportError, StorageWriteError
from plant_health.shared.infrastructure.database.connection import DatabaseConnectionManager

PLANTS = "/api/v1/plants"


async def _upload(client, headers, png_bytes, filename="leaf.png"):
    return await client.post(PLANTS, headers=headers, files={"image": (filename, png_bytes, "image/png")})


# ========================== Authentication =================================


async def test_missing_token_is_401(client):
    response = await client.get(PLANTS)

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"


async def test_expired_token_is_401(client, owner_id):
    token = make_access_token(str(owner_id), expires_in=timedelta(minutes=-5))

    response = await client.get(PLANTS, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Token expired"


@pytest.mark.parametrize(
    "token",
    [
        make_access_token(str(uuid4()), audience="anon"),
        make_access_token(str(uuid4()), secret="some-other-secret-of-sufficient-length"),
        "not-a-jwt",
    ],
)
async def test_invalid_token_is_401(client, token):
    response = await client.get(PLANTS, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


async def test_non_uuid_subject_is_401(client):
    token = make_access_token("service-account")

    response = await client.get(PLANTS, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


# ========================== Health =========================================


async def test_health_is_public(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_readiness_without_database_is_503(client):
    response = await client.get("/health/ready")

    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"


async def test_readiness_with_database_is_200(app, client, engine):
    app.state.db_manager = DatabaseConnectionManager(get_settings(), engine=engine)

    response = await client.get("/health/ready")

    assert response.status_code == 200
    assert response.json()["checks"]["database"]["status"] == "healthy"


async def test_uninitialized_manager_reports_unhealthy():
    manager = DatabaseConnectionManager(get_settings())

    health = await manager.health_check()

    assert manager.is_initialized is False
    assert health["status"] == "unhealthy"
    assert health["error"] == "Database engine not initialized"


async def test_request_id_is_echoed(client):
    response = await client.get("/", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


# ========================== Upload =========================================


async def test_upload_creates_plant_with_plan(client, auth_headers, png_bytes, image_store):
    response = await _upload(client, auth_headers, png_bytes)

    assert response.status_code == 201
    body = response.json()
    assert body["plant_name"] == "Monstera deliciosa"
    assert body["severity"] == "medium"
    assert body["image_url"].startswith("https://test-project.supabase.co/")
    assert [t["step"] for t in body["treatments"]] == [1, 2, 3, 4]
    assert all(t["completed"] is False for t in body["treatments"])
    assert "date" in body["treatments"][0]
    assert len(body["care_tips"]) == 5
    assert [r["priority"] for r in body["recommendations"]] == [1, 1, 2, 3]
    assert body["diagnosis"]["plantName"] == "Monstera deliciosa"
    assert body["completed_treatments"] == 0
    assert image_store.uploads[0][2] == "leaf.png"


async def test_upload_without_image_is_422(client, auth_headers):
    response = await client.post(PLANTS, headers=auth_headers)

    assert response.status_code == 422
    assert response.json()["error"]["message"] == "An image is required"


async def test_upload_empty_file_is_422(client, auth_headers, image_store):
    response = await _upload(client, auth_headers, b"")

    assert response.status_code == 422
    assert image_store.uploads == []


async def test_oversized_upload_is_413_before_storage(app, client, auth_headers, png_bytes, image_store):
    app.dependency_overrides[get_settings] = lambda: Settings(MAX_IMAGE_SIZE=16)

    response = await _upload(client, auth_headers, png_bytes)

    assert response.status_code == 413
    assert response.json()["error"]["code"] == "FILE_TOO_LARGE"
    assert image_store.uploads == []


async def test_storage_failure_reports_upload_stage(app, client, auth_headers, png_bytes):
    app.dependency_overrides[get_image_store] = lambda: FakeImageStore(error=StorageWriteError("quota exceeded"))

    response = await _upload(client, auth_headers, png_bytes)

    assert response.status_code == 502
    error = response.json()["error"]
    assert error["code"] == "PIPELINE_UPLOAD_FAILED"
    assert error["details"]["stage"] == "upload"
    assert error["details"]["cause"] == "STORAGE_WRITE_ERROR"


async def test_diagnosis_failure_persists_nothing(app, client, auth_headers, png_bytes):
    app.dependency_overrides[get_diagnosis_oracle] = lambda: FakeDiagnosisOracle(
        error=DiagnosisTransportError("upstream 500", provider="fake", upstream_status=500)
    )

    response = await _upload(client, auth_headers, png_bytes)

    assert response.status_code == 502
    assert response.json()["error"]["details"]["stage"] == "diagnosis"
    listing = await client.get(PLANTS, headers=auth_headers)
    assert listing.json() == []


async def test_diagnosis_failure_with_fallback_still_saves(app, client, auth_headers, png_bytes):
    app.dependency_overrides[get_diagnosis_oracle] = lambda: FallbackDiagnosisOracle(
        FakeDiagnosisOracle(error=DiagnosisTransportError("timeout", provider="fake"))
    )

    response = await _upload(client, auth_headers, png_bytes)

    assert response.status_code == 201
    body = response.json()
    assert body["plant_name"] == "Plant"
    assert body["severity"] == "low"
    assert len(body["diagnosis"]["issues"]) == 1


# ========================== Read / update / delete =========================


async def test_list_plants_newest_first_and_owner_scoped(client, auth_headers, other_auth_headers, png_bytes):
    first = (await _upload(client, auth_headers, png_bytes)).json()
    second = (await _upload(client, auth_headers, png_bytes)).json()

    mine = await client.get(PLANTS, headers=auth_headers)
    theirs = await client.get(PLANTS, headers=other_auth_headers)

    assert mine.status_code == 200
    ids = [p["id"] for p in mine.json()]
    assert set(ids) == {first["id"], second["id"]}
    assert mine.json()[0]["created_at"] >= mine.json()[1]["created_at"]
    assert theirs.json() == []


async def test_get_plant_and_treatments(client, auth_headers, png_bytes):
    created = (await _upload(client, auth_headers, png_bytes)).json()

    detail = await client.get(f"{PLANTS}/{created['id']}", headers=auth_headers)
    treatments = await client.get(f"{PLANTS}/{created['id']}/treatments", headers=auth_headers)

    assert detail.status_code == 200
    assert detail.json()["id"] == created["id"]
    assert treatments.status_code == 200
    assert [t["step"] for t in treatments.json()] == [1, 2, 3, 4]
    assert treatments.json()[0]["description"] == "Remove affected leaves"


async def test_other_owner_gets_404(client, auth_headers, other_auth_headers, png_bytes):
    created = (await _upload(client, auth_headers, png_bytes)).json()

    response = await client.get(f"{PLANTS}/{created['id']}", headers=other_auth_headers)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


async def test_unknown_plant_is_404(client, auth_headers):
    response = await client.get(f"{PLANTS}/{uuid4()}/treatments", headers=auth_headers)

    assert response.status_code == 404


async def test_patch_treatment(client, auth_headers, other_auth_headers, png_bytes):
    created = (await _upload(client, auth_headers, png_bytes)).json()
    treatment_id = created["treatments"][1]["id"]

    response = await client.patch(
        f"/api/v1/treatments/{treatment_id}", headers=auth_headers, json={"completed": True}
    )
    foreign = await client.patch(
        f"/api/v1/treatments/{treatment_id}", headers=other_auth_headers, json={"completed": False}
    )
    detail = await client.get(f"{PLANTS}/{created['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["completed"] is True
    assert foreign.status_code == 404
    assert detail.json()["completed_treatments"] == 1
    assert detail.json()["treatments"][1]["completed"] is True


async def test_patch_requires_completed_flag(client, auth_headers):
    response = await client.patch(f"/api/v1/treatments/{uuid4()}", headers=auth_headers, json={})

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_delete_twice(client, auth_headers, png_bytes):
    created = (await _upload(client, auth_headers, png_bytes)).json()

    first = await client.delete(f"{PLANTS}/{created['id']}", headers=auth_headers)
    second = await client.delete(f"{PLANTS}/{created['id']}", headers=auth_headers)
    treatments = await client.get(f"{PLANTS}/{created['id']}/treatments", headers=auth_headers)

    assert first.status_code == 204
    assert second.status_code == 404
    assert treatments.status_code == 404


# ========================== Direct diagnosis ===============================


async def test_diagnose_image_url(client, auth_headers, oracle):
    response = await client.post(
        "/api/v1/diagnoses", headers=auth_headers, json={"imageUrl": "https://img.test/leaf.jpg"}
    )

    assert response.status_code == 200
    assert response.json()["plantName"] == "Monstera deliciosa"
    assert oracle.calls == ["https://img.test/leaf.jpg"]


@pytest.mark.parametrize("body", [{}, {"imageUrl": ""}, {"imageUrl": "   "}])
async def test_diagnose_requires_image_url(client, auth_headers, body):
    response = await client.post("/api/v1/diagnoses", headers=auth_headers, json=body)

    assert response.status_code == 422
    assert response.json()["error"]["message"] == "Image URL is required"


async def test_diagnose_failure_without_fallback_is_502(app, client, auth_headers):
    app.dependency_overrides[get_diagnosis_oracle] = lambda: FakeDiagnosisOracle(
        error=DiagnosisTransportError("bad gateway", provider="fake", upstream_status=503)
    )

    response = await client.post(
        "/api/v1/diagnoses", headers=auth_headers, json={"imageUrl": "https://img.test/leaf.jpg"}
    )

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "DIAGNOSIS_TRANSPORT_ERROR"
