"""
Transcription and chart endpoints through the FastAPI app.
"""

from fastapi.testclient import TestClient

from chartscribe.api import deps
from chartscribe.app import app
from chartscribe.core.config import reset_settings
from chartscribe.domain.errors import ExtractionParseError

from conftest import APPOINTMENT_ID, EXTRACTED_PAYLOAD

TRANSCRIPT = "Doctor: What brings you in?\nPatient: Chest pain for two days."


def test_process_transcription_returns_note(client, chart_repo):
    response = client.post("/transcription/process", json={"transcription": TRANSCRIPT})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["chief_complaint"] == EXTRACTED_PAYLOAD["chief_complaint"]
    assert body["data"]["vitals"]["bp"] == "150/95"
    assert chart_repo.upserts == 0


def test_process_empty_transcription_is_400(client, extraction_service):
    response = client.post("/transcription/process", json={"transcription": "   "})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "EMPTY_TRANSCRIPT"
    assert extraction_service.calls == []


def test_missing_body_field_is_422(client):
    response = client.post("/transcription/process", json={})

    assert response.status_code == 422
    assert response.json()["error"] == "INVALID_INPUT"


def test_transcribe_chart_returns_frames_and_saves(client, chart_repo):
    response = client.post(
        f"/charts/{APPOINTMENT_ID}/transcribe", json={"transcription": TRANSCRIPT}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert [frame["progress"] for frame in data["frames"]][-1] == 100
    assert len(data["frames"]) == 12
    assert data["frames"][0]["note"]["chief_complaint"] == EXTRACTED_PAYLOAD["chief_complaint"]
    assert data["frames"][0]["note"]["plan"] == ""
    assert data["pipeline"]["state"] == "complete"
    assert data["chart"]["raw_transcription"] == TRANSCRIPT
    assert data["chart"]["assessment"] is None
    assert chart_repo.charts[APPOINTMENT_ID].plan == "Stress test next week."


def test_transcribe_unknown_appointment_is_404(client):
    response = client.post("/charts/APT-MISSING/transcribe", json={"transcription": TRANSCRIPT})

    assert response.status_code == 404
    assert response.json()["error"] == "APPOINTMENT_NOT_FOUND"


def test_unparseable_extraction_is_502(client, extraction_service):
    extraction_service.error = ExtractionParseError("invalid JSON")

    response = client.post(
        f"/charts/{APPOINTMENT_ID}/transcribe", json={"transcription": TRANSCRIPT}
    )

    assert response.status_code == 502
    assert response.json()["error"] == "EXTRACTION_PARSE_ERROR"


def test_transcribe_while_busy_is_409(client, pipelines):
    pipelines.get(APPOINTMENT_ID).start_extraction()

    response = client.post(
        f"/charts/{APPOINTMENT_ID}/transcribe", json={"transcription": TRANSCRIPT}
    )

    assert response.status_code == 409
    assert response.json()["error"] == "PIPELINE_IN_PROGRESS"


def test_save_then_load_note(client):
    note = dict(EXTRACTED_PAYLOAD, plan="Refer to cardiology.")
    saved = client.put(
        f"/charts/{APPOINTMENT_ID}/note",
        json={"note": note, "raw_transcription": TRANSCRIPT},
    )
    assert saved.status_code == 200
    assert saved.json()["data"]["plan"] == "Refer to cardiology."

    loaded = client.get(f"/charts/{APPOINTMENT_ID}")
    assert loaded.status_code == 200
    data = loaded.json()["data"]
    assert data["note"]["diagnosis"][1] == {
        "diagnosis_name": "Hypertension",
        "treatment": "Lisinopril 10mg daily",
    }
    assert data["note"]["history"]["family_history"] == "Father had MI at 60"
    assert data["chart"]["raw_transcription"] == TRANSCRIPT


def test_save_transcription_only(client, chart_repo):
    response = client.put(
        f"/charts/{APPOINTMENT_ID}/transcription", json={"raw_transcription": TRANSCRIPT}
    )

    assert response.status_code == 200
    assert chart_repo.charts[APPOINTMENT_ID].raw_transcription == TRANSCRIPT
    assert response.json()["data"]["chief_complaint"] is None


def test_load_missing_chart_is_404(client):
    response = client.get(f"/charts/{APPOINTMENT_ID}")

    assert response.status_code == 404
    assert response.json()["error"] == "CHART_NOT_FOUND"


def test_active_note_from_base_chart(client):
    client.post(f"/charts/{APPOINTMENT_ID}/transcribe", json={"transcription": TRANSCRIPT})

    response = client.get(f"/charts/{APPOINTMENT_ID}/active")

    data = response.json()["data"]
    assert data["has_cdi"] is False
    assert data["source"]["plan"] == "chart"
    assert data["fields"]["clinical_impression"] is None


def test_capture_lifecycle(client):
    started = client.post(f"/transcription/{APPOINTMENT_ID}/capture/start")
    assert started.json()["data"]["recording"] is True

    client.post(
        f"/transcription/{APPOINTMENT_ID}/capture/append",
        json={"results": ["Patient reports chest pain "]},
    )
    appended = client.post(
        f"/transcription/{APPOINTMENT_ID}/capture/append",
        json={"results": ["for two days"], "start_index": 1},
    )
    assert appended.json()["data"]["transcript"] == "Patient reports chest pain for two days"

    stopped = client.post(f"/transcription/{APPOINTMENT_ID}/capture/stop")
    assert stopped.json()["data"] == {
        "appointment_id": APPOINTMENT_ID,
        "recording": False,
        "transcript": "Patient reports chest pain for two days",
    }

    again = client.post(f"/transcription/{APPOINTMENT_ID}/capture/stop")
    assert again.status_code == 404
    assert again.json()["error"] == "CAPTURE_SESSION_NOT_FOUND"


def test_process_without_completion_service_is_502(monkeypatch):
    for name in ("ENDPOINT", "API_KEY"):
        monkeypatch.delenv(f"AZURE_OPENAI_{name}", raising=False)
    reset_settings()
    deps.get_extraction_service.cache_clear()
    try:
        response = TestClient(app).post("/transcription/process", json={"transcription": TRANSCRIPT})
    finally:
        deps.get_extraction_service.cache_clear()
        reset_settings()

    assert response.status_code == 502
    assert response.json()["error"] == "EXTRACTION_SERVICE_ERROR"
