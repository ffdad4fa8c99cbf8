import inspect
import json

import pytest
from fastapi.testclient import TestClient

from critique_bridge.app import app
from critique_bridge.constants import FILE_TOO_LARGE_MESSAGE, NO_FILE_LABEL
from critique_bridge.session import CritiqueSession

EVENT_PATHS = {"/state", "/mode", "/model", "/file", "/file/clear", "/lyrics", "/auxiliary-lyrics", "/submit"}


class FakeRequester:
    def __init__(self, text):
        self.text = text
        self.requests = []

    async def __call__(self, request):
        self.requests.append(request)
        return self.text


@pytest.fixture
def requester(payload_factory):
    return FakeRequester(json.dumps(payload_factory(audio=False)))


@pytest.fixture
def client(monkeypatch, requester):
    monkeypatch.setattr(app.state, "session", CritiqueSession(requester=requester, strict=False))
    return TestClient(app)


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_index_page_shows_initial_state(client) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert NO_FILE_LABEL in response.text
    assert '<button id="submit-button" disabled>Critique</button>' in response.text


def test_lyrics_submission_round_trip(client, requester) -> None:
    assert client.post("/mode", data={"mode": "lyrics"}).json()["view"]["submit_enabled"] is False
    staged = client.post("/lyrics", data={"text": "Rain on the window"}).json()
    assert staged["view"]["submit_enabled"] is True
    assert staged["input"]["staged_lyrics"] == "Rain on the window"

    response = client.post("/submit")

    assert response.status_code == 200
    view = response.json()["view"]
    assert "<h2>Lyrical Analysis</h2>" in view["document_html"]
    assert view["summary_hidden"] is False
    assert view["loading"] is False
    assert len(requester.requests) == 1
    assert "Rain on the window" in requester.requests[0].prompt_text


def test_oversized_upload_is_rejected(client) -> None:
    response = client.post(
        "/file",
        files={"file": ("long.wav", b"\0" * (11 * 1024 * 1024), "audio/wav")},
    )

    payload = response.json()
    assert response.status_code == 200
    assert payload["view"]["message"] == FILE_TOO_LARGE_MESSAGE
    assert payload["input"]["staged_file"] is None
    assert payload["view"]["submit_enabled"] is False


def test_valid_upload_is_staged_then_cleared(client) -> None:
    staged = client.post("/file", files={"file": ("take.wav", b"RIFF0000WAVE", "audio/wav")}).json()

    assert staged["input"]["staged_file"] == {"name": "take.wav", "mime_type": "audio/wav", "size": 12}
    assert staged["view"]["file_label"] == "take.wav"
    assert staged["view"]["submit_enabled"] is True

    cleared = client.post("/file/clear").json()
    assert cleared["input"]["staged_file"] is None
    assert cleared["view"]["file_label"] == NO_FILE_LABEL


def test_submit_without_input_reports_message(client, requester) -> None:
    view = client.post("/submit").json()["view"]

    assert view["message"].startswith("No valid input provided")
    assert requester.requests == []


def test_unknown_mode_and_model_are_rejected(client) -> None:
    assert client.post("/mode", data={"mode": "video"}).status_code == 422
    assert client.post("/model", data={"model_name": "not-a-model"}).status_code == 400


def test_model_selection_is_reported(client) -> None:
    view = client.post("/model", data={"model_name": "gemini-2.5-pro"}).json()["view"]

    assert view["selected_model"] == "gemini-2.5-pro"


def test_html_clients_are_redirected_to_index(client) -> None:
    response = client.post(
        "/auxiliary-lyrics",
        data={"text": "Optional words"},
        headers={"accept": "text/html"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/"
    assert client.get("/state").json()["input"]["auxiliary_lyrics"] == "Optional words"


def test_event_routes_run_on_the_event_loop() -> None:
    endpoints = [route.endpoint for route in app.routes if getattr(route, "path", None) in EVENT_PATHS]

    assert len(endpoints) == len(EVENT_PATHS)
    assert all(inspect.iscoroutinefunction(endpoint) for endpoint in endpoints)


def test_staging_rejected_while_submission_in_flight(client) -> None:
    session = app.state.session
    session._in_flight = True

    assert client.post("/lyrics", data={"text": "late edit"}).status_code == 409
    assert client.post("/submit").status_code == 409
    assert session.state.staged_lyrics == ""
