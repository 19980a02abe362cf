import pytest
from fastapi.testclient import TestClient

from trivia_app.core.question_loader import FetchError
from trivia_app.server.api_server import create_api_app


@pytest.fixture
def client(controller):
    with TestClient(create_api_app(controller)) as test_client:
        yield test_client


def _correct_option(question: dict) -> int:
    return next(option["index"] for option in question["options"] if option["is_correct"])


def test_player_page_is_served(client):
    response = client.get("/")

    assert response.status_code == 200
    assert 'id="trivia-form"' in response.text
    assert 'id="score-table"' in response.text


def test_start_reports_loading_then_playing(client):
    started = client.post("/session/start").json()
    assert started["phase"] == "LOADING"
    assert started["questions"] == []

    state = client.get("/state").json()
    assert state["phase"] == "PLAYING"
    assert state["generation"] == started["generation"]
    assert len(state["questions"]) == 10
    first = state["questions"][0]
    assert first["question_html"] == "Question 0?"
    assert len(first["options"]) == 4
    assert sum(option["is_correct"] for option in first["options"]) == 1


def test_select_and_submit_records_score(client):
    state = client.post("/session/start").json()
    state = client.get("/state").json()
    question = state["questions"][0]

    selected = client.post(
        "/select",
        json={"generation": state["generation"], "question_index": 0, "option_index": _correct_option(question)},
    )
    assert selected.status_code == 200
    assert selected.json()["current_score"] == 1
    assert selected.json()["questions"][0]["selected_option"] == _correct_option(question)

    submitted = client.post("/submit", json={"generation": state["generation"], "username": "bob"}).json()
    assert submitted["accepted"] is True
    assert submitted["final_score"] == 1
    assert submitted["state"]["phase"] == "SUBMITTED"
    assert submitted["state"]["has_identity"] is True
    assert client.get("/scores").json() == [{"username": "bob", "score": 1}]


def test_submit_with_blank_username_is_not_accepted(client):
    client.post("/session/start")

    submitted = client.post("/submit", json={"username": "  "}).json()

    assert submitted["accepted"] is False
    assert submitted["state"]["phase"] == "PLAYING"
    assert submitted["state"]["leaderboard"] == []


def test_select_rejects_stale_generation_and_bad_index(client):
    client.post("/session/start")
    generation = client.get("/state").json()["generation"]

    stale = client.post("/select", json={"generation": generation - 1, "question_index": 0, "option_index": 0})
    assert stale.status_code == 409

    out_of_range = client.post("/select", json={"generation": generation, "question_index": 42, "option_index": 0})
    assert out_of_range.status_code == 422


def test_new_player_reloads_questions_and_forgets_identity(client):
    client.post("/session/start")
    client.post("/submit", json={"username": "bob"})

    reset = client.post("/new-player").json()
    assert reset["phase"] == "LOADING"
    assert reset["username"] == ""
    assert reset["has_identity"] is False

    state = client.get("/state").json()
    assert state["phase"] == "PLAYING"
    assert state["generation"] == reset["generation"]
    assert state["leaderboard"] == [{"username": "bob", "score": 0}]


def test_reload_clears_leaderboard_but_keeps_identity(client):
    client.post("/session/start")
    client.post("/submit", json={"username": "bob"})

    restarted = client.post("/session/start").json()

    assert restarted["leaderboard"] == []
    assert restarted["username"] == "bob"
    assert restarted["has_identity"] is True


def test_failed_load_is_reported(client, loader):
    loader.error = FetchError("offline")
    client.post("/session/start")

    state = client.get("/state").json()

    assert state["phase"] == "ERROR"
    assert state["error"] == "offline"
    assert state["questions"] == []


def test_new_player_while_loading_conflicts(controller, client):
    controller.start()

    response = client.post("/new-player")

    assert response.status_code == 409
