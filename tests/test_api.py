from datetime import datetime, timedelta

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient  # noqa: E402

from choretracker.service import ChoreTracker  # noqa: E402
from choretracker.webapp import create_app  # noqa: E402

NOW = datetime(2024, 5, 10, 18, 30)


class Clock:
    def __init__(self, moment: datetime) -> None:
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment


@pytest.fixture
def clock() -> Clock:
    return Clock(NOW)


@pytest.fixture
def tracker(clock: Clock) -> ChoreTracker:
    return ChoreTracker(parent_names=("Aaron", "Janet"), clock=clock)


@pytest.fixture
def client(tracker: ChoreTracker) -> TestClient:
    return TestClient(create_app(tracker, static_dir=None))


def test_login_creates_users_with_roles(client: TestClient) -> None:
    response = client.post("/api/login", json={"name": "  Janet "})
    assert response.status_code == 200
    assert response.json() == {"name": "Janet", "role": "parent", "balance": 0.0}

    response = client.post("/api/login", json={"name": "Sam"})
    assert response.json()["role"] == "child"

    assert client.post("/api/login", json={"name": "   "}).status_code == 400
    assert client.post("/api/login", json={}).json() == {"error": "Name is required"}


def test_create_and_list_chores(client: TestClient) -> None:
    response = client.post(
        "/api/chores",
        json={"name": "Dishes", "timing": "daily", "price": 1.5, "emoji": "🍽", "required": True},
    )
    assert response.status_code == 201
    assert response.json() == {
        "id": 1,
        "name": "Dishes",
        "timing": "daily",
        "price": 1.5,
        "emoji": "🍽",
        "required": True,
    }

    second = client.post("/api/chores", json={"name": "Trash", "timing": "weekly", "price": "2"})
    assert second.status_code == 201
    assert second.json()["id"] == 2
    assert second.json()["emoji"] == "⭐"
    assert second.json()["required"] is False

    listing = client.get("/api/chores").json()
    assert [chore["id"] for chore in listing] == [1, 2]


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"timing": "daily", "price": 1}, "name, timing and price are required"),
        ({"name": "Dishes", "price": 1}, "name, timing and price are required"),
        ({"name": "Dishes", "timing": "daily"}, "name, timing and price are required"),
        ({"name": "Dishes", "timing": "monthly", "price": 1}, "Invalid timing value"),
        ({"name": "Dishes", "timing": "daily", "price": -1}, "Invalid price"),
        ({"name": "Dishes", "timing": "daily", "price": "cheap"}, "Invalid price"),
    ],
)
def test_create_chore_rejects_bad_input(client: TestClient, payload, message) -> None:
    response = client.post("/api/chores", json=payload)
    assert response.status_code == 400
    assert response.json() == {"error": message}
    assert client.get("/api/chores").json() == []


def test_child_completion_flow_and_report(client: TestClient, clock: Clock) -> None:
    client.post("/api/login", json={"name": "Sam"})
    client.post("/api/login", json={"name": "Aaron"})
    client.post("/api/login", json={"name": "Riley"})
    client.post("/api/chores", json={"name": "Dishes", "timing": "daily", "price": 1.5, "emoji": "🍽"})
    client.post("/api/chores", json={"name": "Trash", "timing": "weekly", "price": 2})

    clock.moment = NOW - timedelta(days=8)
    assert client.post("/api/child/Sam/complete", json={"choreId": 2}).status_code == 201
    clock.moment = NOW
    for _ in range(3):
        response = client.post("/api/child/Sam/complete", json={"choreId": "1"})
    assert response.status_code == 201
    assert response.json()["message"] == "Chore completion recorded"
    assert response.json()["chore"]["name"] == "Dishes"

    completions = client.get("/api/child/Sam/completions").json()
    assert completions == {
        "childName": "Sam",
        "items": [
            {
                "choreId": 1,
                "name": "Dishes",
                "timing": "daily",
                "emoji": "🍽",
                "required": False,
                "count": 3,
                "value": 4.5,
            }
        ],
        "total": 4.5,
        "balance": 0.0,
    }

    report = client.get("/api/report").json()
    assert [entry["childName"] for entry in report] == ["Sam", "Riley"]
    assert report[0]["total"] == 4.5
    assert report[1] == {"childName": "Riley", "total": 0.0, "items": []}


def test_completion_errors(client: TestClient) -> None:
    client.post("/api/login", json={"name": "Sam"})
    client.post("/api/chores", json={"name": "Dishes", "timing": "daily", "price": 1})

    assert client.post("/api/child/Ghost/complete", json={"choreId": 1}).status_code == 404
    missing_chore = client.post("/api/child/Sam/complete", json={"choreId": 42})
    assert missing_chore.status_code == 404
    assert missing_chore.json() == {"error": "Chore not found"}
    assert client.get("/api/child/Ghost/completions").json() == {"error": "User not found"}


def test_out_of_range_numbers_are_client_errors(client: TestClient) -> None:
    client.post("/api/login", json={"name": "Sam"})
    huge = int("1" + "0" * 400)

    for chore_id in (10**20, "1_0"):
        response = client.post("/api/child/Sam/complete", json={"choreId": chore_id})
        assert response.status_code == 404
        assert response.json() == {"error": "Chore not found"}

    response = client.post("/api/reconcile", json={"childName": "Sam", "amount": huge})
    assert (response.status_code, response.json()) == (400, {"error": "Invalid amount"})

    response = client.post("/api/chores", json={"name": "Dishes", "timing": "daily", "price": huge})
    assert (response.status_code, response.json()) == (400, {"error": "Invalid price"})
    response = client.post("/api/chores", json={"name": "Dishes", "timing": "daily", "price": "1_000"})
    assert response.status_code == 400


def test_reconcile_flow_double_pays(client: TestClient) -> None:
    client.post("/api/login", json={"name": "Sam"})
    client.post("/api/chores", json={"name": "Dishes", "timing": "daily", "price": 1.5})
    for _ in range(3):
        client.post("/api/child/Sam/complete", json={"choreId": 1})

    summary = client.get("/api/reconcile-summary").json()
    assert summary == [{"childName": "Sam", "earned": 4.5, "currentBalance": 0.0}]

    first = client.post("/api/reconcile", json={"childName": "Sam", "amount": 4.5})
    assert first.json() == {"childName": "Sam", "amount": 4.5, "newBalance": 4.5}
    second = client.post("/api/reconcile", json={"childName": "Sam", "amount": "4.50"})
    assert second.json()["newBalance"] == 9.0

    summary = client.get("/api/reconcile-summary").json()
    assert summary == [{"childName": "Sam", "earned": 4.5, "currentBalance": 9.0}]


def test_reconcile_errors(client: TestClient) -> None:
    client.post("/api/login", json={"name": "Sam"})
    client.post("/api/login", json={"name": "Janet"})

    assert client.post("/api/reconcile", json={"amount": 1}).status_code == 400
    assert client.post("/api/reconcile", json={"childName": "Ghost", "amount": 1}).status_code == 404
    assert client.post("/api/reconcile", json={"childName": "Janet", "amount": 1}).status_code == 404
    for amount in (0, -5, "lots", None):
        response = client.post("/api/reconcile", json={"childName": "Sam", "amount": amount})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid amount"}


def test_malformed_body_is_a_bad_request(client: TestClient) -> None:
    response = client.post("/api/login", content=b"not json", headers={"content-type": "application/json"})
    assert response.status_code == 400
    assert client.post("/api/login", json={"name": 42}).status_code == 400


def test_unexpected_errors_return_500_and_are_logged(tracker: ChoreTracker, monkeypatch) -> None:
    def explode(self):
        raise RuntimeError("boom")

    client = TestClient(create_app(tracker, static_dir=None), raise_server_exceptions=False)
    monkeypatch.setattr(ChoreTracker, "list_chores", explode)

    response = client.get("/api/chores")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert tracker.logger.events("unexpected_error")[0]["path"] == "/api/chores"
    assert client.post("/api/login", json={"name": "Sam"}).status_code == 200


def test_static_directory_is_served_alongside_api(tmp_path, tracker: ChoreTracker) -> None:
    (tmp_path / "index.html").write_text("<h1>Chores</h1>", encoding="utf-8")
    client = TestClient(create_app(tracker, static_dir=str(tmp_path)))

    assert "Chores" in client.get("/").text
    assert client.get("/api/chores").json() == []


def test_default_app_is_built_once_on_first_access() -> None:
    from fastapi import FastAPI

    import choretracker.webapp as webapp
    from choretracker.webapp import application

    assert not hasattr(application, "app")
    assert isinstance(webapp.app, FastAPI)
    assert webapp.app is webapp.get_app()
    assert webapp.app.state.tracker is webapp.get_app().state.tracker
