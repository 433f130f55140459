# tests/test_api.py

import uuid
from datetime import timedelta

from fastapi.testclient import TestClient

HTML = {"accept": "text/html"}


def register(client: TestClient, email: str, password: str) -> str:
    response = client.post("/auth/register", json={"email": email, "raw_password": password})
    assert response.status_code == 201, response.text
    return response.json()["account_id"]


def bearer(client: TestClient, email: str, password: str) -> dict:
    """Logs in and returns an Authorization header, dropping the session cookie."""
    response = client.post("/auth/login", json={"email": email, "raw_password": password})
    assert response.status_code == 200, response.text
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def grouped_ids(index: dict) -> tuple:
    return (
        [item["task_id"] for item in index["unchecked"]],
        [item["task_id"] for item in index["checked"]],
    )


def test_task_lifecycle_through_cookie_session(client: TestClient) -> None:
    register(client, "alice@example.com", "pw1")
    login = client.post("/auth/login", json={"email": "alice@example.com", "raw_password": "pw1"})
    assert login.status_code == 200
    assert "token" in client.cookies

    created = client.post("/tasks", json={"content": "Buy milk"})
    assert created.status_code == 201
    task_id = created.json()["task_id"]

    index = client.get("/").json()
    assert grouped_ids(index) == ([task_id], [])
    assert index["unchecked"][0]["content"] == "Buy milk"

    checked = client.patch(f"/tasks/{task_id}", json={"state": "Checked"})
    assert checked.status_code == 200
    assert grouped_ids(client.get("/").json()) == ([], [task_id])

    deleted = client.patch(f"/tasks/{task_id}", json={"state": "Deleted"})
    assert deleted.status_code == 200
    assert grouped_ids(client.get("/").json()) == ([], [])


def test_accounts_only_see_their_own_tasks(client: TestClient) -> None:
    register(client, "one@example.com", "pw1")
    register(client, "two@example.com", "pw2")
    one = bearer(client, "one@example.com", "pw1")
    two = bearer(client, "two@example.com", "pw2")

    one_task = client.post("/tasks", json={"content": "One"}, headers=one).json()["task_id"]
    two_task = client.post("/tasks", json={"content": "Two"}, headers=two).json()["task_id"]

    assert grouped_ids(client.get("/", headers=one).json()) == ([one_task], [])
    assert grouped_ids(client.get("/", headers=two).json()) == ([two_task], [])


def test_foreign_and_missing_tasks_look_the_same(client: TestClient) -> None:
    register(client, "owner@example.com", "pw1")
    register(client, "intruder@example.com", "pw2")
    owner = bearer(client, "owner@example.com", "pw1")
    intruder = bearer(client, "intruder@example.com", "pw2")
    task_id = client.post("/tasks", json={"content": "Mine"}, headers=owner).json()["task_id"]

    foreign = client.patch(f"/tasks/{task_id}", json={"state": "Deleted"}, headers=intruder)
    missing = client.patch(f"/tasks/{uuid.uuid4()}", json={"state": "Deleted"}, headers=intruder)

    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()
    assert grouped_ids(client.get("/", headers=owner).json()) == ([task_id], [])


def test_new_task_shows_up_after_cached_read(client: TestClient) -> None:
    register(client, "cache@example.com", "pw1")
    headers = bearer(client, "cache@example.com", "pw1")
    first = client.post("/tasks", json={"content": "First"}, headers=headers).json()["task_id"]
    assert grouped_ids(client.get("/", headers=headers).json()) == ([first], [])

    second = client.post("/tasks", json={"content": "Second"}, headers=headers).json()["task_id"]

    assert grouped_ids(client.get("/", headers=headers).json()) == ([first, second], [])


def test_content_is_formatted_for_display(client: TestClient) -> None:
    register(client, "fmt@example.com", "pw1")
    headers = bearer(client, "fmt@example.com", "pw1")
    client.post("/tasks", json={"content": "Run `make test` <now>"}, headers=headers)

    item = client.get("/", headers=headers).json()["unchecked"][0]

    assert item["content"] == "Run <code>make test</code> &lt;now&gt;"


def test_unauthenticated_browser_is_redirected_to_login(client: TestClient) -> None:
    response = client.get("/", headers=HTML, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/auth/login"


def test_unauthenticated_api_call_gets_401(client: TestClient) -> None:
    assert client.get("/").status_code == 401
    assert client.post("/tasks", json={"content": "x"}).status_code == 401
    assert client.patch(f"/tasks/{uuid.uuid4()}", json={"state": "Checked"}).status_code == 401


def test_tampered_cookie_is_rejected(client: TestClient) -> None:
    response = client.get("/", headers={"cookie": "token=not.a.sealed.session.cookie"})

    assert response.status_code == 401


def test_bearer_header_is_used_when_cookie_is_stale(client: TestClient) -> None:
    register(client, "both@example.com", "pw1")
    headers = bearer(client, "both@example.com", "pw1")
    headers["cookie"] = "token=not.a.sealed.session.cookie"

    response = client.get("/", headers=headers)

    assert response.status_code == 200


def test_expired_token_is_reported(client: TestClient) -> None:
    account_id = register(client, "late@example.com", "pw1")
    authenticator = client.app.state.authenticator
    token = authenticator.issue(uuid.UUID(account_id), expires_delta=timedelta(seconds=-1))

    response = client.get("/", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Session expired"


def test_login_round_trip(client: TestClient) -> None:
    register(client, "round@example.com", "pw1")

    ok = client.post("/auth/login", json={"email": "round@example.com", "raw_password": "pw1"})
    wrong = client.post("/auth/login", json={"email": "round@example.com", "raw_password": "pw2"})
    unknown = client.post("/auth/login", json={"email": "ghost@example.com", "raw_password": "pw1"})

    assert ok.status_code == 200
    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json() == unknown.json()


def test_duplicate_email_is_rejected(client: TestClient) -> None:
    register(client, "dup@example.com", "pw1")

    response = client.post("/auth/register", json={"email": "DUP@example.com", "raw_password": "pw2"})

    assert response.status_code == 409


def test_me_and_logout(client: TestClient) -> None:
    account_id = register(client, "me@example.com", "pw1")
    client.post("/auth/login", json={"email": "me@example.com", "raw_password": "pw1"})

    me = client.get("/auth/me")
    assert me.status_code == 200
    assert me.json()["account_id"] == account_id
    assert me.json()["email"] == "me@example.com"

    client.post("/auth/logout")

    assert client.get("/auth/me").status_code == 401


def test_invalid_state_is_rejected(client: TestClient) -> None:
    register(client, "state@example.com", "pw1")
    headers = bearer(client, "state@example.com", "pw1")
    task_id = client.post("/tasks", json={"content": "x"}, headers=headers).json()["task_id"]

    response = client.patch(f"/tasks/{task_id}", json={"state": "Archived"}, headers=headers)

    assert response.status_code == 422


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}
