import uuid
from datetime import datetime

import pytest


def create_todo_payload(title="Test Task", deadline="2099-12-25"):
    return {"title": title, "deadline": deadline}


def assert_todo_shape(todo: dict):
    for key in ["id", "title", "deadline", "done", "created_at"]:
        assert key in todo
    uuid.UUID(todo["id"])
    assert isinstance(todo["title"], str)
    assert isinstance(todo["done"], bool)
    # FastAPI/Pydantic returns strings for datetime fields
    datetime.fromisoformat(todo["deadline"])
    datetime.fromisoformat(todo["created_at"])


@pytest.fixture
def user(client):
    res = client.post("/users", json={"name": "A", "username": "a"})
    assert res.status_code == 201
    return res.json()


@pytest.fixture
def headers(user):
    return {"username": user["username"]}


def add_todo(client, headers, **kwargs):
    res = client.post("/todos", headers=headers, json=create_todo_payload(**kwargs))
    assert res.status_code == 201
    return res.json()


class TestListTodos:
    def test_empty_list(self, client, headers):
        res = client.get("/todos", headers=headers)
        assert res.status_code == 200
        assert res.json() == []

    def test_insertion_order(self, client, headers):
        ids = [add_todo(client, headers, title=f"Task {i}")["id"] for i in range(3)]
        res = client.get("/todos", headers=headers)
        assert [t["id"] for t in res.json()] == ids

    def test_only_own_todos(self, client, headers):
        client.post("/users", json={"name": "B", "username": "b"})
        add_todo(client, headers, title="mine")
        add_todo(client, {"username": "b"}, title="theirs")

        titles = [t["title"] for t in client.get("/todos", headers=headers).json()]
        assert titles == ["mine"]

    def test_unknown_username(self, client, user):
        res = client.get("/todos", headers={"username": "nobody"})
        assert res.status_code == 404
        assert res.json() == {"error": "UserNotFound", "message": "User Not Found!"}

    def test_missing_username_header(self, client, user):
        res = client.get("/todos")
        assert res.status_code == 404
        assert res.json()["error"] == "UserNotFound"


class TestCreateTodo:
    def test_create(self, client, headers):
        res = client.post("/todos", headers=headers, json=create_todo_payload(title="t", deadline="2025-01-01"))
        assert res.status_code == 201
        todo = res.json()
        assert_todo_shape(todo)
        assert todo["title"] == "t"
        assert todo["done"] is False
        # Date-only deadlines are promoted to midnight
        assert todo["deadline"] == "2025-01-01T00:00:00"

    def test_create_with_datetime_deadline(self, client, headers):
        todo = add_todo(client, headers, deadline="2100-01-01T13:45:00")
        assert todo["deadline"] == "2100-01-01T13:45:00"

    def test_create_with_utc_designator(self, client, headers):
        todo = add_todo(client, headers, deadline="2025-01-01T12:30:00Z")
        assert todo["deadline"] == "2025-01-01T12:30:00Z"

    def test_unknown_username(self, client, user):
        res = client.post("/todos", headers={"username": "nobody"}, json=create_todo_payload())
        assert res.status_code == 404
        assert res.json()["error"] == "UserNotFound"

    def test_bad_deadline_is_validation_error(self, client, headers):
        res = client.post("/todos", headers=headers, json=create_todo_payload(deadline="not-a-date"))
        assert res.status_code == 422
        body = res.json()
        assert body["error"] == "ValidationError"
        assert isinstance(body["detail"], list)
        assert client.get("/todos", headers=headers).json() == []

    def test_empty_title_is_validation_error(self, client, headers):
        res = client.post("/todos", headers=headers, json=create_todo_payload(title="  "))
        assert res.status_code == 422


class TestFreePlanLimit:
    def test_eleventh_todo_rejected(self, client, headers):
        for i in range(10):
            add_todo(client, headers, title=f"Task {i}")

        res = client.post("/todos", headers=headers, json=create_todo_payload(title="one too many"))
        assert res.status_code == 403
        assert res.json() == {
            "error": "QuotaExceeded",
            "message": "You have reached the free todos limit! Change to Pro Plan!",
        }
        assert len(client.get("/todos", headers=headers).json()) == 10

    def test_pro_user_is_unlimited(self, client, user, headers):
        for i in range(10):
            add_todo(client, headers, title=f"Task {i}")
        assert client.patch(f"/users/{user['id']}/pro").status_code == 200

        for i in range(10, 13):
            add_todo(client, headers, title=f"Task {i}")
        assert len(client.get("/todos", headers=headers).json()) == 13

    def test_deleting_frees_a_slot(self, client, headers):
        todos = [add_todo(client, headers, title=f"Task {i}") for i in range(10)]
        assert client.post("/todos", headers=headers, json=create_todo_payload()).status_code == 403

        res = client.delete(f"/todos/{todos[0]['id']}", headers=headers)
        assert res.status_code == 204
        assert len(client.get("/todos", headers=headers).json()) == 9

        add_todo(client, headers, title="replacement")
        listed = client.get("/todos", headers=headers).json()
        assert len(listed) == 10
        assert listed[-1]["title"] == "replacement"

    def test_limit_from_environment(self, client, headers, monkeypatch):
        monkeypatch.setenv("FREE_TODO_LIMIT", "2")
        add_todo(client, headers)
        add_todo(client, headers)

        res = client.post("/todos", headers=headers, json=create_todo_payload())
        assert res.status_code == 403


class TestUpdateTodo:
    def test_update_title_and_deadline(self, client, headers):
        todo = add_todo(client, headers, title="Initial", deadline="2099-01-01")
        client.patch(f"/todos/{todo['id']}/done", headers=headers)

        res = client.put(
            f"/todos/{todo['id']}", headers=headers, json=create_todo_payload(title="Replaced", deadline="2100-01-01")
        )
        assert res.status_code == 200
        updated = res.json()
        assert updated["id"] == todo["id"]
        assert updated["title"] == "Replaced"
        assert updated["deadline"].startswith("2100-01-01")
        # done and created_at are untouched
        assert updated["done"] is True
        assert updated["created_at"] == todo["created_at"]

        listed = client.get("/todos", headers=headers).json()
        assert listed == [updated]

    def test_malformed_id(self, client, headers):
        res = client.put("/todos/not-a-uuid", headers=headers, json=create_todo_payload())
        assert res.status_code == 400
        assert res.json() == {"error": "InvalidIdentifier", "message": "Todo ID is incorrect."}

    def test_absent_id(self, client, headers):
        res = client.put(f"/todos/{uuid.uuid4()}", headers=headers, json=create_todo_payload())
        assert res.status_code == 404
        assert res.json() == {"error": "TodoNotFound", "message": "Todo not exist."}

    def test_unknown_user_checked_before_id(self, client, user):
        res = client.put("/todos/not-a-uuid", headers={"username": "nobody"}, json=create_todo_payload())
        assert res.status_code == 404
        assert res.json()["error"] == "UserNotFound"

    def test_other_users_todo_is_not_found(self, client, headers):
        client.post("/users", json={"name": "B", "username": "b"})
        theirs = add_todo(client, {"username": "b"})

        res = client.put(f"/todos/{theirs['id']}", headers=headers, json=create_todo_payload(title="hijack"))
        assert res.status_code == 404
        assert res.json()["error"] == "TodoNotFound"
        assert client.get("/todos", headers={"username": "b"}).json()[0]["title"] == "Test Task"


class TestMarkDone:
    def test_mark_done_is_idempotent(self, client, headers):
        todo = add_todo(client, headers)

        for _ in range(2):
            res = client.patch(f"/todos/{todo['id']}/done", headers=headers)
            assert res.status_code == 200
            assert res.json()["done"] is True
            assert res.json()["title"] == todo["title"]

    def test_malformed_and_absent_ids(self, client, headers):
        assert client.patch("/todos/123/done", headers=headers).status_code == 400
        assert client.patch(f"/todos/{uuid.uuid4()}/done", headers=headers).status_code == 404

    def test_trailing_newline_in_id_is_malformed(self, client, headers):
        todo = add_todo(client, headers)

        res = client.patch(f"/todos/{todo['id']}%0A/done", headers=headers)
        assert res.status_code == 400
        assert res.json()["error"] == "InvalidIdentifier"
        assert client.get("/todos", headers=headers).json()[0]["done"] is False


class TestDeleteTodo:
    def test_delete_removes_exactly_one(self, client, headers):
        todos = [add_todo(client, headers, title=f"Task {i}") for i in range(3)]

        res = client.delete(f"/todos/{todos[1]['id']}", headers=headers)
        assert res.status_code == 204
        assert res.text == ""

        remaining = client.get("/todos", headers=headers).json()
        assert [t["id"] for t in remaining] == [todos[0]["id"], todos[2]["id"]]

        # Deleting again is 404
        res_again = client.delete(f"/todos/{todos[1]['id']}", headers=headers)
        assert res_again.status_code == 404
        assert res_again.json()["error"] == "TodoNotFound"

    def test_delete_errors(self, client, headers, user):
        assert client.delete("/todos/nope", headers=headers).status_code == 400
        assert client.delete(f"/todos/{uuid.uuid4()}", headers=headers).status_code == 404
        res = client.delete(f"/todos/{uuid.uuid4()}", headers={"username": "nobody"})
        assert res.status_code == 404
        assert res.json()["error"] == "UserNotFound"


class TestScenario:
    def test_full_lifecycle(self, client):
        res = client.post("/users", json={"name": "A", "username": "a"})
        assert res.status_code == 201
        user = res.json()
        assert user["pro"] is False and user["todos"] == []

        headers = {"username": "a"}
        res = client.post("/todos", headers=headers, json={"title": "t", "deadline": "2025-01-01"})
        assert res.status_code == 201
        todo = res.json()
        assert todo["done"] is False

        res = client.patch(f"/todos/{todo['id']}/done", headers=headers)
        assert res.status_code == 200
        assert res.json()["done"] is True

        assert client.delete(f"/todos/{todo['id']}", headers=headers).status_code == 204

        res = client.get("/todos", headers=headers)
        assert res.status_code == 200
        assert res.json() == []
