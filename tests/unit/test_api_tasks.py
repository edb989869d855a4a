"""
Tests for the task routes (/api/tasks).

Covers history, completion bookkeeping, notifications, assignee validation,
filters and owner isolation.
"""

import pytest
from unittest.mock import patch

from src.integrations.telegram import NotificationResult, TelegramNotifier


@pytest.fixture
def employee(auth_headers, create_employee):
    return create_employee(auth_headers, name="Ivan Petrov", telegramTag="ivan")


@pytest.fixture
def configure_telegram(client):
    def _configure(headers, bot_token="123:ABC", chat_id="-100500"):
        response = client.put("/api/config", json={"botToken": bot_token, "chatId": chat_id}, headers=headers)
        assert response.status_code == 200, response.text

    return _configure


class TestCreateTask:
    """Test POST /api/tasks."""

    def test_create_with_defaults(self, client, auth_headers, employee):
        response = client.post("/api/tasks", json={
            "title": "Prepare report",
            "employeeId": employee["id"],
            "deadline": "2030-01-01T00:00:00Z",
        }, headers=auth_headers)

        assert response.status_code == 201
        task = response.json()
        assert task["status"] == "new"
        assert task["priority"] == "medium"
        assert task["history"] == []
        assert task["employeeId"] == employee["id"]
        assert task["employee"]["name"] == "Ivan Petrov"
        assert task["deadline"] == "2030-01-01T00:00:00.000Z"
        assert task["completedAt"] is None

    def test_deadline_timezone_is_normalized_to_utc(self, client, auth_headers, employee, create_task):
        task = create_task(auth_headers, employee["id"], deadline="2030-01-01T03:00:00+03:00")

        assert task["deadline"] == "2030-01-01T00:00:00.000Z"

    @pytest.mark.parametrize("missing", ["title", "employeeId", "deadline"])
    def test_required_fields(self, client, auth_headers, employee, missing):
        body = {"title": "T", "employeeId": employee["id"], "deadline": "2030-01-01T00:00:00Z"}
        del body[missing]

        response = client.post("/api/tasks", json=body, headers=auth_headers)

        assert response.status_code == 400

    def test_invalid_priority(self, client, auth_headers, employee):
        response = client.post("/api/tasks", json={
            "title": "T", "employeeId": employee["id"],
            "deadline": "2030-01-01T00:00:00Z", "priority": "urgent",
        }, headers=auth_headers)

        assert response.status_code == 400

    def test_assignee_must_belong_to_caller(self, client, register, create_employee):
        alice, bob = register(), register()
        alices_employee = create_employee(alice)

        response = client.post("/api/tasks", json={
            "title": "T", "employeeId": alices_employee["id"], "deadline": "2030-01-01T00:00:00Z",
        }, headers=bob)

        assert response.status_code == 400
        assert "not found" in response.json()["error"]
        assert client.get("/api/tasks", headers=bob).json() == []

    def test_created_as_completed_gets_completed_at(self, client, auth_headers, employee, create_task):
        task = create_task(auth_headers, employee["id"], status="completed")

        assert task["completedAt"] is not None


class TestUpdateTask:
    """Test PUT /api/tasks/{id}."""

    def test_each_update_appends_history(self, client, auth_headers, employee, create_task):
        task = create_task(auth_headers, employee["id"])

        for title in ("v1", "v2", "v3"):
            response = client.put(f"/api/tasks/{task['id']}", json={"title": title}, headers=auth_headers)
            assert response.status_code == 200

        updated = client.get(f"/api/tasks/{task['id']}", headers=auth_headers).json()
        assert updated["title"] == "v3"
        assert len(updated["history"]) == 3
        assert [h["action"] for h in updated["history"]] == ["updated"] * 3

    def test_history_stores_submitted_fields(self, client, auth_headers, employee, create_task):
        task = create_task(auth_headers, employee["id"])

        updated = client.put(
            f"/api/tasks/{task['id']}",
            json={"status": "in_progress", "result": "Half done"},
            headers=auth_headers,
        ).json()

        entry = updated["history"][0]
        assert entry["changes"] == {"status": "in_progress", "result": "Half done"}
        assert entry["timestamp"].endswith("Z")

    def test_history_keeps_body_as_sent(self, client, auth_headers, employee, create_task):
        task = create_task(auth_headers, employee["id"])
        body = {
            "deadline": "2030-01-01T03:00:00+03:00",
            "title": "  padded  ",
            "employee_id": employee["id"],
        }

        updated = client.put(f"/api/tasks/{task['id']}", json=body, headers=auth_headers).json()

        assert updated["title"] == "padded"
        assert updated["deadline"].startswith("2030-01-01T00:00:00")
        assert updated["history"][0]["changes"] == body

    def test_history_ignores_unknown_keys(self, client, auth_headers, employee, create_task):
        task = create_task(auth_headers, employee["id"])

        updated = client.put(
            f"/api/tasks/{task['id']}",
            json={"priority": "low", "userId": 99},
            headers=auth_headers,
        ).json()

        assert updated["history"][0]["changes"] == {"priority": "low"}

    def test_partial_update_keeps_other_fields(self, client, auth_headers, employee, create_task):
        task = create_task(auth_headers, employee["id"], priority="high")

        updated = client.put(
            f"/api/tasks/{task['id']}", json={"status": "in_progress"}, headers=auth_headers
        ).json()

        assert updated["priority"] == "high"
        assert updated["title"] == task["title"]
        assert updated["status"] == "in_progress"

    def test_backwards_transition_allowed(self, client, auth_headers, employee, create_task):
        task = create_task(auth_headers, employee["id"], status="completed")

        response = client.put(f"/api/tasks/{task['id']}", json={"status": "new"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["status"] == "new"

    def test_completion_sets_completed_at(self, client, auth_headers, employee, create_task):
        task = create_task(auth_headers, employee["id"])

        updated = client.put(
            f"/api/tasks/{task['id']}", json={"status": "completed"}, headers=auth_headers
        ).json()

        assert updated["completedAt"] is not None

    def test_supplied_completed_at_is_kept(self, client, auth_headers, employee, create_task):
        task = create_task(auth_headers, employee["id"])

        updated = client.put(f"/api/tasks/{task['id']}", json={
            "status": "completed", "completedAt": "2029-05-01T10:00:00Z",
        }, headers=auth_headers).json()

        assert updated["completedAt"] == "2029-05-01T10:00:00.000Z"

    def test_reassign_to_own_employee(self, client, auth_headers, employee, create_employee, create_task):
        task = create_task(auth_headers, employee["id"])
        other = create_employee(auth_headers, name="Bob", telegramTag=None)

        updated = client.put(
            f"/api/tasks/{task['id']}", json={"employeeId": other["id"]}, headers=auth_headers
        ).json()

        assert updated["employeeId"] == other["id"]
        assert updated["employee"]["name"] == "Bob"

    def test_reassign_to_foreign_employee_rejected(self, client, register, create_employee, create_task):
        alice, bob = register(), register()
        alices_employee = create_employee(alice)
        bobs_employee = create_employee(bob)
        task = create_task(bob, bobs_employee["id"])

        response = client.put(
            f"/api/tasks/{task['id']}", json={"employeeId": alices_employee["id"]}, headers=bob
        )

        assert response.status_code == 400
        unchanged = client.get(f"/api/tasks/{task['id']}", headers=bob).json()
        assert unchanged["employeeId"] == bobs_employee["id"]
        assert unchanged["history"] == []

    def test_null_status_rejected(self, client, auth_headers, employee, create_task):
        task = create_task(auth_headers, employee["id"])

        response = client.put(f"/api/tasks/{task['id']}", json={"status": None}, headers=auth_headers)

        assert response.status_code == 400

    def test_null_title_rejected(self, client, auth_headers, employee, create_task):
        task = create_task(auth_headers, employee["id"])

        response = client.put(f"/api/tasks/{task['id']}", json={"title": None}, headers=auth_headers)

        assert response.status_code == 400
        assert "title" in response.json()["error"]
        unchanged = client.get(f"/api/tasks/{task['id']}", headers=auth_headers).json()
        assert unchanged["title"] == task["title"]
        assert unchanged["history"] == []

    def test_update_missing_task(self, client, auth_headers):
        response = client.put("/api/tasks/9999", json={"title": "x"}, headers=auth_headers)

        assert response.status_code == 404


class TestNotifications:
    """Telegram notifications are dispatched after commit, only when configured."""

    def test_no_notification_without_config(self, client, auth_headers, employee, create_task, notifier):
        task = create_task(auth_headers, employee["id"])
        client.put(f"/api/tasks/{task['id']}", json={"status": "completed"}, headers=auth_headers)

        assert notifier.dispatched == []

    def test_new_task_notification(self, client, auth_headers, employee, create_task, notifier, configure_telegram):
        configure_telegram(auth_headers)

        create_task(auth_headers, employee["id"], title="Prepare report")

        assert notifier.kinds() == ["created"]
        call = notifier.dispatched[0]
        assert call["bot_token"] == "123:ABC"
        assert call["chat_id"] == "-100500"
        assert "Prepare report" in call["text"]
        assert "@ivan" in call["text"]

    def test_completion_notifies_exactly_once(self, client, auth_headers, employee, create_task, notifier, configure_telegram):
        configure_telegram(auth_headers)
        task = create_task(auth_headers, employee["id"])

        client.put(f"/api/tasks/{task['id']}", json={"status": "in_progress"}, headers=auth_headers)
        client.put(f"/api/tasks/{task['id']}", json={"status": "completed", "result": "Done"}, headers=auth_headers)
        client.put(f"/api/tasks/{task['id']}", json={"status": "completed"}, headers=auth_headers)
        client.put(f"/api/tasks/{task['id']}", json={"title": "Renamed"}, headers=auth_headers)

        assert notifier.kinds() == ["created", "completed"]
        assert "Result: Done" in notifier.dispatched[1]["text"]

    def test_completed_again_after_reopen_notifies_again(self, client, auth_headers, employee, create_task, notifier, configure_telegram):
        configure_telegram(auth_headers)
        task = create_task(auth_headers, employee["id"], status="completed")

        client.put(f"/api/tasks/{task['id']}", json={"status": "new"}, headers=auth_headers)
        client.put(f"/api/tasks/{task['id']}", json={"status": "completed"}, headers=auth_headers)

        assert notifier.kinds() == ["created", "completed"]

    def test_failed_delivery_does_not_affect_response(self, client, auth_headers, employee, configure_telegram, notifier):
        configure_telegram(auth_headers)
        notifier.result = NotificationResult(success=False, error="Unauthorized")

        def real_dispatch(*args):
            return TelegramNotifier.dispatch(notifier, *args)

        with patch.object(notifier, "dispatch", side_effect=real_dispatch):
            response = client.post("/api/tasks", json={
                "title": "T", "employeeId": employee["id"], "deadline": "2030-01-01T00:00:00Z",
            }, headers=auth_headers)

        assert response.status_code == 201
        assert len(client.get("/api/tasks", headers=auth_headers).json()) == 1


class TestListAndGet:
    """Test GET /api/tasks and GET /api/tasks/{id}."""

    def test_list_newest_first_with_employee(self, client, auth_headers, employee, create_task):
        create_task(auth_headers, employee["id"], title="First")
        create_task(auth_headers, employee["id"], title="Second")

        tasks = client.get("/api/tasks", headers=auth_headers).json()

        assert [t["title"] for t in tasks] == ["Second", "First"]
        assert all(t["employee"]["id"] == employee["id"] for t in tasks)

    def test_filters(self, client, auth_headers, employee, create_employee, create_task):
        other = create_employee(auth_headers, name="Bob")
        create_task(auth_headers, employee["id"], title="Fix login", status="in_progress")
        create_task(auth_headers, other["id"], title="Write docs", description="Login flow")
        create_task(auth_headers, other["id"], title="Deploy")

        by_status = client.get("/api/tasks", params={"status": "in_progress"}, headers=auth_headers).json()
        by_employee = client.get("/api/tasks", params={"employeeId": other["id"]}, headers=auth_headers).json()
        by_search = client.get("/api/tasks", params={"search": "LOGIN"}, headers=auth_headers).json()

        assert [t["title"] for t in by_status] == ["Fix login"]
        assert sorted(t["title"] for t in by_employee) == ["Deploy", "Write docs"]
        assert sorted(t["title"] for t in by_search) == ["Fix login", "Write docs"]

    def test_invalid_status_filter(self, client, auth_headers):
        response = client.get("/api/tasks", params={"status": "done"}, headers=auth_headers)

        assert response.status_code == 400

    def test_get_other_users_task(self, client, register, create_employee, create_task):
        alice, bob = register(), register()
        task = create_task(alice, create_employee(alice)["id"])

        assert client.get(f"/api/tasks/{task['id']}", headers=bob).status_code == 404
        assert client.put(f"/api/tasks/{task['id']}", json={"title": "x"}, headers=bob).status_code == 404
        assert client.delete(f"/api/tasks/{task['id']}", headers=bob).status_code == 404
        assert client.get("/api/tasks", headers=bob).json() == []


class TestDeleteTask:
    """Test DELETE /api/tasks/{id}."""

    def test_delete(self, client, auth_headers, employee, create_task):
        task = create_task(auth_headers, employee["id"])

        response = client.delete(f"/api/tasks/{task['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["message"]
        assert client.get(f"/api/tasks/{task['id']}", headers=auth_headers).status_code == 404

    def test_delete_missing(self, client, auth_headers):
        assert client.delete("/api/tasks/9999", headers=auth_headers).status_code == 404

    def test_employee_deletable_after_task_deleted(self, client, auth_headers, employee, create_task):
        task = create_task(auth_headers, employee["id"])
        client.delete(f"/api/tasks/{task['id']}", headers=auth_headers)

        response = client.delete(f"/api/employees/{employee['id']}", headers=auth_headers)

        assert response.status_code == 200
