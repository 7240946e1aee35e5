from fastapi.testclient import TestClient

import todo_service.list_store as list_store
from todo_service.config import AppConfig
from todo_service.main import create_app
from todo_service.workspace import SERVICE_TOKEN_HEADER


class RecordingNotifier:
    def __init__(self):
        self.calls = []

    def notify_task_completed(self, task_name, list_name):
        self.calls.append((task_name, list_name))

    def close(self):
        pass


def _call(client, tool, arguments=None):
    return client.post(f"/tool:{tool}", json=arguments or {})


def test_add_list_toggle_flow(tmp_path):
    app = create_app(AppConfig(workspace_path=tmp_path))

    with TestClient(app) as client:
        notifier = RecordingNotifier()
        app.state.notifier = notifier

        added = _call(client, "add-todo", {"name": "Finalize PRD [!!!] @2024-01-01 #work"})
        assert added.status_code == 200
        assert added.json()["data"]["text"] == (
            "Added to TODO: Finalize PRD [!!!] @2024-01-01 #work"
        )

        listed = _call(client, "list-todos")
        assert listed.json()["data"]["text"] == (
            "❎ Finalize PRD [HIGH] (Due: 2024-01-01) #work"
        )

        _call(client, "add-todo", {"name": "Buy Milk #groceries", "listName": "shopping"})
        shopping = _call(client, "list-todos", {"listName": "shopping"})
        assert shopping.json()["data"]["text"] == "❎ Buy Milk #groceries"

        toggled = _call(client, "toggle-todo", {"keyword": "PRD"})
        assert toggled.json()["data"]["text"] == '"Finalize PRD" is now COMPLETED ✅'
        assert notifier.calls == [("Finalize PRD", "TODO")]

        missing = _call(client, "toggle-todo", {"keyword": "nonexistent"})
        assert missing.status_code == 200
        assert missing.json()["data"]["found"] is False

        final = _call(client, "list-todos")
        assert final.json()["data"]["text"] == (
            "✅ Finalize PRD [HIGH] (Due: 2024-01-01) #work"
        )

    assert (tmp_path / "TODO.md").read_text(encoding="utf-8") == (
        "- [x] Finalize PRD [!!!] @2024-01-01 #work\n"
    )


def test_never_created_list_is_not_an_error(tmp_path):
    with TestClient(create_app(AppConfig(workspace_path=tmp_path))) as client:
        response = _call(client, "list-todos", {"listName": "shopping"})

    assert response.status_code == 200
    assert response.json() == {
        "ok": True,
        "data": {"listName": "shopping", "text": "No tasks found.", "tasks": []},
    }


def test_invalid_input_returns_error_envelope(tmp_path):
    with TestClient(create_app(AppConfig(workspace_path=tmp_path))) as client:
        response = _call(client, "add-todo", {"name": "   "})

    assert response.status_code == 400
    payload = response.json()
    assert payload["ok"] is False
    assert payload["error"]["code"] == "INVALID_INPUT"


def test_control_character_list_name_returns_error_envelope(tmp_path):
    with TestClient(create_app(AppConfig(workspace_path=tmp_path))) as client:
        response = _call(client, "add-todo", {"name": "x", "listName": "a\x00b"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_LIST_NAME"


def test_broken_git_repo_returns_error_and_keeps_list(tmp_path):
    (tmp_path / "TODO.md").write_text("- [ ] original\n", encoding="utf-8")
    (tmp_path / ".git").write_text("not a repository", encoding="utf-8")
    config = AppConfig(workspace_path=tmp_path, git_history=True)

    with TestClient(create_app(config)) as client:
        response = _call(client, "add-todo", {"name": "new task"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "GIT_ERROR"
    assert (tmp_path / "TODO.md").read_text(encoding="utf-8") == "- [ ] original\n"


def test_storage_failure_returns_server_error(tmp_path, monkeypatch):
    def _fail(target_path, content):
        raise OSError("read-only file system")

    monkeypatch.setattr(list_store, "_atomic_write", _fail)

    with TestClient(create_app(AppConfig(workspace_path=tmp_path))) as client:
        response = _call(client, "add-todo", {"name": "Finalize PRD"})

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "STORAGE_ERROR"


def test_service_token_is_enforced(tmp_path):
    config = AppConfig(workspace_path=tmp_path, service_token="secret")

    with TestClient(create_app(config)) as client:
        health = client.get("/health")
        denied = _call(client, "list-todos")
        allowed = client.post(
            "/tool:list-todos", json={}, headers={SERVICE_TOKEN_HEADER: "secret"}
        )

    assert health.status_code == 200
    assert denied.status_code == 403
    assert denied.json()["error"]["code"] == "AUTH_FORBIDDEN"
    assert allowed.status_code == 200


def test_tools_endpoint_returns_tool_definitions(tmp_path):
    with TestClient(create_app(AppConfig(workspace_path=tmp_path))) as client:
        response = client.get("/tools")

    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    names = {tool["function"]["name"] for tool in payload["data"]["tools"]}
    assert {"list-todos", "add-todo", "toggle-todo"} <= names


def test_webhook_notifier_built_from_config(tmp_path):
    config = AppConfig(workspace_path=tmp_path, webhook_url="http://hooks.test/done")
    app = create_app(config)

    with TestClient(app):
        assert app.state.notifier is not None
        assert app.state.notifier.url == "http://hooks.test/done"

    without_url = create_app(AppConfig(workspace_path=tmp_path))
    with TestClient(without_url):
        assert without_url.state.notifier is None
