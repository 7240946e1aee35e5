import pytest

from todo_service.config import ConfigError, load_config

ENV_KEYS = [
    "PRO_TODO_WORKSPACE",
    "PRO_TODO_WEBHOOK_URL",
    "WEBHOOK_URL",
    "PRO_TODO_WEBHOOK_TIMEOUT",
    "PRO_TODO_SERVICE_TOKEN",
    "PRO_TODO_GIT_HISTORY",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_load_config_requires_workspace(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ConfigError) as excinfo:
        load_config()

    assert "PRO_TODO_WORKSPACE" in str(excinfo.value)


def test_load_config_reads_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PRO_TODO_WORKSPACE", str(tmp_path))

    config = load_config()

    assert config.workspace_path == tmp_path.resolve()
    assert config.webhook_url is None
    assert config.webhook_timeout == 5.0
    assert config.service_token is None
    assert config.git_history is False


def test_explicit_workspace_overrides_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    explicit = tmp_path / "explicit"
    monkeypatch.setenv("PRO_TODO_WORKSPACE", str(tmp_path / "env"))

    config = load_config(explicit)

    assert config.workspace_path == explicit.resolve()


def test_load_config_reads_dotenv_relative_path(monkeypatch, tmp_path):
    service_root = tmp_path / "service"
    service_root.mkdir()
    (service_root / ".env").write_text(
        'PRO_TODO_WORKSPACE="./lists"\nexport PRO_TODO_SERVICE_TOKEN=secret\n',
        encoding="utf-8",
    )
    monkeypatch.chdir(service_root)

    config = load_config()

    assert config.workspace_path == (service_root / "lists").resolve()
    assert config.service_token == "secret"


def test_load_config_prefers_env_over_dotenv(monkeypatch, tmp_path):
    env_root = tmp_path / "env"
    dotenv_root = tmp_path / "dotenv"
    (tmp_path / ".env").write_text(
        f"PRO_TODO_WORKSPACE={dotenv_root}\n", encoding="utf-8"
    )
    monkeypatch.setenv("PRO_TODO_WORKSPACE", str(env_root))
    monkeypatch.chdir(tmp_path)

    config = load_config()

    assert config.workspace_path == env_root.resolve()


def test_load_config_falls_back_to_legacy_webhook_url(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PRO_TODO_WORKSPACE", str(tmp_path))
    monkeypatch.setenv("WEBHOOK_URL", "http://hooks.test/legacy")

    assert load_config().webhook_url == "http://hooks.test/legacy"

    monkeypatch.setenv("PRO_TODO_WEBHOOK_URL", "http://hooks.test/new")

    assert load_config().webhook_url == "http://hooks.test/new"


def test_load_config_reads_flags(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PRO_TODO_WORKSPACE", str(tmp_path))
    monkeypatch.setenv("PRO_TODO_GIT_HISTORY", "yes")
    monkeypatch.setenv("PRO_TODO_WEBHOOK_TIMEOUT", "1.5")

    config = load_config()

    assert config.git_history is True
    assert config.webhook_timeout == 1.5


def test_load_config_rejects_invalid_bool(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PRO_TODO_WORKSPACE", str(tmp_path))
    monkeypatch.setenv("PRO_TODO_GIT_HISTORY", "sometimes")

    with pytest.raises(ConfigError) as excinfo:
        load_config()

    assert "PRO_TODO_GIT_HISTORY" in str(excinfo.value)


@pytest.mark.parametrize("raw_timeout", ["soon", "0", "-1"])
def test_load_config_rejects_invalid_timeout(monkeypatch, tmp_path, raw_timeout):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PRO_TODO_WORKSPACE", str(tmp_path))
    monkeypatch.setenv("PRO_TODO_WEBHOOK_TIMEOUT", raw_timeout)

    with pytest.raises(ConfigError):
        load_config()


def test_load_config_rejects_file_workspace(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "TODO.md"
    target.write_text("", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(target)
