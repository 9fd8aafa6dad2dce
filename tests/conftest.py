import importlib
import os
import sys
from pathlib import Path

import pytest

# Make src/ importable without an install.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

pytest_plugins = ["pytester", "clarsandbox.pytest_plugin"]

# Ensure pytest has a usable temp directory even on restricted setups.
_root_tmp = Path(__file__).resolve().parent / ".tmp"
_root_tmp.mkdir(parents=True, exist_ok=True)
os.environ.setdefault("TMP", str(_root_tmp))
os.environ.setdefault("TEMP", str(_root_tmp))

TMP_VARS = ("CLAR_TMP", "TMPDIR", "TMP", "TEMP", "USERPROFILE")
CONFIG_KEYS = (
    "CLAR_TMPDIR",
    "CLAR_MAX_PATH",
    "CLAR_SANDBOX_REUSE",
    "CLAR_CLEANUP_POLICY",
    "CLAR_ABORT_ON_SANDBOX_ERROR",
    "CLAR_LOG_PATH",
    "CLAR_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Drop every variable sandbox discovery looks at."""
    for name in TMP_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def reload_config(monkeypatch, tmp_path):
    """Reload clarsandbox.config with a controlled environment and .env file."""
    import clarsandbox.config as config

    def _reload(env=None, dotenv=""):
        local_env = tmp_path / ".env"
        local_env.write_text(dotenv, encoding="utf-8")
        monkeypatch.setenv("CLAR_ENV_FILE", str(local_env))
        for key in CONFIG_KEYS:
            # set-then-delete so values injected by load_dotenv are undone too
            monkeypatch.setenv(key, "")
            monkeypatch.delenv(key)
        for k, v in (env or {}).items():
            monkeypatch.setenv(k, v)
        return importlib.reload(config)

    yield _reload

    monkeypatch.undo()
    importlib.reload(config)
