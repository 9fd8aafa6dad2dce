import os
import platform
from pathlib import Path
from dotenv import load_dotenv

"""Environment-only configuration loader.

Reads settings from `.env` (if present) or environment variables:
- CLAR_TMPDIR
- CLAR_MAX_PATH
- CLAR_SANDBOX_REUSE
- CLAR_CLEANUP_POLICY
- CLAR_ABORT_ON_SANDBOX_ERROR
- CLAR_LOG_PATH
- CLAR_LOG_LEVEL

CLAR_TMP is deliberately not read here: it is a sandbox location candidate and
is looked up from the live environment when the sandbox is built.
"""

# Allow overriding the .env location via CLAR_ENV_FILE (useful for tests).
_ENV_FILE = os.environ.get("CLAR_ENV_FILE")
if _ENV_FILE:
    load_dotenv(Path(_ENV_FILE).expanduser(), override=False)
else:
    load_dotenv()

DEFAULT_MAX_PATH = 260 if platform.system() == "Windows" else 4096


def _path_env(key: str) -> Path | None:
    val = os.environ.get(key)
    if not val:
        return None
    expanded = os.path.expandvars(val)
    return Path(expanded).expanduser()


def _int_env(key: str, default: int) -> int:
    val = os.environ.get(key)
    if not val:
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {val!r}") from None


def _bool_env(key: str, default: bool = False) -> bool:
    val = os.environ.get(key)
    if not val:
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


SANDBOX_NAME = os.environ.get("CLAR_TMPDIR") or "clar_tmp"
MAX_PATH = _int_env("CLAR_MAX_PATH", DEFAULT_MAX_PATH)
SANDBOX_REUSE = (os.environ.get("CLAR_SANDBOX_REUSE") or "fresh").strip().lower()
CLEANUP_POLICY = (os.environ.get("CLAR_CLEANUP_POLICY") or "warn").strip().lower()
ABORT_ON_PROVISION_FAILURE = _bool_env("CLAR_ABORT_ON_SANDBOX_ERROR")
LOG_PATH = _path_env("CLAR_LOG_PATH")
LOG_LEVEL = (os.environ.get("CLAR_LOG_LEVEL") or "WARNING").strip().upper()
