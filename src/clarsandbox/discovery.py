import os
from .errors import DiscoveryError
from .logging_setup import get_logger

logger = get_logger("clar.discovery")


def is_valid_tmp_path(path: str, max_path: int) -> bool:
    """True if `path` is an existing, writable directory short enough to extend."""
    if not os.path.isdir(path):
        return False
    if not os.access(path, os.W_OK):
        return False
    return len(path) < max_path


def find_base_path(env_vars, system_dirs, max_path: int, environ=None) -> str:
    """Return the first usable temp location, in priority order.

    Environment variables come first (unset ones are skipped), then the host's
    conventional temp directories, then the current directory.
    """
    if environ is None:
        environ = os.environ

    for name in env_vars:
        value = environ.get(name)
        if not value:
            continue
        if is_valid_tmp_path(value, max_path):
            logger.debug("Using %s=%s as sandbox base", name, value)
            return value
        logger.debug("Ignoring %s=%s: not a writable directory", name, value)

    for path in system_dirs:
        if path and is_valid_tmp_path(path, max_path):
            logger.debug("Using system temp directory %s as sandbox base", path)
            return path

    # This system doesn't like us, try the current directory
    if is_valid_tmp_path(".", max_path):
        logger.warning("No usable temp directory found; falling back to the current directory")
        return "."

    raise DiscoveryError("Failed to find a writable temporary directory for the sandbox.")
