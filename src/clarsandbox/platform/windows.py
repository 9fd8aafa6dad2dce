import pywintypes
import win32api
from ..canonical import normalize_separators
from ..creator import mktemp_then_mkdir

ENV_VARS = ("CLAR_TMP", "TMP", "TEMP", "USERPROFILE")


def system_temp_dirs():
    try:
        return [win32api.GetTempPath()]
    except pywintypes.error:
        return []


def resolve(path: str) -> str:
    """Absolute long-form path with forward slashes."""
    try:
        full = win32api.GetFullPathName(path)
        long_path = win32api.GetLongPathName(full)
    except pywintypes.error as exc:
        raise OSError(exc.winerror, exc.strerror, path) from exc
    return normalize_separators(long_path)


# MSVCRT has no mkdtemp; the name is generated first and created afterwards.
create_unique_dir = mktemp_then_mkdir
