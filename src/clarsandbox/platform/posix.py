import os
from ..creator import mkdtemp

ENV_VARS = ("CLAR_TMP", "TMPDIR", "TMP", "TEMP", "USERPROFILE")


def system_temp_dirs():
    return ["/tmp"]


def resolve(path: str) -> str:
    return os.path.realpath(path, strict=True)


create_unique_dir = mkdtemp
