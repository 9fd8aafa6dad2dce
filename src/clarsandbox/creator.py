"""Unique sandbox directory creation.

Two strategies share one contract: given a path template ending in six `X`
placeholders, create a directory with owner-only permissions at a
collision-free name and return that name.

- `mkdtemp`: generating the name and creating the directory is a single
  `mkdir` call, which fails rather than reuses an existing entry. A collision
  only means "try another name", the same loop libc's mkdtemp runs.
- `mktemp_then_mkdir`: pick a name that does not exist yet, then create it.
  Another process can claim the name in between; that surfaces as a
  CreationError instead of a retry.
"""
import os
import random
import string
import tempfile
from .errors import CreationError, describe

PLACEHOLDER = "XXXXXX"
NAME_CHARS = string.ascii_letters + string.digits
DIR_MODE = 0o700

_rng = random.SystemRandom()


def _check_template(template: str) -> str:
    if not template.endswith(PLACEHOLDER):
        raise ValueError(f"template must end with {PLACEHOLDER!r}: {template!r}")
    return template[: -len(PLACEHOLDER)]


def _candidates(prefix: str):
    for _ in range(tempfile.TMP_MAX):
        yield prefix + "".join(_rng.choice(NAME_CHARS) for _ in PLACEHOLDER)


def mkdtemp(template: str) -> str:
    prefix = _check_template(template)
    for candidate in _candidates(prefix):
        try:
            os.mkdir(candidate, DIR_MODE)
        except FileExistsError:
            continue
        except OSError as exc:
            raise CreationError(
                f"Failed to create sandbox directory '{candidate}': {describe(exc)}.", candidate
            ) from exc
        return candidate
    raise CreationError(f"No unused sandbox name left for template '{template}'.", template)


def mktemp(template: str) -> str:
    """Generate an unused name for `template` without creating anything."""
    prefix = _check_template(template)
    for candidate in _candidates(prefix):
        if not os.path.lexists(candidate):
            return candidate
    raise CreationError(f"No unused sandbox name left for template '{template}'.", template)


def mktemp_then_mkdir(template: str) -> str:
    path = mktemp(template)
    try:
        os.mkdir(path, DIR_MODE)
    except OSError as exc:
        raise CreationError(
            f"Failed to create sandbox directory '{path}': {describe(exc)}.", path
        ) from exc
    return path
