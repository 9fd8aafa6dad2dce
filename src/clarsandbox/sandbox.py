"""Per-test sandbox directories.

A `SandboxContext` owns one sandbox path. The harness calls `enter()` before
each test and `leave()` after it, and `teardown()` once when the run ends:

    UNBUILT -> READY -> ENTERED -> READY -> ... -> TORN_DOWN

The base location (override variable, host temp directories, then the current
directory) is discovered and canonicalized once per context. Each build creates
`<base>/<name>_XXXXXX` with owner-only permissions.
"""
import atexit
import os
import platform
from enum import Enum

from . import config
from .canonical import canonicalize
from .creator import DIR_MODE, PLACEHOLDER
from .discovery import find_base_path
from .errors import (
    CapacityError,
    CleanupError,
    CreationError,
    DirectoryChangeError,
    SandboxError,
    SandboxStateError,
    describe,
)
from .fs import remove_tree
from .logging_setup import get_logger

if platform.system() == "Windows":
    from .platform import windows as default_host
else:
    from .platform import posix as default_host

logger = get_logger("clar.sandbox")


class SandboxState(str, Enum):
    UNBUILT = "unbuilt"
    READY = "ready"
    ENTERED = "entered"
    TORN_DOWN = "torn_down"


class SandboxReuse(str, Enum):
    """What `leave()` leaves behind for the next `enter()`."""

    FRESH = "fresh"  # path is consumed; the next enter builds a new unique one
    SAME = "same"  # path is kept; the next enter recreates the same directory


class CleanupPolicy(str, Enum):
    IGNORE = "ignore"
    WARN = "warn"
    RAISE = "raise"


def _coerce(enum_cls, value, setting: str):
    if isinstance(value, enum_cls):
        return value
    normalized = str(value).strip().lower()
    try:
        return enum_cls(normalized)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in enum_cls)
        raise ValueError(f"unsupported {setting} {value!r}; expected one of: {allowed}") from exc


def suffix_template(name: str) -> str:
    return f"{name}_{PLACEHOLDER}"


def resolve_base_path(max_path: int, environ=None, host=default_host) -> str:
    """Discover a writable temp location and return its canonical form."""
    found = find_base_path(host.ENV_VARS, host.system_temp_dirs(), max_path, environ)
    return canonicalize(found, host.resolve, max_path)


def create_sandbox(base: str, name: str, max_path: int, host=default_host) -> str:
    """Create a unique `<name>_XXXXXX` directory under `base` and return its path."""
    tail = suffix_template(name)
    # separator and terminator
    if len(base) + len(tail) + 2 > max_path:
        raise CapacityError(
            f"Sandbox path '{base}/{tail}' would exceed the maximum path length ({max_path}).",
            base,
        )
    if not base.endswith("/"):
        base += "/"
    return host.create_unique_dir(base + tail)


class SandboxContext:
    """One sandbox for one harness run (or one worker process)."""

    def __init__(
        self,
        name: str | None = None,
        max_path: int | None = None,
        reuse: SandboxReuse | str | None = None,
        cleanup: CleanupPolicy | str | None = None,
        environ=None,
        host=None,
    ):
        self.name = name or config.SANDBOX_NAME
        self.max_path = max_path if max_path is not None else config.MAX_PATH
        self.reuse = _coerce(SandboxReuse, reuse or config.SANDBOX_REUSE, "sandbox reuse policy")
        self.cleanup = _coerce(CleanupPolicy, cleanup or config.CLEANUP_POLICY, "cleanup policy")
        self._environ = environ
        self._host = host or default_host
        self._base: str | None = None
        self._path = ""
        self._previous_cwd: str | None = None
        self._state = SandboxState.UNBUILT
        self._exit_hook_registered = False
        self._left_behind = False

    @property
    def state(self) -> SandboxState:
        return self._state

    @property
    def base_path(self) -> str | None:
        return self._base

    @property
    def path(self) -> str:
        return self._path

    def current_path(self) -> str:
        """Absolute path of the active sandbox, or "" if none is built."""
        return self._path

    def join(self, *parts: str) -> str:
        """Forward-slash path to `parts` inside the active sandbox."""
        if not self._path:
            raise SandboxStateError("No sandbox has been built yet.")
        return "/".join([self._path.rstrip("/")] + [p.strip("/") for p in parts if p])

    def build(self) -> str:
        if self._state is SandboxState.TORN_DOWN:
            raise SandboxStateError("Sandbox has already been torn down.", self._path or None)
        if self._path:
            return self._path

        try:
            if self._base is None:
                self._base = resolve_base_path(self.max_path, self._environ, self._host)
                logger.info("Sandbox base path: %s", self._base)
            self._path = create_sandbox(self._base, self.name, self.max_path, self._host)
        except SandboxError as exc:
            logger.error("Failed to build sandbox path: %s", exc)
            raise

        if self._state is SandboxState.UNBUILT:
            self._state = SandboxState.READY
        logger.info("Sandbox created: %s", self._path)
        return self._path

    def enter(self) -> str:
        if self._state is SandboxState.ENTERED:
            raise SandboxStateError(f"Already inside sandbox '{self._path}'.", self._path)

        path = self.build()
        if self._left_behind:
            # whatever a failed cleanup left in place must not leak into the next test
            try:
                remove_tree(path)
                os.mkdir(path, DIR_MODE)
            except OSError as exc:
                raise CreationError(
                    f"Failed to recreate sandbox directory '{path}': {describe(exc)}.", path
                ) from exc
            self._left_behind = False
            logger.debug("Sandbox recreated: %s", path)

        try:
            previous = os.getcwd()
        except OSError:
            previous = os.path.dirname(path)

        try:
            os.chdir(path)
        except OSError as exc:
            raise DirectoryChangeError(
                f"Failed to change into sandbox directory '{path}': {describe(exc)}.", path
            ) from exc

        self._previous_cwd = previous
        self._state = SandboxState.ENTERED
        logger.debug("Entered sandbox %s (from %s)", path, previous)
        return path

    def leave(self) -> None:
        if self._state is not SandboxState.ENTERED:
            raise SandboxStateError(
                f"Cannot leave sandbox while it is {self._state.value}.", self._path or None
            )

        path = self._path
        self._chdir_out(path)
        self._state = SandboxState.READY
        if self.reuse is SandboxReuse.FRESH:
            self._path = ""
        else:
            self._left_behind = True
        logger.debug("Left sandbox %s", path)
        self._remove(path)

    def teardown(self) -> None:
        """Leave (if needed), delete the sandbox and retire this context."""
        if self._state is SandboxState.TORN_DOWN:
            return

        path = self._path
        if self._state is SandboxState.ENTERED:
            self._chdir_out(path)
        self._path = ""
        self._state = SandboxState.TORN_DOWN
        if path:
            logger.info("Tearing down sandbox %s", path)
            self._remove(path)

    def register_exit_hook(self) -> None:
        """Tear the sandbox down on normal interpreter exit."""
        if not self._exit_hook_registered:
            atexit.register(self.teardown)
            self._exit_hook_registered = True

    def _chdir_out(self, path: str) -> None:
        target = self._previous_cwd or os.path.dirname(path)
        try:
            os.chdir(target)
        except OSError as exc:
            raise DirectoryChangeError(
                f"Failed to leave sandbox directory '{path}' for '{target}': {describe(exc)}.",
                path,
            ) from exc
        self._previous_cwd = None

    def _remove(self, path: str) -> None:
        try:
            remove_tree(path)
        except OSError as exc:
            message = f"Failed to remove sandbox directory '{path}': {describe(exc)}."
            if self.cleanup is CleanupPolicy.RAISE:
                raise CleanupError(message, path) from exc
            if self.cleanup is CleanupPolicy.WARN:
                logger.warning(message)
            else:
                logger.debug(message)
