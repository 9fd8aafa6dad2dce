"""Exceptions raised while provisioning or tearing down a sandbox."""


class SandboxError(RuntimeError):
    """Base error for sandbox failures."""

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class DiscoveryError(SandboxError):
    """No candidate location is an existing, writable directory."""


class CanonicalizationError(SandboxError):
    """The discovered location could not be resolved to an absolute path."""


class CapacityError(SandboxError):
    """Base path plus the unique suffix would exceed the maximum path length."""


class CreationError(SandboxError):
    """The unique sandbox directory could not be created."""


class DirectoryChangeError(SandboxError):
    """Changing into or out of the sandbox failed."""


class CleanupError(SandboxError):
    """The sandbox tree could not be removed."""


class SandboxStateError(SandboxError):
    """The operation is not valid in the sandbox's current lifecycle state."""


def describe(exc: OSError) -> str:
    return exc.strerror or str(exc)
