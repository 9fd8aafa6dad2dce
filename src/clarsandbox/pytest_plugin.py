"""pytest integration: run a test inside a fresh sandbox directory.

    def test_writes_fixture(clar_sandbox):
        open("out.txt", "w").close()
        assert os.path.exists(clar_sandbox.join("out.txt"))
"""
import pytest

from . import config
from .errors import SandboxError
from .logging_setup import get_logger
from .sandbox import SandboxContext

logger = get_logger("clar.pytest")


@pytest.fixture(scope="session")
def clar_sandbox_context():
    """One sandbox context per pytest process, torn down at session end."""
    context = SandboxContext()
    yield context
    context.teardown()


@pytest.fixture
def clar_sandbox(clar_sandbox_context):
    try:
        clar_sandbox_context.enter()
    except SandboxError as exc:
        logger.error("Sandbox provisioning failed: %s", exc)
        if config.ABORT_ON_PROVISION_FAILURE:
            pytest.exit(f"sandbox provisioning failed: {exc}", returncode=3)
        raise
    yield clar_sandbox_context
    clar_sandbox_context.leave()
