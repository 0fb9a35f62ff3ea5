import math

import pytest

from gune.interpreter import Interpreter
from gune.types.environment import Environment


@pytest.fixture
def env():
    """Fresh root environment with no bindings."""
    return Environment()


@pytest.fixture
def interp():
    """Interpreter seeded with pi only, independent of GUNE_CONSTANTS."""
    return Interpreter(constants={"pi": math.pi})


@pytest.fixture(autouse=True)
def _clean_gune_environment(monkeypatch):
    # Keep configuration deterministic regardless of the caller's shell
    for var in ("GUNE_CONSTANTS", "GUNE_PROMPT", "GUNE_LOG_LEVEL", "GUNE_REPL_HOST", "GUNE_REPL_PORT"):
        monkeypatch.delenv(var, raising=False)
