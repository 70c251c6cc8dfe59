"""Test fixtures for mook tests."""

import sys
import types

import pytest

from mook.config import Config


@pytest.fixture(autouse=True)
def fresh_config():
    """Every test starts from the default configuration."""
    Config.reset()
    yield
    Config.reset()


@pytest.fixture
def sample_module():
    """Throwaway module with a function and a plain value."""

    def now():
        """Pretend clock."""
        return 1.5

    module = types.ModuleType("mook_sample")
    module.now = now
    module.value = 1
    return module


@pytest.fixture
def importable_module(monkeypatch, sample_module):
    """The sample module, importable as ``mook_sample``."""
    monkeypatch.setitem(sys.modules, sample_module.__name__, sample_module)
    return sample_module
