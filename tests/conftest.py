import os

import pytest

from ssh_mcp.config import SSHSettings
from ssh_mcp.SSH.handlers import SSHToolHandlers
from ssh_mcp.SSH.registry import build_registry

from .fakes import FakeExecutorFactory


@pytest.fixture
def factory() -> FakeExecutorFactory:
    return FakeExecutorFactory()


@pytest.fixture
def handlers(factory: FakeExecutorFactory) -> SSHToolHandlers:
    return SSHToolHandlers(SSHSettings(), executor_factory=factory)


@pytest.fixture
def registry(handlers: SSHToolHandlers):
    return build_registry(handlers)


@pytest.fixture
def connected(handlers: SSHToolHandlers) -> SSHToolHandlers:
    result = handlers.connect("h", "u", password="p", connection_id="c1")
    assert not result.is_error, result.text
    return handlers


@pytest.fixture
def home(tmp_path, monkeypatch) -> str:
    monkeypatch.setenv("HOME", str(tmp_path))
    return os.path.expanduser("~")
