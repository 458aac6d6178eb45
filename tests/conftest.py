"""Shared fixtures for buildtime_profiler tests."""

from collections.abc import Generator

import pytest
from helpers import FakeClock
from loguru import logger

from buildtime_profiler import Artifact, ModuleKey


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def log_messages() -> Generator[list[str], None, None]:
    """Collect loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def module_a() -> ModuleKey:
    return ModuleKey("org.example", "module-a", "1.0")


@pytest.fixture
def module_b() -> ModuleKey:
    return ModuleKey("org.example", "module-b", "1.0")


@pytest.fixture
def lib_artifact() -> Artifact:
    return Artifact("org.example", "lib", "1.0")
