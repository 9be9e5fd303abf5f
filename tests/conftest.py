"""Shared test fixtures for benchstage tests.

Provides log capture, in-memory storage, fast retry settings and
CliRunner fixtures.
"""

from __future__ import annotations

import os
from collections.abc import Generator

import pytest
import structlog
from click.testing import CliRunner
from structlog.testing import LogCapture

from benchstage.config import StagingSettings
from benchstage.pipeline import StagingPipeline
from benchstage.storage import InMemoryStorage


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep BENCHSTAGE_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("BENCHSTAGE_"):
            monkeypatch.delenv(name)


@pytest.fixture
def log_output() -> LogCapture:
    """Return a structlog processor that records every event."""
    return LogCapture()


@pytest.fixture(autouse=True)
def _capture_logs(log_output: LogCapture) -> Generator[None, None, None]:
    structlog.configure(processors=[log_output])
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings() -> StagingSettings:
    """Memory backend settings with retries that do not sleep."""
    return StagingSettings(
        storage_backend="memory",
        retry_initial_wait_seconds=0,
        retry_max_wait_seconds=0,
    )


@pytest.fixture
def memory_storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def pipeline(memory_storage: InMemoryStorage, settings: StagingSettings) -> StagingPipeline:
    """StagingPipeline over the default catalog and ``memory_storage``."""
    return StagingPipeline(memory_storage, settings=settings)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner.

    Returns:
        CliRunner instance for testing CLI commands.
    """
    return CliRunner()
