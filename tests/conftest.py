"""Shared test fixtures."""

import logging
from collections.abc import Iterator

import pytest

from tests.fakes import FakeAsciiRenderer, FakeRenderer


@pytest.fixture(autouse=True)
def reset_maidy_logger() -> Iterator[None]:
    """Drop handlers the CLI attaches so they don't outlive CliRunner streams."""
    yield
    package_logger = logging.getLogger("maidy")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def ascii_renderer() -> FakeAsciiRenderer:
    return FakeAsciiRenderer()
