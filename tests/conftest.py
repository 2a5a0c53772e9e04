"""Shared pytest fixtures for the full SpeakGenie test suite."""

from __future__ import annotations

from typing import Iterator

from loguru import logger
import pytest


@pytest.fixture(autouse=True)
def _reset_loguru_handlers() -> Iterator[None]:
    """Drop sinks added during a test so they never outlive captured streams."""

    yield
    logger.remove()
