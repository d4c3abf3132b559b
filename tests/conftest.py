# SPDX-License-Identifier: MIT
"""Pytest configuration for integration tests."""

from __future__ import annotations

import logging
from typing import Generator

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo the logging configuration installed by CLI invocations."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
