# SPDX-License-Identifier: MIT
"""CLI command implementations."""

from . import build, catalog, entries

__all__ = ["entries", "build", "catalog"]
