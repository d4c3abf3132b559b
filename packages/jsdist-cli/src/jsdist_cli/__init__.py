# SPDX-License-Identifier: MIT
"""Command line interface for building package manifests."""

__version__ = "0.1.0"
