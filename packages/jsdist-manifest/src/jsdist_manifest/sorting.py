# SPDX-License-Identifier: MIT
"""Deterministic key ordering for published package.json files."""

from __future__ import annotations

from typing import Any, Mapping

from .exports import is_conditions_object
from .schema import DEPENDENCY_FIELDS, FIELD_ORDER

_FIELD_RANK = {name: index for index, name in enumerate(FIELD_ORDER)}

# Additional name-sorted maps
_SORTED_MAP_FIELDS = DEPENDENCY_FIELDS + (
    "bundledDependencies",
    "dependenciesMeta",
    "peerDependenciesMeta",
    "engines",
)


def _manifest_key(key: str) -> tuple[int, int, str]:
    """Known fields first, then other fields, then private ``_`` fields."""
    if key in _FIELD_RANK:
        return (0, _FIELD_RANK[key], "")
    if key.startswith("_"):
        return (2, 0, key)
    return (1, 0, key)


def sort_conditions(exports: Any) -> Any:
    """Order condition keys with ``types`` first and ``default`` last.

    Other conditions keep their relative order, which is significant for
    resolution. Subpath objects keep their order.
    """
    if isinstance(exports, list):
        return [sort_conditions(item) for item in exports]
    if not isinstance(exports, dict):
        return exports

    items = [(key, sort_conditions(value)) for key, value in exports.items()]
    if not is_conditions_object(exports):
        return dict(items)

    def rank(item: tuple[str, Any]) -> int:
        if item[0] == "types":
            return 0
        if item[0] == "default":
            return 2
        return 1

    return dict(sorted(items, key=rank))


def sort_manifest(manifest: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of a manifest with deterministically ordered keys.

    Example:
        >>> list(sort_manifest({"version": "1.0.0", "zeta": 1, "name": "pkg"}))
        ['name', 'version', 'zeta']
    """
    result: dict[str, Any] = {}
    for key in sorted(manifest, key=_manifest_key):
        value = manifest[key]
        if key in _SORTED_MAP_FIELDS and isinstance(value, dict):
            value = dict(sorted(value.items()))
        elif key == "exports":
            value = sort_conditions(value)
        result[key] = value
    return result
