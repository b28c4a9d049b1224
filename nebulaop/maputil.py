"""Helpers for string mappings."""

from __future__ import annotations

from collections.abc import Mapping


def is_sub_map(first: Mapping[str, str] | None, second: Mapping[str, str] | None) -> bool:
    """Tell whether every entry of ``first`` is present in ``second``.

    A missing key in ``second`` counts as the empty string.
    """
    for key, value in (first or {}).items():
        if second is None:
            return False
        if second.get(key, "") != value:
            return False
    return True