"""Merge user values over the default tree."""

import copy
from typing import Any

from confsync.core.config.constants import VERSION_KEY

__all__ = ["merge_trees"]


def merge_trees(default: dict[str, Any], current: dict[str, Any] | None) -> dict[str, Any]:
    """Overlay the user's values onto a copy of the default tree.

    Rules:
    - Keys whose current value is None are ignored (default survives)
    - Mappings are merged one level deep: current's sub-keys win,
      sub-keys only in default are preserved
    - Lists are replaced (NOT merged/appended)
    - Scalar values are replaced by current
    - Keys only in current are added
    - The version key is always pinned to default's version

    Args:
        default: Default tree parsed from the template.
        current: Tree parsed from the active config (may be None).

    Returns:
        Merged tree (new dict, does not modify inputs).

    """
    result = copy.deepcopy(default)
    for key, value in (current or {}).items():
        if value is None:
            continue
        if isinstance(value, dict):
            base = result.get(key)
            merged = dict(base) if isinstance(base, dict) else {}
            merged.update(copy.deepcopy(value))
            result[key] = merged
        else:
            result[key] = copy.deepcopy(value)

    if VERSION_KEY in default:
        result[VERSION_KEY] = default[VERSION_KEY]
    return result
