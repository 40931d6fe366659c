"""Manifest merge helpers.

``package.json`` is never replaced wholesale.  Generator defaults only fill
holes in the user's manifest, the template manifest sits underneath both,
and dependency groups are written with sorted keys so diffs stay small.
"""

from __future__ import annotations

import copy
from typing import Any

from ..resolver.models import unique_keywords

DEPENDENCY_GROUPS: tuple[str, ...] = (
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "optionalDependencies",
)


def defaults_deep(target: dict[str, Any], defaults: dict[str, Any]) -> dict[str, Any]:
    """Fill keys missing from *target* with values from *defaults*.

    Nested mappings are filled recursively; an existing value of any other
    kind is never overwritten.  Returns a new dict.
    """
    result = copy.deepcopy(target)
    for key, value in defaults.items():
        if value is None:
            continue
        current = result.get(key)
        if current is None:
            result[key] = copy.deepcopy(value)
        elif isinstance(current, dict) and isinstance(value, dict):
            result[key] = defaults_deep(current, value)
    return result


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge *override* onto *base*; *override* wins on conflicts.

    Mappings merge key by key, anything else (including lists) is replaced.
    Key order follows *base*, with new keys appended.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if value is None:
            continue
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def sort_dependency_groups(manifest: dict[str, Any]) -> dict[str, Any]:
    """Sort the keys of each dependency group that is a mapping (in place)."""
    for group in DEPENDENCY_GROUPS:
        deps = manifest.get(group)
        if isinstance(deps, dict):
            manifest[group] = {name: deps[name] for name in sorted(deps)}
    return manifest


def combine_keywords(prompted: list[str] | None, existing: Any) -> list[str]:
    """Union prompted and existing keywords without duplicates or blanks."""
    existing_list = existing if isinstance(existing, list) else []
    return unique_keywords(list(prompted or []) + existing_list)
