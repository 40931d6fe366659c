"""Merge configuration sources into a partial configuration.

Sources, lowest precedence first:

1. stored state from a previous run (``serverType``);
2. the existing manifest and the feature detector;
3. explicit command-line options.

Whatever is still ``None`` afterwards is reported as pending and handed to
the prompt orchestrator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .manifest import author_from_manifest, manifest_keywords
from .models import PROMPT_ORDER, PartialConfig, ScaffoldOptions, ServerType
from ..state import StateStore
from ..utils import deburr, kebab_case

logger = logging.getLogger(__name__)

SERVER_TYPE_KEY = "serverType"


@dataclass
class Resolution:
    """Merged configuration plus the fields that still need a prompt."""

    config: PartialConfig
    pending: list[str] = field(default_factory=list)


def _state_layer(state: StateStore | None) -> dict[str, Any]:
    if state is None:
        return {}
    stored = state.get(SERVER_TYPE_KEY)
    try:
        return {"server_type": ServerType(stored)} if stored else {}
    except ValueError:
        logger.warning("Ignoring unknown stored server type %r", stored)
        return {}


def _manifest_layer(manifest: dict[str, Any]) -> dict[str, Any]:
    author = author_from_manifest(manifest)
    layer: dict[str, Any] = {
        "name": manifest.get("name") or None,
        "description": manifest.get("description") or None,
        "homepage": manifest.get("homepage") or None,
        "author_name": author.name,
        "author_email": author.email,
        "author_url": author.url,
    }
    # An empty keyword list stays pending.
    keywords = manifest_keywords(manifest)
    if keywords:
        layer["keywords"] = keywords
    return layer


def _cli_layer(options: ScaffoldOptions) -> dict[str, Any]:
    return {
        "name": kebab_case(options.name) if options.name else None,
        "server_type": options.server_type,
        "github_account": options.github_account,
    }


def resolve(
    manifest: dict[str, Any],
    options: ScaffoldOptions,
    detected: PartialConfig,
    state: StateStore | None = None,
) -> Resolution:
    """Merge every non-interactive source.

    Args:
        manifest: The project manifest as read at start-up (possibly empty).
        options: Parsed command-line options.
        detected: Output of the feature detector.
        state: Project state store snapshot.

    Returns:
        A ``Resolution`` whose ``pending`` list follows the prompt order.
    """
    config = PartialConfig()
    for layer in (
        _state_layer(state),
        _manifest_layer(manifest),
        detected.resolved(),
        _cli_layer(options),
    ):
        config = config.overlay(layer)

    pending = config.unresolved(PROMPT_ORDER)
    logger.debug("Resolved %s; pending prompts: %s", config.resolved(), pending)
    return Resolution(config=config, pending=pending)


def project_dir_name(name: str) -> str:
    """Directory name derived from a project name (``"My Cool App"`` -> ``"my-cool-app"``)."""
    return kebab_case(deburr(name))


def relocate_root(root: str | Path, name: str) -> Path:
    """Return the destination root for a project that gets its own directory.

    Idempotent: a root that is already the project directory is returned
    unchanged.
    """
    root = Path(root)
    dir_name = project_dir_name(name)
    if not dir_name or root.name == dir_name:
        return root
    return root / dir_name
