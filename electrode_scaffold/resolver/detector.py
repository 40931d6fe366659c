"""Feature detection -- infer earlier choices from files in the destination.

A project generated by a previous run carries markers of what was chosen
then: a framework-specific server entry file, the service-worker
registration script, the auto-SSR plugin, the legacy single-quote lint
config.  The tables below map each marker to the configuration value it
implies so detection order is explicit and shared with the planner.

Pure logic -- read-only existence checks, never raises for missing files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .models import PartialConfig, QuoteStyle, ServerType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureMarker:
    """A file whose presence or absence decides one configuration field."""

    path: str
    field: str
    present: Any
    absent: Any


# Server entry files in priority order.  The last entry is the fallback
# framework when no marker is found.  The planner excludes entry files from
# this same table, so both directions agree.
SERVER_ENTRY_FILES: tuple[tuple[ServerType, str], ...] = (
    (ServerType.EXPRESS, "src/server/express-server.js"),
    (ServerType.KOA, "src/server/koa-server.js"),
    (ServerType.HAPI, "src/server/hapi-server.js"),
)

FALLBACK_SERVER: ServerType = SERVER_ENTRY_FILES[-1][0]

FEATURE_MARKERS: tuple[FeatureMarker, ...] = (
    FeatureMarker("src/client/sw-registration.js", "pwa", True, False),
    FeatureMarker("server/plugins/autossr.js", "auto_ssr", True, False),
    FeatureMarker(".eslintrc", "quote_style", QuoteStyle.SINGLE, QuoteStyle.DOUBLE),
)


def detect_server_type(root: Path, established: bool = False) -> ServerType | None:
    """Return the framework whose entry file exists first in priority order.

    Without any marker the fallback framework is returned for an
    established project and ``None`` otherwise.
    """
    for server_type, entry in SERVER_ENTRY_FILES:
        if (root / entry).is_file():
            return server_type
    return FALLBACK_SERVER if established else None


def detect_features(root: str | Path, established: bool = False) -> PartialConfig:
    """Infer configuration from markers under *root*.

    A present marker is always reported.  Values implied by an *absent*
    marker are only reported for an established project (one whose manifest
    this tool wrote), because in a fresh directory absence says nothing
    about what the user wants.

    Args:
        root: Destination root to inspect.
        established: Whether the manifest shows a previous run.

    Returns:
        A ``PartialConfig`` holding only the fields that could be inferred.
    """
    root = Path(root)
    values: dict[str, Any] = {"server_type": detect_server_type(root, established)}

    for marker in FEATURE_MARKERS:
        if (root / marker.path).exists():
            values[marker.field] = marker.present
        elif established:
            values[marker.field] = marker.absent

    if established:
        values["create_directory"] = False

    detected = PartialConfig().overlay(values)
    logger.debug("Detected features in %s: %s", root, detected.resolved())
    return detected
