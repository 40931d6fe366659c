"""Configuration resolution -- manifest reading, feature detection, merging
and interactive prompting.

Quick usage::

    from electrode_scaffold.resolver import detect_features, read_manifest, resolve

    manifest = read_manifest(root)
    detected = detect_features(root, established=is_established(manifest))
    resolution = resolve(manifest, ScaffoldOptions(), detected, state)
"""

from electrode_scaffold.resolver.detector import FEATURE_MARKERS, SERVER_ENTRY_FILES, detect_features
from electrode_scaffold.resolver.manifest import is_established, parse_author, read_manifest
from electrode_scaffold.resolver.models import (
    PROMPT_ORDER,
    AuthorInfo,
    PartialConfig,
    QuoteStyle,
    ResolvedConfig,
    ScaffoldOptions,
    ServerType,
)
from electrode_scaffold.resolver.resolver import Resolution, relocate_root, resolve

__all__ = [
    "AuthorInfo",
    "FEATURE_MARKERS",
    "PROMPT_ORDER",
    "PartialConfig",
    "QuoteStyle",
    "Resolution",
    "ResolvedConfig",
    "SERVER_ENTRY_FILES",
    "ScaffoldOptions",
    "ServerType",
    "detect_features",
    "is_established",
    "parse_author",
    "read_manifest",
    "relocate_root",
    "resolve",
]
