"""Reading and writing the project manifest (``package.json``)."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from .models import AuthorInfo, unique_keywords
from ..utils import write_json

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"

# Scalars whose falsy values count as "not set" so generator defaults apply.
SCALAR_FIELDS: tuple[str, ...] = ("name", "version", "description", "homepage", "main", "license")

# npm person format: "Name <email> (url)", every part optional.
_AUTHOR_RE = re.compile(r"^\s*([^<>()]*?)\s*(?:<([^<>]*)>)?\s*(?:\(([^()]*)\))?\s*$")


def read_manifest(root: str | Path) -> dict[str, Any]:
    """Load ``package.json`` from *root*.

    A missing, unreadable or non-object manifest yields ``{}``.  Falsy
    keywords are dropped.
    """
    path = Path(root) / MANIFEST_FILE
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring malformed manifest %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring manifest %s: top-level value is not an object", path)
        return {}

    if isinstance(data.get("keywords"), list):
        data["keywords"] = [k for k in data["keywords"] if k]
    return data


def write_manifest(root: str | Path, manifest: dict[str, Any]) -> Path:
    """Write *manifest* to ``<root>/package.json``."""
    return write_json(manifest, Path(root) / MANIFEST_FILE)


def normalize_scalars(manifest: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of *manifest* with falsy well-known scalars removed."""
    return {
        key: value
        for key, value in manifest.items()
        if key not in SCALAR_FIELDS or value
    }


def manifest_keywords(manifest: dict[str, Any]) -> list[str]:
    keywords = manifest.get("keywords")
    return unique_keywords(keywords) if isinstance(keywords, list) else []


def is_established(manifest: dict[str, Any]) -> bool:
    """Whether the manifest looks like one this tool wrote before.

    Generated manifests always carry the author as a structured record, so
    that is the signal used to trust filesystem markers.
    """
    return isinstance(manifest.get("author"), dict)


def parse_author(text: str | None) -> AuthorInfo:
    """Parse an npm person string such as ``"Jane <jane@x.io> (https://x.io)"``.

    Best effort: anything that does not fit the format produces an empty
    ``AuthorInfo`` so the author prompts are shown instead.
    """
    if not text:
        return AuthorInfo()
    match = _AUTHOR_RE.match(text)
    if match is None:
        logger.debug("Could not parse author string %r", text)
        return AuthorInfo()
    name, email, url = (part.strip() if part else None for part in match.groups())
    return AuthorInfo(name=name or None, email=email or None, url=url or None)


def author_from_manifest(manifest: dict[str, Any]) -> AuthorInfo:
    """Extract the author from a structured record or a free-text string."""
    author = manifest.get("author")
    if isinstance(author, dict):
        return AuthorInfo(
            name=author.get("name") or None,
            email=author.get("email") or None,
            url=author.get("url") or None,
        )
    if isinstance(author, str):
        return parse_author(author)
    return AuthorInfo()
