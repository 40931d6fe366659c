"""Exceptions raised by electrode-scaffold."""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Raised when a scaffolding run cannot continue."""


class TemplateNotFoundError(ScaffoldError):
    """Raised when a planned template file or subtree does not exist."""

    def __init__(self, template: str, path: Path) -> None:
        self.template = template
        self.path = path
        super().__init__(f"Template '{template}' not found at {path}")
