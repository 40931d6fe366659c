"""Shared pytest fixtures for the electrode-scaffold test suite.

Provides reusable fixtures for:
- Temporary destination directories (fresh and previously generated)
- A scripted prompter that records which questions were asked
- Settings that keep remembered answers inside the test's tmp_path
- Mocked subprocess helpers for git and npm
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from electrode_scaffold.config import Settings
from electrode_scaffold.resolver.prompts import PROMPTS
from electrode_scaffold.scaffolder.templates import TemplateRenderer

GITHUB_PROMPT = "GitHub username or organization"

MESSAGES: dict[str, str] = {spec.key: spec.message for spec in PROMPTS}
MESSAGES["github_account"] = GITHUB_PROMPT


# ---------------------------------------------------------------------------
# Prompting
# ---------------------------------------------------------------------------

class ScriptedPrompter:
    """Prompter that answers from a dict keyed by configuration field.

    Unscripted questions get their default.  ``asked`` lists the fields in
    the order they were asked.
    """

    def __init__(self, answers: dict[str, Any] | None = None) -> None:
        self.answers = {MESSAGES[k]: v for k, v in (answers or {}).items()}
        self._fields = {message: key for key, message in MESSAGES.items()}
        self.asked: list[str] = []
        self.defaults: dict[str, Any] = {}

    def _answer(self, message: str, default: Any) -> Any:
        key = self._fields.get(message, message)
        self.asked.append(key)
        self.defaults[key] = default
        return self.answers.get(message, default)

    def text(self, message: str, default: str | None = None) -> str:
        value = self._answer(message, default)
        return "" if value is None else value

    def choice(self, message: str, choices: list[str], default: str) -> str:
        value = self._answer(message, default)
        assert value in choices
        return value

    def confirm(self, message: str, default: bool) -> bool:
        return bool(self._answer(message, default))


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def make_prompter():
    """Factory for scripted prompters with specific answers."""
    return ScriptedPrompter


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Empty destination directory (auto-cleanup)."""
    project_dir = tmp_path / "workspace"
    project_dir.mkdir()
    yield project_dir


def write_manifest(root: Path, manifest: dict[str, Any]) -> Path:
    path = root / "package.json"
    path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    return path


def touch(root: Path, relative: str, content: str = "") -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def established_project(tmp_project_dir: Path) -> Path:
    """A destination that a previous run generated with ExpressJS."""
    write_manifest(
        tmp_project_dir,
        {
            "name": "shop-front",
            "version": "1.2.0",
            "description": "Existing storefront",
            "homepage": "https://shop.example.com",
            "author": {
                "name": "Jane Doe",
                "email": "jane@example.com",
                "url": "https://jane.example.com",
            },
            "keywords": ["web", "ui"],
            "license": "Apache-2.0",
            "dependencies": {"zeta": "^1.0.0", "alpha": "^2.0.0", "mu": "^3.0.0"},
        },
    )
    touch(tmp_project_dir, "src/server/express-server.js")
    touch(tmp_project_dir, "README.md", "# shop-front\n")
    return tmp_project_dir


# ---------------------------------------------------------------------------
# Settings & rendering
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings whose user-global answers store lives under tmp_path."""
    return Settings(answers_path=tmp_path / "home" / "answers.json")


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Mock subprocess
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Patch every ``run_command`` call site to succeed without spawning."""
    mock = AsyncMock(return_value=(0, "", ""))
    with patch("electrode_scaffold.scaffolder.subgenerators.run_command", mock), \
         patch("electrode_scaffold.scaffolder.executor.run_command", mock), \
         patch("electrode_scaffold.resolver.prompts.run_command", mock):
        yield mock
