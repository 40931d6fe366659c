"""electrode-scaffold configuration.

Typed settings for the scaffolding run.  Values that a user rarely needs to
change (template location, the GitHub API endpoint, where remembered
answers live) are kept here instead of on the command line, and can be
overridden through ``ELECTRODE_SCAFFOLD_*`` environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "scaffolder" / "templates"
_DEFAULT_ANSWERS_PATH = Path.home() / ".config" / "electrode-scaffold" / "answers.json"


class Settings(BaseModel):
    """Global electrode-scaffold settings.

    Instances are created once by the CLI entry point (usually through
    :meth:`from_env`) and passed to the ``Scaffolder``.
    """

    template_dir: Path = Field(default=_DEFAULT_TEMPLATE_DIR)
    state_file: str = Field(
        default=".electrode-scaffold.json",
        description="Per-project state file, relative to the destination root",
    )
    state_namespace: str = Field(default="electrode-scaffold")
    answers_path: Path = Field(
        default=_DEFAULT_ANSWERS_PATH,
        description="User-global store of remembered prompt answers",
    )
    github_api_url: str = Field(default="https://api.github.com")
    lookup_timeout: float = Field(
        default=10.0, ge=1.0, description="GitHub username lookup timeout in seconds"
    )
    npm_command: str = Field(default="npm")
    install_timeout: int = Field(default=1800, ge=60)

    def state_path(self, root: Path) -> Path:
        """Path of the project state file under *root*."""
        return Path(root) / self.state_file

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            ELECTRODE_SCAFFOLD_TEMPLATE_DIR, ELECTRODE_SCAFFOLD_ANSWERS_PATH,
            ELECTRODE_SCAFFOLD_GITHUB_API, ELECTRODE_SCAFFOLD_LOOKUP_TIMEOUT,
            ELECTRODE_SCAFFOLD_NPM.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("ELECTRODE_SCAFFOLD_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["ELECTRODE_SCAFFOLD_TEMPLATE_DIR"])
        if os.environ.get("ELECTRODE_SCAFFOLD_ANSWERS_PATH"):
            kwargs["answers_path"] = Path(os.environ["ELECTRODE_SCAFFOLD_ANSWERS_PATH"])
        if os.environ.get("ELECTRODE_SCAFFOLD_GITHUB_API"):
            kwargs["github_api_url"] = os.environ["ELECTRODE_SCAFFOLD_GITHUB_API"]
        if os.environ.get("ELECTRODE_SCAFFOLD_LOOKUP_TIMEOUT"):
            kwargs["lookup_timeout"] = float(os.environ["ELECTRODE_SCAFFOLD_LOOKUP_TIMEOUT"])
        if os.environ.get("ELECTRODE_SCAFFOLD_NPM"):
            kwargs["npm_command"] = os.environ["ELECTRODE_SCAFFOLD_NPM"]
        return cls(**kwargs)
