"""Sub-generators -- self-contained units that each own one slice of setup.

The planner decides whether each one runs and with which parameters; a
sub-generator only ever sees its own small parameter record.  All of them
render from ``templates/<name>/`` through the shared ``TemplateRenderer``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .templates import TemplateRenderer
from ..resolver.manifest import read_manifest, write_manifest
from ..utils import kebab_case, print_warning, run_command

logger = logging.getLogger(__name__)


class SubGenerator:
    """Base class: render templates for one concern into a project root."""

    name: str = ""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    async def run(self, root: Path, params: dict[str, Any]) -> list[Path]:
        """Generate this sub-generator's files under *root*.

        Returns:
            The paths written.
        """
        raise NotImplementedError

    @staticmethod
    def _update_manifest(root: Path, fields: dict[str, Any]) -> None:
        """Add *fields* to ``package.json`` where they are not already set."""
        manifest = read_manifest(root)
        missing = {k: v for k, v in fields.items() if v and not manifest.get(k)}
        if missing:
            manifest.update(missing)
            write_manifest(root, manifest)


class CIGenerator(SubGenerator):
    """Travis CI configuration."""

    name = "ci"

    async def run(self, root: Path, params: dict[str, Any]) -> list[Path]:
        return [await self.renderer.render_to_file("ci/travis.yml.j2", root / ".travis.yml", params)]


class EditorConfigGenerator(SubGenerator):
    name = "editorconfig"

    async def run(self, root: Path, params: dict[str, Any]) -> list[Path]:
        return [
            await self.renderer.render_to_file(
                "editorconfig/editorconfig.j2", root / ".editorconfig", params
            )
        ]


class GitGenerator(SubGenerator):
    """``.gitignore``, the manifest ``repository`` field, and ``git init``."""

    name = "git"

    async def run(self, root: Path, params: dict[str, Any]) -> list[Path]:
        written = [
            await self.renderer.render_to_file("git/gitignore.j2", root / ".gitignore", params)
        ]

        account = params.get("github_account")
        if account:
            self._update_manifest(
                root, {"repository": f"{account}/{kebab_case(params.get('name') or '')}"}
            )

        if not (root / ".git").exists():
            code, _, err = await run_command(["git", "init", "--quiet"], cwd=root)
            if code != 0:
                print_warning(f"git init failed in {root}: {err}")
        return written


class LicenseGenerator(SubGenerator):
    """MIT ``LICENSE`` file plus the manifest ``license`` field."""

    name = "license"
    license_id = "MIT"

    async def run(self, root: Path, params: dict[str, Any]) -> list[Path]:
        context = {
            "year": datetime.now(timezone.utc).year,
            "name": params.get("name") or "",
            "email": params.get("email") or "",
            "website": params.get("website") or "",
        }
        path = await self.renderer.render_to_file("license/MIT.j2", root / "LICENSE", context)
        self._update_manifest(root, {"license": self.license_id})
        return [path]


class ReadmeGenerator(SubGenerator):
    name = "readme"

    async def run(self, root: Path, params: dict[str, Any]) -> list[Path]:
        context = {
            "name": params.get("name") or root.name,
            "description": params.get("description") or "",
            "github_account": params.get("github_account") or "",
            "author_name": params.get("author_name") or "",
            "author_url": params.get("author_url") or "",
            "content": params.get("content") or "",
        }
        return [await self.renderer.render_to_file("readme/README.md.j2", root / "README.md", context)]


class ConfigGenerator(SubGenerator):
    """``config/default.js`` for the electrode-confippet loader."""

    name = "config"

    async def run(self, root: Path, params: dict[str, Any]) -> list[Path]:
        return [
            await self.renderer.render_to_file(
                "config/default.js.j2", root / "config" / "default.js", params
            )
        ]


class WebappGenerator(SubGenerator):
    """Server-side web-app plugin, plus the auto-SSR plugin when enabled."""

    name = "webapp"

    async def run(self, root: Path, params: dict[str, Any]) -> list[Path]:
        plugins = root / "server" / "plugins"
        written = [
            await self.renderer.render_to_file(
                "webapp/index.js.j2", plugins / "webapp" / "index.js", params
            )
        ]
        if params.get("auto_ssr"):
            written.append(
                await self.renderer.render_to_file(
                    "webapp/autossr.js.j2", plugins / "autossr.js", params
                )
            )
        return written


SUBGENERATOR_CLASSES: tuple[type[SubGenerator], ...] = (
    CIGenerator,
    EditorConfigGenerator,
    GitGenerator,
    LicenseGenerator,
    ReadmeGenerator,
    ConfigGenerator,
    WebappGenerator,
)


def build_registry(renderer: TemplateRenderer) -> dict[str, SubGenerator]:
    """Instantiate every sub-generator, keyed by its invocation name."""
    return {cls.name: cls(renderer) for cls in SUBGENERATOR_CLASSES}
