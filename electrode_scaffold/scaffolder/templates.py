"""Jinja2 template rendering for project scaffolding.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``electrode_scaffold/scaffolder/templates/`` directory and renders them with
project-specific context data.  Supports single-file rendering, tree
rendering with glob exclusions, string rendering, and verbatim copies for
binary assets that must never pass through the template engine.
"""

from __future__ import annotations

import asyncio
import fnmatch
import shutil
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from ..errors import TemplateNotFoundError
from ..utils import kebab_case


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

TEMPLATE_SUFFIX = ".j2"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Output names are the template names without the
    ``.j2`` suffix.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["kebab_case"] = kebab_case

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"app/gulpfile.js.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    # -- File-based rendering (async) --------------------------------------

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*.

        Parent directories are created automatically.  Returns the output path.
        """
        content = self.render(template_path, context)
        out = Path(output_path)
        await asyncio.to_thread(_write_file, out, content)
        return out

    async def render_tree(
        self,
        template_prefix: str,
        output_dir: str | Path,
        context: dict[str, Any],
        *,
        ignore: list[str] | None = None,
    ) -> list[Path]:
        """Render every ``*.j2`` file under *template_prefix* to *output_dir*.

        The directory structure is preserved: a template at
        ``app/src/server/index.js.j2`` rendered with
        ``template_prefix="app/src/server"`` writes ``<output_dir>/index.js``.

        Args:
            template_prefix: Subdirectory inside the template root to scan.
            output_dir: Target directory where rendered files are written.
            context: Template context variables.
            ignore: Glob patterns matched against the template's absolute
                path without the ``.j2`` suffix (e.g.
                ``"**/src/server/koa-server.js"``).

        Returns:
            List of written file paths.
        """
        prefix_path = self.template_dir / template_prefix
        if not prefix_path.is_dir():
            raise TemplateNotFoundError(template_prefix, prefix_path)

        written: list[Path] = []
        out_base = Path(output_dir)

        for template_file in sorted(prefix_path.rglob(f"*{TEMPLATE_SUFFIX}")):
            if is_ignored(template_file, ignore or []):
                continue
            rel = template_file.relative_to(prefix_path).as_posix()
            output_file = out_base / rel[: -len(TEMPLATE_SUFFIX)]
            template_key = f"{template_prefix}/{rel}"
            written.append(await self.render_to_file(template_key, output_file, context))

        return written

    async def render_path(
        self,
        source: str,
        destination: str | Path,
        context: dict[str, Any],
        *,
        ignore: list[str] | None = None,
    ) -> list[Path]:
        """Render *source* whether it names a single template or a subtree."""
        single = f"{source}{TEMPLATE_SUFFIX}"
        if (self.template_dir / single).is_file():
            return [await self.render_to_file(single, destination, context)]
        return await self.render_tree(source, destination, context, ignore=ignore)

    async def copy_tree(self, source: str, destination: str | Path) -> list[Path]:
        """Copy every file under *source* byte for byte (no rendering)."""
        src_root = self.template_dir / source
        if not src_root.is_dir():
            raise TemplateNotFoundError(source, src_root)

        copied: list[Path] = []
        for src in sorted(p for p in src_root.rglob("*") if p.is_file()):
            dst = Path(destination) / src.relative_to(src_root)
            await asyncio.to_thread(_copy_file, src, dst)
            copied.append(dst)
        return copied


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def is_ignored(template_file: Path, patterns: list[str]) -> bool:
    """Whether *template_file* (``.j2`` suffix stripped) matches any glob."""
    path = template_file.as_posix()
    if path.endswith(TEMPLATE_SUFFIX):
        path = path[: -len(TEMPLATE_SUFFIX)]
    return any(fnmatch.fnmatchcase(path, pattern) for pattern in patterns if pattern)


def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def _copy_file(src: Path, dst: Path) -> None:
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, dst)
