"""Plan execution -- the only stage that writes the generated project.

Steps run strictly in sequence:

1. render rules (templated subtrees, then verbatim asset copies);
2. staged dotfile renames, once every render rule finished;
3. sub-generator invocations, one after another;
4. the manifest write, against ``package.json`` re-read at this point
   because sub-generators may have edited it;
5. post actions (dependency install, optional lint auto-fix).

There is no rollback: a failure part-way leaves whatever was written.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from .subgenerators import SubGenerator, build_registry
from .templates import TemplateRenderer
from ..errors import ScaffoldError
from ..planner.models import GenerationPlan, PostAction, PostActionKind, RenameRule, RenderRule
from ..resolver.manifest import read_manifest, write_manifest
from ..utils import print_warning, run_command

logger = logging.getLogger(__name__)


class ExecutionReport(BaseModel):
    """What an execution actually did."""

    root: Path
    written: list[Path] = Field(default_factory=list)
    renamed: list[Path] = Field(default_factory=list)
    invoked: list[str] = Field(default_factory=list)
    manifest_path: Path | None = None
    actions: dict[str, int] = Field(
        default_factory=dict, description="Post action kind -> exit code"
    )

    @property
    def success(self) -> bool:
        return all(code == 0 for code in self.actions.values())


class Executor:
    """Applies a ``GenerationPlan`` to the filesystem."""

    def __init__(
        self,
        renderer: TemplateRenderer,
        registry: dict[str, SubGenerator] | None = None,
        action_timeout: int = 1800,
    ) -> None:
        self.renderer = renderer
        self.registry = registry if registry is not None else build_registry(renderer)
        self.action_timeout = action_timeout

    async def execute(self, plan: GenerationPlan, *, skip_install: bool = False) -> ExecutionReport:
        """Apply *plan*.

        Args:
            plan: The plan to apply.
            skip_install: Leave out the dependency install action.

        Returns:
            An ``ExecutionReport``.

        Raises:
            ScaffoldError: If the plan names an unknown sub-generator or a
                template that does not exist.
        """
        root = plan.root
        await asyncio.to_thread(root.mkdir, parents=True, exist_ok=True)
        report = ExecutionReport(root=root)

        for rule in plan.renders:
            report.written.extend(await self._render(root, rule))

        for rename in plan.renames:
            moved = await asyncio.to_thread(self._rename, root, rename)
            if moved is not None:
                report.renamed.append(moved)

        for invocation in plan.invocations:
            generator = self.registry.get(invocation.generator)
            if generator is None:
                raise ScaffoldError(f"Unknown sub-generator '{invocation.generator}'")
            logger.debug("Running sub-generator %s with %s", invocation.generator, invocation.params)
            report.written.extend(await generator.run(root, dict(invocation.params)))
            report.invoked.append(invocation.generator)

        manifest = plan.manifest.apply(read_manifest(root))
        report.manifest_path = await asyncio.to_thread(write_manifest, root, manifest)

        for action in plan.post_actions:
            if action.kind is PostActionKind.INSTALL and skip_install:
                logger.info("Skipping dependency install")
                continue
            report.actions[action.kind.value] = await self._run_action(root, action)

        return report

    # -- Steps -------------------------------------------------------------

    async def _render(self, root: Path, rule: RenderRule) -> list[Path]:
        destination = root / rule.destination
        if rule.verbatim:
            return await self.renderer.copy_tree(rule.source, destination)
        return await self.renderer.render_path(
            rule.source, destination, rule.context, ignore=rule.ignore
        )

    @staticmethod
    def _rename(root: Path, rule: RenameRule) -> Path | None:
        source = root / rule.source
        if not source.is_file():
            logger.debug("Nothing staged at %s", source)
            return None
        target = root / rule.destination
        source.replace(target)
        return target

    async def _run_action(self, root: Path, action: PostAction) -> int:
        code, _, err = await run_command(
            action.command, cwd=root, timeout=self.action_timeout, capture=False
        )
        if code != 0:
            detail = f": {err}" if err else ""
            print_warning(f"'{' '.join(action.command)}' exited with code {code}{detail}")
        return code


def summarize(report: ExecutionReport) -> dict[str, Any]:
    """Flatten a report into printable key/value pairs."""
    return {
        "Project root": str(report.root),
        "Files written": str(len(report.written)),
        "Sub-generators": ", ".join(report.invoked) or "-",
        "Post actions": ", ".join(f"{k} ({v})" for k, v in report.actions.items()) or "-",
    }
