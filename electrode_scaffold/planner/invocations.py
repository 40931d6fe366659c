"""Sub-generator dispatch table.

Each row names a sub-generator, the predicate that decides whether it runs,
and the builder of the small parameter record it receives.  Predicates only
look at pre-existing state (options, the start-up manifest, files already in
the destination) so earlier output is never clobbered.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from .models import Invocation
from ..resolver.models import ResolvedConfig, ScaffoldOptions


@dataclass(frozen=True)
class PlanInputs:
    """What predicates and parameter builders may look at."""

    config: ResolvedConfig
    options: ScaffoldOptions
    root: Path
    manifest: dict[str, Any]

    def exists(self, relative: str) -> bool:
        return (self.root / relative).exists()


@dataclass(frozen=True)
class SubGeneratorSpec:
    name: str
    applies: Callable[[PlanInputs], bool]
    params: Callable[[PlanInputs], dict[str, Any]]


SUBGENERATORS: tuple[SubGeneratorSpec, ...] = (
    SubGeneratorSpec(
        "ci",
        applies=lambda p: p.options.ci,
        params=lambda p: {},
    ),
    SubGeneratorSpec(
        "editorconfig",
        applies=lambda p: True,
        params=lambda p: {},
    ),
    SubGeneratorSpec(
        "git",
        applies=lambda p: True,
        params=lambda p: {
            "name": p.config.name,
            "github_account": p.config.github_account,
        },
    ),
    SubGeneratorSpec(
        "license",
        applies=lambda p: p.options.license and not p.manifest.get("license"),
        params=lambda p: {
            "name": p.config.author_name,
            "email": p.config.author_email,
            "website": p.config.author_url,
        },
    ),
    SubGeneratorSpec(
        "readme",
        applies=lambda p: not p.exists("README.md"),
        params=lambda p: {
            "name": p.config.name,
            "description": p.config.description,
            "github_account": p.config.github_account,
            "author_name": p.config.author_name,
            "author_url": p.config.author_url,
            "content": p.options.readme,
        },
    ),
    SubGeneratorSpec(
        "config",
        applies=lambda p: not p.exists("config/default.js"),
        params=lambda p: {
            "name": p.config.name,
            "pwa": p.config.pwa,
            "server_type": p.config.server_type.value,
            "auto_ssr": p.config.auto_ssr,
        },
    ),
    SubGeneratorSpec(
        "webapp",
        applies=lambda p: not p.exists("server/plugins/webapp"),
        params=lambda p: {
            "pwa": p.config.pwa,
            "auto_ssr": p.config.auto_ssr,
        },
    ),
)


def plan_invocations(
    inputs: PlanInputs,
    table: tuple[SubGeneratorSpec, ...] = SUBGENERATORS,
) -> list[Invocation]:
    """Evaluate every row of *table* and return the calls to make, in order."""
    return [
        Invocation(generator=spec.name, params=spec.params(inputs))
        for spec in table
        if spec.applies(inputs)
    ]
