"""Generation planning -- from a resolved configuration to a concrete plan."""

from electrode_scaffold.planner.builder import build_plan, server_exclusions
from electrode_scaffold.planner.invocations import SUBGENERATORS, plan_invocations
from electrode_scaffold.planner.models import (
    GenerationPlan,
    Invocation,
    ManifestPatch,
    PostAction,
    PostActionKind,
    RenameRule,
    RenderRule,
)

__all__ = [
    "GenerationPlan",
    "Invocation",
    "ManifestPatch",
    "PostAction",
    "PostActionKind",
    "RenameRule",
    "RenderRule",
    "SUBGENERATORS",
    "build_plan",
    "plan_invocations",
    "server_exclusions",
]
