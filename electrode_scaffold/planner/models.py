"""Pydantic v2 models describing a generation plan.

A ``GenerationPlan`` is derived, never persisted: it is built once from a
``ResolvedConfig`` and handed to the executor, which applies it in order.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from .merge import combine_keywords, deep_merge, defaults_deep, sort_dependency_groups
from ..resolver.manifest import normalize_scalars


class PostActionKind(str, Enum):
    """Work done after all files are in place."""
    INSTALL = "install"
    FORMAT = "format"


class RenderRule(BaseModel):
    """Render (or copy) one template file or subtree."""
    source: str = Field(..., description="Path relative to the template root")
    destination: str = Field(..., description="Path relative to the destination root")
    context: dict[str, Any] = Field(default_factory=dict)
    ignore: list[str] = Field(
        default_factory=list, description="Glob patterns of template files to skip"
    )
    verbatim: bool = Field(
        default=False, description="Copy bytes unchanged instead of rendering"
    )


class RenameRule(BaseModel):
    """Move a staged, non-hidden file to its dotfile name after rendering."""
    source: str
    destination: str


class Invocation(BaseModel):
    """A sub-generator call with its minimal parameter record."""
    generator: str
    params: dict[str, Any] = Field(default_factory=dict)


class PostAction(BaseModel):
    kind: PostActionKind
    command: list[str] = Field(default_factory=list)


class ManifestPatch(BaseModel):
    """How to update ``package.json``.

    The patch is applied to the manifest as it exists at write time, since
    sub-generators may have edited it after the plan was built.
    """

    template: dict[str, Any] = Field(
        default_factory=dict, description="Rendered template manifest (lowest precedence)"
    )
    defaults: dict[str, Any] = Field(
        default_factory=dict, description="Generator defaults, filled only where absent"
    )
    keywords: list[str] = Field(default_factory=list, description="Prompted keywords")

    def apply(self, current: dict[str, Any]) -> dict[str, Any]:
        """Return the manifest to write for the *current* manifest."""
        update = defaults_deep(normalize_scalars(current), self.defaults)
        manifest = deep_merge(self.template, update)
        keywords = manifest.get("keywords")
        if self.keywords or isinstance(keywords, list):
            manifest["keywords"] = combine_keywords(self.keywords, keywords)
        return sort_dependency_groups(manifest)


class GenerationPlan(BaseModel):
    """Everything the executor needs, in execution order."""

    root: Path
    manifest: ManifestPatch
    renders: list[RenderRule] = Field(default_factory=list)
    renames: list[RenameRule] = Field(default_factory=list)
    invocations: list[Invocation] = Field(default_factory=list)
    post_actions: list[PostAction] = Field(default_factory=list)

    def has_action(self, kind: PostActionKind) -> bool:
        return any(action.kind is kind for action in self.post_actions)

    def invoked(self) -> list[str]:
        """Names of the sub-generators the plan calls, in order."""
        return [inv.generator for inv in self.invocations]
