"""Interactive prompting for whatever the resolver left unresolved.

The prompt table ``PROMPTS`` lists every question in its fixed order with
its default rule and input transform.  Only fields the resolver reported as
pending are asked.  Answers flagged ``remember`` are written to the
user-global answers store and become the defaults of the next run.

Questions are asked through a ``Prompter``; ``RichPrompter`` is the
terminal implementation, tests substitute a scripted one.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

from rich.console import Console
from rich.prompt import Confirm, Prompt

from .models import PartialConfig, QuoteStyle, ScaffoldOptions, ServerType, unique_keywords
from .resolver import Resolution
from ..github_client import GitHubClient
from ..state import StateStore
from ..utils import console as default_console
from ..utils import run_command

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Prompter protocol
# ---------------------------------------------------------------------------

class Prompter(Protocol):
    """Minimal question-asking surface used by the orchestrator."""

    def text(self, message: str, default: str | None = None) -> str: ...

    def choice(self, message: str, choices: list[str], default: str) -> str: ...

    def confirm(self, message: str, default: bool) -> bool: ...


class RichPrompter:
    """``Prompter`` backed by ``rich.prompt``."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or default_console

    def text(self, message: str, default: str | None = None) -> str:
        if default:
            return Prompt.ask(message, default=default, console=self.console)
        return Prompt.ask(message, default="", show_default=False, console=self.console)

    def choice(self, message: str, choices: list[str], default: str) -> str:
        return Prompt.ask(message, choices=choices, default=default, console=self.console)

    def confirm(self, message: str, default: bool) -> bool:
        return Confirm.ask(message, default=default, console=self.console)


# ---------------------------------------------------------------------------
# Prompt table
# ---------------------------------------------------------------------------

@dataclass
class PromptContext:
    """Everything prompt defaults may depend on."""

    root: Path
    answers: StateStore | None = None
    git_identity: dict[str, str] = field(default_factory=dict)

    def remembered(self, key: str) -> str | None:
        if self.answers is None:
            return None
        return self.answers.get(key) or None


@dataclass(frozen=True)
class PromptSpec:
    key: str
    kind: str  # "text" | "choice" | "confirm"
    message: str
    default: Callable[[PromptContext], Any] = lambda ctx: None
    choices: tuple[str, ...] = ()
    transform: Optional[Callable[[Any], Any]] = None
    remember: bool = False


def split_keywords(text: str | None) -> list[str]:
    """Split ``"a, b ,,c"`` into ``["a", "b", "c"]`` (deduplicated)."""
    return unique_keywords(re.split(r"\s*,\s*", (text or "").strip()))


PROMPTS: tuple[PromptSpec, ...] = (
    PromptSpec("name", "text", "Application Name", default=lambda ctx: ctx.root.name),
    PromptSpec("description", "text", "Description"),
    PromptSpec("homepage", "text", "Project homepage url"),
    PromptSpec(
        "server_type",
        "choice",
        "Which framework for the server?",
        default=lambda ctx: ServerType.HAPI.value,
        choices=tuple(s.value for s in (ServerType.HAPI, ServerType.EXPRESS, ServerType.KOA)),
        transform=ServerType,
    ),
    PromptSpec(
        "author_name",
        "text",
        "Author's Name",
        default=lambda ctx: ctx.remembered("author_name") or ctx.git_identity.get("name"),
        remember=True,
    ),
    PromptSpec(
        "author_email",
        "text",
        "Author's Email",
        default=lambda ctx: ctx.remembered("author_email") or ctx.git_identity.get("email"),
        remember=True,
    ),
    PromptSpec(
        "author_url",
        "text",
        "Author's Homepage",
        default=lambda ctx: ctx.remembered("author_url"),
        remember=True,
    ),
    PromptSpec(
        "keywords", "text", "Package keywords (comma to split)", transform=split_keywords
    ),
    PromptSpec(
        "pwa",
        "confirm",
        "Would you like to make a Progressive Web App?",
        default=lambda ctx: False,
    ),
    PromptSpec(
        "auto_ssr",
        "confirm",
        "Disable server side rendering based on high load?",
        default=lambda ctx: False,
    ),
    PromptSpec(
        "quote_style",
        "choice",
        "Use double quotes or single quotes?",
        default=lambda ctx: QuoteStyle.DOUBLE.value,
        choices=(QuoteStyle.DOUBLE.value, QuoteStyle.SINGLE.value),
        transform=QuoteStyle,
    ),
    PromptSpec(
        "create_directory",
        "confirm",
        "Would you like to create a new directory for your project?",
        default=lambda ctx: True,
    ),
)


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class PromptOrchestrator:
    """Asks the pending questions of a ``Resolution`` in table order."""

    def __init__(self, prompter: Prompter, context: PromptContext) -> None:
        self.prompter = prompter
        self.context = context

    def _ask_one(self, spec: PromptSpec) -> Any:
        default = spec.default(self.context)
        if spec.kind == "confirm":
            answer: Any = self.prompter.confirm(spec.message, bool(default))
        elif spec.kind == "choice":
            answer = self.prompter.choice(spec.message, list(spec.choices), default)
        else:
            answer = self.prompter.text(spec.message, default)
            if not answer and default:
                answer = default
        return spec.transform(answer) if spec.transform else answer

    def ask(self, resolution: Resolution) -> PartialConfig:
        """Prompt for every pending field and merge the answers.

        Returns:
            The resolution's configuration with the answers applied.
        """
        answers: dict[str, Any] = {}
        for spec in PROMPTS:
            if spec.key not in resolution.pending:
                continue
            value = self._ask_one(spec)
            answers[spec.key] = value
            if spec.remember and self.context.answers is not None and value:
                self.context.answers.set(spec.key, value)

        logger.debug("Prompt answers: %s", answers)
        return resolution.config.overlay(answers)

    async def ask_github_account(
        self,
        author_email: str | None,
        options: ScaffoldOptions,
        client: GitHubClient | None = None,
    ) -> str:
        """Resolve the GitHub account: CLI option, else a prompt.

        The prompt default comes from a best-effort lookup by e-mail; a
        failed lookup leaves the default empty.
        """
        if options.github_account:
            return options.github_account
        default = await client.username_for_email(author_email) if client else ""
        return self.prompter.text("GitHub username or organization", default or None)


async def read_git_identity(cwd: str | Path | None = None) -> dict[str, str]:
    """Read ``user.name`` / ``user.email`` from git config (missing -> absent)."""
    identity: dict[str, str] = {}
    for key in ("name", "email"):
        code, out, _ = await run_command(["git", "config", "--get", f"user.{key}"], cwd=cwd)
        if code == 0 and out:
            identity[key] = out
    return identity
