"""Generation planning -- turn a resolved configuration into a plan.

The planner decides *what* happens and in which order; it never touches the
filesystem beyond the existence checks that gate sub-generators.  Template
selection rules:

* exactly one server entry file survives: every other framework's entry
  file is excluded, using the same priority table the detector reads;
* client images are never rendered (template syntax would corrupt them)
  and are copied verbatim by their own rule instead;
* the service-worker registration is skipped when PWA support is off;
* staged dotfiles (``babelrc``, ``eslintrc``) are renamed only after every
  render rule ran.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Any

from .invocations import PlanInputs, plan_invocations
from .models import (
    GenerationPlan,
    ManifestPatch,
    PostAction,
    PostActionKind,
    RenameRule,
    RenderRule,
)
from ..resolver.detector import SERVER_ENTRY_FILES
from ..resolver.models import QuoteStyle, ResolvedConfig, ScaffoldOptions, ServerType
from ..utils import kebab_case

APP_TEMPLATES = "app"
TEMPLATE_MANIFEST = f"{APP_TEMPLATES}/_package.json.j2"

ROOT_CONFIGS: tuple[str, ...] = ("gulpfile.js", "config", "test")

# Lint ruleset installed per quote style: (template name, destination).
QUOTE_RULESETS: dict[QuoteStyle, tuple[str, str]] = {
    QuoteStyle.SINGLE: ("eslintrc", ".eslintrc"),
    QuoteStyle.DOUBLE: ("eslintrc.json", ".eslintrc.json"),
}

# Staged name -> subtrees where it is renamed to its dotfile form.
STAGED_DOTFILES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("babelrc", ("src/client", "src/server", "test/client", "test/server")),
    ("eslintrc", ("test/client", "test/server")),
)

FORMAT_COMMAND: list[str] = [
    "node_modules/.bin/eslint", "--fix", "src", "test", "config", "--ext", ".js,.jsx",
]


# ---------------------------------------------------------------------------
# Template selection
# ---------------------------------------------------------------------------

def server_exclusions(server_type: ServerType) -> list[str]:
    """Glob patterns excluding every server entry file except *server_type*'s."""
    return [f"**/{entry}" for kind, entry in SERVER_ENTRY_FILES if kind is not server_type]


def client_exclusions(pwa: bool) -> list[str]:
    """Glob patterns for client files that must not go through the renderer."""
    patterns = ["**/client/images/**"]
    if not pwa:
        patterns.append("**/client/sw-registration.js")
    return patterns


def template_context(config: ResolvedConfig, options: ScaffoldOptions) -> dict[str, Any]:
    """Build the Jinja2 context shared by every app template."""
    return {
        "project_name": config.name,
        "package_name": kebab_case(config.name),
        "description": config.description,
        "homepage": config.homepage,
        "author_name": config.author_name,
        "author_email": config.author_email,
        "author_url": config.author_url,
        "github_account": config.github_account,
        "server_type": config.server_type.value,
        "is_hapi": config.server_type is ServerType.HAPI,
        "is_express": config.server_type is ServerType.EXPRESS,
        "is_koa": config.server_type is ServerType.KOA,
        "pwa": config.pwa,
        "auto_ssr": config.auto_ssr,
        "is_single_quote": config.is_single_quote,
        "project_root": options.project_root,
    }


def render_rules(config: ResolvedConfig, context: dict[str, Any]) -> list[RenderRule]:
    rules = [
        RenderRule(source=f"{APP_TEMPLATES}/{name}", destination=name, context=context)
        for name in ROOT_CONFIGS
    ]
    ruleset, target = QUOTE_RULESETS[config.quote_style]
    rules.append(
        RenderRule(source=f"{APP_TEMPLATES}/{ruleset}", destination=target, context=context)
    )
    rules.append(
        RenderRule(
            source=f"{APP_TEMPLATES}/src/server",
            destination="src/server",
            context=context,
            ignore=server_exclusions(config.server_type),
        )
    )
    rules.append(
        RenderRule(
            source=f"{APP_TEMPLATES}/src/client",
            destination="src/client",
            context=context,
            ignore=client_exclusions(config.pwa),
        )
    )
    rules.append(
        RenderRule(
            source=f"{APP_TEMPLATES}/src/client/images",
            destination="src/client/images",
            verbatim=True,
        )
    )
    return rules


def rename_rules() -> list[RenameRule]:
    return [
        RenameRule(source=f"{subtree}/{staged}", destination=f"{subtree}/.{staged}")
        for staged, subtrees in STAGED_DOTFILES
        for subtree in subtrees
    ]


# ---------------------------------------------------------------------------
# Manifest & post actions
# ---------------------------------------------------------------------------

def main_entry(project_root: str) -> str:
    """``main`` field for *project_root*, always with forward slashes."""
    return str(PurePosixPath(project_root.replace("\\", "/")) / "index.js")


def manifest_defaults(config: ResolvedConfig, options: ScaffoldOptions) -> dict[str, Any]:
    """Generator-provided manifest fields; existing values always win."""
    return {
        "name": kebab_case(config.name),
        "version": "0.0.1",
        "description": config.description,
        "homepage": config.homepage,
        "author": {
            "name": config.author_name,
            "email": config.author_email,
            "url": config.author_url,
        },
        "files": [options.project_root],
        "main": main_entry(options.project_root),
        "keywords": [],
    }


def post_actions(config: ResolvedConfig, npm_command: str = "npm") -> list[PostAction]:
    """Dependency install always; the lint auto-fix pass only for single quotes.

    The app templates are written in double-quote style, so choosing single
    quotes means rewriting them after rendering.
    """
    actions = [PostAction(kind=PostActionKind.INSTALL, command=[npm_command, "install"])]
    if config.is_single_quote:
        actions.append(PostAction(kind=PostActionKind.FORMAT, command=list(FORMAT_COMMAND)))
    return actions


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def build_plan(
    config: ResolvedConfig,
    options: ScaffoldOptions,
    root: str | Path,
    manifest: dict[str, Any] | None = None,
    template_manifest: dict[str, Any] | None = None,
    npm_command: str = "npm",
) -> GenerationPlan:
    """Build the generation plan for a frozen configuration.

    Args:
        config: The resolved configuration.
        options: Parsed command-line options.
        root: Destination root, already relocated if a new directory was
            requested.
        manifest: The manifest read at start-up; gates the license generator.
        template_manifest: The rendered ``_package.json`` template.
        npm_command: Executable used for the install action.

    Returns:
        A ``GenerationPlan`` ready for the executor.
    """
    root = Path(root)
    context = template_context(config, options)
    inputs = PlanInputs(config=config, options=options, root=root, manifest=manifest or {})

    return GenerationPlan(
        root=root,
        manifest=ManifestPatch(
            template=template_manifest or {},
            defaults=manifest_defaults(config, options),
            keywords=config.keywords,
        ),
        renders=render_rules(config, context),
        renames=rename_rules(),
        invocations=plan_invocations(inputs),
        post_actions=post_actions(config, npm_command),
    )
