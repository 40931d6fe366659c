"""electrode-scaffold run orchestrator.

Implements one scaffolding run, strictly in order:

INITIALIZE -- read the manifest, open the state stores, detect features.
RESOLVE    -- merge manifest, CLI options, detection and stored state.
PROMPT     -- ask what is still unresolved, relocate the destination if a
              new directory was requested, persist the server framework,
              resolve the GitHub account.
PLAN       -- freeze the configuration and build the generation plan.
EXECUTE    -- render, run sub-generators, write the manifest, install.

Usage::

    python -m electrode_scaffold.pipeline ./my-app --name "My App"
    electrode-scaffold --skip-install
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .config import Settings
from .errors import ScaffoldError
from .github_client import GitHubClient
from .planner.builder import TEMPLATE_MANIFEST, build_plan, template_context
from .planner.models import GenerationPlan
from .resolver.detector import detect_features
from .resolver.manifest import is_established, read_manifest
from .resolver.models import PartialConfig, ResolvedConfig, ScaffoldOptions, ServerType
from .resolver.prompts import PromptContext, PromptOrchestrator, Prompter, RichPrompter, read_git_identity
from .resolver.resolver import SERVER_TYPE_KEY, project_dir_name, relocate_root, resolve
from .scaffolder.executor import ExecutionReport, Executor, summarize
from .scaffolder.templates import TemplateRenderer
from .state import StateStore
from .utils import console, print_banner, print_error, print_success, print_summary_table

logger = logging.getLogger(__name__)

APP_TITLE = "Electrode App"


class Scaffolder:
    """Drives a single scaffolding run for one destination directory.

    Attributes:
        root: Current destination root; moves once if a new project
            directory is requested.
        options: Parsed command-line options.
        settings: Global settings.
        manifest: The manifest as read at start-up.
        state: Project state store (server framework choice).
        answers: User-global store of remembered prompt answers.
    """

    def __init__(
        self,
        root: str | Path,
        options: ScaffoldOptions | None = None,
        settings: Settings | None = None,
        prompter: Prompter | None = None,
        github: GitHubClient | None = None,
    ) -> None:
        self.root = Path(root).resolve()
        self.options = options or ScaffoldOptions()
        self.settings = settings or Settings()
        self.prompter = prompter or RichPrompter()
        self.github = github or GitHubClient(
            base_url=self.settings.github_api_url, timeout=self.settings.lookup_timeout
        )
        self.renderer = TemplateRenderer(self.settings.template_dir)
        self.manifest: dict[str, Any] = {}
        self.detected = PartialConfig()
        self.state: StateStore | None = None
        self.answers: StateStore | None = None
        self.config: ResolvedConfig | None = None

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Read everything the run depends on; no writes."""
        self.manifest = read_manifest(self.root)
        self.state = StateStore.open(
            self.settings.state_path(self.root), self.settings.state_namespace
        )
        self.answers = StateStore.open(self.settings.answers_path, self.settings.state_namespace)
        self.detected = detect_features(self.root, established=is_established(self.manifest))

    async def prompt(self) -> ResolvedConfig:
        """Resolve, prompt for the rest, relocate, and persist state."""
        if self.state is None:
            self.initialize()

        resolution = resolve(self.manifest, self.options, self.detected, self.state)
        context = PromptContext(
            root=self.root,
            answers=self.answers,
            git_identity=await read_git_identity(self.root) if resolution.pending else {},
        )
        orchestrator = PromptOrchestrator(self.prompter, context)
        partial = orchestrator.ask(resolution)

        if partial.create_directory:
            self.relocate(partial.name or self.root.name)

        # The state store must follow the relocated root before it is written.
        assert self.state is not None
        server_type = partial.server_type or ServerType.HAPI
        self.state.set(SERVER_TYPE_KEY, server_type.value)
        self.state.flush()
        if self.answers is not None:
            self.answers.flush()

        account = await orchestrator.ask_github_account(
            partial.author_email, self.options, self.github
        )
        self.config = ResolvedConfig.from_partial(partial.overlay({"github_account": account}))
        return self.config

    def relocate(self, name: str) -> Path:
        """Move the destination root into a directory named after *name*."""
        new_root = relocate_root(self.root, name)
        if new_root != self.root:
            new_root.mkdir(parents=True, exist_ok=True)
            logger.info("Destination root relocated to %s", new_root)
            self.root = new_root
        if self.state is not None:
            self.state.relocate(self.settings.state_path(self.root))
        return self.root

    def plan(self) -> GenerationPlan:
        """Build the generation plan from the frozen configuration."""
        if self.config is None:
            raise ScaffoldError("Configuration must be resolved before planning")
        return build_plan(
            self.config,
            self.options,
            self.root,
            manifest=self.manifest,
            template_manifest=self._template_manifest(self.config),
            npm_command=self.settings.npm_command,
        )

    async def execute(self, plan: GenerationPlan) -> ExecutionReport:
        executor = Executor(self.renderer, action_timeout=self.settings.install_timeout)
        return await executor.execute(plan, skip_install=self.options.skip_install)

    async def run(self) -> ExecutionReport:
        """Run every stage and return the execution report."""
        print_banner(APP_TITLE)
        self.initialize()
        await self.prompt()
        plan = self.plan()
        report = await self.execute(plan)
        self._finish(report)
        return report

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _template_manifest(self, config: ResolvedConfig) -> dict[str, Any]:
        rendered = self.renderer.render(
            TEMPLATE_MANIFEST, template_context(config, self.options)
        )
        try:
            data = json.loads(rendered)
        except ValueError as exc:
            raise ScaffoldError(f"Template manifest is not valid JSON: {exc}") from exc
        return data if isinstance(data, dict) else {}

    def _finish(self, report: ExecutionReport) -> None:
        assert self.config is not None
        print_summary_table(summarize(report), title="Scaffold summary")
        chdir = (
            f"'cd {project_dir_name(self.config.name)}' then "
            if self.config.create_directory
            else ""
        )
        print_success("Your new Electrode application is ready!")
        console.print(f"\nType {chdir}'gulp dev' to start the server.\n")


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def build_parser():
    import argparse

    parser = argparse.ArgumentParser(
        prog="electrode-scaffold",
        description="Generate or update an Electrode universal web application",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  electrode-scaffold\n"
            "  electrode-scaffold ./apps --name 'My App' --server-type ExpressJS\n"
            "  electrode-scaffold --no-license --skip-install\n"
        ),
    )
    parser.add_argument(
        "target",
        nargs="?",
        default=".",
        help="Destination directory (default: current directory)",
    )
    parser.add_argument("--name", default=None, help="Project name")
    parser.add_argument(
        "--github-account", default=None, help="GitHub username or organization"
    )
    parser.add_argument(
        "--project-root",
        default="server",
        help="Relative path to the project code root (default: server)",
    )
    parser.add_argument(
        "--readme", default=None, help="Content to insert in the README.md file"
    )
    parser.add_argument(
        "--server-type",
        choices=[s.value for s in ServerType],
        default=None,
        help="Server framework (skips the prompt)",
    )
    parser.add_argument("--no-ci", dest="ci", action="store_false", help="Do not include a CI config")
    parser.add_argument(
        "--no-license", dest="license", action="store_false", help="Do not include a license"
    )
    parser.add_argument("--skip-install", action="store_true", help="Do not run npm install")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``electrode-scaffold``."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = ScaffoldOptions(
        ci=args.ci,
        license=args.license,
        name=args.name,
        github_account=args.github_account,
        project_root=args.project_root,
        readme=args.readme,
        server_type=ServerType(args.server_type) if args.server_type else None,
        skip_install=args.skip_install,
    )

    scaffolder = Scaffolder(args.target, options, Settings.from_env())
    try:
        report = asyncio.run(scaffolder.run())
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    except KeyboardInterrupt:
        print_error("Aborted.")
        sys.exit(130)

    if not report.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
