"""electrode-scaffold -- generate or update an Electrode universal web app.

The package resolves project configuration from the existing manifest,
command-line options, stored state, filesystem markers and interactive
prompts, turns it into a generation plan, and applies the plan with Jinja2
templates and a set of small sub-generators.

Quick usage::

    from electrode_scaffold import Scaffolder, ScaffoldOptions

    scaffolder = Scaffolder("./my-app", ScaffoldOptions(name="My App"))
    report = asyncio.run(scaffolder.run())
"""

from electrode_scaffold.pipeline import Scaffolder
from electrode_scaffold.resolver.models import ResolvedConfig, ScaffoldOptions

__version__ = "0.1.0"

__all__ = [
    "ResolvedConfig",
    "ScaffoldOptions",
    "Scaffolder",
]
