"""Plan execution -- template rendering, sub-generators and post actions."""

from electrode_scaffold.scaffolder.executor import ExecutionReport, Executor
from electrode_scaffold.scaffolder.subgenerators import SubGenerator, build_registry
from electrode_scaffold.scaffolder.templates import TemplateRenderer

__all__ = [
    "ExecutionReport",
    "Executor",
    "SubGenerator",
    "TemplateRenderer",
    "build_registry",
]
