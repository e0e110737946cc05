"""Rock workflow engine.

Runs configured workflows: activates their activities and processes each
activity's actions in order against a target entity, keeping a trace log whose
verbosity is set per workflow type.
"""

__version__ = "0.1.0"

from rock_workflow.engine.config import EngineSettings
from rock_workflow.engine.workflow import (
    ProcessResult,
    Workflow,
    WorkflowActivity,
    WorkflowCatalog,
    WorkflowRuntime,
)

__all__ = [
    "__version__",
    "EngineSettings",
    "ProcessResult",
    "Workflow",
    "WorkflowActivity",
    "WorkflowCatalog",
    "WorkflowRuntime",
]
