"""Workflow execution: types, catalog, and the workflow/activity/action state machine.

Processing is synchronous. A workflow owns its activities, an activity owns its
actions; back-references are weak or by id. Anticipated failures are reported
through `ProcessResult`; exceptions are reserved for unexpected conditions and
propagate to the caller.
"""

from .action import WorkflowAction
from .activity import WorkflowActivity
from .catalog import WorkflowCatalog
from .components import ActionComponent, ActionComponentRegistry, default_registry
from .errors import (
    CatalogLookupError,
    UnknownActionComponentError,
    WorkflowError,
    WorkflowRunawayError,
)
from .results import ProcessResult
from .types import ActionType, ActivityType, LoggingLevel, WorkflowType, should_log
from .workflow import Workflow, WorkflowLogEntry, WorkflowRuntime

__all__ = [
    "ActionComponent",
    "ActionComponentRegistry",
    "ActionType",
    "ActivityType",
    "CatalogLookupError",
    "LoggingLevel",
    "ProcessResult",
    "UnknownActionComponentError",
    "Workflow",
    "WorkflowAction",
    "WorkflowActivity",
    "WorkflowCatalog",
    "WorkflowError",
    "WorkflowLogEntry",
    "WorkflowRunawayError",
    "WorkflowRuntime",
    "WorkflowType",
    "default_registry",
    "should_log",
]
