"""Action components: the code behind an action type.

An action type names its component by key; the registry resolves the key when
the action is processed. Components report anticipated failures through
`ProcessResult` and let anything unexpected raise.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from .errors import CatalogLookupError, UnknownActionComponentError
from .results import ProcessResult

if TYPE_CHECKING:
    from .action import WorkflowAction
    from .activity import WorkflowActivity
    from .workflow import Workflow

logger = logging.getLogger(__name__)


class ActionComponent(Protocol):
    """Executes one action against the workflow's target entity."""

    friendly_name: str

    def execute(self, context: Any, action: WorkflowAction, entity: Any) -> ProcessResult: ...


class ActionComponentRegistry:
    def __init__(self) -> None:
        self._components: dict[str, ActionComponent] = {}

    def register(self, key: str, component: ActionComponent) -> None:
        if key in self._components:
            logger.debug("Replacing action component", extra={"component": key})
        self._components[key] = component

    def get(self, key: str) -> ActionComponent:
        try:
            return self._components[key]
        except KeyError:
            raise UnknownActionComponentError(key) from None

    def __contains__(self, key: object) -> bool:
        return key in self._components

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._components))


def _owners(action: WorkflowAction) -> tuple[WorkflowActivity, Workflow] | None:
    activity = action.activity
    if activity is None or activity.workflow is None:
        return None
    return activity, activity.workflow


_DETACHED = "Action is not attached to an active workflow"


@dataclass(frozen=True, slots=True)
class CompleteActivity:
    friendly_name: str = "Complete Activity"

    def execute(self, _context: Any, action: WorkflowAction, _entity: Any) -> ProcessResult:
        activity = action.activity
        if activity is None:
            return ProcessResult.failed(_DETACHED)
        activity.mark_complete()
        return ProcessResult.ok()


@dataclass(frozen=True, slots=True)
class CompleteWorkflow:
    """Settings: `status` (optional, default "Completed")."""

    friendly_name: str = "Complete Workflow"

    def execute(self, _context: Any, action: WorkflowAction, _entity: Any) -> ProcessResult:
        owners = _owners(action)
        if owners is None:
            return ProcessResult.failed(_DETACHED)
        _, workflow = owners
        workflow.mark_complete(status=action.setting("status") or "Completed")
        return ProcessResult.ok()


@dataclass(frozen=True, slots=True)
class ActivateActivity:
    """Activate another activity of the same workflow.

    Settings: `activity` (name, id or GUID of the activity type).
    """

    friendly_name: str = "Activate Activity"

    def execute(self, context: Any, action: WorkflowAction, _entity: Any) -> ProcessResult:
        owners = _owners(action)
        if owners is None:
            return ProcessResult.failed(_DETACHED)
        activity, workflow = owners

        key = action.setting("activity")
        if not key:
            return ProcessResult.failed("No activity was configured to activate")

        try:
            activated = workflow.activate_activity(key, activated_by=activity, context=context)
        except CatalogLookupError:
            return ProcessResult.failed(f"Activity type {key!r} is not part of this workflow")

        action.add_log_entry(f"Activated new '{activated}' activity")
        return ProcessResult.ok()


@dataclass(frozen=True, slots=True)
class SetAttributeValue:
    """Settings: `attribute` (required) and `value`."""

    friendly_name: str = "Set Attribute Value"

    def execute(self, _context: Any, action: WorkflowAction, _entity: Any) -> ProcessResult:
        owners = _owners(action)
        if owners is None:
            return ProcessResult.failed(_DETACHED)
        _, workflow = owners

        attribute = action.setting("attribute")
        if not attribute:
            return ProcessResult.failed("No attribute was configured")

        value = action.setting("value") or ""
        workflow.attribute_values[attribute] = value
        action.add_log_entry(f"Set '{attribute}' attribute to '{value}'.")
        return ProcessResult.ok()


@dataclass(frozen=True, slots=True)
class SetStatus:
    """Settings: `status`."""

    friendly_name: str = "Set Status"

    def execute(self, _context: Any, action: WorkflowAction, _entity: Any) -> ProcessResult:
        owners = _owners(action)
        if owners is None:
            return ProcessResult.failed(_DETACHED)
        _, workflow = owners
        workflow.status = action.setting("status") or workflow.status
        action.add_log_entry(f"Set Status to '{workflow.status}'")
        return ProcessResult.ok()


@dataclass(frozen=True, slots=True)
class LogMessage:
    """Write `message` to the workflow log regardless of its logging level."""

    friendly_name: str = "Log Message"

    def execute(self, _context: Any, action: WorkflowAction, _entity: Any) -> ProcessResult:
        owners = _owners(action)
        if owners is None:
            return ProcessResult.failed(_DETACHED)
        _, workflow = owners
        workflow.add_log_entry(action.setting("message") or "", force=True)
        return ProcessResult.ok()


BUILTIN_COMPONENTS: dict[str, ActionComponent] = {
    "complete-activity": CompleteActivity(),
    "complete-workflow": CompleteWorkflow(),
    "activate-activity": ActivateActivity(),
    "set-attribute-value": SetAttributeValue(),
    "set-status": SetStatus(),
    "log-message": LogMessage(),
}


def default_registry() -> ActionComponentRegistry:
    registry = ActionComponentRegistry()
    for key, component in BUILTIN_COMPONENTS.items():
        registry.register(key, component)
    return registry
