"""The activity state machine.

An activity moves Inactive -> Active (on `activate`) -> Complete (once a
completion time is stamped). Failure is not a state of its own: it is
reported through the messages of a `ProcessResult`, and a failed activity
stays active until something completes it.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from ..clock import Clock
from .action import WorkflowAction
from .results import ProcessResult
from .types import ActivityType, LoggingLevel, should_log

if TYPE_CHECKING:
    from .workflow import Workflow

logger = logging.getLogger(__name__)


class WorkflowActivity:
    """A stage of a workflow: an ordered set of actions with its own lifecycle.

    The workflow owns its activities and each activity owns its actions. The
    activity that activated this one is kept as an id and resolved through the
    workflow.
    """

    def __init__(self, activity_type: ActivityType, workflow: Workflow, activity_id: int) -> None:
        self.activity_type = activity_type
        self.id = activity_id
        self.workflow: Workflow | None = workflow
        self.clock: Clock = workflow.runtime.clock

        self.activated_datetime: datetime | None = None
        self.last_processed_datetime: datetime | None = None
        self.completed_datetime: datetime | None = None
        self.activated_by_activity_id: int | None = None

        self.actions: list[WorkflowAction] = []
        self._last_action_id = 0

    @classmethod
    def activate(
        cls,
        activity_type: ActivityType,
        workflow: Workflow,
        context: Any = None,
        activated_by: WorkflowActivity | None = None,
    ) -> WorkflowActivity:
        """Create an active activity of `activity_type` and add it to `workflow`.

        One action is activated per configured action type, in action-type
        order.
        """

        if workflow is None:
            raise ValueError("An activity can only be activated within a workflow")

        activity = cls(activity_type, workflow, activity_id=workflow.next_activity_id())
        activity.activated_datetime = activity.now()
        if activated_by is not None:
            activity.activated_by_activity_id = activated_by.id

        activity.add_log_entry("Activated")

        for action_type in activity_type.ordered_action_types:
            activity.actions.append(WorkflowAction.activate(action_type, activity, context))

        workflow.activities.append(activity)
        return activity

    def now(self) -> datetime:
        return self.clock.now()

    def next_action_id(self) -> int:
        self._last_action_id += 1
        return self._last_action_id

    @property
    def name(self) -> str:
        return self.activity_type.name

    @property
    def activated_by_activity(self) -> WorkflowActivity | None:
        workflow = self.workflow
        if self.activated_by_activity_id is None or workflow is None:
            return None
        return workflow.get_activity(self.activated_by_activity_id)

    @property
    def is_active(self) -> bool:
        return (
            self.activity_type.is_active
            and self.activated_datetime is not None
            and self.completed_datetime is None
        )

    @property
    def is_complete(self) -> bool:
        return self.completed_datetime is not None

    @property
    def active_actions(self) -> list[WorkflowAction]:
        """Actions still to run, ordered by their action type's `order`."""

        pending = [a for a in self.actions if a.is_active and not a.is_complete]
        return sorted(pending, key=lambda a: (a.order, a.action_type.id))

    def process(self, context: Any, entity: Any) -> ProcessResult:
        """Run the active actions in order until one fails or processing should stop.

        Stops early when an action fails, when an action completes this
        activity, or when the workflow is gone or no longer active. Messages
        from every action that produced any are returned, prefixed with a line
        naming the activity and action.
        """

        self.add_log_entry("Processing...")

        messages: list[str] = []

        for action in self.active_actions:
            action_success, action_messages = action.process(context, entity)
            if action_messages:
                messages.append(
                    f"Error in Activity: {self.name}; Action: {action.name} "
                    f"({action.component.friendly_name} action type)"
                )
                messages.extend(action_messages)

            if not action_success:
                break

            if not self.is_active:
                break

            workflow = self.workflow
            if workflow is None or not workflow.is_active:
                break

        self.last_processed_datetime = self.now()

        self.add_log_entry("Processing Complete")

        if not self.active_actions and not self.is_complete:
            self.mark_complete()

        if messages:
            logger.info(
                "Workflow activity reported errors",
                extra={"activity": self.name, "activity_id": self.id, "messages": len(messages)},
            )
        return ProcessResult(success=not messages, messages=messages)

    def mark_complete(self) -> None:
        """Stamp the completion time (once) and log it."""

        if self.completed_datetime is None:
            self.completed_datetime = self.now()
        self.add_log_entry("Completed")

    def add_log_entry(self, text: str, force: bool = False) -> None:
        """Append to the workflow log when forced or the logging level allows."""

        workflow = self.workflow
        if workflow is None:
            return
        if not should_log(workflow.logging_level, LoggingLevel.ACTIVITY, force=force):
            return
        workflow.append_log_entry(f"{self.name} Activity ({self.id}): {text}")

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"WorkflowActivity(id={self.id}, type={self.name!r}, active={self.is_active})"
