from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

from .errors import WorkflowError
from .results import ProcessResult
from .types import ActionType, LoggingLevel, should_log

if TYPE_CHECKING:
    from .activity import WorkflowActivity
    from .components import ActionComponent

logger = logging.getLogger(__name__)


class WorkflowAction:
    """The smallest unit of work in an activity.

    The activity owns the action; `activity` points back at that owner.
    """

    def __init__(self, action_type: ActionType, activity: WorkflowActivity, action_id: int) -> None:
        self.action_type = action_type
        self.id = action_id
        self.activity: WorkflowActivity | None = activity
        self._clock = activity.clock

        self.activated_datetime: datetime | None = None
        self.last_processed_datetime: datetime | None = None
        self.completed_datetime: datetime | None = None

    @classmethod
    def activate(
        cls, action_type: ActionType, activity: WorkflowActivity, context: Any = None
    ) -> WorkflowAction:
        """Create an activated action of `action_type` for `activity`.

        The caller appends the returned action to the activity.
        """

        action = cls(action_type, activity, action_id=activity.next_action_id())
        action.activated_datetime = action._clock.now()
        action.add_log_entry("Activated")
        return action

    @property
    def name(self) -> str:
        return self.action_type.name

    @property
    def order(self) -> int:
        return self.action_type.order

    @property
    def is_active(self) -> bool:
        return (
            self.action_type.is_active
            and self.activated_datetime is not None
            and self.completed_datetime is None
        )

    @property
    def is_complete(self) -> bool:
        return self.completed_datetime is not None

    @property
    def component(self) -> ActionComponent:
        activity = self.activity
        workflow = activity.workflow if activity is not None else None
        if workflow is None:
            raise WorkflowError(f"Action {self.name!r} is not attached to a workflow")
        return workflow.runtime.components.get(self.action_type.component)

    def setting(self, key: str) -> str | None:
        return self.action_type.settings.get(key)

    def process(self, context: Any, entity: Any) -> ProcessResult:
        """Run this action's component against `entity`.

        On success the action (and, when its type says so, its activity) is
        marked complete. Exceptions raised by the component are not caught.
        """

        self.add_log_entry("Processing...")

        component = self.component
        result = component.execute(context, self, entity)

        if result.success:
            if self.action_type.is_action_completed_on_success:
                self.mark_complete()
            activity = self.activity
            if self.action_type.is_activity_completed_on_success and activity is not None:
                activity.mark_complete()
        else:
            logger.info(
                "Workflow action failed",
                extra={"action": self.name, "messages": result.messages},
            )

        self.last_processed_datetime = self._clock.now()

        self.add_log_entry("Processing Complete")
        return result

    def mark_complete(self) -> None:
        if self.completed_datetime is None:
            self.completed_datetime = self._clock.now()
        self.add_log_entry("Completed")

    def add_log_entry(self, text: str, force: bool = False) -> None:
        activity = self.activity
        workflow = activity.workflow if activity is not None else None
        if workflow is None:
            return
        if not should_log(workflow.logging_level, LoggingLevel.ACTION, force=force):
            return
        workflow.append_log_entry(f"{self.name} Action ({self.id}): {text}")

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"WorkflowAction(id={self.id}, type={self.name!r}, order={self.order})"
