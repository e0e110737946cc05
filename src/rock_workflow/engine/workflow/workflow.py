"""The workflow aggregate.

A workflow owns its activities (which own their actions) and an append-only
trace log. Processing is synchronous and single-threaded per workflow
instance; concurrent processing of the same instance is not supported.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from ..clock import Clock, SystemClock
from .activity import WorkflowActivity
from .catalog import WorkflowCatalog
from .components import ActionComponentRegistry, default_registry
from .errors import CatalogLookupError, WorkflowRunawayError
from .results import ProcessResult
from .types import ActivityType, LoggingLevel, WorkflowType, should_log

logger = logging.getLogger(__name__)

DEFAULT_MAX_ACTIVITY_RUNS = 100


@dataclass(frozen=True, slots=True)
class WorkflowRuntime:
    """Collaborators a workflow needs while it runs.

    Passed in explicitly so nothing in the engine reaches for global state.
    """

    catalog: WorkflowCatalog
    components: ActionComponentRegistry = field(default_factory=default_registry)
    clock: Clock = field(default_factory=SystemClock)
    max_activity_runs: int = DEFAULT_MAX_ACTIVITY_RUNS
    logging_level_override: LoggingLevel | None = None


@dataclass(frozen=True, slots=True)
class WorkflowLogEntry:
    log_datetime: datetime
    text: str


class Workflow:
    def __init__(
        self, workflow_type: WorkflowType, runtime: WorkflowRuntime, name: str | None = None
    ) -> None:
        self.workflow_type = workflow_type
        self.runtime = runtime
        self.name = name or workflow_type.name
        self.status = "Active"

        self.activated_datetime: datetime | None = None
        self.last_processed_datetime: datetime | None = None
        self.completed_datetime: datetime | None = None

        self.activities: list[WorkflowActivity] = []
        self.log_entries: list[WorkflowLogEntry] = []
        self.attribute_values: dict[str, str] = {}

        self._last_activity_id = 0

    @classmethod
    def activate(
        cls,
        workflow_type: WorkflowType,
        runtime: WorkflowRuntime,
        name: str | None = None,
        context: Any = None,
    ) -> Workflow:
        """Create an active workflow and activate its start-up activities."""

        workflow = cls(workflow_type, runtime, name=name)
        workflow.activated_datetime = runtime.clock.now()
        workflow.add_log_entry("Activated")

        for activity_type in workflow_type.ordered_activity_types:
            if activity_type.is_activated_with_workflow:
                WorkflowActivity.activate(activity_type, workflow, context)

        logger.debug(
            "Workflow activated",
            extra={"workflow_type": workflow_type.name, "activities": len(workflow.activities)},
        )
        return workflow

    @property
    def logging_level(self) -> LoggingLevel:
        override = self.runtime.logging_level_override
        return override if override is not None else self.workflow_type.logging_level

    @property
    def is_active(self) -> bool:
        return (
            self.workflow_type.is_active
            and self.activated_datetime is not None
            and self.completed_datetime is None
        )

    @property
    def is_complete(self) -> bool:
        return self.completed_datetime is not None

    @property
    def active_activities(self) -> list[WorkflowActivity]:
        active = [a for a in self.activities if a.is_active]
        return sorted(active, key=lambda a: (a.activity_type.order, a.id))

    @property
    def has_active_activities(self) -> bool:
        return any(a.is_active for a in self.activities)

    def next_activity_id(self) -> int:
        self._last_activity_id += 1
        return self._last_activity_id

    def get_activity(self, activity_id: int) -> WorkflowActivity | None:
        for activity in self.activities:
            if activity.id == activity_id:
                return activity
        return None

    def activate_activity(
        self,
        activity_type: ActivityType | int | UUID | str,
        activated_by: WorkflowActivity | None = None,
        context: Any = None,
    ) -> WorkflowActivity:
        """Activate an activity type that belongs to this workflow's type.

        Keys are resolved through the runtime catalog, among this workflow
        type's activity types only. Raises `CatalogLookupError` otherwise.
        """

        catalog = self.runtime.catalog
        if not isinstance(activity_type, ActivityType):
            activity_type = catalog.get_activity_type(
                activity_type, workflow_type=self.workflow_type
            )
        elif catalog.workflow_type_for_activity(activity_type).id != self.workflow_type.id:
            raise CatalogLookupError("activity type", activity_type.id)

        return WorkflowActivity.activate(activity_type, self, context, activated_by=activated_by)

    def process(self, context: Any, entity: Any) -> ProcessResult:
        """Process each active activity once, in activity-type order.

        Activities activated during the pass are picked up in the same pass.
        A failing activity does not stop its siblings; all messages are
        collected. Exceptions from actions propagate.
        """

        self.add_log_entry("Workflow Processing...")

        messages: list[str] = []
        processed: set[int] = set()
        runs = 0

        while self.is_active:
            activity = next((a for a in self.active_activities if a.id not in processed), None)
            if activity is None:
                break

            runs += 1
            if runs > self.runtime.max_activity_runs:
                raise WorkflowRunawayError(
                    f"Workflow {self.name!r} ran more than "
                    f"{self.runtime.max_activity_runs} activities in one pass"
                )

            processed.add(activity.id)
            result = activity.process(context, entity)
            messages.extend(result.messages)

        self.last_processed_datetime = self.runtime.clock.now()

        self.add_log_entry("Workflow Processing Complete")

        finished = not self.has_active_activities
        if self.activated_datetime is not None and not self.is_complete and finished:
            self.mark_complete()

        return ProcessResult(success=not messages, messages=messages)

    def mark_complete(self, status: str = "Completed") -> None:
        if self.completed_datetime is None:
            self.completed_datetime = self.runtime.clock.now()
        self.status = status
        self.add_log_entry("Completed")

    def add_log_entry(self, text: str, force: bool = False) -> None:
        """Workflow-level trace entry, recorded at the activity logging level."""

        if should_log(self.logging_level, LoggingLevel.ACTIVITY, force=force):
            self.append_log_entry(text)

    def append_log_entry(self, text: str) -> None:
        """Append without gating; callers have already applied their own level."""

        entry = WorkflowLogEntry(log_datetime=self.runtime.clock.now(), text=text)
        self.log_entries.append(entry)
        logger.debug(text, extra={"workflow": self.name})

    def __str__(self) -> str:
        return self.name
