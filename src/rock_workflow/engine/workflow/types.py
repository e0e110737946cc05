"""Immutable workflow configuration: workflow, activity and action types.

Types describe *what* runs and in which order. Instances (`Workflow`,
`WorkflowActivity`, `WorkflowAction`) are created from them and carry the
runtime state.
"""

from __future__ import annotations

from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LoggingLevel(str, Enum):
    """How much trace detail a workflow type records in its workflow log."""

    NONE = "none"
    ACTIVITY = "activity"
    ACTION = "action"

    @property
    def rank(self) -> int:
        return _LOGGING_RANK[self]


_LOGGING_RANK: dict[LoggingLevel, int] = {
    LoggingLevel.NONE: 0,
    LoggingLevel.ACTIVITY: 1,
    LoggingLevel.ACTION: 2,
}


def should_log(policy: LoggingLevel | None, required: LoggingLevel, *, force: bool = False) -> bool:
    """Gate for every workflow log entry.

    `force` always records. Otherwise the workflow type's level must be at least
    `required`; a missing policy records nothing.
    """

    if force:
        return True
    if policy is None:
        return False
    return policy.rank >= required.rank


class _TypeModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int = Field(gt=0)
    guid: UUID = Field(default_factory=uuid4)
    name: str = Field(min_length=1)

    def matches(self, key: int | UUID | str) -> bool:
        """True if `key` is this type's id, GUID or name."""

        if isinstance(key, bool):
            return False
        if isinstance(key, int):
            return key == self.id
        if isinstance(key, UUID):
            return key == self.guid
        try:
            return UUID(key) == self.guid
        except ValueError:
            return key == self.name

    def __str__(self) -> str:
        return self.name


class ActionType(_TypeModel):
    """A configured step inside an activity type."""

    order: int = 0
    component: str = Field(min_length=1, description="Key of the action component that runs it")
    is_active: bool = True
    is_action_completed_on_success: bool = True
    is_activity_completed_on_success: bool = False
    settings: dict[str, str] = Field(default_factory=dict)


class ActivityType(_TypeModel):
    """A configured stage of a workflow type."""

    order: int = 0
    is_active: bool = True
    is_activated_with_workflow: bool = False
    action_types: tuple[ActionType, ...] = ()

    @property
    def ordered_action_types(self) -> list[ActionType]:
        return sorted(self.action_types, key=lambda t: (t.order, t.id))


class WorkflowType(_TypeModel):
    """A configured automation: its activities and its logging policy."""

    is_active: bool = True
    logging_level: LoggingLevel = LoggingLevel.NONE
    activity_types: tuple[ActivityType, ...] = ()

    @property
    def ordered_activity_types(self) -> list[ActivityType]:
        return sorted(self.activity_types, key=lambda t: (t.order, t.id))

    @model_validator(mode="after")
    def _unique_ids(self) -> WorkflowType:
        activity_ids = [t.id for t in self.activity_types]
        if len(activity_ids) != len(set(activity_ids)):
            raise ValueError(f"Workflow type {self.name!r} has duplicate activity type ids")
        action_ids = [a.id for t in self.activity_types for a in t.action_types]
        if len(action_ids) != len(set(action_ids)):
            raise ValueError(f"Workflow type {self.name!r} has duplicate action type ids")
        return self
