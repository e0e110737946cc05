"""Serializable summary of a processed workflow."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .results import ProcessResult
from .workflow import Workflow


class ActivitySummary(BaseModel):
    id: int
    name: str
    is_active: bool
    activated_at: datetime | None = None
    last_processed_at: datetime | None = None
    completed_at: datetime | None = None
    activated_by_activity_id: int | None = None
    completed_actions: list[str] = Field(default_factory=list)


class LogLine(BaseModel):
    logged_at: datetime
    text: str


class WorkflowRunReport(BaseModel):
    name: str
    workflow_type: str
    status: str
    is_active: bool
    success: bool
    messages: list[str] = Field(default_factory=list)
    attribute_values: dict[str, str] = Field(default_factory=dict)
    activities: list[ActivitySummary] = Field(default_factory=list)
    log: list[LogLine] = Field(default_factory=list)

    @classmethod
    def from_run(cls, workflow: Workflow, result: ProcessResult) -> WorkflowRunReport:
        return cls(
            name=workflow.name,
            workflow_type=workflow.workflow_type.name,
            status=workflow.status,
            is_active=workflow.is_active,
            success=result.success,
            messages=list(result.messages),
            attribute_values=dict(workflow.attribute_values),
            activities=[
                ActivitySummary(
                    id=activity.id,
                    name=activity.name,
                    is_active=activity.is_active,
                    activated_at=activity.activated_datetime,
                    last_processed_at=activity.last_processed_datetime,
                    completed_at=activity.completed_datetime,
                    activated_by_activity_id=activity.activated_by_activity_id,
                    completed_actions=[a.name for a in activity.actions if a.is_complete],
                )
                for activity in workflow.activities
            ],
            log=[LogLine(logged_at=e.log_datetime, text=e.text) for e in workflow.log_entries],
        )
