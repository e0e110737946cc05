"""Unit tests for the activity state machine."""

from __future__ import annotations

from datetime import timedelta

import pytest
from builders import START, Harness, action_type, activity_type, log_texts, workflow_type

from rock_workflow.engine.workflow.activity import WorkflowActivity
from rock_workflow.engine.workflow.results import ProcessResult
from rock_workflow.engine.workflow.types import LoggingLevel
from rock_workflow.engine.workflow.workflow import Workflow


def _boom(_action: object, _entity: object) -> ProcessResult:
    return ProcessResult.failed("boom")


def test_activate_adds_activity_and_actions_in_type_order(harness: Harness) -> None:
    work = activity_type(
        10,
        "Work",
        action_type(1, "Third", order=3),
        action_type(2, "First", order=1),
        action_type(3, "Second", order=2),
    )
    wf = harness.workflow(workflow_type(work))

    activity = WorkflowActivity.activate(work, wf)

    assert wf.activities == [activity]
    assert activity.is_active
    assert activity.activated_datetime == START
    assert [a.name for a in activity.actions] == ["First", "Second", "Third"]
    assert all(a.is_active for a in activity.actions)


def test_activate_requires_a_workflow() -> None:
    with pytest.raises(ValueError):
        WorkflowActivity.activate(activity_type(10, "Work"), None)  # type: ignore[arg-type]


def test_activity_of_inactive_type_is_not_active(harness: Harness) -> None:
    dormant = activity_type(10, "Dormant", is_active=False)
    wf = harness.workflow(workflow_type(dormant))

    activity = WorkflowActivity.activate(dormant, wf)

    assert activity.activated_datetime is not None
    assert not activity.is_active


def test_activity_without_actions_completes_on_first_process(harness: Harness) -> None:
    empty = activity_type(10, "Empty")
    wf = harness.workflow(workflow_type(empty))
    activity = WorkflowActivity.activate(empty, wf)

    harness.clock.advance(timedelta(minutes=5))
    result = activity.process(None, None)

    assert result.success
    assert result.messages == []
    assert not activity.is_active
    assert activity.completed_datetime == START + timedelta(minutes=5)


def test_actions_run_in_order_regardless_of_collection_order(harness: Harness) -> None:
    work = activity_type(
        10,
        "Work",
        action_type(1, "Third", order=3),
        action_type(2, "First", order=1),
        action_type(3, "Second", order=2),
    )
    wf = harness.workflow(workflow_type(work))
    activity = WorkflowActivity.activate(work, wf)
    activity.actions.reverse()

    result = activity.process(None, None)

    assert result.success
    assert harness.calls == ["First", "Second", "Third"]
    assert activity.is_complete


def test_failing_action_stops_later_actions(harness: Harness) -> None:
    harness.register("fail", respond=_boom)
    work = activity_type(
        10,
        "Work",
        action_type(1, "A", order=1),
        action_type(2, "B", order=2, component="fail"),
        action_type(3, "C", order=3),
    )
    wf = harness.workflow(workflow_type(work))
    activity = WorkflowActivity.activate(work, wf)

    success, messages = activity.process(None, None)

    assert success is False
    assert harness.calls == ["A", "B"]
    assert messages == ["Error in Activity: Work; Action: B (Recording action type)", "boom"]
    assert activity.is_active
    assert [a.name for a in activity.active_actions] == ["B", "C"]


def test_action_completing_the_activity_stops_iteration(harness: Harness) -> None:
    work = activity_type(
        10,
        "Work",
        action_type(1, "Done", order=1, component="complete-activity"),
        action_type(2, "Never", order=2),
    )
    wf = harness.workflow(workflow_type(work))
    activity = WorkflowActivity.activate(work, wf)

    result = activity.process(None, None)

    assert result.success
    assert harness.calls == []
    assert activity.is_complete
    assert [a.name for a in activity.active_actions] == ["Never"]


def test_action_completing_the_workflow_stops_iteration(harness: Harness) -> None:
    work = activity_type(
        10,
        "Work",
        action_type(1, "Stop", order=1, component="complete-workflow"),
        action_type(2, "Never", order=2),
    )
    wf = harness.workflow(workflow_type(work))
    activity = WorkflowActivity.activate(work, wf)

    activity.process(None, None)

    assert harness.calls == []
    assert not wf.is_active
    assert activity.is_active


def test_messages_from_successful_actions_make_the_result_unsuccessful(harness: Harness) -> None:
    harness.register("warn", respond=lambda _a, _e: ProcessResult.ok("heads up"))
    work = activity_type(
        10,
        "Work",
        action_type(1, "Warn", order=1, component="warn"),
        action_type(2, "After", order=2),
    )
    wf = harness.workflow(workflow_type(work))
    activity = WorkflowActivity.activate(work, wf)

    result = activity.process(None, None)

    assert harness.calls == ["Warn", "After"]
    assert result.success is False
    assert result.messages[-1] == "heads up"
    assert activity.is_complete


def test_fail_fast_exit_still_records_processing_time_and_log(harness: Harness) -> None:
    harness.register("fail", respond=_boom)
    work = activity_type(10, "Work", action_type(1, "B", order=1, component="fail"))
    wf = harness.workflow(workflow_type(work))
    activity = WorkflowActivity.activate(work, wf)

    later = harness.clock.advance(timedelta(seconds=30))
    activity.process(None, None)

    assert activity.last_processed_datetime == later
    assert "Work Activity (1): Processing Complete" in log_texts(wf)


def test_action_exceptions_propagate(harness: Harness) -> None:
    def explode(_action: object, _entity: object) -> ProcessResult:
        raise RuntimeError("database unavailable")

    harness.register("explode", respond=explode)
    work = activity_type(10, "Work", action_type(1, "X", order=1, component="explode"))
    wf = harness.workflow(workflow_type(work))
    activity = WorkflowActivity.activate(work, wf)

    with pytest.raises(RuntimeError, match="database unavailable"):
        activity.process(None, None)

    assert activity.is_active


def test_mark_complete_keeps_first_completion_time(harness: Harness) -> None:
    work = activity_type(10, "Work")
    wf = harness.workflow(workflow_type(work))
    activity = WorkflowActivity.activate(work, wf)

    activity.mark_complete()
    harness.clock.advance(timedelta(hours=1))
    activity.mark_complete()

    assert activity.completed_datetime == START
    assert log_texts(wf).count("Work Activity (1): Completed") == 2


@pytest.mark.parametrize(
    ("level", "recorded"),
    [
        (LoggingLevel.NONE, False),
        (LoggingLevel.ACTIVITY, True),
        (LoggingLevel.ACTION, True),
    ],
)
def test_log_entries_follow_workflow_logging_level(
    harness: Harness, level: LoggingLevel, recorded: bool
) -> None:
    work = activity_type(10, "Work")
    wf = harness.workflow(workflow_type(work, logging_level=level))
    activity = WorkflowActivity.activate(work, wf)

    activity.add_log_entry("hello")

    assert ("Work Activity (1): hello" in log_texts(wf)) is recorded


def test_forced_log_entry_is_always_recorded(harness: Harness) -> None:
    work = activity_type(10, "Work")
    wf = harness.workflow(workflow_type(work, logging_level=LoggingLevel.NONE))
    activity = WorkflowActivity.activate(work, wf)

    activity.add_log_entry("must see", force=True)

    assert log_texts(wf) == ["Work Activity (1): must see"]


def test_activated_by_is_resolved_through_the_workflow(harness: Harness) -> None:
    first = activity_type(10, "First")
    second = activity_type(11, "Second")
    wf = harness.workflow(workflow_type(first, second))

    parent = WorkflowActivity.activate(first, wf)
    child = WorkflowActivity.activate(second, wf, activated_by=parent)

    assert child.activated_by_activity_id == parent.id
    assert child.activated_by_activity is parent
    assert parent.activated_by_activity is None


def test_send_email_validation_failure(harness: Harness) -> None:
    def validate(_action: object, entity: object) -> ProcessResult:
        if isinstance(entity, str) and "@" in entity:
            return ProcessResult.ok()
        return ProcessResult.failed("Invalid email address")

    harness.register("validate-email", respond=validate, friendly_name="Validate Email")
    harness.register("send-email", friendly_name="Send Email")
    send_email = activity_type(
        10,
        "Send Email",
        action_type(2, "SendEmail", order=2, component="send-email"),
        action_type(1, "ValidateAddress", order=1, component="validate-email"),
    )
    wf = harness.workflow(workflow_type(send_email))
    activity = WorkflowActivity.activate(send_email, wf)

    result = activity.process(None, "not-an-email")

    assert result == ProcessResult(
        success=False,
        messages=[
            "Error in Activity: Send Email; Action: ValidateAddress (Validate Email action type)",
            "Invalid email address",
        ],
    )
    assert harness.calls == ["ValidateAddress"]
    assert activity.is_active
    assert activity.completed_datetime is None


def test_auto_completing_action_completes_activity_and_logs(harness: Harness) -> None:
    send_email = activity_type(
        10,
        "Send Email",
        action_type(1, "Send", order=1, is_activity_completed_on_success=True),
    )
    wf = harness.workflow(workflow_type(send_email, logging_level=LoggingLevel.ACTIVITY))
    activity = WorkflowActivity.activate(send_email, wf)

    processed_at = harness.clock.advance(timedelta(minutes=1))
    result = activity.process(None, "ted@example.com")

    assert result.success
    assert activity.is_complete
    assert activity.last_processed_datetime == processed_at
    texts = log_texts(wf)
    assert "Send Email Activity (1): Processing..." in texts
    assert "Send Email Activity (1): Processing Complete" in texts
    # Action-level entries are not recorded at the activity level.
    assert not any(" Action (" in t for t in texts)


def test_activity_keeps_its_workflow_alive(harness: Harness) -> None:
    work = activity_type(10, "Work", action_type(1, "Step", order=1))
    wt = workflow_type(work)
    activity = WorkflowActivity.activate(work, Workflow.activate(wt, harness.runtime(wt)))

    result = activity.process(None, None)

    assert result.success
    assert harness.calls == ["Step"]
    assert activity.is_complete
    assert activity.workflow is not None
    assert activity.actions[0].activity is activity
    assert log_texts(activity.workflow)[-2:] == [
        "Work Activity (1): Processing Complete",
        "Work Activity (1): Completed",
    ]
