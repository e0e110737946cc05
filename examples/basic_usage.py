#!/usr/bin/env python3
"""Programmatic workflow run example.

This demonstrates using the engine components directly:

* load a workflow catalog from JSON
* register application-specific action components
* activate a workflow and process it against an email address
* print the workflow log and any error messages
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from rock_workflow.engine.config import EngineSettings
from rock_workflow.engine.logging import configure_logging
from rock_workflow.engine.workflow import (
    ProcessResult,
    Workflow,
    WorkflowAction,
    WorkflowCatalog,
    default_registry,
)


@dataclass(frozen=True, slots=True)
class ValidateEmail:
    friendly_name: str = "Validate Email"

    def execute(self, _context: Any, _action: WorkflowAction, entity: Any) -> ProcessResult:
        if isinstance(entity, str) and "@" in entity:
            return ProcessResult.ok()
        return ProcessResult.failed("Invalid email address")


@dataclass(frozen=True, slots=True)
class SendEmail:
    friendly_name: str = "Send Email"

    def execute(self, _context: Any, action: WorkflowAction, entity: Any) -> ProcessResult:
        action.add_log_entry(f"Sent welcome email to {entity}", force=True)
        return ProcessResult.ok()


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the Email Signup workflow.")
    parser.add_argument("email", help="Address to process, e.g. ted@example.com")
    parser.add_argument(
        "--catalog",
        default=str(Path(__file__).with_name("catalog.json")),
        help="Workflow catalog JSON file",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = EngineSettings()
    configure_logging(settings.log_level)

    components = default_registry()
    components.register("validate-email", ValidateEmail())
    components.register("send-email", SendEmail())

    catalog = WorkflowCatalog.from_file(Path(args.catalog))
    runtime = settings.build_runtime(catalog, components=components)

    workflow = Workflow.activate(catalog.get_workflow_type("Email Signup"), runtime)
    success, messages = workflow.process(None, args.email)

    for entry in workflow.log_entries:
        print(f"{entry.log_datetime:%H:%M:%S} {entry.text}")
    for message in messages:
        print(f"! {message}")

    print(f"Status: {workflow.status} (active={workflow.is_active})")
    return 0 if success else 1


if __name__ == "__main__":
    raise SystemExit(main())
