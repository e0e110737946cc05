"""CLI entrypoint for running workflows from a catalog file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from rock_workflow import __version__
from rock_workflow.engine.config import EngineSettings
from rock_workflow.engine.logging import configure_logging
from rock_workflow.engine.workflow.errors import WorkflowError
from rock_workflow.engine.workflow.report import WorkflowRunReport
from rock_workflow.engine.workflow.workflow import Workflow

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2
EXIT_WORKFLOW_ERROR = 3
EXIT_RUN_REPORTED_ERRORS = 4


def _parse_entity(value: str | None) -> Any:
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        # Plain strings are accepted as-is (e.g. an email address).
        return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rock-workflow",
        description="Activate and process workflows defined in a workflow catalog",
    )
    parser.add_argument("--version", action="version", version=f"rock-workflow {__version__}")
    parser.add_argument(
        "--catalog",
        default=None,
        help="Catalog JSON file (defaults to WORKFLOW_CATALOG_PATH)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-types", help="List the workflow types in the catalog")

    run = subparsers.add_parser("run", help="Activate a workflow and process it once")
    run.add_argument(
        "--workflow-type",
        required=True,
        help="Workflow type name, id or GUID",
    )
    run.add_argument("--name", default=None, help="Name for the workflow instance")
    run.add_argument(
        "--entity",
        default=None,
        help="Target entity as JSON (plain strings are passed through unchanged)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = EngineSettings()
    except ValidationError as e:
        # Logging isn't configured yet.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_CONFIG

    configure_logging(settings.log_level)

    if args.catalog:
        settings = settings.model_copy(update={"catalog_path": Path(args.catalog)})

    try:
        catalog = settings.load_catalog()
    except (OSError, ValueError) as e:
        logger.error("Could not load workflow catalog", extra={"path": str(settings.catalog_path)})
        print(f"Catalog error: {e}", file=sys.stderr)
        return EXIT_CONFIG

    try:
        if args.command == "list-types":
            for workflow_type in catalog:
                state = "active" if workflow_type.is_active else "inactive"
                print(
                    f"{workflow_type.id}\t{workflow_type.name}\t{state}\t"
                    f"logging={workflow_type.logging_level.value}\t"
                    f"activities={len(workflow_type.activity_types)}"
                )
            return EXIT_OK

        if args.command == "run":
            workflow_type = catalog.get_workflow_type(args.workflow_type)
            runtime = settings.build_runtime(catalog)

            workflow = Workflow.activate(workflow_type, runtime, name=args.name)
            result = workflow.process(None, _parse_entity(args.entity))

            logger.info(
                "Workflow processed",
                extra={
                    "workflow": workflow.name,
                    "success": result.success,
                    "is_active": workflow.is_active,
                },
            )
            report = WorkflowRunReport.from_run(workflow, result)
            print(report.model_dump_json(indent=2))
            return EXIT_OK if result.success else EXIT_RUN_REPORTED_ERRORS

        logger.error("Unknown command", extra={"command": args.command})
        return EXIT_CONFIG

    except WorkflowError as e:
        logger.warning(str(e))
        print(str(e), file=sys.stderr)
        return EXIT_WORKFLOW_ERROR

    except Exception:
        logger.exception("Command failed")
        return EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
