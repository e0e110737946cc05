"""Configuration for the workflow engine.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rock_workflow.engine.clock import Clock, SystemClock
from rock_workflow.engine.workflow.catalog import WorkflowCatalog
from rock_workflow.engine.workflow.components import ActionComponentRegistry, default_registry
from rock_workflow.engine.workflow.types import LoggingLevel
from rock_workflow.engine.workflow.workflow import DEFAULT_MAX_ACTIVITY_RUNS, WorkflowRuntime


class EngineSettings(BaseSettings):
    """Settings for running workflows.

    Environment variables:
    - LOG_LEVEL                        (optional)
    - WORKFLOW_CATALOG_PATH            (optional)
    - WORKFLOW_MAX_ACTIVITY_RUNS       (optional)
    - WORKFLOW_LOGGING_LEVEL_OVERRIDE  (optional: none | activity | action)

    Notes:
        Tests can point at a specific env file with
        `EngineSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    catalog_path: Path = Field(
        default=Path("workflows/catalog.json"),
        validation_alias="WORKFLOW_CATALOG_PATH",
        description="JSON file holding the workflow type catalog",
    )

    max_activity_runs: int = Field(
        default=DEFAULT_MAX_ACTIVITY_RUNS,
        gt=0,
        validation_alias="WORKFLOW_MAX_ACTIVITY_RUNS",
        description="Upper bound on activities processed in one workflow pass",
    )

    logging_level_override: LoggingLevel | None = Field(
        default=None,
        validation_alias="WORKFLOW_LOGGING_LEVEL_OVERRIDE",
        description=(
            "Replaces every workflow type's own logging level. Set to 'none' to "
            "silence workflow tracing on busy installations."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    def load_catalog(self) -> WorkflowCatalog:
        return WorkflowCatalog.from_file(self.catalog_path)

    def build_runtime(
        self,
        catalog: WorkflowCatalog,
        components: ActionComponentRegistry | None = None,
        clock: Clock | None = None,
    ) -> WorkflowRuntime:
        return WorkflowRuntime(
            catalog=catalog,
            components=components if components is not None else default_registry(),
            clock=clock if clock is not None else SystemClock(),
            max_activity_runs=self.max_activity_runs,
            logging_level_override=self.logging_level_override,
        )
