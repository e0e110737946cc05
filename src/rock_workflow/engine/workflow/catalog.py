"""Read-only registry of workflow types.

The catalog is passed explicitly to the engine instead of living in a
process-wide cache, so each test (or host) can supply its own configuration.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from .errors import CatalogLookupError
from .types import ActionType, ActivityType, WorkflowType

logger = logging.getLogger(__name__)


class CatalogDocument(BaseModel):
    """On-disk shape of a catalog file."""

    workflow_types: list[WorkflowType] = Field(default_factory=list)


class WorkflowCatalog:
    def __init__(self, workflow_types: Iterable[WorkflowType] = ()) -> None:
        self._workflow_types: dict[int, WorkflowType] = {}
        self._activity_types: dict[int, ActivityType] = {}
        self._action_types: dict[int, ActionType] = {}
        self._activity_owner: dict[int, int] = {}

        for workflow_type in workflow_types:
            self._add(workflow_type)

    def _add(self, workflow_type: WorkflowType) -> None:
        if workflow_type.id in self._workflow_types:
            raise ValueError(f"Duplicate workflow type id {workflow_type.id}")
        self._workflow_types[workflow_type.id] = workflow_type

        for activity_type in workflow_type.activity_types:
            if activity_type.id in self._activity_types:
                raise ValueError(f"Duplicate activity type id {activity_type.id}")
            self._activity_types[activity_type.id] = activity_type
            self._activity_owner[activity_type.id] = workflow_type.id

            for action_type in activity_type.action_types:
                if action_type.id in self._action_types:
                    raise ValueError(f"Duplicate action type id {action_type.id}")
                self._action_types[action_type.id] = action_type

    @classmethod
    def from_document(cls, document: CatalogDocument) -> WorkflowCatalog:
        return cls(document.workflow_types)

    @classmethod
    def from_file(cls, path: Path) -> WorkflowCatalog:
        """Load a catalog from a JSON file shaped like `CatalogDocument`."""

        raw = json.loads(path.read_text(encoding="utf-8"))
        catalog = cls.from_document(CatalogDocument.model_validate(raw))
        logger.info(
            "Workflow catalog loaded",
            extra={"path": str(path), "workflow_types": len(catalog._workflow_types)},
        )
        return catalog

    def __iter__(self) -> Iterator[WorkflowType]:
        return iter(sorted(self._workflow_types.values(), key=lambda t: t.id))

    def __len__(self) -> int:
        return len(self._workflow_types)

    def get_workflow_type(self, key: int | UUID | str) -> WorkflowType:
        return self._lookup("workflow type", self._workflow_types, key)

    def get_activity_type(
        self, key: int | UUID | str, workflow_type: WorkflowType | None = None
    ) -> ActivityType:
        """Look up an activity type, optionally only among those of `workflow_type`."""

        table = self._activity_types
        if workflow_type is not None:
            table = {
                type_id: activity_type
                for type_id, activity_type in table.items()
                if self._activity_owner[type_id] == workflow_type.id
            }
        return self._lookup("activity type", table, key)

    def get_action_type(self, key: int | UUID | str) -> ActionType:
        return self._lookup("action type", self._action_types, key)

    def find_workflow_type(self, name: str) -> WorkflowType | None:
        for workflow_type in self._workflow_types.values():
            if workflow_type.name == name:
                return workflow_type
        return None

    def workflow_type_for_activity(self, activity_type: ActivityType) -> WorkflowType:
        owner = self._activity_owner.get(activity_type.id)
        if owner is None:
            raise CatalogLookupError("activity type", activity_type.id)
        return self._workflow_types[owner]

    @staticmethod
    def _lookup(kind: str, table: dict[int, Any], key: int | UUID | str) -> Any:
        # Numeric strings from the command line are ids first, names second.
        if isinstance(key, str) and key.isdigit():
            found = table.get(int(key))
            if found is not None:
                return found
        elif isinstance(key, int) and not isinstance(key, bool):
            found = table.get(key)
            if found is not None:
                return found
            raise CatalogLookupError(kind, key)

        for item in table.values():
            if item.matches(key):
                return item
        raise CatalogLookupError(kind, key)
