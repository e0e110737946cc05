"""Exceptions for unexpected engine conditions.

Anticipated action failures are not exceptions; they come back as a
`ProcessResult` with messages.
"""

from __future__ import annotations


class WorkflowError(Exception):
    """Base class for engine errors."""


class CatalogLookupError(WorkflowError, KeyError):
    """A workflow, activity or action type is not in the catalog."""

    def __init__(self, kind: str, key: object) -> None:
        super().__init__(kind, key)
        self.kind = kind
        self.key = key

    def __str__(self) -> str:
        return f"Unknown {self.kind}: {self.key!r}"


class UnknownActionComponentError(WorkflowError, LookupError):
    """An action type names a component that is not registered."""

    def __init__(self, component: str) -> None:
        super().__init__(component)
        self.component = component

    def __str__(self) -> str:
        return f"No action component registered as {self.component!r}"


class WorkflowRunawayError(WorkflowError, RuntimeError):
    """A single processing pass ran more activities than allowed."""
