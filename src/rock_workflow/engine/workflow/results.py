from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Outcome of processing a workflow, activity or action.

    Messages are kept on success too, so callers can surface partial failures.
    Unpacks as `(success, messages)`.
    """

    success: bool
    messages: list[str] = field(default_factory=list)

    @classmethod
    def ok(cls, *messages: str) -> ProcessResult:
        return cls(success=True, messages=list(messages))

    @classmethod
    def failed(cls, *messages: str) -> ProcessResult:
        return cls(success=False, messages=list(messages))

    def __iter__(self) -> Iterator[object]:
        yield self.success
        yield self.messages
