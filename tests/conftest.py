"""Test configuration and fixtures."""

from __future__ import annotations

import pytest
from builders import START, Harness

from rock_workflow.engine.clock import FixedClock
from rock_workflow.engine.workflow.components import default_registry


@pytest.fixture
def clock() -> FixedClock:
    """Provide a clock pinned to START."""
    return FixedClock(START)


@pytest.fixture
def harness(clock: FixedClock) -> Harness:
    """Provide a runtime harness with a recording component registered as "record"."""
    h = Harness(clock=clock, components=default_registry())
    h.register("record")
    return h
