"""Test configuration and fixtures."""

from typing import Callable

import pytest

from intake.jobs.registry import JobRegistry
from intake.jobs.scheduler import PhaseScheduler
from tests.helpers import ManualClock, StaticProvider, StepIncrements


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def provider() -> StaticProvider:
    return StaticProvider()


@pytest.fixture
def make_registry(clock, provider) -> Callable[..., JobRegistry]:
    """Factory for registries driven by the manual clock and step increments."""

    def _make(**overrides) -> JobRegistry:
        scheduler = PhaseScheduler(
            provider=overrides.pop("provider", provider),
            increments=overrides.pop("increments", StepIncrements()),
            failure_hook=overrides.pop("failure_hook", None),
            upload_tick=0.15,
            processing_tick=0.2,
            sleep=clock.sleep,
        )
        assert not overrides, f"unknown overrides: {overrides}"
        return JobRegistry(scheduler)

    return _make
