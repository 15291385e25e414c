"""Shared fixtures for scheduler tests."""

from __future__ import annotations

from typing import Iterable

import pytest

from sceneseq.engine import ManualClock, Scheduler
from sceneseq.models import SceneSettings, Settings
from sceneseq.services import InMemorySceneGraph


class ScriptedDraws:
    """Uniform-random stand-in that returns queued values, then ``default``."""

    def __init__(self, values: Iterable[int] = (), default: int = 100) -> None:
        self.values = list(values)
        self.default = default
        self.calls: list[tuple[int, int]] = []

    def __call__(self, low: int, high: int) -> int:
        self.calls.append((low, high))
        if self.values:
            return self.values.pop(0)
        return self.default


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def draws() -> ScriptedDraws:
    return ScriptedDraws()


@pytest.fixture
def graph() -> InMemorySceneGraph:
    return InMemorySceneGraph(
        {"Main": ["A", "B", "C"], "Other": ["X", "Y"]},
        active_scene="Main",
    )


def scene_settings(**overrides) -> SceneSettings:
    """Enabled scene with A/B one second each, 500 ms gap, 2 s cooldown, no random ticks."""
    values = {
        "enabled": True,
        "sources_txt": "A|00:00:01.000\nB|00:00:01.000",
        "gap_hms": "00:00:00.500",
        "cool_hms": "00:00:02.000",
        "tick_hms": "0",
    }
    values.update(overrides)
    return SceneSettings(**values)


@pytest.fixture
def settings() -> Settings:
    return Settings(only_active_scene=True, scenes={"Main": scene_settings()})


@pytest.fixture
def scheduler(graph, clock, draws, settings) -> Scheduler:
    sched = Scheduler(graph, clock=clock, rng=draws)
    sched.load(settings)
    sched.refresh_active_scene()
    graph.changes.clear()
    return sched
