"""Shared fixtures and helpers for simulation tests."""

from __future__ import annotations

from collections import deque
from typing import Callable, Sequence, TypeVar

import pytest

from dice_battler.sim.config import EngineConfig
from dice_battler.sim.content.registry import ContentRegistry
from dice_battler.sim.core.rng import GameRNG
from dice_battler.sim.engine import BattleEngine

T = TypeVar("T")


class ScriptedRNG(GameRNG):
    """GameRNG that returns pre-arranged integers.

    ``random_int`` pops the next scripted value (and checks it is in
    range); ``random_choice`` always takes the first element, so
    reaction lines and creature spell picks are predictable.
    """

    def __init__(self, *values: int) -> None:
        super().__init__(0)
        self._values: deque[int] = deque(values)

    def push(self, *values: int) -> None:
        self._values.extend(values)

    @property
    def remaining(self) -> int:
        return len(self._values)

    def random_int(self, low: int, high: int) -> int:
        if not self._values:
            raise AssertionError(f"ScriptedRNG exhausted (wanted {low}..{high})")
        value = self._values.popleft()
        if not low <= value <= high:
            raise AssertionError(f"Scripted value {value} outside {low}..{high}")
        return value

    def random_choice(self, seq: Sequence[T]) -> T:
        return seq[0]


@pytest.fixture(scope="module")
def registry() -> ContentRegistry:
    """Module-scoped registry with the default catalogs loaded once."""
    reg = ContentRegistry()
    reg.load_all()
    return reg


@pytest.fixture
def scripted_rng() -> type[ScriptedRNG]:
    """The :class:`ScriptedRNG` class, for tests that build one directly."""
    return ScriptedRNG


@pytest.fixture
def make_engine(registry: ContentRegistry) -> Callable[..., BattleEngine]:
    """Factory for an engine already in ``BATTLE`` (or ``CREATURE_SELECT``).

    Positional arguments are the scripted dice; more can be added later
    with ``engine.rng.push(...)``.
    """

    def _make(
        *rolls: int,
        preset: str = "warrior",
        creature: str | None = "goblin",
        config: EngineConfig | None = None,
        campaign: bool = False,
    ) -> BattleEngine:
        engine = BattleEngine(registry, config, rng=ScriptedRNG(*rolls))
        assert engine.create_character_from_preset(preset)
        assert engine.select_avatar("hero")
        if campaign:
            assert engine.start_campaign()
        if creature is not None:
            assert engine.select_creature_by_id(creature)
        return engine

    return _make
