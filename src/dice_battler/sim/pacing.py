"""Pacing layer -- plays automatic engine steps back with presentation delays.

The engine resolves everything instantly; a front end that wants the
dice to "roll" for a moment before landing wraps it in a
:class:`BattleDirector`.  The director sleeps the delay configured for
the current phase and then performs exactly one automatic step, so no
phase is ever skipped and the order of phases is the engine's own.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable, Iterable

from pydantic import BaseModel, Field

from dice_battler.sim.core.game_state import Phase

if TYPE_CHECKING:
    from dice_battler.sim.engine import BattleEngine

logger = logging.getLogger(__name__)


class PacingConfig(BaseModel):
    """Seconds to linger in each automatically-advancing phase."""

    model_config = {"frozen": True}

    dice_roll: float = Field(default=1.5, ge=0)
    """While the dice tumble (``DICE_ROLLING``)."""

    round_result: float = Field(default=1.0, ge=0)
    battle_end: float = Field(default=3.0, ge=0)
    creature_turn: float = Field(default=0.5, ge=0)
    """Pause in ``BATTLE`` before the creature's follow-up turn starts."""

    @classmethod
    def instant(cls) -> PacingConfig:
        """No delays at all (tests, simulations, ``--fast``)."""
        return cls(dice_roll=0, round_result=0, battle_end=0, creature_turn=0)

    def delay_for(self, phase: Phase) -> float:
        if phase is Phase.DICE_ROLLING:
            return self.dice_roll
        if phase is Phase.ROUND_RESULT:
            return self.round_result
        if phase is Phase.BATTLE_END:
            return self.battle_end
        if phase is Phase.BATTLE:
            return self.creature_turn
        return 0.0


class BattleDirector:
    """Drives an engine's automatic steps, sleeping between them.

    Parameters
    ----------
    engine:
        The engine to drive.
    pacing:
        Delay per phase.  Defaults to the standard pacing.
    sleep:
        Called with the delay in seconds.  Tests inject a recorder.
    """

    def __init__(
        self,
        engine: BattleEngine,
        pacing: PacingConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.engine = engine
        self.pacing = pacing or PacingConfig()
        self._sleep = sleep

    def run_until_input(self, stop_at: Iterable[Phase] = ()) -> list[Phase]:
        """Step until the engine waits for the player.

        Parameters
        ----------
        stop_at:
            Phases to halt in even though an automatic step is pending
            (e.g. ``BATTLE_END`` to show the result screen of a
            campaign battle).  The current phase is never a stop.

        Returns
        -------
        list[Phase]
            Every phase the engine passed through, in order, including
            the starting phase and the phase it stopped in.
        """
        stops = frozenset(stop_at)
        phases = [self.engine.phase]
        while not self.engine.awaiting_input:
            if len(phases) > 1 and self.engine.phase in stops:
                break
            delay = self.pacing.delay_for(self.engine.phase)
            if delay > 0:
                self._sleep(delay)
            if not self.engine.step():
                break
            phases.append(self.engine.phase)
        logger.debug("Director stopped in %s", self.engine.phase.value)
        return phases
