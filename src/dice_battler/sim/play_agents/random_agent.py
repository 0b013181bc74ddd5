"""Random action agent -- picks legal actions uniformly at random.

The ``RandomAgent`` is the simplest possible play agent.  It is the
baseline for batch simulation runs: it verifies that the full battle
loop works end-to-end and gives a lower bound on how survivable a
creature is.

Behaviour:
    - During a luck test it skips with probability ``skip_luck_chance``
      and tests otherwise (when it has luck left).
    - Otherwise it picks a random legal action.
    - After a campaign victory it retires with probability
      ``retire_chance``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dice_battler.sim.core.game_state import ActionKind, PlayerAction
from dice_battler.sim.core.rng import GameRNG
from dice_battler.sim.play_agents.base import PlayAgent

if TYPE_CHECKING:
    from dice_battler.sim.core.game_state import GameState


class RandomAgent(PlayAgent):
    """Agent that plays random legal actions.

    Parameters
    ----------
    rng:
        Seeded RNG for deterministic randomness.  If ``None``, a default
        ``GameRNG(seed=0)`` is created.
    skip_luck_chance:
        Probability (0.0 -- 1.0) of skipping an offered luck test.
    retire_chance:
        Probability (0.0 -- 1.0) of retiring after a campaign victory.
    """

    def __init__(
        self,
        rng: GameRNG | None = None,
        skip_luck_chance: float = 0.5,
        retire_chance: float = 0.0,
    ) -> None:
        self._rng = rng or GameRNG(seed=0)
        self._skip_luck_chance = skip_luck_chance
        self._retire_chance = retire_chance

    # ------------------------------------------------------------------
    # PlayAgent interface
    # ------------------------------------------------------------------

    def choose_action(
        self,
        state: GameState,
        legal_actions: list[PlayerAction],
    ) -> PlayerAction:
        kinds = {a.kind for a in legal_actions}
        if ActionKind.SKIP_LUCK_TEST in kinds:
            if ActionKind.TEST_LUCK not in kinds or self._rng.random_float() < self._skip_luck_chance:
                return PlayerAction(kind=ActionKind.SKIP_LUCK_TEST)
            return PlayerAction(kind=ActionKind.TEST_LUCK)
        return self._rng.random_choice(legal_actions)

    def choose_continue_campaign(self, state: GameState) -> bool:
        return self._rng.random_float() >= self._retire_chance
