"""Base class for AI agents that play dice battles.

All play agents must subclass ``PlayAgent`` and implement the two abstract
methods.  The battle simulator calls these at decision points: once per
player decision during a battle, and once after every campaign victory.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dice_battler.sim.core.game_state import GameState, PlayerAction


class PlayAgent(ABC):
    """Base class for AI agents that play the game."""

    @abstractmethod
    def choose_action(
        self,
        state: GameState,
        legal_actions: list[PlayerAction],
    ) -> PlayerAction:
        """Choose the next action.

        Parameters
        ----------
        state:
            The live game state, giving the agent full observability.
            Agents must treat it as read-only.
        legal_actions:
            Non-empty list of actions the engine will accept right now,
            as returned by ``BattleEngine.legal_actions()``.

        Returns
        -------
        PlayerAction
            One element of *legal_actions*.
        """

    @abstractmethod
    def choose_continue_campaign(self, state: GameState) -> bool:
        """Decide, after a campaign victory, whether to fight on.

        Returns
        -------
        bool
            ``True`` to recover and pick the next creature, ``False`` to
            retire and bank the score.
        """
