"""Heuristic-based agent that uses game knowledge to make decisions.

The ``HeuristicAgent`` is a hand-crafted policy working down a priority
list each decision:

- **Luck tests**: test when luck is at or above ``luck_threshold``,
  otherwise take the damage and keep the luck.
- **Low stamina**: drink a healing item, else cast a healing spell.
- **Free value**: drink a skill draught straight away; top up luck
  with a luck item when it drops under the threshold.
- **Offence**: cast the strongest affordable damage spell; use the
  special attack while healthy; otherwise a standard attack.
- **Campaign**: fight on while stamina is above ``retire_threshold``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from dice_battler.catalog.items import ItemType
from dice_battler.catalog.spells import SpellEffectType
from dice_battler.sim.core.game_state import ActionKind, PlayerAction
from dice_battler.sim.play_agents.base import PlayAgent

if TYPE_CHECKING:
    from dice_battler.catalog.spells import SpellDefinition
    from dice_battler.sim.content.registry import ContentRegistry
    from dice_battler.sim.core.game_state import BattleState, GameState

_DAMAGING_SPELLS = (SpellEffectType.DAMAGE, SpellEffectType.DRAIN)


def _stamina_fraction(current: int, maximum: int) -> float:
    return current / maximum if maximum > 0 else 0.0


class HeuristicAgent(PlayAgent):
    """Agent that follows a fixed priority list.

    Parameters
    ----------
    registry:
        Used to look up what each castable spell does.  Without one the
        agent never casts.
    heal_threshold:
        Stamina fraction at or below which the agent heals.
    special_threshold:
        Stamina fraction above which the special attack is worth the
        backfire risk.
    luck_threshold:
        Minimum luck to test luck (and the level luck items top up to).
    retire_threshold:
        Stamina fraction below which the agent retires from a campaign.
    """

    def __init__(
        self,
        registry: ContentRegistry | None = None,
        heal_threshold: float = 0.4,
        special_threshold: float = 0.5,
        luck_threshold: int = 7,
        retire_threshold: float = 0.25,
    ) -> None:
        self._registry = registry
        self.heal_threshold = heal_threshold
        self.special_threshold = special_threshold
        self.luck_threshold = luck_threshold
        self.retire_threshold = retire_threshold

    # ------------------------------------------------------------------
    # PlayAgent interface
    # ------------------------------------------------------------------

    def choose_action(
        self,
        state: GameState,
        legal_actions: list[PlayerAction],
    ) -> PlayerAction:
        by_kind: dict[ActionKind, list[PlayerAction]] = {}
        for action in legal_actions:
            by_kind.setdefault(action.kind, []).append(action)

        if ActionKind.SKIP_LUCK_TEST in by_kind:
            return self._luck_decision(state, by_kind)

        battle = state.battle
        if battle is None:
            return legal_actions[0]
        player = battle.player
        stamina = _stamina_fraction(player.current_stamina, player.max_stamina)

        if stamina <= self.heal_threshold:
            heal = self._item_of_type(battle, by_kind, ItemType.HEAL)
            if heal is None:
                heal = self._best_spell(by_kind, (SpellEffectType.HEAL,))
            if heal is not None:
                return heal

        boost = self._item_of_type(battle, by_kind, ItemType.STAT_BOOST)
        if boost is not None:
            return boost

        if player.luck < self.luck_threshold:
            luck_item = self._item_of_type(battle, by_kind, ItemType.LUCK_RESTORE)
            if luck_item is not None:
                return luck_item

        attack_spell = self._best_spell(by_kind, _DAMAGING_SPELLS)
        if attack_spell is not None:
            return attack_spell

        if ActionKind.SPECIAL_ATTACK in by_kind and stamina > self.special_threshold:
            return by_kind[ActionKind.SPECIAL_ATTACK][0]
        if ActionKind.ATTACK in by_kind:
            return by_kind[ActionKind.ATTACK][0]
        if ActionKind.CLOSE_SPELLBOOK in by_kind:
            return by_kind[ActionKind.CLOSE_SPELLBOOK][0]
        return legal_actions[0]

    def choose_continue_campaign(self, state: GameState) -> bool:
        player = state.player
        if player is None:
            return False
        return _stamina_fraction(player.current_stamina, player.max_stamina) >= self.retire_threshold

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _luck_decision(
        self, state: GameState, by_kind: dict[ActionKind, list[PlayerAction]],
    ) -> PlayerAction:
        player = state.player
        if (
            ActionKind.TEST_LUCK in by_kind
            and player is not None
            and player.luck >= self.luck_threshold
        ):
            return by_kind[ActionKind.TEST_LUCK][0]
        return by_kind[ActionKind.SKIP_LUCK_TEST][0]

    @staticmethod
    def _item_of_type(
        battle: BattleState,
        by_kind: dict[ActionKind, list[PlayerAction]],
        item_type: ItemType,
    ) -> PlayerAction | None:
        for action in by_kind.get(ActionKind.USE_ITEM, []):
            item = battle.get_item(action.target_id or "")
            if item is not None and item.type is item_type:
                return action
        return None

    def _best_spell(
        self,
        by_kind: dict[ActionKind, list[PlayerAction]],
        effect_types: tuple[SpellEffectType, ...],
    ) -> PlayerAction | None:
        """Highest-power castable spell among *effect_types*."""
        if self._registry is None:
            return None
        best: tuple[SpellDefinition, PlayerAction] | None = None
        for action in by_kind.get(ActionKind.CAST_SPELL, []):
            spell = self._registry.get_spell(action.target_id or "")
            if spell is None or spell.effect.type not in effect_types:
                continue
            if best is None or spell.effect.power > best[0].effect.power:
                best = (spell, action)
        return best[1] if best is not None else None
