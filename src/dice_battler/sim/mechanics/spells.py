"""Spell resolution -- apply a spell's single effect to caster, target and effects.

The caster is identified by side; the target is always the opposing side.
Buffs and debuffs are not applied to stats directly: they are queued as
one-shot :class:`ActiveEffect` entries consumed by the next dice round.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from dice_battler.catalog.spells import SpellEffectType
from dice_battler.sim.core.game_state import ActiveEffect, EffectType, Side
from dice_battler.sim.mechanics.damage import deal_damage
from dice_battler.sim.mechanics.effects import push_effect

if TYPE_CHECKING:
    from dice_battler.catalog.spells import SpellDefinition
    from dice_battler.sim.core.game_state import BattleState

DRAIN_HEAL = 2

_BLOCKED = "was blocked by an arcane barrier"


class SpellOutcome(BaseModel):
    description: str
    damage: int = 0
    """Stamina removed from the target."""

    healed: int = 0
    """Stamina restored to the caster."""

    blocked: bool = False


def can_afford(spell: SpellDefinition, mana: int) -> bool:
    return mana >= spell.mana_cost


def stat_effect_type(stat: str, is_buff: bool) -> EffectType:
    if stat == "skill":
        return EffectType.SKILL_BUFF if is_buff else EffectType.SKILL_DEBUFF
    return EffectType.LUCK_BUFF if is_buff else EffectType.LUCK_DEBUFF


def apply_spell_effect(
    spell: SpellDefinition,
    battle: BattleState,
    caster_side: Side,
    drain_heal: int = DRAIN_HEAL,
) -> SpellOutcome:
    """Resolve *spell* cast by *caster_side* against the opposing side.

    Mana is not debited here; the engine does that once the cast is
    accepted.

    Parameters
    ----------
    spell:
        The spell definition to resolve.
    battle:
        The current battle (mutated in-place).
    caster_side:
        ``Side.PLAYER`` or ``Side.CREATURE``.
    drain_heal:
        Stamina a drain spell restores to its caster.
    """
    effect = spell.effect
    caster = battle.entity(caster_side)
    target_side = caster_side.opponent

    if effect.type is SpellEffectType.DAMAGE:
        hit = deal_damage(battle, target_side, effect.power)
        if hit.blocked:
            return SpellOutcome(description=_BLOCKED, blocked=True)
        return SpellOutcome(
            description=f"dealt {hit.applied} damage",
            damage=hit.applied,
        )

    if effect.type is SpellEffectType.HEAL:
        healed = caster.heal(effect.power)
        description = f"restored {healed} stamina" if healed > 0 else "already at full health"
        return SpellOutcome(description=description, healed=healed)

    if effect.type in (SpellEffectType.BUFF, SpellEffectType.DEBUFF):
        modifier = effect.stat_modifier
        assert modifier is not None  # enforced by SpellEffect validation
        push_effect(
            battle.active_effects,
            ActiveEffect(
                type=stat_effect_type(modifier.stat, effect.type is SpellEffectType.BUFF),
                magnitude=abs(modifier.amount),
                target=caster_side if modifier.target == "self" else target_side,
            ),
        )
        return SpellOutcome(description=f"applied {spell.name} effect")

    if effect.type is SpellEffectType.DRAIN:
        hit = deal_damage(battle, target_side, effect.power)
        healed = caster.heal(drain_heal)
        if hit.blocked:
            return SpellOutcome(
                description=f"{_BLOCKED} and healed {healed}",
                healed=healed,
                blocked=True,
            )
        return SpellOutcome(
            description=f"drained {hit.applied} stamina and healed {healed}",
            damage=hit.applied,
            healed=healed,
        )

    # BLOCK
    push_effect(
        battle.active_effects,
        ActiveEffect(type=EffectType.BLOCK, magnitude=1, target=caster_side),
    )
    return SpellOutcome(description="raised an arcane barrier")
