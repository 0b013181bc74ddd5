"""Active effect lifecycle -- push, consume, query.

Spells leave one-shot :class:`ActiveEffect` entries on the battle.  Skill
and luck buffs/debuffs are consumed by the affected side's next standard
dice round; a block is consumed by the next incoming damage it cancels.

At most one effect per ``(type, target)`` pair is kept: pushing a second
one replaces the first.
"""

from __future__ import annotations

from dice_battler.sim.core.game_state import ActiveEffect, EffectType, Side

_SKILL_TYPES = {EffectType.SKILL_BUFF: 1, EffectType.SKILL_DEBUFF: -1}
_LUCK_TYPES = {EffectType.LUCK_BUFF: 1, EffectType.LUCK_DEBUFF: -1}


def push_effect(effects: list[ActiveEffect], effect: ActiveEffect) -> None:
    """Add *effect*, replacing any existing effect of the same type and target."""
    effects[:] = [
        e for e in effects
        if not (e.type is effect.type and e.target is effect.target)
    ]
    effects.append(effect)


def _consume_signed(
    effects: list[ActiveEffect], side: Side, signs: dict[EffectType, int],
) -> int:
    total = 0
    kept: list[ActiveEffect] = []
    for effect in effects:
        if effect.target is side and effect.type in signs:
            total += signs[effect.type] * effect.magnitude
        else:
            kept.append(effect)
    effects[:] = kept
    return total


def consume_skill_modifier(effects: list[ActiveEffect], side: Side) -> int:
    """Remove *side*'s skill buff/debuff effects and return their net modifier."""
    return _consume_signed(effects, side, _SKILL_TYPES)


def consume_luck_modifier(effects: list[ActiveEffect], side: Side) -> int:
    """Remove *side*'s luck buff/debuff effects and return their net modifier."""
    return _consume_signed(effects, side, _LUCK_TYPES)


def consume_block(effects: list[ActiveEffect], side: Side) -> bool:
    """Remove one block effect guarding *side*.  Returns True if one was present."""
    for i, effect in enumerate(effects):
        if effect.type is EffectType.BLOCK and effect.target is side:
            effects.pop(i)
            return True
    return False
