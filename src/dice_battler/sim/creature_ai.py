"""Creature spell-cast AI.

Before every creature action the creature may try to cast a spell:

1. Eligible only with known spells, mana > 0 and a configured
   ``spell_cast_chance``.
2. Roll 1-100; the attempt goes ahead when the roll is <= the chance.
3. Keep the known spells the creature can afford with its current mana
   and pick one uniformly at random.

Returning ``None`` means the creature makes a standard attack roll
instead.  The decision is taken before any dice are rolled, because a
cast replaces the opposed roll for the whole round.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping

from dice_battler.sim.mechanics.spells import can_afford

if TYPE_CHECKING:
    from dice_battler.catalog.spells import SpellDefinition
    from dice_battler.sim.core.entities import Creature
    from dice_battler.sim.core.rng import GameRNG

logger = logging.getLogger(__name__)


def affordable_spells(
    creature: Creature, spells: Mapping[str, SpellDefinition],
) -> list[SpellDefinition]:
    """Return the creature's known spells it can pay for right now."""
    result: list[SpellDefinition] = []
    for spell_id in creature.spells:
        spell = spells.get(spell_id)
        if spell is None:
            logger.warning("Creature %s knows unknown spell %r", creature.name, spell_id)
            continue
        if can_afford(spell, creature.mana):
            result.append(spell)
    return result


def choose_creature_spell(
    creature: Creature,
    spells: Mapping[str, SpellDefinition],
    rng: GameRNG,
) -> SpellDefinition | None:
    """Decide whether, and which, spell the creature casts this action.

    Parameters
    ----------
    creature:
        The acting creature.
    spells:
        Spell catalog, keyed by spell id.
    rng:
        Battle RNG.  The percentile roll is only drawn when the creature
        is eligible, so non-casters never perturb the dice stream.
    """
    if not creature.can_attempt_spell:
        return None

    roll = rng.random_int(1, 100)
    assert creature.spell_cast_chance is not None
    if roll > creature.spell_cast_chance:
        logger.debug("%s spell check failed (%d > %d)", creature.name, roll, creature.spell_cast_chance)
        return None

    candidates = affordable_spells(creature, spells)
    if not candidates:
        logger.debug("%s has no affordable spell (mana=%d)", creature.name, creature.mana)
        return None
    return rng.random_choice(candidates)
