"""Reaction lines -- the single routine that picks what a combatant says."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dice_battler.catalog.creatures import Reactions
    from dice_battler.sim.core.entities import Combatant
    from dice_battler.sim.core.rng import GameRNG


class ReactionKind(str, Enum):
    GLOAT = "gloat"
    CRY = "cry"
    VICTORY = "victory"
    LOSS = "loss"


def pick_reaction(
    entity: Combatant,
    kind: ReactionKind,
    rng: GameRNG,
    fallback: Reactions | None = None,
) -> str | None:
    """Pick a random line of *kind* for *entity*.

    Uses the entity's own reaction table, or *fallback* when the entity
    has none.  Returns ``None`` when no line is available.
    """
    table = entity.reactions or fallback
    if table is None:
        return None
    lines = table.lines_for(kind.value)
    if not lines:
        return None
    return rng.random_choice(lines)
