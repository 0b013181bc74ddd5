"""Special attack -- a cooldown-gated gamble that bypasses the opposed roll.

One d6: the top third of faces (5-6) backfires on the user for 2
damage, anything else lands for a flat 4 on the opponent.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from dice_battler.sim.mechanics.dice import roll_die

if TYPE_CHECKING:
    from dice_battler.sim.core.rng import GameRNG

SPECIAL_ATTACK_COOLDOWN = 3
BACKFIRE_FACES = (5, 6)


class SpecialAttackRoll(BaseModel):
    roll: int
    backfired: bool


def special_attack_available(
    current_round: int,
    last_used_round: int | None,
    cooldown: int = SPECIAL_ATTACK_COOLDOWN,
) -> bool:
    """Return True if a special attack may be used now.

    *current_round* counts resolved rounds; the attack would resolve as
    round ``current_round + 1``.  A use in round N therefore blocks
    rounds N+1 .. N+cooldown-1.
    """
    if last_used_round is None:
        return True
    return (current_round + 1) - last_used_round >= cooldown


def roll_special_attack(
    rng: GameRNG, backfire_faces: tuple[int, ...] = BACKFIRE_FACES,
) -> SpecialAttackRoll:
    roll = roll_die(rng)
    return SpecialAttackRoll(roll=roll, backfired=roll in backfire_faces)
