"""Dice primitives and attack strength.

    attack strength = 2d6 + skill + modifier
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from dice_battler.sim.core.rng import GameRNG


def roll_die(rng: GameRNG) -> int:
    """Roll a single six-sided die (1-6)."""
    return rng.random_int(1, 6)


def roll_2d6(rng: GameRNG) -> int:
    """Roll two dice and return the sum (2-12)."""
    return roll_die(rng) + roll_die(rng)


def attack_strength(roll: int, skill: int, modifier: int = 0) -> int:
    """Attack strength for one side: roll + skill + any active modifier."""
    return roll + skill + modifier


# ---------------------------------------------------------------------------
# Character creation
# ---------------------------------------------------------------------------

class RolledStats(BaseModel):
    skill: int
    stamina: int
    luck: int


def roll_character_stats(rng: GameRNG) -> RolledStats:
    """Roll a fresh character: SKILL d6+6, STAMINA 2d6+12, LUCK d6+6."""
    return RolledStats(
        skill=roll_die(rng) + 6,
        stamina=roll_2d6(rng) + 12,
        luck=roll_die(rng) + 6,
    )
