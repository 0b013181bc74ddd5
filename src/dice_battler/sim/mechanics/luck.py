"""Luck tests -- gamble 2d6 against current luck to change pending damage.

Lucky iff ``roll <= luck``.  The outcome replaces the pending damage with
a fixed value rather than scaling it:

    reduce   (player taking damage):  lucky -> 1, unlucky -> 3
    increase (player dealing damage): lucky -> 3, unlucky -> 1

The luck point itself is spent by the engine, whatever the outcome.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from dice_battler.sim.core.game_state import LuckTestType
from dice_battler.sim.mechanics.dice import roll_2d6

if TYPE_CHECKING:
    from dice_battler.sim.core.rng import GameRNG

LUCKY_DAMAGE = 1
UNLUCKY_DAMAGE = 3


class LuckTestResult(BaseModel):
    roll: int
    was_lucky: bool
    original_damage: int
    modified_damage: int


def is_lucky(roll: int, luck: int) -> bool:
    return roll <= luck


def modify_damage(
    test_type: LuckTestType,
    was_lucky: bool,
    lucky_damage: int = LUCKY_DAMAGE,
    unlucky_damage: int = UNLUCKY_DAMAGE,
) -> int:
    """Return the damage that replaces the pending amount."""
    if test_type is LuckTestType.REDUCE:
        return lucky_damage if was_lucky else unlucky_damage
    return unlucky_damage if was_lucky else lucky_damage


def perform_luck_test(
    luck: int,
    original_damage: int,
    test_type: LuckTestType,
    rng: GameRNG,
    lucky_damage: int = LUCKY_DAMAGE,
    unlucky_damage: int = UNLUCKY_DAMAGE,
) -> LuckTestResult:
    """Roll 2d6 against *luck* and work out the modified damage.

    Parameters
    ----------
    luck:
        Effective luck threshold (current luck plus any active modifier).
    original_damage:
        Damage that would be applied without the test.
    test_type:
        ``REDUCE`` when the player is the target, ``INCREASE`` when the
        player is dealing the damage.
    rng:
        Source of the 2d6 roll.
    """
    roll = roll_2d6(rng)
    was_lucky = is_lucky(roll, luck)
    return LuckTestResult(
        roll=roll,
        was_lucky=was_lucky,
        original_damage=original_damage,
        modified_damage=modify_damage(test_type, was_lucky, lucky_damage, unlucky_damage),
    )
