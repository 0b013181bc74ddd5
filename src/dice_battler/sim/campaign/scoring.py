"""Battle scoring.

    score = rounds * 100 * difficulty multiplier
          + 1000 if perfect victory
          + 500  if no damage taken
          + 50 per point of damage dealt
          + 200 per point of current win streak

A perfect victory *is* a no-damage victory, so both flat bonuses land
together.  They are kept as two separate terms to match the scoring
tables players already know.
"""

from __future__ import annotations

import math

from dice_battler.sim.campaign.difficulty import Difficulty

DIFFICULTY_MULTIPLIERS: dict[Difficulty, float] = {
    Difficulty.EASY: 1.0,
    Difficulty.MEDIUM: 1.5,
    Difficulty.HARD: 2.0,
    Difficulty.LEGENDARY: 3.0,
}

POINTS_PER_ROUND = 100
PERFECT_VICTORY_BONUS = 1000
NO_DAMAGE_BONUS = 500
POINTS_PER_DAMAGE = 50
POINTS_PER_STREAK = 200


def calculate_battle_score(
    rounds_completed: int,
    damage_dealt: int,
    damage_taken: int,
    creature_difficulty: Difficulty,
    is_perfect_victory: bool,
    current_streak: int,
) -> int:
    """Score a won battle.  Only called on victory."""
    score = rounds_completed * POINTS_PER_ROUND * DIFFICULTY_MULTIPLIERS[creature_difficulty]

    if is_perfect_victory:
        score += PERFECT_VICTORY_BONUS
    if damage_taken == 0:
        score += NO_DAMAGE_BONUS
    score += damage_dealt * POINTS_PER_DAMAGE
    score += current_streak * POINTS_PER_STREAK

    return math.floor(score)
