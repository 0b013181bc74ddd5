"""Creature difficulty classification and campaign difficulty progression."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    LEGENDARY = "legendary"


def classify_difficulty(max_stamina: int, skill: int) -> Difficulty:
    """Classify a creature by its stats.

    Legendary needs both stamina >= 15 and skill >= 10 and overrides hard;
    hard is any stamina >= 10; easy is stamina <= 6; everything else is
    medium.
    """
    if max_stamina >= 15 and skill >= 10:
        return Difficulty.LEGENDARY
    if max_stamina >= 10:
        return Difficulty.HARD
    if max_stamina <= 6:
        return Difficulty.EASY
    return Difficulty.MEDIUM


class DifficultyBonus(BaseModel):
    skill_bonus: int
    stamina_bonus: int


# Skill bonus stops growing at this tier; stamina keeps climbing.
_MAX_SKILL_BONUS = 3


def get_progressive_difficulty(battles_won: int) -> DifficultyBonus:
    """Creature stat bonus for the next campaign battle.

    Every 2 victories is one tier: +1 SKILL per tier (max +3) and
    +2 STAMINA per tier (uncapped).
    """
    tier = max(0, battles_won) // 2
    return DifficultyBonus(
        skill_bonus=min(tier, _MAX_SKILL_BONUS),
        stamina_bonus=tier * 2,
    )
