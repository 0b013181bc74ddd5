"""Campaign mode: difficulty, scoring, recovery and high scores.

Usage::

    from dice_battler.sim.campaign import (
        classify_difficulty, get_progressive_difficulty,
        calculate_battle_score, calculate_recovery,
        InMemoryHighScoreStore, JsonHighScoreStore,
    )
"""

# -- state -------------------------------------------------------------------
from .state import BattleRecord, CampaignState, StartingStats

# -- difficulty --------------------------------------------------------------
from .difficulty import (
    Difficulty,
    DifficultyBonus,
    classify_difficulty,
    get_progressive_difficulty,
)

# -- scoring -----------------------------------------------------------------
from .scoring import DIFFICULTY_MULTIPLIERS, calculate_battle_score

# -- recovery ----------------------------------------------------------------
from .recovery import Recovery, apply_recovery, calculate_recovery

# -- high scores -------------------------------------------------------------
from .high_scores import (
    MAX_HIGH_SCORES,
    HighScoreEntry,
    HighScoreStore,
    InMemoryHighScoreStore,
    JsonHighScoreStore,
)

# -- report ------------------------------------------------------------------
from .report import generate_campaign_report

__all__ = [
    # state
    "BattleRecord",
    "CampaignState",
    "StartingStats",
    # difficulty
    "Difficulty",
    "DifficultyBonus",
    "classify_difficulty",
    "get_progressive_difficulty",
    # scoring
    "DIFFICULTY_MULTIPLIERS",
    "calculate_battle_score",
    # recovery
    "Recovery",
    "apply_recovery",
    "calculate_recovery",
    # high scores
    "MAX_HIGH_SCORES",
    "HighScoreEntry",
    "HighScoreStore",
    "InMemoryHighScoreStore",
    "JsonHighScoreStore",
    # report
    "generate_campaign_report",
]
