"""Campaign state -- cumulative score and battle history across a run of fights."""

from __future__ import annotations

from pydantic import BaseModel, Field


class StartingStats(BaseModel):
    """Snapshot of the player's stats when the campaign began."""

    skill: int
    stamina: int
    luck: int
    mana: int = 0


class BattleRecord(BaseModel):
    """Outcome of one completed campaign battle."""

    battle_number: int
    creature_name: str
    victory: bool
    score: int
    rounds_completed: int
    damage_dealt: int
    damage_taken: int


class CampaignState(BaseModel):
    """Mutable state of a campaign, created by ``start_campaign``.

    Kept after the campaign ends so the summary can be rendered; discarded
    when a new game starts.
    """

    is_active: bool = True
    score: int = 0
    battles_won: int = 0
    total_damage_dealt: int = 0
    total_damage_taken: int = 0
    perfect_victories: int = 0
    current_streak: int = 0
    """Consecutive victories so far."""

    starting_stats: StartingStats
    battle_history: list[BattleRecord] = Field(default_factory=list)

    @property
    def battles_fought(self) -> int:
        return len(self.battle_history)

    @property
    def last_battle(self) -> BattleRecord | None:
        return self.battle_history[-1] if self.battle_history else None
