"""Engine configuration -- the rule constants a battle is played with.

Defaults reproduce the standard rules.  Overrides can be loaded from a
JSON file; unknown keys are rejected so a typo never silently falls back
to a default.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class EngineConfig(BaseModel):
    """Rule constants for :class:`~dice_battler.sim.engine.BattleEngine`."""

    model_config = {"extra": "forbid", "frozen": True}

    standard_damage: int = 2
    """Damage dealt by a standard hit.  Fixed; not derived from the roll margin."""

    special_attack_damage: int = 4
    special_backfire_damage: int = 2
    special_attack_cooldown: int = 3
    """Rounds between special attacks: used in round N, usable again in N + cooldown."""

    special_backfire_faces: tuple[int, ...] = (5, 6)
    """d6 faces on which a special attack backfires on its user."""

    lucky_damage: int = 1
    unlucky_damage: int = 3
    drain_heal: int = 2
    offer_luck_on_hit: bool = False
    """Also offer an ``increase`` luck test when the player lands a hit."""

    starting_inventory: list[str] = Field(
        default_factory=lambda: ["healing_draught", "draught_of_proficiency", "draught_of_destiny"]
    )
    """Item ids handed out fresh at the start of every battle."""

    max_high_scores: int = 10

    @classmethod
    def from_json(cls, path: str | Path) -> EngineConfig:
        """Load a configuration from a JSON file of overrides."""
        return cls.model_validate_json(Path(path).read_text())
