"""Telemetry data models for per-battle and per-run statistics.

These lightweight dataclasses capture what is needed to judge balance
(creature difficulty, item and spell value, luck usage) without storing
the full game-state history:

- **BattleTelemetry**: outcome, rounds, damage dealt/taken, luck, spells, items.
- **RunTelemetry**: seed, ordered list of battle results, final outcome, score.

Both classes are plain ``dataclass`` instances (not Pydantic models) to
keep telemetry collection as cheap as possible during batch runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class BattleTelemetry:
    """Stats from a single battle.

    Attributes
    ----------
    creature_id:
        Catalog id of the opponent, or its name for ad-hoc creatures.
    result:
        ``"win"`` or ``"loss"``.
    rounds:
        Resolved rounds, including spell rounds and creature turns.
    player_stamina_start:
        Player stamina when the battle began.
    player_stamina_end:
        Player stamina at the end (0 on loss).
    damage_dealt:
        Stamina removed from the creature.
    damage_taken:
        Stamina removed from the player.
    luck_tests:
        Luck tests actually rolled (skips not counted).
    lucky_tests:
        How many of those came up lucky.
    spells_cast_by_id:
        Player spells cast: ``spell_id -> count``.
    items_used_by_id:
        Inventory uses: ``item_id -> count``.
    """

    creature_id: str
    result: str  # "win" or "loss"
    rounds: int
    player_stamina_start: int
    player_stamina_end: int
    damage_dealt: int
    damage_taken: int
    luck_tests: int = 0
    lucky_tests: int = 0
    luck_tests_skipped: int = 0
    special_attacks: int = 0
    special_backfires: int = 0
    creature_spells: int = 0
    blocked_hits: int = 0
    spells_cast_by_id: dict[str, int] = field(default_factory=dict)
    items_used_by_id: dict[str, int] = field(default_factory=dict)


@dataclass
class RunTelemetry:
    """Stats from a campaign (or a single battle).

    Attributes
    ----------
    seed:
        The master RNG seed used for this run.
    battles:
        Ordered list of battle telemetry, one per fight.
    final_result:
        ``"win"`` for a won single battle, ``"retired"`` for a campaign
        the agent chose to end, ``"loss"`` otherwise.
    battles_won:
        Victories in this run.
    score:
        Final campaign score (0 for single battles).
    """

    seed: int
    battles: list[BattleTelemetry] = field(default_factory=list)
    final_result: str = "loss"  # "win", "retired" or "loss"
    battles_won: int = 0
    score: int = 0
