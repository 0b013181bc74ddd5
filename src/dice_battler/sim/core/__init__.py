"""Core simulation primitives for the dice battler."""

from dice_battler.sim.core.entities import Combatant, Creature, Player
from dice_battler.sim.core.game_state import (
    ActionKind,
    ActiveEffect,
    ActiveReaction,
    BattleState,
    CombatLogEntry,
    CombatResult,
    EffectType,
    GameMode,
    GameState,
    InventoryItem,
    LogAction,
    LuckTestType,
    PendingAction,
    PendingLuckTest,
    PlayerAction,
    Phase,
    Side,
)
from dice_battler.sim.core.rng import GameRNG

__all__ = [
    # rng
    "GameRNG",
    # entities
    "Combatant",
    "Player",
    "Creature",
    # game_state
    "Phase",
    "Side",
    "CombatResult",
    "LuckTestType",
    "EffectType",
    "LogAction",
    "PendingAction",
    "GameMode",
    "ActionKind",
    "PlayerAction",
    "ActiveEffect",
    "ActiveReaction",
    "PendingLuckTest",
    "CombatLogEntry",
    "InventoryItem",
    "BattleState",
    "GameState",
]
