"""Damage application.

Pipeline for damage inflicted by the opposing side:
    block effect on target? -> cancelled (block consumed)
    otherwise               -> stamina loss, floored at 0

Every stamina change is tallied on the battle so scoring can read how
much damage was dealt and taken.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from dice_battler.sim.core.game_state import Side
from dice_battler.sim.mechanics.effects import consume_block

if TYPE_CHECKING:
    from dice_battler.sim.core.game_state import BattleState


class DamageResult(BaseModel):
    applied: int = 0
    blocked: bool = False


def apply_damage(battle: BattleState, target: Side, amount: int) -> int:
    """Remove *amount* stamina from *target* with no block check.

    Returns the stamina actually lost.
    """
    lost = battle.entity(target).take_damage(amount)
    if target is Side.PLAYER:
        battle.damage_taken += lost
    else:
        battle.damage_dealt += lost
    return lost


def deal_damage(battle: BattleState, target: Side, amount: int) -> DamageResult:
    """Deal attack damage to *target*, honouring a block effect on its side."""
    if amount > 0 and consume_block(battle.active_effects, target):
        return DamageResult(applied=0, blocked=True)
    return DamageResult(applied=apply_damage(battle, target, amount))
