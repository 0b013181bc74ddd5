"""Core battle mechanics for the dice battler.

Re-exports the primary functions from each mechanics module for convenience.

Usage::

    from dice_battler.sim.mechanics import (
        roll_die, roll_2d6, attack_strength,
        determine_combat_result,
        perform_luck_test, modify_damage,
        apply_spell_effect, apply_item_effect,
        push_effect, consume_block,
    )
"""

# -- dice --------------------------------------------------------------------
from .dice import RolledStats, attack_strength, roll_2d6, roll_character_stats, roll_die

# -- combat ------------------------------------------------------------------
from .combat import STANDARD_DAMAGE, determine_combat_result

# -- damage ------------------------------------------------------------------
from .damage import DamageResult, apply_damage, deal_damage

# -- effects -----------------------------------------------------------------
from .effects import (
    consume_block,
    consume_luck_modifier,
    consume_skill_modifier,
    push_effect,
)

# -- items -------------------------------------------------------------------
from .items import apply_item_effect, build_inventory, can_use_item, use_item

# -- luck --------------------------------------------------------------------
from .luck import LuckTestResult, is_lucky, modify_damage, perform_luck_test

# -- reactions ---------------------------------------------------------------
from .reactions import ReactionKind, pick_reaction

# -- special attack ----------------------------------------------------------
from .special_attack import (
    SpecialAttackRoll,
    roll_special_attack,
    special_attack_available,
)

# -- spells ------------------------------------------------------------------
from .spells import SpellOutcome, apply_spell_effect, can_afford

__all__ = [
    # dice
    "roll_die",
    "roll_2d6",
    "attack_strength",
    "roll_character_stats",
    "RolledStats",
    # combat
    "STANDARD_DAMAGE",
    "determine_combat_result",
    # damage
    "DamageResult",
    "apply_damage",
    "deal_damage",
    # effects
    "push_effect",
    "consume_skill_modifier",
    "consume_luck_modifier",
    "consume_block",
    # items
    "build_inventory",
    "can_use_item",
    "apply_item_effect",
    "use_item",
    # luck
    "LuckTestResult",
    "is_lucky",
    "modify_damage",
    "perform_luck_test",
    # reactions
    "ReactionKind",
    "pick_reaction",
    # special attack
    "SpecialAttackRoll",
    "special_attack_available",
    "roll_special_attack",
    # spells
    "SpellOutcome",
    "apply_spell_effect",
    "can_afford",
]
