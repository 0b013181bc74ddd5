"""Static content catalog for the dice battler.

Spells, items, creatures, presets and narratives are pydantic models
that load cleanly from the JSON files under ``dice_battler/data``.  The
engine depends on these tables but does not own them; they are handed
in through :class:`~dice_battler.sim.content.registry.ContentRegistry`.
"""

from .creatures import CharacterPreset, CreatureDefinition, Reactions
from .items import ItemDefinition, ItemType
from .narratives import BattleNarrative
from .spells import SpellDefinition, SpellEffect, SpellEffectType, StatModifier

__all__ = [
    # creatures
    "CharacterPreset",
    "CreatureDefinition",
    "Reactions",
    # items
    "ItemDefinition",
    "ItemType",
    # narratives
    "BattleNarrative",
    # spells
    "SpellDefinition",
    "SpellEffect",
    "SpellEffectType",
    "StatModifier",
]
