"""Spell definitions -- mana-costed effects cast by players and creatures."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, model_validator


class SpellEffectType(str, Enum):
    """The single effect kind a spell resolves to."""

    DAMAGE = "damage"
    HEAL = "heal"
    BUFF = "buff"
    DEBUFF = "debuff"
    DRAIN = "drain"
    BLOCK = "block"


class StatModifier(BaseModel):
    """One-shot stat adjustment carried by buff and debuff spells."""

    stat: Literal["skill", "luck"]
    amount: int
    """Signed adjustment.  Stored on the resulting effect as a magnitude."""

    target: Literal["self", "enemy"]
    """Relative to the caster: ``"self"`` is the caster's side."""


class SpellEffect(BaseModel):
    type: SpellEffectType
    power: int = 0
    """Damage dealt (damage/drain) or stamina restored (heal)."""

    stat_modifier: StatModifier | None = None

    @model_validator(mode="after")
    def _check_modifier(self) -> SpellEffect:
        needs_modifier = self.type in (SpellEffectType.BUFF, SpellEffectType.DEBUFF)
        if needs_modifier and self.stat_modifier is None:
            raise ValueError(f"{self.type.value} spells require a stat_modifier")
        if self.power < 0:
            raise ValueError(f"power must be >= 0, got {self.power}")
        return self


class SpellDefinition(BaseModel):
    """Complete definition of a single spell in the catalog."""

    id: str
    """Unique identifier (e.g. ``"magic_missile"``)."""

    name: str
    """Display name."""

    description: str
    """Tooltip text describing the spell's effect."""

    mana_cost: int
    """Mana debited from the caster when the spell resolves."""

    effect: SpellEffect
