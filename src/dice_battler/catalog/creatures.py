"""Creature, preset and reaction definitions.

Creatures are the computer-controlled opponents; presets are ready-made
player stat lines.  Both carry an optional :class:`Reactions` table of
flavor lines keyed by reaction kind.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class Reactions(BaseModel):
    """Flavor lines spoken at battle events, keyed by reaction kind."""

    gloat: list[str] = Field(default_factory=list)
    """Spoken after landing a hit."""

    cry: list[str] = Field(default_factory=list)
    """Spoken after taking a hit."""

    victory: list[str] = Field(default_factory=list)
    loss: list[str] = Field(default_factory=list)

    def lines_for(self, kind: str) -> list[str]:
        return list(getattr(self, kind, []))


class CreatureDefinition(BaseModel):
    """A selectable opponent in the creature library."""

    id: str
    name: str
    skill: int = Field(ge=1)
    stamina: int = Field(ge=1)
    image_ref: str | None = None
    description: str = ""
    mana: int | None = None
    spells: list[str] = Field(default_factory=list)
    spell_cast_chance: int | None = Field(default=None, ge=0, le=100)
    """Percentage chance (1-100) of attempting a spell before each action."""

    reactions: Reactions | None = None


class CharacterPreset(BaseModel):
    """Ready-made player stat line (warrior, rogue, ...)."""

    id: str
    name: str
    skill: int = Field(ge=1)
    stamina: int = Field(ge=1)
    luck: int = Field(ge=0)
    mana: int = Field(default=0, ge=0)
    spells: list[str] = Field(default_factory=list)
    avatar: str | None = None
