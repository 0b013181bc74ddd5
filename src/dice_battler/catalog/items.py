"""Item definitions -- limited-use consumables carried into each battle."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ItemType(str, Enum):
    """What an item does when used."""

    HEAL = "heal"
    """Restores stamina, capped at max stamina."""

    STAT_BOOST = "stat_boost"
    """Raises skill for the rest of the battle."""

    LUCK_RESTORE = "luck_restore"
    """Restores luck, capped at max luck."""


class ItemDefinition(BaseModel):
    """Complete definition of a single item in the catalog."""

    id: str
    name: str
    description: str
    type: ItemType
    amount: int = Field(ge=0)
    uses: int = Field(default=1, ge=0)
    """Number of uses granted by the starting loadout."""
