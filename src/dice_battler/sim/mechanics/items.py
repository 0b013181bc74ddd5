"""Inventory -- build the starting loadout, check and apply item effects."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from dice_battler.catalog.items import ItemType
from dice_battler.sim.core.game_state import InventoryItem

if TYPE_CHECKING:
    from dice_battler.catalog.items import ItemDefinition
    from dice_battler.sim.core.entities import Player

logger = logging.getLogger(__name__)


def build_inventory(definitions: Iterable[ItemDefinition]) -> list[InventoryItem]:
    """Create fresh inventory slots from item definitions.

    Each call returns new objects, so every battle starts with a full
    loadout regardless of what was used in the previous one.
    """
    return [
        InventoryItem(
            id=defn.id,
            name=defn.name,
            description=defn.description,
            type=defn.type,
            amount=defn.amount,
            remaining=defn.uses,
        )
        for defn in definitions
    ]


def can_use_item(item: InventoryItem, player: Player) -> bool:
    """Return False for spent items and for restores that would do nothing."""
    if item.is_spent:
        return False
    if item.type is ItemType.HEAL and player.current_stamina >= player.max_stamina:
        return False
    if item.type is ItemType.LUCK_RESTORE and player.luck >= player.max_luck:
        return False
    return True


def apply_item_effect(item: InventoryItem, player: Player) -> int:
    """Apply *item* to *player* (clamped) and return the amount gained.

    Does not check or decrement ``remaining``; see :func:`use_item`.
    """
    if item.type is ItemType.HEAL:
        return player.heal(item.amount)
    if item.type is ItemType.LUCK_RESTORE:
        return player.restore_luck(item.amount)
    if item.type is ItemType.STAT_BOOST:
        player.skill += item.amount
        return item.amount
    logger.warning("Unhandled item type %s", item.type)
    return 0


def use_item(item: InventoryItem, player: Player) -> bool:
    """Use one charge of *item*.  Returns False (no change) if rejected."""
    if not can_use_item(item, player):
        return False
    apply_item_effect(item, player)
    item.remaining -= 1
    return True
