"""Tests for the battle inventory and item effects."""

import pytest

from dice_battler.catalog.items import ItemType
from dice_battler.sim.core.entities import Player
from dice_battler.sim.core.game_state import InventoryItem
from dice_battler.sim.mechanics.items import apply_item_effect, build_inventory, can_use_item, use_item


def _make_player(**kwargs) -> Player:
    defaults = dict(
        name="Hero", skill=10, max_stamina=20, current_stamina=20, luck=9, max_luck=9,
    )
    defaults.update(kwargs)
    return Player(**defaults)


def _make_item(item_type: ItemType, amount: int, remaining: int = 1) -> InventoryItem:
    return InventoryItem(
        id=item_type.value, name=item_type.value, type=item_type, amount=amount, remaining=remaining,
    )


class TestBuildInventory:
    def test_loadout_from_catalog(self, registry):
        inventory = build_inventory(registry.get_items(
            ["healing_draught", "draught_of_proficiency", "draught_of_destiny"]
        ))
        assert [i.id for i in inventory] == [
            "healing_draught", "draught_of_proficiency", "draught_of_destiny",
        ]
        assert inventory[0].remaining == 2
        assert inventory[0].amount == 4
        assert inventory[1].type is ItemType.STAT_BOOST

    def test_every_call_is_fresh(self, registry):
        definitions = registry.get_items(["healing_draught"])
        first = build_inventory(definitions)
        first[0].remaining = 0
        assert build_inventory(definitions)[0].remaining == 2

    def test_unknown_ids_skipped(self, registry, caplog):
        with caplog.at_level("WARNING"):
            items = registry.get_items(["healing_draught", "elixir_of_nothing"])
        assert [i.id for i in items] == ["healing_draught"]
        assert "elixir_of_nothing" in caplog.text


class TestCanUseItem:
    def test_heal_rejected_at_full_stamina(self):
        assert not can_use_item(_make_item(ItemType.HEAL, 4), _make_player())

    def test_heal_allowed_when_hurt(self):
        assert can_use_item(_make_item(ItemType.HEAL, 4), _make_player(current_stamina=10))

    def test_luck_rejected_at_full_luck(self):
        assert not can_use_item(_make_item(ItemType.LUCK_RESTORE, 1), _make_player())

    def test_stat_boost_always_allowed(self):
        assert can_use_item(_make_item(ItemType.STAT_BOOST, 3), _make_player())

    def test_spent_item_rejected(self):
        assert not can_use_item(_make_item(ItemType.STAT_BOOST, 3, remaining=0), _make_player())


class TestItemEffects:
    def test_heal_is_capped(self):
        player = _make_player(current_stamina=18)
        assert apply_item_effect(_make_item(ItemType.HEAL, 4), player) == 2
        assert player.current_stamina == 20

    def test_stat_boost_raises_skill(self):
        player = _make_player()
        apply_item_effect(_make_item(ItemType.STAT_BOOST, 3), player)
        assert player.skill == 13

    def test_luck_restore_is_capped(self):
        player = _make_player(luck=8)
        assert apply_item_effect(_make_item(ItemType.LUCK_RESTORE, 3), player) == 1
        assert player.luck == 9


class TestUseItem:
    def test_decrements_remaining(self):
        item = _make_item(ItemType.HEAL, 4, remaining=2)
        player = _make_player(current_stamina=10)
        assert use_item(item, player)
        assert item.remaining == 1
        assert player.current_stamina == 14

    def test_spent_item_stays_in_inventory(self):
        item = _make_item(ItemType.STAT_BOOST, 3)
        player = _make_player()
        assert use_item(item, player)
        assert item.is_spent
        assert not use_item(item, player)
        assert player.skill == 13

    @pytest.mark.parametrize("item_type", [ItemType.HEAL, ItemType.LUCK_RESTORE])
    def test_rejected_use_changes_nothing(self, item_type):
        item = _make_item(item_type, 1)
        player = _make_player()
        assert not use_item(item, player)
        assert item.remaining == 1
