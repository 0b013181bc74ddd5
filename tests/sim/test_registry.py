"""Tests for ContentRegistry loading and EngineConfig overrides."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from dice_battler.catalog.spells import SpellEffectType
from dice_battler.sim.config import EngineConfig
from dice_battler.sim.content.registry import ContentRegistry


# ---------------------------------------------------------------------------
# Default catalogs
# ---------------------------------------------------------------------------

class TestDefaultCatalogs:
    def test_counts(self, registry):
        assert len(registry.spells) == 7
        assert len(registry.items) == 3
        assert len(registry.creatures) == 12
        assert set(registry.presets) == {"warrior", "rogue", "barbarian", "mage"}

    def test_section_markers_skipped(self, registry):
        assert all(spell.id for spell in registry.spells.values())
        assert "_section" not in registry.creatures

    def test_spell_effects(self, registry):
        assert registry.get_spell("drain").effect.type is SpellEffectType.DRAIN
        shield = registry.get_spell("shield")
        assert shield.effect.stat_modifier.target == "self"
        assert registry.get_spell("nope") is None

    def test_creature_spells_exist(self, registry):
        for creature in registry.creatures.values():
            for spell_id in creature.spells:
                assert registry.get_spell(spell_id) is not None, (creature.id, spell_id)

    def test_default_reactions(self, registry):
        reactions = registry.default_reactions
        assert reactions is not None
        assert reactions.gloat and reactions.cry and reactions.victory and reactions.loss


class TestNarratives:
    def test_known_creature(self, registry):
        narrative = registry.get_narrative("goblin")
        assert registry.get_intro_text("Goblin", "goblin") == narrative.intro
        assert registry.get_victory_text("Goblin", "goblin") == narrative.victory_text
        assert registry.get_defeat_text("Goblin", "goblin") == narrative.defeat_text

    def test_fallbacks(self, registry):
        assert registry.get_intro_text("Bandit") == "A Bandit appears before you, ready for battle!"
        assert registry.get_victory_text("Bandit", "bandit") == (
            "You have defeated the Bandit! Victory is yours!"
        )
        assert registry.get_defeat_text("Bandit") == (
            "The Bandit has defeated you. Your adventure ends here..."
        )


# ---------------------------------------------------------------------------
# Custom catalogs
# ---------------------------------------------------------------------------

class TestCustomCatalogs:
    def test_layered_override(self, tmp_path):
        path = tmp_path / "spells.json"
        path.write_text(json.dumps([
            {"_section": "Overrides"},
            {
                "id": "fireball",
                "name": "Greater Fireball",
                "description": "Deal 8 damage",
                "mana_cost": 7,
                "effect": {"type": "damage", "power": 8},
            },
        ]))
        reg = ContentRegistry()
        reg.load_spells()
        reg.load_spells(path)
        assert len(reg.spells) == 7
        assert reg.get_spell("fireball").effect.power == 8

    def test_buff_without_modifier_rejected(self, tmp_path):
        path = tmp_path / "spells.json"
        path.write_text(json.dumps([
            {
                "id": "bad",
                "name": "Bad",
                "description": "",
                "mana_cost": 1,
                "effect": {"type": "buff", "power": 0},
            },
        ]))
        with pytest.raises(ValidationError):
            ContentRegistry().load_spells(path)

    def test_cast_chance_out_of_range_rejected(self, tmp_path):
        path = tmp_path / "creatures.json"
        path.write_text(json.dumps([
            {"id": "x", "name": "X", "skill": 5, "stamina": 5, "spell_cast_chance": 150},
        ]))
        with pytest.raises(ValidationError):
            ContentRegistry().load_creatures(path)


# ---------------------------------------------------------------------------
# EngineConfig
# ---------------------------------------------------------------------------

class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig()
        assert config.standard_damage == 2
        assert config.special_attack_cooldown == 3
        assert config.special_backfire_faces == (5, 6)
        assert not config.offer_luck_on_hit

    def test_from_json(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"offer_luck_on_hit": True, "starting_inventory": []}))
        config = EngineConfig.from_json(path)
        assert config.offer_luck_on_hit
        assert config.starting_inventory == []
        assert config.lucky_damage == 1

    def test_unknown_key_rejected(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"standard_damgae": 3}))
        with pytest.raises(ValidationError):
            EngineConfig.from_json(path)

    def test_frozen(self):
        with pytest.raises(ValidationError):
            EngineConfig().standard_damage = 5
