"""Content registry -- loads and serves spell, item, creature, preset and
narrative definitions for the dice battler.

Catalogs are loaded from JSON files in ``dice_battler/data/``.  Every
row is validated through its pydantic model, so a malformed catalog
raises :class:`pydantic.ValidationError` at load time rather than in the
middle of a battle.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from dice_battler.catalog.creatures import CharacterPreset, CreatureDefinition, Reactions
from dice_battler.catalog.items import ItemDefinition
from dice_battler.catalog.narratives import BattleNarrative
from dice_battler.catalog.spells import SpellDefinition

logger = logging.getLogger(__name__)

# Default paths relative to the installed package.
_DATA_DIR = Path(__file__).resolve().parents[2] / "data"  # src/dice_battler/sim/content -> dice_battler
_DEFAULT_SPELLS_PATH = _DATA_DIR / "spells.json"
_DEFAULT_ITEMS_PATH = _DATA_DIR / "items.json"
_DEFAULT_CREATURES_PATH = _DATA_DIR / "creatures.json"
_DEFAULT_PRESETS_PATH = _DATA_DIR / "presets.json"
_DEFAULT_NARRATIVES_PATH = _DATA_DIR / "narratives.json"
_DEFAULT_REACTIONS_PATH = _DATA_DIR / "reactions.json"


def _load_rows(path: str | Path) -> list[dict[str, Any]]:
    """Read a JSON array, dropping organizational ``"_section"`` markers."""
    with open(Path(path)) as f:
        raw_rows: list[dict[str, Any]] = json.load(f)
    return [raw for raw in raw_rows if "_section" not in raw]


class ContentRegistry:
    """Loads and serves every static catalog the engine reads.

    The registry is the single source of truth for game content during
    play and simulation.  Loading the same id twice replaces the earlier
    definition, so custom catalogs can be layered on top of the defaults.

    Usage::

        registry = ContentRegistry()
        registry.load_all()

        spell = registry.get_spell("fireball")
        creature = registry.get_creature("owlbear")
        intro = registry.get_intro_text("Owlbear", "owlbear")
    """

    def __init__(self) -> None:
        self.spells: dict[str, SpellDefinition] = {}
        self.items: dict[str, ItemDefinition] = {}
        self.creatures: dict[str, CreatureDefinition] = {}
        self.presets: dict[str, CharacterPreset] = {}
        self.narratives: dict[str, BattleNarrative] = {}
        self.default_reactions: Reactions | None = None
        """Lines used for players that carry no reaction table of their own."""

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_spells(self, path: str | Path | None = None) -> None:
        """Load spell definitions from a JSON file.

        Parameters
        ----------
        path:
            Path to the JSON file.  Defaults to ``data/spells.json``
            inside the package.
        """
        for raw in _load_rows(path or _DEFAULT_SPELLS_PATH):
            spell = SpellDefinition.model_validate(raw)
            self.spells[spell.id] = spell

    def load_items(self, path: str | Path | None = None) -> None:
        """Load item definitions.  Defaults to ``data/items.json``."""
        for raw in _load_rows(path or _DEFAULT_ITEMS_PATH):
            item = ItemDefinition.model_validate(raw)
            self.items[item.id] = item

    def load_creatures(self, path: str | Path | None = None) -> None:
        """Load the creature library.  Defaults to ``data/creatures.json``."""
        for raw in _load_rows(path or _DEFAULT_CREATURES_PATH):
            creature = CreatureDefinition.model_validate(raw)
            self.creatures[creature.id] = creature

    def load_presets(self, path: str | Path | None = None) -> None:
        """Load character presets.  Defaults to ``data/presets.json``."""
        for raw in _load_rows(path or _DEFAULT_PRESETS_PATH):
            preset = CharacterPreset.model_validate(raw)
            self.presets[preset.id] = preset

    def load_narratives(self, path: str | Path | None = None) -> None:
        """Load battle narratives.  Defaults to ``data/narratives.json``."""
        for raw in _load_rows(path or _DEFAULT_NARRATIVES_PATH):
            narrative = BattleNarrative.model_validate(raw)
            self.narratives[narrative.creature_id] = narrative

    def load_reactions(self, path: str | Path | None = None) -> None:
        """Load the default player reaction table.  Defaults to ``data/reactions.json``."""
        with open(Path(path or _DEFAULT_REACTIONS_PATH)) as f:
            self.default_reactions = Reactions.model_validate(json.load(f))

    def load_all(self) -> None:
        """Load every default catalog."""
        self.load_spells()
        self.load_items()
        self.load_creatures()
        self.load_presets()
        self.load_narratives()
        self.load_reactions()
        logger.debug(
            "Loaded %d spells, %d items, %d creatures, %d presets, %d narratives",
            len(self.spells), len(self.items), len(self.creatures),
            len(self.presets), len(self.narratives),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_spell(self, spell_id: str) -> SpellDefinition | None:
        """Return the :class:`SpellDefinition` for *spell_id*, or ``None``."""
        return self.spells.get(spell_id)

    def get_item(self, item_id: str) -> ItemDefinition | None:
        return self.items.get(item_id)

    def get_creature(self, creature_id: str) -> CreatureDefinition | None:
        """Return the :class:`CreatureDefinition` for *creature_id*, or ``None``."""
        return self.creatures.get(creature_id)

    def get_preset(self, preset_id: str) -> CharacterPreset | None:
        return self.presets.get(preset_id)

    def get_narrative(self, creature_id: str | None) -> BattleNarrative | None:
        if creature_id is None:
            return None
        return self.narratives.get(creature_id)

    def get_items(self, item_ids: list[str]) -> list[ItemDefinition]:
        """Resolve *item_ids* in order, skipping (and logging) unknown ids."""
        result: list[ItemDefinition] = []
        for item_id in item_ids:
            item = self.items.get(item_id)
            if item is None:
                logger.warning("Unknown item id %r in starting inventory", item_id)
                continue
            result.append(item)
        return result

    # ------------------------------------------------------------------
    # Narrative text
    # ------------------------------------------------------------------

    def get_intro_text(self, creature_name: str, creature_id: str | None = None) -> str:
        narrative = self.get_narrative(creature_id)
        if narrative is not None:
            return narrative.intro
        return f"A {creature_name} appears before you, ready for battle!"

    def get_victory_text(self, creature_name: str, creature_id: str | None = None) -> str:
        narrative = self.get_narrative(creature_id)
        if narrative is not None:
            return narrative.victory_text
        return f"You have defeated the {creature_name}! Victory is yours!"

    def get_defeat_text(self, creature_name: str, creature_id: str | None = None) -> str:
        narrative = self.get_narrative(creature_id)
        if narrative is not None:
            return narrative.defeat_text
        return f"The {creature_name} has defeated you. Your adventure ends here..."
