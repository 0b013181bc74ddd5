"""Combatant models for the dice battler.

The player and the creature share a common :class:`Combatant` base
(name, skill, stamina, mana, spells, reactions).  Capabilities that only
some combatants have are exposed as explicit markers (``has_spells``,
``has_mana``) rather than checked through optional attributes.

All numeric stats are clamped by the mutation helpers; nothing outside
these methods should assign ``current_stamina``, ``luck`` or ``mana``
directly.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from dice_battler.catalog.creatures import Reactions


# ---------------------------------------------------------------------------
# Combatant base
# ---------------------------------------------------------------------------

class Combatant(BaseModel):
    """Common base for anything that rolls dice and has stamina."""

    name: str
    skill: int
    max_stamina: int
    current_stamina: int
    mana: int = 0
    max_mana: int = 0
    spells: list[str] = Field(default_factory=list)
    """Spell identifiers this combatant knows."""

    reactions: Reactions | None = None

    @model_validator(mode="after")
    def _check_bounds(self) -> Combatant:
        if not 0 <= self.current_stamina <= self.max_stamina:
            raise ValueError(
                f"current_stamina {self.current_stamina} outside [0, {self.max_stamina}]"
            )
        if not 0 <= self.mana <= self.max_mana:
            raise ValueError(f"mana {self.mana} outside [0, {self.max_mana}]")
        return self

    # -- capability markers ---------------------------------------------------

    @property
    def has_spells(self) -> bool:
        return bool(self.spells)

    @property
    def has_mana(self) -> bool:
        return self.mana > 0

    @property
    def is_defeated(self) -> bool:
        return self.current_stamina <= 0

    @property
    def stamina_deficit(self) -> int:
        return self.max_stamina - self.current_stamina

    # -- stamina --------------------------------------------------------------

    def take_damage(self, amount: int) -> int:
        """Remove up to *amount* stamina.  Returns the stamina actually lost."""
        if amount <= 0:
            return 0
        lost = min(self.current_stamina, amount)
        self.current_stamina -= lost
        return lost

    def heal(self, amount: int) -> int:
        """Restore up to *amount* stamina, capped at ``max_stamina``.

        Returns the stamina actually restored.
        """
        if amount <= 0:
            return 0
        restored = min(self.stamina_deficit, amount)
        self.current_stamina += restored
        return restored

    # -- mana -----------------------------------------------------------------

    def spend_mana(self, amount: int) -> bool:
        """Attempt to spend mana.  Returns False (no change) if insufficient."""
        if amount < 0 or self.mana < amount:
            return False
        self.mana -= amount
        return True

    def restore_mana(self) -> None:
        self.mana = self.max_mana


# ---------------------------------------------------------------------------
# Player
# ---------------------------------------------------------------------------

class Player(Combatant):
    """The human-controlled character."""

    luck: int
    max_luck: int
    avatar: str | None = None

    @model_validator(mode="after")
    def _check_luck(self) -> Player:
        if not 0 <= self.luck <= self.max_luck:
            raise ValueError(f"luck {self.luck} outside [0, {self.max_luck}]")
        return self

    def spend_luck(self, amount: int = 1) -> int:
        """Spend luck, floored at 0.  Returns the luck actually spent."""
        spent = min(self.luck, max(0, amount))
        self.luck -= spent
        return spent

    def restore_luck(self, amount: int) -> int:
        """Restore luck, capped at ``max_luck``.  Returns the luck restored."""
        if amount <= 0:
            return 0
        restored = min(self.max_luck - self.luck, amount)
        self.luck += restored
        return restored

    def reset_for_battle(self) -> None:
        """Refill stamina, luck and mana to their maximums."""
        self.current_stamina = self.max_stamina
        self.luck = self.max_luck
        self.mana = self.max_mana


# ---------------------------------------------------------------------------
# Creature
# ---------------------------------------------------------------------------

class Creature(Combatant):
    """A computer-controlled opponent."""

    creature_id: str | None = None
    """Ties this instance back to a catalog definition, if any."""

    image_ref: str | None = None
    spell_cast_chance: int | None = None
    """Percentage chance (1-100) of attempting a spell before each action."""

    @property
    def can_attempt_spell(self) -> bool:
        return (
            self.has_spells
            and self.has_mana
            and self.spell_cast_chance is not None
            and self.spell_cast_chance > 0
        )

