"""Game and battle state for the dice battler.

Houses the full mutable state of a session (``GameState``) and of a
single fight (``BattleState``), plus the small value objects the battle
state is made of: combat log entries, pending luck tests, active spell
effects and inventory slots.

These models are owned by :class:`~dice_battler.sim.engine.BattleEngine`.
Nothing else mutates them; presentation layers read deep copies obtained
through ``BattleEngine.snapshot()``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from dice_battler.catalog.items import ItemType
from dice_battler.sim.campaign.state import CampaignState
from dice_battler.sim.core.entities import Creature, Player


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Phase(str, Enum):
    """Finite set of phases the session moves through."""

    CHARACTER_SELECT = "CHARACTER_SELECT"
    AVATAR_SELECT = "AVATAR_SELECT"
    CREATURE_SELECT = "CREATURE_SELECT"
    BATTLE = "BATTLE"
    DICE_ROLLING = "DICE_ROLLING"
    SPELL_CASTING = "SPELL_CASTING"
    LUCK_TEST = "LUCK_TEST"
    ROUND_RESULT = "ROUND_RESULT"
    BATTLE_END = "BATTLE_END"
    CAMPAIGN_VICTORY = "CAMPAIGN_VICTORY"
    CAMPAIGN_END = "CAMPAIGN_END"


class Side(str, Enum):
    PLAYER = "player"
    CREATURE = "creature"

    @property
    def opponent(self) -> Side:
        return Side.CREATURE if self is Side.PLAYER else Side.PLAYER


class CombatResult(str, Enum):
    """Outcome tag of a round.  Names the side that *received* damage."""

    PLAYER_HIT = "player_hit"
    CREATURE_HIT = "creature_hit"
    DRAW = "draw"

    @classmethod
    def hit_on(cls, side: Side) -> CombatResult:
        return cls.PLAYER_HIT if side is Side.PLAYER else cls.CREATURE_HIT


class LuckTestType(str, Enum):
    REDUCE = "reduce"
    """Player is about to take damage; lucky lowers it."""

    INCREASE = "increase"
    """Player is about to deal damage; lucky raises it."""


class EffectType(str, Enum):
    SKILL_BUFF = "skill_buff"
    SKILL_DEBUFF = "skill_debuff"
    LUCK_BUFF = "luck_buff"
    LUCK_DEBUFF = "luck_debuff"
    BLOCK = "block"


class LogAction(str, Enum):
    ATTACK = "attack"
    SPECIAL_ATTACK = "special_attack"
    SPELL = "spell"


class PendingAction(str, Enum):
    """What ``resolve_dice`` will resolve once the dice land."""

    ATTACK = "attack"
    SPECIAL_ATTACK = "special_attack"
    CREATURE_TURN = "creature_turn"


class GameMode(str, Enum):
    SINGLE = "single"
    CAMPAIGN = "campaign"


class ActionKind(str, Enum):
    """Decisions a player (or play agent) can make during a battle."""

    ATTACK = "attack"
    SPECIAL_ATTACK = "special_attack"
    CAST_SPELL = "cast_spell"
    USE_ITEM = "use_item"
    CLOSE_SPELLBOOK = "close_spellbook"
    TEST_LUCK = "test_luck"
    SKIP_LUCK_TEST = "skip_luck_test"


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------

class ActiveEffect(BaseModel):
    """One-shot modifier produced by a spell, consumed by the next attack."""

    type: EffectType
    magnitude: int
    target: Side


class PendingLuckTest(BaseModel):
    """Damage held back while the player decides whether to test luck."""

    damage: int
    target: Side
    type: LuckTestType
    luck_modifier: int = 0
    """Luck buff/debuff consumed by the round that raised this test."""


class CombatLogEntry(BaseModel):
    """One resolved round.  Dice fields are ``None`` for non-dice rounds."""

    round: int
    action: LogAction = LogAction.ATTACK
    player_roll: int | None = None
    """2d6 total for standard rounds; the d6 for special attacks."""

    creature_roll: int | None = None
    player_attack_strength: int | None = None
    creature_attack_strength: int | None = None
    result: CombatResult
    damage: int = 0
    """Stamina actually removed from the side named by ``result``."""

    blocked: bool = False

    # -- luck test -------------------------------------------------------------
    is_luck_test: bool = False
    luck_roll: int | None = None
    was_lucky: bool | None = None
    original_damage: int | None = None
    modified_damage: int | None = None
    target: Side | None = None
    skipped: bool | None = None

    # -- spell cast ------------------------------------------------------------
    caster: Side | None = None
    spell_name: str | None = None
    mana_cost: int | None = None
    effect_description: str | None = None


class InventoryItem(BaseModel):
    """A slot in the battle inventory.  Spent items stay with ``remaining=0``."""

    id: str
    name: str
    description: str = ""
    type: ItemType
    amount: int
    remaining: int

    @property
    def is_spent(self) -> bool:
        return self.remaining <= 0


class PlayerAction(BaseModel):
    """One legal decision, as enumerated by ``BattleEngine.legal_actions``."""

    model_config = {"frozen": True}

    kind: ActionKind
    target_id: str | None = None
    """Spell id for ``CAST_SPELL``, item id for ``USE_ITEM``."""


class ActiveReaction(BaseModel):
    text: str
    entity: Side
    round: int


# ---------------------------------------------------------------------------
# BattleState
# ---------------------------------------------------------------------------

class BattleState(BaseModel):
    """Full mutable state of a single fight."""

    player: Player
    creature: Creature
    current_round: int = 0
    """Number of resolved actions so far."""

    combat_log: list[CombatLogEntry] = Field(default_factory=list)
    """Newest entry first."""

    active_effects: list[ActiveEffect] = Field(default_factory=list)
    pending_luck_test: PendingLuckTest | None = None
    inventory: list[InventoryItem] = Field(default_factory=list)
    last_special_attack_round: int | None = None
    pending_action: PendingAction | None = None
    creature_turn_due: bool = False
    """Set after a player spell; the creature acts before the player again."""

    player_stamina_at_start: int = 0
    damage_dealt: int = 0
    damage_taken: int = 0
    result: str | None = None
    """``"win"`` or ``"loss"`` once the battle is over."""

    reaction_feed: list[ActiveReaction] = Field(default_factory=list)

    # -- queries ---------------------------------------------------------------

    @property
    def is_over(self) -> bool:
        return self.result is not None

    @property
    def latest_entry(self) -> CombatLogEntry | None:
        return self.combat_log[0] if self.combat_log else None

    @property
    def active_reaction(self) -> ActiveReaction | None:
        return self.reaction_feed[-1] if self.reaction_feed else None

    @property
    def is_perfect_victory(self) -> bool:
        return self.result == "win" and self.damage_taken == 0

    def entity(self, side: Side) -> Player | Creature:
        return self.player if side is Side.PLAYER else self.creature

    def get_item(self, item_id: str) -> InventoryItem | None:
        for item in self.inventory:
            if item.id == item_id:
                return item
        return None

    # -- mutation ----------------------------------------------------------------

    def record(self, entry: CombatLogEntry) -> None:
        """Prepend *entry* to the combat log (newest first)."""
        self.combat_log.insert(0, entry)

    def check_battle_over(self) -> str | None:
        """Settle ``result`` if either side is at 0 stamina.

        The player at 0 takes precedence: a simultaneous knockout is a loss.
        """
        if self.player.is_defeated:
            self.result = "loss"
        elif self.creature.is_defeated:
            self.result = "win"
        return self.result


# ---------------------------------------------------------------------------
# GameState
# ---------------------------------------------------------------------------

class GameState(BaseModel):
    """Top-level session state: phase, player, current battle, campaign."""

    phase: Phase = Phase.CHARACTER_SELECT
    mode: GameMode = GameMode.SINGLE
    player: Player | None = None
    battle: BattleState | None = None
    campaign: CampaignState | None = None

    @property
    def in_campaign(self) -> bool:
        return self.campaign is not None and self.campaign.is_active
