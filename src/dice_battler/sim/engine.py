"""Battle engine -- the single owner of game state and the phase machine.

Every public operation is a command on :class:`BattleEngine`.  Commands
that are not allowed in the current phase (or whose preconditions fail)
are no-ops returning ``False``; they never raise.  The legal phase edges
live in one table, :data:`TRANSITIONS`, enforced by one method,
``_transition``.  An illegal edge means the engine itself is wrong and
raises :class:`InvalidTransitionError`.

The engine never sleeps.  Steps that a front end shows with a delay
(dice landing, round result, battle end) are separate commands, driven
either by :meth:`BattleEngine.step` or by
:class:`~dice_battler.sim.pacing.BattleDirector`.

Round flow::

    BATTLE --roll_attack--> DICE_ROLLING --resolve_dice--> LUCK_TEST | ROUND_RESULT
    LUCK_TEST --test_luck / skip_luck_test--> ROUND_RESULT
    ROUND_RESULT --advance--> BATTLE | BATTLE_END
    BATTLE --cast_spell--> SPELL_CASTING --> ROUND_RESULT --advance--> BATTLE
        (creature follow-up due) --begin_creature_turn--> DICE_ROLLING ...
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from dice_battler.sim.campaign.difficulty import classify_difficulty, get_progressive_difficulty
from dice_battler.sim.campaign.high_scores import HighScoreEntry, InMemoryHighScoreStore
from dice_battler.sim.campaign.recovery import Recovery, apply_recovery, calculate_recovery
from dice_battler.sim.campaign.scoring import calculate_battle_score
from dice_battler.sim.campaign.state import BattleRecord, CampaignState, StartingStats
from dice_battler.sim.config import EngineConfig
from dice_battler.sim.core.entities import Creature, Player
from dice_battler.sim.core.game_state import (
    ActionKind,
    ActiveReaction,
    BattleState,
    CombatLogEntry,
    CombatResult,
    GameMode,
    GameState,
    LogAction,
    LuckTestType,
    PendingAction,
    PendingLuckTest,
    Phase,
    PlayerAction,
    Side,
)
from dice_battler.sim.core.rng import GameRNG
from dice_battler.sim.creature_ai import choose_creature_spell
from dice_battler.sim.mechanics import (
    ReactionKind,
    apply_damage,
    apply_spell_effect,
    attack_strength,
    build_inventory,
    can_afford,
    can_use_item,
    consume_block,
    consume_luck_modifier,
    consume_skill_modifier,
    deal_damage,
    determine_combat_result,
    perform_luck_test,
    pick_reaction,
    roll_2d6,
    roll_special_attack,
    special_attack_available,
    use_item,
)

if TYPE_CHECKING:
    from dice_battler.catalog.creatures import Reactions
    from dice_battler.catalog.spells import SpellDefinition
    from dice_battler.sim.campaign.high_scores import HighScoreStore
    from dice_battler.sim.content.registry import ContentRegistry

logger = logging.getLogger(__name__)


class InvalidTransitionError(RuntimeError):
    """Raised when the engine attempts a phase edge not in ``TRANSITIONS``."""


# ---------------------------------------------------------------------------
# Phase tables
# ---------------------------------------------------------------------------

TRANSITIONS: dict[Phase, frozenset[Phase]] = {
    Phase.CHARACTER_SELECT: frozenset({Phase.AVATAR_SELECT}),
    Phase.AVATAR_SELECT: frozenset({Phase.CREATURE_SELECT}),
    Phase.CREATURE_SELECT: frozenset({Phase.BATTLE}),
    Phase.BATTLE: frozenset({Phase.DICE_ROLLING, Phase.SPELL_CASTING}),
    Phase.DICE_ROLLING: frozenset({Phase.LUCK_TEST, Phase.ROUND_RESULT}),
    Phase.SPELL_CASTING: frozenset({Phase.BATTLE, Phase.ROUND_RESULT}),
    Phase.LUCK_TEST: frozenset({Phase.ROUND_RESULT}),
    Phase.ROUND_RESULT: frozenset({Phase.BATTLE, Phase.BATTLE_END}),
    Phase.BATTLE_END: frozenset({Phase.CAMPAIGN_VICTORY, Phase.CAMPAIGN_END}),
    Phase.CAMPAIGN_VICTORY: frozenset({Phase.CREATURE_SELECT, Phase.CAMPAIGN_END}),
    Phase.CAMPAIGN_END: frozenset(),
}
"""Every legal phase edge.  ``reset_game`` is the only way out of a terminal phase."""

OPERATION_PHASES: dict[str, frozenset[Phase]] = {
    "create_character": frozenset({Phase.CHARACTER_SELECT}),
    "select_avatar": frozenset({Phase.AVATAR_SELECT}),
    "start_campaign": frozenset({Phase.AVATAR_SELECT, Phase.CREATURE_SELECT}),
    "select_creature": frozenset({Phase.CREATURE_SELECT}),
    "roll_attack": frozenset({Phase.BATTLE}),
    "roll_special_attack": frozenset({Phase.BATTLE}),
    "use_item": frozenset({Phase.BATTLE}),
    "open_spellbook": frozenset({Phase.BATTLE}),
    "close_spellbook": frozenset({Phase.SPELL_CASTING}),
    "cast_spell": frozenset({Phase.BATTLE, Phase.SPELL_CASTING}),
    "begin_creature_turn": frozenset({Phase.BATTLE}),
    "resolve_dice": frozenset({Phase.DICE_ROLLING}),
    "test_luck": frozenset({Phase.LUCK_TEST}),
    "skip_luck_test": frozenset({Phase.LUCK_TEST}),
    "advance": frozenset({Phase.ROUND_RESULT, Phase.BATTLE_END}),
    "record_battle_victory": frozenset({Phase.BATTLE_END}),
    "apply_campaign_recovery": frozenset({Phase.CAMPAIGN_VICTORY}),
    "end_campaign": frozenset({Phase.BATTLE_END, Phase.CAMPAIGN_VICTORY}),
}
"""Phases in which each public operation is accepted."""

# Player decisions that wait while the creature's follow-up turn is due.
_PLAYER_TURN_OPERATIONS = frozenset({
    "roll_attack", "roll_special_attack", "use_item", "open_spellbook", "cast_spell",
})


class BattleEngine:
    """Owns a :class:`GameState` and applies every rule to it.

    Parameters
    ----------
    registry:
        Content registry with spells, items and creatures loaded.
    config:
        Rule constants.  Defaults to the standard rules.
    rng:
        Source of every random decision.  Defaults to an entropy-seeded
        :class:`GameRNG`; pass a seeded one for reproducible battles.
    high_scores:
        Store that receives a :class:`HighScoreEntry` when a campaign
        ends.  Defaults to an in-memory store.
    """

    def __init__(
        self,
        registry: ContentRegistry,
        config: EngineConfig | None = None,
        rng: GameRNG | None = None,
        high_scores: HighScoreStore | None = None,
    ) -> None:
        self.registry = registry
        self.config = config or EngineConfig()
        self.rng = rng or GameRNG()
        self.high_scores = high_scores or InMemoryHighScoreStore(self.config.max_high_scores)
        self.state = GameState()

    # ------------------------------------------------------------------
    # Phase machine
    # ------------------------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def _transition(self, to: Phase) -> None:
        current = self.state.phase
        if to not in TRANSITIONS[current]:
            raise InvalidTransitionError(f"Illegal phase transition {current.value} -> {to.value}")
        logger.debug("Phase %s -> %s", current.value, to.value)
        self.state.phase = to

    def _accepts(self, operation: str) -> bool:
        if self.state.phase not in OPERATION_PHASES[operation]:
            logger.debug("Rejected %s in phase %s", operation, self.state.phase.value)
            return False
        if operation in _PLAYER_TURN_OPERATIONS and self._battle.creature_turn_due:
            logger.debug("Rejected %s: creature turn is due", operation)
            return False
        return True

    @property
    def _battle(self) -> BattleState:
        battle = self.state.battle
        assert battle is not None, "no battle in progress"
        return battle

    @property
    def _player(self) -> Player:
        player = self.state.player
        assert player is not None, "no character created"
        return player

    # ------------------------------------------------------------------
    # Character and creature setup
    # ------------------------------------------------------------------

    def create_character(
        self,
        name: str,
        skill: int,
        stamina: int,
        luck: int,
        mana: int = 0,
        spells: Iterable[str] = (),
        reactions: Reactions | None = None,
    ) -> bool:
        """Create the player at full stats.  ``CHARACTER_SELECT -> AVATAR_SELECT``."""
        if not self._accepts("create_character"):
            return False
        self.state.player = Player(
            name=name,
            skill=skill,
            max_stamina=stamina,
            current_stamina=stamina,
            luck=luck,
            max_luck=luck,
            mana=mana,
            max_mana=mana,
            spells=list(spells),
            reactions=reactions,
        )
        self._transition(Phase.AVATAR_SELECT)
        return True

    def create_character_from_preset(self, preset_id: str, name: str | None = None) -> bool:
        """Create the player from a catalog preset (warrior, rogue, ...)."""
        preset = self.registry.get_preset(preset_id)
        if preset is None:
            logger.debug("Rejected create_character_from_preset: unknown preset %r", preset_id)
            return False
        return self.create_character(
            name or preset.name,
            preset.skill,
            preset.stamina,
            preset.luck,
            mana=preset.mana,
            spells=preset.spells,
        )

    def select_avatar(self, avatar: str) -> bool:
        """Pick the player's portrait.  ``AVATAR_SELECT -> CREATURE_SELECT``."""
        if not self._accepts("select_avatar"):
            return False
        self._player.avatar = avatar
        self._transition(Phase.CREATURE_SELECT)
        return True

    def select_creature(
        self,
        name: str,
        skill: int,
        stamina: int,
        image_ref: str | None = None,
        reactions: Reactions | None = None,
        mana: int | None = None,
        max_mana: int | None = None,
        spells: Iterable[str] | None = None,
        spell_cast_chance: int | None = None,
        creature_id: str | None = None,
    ) -> bool:
        """Set up the opponent and start a battle.  ``CREATURE_SELECT -> BATTLE``.

        In campaign mode the creature's stats are raised by the
        progressive difficulty bonus for the number of battles won.
        """
        if not self._accepts("select_creature"):
            return False
        player = self._player

        if self.state.in_campaign:
            assert self.state.campaign is not None
            bonus = get_progressive_difficulty(self.state.campaign.battles_won)
            skill += bonus.skill_bonus
            stamina += bonus.stamina_bonus
            # Stamina and luck carry over between campaign battles.
            player.restore_mana()
        else:
            player.reset_for_battle()

        start_mana = mana or 0
        creature = Creature(
            name=name,
            skill=skill,
            max_stamina=stamina,
            current_stamina=stamina,
            mana=start_mana,
            max_mana=max_mana if max_mana is not None else start_mana,
            spells=list(spells or []),
            reactions=reactions,
            creature_id=creature_id,
            image_ref=image_ref,
            spell_cast_chance=spell_cast_chance,
        )

        self.state.battle = BattleState(
            player=player,
            creature=creature,
            inventory=build_inventory(self.registry.get_items(self.config.starting_inventory)),
            player_stamina_at_start=player.current_stamina,
        )
        self._transition(Phase.BATTLE)
        logger.info(
            "Battle start: %s (SKILL %d, STAMINA %d) vs %s (SKILL %d, STAMINA %d)",
            player.name, player.skill, player.current_stamina,
            creature.name, creature.skill, creature.current_stamina,
        )
        return True

    def select_creature_by_id(self, creature_id: str) -> bool:
        """Start a battle against a creature from the catalog."""
        definition = self.registry.get_creature(creature_id)
        if definition is None:
            logger.debug("Rejected select_creature_by_id: unknown creature %r", creature_id)
            return False
        return self.select_creature(
            definition.name,
            definition.skill,
            definition.stamina,
            image_ref=definition.image_ref,
            reactions=definition.reactions,
            mana=definition.mana,
            spells=definition.spells,
            spell_cast_chance=definition.spell_cast_chance,
            creature_id=definition.id,
        )

    # ------------------------------------------------------------------
    # Battle actions
    # ------------------------------------------------------------------

    def roll_attack(self) -> bool:
        """Start a standard attack round.  ``BATTLE -> DICE_ROLLING``."""
        if not self._accepts("roll_attack"):
            return False
        self._battle.pending_action = PendingAction.ATTACK
        self._transition(Phase.DICE_ROLLING)
        return True

    def special_attack_ready(self) -> bool:
        if self.state.battle is None:
            return False
        battle = self.state.battle
        return special_attack_available(
            battle.current_round,
            battle.last_special_attack_round,
            self.config.special_attack_cooldown,
        )

    def roll_special_attack(self) -> bool:
        """Start a special attack round, if off cooldown.  ``BATTLE -> DICE_ROLLING``."""
        if not self._accepts("roll_special_attack"):
            return False
        if not self.special_attack_ready():
            logger.debug("Rejected roll_special_attack: on cooldown")
            return False
        self._battle.pending_action = PendingAction.SPECIAL_ATTACK
        self._transition(Phase.DICE_ROLLING)
        return True

    def begin_creature_turn(self) -> bool:
        """Start the creature's follow-up turn after a player spell."""
        if not self._accepts("begin_creature_turn"):
            return False
        battle = self._battle
        if not battle.creature_turn_due:
            return False
        battle.creature_turn_due = False
        battle.pending_action = PendingAction.CREATURE_TURN
        self._transition(Phase.DICE_ROLLING)
        return True

    def resolve_dice(self) -> bool:
        """Land the dice for the pending action.

        Standard attacks and creature turns first give the creature a
        chance to cast a spell instead; a cast replaces the opposed roll.
        """
        if not self._accepts("resolve_dice"):
            return False
        battle = self._battle
        pending = battle.pending_action
        battle.pending_action = None
        battle.current_round += 1

        if pending is PendingAction.SPECIAL_ATTACK:
            self._resolve_special_attack()
            return True

        spell = choose_creature_spell(battle.creature, self.registry.spells, self.rng)
        if spell is not None:
            self._resolve_creature_spell(spell)
        else:
            self._resolve_opposed_roll()
        return True

    def _resolve_opposed_roll(self) -> None:
        battle = self._battle
        effects = battle.active_effects
        player_roll = roll_2d6(self.rng)
        creature_roll = roll_2d6(self.rng)

        player_strength = attack_strength(
            player_roll, battle.player.skill, consume_skill_modifier(effects, Side.PLAYER),
        )
        creature_strength = attack_strength(
            creature_roll, battle.creature.skill, consume_skill_modifier(effects, Side.CREATURE),
        )
        luck_modifier = consume_luck_modifier(effects, Side.PLAYER)
        consume_luck_modifier(effects, Side.CREATURE)  # creatures have no luck to test

        result = determine_combat_result(player_strength, creature_strength)
        entry = CombatLogEntry(
            round=battle.current_round,
            action=LogAction.ATTACK,
            player_roll=player_roll,
            creature_roll=creature_roll,
            player_attack_strength=player_strength,
            creature_attack_strength=creature_strength,
            result=result,
        )
        battle.record(entry)
        logger.debug(
            "Round %d: player %d+%d=%d vs creature %d+%d=%d -> %s",
            battle.current_round, player_roll, battle.player.skill, player_strength,
            creature_roll, battle.creature.skill, creature_strength, result.value,
        )

        damage = self.config.standard_damage
        if result is CombatResult.PLAYER_HIT:
            if consume_block(effects, Side.PLAYER):
                entry.blocked = True
                self._transition(Phase.ROUND_RESULT)
                return
            self._await_luck_test(damage, Side.PLAYER, LuckTestType.REDUCE, luck_modifier)
        elif result is CombatResult.CREATURE_HIT:
            if self.config.offer_luck_on_hit:
                if consume_block(effects, Side.CREATURE):
                    entry.blocked = True
                    self._transition(Phase.ROUND_RESULT)
                    return
                self._await_luck_test(damage, Side.CREATURE, LuckTestType.INCREASE, luck_modifier)
                return
            hit = deal_damage(battle, Side.CREATURE, damage)
            entry.damage = hit.applied
            entry.blocked = hit.blocked
            self._react_to_damage(Side.CREATURE, hit.applied)
            self._transition(Phase.ROUND_RESULT)
        else:
            self._transition(Phase.ROUND_RESULT)

    def _resolve_special_attack(self) -> None:
        battle = self._battle
        special = roll_special_attack(self.rng, self.config.special_backfire_faces)
        battle.last_special_attack_round = battle.current_round

        entry = CombatLogEntry(
            round=battle.current_round,
            action=LogAction.SPECIAL_ATTACK,
            player_roll=special.roll,
            result=CombatResult.PLAYER_HIT if special.backfired else CombatResult.CREATURE_HIT,
        )
        battle.record(entry)
        logger.debug(
            "Round %d: special attack d6=%d (%s)",
            battle.current_round, special.roll, "backfire" if special.backfired else "hit",
        )

        if special.backfired:
            # Self-inflicted: a block effect does not apply.
            self._await_luck_test(
                self.config.special_backfire_damage, Side.PLAYER, LuckTestType.REDUCE,
            )
            return

        hit = deal_damage(battle, Side.CREATURE, self.config.special_attack_damage)
        entry.damage = hit.applied
        entry.blocked = hit.blocked
        self._react_to_damage(Side.CREATURE, hit.applied)
        self._transition(Phase.ROUND_RESULT)

    def _resolve_creature_spell(self, spell: SpellDefinition) -> None:
        battle = self._battle
        battle.creature.spend_mana(spell.mana_cost)
        self._cast(spell, Side.CREATURE)
        self._transition(Phase.ROUND_RESULT)

    def _cast(self, spell: SpellDefinition, caster: Side) -> None:
        """Resolve *spell* for *caster* and log it.  Mana already debited."""
        battle = self._battle
        outcome = apply_spell_effect(spell, battle, caster, self.config.drain_heal)
        target = caster.opponent
        battle.record(CombatLogEntry(
            round=battle.current_round,
            action=LogAction.SPELL,
            result=CombatResult.hit_on(target) if outcome.damage > 0 else CombatResult.DRAW,
            damage=outcome.damage,
            blocked=outcome.blocked,
            caster=caster,
            spell_name=spell.name,
            mana_cost=spell.mana_cost,
            effect_description=outcome.description,
        ))
        logger.debug(
            "Round %d: %s casts %s (%s)",
            battle.current_round, battle.entity(caster).name, spell.name, outcome.description,
        )
        self._react_to_damage(target, outcome.damage)

    # ------------------------------------------------------------------
    # Luck test
    # ------------------------------------------------------------------

    def _await_luck_test(
        self, damage: int, target: Side, test_type: LuckTestType, luck_modifier: int = 0,
    ) -> None:
        self._battle.pending_luck_test = PendingLuckTest(
            damage=damage, target=target, type=test_type, luck_modifier=luck_modifier,
        )
        self._transition(Phase.LUCK_TEST)

    def test_luck(self) -> bool:
        """Gamble a point of luck on the pending damage.  ``LUCK_TEST -> ROUND_RESULT``.

        Allowed at zero luck; the point spent floors at 0.
        """
        if not self._accepts("test_luck"):
            return False
        battle = self._battle
        player = battle.player
        pending = battle.pending_luck_test
        assert pending is not None

        threshold = player.luck + pending.luck_modifier
        result = perform_luck_test(
            threshold,
            pending.damage,
            pending.type,
            self.rng,
            self.config.lucky_damage,
            self.config.unlucky_damage,
        )
        player.spend_luck(1)
        logger.debug(
            "Luck test: rolled %d vs %d -> %s, damage %d -> %d",
            result.roll, threshold,
            "lucky" if result.was_lucky else "unlucky",
            result.original_damage, result.modified_damage,
        )
        self._settle_luck_test(
            result.modified_damage,
            skipped=False,
            luck_roll=result.roll,
            was_lucky=result.was_lucky,
        )
        return True

    def skip_luck_test(self) -> bool:
        """Take the pending damage unmodified.  ``LUCK_TEST -> ROUND_RESULT``."""
        if not self._accepts("skip_luck_test"):
            return False
        pending = self._battle.pending_luck_test
        assert pending is not None
        self._settle_luck_test(pending.damage, skipped=True)
        return True

    def _settle_luck_test(
        self,
        damage: int,
        skipped: bool,
        luck_roll: int | None = None,
        was_lucky: bool | None = None,
    ) -> None:
        battle = self._battle
        pending = battle.pending_luck_test
        assert pending is not None
        battle.pending_luck_test = None

        lost = apply_damage(battle, pending.target, damage)
        entry = battle.latest_entry
        assert entry is not None
        entry.damage = lost
        entry.is_luck_test = True
        entry.luck_roll = luck_roll
        entry.was_lucky = was_lucky
        entry.original_damage = pending.damage
        entry.modified_damage = damage
        entry.target = pending.target
        entry.skipped = skipped

        self._react_to_damage(pending.target, lost)
        self._transition(Phase.ROUND_RESULT)

    # ------------------------------------------------------------------
    # Items and spells
    # ------------------------------------------------------------------

    def use_item(self, item_id: str) -> bool:
        """Use one charge of an inventory item.  No phase or round change."""
        if not self._accepts("use_item"):
            return False
        battle = self._battle
        item = battle.get_item(item_id)
        if item is None or not use_item(item, battle.player):
            logger.debug("Rejected use_item(%r)", item_id)
            return False
        logger.debug("Used %s (%d left)", item.name, item.remaining)
        return True

    def open_spellbook(self) -> bool:
        """``BATTLE -> SPELL_CASTING``.  Needs known spells and some mana."""
        if not self._accepts("open_spellbook"):
            return False
        player = self._battle.player
        if not (player.has_spells and player.has_mana):
            logger.debug("Rejected open_spellbook: no spells or no mana")
            return False
        self._transition(Phase.SPELL_CASTING)
        return True

    def close_spellbook(self) -> bool:
        """``SPELL_CASTING -> BATTLE`` without casting."""
        if not self._accepts("close_spellbook"):
            return False
        self._transition(Phase.BATTLE)
        return True

    def cast_spell(self, spell_id: str) -> bool:
        """Cast a known, affordable spell.  Resolves as a full round.

        Accepted from ``SPELL_CASTING``, or straight from ``BATTLE`` (the
        spellbook is opened on the way).  Ends in ``ROUND_RESULT``; the
        next :meth:`advance` makes the creature's follow-up turn due.
        """
        if not self._accepts("cast_spell"):
            return False
        battle = self._battle
        player = battle.player
        spell = self.registry.get_spell(spell_id)
        if spell is None or spell_id not in player.spells or not can_afford(spell, player.mana):
            logger.debug("Rejected cast_spell(%r)", spell_id)
            return False

        if self.state.phase is Phase.BATTLE:
            self._transition(Phase.SPELL_CASTING)
        player.spend_mana(spell.mana_cost)
        battle.current_round += 1
        self._cast(spell, Side.PLAYER)
        self._transition(Phase.ROUND_RESULT)
        return True

    # ------------------------------------------------------------------
    # Round and battle end
    # ------------------------------------------------------------------

    def advance(self) -> bool:
        """Move on from ``ROUND_RESULT`` or, in campaign mode, ``BATTLE_END``."""
        if not self._accepts("advance"):
            return False
        battle = self._battle

        if self.state.phase is Phase.BATTLE_END:
            if not self.state.in_campaign:
                logger.debug("Rejected advance: single battle is over")
                return False
            if battle.result == "win":
                return self.record_battle_victory()
            return self.end_campaign()

        if battle.check_battle_over() is not None:
            self._finish_battle()
            return True

        latest = battle.latest_entry
        if latest is not None and latest.action is LogAction.SPELL and latest.caster is Side.PLAYER:
            battle.creature_turn_due = True
        self._transition(Phase.BATTLE)
        return True

    def _finish_battle(self) -> None:
        battle = self._battle
        won = battle.result == "win"
        winner, loser = (Side.PLAYER, Side.CREATURE) if won else (Side.CREATURE, Side.PLAYER)
        self._react(winner, ReactionKind.VICTORY)
        self._react(loser, ReactionKind.LOSS)
        self._transition(Phase.BATTLE_END)
        logger.info(
            "Battle end: %s after %d rounds (dealt %d, taken %d)",
            "victory" if won else "defeat", battle.current_round,
            battle.damage_dealt, battle.damage_taken,
        )

    # ------------------------------------------------------------------
    # Reactions
    # ------------------------------------------------------------------

    def _react(self, side: Side, kind: ReactionKind) -> None:
        battle = self._battle
        fallback = self.registry.default_reactions if side is Side.PLAYER else None
        text = pick_reaction(battle.entity(side), kind, self.rng, fallback)
        if text is not None:
            battle.reaction_feed.append(
                ActiveReaction(text=text, entity=side, round=battle.current_round)
            )

    def _react_to_damage(self, target: Side, damage: int) -> None:
        if damage <= 0:
            return
        self._react(target.opponent, ReactionKind.GLOAT)
        self._react(target, ReactionKind.CRY)

    # ------------------------------------------------------------------
    # Campaign
    # ------------------------------------------------------------------

    def start_campaign(self) -> bool:
        """Switch to campaign mode with a fresh :class:`CampaignState`."""
        if not self._accepts("start_campaign") or self.state.player is None:
            return False
        player = self.state.player
        player.reset_for_battle()
        self.state.mode = GameMode.CAMPAIGN
        self.state.campaign = CampaignState(
            starting_stats=StartingStats(
                skill=player.skill,
                stamina=player.max_stamina,
                luck=player.max_luck,
                mana=player.max_mana,
            ),
        )
        if self.state.phase is not Phase.CREATURE_SELECT:
            self._transition(Phase.CREATURE_SELECT)
        logger.info("Campaign started for %s", player.name)
        return True

    def _campaign_ready(self) -> CampaignState | None:
        if not self.state.in_campaign or self.state.player is None or self.state.battle is None:
            return None
        return self.state.campaign

    def record_battle_victory(self) -> bool:
        """Score the won battle and move to ``CAMPAIGN_VICTORY``."""
        if not self._accepts("record_battle_victory"):
            return False
        campaign = self._campaign_ready()
        if campaign is None or self._battle.result != "win":
            return False
        battle = self._battle
        creature = battle.creature

        score = calculate_battle_score(
            rounds_completed=battle.current_round,
            damage_dealt=battle.damage_dealt,
            damage_taken=battle.damage_taken,
            creature_difficulty=classify_difficulty(creature.max_stamina, creature.skill),
            is_perfect_victory=battle.is_perfect_victory,
            current_streak=campaign.current_streak,
        )
        campaign.score += score
        campaign.battles_won += 1
        campaign.current_streak += 1
        if battle.is_perfect_victory:
            campaign.perfect_victories += 1
        self._record_battle(campaign, victory=True, score=score)

        self._transition(Phase.CAMPAIGN_VICTORY)
        logger.info(
            "Campaign victory #%d over %s: +%d (total %d)",
            campaign.battles_won, creature.name, score, campaign.score,
        )
        return True

    def _record_battle(self, campaign: CampaignState, victory: bool, score: int) -> None:
        battle = self._battle
        campaign.total_damage_dealt += battle.damage_dealt
        campaign.total_damage_taken += battle.damage_taken
        campaign.battle_history.append(BattleRecord(
            battle_number=campaign.battles_fought + 1,
            creature_name=battle.creature.name,
            victory=victory,
            score=score,
            rounds_completed=battle.current_round,
            damage_dealt=battle.damage_dealt,
            damage_taken=battle.damage_taken,
        ))

    def apply_campaign_recovery(self) -> Recovery | None:
        """Recover between battles and return to ``CREATURE_SELECT``.

        Returns the stamina and luck actually restored, or ``None`` when
        the operation is rejected.
        """
        if not self._accepts("apply_campaign_recovery") or self._campaign_ready() is None:
            return None
        battle = self._battle
        player = self._player
        stamina_lost = battle.player_stamina_at_start - player.current_stamina
        restored = apply_recovery(player, calculate_recovery(player, stamina_lost))
        self.state.battle = None
        self._transition(Phase.CREATURE_SELECT)
        logger.info(
            "Recovery: +%d stamina, +%d luck", restored.stamina_restored, restored.luck_restored,
        )
        return restored

    def end_campaign(self) -> bool:
        """Finish the campaign after a defeat or on retiring.  Saves a high score."""
        if not self._accepts("end_campaign"):
            return False
        campaign = self._campaign_ready()
        if campaign is None:
            return False
        if self.state.phase is Phase.BATTLE_END:
            if self._battle.result != "loss":
                return False
            campaign.current_streak = 0
            self._record_battle(campaign, victory=False, score=0)

        self.high_scores.save_high_score(HighScoreEntry(
            name=self._player.name,
            score=campaign.score,
            battles_won=campaign.battles_won,
        ))
        campaign.is_active = False
        self._transition(Phase.CAMPAIGN_END)
        logger.info(
            "Campaign over: %d won, final score %d", campaign.battles_won, campaign.score,
        )
        return True

    # ------------------------------------------------------------------
    # Driving
    # ------------------------------------------------------------------

    def _automatic_step(self) -> str | None:
        phase = self.state.phase
        if phase is Phase.DICE_ROLLING:
            return "resolve_dice"
        if phase is Phase.ROUND_RESULT:
            return "advance"
        if phase is Phase.BATTLE and self._battle.creature_turn_due:
            return "begin_creature_turn"
        if phase is Phase.BATTLE_END and self.state.in_campaign:
            return "advance"
        return None

    @property
    def awaiting_input(self) -> bool:
        """True when nothing happens until the player decides something."""
        return self._automatic_step() is None

    def step(self) -> bool:
        """Perform the next automatic transition.  False if input is needed."""
        operation = self._automatic_step()
        if operation is None:
            return False
        return getattr(self, operation)()

    def legal_actions(self) -> list[PlayerAction]:
        """Everything the player may do right now.  Empty while not their turn."""
        phase = self.state.phase
        battle = self.state.battle
        if battle is None or battle.creature_turn_due:
            return []
        player = battle.player
        actions: list[PlayerAction] = []

        if phase is Phase.LUCK_TEST:
            actions.append(PlayerAction(kind=ActionKind.TEST_LUCK))
            actions.append(PlayerAction(kind=ActionKind.SKIP_LUCK_TEST))
            return actions

        if phase not in (Phase.BATTLE, Phase.SPELL_CASTING):
            return actions

        if phase is Phase.BATTLE:
            actions.append(PlayerAction(kind=ActionKind.ATTACK))
            if self.special_attack_ready():
                actions.append(PlayerAction(kind=ActionKind.SPECIAL_ATTACK))
            for item in battle.inventory:
                if can_use_item(item, player):
                    actions.append(PlayerAction(kind=ActionKind.USE_ITEM, target_id=item.id))
        else:
            actions.append(PlayerAction(kind=ActionKind.CLOSE_SPELLBOOK))

        for spell_id in player.spells:
            spell = self.registry.get_spell(spell_id)
            if spell is not None and can_afford(spell, player.mana):
                actions.append(PlayerAction(kind=ActionKind.CAST_SPELL, target_id=spell_id))
        return actions

    def perform(self, action: PlayerAction) -> bool:
        """Dispatch a :class:`PlayerAction` to the matching command."""
        kind = action.kind
        if kind is ActionKind.ATTACK:
            return self.roll_attack()
        if kind is ActionKind.SPECIAL_ATTACK:
            return self.roll_special_attack()
        if kind is ActionKind.CAST_SPELL:
            return action.target_id is not None and self.cast_spell(action.target_id)
        if kind is ActionKind.USE_ITEM:
            return action.target_id is not None and self.use_item(action.target_id)
        if kind is ActionKind.CLOSE_SPELLBOOK:
            return self.close_spellbook()
        if kind is ActionKind.TEST_LUCK:
            return self.test_luck()
        if kind is ActionKind.SKIP_LUCK_TEST:
            return self.skip_luck_test()
        logger.warning("Unhandled action kind %s", kind)
        return False

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def reset_game(self) -> None:
        """Discard everything and return to ``CHARACTER_SELECT``."""
        logger.debug("Game reset from phase %s", self.state.phase.value)
        self.state = GameState()

    def snapshot(self) -> GameState:
        """Deep copy of the current state for presentation layers."""
        return self.state.model_copy(deep=True)
