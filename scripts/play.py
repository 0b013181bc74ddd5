"""Play the dice battler in a terminal.

Usage:
    python scripts/play.py [--preset warrior] [--creature goblin] [--campaign] [--fast] [--seed N]

Automatic steps (dice landing, round results) are played back with the
standard pacing delays unless ``--fast`` is given.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from dice_battler.sim.campaign.high_scores import JsonHighScoreStore
from dice_battler.sim.campaign.report import generate_campaign_report
from dice_battler.sim.config import EngineConfig
from dice_battler.sim.content.registry import ContentRegistry
from dice_battler.sim.core.game_state import (
    ActionKind,
    BattleState,
    CombatLogEntry,
    CombatResult,
    LogAction,
    Phase,
    PlayerAction,
    Side,
)
from dice_battler.sim.core.rng import GameRNG
from dice_battler.sim.engine import BattleEngine
from dice_battler.sim.mechanics.dice import roll_character_stats
from dice_battler.sim.pacing import BattleDirector, PacingConfig

_DEFAULT_HIGH_SCORES = Path.home() / ".dice_battler" / "high_scores.json"


# ---------------------------------------------------------------------------
# Input helpers
# ---------------------------------------------------------------------------

def _choose(prompt: str, options: list[str]) -> int:
    """Print numbered *options* and return the chosen index."""
    for i, option in enumerate(options, start=1):
        print(f"  {i}. {option}")
    while True:
        raw = input(f"{prompt} [1-{len(options)}]: ").strip()
        if raw.isdigit() and 1 <= int(raw) <= len(options):
            return int(raw) - 1
        print("  Please enter a number from the list.")


def _confirm(prompt: str) -> bool:
    return input(f"{prompt} [y/n]: ").strip().lower().startswith("y")


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _describe_entry(entry: CombatLogEntry, battle: BattleState) -> str:
    creature = battle.creature.name
    prefix = f"Round {entry.round}:"

    if entry.action is LogAction.SPELL:
        caster = "You" if entry.caster is Side.PLAYER else f"The {creature}"
        return f"{prefix} {caster} cast {entry.spell_name} and {entry.effect_description}."

    if entry.action is LogAction.SPECIAL_ATTACK:
        if entry.result is CombatResult.PLAYER_HIT:
            return f"{prefix} Special attack rolled {entry.player_roll}... it BACKFIRES!"
        if entry.blocked:
            return f"{prefix} Special attack rolled {entry.player_roll}, but an arcane barrier absorbs it."
        return f"{prefix} Special attack rolled {entry.player_roll}! The {creature} takes {entry.damage} damage."

    line = (
        f"{prefix} Your attack {entry.player_attack_strength} (rolled {entry.player_roll}), "
        f"{creature}'s attack {entry.creature_attack_strength} (rolled {entry.creature_roll}). "
    )
    if entry.result is CombatResult.DRAW:
        return line + "Draw! No damage."
    if entry.blocked:
        return line + "The blow is absorbed by an arcane barrier."
    if entry.result is CombatResult.CREATURE_HIT:
        return line + f"You hit the {creature}!"
    return line + f"The {creature} hits you!"


def _describe_luck(entry: CombatLogEntry) -> str:
    if entry.skipped:
        return f"  You take it on the chin: {entry.damage} damage."
    verdict = "Lucky!" if entry.was_lucky else "Unlucky..."
    who = "you" if entry.target is Side.PLAYER else "the creature"
    return f"  Luck test rolled {entry.luck_roll}. {verdict} {entry.damage} damage to {who}."


def _status_line(battle: BattleState) -> str:
    p, c = battle.player, battle.creature
    mana = f" MANA {p.mana}/{p.max_mana}" if p.max_mana else ""
    return (
        f"[{p.name}] SKILL {p.skill} STAMINA {p.current_stamina}/{p.max_stamina} "
        f"LUCK {p.luck}/{p.max_luck}{mana}   "
        f"[{c.name}] SKILL {c.skill} STAMINA {c.current_stamina}/{c.max_stamina}"
    )


def _action_label(action: PlayerAction, engine: BattleEngine) -> str:
    if action.kind is ActionKind.CAST_SPELL:
        spell = engine.registry.get_spell(action.target_id or "")
        return f"Cast {spell.name} ({spell.mana_cost} mana): {spell.description}" if spell else "Cast spell"
    if action.kind is ActionKind.USE_ITEM:
        battle = engine.state.battle
        item = battle.get_item(action.target_id or "") if battle else None
        return f"Use {item.name} ({item.remaining} left): {item.description}" if item else "Use item"
    return {
        ActionKind.ATTACK: "Attack",
        ActionKind.SPECIAL_ATTACK: "Special attack (d6: 1-4 deals 4, 5-6 backfires for 2)",
        ActionKind.CLOSE_SPELLBOOK: "Close spellbook",
        ActionKind.TEST_LUCK: "Test your luck",
        ActionKind.SKIP_LUCK_TEST: "Take the damage",
    }[action.kind]


class _BattleLog:
    """Prints log entries and reactions that appeared since the last flush."""

    def __init__(self) -> None:
        self.last_round = 0
        self.reactions_seen = 0

    def reset(self) -> None:
        self.last_round = 0
        self.reactions_seen = 0

    def flush(self, battle: BattleState) -> None:
        # A round waiting on a luck test is printed once the test settles.
        upto = battle.current_round - 1 if battle.pending_luck_test else battle.current_round
        for entry in reversed(battle.combat_log):
            if self.last_round < entry.round <= upto:
                print(_describe_entry(entry, battle))
                if entry.is_luck_test:
                    print(_describe_luck(entry))
        self.last_round = upto
        for reaction in battle.reaction_feed[self.reactions_seen:]:
            speaker = battle.player.name if reaction.entity is Side.PLAYER else battle.creature.name
            print(f'  {speaker}: "{reaction.text}"')
        self.reactions_seen = len(battle.reaction_feed)


# ---------------------------------------------------------------------------
# Game flow
# ---------------------------------------------------------------------------

def _create_character(engine: BattleEngine, preset_id: str | None) -> None:
    registry = engine.registry
    if preset_id is not None:
        if not engine.create_character_from_preset(preset_id):
            raise SystemExit(f"Unknown preset {preset_id!r}")
        return

    print("\nChoose your hero:")
    presets = list(registry.presets.values())
    options = [f"{p.name}: SKILL {p.skill} STAMINA {p.stamina} LUCK {p.luck}" for p in presets]
    options.append("Roll the dice for a new adventurer")
    choice = _choose("Hero", options)
    if choice < len(presets):
        engine.create_character_from_preset(presets[choice].id)
        return
    stats = roll_character_stats(engine.rng)
    print(f"  Rolled SKILL {stats.skill}, STAMINA {stats.stamina}, LUCK {stats.luck}")
    name = input("Name your adventurer: ").strip() or "Adventurer"
    engine.create_character(name, stats.skill, stats.stamina, stats.luck)


def _pick_creature(engine: BattleEngine, creature_id: str | None) -> None:
    registry = engine.registry
    if creature_id is None:
        print("\nChoose your opponent:")
        creatures = list(registry.creatures.values())
        choice = _choose("Creature", [f"{c.name} (SKILL {c.skill}, STAMINA {c.stamina})" for c in creatures])
        creature_id = creatures[choice].id
    if not engine.select_creature_by_id(creature_id):
        raise SystemExit(f"Unknown creature {creature_id!r}")
    battle = engine.state.battle
    assert battle is not None
    print()
    print(registry.get_intro_text(battle.creature.name, creature_id))
    print()


def _play_battle(engine: BattleEngine, director: BattleDirector, log: _BattleLog) -> None:
    log.reset()
    while engine.phase is not Phase.BATTLE_END:
        director.run_until_input(stop_at={Phase.BATTLE_END})
        view = engine.snapshot()
        battle = view.battle
        assert battle is not None
        log.flush(battle)
        if view.phase is Phase.BATTLE_END:
            break

        print(_status_line(battle))
        if view.phase is Phase.LUCK_TEST and battle.pending_luck_test is not None:
            pending = battle.pending_luck_test
            latest = battle.latest_entry
            if latest is not None:
                print(_describe_entry(latest, battle))
            print(f"  {pending.damage} damage is about to land. Test your luck?")
        legal = engine.legal_actions()
        action = legal[_choose("Action", [_action_label(a, engine) for a in legal])]
        engine.perform(action)

    battle = engine.state.battle
    assert battle is not None
    log.flush(battle)
    creature = battle.creature
    print()
    if battle.result == "win":
        print(engine.registry.get_victory_text(creature.name, creature.creature_id))
    else:
        print(engine.registry.get_defeat_text(creature.name, creature.creature_id))
    print()


def _print_high_scores(engine: BattleEngine) -> None:
    scores = engine.high_scores.get_high_scores()
    if not scores:
        return
    print("\n## High Scores")
    for rank, entry in enumerate(scores, start=1):
        print(f"  {rank:2d}. {entry.name:20s} {entry.score:>8,}  ({entry.battles_won} won)")


def main() -> None:
    parser = argparse.ArgumentParser(description="Play the dice battler in a terminal.")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed (default: random)")
    parser.add_argument("--config", default=None, help="EngineConfig JSON overrides")
    parser.add_argument("--preset", default=None, help="Skip character select with a preset id")
    parser.add_argument("--creature", default=None, help="First opponent's creature id")
    parser.add_argument("--campaign", action="store_true", default=False, help="Play a campaign")
    parser.add_argument("--fast", action="store_true", default=False, help="No pacing delays")
    parser.add_argument("--high-scores", type=Path, default=_DEFAULT_HIGH_SCORES, help="High score file")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    registry = ContentRegistry()
    registry.load_all()
    config = EngineConfig.from_json(args.config) if args.config else EngineConfig()
    engine = BattleEngine(
        registry,
        config,
        rng=GameRNG(args.seed),
        high_scores=JsonHighScoreStore(args.high_scores, config.max_high_scores),
    )
    director = BattleDirector(engine, PacingConfig.instant() if args.fast else PacingConfig())
    log = _BattleLog()

    _create_character(engine, args.preset)
    player = engine.state.player
    assert player is not None
    engine.select_avatar(input(f"Describe {player.name}'s look (avatar): ").strip() or "default")
    if args.campaign:
        engine.start_campaign()

    creature_id = args.creature
    while True:
        if engine.phase is Phase.CREATURE_SELECT:
            _pick_creature(engine, creature_id)
            creature_id = None
            _play_battle(engine, director, log)
            director.run_until_input()

        if engine.phase is Phase.BATTLE_END:
            break
        if engine.phase is Phase.CAMPAIGN_VICTORY:
            campaign = engine.state.campaign
            assert campaign is not None
            last = campaign.last_battle
            print(f"Victory! +{last.score if last else 0:,} points (total {campaign.score:,})")
            if _confirm("Fight on?"):
                recovery = engine.apply_campaign_recovery()
                if recovery is not None:
                    print(
                        f"You rest: +{recovery.stamina_restored} stamina, "
                        f"+{recovery.luck_restored} luck."
                    )
            else:
                engine.end_campaign()
        if engine.phase is Phase.CAMPAIGN_END:
            campaign = engine.state.campaign
            assert campaign is not None
            print(generate_campaign_report(campaign))
            _print_high_scores(engine)
            break


if __name__ == "__main__":
    main()
