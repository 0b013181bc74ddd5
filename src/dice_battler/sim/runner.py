"""Battle simulation runner -- ties the engine, play agents and telemetry together.

Provides two key classes:

- **BattleSimulator**: Drives one battle on an engine to ``BATTLE_END``.
- **BatchRunner**: Orchestrates many single-battle or campaign runs
  (optionally in parallel).

Simulations use the engine directly, with no pacing delays.
"""

from __future__ import annotations

import logging
import multiprocessing
from typing import Any, TYPE_CHECKING

from dice_battler.sim.config import EngineConfig
from dice_battler.sim.core.game_state import ActionKind, CombatResult, LogAction, Phase, Side
from dice_battler.sim.core.rng import GameRNG
from dice_battler.sim.engine import BattleEngine
from dice_battler.sim.play_agents.base import PlayAgent
from dice_battler.sim.play_agents.heuristic_agent import HeuristicAgent
from dice_battler.sim.play_agents.random_agent import RandomAgent
from dice_battler.sim.telemetry import BattleTelemetry, RunTelemetry

if TYPE_CHECKING:
    from dice_battler.sim.content.registry import ContentRegistry

logger = logging.getLogger(__name__)

# Hard stop for a runaway battle loop.  Real battles end in far fewer.
_MAX_STEPS = 10_000

_DEFAULT_PRESET = "warrior"
_DEFAULT_CREATURE = "goblin"
_DEFAULT_MAX_BATTLES = 20


# =====================================================================
# BattleSimulator
# =====================================================================

class BattleSimulator:
    """Runs a single battle to completion, returning telemetry."""

    def run_battle(self, engine: BattleEngine, agent: PlayAgent) -> BattleTelemetry:
        """Drive *engine* from ``BATTLE`` to ``BATTLE_END``.

        Automatic steps are taken immediately; every player decision is
        delegated to *agent*.

        Raises
        ------
        RuntimeError
            If the engine is not in a battle, or the battle does not end
            within the step limit.
        """
        battle = engine.state.battle
        if battle is None:
            raise RuntimeError(f"No battle in progress (phase {engine.phase.value})")

        stamina_start = battle.player.current_stamina
        spells_cast_by_id: dict[str, int] = {}
        items_used_by_id: dict[str, int] = {}

        steps = 0
        while engine.phase is not Phase.BATTLE_END:
            steps += 1
            if steps > _MAX_STEPS:
                raise RuntimeError(f"Battle did not finish within {_MAX_STEPS} steps")

            if not engine.awaiting_input:
                engine.step()
                continue

            legal = engine.legal_actions()
            if not legal:
                raise RuntimeError(f"No legal actions in phase {engine.phase.value}")
            action = agent.choose_action(engine.state, legal)
            if not engine.perform(action):
                logger.warning("Agent chose a rejected action %s; falling back", action)
                action = legal[0]
                engine.perform(action)

            if action.kind is ActionKind.CAST_SPELL and action.target_id is not None:
                spells_cast_by_id[action.target_id] = spells_cast_by_id.get(action.target_id, 0) + 1
            elif action.kind is ActionKind.USE_ITEM and action.target_id is not None:
                items_used_by_id[action.target_id] = items_used_by_id.get(action.target_id, 0) + 1

        telemetry = BattleTelemetry(
            creature_id=battle.creature.creature_id or battle.creature.name,
            result=battle.result or "loss",
            rounds=battle.current_round,
            player_stamina_start=stamina_start,
            player_stamina_end=battle.player.current_stamina,
            damage_dealt=battle.damage_dealt,
            damage_taken=battle.damage_taken,
            spells_cast_by_id=spells_cast_by_id,
            items_used_by_id=items_used_by_id,
        )
        for entry in battle.combat_log:
            if entry.is_luck_test:
                if entry.skipped:
                    telemetry.luck_tests_skipped += 1
                else:
                    telemetry.luck_tests += 1
                    telemetry.lucky_tests += int(bool(entry.was_lucky))
            if entry.action is LogAction.SPECIAL_ATTACK:
                telemetry.special_attacks += 1
                if entry.result is CombatResult.PLAYER_HIT:
                    telemetry.special_backfires += 1
            if entry.action is LogAction.SPELL and entry.caster is Side.CREATURE:
                telemetry.creature_spells += 1
            if entry.blocked:
                telemetry.blocked_hits += 1
        return telemetry


# =====================================================================
# Single runs
# =====================================================================

def _make_agent(
    agent_class: type[PlayAgent], registry: ContentRegistry, seed: int,
) -> PlayAgent:
    agent_rng = GameRNG(seed).fork("agent")
    if agent_class is RandomAgent:
        return RandomAgent(rng=agent_rng)
    if agent_class is HeuristicAgent:
        return HeuristicAgent(registry)
    try:
        return agent_class(rng=agent_rng)  # type: ignore[call-arg]
    except TypeError:
        return agent_class()  # type: ignore[call-arg]


def _new_engine(
    registry: ContentRegistry, engine_config: EngineConfig, seed: int, encounter_config: dict[str, Any],
) -> BattleEngine:
    """Engine with a character created and an avatar picked."""
    engine = BattleEngine(registry, engine_config, rng=GameRNG(seed).fork("battle"))
    preset_id = encounter_config.get("preset", _DEFAULT_PRESET)
    if not engine.create_character_from_preset(preset_id):
        raise ValueError(f"Unknown preset {preset_id!r}")
    preset = registry.get_preset(preset_id)
    engine.select_avatar(preset.avatar if preset and preset.avatar else preset_id)
    return engine


def _run_single_battle(
    registry: ContentRegistry,
    agent: PlayAgent,
    seed: int,
    encounter_config: dict[str, Any],
    engine_config: EngineConfig,
) -> RunTelemetry:
    """Run one single-mode battle with the given seed and configuration."""
    engine = _new_engine(registry, engine_config, seed, encounter_config)
    creature_id = encounter_config.get("creature_id", _DEFAULT_CREATURE)
    if not engine.select_creature_by_id(creature_id):
        raise ValueError(f"Unknown creature {creature_id!r}")

    battle_telemetry = BattleSimulator().run_battle(engine, agent)
    won = battle_telemetry.result == "win"
    return RunTelemetry(
        seed=seed,
        battles=[battle_telemetry],
        final_result=battle_telemetry.result,
        battles_won=int(won),
    )


def _run_single_campaign(
    registry: ContentRegistry,
    agent: PlayAgent,
    seed: int,
    encounter_config: dict[str, Any],
    engine_config: EngineConfig,
) -> RunTelemetry:
    """Run one campaign until defeat, retirement or ``max_battles``.

    Opponents are drawn at random from ``creature_ids`` (default: the
    whole creature library) using a dedicated RNG fork.
    """
    engine = _new_engine(registry, engine_config, seed, encounter_config)
    engine.start_campaign()

    pool: list[str] = list(encounter_config.get("creature_ids") or sorted(registry.creatures))
    max_battles: int = encounter_config.get("max_battles", _DEFAULT_MAX_BATTLES)
    creature_rng = GameRNG(seed).fork("creatures")
    simulator = BattleSimulator()
    run = RunTelemetry(seed=seed)

    while engine.phase is Phase.CREATURE_SELECT:
        creature_id = creature_rng.random_choice(pool)
        if not engine.select_creature_by_id(creature_id):
            raise ValueError(f"Unknown creature {creature_id!r}")
        run.battles.append(simulator.run_battle(engine, agent))
        engine.step()  # BATTLE_END -> CAMPAIGN_VICTORY | CAMPAIGN_END

        if engine.phase is Phase.CAMPAIGN_VICTORY:
            keep_going = len(run.battles) < max_battles and agent.choose_continue_campaign(engine.state)
            if keep_going:
                engine.apply_campaign_recovery()
            else:
                engine.end_campaign()
                run.final_result = "retired"

    campaign = engine.state.campaign
    assert campaign is not None
    run.battles_won = campaign.battles_won
    run.score = campaign.score
    return run


def _worker_run_single(args: tuple) -> RunTelemetry:
    """Top-level worker function for multiprocessing (must be picklable)."""
    agent_class, seed, encounter_config, engine_config, campaign = args

    from dice_battler.sim.content.registry import ContentRegistry

    registry = ContentRegistry()
    registry.load_all()

    agent = _make_agent(agent_class, registry, seed)
    run_one = _run_single_campaign if campaign else _run_single_battle
    return run_one(registry, agent, seed, encounter_config, engine_config)


# =====================================================================
# BatchRunner
# =====================================================================

class BatchRunner:
    """Runs many simulated battles or campaigns, optionally in parallel."""

    def __init__(
        self,
        registry: ContentRegistry,
        agent_class: type[PlayAgent] = RandomAgent,
        engine_config: EngineConfig | None = None,
    ) -> None:
        self.registry = registry
        self.agent_class = agent_class
        self.engine_config = engine_config or EngineConfig()

    def run_batch(
        self,
        n_runs: int,
        encounter_config: dict[str, Any],
        base_seed: int = 42,
        parallel: bool = False,
    ) -> list[RunTelemetry]:
        """Run *n_runs* single battles.

        *encounter_config* keys: ``preset`` (default ``"warrior"``) and
        ``creature_id`` (default ``"goblin"``).
        """
        return self._run(n_runs, encounter_config, base_seed, parallel, campaign=False)

    def run_campaign_batch(
        self,
        n_runs: int,
        encounter_config: dict[str, Any],
        base_seed: int = 42,
        parallel: bool = False,
    ) -> list[RunTelemetry]:
        """Run *n_runs* campaigns.

        *encounter_config* keys: ``preset``, ``creature_ids`` (the pool
        opponents are drawn from) and ``max_battles`` (default 20).
        """
        return self._run(n_runs, encounter_config, base_seed, parallel, campaign=True)

    def _run(
        self,
        n_runs: int,
        encounter_config: dict[str, Any],
        base_seed: int,
        parallel: bool,
        campaign: bool,
    ) -> list[RunTelemetry]:
        seeds = [base_seed + i for i in range(n_runs)]
        if parallel and n_runs > 1:
            return self._run_parallel(seeds, encounter_config, campaign)

        run_one = _run_single_campaign if campaign else _run_single_battle
        results: list[RunTelemetry] = []
        for seed in seeds:
            agent = _make_agent(self.agent_class, self.registry, seed)
            results.append(run_one(self.registry, agent, seed, encounter_config, self.engine_config))
        return results

    def _run_parallel(
        self,
        seeds: list[int],
        encounter_config: dict[str, Any],
        campaign: bool,
    ) -> list[RunTelemetry]:
        """Run simulations in parallel using multiprocessing.

        Rather than pickling the registry, each worker reloads the
        default catalogs.
        """
        work_items = [
            (self.agent_class, seed, encounter_config, self.engine_config, campaign)
            for seed in seeds
        ]
        n_workers = min(len(seeds), multiprocessing.cpu_count() or 1)

        with multiprocessing.Pool(processes=n_workers) as pool:
            return pool.map(_worker_run_single, work_items)
