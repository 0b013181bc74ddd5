"""Tests for headless simulation: BattleSimulator and BatchRunner."""

from __future__ import annotations

from typing import Any

import pytest

from dice_battler.sim.core.game_state import Phase
from dice_battler.sim.core.rng import GameRNG
from dice_battler.sim.engine import BattleEngine
from dice_battler.sim.play_agents.heuristic_agent import HeuristicAgent
from dice_battler.sim.play_agents.random_agent import RandomAgent
from dice_battler.sim.runner import BatchRunner, BattleSimulator
from dice_battler.sim.telemetry import RunTelemetry


def _win_rate(results: list[RunTelemetry]) -> float:
    wins = sum(1 for r in results if r.battles[0].result == "win")
    return wins / len(results)


# ---------------------------------------------------------------------------
# BattleSimulator
# ---------------------------------------------------------------------------

class TestBattleSimulator:
    def test_runs_to_battle_end(self, registry):
        engine = BattleEngine(registry, rng=GameRNG(5))
        engine.create_character_from_preset("mage")
        engine.select_avatar("mage")
        engine.select_creature_by_id("lich")

        telemetry = BattleSimulator().run_battle(engine, HeuristicAgent(registry))
        assert engine.phase is Phase.BATTLE_END
        assert telemetry.result in ("win", "loss")
        assert telemetry.creature_id == "lich"
        assert telemetry.rounds == engine.state.battle.current_round
        assert telemetry.player_stamina_start == 16
        assert telemetry.damage_dealt == engine.state.battle.damage_dealt

    def test_requires_a_battle(self, registry):
        engine = BattleEngine(registry, rng=GameRNG(5))
        with pytest.raises(RuntimeError):
            BattleSimulator().run_battle(engine, RandomAgent())


# ---------------------------------------------------------------------------
# BatchRunner
# ---------------------------------------------------------------------------

class TestBatchRunner:
    def test_single_battles(self, registry):
        results = BatchRunner(registry).run_batch(10, {"preset": "warrior", "creature_id": "goblin"})
        assert len(results) == 10
        assert [r.seed for r in results] == list(range(42, 52))
        for run in results:
            assert len(run.battles) == 1
            assert run.final_result == run.battles[0].result
            assert run.battles_won == int(run.final_result == "win")

    def test_deterministic(self, registry):
        config: dict[str, Any] = {"preset": "rogue", "creature_id": "wraith"}
        first = BatchRunner(registry).run_batch(5, config, base_seed=7)
        second = BatchRunner(registry).run_batch(5, config, base_seed=7)
        assert [r.battles[0] for r in first] == [r.battles[0] for r in second]

    def test_warrior_beats_goblin(self, registry):
        results = BatchRunner(registry, HeuristicAgent).run_batch(
            50, {"preset": "warrior", "creature_id": "goblin"},
        )
        assert _win_rate(results) > 0.95

    def test_unknown_creature(self, registry):
        with pytest.raises(ValueError):
            BatchRunner(registry).run_batch(1, {"creature_id": "beholder"})

    def test_campaigns(self, registry):
        results = BatchRunner(registry, HeuristicAgent).run_campaign_batch(
            5, {"preset": "barbarian", "max_battles": 3},
        )
        assert len(results) == 5
        for run in results:
            assert 1 <= len(run.battles) <= 3
            assert run.final_result in ("retired", "loss")
            assert run.battles_won == sum(1 for b in run.battles if b.result == "win")
            assert run.score >= 0
            if run.final_result == "loss":
                assert run.battles[-1].result == "loss"

    def test_campaign_pool(self, registry):
        results = BatchRunner(registry).run_campaign_batch(
            3, {"creature_ids": ["giant_rat"], "max_battles": 2},
        )
        for run in results:
            assert {b.creature_id for b in run.battles} == {"giant_rat"}
