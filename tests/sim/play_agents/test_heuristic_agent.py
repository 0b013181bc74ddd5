"""Tests for the play agents."""

from __future__ import annotations

import pytest

from dice_battler.sim.core.game_state import ActionKind, PlayerAction
from dice_battler.sim.core.rng import GameRNG
from dice_battler.sim.play_agents.heuristic_agent import HeuristicAgent
from dice_battler.sim.play_agents.random_agent import RandomAgent

CREATURE_HITS = (1, 1, 6, 6)


# ======================================================================
# Fixtures
# ======================================================================


@pytest.fixture
def agent(registry) -> HeuristicAgent:
    return HeuristicAgent(registry=registry)


def _choose(agent, engine) -> PlayerAction:
    return agent.choose_action(engine.state, engine.legal_actions())


# ======================================================================
# HeuristicAgent
# ======================================================================


class TestLuckDecisions:
    def test_tests_luck_when_high(self, agent, make_engine):
        engine = make_engine(*CREATURE_HITS)
        engine.roll_attack()
        engine.resolve_dice()
        assert _choose(agent, engine).kind is ActionKind.TEST_LUCK

    def test_skips_when_luck_low(self, agent, make_engine):
        engine = make_engine(*CREATURE_HITS)
        engine.roll_attack()
        engine.resolve_dice()
        engine.state.player.luck = 5
        assert _choose(agent, engine).kind is ActionKind.SKIP_LUCK_TEST


class TestBattleDecisions:
    def test_drinks_skill_draught_first(self, agent, make_engine):
        engine = make_engine()
        action = _choose(agent, engine)
        assert action == PlayerAction(kind=ActionKind.USE_ITEM, target_id="draught_of_proficiency")

    def test_special_attack_when_healthy(self, agent, make_engine):
        engine = make_engine()
        engine.use_item("draught_of_proficiency")
        assert _choose(agent, engine).kind is ActionKind.SPECIAL_ATTACK

    def test_plain_attack_when_hurt(self, agent, make_engine):
        engine = make_engine()
        engine.use_item("draught_of_proficiency")
        engine.state.player.current_stamina = 9
        assert _choose(agent, engine).kind is ActionKind.ATTACK

    def test_heals_when_low(self, agent, make_engine):
        engine = make_engine()
        engine.state.player.current_stamina = 5
        action = _choose(agent, engine)
        assert action == PlayerAction(kind=ActionKind.USE_ITEM, target_id="healing_draught")

    def test_restores_luck_when_low(self, agent, make_engine):
        engine = make_engine()
        engine.use_item("draught_of_proficiency")
        engine.state.player.luck = 4
        action = _choose(agent, engine)
        assert action == PlayerAction(kind=ActionKind.USE_ITEM, target_id="draught_of_destiny")

    def test_mage_casts_strongest_damage_spell(self, agent, make_engine):
        engine = make_engine(preset="mage")
        engine.use_item("draught_of_proficiency")
        action = _choose(agent, engine)
        assert action == PlayerAction(kind=ActionKind.CAST_SPELL, target_id="fireball")

    def test_mage_heals_with_spell_when_out_of_draughts(self, agent, make_engine):
        engine = make_engine(preset="mage")
        engine.state.battle.get_item("healing_draught").remaining = 0
        engine.state.player.current_stamina = 4
        action = _choose(agent, engine)
        assert action == PlayerAction(kind=ActionKind.CAST_SPELL, target_id="healing_light")

    def test_without_registry_never_casts(self, make_engine):
        engine = make_engine(preset="mage")
        engine.use_item("draught_of_proficiency")
        action = _choose(HeuristicAgent(), engine)
        assert action.kind is ActionKind.SPECIAL_ATTACK

    def test_legal_action_always_returned(self, agent, make_engine):
        engine = make_engine(preset="mage")
        engine.open_spellbook()
        engine.state.player.mana = 2
        assert _choose(agent, engine) == PlayerAction(kind=ActionKind.CLOSE_SPELLBOOK)


class TestCampaignDecision:
    def test_continue_while_healthy(self, agent, make_engine):
        engine = make_engine()
        assert agent.choose_continue_campaign(engine.state)
        engine.state.player.current_stamina = 4
        assert not agent.choose_continue_campaign(engine.state)


# ======================================================================
# RandomAgent
# ======================================================================


class TestRandomAgent:
    def test_picks_a_legal_action(self, make_engine):
        engine = make_engine()
        agent = RandomAgent(rng=GameRNG(3))
        legal = engine.legal_actions()
        for _ in range(20):
            assert agent.choose_action(engine.state, legal) in legal

    def test_always_skips_with_full_skip_chance(self, make_engine):
        engine = make_engine(*CREATURE_HITS)
        engine.roll_attack()
        engine.resolve_dice()
        agent = RandomAgent(rng=GameRNG(3), skip_luck_chance=1.0)
        assert _choose(agent, engine).kind is ActionKind.SKIP_LUCK_TEST

    def test_retire_chance(self, make_engine):
        engine = make_engine()
        assert RandomAgent(rng=GameRNG(1)).choose_continue_campaign(engine.state)
        assert not RandomAgent(rng=GameRNG(1), retire_chance=1.0).choose_continue_campaign(engine.state)
