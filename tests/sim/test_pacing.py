"""Tests for the pacing layer: delays between automatic engine steps."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dice_battler.sim.core.game_state import Phase
from dice_battler.sim.pacing import BattleDirector, PacingConfig

PLAYER_HITS = (1, 1, 1, 1)


class TestPacingConfig:
    def test_defaults(self):
        pacing = PacingConfig()
        assert pacing.delay_for(Phase.DICE_ROLLING) == 1.5
        assert pacing.delay_for(Phase.ROUND_RESULT) == 1.0
        assert pacing.delay_for(Phase.BATTLE_END) == 3.0
        assert pacing.delay_for(Phase.LUCK_TEST) == 0.0

    def test_instant(self):
        pacing = PacingConfig.instant()
        assert all(pacing.delay_for(phase) == 0 for phase in Phase)

    def test_negative_delay_rejected(self):
        with pytest.raises(ValidationError):
            PacingConfig(dice_roll=-1)


class TestBattleDirector:
    def test_round_order_and_delays(self, make_engine):
        engine = make_engine(*PLAYER_HITS)
        sleeps: list[float] = []
        director = BattleDirector(engine, sleep=sleeps.append)

        engine.roll_attack()
        phases = director.run_until_input()
        assert phases == [Phase.DICE_ROLLING, Phase.ROUND_RESULT, Phase.BATTLE]
        assert sleeps == [1.5, 1.0]
        assert engine.state.battle.creature.current_stamina == 2

    def test_nothing_to_do(self, make_engine):
        engine = make_engine()
        sleeps: list[float] = []
        assert BattleDirector(engine, sleep=sleeps.append).run_until_input() == [Phase.BATTLE]
        assert sleeps == []

    def test_instant_pacing_never_sleeps(self, make_engine):
        engine = make_engine(*PLAYER_HITS)
        sleeps: list[float] = []
        engine.roll_attack()
        BattleDirector(engine, PacingConfig.instant(), sleep=sleeps.append).run_until_input()
        assert sleeps == []
        assert engine.phase is Phase.BATTLE

    def test_stops_for_luck_test(self, make_engine):
        engine = make_engine(1, 1, 6, 6)
        sleeps: list[float] = []
        engine.roll_attack()
        phases = BattleDirector(engine, sleep=sleeps.append).run_until_input()
        assert phases == [Phase.DICE_ROLLING, Phase.LUCK_TEST]
        assert sleeps == [1.5]

    def test_creature_turn_after_spell(self, make_engine):
        engine = make_engine(*PLAYER_HITS, preset="mage")
        sleeps: list[float] = []
        engine.cast_spell("shield")
        phases = BattleDirector(engine, sleep=sleeps.append).run_until_input()
        assert phases == [
            Phase.ROUND_RESULT, Phase.BATTLE, Phase.DICE_ROLLING, Phase.ROUND_RESULT, Phase.BATTLE,
        ]
        assert sleeps == [1.0, 0.5, 1.5, 1.0]

    def test_campaign_battle_end(self, make_engine):
        engine = make_engine(*PLAYER_HITS, *PLAYER_HITS, campaign=True)
        sleeps: list[float] = []
        director = BattleDirector(engine, sleep=sleeps.append)
        engine.roll_attack()
        director.run_until_input()
        engine.roll_attack()

        phases = director.run_until_input(stop_at={Phase.BATTLE_END})
        assert phases[-1] is Phase.BATTLE_END
        assert engine.phase is Phase.BATTLE_END

        sleeps.clear()
        assert director.run_until_input() == [Phase.BATTLE_END, Phase.CAMPAIGN_VICTORY]
        assert sleeps == [3.0]
