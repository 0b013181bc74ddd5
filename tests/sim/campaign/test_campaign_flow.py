"""End-to-end campaign tests through BattleEngine."""

from __future__ import annotations

from dice_battler.sim.campaign.recovery import Recovery
from dice_battler.sim.campaign.report import generate_campaign_report
from dice_battler.sim.core.game_state import GameMode, Phase
from dice_battler.sim.engine import BattleEngine

PLAYER_HITS = (1, 1, 1, 1)
CREATURE_HITS = (1, 1, 6, 6)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _attack_and_advance(engine: BattleEngine) -> None:
    assert engine.roll_attack()
    assert engine.resolve_dice()
    assert engine.advance()


def _win_goblin_fight(engine: BattleEngine) -> None:
    """Two scripted hits on a fresh goblin, then score the win."""
    engine.rng.push(*PLAYER_HITS, *PLAYER_HITS)
    _attack_and_advance(engine)
    _attack_and_advance(engine)
    assert engine.phase is Phase.BATTLE_END
    assert engine.step()
    assert engine.phase is Phase.CAMPAIGN_VICTORY


# ---------------------------------------------------------------------------
# Starting a campaign
# ---------------------------------------------------------------------------

class TestStartCampaign:
    def test_from_creature_select(self, make_engine):
        engine = make_engine(creature=None, campaign=True)
        assert engine.phase is Phase.CREATURE_SELECT
        assert engine.state.mode is GameMode.CAMPAIGN
        assert engine.state.in_campaign
        stats = engine.state.campaign.starting_stats
        assert (stats.skill, stats.stamina, stats.luck) == (10, 20, 9)

    def test_from_avatar_select(self, registry):
        engine = BattleEngine(registry)
        engine.create_character_from_preset("rogue")
        assert engine.start_campaign()
        assert engine.phase is Phase.CREATURE_SELECT

    def test_rejected_mid_battle(self, make_engine):
        engine = make_engine()
        assert not engine.start_campaign()
        assert engine.state.campaign is None


# ---------------------------------------------------------------------------
# Victories and scoring
# ---------------------------------------------------------------------------

class TestVictory:
    def test_battle_end_advances_automatically(self, make_engine):
        engine = make_engine(*PLAYER_HITS, *PLAYER_HITS, campaign=True)
        _attack_and_advance(engine)
        _attack_and_advance(engine)
        assert engine.phase is Phase.BATTLE_END
        assert not engine.awaiting_input

    def test_perfect_victory_score(self, make_engine):
        engine = make_engine(campaign=True)
        _win_goblin_fight(engine)
        campaign = engine.state.campaign
        # 2 rounds x 100 x 1.0 + 1000 + 500 + 4 x 50 + 0 streak
        assert campaign.score == 1900
        assert campaign.battles_won == 1
        assert campaign.current_streak == 1
        assert campaign.perfect_victories == 1
        record = campaign.last_battle
        assert record.battle_number == 1
        assert record.victory
        assert record.creature_name == "Goblin"
        assert (record.rounds_completed, record.damage_dealt, record.damage_taken) == (2, 4, 0)

    def test_streak_uses_wins_before_this_one(self, make_engine):
        engine = make_engine(campaign=True)
        _win_goblin_fight(engine)
        engine.apply_campaign_recovery()
        assert engine.select_creature_by_id("goblin")
        _win_goblin_fight(engine)
        campaign = engine.state.campaign
        assert campaign.last_battle.score == 2100
        assert campaign.score == 4000
        assert campaign.current_streak == 2

    def test_record_victory_rejected_after_loss(self, make_engine):
        engine = make_engine(*CREATURE_HITS, campaign=True)
        engine.state.player.current_stamina = 2
        engine.roll_attack()
        engine.resolve_dice()
        engine.skip_luck_test()
        engine.advance()
        assert engine.state.battle.result == "loss"
        assert not engine.record_battle_victory()


# ---------------------------------------------------------------------------
# Between battles
# ---------------------------------------------------------------------------

class TestRecovery:
    def test_recovery_and_carry_over(self, make_engine):
        engine = make_engine(*CREATURE_HITS, 6, 6, *PLAYER_HITS, *PLAYER_HITS, campaign=True)
        engine.roll_attack()
        engine.resolve_dice()
        engine.test_luck()  # unlucky: 3 damage, luck 8
        engine.advance()
        _attack_and_advance(engine)
        _attack_and_advance(engine)
        engine.step()

        campaign = engine.state.campaign
        assert campaign.last_battle.score == 500
        assert campaign.perfect_victories == 0

        recovery = engine.apply_campaign_recovery()
        assert recovery == Recovery(stamina_restored=1, luck_restored=1)
        assert engine.phase is Phase.CREATURE_SELECT
        assert engine.state.battle is None
        player = engine.state.player
        assert (player.current_stamina, player.luck) == (18, 9)

        engine.select_creature_by_id("goblin")
        battle = engine.state.battle
        assert battle.player.current_stamina == 18
        assert battle.player_stamina_at_start == 18
        assert battle.get_item("healing_draught").remaining == 2

    def test_mana_refills_each_battle(self, make_engine):
        engine = make_engine(*PLAYER_HITS, preset="mage", campaign=True)
        engine.cast_spell("magic_missile")
        engine.advance()
        while engine.step():
            pass
        assert engine.phase is Phase.CAMPAIGN_VICTORY
        assert engine.state.player.mana == 12

        engine.apply_campaign_recovery()
        engine.select_creature_by_id("goblin")
        assert engine.state.player.mana == 15

    def test_progressive_difficulty(self, make_engine):
        engine = make_engine(creature=None, campaign=True)
        engine.state.campaign.battles_won = 2
        engine.select_creature_by_id("goblin")
        creature = engine.state.battle.creature
        assert (creature.skill, creature.max_stamina, creature.current_stamina) == (6, 6, 6)

    def test_recovery_only_after_victory(self, make_engine):
        engine = make_engine(campaign=True)
        assert engine.apply_campaign_recovery() is None


# ---------------------------------------------------------------------------
# Ending a campaign
# ---------------------------------------------------------------------------

class TestEndCampaign:
    def test_defeat_ends_campaign(self, make_engine):
        engine = make_engine(*CREATURE_HITS, campaign=True)
        engine.state.player.current_stamina = 2
        engine.roll_attack()
        engine.resolve_dice()
        engine.skip_luck_test()
        engine.advance()
        assert engine.phase is Phase.BATTLE_END

        assert engine.step()
        assert engine.phase is Phase.CAMPAIGN_END
        campaign = engine.state.campaign
        assert not campaign.is_active
        assert campaign.current_streak == 0
        assert campaign.last_battle.victory is False
        assert campaign.last_battle.score == 0
        assert campaign.total_damage_taken == 2

        scores = engine.high_scores.get_high_scores()
        assert [(s.name, s.score, s.battles_won) for s in scores] == [("Warrior", 0, 0)]

    def test_retire_after_victory(self, make_engine):
        engine = make_engine(campaign=True)
        _win_goblin_fight(engine)
        assert engine.end_campaign()
        assert engine.phase is Phase.CAMPAIGN_END
        assert engine.high_scores.get_high_scores()[0].score == 1900
        assert engine.state.campaign.battles_fought == 1

    def test_cannot_end_after_a_won_battle_end(self, make_engine):
        engine = make_engine(*PLAYER_HITS, *PLAYER_HITS, campaign=True)
        _attack_and_advance(engine)
        _attack_and_advance(engine)
        assert not engine.end_campaign()
        assert engine.phase is Phase.BATTLE_END

    def test_campaign_end_is_terminal(self, make_engine):
        engine = make_engine(campaign=True)
        _win_goblin_fight(engine)
        engine.end_campaign()
        assert not engine.select_creature_by_id("goblin")
        assert engine.apply_campaign_recovery() is None
        assert engine.awaiting_input
        engine.reset_game()
        assert engine.phase is Phase.CHARACTER_SELECT
        assert engine.state.campaign is None

    def test_report(self, make_engine):
        engine = make_engine(campaign=True)
        _win_goblin_fight(engine)
        engine.end_campaign()
        report = generate_campaign_report(engine.state.campaign)
        assert "Campaign Report (ended)" in report
        assert "1,900" in report
        assert "Goblin" in report
        assert "## Battles" in report
