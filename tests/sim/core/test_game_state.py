"""Tests for BattleState, GameState, the enums and GameRNG."""

from dice_battler.sim.core.entities import Creature, Player
from dice_battler.sim.core.game_state import (
    BattleState,
    CombatLogEntry,
    CombatResult,
    GameState,
    InventoryItem,
    Phase,
    Side,
)
from dice_battler.catalog.items import ItemType
from dice_battler.sim.core.rng import GameRNG


def _make_battle(**kwargs) -> BattleState:
    player = Player(name="Hero", skill=10, max_stamina=20, current_stamina=20, luck=9, max_luck=9)
    creature = Creature(name="Goblin", skill=5, max_stamina=4, current_stamina=4)
    defaults = dict(player=player, creature=creature)
    defaults.update(kwargs)
    return BattleState(**defaults)


class TestSide:
    def test_opponent(self):
        assert Side.PLAYER.opponent is Side.CREATURE
        assert Side.CREATURE.opponent is Side.PLAYER

    def test_hit_on_names_damaged_side(self):
        assert CombatResult.hit_on(Side.PLAYER) is CombatResult.PLAYER_HIT
        assert CombatResult.hit_on(Side.CREATURE) is CombatResult.CREATURE_HIT


class TestCombatLog:
    def test_newest_entry_first(self):
        battle = _make_battle()
        battle.record(CombatLogEntry(round=1, result=CombatResult.DRAW))
        battle.record(CombatLogEntry(round=2, result=CombatResult.CREATURE_HIT))
        assert [e.round for e in battle.combat_log] == [2, 1]
        assert battle.latest_entry.round == 2

    def test_empty_log(self):
        assert _make_battle().latest_entry is None


class TestBattleOver:
    def test_not_over(self):
        battle = _make_battle()
        assert battle.check_battle_over() is None
        assert not battle.is_over

    def test_creature_defeated_is_win(self):
        battle = _make_battle()
        battle.creature.current_stamina = 0
        assert battle.check_battle_over() == "win"

    def test_player_defeated_is_loss(self):
        battle = _make_battle()
        battle.player.current_stamina = 0
        assert battle.check_battle_over() == "loss"

    def test_simultaneous_knockout_is_loss(self):
        battle = _make_battle()
        battle.player.current_stamina = 0
        battle.creature.current_stamina = 0
        assert battle.check_battle_over() == "loss"

    def test_perfect_victory_needs_no_damage_taken(self):
        battle = _make_battle(result="win")
        assert battle.is_perfect_victory
        battle.damage_taken = 1
        assert not battle.is_perfect_victory


class TestInventoryLookup:
    def test_get_item(self):
        item = InventoryItem(
            id="healing_draught", name="Healing Draught", type=ItemType.HEAL, amount=4, remaining=2,
        )
        battle = _make_battle(inventory=[item])
        assert battle.get_item("healing_draught") is item
        assert battle.get_item("missing") is None

    def test_entity_by_side(self):
        battle = _make_battle()
        assert battle.entity(Side.PLAYER) is battle.player
        assert battle.entity(Side.CREATURE) is battle.creature


class TestGameState:
    def test_starts_in_character_select(self):
        state = GameState()
        assert state.phase is Phase.CHARACTER_SELECT
        assert state.player is None
        assert not state.in_campaign


class TestGameRNG:
    def test_same_seed_same_sequence(self):
        a, b = GameRNG(7), GameRNG(7)
        assert [a.random_int(1, 6) for _ in range(20)] == [b.random_int(1, 6) for _ in range(20)]

    def test_fork_is_stable(self):
        assert GameRNG(7).fork("agent").seed == GameRNG(7).fork("agent").seed

    def test_forks_are_independent(self):
        rng = GameRNG(7)
        assert rng.fork("agent").seed != rng.fork("battle").seed

    def test_entropy_seed(self):
        assert isinstance(GameRNG().seed, int)
