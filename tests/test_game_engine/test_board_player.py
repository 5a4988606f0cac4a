"""
Tests for the board model, player ledger, dice, settings and win evaluator.

Run with: python3 tests/test_game_engine/test_board_player.py
"""

import json
import sys
import tempfile
import unittest
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from custom_monopoly.game_engine import Board, Dice, Player, WinEvaluator, generate_players
from custom_monopoly.game_engine.win import MONOPOLY_CONDITION, game_status
from shared.constants import BOARD_SIZE, FALLBACK_PLAYER_COLOR, PLAYER_COLORS
from shared.enums import SpaceType
from shared.game_settings import GameSettings, default_settings, load_settings, save_settings


class TestBoard(unittest.TestCase):

    def setUp(self):
        self.board = Board()

    def test_default_layout(self):
        self.assertEqual(self.board.size, BOARD_SIZE)
        self.assertEqual(self.board.jail_position, 10)
        self.assertTrue(self.board.get_space(0).is_go)
        self.assertTrue(self.board.get_space(30).is_go_to_jail)
        self.assertEqual(self.board.get_space(2).space_type, SpaceType.QUESTION)
        self.assertEqual(self.board.get_space(4).space_type, SpaceType.ACTION)
        for index, space in enumerate(self.board.spaces):
            self.assertEqual(space.id, index)

    def test_property_attributes(self):
        space = self.board.get_property(6)
        self.assertEqual((space.price, space.rent), (140, 18))
        self.assertEqual(space.color, "azure")
        self.assertIsNone(self.board.get_property(2))
        self.assertIsNone(self.board.get_space(40))

    def test_catalog_fills_missing_fields(self):
        settings = default_settings()
        settings.board_spaces[1] = {"id": 1, "type": "property"}
        board = Board.from_settings(settings)
        space = board.get_space(1)
        self.assertEqual(space.name, "Azure Blob Storage")
        self.assertEqual((space.price, space.rent), (60, 8))

    def test_transfer_and_query_ownership(self):
        self.assertTrue(self.board.is_property_available(3))
        self.assertTrue(self.board.transfer_property(3, "1"))
        self.assertFalse(self.board.is_property_available(3))
        self.assertEqual([s.id for s in self.board.get_player_properties("1")], [3])
        self.assertFalse(self.board.transfer_property(4, "1"))
        self.board.reset()
        self.assertIsNone(self.board.get_property_owner(3))

    def test_space_lookup_by_string_id(self):
        self.assertEqual(self.board.get_space("3").id, 3)
        self.assertEqual(self.board.get_property("39").name, self.board.get_space(39).name)
        self.assertIsNone(self.board.get_space("abc"))
        self.assertIsNone(self.board.get_space("40"))
        self.assertIsNone(self.board.get_space(None))


class TestPlayer(unittest.TestCase):

    def test_move_wraps_for_every_start_and_total(self):
        for start in range(BOARD_SIZE):
            for total in range(2, 13):
                player = Player(id="1", name="P", position=start, money=0)
                passed = player.move_forward(total, BOARD_SIZE)
                self.assertEqual(player.position, (start + total) % BOARD_SIZE)
                self.assertEqual(passed, start + total >= BOARD_SIZE)
                self.assertEqual(player.money, 200 if passed else 0)

    def test_pay_never_goes_negative(self):
        player = Player(id="1", name="P", money=10)
        self.assertEqual(player.pay(30), 10)
        self.assertEqual(player.money, 0)

    def test_lock_and_release(self):
        player = Player(id="1", name="P", money=500)
        player.lock(300)
        self.assertEqual(player.spendable_money, 200)
        self.assertFalse(player.can_afford(250))
        with self.assertRaises(ValueError):
            player.lock(201)
        player.spend_locked(100)
        self.assertEqual((player.money, player.locked_money), (400, 200))
        with self.assertRaises(ValueError):
            player.release(201)

    def test_generated_roster(self):
        players = generate_players(9)
        self.assertEqual([p.id for p in players[:3]], ["1", "2", "3"])
        self.assertEqual(players[0].color, PLAYER_COLORS[0])
        self.assertEqual(players[8].color, FALLBACK_PLAYER_COLOR)

    def test_dict_round_trip(self):
        player = Player(id="1", name="P", money=700, locked_money=100, properties={3, 1})
        data = player.to_dict()
        self.assertEqual(data["properties"], [1, 3])
        self.assertEqual(Player.from_dict(data), player)


class TestDice(unittest.TestCase):

    def test_queued_rolls_come_first(self):
        dice = Dice(seed=3)
        dice.queue((6, 5), (1, 1))
        self.assertEqual(dice.roll().total, 11)
        self.assertEqual(dice.roll().total, 2)
        roll = dice.roll()
        self.assertTrue(1 <= roll.die1 <= 6 and 1 <= roll.die2 <= 6)

    def test_invalid_queue_rejected(self):
        with self.assertRaises(ValueError):
            Dice().queue((0, 7))

    def test_seeded_dice_repeat(self):
        a, b = Dice(seed=5), Dice(seed=5)
        self.assertEqual([a.roll() for _ in range(20)], [b.roll() for _ in range(20)])


class TestWinEvaluator(unittest.TestCase):

    def setUp(self):
        self.board = Board()
        self.players = generate_players(3)

    def test_no_winner_at_start(self):
        self.assertIsNone(WinEvaluator(self.board).evaluate(self.players))

    def test_money_checked_before_properties(self):
        self.players[1].money = 5000
        self.players[2].properties = set(range(10))
        result = WinEvaluator(self.board).evaluate(self.players)
        self.assertEqual(result.player_id, "2")
        self.assertEqual(result.condition.type.value, "money")

    def test_last_standing_needs_exactly_one(self):
        self.players[0].money = 0
        self.assertIsNone(WinEvaluator(self.board).evaluate(self.players))
        self.players[1].money = 0
        self.assertEqual(WinEvaluator(self.board).evaluate(self.players).player_id, "3")

    def test_monopoly_condition(self):
        evaluator = WinEvaluator(self.board, [MONOPOLY_CONDITION])
        aws = [s.id for s in self.board.get_group_properties("aws")]
        for position in aws[:-1]:
            self.board.transfer_property(position, "1")
        self.assertIsNone(evaluator.evaluate(self.players))
        self.board.transfer_property(aws[-1], "1")
        self.assertEqual(evaluator.evaluate(self.players).player_id, "1")

    def test_status_ends_with_one_solvent_player(self):
        self.assertFalse(game_status(self.players, None)["game_ended"])
        self.players[0].money = 0
        self.players[1].money = 0
        status = game_status(self.players, None)
        self.assertTrue(status["game_ended"])
        self.assertEqual(status["active_players"], ["3"])
        self.assertIsNone(status["winner"])

    def test_monopoly_disabled_by_default(self):
        types = [c.type.value for c in WinEvaluator(self.board).conditions]
        self.assertNotIn("monopoly", types)
        types = [c.type.value for c in WinEvaluator.with_monopoly(self.board).conditions]
        self.assertEqual(types, ["money", "properties", "monopoly", "last-standing"])


class TestGameSettings(unittest.TestCase):

    def test_default_settings_are_valid(self):
        self.assertEqual(default_settings().validate(), [])

    def test_validation_reports_problems(self):
        settings = GameSettings(number_of_players=1, action_cards=[])
        settings.question_cards[0]["correct_answer"] = 9
        problems = settings.validate()
        self.assertTrue(any("number_of_players" in p for p in problems))
        self.assertIn("Action deck is empty", problems)
        self.assertTrue(any("no valid correct answer" in p for p in problems))

    def test_negative_card_amounts_rejected(self):
        settings = default_settings()
        settings.action_cards.append({"id": "bad", "effect": "collect-money", "value": -2000})
        settings.action_cards.append({"id": "worse", "effect": "pay-money", "value": -10})
        settings.question_cards[0]["reward"] = -3000
        settings.question_cards[1]["penalty"] = -5
        problems = settings.validate()
        self.assertIn("Action card bad has a negative value", problems)
        self.assertIn("Action card worse has a negative value", problems)
        self.assertTrue(any(p.endswith("has a negative reward") for p in problems))
        self.assertTrue(any(p.endswith("has a negative penalty") for p in problems))

    def test_from_dict_rejects_bad_sections(self):
        with self.assertRaises(ValueError):
            GameSettings.from_dict({"board_spaces": "nope"})
        with self.assertRaises(ValueError):
            GameSettings.from_dict([])

    def test_save_and_load(self):
        settings = GameSettings(game_title="Office Edition", number_of_players=2)
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            save_settings(settings, path)
            self.assertEqual(json.loads(path.read_text())["game_title"], "Office Edition")
            loaded = load_settings(path)
        self.assertEqual(loaded.to_dict(), settings.to_dict())


if __name__ == "__main__":
    unittest.main()
