"""
Tests for the turn state machine, landing effects and win evaluation.

Run from project root: python -m pytest tests/ -v
Or run directly: python tests/test_game_engine/test_game_engine.py
"""

import json
import sys
import unittest
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from custom_monopoly.game_engine import ActionCard, CardManager, Game, QuestionCard
from shared.constants import JAIL_POSITION, SALARY_AMOUNT, STARTING_MONEY
from shared.enums import ActionEffect, GamePhase
from shared.game_settings import GameSettings


def make_game(players: int = 3) -> Game:
    """A seeded game with a small roster."""
    return Game(settings=GameSettings(number_of_players=players), seed=1234)


def give_property(game: Game, player_id: str, position: int) -> None:
    game.players[player_id].add_property(position)
    game.board.transfer_property(position, player_id)


def use_action_card(game: Game, effect: ActionEffect, value=None) -> ActionCard:
    card = ActionCard(id="t1", title="Test Card", description="", effect=effect, value=value)
    game.cards.actions.cards = [card]
    return card


class EngineTestCase(unittest.TestCase):
    """Base test case with a fresh three-player game."""

    def setUp(self):
        self.game = make_game()
        self.p1 = self.game.players["1"]
        self.p2 = self.game.players["2"]
        self.p3 = self.game.players["3"]

    def roll(self, die1: int, die2: int):
        self.game.dice.queue((die1, die2))
        return self.game.roll_dice()

    def assertInvariants(self):
        game = self.game
        for player in game.players.values():
            self.assertGreaterEqual(player.locked_money, 0)
            self.assertLessEqual(player.locked_money, player.money)
            self.assertEqual(player.locked_money, game.trades.locked_total(player.id))
            for position in player.properties:
                self.assertEqual(game.board.get_space(position).owner_id, player.id)
        for space in game.board.spaces:
            if space.owner_id is not None:
                self.assertTrue(space.is_property)
                owners = [p.id for p in game.players.values() if space.id in p.properties]
                self.assertEqual(owners, [space.owner_id])


class TestGameSetup(EngineTestCase):

    def test_players_generated_from_settings(self):
        self.assertEqual(self.game.player_order, ["1", "2", "3"])
        self.assertEqual(self.p2.name, "Player 2")
        for player in self.game.players.values():
            self.assertEqual(player.money, STARTING_MONEY)
            self.assertEqual(player.position, 0)
            self.assertEqual(player.locked_money, 0)
            self.assertFalse(player.skip_next_turn)

    def test_initial_state(self):
        self.assertEqual(self.game.phase, GamePhase.ROLL)
        self.assertEqual(self.game.current_player.id, "1")
        self.assertFalse(self.game.game_in_progress)
        self.assertEqual(self.game.board.size, 40)
        self.assertEqual(self.game.name, "Custom Monopoly")

    def test_player_count_outside_range_rejected(self):
        with self.assertRaises(ValueError):
            Game(settings=GameSettings(number_of_players=1))
        with self.assertRaises(ValueError):
            self.game.reset_game(number_of_players=9)
        self.assertEqual(len(self.game.players), 3)

    def test_card_draws_do_not_follow_the_dice(self):
        mirrored = CardManager(seed=1234)
        game_draws = [self.game.cards.draw_action().id for _ in range(20)]
        self.assertNotEqual(game_draws, [mirrored.draw_action().id for _ in range(20)])

        again = make_game()
        self.assertEqual([again.cards.draw_action().id for _ in range(20)], game_draws)


class TestRollAndMove(EngineTestCase):

    def test_roll_moves_player_and_enters_actions(self):
        success, _, result = self.roll(2, 3)
        self.assertTrue(success)
        self.assertEqual(result.total, 5)
        self.assertEqual(result.to_dict(), {"dice1": 2, "dice2": 3, "total": 5})
        self.assertEqual(self.p1.position, 5)
        self.assertEqual(self.game.phase, GamePhase.ACTIONS)
        self.assertTrue(self.game.game_in_progress)

    def test_passing_go_pays_once(self):
        self.p1.position = 38
        self.roll(2, 3)
        self.assertEqual(self.p1.position, 3)
        self.assertEqual(self.p1.money, STARTING_MONEY + SALARY_AMOUNT)
        self.assertIn("passed_go", [e.event_type for e in self.game.events])

    def test_landing_exactly_on_go_pays_once(self):
        self.p1.position = 34
        self.roll(3, 3)
        self.assertEqual(self.p1.position, 0)
        self.assertEqual(self.p1.money, STARTING_MONEY + SALARY_AMOUNT)

    def test_roll_outside_roll_phase_is_noop(self):
        self.roll(2, 3)
        money, position = self.p1.money, self.p1.position
        self.game.dice.queue((1, 1))
        success, _, result = self.game.roll_dice()
        self.assertFalse(success)
        self.assertIsNone(result)
        self.assertEqual((self.p1.money, self.p1.position), (money, position))
        self.assertEqual(self.game.phase, GamePhase.ACTIONS)

    def test_roll_by_other_player_rejected(self):
        success, message, _ = self.game.roll_dice("2")
        self.assertFalse(success)
        self.assertEqual(message, "It's not your turn")

    def test_roll_unknown_player_rejected(self):
        success, message, _ = self.game.roll_dice("99")
        self.assertFalse(success)
        self.assertEqual(message, "Player not found")

    def test_end_turn_advances_cyclically(self):
        for expected in ("2", "3", "1"):
            self.roll(1, 2)
            success, _ = self.game.end_turn()
            self.assertTrue(success)
            self.assertEqual(self.game.current_player.id, expected)
            self.assertEqual(self.game.phase, GamePhase.ROLL)

    def test_end_turn_before_roll_rejected(self):
        success, _ = self.game.end_turn()
        self.assertFalse(success)
        self.assertEqual(self.game.current_player.id, "1")


class TestLandingEffects(EngineTestCase):

    def test_rent_paid_to_owner(self):
        give_property(self.game, "2", 6)  # rent 18
        self.roll(3, 3)
        self.assertEqual(self.p1.money, 1482)
        self.assertEqual(self.p2.money, 1518)
        self.assertInvariants()

    def test_rent_floors_at_zero(self):
        give_property(self.game, "2", 15)  # rent 30
        self.p1.position = 10
        self.p1.money = 10
        self.roll(2, 3)
        self.assertEqual(self.p1.money, 0)
        self.assertEqual(self.p2.money, STARTING_MONEY + 10)

    def test_own_property_charges_nothing(self):
        give_property(self.game, "1", 6)
        self.roll(3, 3)
        self.assertEqual(self.p1.money, STARTING_MONEY)

    def test_go_to_jail_corner(self):
        self.p1.position = 25
        self.roll(2, 3)
        self.assertEqual(self.p1.position, JAIL_POSITION)
        self.assertEqual(self.game.phase, GamePhase.ACTIONS)

    def test_jail_is_just_visiting(self):
        self.p1.position = 5
        self.roll(2, 3)
        self.assertEqual(self.p1.position, JAIL_POSITION)
        self.assertEqual(self.p1.money, STARTING_MONEY)

    def test_action_space_suspends_until_acknowledged(self):
        use_action_card(self.game, ActionEffect.COLLECT_MONEY, 50)
        self.roll(1, 3)
        self.assertEqual(self.game.phase, GamePhase.ACTION_CARD)
        self.assertEqual(self.p1.money, STARTING_MONEY)

        self.assertFalse(self.game.end_turn()[0])
        self.assertFalse(self.game.roll_dice()[0])

        success, message = self.game.acknowledge_action_card()
        self.assertTrue(success)
        self.assertEqual(self.p1.money, STARTING_MONEY + 50)
        self.assertEqual(self.game.phase, GamePhase.ACTIONS)
        self.assertIsNone(self.game.pending_action_card)

    def test_acknowledge_wrong_card_rejected(self):
        use_action_card(self.game, ActionEffect.COLLECT_MONEY, 50)
        self.roll(1, 3)
        success, _ = self.game.acknowledge_action_card(card_id="other")
        self.assertFalse(success)
        self.assertEqual(self.game.phase, GamePhase.ACTION_CARD)

    def test_action_card_go_to_jail(self):
        use_action_card(self.game, ActionEffect.GO_TO_JAIL)
        self.roll(1, 3)
        self.game.acknowledge_action_card()
        self.assertEqual(self.p1.position, JAIL_POSITION)

    def test_advance_spaces_does_not_chain(self):
        use_action_card(self.game, ActionEffect.ADVANCE_SPACES, 3)
        self.roll(1, 3)
        self.game.acknowledge_action_card()
        # Space 7 is another action space
        self.assertEqual(self.p1.position, 7)
        self.assertEqual(self.game.phase, GamePhase.ACTIONS)
        self.assertIsNone(self.game.pending_action_card)
        drawn = [e for e in self.game.events if e.event_type == "action_card_drawn"]
        self.assertEqual(len(drawn), 1)

    def test_extra_turn_returns_to_roll_for_same_player(self):
        use_action_card(self.game, ActionEffect.EXTRA_TURN)
        self.roll(1, 3)
        self.game.acknowledge_action_card()
        self.assertEqual(self.game.phase, GamePhase.ROLL)
        self.assertEqual(self.game.current_player.id, "1")

        success, _, _ = self.roll(1, 1)
        self.assertTrue(success)
        self.assertEqual(self.p1.position, 6)

    def test_skip_turn_consumed_at_next_roll(self):
        use_action_card(self.game, ActionEffect.SKIP_TURN)
        self.roll(1, 3)
        self.game.acknowledge_action_card()
        self.assertTrue(self.p1.skip_next_turn)
        self.game.end_turn()

        for _ in range(2):
            self.roll(1, 2)
            self.game.end_turn()
        self.assertEqual(self.game.current_player.id, "1")

        self.game.dice.queue((6, 6))
        success, _, result = self.game.roll_dice()
        self.assertTrue(success)
        self.assertIsNone(result)
        self.assertFalse(self.p1.skip_next_turn)
        self.assertEqual(self.p1.position, 4)
        self.assertEqual(self.game.current_player.id, "2")
        self.assertEqual(self.game.phase, GamePhase.ROLL)

        # The queued roll was not consumed
        self.game.roll_dice()
        self.assertEqual(self.p2.position, 3 + 12)

    def test_negative_money_cards_never_go_below_zero(self):
        use_action_card(self.game, ActionEffect.COLLECT_MONEY, -2000)
        self.roll(1, 3)
        self.game.acknowledge_action_card()
        self.assertEqual(self.p1.money, STARTING_MONEY)
        self.game.end_turn()

        self.game.cards.questions.cards = [
            QuestionCard("q", "2 + 2?", ("3", "4"), correct_answer=1, reward=-3000, penalty=50)
        ]
        self.roll(1, 1)
        self.game.answer_question(1)
        self.assertEqual(self.p2.money, STARTING_MONEY)
        self.assertInvariants()

    def test_question_correct_answer(self):
        self.game.cards.questions.cards = [
            QuestionCard("q", "2 + 2?", ("3", "4"), correct_answer=1, reward=100, penalty=50)
        ]
        self.roll(1, 1)
        self.assertEqual(self.game.phase, GamePhase.QUESTION_CARD)
        self.assertFalse(self.game.end_turn()[0])

        success, _ = self.game.answer_question(1)
        self.assertTrue(success)
        self.assertEqual(self.p1.money, STARTING_MONEY + 100)
        self.assertEqual(self.game.phase, GamePhase.ACTIONS)

    def test_question_wrong_answer_floors_at_zero(self):
        self.game.cards.questions.cards = [
            QuestionCard("q", "2 + 2?", ("3", "4"), correct_answer=1, reward=100, penalty=50)
        ]
        self.p1.money = 30
        self.roll(1, 1)
        self.game.answer_question(0)
        self.assertEqual(self.p1.money, 0)

    def test_question_invalid_answer_rejected(self):
        self.game.cards.questions.cards = [
            QuestionCard("q", "2 + 2?", ("3", "4"), correct_answer=1, reward=100, penalty=50)
        ]
        self.roll(1, 1)
        success, _ = self.game.answer_question(5)
        self.assertFalse(success)
        self.assertEqual(self.game.phase, GamePhase.QUESTION_CARD)
        self.assertEqual(self.p1.money, STARTING_MONEY)


class TestBuyProperty(EngineTestCase):

    def test_buy_current_space(self):
        self.roll(1, 2)  # Azure Virtual Machines, $100
        self.assertTrue(self.game.can_buy_current_space())
        success, _ = self.game.buy_property()
        self.assertTrue(success)
        self.assertEqual(self.p1.money, STARTING_MONEY - 100)
        self.assertIn(3, self.p1.properties)
        self.assertEqual(self.game.board.get_property_owner(3), "1")
        self.assertFalse(self.game.can_buy_current_space())
        self.assertInvariants()

    def test_buy_with_string_space_id(self):
        self.roll(1, 2)
        success, _ = self.game.buy_property(space_id="3")
        self.assertTrue(success)
        self.assertEqual(self.game.board.get_property_owner(3), "1")
        self.assertInvariants()

    def test_buy_with_malformed_space_id(self):
        self.roll(1, 2)
        for bad in ("abc", "", "3.0"):
            success, message = self.game.buy_property(space_id=bad)
            self.assertFalse(success)
            self.assertEqual(message, f"No space {bad}")
        self.assertEqual(self.p1.money, STARTING_MONEY)
        self.assertIsNone(self.game.board.get_property_owner(3))

    def test_buy_owned_property_rejected(self):
        give_property(self.game, "2", 3)
        self.roll(1, 2)
        success, _ = self.game.buy_property()
        self.assertFalse(success)
        self.assertEqual(self.game.board.get_property_owner(3), "2")

    def test_buy_without_funds_rejected(self):
        self.p1.money = 50
        self.roll(1, 2)
        success, message = self.game.buy_property()
        self.assertFalse(success)
        self.assertEqual(message, "You need $100 to buy Azure Virtual Machines")
        self.assertEqual(self.p1.money, 50)
        self.assertNotIn(3, self.p1.properties)

    def test_buy_respects_locked_money(self):
        give_property(self.game, "2", 39)  # $400
        self.p1.money = 450
        self.game.send_buy_request("1", "2", 39)
        self.roll(1, 2)
        success, _ = self.game.buy_property()
        self.assertFalse(success)

    def test_buy_other_space_rejected(self):
        self.roll(1, 2)
        success, _ = self.game.buy_property(space_id=1)
        self.assertFalse(success)

    def test_buy_non_property_rejected(self):
        self.roll(1, 1)  # question space
        self.game.answer_question(0)
        success, _ = self.game.buy_property()
        self.assertFalse(success)

    def test_decline_property(self):
        self.roll(1, 2)
        success, _ = self.game.decline_property()
        self.assertTrue(success)
        self.assertFalse(self.game.board.get_space(3).is_owned)
        self.assertEqual(self.game.phase, GamePhase.ACTIONS)


class TestWinConditions(EngineTestCase):

    def test_money_threshold(self):
        use_action_card(self.game, ActionEffect.COLLECT_MONEY, 200)
        self.p1.money = 4800
        self.roll(1, 3)
        self.game.acknowledge_action_card()
        self.assertEqual(self.game.winner_id, "1")
        self.assertEqual(self.game.win_condition, "money")
        self.assertEqual(self.game.phase, GamePhase.GAME_OVER)
        self.assertFalse(self.game.game_in_progress)
        self.assertFalse(self.game.end_turn()[0])

    def test_property_threshold(self):
        for position in (1, 5, 6, 8, 9, 11, 13, 14, 16):
            give_property(self.game, "1", position)
        self.roll(1, 2)
        self.assertIsNone(self.game.winner_id)
        self.game.buy_property()
        self.assertEqual(self.game.winner_id, "1")
        self.assertEqual(self.game.win_condition, "properties")

    def test_last_standing(self):
        game = make_game(players=2)
        self.game = game
        give_property(game, "2", 15)
        game.players["1"].position = 10
        game.players["1"].money = 10
        game.dice.queue((2, 3))
        game.roll_dice()
        self.assertEqual(game.winner_id, "2")
        self.assertEqual(game.win_condition, "last-standing")

        status = game.get_game_status()
        self.assertEqual(status["active_players"], ["2"])
        self.assertEqual(status["bankrupt_players"], ["1"])
        self.assertTrue(status["game_ended"])
        self.assertEqual(status["winner"], "2")

    def test_game_over_blocks_rolls(self):
        self.p2.money = 5000
        self.roll(1, 2)
        self.assertEqual(self.game.winner_id, "2")
        self.assertFalse(self.game.roll_dice()[0])

    def test_status_while_running(self):
        status = self.game.get_game_status()
        self.assertEqual(status["active_players"], ["1", "2", "3"])
        self.assertFalse(status["game_ended"])
        self.assertIsNone(status["winner"])


class TestResetAndSerialization(EngineTestCase):

    def test_reset_game(self):
        self.roll(1, 2)
        self.game.buy_property()
        give_property(self.game, "2", 15)
        self.game.send_buy_request("3", "2", 15)

        self.game.reset_game(number_of_players=4)
        self.assertEqual(len(self.game.players), 4)
        self.assertEqual(self.game.current_player.id, "1")
        self.assertEqual(self.game.phase, GamePhase.ROLL)
        self.assertFalse(self.game.game_in_progress)
        self.assertEqual(self.game.trades.requests, [])
        self.assertFalse(any(s.is_owned for s in self.game.board.spaces))
        self.assertEqual([e.event_type for e in self.game.events], ["game_reset"])
        for player in self.game.players.values():
            self.assertEqual(player.money, STARTING_MONEY)
            self.assertEqual(player.properties, set())

    def test_round_trip(self):
        give_property(self.game, "2", 15)
        success, _, request = self.game.send_buy_request("1", "2", 15)
        self.assertTrue(success)
        use_action_card(self.game, ActionEffect.PAY_MONEY, 75)
        self.roll(1, 3)

        data = json.loads(json.dumps(self.game.to_dict()))
        restored = Game.from_dict(data)

        self.assertEqual(restored.id, self.game.id)
        self.assertEqual(restored.phase, GamePhase.ACTION_CARD)
        self.assertEqual(restored.pending_action_card.id, "t1")
        self.assertEqual(restored.board.get_property_owner(15), "2")
        self.assertEqual(restored.players["1"].locked_money, 220)
        self.assertEqual(restored.trades.get(request.id).amount, 220)
        self.assertTrue(restored.game_in_progress)

        restored.acknowledge_action_card()
        self.assertEqual(restored.players["1"].money, STARTING_MONEY - 75)

    def test_state_snapshot(self):
        self.roll(1, 2)
        state = self.game.get_state()
        self.assertEqual(state["phase"], "ACTIONS")
        self.assertTrue(state["can_buy"])
        self.assertEqual(state["last_dice_roll"]["total"], 3)
        self.assertEqual(len(state["players"]), 3)


def run_tests():
    """Run all engine tests."""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    test_classes = [
        TestGameSetup,
        TestRollAndMove,
        TestLandingEffects,
        TestBuyProperty,
        TestWinConditions,
        TestResetAndSerialization,
    ]

    for test_class in test_classes:
        suite.addTests(loader.loadTestsFromTestCase(test_class))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return result.wasSuccessful()


if __name__ == "__main__":
    success = run_tests()
    sys.exit(0 if success else 1)
