"""
Headless entry point.

Plays a local game with a simple automatic policy for every seat and logs
what happens. Progress is saved after each move, so running it again
continues the stored game.

Usage:
    python -m custom_monopoly.main --turns 50
    python -m custom_monopoly.main --new --players 3 --seed 7
    python -m custom_monopoly.main --list
"""

import argparse
import logging
import random
import sys

from custom_monopoly.config import settings
from custom_monopoly.local import LocalGameSession
from custom_monopoly.persistence import GameRepository, init_database
from shared.enums import GamePhase
from shared.constants import MAX_PLAYERS, MIN_PLAYERS
from shared.game_settings import load_settings


logger = logging.getLogger(__name__)

# Keep this much spendable money after buying
CASH_RESERVE = 300


def setup_logging() -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def play_turn(session: LocalGameSession, rng: random.Random) -> None:
    """Play one full turn for the current player."""
    game = session.game
    player = game.current_player

    success, message, _ = session.roll_dice()
    logger.info(message)
    if not success or game.phase == GamePhase.ROLL:
        return

    while game.phase in (GamePhase.ACTION_CARD, GamePhase.QUESTION_CARD):
        if game.phase == GamePhase.ACTION_CARD:
            _, message = session.acknowledge_action_card()
        else:
            options = len(game.pending_question_card.options)
            _, message = session.answer_question(rng.randrange(options))
        logger.info(message)

    if game.phase == GamePhase.ROLL:
        # Extra turn
        return

    if game.can_buy_current_space():
        space = game.board.get_space(player.position)
        if player.spendable_money - space.price >= CASH_RESERVE:
            _, message = session.buy_property()
        else:
            _, message = session.decline_property()
        logger.info(message)

    if game.phase == GamePhase.ACTIONS:
        session.end_turn()


def list_games(repository: GameRepository) -> None:
    """Print the stored games, most recently updated first."""
    games = repository.list_games()
    if not games:
        print("No stored games")
    for game in games:
        print(f"{game.id}  {game.name}  {game.status}  {game.player_count} players  {game.updated_at}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Custom Monopoly without a UI")
    parser.add_argument("--turns", type=int, default=100, help="Maximum number of turns to play")
    parser.add_argument("--new", action="store_true", help="Discard the stored game and start over")
    parser.add_argument("--players", type=int, default=None, help="Number of players for a new game")
    parser.add_argument("--seed", type=int, default=settings.DICE_SEED, help="Seed for dice and cards")
    parser.add_argument("--db", default=None, help="SQLite database file")
    parser.add_argument("--settings", default=None, help="Board and card configuration (JSON)")
    parser.add_argument("--no-save", action="store_true", help="Do not write to the database")
    parser.add_argument("--game", default=None, help="Id of a stored game to resume")
    parser.add_argument("--list", action="store_true", help="List stored games and exit")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    setup_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.players is not None and not MIN_PLAYERS <= args.players <= MAX_PLAYERS:
        parser.error(f"--players must be between {MIN_PLAYERS} and {MAX_PLAYERS}")

    game_settings = load_settings(args.settings) if args.settings else settings.load_game_settings()
    problems = game_settings.validate()
    if problems:
        for problem in problems:
            logger.error(f"Invalid settings: {problem}")
        return 1

    settings.ensure_directories()
    repository = GameRepository(init_database(args.db))

    if args.list:
        list_games(repository)
        return 0

    session = LocalGameSession(
        repository=repository,
        game_settings=game_settings,
        autosave=not args.no_save,
        seed=args.seed,
    )

    session.load_or_create(args.game)
    if args.new or args.players:
        session.reset_game(args.players)

    rng = random.Random(args.seed)
    for _ in range(args.turns):
        if session.game.is_game_over:
            break
        play_turn(session, rng)

    status = session.get_game_status()
    for player in session.game.ordered_players:
        print(
            f"{player.name}: ${player.money} "
            f"({len(player.properties)} properties, position {player.position})"
        )
    if status["winner"]:
        print(f"Winner: {session.game.players[status['winner']].name}")
    else:
        print(f"No winner after turn {session.game.turn_number}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
