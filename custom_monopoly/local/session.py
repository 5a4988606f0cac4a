"""
Local game session.

Wraps the game engine for hot-seat play on one machine. Every successful
operation is followed by a save, so a restarted process picks up where the
last one stopped.
"""

import json
import logging
import sqlite3
from datetime import datetime, timezone
from typing import Optional

from custom_monopoly.config import settings as config
from custom_monopoly.game_engine import BuyRequest, DiceResult, Game
from custom_monopoly.persistence import (
    BuyRequestRecord,
    GameRecord,
    GameRepository,
    PlayerRecord,
)
from shared.game_settings import GameSettings


logger = logging.getLogger(__name__)


class LocalGameSession:
    """
    Hot-seat session around a single ``Game``.

    Operations mirror the engine's and return the engine's results unchanged.
    """

    def __init__(
        self,
        repository: GameRepository | None = None,
        game_settings: GameSettings | None = None,
        autosave: bool | None = None,
        seed: int | None = None,
        keep_snapshots: int = 10,
    ):
        self._repository = repository or GameRepository()
        self._settings = game_settings
        self.autosave = config.AUTOSAVE if autosave is None else autosave
        self._seed = seed if seed is not None else config.DICE_SEED
        self._keep_snapshots = keep_snapshots
        self._game: Optional[Game] = None

    @property
    def game(self) -> Game:
        """The current game, created on first access."""
        if self._game is None:
            self.load_or_create()
        return self._game

    # =========================================================================
    # Setup
    # =========================================================================

    def load_or_create(self, game_id: str | None = None) -> Game:
        """
        Resume the given game, or the most recently saved one, or start a
        new game if nothing is stored.
        """
        game_id = game_id or self._repository.get_most_recent_game_id()
        game = self._load(game_id) if game_id else None

        if game is None:
            game = Game(
                settings=self._settings or config.load_game_settings(),
                seed=self._seed,
            )
            logger.info(f"Started new game {game.id} with {len(game.players)} players")
            self._game = game
            self._autosave()
        else:
            self._game = game

        return self._game

    def _load(self, game_id: str) -> Game | None:
        stored = self._repository.load_full_game(game_id)
        if stored is None:
            logger.warning(f"No stored game {game_id}")
            return None

        snapshot = stored["latest_snapshot"]
        if snapshot is None:
            logger.warning(f"Stored game {game_id} has no snapshot to resume from")
            return None

        game = Game.from_dict(snapshot.state)
        logger.info(f"Game {game_id} loaded from turn {snapshot.turn_number}")
        return game

    def save(self) -> bool:
        """
        Write the game to the database.

        Returns:
            True if saved. Database errors are logged, not raised, so play
            can continue.
        """
        game = self.game
        try:
            self._repository.save_full_game(
                game=GameRecord(
                    id=game.id,
                    name=game.name,
                    status=game.phase.value,
                    current_player_index=game.current_player_index,
                    turn_number=game.turn_number,
                    game_in_progress=game.game_in_progress,
                    finished_at=(
                        datetime.now(timezone.utc).isoformat() if game.winner_id else None
                    ),
                    winner_id=game.winner_id,
                    settings_json=json.dumps(game.settings.to_dict()),
                ),
                players=[
                    PlayerRecord(
                        id=player.id,
                        game_id=game.id,
                        name=player.name,
                        color=player.color,
                        turn_order=index,
                        position=player.position,
                        money=player.money,
                        locked_money=player.locked_money,
                        properties=sorted(player.properties),
                        skip_next_turn=player.skip_next_turn,
                    )
                    for index, player in enumerate(game.ordered_players)
                ],
                buy_requests=[
                    BuyRequestRecord(
                        id=request.id,
                        game_id=game.id,
                        from_player_id=request.from_player_id,
                        to_player_id=request.to_player_id,
                        property_id=request.property_id,
                        amount=request.amount,
                        status=request.status.value,
                        created_at=request.created_at,
                    )
                    for request in game.trades.requests
                ],
                state_snapshot=game.to_dict(),
            )
            self._repository.cleanup_old_snapshots(game.id, self._keep_snapshots)
        except sqlite3.Error as e:
            logger.error(f"Failed to save game {game.id}: {e}")
            return False

        logger.debug(f"Game {game.id} saved at turn {game.turn_number}")
        return True

    def _autosave(self) -> None:
        if self.autosave:
            self.save()

    def _after(self, success: bool) -> None:
        if success:
            self._autosave()

    # =========================================================================
    # Game Actions
    # =========================================================================

    def roll_dice(self) -> tuple[bool, str, Optional[DiceResult]]:
        success, message, result = self.game.roll_dice()
        self._after(success)
        return success, message, result

    def buy_property(self) -> tuple[bool, str]:
        success, message = self.game.buy_property()
        self._after(success)
        return success, message

    def decline_property(self) -> tuple[bool, str]:
        success, message = self.game.decline_property()
        self._after(success)
        return success, message

    def send_buy_request(
        self,
        from_player_id: str,
        to_player_id: str,
        property_id: int,
    ) -> tuple[bool, str, Optional[BuyRequest]]:
        success, message, request = self.game.send_buy_request(
            from_player_id, to_player_id, property_id
        )
        self._after(success)
        return success, message, request

    def respond_to_buy_request(
        self,
        request_id: str,
        accept: bool,
        player_id: Optional[str] = None,
    ) -> tuple[bool, str]:
        success, message = self.game.respond_to_buy_request(request_id, accept, player_id)
        self._after(success)
        return success, message

    def cancel_buy_request(
        self,
        request_id: str,
        player_id: Optional[str] = None,
    ) -> tuple[bool, str]:
        success, message = self.game.cancel_buy_request(request_id, player_id)
        self._after(success)
        return success, message

    def acknowledge_action_card(self, card_id: Optional[str] = None) -> tuple[bool, str]:
        success, message = self.game.acknowledge_action_card(card_id=card_id)
        self._after(success)
        return success, message

    def answer_question(
        self,
        selected_answer: int,
        card_id: Optional[str] = None,
    ) -> tuple[bool, str]:
        success, message = self.game.answer_question(selected_answer, card_id=card_id)
        self._after(success)
        return success, message

    def end_turn(self) -> tuple[bool, str]:
        success, message = self.game.end_turn()
        self._after(success)
        return success, message

    def reset_game(self, number_of_players: Optional[int] = None) -> None:
        """Forget the stored game and start over with fresh players."""
        game = self.game
        game.reset_game(number_of_players)
        try:
            self._repository.delete_game(game.id)
        except sqlite3.Error as e:
            logger.error(f"Failed to delete stored game {game.id}: {e}")

    # =========================================================================
    # Queries
    # =========================================================================

    def get_state(self) -> dict:
        state = self.game.get_state()
        state["is_local_game"] = True
        return state

    def get_game_status(self) -> dict:
        return self.game.get_game_status()
