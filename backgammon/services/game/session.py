"""Game session: a game played between two players.

Pairs a Game with the players sitting at each side and drives the turns of
computer players through the search orchestrator.
"""

import logging
import random

from backgammon.config import Settings, get_settings
from backgammon.schemas.game_engine import GameStatus, PlayerAttributes, PlayerType, Side
from backgammon.services.search import (
    MCTSEngine,
    SearchOrchestrator,
    SearchOutcome,
    SearchResult,
    SearchSnapshot,
)

from .engine import Game, ProcessResult, has_any_legal_moves

logger = logging.getLogger(__name__)


def validate_players(players: list[PlayerAttributes]) -> None:
    """Check that exactly one player sits at each side.

    Raises:
        ValueError: If the players don't cover both sides exactly once.
    """
    sides = sorted(p.side for p in players)
    if sides != [Side.WHITE, Side.BLACK]:
        raise ValueError(
            f"A game needs one WHITE and one BLACK player, got {[s.name for s in sides]}"
        )


class GameSession:
    """Runs a game between two players, searching moves for computer players."""

    def __init__(
        self,
        players: list[PlayerAttributes],
        game: Game | None = None,
        engine: MCTSEngine | None = None,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ):
        validate_players(players)
        self._settings = settings or get_settings()
        self._rng = rng or random.Random(self._settings.RANDOM_SEED)
        self._players = {p.side: p for p in players}

        self.game = game or Game(rng=self._rng)

        if engine is None:
            engine = MCTSEngine.from_settings(
                self._settings, rng=random.Random(self._rng.getrandbits(64))
            )
        self.orchestrator = SearchOrchestrator(engine, callback=self._apply_search_result)
        self._last_applied = False

        logger.info(
            "Session created: white=%s (%s), black=%s (%s)",
            self._players[Side.WHITE].name,
            self._players[Side.WHITE].player_type.value,
            self._players[Side.BLACK].name,
            self._players[Side.BLACK].player_type.value,
        )

    @property
    def players(self) -> list[PlayerAttributes]:
        return [self._players[Side.WHITE], self._players[Side.BLACK]]

    @property
    def current_player(self) -> PlayerAttributes:
        return self._players[self.game.turn]

    def new_game(self) -> Game:
        """Start a new game between the same players."""
        self.game = Game(rng=self._rng)
        logger.info("New game started")
        return self.game

    def move(self, start: int, end: int) -> ProcessResult:
        """Play a validated move for the side to move."""
        return self.game.move(start, end)

    def undo(self) -> ProcessResult:
        return self.game.undo()

    async def tick(self) -> None:
        """Play computer turns until a human is to move or the game ends."""
        while (
            self.game.state == GameStatus.IN_PROGRESS
            and self.current_player.player_type == PlayerType.COMPUTER
        ):
            game = self.game
            if not has_any_legal_moves(game.board, game.turn, game.dice):
                game.next()
                continue

            self._last_applied = False
            result = await self.orchestrator.submit(game.board, game.turn, game.dice)

            if not self._last_applied and self.game is game:
                # Moves exist but none were played: give the turn away
                logger.warning(
                    "Search produced no playable move: outcome=%s, side=%s",
                    result.outcome.value,
                    game.turn.name,
                )
                game.forfeit_turn()

    def _apply_search_result(self, snapshot: SearchSnapshot, result: SearchResult) -> None:
        """Replay a searched play on the live game."""
        if result.outcome != SearchOutcome.MOVE_FOUND:
            logger.info(
                "No move to apply: outcome=%s, error=%s",
                result.outcome.value,
                result.error_message,
            )
            return

        game = self.game
        if tuple(game.board) != snapshot.board or tuple(game.dice) != snapshot.dice:
            logger.warning("Ignoring stale search result: position changed during search")
            return

        for move in result.moves:
            outcome = game.move(move.start, move.end)
            if not outcome.success:
                logger.error(
                    "Searched move rejected: %d -> %d, code=%s",
                    move.start,
                    move.end,
                    outcome.error_code,
                )
                break
            self._last_applied = True
