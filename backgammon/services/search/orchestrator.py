"""Runs searches off the event loop and delivers their results."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from backgammon.schemas.game_engine import Move, Play

from .mcts import MCTSEngine

logger = logging.getLogger(__name__)


class SearchOutcome(str, Enum):
    MOVE_FOUND = "move_found"
    NO_MOVE = "no_move"
    ERROR = "error"


@dataclass(frozen=True)
class SearchSnapshot:
    """Immutable copy of the position a search was submitted for."""

    board: tuple[int, ...]
    direction: int
    dice: tuple[int, ...]


@dataclass
class SearchResult:
    """Result of one submitted search.

    An ERROR result carries the failure message; consumers treat it like
    NO_MOVE and give the turn away.
    """

    outcome: SearchOutcome
    moves: Play = ()
    error_message: str | None = None

    @classmethod
    def ok(cls, moves: Play) -> "SearchResult":
        """Create a result from a play; an empty play means no move."""
        if not moves:
            return cls(outcome=SearchOutcome.NO_MOVE)
        return cls(outcome=SearchOutcome.MOVE_FOUND, moves=tuple(moves))

    @classmethod
    def failure(cls, message: str) -> "SearchResult":
        """Create an error result with the failure message."""
        return cls(outcome=SearchOutcome.ERROR, error_message=message)

    @property
    def move(self) -> Move | None:
        """First move of the play, if any."""
        return self.moves[0] if self.moves else None


SearchCallback = Callable[[SearchSnapshot, SearchResult], None]


class SearchOrchestrator:
    """Submits positions to an MCTSEngine without blocking the caller.

    Searches run one at a time in a worker thread. Every submission produces
    exactly one result, handed to the registered callback together with the
    snapshot it was computed for.
    """

    def __init__(self, engine: MCTSEngine, callback: SearchCallback | None = None):
        self._engine = engine
        self._callback = callback
        self._lock = asyncio.Lock()
        self._submissions = 0

    @property
    def engine(self) -> MCTSEngine:
        return self._engine

    def register_callback(self, callback: SearchCallback) -> None:
        self._callback = callback

    async def submit(
        self, board: Sequence[int], direction: int, dice: Sequence[int]
    ) -> SearchResult:
        """Search a copy of the position and deliver the result.

        Args:
            board: Board to search; copied before the search starts.
            direction: Side to move.
            dice: Dice rolled for the turn; copied as well.

        Returns:
            The SearchResult that was also passed to the callback.
        """
        snapshot = SearchSnapshot(
            board=tuple(board),
            direction=int(direction),
            dice=tuple(dice),
        )

        async with self._lock:
            self._submissions += 1
            submission = self._submissions
            logger.info(
                "Search submitted: id=%d, direction=%d, dice=%s",
                submission,
                snapshot.direction,
                list(snapshot.dice),
            )

            try:
                moves = await asyncio.to_thread(
                    self._engine.search,
                    list(snapshot.board),
                    snapshot.direction,
                    list(snapshot.dice),
                )
                result = SearchResult.ok(moves)
            except Exception as e:
                logger.exception("Search failed: id=%d, error=%s", submission, e)
                result = SearchResult.failure(str(e) or type(e).__name__)

            logger.info(
                "Search completed: id=%d, outcome=%s, moves=%d",
                submission,
                result.outcome.value,
                len(result.moves),
            )

            if self._callback is not None:
                self._callback(snapshot, result)
            else:
                logger.debug("No callback registered for search %d", submission)

        return result
