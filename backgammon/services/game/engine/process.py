"""Game state machine.

This module provides the live game consumers interact with:
- Game owns the board, the remaining dice, the turn and the undo history
- move() / next() / forfeit_turn() / undo() / roll() mutate it and return a
  ProcessResult with the emitted events
- check_win_condition() derives the game status from any board
"""

import logging
import random
from collections.abc import Sequence

from backgammon.schemas.game_engine import GameStatus, Play, Side

from .board import (
    BOARD_SIZE,
    STARTING_BOARD,
    apply_move,
    bar_index,
    borne_off,
    checkers_on_board,
    exit_index,
    is_hit,
    point_direction,
)
from .events import (
    AnyGameEvent,
    CheckerBorneOff,
    CheckerHit,
    CheckerMoved,
    DiceRolled,
    GameEnded,
    TurnEnded,
    TurnUndone,
)
from .legal_moves import get_all_plays, get_legal_moves, get_movable_checkers, has_any_legal_moves
from .rolling import consume_die, roll_dice
from .validation import ProcessResult, validate_move

logger = logging.getLogger(__name__)

# WHITE opens the game
TURN_ORDER = (Side.WHITE, Side.BLACK)


def check_win_condition(board: Sequence[int]) -> GameStatus:
    """Check if either side has won.

    A side wins once it has no checkers left on the board.

    Args:
        board: Board to inspect.

    Returns:
        The derived game status.
    """
    whites = checkers_on_board(board, Side.WHITE)
    blacks = checkers_on_board(board, Side.BLACK)
    logger.debug("Win check: whites=%d, blacks=%d", whites, blacks)

    if whites == 0:
        return GameStatus.WIN_WHITE
    if blacks == 0:
        return GameStatus.WIN_BLACK
    return GameStatus.IN_PROGRESS


class Game:
    """A single backgammon game.

    The turn is derived from the depth of the history: every finished or
    skipped turn pushes one snapshot, so undoing a turn also hands it back to
    the side that played it. Snapshots carry the borne-off counts along with
    the board.
    """

    def __init__(
        self,
        board: Sequence[int] | None = None,
        dice: Sequence[int] | None = None,
        rng: random.Random | None = None,
        first_turn: Side = TURN_ORDER[0],
    ):
        self._rng = rng or random.Random()
        self._board: list[int] = list(board) if board is not None else list(STARTING_BOARD)
        if len(self._board) != BOARD_SIZE:
            raise ValueError(f"Board must have {BOARD_SIZE} slots, got {len(self._board)}")

        self._first_turn = Side(first_turn)
        # Checkers missing from the starting board count as already borne off
        self._borne_off = {side: borne_off(self._board, side) for side in TURN_ORDER}
        self._history: list[tuple[list[int], dict[Side, int]]] = []
        self._turn_start = (list(self._board), dict(self._borne_off))
        self._dice: list[int] = list(dice) if dice is not None else roll_dice(self._rng)
        self._event_seq = 0

        logger.info(
            "Game created: first_turn=%s, dice=%s",
            self._first_turn.name,
            self._dice,
        )

    # Accessors

    @property
    def board(self) -> list[int]:
        return list(self._board)

    @property
    def dice(self) -> list[int]:
        return list(self._dice)

    @property
    def turn(self) -> Side:
        """Side to move."""
        if len(self._history) % 2 == 0:
            return self._first_turn
        return Side(-self._first_turn)

    @property
    def history_depth(self) -> int:
        return len(self._history)

    def borne_off_count(self, side: Side) -> int:
        """Checkers the side has borne off, counted as they leave the board."""
        return self._borne_off[Side(side)]

    @property
    def event_seq(self) -> int:
        return self._event_seq

    @property
    def state(self) -> GameStatus:
        return check_win_condition(self._board)

    def get_moves(self, start: int) -> set[int]:
        """Legal destinations of the checker at start for the side to move."""
        if self.state != GameStatus.IN_PROGRESS:
            return set()
        return get_legal_moves(self._board, self.turn, self._dice, start)

    def get_movable_checkers(self) -> list[int]:
        """Per-slot legal move counts; all zeros means the turn must be skipped."""
        if self.state != GameStatus.IN_PROGRESS:
            return [0] * BOARD_SIZE
        return get_movable_checkers(self._board, self.turn, self._dice)

    def get_all_plays(self) -> list[Play]:
        return get_all_plays(self._board, self.turn, self._dice)

    # Operations

    def move(self, start: int, end: int, validate: bool = True) -> ProcessResult:
        """Move a checker, consume its die and end the turn once the dice are used.

        Args:
            start: Slot the checker is taken from.
            end: Slot the checker is dropped on.
            validate: Check the move against the legal moves first. Callers
                that already validated the move may skip it.

        Returns:
            ProcessResult with the emitted events, or a failure with
            ILLEGAL_MOVE / GAME_FINISHED when validation rejects the move.
        """
        side = self.turn
        logger.info(
            "Processing move: side=%s, start=%d, end=%d, dice=%s",
            side.name,
            start,
            end,
            self._dice,
        )

        if validate:
            legal_ends = self.get_moves(start) if 0 <= start < BOARD_SIZE else set()
            validation = validate_move(self._board, self.state, legal_ends, start, end)
            if not validation.is_valid:
                logger.warning(
                    "Move rejected: code=%s, message=%s, side=%s",
                    validation.error_code,
                    validation.error_message,
                    side.name,
                )
                return ProcessResult.failure(
                    validation.error_code or "ILLEGAL_MOVE",
                    validation.error_message or "Invalid move",
                )

        if start == end:
            return ProcessResult.ok()

        events: list[AnyGameEvent] = []
        mover = point_direction(self._board, start)
        hit = is_hit(self._board, start, end)

        remaining = consume_die(self._dice, start, end)
        die_used = sum(self._dice) - sum(remaining)
        self._dice = remaining
        self._board = apply_move(self._board, start, end)

        events.append(CheckerMoved(side=Side(mover), start=start, end=end, die_used=die_used))

        if hit:
            logger.info("Checker hit: point=%d, side=%s", end, Side(-mover).name)
            events.append(CheckerHit(side=Side(-mover), point=end, bar=bar_index(-mover)))

        if end == exit_index(mover):
            self._borne_off[Side(mover)] += 1
            off = self._borne_off[Side(mover)]
            logger.info("Checker borne off: side=%s, borne_off=%d", Side(mover).name, off)
            events.append(CheckerBorneOff(side=Side(mover), start=start, borne_off=off))

        status = self.state
        if status != GameStatus.IN_PROGRESS:
            winner = Side.BLACK if status == GameStatus.WIN_BLACK else Side.WHITE
            logger.info("Game ended: winner=%s", winner.name)
            self._dice = []
            events.append(GameEnded(winner=winner, status=status))
        elif not self._dice:
            events.extend(self._end_turn("dice_used"))

        return self._finish(events)

    def next(self) -> ProcessResult:
        """Skip the turn when the side to move has no legal move.

        Does nothing while any checker can move.
        """
        if self.state != GameStatus.IN_PROGRESS:
            return ProcessResult.ok()

        if has_any_legal_moves(self._board, self.turn, self._dice):
            logger.debug("Turn not skipped: side=%s still has moves", self.turn.name)
            return ProcessResult.ok()

        logger.info("No legal moves available: side=%s, dice=%s", self.turn.name, self._dice)
        return self._finish(self._end_turn("no_legal_moves"))

    def forfeit_turn(self) -> ProcessResult:
        """Give the turn away regardless of the remaining moves."""
        if self.state != GameStatus.IN_PROGRESS:
            return ProcessResult.ok()

        logger.info("Turn forfeited: side=%s, dice=%s", self.turn.name, self._dice)
        return self._finish(self._end_turn("forfeit"))

    def undo(self) -> ProcessResult:
        """Restore the board as it was before the last finished turn and re-roll."""
        if not self._history:
            logger.debug("Nothing to undo")
            return ProcessResult.ok()

        board, counts = self._history.pop()
        self._board = list(board)
        self._borne_off = dict(counts)
        self._turn_start = (list(self._board), dict(self._borne_off))
        self._dice = roll_dice(self._rng)

        logger.info("Turn undone: side=%s, history_depth=%d", self.turn.name, len(self._history))
        events: list[AnyGameEvent] = [
            TurnUndone(side=self.turn),
            DiceRolled(side=self.turn, dice=list(self._dice)),
        ]
        return self._finish(events)

    def roll(self) -> ProcessResult:
        """Replace the remaining dice with a fresh roll."""
        self._dice = roll_dice(self._rng)
        logger.info("Dice rolled: side=%s, dice=%s", self.turn.name, self._dice)
        return self._finish([DiceRolled(side=self.turn, dice=list(self._dice))])

    # Helpers

    def _end_turn(self, reason: str) -> list[AnyGameEvent]:
        side = self.turn
        self._history.append(self._turn_start)
        self._turn_start = (list(self._board), dict(self._borne_off))
        self._dice = roll_dice(self._rng)

        logger.info(
            "Turn ended: side=%s, reason=%s, next_side=%s, dice=%s",
            side.name,
            reason,
            self.turn.name,
            self._dice,
        )
        return [
            TurnEnded(side=side, reason=reason, next_side=self.turn),
            DiceRolled(side=self.turn, dice=list(self._dice)),
        ]

    def _finish(self, events: list[AnyGameEvent]) -> ProcessResult:
        """Assign monotonically increasing sequence numbers to events."""
        for event in events:
            event.seq = self._event_seq
            self._event_seq += 1

        logger.debug("Generated events: %s", [type(e).__name__ for e in events])
        return ProcessResult.ok(events)
