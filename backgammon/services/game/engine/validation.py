"""Move legality and the ProcessResult pattern.

Separates legality from processing logic:
- is_move_valid() / is_possible_move() are the pure legality predicates
- validate_move() checks a requested move against the current game state
- ProcessResult replaces exceptions for control flow
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from functools import lru_cache

from backgammon.schemas.game_engine import GameStatus

from .board import (
    BOARD_SIZE,
    apply_move,
    bar_index,
    exit_index,
    home_points,
    point_direction,
)
from .events import AnyGameEvent

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Result of a game state transition.

    Replaces exceptions for control flow, providing explicit success/failure
    with error codes a consumer can map to its own messages.
    """

    events: list[AnyGameEvent] = field(default_factory=list)
    success: bool = True
    error_code: str | None = None
    error_message: str | None = None

    @classmethod
    def ok(cls, events: list[AnyGameEvent] | None = None) -> "ProcessResult":
        """Create a successful result with the emitted events."""
        return cls(events=events or [], success=True)

    @classmethod
    def failure(cls, code: str, message: str) -> "ProcessResult":
        """Create a failure result with error details."""
        return cls(
            events=[],
            success=False,
            error_code=code,
            error_message=message,
        )


@dataclass
class ValidationResult:
    """Result of validating a move before processing."""

    is_valid: bool = True
    error_code: str | None = None
    error_message: str | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(is_valid=True)

    @classmethod
    def error(cls, code: str, message: str) -> "ValidationResult":
        """Create a validation failure with error details."""
        return cls(
            is_valid=False,
            error_code=code,
            error_message=message,
        )


def can_bear_off(board: Sequence[int], direction: int) -> bool:
    """Tell whether every checker of the side is inside its home hexant."""
    home = home_points(direction)
    for index in range(BOARD_SIZE):
        if board[index] * direction > 0 and index not in home:
            return False
    return True


def is_move_valid(board: Sequence[int], start: int, end: int) -> bool:
    """Tell whether a single move is legal, ignoring the dice.

    A move is legal if:
    - The slot at start holds a checker moving in the direction of the move
    - The mover's bar is empty, or the move starts from the bar
    - The end stays on the board; moving to the exit slot bears off and
      needs every checker of the side at home
    - The destination is not blocked by two or more opposing checkers
    """
    if start == end:
        return False

    direction = 1 if end > start else -1

    # Take from the right pile
    if point_direction(board, start) != direction:
        return False

    # Checkers on the bar must come in first
    bar = bar_index(direction)
    if board[bar] != 0 and start != bar:
        return False

    if end < 0 or end >= BOARD_SIZE:
        return False

    if end == exit_index(direction):
        return can_bear_off(board, direction)

    # A lone opposing checker can be hit, a made point cannot
    return board[end] * direction >= -1


def is_possible_move(
    board: Sequence[int], start: int, end: int, remaining_dice: Sequence[int]
) -> bool:
    """Tell whether a move is legal and still lets the side use every remaining die.

    The remaining dice may be played in any order and by any checkers.
    """
    if not is_move_valid(board, start, end):
        return False

    if not remaining_dice:
        return True

    direction = 1 if end > start else -1
    return can_use_all_dice(apply_move(board, start, end), direction, remaining_dice)


def can_use_all_dice(board: Sequence[int], direction: int, dice: Sequence[int]) -> bool:
    """Tell whether some ordering of the dice can be played in full by the side."""
    return _can_use_all_dice(tuple(board), direction, tuple(sorted(dice)))


@lru_cache(maxsize=1 << 16)
def _can_use_all_dice(board: tuple[int, ...], direction: int, dice: tuple[int, ...]) -> bool:
    """Backtrack over die choices and checkers until every die is played."""
    if not dice:
        return True

    for die in sorted(set(dice), reverse=True):
        index = dice.index(die)
        rest = dice[:index] + dice[index + 1:]

        for point in range(BOARD_SIZE):
            if board[point] * direction <= 0:
                continue

            end = point + die * direction
            if not is_move_valid(board, point, end):
                continue

            if _can_use_all_dice(tuple(apply_move(board, point, end)), direction, rest):
                return True

    return False


def validate_move(
    board: Sequence[int],
    status: GameStatus,
    legal_ends: set[int],
    start: int,
    end: int,
) -> ValidationResult:
    """Validate a requested move against the current game state.

    Checks:
    - The game is still in progress
    - Both indices are board slots
    - The destination is among the legal moves from start

    Args:
        board: Current board.
        status: Current game status.
        legal_ends: Legal destinations from start for the side to move.
        start: Slot the checker is taken from.
        end: Slot the checker is dropped on.

    Returns:
        ValidationResult indicating success or failure with error details.
    """
    logger.debug("Validating move: start=%d, end=%d, status=%s", start, end, status.value)

    if status != GameStatus.IN_PROGRESS:
        logger.warning("Validation failed: GAME_FINISHED, status=%s", status.value)
        return ValidationResult.error(
            "GAME_FINISHED",
            "Game has already finished",
        )

    if not (0 <= start < BOARD_SIZE and 0 <= end < BOARD_SIZE):
        logger.warning("Validation failed: ILLEGAL_MOVE, off-board indices %d -> %d", start, end)
        return ValidationResult.error(
            "ILLEGAL_MOVE",
            f"Move {start} -> {end} leaves the board",
        )

    if end not in legal_ends:
        logger.warning(
            "Validation failed: ILLEGAL_MOVE, requested=%d -> %d, legal_ends=%s, checkers=%d",
            start,
            end,
            sorted(legal_ends),
            board[start],
        )
        return ValidationResult.error(
            "ILLEGAL_MOVE",
            f"Move {start} -> {end} is not a legal move",
        )

    logger.debug("Move validated successfully: %d -> %d", start, end)
    return ValidationResult.ok()
