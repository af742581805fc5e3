"""Board layout and primitive board operations.

The board is a list of 26 signed integers. Slots 1-24 are the points, slot 0
is BLACK's bar and slot 25 is WHITE's bar. Positive values are BLACK checkers
(moving towards 24), negative values are WHITE checkers (moving towards 1).

A side bears off by moving onto its exit slot, which is the opponent's bar
index. Borne-off checkers leave the board and are not stored.
"""

from collections.abc import Iterable, Sequence

from backgammon.schemas.game_engine import Move, Side

BOARD_SIZE = 26
CHECKERS_PER_SIDE = 15
HOME_SIZE = 6

STARTING_BOARD: tuple[int, ...] = (
    0, 2, 0, 0, 0, 0, -5, 0, -3, 0, 0, 0, 5,
    -5, 0, 0, 0, 3, 0, 5, 0, 0, 0, 0, -2, 0,
)


def point_direction(board: Sequence[int], index: int) -> int:
    """Return +1/-1 for the owner of the slot, 0 when it is empty."""
    checkers = board[index]
    if checkers == 0:
        return 0
    return 1 if checkers > 0 else -1


def bar_index(direction: int) -> int:
    """Index of the bar slot of the side moving in the given direction."""
    return 0 if direction > 0 else 25


def exit_index(direction: int) -> int:
    """Index a side bears off to (the opponent's bar slot)."""
    return 25 - bar_index(direction)


def home_points(direction: int) -> range:
    """The six points closest to the side's exit."""
    if direction > 0:
        return range(25 - HOME_SIZE, 25)
    return range(1, HOME_SIZE + 1)


def distance_to_exit(direction: int, index: int) -> int:
    return abs(exit_index(direction) - index)


def owned_points(board: Sequence[int], direction: int) -> list[int]:
    """Slots holding at least one checker of the given side."""
    return [i for i in range(BOARD_SIZE) if board[i] * direction > 0]


def checkers_on_board(board: Sequence[int], direction: int) -> int:
    """Number of checkers the side still has on the board, bar included."""
    return sum(abs(c) for c in board if c * direction > 0)


def borne_off(board: Sequence[int], direction: int) -> int:
    return CHECKERS_PER_SIDE - checkers_on_board(board, direction)


def total_checkers(
    board: Sequence[int], borne_off_black: int = 0, borne_off_white: int = 0
) -> int:
    """Checkers on the board plus the given counts of borne-off checkers.

    The borne-off counts are tracked outside the board (see Game.borne_off_count),
    so a checker lost from the board shows up as a total below 30.
    """
    return sum(abs(c) for c in board) + borne_off_black + borne_off_white


def furthest_checker(board: Sequence[int], direction: int) -> int | None:
    """Slot of the side's checker furthest from its exit, bar included."""
    points = owned_points(board, direction)
    if not points:
        return None
    return max(points, key=lambda i: distance_to_exit(direction, i))


def apply_move(board: Sequence[int], start: int, end: int) -> list[int]:
    """Perform a move on a copy of the board and return the copy.

    Landing on a lone opposing checker sends it to its owner's bar. Moving to
    the exit slot removes the checker from the board.
    """
    new_board = list(board)
    if start == end:
        return new_board

    direction = point_direction(new_board, start)
    new_board[start] -= direction

    if 0 < end < 25:
        if new_board[end] * direction >= 0:
            new_board[end] += direction
        else:
            # Hit: the lone opposing checker goes to its own bar
            new_board[bar_index(-direction)] -= direction
            new_board[end] = direction

    return new_board


def is_hit(board: Sequence[int], start: int, end: int) -> bool:
    """Tell whether the move lands on a lone opposing checker."""
    if not 0 < end < 25:
        return False
    return board[start] * board[end] < 0 and abs(board[end]) == 1


def apply_play(board: Sequence[int], play: Iterable[Move]) -> list[int]:
    """Apply a sequence of moves in order on a copy of the board."""
    new_board = list(board)
    for move in play:
        new_board = apply_move(new_board, move.start, move.end)
    return new_board


def winning_side(board: Sequence[int]) -> int | None:
    """Direction of the side with no checkers left, None while both play on."""
    if not any(c < 0 for c in board):
        return Side.WHITE
    if not any(c > 0 for c in board):
        return Side.BLACK
    return None
