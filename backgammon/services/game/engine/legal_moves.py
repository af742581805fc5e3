"""Legal move calculation for checkers and complete plays."""

import logging
from collections.abc import Sequence

from backgammon.schemas.game_engine import Move, Play

from .board import (
    BOARD_SIZE,
    apply_move,
    distance_to_exit,
    exit_index,
    furthest_checker,
    owned_points,
    point_direction,
)
from .rolling import consume_die
from .validation import can_bear_off, can_use_all_dice, is_move_valid, is_possible_move

logger = logging.getLogger(__name__)


def get_legal_moves(
    board: Sequence[int], direction: int, dice: Sequence[int], start: int
) -> set[int]:
    """Determine where the side to move may move the checker at start.

    Rules are applied in this order:
    1. Moves after which every remaining die can still be played. If some
       other point has such a move but start does not, start has no moves.
    2. If no point can use all dice, a single die is played: the largest die
       that any checker can play, the smaller one only when the larger is
       unplayable everywhere. Any valid move with that die is accepted; with
       doubles this does not look for the move that keeps the most dice
       playable.
    3. If no die can be played exactly, the side's furthest checker may bear
       off with a die larger than its distance to the exit.

    Args:
        board: Current board.
        direction: Side to move (+1 or -1).
        dice: Remaining dice of the turn.
        start: Slot the checker is taken from.

    Returns:
        Set of legal destination slots.
    """
    moves: set[int] = set()

    if not dice or board[start] == 0:
        return moves

    # The other side's checkers can't be moved
    if point_direction(board, start) != direction:
        return moves

    moves = _full_dice_moves(board, direction, dice, start)
    if moves:
        return moves

    # Some other checker can use every die, so this one must wait
    if can_use_all_dice(board, direction, dice):
        return moves

    die = _largest_playable_die(board, direction, dice)
    if die is not None:
        end = start + die * direction
        if is_move_valid(board, start, end):
            moves.add(end)
        return moves

    if _can_overshoot_bear_off(board, direction, dice, start):
        moves.add(exit_index(direction))

    return moves


def _full_dice_moves(
    board: Sequence[int], direction: int, dice: Sequence[int], start: int
) -> set[int]:
    """Ends from start that keep every other die playable."""
    ends: set[int] = set()
    for die in set(dice):
        rest = list(dice)
        rest.remove(die)
        end = start + die * direction
        if is_possible_move(board, start, end, rest):
            ends.add(end)
    return ends


def _largest_playable_die(
    board: Sequence[int], direction: int, dice: Sequence[int]
) -> int | None:
    """Largest die some checker can play on its own, ignoring the other dice."""
    for die in sorted(set(dice), reverse=True):
        for point in owned_points(board, direction):
            if is_move_valid(board, point, point + die * direction):
                return die
    return None


def _can_overshoot_bear_off(
    board: Sequence[int], direction: int, dice: Sequence[int], start: int
) -> bool:
    """Tell whether start may bear off with a die larger than needed."""
    if not can_bear_off(board, direction):
        return False

    if furthest_checker(board, direction) != start:
        return False

    return distance_to_exit(direction, start) < max(dice)


def get_movable_checkers(
    board: Sequence[int], direction: int, dice: Sequence[int]
) -> list[int]:
    """Return how many legal moves there are from each slot of the board."""
    return [len(get_legal_moves(board, direction, dice, i)) for i in range(BOARD_SIZE)]


def has_any_legal_moves(board: Sequence[int], direction: int, dice: Sequence[int]) -> bool:
    """Quick check if the side has any legal move.

    Stops at the first point with a move instead of counting every point.
    """
    if not dice:
        return False

    for point in owned_points(board, direction):
        if get_legal_moves(board, direction, dice, point):
            return True
    return False


def play_key(play: Play) -> tuple[tuple[int, int], ...]:
    """Canonical key of a play: its moves sorted, ignoring their order."""
    return tuple(sorted(move.key for move in play))


def get_all_plays(board: Sequence[int], direction: int, dice: Sequence[int]) -> list[Play]:
    """Enumerate every complete play for a roll.

    Each legal first move is applied, its die consumed and the rest of the
    roll expanded recursively. A play ends when the dice run out or nothing
    more is legal. Plays with the same moves in a different order are
    collapsed into one.

    Returns:
        Plays sorted by their canonical key, or a single empty play when
        nothing can be played.
    """
    plays: dict[tuple[tuple[int, int], ...], Play] = {}
    seen: set[tuple[tuple[int, ...], tuple[int, ...]]] = set()

    _expand_plays(list(board), direction, list(dice), (), plays, seen)

    if not plays:
        logger.debug("No legal plays: direction=%d, dice=%s", direction, list(dice))
        return [()]

    logger.debug(
        "Enumerated plays: direction=%d, dice=%s, plays=%d",
        direction,
        list(dice),
        len(plays),
    )
    return [plays[key] for key in sorted(plays)]


def _expand_plays(
    board: list[int],
    direction: int,
    dice: list[int],
    prefix: Play,
    plays: dict[tuple[tuple[int, int], ...], Play],
    seen: set[tuple[tuple[int, ...], tuple[int, ...]]],
) -> None:
    # The same position with the same dice left has the same continuations
    state = (tuple(board), tuple(sorted(dice)))
    if state in seen:
        return
    seen.add(state)

    found = False
    for start in owned_points(board, direction):
        for end in sorted(get_legal_moves(board, direction, dice, start)):
            found = True
            play = prefix + (Move(start=start, end=end),)
            rest = consume_die(dice, start, end)

            if rest:
                _expand_plays(apply_move(board, start, end), direction, rest, play, plays, seen)
            else:
                plays.setdefault(play_key(play), play)

    if not found and prefix:
        plays.setdefault(play_key(prefix), prefix)
