"""Fast random playouts used to score leaves of the search tree.

The playout policy trades exactness for speed: each die is played by a random
checker that can legally move it on its own, without the backtracking that
forces full dice use. Bear-offs with a larger die than needed are allowed for
the side's furthest checker.
"""

import logging
import random
from collections.abc import Sequence

from backgammon.services.game.engine.board import (
    apply_move,
    distance_to_exit,
    exit_index,
    furthest_checker,
    owned_points,
    winning_side,
)
from backgammon.services.game.engine.rolling import roll_dice
from backgammon.services.game.engine.validation import can_bear_off, is_move_valid

logger = logging.getLogger(__name__)


def random_playout(
    board: Sequence[int],
    direction: int,
    rng: random.Random,
    max_plies: int,
) -> int | None:
    """Play random turns from board until one side has borne off every checker.

    Args:
        board: Starting board; it is not modified.
        direction: Side to move first.
        rng: Random source for dice and move choices.
        max_plies: Turn cap bounding the cost of a playout.

    Returns:
        Direction of the winning side, or None when the cap was reached.
    """
    current = list(board)
    side = direction

    winner = winning_side(current)
    if winner is not None:
        return winner

    for ply in range(max_plies):
        for die in roll_dice(rng):
            current = play_random_die(current, side, die, rng)
            if not any(c * side > 0 for c in current):
                logger.debug("Rollout finished: winner=%d, plies=%d", side, ply + 1)
                return side
        side = -side

    logger.debug("Rollout capped after %d plies", max_plies)
    return None


def play_random_die(
    board: list[int], direction: int, die: int, rng: random.Random
) -> list[int]:
    """Play one die with a randomly chosen checker, or pass if none can move it."""
    points = owned_points(board, direction)
    rng.shuffle(points)

    for start in points:
        end = start + die * direction
        if 0 <= end <= 25 and is_move_valid(board, start, end):
            return apply_move(board, start, end)

    # Overshoot: only the furthest checker may bear off with a larger die
    if can_bear_off(board, direction):
        start = furthest_checker(board, direction)
        if start is not None and distance_to_exit(direction, start) < die:
            return apply_move(board, start, exit_index(direction))

    return board
