"""Dice rolling and die consumption."""

import logging
import random
from collections.abc import Sequence

logger = logging.getLogger(__name__)

DIE_FACES = 6


def roll_dice(rng: random.Random) -> list[int]:
    """Roll two dice; doubles are played four times."""
    first = rng.randint(1, DIE_FACES)
    second = rng.randint(1, DIE_FACES)

    if first == second:
        dice = [first] * 4
    else:
        dice = [first, second]

    logger.debug("Dice rolled: %s", dice)
    return dice


def consume_die(dice: Sequence[int], start: int, end: int) -> list[int]:
    """Return the dice left after playing start -> end.

    The die matching the distance is used. When none matches, the move was an
    overshoot bear-off and the largest die is used instead.
    """
    remaining = list(dice)
    if not remaining:
        return remaining

    distance = abs(end - start)
    if distance in remaining:
        remaining.remove(distance)
    else:
        remaining.remove(max(remaining))
    return remaining
