"""Shared fixtures for game engine and search tests."""

import random

import pytest

from backgammon.config import Settings
from backgammon.schemas.game_engine import Side
from backgammon.services.game.engine import STARTING_BOARD, Game

BLACK = Side.BLACK
WHITE = Side.WHITE


class ScriptedRandom(random.Random):
    """Random source whose randint() returns scripted values in order."""

    def __init__(self, values: list[int]):
        super().__init__(0)
        self._values = list(values)

    def randint(self, a: int, b: int) -> int:
        if self._values:
            return self._values.pop(0)
        return super().randint(a, b)


def create_board(placements: dict[int, int]) -> list[int]:
    """Helper to create a board from {slot: signed checker count}."""
    board = [0] * 26
    for slot, checkers in placements.items():
        board[slot] = checkers
    return board


def create_game(
    placements: dict[int, int] | None = None,
    dice: list[int] | None = None,
    first_turn: Side = WHITE,
    seed: int = 7,
) -> Game:
    """Helper to create a game at a given position with fixed dice."""
    board = create_board(placements) if placements is not None else list(STARTING_BOARD)
    return Game(board=board, dice=dice, rng=random.Random(seed), first_turn=first_turn)


# Black has one checker on the bar, the rest on its 12 point
BAR_PLACEMENTS = {0: 1, 1: 1, 12: 5, 17: 3, 19: 5, 6: -5, 8: -3, 13: -5, 24: -2}

# Black to move with a lone checker that can only use the 3 (white holds 14 and 16)
FORCED_PLACEMENTS = {10: 1, 14: -2, 16: -2, 3: -11}

# Black is on the bar and both entry points for 6-5 are made by white
DANCE_PLACEMENTS = {0: 1, 12: 14, 5: -2, 6: -2, 13: -11}

# Black can hit the lone white checker on 8 with a 3
HIT_PLACEMENTS = {5: 2, 12: 13, 8: -1, 20: -14}

# Both sides are bearing off their last two checkers
ENDGAME_PLACEMENTS = {23: 1, 24: 1, 1: -1, 2: -1}


@pytest.fixture
def starting_board() -> list[int]:
    """Standard starting position."""
    return list(STARTING_BOARD)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with a tiny search budget."""
    return Settings(
        _env_file=None,
        MCTS_ITERATIONS=5,
        MCTS_EXPLORATION=1.4,
        ROLLOUT_MAX_PLIES=40,
        SEARCH_TIME_LIMIT=10.0,
        RANDOM_SEED=99,
    )


@pytest.fixture
def starting_game() -> Game:
    """Game at the starting position, WHITE to move with 6-5."""
    return create_game(dice=[6, 5])


@pytest.fixture
def bar_game() -> Game:
    """Game where BLACK has a checker on the bar and rolled 4-2."""
    return create_game(BAR_PLACEMENTS, dice=[4, 2], first_turn=BLACK)


@pytest.fixture
def forced_game() -> Game:
    """Game where BLACK has exactly one legal play."""
    return create_game(FORCED_PLACEMENTS, dice=[3, 1], first_turn=BLACK)


@pytest.fixture
def dance_game() -> Game:
    """Game where BLACK can't enter from the bar."""
    return create_game(DANCE_PLACEMENTS, dice=[6, 5], first_turn=BLACK)


@pytest.fixture
def hit_game() -> Game:
    """Game where BLACK can hit with a 3."""
    return create_game(HIT_PLACEMENTS, dice=[3, 1], first_turn=BLACK)
