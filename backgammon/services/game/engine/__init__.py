"""Game engine module - backgammon rules and the live game.

This module provides the core game engine with:
- Pure legality predicates over a 26-slot board
- Dice-constrained legal move enumeration
- A Game state machine with single-level undo
- Event types describing each state transition
- ProcessResult pattern for error handling

Usage:
    from backgammon.services.game.engine import Game

    game = Game()
    ends = game.get_moves(24)

    result = game.move(24, 18)
    if result.success:
        events = result.events  # Animate or log these
    else:
        print(f"Error: {result.error_code} - {result.error_message}")
"""

# Board primitives
from .board import (
    BOARD_SIZE,
    CHECKERS_PER_SIDE,
    STARTING_BOARD,
    apply_move,
    apply_play,
    bar_index,
    exit_index,
    home_points,
    total_checkers,
    winning_side,
)

# Events - emitted by Game operations
from .events import (
    AnyGameEvent,
    CheckerBorneOff,
    CheckerHit,
    CheckerMoved,
    DiceRolled,
    GameEnded,
    GameEvent,
    TurnEnded,
    TurnUndone,
)

# Legal moves
from .legal_moves import (
    get_all_plays,
    get_legal_moves,
    get_movable_checkers,
    has_any_legal_moves,
    play_key,
)

# Main processing
from .process import TURN_ORDER, Game, check_win_condition

# Dice
from .rolling import consume_die, roll_dice

# Legality and result types
from .validation import (
    ProcessResult,
    ValidationResult,
    can_bear_off,
    can_use_all_dice,
    is_move_valid,
    is_possible_move,
    validate_move,
)

__all__ = [
    # Board
    "BOARD_SIZE",
    "CHECKERS_PER_SIDE",
    "STARTING_BOARD",
    "apply_move",
    "apply_play",
    "bar_index",
    "exit_index",
    "home_points",
    "total_checkers",
    "winning_side",
    # Events
    "GameEvent",
    "AnyGameEvent",
    "DiceRolled",
    "CheckerMoved",
    "CheckerHit",
    "CheckerBorneOff",
    "TurnEnded",
    "TurnUndone",
    "GameEnded",
    # Legal moves
    "get_legal_moves",
    "get_movable_checkers",
    "get_all_plays",
    "has_any_legal_moves",
    "play_key",
    # Processing
    "TURN_ORDER",
    "Game",
    "check_win_condition",
    # Dice
    "roll_dice",
    "consume_die",
    # Validation
    "ProcessResult",
    "ValidationResult",
    "can_bear_off",
    "can_use_all_dice",
    "is_move_valid",
    "is_possible_move",
    "validate_move",
]
