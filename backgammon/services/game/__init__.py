"""Game service module.

Provides:
- Game engine processing (engine/)
- Sessions pairing a game with its players (session.py)
"""

# Re-export from engine for convenience
from .engine import (
    Game,
    ProcessResult,
    check_win_condition,
    get_all_plays,
    get_legal_moves,
)

__all__ = [
    # Engine
    "Game",
    "ProcessResult",
    "check_win_condition",
    "get_legal_moves",
    "get_all_plays",
]
