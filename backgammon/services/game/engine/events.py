"""Game event types - emitted during state transitions.

Events describe what happened during a game operation, enabling:
- Board animations (know exactly which checker went where)
- Move logs and replays
- Spotting the end of a turn without diffing boards
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from backgammon.schemas.game_engine import GameStatus, Side


class GameEvent(BaseModel):
    """Base class for all game events."""

    event_type: str
    seq: int = 0  # Sequence number assigned by the game


class DiceRolled(GameEvent):
    """Fresh dice were rolled for the side to move."""

    event_type: Literal["dice_rolled"] = "dice_rolled"
    side: Side
    dice: list[int] = Field(..., description="Usable dice, four entries on doubles")


class CheckerMoved(GameEvent):
    """A checker was moved."""

    event_type: Literal["checker_moved"] = "checker_moved"
    side: Side
    start: int
    end: int
    die_used: int


class CheckerHit(GameEvent):
    """A lone checker was hit and sent to its bar."""

    event_type: Literal["checker_hit"] = "checker_hit"
    side: Side = Field(..., description="Owner of the hit checker")
    point: int
    bar: int


class CheckerBorneOff(GameEvent):
    """A checker left the board."""

    event_type: Literal["checker_borne_off"] = "checker_borne_off"
    side: Side
    start: int
    borne_off: int = Field(..., description="Checkers of the side off the board so far")


class TurnEnded(GameEvent):
    """A side's turn has ended."""

    event_type: Literal["turn_ended"] = "turn_ended"
    side: Side
    reason: Literal["dice_used", "no_legal_moves", "forfeit"]
    next_side: Side


class TurnUndone(GameEvent):
    """The last finished turn was taken back."""

    event_type: Literal["turn_undone"] = "turn_undone"
    side: Side = Field(..., description="Side whose turn it is again")


class GameEnded(GameEvent):
    """The game has finished."""

    event_type: Literal["game_ended"] = "game_ended"
    winner: Side
    status: GameStatus


# Union of all event types for type checking
AnyGameEvent = Annotated[
    DiceRolled
    | CheckerMoved
    | CheckerHit
    | CheckerBorneOff
    | TurnEnded
    | TurnUndone
    | GameEnded,
    Field(discriminator="event_type"),
]
