from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field


# Sides double as movement directions along the board
class Side(IntEnum):
    BLACK = 1
    WHITE = -1


# Game status derived from the board
class GameStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    WIN_BLACK = "win_black"
    WIN_WHITE = "win_white"


class PlayerType(str, Enum):
    HUMAN = "human"
    COMPUTER = "computer"


class PlayerAttributes(BaseModel):
    name: str
    side: Side
    player_type: PlayerType = PlayerType.HUMAN


class Move(BaseModel):
    """A single checker move between two slots of the board."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=0, le=25)
    end: int = Field(..., ge=0, le=25)

    @property
    def key(self) -> tuple[int, int]:
        return (self.start, self.end)


# A full play for one roll, in the order it must be applied
Play = tuple[Move, ...]
