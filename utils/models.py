from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt

Color: TypeAlias = Literal["white", "black"]
GameResult: TypeAlias = Literal["Won", "Lost", "Draw"]
Outcome: TypeAlias = Literal["Win", "Draw", "Loss"]

OUTCOMES: tuple[Outcome, ...] = ("Win", "Draw", "Loss")
COLORS: tuple[Color, ...] = ("white", "black")


# ---------- API payloads ----------
class PlayerRef(BaseModel):
    model_config = ConfigDict(extra="ignore")
    username: Optional[str] = None
    rating: Optional[int] = None
    result: Optional[str] = None


class GameModel(BaseModel):
    model_config = ConfigDict(extra="ignore")
    url: Optional[str] = None
    pgn: Optional[str] = None
    time_control: Optional[str] = None
    time_class: Optional[str] = None
    rules: Optional[str] = None
    end_time: Optional[int] = None
    white: PlayerRef
    black: PlayerRef


# ---------- Parsed records ----------
class MoveSample(BaseModel):
    model_config = ConfigDict(frozen=True)
    move_number: int
    time_left: float
    time_diff: NonNegativeFloat
    opponent_time_spent: Optional[float] = None


class PlayerSide(BaseModel):
    model_config = ConfigDict(frozen=True)
    username: str
    rating: Optional[int] = None
    # chess.com per-player result code, e.g. "resigned" or "timevsinsufficient"
    result_code: Optional[str] = None
    moves: tuple[MoveSample, ...] = ()


class GameRecord(BaseModel):
    model_config = ConfigDict(frozen=True)
    color_played: Color
    you: PlayerSide
    opponent: PlayerSide
    time_class: str
    time_control: str
    starting_time: NonNegativeInt
    increment: NonNegativeInt
    termination: str
    result: GameResult
    url: Optional[str] = None
    end_time: Optional[datetime] = None
    headers: dict[str, str] = Field(default_factory=dict)
    extra_headers: dict[str, str] = Field(default_factory=dict)
    dropped_moves: NonNegativeInt = 0


# ---------- Facets ----------
class NumericRange(BaseModel):
    """Inclusive ``[min, max]`` range."""

    model_config = ConfigDict(frozen=True)
    min: float
    max: float

    def contains(self, value: float | None) -> bool:
        return value is not None and self.min <= value <= self.max
