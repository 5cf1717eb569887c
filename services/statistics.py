from typing import Callable, Literal, Sequence

import numpy as np
import pandas as pd
from pydantic import BaseModel

from services.filter_engine import FilterResult
from utils.config import Config
from utils.data_processor import lower_median, moves_frame, round_half_up
from utils.models import GameRecord, MoveSample


NO_DATA = "N/A"

BucketKind = Literal["move_number", "time_left", "opponent_time_spent"]
Bucket = tuple[int, float]


class GameSummary(BaseModel):
    total_games: int
    average_moves: float
    median_moves: int


class MoveSummary(BaseModel):
    total_moves: int
    average_time_per_move: float
    median_time_per_move: float
    premove_percent: str


def _require(items: Sequence, what: str) -> None:
    if len(items) == 0:
        raise ValueError(f"no {what} to summarize")


# ---------- games ----------
def average_moves(games: Sequence[GameRecord]) -> float:
    _require(games, "games")
    return round_half_up(sum(len(g.you.moves) for g in games) / len(games), 1)


def median_moves(games: Sequence[GameRecord]) -> int:
    _require(games, "games")
    return len(lower_median(games, key=lambda g: len(g.you.moves)).you.moves)


def game_summary(games: Sequence[GameRecord]) -> GameSummary:
    return GameSummary(
        total_games=len(games),
        average_moves=average_moves(games),
        median_moves=median_moves(games),
    )


# ---------- moves ----------
def average_time_per_move(moves: Sequence[MoveSample]) -> float:
    _require(moves, "moves")
    return round_half_up(sum(m.time_diff for m in moves) / len(moves), 1)


def median_time_per_move(moves: Sequence[MoveSample]) -> float:
    _require(moves, "moves")
    return round_half_up(lower_median(moves, key=lambda m: m.time_diff).time_diff, 1)


def premove_percent(moves: Sequence[MoveSample], threshold: float | None = None) -> str:
    _require(moves, "moves")
    threshold = Config.premove_threshold if threshold is None else threshold
    premoves = sum(1 for m in moves if m.time_diff <= threshold)
    return f"{int(round_half_up(premoves / len(moves) * 100))}%"


def move_summary(moves: Sequence[MoveSample]) -> MoveSummary:
    return MoveSummary(
        total_moves=len(moves),
        average_time_per_move=average_time_per_move(moves),
        median_time_per_move=median_time_per_move(moves),
        premove_percent=premove_percent(moves),
    )


# ---------- bucketed series ----------
def _bucket_means(keys: pd.Series, values: pd.Series) -> list[Bucket]:
    means = values.groupby(keys).mean().sort_index()
    return [(int(k), float(v)) for k, v in means.items()]


def time_by_move_number(moves: Sequence[MoveSample]) -> list[Bucket]:
    _require(moves, "moves")
    df = moves_frame(moves)
    return _bucket_means(df["move_number"].astype(int), df["time_diff"])


def time_by_time_left(moves: Sequence[MoveSample]) -> list[Bucket]:
    _require(moves, "moves")
    df = moves_frame(moves)
    return _bucket_means(np.floor(df["time_left"]).astype(int), df["time_diff"])


def time_by_opponent_time_spent(moves: Sequence[MoveSample]) -> list[Bucket]:
    """Mean time spent, bucketed by whole seconds the opponent spent on their previous move.

    Moves with no opponent move before them are left out.
    """
    _require(moves, "moves")
    df = moves_frame(moves).dropna(subset=["opponent_time_spent"])
    if df.empty:
        return []
    return _bucket_means(np.floor(df["opponent_time_spent"]).astype(int), df["time_diff"])


BUCKETS: dict[BucketKind, Callable[[Sequence[MoveSample]], list[Bucket]]] = {
    "move_number": time_by_move_number,
    "time_left": time_by_time_left,
    "opponent_time_spent": time_by_opponent_time_spent,
}


# ---------- presentation tables ----------
def summary_tables(result: FilterResult) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Per-series game and move tables; empty series show 0 counts and N/A statistics."""
    game_rows, move_rows = [], []
    for s in result.series:
        if s.games:
            gs = game_summary(s.games)
            game_rows.append([s.label, gs.total_games, gs.average_moves, gs.median_moves])
        else:
            game_rows.append([s.label, 0, NO_DATA, NO_DATA])

        if s.moves:
            ms = move_summary(s.moves)
            move_rows.append(
                [
                    s.label,
                    ms.total_moves,
                    ms.average_time_per_move,
                    ms.median_time_per_move,
                    ms.premove_percent,
                ]
            )
        else:
            move_rows.append([s.label, 0, NO_DATA, NO_DATA, NO_DATA])

    games_df = pd.DataFrame(
        game_rows, columns=["Player", "Total Games", "Average Moves", "Median Moves"]
    )
    moves_df = pd.DataFrame(
        move_rows,
        columns=[
            "Player",
            "Total Moves",
            "Average Time Per Move",
            "Median Time Per Move",
            "Premove Percent",
        ],
    )
    return games_df, moves_df


def bucket_frame(result: FilterResult, kind: BucketKind) -> pd.DataFrame:
    """Long-form ``series, x, y`` frame of one bucketed series for every non-empty selection."""
    rows = [
        (s.label, x, y)
        for s in result.series
        if s.moves
        for x, y in BUCKETS[kind](s.moves)
    ]
    return pd.DataFrame(rows, columns=["series", "x", "y"])


def time_per_move_frame(result: FilterResult) -> pd.DataFrame:
    rows = [(s.label, m.time_diff) for s in result.series for m in s.moves]
    return pd.DataFrame(rows, columns=["series", "time_diff"])
