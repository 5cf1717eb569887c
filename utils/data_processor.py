import math
import sys
from typing import Callable, Iterable, Sequence, TypeVar

import pandas as pd

from utils.models import MoveSample

T = TypeVar("T")


def round_half_up(number: float, digits: int = 0) -> float:
    """Round like chess.com clock displays do: halves go up, not to the nearest even digit."""
    factor = 10**digits
    return math.floor((number + sys.float_info.epsilon) * factor + 0.5) / factor


def lower_median(items: Sequence[T], key: Callable[[T], float]) -> T:
    """Element at index ``n // 2`` after sorting by ``key``.

    For even-sized input no interpolation happens and the second of the two
    middle elements wins: ``[1, 2, 3, 4]`` gives ``3``.
    """
    if not items:
        raise ValueError("median of empty sequence")
    ordered = sorted(items, key=key)
    return ordered[len(ordered) // 2]


def moves_frame(moves: Iterable[MoveSample]) -> pd.DataFrame:
    columns = ["move_number", "time_left", "time_diff", "opponent_time_spent"]
    rows = [m.model_dump() for m in moves]
    if not rows:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame(rows, columns=columns)
    df["opponent_time_spent"] = pd.to_numeric(df["opponent_time_spent"], errors="coerce")
    return df
