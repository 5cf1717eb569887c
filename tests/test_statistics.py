import pandas as pd
import pytest

from services.facet_catalog import build_catalog
from services.filter_engine import FilterCriteria, apply_filters
from services.statistics import (
    NO_DATA,
    average_moves,
    average_time_per_move,
    bucket_frame,
    game_summary,
    median_moves,
    median_time_per_move,
    move_summary,
    premove_percent,
    summary_tables,
    time_by_move_number,
    time_by_opponent_time_spent,
    time_by_time_left,
    time_per_move_frame,
)
from utils.data_processor import lower_median, round_half_up
from utils.models import MoveSample


def _moves(*time_diffs, **kwargs):
    return [MoveSample(move_number=i + 1, time_left=100, time_diff=d, **kwargs) for i, d in enumerate(time_diffs)]


def _games(make_record, *move_counts):
    return [
        make_record(moves=tuple((n, 100.0, 1.0, None) for n in range(1, count + 1)))
        for count in move_counts
    ]


# ---------- helpers ----------
def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(4.699999999999989, 2) == 4.7
    assert round_half_up(-0.004, 2) == 0


def test_lower_median_takes_index_half_of_n():
    assert lower_median([4, 1, 3, 2], key=float) == 3
    assert lower_median([3, 1, 2], key=float) == 2
    assert lower_median([7], key=float) == 7
    with pytest.raises(ValueError):
        lower_median([], key=float)


# ---------- games ----------
def test_game_summary(make_record):
    games = _games(make_record, 4, 1, 3, 2)
    summary = game_summary(games)

    assert summary.total_games == 4
    assert summary.average_moves == 2.5
    # sorted counts [1, 2, 3, 4], index 4 // 2 = 2
    assert summary.median_moves == 3


def test_average_moves_rounds_to_one_decimal(make_record):
    assert average_moves(_games(make_record, 2, 3, 2)) == 2.3


def test_game_statistics_reject_empty_input():
    with pytest.raises(ValueError):
        average_moves([])
    with pytest.raises(ValueError):
        median_moves([])


# ---------- moves ----------
def test_median_time_per_move_is_not_interpolated():
    assert median_time_per_move(_moves(1, 2, 3, 4)) == 3


def test_average_time_per_move():
    assert average_time_per_move(_moves(1, 2, 3, 4)) == 2.5
    assert average_time_per_move(_moves(0.05, 0.1, 0.2, 5)) == 1.3


def test_premove_percent():
    assert premove_percent(_moves(0.05, 0.1, 0.2, 5)) == "50%"
    assert premove_percent(_moves(0, 1, 2)) == "33%"
    assert premove_percent(_moves(3)) == "0%"
    assert premove_percent(_moves(0.3, 1), threshold=0.5) == "50%"


def test_move_summary():
    summary = move_summary(_moves(0.05, 0.1, 0.2, 5))
    assert summary.total_moves == 4
    assert summary.average_time_per_move == 1.3
    assert summary.median_time_per_move == 0.2
    assert summary.premove_percent == "50%"


@pytest.mark.parametrize(
    "fn",
    [average_time_per_move, median_time_per_move, premove_percent, time_by_move_number],
)
def test_move_statistics_reject_empty_input(fn):
    with pytest.raises(ValueError):
        fn([])


# ---------- buckets ----------
def test_time_by_move_number():
    moves = [
        MoveSample(move_number=2, time_left=90, time_diff=12),
        MoveSample(move_number=1, time_left=100, time_diff=1),
        MoveSample(move_number=1, time_left=99, time_diff=3),
    ]
    assert time_by_move_number(moves) == [(1, 2.0), (2, 12.0)]


def test_time_by_time_left_floors_the_clock():
    moves = [
        MoveSample(move_number=1, time_left=2.4, time_diff=1),
        MoveSample(move_number=2, time_left=2.9, time_diff=2),
        MoveSample(move_number=3, time_left=10.0, time_diff=4),
    ]
    assert time_by_time_left(moves) == [(2, 1.5), (10, 4.0)]


def test_time_by_opponent_time_spent_skips_moves_without_opponent_move():
    moves = [
        MoveSample(move_number=1, time_left=100, time_diff=5, opponent_time_spent=None),
        MoveSample(move_number=2, time_left=95, time_diff=1, opponent_time_spent=0.3),
        MoveSample(move_number=3, time_left=90, time_diff=3, opponent_time_spent=0.5),
        MoveSample(move_number=4, time_left=80, time_diff=6, opponent_time_spent=7.9),
    ]
    assert time_by_opponent_time_spent(moves) == [(0, 2.0), (7, 6.0)]
    assert time_by_opponent_time_spent(moves[:1]) == []


# ---------- tables ----------
def test_summary_tables_use_sentinels_for_empty_series(corpus):
    criteria = FilterCriteria.from_catalog(build_catalog(corpus)).model_copy(
        update={"time_controls": {"blitz": ["5 | 0"]}}
    )
    games_df, moves_df = summary_tables(apply_filters(corpus, criteria))

    assert games_df.to_dict("records") == [
        {"Player": "alice", "Total Games": 0, "Average Moves": NO_DATA, "Median Moves": NO_DATA},
        {"Player": "bob", "Total Games": 1, "Average Moves": 2.0, "Median Moves": 2},
    ]
    assert moves_df.loc[0].tolist() == ["alice", 0, NO_DATA, NO_DATA, NO_DATA]
    assert moves_df.loc[1].tolist() == ["bob", 2, 6.5, 12.0, "0%"]


def test_bucket_frame_is_long_form_per_series(corpus):
    result = apply_filters(corpus, FilterCriteria.from_catalog(build_catalog(corpus)))
    df = bucket_frame(result, "move_number")

    assert list(df.columns) == ["series", "x", "y"]
    assert set(df["series"]) == {"alice", "bob"}
    bob = df[df["series"] == "bob"]
    assert bob[["x", "y"]].values.tolist() == [[1, 1.0], [2, 12.0]]


def test_bucket_frame_without_moves_is_empty(corpus):
    criteria = FilterCriteria.from_catalog(build_catalog(corpus)).model_copy(update={"colors": []})
    df = bucket_frame(apply_filters(corpus, criteria), "time_left")
    assert df.empty


def test_time_per_move_frame(corpus):
    result = apply_filters(corpus, FilterCriteria.from_catalog(build_catalog(corpus), include_opponents=True))
    df = time_per_move_frame(result)
    assert isinstance(df, pd.DataFrame)
    assert len(df) == len(result.moves)
    assert df["series"].unique().tolist() == ["alice", "alice's opponents", "bob", "bob's opponents"]
