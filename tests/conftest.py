"""Shared fixtures: chess.com payloads and hand-built game records."""

from __future__ import annotations

from typing import Any

import pytest

from services.corpus import Corpus
from utils.models import GameRecord, MoveSample, PlayerSide

GOLDEN_MOVES = (
    "1. e4 {[%clk 0:03:01]} 1... e5 {[%clk 0:03:00.5]} "
    "2. Nf3 {[%clk 0:02:58.3]} 2... Nc6 {[%clk 0:02:52]} "
    "3. Bb5 {[%clk 0:03:00.2]} 3... a6 {[%clk 0:02:55]} "
    "4. Ba4 {[%clk 0:03:00]} 4... Nf6 {[%clk 0:02:50]} 1-0"
)


def make_pgn(
    white: str = "Hikaru",
    black: str = "opponent1",
    termination: str | None = "Hikaru won by resignation",
    moves: str = GOLDEN_MOVES,
    extra_headers: dict[str, str] | None = None,
) -> str:
    headers = {
        "Event": "Live Chess",
        "Site": "Chess.com",
        "Date": "2024.01.15",
        "White": white,
        "Black": black,
        "Result": "1-0",
        "WhiteElo": "3200",
        "BlackElo": "2900",
        "TimeControl": "180+2",
        "ECO": "C60",
    }
    if termination is not None:
        headers["Termination"] = termination
    headers.update(extra_headers or {})
    tags = "\n".join(f'[{k} "{v}"]' for k, v in headers.items())
    return f"{tags}\n\n{moves}\n"


def make_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "url": "https://www.chess.com/game/live/1",
        "pgn": make_pgn(),
        "time_control": "180+2",
        "end_time": 1705312800,
        "rated": True,
        "time_class": "blitz",
        "rules": "chess",
        "white": {"username": "Hikaru", "rating": 3200, "result": "win"},
        "black": {"username": "opponent1", "rating": 2900, "result": "resigned"},
    }
    payload.update(overrides)
    return payload


def _moves(rows) -> tuple[MoveSample, ...]:
    return tuple(
        MoveSample(move_number=n, time_left=left, time_diff=diff, opponent_time_spent=opp)
        for n, left, diff, opp in rows
    )


def build_record(
    *,
    username: str = "alice",
    color: str = "white",
    rating: int | None = 1500,
    result: str = "Won",
    result_code: str | None = "win",
    termination: str = "resignation",
    time_class: str = "blitz",
    time_control: str = "3 | 2",
    moves=((1, 180.0, 1.0, None), (2, 170.0, 12.0, 3.0)),
    opponent_moves=((1, 178.0, 3.0, 1.0),),
) -> GameRecord:
    return GameRecord(
        color_played=color,
        you=PlayerSide(username=username, rating=rating, result_code=result_code, moves=_moves(moves)),
        opponent=PlayerSide(username="bob", rating=1400, moves=_moves(opponent_moves)),
        time_class=time_class,
        time_control=time_control,
        starting_time=180,
        increment=2,
        termination=termination,
        result=result,
    )


@pytest.fixture
def payload():
    return make_payload()


@pytest.fixture
def make_record():
    return build_record


@pytest.fixture
def corpus() -> Corpus:
    alice = [
        build_record(),
        build_record(
            color="black",
            rating=1520,
            result="Lost",
            result_code="timeout",
            termination="time",
            moves=((1, 179.0, 3.0, 1.0), (2, 150.0, 31.0, 0.5), (3, 2.4, 149.6, 4.0)),
        ),
        build_record(
            rating=1480,
            result="Draw",
            result_code="agreed",
            termination="agreement",
            time_class="bullet",
            time_control="1 | 0",
            moves=((1, 60.0, 0.0, None), (2, 59.9, 0.1, 0.3)),
        ),
    ]
    bob = [build_record(username="bob", rating=1700, time_control="5 | 0")]
    return Corpus({"alice": alice, "bob": bob})
