"""Tokenizer for the parts of a chess.com PGN that matter for clock analysis.

Two token kinds are produced:

- ``HeaderTag`` for every ``[Key "Value"]`` line of the tag section
- ``MoveClock`` for every half-move annotated with ``{[%clk H:MM:SS(.f)]}``

Everything else (SAN legality, variations, NAGs) is ignored.
"""

import re
from typing import Iterator, NamedTuple

from utils.data_processor import round_half_up
from utils.models import Color

_HEADER = re.compile(r'^\[([A-Za-z][A-Za-z0-9_]*)\s+"(.*)"\]\s*$', re.M)
_MOVE_CLOCK = re.compile(
    r"(?P<number>\d+)(?P<dots>\.\.\.|\.)(?!\.)\s*"  # 12. or 12...
    r"[^\s{}]+\s*"  # SAN
    r"\{\s*\[%clk\s+(?:(?P<h>\d+):)?(?P<m>\d{1,2}):(?P<s>\d{1,2}(?:\.\d+)?)\]"
    r"[^}]*\}"
)


class HeaderTag(NamedTuple):
    key: str
    value: str


class MoveClock(NamedTuple):
    move_number: int
    color: Color
    clock: float  # seconds left after the move


def clock_to_seconds(hours: str | int | None, minutes: str | int, seconds: str | float) -> float:
    return round_half_up((int(hours or 0) * 60 + int(minutes)) * 60 + float(seconds), 2)


def scan_headers(pgn: str) -> Iterator[HeaderTag]:
    for m in _HEADER.finditer(pgn or ""):
        yield HeaderTag(m.group(1), m.group(2))


def scan_move_clocks(pgn: str) -> Iterator[MoveClock]:
    for m in _MOVE_CLOCK.finditer(pgn or ""):
        yield MoveClock(
            move_number=int(m.group("number")),
            color="white" if m.group("dots") == "." else "black",
            clock=clock_to_seconds(m.group("h"), m.group("m"), m.group("s")),
        )
