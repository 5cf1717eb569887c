import logging
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Literal

from pydantic import BaseModel, Field, ValidationError

from services.pgn_scanner import scan_headers, scan_move_clocks
from services.time_control import format_time_control, parse_time_control
from utils.data_processor import round_half_up
from utils.errors import PlayerNotInGame, SkipGame
from utils.models import Color, GameModel, GameRecord, GameResult, MoveSample, PlayerRef, PlayerSide

logger = logging.getLogger("RecordParser")

# "hikaru won by resignation", "Game drawn by timeout vs insufficient material"
_TERMINATION = re.compile(r"^(\S+) (\S+) \S+ (.+)$")

KNOWN_HEADERS = frozenset(
    {
        "event",
        "site",
        "date",
        "round",
        "white",
        "black",
        "result",
        "currentposition",
        "timezone",
        "eco",
        "ecourl",
        "utcdate",
        "utctime",
        "whiteelo",
        "blackelo",
        "timecontrol",
        "termination",
        "startdate",
        "starttime",
        "enddate",
        "endtime",
        "link",
    }
)


class ParseReport(BaseModel):
    username: str
    games: list[GameRecord] = Field(default_factory=list)
    skipped: dict[str, int] = Field(default_factory=dict)
    mismatched: int = 0
    dropped_moves: int = 0

    @property
    def skipped_total(self) -> int:
        return sum(self.skipped.values())

    @property
    def summary(self) -> str:
        return (
            f"{len(self.games)} games · {self.skipped_total} skipped"
            f" · {self.mismatched} not played by {self.username}"
            f" · {self.dropped_moves} moves with inconsistent clocks dropped"
        )


def _same_player(a: str | None, b: str | None) -> bool:
    return a is not None and b is not None and a.strip().lower() == b.strip().lower()


def _check_eligible(g: GameModel) -> None:
    if g.time_class == "daily":
        raise SkipGame("daily game")
    if g.rules != "chess":
        raise SkipGame("variant", g.rules)


def _assign_sides(g: GameModel, username: str) -> tuple[Color, PlayerRef, PlayerRef]:
    # exact match wins over a case-insensitive one
    if g.white.username == username:
        return "white", g.white, g.black
    if g.black.username == username:
        return "black", g.black, g.white
    if _same_player(g.white.username, username):
        return "white", g.white, g.black
    if _same_player(g.black.username, username):
        return "black", g.black, g.white
    raise PlayerNotInGame(username, g.white.username, g.black.username)


def split_headers(pgn: str) -> tuple[dict[str, str], dict[str, str]]:
    headers: dict[str, str] = {}
    extra: dict[str, str] = {}
    for tag in scan_headers(pgn):
        key = tag.key.lower()
        (headers if key in KNOWN_HEADERS else extra)[key] = tag.value
    return headers, extra


def classify_termination(termination: str | None, you: str) -> tuple[str, GameResult]:
    """Turn ``"<name> <won|drawn> <by|on> <reason>"`` into (reason, result for ``you``)."""
    m = _TERMINATION.match(termination or "")
    if m is None:
        raise SkipGame("unparsable termination", termination)
    name, verb, reason = m.groups()
    reason = reason.replace("-", " ").strip()

    if verb == "drawn":
        return reason, "Draw"
    won = verb == "won"
    if not _same_player(name, you):
        won = not won
    return reason, "Won" if won else "Lost"


def reconstruct_moves(
    pgn: str, starting_time: int, increment: int
) -> tuple[dict[Color, list[MoveSample]], int]:
    """Rebuild time spent per half-move from the clock left after each move.

    A sample whose delta comes out negative is dropped and the running clock of
    that color is not advanced.
    """
    previous: dict[Color, float] = {"white": float(starting_time), "black": float(starting_time)}
    moves: dict[Color, list[MoveSample]] = {"white": [], "black": []}
    dropped = 0

    for token in scan_move_clocks(pgn):
        color = token.color
        other: Color = "black" if color == "white" else "white"
        time_diff = round_half_up(previous[color] - (token.clock - increment), 2)
        if time_diff < 0:
            dropped += 1
            logger.debug(
                f"Dropping move {token.move_number} ({color}): negative time spent {time_diff}"
            )
            continue

        opponent_last = moves[other][-1].time_diff if moves[other] else None
        moves[color].append(
            MoveSample(
                move_number=token.move_number,
                time_left=token.clock,
                time_diff=time_diff,
                opponent_time_spent=opponent_last,
            )
        )
        previous[color] = token.clock

    return moves, dropped


def parse_game(raw: GameModel | dict[str, Any], username: str) -> GameRecord:
    """Parse one chess.com game payload from the point of view of ``username``.

    Raises ``SkipGame`` for payloads that are not eligible (daily, variants,
    malformed time control, unparsable termination) and ``PlayerNotInGame`` when
    neither side is ``username``.
    """
    try:
        g = raw if isinstance(raw, GameModel) else GameModel.model_validate(raw)
    except ValidationError as e:
        raise SkipGame("invalid payload", e.error_count()) from e

    _check_eligible(g)
    color, you, opponent = _assign_sides(g, username)
    starting_time, increment = parse_time_control(g.time_control)

    pgn = g.pgn or ""
    headers, extra = split_headers(pgn)
    termination, result = classify_termination(headers.get("termination"), you.username or username)

    moves, dropped = reconstruct_moves(pgn, starting_time, increment)
    other: Color = "black" if color == "white" else "white"

    return GameRecord(
        color_played=color,
        you=PlayerSide(
            username=you.username or username,
            rating=you.rating,
            result_code=you.result,
            moves=tuple(moves[color]),
        ),
        opponent=PlayerSide(
            username=opponent.username or "",
            rating=opponent.rating,
            result_code=opponent.result,
            moves=tuple(moves[other]),
        ),
        time_class=g.time_class or "",
        time_control=format_time_control(starting_time, increment),
        starting_time=starting_time,
        increment=increment,
        termination=termination,
        result=result,
        url=g.url,
        end_time=datetime.fromtimestamp(g.end_time, tz=timezone.utc) if g.end_time else None,
        headers=headers,
        extra_headers=extra,
        dropped_moves=dropped,
    )


def parse_games(
    raw_games: Iterable[GameModel | dict[str, Any]],
    username: str,
    on_player_mismatch: Literal["raise", "skip"] = "raise",
) -> ParseReport:
    report = ParseReport(username=username)
    for raw in raw_games:
        try:
            record = parse_game(raw, username)
        except SkipGame as e:
            report.skipped[e.reason] = report.skipped.get(e.reason, 0) + 1
            continue
        except PlayerNotInGame as e:
            if on_player_mismatch == "raise":
                raise
            logger.warning(f"{username}: excluding game, {e}")
            report.mismatched += 1
            continue

        report.games.append(record)
        report.dropped_moves += record.dropped_moves

    logger.info(
        f"{username}: {len(report.games)} games parsed, {report.skipped_total} skipped, "
        f"{report.mismatched} mismatched, {report.dropped_moves} moves dropped"
    )
    return report
