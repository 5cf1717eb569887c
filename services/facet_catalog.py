"""Selectable facet values derived from a set of parsed games.

All functions are pure: they take the games as a parameter and are recomputed
from scratch whenever the corpus changes.
"""

import math
from collections import Counter
from typing import Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field

from services.corpus import Corpus
from utils.models import OUTCOMES, GameRecord, NumericRange, Outcome

# chess.com per-player result codes
RESULT_CODE_OUTCOME: dict[str, Outcome] = {
    "win": "Win",
    "resigned": "Loss",
    "checkmated": "Loss",
    "timeout": "Loss",
    "abandoned": "Loss",
    "lose": "Loss",
    "insufficient": "Draw",
    "stalemate": "Draw",
    "agreed": "Draw",
    "repetition": "Draw",
    "timevsinsufficient": "Draw",
    "50move": "Draw",
}

_RESULT_OUTCOME: dict[str, Outcome] = {"Won": "Win", "Lost": "Loss", "Draw": "Draw"}


class FacetCatalog(BaseModel):
    model_config = ConfigDict(frozen=True)
    players: list[str] = Field(default_factory=list)
    terminations: dict[Outcome, list[str]] = Field(default_factory=dict)
    time_controls: dict[str, list[str]] = Field(default_factory=dict)
    rating: NumericRange | None = None
    move_number: NumericRange | None = None
    time_left: NumericRange | None = None


def outcome_class(game: GameRecord) -> Outcome:
    code = (game.you.result_code or "").lower()
    return RESULT_CODE_OUTCOME.get(code) or _RESULT_OUTCOME[game.result]


def capitalize_words(text: str) -> str:
    return " ".join(w[:1].upper() + w[1:] for w in text.split(" "))


def terminations_by_outcome(games: Iterable[GameRecord]) -> dict[Outcome, list[str]]:
    out: dict[Outcome, list[str]] = {o: [] for o in OUTCOMES}
    for g in games:
        reason = capitalize_words(g.termination)
        bucket = out[outcome_class(g)]
        if reason not in bucket:
            bucket.append(reason)
    return out


def time_controls_by_class(games: Iterable[GameRecord]) -> dict[str, list[str]]:
    counts: dict[str, Counter[str]] = {}
    for g in games:
        counts.setdefault(g.time_class, Counter())[g.time_control] += 1
    # Counter keeps insertion order, so the stable sort breaks ties by first appearance
    return {
        time_class: sorted(c, key=lambda tc: -c[tc])
        for time_class, c in counts.items()
    }


def value_range(values: Iterable[float | None]) -> NumericRange | None:
    """``[min, max]`` of the values, or None when there are none (meaning "no constraint")."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return NumericRange(min=min(present), max=max(present))


def rating_range(games: Sequence[GameRecord]) -> NumericRange | None:
    return value_range(g.you.rating for g in games)


def move_number_range(games: Sequence[GameRecord]) -> NumericRange | None:
    return value_range(m.move_number for g in games for m in g.you.moves)


def time_left_range(games: Sequence[GameRecord]) -> NumericRange | None:
    r = value_range(m.time_left for g in games for m in g.you.moves)
    if r is None:
        return None
    # clocks carry tenths; the upper bound is widened to a whole second
    return NumericRange(min=r.min, max=math.ceil(r.max))


def build_catalog(corpus: Corpus, players: Iterable[str] | None = None) -> FacetCatalog:
    selected = corpus.players
    if players is not None:
        wanted = set(players)
        selected = [p for p in selected if p in wanted]
    games = corpus.all_games(selected)
    return FacetCatalog(
        players=selected,
        terminations=terminations_by_outcome(games),
        time_controls=time_controls_by_class(games),
        rating=rating_range(games),
        move_number=move_number_range(games),
        time_left=time_left_range(games),
    )
