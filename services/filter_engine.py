import logging

from pydantic import BaseModel, ConfigDict, Field

from services.corpus import Corpus
from services.facet_catalog import FacetCatalog, outcome_class
from utils.models import COLORS, Color, GameRecord, MoveSample, NumericRange, Outcome

logger = logging.getLogger("FilterEngine")


class FilterCriteria(BaseModel):
    """Snapshot of the user's facet selection.

    Categorical facets are allow-lists: an empty list selects nothing. Numeric
    ranges are inclusive and ``None`` means the facet is not constrained.
    """

    model_config = ConfigDict(frozen=True)
    players: list[str] = Field(default_factory=list)
    include_opponents: bool = False
    colors: list[Color] = Field(default_factory=list)
    terminations: dict[Outcome, list[str]] = Field(default_factory=dict)
    time_controls: dict[str, list[str]] = Field(default_factory=dict)
    rating: NumericRange | None = None
    move_number: NumericRange | None = None
    time_left: NumericRange | None = None

    @classmethod
    def from_catalog(cls, catalog: FacetCatalog, include_opponents: bool = False) -> "FilterCriteria":
        """Everything the catalog offers is selected."""
        return cls(
            players=list(catalog.players),
            include_opponents=include_opponents,
            colors=list(COLORS),
            terminations={k: list(v) for k, v in catalog.terminations.items()},
            time_controls={k: list(v) for k, v in catalog.time_controls.items()},
            rating=catalog.rating,
            move_number=catalog.move_number,
            time_left=catalog.time_left,
        )


class FilteredSeries(BaseModel):
    label: str
    player: str
    opponents: bool = False
    games: list[GameRecord] = Field(default_factory=list)
    moves: list[MoveSample] = Field(default_factory=list)


class FilterResult(BaseModel):
    series: list[FilteredSeries] = Field(default_factory=list)

    @property
    def games(self) -> list[GameRecord]:
        # opponent series share their games with the player series
        return [g for s in self.series if not s.opponents for g in s.games]

    @property
    def moves(self) -> list[MoveSample]:
        return [m for s in self.series for m in s.moves]

    @property
    def is_empty(self) -> bool:
        return not any(s.moves for s in self.series)


def _in_range(r: NumericRange | None, value: float | None) -> bool:
    return r is None or r.contains(value)


def game_passes(game: GameRecord, criteria: FilterCriteria) -> bool:
    if game.color_played not in criteria.colors:
        return False

    reasons = criteria.terminations.get(outcome_class(game), [])
    termination = game.termination.casefold()
    if not any(r.casefold() == termination for r in reasons):
        return False

    controls = criteria.time_controls.get(game.time_class)
    if controls is None or game.time_control not in controls:
        return False

    return _in_range(criteria.rating, game.you.rating)


def move_passes(move: MoveSample, criteria: FilterCriteria) -> bool:
    return _in_range(criteria.move_number, move.move_number) and _in_range(
        criteria.time_left, move.time_left
    )


def apply_filters(corpus: Corpus, criteria: FilterCriteria) -> FilterResult:
    result = FilterResult()
    for player, games in corpus.items():
        if player not in criteria.players:
            continue

        mine = FilteredSeries(label=player, player=player)
        theirs = FilteredSeries(label=f"{player}'s opponents", player=player, opponents=True)
        for game in games:
            if not game_passes(game, criteria):
                continue
            mine.games.append(game)
            mine.moves.extend(m for m in game.you.moves if move_passes(m, criteria))
            if criteria.include_opponents:
                theirs.games.append(game)
                theirs.moves.extend(m for m in game.opponent.moves if move_passes(m, criteria))

        result.series.append(mine)
        if criteria.include_opponents:
            result.series.append(theirs)

    logger.info(
        f"Filtered {len(result.games)}/{len(corpus)} games, {len(result.moves)} moves "
        f"for {len(result.series)} series"
    )
    return result
