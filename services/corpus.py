import logging
from typing import Iterable, Iterator

from utils.models import GameRecord

logger = logging.getLogger("Corpus")


class Corpus:
    """Parsed games per player, in the order players were added."""

    def __init__(self, games: dict[str, Iterable[GameRecord]] | None = None):
        self._games: dict[str, tuple[GameRecord, ...]] = {}
        for username, records in (games or {}).items():
            self.add_player(username, records)

    def add_player(self, username: str, games: Iterable[GameRecord]) -> None:
        if username in self._games:
            logger.info(f"{username}: replacing {len(self._games[username])} games")
        self._games[username] = tuple(games)

    @property
    def players(self) -> list[str]:
        return list(self._games)

    def games_for(self, username: str) -> tuple[GameRecord, ...]:
        return self._games.get(username, ())

    def all_games(self, players: Iterable[str] | None = None) -> list[GameRecord]:
        selected = self.players
        if players is not None:
            wanted = set(players)
            selected = [p for p in selected if p in wanted]
        return [g for p in selected for g in self._games[p]]

    def items(self) -> Iterator[tuple[str, tuple[GameRecord, ...]]]:
        return iter(self._games.items())

    def __contains__(self, username: object) -> bool:
        return username in self._games

    def __len__(self) -> int:
        return sum(len(g) for g in self._games.values())
