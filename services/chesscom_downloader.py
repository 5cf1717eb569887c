import logging

import requests
from pydantic import ValidationError

from utils.config import Config
from utils.models import GameModel

logger = logging.getLogger("chesscom")


class ChesscomDownloader:
    def __init__(
        self,
        contact_email: str = Config.contact_email,
        timeout: float = Config.request_timeout,
        session: requests.Session | None = None,
    ):
        self.base_headers = {
            "User-Agent": f"ClockLense chess.com clock analyzer (+mailto:{contact_email})"
        }
        self.timeout = timeout
        self.sess = session or requests.Session()

    # ---------- public ----------
    def list_archives(self, username: str) -> list[str]:
        url = f"https://api.chess.com/pub/player/{username.strip().lower()}/games/archives"
        data = self._fetch_json(url)
        if data is None:
            return []
        archives = data.get("archives", [])
        logger.info(f"{username}: {len(archives)} archives")
        return archives

    def download_archive(self, url: str) -> list[GameModel]:
        data = self._fetch_json(url)
        if data is None:
            return []
        games: list[GameModel] = []
        invalid = 0
        for raw in data.get("games", []):
            try:
                games.append(GameModel.model_validate(raw))
            except ValidationError as e:
                invalid += 1
                logger.warning(f"invalid game in {url}: {e.error_count()} errors")
        logger.info(f"HTTP {len(games)} games from {url}, {invalid} invalid")
        return games

    def download_all(self, username: str, progress_cb=None) -> list[GameModel]:
        """Fetch every monthly archive in order; failed months are logged and skipped."""
        archives = self.list_archives(username)
        games: list[GameModel] = []
        for i, url in enumerate(archives, start=1):
            games.extend(self.download_archive(url))
            if progress_cb:
                progress_cb(i, len(archives))
        return games

    # ---- internals ----
    def _fetch_json(self, url: str) -> dict | None:
        logger.info(f"GET {url}")
        try:
            r = self.sess.get(url, headers=self.base_headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"request error {url}: {e}")
            return None

        if r.status_code == 200:
            try:
                data = r.json()
            except ValueError:
                logger.error(f"json parse error {url}")
                return None
            if not isinstance(data, dict):
                logger.error(f"unexpected json payload {url}")
                return None
            return data

        if r.status_code == 429:
            logger.warning(f"429 Too Many Requests, Retry-After={r.headers.get('Retry-After')}")
            return None

        if r.status_code == 404:
            logger.warning(f"404 {url}")
            return None

        logger.warning(f"{r.status_code} {url}")
        return None
