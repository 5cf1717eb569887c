import logging

import streamlit as st

from services.chesscom_downloader import ChesscomDownloader
from services.record_parser import ParseReport, parse_games

logger = logging.getLogger("services")


@st.cache_resource
def get_downloader() -> ChesscomDownloader:
    return ChesscomDownloader()


def load_player(
    username: str, downloader: ChesscomDownloader | None = None, progress_cb=None
) -> ParseReport | None:
    """Download and parse every game of ``username``; ``None`` when chess.com has none."""
    raw_games = (downloader or get_downloader()).download_all(username, progress_cb=progress_cb)
    if not raw_games:
        logger.warning(f"{username}: no games found on chess.com")
        return None
    # games the player is not part of are logged and left out
    return parse_games(raw_games, username, on_player_mismatch="skip")
