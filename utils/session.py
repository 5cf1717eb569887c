import streamlit as st

from services.corpus import Corpus
from services.record_parser import ParseReport

SESSION_KEY_CORPUS = "corpus"
SESSION_KEY_REPORTS = "parse_reports"


def init_session():
    st.session_state.setdefault(SESSION_KEY_CORPUS, Corpus())
    st.session_state.setdefault(SESSION_KEY_REPORTS, {})
    st.session_state.initialized = True


def ensure_session_initialized():
    if "initialized" not in st.session_state:
        init_session()


def get_corpus() -> Corpus:
    ensure_session_initialized()
    return st.session_state[SESSION_KEY_CORPUS]


def add_player(report: ParseReport) -> None:
    corpus = get_corpus()
    corpus.add_player(report.username, report.games)
    st.session_state[SESSION_KEY_REPORTS][report.username] = report


def get_parse_report(username: str) -> ParseReport | None:
    ensure_session_initialized()
    return st.session_state[SESSION_KEY_REPORTS].get(username)
