import math
from typing import Literal

import streamlit as st

from services.facet_catalog import FacetCatalog
from services.filter_engine import FilterCriteria
from utils.models import COLORS, NumericRange
from utils.session import ensure_session_initialized, get_corpus


def setup_global_page(page_name: str, layout: Literal["wide", "centered"] = "wide"):
    ensure_session_initialized()

    st.set_page_config(
        page_title=f"ClockLense - {page_name}", page_icon="⏱️", layout=layout
    )
    st.markdown(
        """
        <style>
            .block-container {
                padding-top: 2.5rem !important;
                padding-left: 2rem !important;
                padding-right: 2rem !important;
            }
        </style>
        """,
        unsafe_allow_html=True,
    )


def require_players() -> None:
    if not get_corpus().players:
        st.warning("No games loaded. Go to 📥 Load Games and load a player first.")
        st.stop()


def _multi_pills(label: str, options: list[str], key: str) -> list[str]:
    selected = st.pills(
        label=label,
        options=options,
        selection_mode="multi",
        default=options,
        key=key,
    )
    return list(selected or [])


def _range_slider(label: str, r: NumericRange | None, key: str) -> NumericRange | None:
    if r is None:
        return None
    lo, hi = math.floor(r.min), math.ceil(r.max)
    if lo == hi:
        st.caption(f"{label}: {lo}")
        return NumericRange(min=lo, max=hi)
    start, stop = st.slider(label, min_value=lo, max_value=hi, value=(lo, hi), step=1, key=key)
    return NumericRange(min=start, max=stop)


def build_filters(catalog: FacetCatalog) -> FilterCriteria:
    """Render one widget per facet, everything selected by default."""
    with st.form("filter_form"):
        c1, c2 = st.columns(2)
        with c1:
            players = st.multiselect("Players", catalog.players, default=catalog.players)
            include_opponents = st.toggle("Show opponents", value=False)
            colors = _multi_pills("Color", [c.capitalize() for c in COLORS], key="colors")

            st.markdown("**Result**")
            terminations = {
                outcome: _multi_pills(outcome, reasons, key=f"termination_{outcome}")
                for outcome, reasons in catalog.terminations.items()
                if reasons
            }
        with c2:
            st.markdown("**Time control**")
            time_controls = {
                time_class: _multi_pills(time_class.capitalize(), controls, key=f"tc_{time_class}")
                for time_class, controls in catalog.time_controls.items()
            }
            rating = _range_slider("Rating", catalog.rating, key="rating")
            move_number = _range_slider("Move number", catalog.move_number, key="move_number")
            time_left = _range_slider("Time left (seconds)", catalog.time_left, key="time_left")

        st.form_submit_button("Filter", type="primary")

    return FilterCriteria(
        players=players,
        include_opponents=include_opponents,
        colors=[c.lower() for c in colors],
        terminations=terminations,
        time_controls=time_controls,
        rating=rating,
        move_number=move_number,
        time_left=time_left,
    )
