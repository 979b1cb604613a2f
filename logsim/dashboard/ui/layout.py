"""Page layout — sidebar controls and the title bar.

``render_sidebar`` populates the left panel and returns an object with
the current filter values.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import streamlit as st

from logsim.dashboard.ui.state import LEVELS


@dataclass
class SidebarState:
    """Values collected from sidebar controls."""
    window_minutes: int
    log_type: str
    levels: list[str]
    attacks_only: bool


def render_header() -> None:
    st.markdown(
        '<h1 class="page-title">Log Simulator Dashboard</h1>'
        '<p class="page-subtitle">'
        "Live view of synthesized application and access logs."
        "</p>",
        unsafe_allow_html=True,
    )


def render_sidebar() -> SidebarState:
    """Draw sidebar controls and return current selections."""

    with st.sidebar:
        st.markdown('<p class="sidebar-brand">logsim</p>', unsafe_allow_html=True)
        st.caption("History store viewer")
        st.divider()

        st.markdown("##### Window")
        window_minutes = st.select_slider(
            "Last N minutes",
            options=[5, 15, 30, 60, 180, 360, 720, 1440, 2880],
            key="window_minutes",
        )
        log_type = st.radio(
            "Records",
            options=["all", "application", "access"],
            horizontal=True,
            key="log_type",
        )

        st.divider()
        st.markdown("##### Filter")
        levels = st.multiselect("Level", options=LEVELS, key="levels")
        attacks_only = st.toggle("Attacks only", key="attacks_only")

        st.divider()
        st.markdown("##### Auto-refresh")
        auto_refresh = st.toggle("Enable auto-refresh", key="auto_refresh")
        st.slider(
            "Refresh interval (sec)",
            min_value=2,
            max_value=60,
            step=1,
            disabled=not auto_refresh,
            key="refresh_interval",
        )

        now_str = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        st.markdown(
            f'<p class="refresh-timestamp">Last refresh: {now_str}</p>',
            unsafe_allow_html=True,
        )

    return SidebarState(
        window_minutes=int(window_minutes),
        log_type=str(log_type),
        levels=list(levels),
        attacks_only=bool(attacks_only),
    )
