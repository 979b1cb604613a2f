"""Відображення таблиці останніх записів."""

from __future__ import annotations

import pandas as pd
import streamlit as st
from streamlit import column_config as colcfg

# columns to display (in order)
_DISPLAY_COLS = [
    "timestamp",
    "kind",
    "level",
    "status",
    "event",
    "method",
    "path",
    "ip",
    "response_time_ms",
    "message",
]

_COL_LABELS = {
    "timestamp": "Time",
    "kind": "Kind",
    "level": "Level",
    "status": "Status",
    "event": "Event",
    "method": "Method",
    "path": "Path",
    "ip": "Source",
    "response_time_ms": "RT (ms)",
    "message": "Message",
}

_COL_CONFIG = {
    "Time": colcfg.DatetimeColumn("Time", format="HH:mm:ss.SSS"),
    "Status": colcfg.NumberColumn("Status", format="%d"),
    "RT (ms)": colcfg.NumberColumn("RT (ms)", format="%d"),
}


def render_records_table(df: pd.DataFrame, max_rows: int = 500) -> None:
    """Render the newest records; sorting and search come from the widget."""
    if df.empty:
        st.info("No records in the selected window.")
        return

    cols = [c for c in _DISPLAY_COLS if c in df.columns]
    view = df.sort_values("timestamp", ascending=False)[cols].head(max_rows)
    view = view.rename(columns=_COL_LABELS)

    st.caption(f"Showing {len(view)} of {len(df)} records")
    st.dataframe(
        view,
        hide_index=True,
        use_container_width=True,
        height=min(len(view) * 36 + 42, 600),
        column_config=_COL_CONFIG,
        key="tbl_records",
    )
