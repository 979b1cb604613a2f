"""Головний файл дашборду симулятора логів на Streamlit.

Запуск: ``streamlit run logsim/dashboard/app.py``
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import streamlit as st

# ── page config (MUST be the first Streamlit call) ───────────────────────────

st.set_page_config(
    page_title="Log Simulator Dashboard",
    layout="wide",
    initial_sidebar_state="expanded",
)

# ── inject theme CSS ────────────────────────────────────────────────────────

_CSS_PATH = Path(__file__).resolve().parent / "styles" / "theme.css"
if _CSS_PATH.exists():
    st.markdown(f"<style>{_CSS_PATH.read_text()}</style>", unsafe_allow_html=True)

# ── local imports (after page config) ───────────────────────────────────────

from logsim.dashboard.data_access import (  # noqa: E402
    DB_PATH,
    attack_categories,
    events_per_minute,
    filter_frame,
    kpis,
    load_window,
    open_store,
    status_classes,
)
from logsim.dashboard.ui.cards import kpi_card  # noqa: E402
from logsim.dashboard.ui.charts import (  # noqa: E402
    CHART_CONFIG,
    attack_category_bar,
    events_per_minute_chart,
    status_class_bar,
)
from logsim.dashboard.ui.layout import render_header, render_sidebar  # noqa: E402
from logsim.dashboard.ui.state import bump_refresh_tick, init_state, refresh_every  # noqa: E402
from logsim.dashboard.ui.tables import render_records_table  # noqa: E402

# ── initialise session state ────────────────────────────────────────────────

init_state()

# ── sidebar + header ────────────────────────────────────────────────────────

sidebar = render_sidebar()
render_header()


# ═════════════════════════════════════════════════════════════════════════════
#   LIVE DATA SECTION -- wrapped in @st.fragment for flicker-free refresh
# ═════════════════════════════════════════════════════════════════════════════

@st.fragment(run_every=refresh_every())
def _live_data_section() -> None:
    bump_refresh_tick()

    # ── guard: no database ──────────────────────────────────────────
    store = open_store(DB_PATH)
    if store is None:
        st.markdown(
            '<div class="no-data-box">'
            "<strong>No history yet.</strong> "
            f"The database <code>{DB_PATH}</code> was not found.<br><br>"
            "Start the simulator:<br>"
            "<code>logsim run</code>"
            "</div>",
            unsafe_allow_html=True,
        )
        return

    try:
        df_raw = load_window(store, sidebar.window_minutes, sidebar.log_type)
    finally:
        store.close()

    if df_raw is None:
        st.error("History store could not be read. See the dashboard log for details.")
        return

    df = filter_frame(df_raw, levels=sidebar.levels, attacks_only=sidebar.attacks_only)

    # ── KPI CARDS ───────────────────────────────────────────────────
    k = kpis(df)
    cards = [
        ("Total", f"{k['total']:.0f}", f"last {sidebar.window_minutes} min", "total"),
        ("Application", f"{k['application']:.0f}", "JSON events", "application"),
        ("Access", f"{k['access']:.0f}", "HTTP requests", "access"),
        ("Error share", f"{k['error_share']:.1f}%", "of application events", "errors"),
        ("Attacks", f"{k['attacks']:.0f}", "security_attack_* events", "attacks"),
    ]
    for col, (title, value, label, accent) in zip(st.columns(len(cards)), cards):
        with col:
            st.markdown(kpi_card(title, value, label, accent), unsafe_allow_html=True)

    # ── CHART: events per minute ────────────────────────────────────
    st.markdown('<div class="section-gap"></div>', unsafe_allow_html=True)

    fig = events_per_minute_chart(events_per_minute(df))
    if fig is not None:
        st.plotly_chart(fig, width="stretch", config=CHART_CONFIG, key="chart_epm")
    else:
        st.markdown(
            '<div class="no-data-box">'
            "<strong>Events per Minute</strong><br>Not enough data yet."
            "</div>",
            unsafe_allow_html=True,
        )

    # ── CHARTS: status classes + attack categories ──────────────────
    c1, c2 = st.columns(2)
    with c1:
        st.plotly_chart(
            status_class_bar(status_classes(df)),
            width="stretch",
            config=CHART_CONFIG,
            key="chart_status",
        )
    with c2:
        attack_fig = attack_category_bar(attack_categories(df))
        if attack_fig is not None:
            st.plotly_chart(attack_fig, width="stretch", config=CHART_CONFIG, key="chart_attacks")
        else:
            st.markdown(
                '<div class="no-data-box">'
                "<strong>Attacks by Category</strong><br>No attacks in this window."
                "</div>",
                unsafe_allow_html=True,
            )

    # ── RECORDS TABLE ───────────────────────────────────────────────
    st.markdown('<div class="section-gap"></div>', unsafe_allow_html=True)
    st.markdown('<p class="section-label">Recent Records</p>', unsafe_allow_html=True)
    render_records_table(df)

    # ── DIAGNOSTICS ─────────────────────────────────────────────────
    with st.expander("Diagnostics (live debug info)", expanded=False):
        _now = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        _last = df_raw["timestamp"].max() if not df_raw.empty else "N/A"
        st.markdown(
            f"""
| Metric | Value |
|---|---|
| **Refresh tick** | {st.session_state.get("refresh_tick", "?")} |
| **Last refresh (UI)** | {_now} |
| **Database** | {DB_PATH} |
| **Rows loaded** | {len(df_raw)} |
| **Rows after filters** | {len(df)} |
| **Newest record** | {_last} |
""",
        )


# ── invoke the fragment ─────────────────────────────────────────────────────

_live_data_section()
