"""Стан сесії dashboard: значення за замовчуванням та лічильник оновлень."""

from __future__ import annotations

import os
from datetime import timedelta

import streamlit as st

# Live mode is switched on by the container running the dashboard next to the simulator.
_LIVE_MODE = os.environ.get("LOGSIM_LIVE_MODE", "") == "1"

LEVELS: list[str] = ["info", "warn", "error"]


def _defaults() -> dict[str, object]:
    return {
        "window_minutes": int(os.environ.get("LOGSIM_DASHBOARD_WINDOW", "60")),
        "log_type": "all",
        "levels": list(LEVELS),
        "attacks_only": False,
        "auto_refresh": _LIVE_MODE,
        "refresh_interval": 5,
        "refresh_tick": 0,
    }


def init_state() -> None:
    """Заповнює st.session_state значеннями, яких там ще немає."""
    for key, value in _defaults().items():
        st.session_state.setdefault(key, value)


def refresh_every() -> timedelta | None:
    """Період автооновлення фрагмента, або None коли його вимкнено."""
    if not st.session_state.get("auto_refresh", False):
        return None
    return timedelta(seconds=int(st.session_state.get("refresh_interval", 5)))


def bump_refresh_tick() -> int:
    st.session_state["refresh_tick"] = st.session_state.get("refresh_tick", 0) + 1
    return st.session_state["refresh_tick"]
