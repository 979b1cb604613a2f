"""Білдери Plotly графіків."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go

# ── chart config (hide toolbar by default) ──────────────────────────────────

CHART_CONFIG: dict = {"displayModeBar": False}

KIND_COLORS: dict[str, str] = {
    "application": "#8b5cf6",
    "access": "#22c55e",
}

STATUS_COLORS: dict[str, str] = {
    "2xx": "#22c55e",
    "4xx": "#f59e0b",
    "5xx": "#ef4444",
}

# ── shared layout ───────────────────────────────────────────────────────────

_FONT = dict(family="-apple-system, Segoe UI, Roboto, sans-serif", size=13, color="#c9d1d9")

_LAYOUT: dict = dict(
    template="plotly_dark",
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    margin=dict(l=48, r=16, t=44, b=36),
    font=_FONT,
    title=dict(font=dict(size=14, color="#e6edf3"), x=0, xanchor="left", y=0.98, yanchor="top"),
    legend=dict(
        orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1, font=dict(size=11)
    ),
    bargap=0.35,
    height=340,
)

_GRID_COLOR = "rgba(128,128,128,0.10)"


def _base(**overrides: object) -> dict:
    merged = {**_LAYOUT}
    for k, v in overrides.items():
        if isinstance(v, dict) and isinstance(merged.get(k), dict):
            merged[k] = {**merged[k], **v}
        else:
            merged[k] = v
    return merged


# ── events per minute ───────────────────────────────────────────────────────


def events_per_minute_chart(agg: pd.DataFrame) -> go.Figure | None:
    """Line chart, one trace per record kind.

    *agg* is the long frame from ``data_access.events_per_minute``;
    returns *None* when it is empty so the caller can show a placeholder.
    """
    if agg.empty:
        return None
    fig = go.Figure()
    for kind, part in agg.groupby("kind"):
        fig.add_trace(
            go.Scatter(
                x=part["minute"],
                y=part["count"],
                name=str(kind),
                mode="lines",
                line=dict(color=KIND_COLORS.get(str(kind), "#888"), width=2),
                hovertemplate="%{x|%H:%M}<br>%{y} records<extra></extra>",
            )
        )
    fig.update_layout(
        **_base(
            title=dict(text="Events per Minute"),
            xaxis=dict(title="", gridcolor=_GRID_COLOR, tickformat="%H:%M"),
            yaxis=dict(title="", gridcolor=_GRID_COLOR, zeroline=False),
        )
    )
    return fig


# ── status classes ──────────────────────────────────────────────────────────


def status_class_bar(counts: pd.DataFrame) -> go.Figure:
    fig = go.Figure()
    for _, row in counts.iterrows():
        cls = row["status_class"]
        fig.add_trace(
            go.Bar(
                x=[cls],
                y=[row["count"]],
                marker_color=STATUS_COLORS.get(cls, "#888"),
                marker_line_width=0,
                showlegend=False,
                hovertemplate="%{x}: %{y}<extra></extra>",
                text=[str(row["count"])],
                textposition="outside",
                textfont=dict(size=12, color="#e6edf3"),
            )
        )
    fig.update_layout(
        **_base(
            title=dict(text="Responses by Status Class"),
            yaxis=dict(title="", gridcolor=_GRID_COLOR, zeroline=False),
            xaxis=dict(title=""),
        )
    )
    return fig


def attack_category_bar(counts: pd.DataFrame) -> go.Figure | None:
    if counts.empty:
        return None
    fig = go.Figure(
        go.Bar(
            x=counts["count"],
            y=counts["category"],
            orientation="h",
            marker_color="#ef4444",
            marker_line_width=0,
            hovertemplate="%{y}: %{x}<extra></extra>",
        )
    )
    fig.update_layout(
        **_base(
            title=dict(text="Attacks by Category"),
            xaxis=dict(title="", gridcolor=_GRID_COLOR, zeroline=False),
            yaxis=dict(title="", autorange="reversed"),
        )
    )
    return fig
