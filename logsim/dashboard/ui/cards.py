"""Білдери HTML KPI карток."""

from __future__ import annotations

ACCENT_CLASS: dict[str, str] = {
    "total": "card-accent-total",
    "application": "card-accent-app",
    "access": "card-accent-access",
    "errors": "card-accent-errors",
    "attacks": "card-accent-attacks",
}


def kpi_card(title: str, value: str, label: str, accent: str = "total") -> str:
    """Побудова однієї KPI картки."""
    accent_cls = ACCENT_CLASS.get(accent, "")
    return (
        f'<div class="kpi-card {accent_cls}">'
        f'  <div class="kpi-card-header">{title}</div>'
        f'  <div class="kpi-card-body">'
        f'    <div class="kpi-metric-main">{value}</div>'
        f'    <div class="kpi-metric-label">{label}</div>'
        f"  </div>"
        f"</div>"
    )
