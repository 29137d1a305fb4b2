# dashboard.py — KPI metrics and the spending-breakdown donut

import streamlit as st
import plotly.graph_objects as go
import pandas as pd

from aggregation import Totals
from models import CHART_COLORS


def format_money(value: float, symbol: str = "₹") -> str:
    return f"{symbol}{value:.2f}"


def breakdown_segments(breakdown: dict[str, float]) -> pd.DataFrame:
    """
    One row per chart segment: Category, Amount, Color.

    Colours follow segment position (not category) and cycle through
    CHART_COLORS.
    """
    rows = [
        {"Category": cat, "Amount": amount, "Color": CHART_COLORS[i % len(CHART_COLORS)]}
        for i, (cat, amount) in enumerate(breakdown.items())
    ]
    return pd.DataFrame(rows, columns=["Category", "Amount", "Color"])


def cat_spend(breakdown: dict[str, float]):
    """
    Donut chart of spending by category.
    """
    segments = breakdown_segments(breakdown)
    fig = go.Figure(
        go.Pie(
            labels=segments["Category"].tolist(),
            values=segments["Amount"].tolist(),
            marker=dict(colors=segments["Color"].tolist()),
            hole=0.4,
            sort=False,
            textinfo="percent+label",
            textposition="inside",
        )
    )
    fig.update_layout(title="Spending Breakdown", height=350)
    return fig


def _kpis(totals: Totals, symbol: str = "₹"):
    """
    Income / Expense / Balance metrics across the top of the page.
    """
    col1, col2, col3 = st.columns(3)
    col1.metric("💰 Income", format_money(totals.income, symbol))
    col2.metric("💸 Expense", format_money(totals.expense, symbol))
    col3.metric("🏦 Balance", format_money(totals.balance, symbol))
