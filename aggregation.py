"""
aggregation.py
--------------
Derived figures for the dashboard: income/expense/balance totals and the
per-category expense breakdown that drives the spending chart.

Everything here is pure. Amounts are parsed from their stored text; values
that do not parse (or are infinite) count as 0 so that one bad record from
an older save cannot break the page.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

import pandas as pd

from models import CATEGORIES, Transaction

_COLUMNS = ["id", "type", "amount", "category", "description", "date"]


@dataclass(frozen=True)
class Totals:
    income: float = 0.0
    expense: float = 0.0
    balance: float = 0.0


@dataclass(frozen=True)
class Summary:
    totals: Totals = field(default_factory=Totals)
    breakdown: dict[str, float] = field(default_factory=dict)


def parse_amount(text) -> float:
    """Parse one stored amount; anything unusable becomes 0.0."""
    try:
        value = float(text)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def parse_amounts(amounts: pd.Series) -> pd.Series:
    """``parse_amount`` over a column, so totals agree with what entry accepted."""
    return amounts.map(parse_amount).astype(float)


def _prep(transactions: Iterable[Transaction]) -> pd.DataFrame:
    df = pd.DataFrame([t.model_dump() for t in transactions], columns=_COLUMNS)
    df["value"] = parse_amounts(df["amount"])
    return df


def _totals(df: pd.DataFrame) -> Totals:
    income = float(df.loc[df["type"] == "income", "value"].sum())
    expense = float(df.loc[df["type"] == "expense", "value"].sum())
    return Totals(income=income, expense=expense, balance=income - expense)


def _breakdown(df: pd.DataFrame) -> dict[str, float]:
    expenses = df[df["type"] == "expense"]
    by_cat = expenses.groupby("category")["value"].sum()
    by_cat = by_cat.reindex(list(CATEGORIES), fill_value=0.0)
    return {category: float(total) for category, total in by_cat.items() if total > 0}


def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    """Total income, total expense and their difference."""
    return _totals(_prep(transactions))


def category_breakdown(transactions: Iterable[Transaction]) -> dict[str, float]:
    """
    Expense total per category, in canonical category order.

    Categories without any positive spend are left out, so the result maps
    straight onto chart segments.
    """
    return _breakdown(_prep(transactions))


def summarize(transactions: Iterable[Transaction]) -> Summary:
    df = _prep(transactions)
    return Summary(totals=_totals(df), breakdown=_breakdown(df))
