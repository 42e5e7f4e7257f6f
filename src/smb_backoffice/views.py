# SMB Back-Office - Financial back-office engine for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
View utilities for SMB Back-Office.

The report builders in ``reports.py`` return dataclasses holding
``Decimal`` amounts. The helpers below flatten them into pandas DataFrames
with stable column orders, ready to be printed by the CLI (or handed to any
other presentation layer). Amounts are rounded to ``decimals`` places
(half-up) and kept as ``Decimal`` so that no binary rounding sneaks in.
"""

from collections.abc import Iterable
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

import pandas as pd

from .charges import compute_charges
from .dates import format_date
from .models import Transaction
from .reports import (
    Balancete,
    CashFlowLedger,
    CostCenterSummary,
    DreReport,
    PayablesIndicators,
)


def _round(value: Decimal, decimals: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


def charges_to_dataframe(
    transactions: Iterable[Transaction],
    today: Union[date, datetime],
    decimals: int = 2,
) -> pd.DataFrame:
    """One row per transaction with its current charges.

    Columns: id, description, due_date, status, amount, interest, fine, total.
    """
    rows = []
    for t in transactions:
        charges = compute_charges(t, today)
        rows.append(
            {
                "id": t.id,
                "description": t.description,
                "due_date": format_date(t.due_date),
                "status": t.status,
                "amount": _round(t.amount, decimals),
                "interest": _round(charges.interest, decimals),
                "fine": _round(charges.fine, decimals),
                "total": _round(charges.total, decimals),
            }
        )
    columns = [
        "id",
        "description",
        "due_date",
        "status",
        "amount",
        "interest",
        "fine",
        "total",
    ]
    return pd.DataFrame(rows, columns=columns)


def dre_to_dataframe(
    dre: DreReport,
    decimals: int = 2,
    revenue_label: str = "(=) Gross operating revenue",
    expense_label: str = "(-) Operating expenses",
    result_label: str = "(=) Net result for the period",
) -> pd.DataFrame:
    """Lay out the DRE as (section, name, amount) rows.

    Expense amounts are displayed negative so that the amount column adds
    up to the net result within each level.
    """
    rows = [
        {"section": "income", "name": revenue_label, "amount": dre.total_income},
    ]
    for name, value in dre.income_by_category.items():
        rows.append({"section": "income", "name": f"  {name}", "amount": value})

    rows.append(
        {"section": "expense", "name": expense_label, "amount": -dre.total_expense}
    )
    for name, value in dre.expense_by_category.items():
        rows.append({"section": "expense", "name": f"  {name}", "amount": -value})

    rows.append({"section": "result", "name": result_label, "amount": dre.net_result})

    df = pd.DataFrame(rows, columns=["section", "name", "amount"])
    df["amount"] = [_round(v, decimals) for v in df["amount"]]
    return df


def balancete_to_dataframe(balancete: Balancete, decimals: int = 2) -> pd.DataFrame:
    """Lay out the balancete as (account, debit, credit) rows plus totals."""
    rows = []
    for line in balancete.debits:
        rows.append(
            {
                "account": line.label,
                "debit": _round(line.amount, decimals),
                "credit": None,
            }
        )
    for line in balancete.credits:
        rows.append(
            {
                "account": line.label,
                "debit": None,
                "credit": _round(line.amount, decimals),
            }
        )
    rows.append(
        {
            "account": "TOTAL",
            "debit": _round(balancete.total_debits, decimals),
            "credit": _round(balancete.total_credits, decimals),
        }
    )
    return pd.DataFrame(rows, columns=["account", "debit", "credit"])


def cash_flow_to_dataframe(ledger: CashFlowLedger, decimals: int = 2) -> pd.DataFrame:
    """Ledger entries, most recent first.

    Columns: payment_date, description, category, cost_center, type, amount
    (signed: income positive, expense negative).
    """
    rows = [
        {
            "payment_date": format_date(t.payment_date),
            "description": t.description,
            "category": t.category,
            "cost_center": t.cost_center,
            "type": t.type,
            "amount": _round(t.signed_amount, decimals),
        }
        for t in ledger.entries
    ]
    columns = [
        "payment_date",
        "description",
        "category",
        "cost_center",
        "type",
        "amount",
    ]
    return pd.DataFrame(rows, columns=columns)


def cash_flow_groups_to_dataframe(
    ledger: CashFlowLedger, decimals: int = 2
) -> pd.DataFrame:
    """Per-group income, expense and subtotal, followed by a TOTAL row."""
    rows = [
        {
            "group": g.key or "-",
            "income": _round(g.income, decimals),
            "expense": _round(g.expense, decimals),
            "subtotal": _round(g.subtotal, decimals),
        }
        for g in ledger.groups
    ]
    rows.append(
        {
            "group": "TOTAL",
            "income": _round(ledger.total_income, decimals),
            "expense": _round(ledger.total_expense, decimals),
            "subtotal": _round(ledger.net_balance, decimals),
        }
    )
    return pd.DataFrame(rows, columns=["group", "income", "expense", "subtotal"])


def cost_centers_to_dataframe(
    summaries: Iterable[CostCenterSummary], decimals: int = 2
) -> pd.DataFrame:
    rows = [
        {
            "cost_center": s.name,
            "budget": _round(s.budget, decimals),
            "movement": _round(s.movement, decimals),
            "balance": _round(s.balance, decimals),
            "spent_pct": _round(s.spent_percentage, 1),
        }
        for s in summaries
    ]
    columns = ["cost_center", "budget", "movement", "balance", "spent_pct"]
    return pd.DataFrame(rows, columns=columns)


def indicators_to_dataframe(
    indicators: PayablesIndicators, decimals: int = 2
) -> pd.DataFrame:
    """Key/value table of the payables indicators."""
    rows = [
        ("paid_this_month", _round(indicators.paid_this_month, decimals)),
        ("overdue_count", indicators.overdue_count),
        ("fixed_expenses", _round(indicators.fixed_expenses, decimals)),
        ("variable_expenses", _round(indicators.variable_expenses, decimals)),
        ("fixed_pct", _round(indicators.fixed_percentage, 1)),
        ("variable_pct", _round(indicators.variable_percentage, 1)),
    ]
    for name, value in indicators.expense_by_category.items():
        rows.append((f"category:{name}", _round(value, decimals)))
    return pd.DataFrame(rows, columns=["indicator", "value"])
