# SMB Back-Office - Financial back-office engine for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
I/O module for SMB Back-Office.

This module reads transactions and reference data from CSV files and
normalizes them into the dataclasses of ``models.py``. It is the only place
where raw input is validated: the computation modules assume well-formed
records.

Transactions CSV
----------------

Required columns (case-insensitive):

    id, amount, due_date, status, type

Optional columns:

    description, category, cost_center, company, payment_date,
    scheduled_payment_date, interest_rate, interest_type, fine_rate,
    fixed_or_variable, contact_id, bank_account

camelCase headers exported by the web front-end (``dueDate``,
``costCenter``, ``fineRate``...) are accepted as aliases, and so are the
Portuguese status/type values it stores:

    Pendente -> Pending     receita -> income
    Pago     -> Paid        despesa -> expense
    Vencido  -> Overdue     fixa    -> fixed
    Agendado -> Scheduled   variável -> variable

Amounts accept either '.' or ',' as decimal separator. Dates are kept as
text; they are parsed lazily by ``dates.parse_date``.

Bank accounts CSV:  id, name, balance[, company]
Cost centers CSV:   id, name[, budget, company, description]
"""

import os
import re
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

import pandas as pd

from .models import (
    INTEREST_TYPES,
    STATUS_OVERDUE,
    STATUS_PAID,
    STATUS_PENDING,
    STATUS_SCHEDULED,
    STATUSES,
    TRANSACTION_TYPES,
    TYPE_EXPENSE,
    TYPE_INCOME,
    ZERO,
    BankAccount,
    CostCenter,
    Transaction,
)

PathLike = Union[str, "os.PathLike[str]"]

_STATUS_ALIASES = {
    "pendente": STATUS_PENDING,
    "pago": STATUS_PAID,
    "vencido": STATUS_OVERDUE,
    "agendado": STATUS_SCHEDULED,
}
_STATUS_ALIASES.update({s.lower(): s for s in STATUSES})

_TYPE_ALIASES = {"receita": TYPE_INCOME, "despesa": TYPE_EXPENSE}
_TYPE_ALIASES.update({t: t for t in TRANSACTION_TYPES})

_FIXED_VARIABLE_ALIASES = {
    "fixa": "fixed",
    "fixed": "fixed",
    "variável": "variable",
    "variavel": "variable",
    "variable": "variable",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

TRANSACTION_REQUIRED = {"id", "amount", "due_date", "status", "type"}


def _normalize_column(name: str) -> str:
    """'dueDate' / 'Due Date' / ' due_date ' -> 'due_date'."""
    snake = _CAMEL_BOUNDARY.sub("_", str(name).strip())
    return re.sub(r"[\s\-]+", "_", snake).lower()


def _read_csv(path: PathLike) -> pd.DataFrame:
    # Everything as text: amounts are converted to Decimal, never to float.
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [_normalize_column(c) for c in df.columns]
    return df


def _require_columns(df: pd.DataFrame, required: set[str], what: str) -> None:
    missing = sorted(required - set(df.columns))
    if missing:
        raise ValueError(
            f"Invalid {what} structure: missing column(s) {', '.join(missing)}. "
            f"Required columns: {', '.join(sorted(required))}."
        )


def parse_amount(raw: str, column: str = "amount") -> Decimal:
    """Convert a CSV cell to Decimal ('1234.56', '1234,56', '1.234,56')."""
    text = str(raw).strip().replace(" ", "")
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    try:
        value = Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(
            f"Invalid numeric value {raw!r} in '{column}' column."
        ) from exc
    if not value.is_finite():
        raise ValueError(f"Invalid numeric value {raw!r} in '{column}' column.")
    return value


def _optional_amount(raw: str, column: str) -> Optional[Decimal]:
    if raw is None or str(raw).strip() == "":
        return None
    return parse_amount(raw, column)


def _optional_text(row: dict, column: str) -> Optional[str]:
    value = str(row.get(column, "") or "").strip()
    return value or None


def _normalize_status(raw: str) -> str:
    key = str(raw).strip().lower()
    if key not in _STATUS_ALIASES:
        raise ValueError(
            f"Unknown transaction status {raw!r}. "
            f"Expected one of: {', '.join(STATUSES)}."
        )
    return _STATUS_ALIASES[key]


def _normalize_type(raw: str) -> str:
    key = str(raw).strip().lower()
    if key not in _TYPE_ALIASES:
        raise ValueError(
            f"Unknown transaction type {raw!r}. "
            f"Expected one of: {', '.join(TRANSACTION_TYPES)}."
        )
    return _TYPE_ALIASES[key]


def _normalize_interest_type(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    key = raw.lower()
    if key not in INTEREST_TYPES:
        raise ValueError(
            f"Unknown interest type {raw!r}. "
            f"Expected one of: {', '.join(INTEREST_TYPES)}."
        )
    return key


def read_transactions(path: PathLike) -> list[Transaction]:
    """
    Read payables/receivables from a CSV file.

    Parameters
    ----------
    path:
        Path to the CSV file.

    Returns
    -------
    list[Transaction]
        One transaction per CSV row, in file order.

    Raises
    ------
    ValueError
        If a required column is missing, or if a row carries a non-numeric
        amount/rate, a negative amount, or an unknown status, type or
        interest type.
    """
    df = _read_csv(path)
    _require_columns(df, TRANSACTION_REQUIRED, "transactions CSV")

    out = []
    for row in df.to_dict(orient="records"):
        amount = parse_amount(row["amount"])
        if amount < 0:
            raise ValueError(
                f"Invalid numeric value {row['amount']!r} in 'amount' column: "
                "amounts cannot be negative, use the transaction type instead."
            )

        fixed_or_variable = _optional_text(row, "fixed_or_variable")
        if fixed_or_variable is not None:
            fixed_or_variable = _FIXED_VARIABLE_ALIASES.get(
                fixed_or_variable.lower(), fixed_or_variable
            )

        out.append(
            Transaction(
                id=str(row["id"]).strip(),
                amount=amount,
                due_date=str(row["due_date"]).strip(),
                status=_normalize_status(row["status"]),
                type=_normalize_type(row["type"]),
                category=str(row.get("category", "")).strip(),
                cost_center=str(row.get("cost_center", "")).strip(),
                description=str(row.get("description", "")).strip(),
                company=str(row.get("company", "")).strip(),
                payment_date=_optional_text(row, "payment_date"),
                scheduled_payment_date=_optional_text(row, "scheduled_payment_date"),
                interest_rate=_optional_amount(
                    row.get("interest_rate", ""), "interest_rate"
                ),
                interest_type=_normalize_interest_type(
                    _optional_text(row, "interest_type")
                ),
                fine_rate=_optional_amount(row.get("fine_rate", ""), "fine_rate"),
                fixed_or_variable=fixed_or_variable,
                contact_id=_optional_text(row, "contact_id"),
                bank_account=_optional_text(row, "bank_account"),
            )
        )
    return out


def read_bank_accounts(path: PathLike) -> list[BankAccount]:
    """Read bank accounts (id, name, balance[, company]) from a CSV file."""
    df = _read_csv(path)
    _require_columns(df, {"id", "name", "balance"}, "bank accounts CSV")

    return [
        BankAccount(
            id=str(row["id"]).strip(),
            name=str(row["name"]).strip(),
            balance=parse_amount(row["balance"], "balance"),
            company=str(row.get("company", "")).strip(),
        )
        for row in df.to_dict(orient="records")
    ]


def read_cost_centers(path: PathLike) -> list[CostCenter]:
    """Read cost centers (id, name[, budget, company, description]) from CSV."""
    df = _read_csv(path)
    _require_columns(df, {"id", "name"}, "cost centers CSV")

    return [
        CostCenter(
            id=str(row["id"]).strip(),
            name=str(row["name"]).strip(),
            budget=_optional_amount(row.get("budget", ""), "budget") or ZERO,
            company=str(row.get("company", "")).strip(),
            description=str(row.get("description", "")).strip(),
        )
        for row in df.to_dict(orient="records")
    ]
