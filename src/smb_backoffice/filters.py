# SMB Back-Office - Financial back-office engine for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Transaction filters for SMB Back-Office.

Reports are usually computed for one company and, optionally, a window of
due dates plus a few grouping keys (category, status, cost center,
supplier/customer). This module defines a ``TransactionFilter`` value object
and the function applying it to a collection.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .dates import parse_date
from .models import Transaction


@dataclass(frozen=True)
class TransactionFilter:
    """Selection criteria; ``None`` means "no constraint" for that field.

    ``start`` and ``end`` are inclusive bounds applied to the due date.
    """

    company: Optional[str] = None
    start: Optional[date] = None
    end: Optional[date] = None
    category: Optional[str] = None
    status: Optional[str] = None
    cost_center: Optional[str] = None
    contact_id: Optional[str] = None
    type: Optional[str] = None

    @property
    def has_date_bounds(self) -> bool:
        return self.start is not None or self.end is not None

    def describe(self) -> str:
        """Short human-readable summary of the active criteria."""
        parts = []
        if self.company is not None:
            parts.append(f"company={self.company}")
        if self.start is not None or self.end is not None:
            start = self.start.isoformat() if self.start else "…"
            end = self.end.isoformat() if self.end else "…"
            parts.append(f"due {start} → {end}")
        for name in ("category", "status", "cost_center", "contact_id", "type"):
            value = getattr(self, name)
            if value is not None:
                parts.append(f"{name}={value}")
        return ", ".join(parts) if parts else "none"


def _matches(transaction: Transaction, flt: TransactionFilter) -> bool:
    if flt.company is not None and transaction.company != flt.company:
        return False
    if flt.category is not None and transaction.category != flt.category:
        return False
    if flt.status is not None and transaction.status != flt.status:
        return False
    if flt.cost_center is not None and transaction.cost_center != flt.cost_center:
        return False
    if flt.contact_id is not None and transaction.contact_id != flt.contact_id:
        return False
    if flt.type is not None and transaction.type != flt.type:
        return False

    if flt.has_date_bounds:
        due = parse_date(transaction.due_date)
        # Undated items cannot be placed in a window.
        if due is None:
            return False
        if flt.start is not None and due < flt.start:
            return False
        if flt.end is not None and due > flt.end:
            return False

    return True


def apply_filter(
    transactions: Iterable[Transaction], flt: Optional[TransactionFilter]
) -> list[Transaction]:
    """Return the transactions matching ``flt``, preserving their order."""
    if flt is None:
        return list(transactions)
    return [t for t in transactions if _matches(t, flt)]


def filter_by_company(
    transactions: Iterable[Transaction], company: Optional[str]
) -> list[Transaction]:
    """Keep the transactions of one company (all of them if company is None)."""
    return apply_filter(transactions, TransactionFilter(company=company))
