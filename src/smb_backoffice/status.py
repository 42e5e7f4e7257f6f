# SMB Back-Office - Financial back-office engine for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Status reconciliation for SMB Back-Office.

Charges only accrue on 'Overdue' transactions, and 'Overdue' is never
typed in by users: it is derived here. ``reconcile_statuses`` must therefore
run before charges are computed for display or settlement.

Eligibility for promotion:
    - status is exactly 'Pending' (Paid, Scheduled and already-Overdue
      items are left alone),
    - the due date parses, and
    - due date < today (strict, day granularity).

Reconciliation is idempotent: running it twice with the same ``today``
yields the same collection.
"""

from collections.abc import Iterable
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Union

from .dates import as_day, parse_date
from .models import STATUS_OVERDUE, STATUS_PENDING, STATUS_SCHEDULED, Transaction


def is_past_due(transaction: Transaction, today: Union[date, datetime]) -> bool:
    """Return True if a pending transaction should now be considered overdue."""
    if transaction.status != STATUS_PENDING:
        return False
    due = parse_date(transaction.due_date)
    if due is None:
        return False
    return due < as_day(today)


def overdue_ids(
    transactions: Iterable[Transaction], today: Union[date, datetime]
) -> set[str]:
    """Return the ids of the transactions that must be promoted to 'Overdue'."""
    return {t.id for t in transactions if is_past_due(t, today)}


def reconcile_statuses(
    transactions: Iterable[Transaction], today: Union[date, datetime]
) -> list[Transaction]:
    """Promote past-due pending transactions to 'Overdue'.

    Args:
        transactions: The current transaction collection.
        today: Reference date; time-of-day is ignored.

    Returns:
        A new list, in the same order, where eligible transactions are
        replaced by copies with status 'Overdue'. Every other transaction is
        returned as the very same object.
    """
    return [
        replace(t, status=STATUS_OVERDUE) if is_past_due(t, today) else t
        for t in transactions
    ]


def schedule_transaction(
    transaction: Transaction, scheduled_date: Optional[str] = None
) -> Transaction:
    """Move a pending transaction to 'Scheduled'.

    Only 'Pending' transactions can be scheduled; any other status is
    returned unchanged. When given, ``scheduled_date`` is recorded as the
    planned payment date.
    """
    if transaction.status != STATUS_PENDING:
        return transaction

    if scheduled_date is None:
        return replace(transaction, status=STATUS_SCHEDULED)

    return replace(
        transaction,
        status=STATUS_SCHEDULED,
        scheduled_payment_date=scheduled_date,
    )
