# SMB Back-Office - Financial back-office engine for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Late-payment charges for SMB Back-Office.

This module computes the interest and fine accrued by an overdue
transaction, and applies them when the transaction is settled.

Rules
-----
- Only transactions whose status is 'Overdue' accrue charges. Pending,
  scheduled and paid items always return ``(0, 0, amount)``, whatever their
  rate fields say.
- The computation works at day granularity. If the due date cannot be
  parsed, or if ``today`` is not strictly after the due date (stale
  'Overdue' label), no charge is applied.
- Fine:      amount * fine_rate / 100 (when fine_rate > 0), independent of
             the number of days overdue.
- Interest:  requires both interest_rate and interest_type.
    daily:   amount * rate / 100 * days_overdue
    monthly: amount * rate / 100 * days_overdue / 30
             (flat 30-day month, not calendar month boundaries)
- Interest and fine are floored at 0 (negative rates never reduce a debt).

``today`` is always supplied by the caller; nothing here reads the clock.
"""

from dataclasses import replace
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from .dates import as_day, parse_date, to_iso
from .models import (
    INTEREST_DAILY,
    INTEREST_MONTHLY,
    STATUS_OVERDUE,
    STATUS_PAID,
    ZERO,
    Charges,
    Transaction,
)

HUNDRED = Decimal("100")
DAYS_PER_MONTH = Decimal("30")
CENT = Decimal("0.01")


def _no_charges(transaction: Transaction) -> Charges:
    return Charges(interest=ZERO, fine=ZERO, total=transaction.amount)


def days_overdue(due: date, today: Union[date, datetime]) -> int:
    """Number of whole days elapsed since the due date (never negative)."""
    return max(0, (as_day(today) - due).days)


def compute_charges(
    transaction: Transaction, today: Union[date, datetime]
) -> Charges:
    """Compute the interest, fine and total payable for a transaction.

    Args:
        transaction: The transaction to evaluate.
        today: Reference date; time-of-day is ignored.

    Returns:
        A ``Charges`` tuple (interest, fine, total) where
        total = amount + interest + fine.
    """
    if transaction.status != STATUS_OVERDUE:
        return _no_charges(transaction)

    due = parse_date(transaction.due_date)
    day = as_day(today)
    if due is None or day <= due:
        return _no_charges(transaction)

    amount = transaction.amount

    fine = ZERO
    if transaction.fine_rate and transaction.fine_rate > 0:
        fine = amount * transaction.fine_rate / HUNDRED

    interest = ZERO
    if transaction.interest_rate and transaction.interest_type:
        days = Decimal(days_overdue(due, day))
        rate = transaction.interest_rate
        # Multiply first, divide last: keeps whole periods exact.
        if transaction.interest_type == INTEREST_DAILY:
            interest = amount * rate * days / HUNDRED
        elif transaction.interest_type == INTEREST_MONTHLY:
            interest = amount * rate * days / (HUNDRED * DAYS_PER_MONTH)

    interest = max(ZERO, interest)
    fine = max(ZERO, fine)

    return Charges(interest=interest, fine=fine, total=amount + interest + fine)


def quantize_money(value: Decimal) -> Decimal:
    """Round a monetary value to cents (half-up)."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def settle_transaction(
    transaction: Transaction, today: Union[date, datetime]
) -> Transaction:
    """Mark a transaction as paid, folding any accrued charges into it.

    The returned copy has:
        - status 'Paid',
        - amount overwritten with the settled total (rounded to cents),
        - interest/fine fields cleared,
        - payment_date stamped with ``today`` (YYYY-MM-DD).

    A transaction that is already paid is returned unchanged.
    """
    if transaction.status == STATUS_PAID:
        return transaction

    charges = compute_charges(transaction, today)
    return replace(
        transaction,
        status=STATUS_PAID,
        amount=quantize_money(charges.total),
        interest_rate=None,
        interest_type=None,
        fine_rate=None,
        payment_date=to_iso(today),
    )
