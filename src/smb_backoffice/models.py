# SMB Back-Office - Financial back-office engine for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Data model for SMB Back-Office.

The core operates on a single entity, the ``Transaction`` (a payable or a
receivable), plus a few pieces of reference data used by the reports
(bank accounts, bank movements, cost centers).

All records are frozen dataclasses. Functions that "change" a transaction
(status promotion, settlement, scheduling) return a new instance built with
``dataclasses.replace`` and leave the caller's collection untouched.

Status lifecycle
----------------

    Pending   --[due date passes]-->  Overdue
    Pending   --[user schedules]--->  Scheduled
    Pending / Scheduled / Overdue --[settlement]--> Paid   (terminal)

``Overdue`` is never entered by data entry; it is derived by
``status.reconcile_statuses``.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Literal, NamedTuple, Optional

STATUS_PENDING = "Pending"
STATUS_PAID = "Paid"
STATUS_OVERDUE = "Overdue"
STATUS_SCHEDULED = "Scheduled"

STATUSES = (STATUS_PENDING, STATUS_PAID, STATUS_OVERDUE, STATUS_SCHEDULED)

# Statuses that still represent an open (unsettled) balance in the reports.
UNSETTLED_STATUSES = (STATUS_PENDING, STATUS_OVERDUE)

TYPE_INCOME = "income"
TYPE_EXPENSE = "expense"

TRANSACTION_TYPES = (TYPE_INCOME, TYPE_EXPENSE)

INTEREST_DAILY = "daily"
INTEREST_MONTHLY = "monthly"

INTEREST_TYPES = (INTEREST_DAILY, INTEREST_MONTHLY)

Status = Literal["Pending", "Paid", "Overdue", "Scheduled"]
TransactionType = Literal["income", "expense"]
InterestType = Literal["daily", "monthly"]

ZERO = Decimal("0")


@dataclass(frozen=True)
class Transaction:
    """
    A payable (``expense``) or receivable (``income``) record.

    Attributes
    ----------
    id :
        Opaque unique identifier.
    amount :
        Principal value (non-negative).
    due_date :
        Due date, as DD/MM/YYYY or YYYY-MM-DD text.
    status :
        One of Pending, Paid, Overdue, Scheduled.
    type :
        'income' or 'expense'; drives the sign in every aggregation.
    category, cost_center :
        Free-text grouping keys used by the reports.
    payment_date :
        Stamped when the transaction is settled.
    interest_rate, interest_type, fine_rate :
        Optional late-payment conditions, in percent
        (e.g. interest_rate=1 means 1% per day or per month).
    """

    id: str
    amount: Decimal
    due_date: str
    status: Status
    type: TransactionType
    category: str = ""
    cost_center: str = ""
    description: str = ""
    company: str = ""
    payment_date: Optional[str] = None
    scheduled_payment_date: Optional[str] = None
    interest_rate: Optional[Decimal] = None
    interest_type: Optional[InterestType] = None
    fine_rate: Optional[Decimal] = None
    fixed_or_variable: Optional[str] = None
    contact_id: Optional[str] = None
    bank_account: Optional[str] = None

    @property
    def is_income(self) -> bool:
        return self.type == TYPE_INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TYPE_EXPENSE

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the cash-flow sign applied (income +, expense -)."""
        return self.amount if self.is_income else -self.amount


class Charges(NamedTuple):
    """Late-payment charges computed for one transaction."""

    interest: Decimal
    fine: Decimal
    total: Decimal


@dataclass(frozen=True)
class BankAccount:
    """A company bank account with its opening balance."""

    id: str
    name: str
    balance: Decimal
    company: str = ""


@dataclass(frozen=True)
class BankTransaction:
    """A movement on a bank account statement ('credit' or 'debit')."""

    id: str
    bank_account_id: str
    date: str
    amount: Decimal
    kind: str
    description: str = ""


@dataclass(frozen=True)
class CostCenter:
    """A cost center with an optional spending budget."""

    id: str
    name: str
    budget: Decimal = ZERO
    company: str = ""
    description: str = ""
