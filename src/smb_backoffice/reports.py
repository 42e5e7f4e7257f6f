# SMB Back-Office - Financial back-office engine for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Report aggregation engine for SMB Back-Office.

This module turns a collection of transactions into cash-basis financial
statements. All functions are pure: they take transactions (already
filtered by company / period by the caller if needed) and return new report
structures.

1. DRE (Demonstração do Resultado do Exercício)
   ---------------------------------------------
   ``build_dre()`` keeps paid transactions only, sums them by category
   separately for income and expenses, and computes:
       net_result = total_income - total_expense
   Categories appear only if at least one paid transaction feeds them.

2. Balancete (simulated trial balance)
   ------------------------------------
   ``build_balancete()`` lays out:
       debits  : bank balances, open receivables
       credits : open payables, realized net result, capital plug
   where the capital / retained earnings plug is
       debits - (open payables + net result)
   so total debits equal total credits by construction. This is an
   approximation, not double-entry bookkeeping.

3. Cash-flow ledger
   -----------------
   ``build_cash_flow()`` lists paid transactions carrying a payment date,
   most recent first, optionally grouped by 'type' or 'cost_center'.
   Each group subtotal is Σ income - Σ expense; the group subtotals add up
   to the ledger's net balance.

4. Budget and payables indicators
   -------------------------------
   ``build_cost_center_summary()`` compares the paid movements of each cost
   center with its budget; ``build_payables_indicators()`` computes the
   monthly KPIs displayed above the payables report;
   ``bank_account_balance()`` replays bank movements on top of an opening
   balance.

Money values are ``Decimal``. Derived percentages resolve to 0 when their
denominator is 0.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from .dates import as_day, parse_date
from .models import (
    STATUS_OVERDUE,
    STATUS_PAID,
    UNSETTLED_STATUSES,
    ZERO,
    BankAccount,
    BankTransaction,
    CostCenter,
    Transaction,
)

DEFAULT_OTHER_INCOME_LABEL = "Other income"
DEFAULT_OTHER_EXPENSE_LABEL = "Other expenses"

CASH_FLOW_GROUPINGS = ("type", "cost_center")

HUNDRED = Decimal("100")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


def _percentage(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole * 100, or 0 when whole is not positive."""
    if whole <= 0:
        return ZERO
    return part / whole * HUNDRED


def _paid(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [t for t in transactions if t.status == STATUS_PAID]


# ---------------------------------------------------------------------------
# DRE
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DreReport:
    """Cash-basis income statement.

    Category dictionaries keep the order in which categories were first
    encountered in the input.
    """

    income_by_category: dict[str, Decimal]
    expense_by_category: dict[str, Decimal]
    total_income: Decimal
    total_expense: Decimal
    net_result: Decimal


def _sum_by_category(
    transactions: Iterable[Transaction], fallback_label: str
) -> dict[str, Decimal]:
    buckets: dict[str, Decimal] = {}
    for t in transactions:
        key = t.category or fallback_label
        buckets[key] = buckets.get(key, ZERO) + t.amount
    return buckets


def build_dre(
    transactions: Iterable[Transaction],
    *,
    other_income_label: str = DEFAULT_OTHER_INCOME_LABEL,
    other_expense_label: str = DEFAULT_OTHER_EXPENSE_LABEL,
) -> DreReport:
    """Build the DRE from paid transactions.

    Args:
        transactions: Payables and receivables (any status; only 'Paid'
            items are used).
        other_income_label: Bucket for income transactions without category.
        other_expense_label: Bucket for expense transactions without category.

    Returns:
        A ``DreReport``.
    """
    paid = _paid(transactions)

    income_by_category = _sum_by_category(
        (t for t in paid if t.is_income), other_income_label
    )
    expense_by_category = _sum_by_category(
        (t for t in paid if t.is_expense), other_expense_label
    )

    total_income = _sum(income_by_category.values())
    total_expense = _sum(expense_by_category.values())

    return DreReport(
        income_by_category=income_by_category,
        expense_by_category=expense_by_category,
        total_income=total_income,
        total_expense=total_expense,
        net_result=total_income - total_expense,
    )


# ---------------------------------------------------------------------------
# Balancete
# ---------------------------------------------------------------------------

BALANCETE_CASH = "cash"
BALANCETE_RECEIVABLES = "receivables"
BALANCETE_PAYABLES = "payables"
BALANCETE_NET_RESULT = "net_result"
BALANCETE_CAPITAL = "capital"

DEFAULT_BALANCETE_LABELS = {
    BALANCETE_CASH: "Cash and cash equivalents",
    BALANCETE_RECEIVABLES: "Accounts receivable",
    BALANCETE_PAYABLES: "Accounts payable",
    BALANCETE_NET_RESULT: "Net result for the period",
    BALANCETE_CAPITAL: "Share capital / retained earnings",
}


@dataclass(frozen=True)
class BalanceteLine:
    """One account line of the balancete, on the debit or credit side."""

    key: str
    label: str
    amount: Decimal


@dataclass(frozen=True)
class Balancete:
    debits: list[BalanceteLine]
    credits: list[BalanceteLine]
    total_debits: Decimal
    total_credits: Decimal

    def amount(self, key: str) -> Decimal:
        """Amount of a line by key, looking at both sides (0 if absent)."""
        for line in (*self.debits, *self.credits):
            if line.key == key:
                return line.amount
        return ZERO


def build_balancete(
    transactions: Iterable[Transaction],
    bank_accounts: Iterable[BankAccount],
    *,
    labels: Optional[dict[str, str]] = None,
) -> Balancete:
    """Build the simulated trial balance.

    Open items are those in 'Pending' or 'Overdue' status; scheduled items
    are considered committed and stay out of the open balances.

    Args:
        transactions: Payables and receivables.
        bank_accounts: Bank accounts whose balances form the cash line.
        labels: Optional overrides for the account labels, keyed by
            'cash', 'receivables', 'payables', 'net_result', 'capital'.

    Returns:
        A ``Balancete`` whose ``total_debits == total_credits``.
    """
    names = {**DEFAULT_BALANCETE_LABELS, **(labels or {})}
    items = list(transactions)

    cash = _sum(acc.balance for acc in bank_accounts)
    receivables = _sum(
        t.amount for t in items if t.is_income and t.status in UNSETTLED_STATUSES
    )
    payables = _sum(
        t.amount for t in items if t.is_expense and t.status in UNSETTLED_STATUSES
    )

    dre = build_dre(items)
    net_result = dre.net_result

    total_debits = cash + receivables
    # Residual that closes the balance.
    capital = total_debits - (payables + net_result)

    debits = [
        BalanceteLine(BALANCETE_CASH, names[BALANCETE_CASH], cash),
        BalanceteLine(BALANCETE_RECEIVABLES, names[BALANCETE_RECEIVABLES], receivables),
    ]
    credits = [
        BalanceteLine(BALANCETE_PAYABLES, names[BALANCETE_PAYABLES], payables),
        BalanceteLine(BALANCETE_NET_RESULT, names[BALANCETE_NET_RESULT], net_result),
        BalanceteLine(BALANCETE_CAPITAL, names[BALANCETE_CAPITAL], capital),
    ]

    return Balancete(
        debits=debits,
        credits=credits,
        total_debits=total_debits,
        total_credits=_sum(line.amount for line in credits),
    )


# ---------------------------------------------------------------------------
# Cash-flow ledger
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CashFlowGroup:
    key: str
    income: Decimal
    expense: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class CashFlowLedger:
    entries: list[Transaction]
    total_income: Decimal
    total_expense: Decimal
    net_balance: Decimal
    group_by: Optional[str] = None
    groups: list[CashFlowGroup] = field(default_factory=list)


def _payment_sort_key(transaction: Transaction) -> date:
    # Unparseable payment dates sink to the bottom of the ledger.
    return parse_date(transaction.payment_date) or date.min


def build_cash_flow(
    transactions: Iterable[Transaction],
    group_by: Optional[str] = None,
) -> CashFlowLedger:
    """Build the realized cash-flow ledger.

    Args:
        transactions: Payables and receivables.
        group_by: None, 'type' or 'cost_center'.

    Returns:
        A ``CashFlowLedger`` with entries sorted by payment date (most recent
        first) and, when grouping is requested, one ``CashFlowGroup`` per key
        in order of first appearance in the sorted ledger.

    Raises:
        ValueError: if ``group_by`` is not a supported grouping.
    """
    if group_by is not None and group_by not in CASH_FLOW_GROUPINGS:
        raise ValueError(
            f"Unsupported cash-flow grouping: {group_by!r}. "
            f"Expected one of: {', '.join(CASH_FLOW_GROUPINGS)}."
        )

    entries = [t for t in transactions if t.status == STATUS_PAID and t.payment_date]
    entries.sort(key=_payment_sort_key, reverse=True)

    total_income = _sum(t.amount for t in entries if t.is_income)
    total_expense = _sum(t.amount for t in entries if t.is_expense)

    groups: list[CashFlowGroup] = []
    if group_by is not None:
        income: dict[str, Decimal] = {}
        expense: dict[str, Decimal] = {}
        for t in entries:
            key = getattr(t, group_by) or ""
            income.setdefault(key, ZERO)
            expense.setdefault(key, ZERO)
            if t.is_income:
                income[key] += t.amount
            elif t.is_expense:
                expense[key] += t.amount
        groups = [CashFlowGroup(key, income[key], expense[key]) for key in income]

    return CashFlowLedger(
        entries=entries,
        total_income=total_income,
        total_expense=total_expense,
        net_balance=total_income - total_expense,
        group_by=group_by,
        groups=groups,
    )


# ---------------------------------------------------------------------------
# Cost centers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CostCenterSummary:
    name: str
    budget: Decimal
    movement: Decimal
    balance: Decimal
    spent_percentage: Decimal


def build_cost_center_summary(
    transactions: Iterable[Transaction],
    cost_centers: Iterable[CostCenter],
) -> list[CostCenterSummary]:
    """Compare the paid movements of each cost center with its budget.

    movement         = Σ paid income - Σ paid expense of the cost center
    balance          = budget + movement
    spent_percentage = |movement| / budget * 100  (0 when budget is 0)

    Transactions are attached to a cost center by name, and by company when
    the cost center declares one.
    """
    paid = _paid(transactions)
    out = []
    for center in sorted(cost_centers, key=lambda c: c.name):
        movement = _sum(
            t.signed_amount
            for t in paid
            if t.cost_center == center.name
            and (not center.company or t.company == center.company)
        )
        budget = center.budget or ZERO
        out.append(
            CostCenterSummary(
                name=center.name,
                budget=budget,
                movement=movement,
                balance=budget + movement,
                spent_percentage=_percentage(abs(movement), budget),
            )
        )
    return out


# ---------------------------------------------------------------------------
# Payables indicators
# ---------------------------------------------------------------------------

FIXED = "fixed"
VARIABLE = "variable"


@dataclass(frozen=True)
class PayablesIndicators:
    paid_this_month: Decimal
    overdue_count: int
    fixed_expenses: Decimal
    variable_expenses: Decimal
    fixed_percentage: Decimal
    variable_percentage: Decimal
    expense_by_category: dict[str, Decimal]


def build_payables_indicators(
    payables: Iterable[Transaction],
    today: Union[date, datetime],
    *,
    selected: Optional[Iterable[Transaction]] = None,
    other_expense_label: str = DEFAULT_OTHER_EXPENSE_LABEL,
) -> PayablesIndicators:
    """Compute the KPIs shown on top of the payables report.

    ``payables`` is the whole book of the company; ``selected`` is the
    subset picked by the report filters (defaults to ``payables``).

    - paid_this_month: payables paid during the calendar month of ``today``,
    - overdue_count: payables currently in 'Overdue' status,
    - fixed / variable split of the selected payables (any status), with
      percentages of their sum (0 when the sum is 0),
    - expense_by_category: selected amounts per category (any status).

    The first two figures are always computed over ``payables``.
    """
    book = [t for t in payables if t.is_expense]
    if selected is None:
        items = book
    else:
        items = [t for t in selected if t.is_expense]
    day = as_day(today)

    paid_this_month = ZERO
    for t in book:
        if t.status != STATUS_PAID:
            continue
        paid_on = parse_date(t.payment_date)
        if paid_on is not None and (paid_on.year, paid_on.month) == (
            day.year,
            day.month,
        ):
            paid_this_month += t.amount

    fixed = _sum(t.amount for t in items if t.fixed_or_variable == FIXED)
    variable = _sum(t.amount for t in items if t.fixed_or_variable == VARIABLE)
    total = fixed + variable

    return PayablesIndicators(
        paid_this_month=paid_this_month,
        overdue_count=sum(1 for t in book if t.status == STATUS_OVERDUE),
        fixed_expenses=fixed,
        variable_expenses=variable,
        fixed_percentage=_percentage(fixed, total),
        variable_percentage=_percentage(variable, total),
        expense_by_category=_sum_by_category(items, other_expense_label),
    )


# ---------------------------------------------------------------------------
# Bank accounts
# ---------------------------------------------------------------------------


def bank_account_balance(
    account: BankAccount, bank_transactions: Iterable[BankTransaction]
) -> Decimal:
    """Opening balance plus credits minus debits recorded on the account."""
    balance = account.balance
    for movement in bank_transactions:
        if movement.bank_account_id != account.id:
            continue
        if movement.kind == "credit":
            balance += movement.amount
        else:
            balance -= movement.amount
    return balance
