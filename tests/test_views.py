from datetime import date
from decimal import Decimal

from smb_backoffice.models import BankAccount, Transaction
from smb_backoffice.reports import build_balancete, build_cash_flow, build_dre
from smb_backoffice.views import (
    balancete_to_dataframe,
    cash_flow_groups_to_dataframe,
    cash_flow_to_dataframe,
    charges_to_dataframe,
    dre_to_dataframe,
)

D = Decimal

ITEMS = [
    Transaction(
        id="p1",
        amount=D("1000"),
        due_date="2025-03-10",
        status="Overdue",
        type="expense",
        category="Suppliers",
        cost_center="Production",
        interest_rate=D("1"),
        interest_type="monthly",
        fine_rate=D("2"),
    ),
    Transaction(
        id="r1",
        amount=D("5200"),
        due_date="2025-01-10",
        status="Paid",
        type="income",
        category="Sales",
        cost_center="Commercial",
        payment_date="2025-01-12",
    ),
    Transaction(
        id="p2",
        amount=D("2500"),
        due_date="2025-01-05",
        status="Paid",
        type="expense",
        category="Rent",
        cost_center="Admin",
        payment_date="2025-01-05",
    ),
]


def test_charges_to_dataframe_rounds_and_formats() -> None:
    df = charges_to_dataframe(ITEMS[:1], date(2025, 3, 20))

    assert list(df.columns) == [
        "id",
        "description",
        "due_date",
        "status",
        "amount",
        "interest",
        "fine",
        "total",
    ]
    row = df.iloc[0]
    assert row["due_date"] == "10/03/2025"
    # 1000 * 1% * 10 / 30 = 3.333...
    assert row["interest"] == D("3.33")
    assert row["fine"] == D("20.00")
    assert row["total"] == D("1023.33")


def test_charges_to_dataframe_empty() -> None:
    df = charges_to_dataframe([], date(2025, 3, 20))
    assert df.empty
    assert "total" in df.columns


def test_dre_to_dataframe_layout() -> None:
    df = dre_to_dataframe(build_dre(ITEMS))

    assert list(df["section"]) == ["income", "income", "expense", "expense", "result"]
    assert list(df["amount"]) == [D("5200"), D("5200"), D("-2500"), D("-2500"), D("2700")]
    assert df.iloc[-1]["name"] == "(=) Net result for the period"


def test_balancete_to_dataframe_totals_row() -> None:
    balancete = build_balancete(ITEMS, [BankAccount("b1", "Main", D("100"))])
    df = balancete_to_dataframe(balancete, decimals=0)

    assert len(df) == 6
    total = df.iloc[-1]
    assert total["account"] == "TOTAL"
    assert total["debit"] == total["credit"] == D("100")


def test_cash_flow_dataframes() -> None:
    ledger = build_cash_flow(ITEMS, group_by="cost_center")

    entries = cash_flow_to_dataframe(ledger)
    assert list(entries["payment_date"]) == ["12/01/2025", "05/01/2025"]
    assert list(entries["amount"]) == [D("5200.00"), D("-2500.00")]

    groups = cash_flow_groups_to_dataframe(ledger)
    assert list(groups["group"]) == ["Commercial", "Admin", "TOTAL"]
    assert groups.iloc[-1]["subtotal"] == D("2700.00")
