from decimal import Decimal

import pytest

from smb_backoffice.io import (
    parse_amount,
    read_bank_accounts,
    read_cost_centers,
    read_transactions,
)


def test_read_transactions_snake_case(tmp_path) -> None:
    csv_path = tmp_path / "tx.csv"
    csv_path.write_text(
        "id,amount,due_date,status,type,category,interest_rate,interest_type,fine_rate\n"
        "p1,1000.00,2025-03-10,Overdue,expense,Rent,1,daily,2\n"
        "r1,250.5,10/03/2025,Paid,income,,,,\n",
        encoding="utf-8",
    )

    p1, r1 = read_transactions(csv_path)

    assert p1.id == "p1"
    assert p1.amount == Decimal("1000.00")
    assert p1.status == "Overdue"
    assert p1.type == "expense"
    assert p1.interest_rate == Decimal("1")
    assert p1.interest_type == "daily"
    assert p1.fine_rate == Decimal("2")

    assert r1.amount == Decimal("250.5")
    assert r1.due_date == "10/03/2025"
    assert r1.category == ""
    assert r1.interest_rate is None
    assert r1.interest_type is None
    assert r1.payment_date is None


def test_read_transactions_front_end_export(tmp_path) -> None:
    """camelCase headers and Portuguese status/type values are normalized."""
    csv_path = tmp_path / "tx.csv"
    csv_path.write_text(
        "id,amount,dueDate,paymentDate,status,type,costCenter,fixedOrVariable\n"
        'p1,"1.234,56",05/01/2025,05/01/2025,Pago,despesa,Admin,fixa\n'
        "p2,10,2025-02-10,,Pendente,despesa,Admin,variável\n"
        "r1,99,2025-02-10,,Vencido,receita,,\n"
        "r2,1,2025-02-10,,Agendado,receita,,\n",
        encoding="utf-8",
    )

    p1, p2, r1, r2 = read_transactions(csv_path)

    assert p1.amount == Decimal("1234.56")
    assert p1.status == "Paid"
    assert p1.type == "expense"
    assert p1.payment_date == "05/01/2025"
    assert p1.cost_center == "Admin"
    assert p1.fixed_or_variable == "fixed"
    assert p2.status == "Pending"
    assert p2.fixed_or_variable == "variable"
    assert r1.status == "Overdue"
    assert r1.type == "income"
    assert r2.status == "Scheduled"


def test_read_transactions_missing_columns(tmp_path) -> None:
    csv_path = tmp_path / "tx.csv"
    csv_path.write_text("id,amount,status\np1,10,Paid\n", encoding="utf-8")

    with pytest.raises(ValueError, match="due_date"):
        read_transactions(csv_path)


@pytest.mark.parametrize(
    "row, message",
    [
        ("p1,abc,2025-01-01,Paid,expense", "amount"),
        ("p1,10,2025-01-01,Closed,expense", "status"),
        ("p1,10,2025-01-01,Paid,transfer", "type"),
        ("p1,-10,2025-01-01,Paid,expense", "cannot be negative"),
        ("p1,\"-1,50\",2025-01-01,Pending,income", "cannot be negative"),
    ],
)
def test_read_transactions_invalid_values(tmp_path, row, message) -> None:
    csv_path = tmp_path / "tx.csv"
    csv_path.write_text(f"id,amount,due_date,status,type\n{row}\n", encoding="utf-8")

    with pytest.raises(ValueError, match=message):
        read_transactions(csv_path)


def test_read_transactions_invalid_interest_type(tmp_path) -> None:
    csv_path = tmp_path / "tx.csv"
    csv_path.write_text(
        "id,amount,due_date,status,type,interest_rate,interest_type\n"
        "p1,10,2025-01-01,Pending,expense,1,weekly\n",
        encoding="utf-8",
    )

    with pytest.raises(ValueError, match="interest type"):
        read_transactions(csv_path)


def test_parse_amount_separators() -> None:
    assert parse_amount("1234.56") == Decimal("1234.56")
    assert parse_amount("1234,56") == Decimal("1234.56")
    assert parse_amount(" 1.234,56 ") == Decimal("1234.56")
    assert parse_amount("-10") == Decimal("-10")
    with pytest.raises(ValueError):
        parse_amount("")
    with pytest.raises(ValueError):
        parse_amount("NaN")


def test_read_bank_accounts_and_cost_centers(tmp_path) -> None:
    banks = tmp_path / "banks.csv"
    banks.write_text(
        "id,name,balance,company\nb1,Main,1200.50,ACME\n", encoding="utf-8"
    )
    centers = tmp_path / "centers.csv"
    centers.write_text(
        "id,name,budget\ncc1,Admin,5000\ncc2,Sales,\n", encoding="utf-8"
    )

    [account] = read_bank_accounts(banks)
    assert account.balance == Decimal("1200.50")
    assert account.company == "ACME"

    admin, sales = read_cost_centers(centers)
    assert admin.budget == Decimal("5000")
    assert sales.budget == 0
    assert sales.company == ""


def test_read_bank_accounts_requires_balance(tmp_path) -> None:
    banks = tmp_path / "banks.csv"
    banks.write_text("id,name\nb1,Main\n", encoding="utf-8")
    with pytest.raises(ValueError, match="balance"):
        read_bank_accounts(banks)
