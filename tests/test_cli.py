import re
from datetime import date

import pytest

import smb_backoffice.cli as cli

TRANSACTIONS_CSV = (
    "id,description,category,amount,due_date,payment_date,status,type,company,"
    "cost_center,interest_rate,interest_type,fine_rate\n"
    "p1,Supplier,Suppliers,1000,2025-03-10,,Pending,expense,ACME,Production,1,daily,2\n"
    "p2,Rent,Rent,2500,2025-01-05,2025-01-05,Paid,expense,ACME,Admin,,,\n"
    "r1,Shop sale,Sales,5200,2025-01-10,2025-01-12,Paid,income,ACME,Commercial,,,\n"
    "r2,Online sale,Sales,1800,2025-04-20,,Pending,income,ACME,Commercial,,,\n"
    "x1,Other company,Sales,999,2025-01-10,2025-01-12,Paid,income,Other,Commercial,,,\n"
)


@pytest.fixture
def inputs(tmp_path):
    tx = tmp_path / "tx.csv"
    tx.write_text(TRANSACTIONS_CSV, encoding="utf-8")
    banks = tmp_path / "banks.csv"
    banks.write_text(
        "id,name,balance,company\nb1,Main,1000,ACME\nb2,Other,50,Other\n",
        encoding="utf-8",
    )
    centers = tmp_path / "centers.csv"
    centers.write_text(
        "id,name,budget,company\ncc1,Admin,5000,ACME\ncc2,Commercial,0,ACME\n",
        encoding="utf-8",
    )
    return {"tx": str(tx), "banks": str(banks), "centers": str(centers)}


def _run(monkeypatch, tmp_path, capsys, *argv) -> str:
    # No config file in the working directory: defaults apply.
    monkeypatch.chdir(tmp_path)
    cli.main(list(argv))
    return capsys.readouterr().out


def test_version(monkeypatch, tmp_path, capsys) -> None:
    out = _run(monkeypatch, tmp_path, capsys, "--version")
    assert "smb_backoffice version" in out


def test_charges_after_reconciliation(monkeypatch, tmp_path, capsys, inputs) -> None:
    """p1 is promoted to Overdue on 2025-03-20 and accrues 100 + 20."""
    out = _run(
        monkeypatch,
        tmp_path,
        capsys,
        "--transactions",
        inputs["tx"],
        "--company",
        "ACME",
        "--today",
        "2025-03-20",
        "charges",
    )
    assert "Overdue" in out
    assert "1120.00" in out
    assert "Open items: 2" in out


def test_today_defaults_to_clock(monkeypatch, tmp_path, capsys, inputs) -> None:
    monkeypatch.setattr(cli, "_today", lambda: date(2025, 3, 20))
    out = _run(monkeypatch, tmp_path, capsys, "--transactions", inputs["tx"], "reconcile")
    assert "Reference date: 2025-03-20" in out
    assert "1 transaction(s) promoted" in out
    assert "p1" in out


def test_dre_and_company_filter(monkeypatch, tmp_path, capsys, inputs) -> None:
    out = _run(
        monkeypatch,
        tmp_path,
        capsys,
        "--transactions",
        inputs["tx"],
        "--company",
        "ACME",
        "--today",
        "20/03/2025",
        "dre",
    )
    assert "=== DRE (cash basis) ===" in out
    assert "2700.00" in out
    assert "6199.00" not in out


def test_balancete(monkeypatch, tmp_path, capsys, inputs) -> None:
    out = _run(
        monkeypatch,
        tmp_path,
        capsys,
        "--transactions",
        inputs["tx"],
        "--bank-accounts",
        inputs["banks"],
        "--company",
        "ACME",
        "--today",
        "2025-03-20",
        "balancete",
    )
    assert "TOTAL" in out
    # cash 1000 + open receivable 1800
    assert "2800.00" in out


def test_cash_flow_grouped(monkeypatch, tmp_path, capsys, inputs) -> None:
    out = _run(
        monkeypatch,
        tmp_path,
        capsys,
        "--transactions",
        inputs["tx"],
        "--company",
        "ACME",
        "--today",
        "2025-03-20",
        "cash-flow",
        "--group-by",
        "cost_center",
    )
    assert "=== Subtotals by cost_center ===" in out
    assert "Commercial" in out
    assert "-2500.00" in out


def test_cost_centers(monkeypatch, tmp_path, capsys, inputs) -> None:
    out = _run(
        monkeypatch,
        tmp_path,
        capsys,
        "--transactions",
        inputs["tx"],
        "--cost-centers",
        inputs["centers"],
        "--company",
        "ACME",
        "--today",
        "2025-03-20",
        "cost-centers",
    )
    assert "Admin" in out
    assert "50.0" in out


def test_indicators(monkeypatch, tmp_path, capsys, inputs) -> None:
    out = _run(
        monkeypatch,
        tmp_path,
        capsys,
        "--transactions",
        inputs["tx"],
        "--today",
        "2025-03-20",
        "indicators",
    )
    assert "Payables indicators (03/2025)" in out
    assert "overdue_count" in out


def test_invalid_today_exits(monkeypatch, tmp_path, capsys, inputs) -> None:
    with pytest.raises(SystemExit, match="--today"):
        _run(
            monkeypatch,
            tmp_path,
            capsys,
            "--transactions",
            inputs["tx"],
            "--today",
            "31/02/2025",
            "dre",
        )


def test_missing_transactions_file(monkeypatch, tmp_path, capsys) -> None:
    with pytest.raises(SystemExit):
        _run(monkeypatch, tmp_path, capsys, "--transactions", "missing.csv", "dre")
    assert "Transactions CSV not found" in capsys.readouterr().err


def test_no_command(monkeypatch, tmp_path, capsys) -> None:
    with pytest.raises(SystemExit):
        _run(monkeypatch, tmp_path, capsys)


def test_indicators_monthly_figures_ignore_due_window(
    monkeypatch, tmp_path, capsys
) -> None:
    """Paid-this-month and overdue count cover the whole company book."""
    tx = tmp_path / "payables.csv"
    tx.write_text(
        "id,amount,due_date,payment_date,status,type,category,fixed_or_variable\n"
        "p1,300,2025-02-10,2025-03-05,Paid,expense,Rent,fixed\n"
        "p2,100,2025-01-10,,Pending,expense,Energy,variable\n"
        "p3,40,2025-03-25,,Pending,expense,Energy,variable\n",
        encoding="utf-8",
    )
    out = _run(
        monkeypatch,
        tmp_path,
        capsys,
        "--transactions",
        str(tx),
        "--today",
        "2025-03-20",
        "--from-date",
        "2025-03-01",
        "indicators",
    )
    assert re.search(r"paid_this_month\s+300\.00", out)
    assert re.search(r"overdue_count\s+1\b", out)
    # The fixed/variable split only sees p3, due inside the window.
    assert re.search(r"fixed_expenses\s+0\.00", out)
    assert re.search(r"variable_expenses\s+40\.00", out)


def test_category_and_type_filters(monkeypatch, tmp_path, capsys, inputs) -> None:
    out = _run(
        monkeypatch,
        tmp_path,
        capsys,
        "--transactions",
        inputs["tx"],
        "--company",
        "ACME",
        "--category",
        "Sales",
        "--type",
        "income",
        "--today",
        "2025-03-20",
        "dre",
    )
    assert "Applied filters: company=ACME, category=Sales, type=income" in out
    assert "selected: 2" in out
    assert "5200.00" in out
    assert "2500.00" not in out


def test_status_filter_applies_after_promotion(
    monkeypatch, tmp_path, capsys, inputs
) -> None:
    out = _run(
        monkeypatch,
        tmp_path,
        capsys,
        "--transactions",
        inputs["tx"],
        "--status",
        "Overdue",
        "--today",
        "2025-03-20",
        "charges",
    )
    assert "selected: 1" in out
    assert "Open items: 1" in out
    assert "p1" in out


def test_cost_center_filter(monkeypatch, tmp_path, capsys, inputs) -> None:
    out = _run(
        monkeypatch,
        tmp_path,
        capsys,
        "--transactions",
        inputs["tx"],
        "--cost-center",
        "Admin",
        "--today",
        "2025-03-20",
        "cash-flow",
    )
    assert "cost_center=Admin" in out
    assert "Rent" in out
    assert "Shop sale" not in out


def test_unknown_status_is_rejected(monkeypatch, tmp_path, capsys, inputs) -> None:
    with pytest.raises(SystemExit):
        _run(
            monkeypatch,
            tmp_path,
            capsys,
            "--transactions",
            inputs["tx"],
            "--status",
            "Closed",
            "dre",
        )
