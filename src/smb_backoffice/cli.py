# SMB Back-Office - Financial back-office engine for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for SMB Back-Office.

The CLI is intentionally thin: it loads the configuration and the CSV
inputs, derives current statuses, and prints the requested report as a
text table. It does not implement any financial rule itself.


High-level pipeline
-------------------

1) Load the TOML configuration (``smb_backoffice_config.toml`` by default,
   ``--config PATH`` to override). Without a configuration file, defaults
   apply and input files must be given on the command line.

2) Read transactions (payables and receivables) from CSV, plus bank
   accounts and cost centers when the selected command needs them.

3) Promote past-due pending transactions to "Overdue" relative to the
   reference date (``--today``, default: the current date).

4) Keep the transactions of the selected company (``--company`` or
   ``company.default``) whose due date lies within
   ``--from-date`` / ``--to-date`` (inclusive, both optional), narrowed
   further by ``--category``, ``--status``, ``--cost-center``, ``--type``
   and ``--contact`` when given. The ``indicators`` command still reads
   the monthly paid total and the overdue count from the whole company.

5) Build and print the report.


Commands
--------

- ``charges``:
    Open transactions with their accrued interest, fine and total payable.
    ``--all`` includes paid and scheduled items.

- ``reconcile``:
    List the transactions promoted to "Overdue" for the reference date.

- ``dre``:
    Cash-basis income statement (paid transactions, by category).

- ``balancete``:
    Simulated trial balance (bank balances, open receivables and payables,
    realized result, capital plug).

- ``cash-flow``:
    Realized cash-flow ledger, optionally grouped with
    ``--group-by type|cost_center``.

- ``cost-centers``:
    Paid movements per cost center compared with its budget.

- ``indicators``:
    Payables KPIs for the month of the reference date.


Examples
--------

    python -m smb_backoffice.cli --transactions data/tx.csv charges
    python -m smb_backoffice.cli --today 2025-03-31 dre
    python -m smb_backoffice.cli --company "ACME" cash-flow --group-by cost_center
    python -m smb_backoffice.cli --bank-accounts data/banks.csv balancete
"""

import argparse
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from . import __version__
from .config import DEFAULT_CONFIG_FILE, AppConfig, load_app_config
from .dates import parse_date
from .filters import TransactionFilter, apply_filter, filter_by_company
from .io import read_bank_accounts, read_cost_centers, read_transactions
from .models import (
    STATUS_OVERDUE,
    STATUSES,
    TRANSACTION_TYPES,
    UNSETTLED_STATUSES,
    Transaction,
)
from .reports import (
    CASH_FLOW_GROUPINGS,
    build_balancete,
    build_cash_flow,
    build_cost_center_summary,
    build_dre,
    build_payables_indicators,
)
from .status import overdue_ids, reconcile_statuses
from .views import (
    balancete_to_dataframe,
    cash_flow_groups_to_dataframe,
    cash_flow_to_dataframe,
    charges_to_dataframe,
    cost_centers_to_dataframe,
    dre_to_dataframe,
    indicators_to_dataframe,
)

COMMANDS = (
    "charges",
    "reconcile",
    "dre",
    "balancete",
    "cash-flow",
    "cost-centers",
    "indicators",
)


def _today() -> date:
    """Return today's date as a date object (isolated for easier testing)."""
    return datetime.today().date()


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="python -m smb_backoffice.cli",
        description=(
            "SMB Back-Office - computes overdue charges and cash-basis reports "
            "(DRE, balancete, cash-flow ledger) from payables and receivables."
        ),
    )
    ap.add_argument(
        "--version",
        action="store_true",
        help="Show the version and exit.",
    )
    ap.add_argument(
        "--config",
        dest="config_path",
        default=None,
        help=f"Path to the TOML configuration (default: {DEFAULT_CONFIG_FILE}).",
    )
    ap.add_argument(
        "--transactions",
        dest="transactions_path",
        default=None,
        help="Transactions CSV (overrides inputs.transactions).",
    )
    ap.add_argument(
        "--bank-accounts",
        dest="bank_accounts_path",
        default=None,
        help="Bank accounts CSV (overrides inputs.bank_accounts).",
    )
    ap.add_argument(
        "--cost-centers",
        dest="cost_centers_path",
        default=None,
        help="Cost centers CSV (overrides inputs.cost_centers).",
    )
    ap.add_argument(
        "--company",
        default=None,
        help="Only use transactions of this company (overrides company.default).",
    )
    ap.add_argument(
        "--today",
        default=None,
        help="Reference date (YYYY-MM-DD or DD/MM/YYYY). Defaults to the current date.",
    )
    ap.add_argument(
        "--from-date",
        dest="from_date",
        default=None,
        help="Keep transactions due on or after this date.",
    )
    ap.add_argument(
        "--to-date",
        dest="to_date",
        default=None,
        help="Keep transactions due on or before this date.",
    )
    ap.add_argument(
        "--category",
        default=None,
        help="Keep transactions of this category.",
    )
    ap.add_argument(
        "--status",
        choices=STATUSES,
        default=None,
        help="Keep transactions with this status (after overdue promotion).",
    )
    ap.add_argument(
        "--cost-center",
        dest="cost_center",
        default=None,
        help="Keep transactions of this cost center.",
    )
    ap.add_argument(
        "--type",
        dest="type",
        choices=TRANSACTION_TYPES,
        default=None,
        help="Keep only income or only expense transactions.",
    )
    ap.add_argument(
        "--contact",
        dest="contact_id",
        default=None,
        help="Keep transactions of this supplier / customer id.",
    )

    subparsers = ap.add_subparsers(dest="command")

    charges = subparsers.add_parser(
        "charges", help="Show accrued interest and fines of open transactions."
    )
    charges.add_argument(
        "--all",
        dest="show_all",
        action="store_true",
        help="Include paid and scheduled transactions.",
    )

    subparsers.add_parser(
        "reconcile", help="List transactions promoted to 'Overdue'."
    )
    subparsers.add_parser("dre", help="Cash-basis income statement.")
    subparsers.add_parser("balancete", help="Simulated trial balance.")

    cash_flow = subparsers.add_parser("cash-flow", help="Realized cash-flow ledger.")
    cash_flow.add_argument(
        "--group-by",
        dest="group_by",
        choices=CASH_FLOW_GROUPINGS,
        default=None,
        help="Group subtotals by transaction type or cost center.",
    )

    subparsers.add_parser("cost-centers", help="Cost center budgets and movements.")
    subparsers.add_parser("indicators", help="Payables KPIs for the current month.")

    return ap


def _parse_cli_date(value: Optional[str], option: str) -> Optional[date]:
    """
    Parse an optional CLI date argument (YYYY-MM-DD or DD/MM/YYYY).

    Raises
    ------
    SystemExit
        If the date is invalid.
    """
    if value is None:
        return None

    parsed = parse_date(value)
    if parsed is None:
        msg = (
            f"Invalid date for {option}: {value!r}. "
            "Expected YYYY-MM-DD or DD/MM/YYYY."
        )
        raise SystemExit(msg)
    return parsed


def _load_config(args: argparse.Namespace) -> AppConfig:
    """Load the explicit config, the default file if present, or defaults."""
    if args.config_path:
        return load_app_config(args.config_path)
    if Path(DEFAULT_CONFIG_FILE).is_file():
        return load_app_config()
    return AppConfig()


def _resolve_path(
    cli_value: Optional[str], configured: Optional[Path]
) -> Optional[Path]:
    if cli_value:
        return Path(cli_value)
    return configured


def _handle_charges(
    args: argparse.Namespace,
    config: AppConfig,
    transactions: list[Transaction],
    today: date,
) -> None:
    rows = transactions
    if not args.show_all:
        rows = [t for t in transactions if t.status in UNSETTLED_STATUSES]

    if not rows:
        print("No open transactions.")
        return

    df = charges_to_dataframe(rows, today, decimals=config.decimals)
    print()
    print(df.to_string(index=False))
    print()
    label = "Items" if args.show_all else "Open items"
    print(f"{label}: {len(df)} | Total due: {sum(df['total'])} {config.currency}")


def _handle_reconcile(
    raw: list[Transaction], transactions: list[Transaction], today: date
) -> None:
    promoted = overdue_ids(raw, today)
    rows = [t for t in transactions if t.id in promoted]
    if not rows:
        print("No transaction became overdue.")
        return

    print(f"{len(rows)} transaction(s) promoted to '{STATUS_OVERDUE}':")
    for t in rows:
        print(f"  {t.id:<12} due {t.due_date:<12} {t.type:<8} {t.amount}")


def _handle_dre(config: AppConfig, transactions: list[Transaction]) -> None:
    dre = build_dre(
        transactions,
        other_income_label=config.reports.other_income_label,
        other_expense_label=config.reports.other_expense_label,
    )
    print()
    print("=== DRE (cash basis) ===")
    print(dre_to_dataframe(dre, decimals=config.decimals).to_string(index=False))


def _handle_balancete(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: AppConfig,
    transactions: list[Transaction],
    company: Optional[str],
) -> None:
    path = _resolve_path(args.bank_accounts_path, config.inputs.bank_accounts)
    if path is None:
        print("Warning: no bank accounts file configured, cash balance is 0.")
        accounts = []
    else:
        if not path.is_file():
            parser.error(f"Bank accounts CSV not found: {path}")
        accounts = read_bank_accounts(path)
        if company is not None:
            accounts = [a for a in accounts if a.company == company]

    balancete = build_balancete(
        transactions, accounts, labels=config.reports.balancete_labels
    )
    print()
    print("=== Balancete (simulated) ===")
    print(
        balancete_to_dataframe(balancete, decimals=config.decimals).to_string(
            index=False
        )
    )


def _handle_cash_flow(
    args: argparse.Namespace, config: AppConfig, transactions: list[Transaction]
) -> None:
    group_by = args.group_by or config.reports.cash_flow_group_by
    ledger = build_cash_flow(transactions, group_by=group_by)

    if not ledger.entries:
        print("No paid transactions in the selection.")
        return

    print()
    print("=== Cash-flow ledger (realized) ===")
    ledger_df = cash_flow_to_dataframe(ledger, decimals=config.decimals)
    print(ledger_df.to_string(index=False))
    print()
    if group_by is not None:
        print(f"=== Subtotals by {group_by} ===")
    print(
        cash_flow_groups_to_dataframe(ledger, decimals=config.decimals).to_string(
            index=False
        )
    )


def _handle_cost_centers(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    config: AppConfig,
    transactions: list[Transaction],
    company: Optional[str],
) -> None:
    path = _resolve_path(args.cost_centers_path, config.inputs.cost_centers)
    if path is None:
        parser.error(
            "No cost centers file configured. "
            "Either set inputs.cost_centers or provide --cost-centers."
        )
    if not path.is_file():
        parser.error(f"Cost centers CSV not found: {path}")

    centers = read_cost_centers(path)
    if company is not None:
        centers = [c for c in centers if not c.company or c.company == company]

    summaries = build_cost_center_summary(transactions, centers)
    print()
    print("=== Cost centers ===")
    df = cost_centers_to_dataframe(summaries, decimals=config.decimals)
    print(df.to_string(index=False))


def _handle_indicators(
    config: AppConfig,
    book: list[Transaction],
    transactions: list[Transaction],
    today: date,
) -> None:
    indicators = build_payables_indicators(
        book,
        today,
        selected=transactions,
        other_expense_label=config.reports.other_expense_label,
    )
    print()
    print(f"=== Payables indicators ({today.strftime('%m/%Y')}) ===")
    df = indicators_to_dataframe(indicators, decimals=config.decimals)
    print(df.to_string(index=False))


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the SMB Back-Office CLI.

    Parses command-line arguments, loads configuration and CSV inputs,
    reconciles statuses against the reference date, applies the company and
    due-date filters, then renders the requested report.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"smb_backoffice version {__version__}")
        return

    if args.command is None:
        parser.error(f"No command given. Available commands: {', '.join(COMMANDS)}.")

    config = _load_config(args)

    today = _parse_cli_date(args.today, "--today") or _today()
    start = _parse_cli_date(args.from_date, "--from-date")
    end = _parse_cli_date(args.to_date, "--to-date")
    if start is not None and end is not None and end < start:
        raise SystemExit("--to-date cannot be before --from-date.")

    tx_path = _resolve_path(args.transactions_path, config.inputs.transactions)
    if tx_path is None:
        parser.error(
            "No transactions file configured. "
            "Either set inputs.transactions or provide --transactions."
        )
    if not tx_path.is_file():
        parser.error(f"Transactions CSV not found: {tx_path}")

    company = args.company or config.company
    raw = read_transactions(tx_path)
    reconciled = reconcile_statuses(raw, today)

    flt = TransactionFilter(
        company=company,
        start=start,
        end=end,
        category=args.category,
        status=args.status,
        cost_center=args.cost_center,
        contact_id=args.contact_id,
        type=args.type,
    )
    transactions = apply_filter(reconciled, flt)

    print(f"Reference date: {today.isoformat()} | Applied filters: {flt.describe()}")
    print(f"Transactions loaded: {len(raw)} | selected: {len(transactions)}")
    if not transactions:
        print("Warning: no transactions matched the selection.")

    if args.command == "charges":
        _handle_charges(args, config, transactions, today)
    elif args.command == "reconcile":
        _handle_reconcile(filter_by_company(raw, company), transactions, today)
    elif args.command == "dre":
        _handle_dre(config, transactions)
    elif args.command == "balancete":
        _handle_balancete(parser, args, config, transactions, company)
    elif args.command == "cash-flow":
        _handle_cash_flow(args, config, transactions)
    elif args.command == "cost-centers":
        _handle_cost_centers(parser, args, config, transactions, company)
    elif args.command == "indicators":
        _handle_indicators(
            config, filter_by_company(reconciled, company), transactions, today
        )


if __name__ == "__main__":
    main()
