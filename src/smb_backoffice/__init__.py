# SMB Back-Office - Financial back-office engine for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
SMB Back-Office
---------------

The computational core of a small-business financial back-office
(accounts payable / receivable and reports). Display layers own the
transaction collection; this package only derives values from it.

Main capabilities:
- tolerant parsing and formatting of the two textual date formats in use
  (DD/MM/YYYY and YYYY-MM-DD),
- overdue interest and fine computation (daily or 30-day monthly rates),
- promotion of past-due pending items to the "Overdue" status,
- settlement and scheduling transitions,
- cash-basis statements: DRE (income statement), simulated balancete
  (trial balance) and the realized cash-flow ledger,
- cost center budget tracking and payables indicators.

All money values are ``decimal.Decimal`` and every function that depends on
the current date takes it as an explicit ``today`` argument.

Version: 0.2.0

Usage:
    python -m smb_backoffice.cli --help
"""

__all__ = ["dates", "models", "charges", "status", "reports", "filters", "views", "io"]

__version__ = "0.2.0"
