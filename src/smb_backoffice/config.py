# SMB Back-Office - Financial back-office engine for SMBs
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for SMB Back-Office.

This module is responsible for:
- loading the application configuration from a TOML file,
- resolving input file paths relative to that file,
- exposing typed dataclasses used by the CLI.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

try:
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover - fallback for older Python
    import tomli as tomllib  # type: ignore[import]

from .reports import (
    CASH_FLOW_GROUPINGS,
    DEFAULT_BALANCETE_LABELS,
    DEFAULT_OTHER_EXPENSE_LABEL,
    DEFAULT_OTHER_INCOME_LABEL,
)

DEFAULT_CONFIG_FILE = "smb_backoffice_config.toml"


@dataclass(frozen=True)
class InputsConfig:
    """Paths of the CSV files feeding the CLI (all optional)."""

    transactions: Optional[Path] = None
    bank_accounts: Optional[Path] = None
    cost_centers: Optional[Path] = None


@dataclass(frozen=True)
class ReportsConfig:
    """Report options: fallback category labels, grouping, account labels."""

    other_income_label: str = DEFAULT_OTHER_INCOME_LABEL
    other_expense_label: str = DEFAULT_OTHER_EXPENSE_LABEL
    cash_flow_group_by: Optional[str] = None
    balancete_labels: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_BALANCETE_LABELS)
    )


@dataclass(frozen=True)
class AppConfig:
    """
    Application-wide configuration for SMB Back-Office.

    This aggregates:
    - the default company used to filter transactions,
    - the presentation currency,
    - the input files,
    - report options,
    - display options.
    """

    company: Optional[str] = None
    currency: str = "BRL"
    inputs: InputsConfig = field(default_factory=InputsConfig)
    reports: ReportsConfig = field(default_factory=ReportsConfig)
    decimals: int = 2


def _load_toml(path: Path) -> dict[str, Any]:
    """
    Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the TOML content cannot be parsed.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Failed to parse TOML config file: {path}") from exc


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, Mapping):
        return {}
    return value


def _parse_inputs(section: Mapping[str, Any], base_dir: Path) -> InputsConfig:
    def _resolve_optional(rel: Optional[str]) -> Optional[Path]:
        if not rel:
            return None
        return (base_dir / str(rel)).resolve()

    return InputsConfig(
        transactions=_resolve_optional(section.get("transactions")),
        bank_accounts=_resolve_optional(section.get("bank_accounts")),
        cost_centers=_resolve_optional(section.get("cost_centers")),
    )


def _parse_reports(section: Mapping[str, Any]) -> ReportsConfig:
    group_by = section.get("cash_flow_group_by") or None
    if group_by is not None and group_by not in CASH_FLOW_GROUPINGS:
        raise ValueError(
            f"Invalid value for 'reports.cash_flow_group_by': {group_by!r}. "
            f"Expected one of: {', '.join(CASH_FLOW_GROUPINGS)}."
        )

    labels = dict(DEFAULT_BALANCETE_LABELS)
    for key, value in _section(section, "balancete").items():
        if key not in DEFAULT_BALANCETE_LABELS:
            raise ValueError(
                f"Unknown balancete account {key!r} in [reports.balancete]. "
                f"Expected one of: {', '.join(DEFAULT_BALANCETE_LABELS)}."
            )
        labels[key] = str(value)

    return ReportsConfig(
        other_income_label=str(
            section.get("other_income_label") or DEFAULT_OTHER_INCOME_LABEL
        ),
        other_expense_label=str(
            section.get("other_expense_label") or DEFAULT_OTHER_EXPENSE_LABEL
        ),
        cash_flow_group_by=group_by,
        balancete_labels=labels,
    )


def load_app_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Load the SMB Back-Office configuration from a TOML file.

    Expected sections (all optional)
    --------------------------------
    [company]
        default = "ACME Ltda"        default company filter

    [accounting]
        currency = "BRL"

    [inputs]
        transactions  = "data/transactions.csv"
        bank_accounts = "data/bank_accounts.csv"
        cost_centers  = "data/cost_centers.csv"

    [reports]
        other_income_label  = "Other income"
        other_expense_label = "Other expenses"
        cash_flow_group_by  = "type" | "cost_center"

    [reports.balancete]
        cash / receivables / payables / net_result / capital = "<label>"

    [display]
        decimals = 2

    Input paths are resolved relative to the directory of the TOML file.

    Parameters
    ----------
    config_path:
        Path to the TOML file. Defaults to ``smb_backoffice_config.toml`` in
        the current working directory.

    Returns
    -------
    AppConfig
        Parsed and validated configuration.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    ValueError
        If the file cannot be parsed or holds invalid values.
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILE).resolve()
    else:
        config_file = Path(config_path).resolve()

    raw = _load_toml(config_file)
    base_dir = config_file.parent

    company = _section(raw, "company").get("default") or None
    currency = str(_section(raw, "accounting").get("currency") or "BRL")

    inputs = _parse_inputs(_section(raw, "inputs"), base_dir)
    reports = _parse_reports(_section(raw, "reports"))

    display_section = _section(raw, "display")
    try:
        decimals = int(display_section.get("decimals", 2))
    except (TypeError, ValueError) as exc:
        raise ValueError(
            "Invalid value for 'display.decimals' in the configuration. "
            "Expected an integer."
        ) from exc
    if decimals < 0:
        raise ValueError("'display.decimals' cannot be negative.")

    return AppConfig(
        company=str(company) if company is not None else None,
        currency=currency,
        inputs=inputs,
        reports=reports,
        decimals=decimals,
    )
