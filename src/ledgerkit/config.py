"""Tolerances and thresholds used by the reporting and reconciliation services."""

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional


@dataclass(frozen=True)
class ReportSettings:
    """Thresholds for statement generation.

    zero_epsilon filters out accounts with no meaningful activity;
    balance_epsilon is the tolerance for balanced/is_balanced checks.
    """

    zero_epsilon: Decimal = Decimal("0.001")
    balance_epsilon: Decimal = Decimal("0.01")
    on_track_percent: Decimal = Decimal("5")
    cash_account_prefix: str = "10"


@dataclass(frozen=True)
class ReconciliationSettings:
    """Auto-match criteria for bank transactions against payments."""

    amount_tolerance: Decimal = Decimal("0.01")
    date_window_days: int = 5
    confirmed_status: str = "Confirmed"


@dataclass(frozen=True)
class Settings:
    reports: ReportSettings = field(default_factory=ReportSettings)
    reconciliation: ReconciliationSettings = field(default_factory=ReconciliationSettings)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from defaults plus LEDGERKIT_* environment overrides.

    Recognized variables: LEDGERKIT_MATCH_WINDOW_DAYS, LEDGERKIT_AMOUNT_TOLERANCE,
    LEDGERKIT_CASH_PREFIX.

    Raises:
        ValueError: If an override cannot be parsed
    """
    if environ is None:
        environ = os.environ

    reports = ReportSettings()
    reconciliation = ReconciliationSettings()

    window = environ.get("LEDGERKIT_MATCH_WINDOW_DAYS")
    tolerance = environ.get("LEDGERKIT_AMOUNT_TOLERANCE")
    prefix = environ.get("LEDGERKIT_CASH_PREFIX")

    if window:
        try:
            days = int(window)
        except ValueError:
            raise ValueError(f"Invalid LEDGERKIT_MATCH_WINDOW_DAYS: '{window}'")
        if days < 0:
            raise ValueError("LEDGERKIT_MATCH_WINDOW_DAYS must not be negative")
        reconciliation = ReconciliationSettings(
            amount_tolerance=reconciliation.amount_tolerance,
            date_window_days=days,
            confirmed_status=reconciliation.confirmed_status,
        )

    if tolerance:
        try:
            amount = Decimal(tolerance)
        except InvalidOperation:
            raise ValueError(f"Invalid LEDGERKIT_AMOUNT_TOLERANCE: '{tolerance}'")
        reconciliation = ReconciliationSettings(
            amount_tolerance=amount,
            date_window_days=reconciliation.date_window_days,
            confirmed_status=reconciliation.confirmed_status,
        )

    if prefix:
        reports = ReportSettings(cash_account_prefix=prefix)

    return Settings(reports=reports, reconciliation=reconciliation)
