"""Recurrence risk and frequency display formatting."""

from __future__ import annotations

import math

from ..constants import DEFAULT_FREQUENCY_DECIMAL_PLACES
from ..models import IndexStatus, RecurrenceRiskResult

NOT_DETECTED = "Not detected"


def recurrence_risk(carrier_frequency: float, status: IndexStatus | str) -> float:
    """Risk that a child of the consultand is affected.

    Heterozygous carrier: partner carrier probability x 1/4.
    Affected (homozygous or compound heterozygous): partner carrier
    probability x 1/2.
    """
    status = IndexStatus(status)
    divisor = 2 if status.is_affected else 4
    return carrier_frequency / divisor


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def risk_to_ratio(risk: float) -> str:
    """Format a probability as "1:N" without digit grouping; "N/A" when risk is not positive."""
    if risk <= 0:
        return "N/A"
    return f"1:{_round_half_up(1 / risk)}"


def grouped_ratio(value: float) -> str:
    """Like ``risk_to_ratio`` but with thousands separators, e.g. "1:2,500"."""
    if value <= 0:
        return "N/A"
    return f"1:{_round_half_up(1 / value):,}"


def risk_to_percent(risk: float, decimals: int = DEFAULT_FREQUENCY_DECIMAL_PLACES) -> str:
    return f"{risk * 100:.{decimals}f}%"


def frequency_to_percent(
    frequency: float | None, decimals: int = DEFAULT_FREQUENCY_DECIMAL_PLACES
) -> str:
    if frequency is None:
        return NOT_DETECTED
    return risk_to_percent(frequency, decimals)


def frequency_to_ratio(frequency: float | None) -> str:
    if frequency is None or frequency == 0:
        return NOT_DETECTED
    return grouped_ratio(frequency)


def format_carrier_frequency(
    frequency: float | None, decimals: int = DEFAULT_FREQUENCY_DECIMAL_PLACES
) -> dict[str, str]:
    return {
        "percent": frequency_to_percent(frequency, decimals),
        "ratio": frequency_to_ratio(frequency),
    }


def calculate_recurrence_risk(
    carrier_frequency: float,
    status: IndexStatus | str,
    decimals: int = DEFAULT_FREQUENCY_DECIMAL_PLACES,
) -> RecurrenceRiskResult:
    status = IndexStatus(status)
    risk = recurrence_risk(carrier_frequency, status)
    return RecurrenceRiskResult(
        carrier_frequency=carrier_frequency,
        index_status=status,
        recurrence_risk=risk,
        percent=risk_to_percent(risk, decimals),
        ratio=risk_to_ratio(risk),
    )
