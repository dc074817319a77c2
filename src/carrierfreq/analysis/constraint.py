"""Interpretation of gnomAD loss-of-function constraint metrics.

Recessive disease genes are usually LoF tolerant in heterozygotes; a strongly
constrained gene hints that heterozygous LoF may itself be pathogenic.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..constants import LOEUF_THRESHOLDS, PLI_INTOLERANT_THRESHOLD, PLI_TOLERANT_THRESHOLD


class ConstraintLevel(str, Enum):
    CONSTRAINED = "constrained"
    INTERMEDIATE = "intermediate"
    TOLERANT = "tolerant"
    UNKNOWN = "unknown"


@dataclass
class ConstraintInterpretation:
    level: ConstraintLevel
    label: str


def interpret_loeuf(loeuf: float | None, version: str = "v4") -> ConstraintInterpretation:
    """Classify LOEUF with the thresholds of the given gnomAD version."""
    if loeuf is None:
        return ConstraintInterpretation(ConstraintLevel.UNKNOWN, "N/A")

    constrained_below, tolerant_above = LOEUF_THRESHOLDS.get(version, LOEUF_THRESHOLDS["v4"])
    if loeuf < constrained_below:
        return ConstraintInterpretation(ConstraintLevel.CONSTRAINED, "LoF intolerant")
    if loeuf > tolerant_above:
        return ConstraintInterpretation(ConstraintLevel.TOLERANT, "LoF tolerant")
    return ConstraintInterpretation(ConstraintLevel.INTERMEDIATE, "Intermediate")


def interpret_pli(pli: float | None) -> ConstraintInterpretation:
    if pli is None:
        return ConstraintInterpretation(ConstraintLevel.UNKNOWN, "N/A")
    if pli >= PLI_INTOLERANT_THRESHOLD:
        return ConstraintInterpretation(
            ConstraintLevel.CONSTRAINED, f"LoF intolerant (>={PLI_INTOLERANT_THRESHOLD:g})"
        )
    if pli <= PLI_TOLERANT_THRESHOLD:
        return ConstraintInterpretation(
            ConstraintLevel.TOLERANT, f"LoF tolerant (<={PLI_TOLERANT_THRESHOLD:g})"
        )
    return ConstraintInterpretation(ConstraintLevel.INTERMEDIATE, "Intermediate")
