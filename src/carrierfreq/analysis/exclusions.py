"""Manual exclusion of variants from the carrier frequency calculation.

A curator may drop variants that pass the automatic filters (for example a
ClinVar P/LP call they consider outdated). Exclusions belong to one gene and
carry an optional reason that is reported back with the result.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum


class ExclusionReasonType(str, Enum):
    LIKELY_BENIGN = "likely_benign"
    LOW_QUALITY = "low_quality"
    POPULATION_SPECIFIC = "population_specific"
    OTHER = "other"


EXCLUSION_REASON_LABELS: dict[ExclusionReasonType, str] = {
    ExclusionReasonType.LIKELY_BENIGN: "Likely benign",
    ExclusionReasonType.LOW_QUALITY: "Low quality",
    ExclusionReasonType.POPULATION_SPECIFIC: "Population-specific",
    ExclusionReasonType.OTHER: "Other",
}


@dataclass(frozen=True)
class ExclusionReason:
    type: ExclusionReasonType
    custom_text: str | None = None  # only meaningful for OTHER

    def describe(self) -> str:
        if self.type is ExclusionReasonType.OTHER and self.custom_text:
            return self.custom_text
        return EXCLUSION_REASON_LABELS[self.type]


@dataclass
class ExclusionSet:
    """Variant ids excluded by the curator for a single gene."""

    gene: str | None = None
    _excluded: set[str] = field(default_factory=set, repr=False)
    _reasons: dict[str, ExclusionReason] = field(default_factory=dict, repr=False)

    def __contains__(self, variant_id: object) -> bool:
        return variant_id in self._excluded

    def __len__(self) -> int:
        return len(self._excluded)

    @property
    def excluded(self) -> list[str]:
        return sorted(self._excluded)

    def exclude(self, variant_id: str, reason: ExclusionReason | None = None) -> None:
        self._excluded.add(variant_id)
        if reason is not None:
            self._reasons[variant_id] = reason

    def exclude_all(self, variant_ids: Iterable[str]) -> None:
        self._excluded.update(variant_ids)

    def reason(self, variant_id: str) -> ExclusionReason | None:
        return self._reasons.get(variant_id)

    def set_reason(self, variant_id: str, reason: ExclusionReason) -> None:
        """Attach a reason to an already excluded variant; ignored otherwise."""
        if variant_id in self._excluded:
            self._reasons[variant_id] = reason

    def summary(self) -> list[dict[str, str | None]]:
        """Excluded ids in sorted order with their reason text, if any."""
        rows = []
        for variant_id in self.excluded:
            reason = self.reason(variant_id)
            rows.append({"variant_id": variant_id, "reason": reason.describe() if reason else None})
        return rows


def parse_reason(text: str) -> ExclusionReason:
    """Reason from a type value ("low_quality") or, failing that, free text as OTHER."""
    text = text.strip()
    try:
        return ExclusionReason(ExclusionReasonType(text.lower()))
    except ValueError:
        return ExclusionReason(ExclusionReasonType.OTHER, text or None)
