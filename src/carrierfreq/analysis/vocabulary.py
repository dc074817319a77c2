"""ClinVar classification vocabulary.

ClinVar reports clinical significance as free text ("Pathogenic/Likely
pathogenic", "Conflicting classifications of pathogenicity", "risk factor",
...). All substring matching against those strings is done here; the rest of
the package works with ``SignificanceTag`` values only.
"""

from __future__ import annotations

from enum import Enum


class SignificanceTag(str, Enum):
    PATHOGENIC = "pathogenic"
    BENIGN = "benign"
    CONFLICTING = "conflicting"
    AMBIGUOUS = "ambiguous"


# Matched case-insensitively as substrings. "pathogenic" also covers
# "likely pathogenic", "likely_pathogenic" and the low-penetrance forms.
PATHOGENIC_TERMS = (
    "pathogenic",
    "likely pathogenic",
    "likely_pathogenic",
    "pathogenic, low penetrance",
    "likely pathogenic, low penetrance",
)

BENIGN_TERMS = (
    "benign",
    "likely benign",
    "likely_benign",
)

CONFLICTING_TERMS = ("conflicting",)

# Neither benign nor pathogenic; excluded from submission tallies
AMBIGUOUS_TERMS = (
    "not provided",
    "other",
    "risk factor",
    "drug response",
    "association",
    "protective",
    "affects",
    "confers sensitivity",
    "uncertain risk allele",
    "likely risk allele",
    "established risk allele",
)

_VOCABULARY: dict[SignificanceTag, tuple[str, ...]] = {
    SignificanceTag.PATHOGENIC: PATHOGENIC_TERMS,
    SignificanceTag.BENIGN: BENIGN_TERMS,
    SignificanceTag.CONFLICTING: CONFLICTING_TERMS,
    SignificanceTag.AMBIGUOUS: AMBIGUOUS_TERMS,
}


def normalize_significance(raw: str | None) -> frozenset[SignificanceTag]:
    """Map a free-text clinical significance to the set of matching tags.

    A single string can carry several tags, e.g. "Conflicting classifications
    of pathogenicity" is both CONFLICTING and PATHOGENIC by substring, so
    callers decide how tags combine.
    """
    if not raw:
        return frozenset()
    text = raw.lower().strip()
    return frozenset(
        tag for tag, terms in _VOCABULARY.items() if any(term in text for term in terms)
    )


def is_pathogenic_significance(raw: str | None) -> bool:
    """Pathogenic or likely pathogenic, and not a conflicting aggregate."""
    tags = normalize_significance(raw)
    return SignificanceTag.PATHOGENIC in tags and SignificanceTag.CONFLICTING not in tags


def is_conflicting_significance(raw: str | None) -> bool:
    return SignificanceTag.CONFLICTING in normalize_significance(raw)
