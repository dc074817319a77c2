"""Resolution of conflicting ClinVar classifications from individual submissions."""

from __future__ import annotations

from collections.abc import Sequence

from ..models import ClinVarSubmission
from .vocabulary import SignificanceTag, normalize_significance


def pathogenic_percentage(submissions: Sequence[ClinVarSubmission] | None) -> float | None:
    """Percentage of valid submissions classifying the variant as P/LP.

    Submissions with an ambiguous classification (not provided, risk factor,
    drug response, ...) are left out of both numerator and denominator.

    Returns:
        Percentage in [0, 100], or None if no valid submission remains.
    """
    if not submissions:
        return None

    pathogenic_count = 0
    valid_count = 0
    for sub in submissions:
        tags = normalize_significance(sub.clinical_significance)
        if SignificanceTag.AMBIGUOUS in tags:
            continue
        valid_count += 1
        if SignificanceTag.PATHOGENIC in tags:
            pathogenic_count += 1

    if valid_count == 0:
        return None

    return pathogenic_count / valid_count * 100


def meets_threshold(
    submissions: Sequence[ClinVarSubmission] | None, threshold: float
) -> bool:
    """True if the P/LP submission percentage reaches ``threshold``."""
    percentage = pathogenic_percentage(submissions)
    if percentage is None:
        return False
    return percentage >= threshold
