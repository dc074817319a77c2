"""Pathogenic variant selection for carrier frequency estimation.

A variant counts toward the carrier frequency when:

1. it is a high-confidence loss-of-function call (LOFTEE "HC") on the
   canonical transcript and the LoF filter is on; LOFTEE alone is sufficient
   evidence, or
2. it is missense-class, the missense filter is on, and ClinVar supports it
   (missense calls need clinical corroboration), or
3. it has any other consequence and ClinVar supports it.

ClinVar support means a P/LP classification with enough review stars, or a
conflicting classification whose individual submissions are mostly P/LP when
conflicting variants are included.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from ..constants import LOF_HIGH_CONFIDENCE, MISSENSE_CONSEQUENCES
from ..models import (
    ClinVarAnnotation,
    ClinVarSubmission,
    FilterConfig,
    TranscriptConsequence,
    Variant,
)
from .exclusions import ExclusionSet
from .submissions import meets_threshold
from .vocabulary import is_conflicting_significance, is_pathogenic_significance

FACTORY_FILTER_CONFIG = FilterConfig()

AnnotationLookup = Mapping[str, ClinVarAnnotation]
SubmissionLookup = Mapping[str, Sequence[ClinVarSubmission]]


def is_high_confidence_lof(consequence: TranscriptConsequence) -> bool:
    """LOFTEE high-confidence LoF on the canonical transcript."""
    return consequence.canonical and consequence.lof == LOF_HIGH_CONFIDENCE


def is_missense_variant(consequence: TranscriptConsequence) -> bool:
    """Missense, in-frame insertion or in-frame deletion on the canonical transcript."""
    if not consequence.canonical or not consequence.consequence_terms:
        return False
    return any(term in MISSENSE_CONSEQUENCES for term in consequence.consequence_terms)


def is_pathogenic_clinvar(annotation: ClinVarAnnotation, star_threshold: int = 1) -> bool:
    """P/LP, not conflicting, with at least ``star_threshold`` gold stars."""
    return (
        is_pathogenic_significance(annotation.clinical_significance)
        and annotation.gold_stars >= star_threshold
    )


def is_conflicting_clinvar(annotation: ClinVarAnnotation) -> bool:
    return is_conflicting_significance(annotation.clinical_significance)


def index_annotations(
    annotations: Iterable[ClinVarAnnotation] | AnnotationLookup,
) -> dict[str, ClinVarAnnotation]:
    """Index annotations by variant id; the first annotation per id wins."""
    if isinstance(annotations, Mapping):
        return dict(annotations)
    index: dict[str, ClinVarAnnotation] = {}
    for annotation in annotations:
        index.setdefault(annotation.variant_id, annotation)
    return index


def conflicting_variant_ids(annotations: Iterable[ClinVarAnnotation]) -> list[str]:
    """Variant ids whose ClinVar classification is conflicting.

    These are the variants that need individual submissions fetched before
    conflicting classifications can be resolved.
    """
    return [a.variant_id for a in annotations if is_conflicting_clinvar(a)]


def has_clinical_evidence(
    annotation: ClinVarAnnotation | None,
    config: FilterConfig,
    submissions_by_variant: SubmissionLookup | None = None,
) -> bool:
    """Whether ClinVar supports counting the variant as pathogenic."""
    if not config.clinvar_enabled or annotation is None:
        return False

    if annotation.gold_stars < config.clinvar_star_threshold:
        return False

    if is_conflicting_clinvar(annotation):
        if not config.include_conflicting or not submissions_by_variant:
            return False
        submissions = submissions_by_variant.get(annotation.variant_id)
        return meets_threshold(submissions, config.conflicting_threshold)

    return is_pathogenic_clinvar(annotation, config.clinvar_star_threshold)


def _classify_indexed(
    variant: Variant,
    annotations: AnnotationLookup,
    config: FilterConfig,
    submissions_by_variant: SubmissionLookup | None,
) -> bool:
    consequence = variant.transcript_consequence

    if config.lof_hc_enabled and consequence is not None and is_high_confidence_lof(consequence):
        return True

    evidence = has_clinical_evidence(
        annotations.get(variant.variant_id), config, submissions_by_variant
    )

    if consequence is not None and is_missense_variant(consequence):
        return config.missense_enabled and evidence

    return evidence


def classify(
    variant: Variant,
    annotations: Iterable[ClinVarAnnotation] | AnnotationLookup,
    config: FilterConfig = FACTORY_FILTER_CONFIG,
    submissions_by_variant: SubmissionLookup | None = None,
) -> bool:
    """Decide whether a single variant counts as pathogenic.

    Args:
        variant: gnomAD variant.
        annotations: ClinVar annotations for the gene, as a sequence or a
            mapping keyed by variant id.
        config: Active filter switches.
        submissions_by_variant: Individual ClinVar submissions keyed by variant
            id, used to resolve conflicting classifications.
    """
    return _classify_indexed(
        variant, index_annotations(annotations), config, submissions_by_variant
    )


def filter_pathogenic_variants(
    variants: Iterable[Variant],
    annotations: Iterable[ClinVarAnnotation] | AnnotationLookup,
    config: FilterConfig = FACTORY_FILTER_CONFIG,
    submissions_by_variant: SubmissionLookup | None = None,
    excluded: ExclusionSet | Iterable[str] | None = None,
) -> list[Variant]:
    """Return the variants that qualify, minus any manually excluded ids."""
    index = index_annotations(annotations)
    if excluded is None:
        excluded_ids: ExclusionSet | set[str] = set()
    elif isinstance(excluded, ExclusionSet):
        excluded_ids = excluded
    else:
        excluded_ids = set(excluded)

    return [
        v
        for v in variants
        if v.variant_id not in excluded_ids
        and _classify_indexed(v, index, config, submissions_by_variant)
    ]
