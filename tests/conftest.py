"""Shared test fixtures for carrierfreq tests."""

import pytest

from carrierfreq.core import tools as _tools_module
from carrierfreq.models import (
    ClinVarAnnotation,
    ClinVarSubmission,
    CohortTally,
    PopulationTally,
    TranscriptConsequence,
    Variant,
)


@pytest.fixture(autouse=True)
def _reset_client_singletons():
    """Reset module-level client singletons between tests."""
    yield
    _tools_module._gnomad_clients.clear()
    _tools_module._clingen_client = None


def _cohort(counts, populations=None):
    if counts is None:
        return None
    ac, an = counts
    return CohortTally(
        ac=ac,
        an=an,
        populations=[
            PopulationTally(id=code, ac=pop_ac, an=pop_an)
            for code, (pop_ac, pop_an) in (populations or {}).items()
        ],
    )


@pytest.fixture
def make_variant():
    """Build a Variant; cohorts are (ac, an) tuples, populations {code: (ac, an)}."""

    def _make(
        variant_id="7-117559590-A-G",
        *,
        exome=None,
        genome=None,
        exome_pops=None,
        genome_pops=None,
        consequence="missense_variant",
        lof=None,
        canonical=True,
        annotated=True,
    ):
        chrom, pos, ref, alt = variant_id.split("-")
        transcript = None
        if annotated:
            transcript = TranscriptConsequence(
                gene_symbol="CFTR",
                transcript_id="ENST00000003084",
                canonical=canonical,
                consequence_terms=[consequence] if consequence else [],
                lof=lof,
            )
        return Variant(
            variant_id=variant_id,
            pos=int(pos),
            ref=ref,
            alt=alt,
            exome=_cohort(exome, exome_pops),
            genome=_cohort(genome, genome_pops),
            transcript_consequence=transcript,
        )

    return _make


@pytest.fixture
def make_annotation():
    def _make(variant_id="7-117559590-A-G", significance="Pathogenic", stars=2):
        return ClinVarAnnotation(
            variant_id=variant_id,
            clinical_significance=significance,
            gold_stars=stars,
            review_status="criteria provided, multiple submitters, no conflicts",
        )

    return _make


@pytest.fixture
def make_submissions():
    def _make(*significances):
        return [ClinVarSubmission(clinical_significance=s) for s in significances]

    return _make
