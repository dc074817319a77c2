"""Carrier frequency aggregation across variants, cohorts and populations.

Allele number (AN) differs from variant to variant because of coverage and
call-rate differences, so allele frequencies are computed per variant from that
variant's own AC/AN and then summed. Summing AC over variants and dividing by a
single AN (or by summed AN) distorts the result whenever AN varies.

Carrier frequency follows the Hardy-Weinberg approximation: 2 x the summed
pathogenic allele frequency.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from ..constants import (
    DEFAULT_CARRIER_FREQUENCY,
    DEFAULT_FOUNDER_EFFECT_MULTIPLIER,
    DEFAULT_LOW_SAMPLE_SIZE_THRESHOLD,
)
from ..models import (
    AggregateResult,
    CohortTally,
    PopulationAggregate,
    PopulationFrequencyResult,
    Variant,
)
from ..populations import DatasetVersion

logger = logging.getLogger(__name__)


def calculate_allele_frequency(ac: int, an: int) -> float | None:
    """AC / AN, or None when the site was not sampled (AN = 0)."""
    if an == 0:
        return None
    return ac / an


def calculate_carrier_frequency(pathogenic_afs: Iterable[float]) -> float:
    """Carrier frequency = 2 x sum of pathogenic allele frequencies."""
    return 2 * sum(pathogenic_afs)


def _population_counts(cohort: CohortTally | None, code: str) -> tuple[int, int]:
    if cohort is None:
        return 0, 0
    pop = cohort.population(code)
    if pop is None:
        return 0, 0
    return pop.ac, pop.an


def combined_population_af(variant: Variant, code: str) -> float:
    """Variant AF in one population with exome and genome pooled.

    Missing cohort data counts as AC=0/AN=0; an unsampled population
    contributes 0.
    """
    exome_ac, exome_an = _population_counts(variant.exome, code)
    genome_ac, genome_an = _population_counts(variant.genome, code)
    af = calculate_allele_frequency(exome_ac + genome_ac, exome_an + genome_an)
    return af if af is not None else 0.0


def combined_af(variant: Variant) -> float:
    """Variant AF over the whole exome + genome callset."""
    ac = (variant.exome.ac if variant.exome else 0) + (variant.genome.ac if variant.genome else 0)
    an = (variant.exome.an if variant.exome else 0) + (variant.genome.an if variant.genome else 0)
    af = calculate_allele_frequency(ac, an)
    return af if af is not None else 0.0


def aggregate_population_frequencies(
    variants: Iterable[Variant],
    population_codes: Sequence[str],
) -> dict[str, PopulationAggregate]:
    """Sum per-variant allele frequencies for each population.

    Every requested population is present in the result, with zero totals if
    no variant reports it. AC is summed for display; AN is tracked as the
    maximum per cohort because it is the sample size of the subset.
    """
    result = {code: PopulationAggregate() for code in population_codes}

    for variant in variants:
        for code, agg in result.items():
            agg.sum_af += combined_population_af(variant, code)

            exome_ac, exome_an = _population_counts(variant.exome, code)
            genome_ac, genome_an = _population_counts(variant.genome, code)
            agg.total_ac += exome_ac + genome_ac
            agg.max_exome_an = max(agg.max_exome_an, exome_an)
            agg.max_genome_an = max(agg.max_genome_an, genome_an)

    return result


def build_population_results(
    aggregated: Mapping[str, PopulationAggregate],
    global_carrier_frequency: float | None,
    labels: Mapping[str, str] | None = None,
    founder_multiplier: float = DEFAULT_FOUNDER_EFFECT_MULTIPLIER,
    low_sample_threshold: int = DEFAULT_LOW_SAMPLE_SIZE_THRESHOLD,
) -> list[PopulationFrequencyResult]:
    """Turn aggregated totals into per-population carrier frequencies.

    Sorted by carrier frequency, highest first; populations without a
    frequency keep their input order at the end.
    """
    labels = labels or {}
    results: list[PopulationFrequencyResult] = []

    for code, agg in aggregated.items():
        carrier_freq = 2 * agg.sum_af if agg.sum_af > 0 else None
        is_founder = (
            global_carrier_frequency is not None
            and carrier_freq is not None
            and carrier_freq > global_carrier_frequency * founder_multiplier
        )
        results.append(
            PopulationFrequencyResult(
                code=code,
                label=labels.get(code, code),
                carrier_frequency=carrier_freq,
                allele_count=agg.total_ac,
                allele_number=agg.total_an,
                is_low_sample_size=agg.total_an < low_sample_threshold,
                is_founder_effect=is_founder,
            )
        )

    # sorted() is stable, so None entries stay in input order
    return sorted(
        results,
        key=lambda r: (r.carrier_frequency is None, -(r.carrier_frequency or 0.0)),
    )


def calculate_global_carrier_frequency(
    variants: Sequence[Variant],
) -> tuple[float | None, int, int]:
    """Global carrier frequency with the same per-variant method.

    Returns:
        (carrier frequency or None, summed AC, representative AN) where the
        representative AN is max exome AN + max genome AN.
    """
    sum_af = 0.0
    total_ac = 0
    max_exome_an = 0
    max_genome_an = 0

    for variant in variants:
        sum_af += combined_af(variant)
        if variant.exome:
            total_ac += variant.exome.ac
            max_exome_an = max(max_exome_an, variant.exome.an)
        if variant.genome:
            total_ac += variant.genome.ac
            max_genome_an = max(max_genome_an, variant.genome.an)

    carrier_freq = calculate_carrier_frequency([sum_af]) if sum_af > 0 else None
    return carrier_freq, total_ac, max_exome_an + max_genome_an


def calculate_carrier_frequencies(
    gene: str,
    variants: Sequence[Variant],
    dataset: DatasetVersion,
    *,
    default_carrier_frequency: float = DEFAULT_CARRIER_FREQUENCY,
    founder_multiplier: float = DEFAULT_FOUNDER_EFFECT_MULTIPLIER,
    low_sample_threshold: int = DEFAULT_LOW_SAMPLE_SIZE_THRESHOLD,
) -> AggregateResult:
    """Gene-level summary from already-filtered pathogenic variants.

    With no qualifying variant the configured default carrier frequency is
    reported and ``using_default`` is set.
    """
    if not variants:
        logger.debug("No qualifying variants for %s, using default frequency", gene)
        return AggregateResult(
            gene=gene,
            version=dataset.version,
            global_carrier_frequency=default_carrier_frequency,
            global_allele_count=0,
            global_allele_number=0,
            qualifying_variant_count=0,
            populations=[],
            min_frequency=None,
            max_frequency=None,
            has_founder_effect=False,
            using_default=True,
        )

    global_freq, global_ac, global_an = calculate_global_carrier_frequency(variants)

    codes = [p.code for p in dataset.populations]
    labels = {p.code: p.label for p in dataset.populations}
    aggregated = aggregate_population_frequencies(variants, codes)
    populations = build_population_results(
        aggregated,
        global_freq,
        labels,
        founder_multiplier=founder_multiplier,
        low_sample_threshold=low_sample_threshold,
    )

    freqs = [p.carrier_frequency for p in populations if p.carrier_frequency is not None]

    return AggregateResult(
        gene=gene,
        version=dataset.version,
        global_carrier_frequency=global_freq,
        global_allele_count=global_ac,
        global_allele_number=global_an,
        qualifying_variant_count=len(variants),
        populations=populations,
        min_frequency=min(freqs) if freqs else None,
        max_frequency=max(freqs) if freqs else None,
        has_founder_effect=any(p.is_founder_effect for p in populations),
        using_default=False,
    )
