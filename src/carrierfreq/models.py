"""Data records shared by the gnomAD client and the analysis core.

Variant and annotation records are produced by the client and treated as
read-only by the analysis functions. Result records are derived values and are
recomputed whenever their inputs change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .constants import (
    DEFAULT_CLINVAR_ENABLED,
    DEFAULT_CLINVAR_STAR_THRESHOLD,
    DEFAULT_CONFLICTING_THRESHOLD,
    DEFAULT_INCLUDE_CONFLICTING,
    DEFAULT_LOF_HC_ENABLED,
    DEFAULT_MISSENSE_ENABLED,
)


class IndexStatus(str, Enum):
    """Genotype of the index patient (consultand)."""

    HETEROZYGOUS = "heterozygous"
    HOMOZYGOUS = "homozygous"
    COMPOUND_HET_CONFIRMED = "compound_het_confirmed"
    COMPOUND_HET_ASSUMED = "compound_het_assumed"

    @property
    def is_affected(self) -> bool:
        return self is not IndexStatus.HETEROZYGOUS


# -- Input records -----------------------------------------------------------


@dataclass
class PopulationTally:
    """Allele count and allele number for one population in one cohort."""

    id: str
    ac: int
    an: int


@dataclass
class CohortTally:
    """Allele tallies for one sequencing cohort (exome or genome)."""

    ac: int
    an: int
    populations: list[PopulationTally] = field(default_factory=list)

    def population(self, code: str) -> PopulationTally | None:
        for pop in self.populations:
            if pop.id == code:
                return pop
        return None


@dataclass
class TranscriptConsequence:
    """VEP/LOFTEE annotation on a transcript."""

    gene_symbol: str | None = None
    transcript_id: str | None = None
    canonical: bool = False
    consequence_terms: list[str] = field(default_factory=list)
    lof: str | None = None  # "HC", "LC", "OS" or None
    lof_filter: str | None = None
    lof_flags: str | None = None
    hgvsc: str | None = None
    hgvsp: str | None = None


@dataclass
class Variant:
    """A gnomAD variant with exome ("cohort A") and genome ("cohort B") tallies."""

    variant_id: str
    pos: int
    ref: str
    alt: str
    exome: CohortTally | None = None
    genome: CohortTally | None = None
    transcript_consequence: TranscriptConsequence | None = None


@dataclass
class ClinVarAnnotation:
    """Aggregate ClinVar classification for a variant."""

    variant_id: str
    clinical_significance: str
    gold_stars: int
    review_status: str = ""
    pos: int | None = None
    ref: str | None = None
    alt: str | None = None


@dataclass
class ClinVarSubmission:
    """A single submitter's classification of a variant."""

    clinical_significance: str


@dataclass
class FilterConfig:
    """User-controlled switches deciding which variants count as pathogenic.

    The calling layer keeps ``clinvar_star_threshold`` within 0-4 and
    ``conflicting_threshold`` within 50-100; values are used as given here.
    """

    lof_hc_enabled: bool = DEFAULT_LOF_HC_ENABLED
    missense_enabled: bool = DEFAULT_MISSENSE_ENABLED
    clinvar_enabled: bool = DEFAULT_CLINVAR_ENABLED
    clinvar_star_threshold: int = DEFAULT_CLINVAR_STAR_THRESHOLD
    include_conflicting: bool = DEFAULT_INCLUDE_CONFLICTING
    conflicting_threshold: float = DEFAULT_CONFLICTING_THRESHOLD

    def describe(self) -> str:
        """Summarise the active filters, e.g. "LoF HC, ClinVar >= 1 star"."""
        parts = []
        if self.lof_hc_enabled:
            parts.append("LoF HC")
        if self.missense_enabled:
            parts.append("Missense")
        if self.clinvar_enabled:
            stars = self.clinvar_star_threshold
            parts.append(f"ClinVar >= {stars} {'star' if stars == 1 else 'stars'}")
            if self.include_conflicting:
                parts.append(f"Conflicting >= {self.conflicting_threshold:g}% P/LP")
        if not parts:
            return "No filters active"
        return ", ".join(parts)


# -- Result records ----------------------------------------------------------


@dataclass
class PopulationAggregate:
    """Running totals for one population across the qualifying variants."""

    sum_af: float = 0.0
    total_ac: int = 0
    max_exome_an: int = 0
    max_genome_an: int = 0

    @property
    def total_an(self) -> int:
        # Representative sample size; AN is a per-dataset constant, never summed
        return self.max_exome_an + self.max_genome_an


@dataclass
class PopulationFrequencyResult:
    """Carrier frequency for one population."""

    code: str
    label: str
    carrier_frequency: float | None
    allele_count: int
    allele_number: int
    is_low_sample_size: bool
    is_founder_effect: bool


@dataclass
class AggregateResult:
    """Gene-level carrier frequency summary."""

    gene: str
    version: str
    global_carrier_frequency: float | None
    global_allele_count: int
    global_allele_number: int
    qualifying_variant_count: int
    populations: list[PopulationFrequencyResult]
    min_frequency: float | None
    max_frequency: float | None
    has_founder_effect: bool
    using_default: bool


@dataclass
class RecurrenceRiskResult:
    """Recurrence risk for a consultand with display strings."""

    carrier_frequency: float
    index_status: IndexStatus
    recurrence_risk: float
    percent: str
    ratio: str
