"""Pure carrier frequency analysis: classification, aggregation and risk."""

from .classifier import (
    FACTORY_FILTER_CONFIG,
    classify,
    conflicting_variant_ids,
    filter_pathogenic_variants,
    has_clinical_evidence,
)
from .constraint import ConstraintLevel, interpret_loeuf, interpret_pli
from .exclusions import ExclusionReason, ExclusionReasonType, ExclusionSet, parse_reason
from .frequency import (
    aggregate_population_frequencies,
    build_population_results,
    calculate_carrier_frequencies,
    calculate_global_carrier_frequency,
)
from .report import FrequencySource, Perspective, build_template_context, generate_report
from .risk import (
    calculate_recurrence_risk,
    format_carrier_frequency,
    grouped_ratio,
    recurrence_risk,
    risk_to_percent,
    risk_to_ratio,
)
from .submissions import meets_threshold, pathogenic_percentage
from .vocabulary import SignificanceTag, normalize_significance

__all__ = [
    "FACTORY_FILTER_CONFIG",
    "ConstraintLevel",
    "ExclusionReason",
    "ExclusionReasonType",
    "ExclusionSet",
    "FrequencySource",
    "Perspective",
    "SignificanceTag",
    "aggregate_population_frequencies",
    "build_population_results",
    "build_template_context",
    "calculate_carrier_frequencies",
    "calculate_global_carrier_frequency",
    "calculate_recurrence_risk",
    "classify",
    "conflicting_variant_ids",
    "filter_pathogenic_variants",
    "format_carrier_frequency",
    "generate_report",
    "grouped_ratio",
    "has_clinical_evidence",
    "interpret_loeuf",
    "interpret_pli",
    "meets_threshold",
    "normalize_significance",
    "parse_reason",
    "pathogenic_percentage",
    "recurrence_risk",
    "risk_to_percent",
    "risk_to_ratio",
]
