"""MCP tool handlers and input validation."""

from .tools import (
    calculate_gene,
    get_clingen_client,
    get_filter_defaults,
    get_gnomad_client,
    handle_calculate_carrier_frequency,
    handle_calculate_recurrence_risk,
    handle_check_gene_validity,
    handle_generate_counseling_text,
    handle_get_gene_constraint,
    handle_list_populations,
    handle_search_genes,
)
from .validation import (
    build_filter_config,
    validate_carrier_frequency,
    validate_exclusion_reasons,
    validate_gene_symbol,
    validate_index_status,
    validate_variant_ids,
)

__all__ = [
    "build_filter_config",
    "calculate_gene",
    "get_clingen_client",
    "get_filter_defaults",
    "get_gnomad_client",
    "handle_calculate_carrier_frequency",
    "handle_calculate_recurrence_risk",
    "handle_check_gene_validity",
    "handle_generate_counseling_text",
    "handle_get_gene_constraint",
    "handle_list_populations",
    "handle_search_genes",
    "validate_carrier_frequency",
    "validate_exclusion_reasons",
    "validate_gene_symbol",
    "validate_index_status",
    "validate_variant_ids",
]
