"""Input validation for carrierfreq tool handlers.

Validators return an error message, or None when the input is acceptable.
Filter thresholds are clamped rather than rejected: the analysis core assumes
star thresholds within 0-4 and conflicting thresholds within 50-100.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from ..constants import (
    MAX_CONFLICTING_THRESHOLD,
    MAX_STAR_THRESHOLD,
    MIN_CONFLICTING_THRESHOLD,
    MIN_STAR_THRESHOLD,
)
from ..models import FilterConfig, IndexStatus
from ..populations import available_versions

logger = logging.getLogger(__name__)

# HGNC symbols: letters, digits, hyphen, dot (e.g. CFTR, HLA-A, C1orf56)
GENE_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9][A-Z0-9\-.]*$", re.IGNORECASE)

# gnomAD variant ids: chrom-pos-ref-alt without "chr" prefix
VARIANT_ID_PATTERN = re.compile(r"^(\d{1,2}|X|Y|M|MT)-\d{1,11}-[ACGTN]+-[ACGTN]+$", re.IGNORECASE)

MAX_GENE_SYMBOL_LENGTH = 30
MAX_SEARCH_QUERY_LENGTH = 100
MAX_EXCLUDED_VARIANTS = 10_000
MAX_EXCLUSION_REASON_LENGTH = 500

LANGUAGES = ("en", "de")
PERSPECTIVES = ("affected", "carrier", "family_member")
FREQUENCY_SOURCES = ("gnomad", "literature", "default")
PATIENT_SEXES = ("male", "female", "neutral")


def validate_gene_symbol(symbol: str) -> str | None:
    if not symbol or not symbol.strip():
        return "Gene symbol is required"
    symbol = symbol.strip()
    if len(symbol) > MAX_GENE_SYMBOL_LENGTH:
        return f"Gene symbol too long (max {MAX_GENE_SYMBOL_LENGTH} characters)"
    if not GENE_SYMBOL_PATTERN.match(symbol):
        return f"Invalid gene symbol: {symbol}"
    return None


def validate_search_query(query: str) -> str | None:
    if not query or not query.strip():
        return "Search query is required"
    if len(query) > MAX_SEARCH_QUERY_LENGTH:
        return f"Search query too long (max {MAX_SEARCH_QUERY_LENGTH} characters)"
    return None


def validate_variant_ids(variant_ids: list[str]) -> str | None:
    if len(variant_ids) > MAX_EXCLUDED_VARIANTS:
        return f"Too many variant ids (max {MAX_EXCLUDED_VARIANTS})"
    for variant_id in variant_ids:
        if not VARIANT_ID_PATTERN.match(variant_id):
            return f"Invalid variant id: {variant_id}. Expected format: 7-117559590-ATCT-A"
    return None


def validate_exclusion_reasons(reasons: Any, excluded: list[str]) -> str | None:
    """Reasons must map excluded variant ids to short text."""
    if reasons is None:
        return None
    if not isinstance(reasons, Mapping):
        return "exclusion_reasons must map variant ids to reason text"
    for variant_id, text in reasons.items():
        if variant_id not in excluded:
            return f"Exclusion reason given for a variant that is not excluded: {variant_id}"
        if not isinstance(text, str):
            return f"Exclusion reason for {variant_id} must be text"
        if len(text) > MAX_EXCLUSION_REASON_LENGTH:
            return f"Exclusion reason too long (max {MAX_EXCLUSION_REASON_LENGTH} characters)"
    return None


def validate_version(version: str | None) -> str | None:
    if version is not None and version not in available_versions():
        return f"Unknown gnomAD version: {version}. Expected one of {available_versions()}"
    return None


def validate_index_status(status: str) -> str | None:
    try:
        IndexStatus(status)
    except ValueError:
        valid = [s.value for s in IndexStatus]
        return f"Invalid index status: {status}. Expected one of {valid}"
    return None


def validate_carrier_frequency(value: Any) -> str | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return f"Carrier frequency must be a number, got {value!r}"
    if not 0 < value <= 1:
        return f"Carrier frequency must be in (0, 1], got {value}"
    return None


def validate_choice(name: str, value: str, choices: tuple[str, ...]) -> str | None:
    if value not in choices:
        return f"Invalid {name}: {value}. Expected one of {list(choices)}"
    return None


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def build_filter_config(args: Mapping[str, Any]) -> FilterConfig:
    """Build a FilterConfig from tool arguments, clamping thresholds to range."""
    defaults = FilterConfig()

    stars = int(args.get("clinvar_star_threshold", defaults.clinvar_star_threshold))
    clamped_stars = int(clamp(stars, MIN_STAR_THRESHOLD, MAX_STAR_THRESHOLD))
    if clamped_stars != stars:
        logger.debug("Clamped clinvar_star_threshold %d to %d", stars, clamped_stars)

    conflicting = float(args.get("conflicting_threshold", defaults.conflicting_threshold))
    clamped_conflicting = clamp(conflicting, MIN_CONFLICTING_THRESHOLD, MAX_CONFLICTING_THRESHOLD)
    if clamped_conflicting != conflicting:
        logger.debug(
            "Clamped conflicting_threshold %s to %s", conflicting, clamped_conflicting
        )

    return FilterConfig(
        lof_hc_enabled=bool(args.get("lof_hc_enabled", defaults.lof_hc_enabled)),
        missense_enabled=bool(args.get("missense_enabled", defaults.missense_enabled)),
        clinvar_enabled=bool(args.get("clinvar_enabled", defaults.clinvar_enabled)),
        clinvar_star_threshold=clamped_stars,
        include_conflicting=bool(args.get("include_conflicting", defaults.include_conflicting)),
        conflicting_threshold=clamped_conflicting,
    )
