"""Shared constants for carrierfreq runtime defaults and thresholds.

This module is the single source of truth for default values that are consumed
across configuration loading, the analysis core, and the gnomAD client.
"""

from __future__ import annotations

# Networking defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_TRANSPORT = "stdio"
VALID_TRANSPORTS = ("stdio", "sse", "streamable-http")
DEFAULT_LOG_LEVEL = "INFO"

# gnomAD API
GNOMAD_API_URL = "https://gnomad.broadinstitute.org/api"
DEFAULT_GNOMAD_VERSION = "v4"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 60.0
GNOMAD_MAX_CONCURRENT_REQUESTS = 3
GENE_FETCH_TIMEOUT_SECONDS = 300.0  # gene query plus every submissions batch

# Submissions are fetched with aliased queries; gnomAD rejects very large documents
DEFAULT_SUBMISSIONS_BATCH_SIZE = 50

# ClinGen gene-disease validity curations (one download covers every gene)
CLINGEN_API_URL = "https://search.clinicalgenome.org/api/validity?queryParams"
CLINGEN_CACHE_TTL_SECONDS = 30 * 24 * 3_600  # 30 days

# API response cache
API_CACHE_MAX_SIZE = 200
API_CACHE_TTL_SECONDS = 3_600  # 1 hour

# Calculation thresholds
DEFAULT_FOUNDER_EFFECT_MULTIPLIER = 5.0
DEFAULT_LOW_SAMPLE_SIZE_THRESHOLD = 2_000
DEFAULT_CARRIER_FREQUENCY = 0.01  # 1:100, used when no variant qualifies

# LOEUF bounds per gnomAD version: constrained below, tolerant above
LOEUF_THRESHOLDS = {
    "v4": (0.6, 1.5),
    "v3": (0.35, 1.0),
    "v2": (0.35, 1.0),
}
PLI_INTOLERANT_THRESHOLD = 0.9
PLI_TOLERANT_THRESHOLD = 0.1

# Display
DEFAULT_FREQUENCY_DECIMAL_PLACES = 2

# Filter bounds (clamped by the calling layer, assumed by the core)
MIN_STAR_THRESHOLD = 0
MAX_STAR_THRESHOLD = 4
MIN_CONFLICTING_THRESHOLD = 50
MAX_CONFLICTING_THRESHOLD = 100

# Filter factory defaults
DEFAULT_LOF_HC_ENABLED = True
DEFAULT_MISSENSE_ENABLED = True
DEFAULT_CLINVAR_ENABLED = True
DEFAULT_CLINVAR_STAR_THRESHOLD = 1
DEFAULT_INCLUDE_CONFLICTING = False
DEFAULT_CONFLICTING_THRESHOLD = 80

# Canonical-transcript consequence terms treated as missense-class
MISSENSE_CONSEQUENCES = (
    "missense_variant",
    "inframe_insertion",
    "inframe_deletion",
)

# LOFTEE confidence tier counted as loss of function
LOF_HIGH_CONFIDENCE = "HC"
