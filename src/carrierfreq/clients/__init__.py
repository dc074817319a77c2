"""External API client modules."""

from .clingen import ClinGenClient, ClinGenEntry, GeneValidity
from .gnomad import GeneConstraint, GeneDetails, GeneSearchResult, GeneVariants, GnomadClient
from .ttl_cache import QueryCache

__all__ = [
    "ClinGenClient",
    "ClinGenEntry",
    "GeneConstraint",
    "GeneDetails",
    "GeneSearchResult",
    "GeneValidity",
    "GeneVariants",
    "GnomadClient",
    "QueryCache",
]
