"""ClinGen gene-disease validity client.

Carrier frequencies are only meaningful for genes with an autosomal recessive
disease association. ClinGen publishes all of its validity curations in one
listing, so the whole list is downloaded once and kept for 30 days; gene
lookups then run against the cached entries.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

import httpx

from ..constants import CLINGEN_API_URL, CLINGEN_CACHE_TTL_SECONDS, DEFAULT_REQUEST_TIMEOUT_SECONDS
from .ttl_cache import MISSING, QueryCache

logger = logging.getLogger(__name__)

_ENTRIES_KEY = "validity"


@dataclass
class ClinGenEntry:
    """One ClinGen gene-disease validity curation."""

    gene_symbol: str
    hgnc_id: str
    disease_label: str
    mondo_id: str
    moi: str  # AD, AR, XL, SD, UD
    classification: str  # Definitive, Strong, Moderate, Limited, Disputed, Refuted, ...
    expert_panel: str
    classification_date: str
    perm_id: str


@dataclass
class GeneValidity:
    """Result of looking up a gene in the ClinGen curations."""

    gene: str
    found: bool
    has_autosomal_recessive: bool
    entries: list[ClinGenEntry]
    ar_entries: list[ClinGenEntry]


def is_autosomal_recessive(moi: str) -> bool:
    moi = moi.strip().lower()
    return moi == "ar" or "recessive" in moi


def parse_validity_response(data: dict) -> list[ClinGenEntry]:
    """Parse the ``rows`` of a validity listing, dropping rows without a gene symbol."""
    rows = data.get("rows")
    if not isinstance(rows, list):
        return []

    entries = [
        ClinGenEntry(
            gene_symbol=(row.get("symbol") or "").upper(),
            hgnc_id=row.get("hgnc_id") or "",
            disease_label=row.get("disease_name") or "",
            mondo_id=row.get("mondo") or "",
            moi=row.get("moi") or "",
            classification=row.get("classification") or "",
            expert_panel=row.get("ep") or "",
            classification_date=row.get("released") or "",
            perm_id=row.get("perm_id") or "",
        )
        for row in rows
    ]
    return [e for e in entries if e.gene_symbol]


def gene_validity(entries: list[ClinGenEntry], symbol: str) -> GeneValidity:
    symbol = symbol.strip().upper()
    matching = [e for e in entries if e.gene_symbol == symbol]
    ar_entries = [e for e in matching if is_autosomal_recessive(e.moi)]
    return GeneValidity(
        gene=symbol,
        found=bool(matching),
        has_autosomal_recessive=bool(ar_entries),
        entries=matching,
        ar_entries=ar_entries,
    )


@dataclass
class ClinGenClient:
    """Async client for the ClinGen validity listing.

    Features:
    - Whole listing cached for 30 days
    - A single download in flight at a time
    """

    api_url: str = CLINGEN_API_URL
    timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    _cache: QueryCache = field(default=None, repr=False)  # type: ignore[assignment]
    _lock: asyncio.Lock = field(default=None, repr=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        self._cache = QueryCache(maxsize=1, ttl=CLINGEN_CACHE_TTL_SECONDS)
        self._lock = asyncio.Lock()

    async def fetch_entries(self) -> list[ClinGenEntry]:
        """
        Return every validity curation, downloading the listing if needed.

        Raises:
            httpx.HTTPStatusError / httpx.RequestError: on transport failure.
            ValueError: if the listing contains no usable rows.
        """
        cached = await self._cache.get(_ENTRIES_KEY, MISSING)
        if cached is not MISSING:
            return cached  # type: ignore[return-value]

        async with self._lock:
            # Another task may have filled the cache while we waited
            cached = await self._cache.get(_ENTRIES_KEY, MISSING)
            if cached is not MISSING:
                return cached  # type: ignore[return-value]

            logger.debug("ClinGen: downloading validity curations")
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(self.api_url)
                resp.raise_for_status()
                data = resp.json()

            entries = parse_validity_response(data)
            if not entries:
                raise ValueError("No valid entries parsed from ClinGen API")

            logger.info("ClinGen: loaded %d validity curations", len(entries))
            await self._cache.set(_ENTRIES_KEY, entries)
            return entries

    async def check_gene(self, symbol: str) -> GeneValidity:
        return gene_validity(await self.fetch_entries(), symbol)

    async def refresh(self) -> None:
        """Drop the cached listing so the next lookup downloads it again."""
        await self._cache.clear()
