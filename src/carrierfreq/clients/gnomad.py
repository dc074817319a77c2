"""gnomAD GraphQL API client for gene-level variant and ClinVar data."""

from __future__ import annotations

import asyncio
import json
import logging
import math
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

import httpx

from ..constants import (
    API_CACHE_MAX_SIZE,
    API_CACHE_TTL_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_SUBMISSIONS_BATCH_SIZE,
    GNOMAD_API_URL,
    GNOMAD_MAX_CONCURRENT_REQUESTS,
)
from ..models import (
    ClinVarAnnotation,
    ClinVarSubmission,
    CohortTally,
    PopulationTally,
    TranscriptConsequence,
    Variant,
)
from ..populations import DatasetVersion
from .ttl_cache import MISSING, QueryCache

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]

# Population AF is not exposed by the API; it is derived from ac/an
GENE_VARIANTS_QUERY = """
query GeneVariants($geneSymbol: String!, $dataset: DatasetId!, $referenceGenome: ReferenceGenomeId!) {
  gene(gene_symbol: $geneSymbol, reference_genome: $referenceGenome) {
    gene_id
    symbol
    variants(dataset: $dataset) {
      variant_id
      pos
      ref
      alt
      exome {
        ac
        an
        populations {
          id
          ac
          an
        }
      }
      genome {
        ac
        an
        populations {
          id
          ac
          an
        }
      }
      transcript_consequence {
        gene_symbol
        transcript_id
        canonical
        consequence_terms
        lof
        lof_filter
        lof_flags
        hgvsc
        hgvsp
      }
    }
    clinvar_variants {
      variant_id
      clinical_significance
      gold_stars
      review_status
      pos
      ref
      alt
    }
  }
}
"""

GENE_SEARCH_QUERY = """
query GeneSearch($query: String!, $referenceGenome: ReferenceGenomeId!) {
  gene_search(query: $query, reference_genome: $referenceGenome) {
    ensembl_id
    symbol
  }
}
"""

GENE_CONSTRAINT_QUERY = """
query GeneConstraint($geneSymbol: String!, $referenceGenome: ReferenceGenomeId!) {
  gene(gene_symbol: $geneSymbol, reference_genome: $referenceGenome) {
    gene_id
    symbol
    gnomad_constraint {
      exp_lof
      obs_lof
      oe_lof
      oe_lof_lower
      oe_lof_upper
      pLI
      lof_z
      flags
    }
  }
}
"""


@dataclass
class GeneVariants:
    """All gnomAD variants and ClinVar annotations for one gene."""

    gene_id: str
    symbol: str
    variants: list[Variant]
    clinvar_variants: list[ClinVarAnnotation]


@dataclass
class GeneSearchResult:
    ensembl_id: str
    symbol: str


@dataclass
class GeneConstraint:
    """Loss-of-function constraint metrics from gnomAD."""

    pli: float | None = None
    loeuf: float | None = None  # upper bound of oe_lof
    oe_lof: float | None = None
    oe_lof_lower: float | None = None
    exp_lof: float | None = None
    obs_lof: int | None = None
    lof_z: float | None = None
    flags: list[str] = field(default_factory=list)


@dataclass
class GeneDetails:
    gene_id: str
    symbol: str
    constraint: GeneConstraint | None  # None when gnomAD has no constraint for the gene


@dataclass
class GnomadClient:
    """Async client for gnomAD GraphQL API queries.

    Features:
    - Bounded LRU cache with TTL for gene and search queries
    - Concurrency limiting via semaphore
    - Batched ClinVar submission lookups with progress reporting
    """

    dataset: str = "gnomad_r4"
    reference_genome: str = "GRCh38"
    api_url: str = GNOMAD_API_URL
    timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    submissions_batch_size: int = DEFAULT_SUBMISSIONS_BATCH_SIZE
    _cache: QueryCache = field(default=None, repr=False)  # type: ignore[assignment]
    _semaphore: asyncio.Semaphore = field(default=None, repr=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.submissions_batch_size < 1:
            raise ValueError(
                f"submissions_batch_size must be at least 1, got {self.submissions_batch_size}"
            )
        self._semaphore = asyncio.Semaphore(GNOMAD_MAX_CONCURRENT_REQUESTS)
        self._cache = QueryCache(maxsize=API_CACHE_MAX_SIZE, ttl=API_CACHE_TTL_SECONDS)

    @classmethod
    def for_dataset(cls, dataset: DatasetVersion, **kwargs) -> GnomadClient:
        return cls(
            dataset=dataset.dataset_id,
            reference_genome=dataset.reference_genome,
            **kwargs,
        )

    async def _post(self, query: str, variables: dict | None = None) -> dict:
        """POST a GraphQL document and return the decoded body.

        HTTP failures raise ``httpx.HTTPStatusError``/``httpx.RequestError``;
        GraphQL-level errors are left in the body for the caller to inspect.
        """
        payload: dict = {"query": query}
        if variables:
            payload["variables"] = variables

        async with self._semaphore:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self.api_url, json=payload)
                resp.raise_for_status()
                return resp.json()

    async def fetch_gene_variants(self, symbol: str) -> GeneVariants | None:
        """
        Fetch every variant in a gene with its ClinVar annotations.

        Args:
            symbol: Gene symbol (e.g., "CFTR"); matched case-insensitively.

        Returns:
            GeneVariants if the gene exists, None otherwise.
        """
        symbol = symbol.strip().upper()
        cache_key = ("gene", symbol, self.dataset, self.reference_genome)

        cached = await self._cache.get(cache_key, MISSING)
        if cached is not MISSING:
            logger.debug("gnomAD: cache hit for %s (%s)", symbol, self.dataset)
            return cached  # type: ignore[return-value]

        logger.debug("gnomAD: fetching variants for %s (%s)", symbol, self.dataset)
        data = await self._post(
            GENE_VARIANTS_QUERY,
            {
                "geneSymbol": symbol,
                "dataset": self.dataset,
                "referenceGenome": self.reference_genome,
            },
        )

        result = _parse_gene_response(data, symbol)
        if result is not None:
            logger.info(
                "gnomAD: loaded %s with %d variants and %d ClinVar annotations",
                result.symbol,
                len(result.variants),
                len(result.clinvar_variants),
            )
            await self._cache.set(cache_key, result)
        return result

    async def search_genes(self, query: str) -> list[GeneSearchResult]:
        """Search genes by symbol prefix or Ensembl id."""
        query = query.strip()
        if not query:
            return []

        cache_key = ("search", query.upper(), self.reference_genome)
        cached = await self._cache.get(cache_key, MISSING)
        if cached is not MISSING:
            return cached  # type: ignore[return-value]

        data = await self._post(
            GENE_SEARCH_QUERY,
            {"query": query, "referenceGenome": self.reference_genome},
        )
        if "errors" in data:
            logger.debug("gnomAD GraphQL errors: %s", data["errors"])
            return []

        results = [
            GeneSearchResult(ensembl_id=item.get("ensembl_id", ""), symbol=item.get("symbol", ""))
            for item in (data.get("data") or {}).get("gene_search") or []
        ]
        await self._cache.set(cache_key, results)
        return results

    async def fetch_gene_constraint(self, symbol: str) -> GeneDetails | None:
        """
        Fetch pLI/LOEUF constraint metrics for a gene.

        Returns:
            GeneDetails if the gene exists, None otherwise.
        """
        symbol = symbol.strip().upper()
        cache_key = ("constraint", symbol, self.reference_genome)

        cached = await self._cache.get(cache_key, MISSING)
        if cached is not MISSING:
            return cached  # type: ignore[return-value]

        data = await self._post(
            GENE_CONSTRAINT_QUERY,
            {"geneSymbol": symbol, "referenceGenome": self.reference_genome},
        )
        result = _parse_constraint_response(data, symbol)
        if result is not None:
            await self._cache.set(cache_key, result)
        return result

    async def fetch_submissions(
        self,
        variant_ids: Iterable[str],
        progress: ProgressCallback | None = None,
    ) -> dict[str, list[ClinVarSubmission]]:
        """
        Fetch individual ClinVar submissions for many variants.

        Variants are queried in batches of ``submissions_batch_size`` aliased
        fields per request. A batch answered with GraphQL errors is skipped.

        Args:
            variant_ids: gnomAD variant ids, typically the conflicting ones.
            progress: Called with the completed percentage after each batch.

        Returns:
            Submissions keyed by variant id; variants without data are absent.
        """
        ids = list(dict.fromkeys(variant_ids))
        if not ids:
            return {}

        size = self.submissions_batch_size
        batches = [ids[i : i + size] for i in range(0, len(ids), size)]
        submissions: dict[str, list[ClinVarSubmission]] = {}

        for done, batch in enumerate(batches, start=1):
            data = await self._post(build_submissions_query(batch, self.reference_genome))
            if "errors" in data:
                logger.warning(
                    "gnomAD: skipping submissions batch %d/%d: %s",
                    done,
                    len(batches),
                    data["errors"],
                )
            else:
                submissions.update(parse_submissions_response(data.get("data") or {}))

            if progress is not None:
                progress(math.floor(done / len(batches) * 100 + 0.5))

        logger.debug(
            "gnomAD: fetched submissions for %d of %d variants", len(submissions), len(ids)
        )
        return submissions


def build_submissions_query(variant_ids: list[str], reference_genome: str) -> str:
    """Build one GraphQL document with an aliased field per variant.

    Variant ids contain "-", which is not valid in a GraphQL alias, so fields
    are aliased by position (v0, v1, ...).
    """
    fields = "\n".join(
        f"  v{index}: clinvar_variant(variant_id: {json.dumps(variant_id)}, "
        f"reference_genome: {reference_genome}) {{\n"
        "    variant_id\n"
        "    submissions {\n"
        "      clinical_significance\n"
        "    }\n"
        "  }"
        for index, variant_id in enumerate(variant_ids)
    )
    return f"query ClinVarSubmissions {{\n{fields}\n}}"


def parse_submissions_response(data: dict) -> dict[str, list[ClinVarSubmission]]:
    """Map the aliased response fields back to variant ids."""
    result: dict[str, list[ClinVarSubmission]] = {}
    for value in data.values():
        if not value or not value.get("variant_id") or value.get("submissions") is None:
            continue
        result[value["variant_id"]] = [
            ClinVarSubmission(clinical_significance=sub.get("clinical_significance") or "")
            for sub in value["submissions"]
        ]
    return result


def _parse_cohort(data: dict | None) -> CohortTally | None:
    if not data:
        return None
    return CohortTally(
        ac=data.get("ac") or 0,
        an=data.get("an") or 0,
        populations=[
            PopulationTally(id=pop.get("id", ""), ac=pop.get("ac") or 0, an=pop.get("an") or 0)
            for pop in data.get("populations") or []
        ],
    )


def _parse_consequence(data: dict | None) -> TranscriptConsequence | None:
    if not data:
        return None
    return TranscriptConsequence(
        gene_symbol=data.get("gene_symbol"),
        transcript_id=data.get("transcript_id"),
        canonical=bool(data.get("canonical")),
        consequence_terms=list(data.get("consequence_terms") or []),
        lof=data.get("lof"),
        lof_filter=data.get("lof_filter"),
        lof_flags=data.get("lof_flags"),
        hgvsc=data.get("hgvsc"),
        hgvsp=data.get("hgvsp"),
    )


def _parse_variant(data: dict) -> Variant:
    return Variant(
        variant_id=data["variant_id"],
        pos=data.get("pos") or 0,
        ref=data.get("ref") or "",
        alt=data.get("alt") or "",
        exome=_parse_cohort(data.get("exome")),
        genome=_parse_cohort(data.get("genome")),
        transcript_consequence=_parse_consequence(data.get("transcript_consequence")),
    )


def _parse_clinvar(data: dict) -> ClinVarAnnotation:
    return ClinVarAnnotation(
        variant_id=data["variant_id"],
        clinical_significance=data.get("clinical_significance") or "",
        gold_stars=data.get("gold_stars") or 0,
        review_status=data.get("review_status") or "",
        pos=data.get("pos"),
        ref=data.get("ref"),
        alt=data.get("alt"),
    )


def _parse_gene_response(data: dict, symbol: str) -> GeneVariants | None:
    """Parse a gnomAD gene response into GeneVariants."""
    if "errors" in data:
        logger.debug("gnomAD GraphQL errors: %s", data["errors"])
        return None

    gene = (data.get("data") or {}).get("gene")
    if not gene:
        logger.debug("gnomAD: gene not found for %s", symbol)
        return None

    return GeneVariants(
        gene_id=gene.get("gene_id", ""),
        symbol=gene.get("symbol", symbol),
        variants=[_parse_variant(v) for v in gene.get("variants") or []],
        clinvar_variants=[_parse_clinvar(c) for c in gene.get("clinvar_variants") or []],
    )


def _parse_constraint_response(data: dict, symbol: str) -> GeneDetails | None:
    if "errors" in data:
        logger.debug("gnomAD GraphQL errors: %s", data["errors"])
        return None

    gene = (data.get("data") or {}).get("gene")
    if not gene:
        logger.debug("gnomAD: gene not found for %s", symbol)
        return None

    raw = gene.get("gnomad_constraint")
    constraint = None
    if raw:
        constraint = GeneConstraint(
            pli=raw.get("pLI"),
            loeuf=raw.get("oe_lof_upper"),
            oe_lof=raw.get("oe_lof"),
            oe_lof_lower=raw.get("oe_lof_lower"),
            exp_lof=raw.get("exp_lof"),
            obs_lof=raw.get("obs_lof"),
            lof_z=raw.get("lof_z"),
            flags=list(raw.get("flags") or []),
        )

    return GeneDetails(
        gene_id=gene.get("gene_id", ""),
        symbol=gene.get("symbol", symbol),
        constraint=constraint,
    )
