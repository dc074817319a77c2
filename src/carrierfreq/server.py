"""MCP server setup for carrierfreq using FastMCP."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from .config import CarrierFreqConfig
from .core.tools import (
    get_filter_defaults,
    handle_calculate_carrier_frequency,
    handle_calculate_recurrence_risk,
    handle_check_gene_validity,
    handle_generate_counseling_text,
    handle_get_gene_constraint,
    handle_list_populations,
    handle_search_genes,
)

FILTERS_RESOURCE_URI = "config://carrierfreq/filters"


def create_server(config: CarrierFreqConfig | None = None) -> FastMCP:
    """Create and configure the carrierfreq MCP server."""
    if config is None:
        config = CarrierFreqConfig.from_env()

    mcp = FastMCP(name="carrierfreq", host=config.host, port=config.port)

    # -- Tools ---------------------------------------------------------------
    # Thin wrappers delegate to the handlers in core/tools.py.
    # FastMCP derives the JSON-Schema from the function signature.

    @mcp.tool(
        description=(
            "Estimate the carrier frequency of an autosomal recessive gene from gnomAD "
            "allele counts, counting high-confidence LoF variants and ClinVar "
            "pathogenic/likely pathogenic variants. Reports global and per-population "
            "frequencies and flags founder effects and small sample sizes."
        ),
    )
    async def calculate_carrier_frequency(
        gene: str,
        version: str | None = None,
        lof_hc_enabled: bool = True,
        missense_enabled: bool = True,
        clinvar_enabled: bool = True,
        clinvar_star_threshold: int = 1,
        include_conflicting: bool = False,
        conflicting_threshold: float = 80,
        excluded_variants: list[str] | None = None,
        exclusion_reasons: dict[str, str] | None = None,
        index_status: str | None = None,
    ) -> str:
        args: dict = {
            "gene": gene,
            "lof_hc_enabled": lof_hc_enabled,
            "missense_enabled": missense_enabled,
            "clinvar_enabled": clinvar_enabled,
            "clinvar_star_threshold": clinvar_star_threshold,
            "include_conflicting": include_conflicting,
            "conflicting_threshold": conflicting_threshold,
        }
        if version is not None:
            args["version"] = version
        if excluded_variants:
            args["excluded_variants"] = excluded_variants
        if exclusion_reasons:
            args["exclusion_reasons"] = exclusion_reasons
        if index_status is not None:
            args["index_status"] = index_status
        result = await handle_calculate_carrier_frequency(args, config)
        return str(result["content"][0]["text"])

    @mcp.tool(
        description=(
            "Calculate the risk of an affected child given a partner carrier frequency. "
            "index_status: heterozygous, homozygous, compound_het_confirmed, "
            "compound_het_assumed."
        ),
    )
    async def calculate_recurrence_risk(
        carrier_frequency: float,
        index_status: str = "heterozygous",
    ) -> str:
        args: dict = {"carrier_frequency": carrier_frequency, "index_status": index_status}
        result = await handle_calculate_recurrence_risk(args, config)
        return str(result["content"][0]["text"])

    @mcp.tool(
        description=(
            "Generate clinician-facing counseling text (English or German) with carrier "
            "frequency and recurrence risk for a gene. frequency_source: gnomad, "
            "literature (needs literature_frequency and literature_pmid) or default."
        ),
    )
    async def generate_counseling_text(
        gene: str,
        index_status: str = "heterozygous",
        perspective: str | None = None,
        language: str = "en",
        frequency_source: str = "gnomad",
        literature_frequency: float | None = None,
        literature_pmid: str | None = None,
        sections: list[str] | None = None,
        version: str | None = None,
        lof_hc_enabled: bool = True,
        missense_enabled: bool = True,
        clinvar_enabled: bool = True,
        clinvar_star_threshold: int = 1,
        include_conflicting: bool = False,
        conflicting_threshold: float = 80,
        excluded_variants: list[str] | None = None,
        exclusion_reasons: dict[str, str] | None = None,
        patient_sex: str = "male",
    ) -> str:
        args: dict = {
            "gene": gene,
            "index_status": index_status,
            "language": language,
            "frequency_source": frequency_source,
            "lof_hc_enabled": lof_hc_enabled,
            "missense_enabled": missense_enabled,
            "clinvar_enabled": clinvar_enabled,
            "clinvar_star_threshold": clinvar_star_threshold,
            "include_conflicting": include_conflicting,
            "conflicting_threshold": conflicting_threshold,
            "patient_sex": patient_sex,
        }
        if perspective is not None:
            args["perspective"] = perspective
        if literature_frequency is not None:
            args["literature_frequency"] = literature_frequency
        if literature_pmid is not None:
            args["literature_pmid"] = literature_pmid
        if sections is not None:
            args["sections"] = sections
        if version is not None:
            args["version"] = version
        if excluded_variants:
            args["excluded_variants"] = excluded_variants
        if exclusion_reasons:
            args["exclusion_reasons"] = exclusion_reasons
        result = await handle_generate_counseling_text(args, config)
        return str(result["content"][0]["text"])

    @mcp.tool(description="Search gnomAD genes by symbol or Ensembl gene id")
    async def search_genes(query: str, version: str | None = None) -> str:
        args: dict = {"query": query}
        if version is not None:
            args["version"] = version
        result = await handle_search_genes(args, config)
        return str(result["content"][0]["text"])

    @mcp.tool(
        description=(
            "Check ClinGen gene-disease validity curations for a gene and whether any "
            "has an autosomal recessive mode of inheritance. The ClinGen listing is "
            "cached for 30 days; refresh=true downloads it again."
        ),
    )
    async def check_gene_validity(gene: str, refresh: bool = False) -> str:
        result = await handle_check_gene_validity({"gene": gene, "refresh": refresh}, config)
        return str(result["content"][0]["text"])

    @mcp.tool(
        description=(
            "Get gnomAD loss-of-function constraint (pLI, LOEUF) for a gene with an "
            "interpretation using the thresholds of the gnomAD version"
        ),
    )
    async def get_gene_constraint(gene: str, version: str | None = None) -> str:
        args: dict = {"gene": gene}
        if version is not None:
            args["version"] = version
        result = await handle_get_gene_constraint(args, config)
        return str(result["content"][0]["text"])

    @mcp.tool(description="List supported gnomAD versions and their population groups")
    async def list_populations(version: str | None = None) -> str:
        args: dict = {}
        if version is not None:
            args["version"] = version
        result = await handle_list_populations(args, config)
        return str(result["content"][0]["text"])

    # -- Resources -----------------------------------------------------------

    @mcp.resource(
        FILTERS_RESOURCE_URI,
        name="Carrier frequency filter defaults",
        description="Factory filter settings and calculation thresholds",
        mime_type="application/json",
    )
    def filter_defaults() -> str:
        return get_filter_defaults(config)

    return mcp
