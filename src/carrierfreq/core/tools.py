"""MCP tool handlers for carrierfreq."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict, dataclass
from typing import Any

import httpx

from ..analysis.classifier import conflicting_variant_ids, filter_pathogenic_variants
from ..analysis.constraint import interpret_loeuf, interpret_pli
from ..analysis.exclusions import ExclusionSet, parse_reason
from ..analysis.frequency import calculate_carrier_frequencies
from ..analysis.report import (
    DEFAULT_ENABLED_SECTIONS,
    SECTION_ORDER,
    build_template_context,
    generate_report,
)
from ..analysis.risk import calculate_recurrence_risk, format_carrier_frequency
from ..clients.clingen import ClinGenClient
from ..clients.gnomad import GnomadClient
from ..config import CarrierFreqConfig
from ..constants import GENE_FETCH_TIMEOUT_SECONDS
from ..models import AggregateResult, FilterConfig, IndexStatus
from ..populations import DATASET_VERSIONS, DatasetVersion, get_dataset_version
from .validation import (
    FREQUENCY_SOURCES,
    LANGUAGES,
    PATIENT_SEXES,
    PERSPECTIVES,
    build_filter_config,
    validate_carrier_frequency,
    validate_choice,
    validate_exclusion_reasons,
    validate_gene_symbol,
    validate_index_status,
    validate_search_query,
    validate_variant_ids,
    validate_version,
)

logger = logging.getLogger(__name__)

# Module-level singletons, one client per gnomAD version, for cache reuse
_gnomad_clients: dict[str, GnomadClient] = {}
_clingen_client: ClinGenClient | None = None

_DISCLAIMER = (
    "Note: Carrier frequencies are estimated from gnomAD population data and ClinVar "
    "classifications. This is research-grade information and is not intended for "
    "clinical diagnostic use without review by a qualified professional."
)


def get_gnomad_client(config: CarrierFreqConfig, version: str | None = None) -> GnomadClient:
    """Get or create the singleton gnomAD client for a dataset version."""
    dataset = get_dataset_version(version or config.gnomad_version)
    client = _gnomad_clients.get(dataset.version)
    if client is None:
        client = GnomadClient.for_dataset(
            dataset,
            api_url=config.api_url,
            timeout=config.request_timeout,
            submissions_batch_size=config.submissions_batch_size,
        )
        _gnomad_clients[dataset.version] = client
    return client


def get_clingen_client(config: CarrierFreqConfig) -> ClinGenClient:
    """Get or create the singleton ClinGen client."""
    global _clingen_client
    if _clingen_client is None:
        _clingen_client = ClinGenClient(
            api_url=config.clingen_api_url, timeout=config.request_timeout
        )
    return _clingen_client


def _text_result(payload: dict) -> dict:
    payload["disclaimer"] = _DISCLAIMER
    return {"content": [{"type": "text", "text": json.dumps(payload)}]}


def _error_result(message: str) -> dict:
    return _text_result({"error": message})


@dataclass
class GeneCalculation:
    """Outcome of the fetch/filter/aggregate pipeline for one gene."""

    result: AggregateResult
    dataset: DatasetVersion
    filters: FilterConfig
    total_variants: int
    clinvar_annotations: int
    conflicting_variants: int
    resolved_submissions: int
    exclusions: ExclusionSet


async def calculate_gene(
    gene: str,
    dataset: DatasetVersion,
    filters: FilterConfig,
    exclusions: ExclusionSet,
    config: CarrierFreqConfig,
) -> GeneCalculation | None:
    """Fetch a gene from gnomAD and compute its carrier frequency.

    Submissions are only requested when conflicting classifications are
    included. Returns None if gnomAD does not know the gene; network errors
    propagate to the caller.
    """
    client = get_gnomad_client(config, dataset.version)
    gene_data = await client.fetch_gene_variants(gene)
    if gene_data is None:
        return None

    conflicting = conflicting_variant_ids(gene_data.clinvar_variants)
    submissions = {}
    if filters.clinvar_enabled and filters.include_conflicting and conflicting:
        logger.info(
            "Fetching ClinVar submissions for %d conflicting variants in %s",
            len(conflicting),
            gene_data.symbol,
        )
        submissions = await client.fetch_submissions(conflicting)

    qualifying = filter_pathogenic_variants(
        gene_data.variants,
        gene_data.clinvar_variants,
        filters,
        submissions,
        excluded=exclusions,
    )
    logger.debug(
        "%s: %d of %d variants qualify (%s)",
        gene_data.symbol,
        len(qualifying),
        len(gene_data.variants),
        filters.describe(),
    )

    result = calculate_carrier_frequencies(
        gene_data.symbol,
        qualifying,
        dataset,
        default_carrier_frequency=config.default_carrier_frequency,
        founder_multiplier=config.founder_effect_multiplier,
        low_sample_threshold=config.low_sample_size_threshold,
    )
    return GeneCalculation(
        result=result,
        dataset=dataset,
        filters=filters,
        total_variants=len(gene_data.variants),
        clinvar_annotations=len(gene_data.clinvar_variants),
        conflicting_variants=len(conflicting),
        resolved_submissions=len(submissions),
        exclusions=exclusions,
    )


def serialize_calculation(calc: GeneCalculation, decimals: int) -> dict:
    """Convert a calculation into a JSON-serializable payload with display strings."""
    result = calc.result
    populations = []
    for pop in result.populations:
        entry = asdict(pop)
        entry.update(format_carrier_frequency(pop.carrier_frequency, decimals))
        populations.append(entry)

    return {
        "gene": result.gene,
        "gnomad_version": calc.dataset.display_name,
        "dataset": calc.dataset.dataset_id,
        "reference_genome": calc.dataset.reference_genome,
        "carrier_frequency": result.global_carrier_frequency,
        "carrier_frequency_display": format_carrier_frequency(
            result.global_carrier_frequency, decimals
        ),
        "using_default": result.using_default,
        "allele_count": result.global_allele_count,
        "allele_number": result.global_allele_number,
        "qualifying_variants": result.qualifying_variant_count,
        "total_variants": calc.total_variants,
        "clinvar_annotations": calc.clinvar_annotations,
        "conflicting_variants": calc.conflicting_variants,
        "resolved_submissions": calc.resolved_submissions,
        "excluded_variants": len(calc.exclusions),
        "exclusions": calc.exclusions.summary(),
        "filters": {**asdict(calc.filters), "summary": calc.filters.describe()},
        "min_frequency": result.min_frequency,
        "max_frequency": result.max_frequency,
        "has_founder_effect": result.has_founder_effect,
        "populations": populations,
    }


def _validate_gene_args(args: dict[str, Any], config: CarrierFreqConfig) -> str | None:
    excluded = list(args.get("excluded_variants") or [])
    return (
        validate_gene_symbol(args.get("gene", ""))
        or validate_version(args.get("version", config.gnomad_version))
        or validate_variant_ids(excluded)
        or validate_exclusion_reasons(args.get("exclusion_reasons"), excluded)
    )


async def _run_calculation(
    args: dict[str, Any], config: CarrierFreqConfig
) -> GeneCalculation | dict | None:
    """Run the gnomAD pipeline for tool arguments.

    Returns the calculation, None if the gene is unknown, or an error result.
    """
    gene = args["gene"].strip()
    dataset = get_dataset_version(args.get("version", config.gnomad_version))
    filters = build_filter_config(args)
    exclusions = ExclusionSet(gene=gene.upper())
    exclusions.exclude_all(args.get("excluded_variants") or [])
    for variant_id, text in (args.get("exclusion_reasons") or {}).items():
        exclusions.set_reason(variant_id, parse_reason(text))

    try:
        return await asyncio.wait_for(
            calculate_gene(gene, dataset, filters, exclusions, config),
            timeout=GENE_FETCH_TIMEOUT_SECONDS,
        )
    except (httpx.HTTPStatusError, httpx.RequestError, ConnectionError, OSError) as e:
        # Network and HTTP errors - expected failures
        logger.warning("gnomAD request failed for %s: %s", gene, e)
        return _error_result("gnomAD request failed")
    except asyncio.TimeoutError:
        logger.warning("gnomAD request timed out for %s", gene)
        return _error_result("gnomAD request timed out")


async def handle_calculate_carrier_frequency(args: dict[str, Any], config: CarrierFreqConfig) -> dict:
    """Estimate the carrier frequency of a gene from gnomAD and ClinVar.

    Optionally adds the recurrence risk when ``index_status`` is given.
    """
    validation_error = _validate_gene_args(args, config)
    index_status = args.get("index_status")
    if not validation_error and index_status is not None:
        validation_error = validate_index_status(index_status)
    if validation_error:
        return _error_result(validation_error)

    calc = await _run_calculation(args, config)
    if isinstance(calc, dict):
        return calc
    if calc is None:
        return _text_result(
            {"found": False, "message": f"Gene {args['gene']} not found in gnomAD"}
        )

    decimals = config.frequency_decimal_places
    payload = serialize_calculation(calc, decimals)
    if index_status is not None:
        carrier_frequency = calc.result.global_carrier_frequency
        if carrier_frequency is None:
            payload["recurrence_risk"] = None
            payload["recurrence_risk_message"] = (
                "Recurrence risk unavailable: no carrier frequency could be estimated "
                "because every qualifying variant has allele count 0"
            )
        else:
            payload["recurrence_risk"] = asdict(
                calculate_recurrence_risk(carrier_frequency, index_status, decimals)
            )
    return _text_result(payload)


async def handle_calculate_recurrence_risk(args: dict[str, Any], config: CarrierFreqConfig) -> dict:
    """Recurrence risk for a given carrier frequency and index patient status."""
    carrier_frequency = args.get("carrier_frequency")
    index_status = args.get("index_status", IndexStatus.HETEROZYGOUS.value)

    validation_error = validate_carrier_frequency(carrier_frequency) or validate_index_status(
        index_status
    )
    if validation_error:
        return _error_result(validation_error)

    decimals = config.frequency_decimal_places
    risk = calculate_recurrence_risk(float(carrier_frequency), index_status, decimals)
    payload = asdict(risk)
    payload["carrier_frequency_display"] = format_carrier_frequency(risk.carrier_frequency, decimals)
    return _text_result(payload)


async def handle_generate_counseling_text(args: dict[str, Any], config: CarrierFreqConfig) -> dict:
    """Generate clinician-facing counseling text for a gene.

    The carrier frequency comes from gnomAD (default), a literature value with
    PMID, or the configured default assumption.
    """
    index_status = args.get("index_status", IndexStatus.HETEROZYGOUS.value)
    default_perspective = (
        "affected" if index_status in {s.value for s in IndexStatus if s.is_affected} else "carrier"
    )
    perspective = args.get("perspective", default_perspective)
    language = args.get("language", "en")
    source = args.get("frequency_source", "gnomad")
    sections = args.get("sections")
    patient_sex = args.get("patient_sex", "male")

    validation_error = (
        _validate_gene_args(args, config)
        or validate_index_status(index_status)
        or validate_choice("perspective", perspective, PERSPECTIVES)
        or validate_choice("language", language, LANGUAGES)
        or validate_choice("frequency source", source, FREQUENCY_SOURCES)
        or validate_choice("patient sex", patient_sex, PATIENT_SEXES)
    )
    if not validation_error and sections is not None:
        unknown = [s for s in sections if s not in SECTION_ORDER]
        if unknown:
            validation_error = f"Unknown sections: {unknown}. Expected any of {list(SECTION_ORDER)}"
    if not validation_error and source == "literature":
        if not args.get("literature_pmid"):
            validation_error = "literature_pmid is required for a literature frequency"
        else:
            validation_error = validate_carrier_frequency(args.get("literature_frequency"))
    if validation_error:
        return _error_result(validation_error)

    gene = args["gene"].strip().upper()
    dataset = get_dataset_version(args.get("version", config.gnomad_version))

    if source == "gnomad":
        calc = await _run_calculation(args, config)
        if isinstance(calc, dict):
            return calc
        if calc is None:
            return _text_result({"found": False, "message": f"Gene {gene} not found in gnomAD"})
        result = calc.result
    else:
        # No gnomAD data needed; an empty result carries gene and version
        result = calculate_carrier_frequencies(
            gene, [], dataset, default_carrier_frequency=config.default_carrier_frequency
        )

    context = build_template_context(
        result,
        dataset,
        index_status=index_status,
        frequency_source=source,
        literature_frequency=args.get("literature_frequency"),
        literature_pmid=args.get("literature_pmid"),
        default_carrier_frequency=config.default_carrier_frequency,
        language=language,
        patient_sex=patient_sex,
        decimals=config.frequency_decimal_places,
    )
    if context is None:
        return _error_result(f"No carrier frequency available for {gene}")

    text = generate_report(
        context,
        perspective,
        language,
        sections=sections if sections is not None else DEFAULT_ENABLED_SECTIONS,
    )
    return _text_result(
        {
            "gene": result.gene,
            "perspective": perspective,
            "language": language,
            "frequency_source": source,
            "text": text,
        }
    )


async def handle_search_genes(args: dict[str, Any], config: CarrierFreqConfig) -> dict:
    """Search gnomAD genes by symbol or Ensembl id."""
    query = args.get("query", "")
    version = args.get("version", config.gnomad_version)

    validation_error = validate_search_query(query) or validate_version(version)
    if validation_error:
        return _error_result(validation_error)

    client = get_gnomad_client(config, version)
    try:
        results = await client.search_genes(query)
    except (httpx.HTTPStatusError, httpx.RequestError, ConnectionError, OSError) as e:
        logger.warning("gnomAD gene search failed for %r: %s", query, e)
        return _error_result("gnomAD gene search failed")

    return _text_result({"query": query, "results": [asdict(r) for r in results]})


async def handle_check_gene_validity(args: dict[str, Any], config: CarrierFreqConfig) -> dict:
    """Look up ClinGen gene-disease validity curations for a gene.

    Flags whether any curation has an autosomal recessive mode of inheritance.
    """
    gene = args.get("gene", "")
    validation_error = validate_gene_symbol(gene)
    if validation_error:
        return _error_result(validation_error)

    client = get_clingen_client(config)
    try:
        if args.get("refresh"):
            await client.refresh()
        validity = await client.check_gene(gene)
    except (httpx.HTTPStatusError, httpx.RequestError, ConnectionError, OSError, ValueError) as e:
        logger.warning("ClinGen request failed for %s: %s", gene, e)
        return _error_result("ClinGen request failed")

    payload = asdict(validity)
    if not validity.found:
        payload["message"] = f"No ClinGen gene-disease validity curation for {validity.gene}"
    elif not validity.has_autosomal_recessive:
        payload["message"] = (
            f"{validity.gene} has no autosomal recessive curation in ClinGen; "
            "a carrier frequency may not be meaningful"
        )
    return _text_result(payload)


async def handle_get_gene_constraint(args: dict[str, Any], config: CarrierFreqConfig) -> dict:
    """gnomAD loss-of-function constraint (pLI, LOEUF) for a gene."""
    gene = args.get("gene", "")
    version = args.get("version", config.gnomad_version)

    validation_error = validate_gene_symbol(gene) or validate_version(version)
    if validation_error:
        return _error_result(validation_error)

    dataset = get_dataset_version(version)
    client = get_gnomad_client(config, dataset.version)
    try:
        details = await client.fetch_gene_constraint(gene)
    except (httpx.HTTPStatusError, httpx.RequestError, ConnectionError, OSError) as e:
        logger.warning("gnomAD constraint request failed for %s: %s", gene, e)
        return _error_result("gnomAD request failed")

    if details is None:
        return _text_result(
            {"found": False, "message": f"Gene {gene.strip().upper()} not found in gnomAD"}
        )

    constraint = details.constraint
    loeuf = interpret_loeuf(constraint.loeuf if constraint else None, dataset.version)
    pli = interpret_pli(constraint.pli if constraint else None)
    return _text_result(
        {
            "found": True,
            "gene": details.symbol,
            "gene_id": details.gene_id,
            "gnomad_version": dataset.display_name,
            "constraint": asdict(constraint) if constraint else None,
            "loeuf_interpretation": {"level": loeuf.level.value, "label": loeuf.label},
            "pli_interpretation": {"level": pli.level.value, "label": pli.label},
        }
    )


async def handle_list_populations(args: dict[str, Any], config: CarrierFreqConfig) -> dict:
    """List supported gnomAD versions with their population groups."""
    version = args.get("version")
    validation_error = validate_version(version)
    if validation_error:
        return _error_result(validation_error)

    datasets = [get_dataset_version(version)] if version else list(DATASET_VERSIONS.values())
    return _text_result(
        {
            "default_version": config.gnomad_version,
            "versions": [
                {
                    "version": d.version,
                    "display_name": d.display_name,
                    "dataset": d.dataset_id,
                    "reference_genome": d.reference_genome,
                    "populations": [{"code": p.code, "label": p.label} for p in d.populations],
                }
                for d in datasets
            ],
        }
    )


def get_filter_defaults(config: CarrierFreqConfig) -> str:
    """JSON description of factory filter defaults and calculation settings."""
    defaults = FilterConfig()
    return json.dumps(
        {
            "filters": {**asdict(defaults), "summary": defaults.describe()},
            "founder_effect_multiplier": config.founder_effect_multiplier,
            "low_sample_size_threshold": config.low_sample_size_threshold,
            "default_carrier_frequency": config.default_carrier_frequency,
            "gnomad_version": config.gnomad_version,
        }
    )
