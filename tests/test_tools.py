"""Unit tests for carrierfreq.core.tools handlers."""

import json

import httpx
import pytest

from carrierfreq.config import CarrierFreqConfig
from carrierfreq.constants import CLINGEN_API_URL, GNOMAD_API_URL
from carrierfreq.core.tools import (
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

LOF_ID = "7-117500000-G-A"
CONFLICTING_ID = "7-117600000-C-T"

GENE_RESPONSE = {
    "data": {
        "gene": {
            "gene_id": "ENSG00000001626",
            "symbol": "CFTR",
            "variants": [
                {
                    "variant_id": LOF_ID,
                    "pos": 117500000,
                    "ref": "G",
                    "alt": "A",
                    "exome": {
                        "ac": 20,
                        "an": 10000,
                        "populations": [
                            {"id": "nfe", "ac": 10, "an": 5000},
                            {"id": "asj", "ac": 10, "an": 500},
                        ],
                    },
                    "genome": None,
                    "transcript_consequence": {
                        "canonical": True,
                        "consequence_terms": ["stop_gained"],
                        "lof": "HC",
                    },
                },
                {
                    "variant_id": CONFLICTING_ID,
                    "pos": 117600000,
                    "ref": "C",
                    "alt": "T",
                    "exome": {
                        "ac": 10,
                        "an": 10000,
                        "populations": [{"id": "nfe", "ac": 10, "an": 5000}],
                    },
                    "genome": None,
                    "transcript_consequence": {
                        "canonical": True,
                        "consequence_terms": ["missense_variant"],
                        "lof": None,
                    },
                },
            ],
            "clinvar_variants": [
                {
                    "variant_id": CONFLICTING_ID,
                    "clinical_significance": "Conflicting classifications of pathogenicity",
                    "gold_stars": 1,
                    "review_status": "criteria provided, conflicting classifications",
                }
            ],
        }
    }
}

SUBMISSIONS_RESPONSE = {
    "data": {
        "v0": {
            "variant_id": CONFLICTING_ID,
            "submissions": [{"clinical_significance": "Pathogenic"}] * 5,
        }
    }
}


def _gene_response(*variants, clinvar_variants=()):
    return {
        "data": {
            "gene": {
                "gene_id": "ENSG00000001626",
                "symbol": "CFTR",
                "variants": list(variants),
                "clinvar_variants": list(clinvar_variants),
            }
        }
    }


def _exome_variant(variant_id, ac, an, consequence, lof=None):
    return {
        "variant_id": variant_id,
        "pos": int(variant_id.split("-")[1]),
        "ref": variant_id.split("-")[2],
        "alt": variant_id.split("-")[3],
        "exome": {"ac": ac, "an": an, "populations": []},
        "genome": None,
        "transcript_consequence": {
            "canonical": True,
            "consequence_terms": [consequence],
            "lof": lof,
        },
    }


# LoF HC (ac 20) plus a one-star pathogenic missense (ac 10)
ONE_STAR_RESPONSE = _gene_response(
    _exome_variant(LOF_ID, 20, 10000, "stop_gained", lof="HC"),
    _exome_variant(CONFLICTING_ID, 10, 10000, "missense_variant"),
    clinvar_variants=[
        {
            "variant_id": CONFLICTING_ID,
            "clinical_significance": "Pathogenic",
            "gold_stars": 1,
            "review_status": "criteria provided, single submitter",
        }
    ],
)


def _payload(result: dict) -> dict:
    return json.loads(result["content"][0]["text"])


@pytest.fixture
def config():
    return CarrierFreqConfig()


class TestGetGnomadClient:
    @pytest.mark.unit
    def test_singleton_per_version(self, config):
        assert get_gnomad_client(config) is get_gnomad_client(config, "v4")
        v2 = get_gnomad_client(config, "v2")
        assert v2 is not get_gnomad_client(config)
        assert v2.reference_genome == "GRCh37"

    @pytest.mark.unit
    def test_uses_config(self):
        config = CarrierFreqConfig(request_timeout=5.0, submissions_batch_size=10)
        client = get_gnomad_client(config)
        assert client.timeout == 5.0
        assert client.submissions_batch_size == 10


class TestCalculateCarrierFrequency:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_gene(self, config):
        payload = _payload(await handle_calculate_carrier_frequency({"gene": "CF TR"}, config))
        assert "Invalid gene symbol" in payload["error"]
        assert "disclaimer" in payload

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_index_status(self, config):
        args = {"gene": "CFTR", "index_status": "carrier"}
        payload = _payload(await handle_calculate_carrier_frequency(args, config))
        assert "Invalid index status" in payload["error"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_lof_only_by_default(self, config, httpx_mock):
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, json=GENE_RESPONSE)

        payload = _payload(await handle_calculate_carrier_frequency({"gene": "cftr"}, config))

        assert payload["gene"] == "CFTR"
        assert payload["carrier_frequency"] == pytest.approx(0.004)
        assert payload["carrier_frequency_display"] == {"percent": "0.40%", "ratio": "1:250"}
        assert payload["using_default"] is False
        assert payload["qualifying_variants"] == 1
        assert payload["total_variants"] == 2
        assert payload["conflicting_variants"] == 1
        assert payload["resolved_submissions"] == 0
        assert payload["populations"][0]["code"] == "asj"
        assert payload["populations"][0]["is_founder_effect"] is True
        assert payload["filters"]["summary"] == "LoF HC, Missense, ClinVar >= 1 star"
        assert len(httpx_mock.get_requests()) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_conflicting_resolved_from_submissions(self, config, httpx_mock):
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, json=GENE_RESPONSE)
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, json=SUBMISSIONS_RESPONSE)

        args = {"gene": "CFTR", "include_conflicting": True, "conflicting_threshold": 80}
        payload = _payload(await handle_calculate_carrier_frequency(args, config))

        assert payload["qualifying_variants"] == 2
        assert payload["resolved_submissions"] == 1
        assert payload["carrier_frequency"] == pytest.approx(0.006)
        assert len(httpx_mock.get_requests()) == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_excluded_variants_fall_back_to_default(self, config, httpx_mock):
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, json=GENE_RESPONSE)

        args = {"gene": "CFTR", "excluded_variants": [LOF_ID]}
        payload = _payload(await handle_calculate_carrier_frequency(args, config))

        assert payload["qualifying_variants"] == 0
        assert payload["excluded_variants"] == 1
        assert payload["using_default"] is True
        assert payload["carrier_frequency"] == config.default_carrier_frequency
        assert payload["populations"] == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_with_recurrence_risk(self, config, httpx_mock):
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, json=GENE_RESPONSE)

        args = {"gene": "CFTR", "index_status": "heterozygous"}
        payload = _payload(await handle_calculate_carrier_frequency(args, config))

        assert payload["recurrence_risk"]["index_status"] == "heterozygous"
        assert payload["recurrence_risk"]["ratio"] == "1:1000"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_recurrence_risk_null_without_frequency(self, config, httpx_mock):
        """A qualifying variant with allele count 0 leaves no frequency to work with."""
        httpx_mock.add_response(
            method="POST",
            url=GNOMAD_API_URL,
            json=_gene_response(_exome_variant(LOF_ID, 0, 10000, "stop_gained", lof="HC")),
        )

        args = {"gene": "CFTR", "index_status": "homozygous"}
        payload = _payload(await handle_calculate_carrier_frequency(args, config))

        assert payload["qualifying_variants"] == 1
        assert payload["using_default"] is False
        assert payload["carrier_frequency"] is None
        assert "recurrence_risk" in payload
        assert payload["recurrence_risk"] is None
        assert "allele count 0" in payload["recurrence_risk_message"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_recurrence_risk_without_index_status(self, config, httpx_mock):
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, json=GENE_RESPONSE)

        payload = _payload(await handle_calculate_carrier_frequency({"gene": "CFTR"}, config))
        assert "recurrence_risk" not in payload

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_exclusion_reasons_reported(self, config, httpx_mock):
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, json=ONE_STAR_RESPONSE)

        args = {
            "gene": "CFTR",
            "excluded_variants": [LOF_ID, CONFLICTING_ID],
            "exclusion_reasons": {
                LOF_ID: "population_specific",
                CONFLICTING_ID: "Reclassified as VUS",
            },
        }
        payload = _payload(await handle_calculate_carrier_frequency(args, config))

        assert payload["excluded_variants"] == 2
        assert payload["exclusions"] == [
            {"variant_id": LOF_ID, "reason": "Population-specific"},
            {"variant_id": CONFLICTING_ID, "reason": "Reclassified as VUS"},
        ]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_exclusion_without_reason(self, config, httpx_mock):
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, json=GENE_RESPONSE)

        args = {"gene": "CFTR", "excluded_variants": [CONFLICTING_ID]}
        payload = _payload(await handle_calculate_carrier_frequency(args, config))
        assert payload["exclusions"] == [{"variant_id": CONFLICTING_ID, "reason": None}]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reason_for_variant_not_excluded(self, config):
        args = {"gene": "CFTR", "exclusion_reasons": {LOF_ID: "low_quality"}}
        payload = _payload(await handle_calculate_carrier_frequency(args, config))
        assert "not excluded" in payload["error"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_gene_not_found(self, config, httpx_mock):
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, json={"data": {"gene": None}})

        payload = _payload(await handle_calculate_carrier_frequency({"gene": "NOPE1"}, config))
        assert payload["found"] is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_http_error(self, config, httpx_mock):
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, status_code=503)

        payload = _payload(await handle_calculate_carrier_frequency({"gene": "CFTR"}, config))
        assert payload["error"] == "gnomAD request failed"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_network_timeout(self, config, httpx_mock):
        httpx_mock.add_exception(httpx.ConnectTimeout("timed out"), url=GNOMAD_API_URL)

        payload = _payload(await handle_calculate_carrier_frequency({"gene": "CFTR"}, config))
        assert payload["error"] == "gnomAD request failed"


class TestCalculateRecurrenceRisk:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_heterozygous(self, config):
        args = {"carrier_frequency": 0.04, "index_status": "heterozygous"}
        payload = _payload(await handle_calculate_recurrence_risk(args, config))
        assert payload["recurrence_risk"] == pytest.approx(0.01)
        assert payload["ratio"] == "1:100"
        assert payload["percent"] == "1.00%"
        assert payload["carrier_frequency_display"]["ratio"] == "1:25"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_homozygous(self, config):
        args = {"carrier_frequency": 0.04, "index_status": "homozygous"}
        payload = _payload(await handle_calculate_recurrence_risk(args, config))
        assert payload["ratio"] == "1:50"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_frequency(self, config):
        payload = _payload(await handle_calculate_recurrence_risk({"carrier_frequency": 2}, config))
        assert "error" in payload


class TestGenerateCounselingText:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_literature_source_skips_gnomad(self, config):
        args = {
            "gene": "hexa",
            "frequency_source": "literature",
            "literature_frequency": 0.04,
            "literature_pmid": "12345678",
        }
        payload = _payload(await handle_generate_counseling_text(args, config))

        assert payload["gene"] == "HEXA"
        assert payload["perspective"] == "carrier"
        assert "4.00% (1:25) (PMID: 12345678)" in payload["text"]
        assert "1.00% (1:100)" in payload["text"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_literature_requires_pmid(self, config):
        args = {"gene": "HEXA", "frequency_source": "literature", "literature_frequency": 0.04}
        payload = _payload(await handle_generate_counseling_text(args, config))
        assert "literature_pmid" in payload["error"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_default_source_german_affected(self, config):
        args = {
            "gene": "CFTR",
            "frequency_source": "default",
            "index_status": "compound_het_confirmed",
            "language": "de",
        }
        payload = _payload(await handle_generate_counseling_text(args, config))

        assert payload["perspective"] == "affected"
        assert "(Standardannahme)" in payload["text"]
        assert "0,50%" in payload["text"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_gnomad_source(self, config, httpx_mock):
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, json=GENE_RESPONSE)

        args = {"gene": "CFTR", "sections": ["carrier_frequency", "founder_effect"]}
        payload = _payload(await handle_generate_counseling_text(args, config))

        assert "0.40% (1:250) (gnomAD v4.1.0" in payload["text"]
        assert "Ashkenazi Jewish" in payload["text"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_star_threshold_changes_frequency(self, config, httpx_mock):
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, json=ONE_STAR_RESPONSE)
        sections = ["carrier_frequency"]

        default = _payload(
            await handle_generate_counseling_text({"gene": "CFTR", "sections": sections}, config)
        )
        strict = _payload(
            await handle_generate_counseling_text(
                {"gene": "CFTR", "sections": sections, "clinvar_star_threshold": 2}, config
            )
        )

        assert "0.60% (1:167)" in default["text"]
        assert "0.40% (1:250)" in strict["text"]
        # Second call is served from the gene cache
        assert len(httpx_mock.get_requests()) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_patient_sex(self, config):
        args = {"gene": "CFTR", "frequency_source": "default", "patient_sex": "unknown"}
        payload = _payload(await handle_generate_counseling_text(args, config))
        assert "Invalid patient sex" in payload["error"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_section(self, config):
        args = {"gene": "CFTR", "frequency_source": "default", "sections": ["summary"]}
        payload = _payload(await handle_generate_counseling_text(args, config))
        assert "Unknown sections" in payload["error"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_language(self, config):
        args = {"gene": "CFTR", "language": "fr"}
        payload = _payload(await handle_generate_counseling_text(args, config))
        assert "Invalid language" in payload["error"]


class TestSearchGenes:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_search(self, config, httpx_mock):
        httpx_mock.add_response(
            method="POST",
            url=GNOMAD_API_URL,
            json={"data": {"gene_search": [{"ensembl_id": "ENSG00000001626", "symbol": "CFTR"}]}},
        )
        payload = _payload(await handle_search_genes({"query": "CFT"}, config))
        assert payload["results"] == [{"ensembl_id": "ENSG00000001626", "symbol": "CFTR"}]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_search_failure(self, config, httpx_mock):
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, status_code=500)
        payload = _payload(await handle_search_genes({"query": "CFT"}, config))
        assert payload["error"] == "gnomAD gene search failed"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_query(self, config):
        payload = _payload(await handle_search_genes({"query": ""}, config))
        assert "error" in payload


CLINGEN_ROWS = {
    "rows": [
        {
            "symbol": "CFTR",
            "hgnc_id": "HGNC:1884",
            "disease_name": "cystic fibrosis",
            "mondo": "MONDO:0009061",
            "moi": "AR",
            "classification": "Definitive",
            "ep": "General Gene Curation",
            "released": "2019-01-10",
            "perm_id": "CCID:004564",
        },
        {
            "symbol": "SCN1A",
            "hgnc_id": "HGNC:10585",
            "disease_name": "Dravet syndrome",
            "mondo": "MONDO:0100135",
            "moi": "AD",
            "classification": "Definitive",
            "ep": "Epilepsy",
            "released": "2020-03-02",
            "perm_id": "CCID:008123",
        },
    ]
}


class TestCheckGeneValidity:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_autosomal_recessive_gene(self, config, httpx_mock):
        httpx_mock.add_response(method="GET", url=CLINGEN_API_URL, json=CLINGEN_ROWS)

        payload = _payload(await handle_check_gene_validity({"gene": "cftr"}, config))

        assert payload["gene"] == "CFTR"
        assert payload["found"] is True
        assert payload["has_autosomal_recessive"] is True
        assert payload["ar_entries"][0]["disease_label"] == "cystic fibrosis"
        assert "message" not in payload

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_dominant_only_gene_warns(self, config, httpx_mock):
        httpx_mock.add_response(method="GET", url=CLINGEN_API_URL, json=CLINGEN_ROWS)

        payload = _payload(await handle_check_gene_validity({"gene": "SCN1A"}, config))

        assert payload["found"] is True
        assert payload["has_autosomal_recessive"] is False
        assert "no autosomal recessive curation" in payload["message"]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_listing_cached_across_calls(self, config, httpx_mock):
        httpx_mock.add_response(method="GET", url=CLINGEN_API_URL, json=CLINGEN_ROWS)

        await handle_check_gene_validity({"gene": "CFTR"}, config)
        payload = _payload(await handle_check_gene_validity({"gene": "HEXA"}, config))

        assert payload["found"] is False
        assert "No ClinGen" in payload["message"]
        assert len(httpx_mock.get_requests()) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_refresh_downloads_again(self, config, httpx_mock):
        httpx_mock.add_response(method="GET", url=CLINGEN_API_URL, json=CLINGEN_ROWS)
        httpx_mock.add_response(method="GET", url=CLINGEN_API_URL, json=CLINGEN_ROWS)

        await handle_check_gene_validity({"gene": "CFTR"}, config)
        await handle_check_gene_validity({"gene": "CFTR", "refresh": True}, config)

        assert len(httpx_mock.get_requests()) == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_request_failure(self, config, httpx_mock):
        httpx_mock.add_response(method="GET", url=CLINGEN_API_URL, status_code=502)

        payload = _payload(await handle_check_gene_validity({"gene": "CFTR"}, config))
        assert payload["error"] == "ClinGen request failed"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_listing(self, config, httpx_mock):
        httpx_mock.add_response(method="GET", url=CLINGEN_API_URL, json={"rows": []})

        payload = _payload(await handle_check_gene_validity({"gene": "CFTR"}, config))
        assert payload["error"] == "ClinGen request failed"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_gene(self, config):
        payload = _payload(await handle_check_gene_validity({"gene": ""}, config))
        assert payload["error"] == "Gene symbol is required"


def _constraint_response(constraint):
    return {
        "data": {
            "gene": {
                "gene_id": "ENSG00000001626",
                "symbol": "CFTR",
                "gnomad_constraint": constraint,
            }
        }
    }


class TestGetGeneConstraint:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_tolerant_gene(self, config, httpx_mock):
        httpx_mock.add_response(
            method="POST",
            url=GNOMAD_API_URL,
            json=_constraint_response(
                {
                    "exp_lof": 80.1,
                    "obs_lof": 70,
                    "oe_lof": 0.87,
                    "oe_lof_lower": 0.71,
                    "oe_lof_upper": 1.62,
                    "pLI": 0.0,
                    "lof_z": 0.9,
                    "flags": [],
                }
            ),
        )

        payload = _payload(await handle_get_gene_constraint({"gene": "CFTR"}, config))

        assert payload["found"] is True
        assert payload["gene_id"] == "ENSG00000001626"
        assert payload["constraint"]["loeuf"] == pytest.approx(1.62)
        assert payload["loeuf_interpretation"] == {"level": "tolerant", "label": "LoF tolerant"}
        assert payload["pli_interpretation"]["level"] == "tolerant"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_version_thresholds(self, config, httpx_mock):
        """LOEUF 1.2 is intermediate in v4 but tolerant with the v2 bounds."""
        httpx_mock.add_response(
            method="POST",
            url=GNOMAD_API_URL,
            json=_constraint_response({"oe_lof_upper": 1.2, "pLI": 0.5}),
        )

        payload = _payload(
            await handle_get_gene_constraint({"gene": "CFTR", "version": "v2"}, config)
        )

        assert payload["loeuf_interpretation"]["level"] == "tolerant"
        assert payload["pli_interpretation"] == {"level": "intermediate", "label": "Intermediate"}
        body = json.loads(httpx_mock.get_requests()[0].content)
        assert body["variables"]["referenceGenome"] == "GRCh37"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_gene_without_constraint(self, config, httpx_mock):
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, json=_constraint_response(None))

        payload = _payload(await handle_get_gene_constraint({"gene": "CFTR"}, config))

        assert payload["constraint"] is None
        assert payload["loeuf_interpretation"] == {"level": "unknown", "label": "N/A"}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_gene_not_found(self, config, httpx_mock):
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, json={"data": {"gene": None}})

        payload = _payload(await handle_get_gene_constraint({"gene": "NOPE1"}, config))
        assert payload["found"] is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_request_failure(self, config, httpx_mock):
        httpx_mock.add_response(method="POST", url=GNOMAD_API_URL, status_code=500)

        payload = _payload(await handle_get_gene_constraint({"gene": "CFTR"}, config))
        assert payload["error"] == "gnomAD request failed"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_version(self, config):
        args = {"gene": "CFTR", "version": "v1"}
        payload = _payload(await handle_get_gene_constraint(args, config))
        assert "Unknown gnomAD version" in payload["error"]


class TestListPopulations:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_all_versions(self, config):
        payload = _payload(await handle_list_populations({}, config))
        assert [v["version"] for v in payload["versions"]] == ["v4", "v3", "v2"]
        assert payload["default_version"] == "v4"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_single_version(self, config):
        payload = _payload(await handle_list_populations({"version": "v2"}, config))
        assert len(payload["versions"]) == 1
        codes = [p["code"] for p in payload["versions"][0]["populations"]]
        assert "oth" in codes

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_version(self, config):
        payload = _payload(await handle_list_populations({"version": "v9"}, config))
        assert "Unknown gnomAD version" in payload["error"]


class TestFilterDefaults:
    @pytest.mark.unit
    def test_describes_factory_defaults(self, config):
        data = json.loads(get_filter_defaults(config))
        assert data["filters"]["clinvar_star_threshold"] == 1
        assert data["filters"]["include_conflicting"] is False
        assert data["filters"]["conflicting_threshold"] == 80
        assert data["founder_effect_multiplier"] == 5.0
