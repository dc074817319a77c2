"""Clinician-facing counseling text built from carrier frequency results.

Text is assembled from per-section templates containing ``{{variable}}``
placeholders. All values in the template context are pre-formatted strings for
the target language, so rendering is plain substitution.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from datetime import date
from enum import Enum

from ..models import AggregateResult, IndexStatus
from ..populations import DatasetVersion
from .risk import grouped_ratio, recurrence_risk

logger = logging.getLogger(__name__)

TEMPLATE_VARIABLE = re.compile(r"\{\{(\w+)\}\}")

LANGUAGES = ("en", "de")


class Perspective(str, Enum):
    AFFECTED = "affected"
    CARRIER = "carrier"
    FAMILY_MEMBER = "family_member"


class FrequencySource(str, Enum):
    GNOMAD = "gnomad"
    LITERATURE = "literature"
    DEFAULT = "default"


SECTION_ORDER = (
    "gene_intro",
    "inheritance",
    "carrier_frequency",
    "recurrence_risk",
    "population_context",
    "founder_effect",
    "source_citation",
    "recommendation",
)

DEFAULT_ENABLED_SECTIONS = (
    "gene_intro",
    "inheritance",
    "carrier_frequency",
    "recurrence_risk",
    "recommendation",
)

_SHARED_EN = {
    "inheritance": (
        "Disorders caused by pathogenic variants in {{gene}} follow an "
        "autosomal recessive mode of inheritance."
    ),
    "carrier_frequency": (
        "The carrier frequency for pathogenic {{gene}} variants in the general "
        "population is estimated at {{carrierFrequency}} ({{carrierFrequencyRatio}}) {{source}}."
    ),
    "population_context": (
        "Carrier frequencies differ between populations; the highest estimate was "
        "observed in the {{populationName}} population."
    ),
    "founder_effect": (
        "The markedly elevated carrier frequency in the {{founderPopulation}} "
        "population suggests a founder effect."
    ),
    "source_citation": "Population data: {{source}}.",
}

_SHARED_DE = {
    "inheritance": (
        "Erkrankungen durch pathogene Varianten im {{gene}}-Gen werden autosomal-rezessiv vererbt."
    ),
    "carrier_frequency": (
        "Die Heterozygotenfrequenz für pathogene {{gene}}-Varianten in der "
        "Allgemeinbevölkerung wird auf {{carrierFrequency}} ({{carrierFrequencyRatio}}) "
        "geschätzt {{source}}."
    ),
    "population_context": (
        "Die Heterozygotenfrequenz unterscheidet sich zwischen Populationen; der "
        "höchste Wert findet sich in der Population {{populationName}}."
    ),
    "founder_effect": (
        "Die deutlich erhöhte Heterozygotenfrequenz in der Population "
        "{{founderPopulation}} spricht für einen Founder-Effekt."
    ),
    "source_citation": "Populationsdaten: {{source}}.",
}

DEFAULT_TEMPLATES: dict[str, dict[Perspective, dict[str, str]]] = {
    "en": {
        Perspective.AFFECTED: {
            **_SHARED_EN,
            "gene_intro": "{{statusIntro}}",
            "recurrence_risk": (
                "Assuming an unrelated partner from the general population, the risk "
                "for affected offspring is approximately {{recurrenceRiskPercent}} "
                "({{recurrenceRiskRatio}})."
            ),
            "recommendation": (
                "Carrier testing of the partner can substantially refine this risk estimate."
            ),
        },
        Perspective.CARRIER: {
            **_SHARED_EN,
            "gene_intro": "{{statusIntro}}",
            "recurrence_risk": (
                "The patient's risk of having an affected child with an unrelated "
                "partner is approximately {{recurrenceRiskPercent}} ({{recurrenceRiskRatio}})."
            ),
            "recommendation": (
                "Carrier testing of the partner is recommended if a more precise "
                "risk assessment is desired."
            ),
        },
        Perspective.FAMILY_MEMBER: {
            **_SHARED_EN,
            "gene_intro": "A pathogenic variant in the {{gene}} gene has been identified in the family.",
            "recurrence_risk": (
                "For a relative who carries the familial variant, the risk of an "
                "affected child with an unrelated partner is approximately "
                "{{recurrenceRiskPercent}} ({{recurrenceRiskRatio}})."
            ),
            "recommendation": "Targeted testing for the familial variant can be offered to relatives.",
        },
    },
    "de": {
        Perspective.AFFECTED: {
            **_SHARED_DE,
            "gene_intro": "{{statusIntro}}",
            "recurrence_risk": (
                "Unter der Annahme eines nicht verwandten Partners aus der "
                "Allgemeinbevölkerung beträgt das Wiederholungsrisiko für betroffene "
                "Nachkommen etwa {{recurrenceRiskPercent}} ({{recurrenceRiskRatio}})."
            ),
            "recommendation": (
                "Eine Anlageträgerdiagnostik beim Partner kann diese Risikoabschätzung präzisieren."
            ),
        },
        Perspective.CARRIER: {
            **_SHARED_DE,
            "gene_intro": "{{statusIntro}}",
            "recurrence_risk": (
                "Das Risiko, mit einem nicht verwandten Partner ein betroffenes Kind "
                "zu bekommen, beträgt für {{patientNominative}} etwa "
                "{{recurrenceRiskPercent}} ({{recurrenceRiskRatio}})."
            ),
            "recommendation": (
                "Bei Wunsch nach einer genaueren Risikoabschätzung wird eine "
                "Anlageträgerdiagnostik beim Partner empfohlen."
            ),
        },
        Perspective.FAMILY_MEMBER: {
            **_SHARED_DE,
            "gene_intro": "In der Familie wurde eine pathogene Variante im {{gene}}-Gen nachgewiesen.",
            "recurrence_risk": (
                "Für Angehörige, die die familiäre Variante tragen, beträgt das Risiko "
                "für ein betroffenes Kind mit einem nicht verwandten Partner etwa "
                "{{recurrenceRiskPercent}} ({{recurrenceRiskRatio}})."
            ),
            "recommendation": (
                "Angehörigen kann eine gezielte Untersuchung auf die familiäre Variante "
                "angeboten werden."
            ),
        },
    },
}

PATIENT_FORMS: dict[str, dict[str, str]] = {
    "male": {"nominative": "der Patient", "genitive": "des Patienten", "dative": "dem Patienten"},
    "female": {"nominative": "die Patientin", "genitive": "der Patientin", "dative": "der Patientin"},
    "neutral": {
        "nominative": "der/die Patient*in",
        "genitive": "des/der Patient*in",
        "dative": "dem/der Patient*in",
    },
}

_MONTHS_EN = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def render_template(template: str, context: Mapping[str, str | None]) -> str:
    """Replace ``{{name}}`` placeholders; missing values render as ""."""

    def _substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        value = context.get(key)
        if value is None:
            logger.warning('Template variable "%s" is undefined', key)
            return ""
        return str(value)

    return TEMPLATE_VARIABLE.sub(_substitute, template)


def template_variables(template: str) -> list[str]:
    return TEMPLATE_VARIABLE.findall(template)


def format_percent(value: float, language: str = "en", decimals: int = 2) -> str:
    text = f"{value * 100:,.{decimals}f}"
    if language == "de":
        text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{text}%"


def format_ratio(value: float, language: str = "en") -> str:
    text = grouped_ratio(value)
    if language == "de":
        text = text.replace(",", ".")
    return text


def format_access_date(day: date, language: str = "en") -> str:
    if language == "de":
        return day.strftime("%d.%m.%Y")
    return f"{_MONTHS_EN[day.month - 1]} {day.day}, {day.year}"


def build_status_intro(
    status: IndexStatus, gene: str, language: str = "en", patient_dative: str = "dem Patienten"
) -> str:
    if language == "de":
        return {
            IndexStatus.HETEROZYGOUS: (
                f"Bei {patient_dative} wurde eine heterozygote pathogene Variante im {gene}-Gen "
                "nachgewiesen."
            ),
            IndexStatus.HOMOZYGOUS: (
                f"Bei {patient_dative} wurde eine pathogene Variante im {gene}-Gen im "
                "homozygoten Zustand nachgewiesen."
            ),
            IndexStatus.COMPOUND_HET_CONFIRMED: (
                f"Bei {patient_dative} wurden zwei pathogene Varianten im {gene}-Gen im "
                "compound-heterozygoten Zustand nachgewiesen."
            ),
            IndexStatus.COMPOUND_HET_ASSUMED: (
                f"Bei {patient_dative} wurden zwei pathogene Varianten im {gene}-Gen "
                "nachgewiesen. Aufgrund des passenden Phänotyps erscheint ein "
                "compound-heterozygotes Vorliegen wahrscheinlich."
            ),
        }[status]
    return {
        IndexStatus.HETEROZYGOUS: (
            f"A heterozygous pathogenic variant in the {gene} gene was identified in the patient."
        ),
        IndexStatus.HOMOZYGOUS: (
            f"A pathogenic variant in the {gene} gene was identified in the homozygous "
            "state in the patient."
        ),
        IndexStatus.COMPOUND_HET_CONFIRMED: (
            f"Two pathogenic variants in the {gene} gene were identified in compound "
            "heterozygous state in the patient."
        ),
        IndexStatus.COMPOUND_HET_ASSUMED: (
            f"Two pathogenic variants in the {gene} gene were identified in the patient. "
            "Based on the clinical phenotype, compound heterozygous inheritance is presumed."
        ),
    }[status]


def build_source_attribution(
    source: FrequencySource,
    dataset: DatasetVersion,
    *,
    using_default: bool = False,
    literature_pmid: str | None = None,
    access_date: str = "",
    language: str = "en",
) -> str:
    de = language == "de"
    if source is FrequencySource.GNOMAD:
        if using_default:
            if de:
                return "(Standardannahme mangels gnomAD-Daten)"
            return "(default assumption, no gnomAD data)"
        if de:
            return f"({dataset.display_name}, https://gnomad.broadinstitute.org, abgerufen am {access_date})"
        return f"({dataset.display_name}, https://gnomad.broadinstitute.org, accessed {access_date})"
    if source is FrequencySource.LITERATURE:
        return f"(PMID: {literature_pmid})"
    return "(Standardannahme)" if de else "(default assumption)"


def effective_frequency(
    result: AggregateResult | None,
    source: FrequencySource,
    *,
    literature_frequency: float | None = None,
    default_carrier_frequency: float | None = None,
) -> float | None:
    """Carrier frequency to report for the chosen source."""
    if source is FrequencySource.GNOMAD:
        return result.global_carrier_frequency if result else None
    if source is FrequencySource.LITERATURE:
        return literature_frequency
    return default_carrier_frequency


def build_template_context(
    result: AggregateResult,
    dataset: DatasetVersion,
    *,
    index_status: IndexStatus | str,
    frequency_source: FrequencySource | str = FrequencySource.GNOMAD,
    literature_frequency: float | None = None,
    literature_pmid: str | None = None,
    default_carrier_frequency: float | None = None,
    language: str = "en",
    patient_sex: str = "male",
    decimals: int = 2,
    today: date | None = None,
) -> dict[str, str] | None:
    """Pre-formatted template values, or None if no frequency is available."""
    status = IndexStatus(index_status)
    source = FrequencySource(frequency_source)

    frequency = effective_frequency(
        result,
        source,
        literature_frequency=literature_frequency,
        default_carrier_frequency=default_carrier_frequency,
    )
    if frequency is None:
        return None

    risk = recurrence_risk(frequency, status)
    access_date = format_access_date(today or date.today(), language)
    forms = PATIENT_FORMS.get(patient_sex, PATIENT_FORMS["male"])

    context = {
        "gene": result.gene,
        "carrierFrequency": format_percent(frequency, language, decimals),
        "carrierFrequencyRatio": format_ratio(frequency, language),
        "recurrenceRiskPercent": format_percent(risk, language, decimals),
        "recurrenceRiskRatio": format_ratio(risk, language),
        "source": build_source_attribution(
            source,
            dataset,
            using_default=result.using_default,
            literature_pmid=literature_pmid,
            access_date=access_date,
            language=language,
        ),
        "indexStatus": "affected" if status.is_affected else "carrier",
        "statusIntro": build_status_intro(status, result.gene, language, forms["dative"]),
        "accessDate": access_date,
        "patientNominative": forms["nominative"],
        "patientGenitive": forms["genitive"],
        "patientDative": forms["dative"],
    }
    if literature_pmid:
        context["pmid"] = literature_pmid

    with_frequency = [p for p in result.populations if p.carrier_frequency is not None]
    if with_frequency:
        context["populationName"] = with_frequency[0].label
    founders = [p for p in result.populations if p.is_founder_effect]
    if founders:
        context["founderPopulation"] = founders[0].label

    return context


def generate_report(
    context: Mapping[str, str],
    perspective: Perspective | str,
    language: str = "en",
    sections: Sequence[str] | None = None,
    overrides: Mapping[str, str] | None = None,
) -> str:
    """Join the enabled sections for a perspective into one paragraph.

    Args:
        context: Values from ``build_template_context``.
        perspective: Whose point of view the text is written from.
        language: "en" or "de".
        sections: Enabled section ids; defaults to ``DEFAULT_ENABLED_SECTIONS``.
        overrides: Custom templates keyed by "<perspective>.<section>".

    Sections whose placeholders are not all present in the context are
    skipped, e.g. the founder-effect sentence when no population is flagged.
    """
    perspective = Perspective(perspective)
    templates = DEFAULT_TEMPLATES.get(language, DEFAULT_TEMPLATES["en"])[perspective]
    enabled = set(DEFAULT_ENABLED_SECTIONS if sections is None else sections)
    overrides = overrides or {}

    parts = []
    for section_id in SECTION_ORDER:
        if section_id not in enabled:
            continue
        template = overrides.get(f"{perspective.value}.{section_id}", templates.get(section_id))
        if not template:
            continue
        missing = [name for name in template_variables(template) if context.get(name) is None]
        if missing:
            logger.debug("Skipping section %s, missing %s", section_id, ", ".join(missing))
            continue
        rendered = render_template(template, context)
        if rendered.strip():
            parts.append(rendered)

    return " ".join(parts)
