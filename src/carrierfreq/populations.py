"""gnomAD dataset versions and their genetic-ancestry population groups.

Population codes differ between gnomAD releases (v4 renamed "oth" to
"remaining", v3 added Amish and Middle Eastern groups), so every calculation
is parameterised with the dataset version it was fetched from.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import DEFAULT_GNOMAD_VERSION


@dataclass(frozen=True)
class Population:
    """A population group reported by gnomAD."""

    code: str
    label: str


@dataclass(frozen=True)
class DatasetVersion:
    """Dataset identifiers and population groups for one gnomAD release."""

    version: str
    display_name: str
    dataset_id: str
    reference_genome: str
    populations: tuple[Population, ...]


_V4_POPULATIONS = (
    Population("afr", "African/African American"),
    Population("amr", "Admixed American"),
    Population("asj", "Ashkenazi Jewish"),
    Population("eas", "East Asian"),
    Population("fin", "Finnish"),
    Population("mid", "Middle Eastern"),
    Population("nfe", "European (non-Finnish)"),
    Population("sas", "South Asian"),
    Population("remaining", "Remaining"),
)

_V3_POPULATIONS = (
    Population("afr", "African/African American"),
    Population("ami", "Amish"),
    Population("amr", "Latino/Admixed American"),
    Population("asj", "Ashkenazi Jewish"),
    Population("eas", "East Asian"),
    Population("fin", "Finnish"),
    Population("mid", "Middle Eastern"),
    Population("nfe", "European (non-Finnish)"),
    Population("sas", "South Asian"),
    Population("oth", "Other"),
)

_V2_POPULATIONS = (
    Population("afr", "African/African American"),
    Population("amr", "Latino/Admixed American"),
    Population("asj", "Ashkenazi Jewish"),
    Population("eas", "East Asian"),
    Population("fin", "Finnish"),
    Population("nfe", "European (non-Finnish)"),
    Population("sas", "South Asian"),
    Population("oth", "Other"),
)

DATASET_VERSIONS: dict[str, DatasetVersion] = {
    "v4": DatasetVersion(
        version="v4",
        display_name="gnomAD v4.1.0",
        dataset_id="gnomad_r4",
        reference_genome="GRCh38",
        populations=_V4_POPULATIONS,
    ),
    "v3": DatasetVersion(
        version="v3",
        display_name="gnomAD v3.1.2",
        dataset_id="gnomad_r3",
        reference_genome="GRCh38",
        populations=_V3_POPULATIONS,
    ),
    "v2": DatasetVersion(
        version="v2",
        display_name="gnomAD v2.1.1",
        dataset_id="gnomad_r2_1",
        reference_genome="GRCh37",
        populations=_V2_POPULATIONS,
    ),
}


def available_versions() -> list[str]:
    """Return the supported gnomAD version keys."""
    return list(DATASET_VERSIONS)


def get_dataset_version(version: str | None = None) -> DatasetVersion:
    """Look up a dataset version, falling back to the default release.

    Raises:
        ValueError: If the version is not supported.
    """
    key = version or DEFAULT_GNOMAD_VERSION
    try:
        return DATASET_VERSIONS[key]
    except KeyError:
        raise ValueError(
            f"Unknown gnomAD version '{key}', expected one of {available_versions()}"
        ) from None


def population_codes(version: str | None = None) -> list[str]:
    return [p.code for p in get_dataset_version(version).populations]


def population_labels(version: str | None = None) -> dict[str, str]:
    return {p.code: p.label for p in get_dataset_version(version).populations}


def population_label(code: str, version: str | None = None) -> str:
    """Human-readable label for a population code, or the code itself if unknown."""
    return population_labels(version).get(code, code)
