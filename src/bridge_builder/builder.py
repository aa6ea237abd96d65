"""
Composable builders for the cleaned NBI tables.

- build_reference_lookup: FIPS reference -> read-only combined_fips lookup
- build_clean_nbi: one survey year, raw NBI -> cleaned table
- build_all: several survey years sharing one lookup
"""

import logging
from collections.abc import Mapping
from pathlib import Path

import pandas as pd

from src.bridge_builder.reader import read_nbi
from src.bridge_builder.reference import build_fips_lookup, load_fips_reference
from src.bridge_builder.transformer import transform_records
from src.configs.sources import NBI_YEARS

logger = logging.getLogger(__name__)


def build_reference_lookup(base_path: Path | None = None) -> Mapping[str, str]:
    """Load the FIPS reference and build the county lookup from it."""
    return build_fips_lookup(load_fips_reference(base_path))


def build_clean_nbi(
    year: int,
    base_path: Path | None = None,
    fips_lookup: Mapping[str, str] | None = None,
) -> pd.DataFrame:
    """Build the cleaned table for one NBI survey year.

    Args:
        year: Survey year; must have an nbi_<year> entry in SOURCES.
        base_path: Project root for resolving data paths.
        fips_lookup: Pre-built county lookup. If None, built from the reference source.

    Returns:
        DataFrame with one row per raw record, columns in OUTPUT_COLUMNS order.
    """
    if fips_lookup is None:
        fips_lookup = build_reference_lookup(base_path)

    raw = read_nbi(year, base_path)
    clean = transform_records(raw, fips_lookup, survey_year=year)
    if len(clean) != len(raw):
        raise RuntimeError(f"NBI {year}: {len(raw)} raw rows but {len(clean)} cleaned rows")

    unmatched = int((clean["combined_fips"].notna() & clean["county_name"].isna()).sum())
    logger.info(f"NBI {year}: {len(clean)} rows cleaned, {unmatched} without a county match")
    counts = clean["bridge_condition"].value_counts(dropna=False)
    logger.info(f"NBI {year} bridge_condition: {counts.to_dict()}")
    return clean


def build_all(years: list[int] | None = None, base_path: Path | None = None) -> dict[int, pd.DataFrame]:
    """Build cleaned tables for several survey years (default: all configured).

    The FIPS lookup is built once and shared; the years are independent.
    """
    years = years or NBI_YEARS
    fips_lookup = build_reference_lookup(base_path)
    return {year: build_clean_nbi(year, base_path, fips_lookup=fips_lookup) for year in years}
