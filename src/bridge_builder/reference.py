"""
FIPS reference: combined state+county code -> county name.

The reference table is loaded once per run and handed to the transformer as a
read-only mapping.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

import pandas as pd

from src.bridge_builder.errors import ReferenceIntegrityError, SchemaError
from src.bridge_builder.reader import read
from src.configs.sources import SOURCES

logger = logging.getLogger(__name__)

REFERENCE_COLUMNS = ["summary_level", "combined_fips", "combined_place_fips", "area_name"]


def load_fips_reference(base_path: Path | None = None, table_name: str = "fips_geocodes") -> pd.DataFrame:
    """Load the county-level FIPS reference table.

    Rows are restricted to county-subdivision code "00000" (state, county and
    place rows; no townships). Columns: summary_level, combined_fips,
    combined_place_fips, area_name.
    """
    ref = read(table_name, base_path)
    logger.info(f"FIPS reference: {len(ref)} county-level rows")
    return ref


def build_fips_lookup(reference: pd.DataFrame, summary_level: str | None = None) -> Mapping[str, str]:
    """Build the combined_fips -> area_name lookup from the reference table.

    Only rows at the county summary level ("050" unless overridden) are kept, so
    state rows (county code 000) and place rows do not enter the lookup.

    Raises:
        SchemaError: reference lacks combined_fips, summary_level or area_name.
        ReferenceIntegrityError: a combined_fips appears more than once.
    """
    missing = [c for c in ("summary_level", "combined_fips", "area_name") if c not in reference.columns]
    if missing:
        raise SchemaError(f"FIPS reference is missing columns: {missing}")
    if summary_level is None:
        summary_level = SOURCES["fips_geocodes"]["lookup_summary_level"]

    levels = reference["summary_level"].astype("string").str.strip().str.zfill(3)
    counties = reference[(levels == summary_level).fillna(False)]
    counties = counties[counties["combined_fips"].notna()]

    dupes = counties.loc[counties["combined_fips"].duplicated(keep=False), "combined_fips"]
    if not dupes.empty:
        raise ReferenceIntegrityError(
            f"Duplicate combined_fips in FIPS reference: {sorted(dupes.unique().tolist())}"
        )

    lookup = dict(zip(counties["combined_fips"].astype(str), counties["area_name"].astype(str)))
    logger.info(f"FIPS lookup: {len(lookup)} counties at summary level {summary_level}")
    return MappingProxyType(lookup)
