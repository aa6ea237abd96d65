"""
Record transformer: raw NBI rows -> cleaned, analysis-ready rows.

Every output row depends only on its own raw row and the read-only FIPS
lookup, so the frame-level functions below are column-wise maps; row count
and row order are preserved. Absent values are pandas missing values in
nullable dtypes (Int64 / string / Float64), never numeric sentinels.
"""

from collections.abc import Mapping

import numpy as np
import pandas as pd

from src.bridge_builder.errors import SchemaError
from src.configs.nbi_codes import CODE_TABLES
from src.configs.nbi_columns import (
    APPRAISAL_DEFICIENT_MAX,
    APPRAISAL_RATINGS,
    COMPONENT_RATINGS,
    COUNTY_COLUMN,
    INSPECTION_DATE_COLUMN,
    NBI_REQUIRED_COLUMNS,
    OUTPUT_COLUMNS,
    PASSTHROUGH_COLUMNS,
    POOR_FLAG_COLUMNS,
    POOR_RATING_MAX,
    STATE_COLUMN,
    STRUCTURE_COLUMN,
    TEXT_COLUMNS,
)


def _as_object(s: pd.Series) -> pd.Series:
    """Nullable string series -> object series with NaN for missing (for to_numeric)."""
    return s.astype(object).where(s.notna(), np.nan)


def normalize_code(series: pd.Series, width: int | None = None) -> pd.Series:
    """Normalize a coded column to stripped strings, zero-padded to width.

    Quote characters and a trailing ".0" (from numeric type sniffing) are
    removed; blanks become missing.
    """
    s = series.astype("string").str.strip().str.strip("'").str.strip()
    s = s.str.replace(r"\.0$", "", regex=True)
    s = s.mask((s == "").fillna(False))
    if width:
        s = s.str.zfill(width)
    return s


def coerce_rating(series: pd.Series) -> pd.Series:
    """Parse a 0-9 rating column; anything unparsable ("N", blank) becomes missing.

    Ratings are whole numbers; a fractional value is floored.
    """
    values = pd.to_numeric(_as_object(series.astype("string").str.strip()), errors="coerce").astype("float64")
    values = values.where(np.isfinite(values))
    return np.floor(values).astype("Int64")


def combine_fips(state: pd.Series, county: pd.Series) -> pd.Series:
    """State (2) + county (3) zero-padded concatenation; missing if either part is."""
    return normalize_code(state, 2) + normalize_code(county, 3)


def lookup_county(combined_fips: pd.Series, fips_lookup: Mapping[str, str]) -> pd.Series:
    """Left lookup of county names; codes with no reference entry stay missing."""
    return combined_fips.map(dict(fips_lookup)).astype("string")


def recode(series: pd.Series, table: dict) -> pd.Series:
    """Translate raw codes to labels via one CODE_TABLES entry."""
    labels = normalize_code(series, table.get("width")).map(table["codes"]).astype("string")
    if table.get("default") is not None:
        labels = labels.fillna(table["default"])
    return labels


def poor_flags(ratings: pd.DataFrame) -> pd.DataFrame:
    """True where a component rating is present and at or below POOR_RATING_MAX."""
    return (ratings <= POOR_RATING_MAX).fillna(False).astype(bool)


def lowest_rating(ratings: pd.DataFrame) -> pd.Series:
    """Row-wise minimum ignoring missing ratings; missing when all are missing."""
    return ratings.astype("float64").min(axis=1, skipna=True).astype("Int64")


def classify_condition(lowest: pd.Series) -> pd.Series:
    """Good (>= 7), Fair (5-6), Poor (<= 4); missing when the lowest rating is."""
    labels = pd.Series(pd.NA, index=lowest.index, dtype="string")
    labels[(lowest >= 7).fillna(False).astype(bool)] = "Good"
    labels[((lowest >= 5) & (lowest <= 6)).fillna(False).astype(bool)] = "Fair"
    labels[(lowest <= POOR_RATING_MAX).fillna(False).astype(bool)] = "Poor"
    return labels


def structural_deficiency(
    flags: pd.DataFrame, structural_eval: pd.Series, waterway_eval: pd.Series
) -> tuple[pd.Series, pd.Series]:
    """Current and legacy structurally-deficient flags.

    Current: any component poor. Legacy: current, or structural evaluation or
    waterway adequacy present and at or below APPRAISAL_DEFICIENT_MAX.
    """
    current = flags.any(axis=1)
    legacy = (
        current
        | (structural_eval <= APPRAISAL_DEFICIENT_MAX).fillna(False).astype(bool)
        | (waterway_eval <= APPRAISAL_DEFICIENT_MAX).fillna(False).astype(bool)
    )
    return current, legacy


def split_inspection_date(series: pd.Series) -> tuple[pd.Series, pd.Series]:
    """Packed MMYY -> (month, year) two-character strings; no calendar check."""
    packed = normalize_code(series, 4)
    return packed.str.slice(0, 2), packed.str.slice(-2)


def clean_text(series: pd.Series) -> pd.Series:
    """Drop apostrophes and outer whitespace from a free-text column."""
    return series.astype("string").str.replace("'", "", regex=False).str.strip()


def dms_to_decimal(series: pd.Series, negate: bool = False) -> pd.Series:
    """Packed degrees-minutes-seconds (DDMMSSss or DDDMMSSss) -> decimal degrees.

    NBI records longitudes unsigned; pass negate=True for the western hemisphere.
    Zero or unparsable values become missing.
    """
    packed = pd.to_numeric(_as_object(series.astype("string").str.strip()), errors="coerce").astype("float64")
    packed = packed.where(packed > 0)
    degrees = packed // 1_000_000
    minutes = (packed // 10_000) % 100
    seconds = (packed % 10_000) / 100
    decimal = (degrees + minutes / 60 + seconds / 3600).round(6)
    if negate:
        decimal = -decimal
    return decimal.astype("Float64")


def transform_records(
    raw: pd.DataFrame, fips_lookup: Mapping[str, str], survey_year: int | None = None
) -> pd.DataFrame:
    """Clean a raw NBI frame into OUTPUT_COLUMNS, one output row per raw row.

    Args:
        raw: Raw NBI rows, columns named as in the NBI delimited files.
        fips_lookup: combined_fips -> county name (see reference.build_fips_lookup).
        survey_year: Snapshot year stamped on every row (missing if None).

    Raises:
        SchemaError: a column the transformation reads is missing.
    """
    missing = [c for c in NBI_REQUIRED_COLUMNS if c not in raw.columns]
    if missing:
        raise SchemaError(f"Raw NBI records are missing required columns: {missing}")

    out = pd.DataFrame(index=raw.index)
    out["survey_year"] = pd.Series(survey_year, index=raw.index, dtype="Int64")
    out["structure_number"] = raw[STRUCTURE_COLUMN].astype("string").str.strip()
    out["state_code"] = normalize_code(raw[STATE_COLUMN], 2)
    out["county_code"] = normalize_code(raw[COUNTY_COLUMN], 3)
    out["combined_fips"] = combine_fips(raw[STATE_COLUMN], raw[COUNTY_COLUMN])
    out["county_name"] = lookup_county(out["combined_fips"], fips_lookup)

    for name, table in CODE_TABLES.items():
        out[name] = recode(raw[table["source"]], table)

    for name, col in {**COMPONENT_RATINGS, **APPRAISAL_RATINGS}.items():
        out[name] = coerce_rating(raw[col])

    components = out[list(COMPONENT_RATINGS)]
    flags = poor_flags(components)
    for rating_col, flag_col in POOR_FLAG_COLUMNS.items():
        out[flag_col] = flags[rating_col]
    out["struct_deficient"], out["struct_deficient_legacy"] = structural_deficiency(
        flags, out["structural_eval"], out["waterway_eval"]
    )
    out["lowest_condition_rating"] = lowest_rating(components)
    out["total_poor_conditions"] = flags.sum(axis=1).astype("int64")
    out["bridge_condition"] = classify_condition(out["lowest_condition_rating"])

    out["inspection_month"], out["inspection_year"] = split_inspection_date(raw[INSPECTION_DATE_COLUMN])

    for name, col in PASSTHROUGH_COLUMNS.items():
        out[name] = clean_text(raw[col]) if name in TEXT_COLUMNS else raw[col]
    out["latitude_decimal"] = dms_to_decimal(raw[PASSTHROUGH_COLUMNS["latitude"]])
    out["longitude_decimal"] = dms_to_decimal(raw[PASSTHROUGH_COLUMNS["longitude"]], negate=True)

    return out[OUTPUT_COLUMNS]


def transform_record(
    raw: Mapping, fips_lookup: Mapping[str, str], survey_year: int | None = None
) -> dict:
    """Clean a single raw record (column name -> value) into an output dict."""
    frame = pd.DataFrame([dict(raw)])
    return transform_records(frame, fips_lookup, survey_year=survey_year).iloc[0].to_dict()
