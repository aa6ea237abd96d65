"""
Source configuration for the NBI yearly snapshots and the FIPS reference table.

Canonical keys:
- combined_fips: 5-digit FIPS code (state 2 + county 3), join key into the reference
- structure_number: NBI structure identifier (unique within a year, not across years)

NBI delimited files quote text with a single quote, so quotechar is "'".
Code columns are read as strings so no later step can lose leading zeros.
"""

from src.configs.nbi_columns import NBI_READ_DTYPES, NBI_REQUIRED_COLUMNS

SOURCES = {
    # ---- Reference (state+county FIPS -> county name) ----
    "fips_geocodes": {
        "path": "data/raw_data/fips/all-geocodes-v2017.xlsx",
        "format": "xlsx",
        "vintage": 2017,
        "sheet": 0,
        "skiprows": 4,  # Header row is row 5; rows above are title preamble
        "read_dtypes": {
            "Summary Level": "string",
            "State Code (FIPS)": "string",
            "County Code (FIPS)": "string",
            "County Subdivision Code (FIPS)": "string",
            "Place Code (FIPS)": "string",
            "Area Name (including legal/statistical area description)": "string",
        },
        "combine_columns": {
            "combined_fips": {
                "from": ["State Code (FIPS)", "County Code (FIPS)"],
                "zfill": [2, 3],
            },
            # Not used downstream; kept so the reference output is complete
            "combined_place_fips": {
                "from": ["State Code (FIPS)", "Place Code (FIPS)"],
                "zfill": [2, 5],
            },
        },
        # County-level rows only (excludes county subdivisions / townships)
        "filters": {
            "County Subdivision Code (FIPS)": "00000",
        },
        "keys": {
            "combined_fips": "combined_fips",
        },
        "value_columns": {
            "summary_level": "Summary Level",
            "combined_place_fips": "combined_place_fips",
            "area_name": "Area Name (including legal/statistical area description)",
        },
        # Applied at consumption time by build_fips_lookup
        "lookup_summary_level": "050",
    },
    # ---- NBI yearly snapshots ----
    "nbi_2007": {
        "path": "data/raw_data/nbi/2007AllRecordsDelimitedAllStates.txt",
        "format": "csv",
        "vintage": 2007,
        "quotechar": "'",
        "read_dtypes": NBI_READ_DTYPES,
        "required_columns": NBI_REQUIRED_COLUMNS,
    },
    "nbi_2017": {
        "path": "data/raw_data/nbi/2017AllRecordsDelimitedAllStates.txt",
        "format": "csv",
        "vintage": 2017,
        "quotechar": "'",
        "read_dtypes": NBI_READ_DTYPES,
        "required_columns": NBI_REQUIRED_COLUMNS,
    },
}

NBI_YEARS = [2007, 2017]
