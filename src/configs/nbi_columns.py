"""
Column configuration for the NBI record transformation.

Raw names follow the FHWA Recording and Coding Guide item numbering
(e.g. DECK_COND_058 is item 58). Canonical names are what the cleaned table uses.
"""

from src.configs.nbi_codes import CODE_TABLES

# Identifier and FIPS part columns
STRUCTURE_COLUMN = "STRUCTURE_NUMBER_008"
STATE_COLUMN = "STATE_CODE_001"
COUNTY_COLUMN = "COUNTY_CODE_003"
INSPECTION_DATE_COLUMN = "DATE_OF_INSPECT_090"

# Passthrough columns: canonical name -> raw NBI column
PASSTHROUGH_COLUMNS = {
    "features_desc": "FEATURES_DESC_006A",
    "facility_carried": "FACILITY_CARRIED_007",
    "location": "LOCATION_009",
    "latitude": "LAT_016",
    "longitude": "LONG_017",
    "year_built": "YEAR_BUILT_027",
    "traffic_lanes_on": "TRAFFIC_LANES_ON_028A",
    "average_daily_traffic": "ADT_029",
    "year_adt": "YEAR_ADT_030",
    "improvement_length_m": "IMP_LEN_MT_076",
    "bridge_improvement_cost": "BRIDGE_IMP_COST_094",
    "roadway_improvement_cost": "ROADWAY_IMP_COST_095",
    "total_improvement_cost": "TOTAL_IMP_COST_096",
    "year_of_improvement_cost": "YEAR_OF_IMP_097",
    "year_reconstructed": "YEAR_RECONSTRUCTED_106",
    "percent_adt_truck": "PERCENT_ADT_TRUCK_109",
    "future_adt": "FUTURE_ADT_114",
    "year_future_adt": "YEAR_OF_FUTURE_ADT_115",
}

# Free-text columns (canonical names) cleaned of apostrophes and outer whitespace
TEXT_COLUMNS = ["features_desc", "facility_carried", "location"]

# Component condition ratings (items 58-62); lower is worse, "N" = not applicable
COMPONENT_RATINGS = {
    "deck_cond": "DECK_COND_058",
    "superstructure_cond": "SUPERSTRUCTURE_COND_059",
    "substructure_cond": "SUBSTRUCTURE_COND_060",
    "culvert_cond": "CULVERT_COND_062",
}

# Appraisal ratings used by the legacy structurally-deficient definition
APPRAISAL_RATINGS = {
    "structural_eval": "STRUCTURAL_EVAL_067",
    "waterway_eval": "WATERWAY_EVAL_071",
}

# Component rating -> poor flag column
POOR_FLAG_COLUMNS = {
    "deck_cond": "deck_poor",
    "superstructure_cond": "superstructure_poor",
    "substructure_cond": "substructure_poor",
    "culvert_cond": "culvert_poor",
}

# A component is poor at or below this rating
POOR_RATING_MAX = 4
# Legacy deficiency: appraisal at or below this rating
APPRAISAL_DEFICIENT_MAX = 2

OUTPUT_COLUMNS = [
    # Identifiers
    "survey_year",
    "structure_number",
    "state_code",
    "county_code",
    "combined_fips",
    "county_name",
    # Recoded labels
    "route_type",
    "service_level",
    "maintenance_responsibility",
    "owner",
    "operational_status",
    "scour_critical",
    "historical_significance",
    "work_proposed",
    "work_done_by",
    # Ratings
    "deck_cond",
    "superstructure_cond",
    "substructure_cond",
    "culvert_cond",
    "structural_eval",
    "waterway_eval",
    # Flags
    "deck_poor",
    "superstructure_poor",
    "substructure_poor",
    "culvert_poor",
    "struct_deficient",
    "struct_deficient_legacy",
    # Aggregates
    "lowest_condition_rating",
    "total_poor_conditions",
    "bridge_condition",
    # Inspection
    "inspection_month",
    "inspection_year",
    # Passthrough
    "features_desc",
    "facility_carried",
    "location",
    "latitude",
    "longitude",
    "latitude_decimal",
    "longitude_decimal",
    "year_built",
    "year_reconstructed",
    "traffic_lanes_on",
    "average_daily_traffic",
    "year_adt",
    "percent_adt_truck",
    "future_adt",
    "year_future_adt",
    "improvement_length_m",
    "bridge_improvement_cost",
    "roadway_improvement_cost",
    "total_improvement_cost",
    "year_of_improvement_cost",
]

_CODE_COLUMNS = [cfg["source"] for cfg in CODE_TABLES.values()]

# Every raw column the transformation reads; a missing one is a SchemaError
NBI_REQUIRED_COLUMNS = [
    STRUCTURE_COLUMN,
    STATE_COLUMN,
    COUNTY_COLUMN,
    INSPECTION_DATE_COLUMN,
    *COMPONENT_RATINGS.values(),
    *APPRAISAL_RATINGS.values(),
    *_CODE_COLUMNS,
    *PASSTHROUGH_COLUMNS.values(),
]

# Read as strings so codes keep leading zeros; everything else is type-inferred
NBI_READ_DTYPES = {
    col: "string"
    for col in [
        STRUCTURE_COLUMN,
        STATE_COLUMN,
        COUNTY_COLUMN,
        INSPECTION_DATE_COLUMN,
        PASSTHROUGH_COLUMNS["latitude"],
        PASSTHROUGH_COLUMNS["longitude"],
        *_CODE_COLUMNS,
    ]
}
