"""Tests for src.bridge_builder.transformer."""

import sys
from pathlib import Path

import pandas as pd
import pytest

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from src.bridge_builder.errors import SchemaError
from src.bridge_builder.transformer import (
    transform_records,
    transform_record,
    normalize_code,
    coerce_rating,
    combine_fips,
    lookup_county,
    recode,
    poor_flags,
    lowest_rating,
    classify_condition,
    split_inspection_date,
    clean_text,
    dms_to_decimal,
)
from src.configs.nbi_codes import CODE_TABLES, NO_WORK_PROPOSED
from src.configs.nbi_columns import OUTPUT_COLUMNS

FIPS_LOOKUP = {"24003": "Anne Arundel County", "24005": "Baltimore County"}


def _raw_record(**overrides) -> dict:
    rec = {
        "STRUCTURE_NUMBER_008": "100000020014012",
        "STATE_CODE_001": "24",
        "COUNTY_CODE_003": "3",
        "DATE_OF_INSPECT_090": "607",
        "DECK_COND_058": "7",
        "SUPERSTRUCTURE_COND_059": "6",
        "SUBSTRUCTURE_COND_060": "5",
        "CULVERT_COND_062": "N",
        "STRUCTURAL_EVAL_067": "5",
        "WATERWAY_EVAL_071": "7",
        "ROUTE_PREFIX_005B": "3",
        "SERVICE_LEVEL_005C": "1",
        "MAINTENANCE_021": "01",
        "OWNER_022": "01",
        "HISTORY_037": "5",
        "OPEN_CLOSED_POSTED_041": "A",
        "SCOUR_CRITICAL_113": "8",
        "WORK_PROPOSED_075A": "31",
        "WORK_DONE_BY_075B": "1",
        "FEATURES_DESC_006A": "PATUXENT RIVER",
        "FACILITY_CARRIED_007": "MD 4",
        "LOCATION_009": "0.5 MI S OF MD 2",
        "LAT_016": "38443000",
        "LONG_017": "076413000",
        "YEAR_BUILT_027": 1955,
        "TRAFFIC_LANES_ON_028A": 2,
        "ADT_029": 15250,
        "YEAR_ADT_030": 2005,
        "IMP_LEN_MT_076": 120.4,
        "BRIDGE_IMP_COST_094": 2100,
        "ROADWAY_IMP_COST_095": 210,
        "TOTAL_IMP_COST_096": 3150,
        "YEAR_OF_IMP_097": 2006,
        "YEAR_RECONSTRUCTED_106": 0,
        "PERCENT_ADT_TRUCK_109": 8,
        "FUTURE_ADT_114": 19800,
        "YEAR_OF_FUTURE_ADT_115": 2025,
    }
    rec.update(overrides)
    return rec


def _raw(*records) -> pd.DataFrame:
    return pd.DataFrame(list(records))


# --- scenarios ---


def test_one_poor_component():
    rec = _raw_record(
        DECK_COND_058="3",
        SUPERSTRUCTURE_COND_059="7",
        SUBSTRUCTURE_COND_060="N",
        CULVERT_COND_062="N",
    )
    out = transform_records(_raw(rec), FIPS_LOOKUP)
    row = out.iloc[0]
    assert [row["deck_poor"], row["superstructure_poor"], row["substructure_poor"], row["culvert_poor"]] == [
        True,
        False,
        False,
        False,
    ]
    assert row["struct_deficient"] == True  # noqa: E712
    assert row["lowest_condition_rating"] == 3
    assert row["total_poor_conditions"] == 1
    assert row["bridge_condition"] == "Poor"


def test_all_ratings_absent():
    rec = _raw_record(
        DECK_COND_058="N",
        SUPERSTRUCTURE_COND_059="",
        SUBSTRUCTURE_COND_060=None,
        CULVERT_COND_062="N",
    )
    row = transform_records(_raw(rec), FIPS_LOOKUP).iloc[0]
    assert pd.isna(row["lowest_condition_rating"])
    assert pd.isna(row["bridge_condition"])
    assert row["struct_deficient"] == False  # noqa: E712
    assert row["total_poor_conditions"] == 0


def test_culvert_only_structure_is_classified_from_culvert():
    rec = _raw_record(
        DECK_COND_058="N",
        SUPERSTRUCTURE_COND_059="N",
        SUBSTRUCTURE_COND_060="N",
        CULVERT_COND_062="6",
    )
    row = transform_records(_raw(rec), FIPS_LOOKUP).iloc[0]
    assert row["lowest_condition_rating"] == 6
    assert row["bridge_condition"] == "Fair"
    assert row["struct_deficient"] == False  # noqa: E712


def test_county_lookup_hit_and_miss():
    hit = _raw_record(STRUCTURE_NUMBER_008="A", STATE_CODE_001="24", COUNTY_CODE_003="003")
    miss = _raw_record(STRUCTURE_NUMBER_008="B", STATE_CODE_001="24", COUNTY_CODE_003="999")
    out = transform_records(_raw(hit, miss), FIPS_LOOKUP)
    assert len(out) == 2
    assert out["combined_fips"].tolist() == ["24003", "24999"]
    assert out.loc[0, "county_name"] == "Anne Arundel County"
    assert pd.isna(out.loc[1, "county_name"])
    assert out.loc[1, "structure_number"] == "B"


def test_maintenance_code_mapped_and_unmapped():
    out = transform_records(
        _raw(_raw_record(MAINTENANCE_021="01"), _raw_record(MAINTENANCE_021="99")), FIPS_LOOKUP
    )
    assert out.loc[0, "maintenance_responsibility"] == "state highway agency"
    assert pd.isna(out.loc[1, "maintenance_responsibility"])


def test_work_fields_default_to_no_work_proposed():
    out = transform_records(
        _raw(_raw_record(WORK_PROPOSED_075A="", WORK_DONE_BY_075B="3")), FIPS_LOOKUP
    )
    assert out.loc[0, "work_proposed"] == NO_WORK_PROPOSED
    assert out.loc[0, "work_done_by"] == NO_WORK_PROPOSED


def test_legacy_deficiency_from_appraisal_only():
    low_eval = _raw_record(STRUCTURAL_EVAL_067="2", WATERWAY_EVAL_071="8")
    low_waterway = _raw_record(STRUCTURAL_EVAL_067="6", WATERWAY_EVAL_071="1")
    neither = _raw_record(STRUCTURAL_EVAL_067="3", WATERWAY_EVAL_071="N")
    out = transform_records(_raw(low_eval, low_waterway, neither), FIPS_LOOKUP)
    assert out["struct_deficient"].tolist() == [False, False, False]
    assert out["struct_deficient_legacy"].tolist() == [True, True, False]


# --- record set properties ---


def _rating_grid() -> pd.DataFrame:
    values = ["0", "2", "4", "5", "6", "7", "9", "N"]
    records = []
    i = 0
    for deck in values:
        for sup in values:
            for culvert in ["3", "N"]:
                records.append(
                    _raw_record(
                        STRUCTURE_NUMBER_008=f"S{i:05d}",
                        DECK_COND_058=deck,
                        SUPERSTRUCTURE_COND_059=sup,
                        SUBSTRUCTURE_COND_060="N",
                        CULVERT_COND_062=culvert,
                        STRUCTURAL_EVAL_067=deck,
                    )
                )
                i += 1
    return pd.DataFrame(records)


def test_row_count_and_identifiers_preserved():
    raw = _rating_grid()
    out = transform_records(raw, FIPS_LOOKUP)
    assert len(out) == len(raw)
    assert out["structure_number"].tolist() == raw["STRUCTURE_NUMBER_008"].tolist()
    assert out["structure_number"].is_unique


def test_output_columns_in_order():
    out = transform_records(_raw(_raw_record()), FIPS_LOOKUP)
    assert list(out.columns) == OUTPUT_COLUMNS


def test_raw_frame_not_modified():
    raw = _rating_grid()
    before = raw.copy()
    transform_records(raw, FIPS_LOOKUP)
    pd.testing.assert_frame_equal(raw, before)


def test_lowest_rating_absent_iff_all_components_absent():
    raw = _rating_grid()
    out = transform_records(raw, FIPS_LOOKUP)
    ratings = out[["deck_cond", "superstructure_cond", "substructure_cond", "culvert_cond"]]
    all_absent = ratings.isna().all(axis=1)
    assert (out["lowest_condition_rating"].isna() == all_absent).all()
    present = ~all_absent
    expected = ratings[present].astype("float64").min(axis=1)
    assert (out.loc[present, "lowest_condition_rating"].astype("float64") == expected).all()


def test_bridge_condition_partitions_lowest_rating():
    out = transform_records(_rating_grid(), FIPS_LOOKUP)
    lowest = out["lowest_condition_rating"]
    cond = out["bridge_condition"]
    for rating, label in zip(lowest, cond):
        if pd.isna(rating):
            assert pd.isna(label)
        elif rating >= 7:
            assert label == "Good"
        elif rating >= 5:
            assert label == "Fair"
        else:
            assert label == "Poor"


def test_current_deficiency_implies_legacy():
    out = transform_records(_rating_grid(), FIPS_LOOKUP)
    assert not (out["struct_deficient"] & ~out["struct_deficient_legacy"]).any()


def test_total_poor_conditions_counts_flags():
    out = transform_records(_rating_grid(), FIPS_LOOKUP)
    flags = out[["deck_poor", "superstructure_poor", "substructure_poor", "culvert_poor"]]
    assert (out["total_poor_conditions"] == flags.sum(axis=1)).all()
    assert out["total_poor_conditions"].between(0, 4).all()
    assert (out["struct_deficient"] == (out["total_poor_conditions"] > 0)).all()


def test_transform_is_deterministic():
    raw = _rating_grid()
    first = transform_records(raw, FIPS_LOOKUP, survey_year=2017)
    second = transform_records(raw, FIPS_LOOKUP, survey_year=2017)
    pd.testing.assert_frame_equal(first, second)
    assert first.to_csv(index=False) == second.to_csv(index=False)


def test_survey_year_stamped():
    out = transform_records(_raw(_raw_record(), _raw_record()), FIPS_LOOKUP, survey_year=2007)
    assert out["survey_year"].tolist() == [2007, 2007]


def test_missing_required_column_raises():
    raw = _raw(_raw_record()).drop(columns=["DECK_COND_058"])
    with pytest.raises(SchemaError, match="DECK_COND_058"):
        transform_records(raw, FIPS_LOOKUP)


def test_text_fields_cleaned():
    rec = _raw_record(LOCATION_009=" 1 MI N OF O'BRIEN RD ", FACILITY_CARRIED_007="'MD 4'")
    row = transform_records(_raw(rec), FIPS_LOOKUP).iloc[0]
    assert row["location"] == "1 MI N OF OBRIEN RD"
    assert row["facility_carried"] == "MD 4"


def test_passthrough_values_kept():
    row = transform_records(_raw(_raw_record()), FIPS_LOOKUP).iloc[0]
    assert row["average_daily_traffic"] == 15250
    assert row["year_built"] == 1955
    assert row["latitude"] == "38443000"


def test_transform_record_single():
    out = transform_record(_raw_record(DECK_COND_058="4"), FIPS_LOOKUP, survey_year=2017)
    assert set(out) == set(OUTPUT_COLUMNS)
    assert out["county_name"] == "Anne Arundel County"
    assert out["bridge_condition"] == "Poor"
    assert out["survey_year"] == 2017


# --- helpers ---


def test_normalize_code_pads_and_strips():
    s = pd.Series(["1", " 01 ", "'7'", "1.0", "", None])
    out = normalize_code(s, 2)
    assert out.tolist()[:4] == ["01", "01", "07", "01"]
    assert out.isna().tolist()[4:] == [True, True]


def test_normalize_code_numeric_input():
    out = normalize_code(pd.Series([1.0, 22.0]), 2)
    assert out.tolist() == ["01", "22"]


def test_coerce_rating():
    out = coerce_rating(pd.Series(["7", "N", "", None, "4.6", 0]))
    assert out.dtype == "Int64"
    assert out.iloc[0] == 7
    assert out.iloc[1:4].isna().all()
    assert out.iloc[4] == 4
    assert out.iloc[5] == 0


def test_combine_fips():
    out = combine_fips(pd.Series(["1", "48", None]), pd.Series([1, "201", "5"]))
    assert out.tolist()[:2] == ["01001", "48201"]
    assert pd.isna(out.iloc[2])


def test_lookup_county_empty_lookup():
    out = lookup_county(pd.Series(["24003"], dtype="string"), {})
    assert pd.isna(out.iloc[0])


@pytest.mark.parametrize("name", list(CODE_TABLES))
def test_recode_every_enumerated_code(name):
    table = CODE_TABLES[name]
    codes = pd.Series(list(table["codes"]))
    assert recode(codes, table).tolist() == list(table["codes"].values())


@pytest.mark.parametrize("name", list(CODE_TABLES))
def test_recode_unmatched_code(name):
    table = CODE_TABLES[name]
    out = recode(pd.Series(["Z9"]), table)
    if table["default"] is None:
        assert pd.isna(out.iloc[0])
    else:
        assert out.iloc[0] == table["default"]


def test_poor_flags_ignore_missing():
    ratings = pd.DataFrame({"a": pd.array([4, 5, None], dtype="Int64")})
    assert poor_flags(ratings)["a"].tolist() == [True, False, False]


def test_lowest_rating_ignores_missing():
    ratings = pd.DataFrame({
        "a": pd.array([8, None, None], dtype="Int64"),
        "b": pd.array([6, 2, None], dtype="Int64"),
    })
    out = lowest_rating(ratings)
    assert out.iloc[0] == 6
    assert out.iloc[1] == 2
    assert pd.isna(out.iloc[2])


def test_classify_condition_boundaries():
    lowest = pd.Series(pd.array([9, 7, 6, 5, 4, 0, None], dtype="Int64"))
    out = classify_condition(lowest)
    assert out.tolist()[:6] == ["Good", "Good", "Fair", "Fair", "Poor", "Poor"]
    assert pd.isna(out.iloc[6])


def test_split_inspection_date():
    month, year = split_inspection_date(pd.Series(["607", "1207", 1317, None]))
    assert month.tolist()[:3] == ["06", "12", "13"]
    assert year.tolist()[:3] == ["07", "07", "17"]
    assert pd.isna(month.iloc[3]) and pd.isna(year.iloc[3])


def test_clean_text_keeps_missing():
    out = clean_text(pd.Series(["  ROCK CREEK ", None]))
    assert out.iloc[0] == "ROCK CREEK"
    assert pd.isna(out.iloc[1])


def test_dms_to_decimal():
    lat = dms_to_decimal(pd.Series(["38443000", "0", None]))
    assert lat.iloc[0] == pytest.approx(38.741667)
    assert lat.iloc[1:].isna().all()
    lon = dms_to_decimal(pd.Series(["076413000"]), negate=True)
    assert lon.iloc[0] == pytest.approx(-76.691667)
