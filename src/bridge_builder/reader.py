"""
Generic reader: load any table from SOURCES config into a DataFrame.

Single entry point for all source types. Handles format (csv/xlsx) with
encoding fallback, read-time dtypes, required columns, filters,
combine_columns and rename/select of canonical columns.
"""

import logging
from pathlib import Path

import pandas as pd

from src.bridge_builder.errors import SchemaError
from src.configs.sources import SOURCES

logger = logging.getLogger(__name__)


def _resolve_path(path_str: str, base_path: Path | None) -> Path:
    p = Path(path_str)
    if not p.is_absolute() and base_path is not None:
        return base_path / p
    return p


def _parse_read_dtypes(read_dtypes: dict) -> dict:
    """Convert schema dtype names to types usable by read_csv/read_excel."""
    type_map = {"string": str, "str": str, "float64": float, "float": float, "int64": int, "int": int}
    out = {}
    for col, dtype in read_dtypes.items():
        if isinstance(dtype, type):
            out[col] = dtype
        else:
            out[col] = type_map.get(dtype, dtype)
    return out


def _read_csv(path: Path, sep: str | None = None, quotechar: str = '"', dtype: dict | None = None) -> pd.DataFrame:
    """Read CSV with encoding/delimiter fallback (utf-16 BOM, utf-8, latin-1; comma or tab).

    low_memory=False makes pandas infer each column's type from the whole file,
    so numeric values that only appear late in a wide file are not misread.
    """
    with open(path, "rb") as f:
        head = f.read(4)
    kwargs = {"low_memory": False, "quotechar": quotechar}
    if dtype is not None:
        kwargs["dtype"] = dtype
    if head[:2] in (b"\xff\xfe", b"\xfe\xff"):
        return pd.read_csv(path, encoding="utf-16", sep=sep or "\t", **kwargs)
    for enc in ("utf-8", "latin-1", "cp1252"):
        for delim in ([sep] if sep is not None else [",", "\t"]):
            try:
                return pd.read_csv(path, encoding=enc, sep=delim, **kwargs)
            except (UnicodeDecodeError, pd.errors.ParserError):
                continue
    return pd.read_csv(path, encoding="utf-8", sep=sep or ",", **kwargs)


def _read_file(path: Path, spec: dict) -> pd.DataFrame:
    fmt = spec.get("format", "csv").lower()
    dtype = _parse_read_dtypes(spec["read_dtypes"]) if spec.get("read_dtypes") else None
    if fmt == "xlsx":
        read_kw: dict = {"engine": "openpyxl"}
        if "sheet" in spec:
            read_kw["sheet_name"] = spec["sheet"]
        if "skiprows" in spec:
            read_kw["skiprows"] = spec["skiprows"]
        if dtype:
            read_kw["dtype"] = dtype
        return pd.read_excel(path, **read_kw)
    if fmt == "csv":
        return _read_csv(path, sep=spec.get("sep"), quotechar=spec.get("quotechar", '"'), dtype=dtype)
    raise ValueError(f"Unsupported format: {fmt}")


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Collapse newlines/multi-space in column names to single spaces and strip."""
    def _norm_col(c):
        if not isinstance(c, str):
            return c
        return " ".join(c.replace("\n", " ").replace("\r", " ").split()).strip()
    df.columns = [_norm_col(c) for c in df.columns]
    return df


def _required_columns(spec: dict) -> list[str]:
    if "required_columns" in spec:
        return list(spec["required_columns"])
    return list(spec.get("read_dtypes", {}))


def _check_required(df: pd.DataFrame, required: list[str], table_name: str) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise SchemaError(f"Table '{table_name}' is missing required columns: {missing}")


def _apply_filters(df: pd.DataFrame, filters: dict) -> pd.DataFrame:
    """Keep rows whose column equals the value (compared as stripped strings)."""
    for col, val in filters.items():
        if col not in df.columns:
            continue
        ser = df[col].astype("string").str.strip()
        if isinstance(val, list):
            df = df[ser.isin([str(v) for v in val]).fillna(False)]
        else:
            df = df[(ser == str(val)).fillna(False)]
    return df


def _apply_combine_columns(df: pd.DataFrame, combine_config: dict) -> pd.DataFrame:
    """Concatenate zero-padded parts (e.g. state 2 + county 3 -> 5-digit FIPS).

    A missing part makes the combined value missing rather than "nan".
    """
    df = df.copy()
    for out_col, spec in combine_config.items():
        from_cols = spec["from"]
        zfill_list = spec.get("zfill", [2, 3])
        parts = [
            df[c].astype("string").str.strip().str.zfill(zfill_list[i] if i < len(zfill_list) else 0)
            for i, c in enumerate(from_cols)
        ]
        combined = parts[0]
        for part in parts[1:]:
            combined = combined + part
        df[out_col] = combined
    return df


def _rename_and_select(df: pd.DataFrame, keys: dict, value_columns: dict) -> pd.DataFrame:
    rename = {}
    if keys:
        rename.update({v: k for k, v in keys.items()})
    if value_columns:
        rename.update({v: k for k, v in value_columns.items()})
    df = df.rename(columns=rename)
    keep = list((keys or {}).keys()) + list((value_columns or {}).keys())
    keep = [c for c in keep if c in df.columns]
    return df[keep].copy()


def read(table_name: str, base_path: Path | None = None) -> pd.DataFrame:
    """Load a single table from SOURCES into a DataFrame.

    Args:
        table_name: Key in SOURCES (e.g. 'fips_geocodes', 'nbi_2017').
        base_path: Project root for resolving relative paths.

    Returns:
        DataFrame with canonical column names when the source defines keys /
        value_columns, otherwise the raw columns as read.

    Raises:
        KeyError: table_name is not configured.
        FileNotFoundError: the source file does not exist.
        SchemaError: a required column is missing from the file.
    """
    if table_name not in SOURCES:
        raise KeyError(f"Unknown table '{table_name}'. Available: {list(SOURCES)}")
    spec = SOURCES[table_name]

    path = _resolve_path(spec["path"], base_path)
    if not path.exists():
        raise FileNotFoundError(f"Data not found: {path}")
    df = _normalize_columns(_read_file(path, spec))
    logger.info(f"Read {table_name}: {len(df)} rows, {len(df.columns)} columns from {path.name}")

    _check_required(df, _required_columns(spec), table_name)

    if "filters" in spec:
        df = _apply_filters(df, spec["filters"])
        logger.info(f"After filter: {len(df)} rows")

    if "combine_columns" in spec:
        df = _apply_combine_columns(df, spec["combine_columns"])

    keys = spec.get("keys", {})
    value_columns = spec.get("value_columns", {})
    if keys or value_columns:
        df = _rename_and_select(df, keys, value_columns)

    return df.reset_index(drop=True)


def read_nbi(year: int, base_path: Path | None = None) -> pd.DataFrame:
    """Load the raw NBI snapshot for one survey year."""
    return read(f"nbi_{year}", base_path)


def list_tables() -> list[str]:
    """Return all available table names from SOURCES."""
    return list(SOURCES)
