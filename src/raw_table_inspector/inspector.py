from pathlib import Path

import pandas as pd

from src.bridge_builder.reader import _normalize_columns, _read_file, _resolve_path


def parse_config(cfg: dict, base_path: Path | None = None, nrows: int | None = None) -> pd.DataFrame:
    """
    Load a raw table from a source config (path, format, read_dtypes, ...).
    Paths are resolved against base_path when provided; nrows keeps only the
    first rows, which is enough to report dtypes of wide NBI files quickly.
    """
    path = _resolve_path(cfg["path"], base_path)
    if not path.exists():
        raise FileNotFoundError(f"Data not found: {path}")
    df = _normalize_columns(_read_file(path, cfg))
    return df.head(nrows) if nrows is not None else df


def inspect_dtypes(df: pd.DataFrame) -> pd.DataFrame:
    """Return a small DataFrame listing each column and its dtype."""
    return (
        df.dtypes.astype(str)
        .reset_index()
        .rename(columns={"index": "column", 0: "dtype"})
    )


def inspect_missing(df: pd.DataFrame) -> pd.DataFrame:
    """Missing value count and percentage per column."""
    n = len(df)
    missing = df.isna().sum()
    return pd.DataFrame({
        "column": list(df.columns),
        "missing": [int(missing[c]) for c in df.columns],
        "missing_pct": [round(100.0 * int(missing[c]) / n, 2) if n else 0.0 for c in df.columns],
    })


def inspect_table(df: pd.DataFrame) -> pd.DataFrame:
    """Dtype and missing-value report, one row per column."""
    return inspect_dtypes(df).merge(inspect_missing(df), on="column", how="left")
