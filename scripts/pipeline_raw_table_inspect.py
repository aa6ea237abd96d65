import argparse
import json
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.configs.sources import SOURCES
from src.raw_table_inspector.inspector import parse_config, inspect_table


def inspect_all_sources(sources: dict, base_path: Path | None = None, nrows: int | None = None) -> dict:
    results = {}
    for name, cfg in sources.items():
        try:
            df = parse_config(cfg, base_path=base_path, nrows=nrows)
            results[name] = inspect_table(df)
        except (FileNotFoundError, ValueError) as e:
            results[name] = type(e).__name__ + ": " + str(e)
    return results


def _dataframe_to_markdown(df) -> str:
    """Format a DataFrame as a markdown table without requiring tabulate."""
    rows = [list(df.columns)]
    for _, r in df.iterrows():
        rows.append([str(x) for x in r])
    ncols = len(rows[0])
    widths = [max(len(str(rows[i][j])) for i in range(len(rows))) for j in range(ncols)]
    lines = []
    for i, row in enumerate(rows):
        line = "| " + " | ".join(str(x).ljust(widths[j]) for j, x in enumerate(row)) + " |"
        lines.append(line)
        if i == 0:
            sep = "| " + " | ".join(":" + "-" * max(2, w) for w in widths) + " |"
            lines.append(sep)
    return "\n".join(lines)


def inspect_to_markdown(results: dict) -> str:
    blocks = []
    for name, value in results.items():
        blocks.append(f"## {name}")
        if isinstance(value, str):
            blocks.append(f"`{value}`")
        else:
            blocks.append(_dataframe_to_markdown(value))
    return "\n\n".join(blocks)


def results_to_json(results: dict) -> dict:
    """Convert inspection results to a JSON-serializable dict."""
    out = {}
    for name, value in results.items():
        if isinstance(value, str):
            out[name] = {"error": value}
        else:
            out[name] = value.to_dict(orient="records")  # list of {"column", "dtype", "missing", "missing_pct"}
    return out


def main():
    parser = argparse.ArgumentParser(
        description="Inspect raw tables defined in src/configs/sources.py and report dtypes and missing values."
    )
    parser.add_argument(
        "--tables",
        type=str,
        default=None,
        help="Comma-separated table names (default: all in SOURCES)",
    )
    parser.add_argument(
        "--nrows",
        type=int,
        default=None,
        help="Only report on the first N rows of each table",
    )
    parser.add_argument(
        "--out",
        type=str,
        default="",
        help="Output file path. Use .json for JSON or .md for markdown; if empty, print to stdout.",
    )
    parser.add_argument(
        "--base-path",
        type=str,
        default=None,
        help="Project root for resolving relative paths (default: script's parent parent).",
    )
    args = parser.parse_args()

    base_path = Path(args.base_path) if args.base_path else project_root
    names = [t.strip() for t in args.tables.split(",")] if args.tables else list(SOURCES)
    unknown = [n for n in names if n not in SOURCES]
    if unknown:
        raise KeyError(f"Unknown tables: {unknown}. Available: {list(SOURCES)}")

    results = inspect_all_sources({n: SOURCES[n] for n in names}, base_path=base_path, nrows=args.nrows)
    as_json = args.out.lower().endswith(".json") if args.out else False

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        if as_json:
            out_path.write_text(json.dumps(results_to_json(results), indent=2), encoding="utf-8")
        else:
            out_path.write_text(inspect_to_markdown(results), encoding="utf-8")
        print(f"Wrote raw table report to: {out_path}")
    else:
        print(inspect_to_markdown(results))


if __name__ == "__main__":
    main()
