"""
Pipeline: Build the cleaned NBI table for each survey year.

Loads the FIPS reference once (fips_geocodes in src/configs/sources.py), then for
each requested year reads nbi_<year>, transforms it via bridge_builder and writes
data/processed_data/nbi_clean_<year>.csv. Years are independent of each other.
"""

import argparse
import logging
import sys
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from src.bridge_builder.builder import build_clean_nbi, build_reference_lookup
from src.configs.sources import NBI_YEARS

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Build cleaned NBI tables (one CSV per survey year)")
    parser.add_argument(
        "--years",
        type=str,
        default=None,
        help=f"Comma-separated survey years (default: {','.join(str(y) for y in NBI_YEARS)})",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="data/processed_data",
        help="Output directory for nbi_clean_<year>.csv",
    )
    parser.add_argument(
        "--base-path",
        type=str,
        default=None,
        help="Project root (default: script parent)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress table head prints (only show INFO logs)",
    )
    args = parser.parse_args()

    base_path = Path(args.base_path) if args.base_path else project_root
    years = [int(y.strip()) for y in args.years.split(",")] if args.years else NBI_YEARS
    output_dir = base_path / args.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    print("Loading FIPS reference...")
    fips_lookup = build_reference_lookup(base_path)

    for year in years:
        print(f"Building cleaned NBI table for {year}...")
        df = build_clean_nbi(year, base_path, fips_lookup=fips_lookup)
        if not args.quiet:
            print(f"\n--- nbi_clean_{year} (final) ---\n{df.head()}\n")
        output_path = output_dir / f"nbi_clean_{year}.csv"
        df.to_csv(output_path, index=False)
        print(f"Saved {len(df)} rows to {output_path}")


if __name__ == "__main__":
    main()
    sys.exit(0)
