"""
Pipeline: Build the county-level FIPS reference table.

Reads fips_geocodes (src/configs/sources.py), derives combined_fips and
combined_place_fips, keeps county-level rows and checks that every county
combined_fips is unique. Output: summary_level, combined_fips,
combined_place_fips, area_name.
"""

import argparse
import sys
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from src.bridge_builder.reference import build_fips_lookup, load_fips_reference


def main():
    parser = argparse.ArgumentParser(
        description="Build county-level FIPS reference table (combined_fips -> area name)"
    )
    parser.add_argument(
        "--output",
        type=str,
        default="data/processed_data/fips_reference.csv",
        help="Output CSV path",
    )
    parser.add_argument(
        "--base-path",
        type=str,
        default=None,
        help="Project root for data paths (default: project root)",
    )
    args = parser.parse_args()

    base = Path(args.base_path) if args.base_path else project_root
    out_path = base / args.output
    out_path.parent.mkdir(parents=True, exist_ok=True)

    print("Building FIPS reference table...")
    df = load_fips_reference(base_path=base)
    lookup = build_fips_lookup(df)
    df.to_csv(out_path, index=False)
    print(f"Saved {len(df)} rows ({len(lookup)} counties) to {out_path}")


if __name__ == "__main__":
    main()
    sys.exit(0)
