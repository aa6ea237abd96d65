"""Bridge builder: reader, FIPS reference and record transformer for the NBI snapshots."""

from src.bridge_builder.reader import read, read_nbi, list_tables
from src.bridge_builder.reference import load_fips_reference, build_fips_lookup
from src.bridge_builder.transformer import transform_records, transform_record
from src.bridge_builder.builder import (
    build_reference_lookup,
    build_clean_nbi,
    build_all,
)
from src.bridge_builder.errors import SchemaError, ReferenceIntegrityError

__all__ = [
    "read",
    "read_nbi",
    "list_tables",
    "load_fips_reference",
    "build_fips_lookup",
    "transform_records",
    "transform_record",
    "build_reference_lookup",
    "build_clean_nbi",
    "build_all",
    "SchemaError",
    "ReferenceIntegrityError",
]
