"""
Contact list ingestion module with dispatcher pattern.
Supports: CSV, XLSX, XLS
"""

from .dispatcher import read_raw_rows
from .normalize import normalize_records, CanonicalRecord

__all__ = [
    "read_raw_rows",
    "normalize_records",
    "CanonicalRecord"
]
