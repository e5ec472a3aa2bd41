"""
Record normalization - turns raw parsed rows into canonical contact records.
Pure transform, no I/O.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence
from contact_distributor.core.logging import setup_logger
from .columns import (
    ColumnResolution,
    resolve_columns,
    NAME_ALIASES,
    PHONE_ALIASES,
)
from .errors import ValidationError

logger = setup_logger()


@dataclass(frozen=True)
class CanonicalRecord:
    """One contact, independent of the source file's column names."""
    first_name: str
    phone: str
    notes: str = ""

    def to_dict(self) -> Dict[str, str]:
        """Wire/storage shape shared with the frontend."""
        return {
            "firstName": self.first_name,
            "phone": self.phone,
            "notes": self.notes
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CanonicalRecord":
        return cls(
            first_name=_text(data.get("firstName")),
            phone=_text(data.get("phone")),
            notes=_text(data.get("notes")),
        )


@dataclass
class RowIssue:
    row_index: int  # 1-based
    missing_fields: List[str] = field(default_factory=list)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _row_issue(row_index: int, first_name: str, phone: str) -> Optional[RowIssue]:
    missing = []
    if not first_name:
        missing.append("firstName")
    if not phone:
        missing.append("phone")
    return RowIssue(row_index, missing) if missing else None


def _invalid_rows_error(issues: List[RowIssue]) -> ValidationError:
    indices = [issue.row_index for issue in issues]
    row_word = "row" if len(indices) == 1 else "rows"
    return ValidationError(
        f"Found {len(indices)} invalid {row_word} missing required data. "
        f"Check {row_word}: {', '.join(str(i) for i in indices)}",
        row_indices=indices,
        details={
            "rows": [
                {"row": issue.row_index, "missing": issue.missing_fields}
                for issue in issues
            ]
        }
    )


def normalize_records(
    raw_rows: Sequence[Mapping[str, Any]],
    resolution: Optional[ColumnResolution] = None
) -> List[CanonicalRecord]:
    """
    Build canonical records from raw rows.

    Columns are resolved once from the first row's headers and applied to
    every row. All invalid rows are collected before failing.

    Args:
        raw_rows: Parsed rows (header -> value)
        resolution: Pre-computed column resolution (resolved from row 1 if omitted)

    Returns:
        Canonical records in input order

    Raises:
        ValidationError: If there are no rows, a required column cannot be
            resolved, or any row has an empty name or phone
    """
    if not raw_rows:
        raise ValidationError("The file is empty. Please upload a file with data.")

    if resolution is None:
        resolution = resolve_columns(raw_rows[0].keys())

    if not resolution.is_complete:
        found = [str(header) for header in raw_rows[0].keys()]
        logger.warning(
            f"Required columns not found: {resolution.missing_fields} "
            f"(found columns: {found})"
        )
        # Every row lacks the unresolved field, so every row is reported.
        raise ValidationError(
            "Invalid file structure. Required columns not found. "
            f"File must contain a name column ({', '.join(NAME_ALIASES)}) "
            f"and a phone column ({', '.join(PHONE_ALIASES)})",
            row_indices=list(range(1, len(raw_rows) + 1)),
            missing_columns=resolution.missing_fields,
            details={"found_columns": found}
        )

    records = []
    issues = []
    for index, row in enumerate(raw_rows, 1):
        first_name = _text(row.get(resolution.name_key))
        phone = _text(row.get(resolution.phone_key))
        notes = _text(row.get(resolution.notes_key)) if resolution.notes_key else ""

        issue = _row_issue(index, first_name, phone)
        if issue:
            issues.append(issue)
            continue
        records.append(CanonicalRecord(first_name=first_name, phone=phone, notes=notes))

    if issues:
        logger.warning(f"Validation failed for {len(issues)} of {len(raw_rows)} rows")
        raise _invalid_rows_error(issues)

    logger.info(
        f"Normalized {len(records)} records "
        f"(name: '{resolution.name_key}', phone: '{resolution.phone_key}', "
        f"notes: '{resolution.notes_key}')"
    )
    return records
