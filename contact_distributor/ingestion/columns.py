"""
Column resolution - maps spreadsheet header variants to canonical fields.

Uploaded lists come from many CRMs and hand-made sheets, so the same field
shows up as "First Name", "firstname", "Name", ... This module is the single
place that knows the accepted variants.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

NAME_ALIASES: Tuple[str, ...] = (
    "FirstName", "firstname", "first_name", "Name", "name", "First Name"
)
PHONE_ALIASES: Tuple[str, ...] = (
    "Phone", "phone", "contact", "mobile", "Mobile", "PhoneNumber", "Phone Number"
)
NOTES_ALIASES: Tuple[str, ...] = (
    "Notes", "notes", "description", "Description"
)


@dataclass(frozen=True)
class ColumnResolution:
    """Header chosen for each canonical field, or None when absent."""
    name_key: Optional[str] = None
    phone_key: Optional[str] = None
    notes_key: Optional[str] = None

    @property
    def missing_fields(self) -> List[str]:
        """Required canonical fields with no matching header."""
        missing = []
        if self.name_key is None:
            missing.append("firstName")
        if self.phone_key is None:
            missing.append("phone")
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields


def _find_header(headers: List[str], aliases: Tuple[str, ...]) -> Optional[str]:
    # Case-insensitive exact match; the first header (in file order) wins.
    accepted = {alias.lower() for alias in aliases}
    for header in headers:
        if isinstance(header, str) and header.lower() in accepted:
            return header
    return None


def resolve_columns(headers: Iterable[str]) -> ColumnResolution:
    """
    Find which headers hold the first name, phone and notes.

    Args:
        headers: Header names (or record keys) of one raw row

    Returns:
        ColumnResolution with the original header spelling for each field
    """
    header_list = list(headers)
    return ColumnResolution(
        name_key=_find_header(header_list, NAME_ALIASES),
        phone_key=_find_header(header_list, PHONE_ALIASES),
        notes_key=_find_header(header_list, NOTES_ALIASES),
    )
