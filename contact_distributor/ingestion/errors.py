"""
Error taxonomy for contact-list ingestion.

Every failure the pipeline can report is an IngestionError subclass with a
stable `kind` string, so the HTTP layer can map it to a status code and the
frontend can branch on it without parsing messages.
"""

from typing import Any, Dict, List, Optional


class IngestionError(Exception):
    """Structured ingestion error with details."""

    kind = "IngestionError"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "kind": self.kind,
            "message": self.message,
            "details": self.details
        }


class UnsupportedFormatError(IngestionError):
    """File extension is not on the allow-list. Raised before the file is read."""

    kind = "UnsupportedFormat"


class UploadTooLargeError(IngestionError):
    kind = "UploadTooLarge"


class ParseError(IngestionError):
    """Source file is corrupt, unreadable or has no rows."""

    kind = "ParseError"


class ValidationError(IngestionError):
    """
    File parsed but the rows are incomplete.

    `row_indices` are 1-based data-row positions (the header row is not
    counted) so they can be shown to the uploader as-is.
    """

    kind = "ValidationError"

    def __init__(
        self,
        message: str,
        row_indices: Optional[List[int]] = None,
        missing_columns: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.row_indices = list(row_indices or [])
        self.missing_columns = list(missing_columns or [])
        merged = dict(details or {})
        if self.row_indices:
            merged["row_indices"] = self.row_indices
        if self.missing_columns:
            merged["missing_columns"] = self.missing_columns
        super().__init__(message, merged)


class NoAgentsError(IngestionError):
    kind = "NoAgentsError"


class DistributionPersistError(IngestionError):
    """Storage failure while replacing the previous distribution."""

    kind = "DistributionPersistError"
