"""
Upload acceptance policy and temporary file handling.

Single source for which files are accepted (extension allow-list, size
limit) and where uploaded files live until the ingestion call removes them.
"""

import os
import random
import re
import time
from pathlib import Path
from typing import BinaryIO, Union
from contact_distributor.core.logging import setup_logger
from .errors import UnsupportedFormatError, UploadTooLargeError

logger = setup_logger()

ALLOWED_EXTENSIONS = ("csv", "xlsx", "xls")
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
COPY_BLOCK_BYTES = 64 * 1024

_UNSAFE_NAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def normalize_extension(value: str) -> str:
    """
    Reduce an extension or file name to a bare lower-case extension.

    "CSV", ".csv" and "contacts.CSV" all give "csv"; no extension gives "".
    """
    if not value:
        return ""
    value = value.strip().lower()
    if "." in value:
        value = value.rsplit(".", 1)[1]
    return value


def validate_extension(value: str) -> str:
    """
    Check a declared extension (or file name) against the allow-list.

    Returns:
        The normalized extension

    Raises:
        UnsupportedFormatError: If the extension is missing or not allowed
    """
    extension = normalize_extension(value)
    if not extension:
        raise UnsupportedFormatError(
            "File has no extension",
            details={"allowed_extensions": list(ALLOWED_EXTENSIONS)}
        )
    if extension not in ALLOWED_EXTENSIONS:
        raise UnsupportedFormatError(
            f"Invalid file type: {extension}. Only {', '.join(ALLOWED_EXTENSIONS)} files are allowed.",
            details={"extension": extension, "allowed_extensions": list(ALLOWED_EXTENSIONS)}
        )
    return extension


def build_upload_path(upload_dir: Union[str, Path], original_name: str) -> Path:
    """Unique destination path for an upload, creating the directory if needed."""
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    clean_name = _UNSAFE_NAME_CHARS.sub("_", Path(original_name or "upload").name)
    unique_prefix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return directory / f"{unique_prefix}-{clean_name}"


def save_upload(
    source: BinaryIO,
    destination: Union[str, Path],
    max_bytes: int = MAX_UPLOAD_BYTES
) -> int:
    """
    Copy an upload stream to disk, enforcing the size limit while copying.

    Returns:
        Number of bytes written

    Raises:
        UploadTooLargeError: If the stream exceeds max_bytes (partial file removed)
    """
    destination = Path(destination)
    written = 0
    with destination.open("wb") as buffer:
        while True:
            block = source.read(COPY_BLOCK_BYTES)
            if not block:
                break
            written += len(block)
            if written > max_bytes:
                break
            buffer.write(block)

    if written > max_bytes:
        destination.unlink(missing_ok=True)
        max_mb = max_bytes // (1024 * 1024)
        logger.warning(f"Upload rejected, exceeds {max_mb}MB: {destination.name}")
        raise UploadTooLargeError(
            f"File too large. Maximum size is {max_mb}MB.",
            details={"max_bytes": max_bytes}
        )

    logger.info(f"Upload saved to {destination} ({written} bytes)")
    return written


class LocalTempFileStore:
    """Temporary file store backed by the local filesystem."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def remove(self, path: str) -> None:
        os.remove(path)


def store_upload(
    source: BinaryIO,
    upload_dir: Union[str, Path],
    original_name: str,
    max_bytes: int = MAX_UPLOAD_BYTES
) -> Path:
    """
    Save an upload under a fresh name in upload_dir.

    Blocking; the API runs it in a worker thread. A partial file is
    removed when writing fails.

    Returns:
        Path of the saved file
    """
    destination = build_upload_path(upload_dir, original_name)
    try:
        save_upload(source, destination, max_bytes)
    except OSError:
        destination.unlink(missing_ok=True)
        raise
    return destination
