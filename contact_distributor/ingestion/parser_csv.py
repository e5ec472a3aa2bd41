"""
CSV parser - streams a delimited-text contact list as raw row dicts.
Headers and values are trimmed; headers are lower-cased for matching.
"""

from pathlib import Path
from typing import Dict, Iterator, List
import csv
from contact_distributor.core.logging import setup_logger
from .errors import ParseError

logger = setup_logger()

SNIFF_SAMPLE_BYTES = 4096
CANDIDATE_DELIMITERS = ",;\t|"

RawRow = Dict[str, str]


def detect_delimiter(sample: str) -> str:
    """
    Guess the delimiter from a sample of the file.

    Args:
        sample: Leading text of the file

    Returns:
        Detected delimiter, ',' when the sample is ambiguous
    """
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=CANDIDATE_DELIMITERS)
        return dialect.delimiter
    except csv.Error:
        return ','


def clean_headers(raw_headers: List[str], lowercase: bool = True) -> List[str]:
    headers = [header.strip() for header in raw_headers]
    if lowercase:
        headers = [header.lower() for header in headers]
    return headers


def iter_csv_rows(
    file_path: str,
    lowercase_headers: bool = True,
    encoding: str = "utf-8-sig"
) -> Iterator[RawRow]:
    """
    Lazily read a CSV file, one raw row per data line.

    The first line is the header row. The sequence is single-pass: it holds
    an open file handle until exhausted. Blank lines are skipped; short rows
    are padded with empty strings.

    Args:
        file_path: Path to CSV file
        lowercase_headers: Lower-case header names (values keep their case)
        encoding: Text encoding; the default strips a UTF-8 BOM

    Yields:
        Mapping of header -> trimmed cell value

    Raises:
        ParseError: If the file cannot be opened, decoded or tokenised
    """
    name = Path(file_path).name
    try:
        with open(file_path, 'r', encoding=encoding, newline='') as f:
            sample = f.read(SNIFF_SAMPLE_BYTES)
            f.seek(0)
            delimiter = detect_delimiter(sample)
            logger.info(f"CSV delimiter detected for {name}: '{delimiter}'")

            reader = csv.reader(f, delimiter=delimiter)
            try:
                headers = clean_headers(next(reader), lowercase_headers)
            except StopIteration:
                return

            for line in reader:
                values = [value.strip() for value in line]
                if not any(values):
                    continue
                yield {
                    header: values[i] if i < len(values) else ""
                    for i, header in enumerate(headers)
                }
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error(f"CSV stream failed for {name}: {str(e)}")
        raise ParseError(
            f"Failed to read CSV file: {str(e)}",
            details={"file_name": name, "error_type": type(e).__name__}
        ) from e
