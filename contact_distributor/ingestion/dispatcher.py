"""
Ingestion dispatcher - routes contact files to the matching parser by extension.
Both parsers are exposed through one interface returning raw row dicts.
"""

from pathlib import Path
from typing import Callable, Dict, Iterable, List
from contact_distributor.core.logging import setup_logger
from .errors import ParseError
from .uploads import validate_extension

logger = setup_logger()

RawRow = Dict[str, str]

# Extension to format mapping
EXTENSION_MAP = {
    'csv': 'csv',
    'xlsx': 'excel',
    'xls': 'excel'
}


def get_row_reader(extension: str) -> Callable[[str], Iterable[RawRow]]:
    """
    Select the parser for a declared extension.

    Raises:
        UnsupportedFormatError: If the extension is not csv, xlsx or xls
    """
    extension = validate_extension(extension)
    file_format = EXTENSION_MAP[extension]

    if file_format == 'csv':
        from .parser_csv import iter_csv_rows
        return iter_csv_rows

    from .parser_excel import read_excel_rows
    return lambda file_path: read_excel_rows(file_path, extension)


def read_raw_rows(file_path: str, extension: str) -> List[RawRow]:
    """
    Parse a contact file fully into memory.

    The CSV reader is lazy; this drains it completely so callers never see a
    partial row set.

    Args:
        file_path: Path to the uploaded file
        extension: Declared extension (csv, xlsx, xls)

    Returns:
        List of raw row dicts, never empty

    Raises:
        UnsupportedFormatError: If the extension is not allowed (file is not opened)
        ParseError: If the file cannot be read or holds no data rows
    """
    extension = validate_extension(extension)
    reader = get_row_reader(extension)
    name = Path(file_path).name

    logger.info(f"Dispatching file to {EXTENSION_MAP[extension].upper()} parser: {name}")

    try:
        rows = list(reader(file_path))
    except ParseError:
        raise
    except Exception as e:
        logger.error(f"Parser error for {name}: {str(e)}")
        raise ParseError(
            f"Failed to parse file {name}: {str(e)}",
            details={"file_name": name, "error_type": type(e).__name__}
        ) from e

    if not rows:
        raise ParseError(
            "The file appears to be empty",
            details={"file_name": name}
        )

    logger.info(f"Parsing complete - {len(rows)} rows read from {name}")
    return rows
