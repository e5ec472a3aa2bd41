"""
Excel parser - reads the first worksheet of an .xlsx/.xls workbook as raw row dicts.
"""

from pathlib import Path
from typing import Dict, List
import pandas as pd
from contact_distributor.core.logging import setup_logger
from .errors import ParseError

logger = setup_logger()

# pandas needs openpyxl for .xlsx and xlrd for legacy .xls
EXCEL_ENGINES = {
    "xlsx": "openpyxl",
    "xls": "xlrd",
}

RawRow = Dict[str, str]


def _cell_to_text(value) -> str:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value).strip()


def frame_to_rows(frame: pd.DataFrame) -> List[RawRow]:
    """
    Convert a sheet DataFrame to raw row dicts keyed by the sheet's header row.
    Fully blank rows are dropped.
    """
    headers = [str(column).strip() for column in frame.columns]
    rows = []
    for values in frame.itertuples(index=False, name=None):
        row = {header: _cell_to_text(value) for header, value in zip(headers, values)}
        if any(row.values()):
            rows.append(row)
    return rows


def read_excel_rows(file_path: str, extension: str = "xlsx") -> List[RawRow]:
    """
    Parse the first sheet of a workbook.

    Args:
        file_path: Path to the workbook
        extension: 'xlsx' or 'xls', selects the pandas engine

    Returns:
        List of header -> trimmed cell text mappings

    Raises:
        ParseError: If the workbook cannot be opened, has no sheets or no data rows
    """
    name = Path(file_path).name
    engine = EXCEL_ENGINES.get(extension, "openpyxl")
    logger.info(f"Parsing Excel workbook: {name} (engine: {engine})")

    try:
        with pd.ExcelFile(file_path, engine=engine) as workbook:
            if not workbook.sheet_names:
                raise ParseError(
                    "Excel file is empty or corrupted",
                    details={"file_name": name}
                )
            first_sheet = workbook.sheet_names[0]
            frame = workbook.parse(first_sheet, dtype=str, keep_default_na=False)
    except ParseError:
        raise
    except Exception as e:
        logger.error(f"Excel parsing failed for {name}: {str(e)}")
        raise ParseError(
            f"Failed to read Excel file: {str(e)}",
            details={"file_name": name, "error_type": type(e).__name__}
        ) from e

    rows = frame_to_rows(frame)
    if not rows:
        raise ParseError(
            "Excel file contains no data",
            details={"file_name": name, "sheet": first_sheet}
        )

    logger.info(
        f"Excel parsed successfully - sheet '{first_sheet}', "
        f"{len(rows)} rows, {len(frame.columns)} columns"
    )
    return rows
