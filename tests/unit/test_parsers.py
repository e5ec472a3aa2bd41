"""
Tests for the CSV and Excel parsers and the extension dispatcher.
"""

import types

import pandas as pd
import pytest

from contact_distributor.ingestion.dispatcher import read_raw_rows, get_row_reader
from contact_distributor.ingestion.errors import ParseError, UnsupportedFormatError
from contact_distributor.ingestion.parser_csv import iter_csv_rows, detect_delimiter
from contact_distributor.ingestion.parser_excel import read_excel_rows


class TestCsvParser:
    """Streaming delimited-text parsing."""

    def test_headers_lowercased_and_values_trimmed(self, write_file):
        path = write_file("contacts.csv", " First Name , Phone ,Notes\n  Alice , 555-0100 , Call AM \n")

        rows = list(iter_csv_rows(path))

        assert rows == [{"first name": "Alice", "phone": "555-0100", "notes": "Call AM"}]

    def test_original_header_case_can_be_kept(self, write_file):
        path = write_file("contacts.csv", "FirstName,Phone\nAlice,1\n")

        rows = list(iter_csv_rows(path, lowercase_headers=False))

        assert rows == [{"FirstName": "Alice", "Phone": "1"}]

    def test_rows_are_produced_lazily(self, write_file):
        path = write_file("contacts.csv", "name,phone\nAlice,1\nBob,2\n")

        rows = iter_csv_rows(path)

        assert isinstance(rows, types.GeneratorType)
        assert next(rows) == {"name": "Alice", "phone": "1"}
        assert next(rows) == {"name": "Bob", "phone": "2"}
        with pytest.raises(StopIteration):
            next(rows)

    def test_blank_lines_skipped_and_short_rows_padded(self, write_file):
        path = write_file("contacts.csv", "name,phone,notes\nAlice,1\n\n,,\nBob,2,x\n")

        rows = list(iter_csv_rows(path))

        assert rows == [
            {"name": "Alice", "phone": "1", "notes": ""},
            {"name": "Bob", "phone": "2", "notes": "x"},
        ]

    def test_semicolon_delimiter_detected(self, write_file):
        path = write_file("contacts.csv", "name;phone;notes\nAlice;1;a\nBob;2;b\n")

        rows = list(iter_csv_rows(path))

        assert rows[1] == {"name": "Bob", "phone": "2", "notes": "b"}

    def test_quoted_values_keep_commas(self, write_file):
        path = write_file("contacts.csv", 'name,phone,notes\nAlice,1,"call, then email"\nBob,2,none\n')

        rows = list(iter_csv_rows(path))

        assert rows[0]["notes"] == "call, then email"

    def test_utf8_bom_is_stripped_from_first_header(self, write_file):
        path = write_file("contacts.csv", "\ufeffname,phone\nAlice,1\n".encode("utf-8"))

        rows = list(iter_csv_rows(path))

        assert list(rows[0].keys()) == ["name", "phone"]

    def test_undecodable_file_raises_parse_error(self, write_file):
        path = write_file("contacts.csv", b"name,phone\n\xff\xfe\xfa,1\n")

        with pytest.raises(ParseError):
            list(iter_csv_rows(path))

    def test_missing_file_raises_parse_error(self, tmp_path):
        with pytest.raises(ParseError):
            list(iter_csv_rows(str(tmp_path / "missing.csv")))

    def test_delimiter_defaults_to_comma(self):
        assert detect_delimiter("name") == ","


class TestExcelParser:
    """First-sheet workbook parsing."""

    def test_reads_first_sheet_with_its_header_row(self, tmp_path):
        path = tmp_path / "contacts.xlsx"
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            pd.DataFrame({
                "FirstName": ["Alice", "Bob"],
                "Phone": [5550100, 5550101],
                "Notes": ["VIP", None],
            }).to_excel(writer, sheet_name="Leads", index=False)
            pd.DataFrame({"Other": ["ignored"]}).to_excel(writer, sheet_name="Second", index=False)

        rows = read_excel_rows(str(path), "xlsx")

        assert rows == [
            {"FirstName": "Alice", "Phone": "5550100", "Notes": "VIP"},
            {"FirstName": "Bob", "Phone": "5550101", "Notes": ""},
        ]

    def test_header_only_sheet_raises_parse_error(self, tmp_path):
        path = tmp_path / "empty.xlsx"
        pd.DataFrame(columns=["FirstName", "Phone"]).to_excel(path, index=False, engine="openpyxl")

        with pytest.raises(ParseError) as exc_info:
            read_excel_rows(str(path), "xlsx")

        assert "no data" in exc_info.value.message

    def test_corrupted_workbook_raises_parse_error(self, write_file):
        path = write_file("broken.xlsx", b"this is not a zip archive")

        with pytest.raises(ParseError) as exc_info:
            read_excel_rows(path, "xlsx")

        assert exc_info.value.details["file_name"] == "broken.xlsx"

    def test_fully_blank_rows_are_dropped(self, tmp_path):
        path = tmp_path / "gaps.xlsx"
        pd.DataFrame({
            "Name": ["Alice", None, "Carol"],
            "Phone": ["1", None, "3"],
        }).to_excel(path, index=False, engine="openpyxl")

        rows = read_excel_rows(str(path), "xlsx")

        assert [row["Name"] for row in rows] == ["Alice", "Carol"]

    def test_xls_is_read_with_xlrd(self, write_file):
        path = write_file("legacy.xls", b"this is not a BIFF workbook")

        with pytest.raises(ParseError) as exc_info:
            read_excel_rows(path, "xls")

        assert exc_info.value.details["error_type"] == "XLRDError"

    def test_xlsx_content_under_xls_name_is_rejected_by_xlrd(self, tmp_path):
        path = tmp_path / "renamed.xls"
        pd.DataFrame({"Name": ["Alice"], "Phone": ["1"]}).to_excel(
            tmp_path / "source.xlsx", index=False, engine="openpyxl"
        )
        (tmp_path / "source.xlsx").rename(path)

        with pytest.raises(ParseError) as exc_info:
            read_excel_rows(str(path), "xls")

        assert exc_info.value.details["error_type"] == "XLRDError"
        assert "xlsx" in exc_info.value.message


class TestDispatcher:
    """Extension-based parser selection."""

    def test_unsupported_extension_fails_before_reading(self, tmp_path):
        # The file does not exist: the extension check must come first
        with pytest.raises(UnsupportedFormatError):
            read_raw_rows(str(tmp_path / "contacts.txt"), "txt")

    def test_extension_is_case_insensitive(self):
        assert get_row_reader(".CSV") is iter_csv_rows

    def test_csv_rows_fully_materialized(self, write_file):
        path = write_file("contacts.csv", "name,phone\nAlice,1\nBob,2\n")

        rows = read_raw_rows(path, "csv")

        assert isinstance(rows, list)
        assert len(rows) == 2

    def test_header_only_csv_raises_parse_error(self, write_file):
        path = write_file("contacts.csv", "name,phone\n")

        with pytest.raises(ParseError):
            read_raw_rows(path, "csv")

    def test_empty_csv_raises_parse_error(self, write_file):
        path = write_file("contacts.csv", "")

        with pytest.raises(ParseError):
            read_raw_rows(path, "csv")

    def test_excel_routed_by_extension(self, tmp_path):
        path = tmp_path / "contacts.xlsx"
        pd.DataFrame({"Name": ["Alice"], "Phone": ["1"]}).to_excel(path, index=False, engine="openpyxl")

        assert read_raw_rows(str(path), "xlsx") == [{"Name": "Alice", "Phone": "1"}]
