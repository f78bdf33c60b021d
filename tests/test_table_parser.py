"""
Unit tests for reading uploaded CSV / XLSX / XLS tables.
"""

import io
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import xlrd
from openpyxl import Workbook

from app.services.exceptions import TableParseError
from app.services.import_validator import validate_import
from app.services.table_parser import parse_csv_bytes, parse_excel_bytes, parse_table, parse_xls_bytes


def make_xlsx(rows) -> bytes:
    wb = Workbook()
    ws = wb.active
    for r in rows:
        ws.append(r)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


class TestCsv:
    def test_bom_blank_lines_and_quotes(self):
        content = '\ufeffName,Event\n\n"Doe, Jane", Bootcamp \n,\n'.encode("utf-8")
        assert parse_csv_bytes(content) == [["Name", "Event"], ["Doe, Jane", "Bootcamp"]]

    def test_dispatch_by_extension(self):
        assert parse_table("people.CSV", b"a,b\n1,2\n") == [["a", "b"], ["1", "2"]]

    def test_accented_utf8_names_survive(self):
        content = "Name,Event\nJos\u00e9 M\u00fcller,Bootcamp\n".encode("utf-8")
        assert parse_csv_bytes(content)[1][0] == "Jos\u00e9 M\u00fcller"

    def test_non_utf8_file_is_rejected(self):
        content = "Name,Event,Start Date,End Date\nJos\u00e9 M\u00fcller,Bootcamp,10-04-2026,12-04-2026\n".encode("latin-1")
        with pytest.raises(TableParseError, match="not valid UTF-8"):
            parse_table("attendees.csv", content)


class TestExcel:
    def test_first_sheet_values(self):
        content = make_xlsx([
            ["Name", "Event", "Start Date", "End Date", "Certificate Number"],
            ["Jane Doe", "Bootcamp", datetime(2026, 4, 10), datetime(2026, 4, 12), None],
            [None, None, None, None, None],
            ["John Roe", "Bootcamp", "2026-04-10", "2026-04-12", 12345],
        ])
        rows = parse_excel_bytes(content)
        assert len(rows) == 3
        assert rows[1][0] == "Jane Doe"
        assert rows[2][4] == 12345

    def test_spreadsheet_rows_validate(self):
        content = make_xlsx([
            ["Participant Name", "Event Name", "Event Start Date", "Event End Date"],
            ["Jane Doe", "Bootcamp", datetime(2026, 4, 10), datetime(2026, 4, 12)],
        ])
        result = validate_import(parse_table("attendees.xlsx", content))[0]
        assert result.is_valid
        assert result.data.event_start_date == "2026-04-10"

    def test_corrupted_file(self):
        with pytest.raises(TableParseError, match="Invalid or corrupted Excel file"):
            parse_excel_bytes(b"not a zip archive")


def xls_cell(ctype, value=""):
    return SimpleNamespace(ctype=ctype, value=value)


def fake_xls_book(rows):
    sheet = MagicMock()
    sheet.nrows = len(rows)
    sheet.row.side_effect = lambda index: rows[index]
    book = MagicMock()
    book.nsheets = 1
    book.datemode = 0
    book.sheet_by_index.return_value = sheet
    return book


class TestXls:
    @patch("app.services.table_parser.xlrd.open_workbook")
    def test_first_sheet_values(self, mock_open):
        book = fake_xls_book([
            [xls_cell(xlrd.XL_CELL_TEXT, "Name"), xls_cell(xlrd.XL_CELL_TEXT, "Event"),
             xls_cell(xlrd.XL_CELL_TEXT, "Start Date"), xls_cell(xlrd.XL_CELL_TEXT, "End Date"),
             xls_cell(xlrd.XL_CELL_TEXT, "Certificate Number")],
            [xls_cell(xlrd.XL_CELL_EMPTY), xls_cell(xlrd.XL_CELL_BLANK), xls_cell(xlrd.XL_CELL_EMPTY),
             xls_cell(xlrd.XL_CELL_EMPTY), xls_cell(xlrd.XL_CELL_EMPTY)],
            [xls_cell(xlrd.XL_CELL_TEXT, "Jane Doe"), xls_cell(xlrd.XL_CELL_TEXT, "Bootcamp"),
             xls_cell(xlrd.XL_CELL_DATE, 46122.0), xls_cell(xlrd.XL_CELL_TEXT, "12-04-2026"),
             xls_cell(xlrd.XL_CELL_NUMBER, 12345.0)],
        ])
        mock_open.return_value = book

        rows = parse_table("attendees.XLS", b"xls bytes")

        mock_open.assert_called_once_with(file_contents=b"xls bytes")
        book.release_resources.assert_called_once()
        assert len(rows) == 2
        assert rows[1][0] == "Jane Doe"
        assert rows[1][2] == datetime(2026, 4, 10)
        assert rows[1][4] == 12345

        result = validate_import(rows)[0]
        assert result.is_valid
        assert result.data.event_start_date == "2026-04-10"
        assert result.data.event_end_date == "2026-04-12"
        assert result.data.certificate_number == "12345"

    @patch("app.services.table_parser.xlrd.open_workbook")
    def test_no_sheets(self, mock_open):
        book = fake_xls_book([])
        book.nsheets = 0
        mock_open.return_value = book
        with pytest.raises(TableParseError, match="no sheets"):
            parse_xls_bytes(b"xls bytes")

    def test_corrupted_file(self):
        with pytest.raises(TableParseError, match="Invalid or corrupted Excel file"):
            parse_table("attendees.xls", b"not a workbook")


def test_unsupported_extension():
    with pytest.raises(TableParseError, match="Unsupported format"):
        parse_table("attendees.ods", b"")
    with pytest.raises(TableParseError):
        parse_table("attendees", b"")
