"""
Table Parser
Reads uploaded CSV / XLSX / XLS files into rows of raw cells (header row first)
"""

import csv
import io
from pathlib import Path
from typing import List

import xlrd
from openpyxl import load_workbook

from app.services.exceptions import TableParseError

SUPPORTED_EXTENSIONS = {".csv", ".xlsx", ".xls"}

_XLS_EMPTY_TYPES = (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK)


def _is_blank_row(cells: list) -> bool:
    return all(cell is None or (isinstance(cell, str) and not cell.strip()) for cell in cells)


def parse_csv_bytes(content: bytes) -> List[List[str]]:
    """Parse UTF-8 CSV bytes; blank lines are dropped and cells trimmed"""
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise TableParseError("File is not valid UTF-8 text. Save the CSV as UTF-8 and try again.") from e

    reader = csv.reader(io.StringIO(text))
    rows = []
    for row in reader:
        cells = [cell.strip() for cell in row]
        if not any(cells):
            continue
        rows.append(cells)
    return rows


def parse_excel_bytes(content: bytes) -> List[list]:
    """
    Parse the first worksheet of an .xlsx workbook

    Cell values are returned as openpyxl gives them (str, int, float,
    datetime, None); the import validator normalizes them.
    """
    try:
        workbook = load_workbook(filename=io.BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        raise TableParseError("Invalid or corrupted Excel file") from e

    try:
        if not workbook.sheetnames:
            raise TableParseError("Excel file has no sheets")
        sheet = workbook[workbook.sheetnames[0]]
        rows = []
        for values in sheet.iter_rows(values_only=True):
            cells = list(values)
            if _is_blank_row(cells):
                continue
            rows.append(cells)
        return rows
    finally:
        workbook.close()


def _xls_cell_value(cell, datemode: int):
    if cell.ctype in _XLS_EMPTY_TYPES:
        return None
    if cell.ctype == xlrd.XL_CELL_DATE:
        return xlrd.xldate.xldate_as_datetime(cell.value, datemode)
    if cell.ctype == xlrd.XL_CELL_NUMBER and float(cell.value).is_integer():
        # Whole numbers come back as floats (12345.0)
        return int(cell.value)
    return cell.value


def parse_xls_bytes(content: bytes) -> List[list]:
    """
    Parse the first worksheet of a legacy .xls workbook

    Date cells become datetimes and whole numbers ints, so rows look the
    same as the ones read from .xlsx files.
    """
    try:
        book = xlrd.open_workbook(file_contents=content)
    except Exception as e:
        raise TableParseError("Invalid or corrupted Excel file") from e

    try:
        if book.nsheets == 0:
            raise TableParseError("Excel file has no sheets")
        sheet = book.sheet_by_index(0)
        rows = []
        for index in range(sheet.nrows):
            cells = [_xls_cell_value(cell, book.datemode) for cell in sheet.row(index)]
            if _is_blank_row(cells):
                continue
            rows.append(cells)
        return rows
    finally:
        book.release_resources()


def parse_table(filename: str, content: bytes) -> list:
    """Dispatch on file extension"""
    extension = Path(filename or "").suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise TableParseError("Unsupported format. Use .csv, .xlsx or .xls.")
    if extension == ".csv":
        return parse_csv_bytes(content)
    if extension == ".xls":
        return parse_xls_bytes(content)
    return parse_excel_bytes(content)
