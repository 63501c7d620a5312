# --- START OF FILE excel_handler.py ---

import io
import logging
import os
from typing import Any, List, Optional

import openpyxl
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

# --- Header Styles (used by the truncated export) ---
thin_side = Side(border_style="thin", color="000000")
thin_border = Border(left=thin_side, right=thin_side, top=thin_side, bottom=thin_side)
header_font = Font(bold=True)
header_fill = PatternFill(fill_type="solid", start_color="D9E1F2", end_color="D9E1F2")
center_alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)


class ExcelReadError(Exception):
    """The file could not be read from disk."""
    pass


class ExcelParseError(Exception):
    """The file was read but is not a usable workbook."""
    pass


class ExcelWriteError(Exception):
    """The output workbook could not be saved."""
    pass


def _trim_trailing_blank_rows(rows: List[List[Any]]) -> List[List[Any]]:
    while rows and all(value is None for value in rows[-1]):
        rows.pop()
    return rows


def read_rows(data: bytes) -> List[List[Any]]:
    """
    Parses workbook bytes and returns the first sheet as a list of rows.

    Args:
        data: Raw content of an .xlsx file.

    Returns:
        A rectangular list of rows (row 0 is the header). Cells are the stored
        values, never formulas. Trailing blank rows are dropped.

    Raises:
        ExcelParseError: If the content is empty or not a readable workbook.
    """
    if not data:
        raise ExcelParseError("The file is empty.")
    workbook = None
    try:
        workbook = openpyxl.load_workbook(io.BytesIO(data), data_only=True)
        if not workbook.sheetnames:
            raise ExcelParseError("No sheet found in the Excel file.")
        sheet = workbook.worksheets[0]
        rows = [list(row) for row in sheet.iter_rows(values_only=True)]
    except ExcelParseError:
        raise
    except Exception as e:
        # Bad zip, missing parts and malformed sheet XML all surface here
        logging.error(f"Failed to parse workbook: {e}")
        raise ExcelParseError(f"Excel parsing error: {e}") from e
    finally:
        if workbook is not None:
            workbook.close()

    logging.debug(f"Read {len(rows)} row(s) from sheet '{sheet.title}'")
    return _trim_trailing_blank_rows(rows)


def write_rows(
    rows: List[List[Any]],
    output_path: str,
    sheet_name: str = "Sheet1",
    column_limit: Optional[int] = None,
    style_header: bool = False
) -> str:
    """
    Writes rows into a new single-sheet workbook.

    Args:
        rows: Rows to write; row 0 is treated as the header.
        output_path: Destination .xlsx path.
        sheet_name: Title of the sheet.
        column_limit: If set, every row is truncated to this many columns.
        style_header: Bold/bordered/filled header row plus an auto-filter over the data.

    Returns:
        The path written.
    """
    workbook = openpyxl.Workbook()
    sheet: Worksheet = workbook.active
    sheet.title = sheet_name

    for row in rows:
        values = list(row) if row is not None else []
        if column_limit is not None:
            values = values[:column_limit]
        sheet.append(values)

    if style_header and rows:
        for cell in sheet[1]:
            cell.font = header_font
            cell.border = thin_border
            cell.fill = header_fill
            cell.alignment = center_alignment
        sheet.auto_filter.ref = sheet.dimensions
        sheet.freeze_panes = "A2"

    try:
        workbook.save(output_path)
    except OSError as e:
        logging.error(f"Failed to save workbook '{output_path}': {e}")
        raise ExcelWriteError(f"Error while writing the file (I/O error): {output_path}") from e
    logging.info(f"Saved {len(rows)} row(s) to '{output_path}'")
    return output_path


class ExcelHandler:
    """Handles loading the first sheet of an Excel file into plain rows."""
    def __init__(self, file_path):
        if not os.path.exists(file_path):
            logging.error(f"File not found: {file_path}")
            raise ExcelReadError(f"Error while reading the file (I/O error): {file_path}")
        self.file_path = file_path
        self.file_name = os.path.basename(file_path)
        self.rows = None
        logging.info(f"Initialized ExcelHandler for: {file_path}")

    def load_rows(self) -> List[List[Any]]:
        """
        Reads the file and parses its first sheet.

        Returns:
            The rows of the first sheet.

        Raises:
            ExcelReadError: On any OS-level failure while reading.
            ExcelParseError: If the content is not a usable workbook.
        """
        try:
            with open(self.file_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            logging.error(f"Failed to read '{self.file_path}': {e}")
            raise ExcelReadError(f"Error while reading the file (I/O error): {self.file_path}") from e

        self.rows = read_rows(data)
        logging.info(f"Successfully loaded {len(self.rows)} row(s) from '{self.file_name}'")
        return self.rows

    def close(self):
        """Clears the cached rows."""
        if self.rows is not None:
            self.rows = None
            logging.info(f"Released rows for: {self.file_path}")

# --- END OF FILE excel_handler.py ---
