# app/core/spreadsheet.py

"""
Read the first sheet of an uploaded statement into row dicts.
"""

import io
import logging

import pandas as pd

from app.core.errors import SpreadsheetParseError

logger = logging.getLogger(__name__)

# OLE2 Compound Document magic bytes (legacy .xls)
_OLE2_MAGIC = b"\xD0\xCF\x11\xE0\xA1\xB1\x1A\xE1"

HEADER_ROW = 1


def _engine_for(content: bytes) -> str:
    return "xlrd" if content[:8] == _OLE2_MAGIC else "openpyxl"


class SheetRows(list):
    """Row dicts, plus the spreadsheet row number each one was read from."""

    def __init__(self, records: list[dict], row_numbers: list[int]):
        super().__init__(records)
        self.row_numbers = row_numbers


def read_first_sheet(content: bytes, filename: str = "") -> SheetRows:
    """
    Parse the first sheet into one dict per data row.

    The first row is the header. Empty cells become None and fully empty
    rows are dropped; `row_numbers` keeps the original sheet position of
    the rows that remain. Raises SpreadsheetParseError if the workbook
    cannot be read.
    """
    if not content:
        raise SpreadsheetParseError(
            "Archivo vacío o sin datos",
            "El archivo Excel no contiene datos en la primera hoja",
        )

    try:
        df = pd.read_excel(
            io.BytesIO(content),
            sheet_name=0,
            dtype=object,
            engine=_engine_for(content),
        )
    except Exception as e:
        logger.warning("Could not read spreadsheet %s: %s", filename, e)
        raise SpreadsheetParseError(
            "No se pudo leer el archivo Excel",
            str(e),
        ) from e

    df.columns = [str(c).strip() for c in df.columns]
    df = df.dropna(how="all")

    # NaN/NaT -> None so downstream code sees plain Python blanks
    df = df.astype(object).where(pd.notna(df), None)

    # The index still counts the dropped blank rows; the header is row 1
    row_numbers = [int(i) + HEADER_ROW + 1 for i in df.index]
    return SheetRows(df.to_dict(orient="records"), row_numbers)
