"""
import_engine.csv_parser - Low-level reading of uploaded tables.

Responsibilities:
  • byte decoding (UTF-8 first, GBK fallback for Chinese-locale exports)
  • quote-aware line splitting
  • .xlsx worksheets flattened to the same row shape as CSV
  • blank-line filtering, keeping the original line numbers for errors
"""

from __future__ import annotations

import io
import re
from datetime import date, datetime
from pathlib import PurePath
from typing import Iterator

import openpyxl

from import_engine.errors import ImportFileError

_XLSX_SIGNATURE = b"PK\x03\x04"
_OLE_SIGNATURE = b"\xd0\xcf\x11\xe0"    # legacy .xls
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def decode_bytes(raw: str | bytes) -> str:
    """
    Decode upload bytes.  UTF-8 is tried first; a replacement character
    in the result means the file was not UTF-8, so the original bytes are
    decoded again as GBK.
    """
    if isinstance(raw, str):
        return raw[1:] if raw.startswith("\ufeff") else raw

    if raw.startswith(b"\xef\xbb\xbf"):
        raw = raw[3:]
    text = raw.decode("utf-8", errors="replace")
    if "\ufffd" in text:
        text = raw.decode("gbk", errors="replace")
    return text


def split_line(line: str, delimiter: str = ",") -> list[str]:
    """
    Split one line into trimmed fields.

    Double quotes open and close a span in which the delimiter is literal.
    The quote characters themselves are dropped and a doubled quote is not
    unescaped: ``a,"b,c",d`` gives ``["a", "b,c", "d"]``.
    """
    fields: list[str] = []
    buf: list[str] = []
    quoted = False
    for ch in line:
        if ch == '"':
            quoted = not quoted
        elif ch == delimiter and not quoted:
            fields.append("".join(buf).strip())
            buf = []
        else:
            buf.append(ch)
    fields.append("".join(buf).strip())
    return fields


def is_workbook(content: str | bytes, file_name: str = "") -> bool:
    suffix = PurePath(file_name).suffix.lower() if file_name else ""
    if suffix in (".xlsx", ".xlsm"):
        return True
    return isinstance(content, bytes) and content.startswith(_XLSX_SIGNATURE)


def read_table(content: str | bytes, file_name: str = "") -> tuple[list[str], list[tuple[int, list[str]]]]:
    """
    Return ``(headers, rows)`` where rows are ``(line_no, fields)`` pairs.

    Line numbers are 1-based and count the header line, so they match what
    an operator sees in a text editor or spreadsheet.  Blank lines are
    dropped.  Raises ImportFileError when there is nothing to import.
    """
    if not content:
        raise ImportFileError("file is empty")

    if isinstance(content, bytes) and content.startswith(_OLE_SIGNATURE):
        raise ImportFileError("legacy .xls workbooks are not supported, save as .xlsx or .csv")

    if is_workbook(content, file_name):
        lines = list(_iter_sheet_rows(content))
    else:
        lines = list(_iter_text_rows(decode_bytes(content)))

    if not lines:
        raise ImportFileError("file is empty")

    _, headers = lines[0]
    if not any(headers):
        raise ImportFileError("missing header row")
    return headers, lines[1:]


# ── Private helpers ────────────────────────────────────────────────────

def _iter_text_rows(text: str) -> Iterator[tuple[int, list[str]]]:
    for line_no, line in enumerate(_LINE_BREAK.split(text), start=1):
        if not line.strip():
            continue
        yield line_no, split_line(line)


def _iter_sheet_rows(content: str | bytes) -> Iterator[tuple[int, list[str]]]:
    if isinstance(content, str):
        raise ImportFileError("workbook upload must be binary")
    try:
        wb = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as exc:
        raise ImportFileError(f"unreadable workbook: {exc}") from exc

    try:
        ws = wb.worksheets[0] if wb.worksheets else None
        if ws is None:
            return
        for row_no, row in enumerate(ws.iter_rows(values_only=True), start=1):
            cells = [_cell_text(v) for v in row]
            if not any(cells):
                continue
            yield row_no, cells
    finally:
        wb.close()


def _cell_text(value) -> str:
    """Render a worksheet cell the way it would appear in a CSV export."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat(sep=" ") if isinstance(value, datetime) else value.isoformat()
    return str(value).strip()
