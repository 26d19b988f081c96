"""
whitelist/logic/spreadsheet_reader.py
=====================================

Reads the first sheet of an uploaded CSV or Excel file into header names and
row dicts (all values as strings) for the column-mapping step of the bulk
whitelist import.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import pandas as pd

from core.exceptions.errors import ImportFormatError

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".csv", ".xlsx", ".xls")
EMPTY_FILE_MESSAGE = "The file appears to be empty."


@dataclass(frozen=True)
class SpreadsheetData:
    headers: List[str]
    rows: List[Dict[str, str]] = field(default_factory=list)


class SpreadsheetReader:
    """pandas-backed reader; ``.xlsx`` goes through openpyxl, legacy ``.xls`` through xlrd."""

    def read(self, path: str | Path) -> SpreadsheetData:
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix not in SUPPORTED_SUFFIXES:
            raise ImportFormatError(f"Unsupported file type: {suffix or path.name}")

        try:
            if suffix == ".csv":
                frame = pd.read_csv(path, dtype=str, keep_default_na=False)
            else:
                frame = pd.read_excel(path, sheet_name=0, dtype=str)
        except pd.errors.EmptyDataError:
            raise ImportFormatError(EMPTY_FILE_MESSAGE) from None
        except (ValueError, OSError) as exc:
            logger.error("Failed to read spreadsheet %s: %s", path, exc)
            raise ImportFormatError("Failed to process file. Ensure it is not corrupted.") from exc

        headers = [str(c).strip() or "Column" for c in frame.columns]
        if not headers:
            raise ImportFormatError(EMPTY_FILE_MESSAGE)
        frame.columns = headers
        frame = frame.fillna("")
        rows = [{h: str(v).strip() for h, v in record.items()}
                for record in frame.to_dict(orient="records")]
        logger.info("Read %d row(s) with %d column(s) from %s", len(rows), len(headers), path.name)
        return SpreadsheetData(headers=headers, rows=rows)
