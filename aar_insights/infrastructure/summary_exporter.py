"""Summary export targets: a JSON snapshot and a formatted Excel workbook."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence

import polars as pl
import xlsxwriter
from openpyxl import Workbook

from aar_insights.logger import get_logger

logger = get_logger(__name__)

# rates are stored as 0-100, so the sign is a literal suffix
PERCENT_FORMAT = '0.0"%"'
CURRENCY_FORMAT = '"$"#,##0'
COUNT_FORMAT = "#,##0"

SHEET_NAME_LIMIT = 31


@dataclass(frozen=True)
class SheetSpec:
    """One workbook tab: its rows plus the number format of each typed column."""

    name: str
    frame: pl.DataFrame
    percent_columns: Sequence[str] = field(default_factory=tuple)
    currency_columns: Sequence[str] = field(default_factory=tuple)
    count_columns: Sequence[str] = field(default_factory=tuple)

    @property
    def title(self) -> str:
        return self.name[:SHEET_NAME_LIMIT]

    def column_formats(self) -> Dict[str, str]:
        formats: Dict[str, str] = {}
        for columns, number_format in (
            (self.percent_columns, PERCENT_FORMAT),
            (self.currency_columns, CURRENCY_FORMAT),
            (self.count_columns, COUNT_FORMAT),
        ):
            for column in columns:
                if column in self.frame.columns:
                    formats[column] = number_format
        return formats


def save_summary_json(path: Path, summary: Mapping[str, Any]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(summary, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.debug("Wrote summary JSON with sections %s", list(summary))
    return path


def _write_with_polars(path: Path, sheets: Sequence[SheetSpec]) -> None:
    with xlsxwriter.Workbook(str(path)) as workbook:
        for sheet in sheets:
            sheet.frame.write_excel(
                workbook=workbook,
                worksheet=sheet.title,
                column_formats=sheet.column_formats() or None,
                autofit=True,
                freeze_panes=(1, 0),
            )


def _write_with_openpyxl(path: Path, sheets: Sequence[SheetSpec]) -> None:
    workbook = Workbook()
    workbook.remove(workbook.active)

    for sheet in sheets:
        worksheet = workbook.create_sheet(title=sheet.title)
        worksheet.append(sheet.frame.columns)
        worksheet.freeze_panes = "A2"
        for row in sheet.frame.iter_rows():
            worksheet.append(list(row))

        formats = sheet.column_formats()
        for index, column in enumerate(sheet.frame.columns, start=1):
            number_format = formats.get(column)
            if number_format is None:
                continue
            for (cell,) in worksheet.iter_rows(min_row=2, min_col=index, max_col=index):
                cell.number_format = number_format

    workbook.save(path)


def write_summary_workbook(path: Path, sheets: Sequence[SheetSpec]) -> None:
    """Write all tabs through polars, or through openpyxl if that fails."""
    if not sheets:
        raise ValueError("No sheets to write")
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        _write_with_polars(path, sheets)
        return
    except Exception as exc:
        logger.warning("polars write_excel failed for %s, retrying with openpyxl: %s", path, exc)
    _write_with_openpyxl(path, sheets)


def save_summary_workbook(path: Path, sheets: Sequence[SheetSpec]) -> tuple[bool, str]:
    """A locked workbook is reported instead of aborting the run."""
    try:
        write_summary_workbook(path, sheets)
    except PermissionError as exc:
        logger.warning("Excel summary not saved: %s", exc)
        return False, str(exc)
    return True, ""
