"""Infrastructure layer package."""

from .json_repository import Dataset, load_dataset, parse_dataset
from .summary_exporter import SheetSpec, save_summary_json, save_summary_workbook, write_summary_workbook

__all__ = [
    "Dataset",
    "SheetSpec",
    "load_dataset",
    "parse_dataset",
    "save_summary_json",
    "save_summary_workbook",
    "write_summary_workbook",
]
