"""Export functionality for generated timetables."""

import csv
import json
from abc import ABC, abstractmethod
from pathlib import Path

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side
from openpyxl.utils import get_column_letter

from .scheduler.models import TimetableData, TimetableDraft, timetable_data_to_dict

ALIGN_CENTER = Alignment(horizontal="center", vertical="center", wrap_text=True)
FONT_HEADER = Font(bold=True)
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)


def period_headers(period_count: int, period_timings: list[str] | None = None) -> list[str]:
    """Column headers like 'P1 (8:30-9:20)'."""
    headers = []
    for index in range(period_count):
        header = f"P{index + 1}"
        if period_timings and index < len(period_timings):
            header += f" ({period_timings[index]})"
        headers.append(header)
    return headers


def format_cell(subject: str, staff: str) -> str:
    if not subject:
        return ""
    return f"{subject}\n{staff}" if staff else subject


def grid_to_dataframe(
    grid: TimetableData, period_timings: list[str] | None = None
) -> pd.DataFrame:
    """Projected grid as a DataFrame: one row per day, one column per period."""
    period_count = max((len(cells) for cells in grid.values()), default=0)
    columns = period_headers(period_count, period_timings)
    rows = {
        day: [format_cell(entry.subject, entry.staff) for entry in cells]
        + [""] * (period_count - len(cells))
        for day, cells in grid.items()
    }
    return pd.DataFrame.from_dict(rows, orient="index", columns=columns)


def slots_to_dataframe(draft: TimetableDraft) -> pd.DataFrame:
    """Flat slot list as a DataFrame."""
    rows = [
        {
            "Day": slot.day.label,
            "Period": slot.period,
            "Subject ID": slot.subject_id or "",
            "Staff ID": slot.staff_id or "",
            "Break": slot.break_name if slot.is_break else "",
            "Locked": slot.locked,
        }
        for slot in draft.time_slots
    ]
    return pd.DataFrame(rows, columns=["Day", "Period", "Subject ID", "Staff ID", "Break", "Locked"])


class BaseExporter(ABC):
    """Base class for exporters."""

    @abstractmethod
    def export(
        self,
        draft: TimetableDraft,
        grid: TimetableData,
        output_path: str | Path,
        period_timings: list[str] | None = None,
    ) -> None:
        """Export a draft and its projected grid.

        Args:
            draft: Generated draft
            grid: Projected grid of the draft
            output_path: Path to output file or directory
            period_timings: Optional timing labels for column headers
        """
        pass


class JSONExporter(BaseExporter):
    """Export to JSON format."""

    def __init__(self, indent: int = 2, ensure_ascii: bool = False):
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def export(
        self,
        draft: TimetableDraft,
        grid: TimetableData,
        output_path: str | Path,
        period_timings: list[str] | None = None,
    ) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        payload = {
            "draft": draft.to_dict(),
            "grid": timetable_data_to_dict(grid),
        }
        if period_timings:
            payload["period_timings"] = period_timings

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=self.indent, ensure_ascii=self.ensure_ascii)


class CSVExporter(BaseExporter):
    """Export to CSV format (multiple files).

    Creates two files:
    - grid.csv: one row per day, one column per period
    - slots.csv: the flat slot list
    """

    def export(
        self,
        draft: TimetableDraft,
        grid: TimetableData,
        output_path: str | Path,
        period_timings: list[str] | None = None,
    ) -> None:
        output_dir = Path(output_path)
        output_dir.mkdir(parents=True, exist_ok=True)

        period_count = max((len(cells) for cells in grid.values()), default=0)
        headers = ["Day"] + period_headers(period_count, period_timings)
        with open(output_dir / "grid.csv", "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(headers)
            for day, cells in grid.items():
                writer.writerow(
                    [day] + [" / ".join(filter(None, [e.subject, e.staff])) for e in cells]
                )

        slots_to_dataframe(draft).to_csv(output_dir / "slots.csv", index=False)


class ExcelExporter(BaseExporter):
    """Export to Excel: a Timetable sheet with merged lab spans, and a Slots sheet."""

    def export(
        self,
        draft: TimetableDraft,
        grid: TimetableData,
        output_path: str | Path,
        period_timings: list[str] | None = None,
    ) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            grid_to_dataframe(grid, period_timings).to_excel(
                writer, sheet_name="Timetable", index_label="Day"
            )
            slots_to_dataframe(draft).to_excel(writer, sheet_name="Slots", index=False)
            self._format_timetable_sheet(writer.sheets["Timetable"], grid)

    def _format_timetable_sheet(self, ws, grid: TimetableData) -> None:
        """Merge lab spans and apply borders and alignment."""
        ws.column_dimensions["A"].width = 14
        period_count = max((len(cells) for cells in grid.values()), default=0)
        for column in range(2, period_count + 2):
            ws.column_dimensions[get_column_letter(column)].width = 18

        for row_index, cells in enumerate(grid.values(), start=2):
            for period_index, entry in enumerate(cells):
                column = period_index + 2
                if entry.span and entry.span > 1:
                    end_column = min(column + entry.span - 1, period_count + 1)
                    if end_column > column:
                        ws.merge_cells(
                            start_row=row_index,
                            start_column=column,
                            end_row=row_index,
                            end_column=end_column,
                        )

        for row in ws.iter_rows(min_row=1, max_row=len(grid) + 1, max_col=period_count + 1):
            for cell in row:
                cell.alignment = ALIGN_CENTER
                cell.border = THIN_BORDER
                if cell.row == 1 or cell.column == 1:
                    cell.font = FONT_HEADER


def get_exporter(format_type: str) -> BaseExporter:
    """Get appropriate exporter for format type.

    Args:
        format_type: Export format ('json', 'csv', 'excel')

    Returns:
        Exporter instance

    Raises:
        ValueError: If format type is not supported
    """
    exporters = {
        "json": JSONExporter,
        "csv": CSVExporter,
        "excel": ExcelExporter,
    }

    if format_type not in exporters:
        raise ValueError(
            f"Unsupported format: {format_type}. Supported: {', '.join(exporters.keys())}"
        )

    return exporters[format_type]()
