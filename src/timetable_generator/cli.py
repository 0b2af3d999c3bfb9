"""CLI entry point for the timetable generator."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .constants import DEFAULT_STORE_DIR
from .exceptions import TimetableError
from .exporters import get_exporter
from .models import Staff, Subject
from .scheduler import (
    ConfigLoader,
    GenerationResult,
    TimetableData,
    TimetableDraft,
    TimetableGenerator,
    convert_to_timetable_data,
    detect_conflicts,
    parse_cell,
    regenerate_timetable,
    resolve_conflicts,
)
from .storage import SectionStore, create_draft_id

app = typer.Typer(
    name="timetable-generator",
    help="Generate weekly class timetables and check staff conflicts between sections",
    add_completion=False,
)
console = Console()


class OutputFormat(str, Enum):
    """Output format options."""

    json = "json"
    csv = "csv"
    excel = "excel"


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config_dir: Path) -> ConfigLoader:
    try:
        return ConfigLoader(config_dir)
    except TimetableError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


def _make_draft(year: str, dept: str, section: str, result: GenerationResult) -> TimetableDraft:
    return TimetableDraft(
        id=create_draft_id(year, dept, section),
        name=f"{year} Year {dept} Section {section} Draft",
        year=year,
        dept=dept,
        section=section,
        time_slots=result.slots,
    )


def _show_result(result: GenerationResult, subjects: list[Subject], verbose: bool) -> None:
    """Print the generation summary."""
    stats = result.statistics
    console.print(f"  Periods per day: {stats.periods_per_day}")
    console.print(f"  Total non-break slots: {stats.expected_slots}")
    console.print(f"  Assigned periods: {stats.assigned_periods}")
    console.print(f"  Unassigned periods: {stats.unassigned_periods}")

    table = Table(title="Subject-wise Period Assignment")
    table.add_column("Subject", style="cyan")
    table.add_column("Type", style="blue")
    table.add_column("Assigned", style="green")
    table.add_column("Required", style="yellow")

    for subject in subjects:
        counts = stats.by_subject.get(subject.id, {"assigned": 0, "required": 0})
        kind = "Lab" if subject.is_lab else "Activity" if subject.is_activity else "Theory"
        style = "" if counts["assigned"] == counts["required"] else "[red]"
        table.add_row(
            subject.name,
            kind,
            f"{style}{counts['assigned']}",
            str(counts["required"]),
        )
    console.print(table)

    if result.unplaced:
        console.print(f"\n[bold yellow]Unplaced subjects ({result.total_unplaced}):[/bold yellow]")
        for unplaced in result.unplaced:
            console.print(
                f"  [yellow]• {unplaced.subject_name}: {unplaced.reason.value} "
                f"({unplaced.details})[/yellow]"
            )

    if stats.staff_overloads:
        console.print("\n[bold yellow]Staff daily load warnings:[/bold yellow]")
        for overload in stats.staff_overloads:
            console.print(f"  [yellow]• {overload}[/yellow]")

    if verbose and stats.unassigned_slots:
        console.print("\n[bold]Unassigned periods:[/bold]")
        for day, period in stats.unassigned_slots:
            console.print(f"  - {day}, Period {period}")


def _render_grid(grid: TimetableData, title: str, period_timings: list[str] | None = None) -> None:
    period_count = max((len(cells) for cells in grid.values()), default=0)
    table = Table(title=title, show_lines=True)
    table.add_column("Day", style="cyan")
    for index in range(period_count):
        header = str(index + 1)
        if period_timings and index < len(period_timings):
            header += f"\n{period_timings[index]}"
        table.add_column(header, justify="center")

    for day, cells in grid.items():
        row = []
        for entry in cells:
            if entry.is_empty:
                row.append("")
            elif entry.is_continuation:
                row.append("[dim]〃[/dim]")
            elif entry.span:
                row.append(f"[bold magenta]{entry.subject}[/bold magenta]\n{entry.staff}")
            else:
                row.append(f"[bold]{entry.subject}[/bold]\n{entry.staff}")
        table.add_row(day, *row)

    console.print(table)


@app.command()
def generate(
    config_dir: Annotated[
        Path,
        typer.Argument(help="Directory with settings.json, subjects and staff files"),
    ],
    year: Annotated[str, typer.Option("--year", "-y", help="Year of study")],
    dept: Annotated[str, typer.Option("--dept", "-d", help="Department")],
    section: Annotated[str, typer.Option("--section", "-s", help="Section")],
    seed: Annotated[
        Optional[int],
        typer.Option("--seed", help="Random seed for a reproducible timetable"),
    ] = None,
    avoid: Annotated[
        Optional[list[str]],
        typer.Option("--avoid", help="Stored section (same year/dept) whose staff bookings to respect"),
    ] = None,
    store_dir: Annotated[
        Path,
        typer.Option("--store", help="Directory of stored section timetables"),
    ] = Path(DEFAULT_STORE_DIR),
    output: Annotated[
        Optional[Path],
        typer.Option("-o", "--output", help="Also write the generation result to this JSON file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show detailed output"),
    ] = False,
) -> None:
    """Generate a timetable draft for a section."""
    _setup_logging(verbose)
    config = _load_config(config_dir)
    subjects = config.subjects.subjects
    staff = config.staff.staff
    store = SectionStore(store_dir)

    busy_slots = []
    for other in avoid or []:
        try:
            busy_slots.extend(store.load_draft(year, dept, other).time_slots)
        except TimetableError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(1)

    console.print(f"\n[bold]Timetable Generation for:[/bold] {year} Year {dept} Section {section}")
    console.print(f"  Subjects: {len(subjects)}, staff: {len(staff)}")

    try:
        with console.status("[bold green]Generating timetable..."):
            generator = TimetableGenerator(config.settings.settings, seed=seed)
            result = generator.generate(subjects, staff, busy_slots=busy_slots or None)
    except TimetableError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    _show_result(result, subjects, verbose)

    grid = convert_to_timetable_data(result.slots, subjects, staff)
    key = store.save_draft(_make_draft(year, dept, section, result), grid)
    console.print(f"\n[bold green]✓[/bold green] Draft saved as '{key}' in {store_dir}")

    if output:
        output_path = output if output.suffix == ".json" else output.with_suffix(".json")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(_result_json(result), encoding="utf-8")
        console.print(f"[bold green]✓[/bold green] Result exported to: {output_path}")


def _result_json(result: GenerationResult) -> str:
    return json.dumps(result.to_dict(), ensure_ascii=False, indent=2)


@app.command()
def show(
    year: Annotated[str, typer.Option("--year", "-y", help="Year of study")],
    dept: Annotated[str, typer.Option("--dept", "-d", help="Department")],
    section: Annotated[str, typer.Option("--section", "-s", help="Section")],
    master: Annotated[
        bool,
        typer.Option("--master", help="Show the confirmed timetable instead of the draft"),
    ] = False,
    store_dir: Annotated[
        Path,
        typer.Option("--store", help="Directory of stored section timetables"),
    ] = Path(DEFAULT_STORE_DIR),
) -> None:
    """Show a stored timetable as a table."""
    store = SectionStore(store_dir)
    try:
        grid = (
            store.load_master(year, dept, section)
            if master
            else store.load_grid(year, dept, section)
        )
    except TimetableError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    kind = "Master" if master else "Draft"
    _render_grid(grid, f"{year} Year {dept} Section {section} ({kind})")


@app.command()
def regenerate(
    config_dir: Annotated[
        Path,
        typer.Argument(help="Directory with settings.json, subjects and staff files"),
    ],
    year: Annotated[str, typer.Option("--year", "-y", help="Year of study")],
    dept: Annotated[str, typer.Option("--dept", "-d", help="Department")],
    section: Annotated[str, typer.Option("--section", "-s", help="Section")],
    lock: Annotated[
        Optional[list[str]],
        typer.Option("--lock", "-l", help="Cell to keep, as DAY:PERIOD (e.g. Monday:2)"),
    ] = None,
    unlock: Annotated[
        Optional[list[str]],
        typer.Option("--unlock", "-u", help="Stored locked cell to release, as DAY:PERIOD"),
    ] = None,
    clear_locks: Annotated[
        bool,
        typer.Option("--clear-locks", help="Release every stored lock before regenerating"),
    ] = False,
    seed: Annotated[
        Optional[int],
        typer.Option("--seed", help="Random seed for a reproducible timetable"),
    ] = None,
    store_dir: Annotated[
        Path,
        typer.Option("--store", help="Directory of stored section timetables"),
    ] = Path(DEFAULT_STORE_DIR),
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show detailed output"),
    ] = False,
) -> None:
    """Regenerate a stored draft, keeping locked cells."""
    _setup_logging(verbose)
    config = _load_config(config_dir)
    subjects = config.subjects.subjects
    staff = config.staff.staff
    store = SectionStore(store_dir)

    try:
        cells = [parse_cell(value) for value in lock or []]
        released = [parse_cell(value) for value in unlock or []]
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    try:
        previous = store.load_draft(year, dept, section)
        result = regenerate_timetable(
            previous.time_slots,
            subjects,
            staff,
            config.settings.settings,
            locked=cells,
            seed=seed,
            unlocked=released,
            clear_locks=clear_locks,
        )
    except TimetableError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(f"\n[bold]Regenerated:[/bold] {year} Year {dept} Section {section}")
    console.print(f"  Locked cells: {sum(1 for s in result.slots if s.locked)}")
    _show_result(result, subjects, verbose)

    grid = convert_to_timetable_data(result.slots, subjects, staff)
    key = store.save_draft(_make_draft(year, dept, section, result), grid)
    console.print(f"\n[bold green]✓[/bold green] Draft '{key}' updated")


@app.command()
def conflicts(
    year: Annotated[str, typer.Option("--year", "-y", help="Year of study")],
    dept: Annotated[str, typer.Option("--dept", "-d", help="Department")],
    section_a: Annotated[str, typer.Option("--section-a", help="Section whose slots may move")],
    section_b: Annotated[str, typer.Option("--section-b", help="Other section")],
    config_dir: Annotated[
        Optional[Path],
        typer.Option("--config", help="Configuration directory (for subject and staff names)"),
    ] = None,
    resolve: Annotated[
        bool,
        typer.Option("--resolve", help="Move conflicting slots of section A and save the result"),
    ] = False,
    store_dir: Annotated[
        Path,
        typer.Option("--store", help="Directory of stored section timetables"),
    ] = Path(DEFAULT_STORE_DIR),
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Show detailed output"),
    ] = False,
) -> None:
    """Detect (and optionally resolve) staff double-bookings between two sections."""
    _setup_logging(verbose)
    subjects: list[Subject] = []
    staff: list[Staff] = []
    if config_dir is not None:
        config = _load_config(config_dir)
        subjects = config.subjects.subjects
        staff = config.staff.staff

    store = SectionStore(store_dir)
    try:
        draft_a = store.load_draft(year, dept, section_a)
        draft_b = store.load_draft(year, dept, section_b)
    except TimetableError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    found = detect_conflicts(draft_a, draft_b, staff)
    if not found:
        console.print("[bold green]✓ No staff conflicts[/bold green]")
        return

    console.print(f"\n[bold red]Staff conflicts ({len(found)}):[/bold red]")
    for conflict in found:
        console.print(f"  [red]• {conflict.description}[/red]")

    if not resolve:
        raise typer.Exit(1)
    if config_dir is None:
        console.print("[bold red]Error:[/bold red] --resolve needs --config to rebuild the grid")
        raise typer.Exit(1)

    resolution = resolve_conflicts(found, draft_a, draft_b, subjects, staff)
    console.print(f"\n[bold]Resolved {resolution.total_resolved} conflict(s)[/bold]")
    for move in resolution.moves:
        console.print(
            f"  • {move.subject_id}: {move.from_day.label} P{int(move.from_period)} → "
            f"{move.to_day.label} P{int(move.to_period)}"
        )

    draft_a.time_slots = resolution.draft_a_slots
    store.save_draft(draft_a, convert_to_timetable_data(draft_a.time_slots, subjects, staff))

    if resolution.remaining_conflicts:
        console.print(
            f"\n[bold yellow]Unresolved ({len(resolution.remaining_conflicts)}):[/bold yellow]"
        )
        for conflict in resolution.remaining_conflicts:
            console.print(f"  [yellow]• {conflict.description}[/yellow]")
        raise typer.Exit(1)


@app.command()
def export(
    year: Annotated[str, typer.Option("--year", "-y", help="Year of study")],
    dept: Annotated[str, typer.Option("--dept", "-d", help="Department")],
    section: Annotated[str, typer.Option("--section", "-s", help="Section")],
    output: Annotated[
        Path,
        typer.Option("-o", "--output", help="Output file or directory path"),
    ],
    format: Annotated[
        OutputFormat,
        typer.Option("-f", "--format", help="Output format"),
    ] = OutputFormat.excel,
    config_dir: Annotated[
        Optional[Path],
        typer.Option("--config", help="Configuration directory (for period timings)"),
    ] = None,
    store_dir: Annotated[
        Path,
        typer.Option("--store", help="Directory of stored section timetables"),
    ] = Path(DEFAULT_STORE_DIR),
) -> None:
    """Export a stored draft to JSON, CSV or Excel."""
    store = SectionStore(store_dir)
    try:
        draft = store.load_draft(year, dept, section)
        grid = store.load_grid(year, dept, section)
    except TimetableError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    period_timings = None
    if config_dir is not None:
        period_timings = _load_config(config_dir).settings.settings.period_timings

    if format == OutputFormat.csv:
        output_path = output if output.is_dir() else output.parent / output.stem
    else:
        suffix = ".xlsx" if format == OutputFormat.excel else ".json"
        output_path = output if output.suffix else output.with_suffix(suffix)

    with console.status(f"[bold green]Exporting to {format.value}..."):
        get_exporter(format.value).export(draft, grid, output_path, period_timings)

    console.print(f"\n[bold green]✓[/bold green] Exported to: {output_path}")


@app.command()
def promote(
    year: Annotated[str, typer.Option("--year", "-y", help="Year of study")],
    dept: Annotated[str, typer.Option("--dept", "-d", help="Department")],
    section: Annotated[str, typer.Option("--section", "-s", help="Section")],
    store_dir: Annotated[
        Path,
        typer.Option("--store", help="Directory of stored section timetables"),
    ] = Path(DEFAULT_STORE_DIR),
) -> None:
    """Promote a section's draft grid to its confirmed timetable."""
    store = SectionStore(store_dir)
    try:
        store.promote_to_master(year, dept, section)
    except TimetableError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)
    console.print(f"[bold green]✓[/bold green] {year} Year {dept} Section {section} promoted")


if __name__ == "__main__":
    app()
