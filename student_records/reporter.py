from __future__ import annotations

from typing import Iterable, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from student_records.domain.models import ListedRecord, Theme
from student_records.session import Notice

# Table styling per theme preference.
_THEME_STYLES = {
    Theme.LIGHT: {"header": "bold blue", "reg": "cyan", "marks": "magenta", "border": "blue"},
    Theme.DARK: {"header": "bold white", "reg": "bright_cyan", "marks": "bright_magenta", "border": "grey50"},
}


def build_table(
    rows: Iterable[ListedRecord],
    theme: Theme = Theme.LIGHT,
    filter_text: Optional[str] = None,
) -> Table:
    """
    Build the student records table, one row per listed record.

    The "#" column shows the record's position in the full sequence, which is
    what `update` and `remove` expect even when the listing is filtered.
    """
    styles = _THEME_STYLES[theme]
    title = "Student Records"
    if filter_text:
        title = f"{title}\n[dim]Search: {escape(filter_text)}[/dim]"

    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style=styles["header"],
        border_style=styles["border"],
    )

    table.add_column("#", justify="right", style="dim", no_wrap=True)
    table.add_column("Name")
    table.add_column("Reg No", style=styles["reg"], no_wrap=True)
    table.add_column("Department")
    table.add_column("Year", justify="right")
    table.add_column("Marks", justify="right", style=styles["marks"])

    for record, position in rows:
        table.add_row(
            str(position),
            escape(record.name),
            escape(record.reg),
            escape(record.dept),
            escape(record.year),
            str(record.marks),
        )
    return table


def print_records(
    rows: Iterable[ListedRecord],
    theme: Theme = Theme.LIGHT,
    filter_text: Optional[str] = None,
    console: Optional[Console] = None,
) -> int:
    """
    Render listed records as a rich table and return how many were shown.
    """
    console = console or Console()
    rows = list(rows)

    if not rows:
        if filter_text:
            console.print(f"[yellow]No students match '{escape(filter_text)}'.[/yellow]")
        else:
            console.print("[yellow]No students recorded yet.[/yellow]")
        return 0

    console.print(build_table(rows, theme=theme, filter_text=filter_text))
    return len(rows)


def print_notice(notice: Notice, console: Optional[Console] = None) -> None:
    console = console or Console()
    colour = "green" if notice.ok else "red"
    console.print(f"[bold {colour}]{notice.title}[/bold {colour}]: {escape(notice.message)}")


__all__ = ["build_table", "print_records", "print_notice"]
