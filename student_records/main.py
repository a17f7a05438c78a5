from __future__ import annotations

import sys
from typing import Optional

import typer

from student_records.config import get_settings
from student_records.errors import NotFoundError, StorageError
from student_records.reporter import print_notice, print_records
from student_records.session import Notice, StudentSession
from student_records.utils.logging import configure_logging

app = typer.Typer(help="Student records manager CLI.", no_args_is_help=True)


def _open_session() -> StudentSession:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    return StudentSession.from_settings(settings)


def _report(notice: Notice) -> None:
    print_notice(notice)
    if not notice.ok:
        raise typer.Exit(code=1)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"data_dir={settings.data_dir} | records_slot={settings.records_slot} "
        f"theme_slot={settings.theme_slot} | env={settings.app_env} log_level={settings.log_level}"
    )


@app.command("list")
def list_command(
    search: Optional[str] = typer.Option(
        None,
        "--search",
        "-s",
        help="Only show students whose name or registration number contains this text.",
    ),
) -> None:
    """
    List students, optionally filtered by name or registration number.
    """
    session = _open_session()
    print_records(session.search(search), theme=session.theme.load(), filter_text=search)


@app.command()
def add(
    name: str = typer.Option(..., "--name", "-n", help="Student name."),
    reg: str = typer.Option(..., "--reg", "-r", help="Unique registration number."),
    dept: str = typer.Option("", "--dept", "-d", help="Department."),
    year: str = typer.Option("", "--year", "-y", help="Year of study."),
    marks: str = typer.Option(..., "--marks", "-m", help="Marks between 0 and 100."),
) -> None:
    """
    Add a new student.
    """
    session = _open_session()
    _report(session.submit({"name": name, "reg": reg, "dept": dept, "year": year, "marks": marks}))


@app.command()
def update(
    position: int = typer.Argument(..., help="Position shown in the '#' column of `list`."),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="New name."),
    dept: Optional[str] = typer.Option(None, "--dept", "-d", help="New department."),
    year: Optional[str] = typer.Option(None, "--year", "-y", help="New year of study."),
    marks: Optional[str] = typer.Option(None, "--marks", "-m", help="New marks."),
) -> None:
    """
    Update a student. The registration number cannot be changed.
    """
    session = _open_session()
    try:
        current = session.begin_edit(position)
    except NotFoundError as exc:
        _report(Notice("Not Found", str(exc), ok=False))
        return

    form = current.model_dump()
    changes = {"name": name, "dept": dept, "year": year, "marks": marks}
    form.update({key: value for key, value in changes.items() if value is not None})
    _report(session.submit(form))


@app.command()
def remove(
    position: int = typer.Argument(..., help="Position shown in the '#' column of `list`."),
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt."),
) -> None:
    """
    Delete a student after confirmation.
    """
    session = _open_session()
    prompt = session.request_delete(position)
    if not prompt.ok:
        _report(prompt)
        return

    if yes or typer.confirm(prompt.message, default=False):
        _report(session.confirm_delete())
    else:
        session.cancel_delete()
        typer.echo("Deletion cancelled.")


@app.command()
def theme(
    choice: Optional[str] = typer.Argument(
        None, help="'light', 'dark', 'toggle' or 'reset'. Omit to show the current theme."
    ),
) -> None:
    """
    Show or change the theme preference.
    """
    session = _open_session()
    if choice is None:
        current = session.theme.load()
    elif choice == "toggle":
        current = session.theme.toggle()
    elif choice == "reset":
        current = session.theme.reset()
    elif choice in ("light", "dark"):
        current = session.theme.set(choice)
    else:
        typer.echo(f"Unknown theme '{choice}'. Use light, dark, toggle or reset.", err=True)
        raise typer.Exit(code=2)
    typer.echo(f"{current.value.capitalize()} Mode")


def main() -> None:
    try:
        app()
    except StorageError as exc:
        typer.echo(f"Storage failure: {exc}", err=True)
        sys.exit(2)
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
