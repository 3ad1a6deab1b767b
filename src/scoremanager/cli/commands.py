"""CLI commands for the score manager.

Commands:
- periods: show the period label vocabularies
- list: list students (with search fields)
- add-student / delete-student
- add-score / delete-score
- summary: scores of one type in period order, with the average
- chart: write a PNG line chart
- export: write xlsx, pdf or text snapshots
- copy: print the plain-text dump
- serve: run the Web API

Data commands sign in through the access gate first (--user or
SCOREMANAGER_USER). Non-allowed identities are signed out and nothing is
loaded.
"""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from scoremanager.auth.access import AccessGate, AllowList, AuthenticationError, LocalIdentityProvider
from scoremanager.config.app_config import ConfigError, load_app_config
from scoremanager.core.board import MutationResult, ScoreBoard
from scoremanager.core.models import SCHOOLS, SCORE_TYPES
from scoremanager.core.periods import period_labels
from scoremanager.core.scores import summarize
from scoremanager.core.search import StudentFilter
from scoremanager.db.students_repository import StudentStore
from scoremanager.export.charts import render_score_chart
from scoremanager.export.pdf import export_pdf
from scoremanager.export.spreadsheet import export_xlsx
from scoremanager.export.text import dump_text

app = typer.Typer(
    name="scores",
    help="Student score tracker: students, scores, charts and exports.",
    no_args_is_help=True,
)

console = Console()

USER_OPTION = typer.Option(
    ..., "--user", "-u", envvar="SCOREMANAGER_USER", help="Email to sign in with"
)


def _load_config_or_exit():
    try:
        return load_app_config()
    except ConfigError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


def _open_board_or_exit(user: str) -> ScoreBoard:
    """Sign in through the gate and load the mirror, or exit."""
    config = _load_config_or_exit()
    gate = AccessGate(LocalIdentityProvider(), AllowList(config.access.allowed_emails))

    try:
        access = asyncio.run(gate.sign_in(user))
    except AuthenticationError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    if not access.allowed:
        console.print(f"[red]✗ {escape(access.message)}[/red]")
        raise typer.Exit(code=1)

    board = ScoreBoard(StudentStore(config.store.db_path))
    loaded = asyncio.run(board.refresh())
    if not loaded.success:
        console.print(f"[red]✗ {escape(loaded.message)}[/red]")
        raise typer.Exit(code=1)
    return board


def _report(result: MutationResult) -> None:
    """Print a board result; exit non-zero on store failures."""
    if result.success:
        console.print(f"[green]✓ {escape(result.message)}[/green]")
        if result.student_id:
            console.print(f"  [dim]student_id:[/dim] {result.student_id}")
        return
    if result.skipped:
        console.print(f"[yellow]⚠ {escape(result.message)}[/yellow]")
        return
    console.print(f"[red]✗ {escape(result.message)}[/red]")
    raise typer.Exit(code=1)


def _check_choice(value: str, choices: tuple[str, ...], label: str) -> None:
    if value not in choices:
        console.print(f"[red]✗ Invalid {label} '{escape(value)}'. Choose from: {', '.join(choices)}[/red]")
        raise typer.Exit(code=1)


# =============================================================================
# READ COMMANDS
# =============================================================================


@app.command()
def periods(
    score_type: str = typer.Argument("in-school", help="in-school or mock-exam"),
) -> None:
    """Show the selectable period labels for a score type."""
    _check_choice(score_type, SCORE_TYPES, "score type")
    for label in period_labels(score_type):
        console.print(label, markup=False)


@app.command(name="list")
def list_students(
    user: str = USER_OPTION,
    name: str = typer.Option("", "--name", help="Name contains"),
    school: str = typer.Option("", "--school", help="School contains"),
    grade: int | None = typer.Option(None, "--grade", help="Exact grade"),
    teacher: str = typer.Option("", "--teacher", help="Teacher contains"),
) -> None:
    """List students matching the search fields."""
    board = _open_board_or_exit(user)
    board.set_search(StudentFilter(name=name, school=school, grade=grade, teacher=teacher))
    students = board.state.visible_students

    if not students:
        console.print("[yellow]No students found[/yellow]")
        return

    table = Table(title=f"Students ({len(students)}/{len(board.state.students)})")
    table.add_column("id", style="dim")
    table.add_column("name", style="bold")
    table.add_column("school")
    table.add_column("grade", justify="center")
    table.add_column("teacher")
    table.add_column("scores", justify="right")
    for s in students:
        table.add_row(
            escape(s.id),
            escape(s.name),
            escape(s.school),
            str(s.grade),
            escape(s.teacher),
            str(len(s.scores)),
        )
    console.print(table)


@app.command()
def summary(
    student_id: str = typer.Argument(..., help="Student ID"),
    score_type: str = typer.Option("in-school", "--type", "-t", help="in-school or mock-exam"),
    user: str = USER_OPTION,
) -> None:
    """Show one student's scores of a type in period order, with the average."""
    _check_choice(score_type, SCORE_TYPES, "score type")
    board = _open_board_or_exit(user)
    student = board.state.get_student(student_id)
    if student is None:
        console.print(f"[yellow]⚠ Student '{escape(student_id)}' not found[/yellow]")
        raise typer.Exit(code=1)

    result = summarize(student, score_type)
    console.print(
        f"\n[bold]{escape(student.name)}[/bold] "
        f"({escape(student.school)} grade {student.grade}, {escape(student.teacher)})"
    )
    console.print(f"  [dim]type:[/dim] {score_type}")
    for index, sc in zip(result.indices, result.scores):
        console.print(f"  [dim]#{index}[/dim] {escape(sc.date)}: {sc.score}")
    console.print(f"  [dim]average:[/dim] {result.average_display}")


# =============================================================================
# MUTATIONS
# =============================================================================


@app.command(name="add-student")
def add_student(
    name: str = typer.Argument(..., help="Student name"),
    school: str = typer.Option("middle school", "--school", help="middle school or high school"),
    grade: int = typer.Option(1, "--grade", min=1, max=3, help="Grade (1-3)"),
    teacher: str = typer.Option("", "--teacher", help="Teacher in charge"),
    user: str = USER_OPTION,
) -> None:
    """Add a student with an empty score list."""
    _check_choice(school, SCHOOLS, "school")
    board = _open_board_or_exit(user)
    _report(asyncio.run(board.add_student(name, school, grade, teacher)))


@app.command(name="add-score")
def add_score(
    student_id: str = typer.Argument(..., help="Student ID"),
    date: str = typer.Argument(..., help="Period label, e.g. 'high1 June'"),
    score: int = typer.Argument(..., help="Score"),
    score_type: str = typer.Option("in-school", "--type", "-t", help="in-school or mock-exam"),
    user: str = USER_OPTION,
) -> None:
    """Append a score to a student."""
    _check_choice(score_type, SCORE_TYPES, "score type")
    board = _open_board_or_exit(user)
    _report(asyncio.run(board.add_score(student_id, score_type, date, score)))


@app.command(name="delete-score")
def delete_score(
    student_id: str = typer.Argument(..., help="Student ID"),
    index: int = typer.Argument(..., help="Position of the score in the student's list"),
    user: str = USER_OPTION,
) -> None:
    """Remove one score by position."""
    board = _open_board_or_exit(user)
    _report(asyncio.run(board.delete_score(student_id, index)))


@app.command(name="delete-student")
def delete_student(
    student_id: str = typer.Argument(..., help="Student ID"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
    user: str = USER_OPTION,
) -> None:
    """Delete a student and all their scores."""
    board = _open_board_or_exit(user)
    student = board.state.get_student(student_id)
    if student is not None and not force:
        typer.confirm(f"Delete {student.name} ({len(student.scores)} scores)?", abort=True)
    _report(asyncio.run(board.delete_student(student_id)))


# =============================================================================
# EXPORTS
# =============================================================================


@app.command()
def export(
    fmt: str = typer.Argument(..., help="xlsx, pdf or text"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output file"),
    user: str = USER_OPTION,
) -> None:
    """Write a snapshot of every student's scores."""
    _check_choice(fmt, ("xlsx", "pdf", "text"), "format")
    config = _load_config_or_exit()
    board = _open_board_or_exit(user)
    students = board.state.students

    output = output or Path(f"scores.{'txt' if fmt == 'text' else fmt}")
    if fmt == "xlsx":
        output.write_bytes(export_xlsx(students, sheet_title=config.export.sheet_title))
    elif fmt == "pdf":
        output.write_bytes(
            export_pdf(
                students,
                title=config.export.pdf_title,
                font_path=config.export.pdf_font_path,
            )
        )
    else:
        output.write_text(dump_text(students), encoding="utf-8")

    console.print(f"[green]✓ Exported {len(students)} students[/green]")
    console.print(f"  [dim]path:[/dim] {escape(str(output))}")


@app.command()
def copy(user: str = USER_OPTION) -> None:
    """Print the plain-text dump of all students and scores."""
    board = _open_board_or_exit(user)
    typer.echo(dump_text(board.state.students))


@app.command()
def chart(
    student_id: str = typer.Argument(..., help="Student ID"),
    score_type: str = typer.Option("in-school", "--type", "-t", help="in-school or mock-exam"),
    output: Path | None = typer.Option(None, "--output", "-o", help="PNG file"),
    user: str = USER_OPTION,
) -> None:
    """Write a line chart of one student's scores."""
    _check_choice(score_type, SCORE_TYPES, "score type")
    board = _open_board_or_exit(user)
    student = board.state.get_student(student_id)
    if student is None:
        console.print(f"[yellow]⚠ Student '{escape(student_id)}' not found[/yellow]")
        raise typer.Exit(code=1)

    output = output or Path(f"{student_id}_{score_type}.png")
    output.write_bytes(render_score_chart(student, score_type))
    console.print(f"[green]✓ Chart written to {escape(str(output))}[/green]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
) -> None:
    """Run the Web API with uvicorn."""
    import uvicorn

    uvicorn.run("scoremanager.web.api:create_app", factory=True, host=host, port=port)
