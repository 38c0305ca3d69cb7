"""Terminal-Darstellung der Klasseneinteilung (Rich).

Wird von cmd_show verwendet (Übersicht und Klassenlisten eines Stands).
"""

from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.table import Table

from export.helpers import class_list_rows, class_overview_rows

if TYPE_CHECKING:
    from models.roster_state import RosterState


def render_overview(state: "RosterState", title: str = "Klassen") -> Table:
    """Übersichtstabelle aller Klassen mit Auslastung."""
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Klasse", style="bold")
    table.add_column("Klassenleitung")
    table.add_column("Schüler", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Auslastung", justify="right")
    for cls, row in zip(state.classes, class_overview_rows(state)):
        style = "red" if cls.pupil_count > cls.max_pupils else None
        table.add_row(*row, style=style)
    return table


def render_class(state: "RosterState", class_name: str) -> Table:
    """Klassenliste (Nr., Name, ID) einer einzelnen Klasse."""
    cls = state.get_class_by_name(class_name)
    title = f"Klasse {class_name}"
    if cls is not None:
        title += f" – {cls.teacher_name}"
    table = Table(title=title, box=box.SIMPLE)
    table.add_column("Nr.", justify="right")
    table.add_column("Name")
    table.add_column("ID", justify="right", style="dim")
    if cls is not None:
        for row in class_list_rows(state, cls):
            table.add_row(*row)
    return table


def print_roster(state: "RosterState", class_name: str | None = None) -> None:
    """Gibt Übersicht und Klassenlisten aus (nur eine Klasse, wenn angegeben)."""
    console = Console()
    if class_name is None:
        console.print(render_overview(state))
        names = [c.name for c in state.classes]
    else:
        names = [class_name]
    for name in names:
        console.print(render_class(state, name))

    unassigned = state.unassigned_pupils()
    if unassigned and class_name is None:
        console.print(
            f"[yellow]Ohne Klasse ({len(unassigned)}):[/yellow] "
            + ", ".join(p.name for p in unassigned)
        )
