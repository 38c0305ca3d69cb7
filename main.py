"""Klasseneinteilung: Haupt-CLI.

Verwendung:
  python main.py setup                          Ersteinrichtung (Konfiguration)
  python main.py config show                    Konfiguration anzeigen
  python main.py config edit                    Konfiguration bearbeiten
  python main.py generate                       Testdaten (Stand + Auftrag) erzeugen
  python main.py apply <stand.json> <auftrag>   Einteilung anwenden + Diff
  python main.py diff <alt.json> <neu.json>     Zwei Stände vergleichen
  python main.py validate <stand.json>          Konsistenz prüfen
  python main.py show <stand.json>              Klassenlisten anzeigen
  python main.py export <stand.json>            Excel + PDF exportieren
"""

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich import box

console = Console()

# Standard-Pfade für gespeicherte Stände
DEFAULT_STATE_JSON = Path("output/roster_state.json")
DEFAULT_REQUEST_JSON = Path("output/assignment_request.json")


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config():
    """Lädt die Konfiguration; ohne Datei gelten die Standardwerte."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    try:
        return mgr, mgr.load_or_default()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)


def _load_state_or_abort(path: Path):
    from models.roster_state import RosterState
    try:
        return RosterState.load_json(path)
    except FileNotFoundError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except ValidationError as e:
        console.print(f"[red bold]Ungültiger Stand:[/red bold] {path}\n{e}")
        sys.exit(1)


# ─── SETUP ────────────────────────────────────────────────────────────────────

@click.command("setup")
def cmd_setup():
    """Ersteinrichtung: Konfiguration anlegen und bearbeiten."""
    from config.defaults import default_roster_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check():
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Verwenden Sie [bold]python main.py config edit[/bold] zum Bearbeiten."
        )
        if not click.confirm("Trotzdem neu einrichten?", default=False):
            return

    mgr.edit_interactive(default_roster_config())
    console.print("[bold green]Einrichtung abgeschlossen![/bold green]")
    console.print("Führen Sie jetzt [bold]python main.py generate[/bold] aus.")


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anzeigen oder bearbeiten."""


@cmd_config.command("show")
def config_show():
    """Zeigt die aktuelle Konfiguration an."""
    mgr, config = _load_config()

    console.print(Panel(
        f"[bold]{config.school_name}[/bold]  |  Schuljahr {config.school_year}",
        title="Konfiguration",
        border_style="cyan",
    ))

    ac = config.assignment
    table = Table(title="Einteilung", box=box.ROUNDED)
    table.add_column("Parameter", style="bold")
    table.add_column("Wert")
    table.add_row("Alle Schüler zuordnen", "ja" if ac.require_all_assigned else "nein")
    table.add_row("Sortierregel", ac.collation.value)
    table.add_row("Warnschwelle Auslastung", f"{ac.warn_occupancy:.0%}")
    console.print(table)

    ec = config.export
    console.print(
        f"[bold]Export:[/bold] {ec.output_dir}/{ec.excel_filename}, "
        f"{ec.output_dir}/{ec.pdf_filename}"
    )
    console.print(f"[bold]Log-Level:[/bold] {config.logging.level}")


@cmd_config.command("edit")
def config_edit():
    """Bearbeitet die Konfiguration interaktiv."""
    mgr, config = _load_config()
    mgr.edit_interactive(config)


# ─── GENERATE ─────────────────────────────────────────────────────────────────

@click.command("generate")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--classes", "num_classes", default=4, help="Anzahl Klassen.")
@click.option("--pupils-per-class", default=25, help="Schüler pro Klasse.")
@click.option("--max-pupils", default=30, help="Höchstzahl Schüler pro Klasse.")
@click.option("--state-path", default=str(DEFAULT_STATE_JSON),
              help="Pfad für den erzeugten Stand.")
@click.option("--request-path", default=str(DEFAULT_REQUEST_JSON),
              help="Pfad für den erzeugten Auftrag.")
def cmd_generate(seed: int, num_classes: int, pupils_per_class: int,
                 max_pupils: int, state_path: str, request_path: str):
    """Erzeugt Testdaten: Stand ohne Einteilung + passenden Auftrag."""
    from data.fake_data import FakeRosterGenerator

    console.print("[bold]Testdaten werden generiert...[/bold]")
    gen = FakeRosterGenerator(seed=seed)
    try:
        state = gen.generate(num_classes, pupils_per_class, max_pupils)
        request = gen.generate_request(state)
    except (ValueError, ValidationError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    state.save_json(Path(state_path))
    request.save_json(Path(request_path))
    console.print(f"\n[dim]{state.summary()}[/dim]")
    console.print(f"[green]✓[/green] Stand gespeichert: {state_path}")
    console.print(f"[green]✓[/green] Auftrag gespeichert: {request_path}")


# ─── APPLY ────────────────────────────────────────────────────────────────────

@click.command("apply")
@click.argument("state_path", type=click.Path(exists=True, path_type=Path))
@click.argument("request_path", type=click.Path(exists=True, path_type=Path))
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="Zielpfad für den neuen Stand (Standard: Eingabe überschreiben).")
@click.option("--diff-json", type=click.Path(path_type=Path), default=None,
              help="Diff zusätzlich als JSON speichern.")
@click.option("--versioned", is_flag=True, default=False,
              help="Neuen Stand mit Zeitstempel im Dateinamen speichern.")
def cmd_apply(state_path: Path, request_path: Path, output, diff_json, versioned: bool):
    """Wendet einen Einteilungsauftrag an und zeigt die Änderungen."""
    from assignment.processor import AssignmentProcessor
    from analysis.diff import diff_states
    from models.assignment_request import AssignmentRequest

    mgr, config = _load_config()
    state = _load_state_or_abort(state_path)
    try:
        request = AssignmentRequest.load_json(request_path)
    except ValidationError as e:
        console.print(f"[red bold]Ungültiger Auftrag:[/red bold] {request_path}\n{e}")
        sys.exit(1)

    result = AssignmentProcessor(config.assignment).apply(state, request)
    if not result.ok:
        console.print(Panel(
            f"[red]{result.error.message}[/red]\n[dim]Fehlerart: {result.error.kind.value}[/dim]",
            title="Einteilung abgelehnt",
            border_style="red",
        ))
        sys.exit(1)

    new_state = result.state
    target = output or state_path
    if versioned:
        target = new_state.save_versioned(target)
    else:
        new_state.save_json(target)
    console.print(f"[green]✓[/green] Neuer Stand gespeichert: {target}")

    diff = diff_states(state, new_state)
    diff.print_rich(new_state)
    if diff_json is not None:
        diff_json.parent.mkdir(parents=True, exist_ok=True)
        diff_json.write_text(diff.to_json(), encoding="utf-8")
        console.print(f"[green]✓[/green] Diff gespeichert: {diff_json}")


# ─── DIFF ─────────────────────────────────────────────────────────────────────

@click.command("diff")
@click.argument("old_path", type=click.Path(exists=True, path_type=Path))
@click.argument("new_path", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "as_json", is_flag=True, default=False,
              help="Diff als JSON ausgeben.")
def cmd_diff(old_path: Path, new_path: Path, as_json: bool):
    """Vergleicht zwei gespeicherte Stände."""
    from analysis.diff import diff_states

    old = _load_state_or_abort(old_path)
    new = _load_state_or_abort(new_path)
    diff = diff_states(old, new)
    if as_json:
        click.echo(diff.to_json())
    else:
        diff.print_rich(new)


# ─── VALIDATE ─────────────────────────────────────────────────────────────────

@click.command("validate")
@click.argument("state_path", type=click.Path(exists=True, path_type=Path),
                default=str(DEFAULT_STATE_JSON))
def cmd_validate(state_path: Path):
    """Prüft einen gespeicherten Stand auf Konsistenz."""
    from analysis.roster_validator import RosterValidator

    mgr, config = _load_config()
    state = _load_state_or_abort(state_path)
    console.print(f"[bold]Lade Stand:[/bold] {state_path}")
    console.print(f"\n{state.summary()}\n")

    report = RosterValidator(config.assignment).validate(state)
    report.print_rich()
    sys.exit(0 if report.is_valid else 1)


# ─── SHOW ─────────────────────────────────────────────────────────────────────

@click.command("show")
@click.argument("state_path", type=click.Path(exists=True, path_type=Path),
                default=str(DEFAULT_STATE_JSON))
@click.option("--klasse", "class_name", default=None, help="Nur diese Klasse anzeigen.")
def cmd_show(state_path: Path, class_name):
    """Zeigt Klassenübersicht und Klassenlisten im Terminal."""
    from export.tui_renderer import print_roster

    state = _load_state_or_abort(state_path)
    if class_name is not None and state.get_class_by_name(class_name) is None:
        console.print(f"[red]Klasse '{class_name}' nicht gefunden.[/red]")
        sys.exit(1)
    print_roster(state, class_name)


# ─── EXPORT ───────────────────────────────────────────────────────────────────

@click.command("export")
@click.argument("state_path", type=click.Path(exists=True, path_type=Path),
                default=str(DEFAULT_STATE_JSON))
@click.option("--excel/--no-excel", default=True, help="Excel-Datei erzeugen.")
@click.option("--pdf/--no-pdf", default=True, help="PDF-Datei erzeugen.")
@click.option("--diff-from", type=click.Path(exists=True, path_type=Path), default=None,
              help="Älterer Stand: Änderungen im Excel markieren.")
def cmd_export(state_path: Path, excel: bool, pdf: bool, diff_from):
    """Exportiert die Klassenlisten als Excel und PDF."""
    from analysis.diff import diff_states
    from export.excel_export import ExcelExporter
    from export.pdf_export import PdfExporter

    mgr, config = _load_config()
    state = _load_state_or_abort(state_path)
    out_dir = Path(config.export.output_dir)

    diff = None
    if diff_from is not None:
        diff = diff_states(_load_state_or_abort(diff_from), state)

    if excel:
        path = out_dir / config.export.excel_filename
        ExcelExporter(state, config, diff).export(path)
        console.print(f"[green]✓[/green] Excel gespeichert: {path}")
    if pdf:
        path = out_dir / config.export.pdf_filename
        PdfExporter(state, config).export_class_lists(path)
        console.print(f"[green]✓[/green] PDF gespeichert: {path}")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False,
              help="Ausführliche Protokollierung (DEBUG).")
def cli(verbose: bool):
    """Klasseneinteilung: Schüler auf Klassen verteilen und Änderungen ermitteln.

    Starten Sie mit: python main.py generate
    """
    from config.manager import ConfigManager
    level = "DEBUG"
    if not verbose:
        try:
            level = ConfigManager().load_or_default().logging.level
        except ValueError:
            level = "WARNING"
    _setup_logging(level)


def main():
    """Einstiegspunkt."""
    cli()


# Befehle registrieren
cli.add_command(cmd_setup)
cli.add_command(cmd_config)
cli.add_command(cmd_generate)
cli.add_command(cmd_apply)
cli.add_command(cmd_diff)
cli.add_command(cmd_validate)
cli.add_command(cmd_show)
cli.add_command(cmd_export)


if __name__ == "__main__":
    main()
