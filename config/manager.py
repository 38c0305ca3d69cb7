"""Einteilungs-Konfiguration als kommentierte YAML-Datei (ruamel.yaml).

Fehlt die Datei, gelten die Standardwerte aus config/schema.py.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, FloatPrompt, Prompt
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import (
    AssignmentConfig,
    CollationPolicy,
    ExportConfig,
    LoggingConfig,
    RosterConfig,
)

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── Kopf und Abschnittskommentare ───

_YAML_HEADER = f"""\
# ============================================
# Klasseneinteilung: Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "assignment": (
        "Einteilung",
        "require_all_assigned: false toleriert Schüler ohne Klasse.\n"
        "collation: din5007 | casefold | ordinal",
    ),
    "export": (
        "Export",
        None,
    ),
    "logging": (
        "Protokollierung",
        "level: DEBUG | INFO | WARNING | ERROR",
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "roster_config.yaml"

    def first_run_check(self) -> bool:
        """True, solange noch keine roster_config.yaml angelegt wurde."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> RosterConfig:
        """Liest die YAML-Datei und validiert sie als RosterConfig.

        Raises:
            FileNotFoundError: Datei fehlt.
            ValueError: Inhalt passt nicht zum Schema.
        """
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py setup' aus, um die Einteilung einzurichten."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return RosterConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self, path: Optional[Path] = None) -> RosterConfig:
        """Wie load(), fällt aber ohne Datei auf die Standard-Config zurück."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            return RosterConfig()
        return self.load(target)

    # ─── Speichern ───

    def save(self, config: RosterConfig, path: Optional[Path] = None) -> None:
        """Schreibt die Konfiguration samt Kopfzeilen und Abschnittskommentaren."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: RosterConfig) -> CommentedMap:
        """RosterConfig → CommentedMap mit einem Kommentar vor jedem Abschnitt."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )
        return cm

    # ─── Menü ───

    def edit_interactive(self, config: RosterConfig) -> RosterConfig:
        """Menü zum Anpassen der Konfiguration; 0 speichert und beendet."""
        while True:
            console.print()
            console.print(Panel(
                "[bold]Konfiguration bearbeiten[/bold]",
                border_style="cyan",
            ))
            console.print("  [bold]1.[/bold] Schule & Schuljahr")
            console.print("  [bold]2.[/bold] Einteilungsregeln")
            console.print("  [bold]3.[/bold] Export")
            console.print("  [bold]4.[/bold] Protokollierung")
            console.print("  [bold]0.[/bold] Speichern & Zurück")

            choice = Prompt.ask("\nAuswahl", default="0")

            if choice == "1":
                config = config.model_copy(update={
                    "school_name": Prompt.ask("Name der Schule",
                                              default=config.school_name),
                    "school_year": Prompt.ask("Schuljahr",
                                              default=config.school_year),
                })
            elif choice == "2":
                config = config.model_copy(
                    update={"assignment": self._edit_assignment(config.assignment)}
                )
            elif choice == "3":
                config = config.model_copy(
                    update={"export": self._edit_export(config.export)}
                )
            elif choice == "4":
                level = Prompt.ask(
                    "Log-Level",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                    default=config.logging.level,
                )
                config = config.model_copy(
                    update={"logging": LoggingConfig(level=level)}
                )
            elif choice == "0":
                self.save(config)
                break
            else:
                console.print("[yellow]Ungültige Auswahl.[/yellow]")

        return config

    def _edit_assignment(self, ac: AssignmentConfig) -> AssignmentConfig:
        """Einteilungsregeln interaktiv anpassen."""
        require_all = Confirm.ask(
            "Müssen alle Schüler einer Klasse zugeordnet sein?",
            default=ac.require_all_assigned,
        )
        collation = Prompt.ask(
            "Sortierregel",
            choices=[c.value for c in CollationPolicy],
            default=ac.collation.value,
        )
        warn = FloatPrompt.ask("Warnschwelle Auslastung (0-1)",
                               default=ac.warn_occupancy)
        return AssignmentConfig(
            require_all_assigned=require_all,
            collation=CollationPolicy(collation),
            warn_occupancy=warn,
        )

    def _edit_export(self, ec: ExportConfig) -> ExportConfig:
        """Exportpfade interaktiv anpassen."""
        return ExportConfig(
            output_dir=Prompt.ask("Zielverzeichnis", default=ec.output_dir),
            excel_filename=Prompt.ask("Excel-Dateiname", default=ec.excel_filename),
            pdf_filename=Prompt.ask("PDF-Dateiname", default=ec.pdf_filename),
        )
