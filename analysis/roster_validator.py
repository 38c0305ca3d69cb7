"""Konsistenzprüfung eines geladenen Einteilungsstands.

Prüft einen beliebigen RosterState (z.B. aus einer JSON-Datei) auf
Regelverletzungen als Sicherheitsnetz unabhängig von der Einteilung selbst.
"""

from collections import defaultdict
from typing import Literal, Optional

from pydantic import BaseModel

from assignment.collation import pupil_sort_key
from config.schema import AssignmentConfig
from models.pupil import Pupil
from models.roster_state import RosterState


class ValidationViolation(BaseModel):
    """Eine einzelne Regelverletzung."""

    severity: Literal["error", "warning"]
    constraint: str      # z.B. "class_over_capacity"
    description: str
    entity: str          # Schüler-ID / Klassenname


class ValidationReport(BaseModel):
    """Ergebnis der Konsistenzprüfung."""

    violations: list[ValidationViolation]
    is_valid: bool       # True wenn keine Errors (Warnings ok)

    @property
    def errors(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "error"]

    @property
    def warnings(self) -> list[ValidationViolation]:
        return [v for v in self.violations if v.severity == "warning"]

    def print_rich(self) -> None:
        """Gibt den Report formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        status = (
            "[bold green]✓ KONSISTENT[/bold green]"
            if self.is_valid
            else "[bold red]✗ VERLETZUNGEN GEFUNDEN[/bold red]"
        )
        lines = [status, f"Fehler: {len(self.errors)} | Warnungen: {len(self.warnings)}"]
        console.print(Panel("\n".join(lines), title="Einteilung-Prüfung", border_style="cyan"))

        if not self.violations:
            console.print("[dim]Keine Verletzungen gefunden.[/dim]")
            return

        table = Table(box=box.ROUNDED, show_lines=True)
        table.add_column("Typ", width=8)
        table.add_column("Regel", width=22)
        table.add_column("Entität", width=10)
        table.add_column("Beschreibung")

        for v in self.violations:
            color = "red" if v.severity == "error" else "yellow"
            table.add_row(
                f"[{color}]{v.severity.upper()}[/{color}]",
                v.constraint,
                v.entity,
                v.description,
            )
        console.print(table)


class RosterValidator:
    """Prüft einen RosterState gegen die Invarianten der Klasseneinteilung."""

    def __init__(self, config: Optional[AssignmentConfig] = None):
        self.config = config or AssignmentConfig()

    def validate(self, state: RosterState) -> ValidationReport:
        """Führt alle Prüfungen durch und gibt einen ValidationReport zurück."""
        violations: list[ValidationViolation] = []

        members: dict[str, list[Pupil]] = defaultdict(list)
        for p in state.pupils:
            if p.class_name is not None:
                members[p.class_name].append(p)

        violations.extend(self._check_unassigned(state))
        violations.extend(self._check_unknown_class_names(state, members))
        violations.extend(self._check_pupil_counts(state, members))
        violations.extend(self._check_capacity(state, members))
        violations.extend(self._check_follow_up_sequence(state, members))

        has_errors = any(v.severity == "error" for v in violations)
        return ValidationReport(violations=violations, is_valid=not has_errors)

    # ── Einzelne Prüfungen ────────────────────────────────────────────────────

    def _check_unassigned(self, state: RosterState) -> list[ValidationViolation]:
        """Jeder Schüler braucht eine Klasse (je nach Konfiguration Fehler/Warnung)."""
        severity = "error" if self.config.require_all_assigned else "warning"
        return [
            ValidationViolation(
                severity=severity,
                constraint="unassigned_pupil",
                entity=str(p.id),
                description=f"{p.name} ist keiner Klasse zugeordnet.",
            )
            for p in state.pupils
            if p.class_name is None
        ]

    def _check_unknown_class_names(
        self, state: RosterState, members: dict[str, list[Pupil]]
    ) -> list[ValidationViolation]:
        """Klassennamen der Schüler müssen existieren.

        Solche Schüler gelten als 'ohne Klasse', daher gleiche Schwere wie
        bei _check_unassigned.
        """
        known = {c.name for c in state.classes}
        severity = "error" if self.config.require_all_assigned else "warning"
        violations: list[ValidationViolation] = []
        for name, pupils in members.items():
            if name in known:
                continue
            for p in pupils:
                violations.append(ValidationViolation(
                    severity=severity,
                    constraint="unknown_class_name",
                    entity=str(p.id),
                    description=f"{p.name} verweist auf unbekannte Klasse '{name}'.",
                ))
        return violations

    def _check_pupil_counts(
        self, state: RosterState, members: dict[str, list[Pupil]]
    ) -> list[ValidationViolation]:
        """Gespeicherte Schülerzahl muss der tatsächlichen entsprechen."""
        violations: list[ValidationViolation] = []
        for c in state.classes:
            actual = len(members.get(c.name, []))
            if actual != c.pupil_count:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="pupil_count_mismatch",
                    entity=c.name,
                    description=f"Gespeichert {c.pupil_count}, tatsächlich {actual} Schüler.",
                ))
        return violations

    def _check_capacity(
        self, state: RosterState, members: dict[str, list[Pupil]]
    ) -> list[ValidationViolation]:
        """Keine Überbelegung; Warnung ab der konfigurierten Auslastung."""
        violations: list[ValidationViolation] = []
        for c in state.classes:
            actual = len(members.get(c.name, []))
            if actual > c.max_pupils:
                violations.append(ValidationViolation(
                    severity="error",
                    constraint="class_over_capacity",
                    entity=c.name,
                    description=(
                        f"{actual} Schüler > Max {c.max_pupils} "
                        f"(Überschreitung: +{actual - c.max_pupils})."
                    ),
                ))
            elif actual >= self.config.warn_occupancy * c.max_pupils:
                violations.append(ValidationViolation(
                    severity="warning",
                    constraint="class_nearly_full",
                    entity=c.name,
                    description=f"{actual} von {c.max_pupils} Plätzen belegt.",
                ))
        return violations

    def _check_follow_up_sequence(
        self, state: RosterState, members: dict[str, list[Pupil]]
    ) -> list[ValidationViolation]:
        """Laufende Nummern müssen 1..N in Sortierreihenfolge sein."""
        violations: list[ValidationViolation] = []
        policy = self.config.collation
        for c in state.classes:
            ordered = sorted(members.get(c.name, []), key=lambda p: pupil_sort_key(p, policy))
            for expected, p in enumerate(ordered, start=1):
                if p.follow_up_number != expected:
                    violations.append(ValidationViolation(
                        severity="error",
                        constraint="follow_up_sequence",
                        entity=c.name,
                        description=(
                            f"{p.name}: Nr. {p.follow_up_number}, erwartet {expected}."
                        ),
                    ))
        return violations
