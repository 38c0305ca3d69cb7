"""Vergleich zweier RosterState-Stände (Diff für nachgelagerte Dienste).

Gibt strukturierte Unterschiede zurück, die als Rich-Tabelle oder JSON
ausgegeben werden können.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Optional

if TYPE_CHECKING:
    from models.roster_state import RosterState


@dataclass
class UpdatedPupil:
    """Schüler mit neuer Klasse und/oder neuer laufender Nummer."""

    pupil_id: int
    class_name: Optional[str]
    follow_up_number: Optional[int]


@dataclass
class UpdatedClass:
    """Klasse mit neuer Schülerzahl."""

    class_id: int
    pupil_count: int


@dataclass
class RosterDiff:
    """Geänderte Schüler und Klassen, in der Reihenfolge des neuen Stands.

    Lässt sich wie ein Tupel entpacken:
        pupils, classes = diff_states(old, new)
    """

    updated_pupils: list[UpdatedPupil] = field(default_factory=list)
    updated_classes: list[UpdatedClass] = field(default_factory=list)

    def __iter__(self) -> Iterator[list]:
        yield self.updated_pupils
        yield self.updated_classes

    def is_empty(self) -> bool:
        """Gibt True zurück wenn kein Unterschied gefunden wurde."""
        return not self.updated_pupils and not self.updated_classes

    def to_dict(self) -> dict:
        """Serialisiert den Diff als Dictionary (für JSON-Ausgabe)."""
        return {
            "updated_pupils": [
                {
                    "pupil_id": p.pupil_id,
                    "class_name": p.class_name,
                    "follow_up_number": p.follow_up_number,
                }
                for p in self.updated_pupils
            ],
            "updated_classes": [
                {"class_id": c.class_id, "pupil_count": c.pupil_count}
                for c in self.updated_classes
            ],
        }

    def to_json(self, indent: int = 2) -> str:
        """Gibt den Diff als JSON-String zurück."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def print_rich(self, new_state: Optional["RosterState"] = None) -> None:
        """Gibt den Diff als Rich-Tabellen aus (mit Namen, falls new_state gegeben)."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        if self.is_empty():
            console.print("[dim]Keine Änderungen.[/dim]")
            return

        names = {p.id: p.name for p in new_state.pupils} if new_state else {}
        class_names = {c.id: c.name for c in new_state.classes} if new_state else {}

        if self.updated_pupils:
            table = Table(title="Geänderte Schüler", box=box.ROUNDED)
            table.add_column("ID", justify="right")
            table.add_column("Name")
            table.add_column("Klasse")
            table.add_column("Nr.", justify="right")
            for p in self.updated_pupils:
                table.add_row(
                    str(p.pupil_id),
                    names.get(p.pupil_id, ""),
                    p.class_name or "[red]—[/red]",
                    str(p.follow_up_number or ""),
                )
            console.print(table)

        if self.updated_classes:
            table = Table(title="Geänderte Klassen", box=box.ROUNDED)
            table.add_column("ID", justify="right")
            table.add_column("Klasse")
            table.add_column("Schüler", justify="right")
            for c in self.updated_classes:
                table.add_row(
                    str(c.class_id), class_names.get(c.class_id, ""), str(c.pupil_count)
                )
            console.print(table)


def diff_states(old: "RosterState", new: "RosterState") -> RosterDiff:
    """Vergleicht zwei Stände und gibt die Änderungen zurück.

    Ein Schüler gilt als geändert, wenn er neu ist oder sich Klasse bzw.
    laufende Nummer geändert haben. Eine Klasse gilt als geändert, wenn sie
    neu ist oder sich die Schülerzahl geändert hat. Entfernte Einträge
    tauchen nicht auf.

    Args:
        old: Bisheriger Stand.
        new: Neuer Stand (bestimmt die Reihenfolge der Ausgabe).

    Returns:
        RosterDiff mit allen gefundenen Änderungen.
    """
    diff = RosterDiff()

    # ── Schüler ──────────────────────────────────────────────────────────────
    old_pupils = {p.id: p for p in old.pupils}
    for p in new.pupils:
        before = old_pupils.get(p.id)
        if (
            before is None
            or before.class_name != p.class_name
            or before.follow_up_number != p.follow_up_number
        ):
            diff.updated_pupils.append(
                UpdatedPupil(
                    pupil_id=p.id,
                    class_name=p.class_name,
                    follow_up_number=p.follow_up_number,
                )
            )

    # ── Klassen ──────────────────────────────────────────────────────────────
    old_classes = {c.id: c for c in old.classes}
    for c in new.classes:
        before = old_classes.get(c.id)
        if before is None or before.pupil_count != c.pupil_count:
            diff.updated_classes.append(
                UpdatedClass(class_id=c.id, pupil_count=c.pupil_count)
            )

    return diff
