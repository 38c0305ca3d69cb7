"""RosterState: Schülerbestand + Klassen als unveränderlicher Schnappschuss (Pydantic v2)."""

from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, model_validator

from models.pupil import Pupil
from models.school_class import SchoolClass


class RosterState(BaseModel):
    """Vollständiger Stand der Klasseneinteilung.

    Wird per Konvention nie verändert: jede Einteilung erzeugt einen neuen
    RosterState, der alte bleibt für Vergleich und Rücksprung erhalten.
    """

    pupils: list[Pupil] = []
    classes: list[SchoolClass] = []
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"

    @model_validator(mode='after')
    def _check_unique_keys(self):
        for label, values in (
            ("Schüler-ID", [p.id for p in self.pupils]),
            ("Klassen-ID", [c.id for c in self.classes]),
            ("Klassenname", [c.name for c in self.classes]),
        ):
            dupes = sorted(k for k, n in Counter(values).items() if n > 1)
            if dupes:
                raise ValueError(f"{label} mehrfach vergeben: {dupes}")
        return self

    # ─── Zugriff ───

    def get_pupil(self, pupil_id: int) -> Optional[Pupil]:
        return next((p for p in self.pupils if p.id == pupil_id), None)

    def get_class(self, class_id: int) -> Optional[SchoolClass]:
        return next((c for c in self.classes if c.id == class_id), None)

    def get_class_by_name(self, name: str) -> Optional[SchoolClass]:
        return next((c for c in self.classes if c.name == name), None)

    def pupils_in_class(self, class_name: str) -> list[Pupil]:
        """Schüler einer Klasse, sortiert nach laufender Nummer."""
        members = [p for p in self.pupils if p.class_name == class_name]
        return sorted(members, key=lambda p: (p.follow_up_number or 0, p.id))

    def unassigned_pupils(self) -> list[Pupil]:
        """Schüler ohne Klasse oder mit einem Klassennamen, den es nicht gibt."""
        names = {c.name for c in self.classes}
        return [p for p in self.pupils if p.class_name not in names]

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datensatz."""
        capacity = sum(c.max_pupils for c in self.classes)
        unassigned = len(self.unassigned_pupils())
        lines = [
            f"Klassen: {len(self.classes)}",
            f"Schüler: {len(self.pupils)} ({unassigned} ohne Klasse)",
            f"Plätze gesamt: {capacity}",
            f"Auslastung: {len(self.pupils) / capacity:.0%}" if capacity else "",
        ]
        return "\n".join(l for l in lines if l)

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den kompletten Stand als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        now = datetime.now(timezone.utc)
        updated = self.model_copy(update={
            "modified_at": now,
            "created_at": self.created_at or now,
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2))

    def save_versioned(self, base_path: Path) -> Path:
        """Speichert mit Zeitstempel im Dateinamen."""
        base_path = Path(base_path)
        ts = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")
        versioned = base_path.parent / f"{base_path.stem}_{ts}{base_path.suffix}"
        self.save_json(versioned)
        return versioned

    @classmethod
    def load_json(cls, path: Path) -> "RosterState":
        """Lädt einen Stand aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
