"""Einteilungsauftrag: Liste von (Schüler → Klasse)-Zuordnungen."""

from pathlib import Path

from pydantic import BaseModel


class Assignment(BaseModel):
    """Eine gewünschte Zuordnung eines Schülers zu einer Klasse."""

    pupil_id: int
    class_id: int


class AssignmentRequest(BaseModel):
    """Geordnete Liste von Zuordnungen.

    Schüler, die nicht im Auftrag vorkommen, behalten ihre bisherige Klasse.
    """

    assignments: list[Assignment] = []

    @classmethod
    def from_pairs(cls, pairs: list[tuple[int, int]]) -> "AssignmentRequest":
        """Erzeugt einen Auftrag aus (pupil_id, class_id)-Paaren."""
        return cls(assignments=[
            Assignment(pupil_id=pupil_id, class_id=class_id)
            for pupil_id, class_id in pairs
        ])

    def __len__(self) -> int:
        return len(self.assignments)

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.model_dump_json(indent=2))

    @classmethod
    def load_json(cls, path: Path) -> "AssignmentRequest":
        """Lädt einen Auftrag aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
