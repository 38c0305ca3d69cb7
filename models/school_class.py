"""Datenmodell für eine Schulklasse (Pydantic v2)."""

from pydantic import BaseModel, Field


class SchoolClass(BaseModel):
    """Repräsentiert eine Klasse mit Klassenleitung und Höchstgröße (z.B. 5a)."""

    id: int                                # Eindeutige Klassen-ID
    name: str                              # "5a", "7c" (eindeutig im Datensatz)
    teacher_name: str                      # Klassenleitung, z.B. "Müller, Anna"
    max_pupils: int = Field(gt=0)          # Höchstzahl Schüler
    pupil_count: int = Field(0, ge=0)      # Wird bei jeder Einteilung neu berechnet

    @property
    def free_places(self) -> int:
        """Freie Plätze (negativ bei Überbelegung)."""
        return self.max_pupils - self.pupil_count

    @property
    def occupancy(self) -> float:
        """Auslastung als Anteil (0.0 … 1.0+)."""
        return self.pupil_count / self.max_pupils
