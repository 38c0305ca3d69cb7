"""Datenmodell für eine Schülerin / einen Schüler (Pydantic v2)."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Pupil(BaseModel):
    """Ein einzelnes Kind im Schülerbestand."""

    id: int                                  # Eindeutige Schüler-ID (unveränderlich)
    name: str                                # Anzeigename, z.B. "Zoe Krüger"
    class_name: Optional[str] = None         # Klassenname ("5a"), None = ohne Klasse
    follow_up_number: Optional[int] = Field(None, ge=1)  # Laufende Nummer in der Klasse

    @field_validator("class_name")
    @classmethod
    def normalize_class_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v

    @property
    def is_assigned(self) -> bool:
        return self.class_name is not None
