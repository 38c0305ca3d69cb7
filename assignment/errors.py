"""Fehlerarten und Ergebnis-Typ der Klasseneinteilung.

Die Einteilung wirft bei Validierungsfehlern keine Ausnahme, sondern gibt ein
AssignmentResult zurück: entweder Erfolg mit neuem Stand oder Fehlschlag mit
Fehlerart und Details. `unwrap()` übersetzt für Aufrufer, die lieber mit
Ausnahmen arbeiten (CLI).
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, model_validator

from models.roster_state import RosterState


class AssignmentErrorKind(str, Enum):
    UNKNOWN_CLASS = "unknown_class"
    UNKNOWN_PUPIL = "unknown_pupil"
    DUPLICATE_PUPIL_ASSIGNMENT = "duplicate_pupil_assignment"
    UNASSIGNED_PUPIL = "unassigned_pupil"
    CLASS_OVER_CAPACITY = "class_over_capacity"


class AssignmentError(BaseModel):
    """Verletzte Regel einer abgelehnten Einteilung."""

    kind: AssignmentErrorKind
    message: str
    pupil_id: Optional[int] = None
    class_id: Optional[int] = None
    count: Optional[int] = None        # nur bei class_over_capacity
    max_pupils: Optional[int] = None   # nur bei class_over_capacity

    @classmethod
    def unknown_class(cls, class_id: int) -> "AssignmentError":
        return cls(
            kind=AssignmentErrorKind.UNKNOWN_CLASS,
            class_id=class_id,
            message=f"Klasse mit ID {class_id} existiert nicht.",
        )

    @classmethod
    def unknown_pupil(cls, pupil_id: int) -> "AssignmentError":
        return cls(
            kind=AssignmentErrorKind.UNKNOWN_PUPIL,
            pupil_id=pupil_id,
            message=f"Schüler mit ID {pupil_id} existiert nicht.",
        )

    @classmethod
    def duplicate_pupil(cls, pupil_id: int) -> "AssignmentError":
        return cls(
            kind=AssignmentErrorKind.DUPLICATE_PUPIL_ASSIGNMENT,
            pupil_id=pupil_id,
            message=f"Schüler mit ID {pupil_id} ist mehrfach im Auftrag enthalten.",
        )

    @classmethod
    def unassigned_pupil(cls, pupil_id: int) -> "AssignmentError":
        return cls(
            kind=AssignmentErrorKind.UNASSIGNED_PUPIL,
            pupil_id=pupil_id,
            message=f"Schüler mit ID {pupil_id} ist keiner Klasse zugeordnet.",
        )

    @classmethod
    def over_capacity(cls, class_id: int, count: int,
                      max_pupils: int) -> "AssignmentError":
        return cls(
            kind=AssignmentErrorKind.CLASS_OVER_CAPACITY,
            class_id=class_id,
            count=count,
            max_pupils=max_pupils,
            message=(
                f"Klasse mit ID {class_id} hat {count} Schüler "
                f"(maximal {max_pupils})."
            ),
        )


class AssignmentFailed(Exception):
    """Wird nur von AssignmentResult.unwrap() geworfen."""

    def __init__(self, error: AssignmentError):
        super().__init__(error.message)
        self.error = error


class AssignmentResult(BaseModel):
    """Erfolg (state gesetzt) oder Fehlschlag (error gesetzt), nie beides."""

    state: Optional[RosterState] = None
    error: Optional[AssignmentError] = None

    @model_validator(mode='after')
    def _check_exactly_one(self):
        if (self.state is None) == (self.error is None):
            raise ValueError("AssignmentResult braucht genau einen von state und error.")
        return self

    @classmethod
    def success(cls, state: RosterState) -> "AssignmentResult":
        return cls(state=state)

    @classmethod
    def failure(cls, error: AssignmentError) -> "AssignmentResult":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> RosterState:
        """Gibt den neuen Stand zurück oder wirft AssignmentFailed."""
        if self.error is not None:
            raise AssignmentFailed(self.error)
        return self.state
