"""Klasseneinteilung: Auftrag prüfen, neuen Stand berechnen."""

from .errors import AssignmentError, AssignmentErrorKind, AssignmentFailed, AssignmentResult
from .processor import AssignmentProcessor, apply_assignments
from .collation import collate_name, pupil_sort_key

__all__ = [
    "AssignmentError",
    "AssignmentErrorKind",
    "AssignmentFailed",
    "AssignmentResult",
    "AssignmentProcessor",
    "apply_assignments",
    "collate_name",
    "pupil_sort_key",
]
