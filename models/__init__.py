from models.pupil import Pupil
from models.school_class import SchoolClass
from models.roster_state import RosterState
from models.assignment_request import Assignment, AssignmentRequest

__all__ = [
    "Pupil",
    "SchoolClass",
    "RosterState",
    "Assignment",
    "AssignmentRequest",
]
