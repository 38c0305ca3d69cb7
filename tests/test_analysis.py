"""Tests für Diff und Konsistenzprüfung."""

import json

import pytest

from config.schema import AssignmentConfig
from models.pupil import Pupil
from models.school_class import SchoolClass
from models.roster_state import RosterState
from models.assignment_request import AssignmentRequest
from assignment import AssignmentProcessor, apply_assignments
from analysis.diff import RosterDiff, UpdatedClass, UpdatedPupil, diff_states
from analysis.roster_validator import RosterValidator, ValidationReport, ValidationViolation


# ─── Testdaten-Hilfsfunktionen ────────────────────────────────────────────────

def _make_state() -> RosterState:
    return RosterState(
        classes=[
            SchoolClass(id=1, name="5a", teacher_name="Müller, Anna", max_pupils=4),
            SchoolClass(id=2, name="5b", teacher_name="Schmidt, Hans", max_pupils=4),
        ],
        pupils=[
            Pupil(id=1, name="Zoe Krüger"),
            Pupil(id=2, name="Ömer Özdemir"),
            Pupil(id=3, name="anna Weiß"),
            Pupil(id=4, name="Ben Strauß"),
        ],
    )


def _make_assigned_state() -> RosterState:
    request = AssignmentRequest.from_pairs([(1, 1), (2, 1), (3, 1), (4, 2)])
    return apply_assignments(_make_state(), request).unwrap()


def _constraints(report: ValidationReport) -> set[str]:
    return {v.constraint for v in report.violations}


# ─── Fixtures ─────────────────────────────────────────────────────────────────

@pytest.fixture(scope="module")
def assigned_state() -> RosterState:
    return _make_assigned_state()


# ─── DIFF ─────────────────────────────────────────────────────────────────────

class TestDiff:
    def test_same_state_is_empty(self, assigned_state: RosterState):
        """Diff(s, s) ist immer leer."""
        diff = diff_states(assigned_state, assigned_state)
        assert diff.is_empty()
        assert diff.updated_pupils == []
        assert diff.updated_classes == []

    def test_unassigned_state_diff_with_itself(self):
        assert diff_states(_make_state(), _make_state()).is_empty()

    def test_unpacks_like_tuple(self, assigned_state: RosterState):
        pupils, classes = diff_states(_make_state(), assigned_state)
        assert all(isinstance(p, UpdatedPupil) for p in pupils)
        assert all(isinstance(c, UpdatedClass) for c in classes)

    def test_first_assignment_reports_everything(self, assigned_state: RosterState):
        """Von 'ohne Klasse' aus ändern sich alle Schüler und beide Klassen."""
        diff = diff_states(_make_state(), assigned_state)
        assert [p.pupil_id for p in diff.updated_pupils] == [1, 2, 3, 4]
        assert [(c.class_id, c.pupil_count) for c in diff.updated_classes] == [(1, 3), (2, 1)]

    def test_follow_up_change_only(self, assigned_state: RosterState):
        """Nur die laufende Nummer ändert sich → Schüler taucht auf, Klasse nicht."""
        changed = assigned_state.model_copy(update={"pupils": [
            p.model_copy(update={"follow_up_number": 9}) if p.id == 1 else p
            for p in assigned_state.pupils
        ]})
        diff = diff_states(assigned_state, changed)
        assert diff.updated_pupils == [UpdatedPupil(pupil_id=1, class_name="5a",
                                                    follow_up_number=9)]
        assert diff.updated_classes == []

    def test_moving_a_pupil(self, assigned_state: RosterState):
        """Umzug von Ben in die 5a: Nummern in 5a verschieben sich."""
        new = apply_assignments(
            assigned_state, AssignmentRequest.from_pairs([(4, 1)])
        ).unwrap()
        diff = diff_states(assigned_state, new)
        # 5a: anna Weiß 1, Ben Strauß 2, Ömer Özdemir 3, Zoe Krüger 4
        assert {p.pupil_id: p.follow_up_number for p in diff.updated_pupils} == {
            1: 4, 2: 3, 4: 2,
        }
        assert [(c.class_id, c.pupil_count) for c in diff.updated_classes] == [(1, 4), (2, 0)]

    def test_new_entities_are_changes(self, assigned_state: RosterState):
        """Neue Schüler und Klassen gelten als geändert."""
        bigger = assigned_state.model_copy(update={
            "pupils": assigned_state.pupils + [Pupil(id=99, name="Neu")],
            "classes": assigned_state.classes + [
                SchoolClass(id=3, name="5c", teacher_name="Weber, Eva", max_pupils=4)
            ],
        })
        diff = diff_states(assigned_state, bigger)
        assert [p.pupil_id for p in diff.updated_pupils] == [99]
        assert [c.class_id for c in diff.updated_classes] == [3]

    def test_removed_entities_not_reported(self, assigned_state: RosterState):
        smaller = assigned_state.model_copy(update={"pupils": assigned_state.pupils[:2]})
        assert diff_states(assigned_state, smaller).is_empty()

    def test_order_follows_new_state(self, assigned_state: RosterState):
        reordered = assigned_state.model_copy(update={
            "pupils": list(reversed(assigned_state.pupils)),
        })
        diff = diff_states(_make_state(), reordered)
        assert [p.pupil_id for p in diff.updated_pupils] == [4, 3, 2, 1]

    def test_to_json(self, assigned_state: RosterState):
        diff = diff_states(_make_state(), assigned_state)
        data = json.loads(diff.to_json())
        assert set(data) == {"updated_pupils", "updated_classes"}
        assert data["updated_pupils"][0] == {
            "pupil_id": 1, "class_name": "5a", "follow_up_number": 3,
        }
        assert data["updated_classes"][1] == {"class_id": 2, "pupil_count": 1}

    def test_empty_diff_to_dict(self):
        assert RosterDiff().to_dict() == {"updated_pupils": [], "updated_classes": []}

    def test_print_rich_runs(self, assigned_state: RosterState):
        diff_states(_make_state(), assigned_state).print_rich(assigned_state)
        RosterDiff().print_rich()


# ─── KONSISTENZPRÜFUNG ────────────────────────────────────────────────────────

class TestRosterValidator:
    def test_applied_state_is_valid(self, assigned_state: RosterState):
        """Jeder erfolgreich berechnete Stand ist fehlerfrei."""
        report = RosterValidator().validate(assigned_state)
        assert report.is_valid
        assert report.errors == []

    def test_nearly_full_warning(self, assigned_state: RosterState):
        """5a mit 3/4 Plätzen liegt unter 90 %, mit Schwelle 0.75 → Warnung."""
        assert "class_nearly_full" not in _constraints(
            RosterValidator().validate(assigned_state)
        )
        report = RosterValidator(AssignmentConfig(warn_occupancy=0.75)).validate(assigned_state)
        assert report.is_valid
        assert [(v.constraint, v.entity) for v in report.warnings] == [
            ("class_nearly_full", "5a")
        ]

    def test_unassigned_is_error_by_default(self):
        report = RosterValidator().validate(_make_state())
        assert not report.is_valid
        assert len([v for v in report.errors if v.constraint == "unassigned_pupil"]) == 4

    def test_unassigned_is_warning_when_tolerated(self):
        config = AssignmentConfig(require_all_assigned=False)
        report = RosterValidator(config).validate(_make_state())
        assert report.is_valid
        assert {v.constraint for v in report.warnings} == {"unassigned_pupil"}

    def test_count_mismatch(self, assigned_state: RosterState):
        broken = assigned_state.model_copy(update={"classes": [
            c.model_copy(update={"pupil_count": 0}) for c in assigned_state.classes
        ]})
        report = RosterValidator().validate(broken)
        assert not report.is_valid
        mismatches = [v.entity for v in report.errors if v.constraint == "pupil_count_mismatch"]
        assert mismatches == ["5a", "5b"]

    def test_over_capacity(self):
        state = RosterState(
            classes=[SchoolClass(id=1, name="5a", teacher_name="X", max_pupils=1,
                                 pupil_count=2)],
            pupils=[
                Pupil(id=1, name="Ada", class_name="5a", follow_up_number=1),
                Pupil(id=2, name="Bea", class_name="5a", follow_up_number=2),
            ],
        )
        report = RosterValidator().validate(state)
        assert _constraints(report) == {"class_over_capacity"}

    def test_unknown_class_name(self):
        state = RosterState(
            classes=[SchoolClass(id=1, name="5a", teacher_name="X", max_pupils=5)],
            pupils=[Pupil(id=1, name="Ada", class_name="9z", follow_up_number=1)],
        )
        report = RosterValidator().validate(state)
        assert not report.is_valid
        assert "unknown_class_name" in _constraints(report)

    def test_unknown_class_name_is_warning_when_tolerated(self):
        config = AssignmentConfig(require_all_assigned=False)
        state = RosterState(
            classes=[SchoolClass(id=1, name="5a", teacher_name="X", max_pupils=5)],
            pupils=[Pupil(id=1, name="Ada", class_name="9z")],
        )
        report = RosterValidator(config).validate(state)
        assert report.is_valid
        assert [(v.constraint, v.severity) for v in report.violations] == [
            ("unknown_class_name", "warning")
        ]

    def test_tolerant_apply_with_stale_class_name_validates(self):
        """Tolerante Einteilung mit veraltetem Klassennamen ist fehlerfrei."""
        config = AssignmentConfig(require_all_assigned=False)
        state = RosterState(
            classes=[SchoolClass(id=1, name="5a", teacher_name="X", max_pupils=5)],
            pupils=[
                Pupil(id=1, name="Ida", class_name="Z", follow_up_number=4),
                Pupil(id=2, name="Jan"),
            ],
        )
        result = AssignmentProcessor(config).apply(
            state, AssignmentRequest.from_pairs([(2, 1)])
        )
        assert result.ok
        ida = result.state.get_pupil(1)
        assert ida.class_name == "Z"
        assert ida.follow_up_number is None

        report = RosterValidator(config).validate(result.state)
        assert report.is_valid
        assert report.errors == []
        assert {v.constraint for v in report.warnings} == {"unknown_class_name"}

    def test_follow_up_sequence(self, assigned_state: RosterState):
        """Vertauschte Nummern werden erkannt."""
        swapped = {1: 1, 3: 3}
        broken = assigned_state.model_copy(update={"pupils": [
            p.model_copy(update={"follow_up_number": swapped[p.id]}) if p.id in swapped else p
            for p in assigned_state.pupils
        ]})
        report = RosterValidator().validate(broken)
        assert not report.is_valid
        assert {v.constraint for v in report.errors} == {"follow_up_sequence"}

    def test_report_model(self):
        v = ValidationViolation(severity="error", constraint="x", description="d", entity="e")
        report = ValidationReport(violations=[v], is_valid=False)
        assert report.errors == [v]
        assert report.warnings == []
        report.print_rich()
