"""Tests für das Konfigurationssystem, die Datenmodelle und den Testdaten-Generator."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from config.schema import (
    AssignmentConfig,
    CollationPolicy,
    ExportConfig,
    LoggingConfig,
    RosterConfig,
)
from config.defaults import (
    DEFAULT_GRADES,
    DEFAULT_MAX_PUPILS,
    default_assignment,
    default_roster_config,
)
from config.manager import ConfigManager
from models import Assignment, AssignmentRequest, Pupil, RosterState, SchoolClass
from data.fake_data import FakeRosterGenerator


def _manager(tmp_path: Path) -> ConfigManager:
    mgr = ConfigManager()
    mgr.CONFIG_DIR = tmp_path
    mgr.DEFAULT_CONFIG = tmp_path / "roster_config.yaml"
    return mgr


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_assignment(self):
        """Standard: alle Schüler zugeordnet, Sortierung nach DIN 5007."""
        ac = default_assignment()
        assert ac.require_all_assigned is True
        assert ac.collation == CollationPolicy.DIN5007
        assert ac.warn_occupancy == 0.9

    def test_default_roster_config_equals_plain_model(self):
        """default_roster_config() entspricht RosterConfig() ohne Argumente."""
        assert default_roster_config() == RosterConfig()

    def test_default_export_paths(self):
        ec = RosterConfig().export
        assert ec.output_dir == "output"
        assert ec.excel_filename.endswith(".xlsx")
        assert ec.pdf_filename.endswith(".pdf")

    @pytest.mark.parametrize("seed", [1, 2, 3, 42])
    def test_generator_uses_defaults(self, seed: int):
        """Ohne Angaben: Höchstzahl DEFAULT_MAX_PUPILS, Jahrgang aus DEFAULT_GRADES."""
        state = FakeRosterGenerator(seed=seed).generate()
        assert all(c.max_pupils == DEFAULT_MAX_PUPILS for c in state.classes)
        grades = {int(c.name[:-1]) for c in state.classes}
        assert len(grades) == 1
        assert grades <= set(DEFAULT_GRADES)


# ─── PYDANTIC-VALIDIERUNG ─────────────────────────────────────────────────────

class TestPydanticValidation:
    def test_collation_from_string(self):
        assert AssignmentConfig(collation="ordinal").collation == CollationPolicy.ORDINAL

    def test_unknown_collation_raises(self):
        with pytest.raises(ValidationError):
            AssignmentConfig(collation="alphabetisch")

    @pytest.mark.parametrize("warn", [0.0, -0.5, 1.5])
    def test_warn_occupancy_out_of_range(self, warn):
        with pytest.raises(ValidationError):
            AssignmentConfig(warn_occupancy=warn)

    def test_excel_filename_must_be_xlsx(self):
        with pytest.raises(ValidationError, match="xlsx"):
            ExportConfig(excel_filename="listen.csv")

    def test_pdf_filename_must_be_pdf(self):
        with pytest.raises(ValidationError, match="pdf"):
            ExportConfig(pdf_filename="listen.txt")

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level="TRACE")


# ─── CONFIG-MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        """Gespeicherte Config wird unverändert wieder geladen."""
        mgr = _manager(tmp_path)
        config = RosterConfig(
            school_name="Gesamtschule Süd",
            school_year="2027/28",
            assignment=AssignmentConfig(
                require_all_assigned=False,
                collation=CollationPolicy.CASEFOLD,
                warn_occupancy=0.8,
            ),
            logging=LoggingConfig(level="DEBUG"),
        )
        mgr.save(config)
        assert mgr.DEFAULT_CONFIG.exists()
        assert mgr.load() == config

    def test_saved_yaml_has_comments(self, tmp_path: Path):
        mgr = _manager(tmp_path)
        mgr.save(RosterConfig())
        text = mgr.DEFAULT_CONFIG.read_text(encoding="utf-8")
        assert text.startswith("# ====")
        assert "Einteilung" in text
        assert "collation: din5007" in text

    def test_first_run_check_no_file(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "nonexistent.yaml"
        assert mgr.first_run_check() is True

    def test_first_run_check_with_file(self, tmp_path: Path):
        mgr = _manager(tmp_path)
        mgr.save(RosterConfig())
        assert mgr.first_run_check() is False

    def test_load_nonexistent_raises(self, tmp_path: Path):
        mgr = ConfigManager()
        with pytest.raises(FileNotFoundError):
            mgr.load(tmp_path / "not_there.yaml")

    def test_load_invalid_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "kaputt.yaml"
        path.write_text("assignment:\n  warn_occupancy: 5\n", encoding="utf-8")
        with pytest.raises(ValueError, match="ungültig"):
            ConfigManager().load(path)

    def test_load_partial_file_fills_defaults(self, tmp_path: Path):
        path = tmp_path / "teil.yaml"
        path.write_text("school_name: Realschule Nord\n", encoding="utf-8")
        config = ConfigManager().load(path)
        assert config.school_name == "Realschule Nord"
        assert config.assignment == AssignmentConfig()

    def test_load_or_default_without_file(self, tmp_path: Path):
        mgr = _manager(tmp_path)
        assert mgr.load_or_default() == RosterConfig()


# ─── DATENMODELLE ─────────────────────────────────────────────────────────────

class TestModels:
    def test_pupil_defaults(self):
        p = Pupil(id=1, name="Anna")
        assert p.class_name is None
        assert p.follow_up_number is None
        assert not p.is_assigned

    def test_pupil_blank_class_name_is_none(self):
        """Leerer Klassenname bedeutet 'ohne Klasse'."""
        assert Pupil(id=1, name="Anna", class_name="  ").class_name is None

    def test_pupil_follow_up_must_be_positive(self):
        with pytest.raises(ValidationError):
            Pupil(id=1, name="Anna", class_name="5a", follow_up_number=0)

    def test_school_class_properties(self):
        c = SchoolClass(id=1, name="5a", teacher_name="Müller, Anna",
                        max_pupils=20, pupil_count=15)
        assert c.free_places == 5
        assert c.occupancy == 0.75

    def test_school_class_max_pupils_positive(self):
        with pytest.raises(ValidationError):
            SchoolClass(id=1, name="5a", teacher_name="X", max_pupils=0)

    def test_roster_duplicate_pupil_ids_rejected(self):
        with pytest.raises(ValidationError, match="Schüler-ID"):
            RosterState(pupils=[Pupil(id=1, name="A"), Pupil(id=1, name="B")])

    def test_roster_duplicate_class_names_rejected(self):
        with pytest.raises(ValidationError, match="Klassenname"):
            RosterState(classes=[
                SchoolClass(id=1, name="5a", teacher_name="X", max_pupils=5),
                SchoolClass(id=2, name="5a", teacher_name="Y", max_pupils=5),
            ])

    def test_roster_lookups(self):
        state = RosterState(
            classes=[SchoolClass(id=7, name="6c", teacher_name="X", max_pupils=5,
                                 pupil_count=2)],
            pupils=[
                Pupil(id=1, name="Bea", class_name="6c", follow_up_number=2),
                Pupil(id=2, name="Ada", class_name="6c", follow_up_number=1),
                Pupil(id=3, name="Cem", class_name="9z"),
                Pupil(id=4, name="Dora"),
            ],
        )
        assert state.get_class(7).name == "6c"
        assert state.get_class(8) is None
        assert state.get_class_by_name("6c").id == 7
        assert state.get_pupil(2).name == "Ada"
        assert [p.id for p in state.pupils_in_class("6c")] == [2, 1]
        assert [p.id for p in state.unassigned_pupils()] == [3, 4]
        assert "Schüler: 4 (2 ohne Klasse)" in state.summary()

    def test_roster_json_roundtrip(self, tmp_path: Path):
        state = FakeRosterGenerator(seed=1).generate(num_classes=2, pupils_per_class=3)
        path = tmp_path / "stand.json"
        state.save_json(path)
        loaded = RosterState.load_json(path)
        assert loaded.pupils == state.pupils
        assert loaded.classes == state.classes
        assert loaded.created_at is not None
        assert loaded.modified_at is not None

    def test_roster_save_versioned(self, tmp_path: Path):
        path = RosterState().save_versioned(tmp_path / "stand.json")
        assert path.exists()
        assert path.name.startswith("stand_")
        assert path.suffix == ".json"

    def test_roster_load_missing_raises(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            RosterState.load_json(tmp_path / "fehlt.json")

    def test_request_json_roundtrip(self, tmp_path: Path):
        request = AssignmentRequest.from_pairs([(1, 2), (3, 4)])
        path = tmp_path / "auftrag.json"
        request.save_json(path)
        assert json.loads(path.read_text(encoding="utf-8")) == {
            "assignments": [
                {"pupil_id": 1, "class_id": 2},
                {"pupil_id": 3, "class_id": 4},
            ]
        }
        loaded = AssignmentRequest.load_json(path)
        assert loaded.assignments == [Assignment(pupil_id=1, class_id=2),
                                      Assignment(pupil_id=3, class_id=4)]
        assert len(loaded) == 2


# ─── TESTDATEN-GENERATOR ──────────────────────────────────────────────────────

class TestFakeData:
    def test_generate_counts(self):
        state = FakeRosterGenerator().generate(num_classes=3, pupils_per_class=10)
        assert len(state.classes) == 3
        assert len(state.pupils) == 30
        assert all(not p.is_assigned for p in state.pupils)
        assert all(c.pupil_count == 0 for c in state.classes)

    def test_same_seed_same_data(self):
        a = FakeRosterGenerator(seed=7).generate()
        b = FakeRosterGenerator(seed=7).generate()
        assert a.pupils == b.pupils
        assert a.classes == b.classes

    def test_class_names_unique_beyond_eight(self):
        state = FakeRosterGenerator().generate(num_classes=10, pupils_per_class=1)
        names = [c.name for c in state.classes]
        assert len(set(names)) == 10

    def test_request_respects_capacity(self):
        gen = FakeRosterGenerator()
        state = gen.generate(num_classes=3, pupils_per_class=10, max_pupils=12)
        request = gen.generate_request(state)
        assert sorted(a.pupil_id for a in request.assignments) == sorted(
            p.id for p in state.pupils
        )
        per_class: dict[int, int] = {}
        for a in request.assignments:
            per_class[a.class_id] = per_class.get(a.class_id, 0) + 1
        assert all(n <= 12 for n in per_class.values())

    def test_request_insufficient_capacity_raises(self):
        gen = FakeRosterGenerator()
        state = gen.generate(num_classes=2, pupils_per_class=10, max_pupils=5)
        with pytest.raises(ValueError, match="Plätze"):
            gen.generate_request(state)
