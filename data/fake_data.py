"""Testdaten-Generator für die Klasseneinteilung.

Erzeugt einen realistischen Schülerbestand (alle noch ohne Klasse) und einen
passenden Einteilungsauftrag.

Absichtliche Stolpersteine:
  1. Umlaute und ß in Namen (Sortierung nach DIN 5007)
  2. Kleingeschriebene Namen (Sortierung unabhängig von Groß/Klein)
  3. Doppelte Namen (Gleichstand wird über die ID aufgelöst)
"""

import random

from config.defaults import DEFAULT_GRADES, DEFAULT_MAX_PUPILS
from models.assignment_request import AssignmentRequest
from models.pupil import Pupil
from models.roster_state import RosterState
from models.school_class import SchoolClass

# ─── Namens-Listen ────────────────────────────────────────────────────────────

_FIRST_NAMES = [
    "Ali", "Anna", "Ben", "Clara", "David", "Elif", "Emil", "Finn", "Greta",
    "Hannah", "Ida", "Jonas", "Jule", "Karl", "Lea", "Leon", "Lina", "Luca",
    "Marie", "Mats", "Mia", "Noah", "Ole", "Paul", "Sophie", "Theo", "Yusuf",
    "Zoe", "Ömer", "Ägidius",
]

_LAST_NAMES = [
    "Müller", "Schmidt", "Schneider", "Fischer", "Weber", "Meyer",
    "Wagner", "Becker", "Schulz", "Hoffmann", "Schäfer", "Koch",
    "Bauer", "Richter", "Klein", "Wolf", "Schröder", "Neumann",
    "Schwarz", "Zimmermann", "Braun", "Krüger", "Hofmann", "Hartmann",
    "Lange", "Strauß", "Özdemir", "Yılmaz", "Weiß", "Engel", "van Dijk",
]

_TEACHER_NAMES = [
    "Müller, Anna", "Schmidt, Hans", "Weber, Eva", "Becker, Klaus",
    "Koch, Lisa", "Wagner, Tom", "Braun, Sara", "Wolf, Peter",
    "Neumann, Maria", "Schulz, Ralf", "Krause, Ute", "Lehmann, Jürgen",
]

_CLASS_LABELS = "abcdefgh"


class FakeRosterGenerator:
    """Erzeugt reproduzierbare Testdaten (gleicher Seed → gleiche Daten)."""

    def __init__(self, seed: int = 42):
        self.rng = random.Random(seed)

    def generate(
        self,
        num_classes: int = 4,
        pupils_per_class: int = 25,
        max_pupils: int = DEFAULT_MAX_PUPILS,
    ) -> RosterState:
        """Erzeugt Klassen und Schüler; alle Schüler sind noch ohne Klasse."""
        classes = self._generate_classes(num_classes, max_pupils)
        pupils = self._generate_pupils(num_classes * pupils_per_class)
        return RosterState(pupils=pupils, classes=classes)

    def generate_request(self, state: RosterState) -> AssignmentRequest:
        """Verteilt alle Schüler zufällig, ohne eine Klasse zu überbelegen.

        Raises:
            ValueError: wenn die Gesamtkapazität nicht reicht.
        """
        capacity = sum(c.max_pupils for c in state.classes)
        if len(state.pupils) > capacity:
            raise ValueError(
                f"{len(state.pupils)} Schüler, aber nur {capacity} Plätze."
            )
        free = {c.id: c.max_pupils for c in state.classes}
        pupils = list(state.pupils)
        self.rng.shuffle(pupils)

        pairs: list[tuple[int, int]] = []
        for p in pupils:
            open_ids = [cid for cid, n in free.items() if n > 0]
            # Bevorzugt die Klasse mit den meisten freien Plätzen
            best = max(free[cid] for cid in open_ids)
            class_id = self.rng.choice([cid for cid in open_ids if free[cid] == best])
            free[class_id] -= 1
            pairs.append((p.id, class_id))
        return AssignmentRequest.from_pairs(pairs)

    # ─── Einzelteile ──────────────────────────────────────────────────────

    def _generate_classes(self, num_classes: int, max_pupils: int) -> list[SchoolClass]:
        classes: list[SchoolClass] = []
        teachers = self.rng.sample(_TEACHER_NAMES, k=min(num_classes, len(_TEACHER_NAMES)))
        grade = self.rng.choice(DEFAULT_GRADES)
        for i in range(num_classes):
            label = _CLASS_LABELS[i % len(_CLASS_LABELS)]
            # Mehr als 8 Parallelklassen: nächster Jahrgang
            name = f"{grade + i // len(_CLASS_LABELS)}{label}"
            classes.append(SchoolClass(
                id=i + 1,
                name=name,
                teacher_name=teachers[i % len(teachers)],
                max_pupils=max_pupils,
            ))
        return classes

    def _generate_pupils(self, count: int) -> list[Pupil]:
        pupils: list[Pupil] = []
        for i in range(count):
            name = f"{self.rng.choice(_FIRST_NAMES)} {self.rng.choice(_LAST_NAMES)}"
            if self.rng.random() < 0.05:
                name = name.lower()
            pupils.append(Pupil(id=1000 + i, name=name))
        return pupils
