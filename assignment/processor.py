"""Klasseneinteilung: wendet einen Einteilungsauftrag auf einen Stand an.

Reine Funktion ohne Seiteneffekte: der Eingabe-Stand wird nie verändert,
bei Erfolg entsteht ein neuer RosterState, bei Fehlern gar keiner.

Ablauf:
  1. Auftrag prüfen (Klassen-IDs, Schüler-IDs, Doppelungen), bevor
     irgendetwas kopiert wird.
  2. Neue Klassennamen je Schüler bestimmen.
  3. Pro Klasse Mitglieder sortieren, laufende Nummern 1..N und Anzahl setzen.
  4. Ergebnis prüfen (alle zugeordnet, keine Überbelegung).
"""

import logging
from collections import Counter, defaultdict
from typing import Optional

from config.schema import AssignmentConfig
from models.assignment_request import AssignmentRequest
from models.pupil import Pupil
from models.roster_state import RosterState
from models.school_class import SchoolClass

from assignment.collation import pupil_sort_key
from assignment.errors import AssignmentError, AssignmentResult

logger = logging.getLogger(__name__)


class AssignmentProcessor:
    """Validiert Einteilungsaufträge und berechnet den neuen Stand."""

    def __init__(self, config: Optional[AssignmentConfig] = None):
        self.config = config or AssignmentConfig()

    def apply(
        self, state: RosterState, request: AssignmentRequest
    ) -> AssignmentResult:
        """Wendet `request` auf `state` an und gibt ein AssignmentResult zurück."""
        error = self._validate_request(state, request)
        if error is not None:
            return self._reject(error)

        class_by_id = {c.id: c for c in state.classes}
        targets = {
            a.pupil_id: class_by_id[a.class_id].name for a in request.assignments
        }
        class_names = [targets.get(p.id, p.class_name) for p in state.pupils]

        numbers, counts = self._number_pupils(state.pupils, class_names, state.classes)

        pupils = [
            p.model_copy(update={
                "class_name": class_names[i],
                "follow_up_number": numbers.get(i),
            })
            for i, p in enumerate(state.pupils)
        ]
        classes = [
            c.model_copy(update={"pupil_count": counts[c.name]})
            for c in state.classes
        ]

        error = self._check_unassigned(pupils, classes) or self._check_capacity(classes)
        if error is not None:
            return self._reject(error)

        new_state = state.model_copy(update={"pupils": pupils, "classes": classes})
        changed = sum(
            1 for old, new in zip(state.classes, classes)
            if old.pupil_count != new.pupil_count
        )
        logger.info(
            f"Einteilung übernommen: {len(request)} Zuordnungen, "
            f"{changed} Klassen mit neuer Schülerzahl"
        )
        return AssignmentResult.success(new_state)

    # ── Auftrag prüfen ────────────────────────────────────────────────────────

    def _validate_request(
        self, state: RosterState, request: AssignmentRequest
    ) -> Optional[AssignmentError]:
        """Fail-fast in fester Reihenfolge: Klassen, Schüler, Doppelungen."""
        class_ids = {c.id for c in state.classes}
        for a in request.assignments:
            if a.class_id not in class_ids:
                return AssignmentError.unknown_class(a.class_id)

        pupil_ids = {p.id for p in state.pupils}
        for a in request.assignments:
            if a.pupil_id not in pupil_ids:
                return AssignmentError.unknown_pupil(a.pupil_id)

        seen: set[int] = set()
        for a in request.assignments:
            if a.pupil_id in seen:
                return AssignmentError.duplicate_pupil(a.pupil_id)
            seen.add(a.pupil_id)
        return None

    # ── Neu nummerieren ───────────────────────────────────────────────────────

    def _number_pupils(
        self,
        pupils: list[Pupil],
        class_names: list[Optional[str]],
        classes: list[SchoolClass],
    ) -> tuple[dict[int, int], Counter]:
        """Gibt {Schüler-Index: laufende Nummer} und {Klassenname: Anzahl} zurück.

        Schüler ohne existierende Klasse bekommen keine Nummer.
        """
        known = {c.name for c in classes}
        members: dict[str, list[int]] = defaultdict(list)
        for i, name in enumerate(class_names):
            if name in known:
                members[name].append(i)

        policy = self.config.collation
        numbers: dict[int, int] = {}
        counts: Counter = Counter()
        for name in (c.name for c in classes):
            ordered = sorted(members[name], key=lambda i: pupil_sort_key(pupils[i], policy))
            for rank, i in enumerate(ordered, start=1):
                numbers[i] = rank
            counts[name] = len(ordered)
            logger.debug(f"Klasse {name}: {len(ordered)} Schüler")
        return numbers, counts

    # ── Ergebnis prüfen ───────────────────────────────────────────────────────

    def _check_unassigned(
        self, pupils: list[Pupil], classes: list[SchoolClass]
    ) -> Optional[AssignmentError]:
        if not self.config.require_all_assigned:
            return None
        known = {c.name for c in classes}
        for p in pupils:
            if p.class_name not in known:
                return AssignmentError.unassigned_pupil(p.id)
        return None

    def _check_capacity(
        self, classes: list[SchoolClass]
    ) -> Optional[AssignmentError]:
        for c in classes:
            if c.pupil_count > c.max_pupils:
                return AssignmentError.over_capacity(c.id, c.pupil_count, c.max_pupils)
        return None

    def _reject(self, error: AssignmentError) -> AssignmentResult:
        logger.warning(f"Einteilung abgelehnt ({error.kind.value}): {error.message}")
        return AssignmentResult.failure(error)


def apply_assignments(
    state: RosterState,
    request: AssignmentRequest,
    config: Optional[AssignmentConfig] = None,
) -> AssignmentResult:
    """Kurzform für AssignmentProcessor(config).apply(state, request)."""
    return AssignmentProcessor(config).apply(state, request)
