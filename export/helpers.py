"""Gemeinsame Hilfsfunktionen für Excel-, PDF- und Terminal-Export."""

from datetime import date

from models.roster_state import RosterState
from models.school_class import SchoolClass

# ─── Farbpalette (RRGGBB, ohne #) ─────────────────────────────────────────────

COLORS: dict[str, str] = {
    "ok":         "B3FFB3",
    "nearly":     "FFF2B3",
    "full":       "FFD4B3",
    "over":       "FF9999",
    "unassigned": "FF9999",
    "changed":    "FFFFB3",
    "row_alt":    "F5F5F5",
    "header":     "4472C4",
}


def hex_to_rgb(hex_color: str) -> tuple[int, int, int]:
    """Wandelt RRGGBB-String in (r, g, b)-Tupel um."""
    h = hex_color.lstrip("#")
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def today_str() -> str:
    """Gibt das heutige Datum als DD.MM.YYYY zurück."""
    return date.today().strftime("%d.%m.%Y")


# ─── Auslastung ───────────────────────────────────────────────────────────────

def occupancy_color(cls: SchoolClass, warn_occupancy: float = 0.9) -> str:
    """Ampelfarbe für die Auslastung einer Klasse."""
    if cls.pupil_count > cls.max_pupils:
        return COLORS["over"]
    if cls.pupil_count == cls.max_pupils:
        return COLORS["full"]
    if cls.pupil_count >= warn_occupancy * cls.max_pupils:
        return COLORS["nearly"]
    return COLORS["ok"]


def class_overview_rows(state: RosterState) -> list[list[str]]:
    """Zeilen [Klasse, Klassenleitung, Schüler, Max, Auslastung] je Klasse."""
    return [
        [
            c.name,
            c.teacher_name,
            str(c.pupil_count),
            str(c.max_pupils),
            f"{c.occupancy:.0%}",
        ]
        for c in state.classes
    ]


def class_list_rows(state: RosterState, cls: SchoolClass) -> list[list[str]]:
    """Zeilen [Nr., Name, Schüler-ID] einer Klasse in Reihenfolge der Nummern."""
    return [
        [str(p.follow_up_number or ""), p.name, str(p.id)]
        for p in state.pupils_in_class(cls.name)
    ]
