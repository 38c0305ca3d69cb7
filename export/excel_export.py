"""Excel-Export der Klassenlisten (openpyxl)."""

from pathlib import Path
from typing import Optional

from analysis.diff import RosterDiff
from config.schema import RosterConfig
from models.roster_state import RosterState
from models.school_class import SchoolClass

from export.helpers import (
    COLORS, class_list_rows, class_overview_rows, occupancy_color, today_str,
)


class ExcelExporter:
    """Exportiert einen RosterState in eine Excel-Datei.

    Blätter: "Übersicht", je Klasse ein Blatt, optional "Änderungen"
    (wenn ein Diff übergeben wird) und "Ohne Klasse".
    """

    # Spaltenbreiten (Excel-Einheiten)
    COL_NR_W   = 6
    COL_NAME_W = 32
    COL_ID_W   = 10

    ROW_HEADER_H = 22

    OVERVIEW_HEADERS = ["Klasse", "Klassenleitung", "Schüler", "Max", "Auslastung"]
    CLASS_HEADERS = ["Nr.", "Name", "Schüler-ID"]

    def __init__(
        self,
        state: RosterState,
        config: Optional[RosterConfig] = None,
        diff: Optional[RosterDiff] = None,
    ):
        self.state  = state
        self.config = config or RosterConfig()
        self.diff   = diff

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export(self, output_path: Path) -> None:
        """Erstellt die Excel-Datei mit allen Blättern."""
        from openpyxl import Workbook
        wb = Workbook()
        wb.remove(wb.active)   # Leeres Standard-Sheet entfernen

        self._sheet_uebersicht(wb)

        for cls in self.state.classes:
            self._sheet_klasse(wb, cls)

        if self.diff is not None:
            self._sheet_aenderungen(wb, self.diff)

        unassigned = self.state.unassigned_pupils()
        if unassigned:
            ws = wb.create_sheet("Ohne Klasse")
            self._write_header_row(ws, ["Name", "Schüler-ID", "Klasse (ungültig)"])
            for r, p in enumerate(unassigned, 2):
                ws.cell(row=r, column=1, value=p.name)
                ws.cell(row=r, column=2, value=p.id)
                ws.cell(row=r, column=3, value=p.class_name or "")
                for col in range(1, 4):
                    ws.cell(row=r, column=col).fill = self._fill(COLORS["unassigned"])
            self._set_widths(ws, [self.COL_NAME_W, self.COL_ID_W, 18])

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)

    # ─── Style-Helpers ────────────────────────────────────────────────────────

    def _fill(self, hex_color: str):
        from openpyxl.styles import PatternFill
        return PatternFill(start_color=hex_color, end_color=hex_color, fill_type="solid")

    def _thin_border(self):
        from openpyxl.styles import Border, Side
        s = Side(border_style="thin", color="BBBBBB")
        return Border(left=s, right=s, top=s, bottom=s)

    def _set_widths(self, ws, widths: list[int]) -> None:
        from openpyxl.utils import get_column_letter
        for col, w in enumerate(widths, 1):
            ws.column_dimensions[get_column_letter(col)].width = w

    def _write_header_row(self, ws, headers: list[str]) -> None:
        """Schreibt eine blaue Kopfzeile in Zeile 1."""
        from openpyxl.styles import Alignment, Font
        fill = self._fill(COLORS["header"])
        border = self._thin_border()
        for col, text in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=text)
            cell.fill = fill
            cell.font = Font(bold=True, color="FFFFFF", size=10)
            cell.alignment = Alignment(horizontal="center", vertical="center")
            cell.border = border
        ws.row_dimensions[1].height = self.ROW_HEADER_H
        ws.freeze_panes = "A2"

    # ─── Blätter ──────────────────────────────────────────────────────────────

    def _sheet_uebersicht(self, wb) -> None:
        """Übersicht aller Klassen mit Ampelfarbe für die Auslastung."""
        from openpyxl.styles import Font
        ws = wb.create_sheet("Übersicht")
        self._write_header_row(ws, self.OVERVIEW_HEADERS)
        border = self._thin_border()
        warn = self.config.assignment.warn_occupancy

        r = 2
        for cls, row in zip(self.state.classes, class_overview_rows(self.state)):
            for col, value in enumerate(row, 1):
                # Zahlen als Zahlen schreiben, damit Excel damit rechnen kann
                if col in (3, 4):
                    value = int(value)
                c = ws.cell(row=r, column=col, value=value)
                c.border = border
            ws.cell(row=r, column=5).fill = self._fill(occupancy_color(cls, warn))
            r += 1

        footer = f"{self.config.school_name} | {self.config.school_year} | Stand {today_str()}"
        c = ws.cell(row=r + 1, column=1, value=footer)
        c.font = Font(italic=True, size=8, color="666666")
        self._set_widths(ws, [10, 28, 10, 8, 12])

    def _sheet_klasse(self, wb, cls: SchoolClass) -> None:
        """Ein Blatt pro Klasse: Schüler in Reihenfolge der laufenden Nummer."""
        ws = wb.create_sheet(self._sheet_title(f"Klasse {cls.name}"))
        self._write_header_row(ws, self.CLASS_HEADERS)
        border = self._thin_border()
        changed = self._changed_pupil_ids()

        for r, (nr, name, pid) in enumerate(class_list_rows(self.state, cls), 2):
            values = [int(nr) if nr else None, name, int(pid)]
            for col, value in enumerate(values, 1):
                c = ws.cell(row=r, column=col, value=value)
                c.border = border
                if int(pid) in changed:
                    c.fill = self._fill(COLORS["changed"])
                elif r % 2 == 1:
                    c.fill = self._fill(COLORS["row_alt"])
        self._set_widths(ws, [self.COL_NR_W, self.COL_NAME_W, self.COL_ID_W])

    def _sheet_aenderungen(self, wb, diff: RosterDiff) -> None:
        """Geänderte Schüler und Klassen untereinander."""
        from openpyxl.styles import Font
        ws = wb.create_sheet("Änderungen")
        self._write_header_row(ws, ["Schüler-ID", "Name", "Neue Klasse", "Neue Nr."])
        names = {p.id: p.name for p in self.state.pupils}

        r = 2
        for p in diff.updated_pupils:
            ws.cell(row=r, column=1, value=p.pupil_id)
            ws.cell(row=r, column=2, value=names.get(p.pupil_id, ""))
            ws.cell(row=r, column=3, value=p.class_name or "")
            ws.cell(row=r, column=4, value=p.follow_up_number)
            r += 1

        r += 1
        ws.cell(row=r, column=1, value="Klassen-ID").font = Font(bold=True)
        ws.cell(row=r, column=2, value="Klasse").font = Font(bold=True)
        ws.cell(row=r, column=3, value="Neue Schülerzahl").font = Font(bold=True)
        class_names = {c.id: c.name for c in self.state.classes}
        for c in diff.updated_classes:
            r += 1
            ws.cell(row=r, column=1, value=c.class_id)
            ws.cell(row=r, column=2, value=class_names.get(c.class_id, ""))
            ws.cell(row=r, column=3, value=c.pupil_count)
        self._set_widths(ws, [12, self.COL_NAME_W, 16, 10])

    # ─── Sonstiges ────────────────────────────────────────────────────────────

    def _changed_pupil_ids(self) -> set[int]:
        if self.diff is None:
            return set()
        return {p.pupil_id for p in self.diff.updated_pupils}

    @staticmethod
    def _sheet_title(title: str) -> str:
        """Excel erlaubt max. 31 Zeichen und keine []:*?/\\ im Blattnamen."""
        for ch in "[]:*?/\\":
            title = title.replace(ch, "-")
        return title[:31]
