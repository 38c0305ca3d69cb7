"""PDF-Export der Klassenlisten (fpdf2)."""

from pathlib import Path
from typing import Optional

from config.schema import RosterConfig
from models.roster_state import RosterState
from models.school_class import SchoolClass

from export.helpers import COLORS, hex_to_rgb, class_list_rows, today_str


def _pdf_safe(text: str) -> str:
    """Macht Namen wie 'Yılmaz' für die latin-1-Kernschriften druckbar (Umlaute bleiben)."""
    text = (
        text
        .replace("—", " - ")   # em dash —
        .replace("–", "-")      # en dash –
        .replace("─", "-")      # BOX DRAWINGS LIGHT HORIZONTAL ─
    )
    return text.encode("latin-1", errors="replace").decode("latin-1")


# ─── A4-Hochformat-Dimensionen ────────────────────────────────────────────────
# Portrait A4: 210 × 297 mm
# Nutzbare Breite (Margin 15 links+rechts): 180 mm
# Spalten: Nr.(15) + Name(125) + ID(40) = 180 mm

_COLS = {
    "nr":   15,
    "name": 125,
    "id":   40,
}
_ROW_H         = 7    # mm
_FONT_HEADER   = 10   # pt
_FONT_CONTENT  = 10   # pt


class _ClassListPdf:
    """Interner Wrapper um fpdf.FPDF für Klassenlisten-Seiten."""

    def __init__(self, school_name: str, school_year: str):
        from fpdf import FPDF

        class _Pdf(FPDF):
            def __init__(inner, sn, sy):
                super().__init__(orientation="P", unit="mm", format="A4")
                inner._school_name = sn
                inner._school_year = sy
                inner._entity_title = ""
                inner.alias_nb_pages()
                inner.set_auto_page_break(auto=True, margin=18)
                inner.set_margins(left=15, top=24, right=15)

            def header(inner):
                inner.set_font("Helvetica", "B", 11)
                inner.set_xy(15, 8)
                inner.cell(90, 7, _pdf_safe(inner._school_name), border=0, align="L")
                inner.cell(0,  7, _pdf_safe(inner._entity_title), border=0, align="R")
                inner.ln(0)
                inner.set_draw_color(150, 150, 150)
                inner.line(15, 18, inner.w - 15, 18)

            def footer(inner):
                inner.set_y(-14)
                inner.set_font("Helvetica", "I", 7)
                inner.cell(
                    0, 8,
                    _pdf_safe(
                        f"Schuljahr {inner._school_year}  |  {today_str()}  |  "
                        f"Seite {inner.page_no()}/{{nb}}"
                    ),
                    border=0, align="C",
                )

        self._pdf = _Pdf(school_name, school_year)

    def set_entity(self, title: str) -> None:
        self._pdf._entity_title = title

    def add_page(self) -> None:
        self._pdf.add_page()

    def save(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._pdf.output(str(path))

    # ─── Tabellen-Zeilen ──────────────────────────────────────────────────────

    def draw_row(
        self,
        values: list[str],
        header: bool = False,
        bg_hex: str | None = None,
    ) -> None:
        """Zeichnet eine Tabellenzeile Nr. | Name | ID an der aktuellen Position."""
        pdf = self._pdf
        if header:
            r, g, b = hex_to_rgb(COLORS["header"])
            pdf.set_fill_color(r, g, b)
            pdf.set_text_color(255, 255, 255)
            pdf.set_font("Helvetica", "B", _FONT_HEADER)
        else:
            pdf.set_text_color(0, 0, 0)
            pdf.set_font("Helvetica", "", _FONT_CONTENT)
            if bg_hex:
                pdf.set_fill_color(*hex_to_rgb(bg_hex))

        fill = header or bg_hex is not None
        pdf.set_draw_color(180, 180, 180)
        for value, key, align in zip(values, ("nr", "name", "id"), ("C", "L", "R")):
            pdf.cell(_COLS[key], _ROW_H, _pdf_safe(value), border=1, align=align, fill=fill)
        pdf.ln(_ROW_H)
        pdf.set_text_color(0, 0, 0)   # Reset


class PdfExporter:
    """Exportiert Klassenlisten eines RosterState als PDF."""

    def __init__(self, state: RosterState, config: Optional[RosterConfig] = None):
        self.state  = state
        self.config = config or RosterConfig()

    # ─── Öffentliche API ──────────────────────────────────────────────────────

    def export_class_lists(self, output_path: Path) -> None:
        """Eine A4-Seite je Klasse in Bestandsreihenfolge; ohne Klassen eine Hinweisseite."""
        pdf = _ClassListPdf(self.config.school_name, self.config.school_year)
        for cls in self.state.classes:
            pdf.set_entity(
                f"Klasse {cls.name} - {cls.teacher_name} | "
                f"{cls.pupil_count}/{cls.max_pupils} Schüler"
            )
            pdf.add_page()
            self._draw_class(pdf, cls)
        if not self.state.classes:
            pdf.set_entity("Keine Klassen")
            pdf.add_page()
        pdf.save(output_path)

    # ─── Klassenliste ─────────────────────────────────────────────────────────

    def _draw_class(self, pdf: _ClassListPdf, cls: SchoolClass) -> None:
        pdf.draw_row(["Nr.", "Name", "Schüler-ID"], header=True)
        for i, row in enumerate(class_list_rows(self.state, cls)):
            pdf.draw_row(row, bg_hex=COLORS["row_alt"] if i % 2 else None)
