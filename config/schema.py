from pydantic import BaseModel, Field, field_validator
from typing import Literal
from enum import Enum


class CollationPolicy(str, Enum):
    """Sortierregel für Schülernamen innerhalb einer Klasse.

    Gleichstand wird immer zuerst über den unveränderten Namen, dann über
    die Schüler-ID aufgelöst.
    """
    # Wörterbuch-Sortierung nach DIN 5007-1: Groß/Klein egal, Ä wie A, ß wie ss
    DIN5007 = "din5007"
    # Nur Groß-/Kleinschreibung ignorieren
    CASEFOLD = "casefold"
    # Reine Codepoint-Reihenfolge ("Bob" < "Charlie" < "alice")
    ORDINAL = "ordinal"


# ─── EINTEILUNG ───

class AssignmentConfig(BaseModel):
    """Regeln für die Klasseneinteilung."""
    # Jeder Schüler muss nach der Einteilung eine Klasse haben.
    # False: Schüler ohne Klasse (auch schon vorher ohne) werden toleriert.
    require_all_assigned: bool = Field(True,
        description="Alle Schüler müssen einer Klasse zugeordnet sein")
    # Sortierregel für die laufenden Nummern
    collation: CollationPolicy = Field(CollationPolicy.DIN5007,
        description="Sortierregel für Schülernamen")
    # Ab dieser Auslastung meldet die Prüfung eine Warnung
    warn_occupancy: float = Field(0.9, gt=0.0, le=1.0,
        description="Warnschwelle Auslastung (Anteil)")


# ─── EXPORT ───

class ExportConfig(BaseModel):
    """Ausgabepfade für Klassenlisten."""
    # Zielverzeichnis für alle Exporte
    output_dir: str = Field("output",
        description="Zielverzeichnis für Exporte")
    # Dateiname der Excel-Klassenlisten
    excel_filename: str = Field("klassenlisten.xlsx",
        description="Dateiname Excel-Export")
    # Dateiname der PDF-Klassenlisten
    pdf_filename: str = Field("klassenlisten.pdf",
        description="Dateiname PDF-Export")

    @field_validator("excel_filename")
    @classmethod
    def _check_xlsx(cls, v: str) -> str:
        if not v.endswith(".xlsx"):
            raise ValueError(f"Excel-Dateiname muss auf .xlsx enden: {v}")
        return v

    @field_validator("pdf_filename")
    @classmethod
    def _check_pdf(cls, v: str) -> str:
        if not v.endswith(".pdf"):
            raise ValueError(f"PDF-Dateiname muss auf .pdf enden: {v}")
        return v


# ─── LOGGING ───

class LoggingConfig(BaseModel):
    """Protokollierung auf der Konsole."""
    # Log-Level für die Konsole (--verbose setzt DEBUG)
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("WARNING",
        description="Log-Level")


# ─── GESAMT-CONFIG ───

class RosterConfig(BaseModel):
    """Gesamtkonfiguration der Klasseneinteilung."""
    # Name der Schule (erscheint in Exporten)
    school_name: str = Field("Muster-Gymnasium",
        description="Name der Schule")
    # Schuljahr, z.B. "2026/27"
    school_year: str = Field("2026/27",
        description="Schuljahr")
    # Einteilungsregeln
    assignment: AssignmentConfig = Field(default_factory=AssignmentConfig)
    # Exportpfade
    export: ExportConfig = Field(default_factory=ExportConfig)
    # Protokollierung
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
