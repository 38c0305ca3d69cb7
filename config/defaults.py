from config.schema import (
    AssignmentConfig,
    CollationPolicy,
    ExportConfig,
    LoggingConfig,
    RosterConfig,
)


# Übliche Klassenobergrenze (Klassenfrequenzhöchstwert Sek I, NRW)
DEFAULT_MAX_PUPILS = 30

# Jahrgangsstufen, für die der Testdaten-Generator Klassen anlegt
DEFAULT_GRADES = [5, 6, 7, 8, 9, 10]


def default_assignment() -> AssignmentConfig:
    """Strenge Standardregeln: alle Schüler zugeordnet, DIN-5007-Sortierung."""
    return AssignmentConfig(
        require_all_assigned=True,
        collation=CollationPolicy.DIN5007,
        warn_occupancy=0.9,
    )


def default_roster_config() -> RosterConfig:
    """Vollständige Standard-Konfiguration."""
    return RosterConfig(
        school_name="Muster-Gymnasium",
        school_year="2026/27",
        assignment=default_assignment(),
        export=ExportConfig(),
        logging=LoggingConfig(level="WARNING"),
    )
