"""ETL package - roster and agenda import, database validation."""

from etl.agenda import read_agenda
from etl.legislators import import_roster, read_roster
from etl.validation import validate_chamber

__all__ = [
    "import_roster",
    "read_agenda",
    "read_roster",
    "validate_chamber",
]
