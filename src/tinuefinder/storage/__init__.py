"""Storage package: games database access and tinue persistence."""

from tinuefinder.storage.candidates import CandidateQuery
from tinuefinder.storage.database import ensure_schema, open_database
from tinuefinder.storage.persister import ResultPersister

__all__ = ["CandidateQuery", "ResultPersister", "ensure_schema", "open_database"]
