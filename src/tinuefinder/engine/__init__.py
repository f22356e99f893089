"""Search package: rules-engine protocol, Tak adapter and tinue searcher."""

from tinuefinder.engine.search import (
    CancelCheck,
    RulesEngine,
    SearchLimits,
    SearchResult,
    TinueLine,
)
from tinuefinder.engine.tak_rules import TakRules
from tinuefinder.engine.tinue_search import TinueSearcher

__all__ = [
    "CancelCheck",
    "RulesEngine",
    "SearchLimits",
    "SearchResult",
    "TakRules",
    "TinueLine",
    "TinueSearcher",
]
