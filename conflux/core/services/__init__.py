"""
Core service implementations: merger, scanner, broadcaster, scheduler and
the retriever facade combining them.
"""

from .merger import merge, merge_all
from .broadcaster import ChangeBroadcaster
from .scanner import Scanner
from .scheduler import ScanScheduler
from .retriever import ConfigRetriever, DEFAULT_SCAN_PERIOD

__all__ = [
    "merge",
    "merge_all",
    "ChangeBroadcaster",
    "Scanner",
    "ScanScheduler",
    "ConfigRetriever",
    "DEFAULT_SCAN_PERIOD",
]
