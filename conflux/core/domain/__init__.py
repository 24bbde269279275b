"""
Domain models for configuration documents, snapshots and change events.
"""

from .documents import Document, copy_document, documents_equal, empty_document, is_document
from .snapshot import ChangeEvent, EngineState, SchedulerState, ScanTrigger, Snapshot

__all__ = [
    "Document",
    "copy_document",
    "documents_equal",
    "empty_document",
    "is_document",
    "ChangeEvent",
    "EngineState",
    "SchedulerState",
    "ScanTrigger",
    "Snapshot",
]
