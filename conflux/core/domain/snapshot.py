"""
Snapshot and change event domain models.

A snapshot is the last published configuration document together with a
logical version counter. Change events carry the full previous and new
documents to listeners whenever the effective configuration changes.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from .documents import Document, copy_document, empty_document


class EngineState(Enum):
    """Scan pipeline state."""
    IDLE = "idle"
    SCANNING = "scanning"
    CLOSED = "closed"


class SchedulerState(Enum):
    """Periodic scheduler lifecycle state."""
    STOPPED = "stopped"
    RUNNING = "running"
    CLOSED = "closed"


class ScanTrigger(Enum):
    """What caused a scan to run."""
    MANUAL = "manual"
    SCHEDULED = "scheduled"


@dataclass(frozen=True)
class Snapshot:
    """
    Immutable published configuration.

    The document held here is a private copy owned by the snapshot; the
    ``document`` property always hands out a fresh deep copy so that no
    reader can mutate published state.
    """

    _document: Document = field(default_factory=empty_document, repr=False)
    version: int = 0
    published: bool = False
    timestamp: float = field(default_factory=time.time)

    @classmethod
    def initial(cls) -> 'Snapshot':
        """Create the initial snapshot: empty document, version 0, unpublished."""
        return cls()

    @classmethod
    def of(cls, document: Document, version: int) -> 'Snapshot':
        """Create a published snapshot from a document."""
        return cls(_document=copy_document(document), version=version, published=True)

    @property
    def document(self) -> Document:
        """Get a copy of the snapshot document."""
        return copy_document(self._document)

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to dictionary representation."""
        return {
            'document': self.document,
            'version': self.version,
            'published': self.published,
            'timestamp': self.timestamp,
        }


@dataclass(frozen=True)
class ChangeEvent:
    """Configuration change delivered to listeners."""

    previous: Document
    """Configuration before the change."""

    new: Document
    """Configuration after the change."""

    version: int = 0
    """Snapshot version produced by this change."""

    timestamp: float = field(default_factory=time.time)
    """Unix timestamp when the change was published."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert change event to dictionary representation."""
        return {
            'previous': self.previous,
            'new': self.new,
            'version': self.version,
            'timestamp': self.timestamp,
        }
