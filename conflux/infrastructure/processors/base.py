"""
Base processor implementation.

Concrete processors only implement ``decode``; merging the decoded
document into the working document is shared.
"""

from abc import abstractmethod
from typing import Any, Dict, Optional

from ...core.domain.documents import Document
from ...core.interfaces.stores import IConfigProcessor
from ...core.services.merger import merge


class BaseProcessor(IConfigProcessor):
    """Processor decoding bytes into a document then merging it."""

    format_name = ""

    def __init__(self, options: Optional[Dict[str, Any]] = None) -> None:
        self._options: Dict[str, Any] = dict(options or {})

    @property
    def name(self) -> str:
        return self.format_name

    @property
    def options(self) -> Dict[str, Any]:
        return self._options

    async def process(self, data: bytes, document: Document) -> Document:
        decoded = self.decode(data)
        if not document:
            return decoded
        return merge(document, 0, decoded)

    @abstractmethod
    def decode(self, data: bytes) -> Document:
        """
        Decode raw bytes into a document.

        Raises:
            ValueError: If the data is malformed
        """
        pass

    def _text(self, data: bytes) -> str:
        encoding = self._options.get('encoding', 'utf-8')
        try:
            return data.decode(encoding)
        except UnicodeDecodeError as e:
            raise ValueError(f"Content is not valid {encoding}: {e}")
