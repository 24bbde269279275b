"""JSON format processor."""

import json

from ...core.domain.documents import Document
from .base import BaseProcessor


class JsonProcessor(BaseProcessor):
    """Decodes a JSON object; empty content yields an empty document."""

    format_name = "json"

    def decode(self, data: bytes) -> Document:
        text = self._text(data)
        if not text.strip():
            return {}

        try:
            value = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}")

        if not isinstance(value, dict):
            raise ValueError(f"JSON configuration must be an object, got {type(value).__name__}")
        return value
