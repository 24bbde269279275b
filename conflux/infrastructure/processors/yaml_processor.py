"""
YAML format processor.

Uses the PyYAML safe loader. Dates and timestamps are converted to ISO-8601
strings and non-string mapping keys are stringified so the result is a
plain configuration document.
"""

import datetime
from typing import Any

import yaml

from ...core.domain.documents import Document
from .base import BaseProcessor


def _normalize(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(key): _normalize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_normalize(item) for item in value]
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc).isoformat().replace('+00:00', 'Z')
    if isinstance(value, datetime.date):
        return f"{value.isoformat()}T00:00:00Z"
    if isinstance(value, bytes):
        return value.decode('utf-8', errors='replace')
    return value


class YamlProcessor(BaseProcessor):
    """Decodes a YAML mapping; empty content yields an empty document."""

    format_name = "yaml"

    def decode(self, data: bytes) -> Document:
        text = self._text(data)

        try:
            value = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML: {e}")

        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError(f"YAML configuration must be a mapping, got {type(value).__name__}")
        return _normalize(value)
