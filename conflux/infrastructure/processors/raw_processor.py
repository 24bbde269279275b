"""
Raw format processor.

Wraps the whole content under a single key. Options:

    raw.key: key to store the content under (required)
    raw.type: ``string`` (default) or ``binary`` (base64-encoded)
    raw.encoding: text encoding for ``string`` (default utf-8)
"""

import base64

from ...core.domain.documents import Document
from .base import BaseProcessor


class RawProcessor(BaseProcessor):
    """Stores the raw content under the configured key."""

    format_name = "raw"

    def decode(self, data: bytes) -> Document:
        key = self._options.get('raw.key')
        if not key:
            raise ValueError("The raw format requires the 'raw.key' option")

        value_type = self._options.get('raw.type', 'string')
        if value_type == 'string':
            encoding = self._options.get('raw.encoding', 'utf-8')
            try:
                return {key: data.decode(encoding)}
            except UnicodeDecodeError as e:
                raise ValueError(f"Content is not valid {encoding}: {e}")
        if value_type == 'binary':
            return {key: base64.b64encode(data).decode('ascii')}

        raise ValueError(f"Unsupported raw.type: {value_type}")
