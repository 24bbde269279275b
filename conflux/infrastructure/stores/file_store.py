"""File and inline JSON configuration stores."""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict

from ...core.interfaces.stores import IConfigStore


class FileConfigStore(IConfigStore):
    """
    Reads a file from the local file system.

    The file is read in a worker thread on every scan; a missing file is
    reported as FileNotFoundError.
    """

    def __init__(self, path: str) -> None:
        if not path:
            raise ValueError("The file store requires a 'path'")
        self.path = Path(path)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'FileConfigStore':
        return cls(config.get('path', ''))

    async def get(self) -> bytes:
        if not self.path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {self.path}")
        return await asyncio.to_thread(self.path.read_bytes)


class JsonConfigStore(IConfigStore):
    """Serves the document given in the store configuration."""

    def __init__(self, document: Dict[str, Any]) -> None:
        self._data = json.dumps(document).encode('utf-8')

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'JsonConfigStore':
        return cls(config)

    async def get(self) -> bytes:
        return self._data
