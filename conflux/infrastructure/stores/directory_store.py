"""
Directory configuration store.

Scans a directory tree for files matching one or more filesets, decodes
each file with the processor of its fileset and merges them in sorted path
order. The store emits the merged document as JSON, so it is used with the
``json`` format.

Example config:
    {
        "path": "conf.d",
        "filesets": [
            {"pattern": "*.yaml", "format": "yaml"},
            {"pattern": "*.json"}
        ]
    }
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

from ...core.domain.documents import Document
from ...core.interfaces.stores import IConfigProcessor, IConfigStore
from ...core.services.merger import merge

logger = logging.getLogger(__name__)


class DirectoryConfigStore(IConfigStore):
    """Merges every matching file below a directory."""

    def __init__(self, path: str, filesets: List[Tuple[str, IConfigProcessor]]) -> None:
        if not path:
            raise ValueError("The directory store requires a 'path'")
        if not filesets:
            raise ValueError("The directory store requires at least one fileset")

        self.path = Path(path)
        self.filesets = list(filesets)

    def _matching_files(self) -> List[Tuple[Path, IConfigProcessor]]:
        if not self.path.is_dir():
            raise FileNotFoundError(f"Configuration directory not found: {self.path}")

        matches: List[Tuple[Path, IConfigProcessor]] = []
        for pattern, processor in self.filesets:
            for file_path in sorted(self.path.rglob(pattern)):
                if file_path.is_file():
                    matches.append((file_path, processor))
        return matches

    async def get(self) -> bytes:
        files = await asyncio.to_thread(self._matching_files)

        document: Document = {}
        for index, (file_path, processor) in enumerate(files):
            data = await asyncio.to_thread(file_path.read_bytes)
            try:
                decoded = await processor.process(data, {})
            except Exception as e:
                raise ValueError(f"Unable to decode {file_path}: {e}") from e
            document = merge(document, index, decoded)

        logger.debug(f"Merged {len(files)} file(s) from {self.path}")
        return json.dumps(document).encode('utf-8')


def parse_filesets(config: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Validate the 'filesets' entry of a directory store configuration."""
    filesets = config.get('filesets')
    if not isinstance(filesets, list) or not filesets:
        raise ValueError("The directory store requires a non-empty 'filesets' list")

    result = []
    for fileset in filesets:
        if not isinstance(fileset, dict) or not fileset.get('pattern'):
            raise ValueError(f"Invalid fileset: {fileset!r}")
        result.append({'pattern': fileset['pattern'], 'format': fileset.get('format', 'json')})
    return result
