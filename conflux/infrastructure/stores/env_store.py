"""
Environment variable configuration store.

Produces a JSON document from ``os.environ``. Options:

    keys: only expose these variables
    raw_data: keep values as strings instead of converting booleans and numbers
    hierarchical: split names on ``separator`` (default ``"."``) into
        nested documents
    cache: compute the document once and reuse it (default False)
"""

import json
import math
import os
from typing import Any, Dict, List, Mapping, Optional

from ...core.interfaces.stores import IConfigStore


def _convert(value: str) -> Any:
    lowered = value.lower()
    if lowered in ('true', 'false'):
        return lowered == 'true'
    try:
        return int(value)
    except ValueError:
        pass
    try:
        number = float(value)
    except ValueError:
        return value
    # inf and nan are not valid document values
    return number if math.isfinite(number) else value


class EnvironmentConfigStore(IConfigStore):
    """Environment variables store."""

    def __init__(
        self,
        keys: Optional[List[str]] = None,
        raw_data: bool = False,
        hierarchical: bool = False,
        separator: str = ".",
        cache: bool = False,
        environ: Optional[Mapping[str, str]] = None
    ) -> None:
        self.keys = list(keys) if keys else None
        self.raw_data = raw_data
        self.hierarchical = hierarchical
        self.separator = separator
        self.cache = cache
        self._environ = environ
        self._cached: Optional[bytes] = None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'EnvironmentConfigStore':
        return cls(
            keys=config.get('keys'),
            raw_data=bool(config.get('raw_data', False)),
            hierarchical=bool(config.get('hierarchical', False)),
            separator=config.get('separator', '.'),
            cache=bool(config.get('cache', False)),
        )

    async def get(self) -> bytes:
        if self._cached is not None:
            return self._cached

        data = json.dumps(self._build()).encode('utf-8')
        if self.cache:
            self._cached = data
        return data

    def _build(self) -> Dict[str, Any]:
        environ = self._environ if self._environ is not None else os.environ
        names = self.keys if self.keys is not None else sorted(environ)

        document: Dict[str, Any] = {}
        for name in names:
            if name not in environ:
                continue
            value = environ[name] if self.raw_data else _convert(environ[name])

            if self.hierarchical and self.separator in name:
                self._put_nested(document, name.split(self.separator), value)
            else:
                document[name] = value

        return document

    def _put_nested(self, document: Dict[str, Any], parts: List[str], value: Any) -> None:
        current = document
        for part in parts[:-1]:
            child = current.get(part)
            if not isinstance(child, dict):
                child = {}
                current[part] = child
            current = child
        current[parts[-1]] = value
