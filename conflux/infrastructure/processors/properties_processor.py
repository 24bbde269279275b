"""
Properties format processor.

Reads ``key=value`` / ``key: value`` lines with ``#`` and ``!`` comments and
backslash line continuations.

Options:
    raw_data: keep every value as a string (default False, values that look
        like booleans or numbers are converted)
    hierarchical: split dotted keys into nested documents (default False)
"""

import re
from typing import Any, Dict, Iterator, Tuple

from ...core.domain.documents import Document
from .base import BaseProcessor

_ESCAPES = {'n': '\n', 't': '\t', 'r': '\r', 'f': '\f'}
_INT_PATTERN = re.compile(r'^[-+]?\d+$')
_FLOAT_PATTERN = re.compile(r'^[-+]?(\d+\.\d*|\.\d+|\d+)([eE][-+]?\d+)?$')


def _unescape(text: str) -> str:
    result = []
    chars = iter(text)
    for char in chars:
        if char == '\\':
            following = next(chars, '')
            result.append(_ESCAPES.get(following, following))
        else:
            result.append(char)
    return ''.join(result)


def _logical_lines(text: str) -> Iterator[str]:
    """Yield lines with continuations joined, comments and blanks dropped."""
    buffer = ''
    for raw_line in text.splitlines():
        line = raw_line.lstrip()
        if not buffer and (not line or line[0] in '#!'):
            continue

        trailing = len(line) - len(line.rstrip('\\'))
        if trailing % 2 == 1:
            buffer += line[:-1]
            continue

        yield buffer + line
        buffer = ''

    if buffer:
        yield buffer


def _split(line: str) -> Tuple[str, str]:
    index = 0
    while index < len(line):
        char = line[index]
        if char == '\\':
            index += 2
            continue
        if char in '=:' or char.isspace():
            key = line[:index]
            rest = line[index:].lstrip()
            if rest[:1] in ('=', ':') and char not in '=:':
                rest = rest[1:].lstrip()
            elif char in '=:':
                rest = line[index + 1:].lstrip()
            return _unescape(key), _unescape(rest)
        index += 1
    return _unescape(line), ''


def _convert(value: str) -> Any:
    lowered = value.lower()
    if lowered in ('true', 'false'):
        return lowered == 'true'
    if _INT_PATTERN.match(value):
        return int(value)
    if _FLOAT_PATTERN.match(value):
        return float(value)
    return value


class PropertiesProcessor(BaseProcessor):
    """Decodes properties files into flat or nested documents."""

    format_name = "properties"

    def decode(self, data: bytes) -> Document:
        raw_data = bool(self._options.get('raw_data', False))
        hierarchical = bool(self._options.get('hierarchical', False))

        document: Dict[str, Any] = {}
        for line in _logical_lines(self._text(data)):
            key, value = _split(line)
            converted = value if raw_data else _convert(value)

            if hierarchical and '.' in key:
                self._put_nested(document, key, converted)
            else:
                document[key] = converted

        return document

    def _put_nested(self, document: Dict[str, Any], key: str, value: Any) -> None:
        parts = key.split('.')
        current = document
        for part in parts[:-1]:
            child = current.get(part)
            if not isinstance(child, dict):
                child = {}
                current[part] = child
            current = child
        current[parts[-1]] = value
