"""
Deterministic document merger.

Combines per-store documents into one configuration. Documents are merged
key by key: nested documents are merged recursively, every other value
(including lists) from a later store replaces the earlier one.
"""

import logging
from typing import Iterable

from ..domain.documents import Document, copy_document, empty_document, is_document

logger = logging.getLogger(__name__)


def _merge_into(target: Document, source: Document) -> None:
    """Merge source into target in place; source values are copied."""
    for key, value in source.items():
        current = target.get(key)
        if key in target and is_document(current) and is_document(value):
            _merge_into(current, value)
        else:
            target[key] = copy_document(value) if isinstance(value, (dict, list)) else value


def merge(base: Document, store_index: int, store_document: Document) -> Document:
    """
    Merge a store's document on top of the documents of earlier stores.

    Neither input is modified and the result shares no mutable containers
    with them.

    Args:
        base: Result of merging stores ``0 .. store_index - 1``
        store_index: Position of the store in the store list
        store_document: Document produced by the store

    Returns:
        Merged document
    """
    result = copy_document(base)
    _merge_into(result, store_document)
    logger.debug(f"Merged {len(store_document)} top-level keys from store #{store_index}")
    return result


def merge_all(documents: Iterable[Document]) -> Document:
    """
    Fold documents through merge() in order, starting from an empty document.

    Args:
        documents: Per-store documents in store order

    Returns:
        Merged document
    """
    result = empty_document()
    for index, document in enumerate(documents):
        result = merge(result, index, document)
    return result
