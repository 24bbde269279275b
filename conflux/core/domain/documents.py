"""
Configuration document helpers.

A document is a plain insertion-ordered ``dict`` with string keys whose
values are ``None``, booleans, numbers, strings, nested documents or lists
of such values. This module provides the value-level operations the engine
needs: type checks, deep copies and deep equality.
"""

import copy
import math
from typing import Any, Dict

Document = Dict[str, Any]


def is_document(value: Any) -> bool:
    """Check whether a value is a (nested) configuration document."""
    return isinstance(value, dict)


def empty_document() -> Document:
    """Create a new empty document."""
    return {}


def copy_document(document: Document) -> Document:
    """
    Create a deep copy of a document.

    The copy shares no mutable containers with the original, so it can be
    handed to callers without exposing engine state.
    """
    return copy.deepcopy(document)


def values_equal(left: Any, right: Any) -> bool:
    """
    Compare two document values recursively.

    Mapping key order is ignored, list order is significant, booleans
    never compare equal to numbers (``True`` is not ``1``) and NaN equals NaN.

    Args:
        left: First value
        right: Second value

    Returns:
        True if both values are deeply equal
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right

    if isinstance(left, dict) or isinstance(right, dict):
        if not (isinstance(left, dict) and isinstance(right, dict)):
            return False
        if left.keys() != right.keys():
            return False
        return all(values_equal(left[key], right[key]) for key in left)

    if isinstance(left, (list, tuple)) or isinstance(right, (list, tuple)):
        if not (isinstance(left, (list, tuple)) and isinstance(right, (list, tuple))):
            return False
        if len(left) != len(right):
            return False
        return all(values_equal(a, b) for a, b in zip(left, right))

    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        if isinstance(left, float) and isinstance(right, float) and math.isnan(left) and math.isnan(right):
            return True
        return left == right

    return type(left) is type(right) and left == right


def documents_equal(left: Document, right: Document) -> bool:
    """Deep equality between two documents."""
    return values_equal(left, right)
