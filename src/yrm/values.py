"""The value tree produced by the parser.

A document is always a mapping at the root. Leaves are plain Python
scalars so that a document can be handed straight to ``json.dumps``.
"""

from __future__ import annotations

from typing import Union

Scalar = Union[int, float, bool, str]
Value = Union[Scalar, "Document"]
Document = dict[str, Value]

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def value_kind(value: Value) -> str:
    """Name the variant of a value."""
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "mapping"
    raise TypeError(f"not a yrm value: {type(value).__name__}")
