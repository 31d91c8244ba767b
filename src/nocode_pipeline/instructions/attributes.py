"""
Attribute sets resolved from instruction annotations.

Annotations are free text attached to instruction nodes. The grammar is:

    annotation := token (SEP token)*
    SEP        := one or more of whitespace, "_", ",", ";"
    token      := key PAIR value
    PAIR       := one or more of "=", "-"

A token that splits into exactly two parts with a non-empty key sets
``attributes[key.lower()] = value``. Any other token is ignored. Keys are
case-insensitive, values are kept verbatim.

Attribute sets are inherited down the instruction tree: a child starts from
a copy of its parent and its own tokens overwrite key by key, so the deepest
writer wins.

Example:
    >>> parent = AttributeSet().inherit("step=onCalibrationEnd filter=Ha")
    >>> child = parent.inherit("filter=OIII, exposure=300")
    >>> dict(child)
    {'step': 'onCalibrationEnd', 'filter': 'OIII', 'exposure': '300'}
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping

TOKEN_SEPARATORS = re.compile(r"[\s_,;]+")
PAIR_SEPARATORS = re.compile(r"[=-]+")

STEP_KEY = "step"


def parse_annotation(text: str | None) -> dict[str, str]:
    """Parse annotation text into key/value pairs.

    Later tokens overwrite earlier ones with the same key.

    Args:
        text: Annotation text (None or empty yields no pairs)

    Returns:
        Dict of lower-cased keys to values, in token order
    """
    pairs: dict[str, str] = {}
    if not text:
        return pairs

    for token in TOKEN_SEPARATORS.split(text):
        parts = PAIR_SEPARATORS.split(token)
        if len(parts) != 2 or not parts[0]:
            continue
        pairs[parts[0].lower()] = parts[1]

    return pairs


class AttributeSet(Mapping[str, str]):
    """Immutable mapping of resolved instruction attributes."""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, str] | None = None):
        self._values: dict[str, str] = {k.lower(): v for k, v in (values or {}).items()}

    def inherit(self, annotation: str | None) -> AttributeSet:
        """Return a child set: a copy of this one overridden by ``annotation``."""
        merged = dict(self._values)
        merged.update(parse_annotation(annotation))
        return AttributeSet(merged)

    @property
    def step(self) -> str | None:
        """Raw ``step`` attribute, if any."""
        return self._values.get(STEP_KEY)

    def constraints(self) -> dict[str, str]:
        """All attributes except ``step``; these constrain group matching."""
        return {k: v for k, v in self._values.items() if k != STEP_KEY}

    def __getitem__(self, key: str) -> str:
        return self._values[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self._values) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._values.items())))

    def __repr__(self) -> str:
        return f"AttributeSet({self._values!r})"
