"""
Data kind value object

The semantic type carried by a port, plus the single compatibility rule used
by every caller that needs to decide whether one port may feed another.
"""
from enum import Enum
from typing import FrozenSet, Tuple


class DataKind(Enum):
    """Semantic type of a port's value."""
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    ARRAY = "array"
    CANDLE = "candle"
    INDICATOR = "indicator"
    SIGNAL = "signal"
    ORDER = "order"
    ANY = "any"

    @classmethod
    def from_string(cls, value: str) -> 'DataKind':
        """Create DataKind from string"""
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"Invalid data kind: {value}")


_SCALARS = (DataKind.NUMBER, DataKind.BOOLEAN, DataKind.STRING)

# (source, target) pairs allowed beyond ANY and identity
COMPATIBILITY_TABLE: FrozenSet[Tuple[DataKind, DataKind]] = frozenset(
    [
        (DataKind.CANDLE, DataKind.NUMBER),
        (DataKind.INDICATOR, DataKind.NUMBER),
        (DataKind.SIGNAL, DataKind.BOOLEAN),
        (DataKind.NUMBER, DataKind.STRING),
        (DataKind.BOOLEAN, DataKind.STRING),
    ]
    + [(DataKind.ARRAY, kind) for kind in _SCALARS]
    + [(kind, DataKind.ARRAY) for kind in _SCALARS]
)


def is_compatible(source_kind: DataKind, target_kind: DataKind) -> bool:
    """
    Decide whether a source port's kind may feed a target port's kind.

    Rules, in priority order:
    1. either side is ANY
    2. identical kinds
    3. the fixed conversion table
    """
    if source_kind == DataKind.ANY or target_kind == DataKind.ANY:
        return True
    if source_kind == target_kind:
        return True
    return (source_kind, target_kind) in COMPATIBILITY_TABLE


def conversion_expression(expr: str, source_kind: DataKind, target_kind: DataKind) -> str:
    """
    Wrap a Python expression so its value matches the target kind.

    Only pairs accepted by is_compatible() are supported.

    Raises:
        ValueError: If the pair is not compatible
    """
    if not is_compatible(source_kind, target_kind):
        raise ValueError(f"No conversion from {source_kind.value} to {target_kind.value}")

    if source_kind == target_kind or DataKind.ANY in (source_kind, target_kind):
        return expr
    if source_kind == DataKind.CANDLE:
        return f'{expr}["close"]'
    if source_kind == DataKind.INDICATOR:
        return expr
    if source_kind == DataKind.SIGNAL:
        return f"bool({expr})"
    if source_kind == DataKind.ARRAY:
        if target_kind == DataKind.STRING:
            return f"(str({expr}[-1]) if {expr} else '')"
        return f"({expr}[-1] if {expr} else None)"
    if target_kind == DataKind.ARRAY:
        return f"[{expr}]"
    # NUMBER / BOOLEAN -> STRING
    return f"str({expr})"
