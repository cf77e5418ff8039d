"""
Block property entity

A configurable value on a block instance, carrying the template's
constraints alongside the current value.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class PropertyKind(Enum):
    """Editor widget / value kind of a property."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECT = "select"
    MULTISELECT = "multiselect"

    @classmethod
    def from_string(cls, value: str) -> 'PropertyKind':
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"Invalid property kind: {value}")


@dataclass(frozen=True)
class PropertyOption:
    """One choice of a select/multiselect property."""
    label: str
    value: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PropertyOption':
        return cls(label=data.get("label", str(data["value"])), value=data["value"])


def _plain(value: Any) -> Any:
    # Tuples are stored for multiselect values; documents carry lists
    if isinstance(value, tuple):
        return list(value)
    return value


@dataclass(frozen=True)
class BlockProperty:
    """
    Property of a block instance.

    Attributes:
        id: Instance-scoped id ({block_id}_prop_{i})
        name: Property name from the template (e.g. "period")
        kind: PropertyKind
        value: Current value
        required: Value must be non-empty
        min: Inclusive lower bound for numbers
        max: Inclusive upper bound for numbers
        step: Editor increment for numbers
        options: Allowed values for select/multiselect
    """
    id: str
    name: str
    kind: PropertyKind
    value: Any = None
    required: bool = False
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    options: Tuple[PropertyOption, ...] = field(default_factory=tuple)
    description: str = ""

    @property
    def option_values(self) -> List[Any]:
        return [option.value for option in self.options]

    def with_value(self, value: Any) -> 'BlockProperty':
        if isinstance(value, list):
            value = tuple(value)
        return replace(self, value=value)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "value": _plain(self.value),
            "required": self.required,
        }
        if self.min is not None:
            data["min"] = self.min
        if self.max is not None:
            data["max"] = self.max
        if self.step is not None:
            data["step"] = self.step
        if self.options:
            data["options"] = [option.to_dict() for option in self.options]
        if self.description:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BlockProperty':
        value = data.get("value")
        if isinstance(value, list):
            value = tuple(value)
        return cls(
            id=data["id"],
            name=data["name"],
            kind=PropertyKind.from_string(data["kind"]),
            value=value,
            required=bool(data.get("required", False)),
            min=data.get("min"),
            max=data.get("max"),
            step=data.get("step"),
            options=tuple(PropertyOption.from_dict(o) for o in data.get("options", [])),
            description=data.get("description", ""),
        )
