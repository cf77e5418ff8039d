"""
Port entities

Instance-scoped input and output slots of a StrategyBlock. Port ids are
derived from the owning block id, so ports are never shared between blocks.
"""
from dataclasses import dataclass
from typing import Any, Dict

from strategy_builder.shared.domain.value_objects.data_kind import DataKind


@dataclass(frozen=True)
class BlockInput:
    """Input port of a block instance."""
    id: str
    name: str
    data_kind: DataKind
    required: bool = False
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "data_kind": self.data_kind.value,
            "required": self.required,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BlockInput':
        return cls(
            id=data["id"],
            name=data["name"],
            data_kind=DataKind.from_string(data["data_kind"]),
            required=bool(data.get("required", False)),
            description=data.get("description", ""),
        )


@dataclass(frozen=True)
class BlockOutput:
    """Output port of a block instance."""
    id: str
    name: str
    data_kind: DataKind
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "data_kind": self.data_kind.value,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BlockOutput':
        return cls(
            id=data["id"],
            name=data["name"],
            data_kind=DataKind.from_string(data["data_kind"]),
            description=data.get("description", ""),
        )
