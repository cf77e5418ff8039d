"""
Block entity

A StrategyBlock is one node of the strategy graph: a template instantiated
at a canvas position. Blocks are immutable; every change returns a new block.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from strategy_builder.features.blocks.domain.block_property import BlockProperty
from strategy_builder.features.blocks.domain.block_type import BlockCategory, BlockType
from strategy_builder.features.blocks.domain.port import BlockInput, BlockOutput


@dataclass(frozen=True)
class BlockPosition:
    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class BlockSize:
    width: float = 200.0
    height: float = 120.0

    def to_dict(self) -> Dict[str, float]:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class StrategyBlock:
    """
    Block entity - a typed unit of computation in the strategy graph.

    A block owns its ports and properties:
    - input ids are {id}_input_{i}
    - output ids are {id}_output_{i}
    - property ids are {id}_prop_{i}

    Invariants:
    - id is non-empty
    - port ids are unique within the block
    """
    id: str
    type: BlockType
    category: BlockCategory
    name: str
    description: str = ""
    position: BlockPosition = field(default_factory=BlockPosition)
    size: BlockSize = field(default_factory=BlockSize)
    inputs: Tuple[BlockInput, ...] = field(default_factory=tuple)
    outputs: Tuple[BlockOutput, ...] = field(default_factory=tuple)
    properties: Tuple[BlockProperty, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.id:
            raise ValueError("Block ID cannot be empty")
        port_ids = self.port_ids()
        if len(port_ids) != len(set(port_ids)):
            raise ValueError(f"Block '{self.id}' has duplicate port ids")

    # ------------------------------------------------------------------
    # Ports
    # ------------------------------------------------------------------

    def port_ids(self) -> List[str]:
        return [p.id for p in self.inputs] + [p.id for p in self.outputs]

    def get_input(self, input_id: str) -> Optional[BlockInput]:
        for port in self.inputs:
            if port.id == input_id:
                return port
        return None

    def get_output(self, output_id: str) -> Optional[BlockOutput]:
        for port in self.outputs:
            if port.id == output_id:
                return port
        return None

    def get_input_by_name(self, name: str) -> Optional[BlockInput]:
        for port in self.inputs:
            if port.name == name:
                return port
        return None

    def get_output_by_name(self, name: str) -> Optional[BlockOutput]:
        for port in self.outputs:
            if port.name == name:
                return port
        return None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def get_property(self, name: str) -> Optional[BlockProperty]:
        """Get a property by name or id."""
        for prop in self.properties:
            if prop.name == name or prop.id == name:
                return prop
        return None

    def property_value(self, name: str, default: Any = None) -> Any:
        prop = self.get_property(name)
        return prop.value if prop is not None else default

    # ------------------------------------------------------------------
    # Mutations (return new blocks)
    # ------------------------------------------------------------------

    def with_position(self, position: BlockPosition) -> 'StrategyBlock':
        return replace(self, position=position)

    def with_name(self, name: str) -> 'StrategyBlock':
        return replace(self, name=name)

    def with_property_value(self, name: str, value: Any) -> 'StrategyBlock':
        """
        Return a copy with one property value changed.

        Raises:
            KeyError: If the block has no such property
        """
        if self.get_property(name) is None:
            raise KeyError(f"Block '{self.id}' has no property '{name}'")
        properties = tuple(
            prop.with_value(value) if prop.name == name or prop.id == name else prop
            for prop in self.properties
        )
        return replace(self, properties=properties)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "category": self.category.value,
            "name": self.name,
            "description": self.description,
            "position": self.position.to_dict(),
            "size": self.size.to_dict(),
            "inputs": [p.to_dict() for p in self.inputs],
            "outputs": [p.to_dict() for p in self.outputs],
            "properties": [p.to_dict() for p in self.properties],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StrategyBlock':
        position = data.get("position") or {}
        size = data.get("size") or {}
        return cls(
            id=data["id"],
            type=BlockType.from_string(data["type"]),
            category=BlockCategory.from_string(data["category"]),
            name=data.get("name", ""),
            description=data.get("description", ""),
            position=BlockPosition(float(position.get("x", 0)), float(position.get("y", 0))),
            size=BlockSize(float(size.get("width", 200)), float(size.get("height", 120))),
            inputs=tuple(BlockInput.from_dict(p) for p in data.get("inputs", [])),
            outputs=tuple(BlockOutput.from_dict(p) for p in data.get("outputs", [])),
            properties=tuple(BlockProperty.from_dict(p) for p in data.get("properties", [])),
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.type.value}, {self.id})"
