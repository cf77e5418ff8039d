"""
Block template

Immutable, catalog-owned description of a block type: its typed ports,
configurable properties and default geometry. Never mutated after load.
"""
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from strategy_builder.features.blocks.domain.block import BlockSize
from strategy_builder.features.blocks.domain.block_property import PropertyKind, PropertyOption
from strategy_builder.features.blocks.domain.block_type import BlockCategory, BlockType
from strategy_builder.shared.domain.value_objects.data_kind import DataKind


@dataclass(frozen=True)
class InputSpec:
    name: str
    data_kind: DataKind
    required: bool = False
    description: str = ""


@dataclass(frozen=True)
class OutputSpec:
    name: str
    data_kind: DataKind
    description: str = ""


@dataclass(frozen=True)
class PropertySpec:
    """Property definition with its constraints and default."""
    name: str
    kind: PropertyKind
    required: bool = False
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    options: Tuple[PropertyOption, ...] = field(default_factory=tuple)
    default: Any = None
    description: str = ""

    def default_value(self) -> Any:
        """
        Value a fresh block instance starts with.

        boolean -> default or False, number -> default or min or 0,
        select -> default or first option, multiselect -> default or (),
        string -> default or "".
        """
        if self.kind == PropertyKind.BOOLEAN:
            return bool(self.default) if self.default is not None else False
        if self.kind == PropertyKind.NUMBER:
            if self.default is not None:
                return self.default
            return self.min if self.min is not None else 0
        if self.kind == PropertyKind.SELECT:
            if self.default is not None:
                return self.default
            return self.options[0].value if self.options else ""
        if self.kind == PropertyKind.MULTISELECT:
            return tuple(self.default) if self.default is not None else ()
        return self.default if self.default is not None else ""


def options(*values: str) -> Tuple[PropertyOption, ...]:
    """Build select options whose label is the value with words capitalized."""
    return tuple(
        PropertyOption(label=str(v).replace("_", " ").title(), value=v) for v in values
    )


@dataclass(frozen=True)
class BlockTemplate:
    type: BlockType
    category: BlockCategory
    name: str
    description: str
    inputs: Tuple[InputSpec, ...] = field(default_factory=tuple)
    outputs: Tuple[OutputSpec, ...] = field(default_factory=tuple)
    properties: Tuple[PropertySpec, ...] = field(default_factory=tuple)
    default_size: BlockSize = field(default_factory=lambda: BlockSize(200, 120))
    tags: Tuple[str, ...] = field(default_factory=tuple)

    def get_property(self, name: str) -> Optional[PropertySpec]:
        for spec in self.properties:
            if spec.name == name:
                return spec
        return None
