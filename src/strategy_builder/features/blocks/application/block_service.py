"""
Block Service

Instantiates block templates as StrategyBlocks. Port and property ids are
derived from the new block id so ports are never shared between blocks.
"""
import uuid
from dataclasses import replace
from typing import Iterable, Optional, Union

from strategy_builder.application.block_registry import BlockCatalog, get_block_catalog
from strategy_builder.features.blocks.domain import (
    BlockInput,
    BlockOutput,
    BlockPosition,
    BlockProperty,
    BlockTemplate,
    BlockType,
    StrategyBlock,
)
from strategy_builder.utils.message import Log


def new_block_id() -> str:
    return str(uuid.uuid4())


class BlockService:
    """
    Service for creating block instances.

    Orchestrates:
    - Template lookup through the BlockCatalog
    - Port / property id derivation
    - Default property values
    """

    GRID_SPACING = 40
    DUPLICATE_OFFSET = 20

    def __init__(self, catalog: Optional[BlockCatalog] = None):
        """
        Initialize block service.

        Args:
            catalog: Template catalog (the global catalog when None)
        """
        self._catalog = catalog or get_block_catalog()

    @property
    def catalog(self) -> BlockCatalog:
        return self._catalog

    def create_block(
        self,
        block_type: Union[BlockType, str, BlockTemplate],
        position: Optional[BlockPosition] = None,
        block_id: Optional[str] = None,
        name: Optional[str] = None,
    ) -> StrategyBlock:
        """
        Instantiate a template at a canvas position.

        Args:
            block_type: BlockType, its string value, or a BlockTemplate
            position: Canvas position (origin when None)
            block_id: Explicit id (a fresh uuid when None)
            name: Display name (the template name when None)

        Returns:
            New StrategyBlock

        Raises:
            UnknownBlockTypeError: If the catalog has no such template
        """
        template = block_type if isinstance(block_type, BlockTemplate) else self._catalog.get(block_type)
        block_id = block_id or new_block_id()

        block = StrategyBlock(
            id=block_id,
            type=template.type,
            category=template.category,
            name=name or template.name,
            description=template.description,
            position=position or BlockPosition(),
            size=template.default_size,
            inputs=tuple(
                BlockInput(
                    id=f"{block_id}_input_{i}",
                    name=spec.name,
                    data_kind=spec.data_kind,
                    required=spec.required,
                    description=spec.description,
                )
                for i, spec in enumerate(template.inputs)
            ),
            outputs=tuple(
                BlockOutput(
                    id=f"{block_id}_output_{i}",
                    name=spec.name,
                    data_kind=spec.data_kind,
                    description=spec.description,
                )
                for i, spec in enumerate(template.outputs)
            ),
            properties=tuple(
                BlockProperty(
                    id=f"{block_id}_prop_{i}",
                    name=spec.name,
                    kind=spec.kind,
                    value=spec.default_value(),
                    required=spec.required,
                    min=spec.min,
                    max=spec.max,
                    step=spec.step,
                    options=spec.options,
                    description=spec.description,
                )
                for i, spec in enumerate(template.properties)
            ),
        )
        Log.debug(f"BlockService: Created block '{block.name}' ({template.type.value}) id={block_id}")
        return block

    def duplicate_block(
        self,
        block: StrategyBlock,
        block_id: Optional[str] = None,
        position: Optional[BlockPosition] = None,
    ) -> StrategyBlock:
        """
        Copy a block under a new id, keeping its property values.

        The copy is offset from the original unless a position is given.
        """
        block_id = block_id or new_block_id()
        position = position or BlockPosition(
            block.position.x + self.DUPLICATE_OFFSET,
            block.position.y + self.DUPLICATE_OFFSET,
        )
        return replace(
            block,
            id=block_id,
            position=position,
            inputs=tuple(
                replace(port, id=f"{block_id}_input_{i}") for i, port in enumerate(block.inputs)
            ),
            outputs=tuple(
                replace(port, id=f"{block_id}_output_{i}") for i, port in enumerate(block.outputs)
            ),
            properties=tuple(
                replace(prop, id=f"{block_id}_prop_{i}") for i, prop in enumerate(block.properties)
            ),
        )

    def suggest_position(self, existing: Iterable[StrategyBlock]) -> BlockPosition:
        """
        Position to the right of the right-most block, snapped to the grid.
        """
        blocks = list(existing)
        if not blocks:
            return BlockPosition(self.GRID_SPACING, self.GRID_SPACING)

        right_most = max(blocks, key=lambda b: b.position.x + b.size.width)
        x = right_most.position.x + right_most.size.width + self.GRID_SPACING
        x = round(x / self.GRID_SPACING) * self.GRID_SPACING
        return BlockPosition(float(x), right_most.position.y)
