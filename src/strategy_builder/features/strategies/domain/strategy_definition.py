"""
Strategy definition aggregate

Immutable snapshot of a strategy graph. Every mutation returns a new
snapshot; pure functions (validator, orderer, generator) read snapshots and
never observe a partial edit.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
import uuid

from strategy_builder.features.blocks.domain import BlockPosition, StrategyBlock
from strategy_builder.features.connections.domain import BlockConnection
from strategy_builder.shared.domain.exceptions import GraphIntegrityError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


@dataclass(frozen=True)
class StrategyMetadata:
    created_at: datetime
    updated_at: datetime
    created_by: str = ""
    tags: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "created_by": self.created_by,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StrategyMetadata':
        created_at = _parse_time(data["created_at"])
        return cls(
            created_at=created_at,
            updated_at=_parse_time(data.get("updated_at", created_at)),
            created_by=data.get("created_by", ""),
            tags=tuple(data.get("tags", [])),
        )


@dataclass(frozen=True)
class StrategyDefinition:
    """
    Aggregate root of the strategy graph.

    Invariants (checked on every snapshot):
    - no two blocks share an id
    - no two ports across the whole definition share an id
    - no two connections share an id
    - every connection's endpoint blocks are present
    """
    id: str
    name: str
    description: str = ""
    version: int = 1
    blocks: Tuple[StrategyBlock, ...] = field(default_factory=tuple)
    connections: Tuple[BlockConnection, ...] = field(default_factory=tuple)
    metadata: StrategyMetadata = field(default_factory=lambda: StrategyMetadata(utc_now(), utc_now()))

    def __post_init__(self):
        if not self.id:
            raise GraphIntegrityError("Strategy ID cannot be empty")

        block_ids = set()
        port_ids = set()
        for block in self.blocks:
            if block.id in block_ids:
                raise GraphIntegrityError(f"Duplicate block id: {block.id}")
            block_ids.add(block.id)
            for port_id in block.port_ids():
                if port_id in port_ids:
                    raise GraphIntegrityError(f"Duplicate port id: {port_id}")
                port_ids.add(port_id)

        connection_ids = set()
        for conn in self.connections:
            if conn.id in connection_ids:
                raise GraphIntegrityError(f"Duplicate connection id: {conn.id}")
            connection_ids.add(conn.id)
            if conn.source_block_id not in block_ids:
                raise GraphIntegrityError(
                    f"Connection '{conn.id}' references missing source block: {conn.source_block_id}"
                )
            if conn.target_block_id not in block_ids:
                raise GraphIntegrityError(
                    f"Connection '{conn.id}' references missing target block: {conn.target_block_id}"
                )

    @classmethod
    def new(
        cls,
        name: str,
        description: str = "",
        created_by: str = "",
        tags: Sequence[str] = (),
        strategy_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> 'StrategyDefinition':
        """Create an empty strategy at version 1."""
        now = now or utc_now()
        return cls(
            id=strategy_id or str(uuid.uuid4()),
            name=name,
            description=description,
            metadata=StrategyMetadata(created_at=now, updated_at=now, created_by=created_by, tags=tuple(tags)),
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_block(self, block_id: str) -> Optional[StrategyBlock]:
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None

    def require_block(self, block_id: str) -> StrategyBlock:
        block = self.get_block(block_id)
        if block is None:
            raise GraphIntegrityError(f"Block not found: {block_id}")
        return block

    def get_connection(self, connection_id: str) -> Optional[BlockConnection]:
        for conn in self.connections:
            if conn.id == connection_id:
                return conn
        return None

    def block_map(self) -> Dict[str, StrategyBlock]:
        return {block.id: block for block in self.blocks}

    def connections_for_block(self, block_id: str) -> List[BlockConnection]:
        return [conn for conn in self.connections if conn.touches(block_id)]

    @property
    def is_empty(self) -> bool:
        return not self.blocks

    # ------------------------------------------------------------------
    # Mutations (return new snapshots)
    # ------------------------------------------------------------------

    def with_block(self, block: StrategyBlock) -> 'StrategyDefinition':
        """Append a block. Raises GraphIntegrityError on an id clash."""
        return replace(self, blocks=self.blocks + (block,))

    def with_block_replaced(self, block: StrategyBlock) -> 'StrategyDefinition':
        """Swap in a new version of an existing block (same id)."""
        self.require_block(block.id)
        return replace(self, blocks=tuple(block if b.id == block.id else b for b in self.blocks))

    def without_block(self, block_id: str) -> 'StrategyDefinition':
        """Remove a block and every connection touching it."""
        self.require_block(block_id)
        return replace(
            self,
            blocks=tuple(b for b in self.blocks if b.id != block_id),
            connections=tuple(c for c in self.connections if not c.touches(block_id)),
        )

    def orphaned_block_ids(self) -> List[str]:
        """Ids of blocks that touch no connection, in block order."""
        connected = set()
        for conn in self.connections:
            connected.add(conn.source_block_id)
            connected.add(conn.target_block_id)
        return [block.id for block in self.blocks if block.id not in connected]

    def without_orphans(self) -> 'StrategyDefinition':
        """Remove every block that touches no connection."""
        orphans = set(self.orphaned_block_ids())
        if not orphans:
            return self
        return replace(self, blocks=tuple(b for b in self.blocks if b.id not in orphans))

    def with_block_moved(self, block_id: str, position: BlockPosition) -> 'StrategyDefinition':
        return self.with_block_replaced(self.require_block(block_id).with_position(position))

    def with_property_value(self, block_id: str, property_name: str, value: Any) -> 'StrategyDefinition':
        """
        Raises:
            GraphIntegrityError: If the block or property does not exist
        """
        block = self.require_block(block_id)
        try:
            updated = block.with_property_value(property_name, value)
        except KeyError as e:
            raise GraphIntegrityError(str(e.args[0]))
        return self.with_block_replaced(updated)

    def with_connection(self, connection: BlockConnection) -> 'StrategyDefinition':
        """Append a connection. Raises GraphIntegrityError on a dangling endpoint."""
        return replace(self, connections=self.connections + (connection,))

    def without_connection(self, connection_id: str) -> 'StrategyDefinition':
        if self.get_connection(connection_id) is None:
            raise GraphIntegrityError(f"Connection not found: {connection_id}")
        return replace(self, connections=tuple(c for c in self.connections if c.id != connection_id))

    def with_info(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
    ) -> 'StrategyDefinition':
        metadata = self.metadata if tags is None else replace(self.metadata, tags=tuple(tags))
        return replace(
            self,
            name=self.name if name is None else name,
            description=self.description if description is None else description,
            metadata=metadata,
        )

    def saved(self, now: Optional[datetime] = None, after_version: int = 0) -> 'StrategyDefinition':
        """
        Snapshot handed to persistence: a fresh updated_at and a version above
        both this snapshot's and after_version (the last version persisted).
        """
        return replace(
            self,
            version=max(self.version, after_version) + 1,
            metadata=replace(self.metadata, updated_at=now or utc_now()),
        )

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "blocks": [block.to_dict() for block in self.blocks],
            "connections": [conn.to_dict() for conn in self.connections],
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StrategyDefinition':
        """
        Raises:
            KeyError / ValueError: On missing or malformed fields
            GraphIntegrityError: If the document breaks an invariant
        """
        metadata = data.get("metadata")
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            description=data.get("description", ""),
            version=int(data.get("version", 1)),
            blocks=tuple(StrategyBlock.from_dict(b) for b in data.get("blocks", [])),
            connections=tuple(BlockConnection.from_dict(c) for c in data.get("connections", [])),
            metadata=StrategyMetadata.from_dict(metadata) if metadata else StrategyMetadata(utc_now(), utc_now()),
        )
