"""
Connection entity

A directed, typed edge from one block's output port to another block's
input port.
"""
from dataclasses import dataclass
from typing import Any, Dict
import uuid

from strategy_builder.shared.domain.value_objects.data_kind import DataKind


def new_connection_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class BlockConnection:
    """
    Connection entity - links an output port to an input port.

    data_kind is copied from the source output when the connection is
    created.

    Invariants:
    - all endpoint fields are non-empty
    - a (source output, target input) pair is unique within a strategy
      (enforced by the connection validator)
    - several connections may share one target input
    """
    id: str
    source_block_id: str
    source_output_id: str
    target_block_id: str
    target_input_id: str
    data_kind: DataKind = DataKind.ANY

    def __post_init__(self):
        if not self.id:
            raise ValueError("Connection ID cannot be empty")
        if not self.source_block_id:
            raise ValueError("Source block ID cannot be empty")
        if not self.source_output_id:
            raise ValueError("Source output ID cannot be empty")
        if not self.target_block_id:
            raise ValueError("Target block ID cannot be empty")
        if not self.target_input_id:
            raise ValueError("Target input ID cannot be empty")

    def touches(self, block_id: str) -> bool:
        return self.source_block_id == block_id or self.target_block_id == block_id

    def same_endpoints(self, other: 'BlockConnection') -> bool:
        return (
            self.source_output_id == other.source_output_id
            and self.target_input_id == other.target_input_id
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source_block_id": self.source_block_id,
            "source_output_id": self.source_output_id,
            "target_block_id": self.target_block_id,
            "target_input_id": self.target_input_id,
            "data_kind": self.data_kind.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BlockConnection':
        return cls(
            id=data["id"],
            source_block_id=data["source_block_id"],
            source_output_id=data["source_output_id"],
            target_block_id=data["target_block_id"],
            target_input_id=data["target_input_id"],
            data_kind=DataKind.from_string(data.get("data_kind", "any")),
        )

    def __str__(self) -> str:
        return f"{self.source_block_id}.{self.source_output_id} -> {self.target_block_id}.{self.target_input_id}"
