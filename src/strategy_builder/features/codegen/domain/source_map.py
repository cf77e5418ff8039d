"""
Compiled strategy value objects

A CompiledStrategy bundles generated source with a SourceMap that maps
generated lines back to block and connection ids.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from strategy_builder.shared.domain.value_objects import ValidationError


@dataclass(frozen=True)
class SourceLocation:
    """
    Span of generated code.

    Lines and columns are 1-based; end_line is inclusive.
    """
    line: int
    column: int
    section: str
    end_line: Optional[int] = None

    def contains(self, line: int) -> bool:
        return self.line <= line <= (self.end_line or self.line)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line": self.line,
            "column": self.column,
            "section": self.section,
            "end_line": self.end_line or self.line,
        }


@dataclass
class SourceMap:
    """Generated-code locations per block id and per connection id."""
    blocks: Dict[str, List[SourceLocation]] = field(default_factory=dict)
    connections: Dict[str, List[SourceLocation]] = field(default_factory=dict)

    def add_block(self, block_id: str, location: SourceLocation) -> None:
        self.blocks.setdefault(block_id, []).append(location)

    def add_connection(self, connection_id: str, location: SourceLocation) -> None:
        self.connections.setdefault(connection_id, []).append(location)

    def block_at(self, line: int) -> Optional[str]:
        """Block whose generated code covers a line (e.g. from a traceback)."""
        for block_id, locations in self.blocks.items():
            if any(loc.contains(line) for loc in locations):
                return block_id
        return None

    def connections_at(self, line: int) -> List[str]:
        return [
            connection_id
            for connection_id, locations in self.connections.items()
            if any(loc.contains(line) for loc in locations)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "blocks": {k: [loc.to_dict() for loc in v] for k, v in self.blocks.items()},
            "connections": {k: [loc.to_dict() for loc in v] for k, v in self.connections.items()},
        }


@dataclass
class CompiledStrategy:
    """
    Output of the code generator.

    Attributes:
        code: Python module source defining class_name
        source_map: Generated-code locations per block / connection
        class_name: Name of the generated strategy class
        execution_order: Block ids in topological order
        parameters: Initial parameter table (blockName_propertyName -> value)
        warnings: Non-blocking findings from validation
    """
    code: str
    source_map: SourceMap
    class_name: str
    execution_order: List[str]
    parameters: Dict[str, Any]
    strategy_id: str = ""
    version: int = 1
    warnings: List[ValidationError] = field(default_factory=list)


@dataclass
class CompilationResult:
    """Non-throwing wrapper around generation for expected failures."""
    success: bool
    strategy: Optional[CompiledStrategy] = None
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationError] = field(default_factory=list)

    @property
    def error_codes(self) -> Tuple[str, ...]:
        return tuple(e.code for e in self.errors)
