"""
Engine exceptions

Validators report expected problems as ValidationError findings. The
exceptions below are reserved for conditions a caller must handle in code:
a catalog lookup miss, a mutation that would corrupt the graph, a cyclic
graph reaching the orderer, or a generator/catalog mismatch.
"""
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from strategy_builder.shared.domain.value_objects.validation_error import ValidationError


class StrategyBuilderError(Exception):
    """Base exception for the strategy builder engine."""
    pass


class UnknownBlockTypeError(StrategyBuilderError):
    """Raised when the catalog has no template for a block type."""

    def __init__(self, block_type: str):
        self.block_type = block_type
        super().__init__(f"Unknown block type: '{block_type}'")


class GraphIntegrityError(StrategyBuilderError):
    """Raised when a mutation would break a StrategyDefinition invariant."""
    pass


class CyclicDependencyError(StrategyBuilderError):
    """Exception raised when blocks have circular dependencies"""

    def __init__(self, cycle: List[str]):
        """
        Initialize cyclic dependency error.

        Args:
            cycle: List of block IDs forming the cycle
        """
        self.cycle = cycle
        super().__init__(f"Circular dependency detected: {' -> '.join(cycle)} -> {cycle[0]}")


class CompilationError(StrategyBuilderError):
    """
    Raised when a strategy cannot be compiled.

    Carries the blocking findings so the caller can render every problem at once.
    """

    def __init__(self, message: str, findings: Optional[List['ValidationError']] = None):
        self.findings = list(findings or [])
        super().__init__(message)


class UnsupportedBlockTypeError(StrategyBuilderError):
    """Raised when a block type has no code emitter."""

    def __init__(self, block_id: str, block_type: str):
        self.block_id = block_id
        self.block_type = block_type
        super().__init__(f"Unsupported block type '{block_type}' on block '{block_id}'")


class SerializationError(StrategyBuilderError):
    """Raised when a strategy document cannot be exported or imported."""
    pass


class StrategyLoadError(StrategyBuilderError):
    """Raised when generated strategy code cannot be loaded."""
    pass
