"""
Topological Sort for Block Execution Order

Determines the execution order for blocks based on their connections.
Blocks without dependencies execute first, followed by blocks that depend
on them. Ties are broken by the blocks' position in the strategy's block
list, so an unchanged graph always yields the same order.
"""
import heapq
from typing import Dict, Iterable, List, Optional, Set

from strategy_builder.features.blocks.domain import StrategyBlock
from strategy_builder.features.connections.domain import BlockConnection
from strategy_builder.shared.domain.exceptions import CyclicDependencyError, GraphIntegrityError
from strategy_builder.utils.message import Log


def order_blocks(
    blocks: List[StrategyBlock],
    connections: List[BlockConnection]
) -> List[StrategyBlock]:
    """
    Topologically sort blocks for execution order.

    Uses Kahn's algorithm:
    1. Blocks with no incoming connections are ready
    2. The ready block that comes first in the block list executes next
    3. Its dependents lose one incoming connection each and become ready at zero

    Args:
        blocks: Blocks in definition order
        connections: Connections defining dependencies

    Returns:
        List of blocks in execution order

    Raises:
        CyclicDependencyError: If blocks have circular dependencies
        GraphIntegrityError: If connections reference non-existent blocks
    """
    if not blocks:
        return []

    index_of: Dict[str, int] = {block.id: i for i, block in enumerate(blocks)}

    for conn in connections:
        if conn.source_block_id not in index_of:
            raise GraphIntegrityError(f"Connection references non-existent source block: {conn.source_block_id}")
        if conn.target_block_id not in index_of:
            raise GraphIntegrityError(f"Connection references non-existent target block: {conn.target_block_id}")

    # incoming_count[block_id] = number of connections that must resolve first
    incoming_count: Dict[str, int] = {block.id: 0 for block in blocks}
    outgoing: Dict[str, List[str]] = {block.id: [] for block in blocks}

    for conn in connections:
        incoming_count[conn.target_block_id] += 1
        outgoing[conn.source_block_id].append(conn.target_block_id)

    ready = [index_of[block_id] for block_id, count in incoming_count.items() if count == 0]
    heapq.heapify(ready)

    result: List[StrategyBlock] = []
    while ready:
        block = blocks[heapq.heappop(ready)]
        result.append(block)

        for dependent_id in outgoing[block.id]:
            incoming_count[dependent_id] -= 1
            if incoming_count[dependent_id] == 0:
                heapq.heappush(ready, index_of[dependent_id])

    if len(result) != len(blocks):
        remaining = [block.id for block in blocks if incoming_count[block.id] > 0]
        cycle = _find_cycle(outgoing, remaining) or remaining
        raise CyclicDependencyError(cycle)

    Log.debug(f"Topological sort: Ordered {len(result)} blocks for execution")
    return result


def _find_cycle(outgoing: Dict[str, List[str]], start_ids: Iterable[str]) -> Optional[List[str]]:
    """
    Find one cycle in the dependency graph using DFS.

    Returns:
        Block ids forming the cycle (first id not repeated), or None
    """
    visited: Set[str] = set()
    path: List[str] = []
    on_path: Set[str] = set()

    def dfs(block_id: str) -> Optional[List[str]]:
        if block_id in on_path:
            return path[path.index(block_id):]
        if block_id in visited:
            return None

        visited.add(block_id)
        path.append(block_id)
        on_path.add(block_id)

        for dependent_id in outgoing.get(block_id, []):
            cycle = dfs(dependent_id)
            if cycle:
                return cycle

        path.pop()
        on_path.discard(block_id)
        return None

    for start_id in start_ids:
        cycle = dfs(start_id)
        if cycle:
            return cycle
    return None


def _outgoing_map(connections: Iterable[BlockConnection]) -> Dict[str, List[str]]:
    outgoing: Dict[str, List[str]] = {}
    for conn in connections:
        outgoing.setdefault(conn.source_block_id, []).append(conn.target_block_id)
        outgoing.setdefault(conn.target_block_id, [])
    return outgoing


def find_cycle(connections: Iterable[BlockConnection]) -> Optional[List[str]]:
    """
    Find one cycle among the connections.

    Returns:
        Block ids forming the cycle, or None when the graph is acyclic
    """
    outgoing = _outgoing_map(connections)
    return _find_cycle(outgoing, list(outgoing))


def has_circular_dependency(connections: Iterable[BlockConnection]) -> bool:
    """DFS with a recursion stack; True if any cycle exists."""
    return find_cycle(connections) is not None


def would_create_cycle(candidate: BlockConnection, connections: Iterable[BlockConnection]) -> bool:
    """
    Check whether adding candidate would close a cycle.

    True when the candidate's target already reaches its source (or the
    candidate is a self-loop).
    """
    if candidate.source_block_id == candidate.target_block_id:
        return True

    outgoing = _outgoing_map(connections)
    stack = [candidate.target_block_id]
    seen: Set[str] = set()
    while stack:
        block_id = stack.pop()
        if block_id == candidate.source_block_id:
            return True
        if block_id in seen:
            continue
        seen.add(block_id)
        stack.extend(outgoing.get(block_id, []))
    return False
