"""
Graph queries over a strategy's blocks and connections.
"""
from collections import deque
from typing import Dict, Iterable, List, Optional, Set

from strategy_builder.features.connections.domain import BlockConnection


def get_input_connections(block_id: str, connections: Iterable[BlockConnection]) -> List[BlockConnection]:
    """Connections feeding a block, in connection order."""
    return [c for c in connections if c.target_block_id == block_id]


def get_output_connections(block_id: str, connections: Iterable[BlockConnection]) -> List[BlockConnection]:
    """Connections leaving a block, in connection order."""
    return [c for c in connections if c.source_block_id == block_id]


def connections_into(input_id: str, connections: Iterable[BlockConnection]) -> List[BlockConnection]:
    """Connections feeding one input port, in connection order."""
    return [c for c in connections if c.target_input_id == input_id]


def _adjacency(connections: Iterable[BlockConnection], reverse: bool = False) -> Dict[str, List[str]]:
    adjacency: Dict[str, List[str]] = {}
    for conn in connections:
        source, target = conn.source_block_id, conn.target_block_id
        if reverse:
            source, target = target, source
        adjacency.setdefault(source, []).append(target)
    return adjacency


def _reachable(start: str, adjacency: Dict[str, List[str]]) -> List[str]:
    visited: Set[str] = {start}
    order: List[str] = []
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for neighbor in adjacency.get(current, []):
            if neighbor not in visited:
                visited.add(neighbor)
                order.append(neighbor)
                queue.append(neighbor)
    return order


def find_dependent_blocks(block_id: str, connections: Iterable[BlockConnection]) -> List[str]:
    """
    Ids of every block downstream of block_id (breadth-first order).
    """
    return _reachable(block_id, _adjacency(connections))


def find_dependency_blocks(block_id: str, connections: Iterable[BlockConnection]) -> List[str]:
    """
    Ids of every block upstream of block_id (breadth-first order).
    """
    return _reachable(block_id, _adjacency(connections, reverse=True))


def find_shortest_path(
    source_block_id: str,
    target_block_id: str,
    connections: Iterable[BlockConnection],
) -> Optional[List[str]]:
    """
    Shortest directed path of block ids from source to target.

    Returns:
        Block ids including both ends, or None when target is unreachable
    """
    if source_block_id == target_block_id:
        return [source_block_id]

    adjacency = _adjacency(connections)
    previous: Dict[str, str] = {}
    visited: Set[str] = {source_block_id}
    queue = deque([source_block_id])

    while queue:
        current = queue.popleft()
        for neighbor in adjacency.get(current, []):
            if neighbor in visited:
                continue
            visited.add(neighbor)
            previous[neighbor] = current
            if neighbor == target_block_id:
                path = [neighbor]
                while path[-1] != source_block_id:
                    path.append(previous[path[-1]])
                return list(reversed(path))
            queue.append(neighbor)

    return None
