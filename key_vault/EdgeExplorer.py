from collections import deque
import logging
from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from .Objects import CellKind, Edge, Graph, Grid, Position

logger = logging.getLogger(__name__)

Frontier = Tuple[Position, int, FrozenSet[str]]


class EdgeExplorer:
    """Breadth-first flood fill from one node that discovers an edge to every reachable key.

    Doors are walkable terrain here; the door letters crossed on the way to a key are
    recorded on its edge so the key search can decide when the edge is usable.
    """

    def __init__(self, grid: Grid, origin: Position):
        self.grid = grid
        self.origin = origin
        self.distances: Dict[Position, int] = {}
        self.parents: Dict[Position, Optional[Position]] = {}

    def explore(self) -> List[Edge]:
        self.distances = {self.origin: 0}
        self.parents = {self.origin: None}
        queue: deque[Frontier] = deque([(self.origin, 0, frozenset())])
        edges: List[Edge] = []

        while queue:
            pos, steps, doors = queue.popleft()
            for neighbor in self.grid.neighbors(pos):
                next_steps = steps + 1
                known = self.distances.get(neighbor)
                if known is not None and known <= next_steps:
                    continue
                self.distances[neighbor] = next_steps
                self.parents[neighbor] = pos

                cell = self.grid.cell(neighbor)
                next_doors = doors
                if cell.is_kind(CellKind.DOOR):
                    next_doors = doors | {cell.identifier}
                elif cell.is_kind(CellKind.KEY):
                    edges.append(Edge(cell.identifier, next_steps, doors))
                queue.append((neighbor, next_steps, next_doors))

        logger.debug("Explored %s cells from %s, found %s keys.", len(self.distances), self.origin, len(edges))
        return edges

    def trace(self, target: Position) -> List[Position]:
        """Return the grid walk from the origin to `target`, or [] if it was never reached."""
        if target not in self.parents:
            return []
        walk: List[Position] = []
        current: Optional[Position] = target
        while current is not None:
            walk.append(current)
            current = self.parents[current]
        walk.reverse()
        return walk


def build_graph(grid: Grid) -> Graph:
    """Compress the grid into the start node and key nodes with their outbound edges."""
    graph: Graph = {}
    for node, pos in grid.nodes().items():
        graph[node] = EdgeExplorer(grid, pos).explore()
    logger.debug(
        "Built vault graph with %s nodes and %s edges.",
        len(graph),
        sum(len(edges) for edges in graph.values()),
    )
    return graph


def all_keys(graph: Graph) -> Set[str]:
    return {node.identifier for node in graph if node.is_kind(CellKind.KEY)}


def walk_route(grid: Grid, route: Sequence[str]) -> List[Position]:
    """Expand a key collection order into the grid positions walked, starting at '@'."""
    nodes = grid.nodes()
    positions: Dict[str, Position] = {
        node.identifier: pos for node, pos in nodes.items() if node.is_kind(CellKind.KEY)
    }
    current = next(pos for node, pos in nodes.items() if node.is_kind(CellKind.START))
    walk: List[Position] = [current]
    for key in route:
        explorer = EdgeExplorer(grid, current)
        explorer.explore()
        segment = explorer.trace(positions[key])
        walk.extend(segment[1:])
        current = positions[key]
    return walk
