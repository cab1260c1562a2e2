import heapq
import itertools
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .EdgeExplorer import all_keys
from .Objects import START, Cell, Edge, Graph
from .utilities import key_bit, keys_to_mask

logger = logging.getLogger(__name__)

MemoKey = Tuple[Cell, int]


class UnsolvableVaultError(RuntimeError):
    """Raised when no sequence of legal moves collects every key."""


@dataclass(frozen=True)
class GraphPath:
    """A search state: the node we stand on, the keys held (bitmask) and the steps taken."""

    steps: int
    keys: int
    node: Cell
    route: Tuple[str, ...] = ()

    @property
    def key_count(self) -> int:
        return bin(self.keys).count("1")

    def priority(self) -> Tuple[int, int]:
        # More keys first, then fewer steps.
        return (-self.key_count, self.steps)

    def add_edge(self, edge: Edge) -> "GraphPath":
        return GraphPath(
            steps=self.steps + edge.steps,
            keys=self.keys | key_bit(edge.to_key),
            node=edge.target,
            route=self.route + (edge.to_key,),
        )


@dataclass(frozen=True)
class SearchResult:
    steps: int
    route: Tuple[str, ...]
    expanded: int
    pushed: int
    memo_size: int
    pruned: bool = True


def reachable_edges(graph: Graph, node: Cell, keys: int) -> List[Edge]:
    """Edges out of `node` whose doors are all unlocked by the `keys` bitmask."""
    return [edge for edge in graph.get(node, []) if not keys_to_mask(edge.doors) & ~keys]


class KeyCollector:
    """Best-first search for the fewest steps that collect every key in a vault graph.

    The frontier prefers states holding more keys, which reaches complete collections
    early; the search still drains the whole frontier and keeps the cheapest complete
    collection, pruning with a (node, keys) memo and the best answer found so far.

    With ``prune=False`` the memo is disabled and the search enumerates every legal walk
    up to a bound no optimal walk can exceed. That mode exists to cross-check the pruned
    search on small vaults.
    """

    def __init__(self, graph: Graph, prune: bool = True):
        if START not in graph:
            raise ValueError("Vault graph has no start node")
        self.graph = graph
        self.prune = prune
        self.full_keys = keys_to_mask(all_keys(graph))
        self._edges: Dict[Cell, List[Tuple[Edge, int]]] = {
            node: [(edge, keys_to_mask(edge.doors)) for edge in edges]
            for node, edges in graph.items()
        }

    def _walk_limit(self) -> int:
        # An optimal walk never repeats a (node, keys) state, and keys only grow.
        longest = max((edge.steps for edges in self.graph.values() for edge in edges), default=0)
        return len(self.graph) ** 2 * longest

    def solve(self) -> SearchResult:
        counter = itertools.count()
        start = GraphPath(steps=0, keys=0, node=START)
        frontier: List[Tuple[Tuple[int, int], int, GraphPath]] = [(start.priority(), next(counter), start)]
        memo: Dict[MemoKey, int] = {}
        limit: Optional[int] = None if self.prune else self._walk_limit()
        best: Optional[GraphPath] = None
        expanded = 0
        pushed = 1

        while frontier:
            _, _, path = heapq.heappop(frontier)
            if path.keys == self.full_keys and (best is None or path.steps < best.steps):
                best = path
                logger.debug("New best collection: %s steps via %s.", path.steps, "".join(path.route))
            if best is not None and path.steps >= best.steps:
                continue
            if limit is not None and path.steps > limit:
                continue
            if self.prune:
                state = (path.node, path.keys)
                seen = memo.get(state)
                if seen is not None and seen <= path.steps:
                    continue
                memo[state] = path.steps

            expanded += 1
            for edge, doors in self._edges.get(path.node, []):
                if doors & ~path.keys:
                    continue
                successor = path.add_edge(edge)
                heapq.heappush(frontier, (successor.priority(), next(counter), successor))
                pushed += 1

        if best is None:
            logger.warning("Search exhausted %s states without collecting every key.", expanded)
            raise UnsolvableVaultError(
                f"No route collects all {len(all_keys(self.graph))} keys"
            )

        logger.info(
            "Collected %s keys in %s steps after expanding %s states.",
            best.key_count,
            best.steps,
            expanded,
        )
        return SearchResult(
            steps=best.steps,
            route=best.route,
            expanded=expanded,
            pushed=pushed,
            memo_size=len(memo),
            pruned=self.prune,
        )
