from .Objects import Cell, CellKind, Edge, Graph, Grid, Position
from .EdgeExplorer import EdgeExplorer, all_keys, build_graph
from .KeySearch import GraphPath, KeyCollector, SearchResult, UnsolvableVaultError, reachable_edges
from .utilities import read_input, route_cost, route_to_str
