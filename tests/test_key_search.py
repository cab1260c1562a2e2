import heapq

import pytest

from key_vault import (
    GraphPath,
    Grid,
    KeyCollector,
    UnsolvableVaultError,
    all_keys,
    build_graph,
    reachable_edges,
    route_cost,
)
from key_vault.Objects import START, Edge, key_cell
from key_vault.utilities import keys_to_mask

TWO_KEYS = """\
#########
#b.A.@.a#
#########
"""

LOOPED = """\
#########
#a..@..b#
#.#####.#
#...c...#
#########
"""

DETOUR = """\
#########
#@.B...a#
#.#####.#
#...b...#
#########
"""

LONG_CORRIDOR = """\
########################
#f.D.E.e.C.b.A.@.a.B.c.#
######################.#
#d.....................#
########################
"""

BACKTRACK = """\
########################
#...............b.C.D.f#
#.######################
#.....@.a.B.c.d.A.e.F.g#
########################
"""

BRANCHES = """\
########################
#@..............ac.GI.b#
###d#e#f################
###A#B#C################
###g#h#i################
########################
"""


def solve(text: str, prune: bool = True):
    return KeyCollector(build_graph(Grid.from_text(text)), prune=prune).solve()


@pytest.mark.parametrize("text,expected", [
    ("@a", 1),
    ("@.a", 2),
    ("@.a.A.b", 6),
    (TWO_KEYS, 8),
    (LOOPED, 13),
    (DETOUR, 10),
    (LONG_CORRIDOR, 86),
    (BACKTRACK, 132),
    (BRANCHES, 81),
])
def test_minimum_steps(text, expected):
    assert solve(text).steps == expected


def test_zero_keys_needs_no_steps():
    result = solve("#####\n#@..#\n#####")
    assert result.steps == 0
    assert result.route == ()


def test_door_blocked_order_is_rejected():
    graph = build_graph(Grid.from_text(TWO_KEYS))
    result = KeyCollector(graph).solve()
    assert result.route == ("a", "b")
    # b is closer to the start but sits behind door A
    with pytest.raises(ValueError):
        route_cost(graph, ("b", "a"))
    assert route_cost(graph, result.route) == result.steps


def test_unsolvable_vault_raises():
    with pytest.raises(UnsolvableVaultError):
        solve("@.a.B.b")


def test_unsolvable_vault_raises_without_pruning():
    with pytest.raises(UnsolvableVaultError):
        solve("@.a.B.b", prune=False)


@pytest.mark.parametrize("text", ["@a", "@.a.A.b", TWO_KEYS, LOOPED, DETOUR, "a.@\n.#b\nc.."])
def test_pruning_keeps_the_optimum(text):
    pruned = solve(text, prune=True)
    exhaustive = solve(text, prune=False)
    assert pruned.steps == exhaustive.steps


def test_route_cost_matches_reported_steps():
    graph = build_graph(Grid.from_text(BRANCHES))
    result = KeyCollector(graph).solve()
    assert route_cost(graph, result.route) == result.steps
    assert set(result.route) == all_keys(graph)


def test_search_is_deterministic():
    first = solve(LONG_CORRIDOR)
    second = solve(LONG_CORRIDOR)
    assert first == second


def test_reachable_edges_only_grow_as_keys_are_added():
    graph = build_graph(Grid.from_text(LONG_CORRIDOR))
    keys = sorted(all_keys(graph))
    for node in graph:
        for mask in range(1 << len(keys)):
            held = keys_to_mask(k for i, k in enumerate(keys) if mask & (1 << i))
            before = {edge.to_key: edge.steps for edge in reachable_edges(graph, node, held)}
            for key in keys:
                after = {
                    edge.to_key: edge.steps
                    for edge in reachable_edges(graph, node, held | keys_to_mask([key]))
                }
                assert set(before) <= set(after)
                assert all(after[k] <= steps for k, steps in before.items())


def test_reachable_edges_filters_on_doors():
    graph = build_graph(Grid.from_text(TWO_KEYS))
    assert {e.to_key for e in reachable_edges(graph, START, 0)} == {"a"}
    assert {e.to_key for e in reachable_edges(graph, START, keys_to_mask("a"))} == {"a", "b"}


def test_graph_path_add_edge_is_pure():
    path = GraphPath(steps=3, keys=keys_to_mask("a"), node=key_cell("a"), route=("a",))
    nxt = path.add_edge(Edge("c", 4, frozenset({"a"})))
    assert path.steps == 3 and path.route == ("a",)
    assert nxt.steps == 7
    assert nxt.keys == keys_to_mask("ac")
    assert nxt.node == key_cell("c")
    assert nxt.route == ("a", "c")


def test_priority_prefers_more_keys_then_fewer_steps():
    few_keys = GraphPath(steps=1, keys=keys_to_mask("a"), node=key_cell("a"))
    many_keys_long = GraphPath(steps=50, keys=keys_to_mask("ab"), node=key_cell("b"))
    many_keys_short = GraphPath(steps=10, keys=keys_to_mask("ba"), node=key_cell("a"))
    heap = [(p.priority(), i, p) for i, p in enumerate([few_keys, many_keys_long, many_keys_short])]
    heapq.heapify(heap)
    order = [heapq.heappop(heap)[2] for _ in range(3)]
    assert order == [many_keys_short, many_keys_long, few_keys]


def test_graph_without_start_is_rejected():
    with pytest.raises(ValueError):
        KeyCollector({key_cell("a"): []})
