from pathlib import Path
from typing import Iterable, List, Sequence, Union

from .Objects import START, Graph, Grid, key_cell


def read_input(path: Union[str, Path]) -> Grid:
    """Read and parse a vault map file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise OSError(f"Error reading input file {path}: {exc}") from exc
    return Grid.from_text(text)


def key_bit(key: str) -> int:
    return 1 << (ord(key.lower()) - ord("a"))


def keys_to_mask(keys: Iterable[str]) -> int:
    mask = 0
    for key in keys:
        mask |= key_bit(key)
    return mask


def mask_to_keys(mask: int) -> List[str]:
    """Sorted key identifiers held in a bitmask."""
    return [chr(ord("a") + i) for i in range(26) if mask & (1 << i)]


def route_cost(graph: Graph, route: Sequence[str]) -> int:
    """Total steps of a collection order starting at '@'.

    Raises ValueError if a leg has no edge or crosses a door whose key is not yet held.
    """
    node = START
    held = 0
    total = 0
    for key in route:
        edge = next((e for e in graph.get(node, []) if e.to_key == key), None)
        if edge is None:
            raise ValueError(f"No edge towards key {key!r}")
        if keys_to_mask(edge.doors) & ~held:
            missing = mask_to_keys(keys_to_mask(edge.doors) & ~held)
            raise ValueError(f"Edge towards key {key!r} needs keys {missing}")
        total += edge.steps
        held |= key_bit(key)
        node = key_cell(key)
    return total


def route_to_str(route: Sequence[str]) -> str:
    """Convert a collection order to a human-readable string."""
    return "->".join(["@", *route])
