from __future__ import annotations
import logging
import sys
from typing import Callable, Dict, List, Optional

from key_vault import KeyCollector, build_graph, read_input
logging.basicConfig(level=logging.ERROR)

INPUT_PATH = "../input/day18"


def a(path: str = INPUT_PATH) -> str:
    """Fewest steps that collect every key in the vault."""
    graph = build_graph(read_input(path))
    result = KeyCollector(graph).solve()
    return str(result.steps)


def b() -> str:
    return ""


PROBLEMS: Dict[str, Callable[[], str]] = {
    "18a": a,
    "18b": b,
}


def run(argv: List[str]) -> str:
    problem: Optional[str] = argv[1] if len(argv) > 1 else None
    if problem is None:
        return "Please supply a problem"
    solver = PROBLEMS.get(problem)
    if solver is None:
        return "Not solved yet"
    return solver()


def main() -> None:
    print(f"\n{run(sys.argv)}")


if __name__ == "__main__":
    main()
