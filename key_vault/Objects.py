from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple

Position = Tuple[int, int]


class CellKind(Enum):
    WALL = "wall"
    FLOOR = "floor"
    DOOR = "door"
    KEY = "key"
    START = "start"


@dataclass(frozen=True)
class Cell:
    kind: CellKind
    letter: Optional[str] = None

    @classmethod
    def from_char(cls, char: str) -> "Cell":
        """Map a single input character to its cell."""
        if char == "#":
            return WALL
        if char == ".":
            return FLOOR
        if char == "@":
            return START
        if "A" <= char <= "Z":
            return cls(CellKind.DOOR, char)
        if "a" <= char <= "z":
            return cls(CellKind.KEY, char)
        raise ValueError(f"Unexpected character in vault map: {char!r}")

    @property
    def identifier(self) -> Optional[str]:
        """Case-insensitive letter shared by a door and its key."""
        return self.letter.lower() if self.letter is not None else None

    def is_kind(self, kind: CellKind) -> bool:
        return self.kind is kind

    def to_char(self) -> str:
        if self.letter is not None:
            return self.letter
        return {CellKind.WALL: "#", CellKind.FLOOR: ".", CellKind.START: "@"}[self.kind]


WALL = Cell(CellKind.WALL)
FLOOR = Cell(CellKind.FLOOR)
START = Cell(CellKind.START)


def key_cell(letter: str) -> Cell:
    return Cell(CellKind.KEY, letter.lower())


@dataclass(frozen=True)
class Edge:
    """Shortest walk from a graph node to a key and the doors crossed on it."""

    to_key: str
    steps: int
    doors: FrozenSet[str] = frozenset()

    @property
    def target(self) -> Cell:
        return key_cell(self.to_key)


Graph = Dict[Cell, List[Edge]]


@dataclass
class Grid:
    """Row-major vault map indexed as (x, y) = (column, row)."""

    rows: List[List[Cell]] = field(default_factory=list)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "Grid":
        return cls([[Cell.from_char(ch) for ch in line] for line in lines if line])

    @classmethod
    def from_text(cls, text: str) -> "Grid":
        return cls.from_lines(text.splitlines())

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return max((len(row) for row in self.rows), default=0)

    def in_bounds(self, pos: Position) -> bool:
        x, y = pos
        return 0 <= y < len(self.rows) and 0 <= x < len(self.rows[y])

    def cell(self, pos: Position) -> Cell:
        x, y = pos
        return self.rows[y][x]

    def passable(self, pos: Position) -> bool:
        return self.in_bounds(pos) and not self.cell(pos).is_kind(CellKind.WALL)

    def neighbors(self, pos: Position) -> List[Position]:
        x, y = pos
        candidates: List[Position] = [
            (x - 1, y),
            (x, y - 1),
            (x + 1, y),
            (x, y + 1),
        ]
        return [q for q in candidates if self.passable(q)]

    def cells(self) -> Iterator[Tuple[Position, Cell]]:
        for y, row in enumerate(self.rows):
            for x, cell in enumerate(row):
                yield (x, y), cell

    def nodes(self) -> Dict[Cell, Position]:
        """Positions of the start and of every key."""
        found: Dict[Cell, Position] = {}
        starts = 0
        for pos, cell in self.cells():
            if cell.is_kind(CellKind.START):
                starts += 1
                found[cell] = pos
            elif cell.is_kind(CellKind.KEY):
                found[cell] = pos
        if starts == 0:
            raise ValueError("Vault map has no start position '@'")
        if starts > 1:
            raise ValueError(f"Vault map has {starts} start positions, expected exactly one")
        return found

    def to_text(self) -> str:
        return "\n".join("".join(cell.to_char() for cell in row) for row in self.rows)
