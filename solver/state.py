from dataclasses import dataclass, field

from rules.rules import START_ROW

from .types import Coordinate, Grid


@dataclass(frozen=True)
class Position:
    row: int
    col: int
    value: str

    @property
    def coordinate(self) -> Coordinate:
        return self.row, self.col

    def to_dict(self) -> dict[str, object]:
        return {"row": self.row, "col": self.col, "value": self.value}


@dataclass(frozen=True)
class Solution:
    """A selection path and the indices of the sequences it completes.

    ``completed_sequences`` is ordered by discovery along ``path``. An empty path
    means no path could be built.
    """

    path: tuple[Position, ...] = ()
    completed_sequences: tuple[int, ...] = field(default=())

    @property
    def completed_count(self) -> int:
        return len(self.completed_sequences)

    @property
    def is_empty(self) -> bool:
        return not self.path

    def values(self) -> list[str]:
        return [position.value for position in self.path]

    def to_dict(self) -> dict[str, object]:
        return {
            "path": [position.to_dict() for position in self.path],
            "completedSequences": list(self.completed_sequences),
        }


EMPTY_SOLUTION = Solution()


def position_at(grid: Grid, row: int, col: int) -> Position:
    return Position(row=row, col=col, value=grid[row][col])


def start_positions(grid: Grid) -> list[Position]:
    return [position_at(grid, START_ROW, col) for col in range(len(grid[START_ROW]))]


def extend_path(
    path: tuple[Position, ...],
    visited: frozenset[Coordinate],
    position: Position,
) -> tuple[tuple[Position, ...], frozenset[Coordinate]]:
    return path + (position,), visited | {position.coordinate}


def is_better(candidate: Solution, best: Solution) -> bool:
    """More completed sequences wins; on a tie the strictly shorter path wins."""
    if best.is_empty:
        return not candidate.is_empty
    if candidate.completed_count != best.completed_count:
        return candidate.completed_count > best.completed_count
    return len(candidate.path) < len(best.path)
