from .sequences import score_move
from .state import Position, position_at
from .types import Coordinate, Grid, Phase, RequiredSequences


def next_phase(phase: Phase) -> Phase:
    return "row" if phase == "col" else "col"


def legal_moves(grid: Grid, last: Position, phase: Phase, visited: frozenset[Coordinate]) -> list[Position]:
    size = len(grid)
    if phase == "col":
        coordinates = [(row, last.col) for row in range(size)]
    else:
        coordinates = [(last.row, col) for col in range(size)]
    return [position_at(grid, r, c) for r, c in coordinates if (r, c) not in visited]


def order_moves(
    moves: list[Position],
    values: list[str],
    required_sequences: RequiredSequences,
    completed: tuple[int, ...],
) -> list[Position]:
    # stable sort keeps grid order among equal scores
    return sorted(moves, key=lambda move: score_move(values, move.value, required_sequences, completed))


def select_candidate_moves(
    grid: Grid,
    path: tuple[Position, ...],
    phase: Phase,
    visited: frozenset[Coordinate],
    required_sequences: RequiredSequences,
    completed: tuple[int, ...],
) -> list[Position]:
    moves = legal_moves(grid, path[-1], phase, visited)
    if not moves:
        return []
    values = [position.value for position in path]
    return order_moves(moves, values, required_sequences, completed)
