from typing import Any

from rules.rules import MIN_BUFFER_SIZE, MIN_GRID_SIZE

from .types import Grid, RequiredSequences


def validate_grid(grid: Any) -> Grid:
    if not isinstance(grid, list) or len(grid) < MIN_GRID_SIZE:
        raise ValueError(f"grid must be a list of at least {MIN_GRID_SIZE} rows")

    size = len(grid)
    normalized_grid: Grid = []
    for row_index, row in enumerate(grid):
        if not isinstance(row, list) or len(row) != size:
            raise ValueError(f"grid must be square: row {row_index} does not have {size} entries")

        normalized_row: list[str] = []
        for value in row:
            if not isinstance(value, str) or not value.strip():
                raise ValueError("grid entries must be non-empty strings")
            normalized_row.append(value.strip().upper())

        normalized_grid.append(normalized_row)

    return normalized_grid


def validate_required_sequences(required_sequences: Any) -> RequiredSequences:
    if not isinstance(required_sequences, list):
        raise ValueError("required_sequences must be a list of token lists")

    normalized_sequences: RequiredSequences = []
    for index, sequence in enumerate(required_sequences):
        if not isinstance(sequence, list):
            raise ValueError(f"required sequence {index} must be a list of tokens")
        if not sequence:
            raise ValueError(f"required sequence {index} must not be empty")
        for value in sequence:
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"required sequence {index} entries must be non-empty strings")
        normalized_sequences.append([value.strip().upper() for value in sequence])

    return normalized_sequences


def validate_buffer_size(buffer_size: Any) -> int:
    # bool is an int subclass but never a meaningful buffer size
    if isinstance(buffer_size, bool) or not isinstance(buffer_size, int):
        raise ValueError("buffer_size must be an integer")
    if buffer_size < MIN_BUFFER_SIZE:
        raise ValueError(f"buffer_size must be at least {MIN_BUFFER_SIZE}")
    return buffer_size


def validate_puzzle(grid: Any, required_sequences: Any, buffer_size: Any) -> tuple[Grid, RequiredSequences, int]:
    return (
        validate_grid(grid),
        validate_required_sequences(required_sequences),
        validate_buffer_size(buffer_size),
    )
