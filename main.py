import json
import logging
import sys
from collections import Counter
from pathlib import Path
from typing import Any, Optional

from config import config
from rules.rules import UNKNOWN_TOKEN
from solver.solver import solve_breach
from solver.state import Solution
from solver.types import Grid, RequiredSequences
from solver.validation import validate_puzzle


logger = logging.getLogger(__name__)


def run(
    grid: Grid,
    required_sequences: RequiredSequences,
    buffer_size: Optional[int] = None,
) -> Solution:
    if buffer_size is None:
        buffer_size = config.default_buffer_size
    # boundary validation
    grid, required_sequences, buffer_size = validate_puzzle(grid, required_sequences, buffer_size)
    return solve_breach(grid, required_sequences, buffer_size)


def run_with_trace(
    grid: Grid,
    required_sequences: RequiredSequences,
    buffer_size: Optional[int] = None,
) -> tuple[Solution, list[str]]:
    if buffer_size is None:
        buffer_size = config.default_buffer_size
    grid, required_sequences, buffer_size = validate_puzzle(grid, required_sequences, buffer_size)
    trace_log: list[str] = []
    result = solve_breach(grid, required_sequences, buffer_size, trace=True, trace_log=trace_log)
    return result, trace_log


def clean_extracted_puzzle(grid: Grid, required_sequences: RequiredSequences) -> tuple[Grid, RequiredSequences]:
    """Drop unreadable rows and sequences from OCR-extracted puzzle data.

    Rows containing the unknown marker are removed, then only rows with the most
    common length are kept. Empty sequences and sequences with unknown tokens are
    removed.
    """
    readable_rows = [row for row in grid if UNKNOWN_TOKEN not in row]
    if readable_rows:
        # Counter.most_common keeps first-seen order among equal counts
        common_length = Counter(len(row) for row in readable_rows).most_common(1)[0][0]
        readable_rows = [row for row in readable_rows if len(row) == common_length]
    if len(readable_rows) < 3:
        logger.warning("Only %d readable rows in extracted grid; OCR may be inaccurate", len(readable_rows))

    readable_sequences = [sequence for sequence in required_sequences if sequence and UNKNOWN_TOKEN not in sequence]
    dropped = len(required_sequences) - len(readable_sequences)
    if dropped:
        logger.warning("Dropped %d unreadable required sequences", dropped)

    return readable_rows, readable_sequences


def parse_puzzle_payload(payload: Any) -> tuple[Grid, RequiredSequences, int]:
    if not isinstance(payload, dict):
        raise ValueError("JSON root must be an object")

    grid = payload.get("codeMatrix")
    required_sequences = payload.get("requiredSequences")
    buffer_size = payload.get("bufferSize")
    if grid is None:
        raise ValueError("JSON must include 'codeMatrix'")
    if required_sequences is None:
        raise ValueError("JSON must include 'requiredSequences'")
    if buffer_size is None:
        return grid, required_sequences, config.default_buffer_size

    return grid, required_sequences, buffer_size


def load_puzzle_from_file(input_path: str) -> tuple[Grid, RequiredSequences, int]:
    path = Path(input_path)
    try:
        payload: Any = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ValueError(f"input file not found: {input_path}") from exc
    except json.JSONDecodeError as exc:
        raise ValueError(f"input file is not valid JSON: {input_path}") from exc

    return parse_puzzle_payload(payload)


def save_puzzle_to_file(
    output_path: str,
    grid: Grid,
    required_sequences: RequiredSequences,
    buffer_size: int,
) -> None:
    payload = {"codeMatrix": grid, "requiredSequences": required_sequences, "bufferSize": buffer_size}
    _write_json(output_path, payload)
    logger.info("Puzzle data saved to %s", output_path)


def save_solution_to_file(output_path: str, solution: Solution) -> None:
    _write_json(output_path, solution.to_dict())
    logger.info("Solution saved to %s", output_path)


def _write_json(output_path: str, payload: dict) -> None:
    try:
        Path(output_path).write_text(json.dumps(payload, indent=2), encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"cannot write output file: {output_path}") from exc


if __name__ == "__main__":
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        try:
            payload = json.load(sys.stdin)
        except json.JSONDecodeError as exc:
            raise ValueError("standard input is not valid JSON") from exc
        grid, required_sequences, buffer_size = parse_puzzle_payload(payload)
        if payload.get("trace"):
            solution, trace_log = run_with_trace(grid, required_sequences, buffer_size)
            print(json.dumps({**solution.to_dict(), "trace": trace_log}, indent=2))
        else:
            solution = run(grid, required_sequences, buffer_size)
            print(json.dumps(solution.to_dict(), indent=2))
    except ValueError as exc:
        raise SystemExit(f"Error: {exc}")
