import logging
import time
from typing import Optional

from rules.rules import FIRST_PHASE

from .search import search_best_path
from .state import EMPTY_SOLUTION, Solution, extend_path, is_better, start_positions
from .types import Grid, ProgressState, RequiredSequences, TraceLog, TraceObserver, TraceStep
from .utils import emit_step, format_path, trace as _trace


logger = logging.getLogger(__name__)


def solve_breach(
    grid: Grid,
    required_sequences: RequiredSequences,
    buffer_size: int,
    *,
    trace: bool = False,
    trace_log: Optional[TraceLog] = None,
    trace_steps: Optional[list[TraceStep]] = None,
    trace_meta: Optional[dict[str, object]] = None,
    trace_max_steps: int = 1000,
    observer: Optional[TraceObserver] = None,
) -> Solution:
    """Find the path that completes the most required sequences within the buffer.

    One backtracking tree is searched per top-row start column and the best result
    across trees wins: more completed sequences first, then the shorter path, then
    the earliest start column. Input is assumed valid; see ``solver.validation``.

    Trace output goes to ``trace_log`` (or the ``solver`` logger when no list is
    given) if ``trace`` is set; structured steps go to ``trace_steps`` and to
    ``observer``. ``trace_meta`` receives ``truncated`` and ``nodes_visited``.
    """
    if trace_meta is not None:
        trace_meta.setdefault("truncated", False)

    if buffer_size < 1 or not grid:
        _trace(trace, trace_log, "Nothing to search: empty grid or buffer")
        if trace_meta is not None:
            trace_meta["nodes_visited"] = 0
        return EMPTY_SOLUTION

    started_at = time.perf_counter()
    progress_state: ProgressState = {"nodes_visited": 0}
    _trace(
        trace,
        trace_log,
        f"Initialized search: size={len(grid)}, sequences={len(required_sequences)}, buffer={buffer_size}",
    )

    best = EMPTY_SOLUTION
    for start in start_positions(grid):
        _trace(trace, trace_log, f"Start at column {start.col} with {start.value}")
        if trace_steps is not None or observer is not None:
            step: TraceStep = {
                "event": "start_column",
                "message": f"Start at column {start.col} with {start.value}",
                "depth": 0,
                "row": start.row,
                "col": start.col,
                "value": start.value,
                "candidates": None,
                "path": [],
                "completed": [],
            }
            emit_step(step, trace_steps, trace_meta, trace_max_steps, observer)

        path, visited = extend_path((), frozenset(), start)
        candidate = search_best_path(
            grid=grid,
            required_sequences=required_sequences,
            buffer_size=buffer_size,
            path=path,
            visited=visited,
            phase=FIRST_PHASE,
            completed=(),
            trace_enabled=trace,
            trace_log=trace_log,
            trace_steps=trace_steps,
            trace_meta=trace_meta,
            trace_max_steps=trace_max_steps,
            observer=observer,
            progress_state=progress_state,
            depth=1,
        )
        if is_better(candidate, best):
            best = candidate

    _trace(
        trace,
        trace_log,
        f"Selected {best.completed_count}/{len(required_sequences)} sequences: {format_path(best.path)}",
    )
    if trace_meta is not None:
        trace_meta["nodes_visited"] = progress_state["nodes_visited"]

    logger.info(
        "Solved %dx%d grid: %d/%d sequences in %d steps (%d nodes, %.1f ms)",
        len(grid),
        len(grid),
        best.completed_count,
        len(required_sequences),
        len(best.path),
        progress_state["nodes_visited"],
        (time.perf_counter() - started_at) * 1000.0,
    )
    return best
