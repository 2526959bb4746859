from typing import Optional

from .constraints import next_phase, select_candidate_moves
from .sequences import update_completed
from .state import EMPTY_SOLUTION, Position, Solution, extend_path, is_better
from .types import Coordinate, Grid, Phase, ProgressState, RequiredSequences, TraceLog, TraceObserver, TraceStep
from .utils import emit_step, format_path, indent, path_coordinates, trace


def search_best_path(
    grid: Grid,
    required_sequences: RequiredSequences,
    buffer_size: int,
    path: tuple[Position, ...],
    visited: frozenset[Coordinate],
    phase: Phase,
    completed: tuple[int, ...],
    trace_enabled: bool,
    trace_log: Optional[TraceLog],
    trace_steps: Optional[list[TraceStep]],
    trace_meta: Optional[dict[str, object]],
    trace_max_steps: int,
    observer: Optional[TraceObserver],
    progress_state: ProgressState,
    depth: int,
) -> Solution:
    tracing = trace_enabled or trace_steps is not None or observer is not None

    def record_step(
        event: str,
        message: str,
        position: Optional[Position] = None,
        candidates: Optional[list[str]] = None,
    ) -> None:
        trace(trace_enabled, trace_log, message)
        if trace_steps is None and observer is None:
            return
        step: TraceStep = {
            "event": event,
            "message": message,
            "depth": depth,
            "row": position.row if position is not None else None,
            "col": position.col if position is not None else None,
            "value": position.value if position is not None else None,
            "candidates": candidates,
            "path": path_coordinates(path),
            "completed": list(completed),
        }
        emit_step(step, trace_steps, trace_meta, trace_max_steps, observer)

    progress_state["nodes_visited"] += 1

    values = [position.value for position in path]
    completed = update_completed(values, required_sequences, completed)

    if len(completed) == len(required_sequences):
        if tracing:
            record_step(
                "complete_all",
                f"{indent(depth)}All {len(required_sequences)} sequences complete: {format_path(path)}",
            )
        return Solution(path=path, completed_sequences=completed)

    if len(path) >= buffer_size:
        if tracing:
            record_step(
                "buffer_full",
                f"{indent(depth)}Buffer full with {len(completed)} sequences complete: {format_path(path)}",
            )
        return Solution(path=path, completed_sequences=completed)

    moves = select_candidate_moves(grid, path, phase, visited, required_sequences, completed)
    if not moves:
        # a cornered branch still counts as a finished candidate
        if tracing:
            anchor = path[-1].col if phase == "col" else path[-1].row
            record_step("dead_end", f"{indent(depth)}No unvisited cells left in {phase} {anchor}")
        return Solution(path=path, completed_sequences=completed)

    if tracing:
        record_step(
            "order_moves",
            f"{indent(depth)}Order {len(moves)} moves along {phase}: {' '.join(move.value for move in moves)}",
            candidates=[move.value for move in moves],
        )

    best = EMPTY_SOLUTION
    for move in moves:
        if tracing:
            record_step("try_move", f"{indent(depth)}Try {move.value} at ({move.row}, {move.col})", position=move)

        child_path, child_visited = extend_path(path, visited, move)
        candidate = search_best_path(
            grid=grid,
            required_sequences=required_sequences,
            buffer_size=buffer_size,
            path=child_path,
            visited=child_visited,
            phase=next_phase(phase),
            completed=completed,
            trace_enabled=trace_enabled,
            trace_log=trace_log,
            trace_steps=trace_steps,
            trace_meta=trace_meta,
            trace_max_steps=trace_max_steps,
            observer=observer,
            progress_state=progress_state,
            depth=depth + 1,
        )

        if is_better(candidate, best):
            best = candidate
            if tracing:
                record_step(
                    "improve_best",
                    f"{indent(depth)}Best so far: {best.completed_count} sequences "
                    f"in {len(best.path)} steps via ({move.row}, {move.col})",
                    position=move,
                )

        if candidate.completed_count == len(required_sequences):
            return candidate

    return best
