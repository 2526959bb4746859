import logging
from typing import Optional

from .state import Position
from .types import TraceLog, TraceObserver, TraceStep


logger = logging.getLogger("solver")


def trace(enabled: bool, trace_log: Optional[TraceLog], message: str) -> None:
    if not enabled:
        return
    if trace_log is not None:
        trace_log.append(message)
    else:
        logger.debug(message)


def indent(depth: int) -> str:
    return "  " * depth


def path_coordinates(path: tuple[Position, ...]) -> list[list[int]]:
    return [[position.row, position.col] for position in path]


def format_path(path: tuple[Position, ...]) -> str:
    return " -> ".join(f"{position.value}@({position.row}, {position.col})" for position in path)


def emit_step(
    step: TraceStep,
    trace_steps: Optional[list[TraceStep]],
    trace_meta: Optional[dict[str, object]],
    trace_max_steps: int,
    observer: Optional[TraceObserver],
) -> None:
    # the observer sees every step, the step list stops at trace_max_steps
    if observer is not None:
        observer(step)
    if trace_steps is None:
        return
    if len(trace_steps) >= trace_max_steps:
        if trace_meta is not None:
            trace_meta["truncated"] = True
        return
    trace_steps.append(step)
