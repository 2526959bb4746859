import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field, StrictInt

from config import config
from solver.solver import solve_breach
from solver.validation import validate_puzzle


logger = logging.getLogger(__name__)


class SolveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code_matrix: list[list[str]] = Field(..., alias="codeMatrix", description="Square grid of tokens, row by row")
    required_sequences: list[list[str]] = Field(
        ...,
        alias="requiredSequences",
        description="Token sequences to complete; results refer to them by list index",
    )
    buffer_size: Optional[StrictInt] = Field(
        default=None,
        alias="bufferSize",
        description="Maximum number of tokens in the path. Defaults to the configured buffer size.",
    )
    trace: bool = Field(default=False, description="Include solver trace output in the response")
    trace_steps: bool = Field(default=False, description="Include structured trace steps for walkthrough/debugging.")
    trace_max_steps: Optional[int] = Field(
        default=None,
        ge=1,
        le=20000,
        description="Maximum number of trace steps to return. Defaults to the configured limit.",
    )


class PositionResponse(BaseModel):
    row: int
    col: int
    value: str


class TraceStepResponse(BaseModel):
    event: str
    message: str
    depth: int
    row: Optional[int] = None
    col: Optional[int] = None
    value: Optional[str] = None
    candidates: Optional[list[str]] = None
    path: list[list[int]]
    completed: list[int]


class SolveResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    path: list[PositionResponse]
    completed_sequences: list[int] = Field(..., alias="completedSequences")
    completed_count: int = Field(..., alias="completedCount")
    total_sequences: int = Field(..., alias="totalSequences")
    all_completed: bool = Field(..., alias="allCompleted")
    nodes_visited: int = Field(..., alias="nodesVisited")
    trace: Optional[list[str]] = None
    trace_steps: Optional[list[TraceStepResponse]] = None
    trace_truncated: bool = False


app = FastAPI(
    title="Breach Protocol Solver API",
    description="Find a grid selection path that completes as many required token sequences as the buffer allows.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/solve", response_model=SolveResponse)
def solve(request: SolveRequest) -> SolveResponse:
    buffer_size = request.buffer_size if request.buffer_size is not None else config.default_buffer_size
    try:
        grid, required_sequences, buffer_size = validate_puzzle(
            request.code_matrix,
            request.required_sequences,
            buffer_size,
        )
    except ValueError as exc:
        logger.info("Rejected solve request: %s", exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    trace_log: Optional[list[str]] = [] if request.trace else None
    trace_steps: Optional[list[dict[str, object]]] = [] if request.trace_steps else None
    trace_meta: dict[str, object] = {"truncated": False, "nodes_visited": 0}
    solution = solve_breach(
        grid,
        required_sequences,
        buffer_size,
        trace=request.trace,
        trace_log=trace_log,
        trace_steps=trace_steps,
        trace_meta=trace_meta,
        trace_max_steps=request.trace_max_steps or config.trace_max_steps,
    )

    return SolveResponse(
        path=[PositionResponse(**position.to_dict()) for position in solution.path],
        completed_sequences=list(solution.completed_sequences),
        completed_count=solution.completed_count,
        total_sequences=len(required_sequences),
        all_completed=solution.completed_count == len(required_sequences),
        nodes_visited=int(trace_meta["nodes_visited"]),
        trace=trace_log,
        trace_steps=trace_steps,
        trace_truncated=bool(trace_meta["truncated"]),
    )
