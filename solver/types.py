from typing import Callable


Grid = list[list[str]]
TokenSequence = list[str]
RequiredSequences = list[TokenSequence]
Coordinate = tuple[int, int]
Phase = str
TraceLog = list[str]
TraceStep = dict[str, object]
TraceObserver = Callable[[TraceStep], None]
ProgressState = dict[str, int]
