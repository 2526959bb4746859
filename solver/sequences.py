from rules.rules import COMPLETION_SCORE, PROGRESS_SCORE

from .types import RequiredSequences, TokenSequence


def matched_prefix_length(values: list[str], sequence: TokenSequence) -> int:
    """Count how many leading tokens of ``sequence`` appear in order within ``values``.

    The scan is greedy and left-to-right, so matches do not need to be contiguous.
    """
    matched = 0
    for value in values:
        if matched == len(sequence):
            break
        if value == sequence[matched]:
            matched += 1
    return matched


def is_subsequence(values: list[str], sequence: TokenSequence) -> bool:
    return matched_prefix_length(values, sequence) == len(sequence)


def update_completed(
    values: list[str],
    required_sequences: RequiredSequences,
    completed: tuple[int, ...],
) -> tuple[int, ...]:
    # completion is monotonic: earlier discoveries keep their place
    newly_completed = [
        index
        for index, sequence in enumerate(required_sequences)
        if index not in completed and is_subsequence(values, sequence)
    ]
    if not newly_completed:
        return completed
    return completed + tuple(newly_completed)


def score_move(
    values: list[str],
    token: str,
    required_sequences: RequiredSequences,
    completed: tuple[int, ...],
) -> int:
    """Score appending ``token`` to the path; lower scores are more promising.

    Each incomplete sequence contributes ``COMPLETION_SCORE`` if the append would
    complete it, otherwise ``PROGRESS_SCORE`` per leading token matched.
    """
    candidate_values = values + [token]
    score = 0
    for index, sequence in enumerate(required_sequences):
        if index in completed:
            continue
        matched = matched_prefix_length(candidate_values, sequence)
        if matched == len(sequence):
            score += COMPLETION_SCORE
        else:
            score += PROGRESS_SCORE * matched
    return score
