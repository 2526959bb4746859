import random
import unittest

from solver.solver import solve_breach
from solver.state import EMPTY_SOLUTION, Solution
from solver.utils import emit_step


WORKED_EXAMPLE_GRID = [
    ["7A", "BD", "E9", "7A", "7A", "E9", "BD"],
    ["7A", "55", "BD", "55", "1C", "1C", "7A"],
    ["FF", "BD", "7A", "FF", "7A", "1C", "BD"],
    ["E9", "1C", "55", "55", "1C", "1C", "55"],
    ["7A", "E9", "E9", "55", "1C", "55", "55"],
    ["E9", "55", "7A", "E9", "55", "55", "55"],
    ["BD", "1C", "1C", "FF", "1C", "FF", "BD"],
]
WORKED_EXAMPLE_SEQUENCES = [["55", "1C"], ["7A", "E9"]]
TOKENS = ["1C", "7A", "55", "FF", "BD", "E9"]


class TestSolveBreach(unittest.TestCase):
    def test_solves_worked_example(self) -> None:
        result = solve_breach(WORKED_EXAMPLE_GRID, WORKED_EXAMPLE_SEQUENCES, 8)

        self.assertEqual(
            [(p.row, p.col, p.value) for p in result.path],
            [(0, 0, "7A"), (3, 0, "E9"), (3, 2, "55"), (6, 2, "1C")],
        )
        self.assertEqual(result.completed_sequences, (1, 0))
        self.assert_solution_invariants(WORKED_EXAMPLE_GRID, WORKED_EXAMPLE_SEQUENCES, 8, result)

    def test_diagonal_tokens_cannot_be_joined(self) -> None:
        grid = [["AA", "BB"], ["BB", "AA"]]
        result = solve_breach(grid, [["AA", "AA"]], 2)

        self.assertEqual([(p.row, p.col) for p in result.path], [(0, 0), (1, 0)])
        self.assertEqual(result.completed_sequences, ())

    def test_joins_tokens_sharing_a_column(self) -> None:
        grid = [["AA", "BB"], ["AA", "BB"]]
        result = solve_breach(grid, [["AA", "AA"]], 2)

        self.assertEqual([(p.row, p.col) for p in result.path], [(0, 0), (1, 0)])
        self.assertEqual(result.completed_sequences, (0,))

    def test_no_sequences_accepts_single_top_row_pick(self) -> None:
        result = solve_breach(WORKED_EXAMPLE_GRID, [], 7)

        self.assertEqual(len(result.path), 1)
        self.assertEqual(result.path[0].row, 0)
        self.assertEqual(result.completed_sequences, ())

    def test_sequence_longer_than_buffer_never_completes(self) -> None:
        grid = [["AA", "AA", "AA"], ["AA", "AA", "AA"], ["AA", "AA", "AA"]]
        sequences = [["AA", "AA", "AA", "AA"], ["AA", "AA"]]
        result = solve_breach(grid, sequences, 3)

        self.assertNotIn(0, result.completed_sequences)
        self.assertIn(1, result.completed_sequences)
        self.assertLessEqual(len(result.path), 3)

    def test_prefers_shorter_path_when_all_sequences_complete(self) -> None:
        grid = [["BB", "AA"], ["CC", "DD"]]
        result = solve_breach(grid, [["AA"]], 4)

        self.assertEqual([(p.row, p.col) for p in result.path], [(0, 1)])
        self.assertEqual(result.completed_sequences, (0,))

    def test_completion_does_not_require_contiguous_tokens(self) -> None:
        grid = [["AA", "XX"], ["ZZ", "BB"]]
        # (0,0) AA -> (1,0) ZZ -> (1,1) BB puts ZZ between AA and BB
        result = solve_breach(grid, [["AA", "BB"]], 3)

        self.assertEqual([(p.row, p.col) for p in result.path], [(0, 0), (1, 0), (1, 1)])
        self.assertEqual(result.completed_sequences, (0,))

    def test_cornered_path_is_still_a_candidate(self) -> None:
        grid = [["AA", "BB"], ["CC", "DD"]]
        # every 2x2 path is cornered after four picks
        result = solve_breach(grid, [["AA", "CC", "DD", "BB", "EE"]], 6)

        self.assertEqual(len(result.path), 4)
        self.assertEqual(result.completed_sequences, ())
        self.assert_solution_invariants(grid, [["AA", "CC", "DD", "BB", "EE"]], 6, result)

    def test_returns_empty_solution_when_buffer_is_zero(self) -> None:
        result = solve_breach(WORKED_EXAMPLE_GRID, WORKED_EXAMPLE_SEQUENCES, 0)
        self.assertEqual(result, EMPTY_SOLUTION)
        self.assertTrue(result.is_empty)

    def test_does_not_mutate_grid(self) -> None:
        grid = [row[:] for row in WORKED_EXAMPLE_GRID]
        solve_breach(grid, WORKED_EXAMPLE_SEQUENCES, 8)
        self.assertEqual(grid, WORKED_EXAMPLE_GRID)

    def test_repeated_solves_are_identical(self) -> None:
        first = solve_breach(WORKED_EXAMPLE_GRID, [["BD", "FF"], ["E9", "E9"]], 5)
        second = solve_breach(WORKED_EXAMPLE_GRID, [["BD", "FF"], ["E9", "E9"]], 5)
        self.assertEqual(first, second)

    def test_matches_brute_force_on_small_grids(self) -> None:
        rng = random.Random(2077)
        for _ in range(40):
            size = rng.randint(2, 4)
            buffer_size = rng.randint(1, 5)
            tokens = TOKENS[: rng.randint(2, 4)]
            grid = [[rng.choice(tokens) for _ in range(size)] for _ in range(size)]
            sequences = [
                [rng.choice(tokens) for _ in range(rng.randint(1, 4))]
                for _ in range(rng.randint(0, 3))
            ]

            with self.subTest(grid=grid, sequences=sequences, buffer_size=buffer_size):
                result = solve_breach(grid, sequences, buffer_size)
                self.assert_solution_invariants(grid, sequences, buffer_size, result)
                self.assertEqual(result.completed_count, brute_force_best_count(grid, sequences, buffer_size))

    def test_trace_mode_records_search_steps(self) -> None:
        trace_log: list[str] = []
        result = solve_breach(WORKED_EXAMPLE_GRID, WORKED_EXAMPLE_SEQUENCES, 8, trace=True, trace_log=trace_log)

        self.assertEqual(result.completed_sequences, (1, 0))
        self.assertTrue(any("Start at column" in line for line in trace_log))
        self.assertTrue(any("Try" in line for line in trace_log))
        self.assertTrue(any("All 2 sequences complete" in line for line in trace_log))

    def test_trace_steps_are_capped_and_marked_truncated(self) -> None:
        trace_steps: list[dict[str, object]] = []
        trace_meta: dict[str, object] = {}
        solve_breach(
            WORKED_EXAMPLE_GRID,
            WORKED_EXAMPLE_SEQUENCES,
            8,
            trace_steps=trace_steps,
            trace_meta=trace_meta,
            trace_max_steps=3,
        )

        self.assertEqual(len(trace_steps), 3)
        self.assertTrue(trace_meta["truncated"])
        self.assertGreater(trace_meta["nodes_visited"], 0)
        self.assertEqual(trace_steps[0]["event"], "start_column")
        for step in trace_steps:
            self.assertIn("path", step)
            self.assertIn("completed", step)

    def test_observer_receives_every_step(self) -> None:
        events: list[str] = []
        trace_steps: list[dict[str, object]] = []
        solve_breach(
            [["AA", "BB", "CC"], ["BB", "CC", "AA"], ["CC", "AA", "BB"]],
            [["AA", "CC"]],
            4,
            trace_steps=trace_steps,
            trace_max_steps=20000,
            observer=lambda step: events.append(str(step["event"])),
        )

        self.assertEqual(events, [str(step["event"]) for step in trace_steps])
        self.assertIn("complete_all", events)
        self.assertIn("improve_best", events)

    def test_emit_step_caps_list_but_feeds_observer(self) -> None:
        seen: list[object] = []
        trace_steps: list[dict[str, object]] = []
        trace_meta: dict[str, object] = {"truncated": False}
        for index in range(4):
            emit_step({"event": "try_move", "depth": index}, trace_steps, trace_meta, 2, seen.append)

        self.assertEqual([step["depth"] for step in trace_steps], [0, 1])
        self.assertEqual(len(seen), 4)
        self.assertTrue(trace_meta["truncated"])

    def test_solution_wire_format(self) -> None:
        result = solve_breach([["AA", "BB"], ["AA", "BB"]], [["AA", "AA"]], 2)
        self.assertEqual(
            result.to_dict(),
            {
                "path": [{"row": 0, "col": 0, "value": "AA"}, {"row": 1, "col": 0, "value": "AA"}],
                "completedSequences": [0],
            },
        )
        self.assertEqual(Solution().to_dict(), {"path": [], "completedSequences": []})

    def assert_solution_invariants(
        self,
        grid: list[list[str]],
        sequences: list[list[str]],
        buffer_size: int,
        result: Solution,
    ) -> None:
        coordinates = [(p.row, p.col) for p in result.path]
        self.assertEqual(len(coordinates), len(set(coordinates)))
        self.assertLessEqual(len(result.path), buffer_size)
        self.assertGreaterEqual(len(result.path), 1)
        self.assertEqual(result.path[0].row, 0)

        for position in result.path:
            self.assertEqual(position.value, grid[position.row][position.col])

        for step in range(1, len(result.path)):
            previous, current = result.path[step - 1], result.path[step]
            if step % 2 == 1:
                self.assertEqual(previous.col, current.col)
            else:
                self.assertEqual(previous.row, current.row)

        values = result.values()
        self.assertEqual(len(result.completed_sequences), len(set(result.completed_sequences)))
        for index in result.completed_sequences:
            self.assertTrue(contains_in_order(values, sequences[index]))


def contains_in_order(values: list[str], sequence: list[str]) -> bool:
    remaining = iter(values)
    return all(token in remaining for token in sequence)


def brute_force_best_count(grid: list[list[str]], sequences: list[list[str]], buffer_size: int) -> int:
    size = len(grid)
    best = 0

    def walk(path: list[tuple[int, int]], phase: str) -> None:
        nonlocal best
        values = [grid[r][c] for r, c in path]
        best = max(best, sum(1 for sequence in sequences if contains_in_order(values, sequence)))
        if len(path) == buffer_size:
            return
        r, c = path[-1]
        if phase == "col":
            cells = [(row, c) for row in range(size)]
        else:
            cells = [(r, col) for col in range(size)]
        for cell in cells:
            if cell not in path:
                walk(path + [cell], "row" if phase == "col" else "col")

    for col in range(size):
        walk([(0, col)], "col")
    return best


if __name__ == "__main__":
    unittest.main()
