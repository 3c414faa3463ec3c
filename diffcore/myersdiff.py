"""Diff algorithm implementation using the Myers O(ND) algorithm."""

from __future__ import annotations

from typing import TYPE_CHECKING

from diffcore.differ import (DiffAlgorithm,
                             DiffAlgorithmResult,
                             DiffAlgorithmType)
from diffcore.ranges import OffsetRange, SequenceDiff

if TYPE_CHECKING:
    from diffcore.differ import EqualityScoreFunc
    from diffcore.sequences import BaseSequence
    from diffcore.timeout import Timeout


class _SnakePath:
    """A run of matching elements found while searching the edit graph.

    Paths are stored in a list and refer to their predecessors by index, so
    the full path can be walked backward once the search finishes.
    """

    ######################
    # Instance variables #
    ######################

    #: The index of the previous path, or -1 if this is the first.
    prev: int

    #: The offset in the first sequence where the run starts.
    x: int

    #: The offset in the second sequence where the run starts.
    y: int

    #: The number of matching elements in the run.
    length: int

    def __init__(
        self,
        prev: int,
        x: int,
        y: int,
        length: int,
    ) -> None:
        """Initialize the path.

        Args:
            prev (int):
                The index of the previous path, or -1.

            x (int):
                The offset in the first sequence where the run starts.

            y (int):
                The offset in the second sequence where the run starts.

            length (int):
                The number of matching elements in the run.
        """
        self.prev = prev
        self.x = x
        self.y = y
        self.length = length


class MyersDiffAlgorithm(DiffAlgorithm):
    """Diff algorithm using Eugene Myers's O(ND) algorithm.

    This treats the diff problem as a search for the shortest path through
    an edit graph, where moving right deletes an element of the first
    sequence, moving down inserts an element of the second, and moving
    diagonally keeps a matching element for free.

    For each edit distance ``d``, it tracks the furthest point reachable on
    every diagonal ``k = x - y`` using exactly ``d`` insertions or deletions.
    Each point is reached from the neighboring diagonal that got further on
    the previous round, then extended along any run of matching elements (a
    "snake"). The first diagonal to reach the far corner gives a minimal
    edit script.

    This runs in O((N + M) * D) time, which is fast for similar sequences
    and slow for very different ones. The timeout is checked once per edit
    distance.
    """

    algorithm_id = DiffAlgorithmType.MYERS

    def compute(
        self,
        seq1: BaseSequence,
        seq2: BaseSequence,
        timeout: (Timeout | None) = None,
        equality_score: (EqualityScoreFunc | None) = None,
    ) -> DiffAlgorithmResult:
        """Compute the differences between two sequences.

        Args:
            seq1 (diffcore.sequences.BaseSequence):
                The first (original) sequence.

            seq2 (diffcore.sequences.BaseSequence):
                The second (modified) sequence.

            timeout (diffcore.timeout.Timeout, optional):
                The time budget for the computation.

            equality_score (callable, optional):
                Unused. Myers only considers whether elements are equal.

        Returns:
            diffcore.differ.DiffAlgorithmResult:
            The result of the computation.
        """
        if seq1.length == 0 or seq2.length == 0:
            return DiffAlgorithmResult.trivial(seq1, seq2)

        len_x = seq1.length
        len_y = seq2.length
        element_x = seq1.element_at
        element_y = seq2.element_at

        def _get_x_after_snake(x: int, y: int) -> int:
            while (x < len_x and
                   0 <= y < len_y and
                   element_x(x) == element_y(y)):
                x += 1
                y += 1

            return x

        # Diagonals range from -(len_y + 1) to len_x + 1. They're stored
        # shifted by this offset so every index is non-negative.
        offset = len_y + 1
        num_diagonals = len_x + len_y + 3

        # The furthest x reached on each diagonal.
        v = [0] * num_diagonals

        # The index of the latest snake on each diagonal, or -1.
        paths = [-1] * num_diagonals
        snakes: list[_SnakePath] = []

        v[offset] = _get_x_after_snake(0, 0)

        if v[offset] != 0:
            snakes.append(_SnakePath(-1, 0, 0, v[offset]))
            paths[offset] = 0

        d = 0
        k = 0
        found = False

        while not found:
            d += 1

            if timeout is not None and not timeout.is_valid():
                return DiffAlgorithmResult.trivial_timed_out(seq1, seq2)

            lower_bound = -min(d, len_y + (d % 2))
            upper_bound = min(d, len_x + (d % 2))

            for k in range(lower_bound, upper_bound + 1, 2):
                i = k + offset

                # Moving down from the diagonal above adds an element of
                # the second sequence. Moving right from the diagonal below
                # removes an element of the first.
                if k == upper_bound:
                    max_x_top = -1
                else:
                    max_x_top = v[i + 1]

                if k == lower_bound:
                    max_x_left = -1
                else:
                    max_x_left = v[i - 1] + 1

                x = min(max(max_x_top, max_x_left), len_x)
                y = x - k

                if x > len_x or y > len_y:
                    # This diagonal can't contribute to the result.
                    continue

                new_max_x = _get_x_after_snake(x, y)
                v[i] = new_max_x

                if x == max_x_top:
                    last_path = paths[i + 1]
                else:
                    last_path = paths[i - 1]

                if new_max_x != x:
                    snakes.append(_SnakePath(last_path, x, y, new_max_x - x))
                    paths[i] = len(snakes) - 1
                else:
                    paths[i] = last_path

                if new_max_x == len_x and new_max_x - k == len_y:
                    found = True
                    break

        # Walk the snakes backward, emitting a diff for every gap between
        # them.
        result: list[SequenceDiff] = []
        path = paths[k + offset]
        last_aligning_pos1 = len_x
        last_aligning_pos2 = len_y

        while True:
            if path >= 0:
                snake = snakes[path]
                end_x = snake.x + snake.length
                end_y = snake.y + snake.length
            else:
                end_x = 0
                end_y = 0

            if end_x != last_aligning_pos1 or end_y != last_aligning_pos2:
                result.append(SequenceDiff(
                    OffsetRange(end_x, last_aligning_pos1),
                    OffsetRange(end_y, last_aligning_pos2)))

            if path < 0:
                break

            last_aligning_pos1 = snake.x
            last_aligning_pos2 = snake.y
            path = snake.prev

        result.reverse()

        return DiffAlgorithmResult(result, hit_timeout=False)
