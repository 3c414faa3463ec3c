"""Diff algorithm implementation using weighted dynamic programming."""

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


# Directions recorded for each cell of the table.
_HORIZONTAL = 1
_VERTICAL = 2
_DIAGONAL = 3


class DynamicProgrammingDiffAlgorithm(DiffAlgorithm):
    """Diff algorithm using a weighted longest common subsequence.

    This fills an N x M table of alignment scores, so it's only suitable for
    small inputs. In exchange, it can weigh matches. Given a scoring function,
    it prefers aligning elements that score well (such as long identical
    lines) over elements that merely compare equal (such as blank lines),
    which often gives a more natural diff than a minimal edit script.

    Runs of consecutive matches are rewarded, so that an unbroken block is
    preferred over the same number of matches scattered around.
    """

    algorithm_id = DiffAlgorithmType.DYNAMIC_PROGRAMMING

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
                The time budget for the computation. This is checked before
                each row of the table is filled.

            equality_score (callable, optional):
                A function returning the score for aligning the elements at
                a pair of offsets. If not provided, every match scores 1.

        Returns:
            diffcore.differ.DiffAlgorithmResult:
            The result of the computation.
        """
        len1 = seq1.length
        len2 = seq2.length

        if len1 == 0 or len2 == 0:
            return DiffAlgorithmResult.trivial(seq1, seq2)

        element1 = seq1.element_at
        element2 = seq2.element_at

        lcs_lengths = [[0.0] * len2 for _i in range(len1)]
        directions = [[0] * len2 for _i in range(len1)]
        lengths = [[0] * len2 for _i in range(len1)]

        for s1 in range(len1):
            if timeout is not None and not timeout.is_valid():
                return DiffAlgorithmResult.trivial_timed_out(seq1, seq2)

            lcs_row = lcs_lengths[s1]
            directions_row = directions[s1]
            lengths_row = lengths[s1]

            if s1 > 0:
                prev_lcs_row = lcs_lengths[s1 - 1]
                prev_directions_row = directions[s1 - 1]
                prev_lengths_row = lengths[s1 - 1]

            item1 = element1(s1)

            for s2 in range(len2):
                if s1 == 0:
                    horizontal_len = 0
                else:
                    horizontal_len = prev_lcs_row[s2]

                if s2 == 0:
                    vertical_len = 0
                else:
                    vertical_len = lcs_row[s2 - 1]

                if item1 == element2(s2):
                    if s1 == 0 or s2 == 0:
                        extended_seq_score = 0
                    else:
                        extended_seq_score = prev_lcs_row[s2 - 1]

                        if prev_directions_row[s2 - 1] == _DIAGONAL:
                            # Prefer consecutive diagonals.
                            extended_seq_score += prev_lengths_row[s2 - 1]

                    if equality_score is None:
                        extended_seq_score += 1
                    else:
                        extended_seq_score += equality_score(s1, s2)
                else:
                    extended_seq_score = -1

                new_value = max(horizontal_len, vertical_len,
                                extended_seq_score)

                if new_value == extended_seq_score:
                    # Prefer diagonals.
                    if s1 > 0 and s2 > 0:
                        lengths_row[s2] = prev_lengths_row[s2 - 1] + 1
                    else:
                        lengths_row[s2] = 1

                    directions_row[s2] = _DIAGONAL
                elif new_value == horizontal_len:
                    lengths_row[s2] = 0
                    directions_row[s2] = _HORIZONTAL
                else:
                    lengths_row[s2] = 0
                    directions_row[s2] = _VERTICAL

                lcs_row[s2] = new_value

        # Backtrack from the far corner, emitting a diff for every gap
        # between aligned pairs.
        result: list[SequenceDiff] = []
        last_aligning_pos1 = len1
        last_aligning_pos2 = len2

        def _report_decreasing_aligning_positions(s1: int, s2: int) -> None:
            nonlocal last_aligning_pos1, last_aligning_pos2

            if (s1 + 1 != last_aligning_pos1 or
                s2 + 1 != last_aligning_pos2):
                result.append(SequenceDiff(
                    OffsetRange(s1 + 1, last_aligning_pos1),
                    OffsetRange(s2 + 1, last_aligning_pos2)))

            last_aligning_pos1 = s1
            last_aligning_pos2 = s2

        s1 = len1 - 1
        s2 = len2 - 1

        while s1 >= 0 and s2 >= 0:
            direction = directions[s1][s2]

            if direction == _DIAGONAL:
                _report_decreasing_aligning_positions(s1, s2)
                s1 -= 1
                s2 -= 1
            elif direction == _HORIZONTAL:
                s1 -= 1
            else:
                s2 -= 1

        _report_decreasing_aligning_positions(-1, -1)
        result.reverse()

        return DiffAlgorithmResult(result, hit_timeout=False)
