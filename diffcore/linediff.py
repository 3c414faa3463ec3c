"""Line-level alignment of two documents."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from django.utils.translation import gettext as _

from diffcore.differ import DiffAlgorithmType, get_diff_algorithm
from diffcore.errors import InvalidSequenceError
from diffcore.hashing import PerfectHashTable
from diffcore.heuristics import (
    optimize_sequence_diffs,
    remove_very_short_matching_lines_between_diffs)
from diffcore.sequences import LineSequence
from diffcore.timeout import Timeout

if TYPE_CHECKING:
    from collections.abc import Sequence

    from diffcore.differ import DiffAlgorithmResult
    from diffcore.ranges import SequenceDiff


logger = logging.getLogger(__name__)


#: The combined number of lines below which the weighted aligner is used.
LINE_DP_THRESHOLD = 1700


def validate_lines(
    lines: Sequence[str],
    name: str,
) -> None:
    """Check that a document is a sequence of strings.

    Args:
        lines (list of str):
            The lines to check.

        name (str):
            The name of the argument, for the error message.

    Raises:
        diffcore.errors.InvalidSequenceError:
            The lines were ``None``, or contained something other than a
            string.
    """
    if lines is None:
        raise InvalidSequenceError(
            _('{name} must be a list of lines, not None').format(name=name))

    for i, line in enumerate(lines):
        if not isinstance(line, str):
            raise InvalidSequenceError(
                _('Line {index} of {name} must be a string, not {type}')
                .format(index=i,
                        name=name,
                        type=type(line).__name__))


def line_equality_score(
    seq1: LineSequence,
    seq2: LineSequence,
    offset1: int,
    offset2: int,
) -> float:
    """Return the score for aligning two lines that hash the same.

    Identical lines are worth more the longer they are, with blank lines
    worth very little. Lines that only match once surrounding whitespace is
    ignored score just under an exact match.

    Args:
        seq1 (diffcore.sequences.LineSequence):
            The first sequence.

        seq2 (diffcore.sequences.LineSequence):
            The second sequence.

        offset1 (int):
            The index of the line in the first sequence.

        offset2 (int):
            The index of the line in the second sequence.

    Returns:
        float:
        The score.
    """
    line = seq2.lines[offset2]

    if seq1.lines[offset1] != line:
        return 0.99
    elif not line:
        return 0.1
    else:
        return 1 + math.log(1 + len(line))


def align_line_sequences(
    seq1: LineSequence,
    seq2: LineSequence,
    timeout: (Timeout | None) = None,
) -> DiffAlgorithmResult:
    """Run the appropriate diff algorithm over two line sequences.

    Small inputs use the weighted aligner with :py:func:`line_equality_score`.
    Larger ones use Myers's algorithm.

    Args:
        seq1 (diffcore.sequences.LineSequence):
            The first sequence.

        seq2 (diffcore.sequences.LineSequence):
            The second sequence.

        timeout (diffcore.timeout.Timeout, optional):
            The time budget for the computation.

    Returns:
        diffcore.differ.DiffAlgorithmResult:
        The unoptimized result.
    """
    if seq1.length + seq2.length < LINE_DP_THRESHOLD:
        algorithm_id = DiffAlgorithmType.DYNAMIC_PROGRAMMING
    else:
        algorithm_id = DiffAlgorithmType.MYERS

    logger.debug('Aligning %d and %d lines using the "%s" algorithm',
                 seq1.length, seq2.length, algorithm_id)

    return get_diff_algorithm(algorithm_id).compute(
        seq1, seq2,
        timeout=timeout,
        equality_score=lambda offset1, offset2: line_equality_score(
            seq1, seq2, offset1, offset2))


def compute_line_alignments(
    lines_a: Sequence[str],
    lines_b: Sequence[str],
    timeout_ms: int = 0,
    *,
    timeout: (Timeout | None) = None,
) -> tuple[list[SequenceDiff], bool]:
    """Return the changed line ranges between two documents.

    Lines are compared with surrounding whitespace ignored. The result is
    optimized for readability: insertions and deletions are moved to natural
    block boundaries, and changes separated only by nearly blank lines are
    joined.

    Args:
        lines_a (list of str):
            The lines of the original document.

        lines_b (list of str):
            The lines of the modified document.

        timeout_ms (int, optional):
            The time budget in milliseconds. 0 means unbounded. This is
            ignored if ``timeout`` is provided.

        timeout (diffcore.timeout.Timeout, optional):
            An existing time budget to share with other computations.

    Returns:
        tuple:
        A 2-tuple containing:

        Tuple:
            0 (list of diffcore.ranges.SequenceDiff):
                The changed line ranges, as 0-based line indexes.

            1 (bool):
                Whether the computation ran out of time. If so, the result
                is a single change spanning both documents.

    Raises:
        diffcore.errors.InvalidSequenceError:
            One of the documents was not a list of strings.
    """
    validate_lines(lines_a, 'lines_a')
    validate_lines(lines_b, 'lines_b')

    if timeout is None:
        timeout = Timeout(timeout_ms)

    hash_table = PerfectHashTable()
    seq1 = LineSequence.from_lines(lines_a, hash_table)
    seq2 = LineSequence.from_lines(lines_b, hash_table)

    result = align_line_sequences(seq1, seq2, timeout)
    diffs = optimize_sequence_diffs(seq1, seq2, result.diffs)
    diffs = remove_very_short_matching_lines_between_diffs(seq1, seq2, diffs)

    return diffs, result.hit_timeout
