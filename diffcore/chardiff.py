"""Character-level refinement of changed lines.

Once lines have been aligned, each changed region is diffed again one
character at a time, so that the exact text that changed can be highlighted.
The character diffs go through their own set of heuristics, which widen
them to whole words where that reads better.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from django.utils.translation import gettext as _

from diffcore.differ import DiffAlgorithmType, get_diff_algorithm
from diffcore.errors import DiffCoreError, InvalidRangeError
from diffcore.heuristics import (
    extend_diffs_to_entire_word_if_appropriate,
    optimize_sequence_diffs,
    remove_short_matches,
    remove_very_short_matching_text_between_long_diffs)
from diffcore.linediff import validate_lines
from diffcore.ranges import (CharRange,
                             DetailedLineRangeMapping,
                             LineRange,
                             Position,
                             RangeMapping)
from diffcore.sequences import CharSequence
from diffcore.settings import DiffOptions
from diffcore.timeout import Timeout

if TYPE_CHECKING:
    from collections.abc import Sequence

    from diffcore.ranges import SequenceDiff


logger = logging.getLogger(__name__)


#: The combined number of characters below which the weighted aligner is used.
CHAR_DP_THRESHOLD = 500


class RefinedDiff:
    """The character-level changes found within a line-level change."""

    ######################
    # Instance variables #
    ######################

    #: Whether the computation ran out of time.
    hit_timeout: bool

    #: The character-level changes.
    mappings: list[RangeMapping]

    def __init__(
        self,
        mappings: list[RangeMapping],
        hit_timeout: bool,
    ) -> None:
        """Initialize the result.

        Args:
            mappings (list of diffcore.ranges.RangeMapping):
                The character-level changes.

            hit_timeout (bool):
                Whether the computation ran out of time.
        """
        self.mappings = mappings
        self.hit_timeout = hit_timeout

    def __repr__(self) -> str:
        return (f'<RefinedDiff(mappings={self.mappings!r}, '
                f'hit_timeout={self.hit_timeout!r})>')


def normalize_position(
    position: Position,
    lines: Sequence[str],
) -> Position:
    """Return a position clamped to the bounds of a document.

    Args:
        position (diffcore.ranges.Position):
            The position to clamp.

        lines (list of str):
            The lines of the document.

    Returns:
        diffcore.ranges.Position:
        The closest valid position.
    """
    if position.line_number < 1:
        return Position(1, 1)

    if position.line_number > len(lines):
        return Position(len(lines), len(lines[-1]) + 1)

    line = lines[position.line_number - 1]

    if position.column > len(line) + 1:
        return Position(position.line_number, len(line) + 1)

    return position


def line_diff_to_char_ranges(
    diff: SequenceDiff,
    lines_a: Sequence[str],
    lines_b: Sequence[str],
) -> RangeMapping:
    """Return the characters spanned by a line-level change.

    Changes that end before the last line of both documents span up to the
    start of the following line, which includes the trailing newline of
    each changed line. Changes reaching the end of a document can't include
    a following line, so they instead span from the end of the line before
    them, picking up the newline that precedes them.

    Args:
        diff (diffcore.ranges.SequenceDiff):
            The change, as 0-based line indexes.

        lines_a (list of str):
            The lines of the original document.

        lines_b (list of str):
            The lines of the modified document.

    Returns:
        diffcore.ranges.RangeMapping:
        The characters spanned on each side.

    Raises:
        diffcore.errors.DiffCoreError:
            There's no range of characters that represents the change. This
            only happens for an insertion or deletion at the start of a
            document that spans the whole of the other document.
    """
    original = LineRange.from_offset_range(diff.seq1_range)
    modified = LineRange.from_offset_range(diff.seq2_range)

    if (1 <= original.end_line_number_exclusive <= len(lines_a) and
        1 <= modified.end_line_number_exclusive <= len(lines_b)):
        return RangeMapping(
            CharRange(original.start_line_number, 1,
                      original.end_line_number_exclusive, 1),
            CharRange(modified.start_line_number, 1,
                      modified.end_line_number_exclusive, 1))

    if not original.is_empty and not modified.is_empty:
        return RangeMapping(
            CharRange.from_positions(
                Position(original.start_line_number, 1),
                normalize_position(
                    Position(original.end_line_number_exclusive - 1,
                             sys.maxsize),
                    lines_a)),
            CharRange.from_positions(
                Position(modified.start_line_number, 1),
                normalize_position(
                    Position(modified.end_line_number_exclusive - 1,
                             sys.maxsize),
                    lines_b)))

    if original.start_line_number > 1 and modified.start_line_number > 1:
        return RangeMapping(
            CharRange.from_positions(
                normalize_position(
                    Position(original.start_line_number - 1, sys.maxsize),
                    lines_a),
                normalize_position(
                    Position(original.end_line_number_exclusive - 1,
                             sys.maxsize),
                    lines_a)),
            CharRange.from_positions(
                normalize_position(
                    Position(modified.start_line_number - 1, sys.maxsize),
                    lines_b),
                normalize_position(
                    Position(modified.end_line_number_exclusive - 1,
                             sys.maxsize),
                    lines_b)))

    raise DiffCoreError(
        _('Unable to find the characters spanned by the change {diff}')
        .format(diff=diff))


def refine_diff(
    lines_a: Sequence[str],
    lines_b: Sequence[str],
    diff: SequenceDiff,
    timeout: Timeout,
    consider_whitespace_changes: bool,
    extend_to_subwords: bool = False,
) -> RefinedDiff:
    """Return the character-level changes within a line-level change.

    Args:
        lines_a (list of str):
            The lines of the original document.

        lines_b (list of str):
            The lines of the modified document.

        diff (diffcore.ranges.SequenceDiff):
            The line-level change, as 0-based line indexes.

        timeout (diffcore.timeout.Timeout):
            The time budget for the computation.

        consider_whitespace_changes (bool):
            Whether leading and trailing whitespace on lines is compared.

        extend_to_subwords (bool, optional):
            Whether to also extend changes to cover mostly-changed camelCase
            subwords.

    Returns:
        RefinedDiff:
        The character-level changes.

    Raises:
        diffcore.errors.DiffCoreError:
            The change could not be mapped to a range of characters.
    """
    range_mapping = line_diff_to_char_ranges(diff, lines_a, lines_b)

    seq1 = CharSequence(lines_a, range_mapping.original_range,
                        consider_whitespace_changes)
    seq2 = CharSequence(lines_b, range_mapping.modified_range,
                        consider_whitespace_changes)

    if seq1.length + seq2.length < CHAR_DP_THRESHOLD:
        algorithm_id = DiffAlgorithmType.DYNAMIC_PROGRAMMING
    else:
        algorithm_id = DiffAlgorithmType.MYERS

    logger.debug('Refining %s using the "%s" algorithm on %d and %d '
                 'characters',
                 diff, algorithm_id, seq1.length, seq2.length)

    result = get_diff_algorithm(algorithm_id).compute(seq1, seq2,
                                                      timeout=timeout)

    diffs = optimize_sequence_diffs(seq1, seq2, result.diffs)
    diffs = extend_diffs_to_entire_word_if_appropriate(
        seq1, seq2, diffs,
        lambda seq, offset: seq.find_word_containing(offset))

    if extend_to_subwords:
        diffs = extend_diffs_to_entire_word_if_appropriate(
            seq1, seq2, diffs,
            lambda seq, offset: seq.find_subword_containing(offset),
            force=True)

    diffs = remove_short_matches(seq1, seq2, diffs)
    diffs = remove_very_short_matching_text_between_long_diffs(seq1, seq2,
                                                               diffs)

    return RefinedDiff(
        mappings=[
            RangeMapping(seq1.translate_range(char_diff.seq1_range),
                         seq2.translate_range(char_diff.seq2_range))
            for char_diff in diffs
        ],
        hit_timeout=result.hit_timeout)


def _validate_line_diff(
    diff: SequenceDiff,
    lines_a: Sequence[str],
    lines_b: Sequence[str],
) -> None:
    """Check that a line-level change fits within both documents.

    Args:
        diff (diffcore.ranges.SequenceDiff):
            The change to check.

        lines_a (list of str):
            The lines of the original document.

        lines_b (list of str):
            The lines of the modified document.

    Raises:
        diffcore.errors.InvalidRangeError:
            The change started before the beginning or ended past the end of
            one of the documents.
    """
    for offset_range, lines in ((diff.seq1_range, lines_a),
                                (diff.seq2_range, lines_b)):
        if offset_range.start < 0 or offset_range.end_exclusive > len(lines):
            raise InvalidRangeError(
                offset_range.start,
                offset_range.end_exclusive,
                _('Line range {range} is outside of a document with '
                  '{count} lines')
                .format(range=offset_range,
                        count=len(lines)))


def refine_to_character_level(
    line_diffs: Sequence[SequenceDiff],
    lines_a: Sequence[str],
    lines_b: Sequence[str],
    options: (DiffOptions | None) = None,
) -> list[DetailedLineRangeMapping]:
    """Return line-level changes annotated with their character changes.

    Every line-level change becomes one
    :py:class:`~diffcore.ranges.DetailedLineRangeMapping`, with 1-based line
    ranges. All changes share a single time budget.

    If either document has no lines, there are no characters to compare, and
    every change is returned without character-level changes.

    Args:
        line_diffs (list of diffcore.ranges.SequenceDiff):
            The line-level changes, as returned by
            :py:func:`~diffcore.linediff.compute_line_alignments`.

        lines_a (list of str):
            The lines of the original document.

        lines_b (list of str):
            The lines of the modified document.

        options (diffcore.settings.DiffOptions, optional):
            The options for the computation. If not provided, options are
            created from the settings.

    Returns:
        list of diffcore.ranges.DetailedLineRangeMapping:
        The changes, in order.

    Raises:
        diffcore.errors.InvalidSequenceError:
            One of the documents was not a list of strings.

        diffcore.errors.InvalidRangeError:
            A change did not fit within the documents.
    """
    validate_lines(lines_a, 'lines_a')
    validate_lines(lines_b, 'lines_b')

    if options is None:
        options = DiffOptions.create()

    timeout = Timeout(options.max_computation_time_ms)
    hit_timeout = False
    results: list[DetailedLineRangeMapping] = []

    for diff in line_diffs:
        _validate_line_diff(diff, lines_a, lines_b)

        mapping = DetailedLineRangeMapping(
            original=LineRange.from_offset_range(diff.seq1_range),
            modified=LineRange.from_offset_range(diff.seq2_range))

        if lines_a and lines_b:
            refined = refine_diff(
                lines_a, lines_b, diff, timeout,
                consider_whitespace_changes=(
                    options.consider_whitespace_changes),
                extend_to_subwords=options.extend_to_subwords)
            mapping.inner_changes = refined.mappings
            hit_timeout = hit_timeout or refined.hit_timeout

        results.append(mapping)

    if hit_timeout:
        logger.warning('Timed out after %d ms while refining %d changes '
                       'between %d and %d lines. Some character changes '
                       'are less precise.',
                       options.max_computation_time_ms, len(line_diffs),
                       len(lines_a), len(lines_b))

    return results
