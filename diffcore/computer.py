"""Computation of complete, detailed diffs between two documents.

This ties the line-level and character-level stages together. Lines are
aligned, the changed regions are refined down to characters, and the
character changes are then regrouped into line changes. Regrouping lets
the character stage decide exactly which lines a change touches, so a
change that only adds a trailing line break doesn't claim the line before
it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from diffcore.chardiff import refine_diff
from diffcore.hashing import PerfectHashTable
from diffcore.heuristics import (
    optimize_sequence_diffs,
    remove_very_short_matching_lines_between_diffs)
from diffcore.linediff import align_line_sequences, validate_lines
from diffcore.ranges import (CharRange,
                             DetailedLineRangeMapping,
                             LineRange,
                             LinesDiff,
                             OffsetRange,
                             RangeMapping,
                             SequenceDiff,
                             group_adjacent_by)
from diffcore.sequences import LineSequence
from diffcore.settings import DiffOptions
from diffcore.timeout import Timeout

if TYPE_CHECKING:
    from collections.abc import Sequence


logger = logging.getLogger(__name__)


def get_line_range_mapping(
    range_mapping: RangeMapping,
    lines_a: Sequence[str],
    lines_b: Sequence[str],
) -> DetailedLineRangeMapping:
    """Return the lines touched by a character-level change.

    A change ending at the very start of a line doesn't touch that line,
    and a change starting at the very end of a line doesn't touch that line
    either, as long as the change still covers at least one line break.

    Args:
        range_mapping (diffcore.ranges.RangeMapping):
            The character-level change.

        lines_a (list of str):
            The lines of the original document.

        lines_b (list of str):
            The lines of the modified document.

    Returns:
        diffcore.ranges.DetailedLineRangeMapping:
        The line-level change, containing only ``range_mapping``.
    """
    original = range_mapping.original_range
    modified = range_mapping.modified_range
    line_start_delta = 0
    line_end_delta = 0

    if (modified.end_column == 1 and
        original.end_column == 1 and
        original.start_line_number + line_start_delta <=
        original.end_line_number and
        modified.start_line_number + line_start_delta <=
        modified.end_line_number):
        # The change ends at the start of a line.
        line_end_delta = -1

    if (modified.start_column - 1 >=
        len(lines_b[modified.start_line_number - 1]) and
        original.start_column - 1 >=
        len(lines_a[original.start_line_number - 1]) and
        original.start_line_number <=
        original.end_line_number + line_end_delta and
        modified.start_line_number <=
        modified.end_line_number + line_end_delta):
        # The change starts at the end of a line.
        line_start_delta = 1

    return DetailedLineRangeMapping(
        original=LineRange(
            original.start_line_number + line_start_delta,
            original.end_line_number + 1 + line_end_delta),
        modified=LineRange(
            modified.start_line_number + line_start_delta,
            modified.end_line_number + 1 + line_end_delta),
        inner_changes=[range_mapping])


def line_range_mapping_from_range_mappings(
    range_mappings: Sequence[RangeMapping],
    lines_a: Sequence[str],
    lines_b: Sequence[str],
) -> list[DetailedLineRangeMapping]:
    """Group character-level changes into line-level changes.

    Character changes whose lines overlap or are adjacent on either side
    are grouped into a single line change.

    Args:
        range_mappings (list of diffcore.ranges.RangeMapping):
            The character-level changes, in order.

        lines_a (list of str):
            The lines of the original document.

        lines_b (list of str):
            The lines of the modified document.

    Returns:
        list of diffcore.ranges.DetailedLineRangeMapping:
        The line-level changes.
    """
    line_mappings = [
        get_line_range_mapping(range_mapping, lines_a, lines_b)
        for range_mapping in range_mappings
    ]

    changes: list[DetailedLineRangeMapping] = []

    for group in group_adjacent_by(
        line_mappings,
        lambda a, b: (a.original.intersects_or_touches(b.original) or
                      a.modified.intersects_or_touches(b.modified))):
        first = group[0]
        last = group[-1]

        changes.append(DetailedLineRangeMapping(
            original=first.original.join(last.original),
            modified=first.modified.join(last.modified),
            inner_changes=[
                line_mapping.inner_changes[0]
                for line_mapping in group
            ]))

    return changes


def compute_diff(
    lines_a: Sequence[str],
    lines_b: Sequence[str],
    options: (DiffOptions | None) = None,
) -> LinesDiff:
    """Compute a detailed diff between two documents.

    A document with no lines is treated as a single empty line, the same
    way an editor presents an empty file.

    Args:
        lines_a (list of str):
            The lines of the original document.

        lines_b (list of str):
            The lines of the modified document.

        options (diffcore.settings.DiffOptions, optional):
            The options for the computation. If not provided, options are
            created from the settings.

    Returns:
        diffcore.ranges.LinesDiff:
        The changes between the documents.

    Raises:
        diffcore.errors.InvalidSequenceError:
            One of the documents was not a list of strings.
    """
    validate_lines(lines_a, 'lines_a')
    validate_lines(lines_b, 'lines_b')

    if options is None:
        options = DiffOptions.create()

    lines_a = lines_a or ['']
    lines_b = lines_b or ['']

    if len(lines_a) <= 1 and list(lines_a) == list(lines_b):
        return LinesDiff(changes=[], hit_timeout=False)

    if ((len(lines_a) == 1 and not lines_a[0]) or
        (len(lines_b) == 1 and not lines_b[0])):
        # One side is empty, so everything on the other side changed.
        return LinesDiff(
            changes=[
                DetailedLineRangeMapping(
                    original=LineRange(1, len(lines_a) + 1),
                    modified=LineRange(1, len(lines_b) + 1),
                    inner_changes=[
                        RangeMapping(
                            CharRange(1, 1, len(lines_a),
                                      len(lines_a[-1]) + 1),
                            CharRange(1, 1, len(lines_b),
                                      len(lines_b[-1]) + 1)),
                    ]),
            ],
            hit_timeout=False)

    timeout = Timeout(options.max_computation_time_ms)
    consider_whitespace_changes = options.consider_whitespace_changes

    hash_table = PerfectHashTable()
    seq1 = LineSequence.from_lines(lines_a, hash_table)
    seq2 = LineSequence.from_lines(lines_b, hash_table)

    line_alignment = align_line_sequences(seq1, seq2, timeout)
    hit_timeout = line_alignment.hit_timeout

    line_diffs = optimize_sequence_diffs(seq1, seq2, line_alignment.diffs)
    line_diffs = remove_very_short_matching_lines_between_diffs(seq1, seq2,
                                                                line_diffs)

    alignments: list[RangeMapping] = []
    seq1_last_start = 0
    seq2_last_start = 0

    def _refine(diff: SequenceDiff) -> None:
        nonlocal hit_timeout

        refined = refine_diff(
            lines_a, lines_b, diff, timeout,
            consider_whitespace_changes=consider_whitespace_changes,
            extend_to_subwords=options.extend_to_subwords)
        alignments.extend(refined.mappings)
        hit_timeout = hit_timeout or refined.hit_timeout

    def _scan_for_whitespace_changes(equal_lines_count: int) -> None:
        if not consider_whitespace_changes:
            return

        for i in range(equal_lines_count):
            seq1_offset = seq1_last_start + i
            seq2_offset = seq2_last_start + i

            if lines_a[seq1_offset] != lines_b[seq2_offset]:
                # The lines only differ in surrounding whitespace.
                _refine(SequenceDiff(
                    OffsetRange(seq1_offset, seq1_offset + 1),
                    OffsetRange(seq2_offset, seq2_offset + 1)))

    for diff in line_diffs:
        equal_lines_count = diff.seq1_range.start - seq1_last_start
        assert equal_lines_count == diff.seq2_range.start - seq2_last_start

        _scan_for_whitespace_changes(equal_lines_count)
        seq1_last_start = diff.seq1_range.end_exclusive
        seq2_last_start = diff.seq2_range.end_exclusive

        _refine(diff)

    _scan_for_whitespace_changes(len(lines_a) - seq1_last_start)

    changes = line_range_mapping_from_range_mappings(alignments, lines_a,
                                                     lines_b)

    if hit_timeout:
        logger.warning('Timed out after %d ms while diffing %d and %d '
                       'lines. The diff is less precise than usual.',
                       options.max_computation_time_ms, len(lines_a),
                       len(lines_b))

    return LinesDiff(changes=changes, hit_timeout=hit_timeout)
