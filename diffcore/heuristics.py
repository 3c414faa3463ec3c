"""Heuristics for turning minimal diffs into readable ones.

A minimal edit script is rarely the diff a person would write. These passes
shift, join and widen the diffs produced by the diff algorithms so that they
line up with natural boundaries (blocks of code, words) and don't leave tiny
islands of unchanged content between large changes.

Each pass takes and returns a sorted list of
:py:class:`~diffcore.ranges.SequenceDiff`.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from diffcore.ranges import OffsetPair, OffsetRange, SequenceDiff

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from diffcore.sequences import BaseSequence, CharSequence, LineSequence


logger = logging.getLogger(__name__)


#: The furthest a diff will be shifted looking for a better boundary.
MAX_SHIFT_LIMIT = 100

#: The most times a merging pass will be repeated after the first pass.
#:
#: A merge can run for at most this many passes plus one.
MAX_MERGE_PASSES = 10


_WHITESPACE_RE = re.compile(r'\s')
_LINE_BREAK_RE = re.compile(r'\r\n|\r|\n')


def optimize_sequence_diffs(
    seq1: BaseSequence,
    seq2: BaseSequence,
    sequence_diffs: list[SequenceDiff],
) -> list[SequenceDiff]:
    """Shift and join diffs into more natural positions.

    This joins insertions and deletions that can be slid into neighboring
    diffs, and then slides the remaining ones to the best scoring
    boundaries. Joining is run twice, since one join can make another
    possible.

    Args:
        seq1 (diffcore.sequences.BaseSequence):
            The first sequence.

        seq2 (diffcore.sequences.BaseSequence):
            The second sequence.

        sequence_diffs (list of diffcore.ranges.SequenceDiff):
            The diffs to optimize.

    Returns:
        list of diffcore.ranges.SequenceDiff:
        The optimized diffs.
    """
    result = join_sequence_diffs_by_shifting(seq1, seq2, sequence_diffs)
    result = join_sequence_diffs_by_shifting(seq1, seq2, result)
    result = shift_sequence_diffs(seq1, seq2, result)

    return result


def join_sequence_diffs_by_shifting(
    seq1: BaseSequence,
    seq2: BaseSequence,
    sequence_diffs: list[SequenceDiff],
) -> list[SequenceDiff]:
    """Join insertions and deletions that can slide into a neighbor.

    An insertion or deletion can be moved along a run of repeated content
    without changing what it means. If it can be moved all the way to the
    diff before it, or after it, the two are joined. For example:

    .. code-block:: text

       import { Baz, Bar } from "foo";
       import { Baz, Bar, Foo } from "foo";

    could produce separate insertions of ``,`` after ``Bar`` and ``Foo``
    after the space, which this turns into a single insertion of ``, Foo``.

    Diffs that can't be joined are left shifted as far right as they go.

    Args:
        seq1 (diffcore.sequences.BaseSequence):
            The first sequence.

        seq2 (diffcore.sequences.BaseSequence):
            The second sequence.

        sequence_diffs (list of diffcore.ranges.SequenceDiff):
            The diffs to join.

    Returns:
        list of diffcore.ranges.SequenceDiff:
        The joined diffs.
    """
    if not sequence_diffs:
        return sequence_diffs

    # First, move everything as far left as possible, joining with the
    # previous diff where we can.
    result: list[SequenceDiff] = [sequence_diffs[0]]

    for cur in sequence_diffs[1:]:
        prev_result = result[-1]

        if cur.seq1_range.is_empty or cur.seq2_range.is_empty:
            length = (cur.seq1_range.start -
                      prev_result.seq1_range.end_exclusive)
            d = 1

            while d <= length:
                if (seq1.element_at(cur.seq1_range.start - d) !=
                    seq1.element_at(cur.seq1_range.end_exclusive - d) or
                    seq2.element_at(cur.seq2_range.start - d) !=
                    seq2.element_at(cur.seq2_range.end_exclusive - d)):
                    break

                d += 1

            d -= 1

            if d == length:
                result[-1] = SequenceDiff(
                    OffsetRange(prev_result.seq1_range.start,
                                cur.seq1_range.end_exclusive - length),
                    OffsetRange(prev_result.seq2_range.start,
                                cur.seq2_range.end_exclusive - length))
                continue

            cur = cur.delta(-d)

        result.append(cur)

    # Then move everything as far right as possible, joining with the next
    # diff where we can.
    result2: list[SequenceDiff] = []

    for i in range(len(result) - 1):
        next_result = result[i + 1]
        cur = result[i]

        if cur.seq1_range.is_empty or cur.seq2_range.is_empty:
            length = (next_result.seq1_range.start -
                      cur.seq1_range.end_exclusive)
            d = 0

            while d < length:
                if (not seq1.is_strongly_equal(
                        cur.seq1_range.start + d,
                        cur.seq1_range.end_exclusive + d) or
                    not seq2.is_strongly_equal(
                        cur.seq2_range.start + d,
                        cur.seq2_range.end_exclusive + d)):
                    break

                d += 1

            if d == length:
                result[i + 1] = SequenceDiff(
                    OffsetRange(cur.seq1_range.start + length,
                                next_result.seq1_range.end_exclusive),
                    OffsetRange(cur.seq2_range.start + length,
                                next_result.seq2_range.end_exclusive))
                continue

            cur = cur.delta(d)

        result2.append(cur)

    result2.append(result[-1])

    return result2


def shift_sequence_diffs(
    seq1: BaseSequence,
    seq2: BaseSequence,
    sequence_diffs: list[SequenceDiff],
) -> list[SequenceDiff]:
    """Shift insertions and deletions to their best scoring boundaries.

    This aligns diffs at natural boundaries, such as moving an inserted
    block of code so that it starts and ends between blocks instead of in
    the middle of them:

    .. code-block:: text

       collectBrackets(level + 1, levelPerBracketType);
       collectBrackets(level + 1, levelPerBracket[ + 1, levelPerBracket]Type);

    becomes:

    .. code-block:: text

       collectBrackets(level + 1, [levelPerBracket + 1, ]levelPerBracketType);

    This does nothing unless both sequences provide boundary scores.

    Args:
        seq1 (diffcore.sequences.BaseSequence):
            The first sequence.

        seq2 (diffcore.sequences.BaseSequence):
            The second sequence.

        sequence_diffs (list of diffcore.ranges.SequenceDiff):
            The diffs to shift.

    Returns:
        list of diffcore.ranges.SequenceDiff:
        The shifted diffs.
    """
    if not seq1.has_boundary_scores or not seq2.has_boundary_scores:
        return sequence_diffs

    result = list(sequence_diffs)
    num_diffs = len(result)

    for i, diff in enumerate(result):
        prev_diff = result[i - 1] if i > 0 else None
        next_diff = result[i + 1] if i + 1 < num_diffs else None

        # Don't touch the previous or next diffs.
        seq1_valid_range = OffsetRange(
            prev_diff.seq1_range.end_exclusive + 1 if prev_diff else 0,
            next_diff.seq1_range.start - 1 if next_diff else seq1.length)
        seq2_valid_range = OffsetRange(
            prev_diff.seq2_range.end_exclusive + 1 if prev_diff else 0,
            next_diff.seq2_range.start - 1 if next_diff else seq2.length)

        if diff.seq1_range.is_empty:
            result[i] = _shift_diff_to_better_position(
                diff, seq1, seq2, seq1_valid_range, seq2_valid_range)
        elif diff.seq2_range.is_empty:
            result[i] = _shift_diff_to_better_position(
                diff.swap(), seq2, seq1, seq2_valid_range,
                seq1_valid_range).swap()

    return result


def _shift_diff_to_better_position(
    diff: SequenceDiff,
    seq1: BaseSequence,
    seq2: BaseSequence,
    seq1_valid_range: OffsetRange,
    seq2_valid_range: OffsetRange,
) -> SequenceDiff:
    """Return an insertion shifted to its best scoring position.

    Args:
        diff (diffcore.ranges.SequenceDiff):
            The diff to shift. Its first side must be empty.

        seq1 (diffcore.sequences.BaseSequence):
            The sequence on the empty side.

        seq2 (diffcore.sequences.BaseSequence):
            The sequence on the inserted side.

        seq1_valid_range (diffcore.ranges.OffsetRange):
            The range the diff may move within on the empty side.

        seq2_valid_range (diffcore.ranges.OffsetRange):
            The range the diff may move within on the inserted side.

    Returns:
        diffcore.ranges.SequenceDiff:
        The shifted diff.
    """
    seq1_range = diff.seq1_range
    seq2_range = diff.seq2_range

    delta_before = 1

    while (seq1_range.start - delta_before >= seq1_valid_range.start and
           seq2_range.start - delta_before >= seq2_valid_range.start and
           seq2.is_strongly_equal(seq2_range.start - delta_before,
                                  seq2_range.end_exclusive - delta_before) and
           delta_before < MAX_SHIFT_LIMIT):
        delta_before += 1

    delta_before -= 1

    delta_after = 0

    while (seq1_range.start + delta_after < seq1_valid_range.end_exclusive and
           seq2_range.end_exclusive + delta_after <
           seq2_valid_range.end_exclusive and
           seq2.is_strongly_equal(seq2_range.start + delta_after,
                                  seq2_range.end_exclusive + delta_after) and
           delta_after < MAX_SHIFT_LIMIT):
        delta_after += 1

    if delta_before == 0 and delta_after == 0:
        return diff

    # Find the best scoring position. Ties go to the leftmost one.
    best_delta = 0
    best_score = -1

    for delta in range(-delta_before, delta_after + 1):
        score = (seq1.boundary_score(seq1_range.start + delta) +
                 seq2.boundary_score(seq2_range.start + delta) +
                 seq2.boundary_score(seq2_range.end_exclusive + delta))

        if score > best_score:
            best_score = score
            best_delta = delta

    return diff.delta(best_delta)


def remove_short_matches(
    seq1: BaseSequence,
    seq2: BaseSequence,
    sequence_diffs: list[SequenceDiff],
) -> list[SequenceDiff]:
    """Join diffs separated by at most 2 unchanged elements.

    This is used at the character level, where tiny matches between changes
    (such as a single shared letter) are noise.

    Args:
        seq1 (diffcore.sequences.BaseSequence):
            The first sequence.

        seq2 (diffcore.sequences.BaseSequence):
            The second sequence.

        sequence_diffs (list of diffcore.ranges.SequenceDiff):
            The diffs to join.

    Returns:
        list of diffcore.ranges.SequenceDiff:
        The joined diffs.
    """
    result: list[SequenceDiff] = []

    for diff in sequence_diffs:
        if result:
            last = result[-1]

            if (diff.seq1_range.start - last.seq1_range.end_exclusive <= 2 or
                diff.seq2_range.start - last.seq2_range.end_exclusive <= 2):
                result[-1] = last.join(diff)
                continue

        result.append(diff)

    return result


def remove_very_short_matching_lines_between_diffs(
    seq1: LineSequence,
    seq2: LineSequence,
    sequence_diffs: list[SequenceDiff],
) -> list[SequenceDiff]:
    """Join line diffs separated by nearly empty unchanged lines.

    Two diffs are joined if the lines between them contain at most 4
    non-whitespace characters and either diff covers more than 5 lines in
    total. The first pass is repeated until nothing changes, up to 10 more
    times.

    Args:
        seq1 (diffcore.sequences.LineSequence):
            The first sequence.

        seq2 (diffcore.sequences.LineSequence):
            The second sequence.

        sequence_diffs (list of diffcore.ranges.SequenceDiff):
            The diffs to join.

    Returns:
        list of diffcore.ranges.SequenceDiff:
        The joined diffs.
    """
    def _should_join_diffs(
        before: SequenceDiff,
        after: SequenceDiff,
    ) -> bool:
        unchanged_range = OffsetRange(before.seq1_range.end_exclusive,
                                      after.seq1_range.start)
        unchanged_text = _WHITESPACE_RE.sub('', seq1.get_text(unchanged_range))

        return (len(unchanged_text) <= 4 and
                (before.seq1_range.length + before.seq2_range.length > 5 or
                 after.seq1_range.length + after.seq2_range.length > 5))

    return _join_diffs_repeatedly(sequence_diffs, _should_join_diffs)


def remove_very_short_matching_text_between_long_diffs(
    seq1: CharSequence,
    seq2: CharSequence,
    sequence_diffs: list[SequenceDiff],
) -> list[SequenceDiff]:
    """Join long character diffs separated by short unchanged text.

    Two diffs are joined if the text between them is short, fits on one
    line, and the diffs around it are long enough that highlighting the
    text as unchanged would be more distracting than helpful.

    Afterward, diffs that are long enough have short leftover text at the
    start or end of their lines pulled into them.

    Args:
        seq1 (diffcore.sequences.CharSequence):
            The first sequence.

        seq2 (diffcore.sequences.CharSequence):
            The second sequence.

        sequence_diffs (list of diffcore.ranges.SequenceDiff):
            The diffs to join.

    Returns:
        list of diffcore.ranges.SequenceDiff:
        The joined diffs.
    """
    max_side_score = 2 * 40 + 50
    threshold = ((max_side_score ** 1.5) ** 1.5) * 1.3

    def _cap(value: int) -> int:
        return min(value, max_side_score)

    def _diff_score(diff: SequenceDiff) -> float:
        return (
            _cap(seq1.count_lines_in(diff.seq1_range) * 40 +
                 diff.seq1_range.length) ** 1.5 +
            _cap(seq2.count_lines_in(diff.seq2_range) * 40 +
                 diff.seq2_range.length) ** 1.5
        ) ** 1.5

    def _should_join_diffs(
        before: SequenceDiff,
        after: SequenceDiff,
    ) -> bool:
        unchanged_range = OffsetRange(before.seq1_range.end_exclusive,
                                      after.seq1_range.start)

        if (seq1.count_lines_in(unchanged_range) > 5 or
            unchanged_range.length > 500):
            return False

        unchanged_text = seq1.get_text(unchanged_range).strip()

        if (len(unchanged_text) > 20 or
            len(_LINE_BREAK_RE.split(unchanged_text)) > 1):
            return False

        return _diff_score(before) + _diff_score(after) > threshold

    diffs = _join_diffs_repeatedly(sequence_diffs, _should_join_diffs)

    # Pull short prefixes and suffixes into long diffs.
    def _should_mark_as_changed(
        diff: SequenceDiff,
        text: str,
    ) -> bool:
        return (len(text) > 0 and
                len(text.strip()) <= 3 and
                diff.seq1_range.length + diff.seq2_range.length > 100)

    new_diffs: list[SequenceDiff] = []
    num_diffs = len(diffs)

    for i, cur in enumerate(diffs):
        prev_diff = diffs[i - 1] if i > 0 else None
        next_diff = diffs[i + 1] if i + 1 < num_diffs else None
        new_diff = cur

        full_range1 = seq1.extend_to_full_lines(cur.seq1_range)
        prefix = seq1.get_text(OffsetRange(full_range1.start,
                                           cur.seq1_range.start))

        if _should_mark_as_changed(cur, prefix):
            new_diff = new_diff.delta_start(-len(prefix))

        suffix = seq1.get_text(OffsetRange(cur.seq1_range.end_exclusive,
                                           full_range1.end_exclusive))

        if _should_mark_as_changed(cur, suffix):
            new_diff = new_diff.delta_end(len(suffix))

        available_space = SequenceDiff.from_offset_pairs(
            prev_diff.get_end_exclusives() if prev_diff else OffsetPair.ZERO,
            next_diff.get_starts() if next_diff else OffsetPair.MAX)
        result = new_diff.intersect(available_space)
        assert result is not None

        if (new_diffs and
            result.get_starts() == new_diffs[-1].get_end_exclusives()):
            new_diffs[-1] = new_diffs[-1].join(result)
        else:
            new_diffs.append(result)

    return new_diffs


def _join_diffs_repeatedly(
    sequence_diffs: list[SequenceDiff],
    should_join_diffs: Callable[[SequenceDiff, SequenceDiff], bool],
) -> list[SequenceDiff]:
    """Repeatedly join adjacent diffs that meet a condition.

    Args:
        sequence_diffs (list of diffcore.ranges.SequenceDiff):
            The diffs to join.

        should_join_diffs (callable):
            A function taking the last joined diff and the next diff, and
            returning whether to join them.

    Returns:
        list of diffcore.ranges.SequenceDiff:
        The joined diffs.
    """
    diffs = sequence_diffs

    if not diffs:
        return diffs

    counter = 0

    while True:
        should_repeat = False
        result: list[SequenceDiff] = [diffs[0]]

        for cur in diffs[1:]:
            if should_join_diffs(result[-1], cur):
                should_repeat = True
                result[-1] = result[-1].join(cur)
            else:
                result.append(cur)

        diffs = result
        counter += 1

        if counter > MAX_MERGE_PASSES or not should_repeat:
            break

    logger.debug('Joined %d diffs into %d in %d passes',
                 len(sequence_diffs), len(diffs), counter)

    return diffs


def extend_diffs_to_entire_word_if_appropriate(
    seq1: CharSequence,
    seq2: CharSequence,
    sequence_diffs: list[SequenceDiff],
    find_parent: Callable[[CharSequence, int], OffsetRange | None],
    force: bool = False,
) -> list[SequenceDiff]:
    """Widen character diffs to cover words that are mostly changed.

    For the words at the edges of every unchanged region, this checks how
    much of the word is unchanged. If less than two thirds of it is, the
    whole word is marked as changed, so highlights don't pick out scattered
    letters that happened to match.

    Args:
        seq1 (diffcore.sequences.CharSequence):
            The first sequence.

        seq2 (diffcore.sequences.CharSequence):
            The second sequence.

        sequence_diffs (list of diffcore.ranges.SequenceDiff):
            The diffs to widen.

        find_parent (callable):
            A function returning the range of the word containing an offset
            in a sequence, or ``None``.

        force (bool, optional):
            Whether to widen to any word that isn't entirely unchanged.
            This is used for subwords.

    Returns:
        list of diffcore.ranges.SequenceDiff:
        The widened diffs.
    """
    equal_mappings = SequenceDiff.invert(sequence_diffs, seq1.length)
    additional: list[SequenceDiff] = []
    last_point = OffsetPair.ZERO

    def _scan_word(
        pair: OffsetPair,
        equal_mapping: SequenceDiff,
    ) -> None:
        nonlocal last_point

        if (pair.offset1 < last_point.offset1 or
            pair.offset2 < last_point.offset2):
            return

        w1 = find_parent(seq1, pair.offset1)
        w2 = find_parent(seq2, pair.offset2)

        if w1 is None or w2 is None:
            return

        w = SequenceDiff(w1, w2)
        equal_part = w.intersect(equal_mapping)
        assert equal_part is not None

        equal_chars1 = equal_part.seq1_range.length
        equal_chars2 = equal_part.seq2_range.length

        # The word can't touch any earlier unchanged regions, since those
        # were already processed, but it may run into the next ones.
        while equal_mappings:
            next_mapping = equal_mappings[0]

            if not (next_mapping.seq1_range.intersects(w.seq1_range) or
                    next_mapping.seq2_range.intersects(w.seq2_range)):
                break

            v1 = find_parent(seq1, next_mapping.seq1_range.start)
            v2 = find_parent(seq2, next_mapping.seq2_range.start)

            # There's an intersection, so both words exist.
            assert v1 is not None and v2 is not None

            v = SequenceDiff(v1, v2)
            equal_part = v.intersect(next_mapping)
            assert equal_part is not None

            equal_chars1 += equal_part.seq1_range.length
            equal_chars2 += equal_part.seq2_range.length

            w = w.join(v)

            if (w.seq1_range.end_exclusive >=
                next_mapping.seq1_range.end_exclusive):
                # The word extends past this unchanged region.
                equal_mappings.pop(0)
            else:
                break

        equal_chars = equal_chars1 + equal_chars2
        word_chars = w.seq1_range.length + w.seq2_range.length

        if ((force and equal_chars < word_chars) or
            equal_chars < word_chars * 2 / 3):
            additional.append(w)

        last_point = w.get_end_exclusives()

    while equal_mappings:
        next_mapping = equal_mappings.pop(0)

        if next_mapping.seq1_range.is_empty:
            continue

        _scan_word(next_mapping.get_starts(), next_mapping)

        # The region isn't empty, so the last offset is an unchanged
        # character on both sides.
        _scan_word(next_mapping.get_end_exclusives().delta(-1), next_mapping)

    return merge_sequence_diffs(sequence_diffs, additional)


def merge_sequence_diffs(
    sequence_diffs1: Sequence[SequenceDiff],
    sequence_diffs2: Sequence[SequenceDiff],
) -> list[SequenceDiff]:
    """Merge two sorted lists of diffs, joining any that overlap or touch.

    Args:
        sequence_diffs1 (list of diffcore.ranges.SequenceDiff):
            The first list of diffs.

        sequence_diffs2 (list of diffcore.ranges.SequenceDiff):
            The second list of diffs.

    Returns:
        list of diffcore.ranges.SequenceDiff:
        The merged diffs.
    """
    result: list[SequenceDiff] = []
    i = 0
    j = 0
    len1 = len(sequence_diffs1)
    len2 = len(sequence_diffs2)

    while i < len1 or j < len2:
        if i < len1 and (j >= len2 or
                         sequence_diffs1[i].seq1_range.start <
                         sequence_diffs2[j].seq1_range.start):
            next_diff = sequence_diffs1[i]
            i += 1
        else:
            next_diff = sequence_diffs2[j]
            j += 1

        if (result and
            result[-1].seq1_range.end_exclusive >= next_diff.seq1_range.start):
            result[-1] = result[-1].join(next_diff)
        else:
            result.append(next_diff)

    return result
