"""Unit tests for diffcore.heuristics."""

from __future__ import annotations

from diffcore.heuristics import (
    MAX_MERGE_PASSES,
    _join_diffs_repeatedly,
    extend_diffs_to_entire_word_if_appropriate,
    join_sequence_diffs_by_shifting,
    merge_sequence_diffs,
    optimize_sequence_diffs,
    remove_short_matches,
    remove_very_short_matching_lines_between_diffs,
    remove_very_short_matching_text_between_long_diffs,
    shift_sequence_diffs)
from diffcore.ranges import OffsetRange, SequenceDiff
from diffcore.sequences import CharSequence, ElementSequence
from diffcore.testing import TestCase


class JoinSequenceDiffsByShiftingTests(TestCase):
    """Unit tests for join_sequence_diffs_by_shifting."""

    def test_join_with_previous(self) -> None:
        """Testing join_sequence_diffs_by_shifting with an insertion that
        slides into the previous diff
        """
        seq1 = ElementSequence([1, 2, 3])
        seq2 = ElementSequence([9, 2, 2, 3])

        self.assertEqual(
            join_sequence_diffs_by_shifting(
                seq1, seq2,
                [
                    SequenceDiff.from_offsets(0, 1, 0, 1),
                    SequenceDiff.from_offsets(2, 2, 2, 3),
                ]),
            [
                SequenceDiff.from_offsets(0, 1, 0, 2),
            ])

    def test_with_no_diffs(self) -> None:
        """Testing join_sequence_diffs_by_shifting with no diffs"""
        seq = ElementSequence([1, 2])

        self.assertEqual(join_sequence_diffs_by_shifting(seq, seq, []), [])

    def test_with_fixed_diffs(self) -> None:
        """Testing join_sequence_diffs_by_shifting with diffs that can't move
        """
        seq1 = ElementSequence(['a', 'b', 'c', 'd', 'e'])
        seq2 = ElementSequence(['a', 'B', 'c', 'D', 'e'])
        diffs = [
            SequenceDiff.from_offsets(1, 2, 1, 2),
            SequenceDiff.from_offsets(3, 4, 3, 4),
        ]

        self.assertEqual(join_sequence_diffs_by_shifting(seq1, seq2, diffs),
                         diffs)


class ShiftSequenceDiffsTests(TestCase):
    """Unit tests for shift_sequence_diffs."""

    def test_shift_to_block_boundary(self) -> None:
        """Testing shift_sequence_diffs moves an inserted block between
        blocks
        """
        seq1, seq2 = self.create_line_sequences(
            ['if a:', '    x', '', 'if b:', '    y'],
            ['if a:', '    x', '', 'if c:', '    z', '', 'if b:', '    y'])

        self.assertEqual(
            shift_sequence_diffs(
                seq1, seq2,
                [SequenceDiff.from_offsets(2, 2, 2, 5)]),
            [SequenceDiff.from_offsets(3, 3, 3, 6)])

    def test_shift_prefers_earliest(self) -> None:
        """Testing shift_sequence_diffs picks the earliest of equally good
        positions
        """
        seq1, seq2 = self.create_line_sequences(
            ['a {', '    b', '}', 'c'],
            ['a {', '    b', '}', 'a {', '    b', '}', 'c'])

        self.assertEqual(
            shift_sequence_diffs(
                seq1, seq2,
                [SequenceDiff.from_offsets(1, 1, 1, 4)]),
            [SequenceDiff.from_offsets(0, 0, 0, 3)])

    def test_shift_deletion(self) -> None:
        """Testing shift_sequence_diffs with a deletion"""
        seq1, seq2 = self.create_line_sequences(
            ['a {', '    b', '}', 'a {', '    b', '}', 'c'],
            ['a {', '    b', '}', 'c'])

        self.assertEqual(
            shift_sequence_diffs(
                seq1, seq2,
                [SequenceDiff.from_offsets(1, 4, 1, 1)]),
            [SequenceDiff.from_offsets(0, 3, 0, 0)])

    def test_without_boundary_scores(self) -> None:
        """Testing shift_sequence_diffs with sequences that can't score
        boundaries
        """
        seq1 = ElementSequence(['a', 'b', 'a', 'b'])
        seq2 = ElementSequence(['a', 'b'])
        diffs = [SequenceDiff.from_offsets(1, 3, 1, 1)]

        self.assertEqual(shift_sequence_diffs(seq1, seq2, diffs), diffs)


class OptimizeSequenceDiffsTests(TestCase):
    """Unit tests for optimize_sequence_diffs."""

    def test_optimize(self) -> None:
        """Testing optimize_sequence_diffs"""
        seq1, seq2 = self.create_line_sequences(
            ['if a:', '    x', '', 'if b:', '    y'],
            ['if a:', '    x', '', 'if c:', '    z', '', 'if b:', '    y'])

        self.assertEqual(
            optimize_sequence_diffs(
                seq1, seq2,
                [SequenceDiff.from_offsets(2, 2, 2, 5)]),
            [SequenceDiff.from_offsets(3, 3, 3, 6)])

    def test_optimize_is_idempotent(self) -> None:
        """Testing optimize_sequence_diffs gives the same result when run
        again
        """
        seq1, seq2 = self.create_line_sequences(
            ['a {', '    b', '}', 'c'],
            ['a {', '    b', '}', 'a {', '    b', '}', 'c'])

        diffs = optimize_sequence_diffs(
            seq1, seq2,
            [SequenceDiff.from_offsets(1, 1, 1, 4)])

        self.assertEqual(diffs, [SequenceDiff.from_offsets(0, 0, 0, 3)])
        self.assertEqual(optimize_sequence_diffs(seq1, seq2, diffs), diffs)


class RemoveShortMatchesTests(TestCase):
    """Unit tests for remove_short_matches."""

    def test_with_short_gap(self) -> None:
        """Testing remove_short_matches with diffs 2 elements apart"""
        seq = ElementSequence('abcdefgh')

        self.assertEqual(
            remove_short_matches(
                seq, seq,
                [
                    SequenceDiff.from_offsets(0, 1, 0, 1),
                    SequenceDiff.from_offsets(3, 4, 3, 5),
                ]),
            [
                SequenceDiff.from_offsets(0, 4, 0, 5),
            ])

    def test_with_long_gap(self) -> None:
        """Testing remove_short_matches with diffs 3 elements apart"""
        seq = ElementSequence('abcdefgh')
        diffs = [
            SequenceDiff.from_offsets(0, 1, 0, 1),
            SequenceDiff.from_offsets(4, 5, 4, 5),
        ]

        self.assertEqual(remove_short_matches(seq, seq, diffs), diffs)


class RemoveVeryShortMatchingLinesBetweenDiffsTests(TestCase):
    """Unit tests for remove_very_short_matching_lines_between_diffs."""

    def test_with_long_diffs(self) -> None:
        """Testing remove_very_short_matching_lines_between_diffs joins long
        diffs separated by a nearly blank line
        """
        seq1, seq2 = self.create_line_sequences(
            ['a1', 'a2', 'a3', 'a4', 'a5', 'a6', '  }', 'b1'],
            ['c1', 'c2', 'c3', 'c4', 'c5', 'c6', '  }', 'd1'])

        self.assertEqual(
            remove_very_short_matching_lines_between_diffs(
                seq1, seq2,
                [
                    SequenceDiff.from_offsets(0, 6, 0, 6),
                    SequenceDiff.from_offsets(7, 8, 7, 8),
                ]),
            [
                SequenceDiff.from_offsets(0, 8, 0, 8),
            ])

    def test_with_short_diffs(self) -> None:
        """Testing remove_very_short_matching_lines_between_diffs keeps short
        diffs apart
        """
        seq1, seq2 = self.create_line_sequences(['a', '}', 'b'],
                                                ['c', '}', 'd'])
        diffs = [
            SequenceDiff.from_offsets(0, 1, 0, 1),
            SequenceDiff.from_offsets(2, 3, 2, 3),
        ]

        self.assertEqual(
            remove_very_short_matching_lines_between_diffs(seq1, seq2, diffs),
            diffs)

    def test_with_long_gap(self) -> None:
        """Testing remove_very_short_matching_lines_between_diffs keeps diffs
        apart when the unchanged lines have content
        """
        seq1, seq2 = self.create_line_sequences(
            ['a1', 'a2', 'a3', 'a4', 'a5', 'a6', 'return', 'b1'],
            ['c1', 'c2', 'c3', 'c4', 'c5', 'c6', 'return', 'd1'])
        diffs = [
            SequenceDiff.from_offsets(0, 6, 0, 6),
            SequenceDiff.from_offsets(7, 8, 7, 8),
        ]

        self.assertEqual(
            remove_very_short_matching_lines_between_diffs(seq1, seq2, diffs),
            diffs)


class RemoveVeryShortMatchingTextBetweenLongDiffsTests(TestCase):
    """Unit tests for remove_very_short_matching_text_between_long_diffs."""

    def test_with_long_diffs(self) -> None:
        """Testing remove_very_short_matching_text_between_long_diffs joins
        long diffs separated by short text
        """
        seq1 = self._create_char_sequence('A' * 150 + ' x ' + 'B' * 150)
        seq2 = self._create_char_sequence('C' * 150 + ' x ' + 'D' * 150)

        self.assertEqual(
            remove_very_short_matching_text_between_long_diffs(
                seq1, seq2,
                [
                    SequenceDiff.from_offsets(0, 150, 0, 150),
                    SequenceDiff.from_offsets(153, 303, 153, 303),
                ]),
            [
                SequenceDiff.from_offsets(0, 303, 0, 303),
            ])

    def test_with_short_diffs(self) -> None:
        """Testing remove_very_short_matching_text_between_long_diffs keeps
        short diffs apart
        """
        seq1 = self._create_char_sequence('ab x cd')
        seq2 = self._create_char_sequence('ef x gh')
        diffs = [
            SequenceDiff.from_offsets(0, 2, 0, 2),
            SequenceDiff.from_offsets(5, 7, 5, 7),
        ]

        self.assertEqual(
            remove_very_short_matching_text_between_long_diffs(seq1, seq2,
                                                               diffs),
            diffs)

    def test_with_short_prefix(self) -> None:
        """Testing remove_very_short_matching_text_between_long_diffs pulls a
        short line prefix into a long diff
        """
        seq1 = self._create_char_sequence('x = ' + 'a' * 60)
        seq2 = self._create_char_sequence('x = ' + 'b' * 60)

        self.assertEqual(
            remove_very_short_matching_text_between_long_diffs(
                seq1, seq2,
                [SequenceDiff.from_offsets(4, 64, 4, 64)]),
            [SequenceDiff.from_offsets(0, 64, 0, 64)])

    def _create_char_sequence(
        self,
        line: str,
    ) -> CharSequence:
        """Return a character sequence for a single line.

        Args:
            line (str):
                The line of text.

        Returns:
            diffcore.sequences.CharSequence:
            The sequence.
        """
        return CharSequence.from_line_range([line], OffsetRange(0, 1),
                                            consider_whitespace_changes=True)


class ExtendDiffsToEntireWordTests(TestCase):
    """Unit tests for extend_diffs_to_entire_word_if_appropriate."""

    def test_with_mostly_changed_word(self) -> None:
        """Testing extend_diffs_to_entire_word_if_appropriate with a mostly
        changed word
        """
        seq1 = self._create_char_sequence('foo bar')
        seq2 = self._create_char_sequence('foo bqz')

        self.assertEqual(
            extend_diffs_to_entire_word_if_appropriate(
                seq1, seq2,
                [SequenceDiff.from_offsets(5, 7, 5, 7)],
                lambda seq, offset: seq.find_word_containing(offset)),
            [SequenceDiff.from_offsets(4, 7, 4, 7)])

    def test_with_mostly_unchanged_word(self) -> None:
        """Testing extend_diffs_to_entire_word_if_appropriate with a mostly
        unchanged word
        """
        seq1 = self._create_char_sequence('foo bar')
        seq2 = self._create_char_sequence('foo baz')
        diffs = [SequenceDiff.from_offsets(6, 7, 6, 7)]

        self.assertEqual(
            extend_diffs_to_entire_word_if_appropriate(
                seq1, seq2, diffs,
                lambda seq, offset: seq.find_word_containing(offset)),
            diffs)

    def test_with_subwords_forced(self) -> None:
        """Testing extend_diffs_to_entire_word_if_appropriate with subwords
        and force=True
        """
        seq1 = self._create_char_sequence('getUserName')
        seq2 = self._create_char_sequence('getUserNames')
        diffs = [SequenceDiff.from_offsets(11, 11, 11, 12)]

        self.assertEqual(
            extend_diffs_to_entire_word_if_appropriate(
                seq1, seq2, diffs,
                lambda seq, offset: seq.find_word_containing(offset)),
            diffs)

        self.assertEqual(
            extend_diffs_to_entire_word_if_appropriate(
                seq1, seq2, diffs,
                lambda seq, offset: seq.find_subword_containing(offset),
                force=True),
            [SequenceDiff.from_offsets(7, 11, 7, 12)])

    def _create_char_sequence(
        self,
        line: str,
    ) -> CharSequence:
        """Return a character sequence for a single line.

        Args:
            line (str):
                The line of text.

        Returns:
            diffcore.sequences.CharSequence:
            The sequence.
        """
        return CharSequence.from_line_range([line], OffsetRange(0, 1),
                                            consider_whitespace_changes=True)


class JoinDiffsRepeatedlyTests(TestCase):
    """Unit tests for diffcore.heuristics._join_diffs_repeatedly."""

    def test_pass_limit(self) -> None:
        """Testing _join_diffs_repeatedly stops after MAX_MERGE_PASSES
        repeats of the first pass
        """
        diffs = [
            SequenceDiff.from_offsets(i * 2, i * 2 + 1, i * 2, i * 2 + 1)
            for i in range(20)
        ]
        num_diffs = len(diffs)
        calls_left = 0

        # Join only the first pair of each pass, so that every pass has
        # something to do.
        def _should_join_diffs(
            before: SequenceDiff,
            after: SequenceDiff,
        ) -> bool:
            nonlocal calls_left, num_diffs

            should_join = (calls_left == 0)

            if should_join:
                calls_left = num_diffs - 1
                num_diffs -= 1

            calls_left -= 1

            return should_join

        with self.assertLogs('diffcore.heuristics', level='DEBUG') as cm:
            result = _join_diffs_repeatedly(diffs, _should_join_diffs)

        self.assertEqual(MAX_MERGE_PASSES, 10)
        self.assertEqual(len(result), 20 - (MAX_MERGE_PASSES + 1))
        self.assertEqual(result[0], SequenceDiff.from_offsets(0, 23, 0, 23))
        self.assertEqual(
            cm.output,
            [
                'DEBUG:diffcore.heuristics:Joined 20 diffs into 9 in 11 '
                'passes',
            ])

    def test_stops_when_nothing_joins(self) -> None:
        """Testing _join_diffs_repeatedly stops after a pass with no joins"""
        diffs = [
            SequenceDiff.from_offsets(0, 1, 0, 1),
            SequenceDiff.from_offsets(2, 3, 2, 3),
        ]

        with self.assertLogs('diffcore.heuristics', level='DEBUG') as cm:
            result = _join_diffs_repeatedly(diffs,
                                            lambda before, after: False)

        self.assertEqual(result, diffs)
        self.assertEqual(
            cm.output,
            [
                'DEBUG:diffcore.heuristics:Joined 2 diffs into 2 in 1 '
                'passes',
            ])


class MergeSequenceDiffsTests(TestCase):
    """Unit tests for merge_sequence_diffs."""

    def test_merge(self) -> None:
        """Testing merge_sequence_diffs"""
        self.assertEqual(
            merge_sequence_diffs(
                [
                    SequenceDiff.from_offsets(0, 2, 0, 2),
                    SequenceDiff.from_offsets(8, 9, 8, 9),
                ],
                [
                    SequenceDiff.from_offsets(1, 4, 1, 4),
                    SequenceDiff.from_offsets(6, 7, 6, 7),
                ]),
            [
                SequenceDiff.from_offsets(0, 4, 0, 4),
                SequenceDiff.from_offsets(6, 7, 6, 7),
                SequenceDiff.from_offsets(8, 9, 8, 9),
            ])
