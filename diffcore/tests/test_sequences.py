"""Unit tests for diffcore.sequences."""

from __future__ import annotations

from diffcore.ranges import CharRange, OffsetRange, Position
from diffcore.sequences import (CharBoundaryCategory,
                                CharSequence,
                                ElementSequence,
                                get_char_category,
                                get_indentation)
from diffcore.testing import TestCase


class ElementSequenceTests(TestCase):
    """Unit tests for diffcore.sequences.ElementSequence."""

    def test_element_at(self) -> None:
        """Testing ElementSequence.element_at and is_strongly_equal"""
        seq = ElementSequence(['a', 'b', 'a'])

        self.assertEqual(seq.length, 3)
        self.assertEqual(len(seq), 3)
        self.assertEqual(seq.element_at(1), 'b')
        self.assertTrue(seq.is_strongly_equal(0, 2))
        self.assertFalse(seq.is_strongly_equal(0, 1))
        self.assertFalse(seq.has_boundary_scores)


class LineSequenceTests(TestCase):
    """Unit tests for diffcore.sequences.LineSequence."""

    def test_from_lines_with_trim_whitespace(self) -> None:
        """Testing LineSequence.from_lines with trim_whitespace=True"""
        seq1, seq2 = self.create_line_sequences(['  foo', 'bar'],
                                                ['foo\t', 'baz'])

        self.assertEqual(seq1.element_at(0), seq2.element_at(0))
        self.assertNotEqual(seq1.element_at(1), seq2.element_at(1))

    def test_from_lines_without_trim_whitespace(self) -> None:
        """Testing LineSequence.from_lines with trim_whitespace=False"""
        seq1, seq2 = self.create_line_sequences(['  foo', 'bar'],
                                                ['foo\t', 'bar'],
                                                trim_whitespace=False)

        self.assertNotEqual(seq1.element_at(0), seq2.element_at(0))
        self.assertEqual(seq1.element_at(1), seq2.element_at(1))

    def test_is_strongly_equal(self) -> None:
        """Testing LineSequence.is_strongly_equal compares raw lines"""
        seq, _seq2 = self.create_line_sequences(['foo', '  foo', 'foo'], [])

        self.assertEqual(seq.element_at(0), seq.element_at(1))
        self.assertFalse(seq.is_strongly_equal(0, 1))
        self.assertTrue(seq.is_strongly_equal(0, 2))

    def test_boundary_score(self) -> None:
        """Testing LineSequence.boundary_score"""
        seq, _seq2 = self.create_line_sequences(['a', '    b', '\tc'], [])

        self.assertEqual(seq.boundary_score(0), 1000)
        self.assertEqual(seq.boundary_score(1), 996)
        self.assertEqual(seq.boundary_score(2), 995)
        self.assertEqual(seq.boundary_score(3), 999)

    def test_get_text(self) -> None:
        """Testing LineSequence.get_text"""
        seq, _seq2 = self.create_line_sequences(['a', 'b', 'c'], [])

        self.assertEqual(seq.get_text(OffsetRange(1, 3)), 'b\nc')
        self.assertEqual(seq.get_text(OffsetRange(1, 1)), '')

    def test_get_indentation(self) -> None:
        """Testing get_indentation"""
        self.assertEqual(get_indentation('  \t x'), 4)
        self.assertEqual(get_indentation('x  '), 0)
        self.assertEqual(get_indentation(''), 0)


class CharSequenceTests(TestCase):
    """Unit tests for diffcore.sequences.CharSequence."""

    def test_init_with_trimmed_whitespace(self) -> None:
        """Testing CharSequence with consider_whitespace_changes=False"""
        seq = CharSequence.from_line_range(['  hello  ', 'world'],
                                           OffsetRange(0, 2),
                                           consider_whitespace_changes=False)

        self.assertEqual(seq.text, 'hello\nworld')
        self.assertEqual(seq.length, 11)
        self.assertEqual(seq.first_element_offset_by_line_idx, [0, 6])
        self.assertEqual(seq.trimmed_ws_lengths_by_line_idx, [2, 0])

    def test_init_with_whitespace(self) -> None:
        """Testing CharSequence with consider_whitespace_changes=True"""
        seq = CharSequence.from_line_range(['  hello  ', 'world'],
                                           OffsetRange(0, 2),
                                           consider_whitespace_changes=True)

        self.assertEqual(seq.text, '  hello  \nworld')
        self.assertEqual(seq.trimmed_ws_lengths_by_line_idx, [0, 0])

    def test_init_with_start_column(self) -> None:
        """Testing CharSequence with a range starting mid-line"""
        seq = CharSequence(['Hello world'], CharRange(1, 7, 1, 12),
                           consider_whitespace_changes=True)

        self.assertEqual(seq.text, 'world')
        self.assertEqual(seq.translate_offset(0), Position(1, 7))
        self.assertEqual(seq.translate_offset(5), Position(1, 12))

    def test_init_with_end_column(self) -> None:
        """Testing CharSequence with a range ending at the start of a line"""
        seq = CharSequence(['a', 'b', 'c'], CharRange(2, 1, 3, 1),
                           consider_whitespace_changes=False)

        self.assertEqual(seq.text, 'b\n')
        self.assertEqual(seq.translate_offset(2, 'left'), Position(3, 1))

    def test_translate_offset(self) -> None:
        """Testing CharSequence.translate_offset with preferences"""
        seq = CharSequence.from_line_range(['  hello  ', 'world'],
                                           OffsetRange(0, 2),
                                           consider_whitespace_changes=False)

        self.assertEqual(seq.translate_offset(0), Position(1, 3))
        self.assertEqual(seq.translate_offset(0, 'left'), Position(1, 1))
        self.assertEqual(seq.translate_offset(5), Position(1, 8))
        self.assertEqual(seq.translate_offset(5, 'left'), Position(1, 8))
        self.assertEqual(seq.translate_offset(6), Position(2, 1))
        self.assertEqual(seq.translate_offset(11), Position(2, 6))

    def test_translate_range(self) -> None:
        """Testing CharSequence.translate_range"""
        seq = CharSequence.from_line_range(['  hello  ', 'world'],
                                           OffsetRange(0, 2),
                                           consider_whitespace_changes=False)

        self.assertEqual(seq.translate_range(OffsetRange(0, 5)),
                         CharRange(1, 3, 1, 8))
        self.assertEqual(seq.translate_range(OffsetRange(1, 8)),
                         CharRange(1, 4, 2, 3))

    def test_translate_range_with_collapsed(self) -> None:
        """Testing CharSequence.translate_range with an end translating
        before the start
        """
        seq = CharSequence.from_line_range(['a', '  b'],
                                           OffsetRange(0, 2),
                                           consider_whitespace_changes=False)

        self.assertEqual(seq.text, 'a\nb')
        self.assertEqual(seq.translate_range(OffsetRange(2, 2)),
                         CharRange(2, 1, 2, 1))

    def test_translate_offset_with_non_ascii(self) -> None:
        """Testing CharSequence.translate_offset with non-ASCII text"""
        seq = CharSequence.from_line_range(['café olé'],
                                           OffsetRange(0, 1),
                                           consider_whitespace_changes=True)

        self.assertEqual(seq.length, 8)
        self.assertEqual(seq.translate_offset(5), Position(1, 6))

    def test_boundary_score(self) -> None:
        """Testing CharSequence.boundary_score"""
        seq = CharSequence.from_line_range(['aB, c'],
                                           OffsetRange(0, 1),
                                           consider_whitespace_changes=True)

        # Start of the sequence, before a lowercase letter.
        self.assertEqual(seq.boundary_score(0), 20)

        # A camelCase boundary.
        self.assertEqual(seq.boundary_score(1), 11)

        # Between an uppercase letter and a separator.
        self.assertEqual(seq.boundary_score(2), 40)

        # Between a separator and a space.
        self.assertEqual(seq.boundary_score(3), 43)

    def test_boundary_score_with_line_breaks(self) -> None:
        """Testing CharSequence.boundary_score with line breaks"""
        seq = CharSequence.from_line_range(['a\r', 'b'],
                                           OffsetRange(0, 2),
                                           consider_whitespace_changes=True)

        self.assertEqual(seq.text, 'a\r\nb')

        # Never split a CRLF.
        self.assertEqual(seq.boundary_score(2), 0)

        # After a line feed.
        self.assertEqual(seq.boundary_score(3), 150)

    def test_find_word_containing(self) -> None:
        """Testing CharSequence.find_word_containing"""
        seq = CharSequence.from_line_range(['foo_bar baz9'],
                                           OffsetRange(0, 1),
                                           consider_whitespace_changes=True)

        self.assertEqual(seq.find_word_containing(1), OffsetRange(0, 3))
        self.assertIsNone(seq.find_word_containing(3))
        self.assertEqual(seq.find_word_containing(10), OffsetRange(8, 12))
        self.assertIsNone(seq.find_word_containing(12))

    def test_find_subword_containing(self) -> None:
        """Testing CharSequence.find_subword_containing"""
        seq = CharSequence.from_line_range(['getUserName'],
                                           OffsetRange(0, 1),
                                           consider_whitespace_changes=True)

        self.assertEqual(seq.find_subword_containing(0), OffsetRange(0, 3))
        self.assertEqual(seq.find_subword_containing(4), OffsetRange(3, 7))
        self.assertEqual(seq.find_subword_containing(10), OffsetRange(7, 11))

    def test_find_subword_containing_with_uppercase(self) -> None:
        """Testing CharSequence.find_subword_containing with an offset on an
        uppercase letter
        """
        seq = CharSequence.from_line_range(['getUserName'],
                                           OffsetRange(0, 1),
                                           consider_whitespace_changes=True)

        self.assertEqual(seq.find_subword_containing(3), OffsetRange(3, 3))
        self.assertEqual(seq.find_subword_containing(7), OffsetRange(7, 7))
        self.assertIsNone(seq.find_subword_containing(11))

    def test_count_lines_in(self) -> None:
        """Testing CharSequence.count_lines_in"""
        seq = CharSequence.from_line_range(['hello', 'world'],
                                           OffsetRange(0, 2),
                                           consider_whitespace_changes=True)

        self.assertEqual(seq.count_lines_in(OffsetRange(2, 8)), 1)
        self.assertEqual(seq.count_lines_in(OffsetRange(1, 4)), 0)

    def test_extend_to_full_lines(self) -> None:
        """Testing CharSequence.extend_to_full_lines"""
        seq = CharSequence.from_line_range(['hello', 'world'],
                                           OffsetRange(0, 2),
                                           consider_whitespace_changes=True)

        self.assertEqual(seq.extend_to_full_lines(OffsetRange(2, 3)),
                         OffsetRange(0, 6))
        self.assertEqual(seq.extend_to_full_lines(OffsetRange(7, 8)),
                         OffsetRange(6, 11))

    def test_get_char_category(self) -> None:
        """Testing get_char_category"""
        self.assertEqual(get_char_category(ord('a')),
                         CharBoundaryCategory.WORD_LOWER)
        self.assertEqual(get_char_category(ord('Z')),
                         CharBoundaryCategory.WORD_UPPER)
        self.assertEqual(get_char_category(ord('7')),
                         CharBoundaryCategory.WORD_NUMBER)
        self.assertEqual(get_char_category(ord('\t')),
                         CharBoundaryCategory.SPACE)
        self.assertEqual(get_char_category(ord(';')),
                         CharBoundaryCategory.SEPARATOR)
        self.assertEqual(get_char_category(ord('(')),
                         CharBoundaryCategory.OTHER)
        self.assertEqual(get_char_category(-1),
                         CharBoundaryCategory.END)
