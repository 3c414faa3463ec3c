"""Sequences that the diff algorithms operate on.

The diff algorithms never look at text directly. They compare elements of
two sequences, which may be lines (identified by a perfect hash of their
contents) or characters (identified by their code points). Sequences may
also provide boundary scores, which the optimization heuristics use to pick
the most natural place for a diff to start and end.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import Literal, TYPE_CHECKING

from diffcore.ranges import CharRange, OffsetRange, Position

if TYPE_CHECKING:
    from collections.abc import Hashable, Sequence

    from typing_extensions import TypeAlias

    from diffcore.hashing import PerfectHashTable


#: Which side of trimmed whitespace a translated offset should land on.
OffsetPreference: TypeAlias = Literal['left', 'right']


class BaseSequence:
    """Base class for a sequence that can be diffed.

    Subclasses must set :py:attr:`length` and implement
    :py:meth:`element_at`. Subclasses that can score boundaries set
    :py:attr:`has_boundary_scores` and implement :py:meth:`boundary_score`.
    """

    #: Whether :py:meth:`boundary_score` is available.
    has_boundary_scores: bool = False

    ######################
    # Instance variables #
    ######################

    #: The number of elements in the sequence.
    length: int

    def element_at(
        self,
        offset: int,
    ) -> Hashable:
        """Return the element at the given offset.

        Elements are compared for equality by the diff algorithms, so they
        should be cheap to compare.

        Args:
            offset (int):
                The offset of the element.

        Returns:
            object:
            The element.
        """
        raise NotImplementedError

    def is_strongly_equal(
        self,
        offset1: int,
        offset2: int,
    ) -> bool:
        """Return whether two elements of this sequence are truly equal.

        Elements may compare equal while their underlying contents differ
        (for example, lines that only differ in indentation). This compares
        the underlying contents.

        Args:
            offset1 (int):
                The offset of the first element.

            offset2 (int):
                The offset of the second element.

        Returns:
            bool:
            ``True`` if the elements are exactly equal.
        """
        return self.element_at(offset1) == self.element_at(offset2)

    def boundary_score(
        self,
        length: int,
    ) -> int:
        """Return how good of a place a diff boundary would be.

        Args:
            length (int):
                The offset of the boundary. 0 is the start of the sequence
                and :py:attr:`length` is the end.

        Returns:
            int:
            The score. Higher is better.
        """
        raise NotImplementedError

    def __len__(self) -> int:
        return self.length


class ElementSequence(BaseSequence):
    """A sequence of arbitrary hashable elements.

    This has no notion of boundaries, so diffs over it are never shifted to
    better positions.
    """

    ######################
    # Instance variables #
    ######################

    #: The elements in the sequence.
    elements: Sequence[Hashable]

    def __init__(
        self,
        elements: Sequence[Hashable],
    ) -> None:
        """Initialize the sequence.

        Args:
            elements (list):
                The elements in the sequence.
        """
        self.elements = elements
        self.length = len(elements)

    def element_at(
        self,
        offset: int,
    ) -> Hashable:
        """Return the element at the given offset.

        Args:
            offset (int):
                The offset of the element.

        Returns:
            object:
            The element.
        """
        return self.elements[offset]


def get_indentation(
    line: str,
) -> int:
    """Return the number of leading spaces and tabs in a line.

    Args:
        line (str):
            The line to inspect.

    Returns:
        int:
        The width of the indentation, counting each tab as 1.
    """
    return len(line) - len(line.lstrip(' \t'))


class LineSequence(BaseSequence):
    """A sequence of lines in a document.

    Each element is the perfect hash of a line, which is usually taken of
    the line with surrounding whitespace removed. Strong equality compares
    the untouched lines.
    """

    has_boundary_scores = True

    ######################
    # Instance variables #
    ######################

    #: The hash of each line.
    line_hashes: Sequence[int]

    #: The original lines.
    lines: Sequence[str]

    def __init__(
        self,
        line_hashes: Sequence[int],
        lines: Sequence[str],
    ) -> None:
        """Initialize the sequence.

        Args:
            line_hashes (list of int):
                The hash of each line.

            lines (list of str):
                The original lines.
        """
        assert len(line_hashes) == len(lines)

        self.line_hashes = line_hashes
        self.lines = lines
        self.length = len(lines)

    @classmethod
    def from_lines(
        cls,
        lines: Sequence[str],
        hash_table: PerfectHashTable,
        trim_whitespace: bool = True,
    ) -> LineSequence:
        """Return a sequence for a list of lines.

        Args:
            lines (list of str):
                The lines in the document.

            hash_table (diffcore.hashing.PerfectHashTable):
                The table used to hash lines. Both sides of a diff must use
                the same table.

            trim_whitespace (bool, optional):
                Whether to strip leading and trailing whitespace before
                hashing, making lines that only differ in that whitespace
                equal.

        Returns:
            LineSequence:
            The new sequence.
        """
        if trim_whitespace:
            line_hashes = [
                hash_table.get_or_create(line.strip())
                for line in lines
            ]
        else:
            line_hashes = [
                hash_table.get_or_create(line)
                for line in lines
            ]

        return cls(line_hashes, lines)

    def element_at(
        self,
        offset: int,
    ) -> int:
        """Return the hash of the line at the given offset.

        Args:
            offset (int):
                The index of the line.

        Returns:
            int:
            The hash of the line.
        """
        return self.line_hashes[offset]

    def is_strongly_equal(
        self,
        offset1: int,
        offset2: int,
    ) -> bool:
        """Return whether two lines are exactly equal.

        Args:
            offset1 (int):
                The index of the first line.

            offset2 (int):
                The index of the second line.

        Returns:
            bool:
            ``True`` if the lines are identical, including whitespace.
        """
        return self.lines[offset1] == self.lines[offset2]

    def boundary_score(
        self,
        length: int,
    ) -> int:
        """Return how good of a place a diff boundary would be.

        Boundaries between less indented lines are preferred, so that
        inserted blocks of code line up with the blocks around them.

        Args:
            length (int):
                The line index of the boundary.

        Returns:
            int:
            The score. Higher is better.
        """
        if length == 0:
            indentation_before = 0
        else:
            indentation_before = get_indentation(self.lines[length - 1])

        if length == self.length:
            indentation_after = 0
        else:
            indentation_after = get_indentation(self.lines[length])

        return 1000 - (indentation_before + indentation_after)

    def get_text(
        self,
        offset_range: OffsetRange,
    ) -> str:
        """Return the text of a range of lines.

        Args:
            offset_range (diffcore.ranges.OffsetRange):
                The range of line indexes.

        Returns:
            str:
            The lines, joined by newlines.
        """
        return '\n'.join(
            self.lines[offset_range.start:offset_range.end_exclusive])


class CharBoundaryCategory:
    """Categories of characters used to score character boundaries."""

    WORD_LOWER = 0
    WORD_UPPER = 1
    WORD_NUMBER = 2
    END = 3
    OTHER = 4
    SEPARATOR = 5
    SPACE = 6
    LINE_BREAK_CR = 7
    LINE_BREAK_LF = 8


#: The score contributed by each character category at a boundary.
CHAR_BOUNDARY_SCORES: dict[int, int] = {
    CharBoundaryCategory.WORD_LOWER: 0,
    CharBoundaryCategory.WORD_UPPER: 0,
    CharBoundaryCategory.WORD_NUMBER: 0,
    CharBoundaryCategory.END: 10,
    CharBoundaryCategory.OTHER: 2,
    CharBoundaryCategory.SEPARATOR: 30,
    CharBoundaryCategory.SPACE: 3,
    CharBoundaryCategory.LINE_BREAK_CR: 10,
    CharBoundaryCategory.LINE_BREAK_LF: 10,
}

_CR = ord('\r')
_LF = ord('\n')
_SPACE = ord(' ')
_TAB = ord('\t')
_COMMA = ord(',')
_SEMICOLON = ord(';')
_LOWER_A = ord('a')
_LOWER_Z = ord('z')
_UPPER_A = ord('A')
_UPPER_Z = ord('Z')
_DIGIT_0 = ord('0')
_DIGIT_9 = ord('9')


def get_char_category(
    char_code: int,
) -> int:
    """Return the boundary category of a character.

    Args:
        char_code (int):
            The code point of the character, or -1 for the end of the
            sequence.

    Returns:
        int:
        The category, from :py:class:`CharBoundaryCategory`.
    """
    if char_code == _LF:
        return CharBoundaryCategory.LINE_BREAK_LF
    elif char_code == _CR:
        return CharBoundaryCategory.LINE_BREAK_CR
    elif char_code == _SPACE or char_code == _TAB:
        return CharBoundaryCategory.SPACE
    elif _LOWER_A <= char_code <= _LOWER_Z:
        return CharBoundaryCategory.WORD_LOWER
    elif _UPPER_A <= char_code <= _UPPER_Z:
        return CharBoundaryCategory.WORD_UPPER
    elif _DIGIT_0 <= char_code <= _DIGIT_9:
        return CharBoundaryCategory.WORD_NUMBER
    elif char_code == -1:
        return CharBoundaryCategory.END
    elif char_code == _COMMA or char_code == _SEMICOLON:
        return CharBoundaryCategory.SEPARATOR
    else:
        return CharBoundaryCategory.OTHER


def is_word_char(
    char_code: int,
) -> bool:
    """Return whether a character is part of a word.

    Args:
        char_code (int):
            The code point of the character.

    Returns:
        bool:
        ``True`` if the character is an ASCII letter or digit.
    """
    return (_LOWER_A <= char_code <= _LOWER_Z or
            _UPPER_A <= char_code <= _UPPER_Z or
            _DIGIT_0 <= char_code <= _DIGIT_9)


def is_upper_case(
    char_code: int,
) -> bool:
    """Return whether a character is an ASCII uppercase letter.

    Args:
        char_code (int):
            The code point of the character.

    Returns:
        bool:
        ``True`` if the character is uppercase.
    """
    return _UPPER_A <= char_code <= _UPPER_Z


class CharSequence(BaseSequence):
    """A sequence of characters taken from a range of lines.

    The characters of every line in the range are concatenated, with a
    newline after each line but the last. When whitespace changes are not
    being considered, leading and trailing whitespace is left out of each
    line.

    Enough information is kept about each line to translate offsets in the
    sequence back into positions in the original document.
    """

    has_boundary_scores = True

    ######################
    # Instance variables #
    ######################

    #: Whether whitespace is part of the sequence.
    consider_whitespace_changes: bool

    #: The code point of each character in the sequence.
    elements: list[int]

    #: The offset in the sequence where each line's characters begin.
    first_element_offset_by_line_idx: list[int]

    #: The column in the original document where each line's range begins.
    #:
    #: This is 0-based, and only non-zero for a range's first line.
    line_start_offsets: list[int]

    #: The lines of the document.
    lines: Sequence[str]

    #: The range of the document covered by the sequence.
    range: CharRange

    #: The text of the sequence.
    text: str

    #: The amount of leading whitespace left out of each line.
    trimmed_ws_lengths_by_line_idx: list[int]

    def __init__(
        self,
        lines: Sequence[str],
        char_range: CharRange,
        consider_whitespace_changes: bool,
    ) -> None:
        """Initialize the sequence.

        Args:
            lines (list of str):
                The lines of the document.

            char_range (diffcore.ranges.CharRange):
                The range of the document to build the sequence from.

            consider_whitespace_changes (bool):
                Whether leading and trailing whitespace on each line is
                part of the sequence.
        """
        self.lines = lines
        self.range = char_range
        self.consider_whitespace_changes = consider_whitespace_changes
        self.first_element_offset_by_line_idx = [0]
        self.line_start_offsets = []
        self.trimmed_ws_lengths_by_line_idx = []

        parts: list[str] = []
        text_length = 0
        start_line_number = char_range.start_line_number
        end_line_number = char_range.end_line_number

        for line_number in range(start_line_number, end_line_number + 1):
            line = lines[line_number - 1]
            line_start_offset = 0

            if (line_number == start_line_number and
                char_range.start_column > 1):
                line_start_offset = char_range.start_column - 1
                line = line[line_start_offset:]

            self.line_start_offsets.append(line_start_offset)

            trimmed_ws_length = 0

            if not consider_whitespace_changes:
                trimmed_start_line = line.lstrip()
                trimmed_ws_length = len(line) - len(trimmed_start_line)
                line = trimmed_start_line.rstrip()

            self.trimmed_ws_lengths_by_line_idx.append(trimmed_ws_length)

            if line_number == end_line_number:
                line = line[:max(0, char_range.end_column - 1 -
                                 line_start_offset)]

            parts.append(line)
            text_length += len(line)

            if line_number < end_line_number:
                parts.append('\n')
                text_length += 1
                self.first_element_offset_by_line_idx.append(text_length)

        self.text = ''.join(parts)
        self.elements = [ord(c) for c in self.text]
        self.length = len(self.elements)

    @classmethod
    def from_line_range(
        cls,
        lines: Sequence[str],
        line_range: OffsetRange,
        consider_whitespace_changes: bool,
    ) -> CharSequence:
        """Return a sequence covering the full contents of a range of lines.

        Args:
            lines (list of str):
                The lines of the document.

            line_range (diffcore.ranges.OffsetRange):
                The 0-based, non-empty range of line indexes.

            consider_whitespace_changes (bool):
                Whether leading and trailing whitespace on each line is
                part of the sequence.

        Returns:
            CharSequence:
            The new sequence.
        """
        assert not line_range.is_empty

        last_line = lines[line_range.end_exclusive - 1]

        return cls(
            lines,
            CharRange(line_range.start + 1, 1,
                      line_range.end_exclusive, len(last_line) + 1),
            consider_whitespace_changes)

    def element_at(
        self,
        offset: int,
    ) -> int:
        """Return the code point at the given offset.

        Args:
            offset (int):
                The offset of the character.

        Returns:
            int:
            The code point of the character.
        """
        return self.elements[offset]

    def is_strongly_equal(
        self,
        offset1: int,
        offset2: int,
    ) -> bool:
        """Return whether two characters are equal.

        Args:
            offset1 (int):
                The offset of the first character.

            offset2 (int):
                The offset of the second character.

        Returns:
            bool:
            ``True`` if the characters are equal.
        """
        return self.elements[offset1] == self.elements[offset2]

    def boundary_score(
        self,
        length: int,
    ) -> int:
        """Return how good of a place a diff boundary would be.

        Boundaries at line breaks, separators and changes between kinds of
        characters score higher than boundaries in the middle of a word.

        Args:
            length (int):
                The offset of the boundary.

        Returns:
            int:
            The score. Higher is better.
        """
        if length > 0:
            prev_category = get_char_category(self.elements[length - 1])
        else:
            prev_category = get_char_category(-1)

        if length < self.length:
            next_category = get_char_category(self.elements[length])
        else:
            next_category = get_char_category(-1)

        if (prev_category == CharBoundaryCategory.LINE_BREAK_CR and
            next_category == CharBoundaryCategory.LINE_BREAK_LF):
            # Never split a CRLF.
            return 0

        if prev_category == CharBoundaryCategory.LINE_BREAK_LF:
            return 150

        score = 0

        if prev_category != next_category:
            score += 10

            if (prev_category == CharBoundaryCategory.WORD_LOWER and
                next_category == CharBoundaryCategory.WORD_UPPER):
                score += 1

        score += CHAR_BOUNDARY_SCORES[prev_category]
        score += CHAR_BOUNDARY_SCORES[next_category]

        return score

    def translate_offset(
        self,
        offset: int,
        preference: OffsetPreference = 'right',
    ) -> Position:
        """Return the position in the document for an offset.

        Offsets at the start of a line that had leading whitespace removed
        are ambiguous. With a ``right`` preference they land after the
        whitespace, and with a ``left`` preference before it.

        Args:
            offset (int):
                The offset in the sequence.

            preference (str, optional):
                Which side of removed leading whitespace to land on.

        Returns:
            diffcore.ranges.Position:
            The 1-based position in the document.
        """
        i = bisect_right(self.first_element_offset_by_line_idx, offset) - 1
        line_offset = offset - self.first_element_offset_by_line_idx[i]

        if line_offset == 0 and preference == 'left':
            trimmed_ws_length = 0
        else:
            trimmed_ws_length = self.trimmed_ws_lengths_by_line_idx[i]

        return Position(
            self.range.start_line_number + i,
            1 + self.line_start_offsets[i] + line_offset + trimmed_ws_length)

    def translate_range(
        self,
        offset_range: OffsetRange,
    ) -> CharRange:
        """Return the range in the document for a range of offsets.

        Args:
            offset_range (diffcore.ranges.OffsetRange):
                The range of offsets in the sequence.

        Returns:
            diffcore.ranges.CharRange:
            The range in the document. If the translated end would come
            before the start, this is an empty range at the end.
        """
        pos1 = self.translate_offset(offset_range.start, 'right')
        pos2 = self.translate_offset(offset_range.end_exclusive, 'left')

        if pos2.is_before(pos1):
            return CharRange.from_positions(pos2, pos2)

        return CharRange.from_positions(pos1, pos2)

    def get_text(
        self,
        offset_range: OffsetRange,
    ) -> str:
        """Return the text for a range of offsets.

        Args:
            offset_range (diffcore.ranges.OffsetRange):
                The range of offsets.

        Returns:
            str:
            The text in the range.
        """
        return self.text[offset_range.start:offset_range.end_exclusive]

    def find_word_containing(
        self,
        offset: int,
    ) -> OffsetRange | None:
        """Return the range of the word containing an offset.

        Words are runs of ASCII letters and digits.

        Args:
            offset (int):
                The offset to look at.

        Returns:
            diffcore.ranges.OffsetRange:
            The range of the word, or ``None`` if the offset is out of range
            or not on a word character.
        """
        elements = self.elements

        if offset < 0 or offset >= self.length:
            return None

        if not is_word_char(elements[offset]):
            return None

        start = offset

        while start > 0 and is_word_char(elements[start - 1]):
            start -= 1

        end = offset

        while end < self.length and is_word_char(elements[end]):
            end += 1

        return OffsetRange(start, end)

    def find_subword_containing(
        self,
        offset: int,
    ) -> OffsetRange | None:
        """Return the range of the subword containing an offset.

        Subwords are words further split before each uppercase letter, so
        ``getUserName`` consists of ``get``, ``User`` and ``Name``.

        An uppercase letter only starts a subword. Looking it up directly
        gives an empty range at its offset.

        Args:
            offset (int):
                The offset to look at.

        Returns:
            diffcore.ranges.OffsetRange:
            The range of the subword, or ``None`` if the offset is out of
            range or not on a word character.
        """
        elements = self.elements

        if offset < 0 or offset >= self.length:
            return None

        if not is_word_char(elements[offset]):
            return None

        start = offset

        while (start > 0 and
               is_word_char(elements[start - 1]) and
               not is_upper_case(elements[start])):
            start -= 1

        end = offset

        while (end < self.length and
               is_word_char(elements[end]) and
               not is_upper_case(elements[end])):
            end += 1

        return OffsetRange(start, end)

    def count_lines_in(
        self,
        offset_range: OffsetRange,
    ) -> int:
        """Return the number of line breaks a range of offsets spans.

        Args:
            offset_range (diffcore.ranges.OffsetRange):
                The range of offsets.

        Returns:
            int:
            The number of lines the range crosses into.
        """
        return (self.translate_offset(offset_range.end_exclusive).line_number -
                self.translate_offset(offset_range.start).line_number)

    def extend_to_full_lines(
        self,
        offset_range: OffsetRange,
    ) -> OffsetRange:
        """Return a range of offsets widened to cover whole lines.

        Args:
            offset_range (diffcore.ranges.OffsetRange):
                The range of offsets.

        Returns:
            diffcore.ranges.OffsetRange:
            The range, starting at the start of its first line and ending at
            the start of the line after its last line (or the end of the
            sequence).
        """
        line_offsets = self.first_element_offset_by_line_idx

        i = bisect_right(line_offsets, offset_range.start) - 1
        start = line_offsets[i] if i >= 0 else 0

        j = bisect_left(line_offsets, offset_range.end_exclusive)
        end = line_offsets[j] if j < len(line_offsets) else self.length

        return OffsetRange(start, end)
