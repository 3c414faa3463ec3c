"""Range and mapping types shared by the diff algorithms.

Offsets into sequences are 0-based and ranges over them are half-open.
Positions in text (lines and columns) are 1-based, matching how editors
present them.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from diffcore.errors import InvalidRangeError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


@dataclass(frozen=True)
class OffsetRange:
    """A half-open range of offsets into a sequence.

    The start of the range may be greater than 0 or negative while
    heuristics are adjusting it, but it may never be greater than the end.
    """

    #: The first offset in the range.
    start: int

    #: The offset just past the end of the range.
    end_exclusive: int

    def __post_init__(self) -> None:
        """Validate the range.

        Raises:
            diffcore.errors.InvalidRangeError:
                The start of the range is after the end.
        """
        if self.start > self.end_exclusive:
            raise InvalidRangeError(self.start, self.end_exclusive)

    @classmethod
    def of_length(
        cls,
        length: int,
    ) -> OffsetRange:
        """Return a range starting at 0 with the given length.

        Args:
            length (int):
                The length of the range.

        Returns:
            OffsetRange:
            The new range.
        """
        return cls(0, length)

    @property
    def length(self) -> int:
        """The number of offsets in the range."""
        return self.end_exclusive - self.start

    @property
    def is_empty(self) -> bool:
        """Whether the range contains no offsets."""
        return self.start == self.end_exclusive

    def delta(
        self,
        offset: int,
    ) -> OffsetRange:
        """Return this range moved by the given offset.

        Args:
            offset (int):
                The amount to move the range by.

        Returns:
            OffsetRange:
            The moved range.
        """
        return OffsetRange(self.start + offset, self.end_exclusive + offset)

    def delta_start(
        self,
        offset: int,
    ) -> OffsetRange:
        """Return this range with only the start moved.

        Args:
            offset (int):
                The amount to move the start by.

        Returns:
            OffsetRange:
            The new range.
        """
        return OffsetRange(self.start + offset, self.end_exclusive)

    def delta_end(
        self,
        offset: int,
    ) -> OffsetRange:
        """Return this range with only the end moved.

        Args:
            offset (int):
                The amount to move the end by.

        Returns:
            OffsetRange:
            The new range.
        """
        return OffsetRange(self.start, self.end_exclusive + offset)

    def join(
        self,
        other: OffsetRange,
    ) -> OffsetRange:
        """Return the smallest range covering this range and another.

        Args:
            other (OffsetRange):
                The range to join with.

        Returns:
            OffsetRange:
            The joined range.
        """
        return OffsetRange(min(self.start, other.start),
                           max(self.end_exclusive, other.end_exclusive))

    def intersect(
        self,
        other: OffsetRange,
    ) -> OffsetRange | None:
        """Return the intersection of this range and another.

        Ranges that only touch intersect as an empty range.

        Args:
            other (OffsetRange):
                The range to intersect with.

        Returns:
            OffsetRange:
            The intersection, or ``None`` if the ranges are disjoint.
        """
        start = max(self.start, other.start)
        end = min(self.end_exclusive, other.end_exclusive)

        if start <= end:
            return OffsetRange(start, end)

        return None

    def intersects(
        self,
        other: OffsetRange,
    ) -> bool:
        """Return whether this range shares at least one offset with another.

        Args:
            other (OffsetRange):
                The range to check.

        Returns:
            bool:
            ``True`` if the ranges overlap.
        """
        return (max(self.start, other.start) <
                min(self.end_exclusive, other.end_exclusive))

    def __str__(self) -> str:
        return f'[{self.start}, {self.end_exclusive})'


@dataclass(frozen=True)
class OffsetPair:
    """A pair of offsets, one into each of two sequences."""

    #: The offset into the first sequence.
    offset1: int

    #: The offset into the second sequence.
    offset2: int

    def delta(
        self,
        offset: int,
    ) -> OffsetPair:
        """Return this pair with both offsets moved.

        Args:
            offset (int):
                The amount to move both offsets by.

        Returns:
            OffsetPair:
            The moved pair.
        """
        return OffsetPair(self.offset1 + offset, self.offset2 + offset)


#: A pair of offsets at the start of both sequences.
OffsetPair.ZERO = OffsetPair(0, 0)

#: A pair of offsets past the end of any sequence.
OffsetPair.MAX = OffsetPair(sys.maxsize, sys.maxsize)


@dataclass(frozen=True)
class SequenceDiff:
    """A changed region between two sequences.

    An empty range on one side means the region is a pure insertion or
    deletion.
    """

    #: The range in the first (original) sequence.
    seq1_range: OffsetRange

    #: The range in the second (modified) sequence.
    seq2_range: OffsetRange

    @classmethod
    def from_offsets(
        cls,
        seq1_start: int,
        seq1_end: int,
        seq2_start: int,
        seq2_end: int,
    ) -> SequenceDiff:
        """Return a diff built from raw offsets.

        Args:
            seq1_start (int):
                The start of the range in the first sequence.

            seq1_end (int):
                The exclusive end of the range in the first sequence.

            seq2_start (int):
                The start of the range in the second sequence.

            seq2_end (int):
                The exclusive end of the range in the second sequence.

        Returns:
            SequenceDiff:
            The new diff.
        """
        return cls(OffsetRange(seq1_start, seq1_end),
                   OffsetRange(seq2_start, seq2_end))

    @classmethod
    def from_offset_pairs(
        cls,
        start: OffsetPair,
        end_exclusive: OffsetPair,
    ) -> SequenceDiff:
        """Return a diff spanning two offset pairs.

        Args:
            start (OffsetPair):
                The starting offsets.

            end_exclusive (OffsetPair):
                The exclusive ending offsets.

        Returns:
            SequenceDiff:
            The new diff.
        """
        return cls(OffsetRange(start.offset1, end_exclusive.offset1),
                   OffsetRange(start.offset2, end_exclusive.offset2))

    @classmethod
    def invert(
        cls,
        sequence_diffs: Sequence[SequenceDiff],
        doc1_length: int,
    ) -> list[SequenceDiff]:
        """Return the unchanged regions between a list of diffs.

        Args:
            sequence_diffs (list of SequenceDiff):
                The sorted diffs to invert.

            doc1_length (int):
                The length of the first sequence.

        Returns:
            list of SequenceDiff:
            The regions not covered by any diff, including empty ones.
        """
        result: list[SequenceDiff] = []

        def _add(
            before: SequenceDiff | None,
            after: SequenceDiff | None,
        ) -> None:
            if before is None:
                start = OffsetPair.ZERO
            else:
                start = before.get_end_exclusives()

            if after is None:
                if before is None:
                    seq2_delta = 0
                else:
                    seq2_delta = (before.seq2_range.end_exclusive -
                                  before.seq1_range.end_exclusive)

                end = OffsetPair(doc1_length, doc1_length + seq2_delta)
            else:
                end = after.get_starts()

            result.append(cls.from_offset_pairs(start, end))

        prev: SequenceDiff | None = None

        for diff in sequence_diffs:
            _add(prev, diff)
            prev = diff

        _add(prev, None)

        return result

    def swap(self) -> SequenceDiff:
        """Return this diff with the two sides exchanged.

        Returns:
            SequenceDiff:
            The swapped diff.
        """
        return SequenceDiff(self.seq2_range, self.seq1_range)

    def join(
        self,
        other: SequenceDiff,
    ) -> SequenceDiff:
        """Return the smallest diff covering this diff and another.

        Args:
            other (SequenceDiff):
                The diff to join with.

        Returns:
            SequenceDiff:
            The joined diff.
        """
        return SequenceDiff(self.seq1_range.join(other.seq1_range),
                            self.seq2_range.join(other.seq2_range))

    def delta(
        self,
        offset: int,
    ) -> SequenceDiff:
        """Return this diff with both sides moved by an offset.

        Args:
            offset (int):
                The amount to move by. This may be negative.

        Returns:
            SequenceDiff:
            The moved diff.
        """
        if offset == 0:
            return self

        return SequenceDiff(self.seq1_range.delta(offset),
                            self.seq2_range.delta(offset))

    def delta_start(
        self,
        offset: int,
    ) -> SequenceDiff:
        """Return this diff with the start of both sides moved.

        Args:
            offset (int):
                The amount to move by.

        Returns:
            SequenceDiff:
            The new diff.
        """
        if offset == 0:
            return self

        return SequenceDiff(self.seq1_range.delta_start(offset),
                            self.seq2_range.delta_start(offset))

    def delta_end(
        self,
        offset: int,
    ) -> SequenceDiff:
        """Return this diff with the end of both sides moved.

        Args:
            offset (int):
                The amount to move by.

        Returns:
            SequenceDiff:
            The new diff.
        """
        if offset == 0:
            return self

        return SequenceDiff(self.seq1_range.delta_end(offset),
                            self.seq2_range.delta_end(offset))

    def intersect(
        self,
        other: SequenceDiff,
    ) -> SequenceDiff | None:
        """Return the intersection of this diff and another, side by side.

        Args:
            other (SequenceDiff):
                The diff to intersect with.

        Returns:
            SequenceDiff:
            The intersection, or ``None`` if either side is disjoint.
        """
        i1 = self.seq1_range.intersect(other.seq1_range)
        i2 = self.seq2_range.intersect(other.seq2_range)

        if i1 is None or i2 is None:
            return None

        return SequenceDiff(i1, i2)

    def get_starts(self) -> OffsetPair:
        """Return the start offsets of both sides.

        Returns:
            OffsetPair:
            The start offsets.
        """
        return OffsetPair(self.seq1_range.start, self.seq2_range.start)

    def get_end_exclusives(self) -> OffsetPair:
        """Return the exclusive end offsets of both sides.

        Returns:
            OffsetPair:
            The end offsets.
        """
        return OffsetPair(self.seq1_range.end_exclusive,
                          self.seq2_range.end_exclusive)

    def __str__(self) -> str:
        return f'{self.seq1_range} <-> {self.seq2_range}'


@dataclass(frozen=True, order=True)
class Position:
    """A 1-based line and column in a document."""

    #: The line number.
    line_number: int

    #: The column.
    column: int

    def is_before(
        self,
        other: Position,
    ) -> bool:
        """Return whether this position comes strictly before another.

        Args:
            other (Position):
                The position to compare against.

        Returns:
            bool:
            ``True`` if this position is before ``other``.
        """
        return (self.line_number, self.column) < (other.line_number,
                                                  other.column)


@dataclass(frozen=True)
class CharRange:
    """A range of characters in a document.

    Lines and columns are 1-based. The end position is exclusive.
    """

    start_line_number: int
    start_column: int
    end_line_number: int
    end_column: int

    @classmethod
    def from_positions(
        cls,
        start: Position,
        end: Position,
    ) -> CharRange:
        """Return a range between two positions.

        Args:
            start (Position):
                The start position.

            end (Position):
                The exclusive end position.

        Returns:
            CharRange:
            The new range.
        """
        return cls(start.line_number, start.column,
                   end.line_number, end.column)

    def __str__(self) -> str:
        return (f'[{self.start_line_number},{self.start_column} -> '
                f'{self.end_line_number},{self.end_column})')


@dataclass(frozen=True)
class LineRange:
    """A half-open range of 1-based line numbers."""

    #: The first line number in the range.
    start_line_number: int

    #: The line number just past the end of the range.
    end_line_number_exclusive: int

    def __post_init__(self) -> None:
        """Validate the range.

        Raises:
            diffcore.errors.InvalidRangeError:
                The start of the range is after the end.
        """
        if self.start_line_number > self.end_line_number_exclusive:
            raise InvalidRangeError(self.start_line_number,
                                    self.end_line_number_exclusive)

    @classmethod
    def from_offset_range(
        cls,
        offset_range: OffsetRange,
    ) -> LineRange:
        """Return the line range for a range of 0-based line offsets.

        Args:
            offset_range (OffsetRange):
                The range of line indexes.

        Returns:
            LineRange:
            The equivalent 1-based line range.
        """
        return cls(offset_range.start + 1, offset_range.end_exclusive + 1)

    @property
    def length(self) -> int:
        """The number of lines in the range."""
        return self.end_line_number_exclusive - self.start_line_number

    @property
    def is_empty(self) -> bool:
        """Whether the range contains no lines."""
        return self.start_line_number == self.end_line_number_exclusive

    def join(
        self,
        other: LineRange,
    ) -> LineRange:
        """Return the smallest range covering this range and another.

        Args:
            other (LineRange):
                The range to join with.

        Returns:
            LineRange:
            The joined range.
        """
        return LineRange(
            min(self.start_line_number, other.start_line_number),
            max(self.end_line_number_exclusive,
                other.end_line_number_exclusive))

    def intersects_or_touches(
        self,
        other: LineRange,
    ) -> bool:
        """Return whether this range overlaps or is adjacent to another.

        Args:
            other (LineRange):
                The range to check.

        Returns:
            bool:
            ``True`` if the ranges overlap or touch.
        """
        return (self.start_line_number <= other.end_line_number_exclusive and
                other.start_line_number <= self.end_line_number_exclusive)

    def __str__(self) -> str:
        return f'[{self.start_line_number},{self.end_line_number_exclusive})'


@dataclass(frozen=True)
class RangeMapping:
    """A character-level change from the original to the modified text."""

    #: The changed characters in the original text.
    original_range: CharRange

    #: The changed characters in the modified text.
    modified_range: CharRange

    def __str__(self) -> str:
        return f'{{{self.original_range}->{self.modified_range}}}'


@dataclass
class DetailedLineRangeMapping:
    """A line-level change with its character-level changes.

    An empty list of inner changes means the lines should be treated as an
    opaque insertion, deletion, or replacement.
    """

    #: The changed lines in the original text.
    original: LineRange

    #: The changed lines in the modified text.
    modified: LineRange

    #: The character-level changes within the lines.
    inner_changes: list[RangeMapping] = field(default_factory=list)

    def __str__(self) -> str:
        return f'{{{self.original}->{self.modified}}}'


@dataclass
class LinesDiff:
    """The result of diffing two documents."""

    #: The changes between the documents, in order.
    changes: list[DetailedLineRangeMapping]

    #: Whether the computation ran out of time.
    #:
    #: If set, the changes are correct but may be far less precise than
    #: they would otherwise be.
    hit_timeout: bool


def group_adjacent_by(
    items: Sequence,
    should_be_grouped: Callable,
) -> list[list]:
    """Group runs of adjacent items.

    Args:
        items (list):
            The items to group.

        should_be_grouped (callable):
            A function taking two adjacent items and returning whether they
            belong to the same group.

    Returns:
        list of list:
        The groups, in order.
    """
    groups: list[list] = []
    current: list = []
    last = None

    for item in items:
        if current and should_be_grouped(last, item):
            current.append(item)
        else:
            if current:
                groups.append(current)

            current = [item]

        last = item

    if current:
        groups.append(current)

    return groups
