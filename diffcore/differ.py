"""Base definitions for diff algorithm implementations."""

from __future__ import annotations

from collections.abc import Callable
from typing import Literal, TYPE_CHECKING

from diffcore.errors import UnknownDiffAlgorithmError
from diffcore.ranges import OffsetRange, SequenceDiff

if TYPE_CHECKING:
    from typing_extensions import TypeAlias

    from diffcore.sequences import BaseSequence
    from diffcore.timeout import Timeout


#: The identifiers for the available diff algorithms.
DiffAlgorithmID: TypeAlias = Literal[
    'dp',
    'myers',
]


#: A function scoring how well two elements match.
#:
#: This takes an offset into each sequence and returns a score. Higher
#: scores make the pair more desirable to align.
EqualityScoreFunc: TypeAlias = Callable[[int, int], float]


class DiffAlgorithmType:
    """Identifiers for the diff algorithms."""

    #: The bounded dynamic programming aligner.
    DYNAMIC_PROGRAMMING: DiffAlgorithmID = 'dp'

    #: The Myers O(ND) algorithm.
    MYERS: DiffAlgorithmID = 'myers'


class DiffAlgorithmResult:
    """The result of running a diff algorithm."""

    ######################
    # Instance variables #
    ######################

    #: The differences found, sorted by their position in the first sequence.
    diffs: list[SequenceDiff]

    #: Whether the algorithm ran out of time.
    #:
    #: If set, :py:attr:`diffs` is a single diff covering both sequences.
    hit_timeout: bool

    @classmethod
    def trivial(
        cls,
        seq1: BaseSequence,
        seq2: BaseSequence,
    ) -> DiffAlgorithmResult:
        """Return a result treating both sequences as entirely different.

        Args:
            seq1 (diffcore.sequences.BaseSequence):
                The first sequence.

            seq2 (diffcore.sequences.BaseSequence):
                The second sequence.

        Returns:
            DiffAlgorithmResult:
            A result with one diff spanning both sequences, or no diffs if
            both sequences are empty.
        """
        return cls(cls._whole_range_diffs(seq1, seq2), hit_timeout=False)

    @classmethod
    def trivial_timed_out(
        cls,
        seq1: BaseSequence,
        seq2: BaseSequence,
    ) -> DiffAlgorithmResult:
        """Return a fallback result for an algorithm that ran out of time.

        Args:
            seq1 (diffcore.sequences.BaseSequence):
                The first sequence.

            seq2 (diffcore.sequences.BaseSequence):
                The second sequence.

        Returns:
            DiffAlgorithmResult:
            A result with one diff spanning both sequences, flagged as having
            timed out.
        """
        return cls(cls._whole_range_diffs(seq1, seq2), hit_timeout=True)

    @staticmethod
    def _whole_range_diffs(
        seq1: BaseSequence,
        seq2: BaseSequence,
    ) -> list[SequenceDiff]:
        """Return a diff list covering the whole of both sequences.

        Args:
            seq1 (diffcore.sequences.BaseSequence):
                The first sequence.

            seq2 (diffcore.sequences.BaseSequence):
                The second sequence.

        Returns:
            list of diffcore.ranges.SequenceDiff:
            The diffs.
        """
        if seq1.length == 0 and seq2.length == 0:
            return []

        return [
            SequenceDiff(OffsetRange.of_length(seq1.length),
                         OffsetRange.of_length(seq2.length)),
        ]

    def __init__(
        self,
        diffs: list[SequenceDiff],
        hit_timeout: bool,
    ) -> None:
        """Initialize the result.

        Args:
            diffs (list of diffcore.ranges.SequenceDiff):
                The differences found.

            hit_timeout (bool):
                Whether the algorithm ran out of time.
        """
        self.diffs = diffs
        self.hit_timeout = hit_timeout

    def __repr__(self) -> str:
        return (f'<DiffAlgorithmResult(diffs={self.diffs!r}, '
                f'hit_timeout={self.hit_timeout!r})>')


class DiffAlgorithm:
    """Base class for diff algorithms.

    A diff algorithm takes two sequences and finds the differences between
    them. Algorithms work on any kind of sequence, so the same algorithm is
    used for lines and for characters.
    """

    #: The identifier for the algorithm.
    algorithm_id: DiffAlgorithmID

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
                The time budget for the computation. If not provided, the
                computation is unbounded.

            equality_score (callable, optional):
                A function scoring pairs of elements. Algorithms that don't
                weigh alignments ignore this.

        Returns:
            DiffAlgorithmResult:
            The result of the computation.
        """
        raise NotImplementedError


def get_diff_algorithm(
    algorithm_id: str,
) -> DiffAlgorithm:
    """Return a diff algorithm for the given identifier.

    Args:
        algorithm_id (str):
            The identifier of the algorithm. This is one of the values in
            :py:class:`DiffAlgorithmType`.

    Returns:
        DiffAlgorithm:
        The new algorithm instance.

    Raises:
        diffcore.errors.UnknownDiffAlgorithmError:
            The identifier was not valid.
    """
    cls: type[DiffAlgorithm]

    if algorithm_id == DiffAlgorithmType.MYERS:
        from diffcore.myersdiff import MyersDiffAlgorithm
        cls = MyersDiffAlgorithm
    elif algorithm_id == DiffAlgorithmType.DYNAMIC_PROGRAMMING:
        from diffcore.dpdiff import DynamicProgrammingDiffAlgorithm
        cls = DynamicProgrammingDiffAlgorithm
    else:
        raise UnknownDiffAlgorithmError(algorithm_id)

    return cls()
