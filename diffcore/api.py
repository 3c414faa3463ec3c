"""Public API for computing diffs.

This collects the main entry points and types in one place, for callers
that don't need to know which module each lives in.
"""

from __future__ import annotations

from diffcore.chardiff import (RefinedDiff,
                               refine_diff,
                               refine_to_character_level)
from diffcore.computer import compute_diff
from diffcore.differ import (DiffAlgorithm,
                             DiffAlgorithmResult,
                             DiffAlgorithmType,
                             get_diff_algorithm)
from diffcore.dpdiff import DynamicProgrammingDiffAlgorithm
from diffcore.errors import (DiffCoreError,
                             InvalidRangeError,
                             InvalidSequenceError,
                             UnknownDiffAlgorithmError)
from diffcore.hashing import PerfectHashTable
from diffcore.linediff import compute_line_alignments
from diffcore.myersdiff import MyersDiffAlgorithm
from diffcore.ranges import (CharRange,
                             DetailedLineRangeMapping,
                             LineRange,
                             LinesDiff,
                             OffsetRange,
                             Position,
                             RangeMapping,
                             SequenceDiff)
from diffcore.sequences import (BaseSequence,
                                CharSequence,
                                ElementSequence,
                                LineSequence)
from diffcore.settings import DiffOptions
from diffcore.timeout import Timeout


__all__ = [
    'BaseSequence',
    'CharRange',
    'CharSequence',
    'DetailedLineRangeMapping',
    'DiffAlgorithm',
    'DiffAlgorithmResult',
    'DiffAlgorithmType',
    'DiffCoreError',
    'DiffOptions',
    'DynamicProgrammingDiffAlgorithm',
    'ElementSequence',
    'InvalidRangeError',
    'InvalidSequenceError',
    'LineRange',
    'LineSequence',
    'LinesDiff',
    'MyersDiffAlgorithm',
    'OffsetRange',
    'PerfectHashTable',
    'Position',
    'RangeMapping',
    'RefinedDiff',
    'SequenceDiff',
    'Timeout',
    'UnknownDiffAlgorithmError',
    'compute_diff',
    'compute_line_alignments',
    'get_diff_algorithm',
    'refine_diff',
    'refine_to_character_level',
]
