"""Settings used to control diff computation."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields as dataclass_fields
from hashlib import sha256
from typing import Optional

from django.conf import settings
from django.utils.functional import cached_property


@dataclass
class DiffOptions:
    """Options used to compute a diff.

    These control how whitespace is treated, how far words are extended
    when highlighting character changes, and how long a computation may
    run. Defaults come from the Django settings, when configured.
    """

    #: Whether leading and trailing whitespace on lines is ignored.
    #:
    #: Lines are always aligned with surrounding whitespace ignored. If this
    #: is ``False``, lines that only differ in that whitespace are reported
    #: as changed, and whitespace is included when finding character changes.
    #:
    #: Type:
    #:     bool
    ignore_trim_whitespace: bool = True

    #: The time budget for a computation, in milliseconds.
    #:
    #: A value of 0 means the computation is unbounded.
    #:
    #: Type:
    #:     int
    max_computation_time_ms: int = 5000

    #: Whether character changes are extended to camelCase subwords.
    #:
    #: Type:
    #:     bool
    extend_to_subwords: bool = False

    @classmethod
    def create(
        cls,
        *,
        ignore_trim_whitespace: Optional[bool] = None,
        max_computation_time_ms: Optional[int] = None,
        extend_to_subwords: Optional[bool] = None,
    ) -> DiffOptions:
        """Create diff options based on the provided arguments.

        Any option not provided is read from the Django settings, if they're
        configured. The rest are left at their defaults.

        Args:
            ignore_trim_whitespace (bool, optional):
                An explicit value for :py:attr:`ignore_trim_whitespace`.

            max_computation_time_ms (int, optional):
                An explicit value for :py:attr:`max_computation_time_ms`.

            extend_to_subwords (bool, optional):
                An explicit value for :py:attr:`extend_to_subwords`.

        Returns:
            DiffOptions:
            The options for computing the diff.
        """
        defaults = cls()

        if settings.configured:
            if ignore_trim_whitespace is None:
                ignore_trim_whitespace = getattr(
                    settings, 'DIFFCORE_IGNORE_TRIM_WHITESPACE', None)

            if max_computation_time_ms is None:
                max_computation_time_ms = getattr(
                    settings, 'DIFFCORE_MAX_COMPUTATION_TIME_MS', None)

            if extend_to_subwords is None:
                extend_to_subwords = getattr(
                    settings, 'DIFFCORE_EXTEND_TO_SUBWORDS', None)

        if ignore_trim_whitespace is None:
            ignore_trim_whitespace = defaults.ignore_trim_whitespace

        if max_computation_time_ms is None:
            max_computation_time_ms = defaults.max_computation_time_ms

        if extend_to_subwords is None:
            extend_to_subwords = defaults.extend_to_subwords

        return cls(
            ignore_trim_whitespace=ignore_trim_whitespace,
            max_computation_time_ms=max_computation_time_ms,
            extend_to_subwords=extend_to_subwords)

    @property
    def consider_whitespace_changes(self) -> bool:
        """Whether whitespace around lines counts as a change.

        Type:
            bool
        """
        return not self.ignore_trim_whitespace

    @cached_property
    def state_hash(self) -> str:
        """Return a hash of the current options.

        This can be used as a component in cache keys to ensure that changes
        to the options trigger re-computations of diffs.

        This is calculated only once per instance. It won't take into account
        any changes since the first access.

        Type:
            str
        """
        return sha256(
            json.dumps(
                {
                    field.name: getattr(self, field.name)
                    for field in dataclass_fields(self)
                },
                sort_keys=True)
            .encode('utf-8')
        ).hexdigest()
