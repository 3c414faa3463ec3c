"""Error classes for diff computation."""

from __future__ import annotations

from django.utils.translation import gettext as _


class DiffCoreError(Exception):
    """Base class for errors raised while computing a diff.

    This is also raised directly when an internal invariant is broken, which
    indicates a bug rather than bad input.
    """


class InvalidSequenceError(DiffCoreError, ValueError):
    """Input lines or sequences were missing or of the wrong type."""


class InvalidRangeError(DiffCoreError, ValueError):
    """A range was negative, inverted, or out of bounds."""

    def __init__(
        self,
        start: int,
        end: int,
        message: (str | None) = None,
    ) -> None:
        """Initialize the error.

        Args:
            start (int):
                The start of the offending range.

            end (int):
                The exclusive end of the offending range.

            message (str, optional):
                A custom message to display. A default message describing
                the range will be used if not provided.
        """
        if message is None:
            message = (
                _('Invalid range [{start}, {end})')
                .format(start=start, end=end)
            )

        super().__init__(message)

        self.start = start
        self.end = end


class UnknownDiffAlgorithmError(DiffCoreError):
    """An unknown diff algorithm identifier was requested."""

    def __init__(
        self,
        algorithm_id: str,
    ) -> None:
        """Initialize the error.

        Args:
            algorithm_id (str):
                The identifier that was requested.
        """
        super().__init__(
            _('Invalid diff algorithm ({algorithm_id}) requested')
            .format(algorithm_id=algorithm_id))

        self.algorithm_id = algorithm_id
