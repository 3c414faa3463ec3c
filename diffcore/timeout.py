"""Cooperative time limits for diff computations."""

from __future__ import annotations

import time


class Timeout:
    """A wall-clock budget for a diff computation.

    Algorithms poll :py:meth:`is_valid` at safe points and fall back to a
    coarse result once it returns ``False``. A budget of 0 milliseconds never
    expires.

    Once a timeout has expired, it stays expired.
    """

    ######################
    # Instance variables #
    ######################

    #: The budget in milliseconds, or 0 if unbounded.
    timeout_ms: int

    #: The monotonic clock time when the budget began, in seconds.
    start_time: float

    #: Whether the budget has been used up.
    _expired: bool

    def __init__(
        self,
        timeout_ms: int = 0,
    ) -> None:
        """Initialize the timeout.

        Args:
            timeout_ms (int, optional):
                The number of milliseconds before the timeout expires. 0
                means the computation is unbounded.

        Raises:
            ValueError:
                The timeout was negative.
        """
        if timeout_ms < 0:
            raise ValueError('timeout_ms must not be negative')

        self.timeout_ms = timeout_ms
        self.start_time = time.monotonic()
        self._expired = False

    @property
    def is_unbounded(self) -> bool:
        """Whether this timeout can never expire."""
        return self.timeout_ms == 0

    def is_valid(self) -> bool:
        """Return whether there is still time left.

        Returns:
            bool:
            ``True`` if the computation may continue.
        """
        if self._expired:
            return False

        if self.timeout_ms == 0:
            return True

        elapsed_ms = (time.monotonic() - self.start_time) * 1000

        if elapsed_ms >= self.timeout_ms:
            self._expired = True

        return not self._expired
