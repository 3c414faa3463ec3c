"""Collision-free identifiers for line contents."""

from __future__ import annotations


class PerfectHashTable:
    """Assigns small, unique integers to distinct strings.

    The first string seen gets 0, the next distinct string gets 1, and so
    on. Equal strings always map to the same identifier and distinct strings
    never share one, so identifiers can be compared in place of the strings.

    A table is meant to be created for a single diff computation and shared
    by both sides of it, so that identical lines on either side receive the
    same identifier. Identifiers are meaningless across tables.
    """

    ######################
    # Instance variables #
    ######################

    #: A mapping from string contents to their assigned identifiers.
    code_table: dict[str, int]

    def __init__(self) -> None:
        """Initialize the table."""
        self.code_table = {}

    def get_or_create(
        self,
        text: str,
    ) -> int:
        """Return the identifier for a string, assigning one if needed.

        Args:
            text (str):
                The string to look up.

        Returns:
            int:
            The identifier for the string.
        """
        code = self.code_table.get(text)

        if code is None:
            code = len(self.code_table)
            self.code_table[text] = code

        return code

    def size(self) -> int:
        """Return the number of distinct strings seen.

        Returns:
            int:
            The number of identifiers assigned.
        """
        return len(self.code_table)

    def __len__(self) -> int:
        return len(self.code_table)
