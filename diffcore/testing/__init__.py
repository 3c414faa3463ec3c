"""Unit test infrastructure for DiffCore."""

from __future__ import annotations

import importlib
from typing import Any, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from diffcore.testing.testcase import TestCase


__all__ = [
    'TestCase',
]


_TestCase: Optional[type[TestCase]] = None


def __getattr__(
    name: str,
) -> Any:
    """Return an attribute for the module.

    This will handle lazily-importing
    :py:class:`diffcore.testing.testcase.TestCase`. The lazy import is
    necessary to avoid importing Django's test machinery before settings
    have been configured.

    This isn't invoked for attributes defined normally in this module.

    Args:
        name (str):
            The attribute to import.

    Returns:
        object:
        The resulting attribute value.

    Raises:
        AttributeError:
            The attribute was not found.
    """
    global _TestCase

    if name == 'TestCase':
        if _TestCase is None:
            _TestCase = (
                importlib.import_module('diffcore.testing.testcase')
                .TestCase
            )

        return _TestCase

    raise AttributeError(f'module {__name__!r} has no attribute {name!r}')
