"""Configures pytest and Django environment setup for DiffCore.

.. important::

   Do not define plugins in this file! Plugins must be in a different
   package (such as in diffcore/testing/). pytest overrides importers for
   plugins and all modules descending from that module level.
"""

import os
import sys

import django

import diffcore


sys.path.insert(0, os.path.join(os.path.dirname(__file__)))


diffcore.initialize()


pytest_plugins = ['diffcore.testing.pytest_fixtures']


def pytest_report_header(config):
    """Return information for the report header.

    This will log the versions of DiffCore and Django.

    Args:
        config (object):
            The pytest configuration object.

    Returns:
        list of str:
        The report header entries to log.
    """
    return [
        'DiffCore: %s' % diffcore.get_version_string(),
        'Django: %s' % django.get_version(),
    ]
