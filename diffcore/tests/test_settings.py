"""Unit tests for diffcore.settings."""

from __future__ import annotations

from diffcore.settings import DiffOptions
from diffcore.testing import TestCase


class DiffOptionsTests(TestCase):
    """Unit tests for diffcore.settings.DiffOptions."""

    def test_create_with_defaults(self) -> None:
        """Testing DiffOptions.create with default settings"""
        options = DiffOptions.create()

        self.assertTrue(options.ignore_trim_whitespace)
        self.assertEqual(options.max_computation_time_ms, 5000)
        self.assertFalse(options.extend_to_subwords)
        self.assertFalse(options.consider_whitespace_changes)

    def test_create_with_settings(self) -> None:
        """Testing DiffOptions.create with values from settings"""
        with self.settings(DIFFCORE_IGNORE_TRIM_WHITESPACE=False,
                           DIFFCORE_MAX_COMPUTATION_TIME_MS=100,
                           DIFFCORE_EXTEND_TO_SUBWORDS=True):
            options = DiffOptions.create()

        self.assertFalse(options.ignore_trim_whitespace)
        self.assertEqual(options.max_computation_time_ms, 100)
        self.assertTrue(options.extend_to_subwords)
        self.assertTrue(options.consider_whitespace_changes)

    def test_create_with_overrides(self) -> None:
        """Testing DiffOptions.create with explicit values overriding
        settings
        """
        with self.settings(DIFFCORE_IGNORE_TRIM_WHITESPACE=False,
                           DIFFCORE_MAX_COMPUTATION_TIME_MS=100):
            options = DiffOptions.create(ignore_trim_whitespace=True,
                                         max_computation_time_ms=0)

        self.assertEqual(
            options,
            DiffOptions(ignore_trim_whitespace=True,
                        max_computation_time_ms=0,
                        extend_to_subwords=False))

    def test_state_hash(self) -> None:
        """Testing DiffOptions.state_hash"""
        options = DiffOptions.create()
        state_hash = options.state_hash

        self.assertEqual(len(state_hash), 64)
        self.assertEqual(state_hash, DiffOptions.create().state_hash)
        self.assertNotEqual(
            state_hash,
            DiffOptions.create(extend_to_subwords=True).state_hash)
