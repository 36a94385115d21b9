# -*- coding: utf-8 -*-
"""Tests for the package logger helpers."""
from __future__ import annotations

import logging
import unittest

from batch_i18n.utils.logging import compact_json, i18n_logger, set_level, temporarily


class TestLevels(unittest.TestCase):
    """Test level resolution on the package logger."""

    def setUp(self):
        self._old = i18n_logger.level

    def tearDown(self):
        i18n_logger.setLevel(self._old)

    def test_set_level(self):
        self.assertEqual(set_level("debug"), logging.DEBUG)
        self.assertEqual(i18n_logger.level, logging.DEBUG)

    def test_unknown_level_keeps_current(self):
        i18n_logger.setLevel(logging.ERROR)
        self.assertEqual(set_level("LOUD"), logging.ERROR)
        self.assertEqual(set_level(None), logging.ERROR)

    def test_temporarily(self):
        i18n_logger.setLevel(logging.WARNING)
        with temporarily(logging.DEBUG):
            self.assertEqual(i18n_logger.level, logging.DEBUG)
        self.assertEqual(i18n_logger.level, logging.WARNING)


class TestCompactJson(unittest.TestCase):
    """Test JSON shortening for log lines."""

    def test_keeps_text(self):
        self.assertEqual(compact_json({"保存": "保存"}), '{"保存":"保存"}')

    def test_truncates(self):
        out = compact_json({"k": "x" * 50}, limit=10)
        self.assertTrue(out.endswith("…(truncated)"))
        self.assertEqual(len(out), 10 + len("…(truncated)"))

    def test_unserializable(self):
        self.assertEqual(compact_json({1}), "{1}")


if __name__ == "__main__":
    unittest.main()
