# -*- coding: utf-8 -*-
"""Tests for mapping files and the JSON tool helpers."""
from __future__ import annotations

import json
import pathlib
import tempfile
import textwrap
import unittest

from batch_i18n.api.mapping import (
    check_translations,
    diff_mappings,
    diff_report,
    mapping_to_spreadsheet_xml,
    matching_files,
    merge_mappings,
    parse_export_default,
    preview,
    read_mapping,
    resolve_output,
    write_mapping,
)
from batch_i18n.errors import MappingFileError


class TestReadWrite(unittest.TestCase):
    """Test mapping file I/O."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.base = pathlib.Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_round_trip_keeps_order_and_text(self):
        p = write_mapping(self.base / "out" / "m.json", {"取消": "取消", "保存": "保存"})
        raw = p.read_text(encoding="utf-8")
        self.assertIn('"取消": "取消"', raw)
        self.assertTrue(raw.startswith('{\n  "取消"'))
        self.assertEqual(list(read_mapping(p)), ["取消", "保存"])

    def test_sorted_write(self):
        p = write_mapping(self.base / "m.json", {"b": "b", "a": "a"}, sort=True)
        self.assertEqual(list(json.loads(p.read_text(encoding="utf-8"))), ["a", "b"])

    def test_missing_file(self):
        with self.assertRaises(MappingFileError):
            read_mapping(self.base / "none.json")

    def test_invalid_json(self):
        p = self.base / "bad.json"
        p.write_text("{", encoding="utf-8")
        with self.assertRaises(MappingFileError):
            read_mapping(p)

    def test_not_flat(self):
        p = self.base / "nested.json"
        p.write_text('{"a": {"b": "c"}}', encoding="utf-8")
        with self.assertRaises(MappingFileError):
            read_mapping(p)
        p.write_text('["a"]', encoding="utf-8")
        with self.assertRaises(MappingFileError):
            read_mapping(p)

    def test_matching_files(self):
        for name in ("b.json", "a.json", "c.txt"):
            (self.base / name).write_text("{}", encoding="utf-8")
        found = matching_files(self.base, "*.json", exclude=[self.base / "b.json"])
        self.assertEqual([p.name for p in found], ["a.json"])


class TestMerge(unittest.TestCase):
    """Test keep-first and overwrite merging."""

    SOURCES = [
        ("a.json", {"保存": "保存", "取消": "取消"}),
        ("b.json", {"保存": "Save", "确定": "确定", "取消": "取消"}),
    ]

    def test_keep_first(self):
        result = merge_mappings(self.SOURCES)
        self.assertEqual(result.merged, {"保存": "保存", "取消": "取消", "确定": "确定"})
        self.assertEqual(len(result.conflicts), 1)
        conflict = result.conflicts[0]
        self.assertEqual((conflict.key, conflict.old_value, conflict.new_value, conflict.source), ("保存", "保存", "Save", "b.json"))
        self.assertEqual(result.files_processed, 2)
        self.assertEqual(result.total_keys, 3)

    def test_overwrite(self):
        result = merge_mappings(self.SOURCES, overwrite=True)
        self.assertEqual(result.merged["保存"], "Save")
        self.assertEqual(list(result.merged), ["保存", "取消", "确定"])


class TestDiff(unittest.TestCase):
    """Test json1 minus json2."""

    FIRST = {"保存": "保存", "取消": "取消", "确定": "确定"}
    SECOND = {"保存": "保存", "取消": "Cancel"}

    def test_key_only(self):
        diff = diff_mappings(self.FIRST, self.SECOND)
        self.assertEqual(diff.result, {"确定": "确定"})
        self.assertEqual(diff.removed, ["保存", "取消"])

    def test_compare_value(self):
        diff = diff_mappings(self.FIRST, self.SECOND, compare_value=True)
        self.assertEqual(diff.result, {"取消": "取消", "确定": "确定"})
        self.assertEqual(diff.removed, ["保存"])

    def test_report(self):
        diff = diff_mappings(self.FIRST, self.SECOND)
        report = diff_report(diff, "a.json", "b.json", "out.json", False)
        self.assertIn("Key Only", report)
        self.assertIn("  - 保存", report)
        self.assertIn("JSON1 total: 3", report)


class TestCheckTranslations(unittest.TestCase):
    """Test per-language value checks."""

    def test_english_with_chinese(self):
        text = '{\n  "保存": "Save",\n  "取消": "取消"\n}'
        issues = check_translations(text, "en-US")
        self.assertEqual([(i.line, i.key, i.value) for i in issues], [(3, "取消", "取消")])

    def test_traditional_with_simplified(self):
        text = '{\n  "a": "國際",\n  "b": "国际"\n}'
        issues = check_translations(text, "zh-TW")
        self.assertEqual([i.key for i in issues], ["b"])

    def test_simplified_with_traditional(self):
        issues = check_translations('{"a": "繁體中文", "b": "简体"}', "zh-CN")
        self.assertEqual([i.key for i in issues], ["a"])

    def test_unknown_language_checks_like_english(self):
        self.assertEqual(len(check_translations('{"a": "中文"}', "fr")), 1)


class TestParseExportDefault(unittest.TestCase):
    """Test TS locale modules."""

    def test_flat_object(self):
        text = textwrap.dedent("""\
            // 中文
            export default {
              '保存': 'Save',
              "取消": "Cancel",
              submit: `Submit`,
            };
        """)
        self.assertEqual(parse_export_default(text), {"保存": "Save", "取消": "Cancel", "submit": "Submit"})

    def test_no_export(self):
        with self.assertRaises(MappingFileError):
            parse_export_default("const a = {}")

    def test_empty_object(self):
        with self.assertRaises(MappingFileError):
            parse_export_default("export default {}")


class TestSpreadsheet(unittest.TestCase):
    """Test SpreadsheetML export."""

    def test_rows_and_escaping(self):
        xml = mapping_to_spreadsheet_xml({"a<b": "x&y", "多行": "一\n二"}, "中文", "English")
        self.assertTrue(xml.startswith('<?xml version="1.0" encoding="UTF-8"?>'))
        self.assertIn("<Data ss:Type=\"String\">中文</Data>", xml)
        self.assertIn("a&lt;b", xml)
        self.assertIn("x&amp;y", xml)
        self.assertIn("一&#10;二", xml)
        self.assertEqual(xml.count("<Row>"), 3)
        self.assertTrue(xml.endswith("</Workbook>"))


class TestOutputResolution(unittest.TestCase):
    """Test where a run writes its mapping."""

    TARGET = pathlib.Path("/src/views/system")

    def test_default_json_path(self):
        self.assertEqual(resolve_output(self.TARGET, None, "./i18n-mapping.json"), pathlib.Path("system.json"))

    def test_default_directory(self):
        self.assertEqual(resolve_output(self.TARGET, None, "./i18n-mapping"), pathlib.Path("i18n-mapping/system.json"))

    def test_explicit_file(self):
        self.assertEqual(resolve_output(self.TARGET, "out/a.json", "./x.json"), pathlib.Path("out/a.json"))

    def test_explicit_directory(self):
        self.assertEqual(resolve_output(self.TARGET, "out", "./x.json"), pathlib.Path("out/system.json"))

    def test_suffix(self):
        self.assertEqual(resolve_output(self.TARGET, "out", "./x.json", suffix="-extract"), pathlib.Path("out/system-extract.json"))

    def test_preview(self):
        data = {str(i): str(i) for i in range(12)}
        lines = preview(data, 10)
        self.assertEqual(len(lines), 11)
        self.assertEqual(lines[-1], "  ... 2 more")


if __name__ == "__main__":
    unittest.main()
