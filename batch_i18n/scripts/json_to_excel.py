#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
json_to_excel.py — Export a mapping as a two-column spreadsheet for translators.

The workbook is SpreadsheetML 2003 XML (.xls), readable by Excel and LibreOffice.

   i18n-json-to-excel ./i18n-mapping/system.json         # writes ./i18n-excel/system.xls
   i18n-json-to-excel ./zh-CN.json --key-header 中文 --value-header English
"""

from __future__ import annotations
import argparse
import logging
import pathlib
import sys

from batch_i18n.api.mapping import mapping_to_spreadsheet_xml, read_mapping
from batch_i18n.errors import MappingFileError
from batch_i18n.utils.fs import atomic_write
from batch_i18n.utils.logging import set_level

logger = logging.getLogger(__name__)

DEFAULT_DIR = "i18n-excel"


def run(args: argparse.Namespace) -> int:
	set_level(args.log_level)
	source = pathlib.Path(args.json_file)
	output = pathlib.Path(args.output) if args.output else pathlib.Path(DEFAULT_DIR) / f"{source.stem}.xls"
	try:
		data = read_mapping(source)
	except MappingFileError as e:
		logger.error("%s", e)
		return 1
	try:
		atomic_write(output, mapping_to_spreadsheet_xml(data, args.key_header, args.value_header))
	except OSError as e:
		logger.error("Failed to write %s: %s", output, e)
		return 1
	print(f"Exported {len(data)} rows: {output.resolve()}")
	return 0


def build_arg_parser() -> argparse.ArgumentParser:
	ap = argparse.ArgumentParser(prog="i18n-json-to-excel", description="Export a mapping JSON as a spreadsheet")
	ap.add_argument("json_file", help="Mapping JSON file")
	ap.add_argument("--output", help=f"Workbook path (default: {DEFAULT_DIR}/<name>.xls)")
	ap.add_argument("--key-header", default="Key", help='Header of the key column (default: "Key")')
	ap.add_argument("--value-header", default="Value", help='Header of the value column (default: "Value")')
	ap.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
	return ap


def main():
	args = build_arg_parser().parse_args()
	sys.exit(run(args))


if __name__ == "__main__":
	main()
