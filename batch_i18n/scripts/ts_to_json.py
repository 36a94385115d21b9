#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ts_to_json.py — Convert a flat `export default { key: 'value' }` locale module to JSON.

   ts-to-json ./src/i18n/zh-CN.ts                 # writes ./src/i18n/zh-CN.json
   ts-to-json ./src/i18n/zh-CN.ts --output ./zh.json
"""

from __future__ import annotations
import argparse
import logging
import pathlib
import sys

from batch_i18n.api.mapping import parse_export_default, write_mapping
from batch_i18n.errors import MappingFileError
from batch_i18n.utils.logging import set_level

logger = logging.getLogger(__name__)


def run(args: argparse.Namespace) -> int:
	set_level(args.log_level)
	source = pathlib.Path(args.ts_file)
	output = pathlib.Path(args.output) if args.output else source.with_suffix(".json")
	if not source.is_file():
		logger.error("File not found: %s", source)
		return 1
	try:
		data = parse_export_default(source.read_text(encoding="utf-8"))
		write_mapping(output, data)
	except MappingFileError as e:
		logger.error("%s: %s", source, e)
		return 1
	except (OSError, UnicodeDecodeError) as e:
		logger.error("Conversion failed: %s", e)
		return 1
	print(f"Converted {len(data)} entries: {output.resolve()}")
	return 0


def build_arg_parser() -> argparse.ArgumentParser:
	ap = argparse.ArgumentParser(prog="ts-to-json", description="Convert an export-default TS object to JSON")
	ap.add_argument("ts_file", help="TypeScript/JavaScript module")
	ap.add_argument("--output", help="JSON file (default: same name with .json)")
	ap.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
	return ap


def main():
	args = build_arg_parser().parse_args()
	sys.exit(run(args))


if __name__ == "__main__":
	main()
