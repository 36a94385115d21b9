#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
json_diff.py — Entries of one mapping that another mapping does not have yet.

Typical use: find the keys a new run added compared to an already translated locale file.

   i18n-json-diff ./new.json ./locales/zh-CN.json --output ./todo.json
   i18n-json-diff ./new.json ./old.json --compare-value

Writes the remaining entries to --output and a plain-text report next to it
(`<output>-report.txt`).
"""

from __future__ import annotations
import argparse
import logging
import pathlib
import re
import sys

from batch_i18n.api.mapping import diff_mappings, diff_report, read_mapping, write_mapping
from batch_i18n.errors import MappingFileError
from batch_i18n.utils.fs import atomic_write
from batch_i18n.utils.logging import set_level

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "./diff-result.json"
LIST_LIMIT = 10


def report_path(output: str) -> pathlib.Path:
	if output.lower().endswith(".json"):
		return pathlib.Path(re.sub(r"\.json$", "-report.txt", output, flags=re.I))
	return pathlib.Path(output + "-report.txt")


def run(args: argparse.Namespace) -> int:
	set_level(args.log_level)
	try:
		first = read_mapping(args.json1)
		second = read_mapping(args.json2)
	except MappingFileError as e:
		logger.error("%s", e)
		return 1
	print(f"JSON1: {len(first)} entries")
	print(f"JSON2: {len(second)} entries")

	diff = diff_mappings(first, second, compare_value=args.compare_value)
	print(f"\nRemoved: {len(diff.removed)}")
	print(f"Kept:    {len(diff.kept)}")
	if diff.removed:
		print(f"\nRemoved keys (first {LIST_LIMIT}):")
		for key in diff.removed[:LIST_LIMIT]:
			print(f"  - {key}")
		if len(diff.removed) > LIST_LIMIT:
			print(f"  ... {len(diff.removed) - LIST_LIMIT} more")

	report = report_path(args.output)
	try:
		write_mapping(args.output, diff.result)
		atomic_write(report, diff_report(diff, args.json1, args.json2, args.output, args.compare_value))
	except OSError as e:
		logger.error("Failed to write results: %s", e)
		return 1
	print(f"\nOutput file: {pathlib.Path(args.output).resolve()}")
	print(f"Report:      {report.resolve()}")
	return 0


def build_arg_parser() -> argparse.ArgumentParser:
	ap = argparse.ArgumentParser(prog="i18n-json-diff", description="Entries of json1 not present in json2")
	ap.add_argument("json1", help="Main mapping file")
	ap.add_argument("json2", help="Mapping whose keys are excluded")
	ap.add_argument("--output", default=DEFAULT_OUTPUT, help=f"Result file (default: {DEFAULT_OUTPUT})")
	ap.add_argument("--compare-value", action="store_true", help="Exclude only entries whose key and value both match")
	ap.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
	return ap


def main():
	args = build_arg_parser().parse_args()
	sys.exit(run(args))


if __name__ == "__main__":
	main()
