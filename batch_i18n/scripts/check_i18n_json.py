#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
check_i18n_json.py — Spot untranslated or wrong-script values in a locale file.

   check-i18n-json en-US ./locales/en-US.json
   check-i18n-json zh-TW ./locales/zh-TW.json
   check-i18n-json en-US src/i18n/en-US/index.ts

Exit code 1 when suspicious values were found.
"""

from __future__ import annotations
import argparse
import logging
import pathlib
import sys

from batch_i18n.api.mapping import check_translations, rule_for
from batch_i18n.utils.logging import set_level

logger = logging.getLogger(__name__)


def run(args: argparse.Namespace) -> int:
	set_level(args.log_level)
	path = pathlib.Path(args.file)
	if not path.is_file():
		logger.error("File not found: %s", path)
		return 1
	try:
		text = path.read_text(encoding="utf-8")
	except (OSError, UnicodeDecodeError) as e:
		logger.error("Cannot read %s: %s", path, e)
		return 1

	rule = rule_for(args.language)
	issues = check_translations(text, args.language)
	print(f"Checking {path} ({args.language})")
	if not issues:
		print("No issues found.")
		return 0

	print(f"{len(issues)} value(s) {rule.message}:\n")
	for i, issue in enumerate(issues, 1):
		print(f"{i}. line {issue.line}")
		print(f'   key:   "{issue.key}"')
		print(f'   value: "{issue.value}"')
	return 1


def build_arg_parser() -> argparse.ArgumentParser:
	ap = argparse.ArgumentParser(prog="check-i18n-json", description="Check the values of a locale file")
	ap.add_argument("language", help="Language code: en, en-US, zh-TW or zh-CN")
	ap.add_argument("file", help="Locale JSON (or TS object) file")
	ap.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
	return ap


def main():
	args = build_arg_parser().parse_args()
	sys.exit(run(args))


if __name__ == "__main__":
	main()
