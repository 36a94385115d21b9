#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
batch_i18n_extract.py — Scan-only companion of batch-i18n.

Collects the Chinese text literals the rewriter would pick up, without touching any source
file, and writes them as a `<folder>-extract.json` mapping (raw text as key and value).
Templated literals are listed as written, with their `${…}` markers.
"""

from __future__ import annotations
import argparse
import logging
import pathlib
import sys

from batch_i18n.api.mapping import preview, resolve_output, write_mapping
from batch_i18n.api.process import ProcessOptions, extract_batch
from batch_i18n.errors import ConfigError, I18nError
from batch_i18n.utils.config import load_config
from batch_i18n.utils.fs import discover_files
from batch_i18n.utils.logging import set_level

logger = logging.getLogger(__name__)


def run(args: argparse.Namespace) -> int:
	base = pathlib.Path(args.target).resolve()
	if not base.exists() or not base.is_dir():
		logger.error("Target not found or not a directory: %s", base)
		return 1

	try:
		config = load_config(pathlib.Path(args.config) if args.config else None)
	except ConfigError as e:
		logger.error("%s", e)
		return 1
	set_level(args.log_level or config.log_level)

	files = discover_files(base, config.file_extensions, list(config.ignore_paths) + list(args.ignore or []))
	options = ProcessOptions(template=not args.no_template, script=not args.no_script, ts=not args.no_ts)
	report = extract_batch(files, config, options)
	mapping = report.registry.to_dict()

	output = resolve_output(base, args.output, config.output_path, suffix="-extract")
	if args.dry_run:
		print(f"Extract preview ({len(mapping)} entries, would be written to {output}):")
		for line in preview(mapping):
			print(line)
	else:
		try:
			write_mapping(output, mapping)
		except (I18nError, OSError) as e:
			logger.error("Failed to write %s: %s", output, e)
			return 1
		print(f"Extract written to: {output}")

	for line in report.summary_lines(dry_run=True):
		print(line)
	return 0


def build_arg_parser() -> argparse.ArgumentParser:
	ap = argparse.ArgumentParser(prog="batch-i18n-extract", description="List Chinese text literals without rewriting")
	ap.add_argument("target", help="Folder to scan")
	ap.add_argument("--output", help="Output file, or a directory for <folder>-extract.json")
	ap.add_argument("--config", help="Config file (default: ./i18n.config.json when present)")
	ap.add_argument("--no-template", action="store_true", help="Skip <template> blocks")
	ap.add_argument("--no-script", action="store_true", help="Skip <script> blocks of .vue files")
	ap.add_argument("--no-ts", action="store_true", help="Skip standalone .ts/.js files")
	ap.add_argument("--ignore", action="append", default=[], help="Extra ignore patterns (repeatable)")
	ap.add_argument("--dry-run", action="store_true", help="Print a preview instead of writing the file")
	ap.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
	return ap


def main():
	args = build_arg_parser().parse_args()
	sys.exit(run(args))


if __name__ == "__main__":
	main()
