#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
batch_i18n_process.py — Batch i18n rewriter for Vue single-file components and TS/JS modules.

Key points
- Finds Chinese text literals in templates and scripts and rewrites each one into a lookup call:
  `placeholder="请输入"` -> `:placeholder="$t('请输入')"`, `>查询<` -> `>{{ $t('查询') }}<`,
  `'保存'` -> `t('保存')`, `` `共${n}条` `` -> `t('共{a}条', {a: n})`.
- Adds the configured import / instance statements to files that received a rewrite.
- Writes the key→text mapping of the run as flat JSON (key equals text).
- Supports atomic writes, unified-diff dry-run, .bak backups, ignore globs, and threads.

Usage Examples
--------------

1. Preview what would change (no writes):
   batch-i18n src/views/system --dry-run --diff

2. Rewrite a folder and write the mapping to ./i18n-mapping/system.json:
   batch-i18n src/views/system --output ./i18n-mapping

3. Templates only, keep backups:
   batch-i18n src/views --no-script --no-ts --backup

4. Create an i18n.config.json with the defaults in the working directory:
   batch-i18n --init-config
"""

from __future__ import annotations
import argparse
import logging
import os
import pathlib
import sys

from batch_i18n.api.mapping import preview, resolve_output, write_mapping
from batch_i18n.api.process import ProcessOptions, process_batch
from batch_i18n.errors import ConfigError, I18nError
from batch_i18n.utils.config import CONFIG_FILENAME, load_config, write_default_config
from batch_i18n.utils.fs import discover_files
from batch_i18n.utils.logging import set_level

logger = logging.getLogger(__name__)

PREVIEW_LIMIT = 10


def run(args: argparse.Namespace) -> int:
	if args.init_config:
		path = pathlib.Path(args.config or CONFIG_FILENAME)
		if write_default_config(path):
			print(f"Wrote default config: {path}")
		else:
			print(f"Config file already exists, left unchanged: {path}")
		return 0

	base = pathlib.Path(args.target).resolve()
	if not base.exists() or not base.is_dir():
		logger.error("Target not found or not a directory: %s", base)
		return 1

	try:
		config = load_config(pathlib.Path(args.config) if args.config else None)
	except ConfigError as e:
		logger.error("%s", e)
		return 1
	set_level(config.log_level)
	if args.log_level:
		set_level(args.log_level)

	ignore = list(config.ignore_paths) + list(args.ignore or [])
	files = discover_files(base, config.file_extensions, ignore)
	print(f"Found {len(files)} file(s) under {base}")

	options = ProcessOptions(
		template=not args.no_template,
		script=not args.no_script,
		ts=not args.no_ts,
		dry_run=args.dry_run,
		backup=args.backup,
		emit_diff=args.diff,
		max_file_size=args.max_file_size or None,
	)
	report = process_batch(files, config, options, threads=args.threads)

	if args.diff:
		diffs = [r.diff for r in report.results if r.diff]
		if diffs:
			sys.stdout.write("\n".join(diffs))

	mapping = report.registry.to_dict()
	output = resolve_output(base, args.output, config.output_path)
	if args.dry_run:
		print(f"\nMapping preview ({len(mapping)} entries, would be written to {output}):")
		for line in preview(mapping, PREVIEW_LIMIT):
			print(line)
	elif mapping:
		try:
			write_mapping(output, mapping)
		except (I18nError, OSError) as e:
			logger.error("Failed to write mapping %s: %s", output, e)
			return 1
		print(f"\nMapping written to: {output}")

	print()
	for line in report.summary_lines(dry_run=args.dry_run):
		print(line)
	print(f"Files changed:    {report.changed}")
	return 0


def build_arg_parser() -> argparse.ArgumentParser:
	ap = argparse.ArgumentParser(prog="batch-i18n", description="Rewrite Chinese text literals into i18n lookup calls")
	ap.add_argument("target", nargs="?", help="Folder to process (e.g., src/views/system)")
	ap.add_argument("--output", help="Mapping file, or a directory for <folder>.json (default: derived from outputPath)")
	ap.add_argument("--config", help=f"Config file (default: ./{CONFIG_FILENAME} when present)")
	ap.add_argument("--init-config", action="store_true", help="Write a config file with the defaults and exit")
	ap.add_argument("--no-template", action="store_true", help="Skip <template> blocks")
	ap.add_argument("--no-script", action="store_true", help="Skip <script> blocks of .vue files")
	ap.add_argument("--no-ts", action="store_true", help="Skip standalone .ts/.js files")
	ap.add_argument("--dry-run", action="store_true", help="Report only; no writes")
	ap.add_argument("--diff", action="store_true", help="Print unified diff for changes (with --dry-run)")
	ap.add_argument("--backup", action="store_true", help="Write .bak backups before changing a file")
	ap.add_argument("--ignore", action="append", default=[], help="Extra ignore patterns (repeatable)")
	ap.add_argument("--threads", type=int, default=os.cpu_count() or 4, help="Parallel file workers")
	ap.add_argument("--max-file-size", type=int, default=2*1024*1024, help="Skip files larger than this many bytes (0 to disable)")
	ap.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
	return ap


def main():
	ap = build_arg_parser()
	args = ap.parse_args()
	if not args.target and not args.init_config:
		ap.error("the following arguments are required: target")
	sys.exit(run(args))


if __name__ == "__main__":
	main()
