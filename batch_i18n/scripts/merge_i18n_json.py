#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
merge_i18n_json.py — Merge the per-folder mapping files of several runs into one.

Keep-first by default: a key already merged keeps its value and the clash is listed.
Pass --overwrite to let later files win. Files are taken in name order.

   merge-i18n-json --input ./i18n-mapping --output ./locales/zh-CN.json --sort
"""

from __future__ import annotations
import argparse
import logging
import pathlib
import sys

from batch_i18n.api.mapping import matching_files, merge_mappings, read_mapping, write_mapping
from batch_i18n.errors import ConfigError, MappingFileError
from batch_i18n.utils.config import load_config
from batch_i18n.utils.logging import set_level

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "./merged-i18n.json"
CONFLICT_LIMIT = 10


def _default_input(output_path: str) -> pathlib.Path:
	p = pathlib.Path(output_path)
	return p.parent if p.suffix.lower() == ".json" else p


def run(args: argparse.Namespace) -> int:
	set_level(args.log_level)
	if args.input:
		folder = pathlib.Path(args.input)
	else:
		try:
			config = load_config(pathlib.Path(args.config) if args.config else None)
		except ConfigError as e:
			logger.error("%s", e)
			return 1
		folder = _default_input(config.output_path)

	if not folder.is_dir():
		logger.error("Input folder not found: %s", folder)
		return 1

	output = pathlib.Path(args.output)
	files = matching_files(folder, args.pattern, exclude=[output])
	if not files:
		logger.error("No files matching %s in %s", args.pattern, folder)
		return 1
	print(f"Merging {len(files)} file(s) from {folder}")

	sources = []
	for p in files:
		try:
			data = read_mapping(p)
		except MappingFileError as e:
			logger.warning("Skipping %s", e)
			continue
		print(f"  {p.name}: {len(data)} entries")
		sources.append((p.name, data))

	result = merge_mappings(sources, overwrite=args.overwrite)

	if result.conflicts:
		print(f"\n{len(result.conflicts)} duplicate key(s) with different values:\n")
		for c in result.conflicts[:CONFLICT_LIMIT]:
			print(f'  Key: "{c.key}"')
			print(f'    existing: "{c.old_value}"')
			print(f'    new ({c.source}): "{c.new_value}"')
			print(f"    {'overwritten' if args.overwrite else 'kept existing value'}")
		if len(result.conflicts) > CONFLICT_LIMIT:
			print(f"  ... {len(result.conflicts) - CONFLICT_LIMIT} more not shown")
		if not args.overwrite:
			print("\nHint: pass --overwrite to let later files win.")

	try:
		write_mapping(output, result.merged, sort=args.sort)
	except OSError as e:
		logger.error("Failed to write %s: %s", output, e)
		return 1

	print("\n=== Merge done ===")
	print(f"Files merged:  {len(sources)}")
	print(f"Total keys:    {result.total_keys}")
	print(f"Conflicts:     {len(result.conflicts)}")
	print(f"Output file:   {output.resolve()}")
	return 0


def build_arg_parser() -> argparse.ArgumentParser:
	ap = argparse.ArgumentParser(prog="merge-i18n-json", description="Merge i18n mapping JSON files")
	ap.add_argument("--input", help="Folder holding the mapping files (default: directory of outputPath)")
	ap.add_argument("--pattern", default="*.json", help="File name glob (default: *.json)")
	ap.add_argument("--output", default=DEFAULT_OUTPUT, help=f"Merged file (default: {DEFAULT_OUTPUT})")
	ap.add_argument("--overwrite", action="store_true", help="Later files overwrite earlier values")
	ap.add_argument("--sort", action="store_true", help="Sort the merged keys")
	ap.add_argument("--config", help="Config file used to find the default input folder")
	ap.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
	return ap


def main():
	args = build_arg_parser().parse_args()
	sys.exit(run(args))


if __name__ == "__main__":
	main()
