# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command line driver: run the host transform over source files and print the
generated validator tables (or diagnostics).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from flowprops.core.diagnostics import Diagnostic
from flowprops.errors import ConversionError
from flowprops.host import GeneratedTable, transform_module
from flowprops.options import DEFAULT_EXTENSIONS, ConvertOptions, HostOptions, ModuleResolutionOptions
from flowprops.parser import parse_file_with_diagnostics
from flowprops.resolver import BindingResolver, FileModuleLoader

logger = logging.getLogger(__name__)


def _table_to_json(path: Path, table: GeneratedTable) -> dict:
	return {
		"file": str(path),
		"class": table.class_name,
		"field": table.source_field,
		"static_field": table.static_field,
		"line": table.loc.line,
		"column": table.loc.column,
		"table": table.render(),
	}


def _build_options(args: argparse.Namespace) -> ConvertOptions:
	resolution = ModuleResolutionOptions(extensions=tuple(args.extensions or DEFAULT_EXTENSIONS))
	return ConvertOptions(
		has_default_name=args.has_default_name,
		checked_by_name=args.checked_by_name,
		allow_null_types=not args.no_null_types,
		allow_void_types=not args.no_void_types,
		allow_nullable_types=not args.no_nullable_types,
		module_resolution=resolution,
	)


def main(argv: list[str] | None = None) -> int:
	"""
	Transform each source file in memory and report what would be generated.

	With --json, prints `{"exit_code", "components", "diagnostics"}`; otherwise
	prints each generated static field to stdout and diagnostics to stderr as
	`file:line:col: error: [Kind] message`. Exit code 1 when any file failed.
	"""
	parser = argparse.ArgumentParser(description="Generate runtime prop validators from Flow props types")
	parser.add_argument("source", type=Path, nargs="+", help="Path(s) to component source file(s)")
	parser.add_argument("--json", action="store_true", help="Emit components and diagnostics as JSON")
	parser.add_argument("-v", "--verbose", action="store_true", help="Log module loading and conversion steps")
	parser.add_argument(
		"--extension",
		dest="extensions",
		action="append",
		help="File extension tried when following imports (repeatable; default: .js .jsx .mjs .flow)",
	)
	parser.add_argument("--no-null-types", action="store_true", help="Reject `null` types instead of converting them")
	parser.add_argument("--no-void-types", action="store_true", help="Reject `void` types instead of converting them")
	parser.add_argument("--no-nullable-types", action="store_true", help="Reject `?T` types instead of converting them")
	parser.add_argument("--has-default-name", default="HasDefaultProp", help="Name of the has-default escape hatch")
	parser.add_argument("--checked-by-name", default="CheckedBy", help="Name of the checked-by escape hatch")
	args = parser.parse_args(argv)

	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.WARNING,
		format="%(levelname)s %(name)s: %(message)s",
	)

	options = _build_options(args)
	resolver = BindingResolver(FileModuleLoader(options.module_resolution))
	diagnostics: List[Diagnostic] = []
	components: List[dict] = []
	rendered: List[str] = []

	for source_path in args.source:
		module, parse_diags = parse_file_with_diagnostics(source_path)
		if module is None:
			diagnostics.extend(parse_diags)
			continue
		try:
			result = transform_module(module, options, HostOptions(), resolver)
		except ConversionError as err:
			diagnostics.append(err.to_diagnostic())
			continue
		logger.debug("%s: %d component table(s)", source_path, len(result.components))
		for table in result.components:
			components.append(_table_to_json(source_path, table))
			rendered.append(f"{source_path}:{table.loc.line}:{table.loc.column}: {table.class_name}\n{table.render(indent=2)}")

	exit_code = 1 if any(d.severity == "error" for d in diagnostics) else 0
	if args.json:
		payload = {
			"exit_code": exit_code,
			"components": components,
			"diagnostics": [d.to_json() for d in diagnostics],
		}
		print(json.dumps(payload))
	else:
		for text in rendered:
			print(text)
		for d in diagnostics:
			print(d.format_human(), file=sys.stderr)
	return exit_code


__all__ = ["main"]
