# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shared helpers for tests that convert props types from source text.

They spare each test the parse -> scope -> convert plumbing and give
cross-file tests an in-memory module table instead of a directory tree.
"""

from __future__ import annotations

from typing import Mapping, Optional

from flowprops.converter import convert_type_to_validators
from flowprops.host import TransformResult, find_class_property, transform_module
from flowprops.options import ConvertOptions
from flowprops.parser import parse_module
from flowprops.parser.ast import ClassDeclaration, Module
from flowprops.resolver import BindingResolver, DictModuleLoader, build_module_scope
from flowprops.validators import ObjectLiteral, render

MAIN_FILE = "/src/main.js"


def dict_resolver(files: Optional[Mapping[str, str]] = None) -> BindingResolver:
	return BindingResolver(DictModuleLoader(files or {}))


def class_named(module: Module, name: str) -> ClassDeclaration:
	for cls in module.classes():
		if cls.name == name:
			return cls
	raise KeyError(name)


def convert_props(
	source: str,
	*,
	class_name: str = "Foo",
	field: str = "props",
	files: Optional[Mapping[str, str]] = None,
	options: Optional[ConvertOptions] = None,
	file: str = MAIN_FILE,
) -> ObjectLiteral:
	"""
	Parse `source` (as `file`), find `class_name`'s `field` and convert its type.

	`files` maps other module paths to their source for import following.
	"""
	module = parse_module(source, file=file)
	prop = find_class_property(class_named(module, class_name), field)
	if prop is None or prop.type_annotation is None:
		raise KeyError(f"{class_name}.{field} has no type annotation")
	return convert_type_to_validators(
		prop.type_annotation,
		options or ConvertOptions(),
		build_module_scope(module),
		dict_resolver(files),
	)


def props_text(source: str, **kwargs) -> str:
	"""`convert_props` rendered on one line."""
	return render(convert_props(source, **kwargs))


def transform_source(
	source: str,
	*,
	files: Optional[Mapping[str, str]] = None,
	options: Optional[ConvertOptions] = None,
	file: str = MAIN_FILE,
) -> TransformResult:
	return transform_module(parse_module(source, file=file), options, None, dict_resolver(files))


__all__ = [
	"MAIN_FILE",
	"dict_resolver",
	"class_named",
	"convert_props",
	"props_text",
	"transform_source",
]
