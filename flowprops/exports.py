# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Export normalization.

Modules spell exports many ways: `export {a as b}`, `export default a`,
`export class A {}`, `export type T = ...`, `export {x} from './m'`. Each
becomes one `ExportEntry(external, local)` and every export wrapper is peeled
off the body, so finding "the declaration behind export X" is the same two
lookups regardless of surface syntax:

1. find the entry whose `external` is X,
2. find the declaration named `entry.local` in the normalized body.

Re-exports are turned into a synthetic `import {x} from './m'` in the body, so
step 2 lands on an import specifier and the resolver follows it like any
other import.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Union

from flowprops.parser.ast import (
	ClassDeclaration,
	ExportAll,
	ExportDeclaration,
	ExportDefault,
	ExportNamed,
	FunctionDeclaration,
	ImportDeclaration,
	ImportSpecifier,
	InterfaceDeclaration,
	Located,
	Module,
	Name,
	TypeAlias,
	VariableDeclaration,
	VariableDeclarator,
)

DEFAULT_EXPORT_LOCAL = "_default"

LocalDeclaration = Union[
	TypeAlias,
	InterfaceDeclaration,
	ClassDeclaration,
	FunctionDeclaration,
	VariableDeclarator,
	ImportSpecifier,
]


@dataclass(frozen=True)
class ExportEntry:
	external: str
	local: str
	loc: Optional[Located] = None


@dataclass
class NormalizedModule:
	body: list
	exports: List[ExportEntry] = field(default_factory=list)
	# `export * from '...'` sources, searched when no entry matches.
	star_sources: List[str] = field(default_factory=list)
	file: Optional[str] = None


def _declared_names(decl) -> List[str]:
	if isinstance(decl, VariableDeclaration):
		return [d.name for d in decl.declarations]
	name = getattr(decl, "name", None)
	return [name] if name else []


def normalize_module(module: Module) -> NormalizedModule:
	out = NormalizedModule(body=[], file=module.file)
	for item in module.items:
		if isinstance(item, ExportDeclaration):
			out.body.append(item.declaration)
			for name in _declared_names(item.declaration):
				out.exports.append(ExportEntry(name, name, item.loc))
		elif isinstance(item, ExportDefault):
			decl = item.declaration
			if isinstance(decl, (ClassDeclaration, FunctionDeclaration)):
				if decl.name is None:
					decl = replace(decl, name=DEFAULT_EXPORT_LOCAL)
				out.body.append(decl)
				out.exports.append(ExportEntry("default", decl.name, item.loc))
			elif isinstance(decl, Name):
				out.exports.append(ExportEntry("default", decl.ident, item.loc))
			else:
				synthetic = VariableDeclaration(
					loc=item.loc,
					kind="const",
					declarations=[VariableDeclarator(loc=item.loc, name=DEFAULT_EXPORT_LOCAL, init=decl)],
				)
				out.body.append(synthetic)
				out.exports.append(ExportEntry("default", DEFAULT_EXPORT_LOCAL, item.loc))
		elif isinstance(item, ExportNamed):
			if item.source is None:
				for spec in item.specifiers:
					out.exports.append(ExportEntry(spec.exported, spec.local, spec.loc))
				continue
			specifiers = [
				ImportSpecifier(
					loc=spec.loc,
					local=spec.exported,
					imported=spec.local,
					source=item.source,
					kind=item.kind,
					is_default=spec.local == "default",
				)
				for spec in item.specifiers
			]
			out.body.append(ImportDeclaration(loc=item.loc, source=item.source, kind=item.kind, specifiers=specifiers))
			for spec in item.specifiers:
				out.exports.append(ExportEntry(spec.exported, spec.exported, spec.loc))
		elif isinstance(item, ExportAll):
			out.star_sources.append(item.source)
		else:
			out.body.append(item)
	return out


def normalize_exports(module: Module) -> List[ExportEntry]:
	return normalize_module(module).exports


def find_export(normalized: NormalizedModule, external: str) -> Optional[ExportEntry]:
	for entry in normalized.exports:
		if entry.external == external:
			return entry
	return None


def find_local_declaration(body: list, local: str) -> Optional[LocalDeclaration]:
	"""The top-level declaration or import specifier binding `local` in a normalized body."""
	for item in body:
		if isinstance(item, ImportDeclaration):
			for spec in item.specifiers:
				if spec.local == local:
					return spec
		elif isinstance(item, VariableDeclaration):
			for declarator in item.declarations:
				if declarator.name == local:
					return declarator
		elif isinstance(item, (TypeAlias, InterfaceDeclaration, ClassDeclaration, FunctionDeclaration)):
			if item.name == local:
				return item
	return None


def match_exported(normalized: NormalizedModule, external: str) -> Optional[LocalDeclaration]:
	entry = find_export(normalized, external)
	if entry is None:
		return None
	return find_local_declaration(normalized.body, entry.local)


__all__ = [
	"DEFAULT_EXPORT_LOCAL",
	"ExportEntry",
	"NormalizedModule",
	"normalize_module",
	"normalize_exports",
	"find_export",
	"find_local_declaration",
	"match_exported",
]
