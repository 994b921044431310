# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Host adapter: find React component classes in a module, convert their typed
`props` / `contextTypes` fields, and splice the generated static fields back
in.

The transform is all-or-nothing per module. Every table is converted before
anything is inserted, and validator library imports are only recorded
(not added) while converting, so a failure leaves the module untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Set, Tuple

from flowprops.converter import convert_type_to_validators
from flowprops.errors import ErrorKind, error_at
from flowprops.options import ConvertOptions, HostOptions
from flowprops.parser.ast import (
	ClassDeclaration,
	ClassProperty,
	ExportDeclaration,
	ExportDefault,
	ImportDeclaration,
	ImportSpecifier,
	Located,
	Member,
	Module,
	Name,
)
from flowprops.resolver import BindingKind, BindingResolver, Scope, build_module_scope, resolve
from flowprops.validators import Identifier, ObjectLiteral, render

logger = logging.getLogger(__name__)

REACT_GLOBAL = "React"
COMPONENT_BASES = ("Component", "PureComponent")


def is_component_superclass(expr: object, scope: Scope, react_source: str = "react") -> bool:
	"""
	True for `React.Component` / `React.PureComponent` (with `React` unbound,
	or imported from react as default or namespace) and for `Component` /
	`PureComponent` imported by name from react.
	"""
	if isinstance(expr, Member):
		if not isinstance(expr.value, Name) or expr.attr not in COMPONENT_BASES:
			return False
		binding = resolve(scope, expr.value.ident)
		if binding is None:
			return expr.value.ident == REACT_GLOBAL
		spec = binding.node
		return (
			binding.kind is BindingKind.IMPORT
			and isinstance(spec, ImportSpecifier)
			and spec.kind == "value"
			and spec.source == react_source
			and (spec.is_default or spec.is_namespace)
		)
	if isinstance(expr, Name):
		binding = resolve(scope, expr.ident)
		if binding is None or binding.kind is not BindingKind.IMPORT:
			return False
		spec = binding.node
		return (
			isinstance(spec, ImportSpecifier)
			and spec.kind == "value"
			and spec.source == react_source
			and not spec.is_default
			and not spec.is_namespace
			and spec.imported in COMPONENT_BASES
		)
	return False


def find_class_property(cls: ClassDeclaration, name: str) -> Optional[ClassProperty]:
	for item in cls.body:
		if isinstance(item, ClassProperty) and item.key == name and not item.static and not item.computed:
			return item
	return None


@dataclass
class GeneratedTable:
	class_name: str
	source_field: str  # e.g. "props"
	static_field: str  # e.g. "propTypes"
	table: ObjectLiteral
	loc: Located

	def render(self, indent: Optional[int] = None) -> str:
		return f"static {self.static_field} = {render(self.table, indent)};"


@dataclass
class TransformResult:
	module: Module
	components: List[GeneratedTable] = field(default_factory=list)
	added_imports: List[ImportDeclaration] = field(default_factory=list)

	@property
	def changed(self) -> bool:
		return bool(self.components)


class ImportManager:
	"""
	Hands out local names for validator libraries, recording one default
	import per library the first time its name is asked for.
	"""

	def __init__(self, taken: Set[str]) -> None:
		self.taken = set(taken)
		self._refs: Dict[str, Identifier] = {}
		self.pending: List[ImportDeclaration] = []

	def unique_name(self, preferred: str) -> str:
		name = preferred
		n = 2
		while name in self.taken:
			name = f"{preferred}{n}"
			n += 1
		self.taken.add(name)
		return name

	def ref(self, source: str, preferred: str) -> Identifier:
		ident = self._refs.get(source)
		if ident is None:
			ident = Identifier(self.unique_name(preferred))
			self._refs[source] = ident
			loc = Located(line=0, column=0)
			spec = ImportSpecifier(
				loc=loc, local=ident.name, imported="default", source=source, kind="value", is_default=True
			)
			self.pending.append(ImportDeclaration(loc=loc, source=source, kind="value", specifiers=[spec]))
			logger.debug("importing %s as %s", source, ident.name)
		return ident


def _component_fields(
	cls: ClassDeclaration, host: HostOptions, scope: Scope
) -> List[Tuple[ClassProperty, str]]:
	found: List[Tuple[ClassProperty, str]] = []
	if cls.superclass is None or not is_component_superclass(cls.superclass, scope, host.react_source):
		return found
	for source_field, static_field in host.fields:
		prop = find_class_property(cls, source_field)
		if prop is not None:
			found.append((prop, static_field))
	return found


def transform_module(
	module: Module,
	options: Optional[ConvertOptions] = None,
	host_options: Optional[HostOptions] = None,
	resolver: Optional[BindingResolver] = None,
) -> TransformResult:
	"""
	Return a copy of `module` with a static validator table after every typed
	`props` / `contextTypes` field of every component class.

	The input module is not modified. Raises ConversionError on the first field
	that cannot be converted.
	"""
	options = options or ConvertOptions()
	host = host_options or HostOptions()
	scope = build_module_scope(module)
	imports = ImportManager(set(scope.bindings) | {cls.name for cls in module.classes() if cls.name})
	conv_options = replace(
		options,
		namespace_ref=lambda: imports.ref(host.prop_types_source, host.prop_types_local),
		all_ref=lambda: imports.ref(host.all_source, host.all_local),
	)

	generated: Dict[int, List[Tuple[ClassProperty, ClassProperty]]] = {}
	tables: List[GeneratedTable] = []
	for cls in module.classes():
		class_name = cls.name or "default"
		for prop, static_field in _component_fields(cls, host, scope):
			if prop.type_annotation is None:
				raise error_at(
					ErrorKind.MISSING_TYPE_ANNOTATION,
					prop,
					f"React component {prop.key} must have a type annotation",
					file=module.file,
				)
			table = convert_type_to_validators(prop.type_annotation, conv_options, scope, resolver, module.file)
			static = ClassProperty(loc=prop.loc, key=static_field, value=table, static=True)
			generated.setdefault(id(cls), []).append((prop, static))
			tables.append(GeneratedTable(class_name, prop.key, static_field, table, prop.loc))
			logger.debug("%s: generated static %s with %d field(s)", class_name, static_field, len(table.fields))

	if not tables:
		return TransformResult(module=module)

	def rewrite(cls: ClassDeclaration) -> ClassDeclaration:
		inserts = generated.get(id(cls))
		if not inserts:
			return cls
		body = list(cls.body)
		for prop, static in inserts:
			index = next(i for i, member in enumerate(body) if member is prop)
			body.insert(index + 1, static)
		return replace(cls, body=body)

	items = list(imports.pending)
	for item in module.items:
		if isinstance(item, ClassDeclaration):
			item = rewrite(item)
		elif isinstance(item, (ExportDeclaration, ExportDefault)) and isinstance(item.declaration, ClassDeclaration):
			item = replace(item, declaration=rewrite(item.declaration))
		items.append(item)
	return TransformResult(
		module=replace(module, items=items),
		components=tables,
		added_imports=list(imports.pending),
	)


__all__ = [
	"REACT_GLOBAL",
	"COMPONENT_BASES",
	"is_component_superclass",
	"find_class_property",
	"GeneratedTable",
	"TransformResult",
	"ImportManager",
	"transform_module",
]
