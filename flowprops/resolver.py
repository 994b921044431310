# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Binding resolution: from a name used in type position to the declaration
that introduced it, following imports into other modules when needed.

Scopes are immutable chains built once per module. A lookup is a pure
function of `(scope, name)`; only import following touches the outside world,
and it does so through the `ModuleLoader` port so tests can serve modules
from memory.
"""

from __future__ import annotations

import logging
import os
import posixpath
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Protocol, Tuple, Union

from lark.exceptions import UnexpectedInput

from flowprops.errors import ErrorKind, error_at
from flowprops.exports import (
	NormalizedModule,
	find_export,
	find_local_declaration,
	normalize_module,
)
from flowprops.options import ModuleResolutionOptions
from flowprops.parser.ast import (
	ClassDeclaration,
	FunctionDeclaration,
	ImportDeclaration,
	ImportSpecifier,
	InterfaceDeclaration,
	Module,
	TypeAlias,
	TypeParameter,
	VariableDeclaration,
	VariableDeclarator,
)
from flowprops.parser.parser import SourceSyntaxError, parse_file, parse_module

logger = logging.getLogger(__name__)


class BindingKind(str, Enum):
	DECLARATION = "declaration"  # type alias, interface, class, function
	IMPORT = "import"
	MODULE = "module"  # module-level const/let/var
	PARAM = "param"  # type parameter


@dataclass(frozen=True)
class Binding:
	kind: BindingKind
	node: object
	source_file: Optional[str] = None


@dataclass(frozen=True, eq=False)
class Scope:
	bindings: Mapping[str, Binding] = field(default_factory=lambda: MappingProxyType({}))
	parent: Optional["Scope"] = None
	file: Optional[str] = None

	def lookup(self, name: str) -> Optional[Binding]:
		scope: Optional[Scope] = self
		while scope is not None:
			binding = scope.bindings.get(name)
			if binding is not None:
				return binding
			scope = scope.parent
		return None

	def root(self) -> "Scope":
		scope = self
		while scope.parent is not None:
			scope = scope.parent
		return scope

	def child(self, bindings: Mapping[str, Binding]) -> "Scope":
		return Scope(bindings=MappingProxyType(dict(bindings)), parent=self, file=self.file)

	def child_for_params(self, params: Iterable[TypeParameter]) -> "Scope":
		"""Scope for the body of a generic declaration: its type parameters shadow outer names."""
		bindings = {p.name: Binding(BindingKind.PARAM, p, self.file) for p in params}
		if not bindings:
			return self
		return self.child(bindings)


def resolve(scope: Scope, name: str) -> Optional[Binding]:
	return scope.lookup(name)


def binding_for(node: object, file: Optional[str]) -> Binding:
	if isinstance(node, ImportSpecifier):
		return Binding(BindingKind.IMPORT, node, file)
	if isinstance(node, VariableDeclarator):
		return Binding(BindingKind.MODULE, node, file)
	if isinstance(node, TypeParameter):
		return Binding(BindingKind.PARAM, node, file)
	return Binding(BindingKind.DECLARATION, node, file)


def build_module_scope(module: Union[Module, NormalizedModule]) -> Scope:
	"""Top-level bindings of a module: imports, declarations and module variables."""
	normalized = normalize_module(module) if isinstance(module, Module) else module
	file = normalized.file
	bindings: Dict[str, Binding] = {}
	for item in normalized.body:
		if isinstance(item, ImportDeclaration):
			for spec in item.specifiers:
				bindings[spec.local] = binding_for(spec, file)
		elif isinstance(item, VariableDeclaration):
			for declarator in item.declarations:
				bindings[declarator.name] = binding_for(declarator, file)
		elif isinstance(item, (TypeAlias, InterfaceDeclaration, ClassDeclaration, FunctionDeclaration)):
			bindings[item.name] = binding_for(item, file)
	return Scope(bindings=MappingProxyType(bindings), file=file)


# --- module loading ---


class ModuleLoadError(LookupError):
	"""A module specifier could not be turned into a parsed module."""


@dataclass
class LoadedModule:
	module: Module
	normalized: NormalizedModule
	scope: Scope

	@property
	def file(self) -> Optional[str]:
		return self.module.file

	@property
	def exports(self):
		return self.normalized.exports

	@classmethod
	def from_module(cls, module: Module) -> "LoadedModule":
		normalized = normalize_module(module)
		return cls(module=module, normalized=normalized, scope=build_module_scope(normalized))


class ModuleLoader(Protocol):
	"""Port used by the resolver to read another module."""

	def load(self, specifier: str, importer: Optional[str]) -> LoadedModule:
		"""
		Load the module `specifier` as imported from the file `importer`.

		Raises ModuleLoadError when the module cannot be found or parsed.
		"""
		...


def is_relative_specifier(specifier: str) -> bool:
	return specifier.startswith("./") or specifier.startswith("../") or specifier in (".", "..")


def candidate_paths(
	base: str, options: ModuleResolutionOptions, join: Callable[[str, str], str] = os.path.join
) -> List[str]:
	"""Paths tried for `base`, in order: as written, with each extension, then index files."""
	out = [base]
	out.extend(base + ext for ext in options.extensions)
	for index in options.index_names:
		out.extend(join(base, index + ext) for ext in options.extensions)
	return out


class FileModuleLoader:
	"""Loads relative imports from disk, memoizing one parse per resolved path."""

	def __init__(self, options: Optional[ModuleResolutionOptions] = None) -> None:
		self.options = options or ModuleResolutionOptions()
		self._cache: Dict[str, LoadedModule] = {}

	def resolve_path(self, specifier: str, importer: Optional[str]) -> Path:
		if not is_relative_specifier(specifier):
			raise ModuleLoadError(f"only relative imports can be followed, got {specifier!r}")
		base_dir = Path(importer).parent if importer else Path.cwd()
		base = os.path.normpath(os.path.join(str(base_dir), specifier))
		for candidate in candidate_paths(base, self.options):
			if os.path.isfile(candidate):
				return Path(candidate).resolve()
		raise ModuleLoadError(f"cannot find module {specifier!r} from {importer or '.'}")

	def load(self, specifier: str, importer: Optional[str]) -> LoadedModule:
		path = self.resolve_path(specifier, importer)
		key = str(path)
		cached = self._cache.get(key)
		if cached is not None:
			return cached
		logger.debug("loading module %s (imported as %r from %s)", key, specifier, importer)
		try:
			module = parse_file(path)
		except (UnexpectedInput, SourceSyntaxError) as err:
			raise ModuleLoadError(f"cannot parse module {key}: {err}") from err
		except OSError as err:
			raise ModuleLoadError(f"cannot read module {key}: {err}") from err
		loaded = LoadedModule.from_module(module)
		self._cache[key] = loaded
		return loaded


class DictModuleLoader:
	"""Serves modules from a `{posix path: source}` mapping; used by tests and embedders."""

	def __init__(self, sources: Mapping[str, str], options: Optional[ModuleResolutionOptions] = None) -> None:
		self.sources = dict(sources)
		self.options = options or ModuleResolutionOptions()
		self._cache: Dict[str, LoadedModule] = {}

	def load(self, specifier: str, importer: Optional[str]) -> LoadedModule:
		if not is_relative_specifier(specifier):
			raise ModuleLoadError(f"only relative imports can be followed, got {specifier!r}")
		base = posixpath.normpath(posixpath.join(posixpath.dirname(importer or "/"), specifier))
		for candidate in candidate_paths(base, self.options, join=posixpath.join):
			if candidate in self.sources:
				break
		else:
			raise ModuleLoadError(f"cannot find module {specifier!r} from {importer or '/'}")
		cached = self._cache.get(candidate)
		if cached is not None:
			return cached
		try:
			module = parse_module(self.sources[candidate], file=candidate)
		except (UnexpectedInput, SourceSyntaxError) as err:
			raise ModuleLoadError(f"cannot parse module {candidate}: {err}") from err
		loaded = LoadedModule.from_module(module)
		self._cache[candidate] = loaded
		return loaded


@dataclass(frozen=True)
class ResolvedImport:
	"""Where an import specifier leads: the exporting module's binding and that module's scope."""

	binding: Binding
	scope: Scope


class BindingResolver:
	def __init__(self, loader: ModuleLoader) -> None:
		self.loader = loader

	def resolve_import(self, spec: ImportSpecifier, importer: Optional[str]) -> ResolvedImport:
		if spec.kind == "typeof":
			raise error_at(
				ErrorKind.TYPEOF_IMPORT_UNSUPPORTED,
				spec,
				f"`import typeof {spec.local}` names the type of a value; import the type itself instead",
				file=importer,
			)
		if spec.is_namespace or spec.imported is None:
			raise error_at(
				ErrorKind.UNSUPPORTED_TYPE_KIND,
				spec,
				f"namespace import {spec.local!r} cannot be used as a type",
				file=importer,
			)
		try:
			loaded = self.loader.load(spec.source, importer)
		except ModuleLoadError as err:
			raise error_at(ErrorKind.MISSING_REFERENCE, spec, str(err), file=importer) from err
		found = self._find_export(loaded, spec.imported, set())
		if found is None:
			raise error_at(
				ErrorKind.MISSING_REFERENCE,
				spec,
				f"module {spec.source!r} has no export named {spec.imported!r}",
				file=importer,
			)
		module, local = found
		decl = find_local_declaration(module.normalized.body, local)
		if decl is None:
			raise error_at(
				ErrorKind.MISSING_REFERENCE,
				spec,
				f"export {spec.imported!r} of {spec.source!r} refers to {local!r}, which is not declared there",
				file=importer,
			)
		logger.debug("resolved %s from %r to %s in %s", spec.local, spec.source, type(decl).__name__, module.file)
		return ResolvedImport(binding=binding_for(decl, module.file), scope=module.scope)

	def _find_export(self, loaded: LoadedModule, name: str, seen: set) -> Optional[Tuple[LoadedModule, str]]:
		key = loaded.file or id(loaded)
		if key in seen:
			return None
		seen.add(key)
		entry = find_export(loaded.normalized, name)
		if entry is not None:
			return loaded, entry.local
		if name == "default":
			return None
		for source in loaded.normalized.star_sources:
			try:
				target = self.loader.load(source, loaded.file)
			except ModuleLoadError:
				logger.debug("skipping unresolvable `export * from %r` in %s", source, loaded.file)
				continue
			found = self._find_export(target, name, seen)
			if found is not None:
				return found
		return None


__all__ = [
	"BindingKind",
	"Binding",
	"Scope",
	"resolve",
	"binding_for",
	"build_module_scope",
	"ModuleLoadError",
	"LoadedModule",
	"ModuleLoader",
	"is_relative_specifier",
	"candidate_paths",
	"FileModuleLoader",
	"DictModuleLoader",
	"ResolvedImport",
	"BindingResolver",
]
