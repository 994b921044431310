# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Configuration records for the converter, the module loader and the host.

The converter never imports anything itself. It asks `namespace_ref()` /
`all_ref()` for the identifier to use each time it needs one, and the host
supplies memoizing callables that add the corresponding import on first use.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Tuple

from flowprops.validators import Identifier

DEFAULT_EXTENSIONS: Tuple[str, ...] = (".js", ".jsx", ".mjs", ".flow")
DEFAULT_INDEX_NAMES: Tuple[str, ...] = ("index",)


@dataclass(frozen=True)
class ModuleResolutionOptions:
	"""How `./foo` is turned into a file: exact path, then `foo<ext>`, then `foo/<index><ext>`."""

	extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
	index_names: Tuple[str, ...] = DEFAULT_INDEX_NAMES


def _default_namespace_ref() -> Identifier:
	return Identifier("PropTypes")


def _default_all_ref() -> Identifier:
	return Identifier("all")


@dataclass(frozen=True)
class ConvertOptions:
	namespace_ref: Callable[[], Identifier] = _default_namespace_ref
	all_ref: Callable[[], Identifier] = _default_all_ref
	has_default_name: str = "HasDefaultProp"
	checked_by_name: str = "CheckedBy"
	exact_name: str = "$Exact"
	# Disallowed kinds raise UnsupportedTypeKind instead of converting.
	allow_null_types: bool = True
	allow_void_types: bool = True
	allow_nullable_types: bool = True
	module_resolution: ModuleResolutionOptions = field(default_factory=ModuleResolutionOptions)


@dataclass(frozen=True)
class HostOptions:
	"""Which validator libraries the host imports, and the local names it prefers for them."""

	prop_types_source: str = "prop-types"
	prop_types_local: str = "_PropTypes"
	all_source: str = "prop-types-extra/lib/all"
	all_local: str = "_all"
	react_source: str = "react"
	# Typed class field -> generated static field.
	fields: Tuple[Tuple[str, str], ...] = (("props", "propTypes"), ("contextTypes", "contextTypes"))


__all__ = [
	"DEFAULT_EXTENSIONS",
	"DEFAULT_INDEX_NAMES",
	"ModuleResolutionOptions",
	"ConvertOptions",
	"HostOptions",
]
