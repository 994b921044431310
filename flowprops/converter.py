# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Type annotation -> validator expression conversion.

`Converter.convert` dispatches on `TypeNodeKind`: every kind has exactly one
`_convert_<kind>` method, and the module refuses to import if one is missing.
Each rule returns a `RequiredValue` or an `OptionalValue`; the object-field
rule is the only consumer of the difference (it appends `.isRequired` to
required values of non-optional keys).

Rules are pure functions of `(node, options, context)`. The context is a
frozen record copied on every descent:

- `depth` is 0 for the outermost object type. Objects at depth 0 become a
  bare field map (the validator table itself); deeper objects are wrapped in
  `shape(...)`. Intersections at depth 0 merge field maps.
- `is_field_value` is set only while converting the type written directly
  after `key:`. Nullable types and `HasDefaultProp<T>` read it.
- `replacement` is the local name an imported class is known by in the file
  being transformed; `instanceOf` uses it instead of the declaration's name.
- `scope` is the scope the current node was written in, which changes when a
  reference is followed into another module.

Errors are raised where they are detected and never caught here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from flowprops.errors import ConversionError, ErrorKind, error_at
from flowprops.literals import encode_literal
from flowprops.options import ConvertOptions
from flowprops.parser.ast import (
	LITERAL_KINDS,
	ClassDeclaration,
	FunctionDeclaration,
	GenericType,
	ImportSpecifier,
	InterfaceDeclaration,
	NullLiteralType,
	ObjectProperty,
	ObjectType,
	QualifiedTypeIdentifier,
	SpreadProperty,
	TypeAlias,
	TypeIdentifier,
	TypeNode,
	TypeNodeKind,
	TypeParameter,
	VariableDeclarator,
	VoidType,
)
from flowprops.resolver import (
	Binding,
	BindingKind,
	BindingResolver,
	FileModuleLoader,
	Scope,
	resolve,
)
from flowprops.validators import (
	ArrayLiteral,
	ConvertedValue,
	Identifier,
	MemberAccess,
	ObjectField,
	ObjectLiteral,
	OptionalValue,
	RequiredValue,
	ValidatorExpr,
	call,
	member,
	strip_required,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionContext:
	scope: Scope
	depth: int = 0
	is_field_value: bool = False
	replacement: Optional[Identifier] = None
	# File being transformed; classes declared elsewhere need a replacement name.
	origin: Optional[str] = None

	@property
	def is_top_level(self) -> bool:
		return self.depth == 0

	@property
	def file(self) -> Optional[str]:
		return self.scope.file

	def nested(self) -> "ConversionContext":
		"""Context for a sub-term that is neither a field value nor a reference target."""
		return replace(self, is_field_value=False, replacement=None)


class Converter:
	def __init__(self, options: ConvertOptions, resolver: Optional[BindingResolver] = None) -> None:
		self.options = options
		self.resolver = resolver or BindingResolver(FileModuleLoader(options.module_resolution))

	# --- helpers ---

	def ns(self, *path: str) -> ValidatorExpr:
		return member(self.options.namespace_ref(), *path)

	def error(self, kind: ErrorKind, node: object, message: str, ctx: ConversionContext) -> ConversionError:
		return error_at(kind, node, message, file=ctx.file)

	def _one_of(self, values: List[ValidatorExpr]) -> RequiredValue:
		return RequiredValue(call(self.ns("oneOf"), ArrayLiteral(tuple(values))))

	def _encode(self, node: TypeNode, ctx: ConversionContext) -> ValidatorExpr:
		if node.kind is TypeNodeKind.NULL_LITERAL and not self.options.allow_null_types:
			raise self.error(ErrorKind.UNSUPPORTED_TYPE_KIND, node, "null types unsupported", ctx)
		if node.kind is TypeNodeKind.VOID and not self.options.allow_void_types:
			raise self.error(ErrorKind.UNSUPPORTED_TYPE_KIND, node, "void types unsupported", ctx)
		return encode_literal(node)

	# --- dispatch ---

	def convert(self, node: TypeNode, ctx: ConversionContext) -> ConvertedValue:
		kind = getattr(node, "kind", None)
		if not isinstance(kind, TypeNodeKind):
			raise self.error(
				ErrorKind.UNSUPPORTED_TYPE_KIND, node, f"no conversion for {type(node).__name__}", ctx
			)
		return getattr(self, f"_convert_{kind.value}")(node, ctx)

	def convert_member(self, node: TypeNode, ctx: ConversionContext) -> List[ObjectField]:
		"""Fields produced by one object-type member: one for a property, any number for a spread."""
		if isinstance(node, ObjectProperty):
			return [self._field(node, ctx)]
		if isinstance(node, SpreadProperty):
			return self._spread_fields(node, ctx)
		raise self.error(
			ErrorKind.UNSUPPORTED_TYPE_KIND, node, f"{node.kind.value} is not a field-producing member", ctx
		)

	# --- primitives ---

	def _convert_any(self, node, ctx) -> ConvertedValue:
		return RequiredValue(self.ns("any"))

	def _convert_mixed(self, node, ctx) -> ConvertedValue:
		# No runtime check is finer than `any`.
		return RequiredValue(self.ns("any"))

	def _convert_number(self, node, ctx) -> ConvertedValue:
		return RequiredValue(self.ns("number"))

	def _convert_boolean(self, node, ctx) -> ConvertedValue:
		return RequiredValue(self.ns("bool"))

	def _convert_string(self, node, ctx) -> ConvertedValue:
		return RequiredValue(self.ns("string"))

	def _convert_function(self, node, ctx) -> ConvertedValue:
		return RequiredValue(self.ns("func"))

	def _convert_tuple(self, node, ctx) -> ConvertedValue:
		# Elements are not checked positionally.
		return RequiredValue(self.ns("array"))

	# --- literals ---

	def _convert_literal(self, node, ctx) -> ConvertedValue:
		return self._one_of([self._encode(node, ctx)])

	_convert_null_literal = _convert_literal
	_convert_void = _convert_literal
	_convert_number_literal = _convert_literal
	_convert_boolean_literal = _convert_literal
	_convert_string_literal = _convert_literal

	# --- wrappers ---

	def _convert_nullable(self, node, ctx) -> ConvertedValue:
		if not self.options.allow_nullable_types:
			raise self.error(ErrorKind.UNSUPPORTED_TYPE_KIND, node, "maybe types unsupported", ctx)
		inner = self.convert(node.inner, ctx.nested())
		if ctx.is_field_value:
			return OptionalValue(inner.expr)
		null = self._encode_nullish(node, ctx)
		return self._one_of([*null, inner.expr])

	def _encode_nullish(self, node, ctx) -> List[ValidatorExpr]:
		return [encode_literal(NullLiteralType(loc=node.loc)), encode_literal(VoidType(loc=node.loc))]

	def _convert_array(self, node, ctx) -> ConvertedValue:
		element = self.convert(node.element, ctx.nested())
		return RequiredValue(call(self.ns("arrayOf"), element.expr))

	# --- objects ---

	def _convert_object(self, node: ObjectType, ctx) -> ConvertedValue:
		if node.call_properties:
			return self._convert_object_call_property(node.call_properties[0], ctx)
		if node.indexers:
			if node.properties:
				raise self.error(
					ErrorKind.MIXED_SHAPE,
					node,
					"an object type cannot mix named properties with an indexer",
					ctx,
				)
			if len(node.indexers) > 1:
				raise self.error(ErrorKind.MIXED_SHAPE, node.indexers[1], "an object type can have only one indexer", ctx)
			return self._convert_object_indexer(node.indexers[0], ctx)
		fields: List[ObjectField] = []
		for prop in node.properties:
			fields.extend(self.convert_member(prop, ctx))
		literal = ObjectLiteral(tuple(fields), leading_comments=tuple(node.leading_comments))
		if ctx.is_top_level:
			return RequiredValue(literal)
		return RequiredValue(call(self.ns("shape"), literal))

	def _convert_object_indexer(self, node, ctx) -> ConvertedValue:
		value = self.convert(node.value, replace(ctx.nested(), depth=ctx.depth + 1))
		return RequiredValue(call(self.ns("objectOf"), value.expr))

	def _convert_object_call_property(self, node, ctx) -> ConvertedValue:
		raise self.error(
			ErrorKind.UNSUPPORTED_CALL_SIGNATURE,
			node,
			"call signatures in object types have no runtime validator",
			ctx,
		)

	def _convert_object_property(self, node, ctx) -> ConvertedValue:
		raise self.error(
			ErrorKind.UNSUPPORTED_TYPE_KIND, node, "an object property only converts inside its object type", ctx
		)

	def _convert_spread_property(self, node, ctx) -> ConvertedValue:
		raise self.error(
			ErrorKind.UNSUPPORTED_TYPE_KIND, node, "a spread only converts inside its object type", ctx
		)

	def _field(self, prop: ObjectProperty, ctx: ConversionContext) -> ObjectField:
		value_ctx = replace(ctx, depth=ctx.depth + 1, is_field_value=True, replacement=None)
		value = self.convert(prop.value, value_ctx)
		expr = value.expr
		if not prop.optional and isinstance(value, RequiredValue):
			expr = MemberAccess(expr, "isRequired")
		return ObjectField(
			key=prop.key_raw,
			value=expr,
			quoted=prop.quoted,
			leading_comments=tuple(prop.leading_comments),
			trailing_comments=tuple(prop.trailing_comments),
		)

	def _spread_fields(self, spread: SpreadProperty, ctx: ConversionContext) -> List[ObjectField]:
		arg = spread.argument
		value = self.convert(arg, replace(ctx.nested(), depth=0))
		if not isinstance(value.expr, ObjectLiteral):
			raise self.error(ErrorKind.UNSUPPORTED_TYPE_KIND, spread, "only object types can be spread", ctx)
		fields = list(value.expr.fields)
		exact = isinstance(arg, GenericType) and arg.name == self.options.exact_name and bool(arg.type_params)
		if not exact:
			# A spread source may lack any of its keys at runtime.
			fields = [replace(f, value=strip_required(f.value)) for f in fields]
		if fields and spread.leading_comments:
			first = fields[0]
			fields[0] = replace(first, leading_comments=tuple(spread.leading_comments) + first.leading_comments)
		if fields and spread.trailing_comments:
			last = fields[-1]
			fields[-1] = replace(last, trailing_comments=last.trailing_comments + tuple(spread.trailing_comments))
		return fields

	# --- references ---

	def _convert_generic(self, node: GenericType, ctx) -> ConvertedValue:
		if isinstance(node.id, QualifiedTypeIdentifier):
			return self._convert_qualified_type_identifier(node.id, ctx)
		args = node.type_params or []
		if not args:
			return self._convert_type_identifier(node.id, ctx)
		name = node.id.name
		opts = self.options
		if name == "Array":
			self._expect_args(node, 1, ctx)
			element = self.convert(args[0], ctx.nested())
			return RequiredValue(call(self.ns("arrayOf"), element.expr))
		if name == opts.exact_name:
			self._expect_args(node, 1, ctx)
			return self.convert(args[0], ctx)
		if name == opts.checked_by_name:
			self._expect_args(node, 2, ctx)
			return self.convert(args[1], ctx)
		if name == opts.has_default_name:
			self._expect_args(node, 1, ctx)
			if not ctx.is_field_value:
				raise self.error(
					ErrorKind.ILLEGAL_ESCAPE_HATCH_PLACEMENT,
					node,
					f"{name}<T> may only be used directly as the type of an object property",
					ctx,
				)
			return OptionalValue(self.convert(args[0], ctx).expr)
		raise self.error(ErrorKind.UNSUPPORTED_TYPE_KIND, node, f"unsupported generic type {name}<...>", ctx)

	def _expect_args(self, node: GenericType, count: int, ctx) -> None:
		got = len(node.type_params or [])
		if got != count:
			plural = "s" if count != 1 else ""
			raise self.error(
				ErrorKind.UNSUPPORTED_TYPE_KIND,
				node,
				f"{node.name} expects {count} type argument{plural}, got {got}",
				ctx,
			)

	def _convert_qualified_type_identifier(self, node: QualifiedTypeIdentifier, ctx) -> ConvertedValue:
		raise self.error(
			ErrorKind.QUALIFIED_IDENTIFIER_UNSUPPORTED,
			node,
			f"qualified type {node.dotted} has no runtime validator",
			ctx,
		)

	def _convert_type_identifier(self, node: TypeIdentifier, ctx) -> ConvertedValue:
		binding = resolve(ctx.scope, node.name)
		if binding is None:
			if node.name == "Function":
				return RequiredValue(self.ns("func"))
			if node.name == "Object":
				return RequiredValue(self.ns("object"))
			raise self.error(ErrorKind.MISSING_REFERENCE, node, f"cannot find a declaration for {node.name!r}", ctx)
		return self._convert_binding(binding, node, ctx)

	def _convert_binding(self, binding: Binding, use: TypeIdentifier, ctx: ConversionContext) -> ConvertedValue:
		decl = binding.node
		if binding.kind is BindingKind.IMPORT:
			return self._convert_import(binding, use, ctx)
		if binding.kind is BindingKind.PARAM:
			assert isinstance(decl, TypeParameter)
			raise self.error(
				ErrorKind.UNSUPPORTED_TYPE_KIND, use, f"type parameter {decl.name!r} has no runtime validator", ctx
			)
		if binding.kind is BindingKind.MODULE:
			assert isinstance(decl, VariableDeclarator)
			raise self.error(ErrorKind.UNSUPPORTED_TYPE_KIND, use, f"{decl.name!r} is a value, not a type", ctx)
		if isinstance(decl, TypeAlias):
			body_ctx = replace(ctx, scope=ctx.scope.root().child_for_params(decl.type_params), replacement=None)
			return self.convert(decl.right, body_ctx)
		if isinstance(decl, InterfaceDeclaration):
			body_ctx = replace(ctx, scope=ctx.scope.root().child_for_params(decl.type_params), replacement=None)
			return self.convert(decl.body, body_ctx)
		if isinstance(decl, ClassDeclaration):
			return self._convert_class(decl, binding, use, ctx)
		if isinstance(decl, FunctionDeclaration):
			raise self.error(ErrorKind.UNSUPPORTED_TYPE_KIND, use, f"{decl.name!r} is a function, not a type", ctx)
		raise self.error(
			ErrorKind.UNSUPPORTED_TYPE_KIND, use, f"cannot convert a {type(decl).__name__} binding", ctx
		)

	def _convert_class(self, decl: ClassDeclaration, binding: Binding, use, ctx) -> ConvertedValue:
		ref = ctx.replacement
		if ref is None:
			if binding.source_file != ctx.origin:
				raise self.error(
					ErrorKind.MISSING_REFERENCE,
					use,
					f"class {decl.name!r} from {binding.source_file} is not imported into {ctx.origin}; "
					f"import {decl.name} into {ctx.origin} so instanceOf can reference it",
					ctx,
				)
			ref = Identifier(decl.name)
		return RequiredValue(call(self.ns("instanceOf"), ref))

	def _convert_import(self, binding: Binding, use, ctx: ConversionContext) -> ConvertedValue:
		spec = binding.node
		assert isinstance(spec, ImportSpecifier)
		resolved = self.resolver.resolve_import(spec, binding.source_file)
		replacement = ctx.replacement
		if replacement is None and binding.source_file == ctx.origin:
			replacement = Identifier(spec.local)
		target_ctx = replace(ctx, scope=resolved.scope, replacement=replacement)
		return self._convert_binding(resolved.binding, use, target_ctx)

	# --- combinations ---

	def _convert_union(self, node, ctx) -> ConvertedValue:
		if all(t.kind in LITERAL_KINDS for t in node.types):
			return self._one_of([self._encode(t, ctx) for t in node.types])
		members = [self.convert(t, ctx.nested()).expr for t in node.types]
		return RequiredValue(call(self.ns("oneOfType"), ArrayLiteral(tuple(members))))

	def _convert_intersection(self, node, ctx) -> ConvertedValue:
		if not ctx.is_top_level:
			members = [self.convert(t, ctx.nested()).expr for t in node.types]
			return RequiredValue(call(self.options.all_ref(), *members))
		fields: List[ObjectField] = []
		for t in node.types:
			value = self.convert(t, ctx.nested())
			if not isinstance(value.expr, ObjectLiteral):
				raise self.error(
					ErrorKind.UNSUPPORTED_TOP_LEVEL_INTERSECTION,
					t,
					"every member of a top-level intersection must be an object type",
					ctx,
				)
			fields.extend(value.expr.fields)
		return RequiredValue(ObjectLiteral(tuple(fields)))


_MISSING_RULES = [k.value for k in TypeNodeKind if not callable(getattr(Converter, f"_convert_{k.value}", None))]
if _MISSING_RULES:
	raise ImportError(f"Converter has no rule for: {', '.join(_MISSING_RULES)}")


def convert_type_to_validators(
	annotation: TypeNode,
	options: Optional[ConvertOptions] = None,
	scope: Optional[Scope] = None,
	resolver: Optional[BindingResolver] = None,
	origin: Optional[str] = None,
) -> ObjectLiteral:
	"""
	Convert the type of a `props`-like field into the validator table literal.

	`scope` is the module scope the annotation was written in (see
	`flowprops.resolver.build_module_scope`); `origin` defaults to its file.
	The result is always an object literal; annotations that do not convert
	to one (`props: string`) raise UnsupportedTypeKind.
	"""
	options = options or ConvertOptions()
	scope = scope or Scope()
	ctx = ConversionContext(scope=scope, origin=origin if origin is not None else scope.file)
	value = Converter(options, resolver).convert(annotation, ctx)
	if not isinstance(value.expr, ObjectLiteral):
		raise error_at(
			ErrorKind.UNSUPPORTED_TYPE_KIND,
			annotation,
			"a validator table needs an object type (or an intersection of object types)",
			file=scope.file,
		)
	logger.debug("converted %d field(s) at %s", len(value.expr.fields), getattr(annotation, "loc", None))
	return value.expr


__all__ = [
	"ConversionContext",
	"Converter",
	"convert_type_to_validators",
]
