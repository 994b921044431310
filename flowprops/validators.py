# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Validator expression tree: the converter's output.

These nodes describe JavaScript expressions built from the validator library
vocabulary (`PropTypes.bool`, `PropTypes.arrayOf(...)`, `.isRequired`, object
literals). They are immutable; rewriting a node means building a new one with
`dataclasses.replace`.

Converter rules return a `ConvertedValue`: either `RequiredValue` (the caller
may append `.isRequired`) or `OptionalValue` (the caller must leave the value
optional). Only the field rule inspects the difference.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Identifier:
	name: str
	leading_comments: Tuple[str, ...] = field(default=(), compare=False)
	trailing_comments: Tuple[str, ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class MemberAccess:
	value: "ValidatorExpr"
	attr: str
	leading_comments: Tuple[str, ...] = field(default=(), compare=False)
	trailing_comments: Tuple[str, ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class Call:
	func: "ValidatorExpr"
	args: Tuple["ValidatorExpr", ...] = ()
	leading_comments: Tuple[str, ...] = field(default=(), compare=False)
	trailing_comments: Tuple[str, ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class Literal:
	"""A JavaScript literal; `value` None is `null`. `raw` keeps the source spelling."""

	value: object
	raw: Optional[str] = None
	leading_comments: Tuple[str, ...] = field(default=(), compare=False)
	trailing_comments: Tuple[str, ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class ArrayLiteral:
	items: Tuple["ValidatorExpr", ...] = ()
	leading_comments: Tuple[str, ...] = field(default=(), compare=False)
	trailing_comments: Tuple[str, ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class ObjectField:
	"""
	One `key: value` entry. `key` is the key as written in the source type
	(quotes included when `quoted`), so `'data-id'?: string` keeps its quotes.
	"""

	key: str
	value: "ValidatorExpr"
	quoted: bool = False
	leading_comments: Tuple[str, ...] = field(default=(), compare=False)
	trailing_comments: Tuple[str, ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class ObjectLiteral:
	fields: Tuple[ObjectField, ...] = ()
	leading_comments: Tuple[str, ...] = field(default=(), compare=False)
	trailing_comments: Tuple[str, ...] = field(default=(), compare=False)


ValidatorExpr = Union[Identifier, MemberAccess, Call, Literal, ArrayLiteral, ObjectLiteral]


@dataclass(frozen=True)
class ConvertedValue:
	expr: ValidatorExpr


@dataclass(frozen=True)
class RequiredValue(ConvertedValue):
	"""May be marked required by the enclosing field."""


@dataclass(frozen=True)
class OptionalValue(ConvertedValue):
	"""Must stay optional even when the enclosing field is not `key?:`."""


def member(value: ValidatorExpr, *path: str) -> ValidatorExpr:
	"""`member(ns, "arrayOf")` -> `ns.arrayOf`; several names chain."""
	out = value
	for attr in path:
		out = MemberAccess(out, attr)
	return out


def call(func: ValidatorExpr, *args: ValidatorExpr) -> Call:
	return Call(func, tuple(args))


def is_required_marker(expr: ValidatorExpr) -> bool:
	return isinstance(expr, MemberAccess) and expr.attr == "isRequired"


def strip_required(expr: ValidatorExpr) -> ValidatorExpr:
	"""Drop a trailing `.isRequired`, keeping comments attached to the outer node."""
	if not is_required_marker(expr):
		return expr
	inner = expr.value
	if expr.leading_comments or expr.trailing_comments:
		inner = replace(
			inner,
			leading_comments=inner.leading_comments + expr.leading_comments,
			trailing_comments=inner.trailing_comments + expr.trailing_comments,
		)
	return inner


def _render_literal(lit: Literal) -> str:
	if lit.raw is not None:
		return lit.raw
	if lit.value is None:
		return "null"
	if isinstance(lit.value, bool):
		return "true" if lit.value else "false"
	if isinstance(lit.value, str):
		return json.dumps(lit.value)
	return repr(lit.value)


def render(expr: ValidatorExpr, indent: Optional[int] = None) -> str:
	"""
	Render `expr` as JavaScript-like text.

	With `indent=None` the result is a single line and comments are dropped;
	this is the form logs and tests compare against. With an integer indent,
	object literals are broken one field per line and field comments are
	emitted around their fields; an object's own comments precede its brace.
	"""
	return _Renderer(indent).render(expr, 0)


class _Renderer:
	def __init__(self, indent: Optional[int]) -> None:
		self.indent = indent

	def render(self, expr: ValidatorExpr, level: int) -> str:
		if isinstance(expr, Identifier):
			return expr.name
		if isinstance(expr, MemberAccess):
			return f"{self.render(expr.value, level)}.{expr.attr}"
		if isinstance(expr, Call):
			args = ", ".join(self.render(arg, level) for arg in expr.args)
			return f"{self.render(expr.func, level)}({args})"
		if isinstance(expr, Literal):
			return _render_literal(expr)
		if isinstance(expr, ArrayLiteral):
			return "[" + ", ".join(self.render(item, level) for item in expr.items) + "]"
		if isinstance(expr, ObjectLiteral):
			return self._render_object(expr, level)
		raise TypeError(f"not a validator expression: {type(expr).__name__}")

	def _render_object(self, obj: ObjectLiteral, level: int) -> str:
		if self.indent is None:
			body = ", ".join(f"{f.key}: {self.render(f.value, level)}" for f in obj.fields)
			return "{" + body + "}"
		prefix = self._object_comments(obj, level)
		if not obj.fields:
			return prefix + "{}"
		pad = " " * (self.indent * (level + 1))
		lines = [prefix + "{"]
		for f in obj.fields:
			for comment in f.leading_comments:
				lines.append(pad + comment)
			line = f"{pad}{f.key}: {self.render(f.value, level + 1)},"
			if f.trailing_comments:
				line += " " + " ".join(f.trailing_comments)
			lines.append(line)
		lines.append(" " * (self.indent * level) + "}")
		return "\n".join(lines)

	def _object_comments(self, obj: ObjectLiteral, level: int) -> str:
		# A line comment would swallow the brace, so it ends its own line.
		out = ""
		for comment in obj.leading_comments:
			if comment.startswith("//"):
				out += comment + "\n" + " " * (self.indent * level)
			else:
				out += comment + " "
		return out


__all__ = [
	"Identifier",
	"MemberAccess",
	"Call",
	"Literal",
	"ArrayLiteral",
	"ObjectField",
	"ObjectLiteral",
	"ValidatorExpr",
	"ConvertedValue",
	"RequiredValue",
	"OptionalValue",
	"member",
	"call",
	"is_required_marker",
	"strip_required",
	"render",
]
