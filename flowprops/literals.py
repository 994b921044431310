# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Encode literal type nodes as the JavaScript values a `oneOf([...])` compares against."""

from __future__ import annotations

from flowprops.parser.ast import (
	BooleanLiteralType,
	NullLiteralType,
	NumberLiteralType,
	StringLiteralType,
	TypeNode,
	VoidType,
)
from flowprops.validators import Identifier, Literal, ValidatorExpr


def encode_literal(node: TypeNode) -> ValidatorExpr:
	if isinstance(node, VoidType):
		# `void` has no literal spelling; the global binding stands in for it.
		return Identifier("undefined")
	if isinstance(node, NullLiteralType):
		return Literal(None, "null")
	if isinstance(node, BooleanLiteralType):
		return Literal(node.value, "true" if node.value else "false")
	if isinstance(node, (NumberLiteralType, StringLiteralType)):
		return Literal(node.value, node.raw)
	raise TypeError(f"not a literal type: {type(node).__name__}")


__all__ = ["encode_literal"]
