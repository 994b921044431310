# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest
from lark.exceptions import UnexpectedInput

from flowprops.parser import SourceSyntaxError, parse_module
from flowprops.parser.ast import (
	ArrayType,
	FunctionType,
	GenericType,
	NullableType,
	ObjectProperty,
	ObjectType,
	QualifiedTypeIdentifier,
	SpreadProperty,
	TypeAlias,
	TypeIdentifier,
	TypeNodeKind,
	UnionType,
)


def _alias(src: str, name: str = "T"):
	module = parse_module(src)
	for item in module.items:
		if isinstance(item, TypeAlias) and item.name == name:
			return item.right
	raise AssertionError(f"no alias {name}")


def _props(src: str) -> dict:
	obj = _alias(src)
	assert isinstance(obj, ObjectType)
	return {p.key: p for p in obj.properties if isinstance(p, ObjectProperty)}


def test_primitive_names_are_classified() -> None:
	props = _props(
		"type T = {a: number, b: string, c: boolean, d: any, e: mixed, f: null, g: void, h: true, i: bool};"
	)
	kinds = {key: prop.value.kind for key, prop in props.items()}
	assert kinds == {
		"a": TypeNodeKind.NUMBER,
		"b": TypeNodeKind.STRING,
		"c": TypeNodeKind.BOOLEAN,
		"d": TypeNodeKind.ANY,
		"e": TypeNodeKind.MIXED,
		"f": TypeNodeKind.NULL_LITERAL,
		"g": TypeNodeKind.VOID,
		"h": TypeNodeKind.BOOLEAN_LITERAL,
		"i": TypeNodeKind.BOOLEAN,
	}
	assert props["h"].value.value is True


def test_flow_keywords_stay_usable_as_property_names() -> None:
	props = _props("type T = {string: number, type: string, default: boolean, class: any};")
	assert set(props) == {"string", "type", "default", "class"}
	assert props["string"].value.kind is TypeNodeKind.NUMBER


def test_function_and_object_globals_stay_identifiers() -> None:
	props = _props("type T = {a: Function, b: Object, c: Foo};")
	assert isinstance(props["a"].value, TypeIdentifier)
	assert props["a"].value.name == "Function"
	assert isinstance(props["b"].value, TypeIdentifier)
	assert props["c"].value.name == "Foo"


def test_nullable_array_and_generic() -> None:
	props = _props("type T = {a: ?Array<?boolean>, b: string[], c: (string | number)[]};")
	a = props["a"].value
	assert isinstance(a, NullableType)
	assert isinstance(a.inner, GenericType)
	assert a.inner.name == "Array"
	assert a.inner.type_params[0].kind is TypeNodeKind.NULLABLE
	assert isinstance(props["b"].value, ArrayType)
	assert props["b"].value.element.kind is TypeNodeKind.STRING
	c = props["c"].value
	assert isinstance(c, ArrayType)
	assert isinstance(c.element, UnionType)


def test_literal_union_members_keep_their_spelling() -> None:
	union = _alias("type T = 1 | true | \"three\" | 'four' | null | void | -2.5;")
	assert isinstance(union, UnionType)
	assert [t.kind for t in union.types] == [
		TypeNodeKind.NUMBER_LITERAL,
		TypeNodeKind.BOOLEAN_LITERAL,
		TypeNodeKind.STRING_LITERAL,
		TypeNodeKind.STRING_LITERAL,
		TypeNodeKind.NULL_LITERAL,
		TypeNodeKind.VOID,
		TypeNodeKind.NUMBER_LITERAL,
	]
	assert union.types[2].value == "three"
	assert union.types[3].raw == "'four'"
	assert union.types[6].value == -2.5


def test_leading_bar_union() -> None:
	union = _alias("type T =\n  | 'small'\n  | 'large';")
	assert isinstance(union, UnionType)
	assert [t.value for t in union.types] == ["small", "large"]


def test_quoted_and_optional_keys() -> None:
	props = _props("type T = {'data-id'?: string, \"b\": number, c?: boolean};")
	data = props["data-id"]
	assert data.quoted is True
	assert data.optional is True
	assert data.key_raw == "'data-id'"
	assert props["b"].key_raw == '"b"'
	assert props["c"].optional is True
	assert props["c"].quoted is False


def test_spread_indexer_and_call_property() -> None:
	obj = _alias("type T = {...A, [key: string]: number, (x: number): void};")
	assert isinstance(obj, ObjectType)
	assert isinstance(obj.properties[0], SpreadProperty)
	assert obj.properties[0].argument.name == "A"
	assert len(obj.indexers) == 1
	assert obj.indexers[0].name == "key"
	assert obj.indexers[0].key.kind is TypeNodeKind.STRING
	assert len(obj.call_properties) == 1
	assert obj.call_properties[0].value.params[0].name == "x"


def test_anonymous_indexer() -> None:
	obj = _alias("type T = {[string]: boolean};")
	assert obj.indexers[0].name is None
	assert obj.indexers[0].value.kind is TypeNodeKind.BOOLEAN


def test_function_types() -> None:
	props = _props(
		"type T = {onClick: (e: Event, ...rest: Array<mixed>) => void, cb(x?: number): string, f: () => void};"
	)
	click = props["onClick"].value
	assert isinstance(click, FunctionType)
	assert [p.name for p in click.params] == ["e", "rest"]
	assert click.params[1].rest is True
	assert isinstance(props["cb"].value, FunctionType)
	assert props["cb"].value.params[0].optional is True
	assert props["f"].value.params == []


def test_exact_object_and_qualified_name() -> None:
	obj = _alias("type T = {| a: React.Node, b: $Exact<{c: number}> |};")
	assert obj.exact is True
	a = obj.properties[0].value
	assert isinstance(a, QualifiedTypeIdentifier)
	assert a.dotted == "React.Node"
	b = obj.properties[1].value
	assert isinstance(b, GenericType)
	assert b.name == "$Exact"


def test_intersection() -> None:
	inter = _alias("type T = {a: number} & {b: string} & C;")
	assert inter.kind is TypeNodeKind.INTERSECTION
	assert len(inter.types) == 3


def test_positions_are_recorded() -> None:
	props = _props("type T = {\n  a: number,\n  b: Foo,\n};")
	assert (props["a"].loc.line, props["a"].loc.column) == (2, 3)
	assert (props["b"].value.loc.line, props["b"].value.loc.column) == (3, 6)


def test_bare_parens_without_return_type_are_rejected() -> None:
	with pytest.raises(SourceSyntaxError) as excinfo:
		parse_module("type T = {a: ()};", file="bad.js")
	assert excinfo.value.loc.line == 1
	assert excinfo.value.file == "bad.js"


def test_syntax_error_surfaces_as_lark_error() -> None:
	with pytest.raises(UnexpectedInput):
		parse_module("type = ;")
