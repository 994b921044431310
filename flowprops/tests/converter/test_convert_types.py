# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from flowprops.errors import ConversionError, ErrorKind
from flowprops.test_support import convert_props, props_text


def _component(props: str, prelude: str = "") -> str:
	return f"{prelude}\nclass Foo extends React.Component {{\n  props: {props};\n}}\n"


def _field(type_src: str, prelude: str = "") -> str:
	return props_text(_component(f"{{a: {type_src}}}", prelude))


@pytest.mark.parametrize(
	"type_src, expected",
	[
		("any", "PropTypes.any"),
		("mixed", "PropTypes.any"),
		("number", "PropTypes.number"),
		("boolean", "PropTypes.bool"),
		("string", "PropTypes.string"),
		("Function", "PropTypes.func"),
		("Object", "PropTypes.object"),
		("(x: number) => void", "PropTypes.func"),
		("[number, string]", "PropTypes.array"),
		("Array<string>", "PropTypes.arrayOf(PropTypes.string)"),
		("string[]", "PropTypes.arrayOf(PropTypes.string)"),
	],
)
def test_primitive_fields_are_required(type_src: str, expected: str) -> None:
	assert _field(type_src) == f"{{a: {expected}.isRequired}}"


@pytest.mark.parametrize(
	"type_src, expected",
	[
		("1", "PropTypes.oneOf([1])"),
		("true", "PropTypes.oneOf([true])"),
		("'x'", "PropTypes.oneOf(['x'])"),
		("null", "PropTypes.oneOf([null])"),
		("void", "PropTypes.oneOf([undefined])"),
	],
)
def test_literal_types_check_one_value(type_src: str, expected: str) -> None:
	assert _field(type_src) == f"{{a: {expected}.isRequired}}"


def test_optional_key_is_not_required() -> None:
	assert props_text(_component("{a?: number}")) == "{a: PropTypes.number}"


def test_nullable_field_value_propagates_optionality() -> None:
	assert _field("?boolean") == "{a: PropTypes.bool}"
	assert convert_props(_component("{a: ?boolean}")) == convert_props(_component("{a?: boolean}"))


def test_nullable_below_the_field_value_is_a_union_with_null() -> None:
	assert _field("Array<?boolean>") == (
		"{a: PropTypes.arrayOf(PropTypes.oneOf([null, undefined, PropTypes.bool])).isRequired}"
	)
	assert _field("{b: Array<?number>}") == (
		"{a: PropTypes.shape({b: PropTypes.arrayOf(PropTypes.oneOf([null, undefined, PropTypes.number])).isRequired})"
		".isRequired}"
	)


def test_nullable_through_an_alias_stays_optional() -> None:
	assert _field("MaybeName", prelude="type MaybeName = ?string;") == "{a: PropTypes.string}"


def test_literal_union_collapses_into_one_enumeration() -> None:
	assert _field("1 | true | \"three\" | null | void") == (
		"{a: PropTypes.oneOf([1, true, \"three\", null, undefined]).isRequired}"
	)


def test_mixed_union_uses_one_of_type() -> None:
	assert _field("number | 'auto'") == (
		"{a: PropTypes.oneOfType([PropTypes.number, PropTypes.oneOf(['auto'])]).isRequired}"
	)


def test_nested_objects_are_shapes() -> None:
	assert _field("{b: string, c?: {d: number}}") == (
		"{a: PropTypes.shape({b: PropTypes.string.isRequired, c: PropTypes.shape({d: PropTypes.number.isRequired})})"
		".isRequired}"
	)


def test_exact_object_converts_like_an_object() -> None:
	assert _field("{| b: string |}") == "{a: PropTypes.shape({b: PropTypes.string.isRequired}).isRequired}"


def test_single_indexer_is_object_of() -> None:
	assert _field("{[key: string]: number}") == "{a: PropTypes.objectOf(PropTypes.number).isRequired}"


def test_keys_keep_their_quoting() -> None:
	text = props_text(_component("{'data-id'?: string, \"aria-label\": string, plain: string}"))
	assert text == (
		"{'data-id': PropTypes.string, \"aria-label\": PropTypes.string.isRequired, plain: PropTypes.string.isRequired}"
	)


def test_method_property_is_a_function() -> None:
	assert props_text(_component("{onChange(value: string): void}")) == "{onChange: PropTypes.func.isRequired}"


def test_empty_props() -> None:
	assert props_text(_component("{}")) == "{}"


@pytest.mark.parametrize(
	"props, kind",
	[
		("{a: string, [key: string]: number}", ErrorKind.MIXED_SHAPE),
		("{...Base, [key: string]: number}", ErrorKind.MIXED_SHAPE),
		("{[key: string]: number, [index: number]: string}", ErrorKind.MIXED_SHAPE),
		("{(): void}", ErrorKind.UNSUPPORTED_CALL_SIGNATURE),
		("{a: {b: string, (): void}}", ErrorKind.UNSUPPORTED_CALL_SIGNATURE),
		("{a: React.Node}", ErrorKind.QUALIFIED_IDENTIFIER_UNSUPPORTED),
		("{a: React.Element<any>}", ErrorKind.QUALIFIED_IDENTIFIER_UNSUPPORTED),
		("{a: Map<string, number>}", ErrorKind.UNSUPPORTED_TYPE_KIND),
		("{a: Array<string, number>}", ErrorKind.UNSUPPORTED_TYPE_KIND),
		("{a: Unknown}", ErrorKind.MISSING_REFERENCE),
		("string", ErrorKind.UNSUPPORTED_TYPE_KIND),
		("Array<{a: string}>", ErrorKind.UNSUPPORTED_TYPE_KIND),
	],
)
def test_unsupported_shapes_fail(props: str, kind: ErrorKind) -> None:
	with pytest.raises(ConversionError) as excinfo:
		convert_props(_component(props, prelude="type Base = {b: string};"))
	assert excinfo.value.kind is kind


def test_errors_carry_the_offending_position() -> None:
	src = "class Foo extends React.Component {\n  props: {\n    a: string,\n    b: Missing,\n  };\n}\n"
	with pytest.raises(ConversionError) as excinfo:
		convert_props(src)
	err = excinfo.value
	assert err.kind is ErrorKind.MISSING_REFERENCE
	assert (err.span.file, err.span.line, err.span.column) == ("/src/main.js", 4, 8)
	assert "Missing" in err.message
	assert str(err).startswith("/src/main.js:4:8: [MissingReference]")


def test_conversion_is_deterministic() -> None:
	src = _component("{a: ?Array<1 | 2>, b: {c: string}, ...Base}", prelude="type Base = {d: number};")
	assert convert_props(src) == convert_props(src)
