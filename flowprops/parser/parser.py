from __future__ import annotations

import ast as py_ast
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from lark import Lark, Token, Tree

from .ast import (
    AnyType,
    ArrayExpr,
    ArrayType,
    ArrowFunction,
    AssignStmt,
    BooleanLiteralType,
    BooleanType,
    Call,
    ClassDeclaration,
    ClassMethod,
    ClassProperty,
    ExportAll,
    ExportDeclaration,
    ExportDefault,
    ExportNamed,
    ExportSpecifier,
    Expr,
    ExprStmt,
    FunctionDeclaration,
    FunctionType,
    FunctionTypeParam,
    GenericType,
    ImportDeclaration,
    ImportSpecifier,
    InterfaceDeclaration,
    IntersectionType,
    Literal,
    Located,
    Member,
    MixedType,
    Module,
    Name,
    NullableType,
    NullLiteralType,
    NumberLiteralType,
    NumberType,
    ObjectCallProperty,
    ObjectEntry,
    ObjectExpr,
    ObjectIndexer,
    ObjectProperty,
    ObjectType,
    Param,
    QualifiedTypeIdentifier,
    SpreadProperty,
    StringLiteralType,
    StringType,
    TemplateLiteral,
    TupleType,
    TypeAlias,
    TypeIdentifier,
    TypeNode,
    TypeParameter,
    UnionType,
    VariableDeclaration,
    VariableDeclarator,
    VoidType,
)

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="start",
	propagate_positions=True,
	maybe_placeholders=False,
)

# Flow's built-in type names. They are ordinary NAME tokens in the grammar so
# `{ string: boolean }` still parses; the builder gives them meaning here.
_PRIMITIVES = {
    "any": AnyType,
    "mixed": MixedType,
    "number": NumberType,
    "string": StringType,
    "boolean": BooleanType,
    "bool": BooleanType,
    "null": NullLiteralType,
    "void": VoidType,
}

_Pos = Tuple[int, int]


class SourceSyntaxError(ValueError):
	"""
	Structural error detected while building the AST from a lark tree.

	The grammar accepts a few shapes that are not valid Flow (`()` without a
	return type, `default` imported without a local name). They are rejected
	here with a location so the CLI can report them like lark's own errors.
	"""

	def __init__(self, message: str, *, loc: Optional[Located], file: Optional[str] = None) -> None:
		super().__init__(message)
		self.loc = loc
		self.file = file


def parse_module(source: str, file: Optional[str] = None) -> Module:
    """Parse `source` into a Module; `file` is recorded for diagnostics and import resolution."""
    tree = _PARSER.parse(source)
    comments = [tok for tok in _PARSER.lex(source, dont_ignore=True) if tok.type == "COMMENT"]
    return _ModuleBuilder(comments, file).build(tree)


def parse_file(path: Union[str, Path]) -> Module:
    path = Path(path)
    return parse_module(path.read_text(encoding="utf-8"), file=str(path))


def _loc(tree: Tree) -> Located:
    meta = tree.meta
    return Located(line=meta.line, column=meta.column)


def _loc_from_token(token: Token) -> Located:
    return Located(line=token.line, column=token.column)


def _name(node: Tree | Token) -> str:
    if isinstance(node, Tree):
        data = node.data
        if isinstance(data, Token):
            return data.value
        return data
    if isinstance(node, Token):
        return node.type
    return str(node)


def _trees(tree: Tree, name: Optional[str] = None) -> List[Tree]:
    return [c for c in tree.children if isinstance(c, Tree) and (name is None or _name(c) == name)]


def _tokens(tree: Tree, *types: str) -> List[Token]:
    return [c for c in tree.children if isinstance(c, Token) and (not types or c.type in types)]


def _first_tree(tree: Tree, name: str) -> Optional[Tree]:
    return next(iter(_trees(tree, name)), None)


def _first_token(tree: Tree, *types: str) -> Optional[Token]:
    return next(iter(_tokens(tree, *types)), None)


def _decode_string_token(tok: Token) -> str:
	"""
	Decode a single- or double-quoted STRING token. JavaScript escapes are a
	superset-compatible match for Python's for everything the declaration
	subset uses (quotes, backslashes, \\n, \\t, \\uXXXX).
	"""
	return py_ast.literal_eval(tok.value)


def _number_value(raw: str) -> Union[int, float]:
    if any(ch in raw for ch in ".eE"):
        return float(raw)
    return int(raw)


def _start(node: Tree | Token) -> _Pos:
    if isinstance(node, Token):
        return (node.line, node.column)
    return (node.meta.line, node.meta.column)


def _end(node: Tree | Token) -> _Pos:
    if isinstance(node, Token):
        return (node.end_line, node.end_column)
    return (node.meta.end_line, node.meta.end_column)


class _ModuleBuilder:
    """Turns one lark parse tree into `flowprops.parser.ast` nodes."""

    def __init__(self, comments: Sequence[Token], file: Optional[str]) -> None:
        self.comments = list(comments)
        self.file = file

    def error(self, message: str, node: Tree | Token) -> SourceSyntaxError:
        loc = _loc_from_token(node) if isinstance(node, Token) else _loc(node)
        return SourceSyntaxError(message, loc=loc, file=self.file)

    def build(self, tree: Tree) -> Module:
        items = [self.build_item(child) for child in _trees(tree)]
        return Module(items=items, file=self.file)

    # --- module items ---

    def build_item(self, tree: Tree):
        kind = _name(tree)
        builder = getattr(self, f"_build_{kind}", None)
        if builder is None:
            raise self.error(f"unexpected module item {kind!r}", tree)
        return builder(tree)

    def _build_import_decl(self, tree: Tree) -> ImportDeclaration:
        kind_tree = _first_tree(tree, "import_kind")
        decl_kind = _first_token(kind_tree).value if kind_tree is not None else "value"
        source = _decode_string_token(_first_token(tree, "STRING"))
        clause = _first_tree(tree, "import_clause")
        specifiers: List[ImportSpecifier] = []
        for part in _trees(clause):
            part_name = _name(part)
            if part_name == "import_default":
                tok = _first_token(part, "NAME")
                specifiers.append(
                    ImportSpecifier(
                        loc=_loc_from_token(tok),
                        local=tok.value,
                        imported="default",
                        source=source,
                        kind=decl_kind,
                        is_default=True,
                    )
                )
            elif part_name == "namespace_import":
                tok = _first_token(part, "NAME")
                specifiers.append(
                    ImportSpecifier(
                        loc=_loc_from_token(tok),
                        local=tok.value,
                        imported=None,
                        source=source,
                        kind=decl_kind,
                        is_namespace=True,
                    )
                )
            else:
                for spec in _trees(part, "import_spec"):
                    specifiers.append(self._build_import_spec(spec, source, decl_kind))
        return ImportDeclaration(loc=_loc(tree), source=source, kind=decl_kind, specifiers=specifiers)

    def _build_import_spec(self, tree: Tree, source: str, decl_kind: str) -> ImportSpecifier:
        kind_tree = _first_tree(tree, "import_kind")
        kind = _first_token(kind_tree).value if kind_tree is not None else decl_kind
        imported_tok = _first_token(_first_tree(tree, "import_name"))
        local_tok = _first_token(tree, "NAME")
        if local_tok is None:
            if imported_tok.type == "DEFAULT":
                raise self.error("`default` must be imported under a local name", tree)
            local_tok = imported_tok
        return ImportSpecifier(
            loc=_loc(tree),
            local=local_tok.value,
            imported=imported_tok.value,
            source=source,
            kind=kind,
            is_default=imported_tok.value == "default",
        )

    def _build_import_bare(self, tree: Tree) -> ImportDeclaration:
        source = _decode_string_token(_first_token(tree, "STRING"))
        return ImportDeclaration(loc=_loc(tree), source=source, kind="value", specifiers=[])

    def _build_export_default(self, tree: Tree) -> ExportDefault:
        value = _trees(tree)[0]
        if _name(value) == "class_decl":
            declaration = self._build_class_decl(value, anonymous_ok=True)
        elif _name(value) == "function_decl":
            declaration = self.build_item(value)
        else:
            declaration = self.build_expr(value)
        return ExportDefault(loc=_loc(tree), declaration=declaration)

    def _build_export_all(self, tree: Tree) -> ExportAll:
        return ExportAll(loc=_loc(tree), source=_decode_string_token(_first_token(tree, "STRING")))

    def _build_export_declaration(self, tree: Tree) -> ExportDeclaration:
        return ExportDeclaration(loc=_loc(tree), declaration=self.build_item(_trees(tree)[0]))

    def _build_export_named(self, tree: Tree) -> ExportNamed:
        kind = "type" if _first_token(tree, "TYPE") is not None else "value"
        source_tok = _first_token(tree, "STRING")
        specifiers: List[ExportSpecifier] = []
        for spec in _trees(_first_tree(tree, "export_clause"), "export_spec"):
            names = [self._name_text(n) for n in _trees(spec, "name")]
            local = names[0]
            exported = names[1] if len(names) > 1 else local
            specifiers.append(ExportSpecifier(loc=_loc(spec), local=local, exported=exported))
        return ExportNamed(
            loc=_loc(tree),
            specifiers=specifiers,
            source=_decode_string_token(source_tok) if source_tok is not None else None,
            kind=kind,
        )

    def _build_type_alias(self, tree: Tree) -> TypeAlias:
        type_node = tree.children[-1]
        return TypeAlias(
            loc=_loc(tree),
            name=_first_token(tree, "NAME").value,
            type_params=self._type_params(tree),
            right=self._annotated_type(type_node, _start(tree)),
        )

    def _build_interface_decl(self, tree: Tree) -> InterfaceDeclaration:
        return InterfaceDeclaration(
            loc=_loc(tree),
            name=_first_token(tree, "NAME").value,
            type_params=self._type_params(tree),
            body=self.build_type(_first_tree(tree, "object_type")),
        )

    def _build_class_decl(self, tree: Tree, anonymous_ok: bool = False) -> ClassDeclaration:
        name_tok = _first_token(tree, "NAME")
        if name_tok is None and not anonymous_ok:
            raise self.error("only `export default class` may omit the class name", tree)
        superclass: Optional[Expr] = None
        super_type_args: Optional[List[TypeNode]] = None
        heritage = _first_tree(tree, "heritage")
        if heritage is not None:
            superclass = self.build_expr(_first_tree(heritage, "member_expr"))
            args = _first_tree(heritage, "type_args")
            if args is not None:
                super_type_args = [self.build_type(t) for t in args.children if isinstance(t, Tree)]
        body: List[Union[ClassProperty, ClassMethod]] = []
        for member in _trees(_first_tree(tree, "class_body")):
            if _name(member) == "class_property":
                body.append(self._build_class_property(member))
            else:
                body.append(self._build_class_method(member))
        return ClassDeclaration(
            loc=_loc(tree),
            name=name_tok.value if name_tok is not None else None,
            type_params=self._type_params(tree),
            superclass=superclass,
            super_type_args=super_type_args,
            body=body,
        )

    def _build_class_property(self, tree: Tree) -> ClassProperty:
        annotation = _first_tree(tree, "type_annotation")
        initializer = _first_tree(tree, "initializer")
        return ClassProperty(
            loc=_loc(tree),
            key=self._member_name(_first_tree(tree, "member_name")),
            type_annotation=(
                self._annotated_type(annotation.children[0], _start(annotation)) if annotation is not None else None
            ),
            value=self.build_expr(initializer.children[0]) if initializer is not None else None,
            static=_first_token(tree, "STATIC") is not None,
            optional=_first_token(tree, "QMARK") is not None,
        )

    def _build_class_method(self, tree: Tree) -> ClassMethod:
        annotation = _first_tree(tree, "type_annotation")
        return ClassMethod(
            loc=_loc(tree),
            key=self._member_name(_first_tree(tree, "member_name")),
            params=self._params(_first_tree(tree, "params")),
            return_type=self.build_type(annotation.children[0]) if annotation is not None else None,
            static=_first_token(tree, "STATIC") is not None,
        )

    def _build_function_decl(self, tree: Tree) -> FunctionDeclaration:
        annotation = _first_tree(tree, "type_annotation")
        return FunctionDeclaration(
            loc=_loc(tree),
            name=_first_token(tree, "NAME").value,
            params=self._params(_first_tree(tree, "params")),
            return_type=self.build_type(annotation.children[0]) if annotation is not None else None,
        )

    def _build_variable_decl(self, tree: Tree) -> VariableDeclaration:
        kind_tok = _first_token(tree, "CONST", "LET", "VAR")
        declarations = []
        for decl in _trees(tree, "var_declarator"):
            annotation = _first_tree(decl, "type_annotation")
            initializer = _first_tree(decl, "initializer")
            declarations.append(
                VariableDeclarator(
                    loc=_loc(decl),
                    name=_first_token(decl, "NAME").value,
                    type_annotation=self.build_type(annotation.children[0]) if annotation is not None else None,
                    init=self.build_expr(initializer.children[0]) if initializer is not None else None,
                )
            )
        return VariableDeclaration(loc=_loc(tree), kind=kind_tok.value, declarations=declarations)

    def _build_assign_stmt(self, tree: Tree) -> AssignStmt:
        target, value = _trees(tree)
        return AssignStmt(loc=_loc(tree), target=self.build_expr(target), value=self.build_expr(value))

    def _build_call_stmt(self, tree: Tree) -> ExprStmt:
        return ExprStmt(loc=_loc(tree), value=self.build_expr(_trees(tree)[0]))

    def _type_params(self, tree: Tree) -> List[TypeParameter]:
        params = _first_tree(tree, "type_params")
        if params is None:
            return []
        out: List[TypeParameter] = []
        for param in _trees(params, "type_param"):
            tok = _first_token(param, "NAME")
            out.append(TypeParameter(loc=_loc_from_token(tok), name=tok.value))
        return out

    def _params(self, tree: Optional[Tree]) -> List[Param]:
        if tree is None:
            return []
        out: List[Param] = []
        for param in _trees(tree):
            annotation = _first_tree(param, "type_annotation")
            type_annotation = self.build_type(annotation.children[0]) if annotation is not None else None
            if _name(param) == "rest_param":
                out.append(
                    Param(
                        loc=_loc(param),
                        name=_first_token(param, "NAME").value,
                        type_annotation=type_annotation,
                        rest=True,
                    )
                )
                continue
            target = _first_tree(param, "param_target")
            name_tok = _first_token(target, "NAME")
            out.append(
                Param(
                    loc=_loc(param),
                    name=name_tok.value if name_tok is not None else None,
                    type_annotation=type_annotation,
                    optional=_first_token(param, "QMARK") is not None,
                )
            )
        return out

    def _name_text(self, tree: Tree) -> str:
        return _first_token(tree).value

    def _member_name(self, tree: Tree) -> str:
        tok = _first_token(tree)
        if tok.type == "STRING":
            return _decode_string_token(tok)
        return tok.value

    # --- expressions ---

    def build_expr(self, node: Tree | Token) -> Expr:
        if isinstance(node, Token):
            return self._token_expr(node)
        kind = _name(node)
        if kind == "string_expr" or kind == "number_expr" or kind == "template_expr":
            return self._token_expr(_first_token(node))
        if kind == "member_expr":
            return self._member_expr(node)
        if kind == "call_expr":
            func: Expr = self._member_expr(_first_tree(node, "member_expr"))
            for call_args in _trees(node, "call_args"):
                args_tree = _first_tree(call_args, "args")
                args = [self.build_expr(a) for a in args_tree.children] if args_tree is not None else []
                func = Call(loc=_loc(call_args), func=func, args=args)
            return func
        if kind == "object_expr":
            return ObjectExpr(loc=_loc(node), entries=[self._object_entry(e) for e in _trees(node)])
        if kind == "array_expr":
            args_tree = _first_tree(node, "args")
            items = [self.build_expr(a) for a in args_tree.children] if args_tree is not None else []
            return ArrayExpr(loc=_loc(node), items=items)
        if kind == "arrow_expr":
            params_tree = _first_tree(node, "arrow_params")
            single = _first_token(params_tree, "NAME")
            if single is not None:
                params = [Param(loc=_loc_from_token(single), name=single.value)]
            else:
                params = self._params(_first_tree(params_tree, "params"))
            return ArrowFunction(loc=_loc(node), params=params)
        raise self.error(f"unexpected expression {kind!r}", node)

    def _token_expr(self, tok: Token) -> Expr:
        loc = _loc_from_token(tok)
        if tok.type == "STRING":
            return Literal(loc=loc, value=_decode_string_token(tok), raw=tok.value)
        if tok.type == "NUMBER":
            return Literal(loc=loc, value=_number_value(tok.value), raw=tok.value)
        if tok.type == "TEMPLATE":
            return TemplateLiteral(loc=loc, raw=tok.value)
        return Name(loc=loc, ident=tok.value)

    def _member_expr(self, tree: Tree) -> Expr:
        head = _first_token(tree, "NAME")
        expr: Expr = Name(loc=_loc_from_token(head), ident=head.value)
        for part in _trees(tree, "name"):
            expr = Member(loc=_loc(part), value=expr, attr=self._name_text(part))
        return expr

    def _object_entry(self, tree: Tree) -> ObjectEntry:
        kind = _name(tree)
        if kind == "obj_shorthand":
            tok = _first_token(tree, "NAME")
            return ObjectEntry(loc=_loc(tree), key=tok.value, value=Name(loc=_loc_from_token(tok), ident=tok.value))
        if kind == "obj_spread":
            return ObjectEntry(loc=_loc(tree), key=None, value=self.build_expr(tree.children[0]), spread=True)
        key_tree, value = tree.children
        key, _, _ = self._obj_key(key_tree)
        return ObjectEntry(loc=_loc(tree), key=key, value=self.build_expr(value))

    # --- types ---

    def build_type(self, node: Tree | Token) -> TypeNode:
        if isinstance(node, Token):
            raise self.error(f"unexpected token {node.value!r} in type position", node)
        kind = _name(node)
        builder = getattr(self, f"_type_{kind}", None)
        if builder is None:
            raise self.error(f"unexpected type syntax {kind!r}", node)
        return builder(node)

    def _annotated_type(self, node: Tree, lo: _Pos) -> TypeNode:
        """Build `node`; comments between `lo` and an object type's `{` become the object's own."""
        built = self.build_type(node)
        if isinstance(built, ObjectType):
            hi = _start(node)
            built.leading_comments = [c.value for c in self.comments if lo <= _start(c) < hi]
        return built

    def _type_union(self, tree: Tree) -> TypeNode:
        members = [self.build_type(c) for c in _trees(tree)]
        if len(members) == 1:
            return members[0]
        return UnionType(loc=_loc(tree), types=members)

    def _type_intersection(self, tree: Tree) -> TypeNode:
        members = [self.build_type(c) for c in _trees(tree)]
        if len(members) == 1:
            return members[0]
        return IntersectionType(loc=_loc(tree), types=members)

    def _type_nullable(self, tree: Tree) -> NullableType:
        return NullableType(loc=_loc(tree), inner=self.build_type(_trees(tree)[-1]))

    def _type_array_type(self, tree: Tree) -> ArrayType:
        return ArrayType(loc=_loc(tree), element=self.build_type(_trees(tree)[0]))

    def _type_tuple_type(self, tree: Tree) -> TupleType:
        return TupleType(loc=_loc(tree), elements=[self.build_type(c) for c in _trees(tree)])

    def _type_string_literal_type(self, tree: Tree) -> StringLiteralType:
        tok = _first_token(tree, "STRING")
        return StringLiteralType(loc=_loc(tree), value=_decode_string_token(tok), raw=tok.value)

    def _type_number_literal_type(self, tree: Tree) -> NumberLiteralType:
        tok = _first_token(tree, "NUMBER")
        return NumberLiteralType(loc=_loc(tree), value=_number_value(tok.value), raw=tok.value)

    def _type_generic_type(self, tree: Tree) -> TypeNode:
        loc = _loc(tree)
        parts = [tok.value for tok in _tokens(tree, "NAME")]
        args_tree = _first_tree(tree, "type_args")
        if len(parts) > 1:
            ident: Union[TypeIdentifier, QualifiedTypeIdentifier] = QualifiedTypeIdentifier(
                loc=loc, qualification=parts[:-1], name=parts[-1]
            )
        else:
            ident = TypeIdentifier(loc=loc, name=parts[0])
        if args_tree is not None:
            args = [self.build_type(c) for c in _trees(args_tree)]
            return GenericType(loc=loc, id=ident, type_params=args)
        if isinstance(ident, QualifiedTypeIdentifier):
            return ident
        name = parts[0]
        if name in ("true", "false"):
            return BooleanLiteralType(loc=loc, value=name == "true")
        primitive = _PRIMITIVES.get(name)
        if primitive is not None:
            return primitive(loc=loc)
        return ident

    def _type_paren_type(self, tree: Tree) -> TypeNode:
        params_tree = _first_tree(tree, "fn_params")
        rest = [c for c in _trees(tree) if c is not params_tree]
        params = self._fn_params(params_tree)
        if rest:
            return FunctionType(loc=_loc(tree), params=params, return_type=self.build_type(rest[0]))
        if len(params) == 1 and params[0].name is None and not params[0].rest:
            return params[0].type_expr
        raise self.error("function type is missing its `=> ReturnType`", tree)

    def _fn_params(self, tree: Optional[Tree]) -> List[FunctionTypeParam]:
        if tree is None:
            return []
        out: List[FunctionTypeParam] = []
        for param in _trees(tree):
            kind = _name(param)
            if kind == "named_fn_param":
                out.append(
                    FunctionTypeParam(
                        loc=_loc(param),
                        name=_first_token(param, "NAME").value,
                        type_expr=self.build_type(_trees(param)[-1]),
                        optional=_first_token(param, "QMARK") is not None,
                    )
                )
            elif kind == "rest_fn_param":
                name_tok = _first_token(param, "NAME")
                out.append(
                    FunctionTypeParam(
                        loc=_loc(param),
                        name=name_tok.value if name_tok is not None else None,
                        type_expr=self.build_type(_trees(param)[-1]),
                        rest=True,
                    )
                )
            else:
                out.append(FunctionTypeParam(loc=_loc(param), name=None, type_expr=self.build_type(param)))
        return out

    def _type_object_type(self, tree: Tree, exact: bool = False) -> ObjectType:
        obj = ObjectType(loc=_loc(tree), exact=exact)
        members = _trees(tree)
        leading, trailing = self._member_comments(tree, members)
        for index, member in enumerate(members):
            kind = _name(member)
            if kind == "object_property":
                key, key_raw, quoted = self._obj_key(_first_tree(member, "obj_key"))
                obj.properties.append(
                    ObjectProperty(
                        loc=_loc(member),
                        key=key,
                        key_raw=key_raw,
                        value=self._annotated_type(_trees(member)[-1], _start(member)),
                        optional=_first_token(member, "QMARK") is not None,
                        quoted=quoted,
                        leading_comments=leading[index],
                        trailing_comments=trailing[index],
                    )
                )
            elif kind == "method_property":
                key, key_raw, quoted = self._obj_key(_first_tree(member, "obj_key"))
                fn = FunctionType(
                    loc=_loc(member),
                    params=self._fn_params(_first_tree(member, "fn_params")),
                    return_type=self.build_type(_trees(member)[-1]),
                )
                obj.properties.append(
                    ObjectProperty(
                        loc=_loc(member),
                        key=key,
                        key_raw=key_raw,
                        value=fn,
                        quoted=quoted,
                        leading_comments=leading[index],
                        trailing_comments=trailing[index],
                    )
                )
            elif kind == "spread_property":
                obj.properties.append(
                    SpreadProperty(
                        loc=_loc(member),
                        argument=self.build_type(_trees(member)[0]),
                        leading_comments=leading[index],
                        trailing_comments=trailing[index],
                    )
                )
            elif kind == "object_indexer":
                name_tok = _first_token(member, "NAME")
                key_node, value_node = _trees(member)[-2:]
                obj.indexers.append(
                    ObjectIndexer(
                        loc=_loc(member),
                        name=name_tok.value if name_tok is not None else None,
                        key=self.build_type(key_node),
                        value=self.build_type(value_node),
                    )
                )
            else:
                fn = FunctionType(
                    loc=_loc(member),
                    params=self._fn_params(_first_tree(member, "fn_params")),
                    return_type=self.build_type(_trees(member)[-1]),
                )
                obj.call_properties.append(ObjectCallProperty(loc=_loc(member), value=fn))
        return obj

    def _type_exact_object_type(self, tree: Tree) -> ObjectType:
        return self._type_object_type(tree, exact=True)

    def _obj_key(self, tree: Tree) -> Tuple[str, str, bool]:
        """(decoded key, key as written, quoted?)"""
        child = tree.children[0]
        if isinstance(child, Token) and child.type == "STRING":
            return _decode_string_token(child), child.value, True
        text = self._name_text(child)
        return text, text, False

    def _member_comments(self, obj: Tree, members: List[Tree]) -> Tuple[List[List[str]], List[List[str]]]:
        """
        Split the comments inside `obj` into per-member leading/trailing lists.

        A comment starting on a member's last line, after the member, trails it;
        every other comment between two members leads the next one. Comments
        after the last member, up to the closing brace, trail the last member.
        """
        leading: List[List[str]] = [[] for _ in members]
        trailing: List[List[str]] = [[] for _ in members]
        if not members or not self.comments:
            return leading, trailing
        lo, hi = _start(obj), _end(obj)
        inside = [c for c in self.comments if lo < _start(c) and _end(c) <= hi]
        claimed: set[int] = set()
        for index, member in enumerate(members):
            prev_end = _end(members[index - 1]) if index else lo
            start, end = _start(member), _end(member)
            next_start = _start(members[index + 1]) if index + 1 < len(members) else hi
            for cid, comment in enumerate(inside):
                if cid in claimed:
                    continue
                pos = _start(comment)
                if prev_end <= pos < start:
                    leading[index].append(comment.value)
                    claimed.add(cid)
                elif end <= pos < next_start and (pos[0] == end[0] or index == len(members) - 1):
                    trailing[index].append(comment.value)
                    claimed.add(cid)
        return leading, trailing


__all__ = ["SourceSyntaxError", "parse_module", "parse_file"]
