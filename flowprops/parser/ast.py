from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional, Union


@dataclass(frozen=True)
class Located:
    line: int
    column: int


class TypeNodeKind(Enum):
	"""Closed set of type annotation shapes; the converter has one rule per member."""

	ANY = "any"
	MIXED = "mixed"
	NUMBER = "number"
	BOOLEAN = "boolean"
	STRING = "string"
	NULL_LITERAL = "null_literal"
	VOID = "void"
	NUMBER_LITERAL = "number_literal"
	BOOLEAN_LITERAL = "boolean_literal"
	STRING_LITERAL = "string_literal"
	FUNCTION = "function"
	NULLABLE = "nullable"
	ARRAY = "array"
	TUPLE = "tuple"
	OBJECT = "object"
	OBJECT_PROPERTY = "object_property"
	SPREAD_PROPERTY = "spread_property"
	OBJECT_INDEXER = "object_indexer"
	OBJECT_CALL_PROPERTY = "object_call_property"
	GENERIC = "generic"
	TYPE_IDENTIFIER = "type_identifier"
	QUALIFIED_TYPE_IDENTIFIER = "qualified_type_identifier"
	UNION = "union"
	INTERSECTION = "intersection"


LITERAL_KINDS = frozenset(
	{
		TypeNodeKind.NULL_LITERAL,
		TypeNodeKind.VOID,
		TypeNodeKind.NUMBER_LITERAL,
		TypeNodeKind.BOOLEAN_LITERAL,
		TypeNodeKind.STRING_LITERAL,
	}
)

# Kinds that only appear inside an ObjectType and convert to field lists.
MEMBER_KINDS = frozenset(
	{
		TypeNodeKind.OBJECT_PROPERTY,
		TypeNodeKind.SPREAD_PROPERTY,
		TypeNodeKind.OBJECT_INDEXER,
		TypeNodeKind.OBJECT_CALL_PROPERTY,
	}
)


class TypeNode:
    kind: ClassVar[TypeNodeKind]
    loc: Located


@dataclass
class AnyType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.ANY
    loc: Located


@dataclass
class MixedType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.MIXED
    loc: Located


@dataclass
class NumberType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.NUMBER
    loc: Located


@dataclass
class BooleanType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.BOOLEAN
    loc: Located


@dataclass
class StringType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.STRING
    loc: Located


@dataclass
class NullLiteralType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.NULL_LITERAL
    loc: Located


@dataclass
class VoidType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.VOID
    loc: Located


@dataclass
class NumberLiteralType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.NUMBER_LITERAL
    loc: Located
    value: Union[int, float]
    raw: str


@dataclass
class BooleanLiteralType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.BOOLEAN_LITERAL
    loc: Located
    value: bool


@dataclass
class StringLiteralType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.STRING_LITERAL
    loc: Located
    value: str
    raw: str


@dataclass
class FunctionTypeParam:
    loc: Located
    name: Optional[str]
    type_expr: TypeNode
    optional: bool = False
    rest: bool = False


@dataclass
class FunctionType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.FUNCTION
    loc: Located
    params: List[FunctionTypeParam]
    return_type: TypeNode


@dataclass
class NullableType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.NULLABLE
    loc: Located
    inner: TypeNode


@dataclass
class ArrayType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.ARRAY
    loc: Located
    element: TypeNode


@dataclass
class TupleType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.TUPLE
    loc: Located
    elements: List[TypeNode]


@dataclass
class ObjectProperty(TypeNode):
    """
    `key: T` / `key?: T` / `'quoted-key': T` member of an object type.

    `key` is the decoded key text; `key_raw` is the key exactly as written
    (with quotes for string keys) so generated fields keep the source form.
    """

    kind: ClassVar[TypeNodeKind] = TypeNodeKind.OBJECT_PROPERTY
    loc: Located
    key: str
    key_raw: str
    value: TypeNode
    optional: bool = False
    quoted: bool = False
    leading_comments: List[str] = field(default_factory=list)
    trailing_comments: List[str] = field(default_factory=list)


@dataclass
class SpreadProperty(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.SPREAD_PROPERTY
    loc: Located
    argument: TypeNode
    leading_comments: List[str] = field(default_factory=list)
    trailing_comments: List[str] = field(default_factory=list)


@dataclass
class ObjectIndexer(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.OBJECT_INDEXER
    loc: Located
    name: Optional[str]
    key: TypeNode
    value: TypeNode


@dataclass
class ObjectCallProperty(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.OBJECT_CALL_PROPERTY
    loc: Located
    value: FunctionType


@dataclass
class ObjectType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.OBJECT
    loc: Located
    properties: List[Union[ObjectProperty, SpreadProperty]] = field(default_factory=list)
    indexers: List[ObjectIndexer] = field(default_factory=list)
    call_properties: List[ObjectCallProperty] = field(default_factory=list)
    exact: bool = False
    # Comments written between the annotation colon (or `=`) and the `{`.
    leading_comments: List[str] = field(default_factory=list)


@dataclass
class TypeIdentifier(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.TYPE_IDENTIFIER
    loc: Located
    name: str


@dataclass
class QualifiedTypeIdentifier(TypeNode):
    """Dotted type reference such as `React.Node`."""

    kind: ClassVar[TypeNodeKind] = TypeNodeKind.QUALIFIED_TYPE_IDENTIFIER
    loc: Located
    qualification: List[str]
    name: str

    @property
    def dotted(self) -> str:
        return ".".join([*self.qualification, self.name])


@dataclass
class GenericType(TypeNode):
    """A named type reference, optionally applied to type arguments (`Array<T>`)."""

    kind: ClassVar[TypeNodeKind] = TypeNodeKind.GENERIC
    loc: Located
    id: Union[TypeIdentifier, QualifiedTypeIdentifier]
    type_params: Optional[List[TypeNode]] = None

    @property
    def name(self) -> str:
        if isinstance(self.id, QualifiedTypeIdentifier):
            return self.id.dotted
        return self.id.name


@dataclass
class UnionType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.UNION
    loc: Located
    types: List[TypeNode]


@dataclass
class IntersectionType(TypeNode):
    kind: ClassVar[TypeNodeKind] = TypeNodeKind.INTERSECTION
    loc: Located
    types: List[TypeNode]


# --- expressions (initializers, heritage clauses, default exports) ---


class Expr:
    loc: Located


@dataclass
class Name(Expr):
    loc: Located
    ident: str


@dataclass
class Member(Expr):
    loc: Located
    value: Expr
    attr: str


@dataclass
class Call(Expr):
    loc: Located
    func: Expr
    args: List[Expr]


@dataclass
class Literal(Expr):
    loc: Located
    value: object
    raw: str


@dataclass
class TemplateLiteral(Expr):
    loc: Located
    raw: str


@dataclass
class ObjectEntry:
    loc: Located
    key: Optional[str]
    value: Expr
    spread: bool = False


@dataclass
class ObjectExpr(Expr):
    loc: Located
    entries: List[ObjectEntry]


@dataclass
class ArrayExpr(Expr):
    loc: Located
    items: List[Expr]


@dataclass
class ArrowFunction(Expr):
    """Arrow function; the body is skipped by the parser."""

    loc: Located
    params: List["Param"]


# --- declarations ---


@dataclass
class TypeParameter:
    loc: Located
    name: str


@dataclass
class Param:
    loc: Located
    name: Optional[str]  # None for destructuring patterns
    type_annotation: Optional[TypeNode] = None
    optional: bool = False
    rest: bool = False


@dataclass
class ImportSpecifier:
    """
    One binding introduced by an import declaration.

    `imported` is the exported name requested from `source` ("default" for
    default imports, None for namespace imports); `local` is the name bound
    in the importing module. `kind` is the effective import kind: "value",
    "type" or "typeof" (specifier-level kinds override the declaration's).
    """

    loc: Located
    local: str
    imported: Optional[str]
    source: str
    kind: str = "value"
    is_default: bool = False
    is_namespace: bool = False


@dataclass
class ImportDeclaration:
    loc: Located
    source: str
    kind: str
    specifiers: List[ImportSpecifier]


@dataclass
class ExportSpecifier:
    loc: Located
    local: str
    exported: str


@dataclass
class ExportNamed:
    """`export {a, b as c}` and re-exports `export {a} from './m'`."""

    loc: Located
    specifiers: List[ExportSpecifier]
    source: Optional[str] = None
    kind: str = "value"


@dataclass
class ExportAll:
    """`export * from './m'`."""

    loc: Located
    source: str


@dataclass
class ExportDefault:
    loc: Located
    declaration: Union["ClassDeclaration", "FunctionDeclaration", Expr]


@dataclass
class ExportDeclaration:
    """`export type A = ...`, `export class A {}`, `export const a = ...`."""

    loc: Located
    declaration: "Declaration"


@dataclass
class TypeAlias:
    loc: Located
    name: str
    type_params: List[TypeParameter]
    right: TypeNode


@dataclass
class InterfaceDeclaration:
    loc: Located
    name: str
    type_params: List[TypeParameter]
    body: ObjectType


@dataclass
class ClassProperty:
    loc: Located
    key: str
    type_annotation: Optional[TypeNode] = None
    value: Optional[object] = None  # source Expr, or a generated validator tree
    static: bool = False
    optional: bool = False
    computed: bool = False


@dataclass
class ClassMethod:
    loc: Located
    key: str
    params: List[Param]
    return_type: Optional[TypeNode] = None
    static: bool = False


@dataclass
class ClassDeclaration:
    loc: Located
    name: Optional[str]  # None only for `export default class ...`
    type_params: List[TypeParameter]
    superclass: Optional[Expr]
    super_type_args: Optional[List[TypeNode]]
    body: List[Union[ClassProperty, ClassMethod]]


@dataclass
class FunctionDeclaration:
    loc: Located
    name: str
    params: List[Param]
    return_type: Optional[TypeNode] = None


@dataclass
class VariableDeclarator:
    loc: Located
    name: str
    type_annotation: Optional[TypeNode] = None
    init: Optional[Expr] = None


@dataclass
class VariableDeclaration:
    loc: Located
    kind: str  # "const" | "let" | "var"
    declarations: List[VariableDeclarator]


@dataclass
class AssignStmt:
    loc: Located
    target: Expr
    value: Expr


@dataclass
class ExprStmt:
    loc: Located
    value: Expr


Declaration = Union[
    TypeAlias,
    InterfaceDeclaration,
    ClassDeclaration,
    FunctionDeclaration,
    VariableDeclaration,
]

ModuleItem = Union[
    ImportDeclaration,
    ExportNamed,
    ExportAll,
    ExportDefault,
    ExportDeclaration,
    TypeAlias,
    InterfaceDeclaration,
    ClassDeclaration,
    FunctionDeclaration,
    VariableDeclaration,
    AssignStmt,
    ExprStmt,
]


@dataclass
class Module:
    items: List[ModuleItem]
    file: Optional[str] = None

    def classes(self) -> List[ClassDeclaration]:
        """Top-level classes, including exported ones."""
        found: List[ClassDeclaration] = []
        for item in self.items:
            decl = item
            if isinstance(item, (ExportDefault, ExportDeclaration)):
                decl = item.declaration
            if isinstance(decl, ClassDeclaration):
                found.append(decl)
        return found
