import dataclasses as D
from enum import StrEnum
from itertools import chain
from typing import Any, Callable, ClassVar, Iterable, Type, TypeVar

import tree_sitter as T

from rescope.parsing import SourceText
from rescope.pretty import PrettyTree, escape
from rescope.util import head_or_none, maybe


@D.dataclass(frozen=True, order=True)
class Span:
    """A half-open `[start, end)` range of character offsets."""

    start: int
    end: int

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"

    def __contains__(self, offset: int) -> bool:
        return self.start <= offset < self.end


def span_of(src: SourceText, node: T.Node) -> Span:
    return Span(src.offset(node.start_byte), src.offset(node.end_byte))


def text_of(node: T.Node) -> str:
    assert node.text is not None
    return node.text.decode()


def strip_comments(nodes: list[T.Node]) -> list[T.Node]:
    return [node for node in nodes if not node.type == "comment"]


def named_field(node: T.Node, name: str) -> T.Node | None:
    return head_or_none(
        child
        for child in node.children_by_field_name(name)
        if child.is_named and child.type != "comment"
    )


ParseCST = Callable[[SourceText, T.Node], "AST"]

ASTType = TypeVar("ASTType", bound="AST")


@D.dataclass(eq=False)
class AST:
    span: Span

    registry: ClassVar[dict[str, ParseCST]] = {}

    @staticmethod
    def register(fn: ParseCST, *node_types: str):
        for node_type in node_types:
            assert node_type not in AST.registry, f'"{node_type}" already registered.'
            AST.registry[node_type] = fn

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "AST":
        cst_parser = AST.registry.get(node.type, Unknown.from_cst)
        return cst_parser(src, node)

    @staticmethod
    def maybe_from_cst(src: SourceText, node: T.Node | None) -> "AST | None":
        return None if node is None else AST.from_cst(src, node)

    def to(self, expect_type: Type[ASTType]) -> ASTType:
        if not isinstance(self, expect_type):
            raise TypeError(
                f"Expected {expect_type.__qualname__}, but got {type(self).__name__}"
            )

        return self

    @property
    def pretty_tree(self) -> str:
        return str(PrettyAST(self))

    @property
    def children(self) -> Iterable["AST"]:
        return []


def convert_all(src: SourceText, nodes: Iterable[T.Node]) -> list[AST]:
    return [AST.from_cst(src, node) for node in nodes if node.type != "comment"]


@D.dataclass(eq=False)
class Unknown(AST):
    """Any construct that neither binds nor scopes names; only its parts matter."""

    node_type: str
    parts: list[AST] = D.field(default_factory=list)

    @property
    def children(self) -> Iterable[AST]:
        return self.parts

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "Unknown":
        return Unknown(
            span_of(src, node),
            node.type,
            convert_all(src, node.named_children),
        )


@D.dataclass(eq=False)
class Program(AST):
    body: list[AST]

    @property
    def children(self) -> Iterable[AST]:
        return self.body

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "Program":
        assert node.type == "program"
        return Program(
            span_of(src, node),
            convert_all(
                src,
                (
                    child
                    for child in node.named_children
                    if child.type != "hash_bang_line"
                ),
            ),
        )

    AST.register(from_cst, "program")


@D.dataclass(eq=False)
class Identifier(AST):
    name: str

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "Identifier":
        assert node.type in [
            "identifier",
            "undefined",
            "shorthand_property_identifier",
            "shorthand_property_identifier_pattern",
        ]
        return Identifier(span_of(src, node), text_of(node))

    AST.register(
        from_cst,
        "identifier",
        "undefined",
        "shorthand_property_identifier",
        "shorthand_property_identifier_pattern",
    )


@D.dataclass(eq=False)
class PropertyKey(Identifier):
    """A name that never binds: member properties, object keys and labels."""

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "PropertyKey":
        assert node.type in [
            "property_identifier",
            "private_property_identifier",
            "statement_identifier",
        ]
        return PropertyKey(span_of(src, node), text_of(node))

    AST.register(
        from_cst,
        "property_identifier",
        "private_property_identifier",
        "statement_identifier",
    )


@D.dataclass(eq=False)
class Literal(AST):
    raw: str

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "Literal":
        return Literal(span_of(src, node), text_of(node))

    AST.register(from_cst, "string", "number", "regex", "true", "false", "null")


@D.dataclass(eq=False)
class ExpressionStatement(AST):
    expression: AST

    @property
    def children(self) -> Iterable[AST]:
        return [self.expression]

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "ExpressionStatement":
        assert node.type == "expression_statement"
        expression, *_ = strip_comments(node.named_children)
        return ExpressionStatement(span_of(src, node), AST.from_cst(src, expression))

    AST.register(from_cst, "expression_statement")


class DeclarationKind(StrEnum):
    Var = "var"
    Let = "let"
    Const = "const"


@D.dataclass(eq=False)
class VariableDeclarator(AST):
    id: AST
    init: AST | None = None

    @property
    def children(self) -> Iterable[AST]:
        return chain([self.id], maybe(self.init))

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "VariableDeclarator":
        assert node.type == "variable_declarator"
        name = named_field(node, "name")
        assert name is not None
        return VariableDeclarator(
            span_of(src, node),
            AST.from_cst(src, name),
            AST.maybe_from_cst(src, named_field(node, "value")),
        )

    AST.register(from_cst, "variable_declarator")


@D.dataclass(eq=False)
class VariableDeclaration(AST):
    kind: DeclarationKind
    declarations: list[VariableDeclarator]

    @property
    def children(self) -> Iterable[AST]:
        return self.declarations

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "VariableDeclaration":
        assert node.type in ["variable_declaration", "lexical_declaration"]

        match node.child_by_field_name("kind"):
            case None:
                kind = DeclarationKind.Var
            case keyword:
                kind = DeclarationKind(text_of(keyword))

        return VariableDeclaration(
            span_of(src, node),
            kind,
            [
                VariableDeclarator.from_cst(src, child)
                for child in node.named_children
                if child.type == "variable_declarator"
            ],
        )

    AST.register(from_cst, "variable_declaration", "lexical_declaration")


def parameters_of(src: SourceText, node: T.Node) -> list[AST]:
    match named_field(node, "parameters"), named_field(node, "parameter"):
        case None, None:
            return []
        case None, single:
            return [AST.from_cst(src, single)]
        case params, _:
            return convert_all(src, params.named_children)


@D.dataclass(eq=False)
class Function(AST):
    id: Identifier | None
    params: list[AST]
    body: AST

    @property
    def children(self) -> Iterable[AST]:
        return chain(maybe(self.id), self.params, [self.body])

    @classmethod
    def from_cst(cls, src: SourceText, node: T.Node):
        body = named_field(node, "body")
        assert body is not None

        return cls(
            span_of(src, node),
            head_or_none(
                Identifier.from_cst(src, name)
                for name in maybe(named_field(node, "name"))
            ),
            parameters_of(src, node),
            AST.from_cst(src, body),
        )


@D.dataclass(eq=False)
class FunctionDeclaration(Function):
    id: Identifier

    AST.register(
        lambda src, node: FunctionDeclaration.from_cst(src, node),
        "function_declaration",
        "generator_function_declaration",
    )


@D.dataclass(eq=False)
class FunctionExpression(Function):
    AST.register(
        lambda src, node: FunctionExpression.from_cst(src, node),
        "function_expression",
        "function",
        "generator_function",
    )


@D.dataclass(eq=False)
class ArrowFunctionExpression(Function):
    AST.register(
        lambda src, node: ArrowFunctionExpression.from_cst(src, node),
        "arrow_function",
    )


def property_key(src: SourceText, node: T.Node) -> tuple[AST, bool]:
    """Converts a property name, returning the key and whether it is computed."""
    if node.type == "computed_property_name":
        expression, *_ = strip_comments(node.named_children)
        return AST.from_cst(src, expression), True
    else:
        return AST.from_cst(src, node), False


@D.dataclass(eq=False)
class MethodDefinition(AST):
    key: AST
    computed: bool
    value: FunctionExpression

    @property
    def children(self) -> Iterable[AST]:
        return [self.key, self.value]

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "MethodDefinition":
        assert node.type == "method_definition"

        name, body = named_field(node, "name"), named_field(node, "body")
        assert name is not None and body is not None

        key, computed = property_key(src, name)
        return MethodDefinition(
            span_of(src, node),
            key,
            computed,
            FunctionExpression(
                span_of(src, node),
                None,
                parameters_of(src, node),
                AST.from_cst(src, body),
            ),
        )

    AST.register(from_cst, "method_definition")


@D.dataclass(eq=False)
class FieldDefinition(AST):
    key: AST
    computed: bool
    value: AST | None = None

    @property
    def children(self) -> Iterable[AST]:
        return chain([self.key], maybe(self.value))

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "FieldDefinition":
        assert node.type == "field_definition"

        name = named_field(node, "property")
        assert name is not None

        key, computed = property_key(src, name)
        return FieldDefinition(
            span_of(src, node),
            key,
            computed,
            AST.maybe_from_cst(src, named_field(node, "value")),
        )

    AST.register(from_cst, "field_definition")


@D.dataclass(eq=False)
class Class(AST):
    id: Identifier | None
    superclass: AST | None
    body: list[AST]

    @property
    def children(self) -> Iterable[AST]:
        return chain(maybe(self.id), maybe(self.superclass), self.body)

    @classmethod
    def from_cst(cls, src: SourceText, node: T.Node):
        heritage = head_or_none(
            expression
            for child in node.named_children
            if child.type == "class_heritage"
            for expression in strip_comments(child.named_children)
        )

        body = named_field(node, "body")
        assert body is not None

        return cls(
            span_of(src, node),
            head_or_none(
                Identifier.from_cst(src, name)
                for name in maybe(named_field(node, "name"))
            ),
            AST.maybe_from_cst(src, heritage),
            convert_all(src, body.named_children),
        )


@D.dataclass(eq=False)
class ClassDeclaration(Class):
    id: Identifier

    AST.register(
        lambda src, node: ClassDeclaration.from_cst(src, node),
        "class_declaration",
    )


@D.dataclass(eq=False)
class ClassExpression(Class):
    AST.register(lambda src, node: ClassExpression.from_cst(src, node), "class")


@D.dataclass(eq=False)
class BlockStatement(AST):
    body: list[AST]

    @property
    def children(self) -> Iterable[AST]:
        return self.body

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "BlockStatement":
        assert node.type in ["statement_block", "class_static_block"]
        if node.type == "class_static_block":
            node = node.named_children[-1]
        return BlockStatement(span_of(src, node), convert_all(src, node.named_children))

    AST.register(from_cst, "statement_block", "class_static_block")


@D.dataclass(eq=False)
class ForStatement(AST):
    init: AST | None
    test: AST | None
    update: AST | None
    body: AST

    @property
    def children(self) -> Iterable[AST]:
        return chain(
            maybe(self.init),
            maybe(self.test),
            maybe(self.update),
            [self.body],
        )

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "ForStatement":
        assert node.type == "for_statement"

        def part(name: str) -> AST | None:
            match named_field(node, name):
                case None:
                    return None
                case child if child.type == "empty_statement":
                    return None
                case child:
                    return AST.from_cst(src, child)

        body = named_field(node, "body")
        assert body is not None

        return ForStatement(
            span_of(src, node),
            part("initializer"),
            part("condition"),
            part("increment"),
            AST.from_cst(src, body),
        )

    AST.register(from_cst, "for_statement")


@D.dataclass(eq=False)
class ForInStatement(AST):
    left: AST
    right: AST
    body: AST
    of: bool = False

    @property
    def children(self) -> Iterable[AST]:
        return [self.left, self.right, self.body]

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "ForInStatement":
        assert node.type == "for_in_statement"

        left, right, body = (
            named_field(node, "left"),
            named_field(node, "right"),
            named_field(node, "body"),
        )
        assert left is not None and right is not None and body is not None

        operator = node.child_by_field_name("operator")
        target = AST.from_cst(src, left)

        # A declaring head (`for (let x of xs)`) has no declaration node of its own in
        # the CST. It is rebuilt here as a single-declarator `VariableDeclaration`.
        if (kind := node.child_by_field_name("kind")) is not None:
            span = Span(src.offset(kind.start_byte), target.span.end)
            target = VariableDeclaration(
                span,
                DeclarationKind(text_of(kind)),
                [VariableDeclarator(target.span, target)],
            )

        return ForInStatement(
            span_of(src, node),
            target,
            AST.from_cst(src, right),
            AST.from_cst(src, body),
            operator is not None and text_of(operator) == "of",
        )

    AST.register(from_cst, "for_in_statement")


@D.dataclass(eq=False)
class CatchClause(AST):
    param: AST | None
    body: BlockStatement

    @property
    def children(self) -> Iterable[AST]:
        return chain(maybe(self.param), [self.body])

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "CatchClause":
        assert node.type == "catch_clause"
        body = named_field(node, "body")
        assert body is not None
        return CatchClause(
            span_of(src, node),
            AST.maybe_from_cst(src, named_field(node, "parameter")),
            BlockStatement.from_cst(src, body),
        )

    AST.register(from_cst, "catch_clause")


@D.dataclass(eq=False)
class SwitchStatement(AST):
    discriminant: AST
    cases: list[AST]

    @property
    def children(self) -> Iterable[AST]:
        return chain([self.discriminant], self.cases)

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "SwitchStatement":
        assert node.type == "switch_statement"
        value, body = named_field(node, "value"), named_field(node, "body")
        assert value is not None and body is not None
        return SwitchStatement(
            span_of(src, node),
            AST.from_cst(src, value),
            convert_all(src, body.named_children),
        )

    AST.register(from_cst, "switch_statement")


@D.dataclass(eq=False)
class WithStatement(AST):
    object: AST
    body: AST

    @property
    def children(self) -> Iterable[AST]:
        return [self.object, self.body]

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "WithStatement":
        assert node.type == "with_statement"
        obj, body = named_field(node, "object"), named_field(node, "body")
        assert obj is not None and body is not None
        return WithStatement(
            span_of(src, node),
            AST.from_cst(src, obj),
            AST.from_cst(src, body),
        )

    AST.register(from_cst, "with_statement")


@D.dataclass(eq=False)
class AssignmentExpression(AST):
    operator: str
    left: AST
    right: AST

    @property
    def children(self) -> Iterable[AST]:
        return [self.left, self.right]

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "AssignmentExpression":
        assert node.type in ["assignment_expression", "augmented_assignment_expression"]

        left, right = named_field(node, "left"), named_field(node, "right")
        assert left is not None and right is not None

        operator = node.child_by_field_name("operator")
        return AssignmentExpression(
            span_of(src, node),
            "=" if operator is None else text_of(operator),
            AST.from_cst(src, left),
            AST.from_cst(src, right),
        )

    AST.register(from_cst, "assignment_expression", "augmented_assignment_expression")


@D.dataclass(eq=False)
class UpdateExpression(AST):
    operator: str
    argument: AST

    @property
    def children(self) -> Iterable[AST]:
        return [self.argument]

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "UpdateExpression":
        assert node.type == "update_expression"
        argument, operator = (
            named_field(node, "argument"),
            node.child_by_field_name("operator"),
        )
        assert argument is not None and operator is not None
        return UpdateExpression(
            span_of(src, node),
            text_of(operator),
            AST.from_cst(src, argument),
        )

    AST.register(from_cst, "update_expression")


@D.dataclass(eq=False)
class MemberExpression(AST):
    object: AST
    property: AST
    computed: bool = False

    @property
    def children(self) -> Iterable[AST]:
        return [self.object, self.property]

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "MemberExpression":
        assert node.type in ["member_expression", "subscript_expression"]

        obj = named_field(node, "object")
        computed = node.type == "subscript_expression"
        prop = named_field(node, "index" if computed else "property")
        assert obj is not None and prop is not None

        return MemberExpression(
            span_of(src, node),
            AST.from_cst(src, obj),
            AST.from_cst(src, prop),
            computed,
        )

    AST.register(from_cst, "member_expression", "subscript_expression")


@D.dataclass(eq=False)
class CallExpression(AST):
    callee: AST
    arguments: list[AST]

    @property
    def children(self) -> Iterable[AST]:
        return chain([self.callee], self.arguments)

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "CallExpression":
        assert node.type in ["call_expression", "new_expression"]

        callee = named_field(node, "function")
        if callee is None:
            callee = named_field(node, "constructor")
        assert callee is not None

        match named_field(node, "arguments"):
            case None:
                arguments = []
            case args if args.type == "arguments":
                arguments = convert_all(src, args.named_children)
            case template:
                arguments = [AST.from_cst(src, template)]

        return CallExpression(span_of(src, node), AST.from_cst(src, callee), arguments)

    AST.register(from_cst, "call_expression", "new_expression")


@D.dataclass(eq=False)
class Property(AST):
    """An object literal member or an object pattern member.

    A shorthand member (`{ x }`) has one identifier that is both the key and the
    value, so `key is value` holds and the identifier is visited once.
    """

    key: AST
    value: AST
    computed: bool = False
    shorthand: bool = False

    @property
    def children(self) -> Iterable[AST]:
        return [self.value] if self.key is self.value else [self.key, self.value]

    @staticmethod
    def shorthand_of(src: SourceText, node: T.Node) -> "Property":
        id = Identifier.from_cst(src, node)
        return Property(id.span, id, id, shorthand=True)

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "Property":
        assert node.type in ["pair", "pair_pattern"]
        key, value = named_field(node, "key"), named_field(node, "value")
        assert key is not None and value is not None
        converted, computed = property_key(src, key)
        return Property(
            span_of(src, node),
            converted,
            AST.from_cst(src, value),
            computed,
        )

    AST.register(from_cst, "pair", "pair_pattern")


@D.dataclass(eq=False)
class ObjectExpression(AST):
    properties: list[AST]

    @property
    def children(self) -> Iterable[AST]:
        return self.properties

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "ObjectExpression":
        assert node.type == "object"
        return ObjectExpression(
            span_of(src, node),
            [
                Property.shorthand_of(src, child)
                if child.type == "shorthand_property_identifier"
                else AST.from_cst(src, child)
                for child in strip_comments(node.named_children)
            ],
        )

    AST.register(from_cst, "object")


@D.dataclass(eq=False)
class AssignmentPattern(AST):
    left: AST
    right: AST

    @property
    def children(self) -> Iterable[AST]:
        return [self.left, self.right]

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "AssignmentPattern":
        assert node.type in ["assignment_pattern", "object_assignment_pattern"]
        left, right = named_field(node, "left"), named_field(node, "right")
        assert left is not None and right is not None
        return AssignmentPattern(
            span_of(src, node),
            AST.from_cst(src, left),
            AST.from_cst(src, right),
        )

    AST.register(from_cst, "assignment_pattern")


@D.dataclass(eq=False)
class ObjectPattern(AST):
    properties: list[AST]

    @property
    def children(self) -> Iterable[AST]:
        return self.properties

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "ObjectPattern":
        assert node.type == "object_pattern"

        def member(child: T.Node) -> AST:
            match child.type:
                case "shorthand_property_identifier_pattern":
                    return Property.shorthand_of(src, child)
                case "object_assignment_pattern":
                    # `{ x = 1 }` binds `x` with a default: a shorthand member whose
                    # value is an assignment pattern over the same identifier.
                    pattern = AssignmentPattern.from_cst(src, child)
                    if isinstance(pattern.left, Identifier):
                        return Property(
                            pattern.span, pattern.left, pattern, shorthand=True
                        )
                    return pattern
                case _:
                    return AST.from_cst(src, child)

        return ObjectPattern(
            span_of(src, node),
            [member(child) for child in strip_comments(node.named_children)],
        )

    AST.register(from_cst, "object_pattern")


@D.dataclass(eq=False)
class ArrayPattern(AST):
    elements: list[AST]

    @property
    def children(self) -> Iterable[AST]:
        return self.elements

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "ArrayPattern":
        assert node.type == "array_pattern"
        return ArrayPattern(span_of(src, node), convert_all(src, node.named_children))

    AST.register(from_cst, "array_pattern")


@D.dataclass(eq=False)
class RestElement(AST):
    argument: AST

    @property
    def children(self) -> Iterable[AST]:
        return [self.argument]

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "RestElement":
        assert node.type == "rest_pattern"
        argument, *_ = strip_comments(node.named_children)
        return RestElement(span_of(src, node), AST.from_cst(src, argument))

    AST.register(from_cst, "rest_pattern")


@D.dataclass(eq=False)
class ImportDeclaration(AST):
    specifiers: list[Identifier]
    source: AST

    @property
    def children(self) -> Iterable[AST]:
        return chain(self.specifiers, [self.source])

    @staticmethod
    def from_cst(src: SourceText, node: T.Node) -> "ImportDeclaration":
        assert node.type == "import_statement"

        def locals_of(clause: T.Node) -> Iterable[T.Node]:
            for child in clause.named_children:
                match child.type:
                    case "identifier":
                        yield child
                    case "namespace_import":
                        yield from (
                            c for c in child.named_children if c.type == "identifier"
                        )
                    case "named_imports":
                        for specifier in child.named_children:
                            local = head_or_none(
                                name
                                for field in ["alias", "name"]
                                for name in maybe(named_field(specifier, field))
                            )
                            if local is not None and local.type == "identifier":
                                yield local

        source = named_field(node, "source")
        assert source is not None

        return ImportDeclaration(
            span_of(src, node),
            [
                Identifier.from_cst(src, local)
                for clause in node.named_children
                if clause.type == "import_clause"
                for local in locals_of(clause)
            ],
            AST.from_cst(src, source),
        )

    AST.register(from_cst, "import_statement")


def export_specifier(src: SourceText, node: T.Node) -> Unknown:
    # Only the local name refers to a binding; the exported alias does not.
    return Unknown(
        span_of(src, node),
        node.type,
        [
            AST.from_cst(src, name)
            for name in maybe(named_field(node, "name"))
            if name.type == "identifier"
        ],
    )


AST.register(export_specifier, "export_specifier")


@D.dataclass
class PrettyAST(PrettyTree):
    """A class for pretty-printing a JavaScript AST."""

    node: Any
    label: str | None = None

    def node_text(self) -> str:
        match self.node:
            case AST() as ast:
                repr = f"{ast.__class__.__qualname__} [{ast.span}]"
            case _, *_:
                repr = "[...]"
            case str():
                repr = escape(self.node)
            case _:
                repr = str(self.node)

        return repr if self.label is None else f"{self.label}={repr}"

    def children(self) -> list[PrettyTree]:
        match self.node:
            case Property() as p if p.key is p.value:
                return [PrettyAST(p.key, "key=value")]
            case AST() as ast:
                return [
                    PrettyAST(value, f.name)
                    for f in D.fields(ast)
                    if f.name != "span"
                    if (value := getattr(ast, f.name)) is not None
                    if value != []
                    if value is not False
                ]
            case list() as array:
                return [PrettyAST(value, f"[{i}]") for i, value in enumerate(array)]
            case _:
                return []

    def __repr__(self):
        return super().__repr__()


@D.dataclass
class PrettyCST(PrettyTree):
    """A class for pretty-printing a tree-sitter CST."""

    node: T.Node
    label: str | None = None

    def node_text(self) -> str:
        where = f"[{self.node.start_byte}-{self.node.end_byte}]"
        if not self.node.is_named and self.node.text:
            repr = f"{escape(self.node.text.decode())} {where}"
        else:
            repr = f"{self.node.type} {where}"

        return repr if self.label is None else f"{self.label}={repr}"

    def children(self) -> list[PrettyTree]:
        return [
            PrettyCST(child, self.node.field_name_for_child(i))
            for i, child in enumerate(self.node.children)
        ]

    def __repr__(self):
        return super().__repr__()
