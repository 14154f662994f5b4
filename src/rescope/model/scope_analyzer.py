import dataclasses as D
from contextlib import contextmanager
from typing import Callable, Iterator

from rescope.ast import (
    AST,
    ArrayPattern,
    ArrowFunctionExpression,
    AssignmentExpression,
    AssignmentPattern,
    BlockStatement,
    CallExpression,
    CatchClause,
    Class,
    ClassDeclaration,
    DeclarationKind,
    ExpressionStatement,
    ForInStatement,
    ForStatement,
    Function,
    FunctionDeclaration,
    FunctionExpression,
    Identifier,
    ImportDeclaration,
    Literal,
    MethodDefinition,
    ObjectPattern,
    Program,
    Property,
    PropertyKey,
    RestElement,
    SwitchStatement,
    Unknown,
    UpdateExpression,
    VariableDeclaration,
    WithStatement,
)
from rescope.scope import (
    Definition,
    DefinitionType,
    ReferenceFlag,
    Scope,
    ScopeManager,
    ScopeType,
)
from rescope.visitor import Visitor


@D.dataclass(frozen=True)
class AnalyzerOptions:
    # Treats all code as strict mode code, as if it started with "use strict".
    implied_strict: bool = False


def has_use_strict(statements: list[AST]) -> bool:
    """Checks the directive prologue, i.e. the leading string statements."""
    for statement in statements:
        match statement:
            case ExpressionStatement(expression=Literal(raw=raw)) if raw[:1] in "'\"":
                if raw[1:-1] == "use strict":
                    return True
            case _:
                return False
    return False


def pattern_targets(pattern: AST, expressions: list[AST]) -> Iterator[Identifier]:
    """Yields the identifiers bound or assigned by a pattern.

    Expressions found along the way that must be evaluated as reads (default values,
    computed keys, member expression targets) are appended to `expressions`.
    """
    match pattern:
        case PropertyKey():
            return
        case Identifier():
            yield pattern
        case AssignmentPattern(left=left, right=right):
            yield from pattern_targets(left, expressions)
            expressions.append(right)
        case ObjectPattern(properties=properties):
            for p in properties:
                yield from pattern_targets(p, expressions)
        case Property(key=key, value=value, computed=computed):
            if computed:
                expressions.append(key)
            yield from pattern_targets(value, expressions)
        case ArrayPattern(elements=elements):
            for e in elements:
                yield from pattern_targets(e, expressions)
        case RestElement(argument=argument):
            yield from pattern_targets(argument, expressions)
        case Unknown(node_type="parenthesized_expression", parts=[inner]):
            yield from pattern_targets(inner, expressions)
        case _:
            expressions.append(pattern)


class ScopeAnalyzer(Visitor):
    """An AST visitor that builds the scope tree and records definitions and references.

    Each scope is closed when the visitor leaves its block. Closing resolves the
    references still pending in that scope, so every declaration in the block,
    hoisted or not, is known by then.
    """

    def __init__(self, options: AnalyzerOptions | None = None) -> None:
        self.options = options or AnalyzerOptions()
        self.manager = ScopeManager()
        self.current: Scope | None = None

    def analyze(self, tree: Program) -> ScopeManager:
        self.manager = ScopeManager()
        self.current = None

        strict = self.options.implied_strict or has_use_strict(tree.body)
        with self.nest(ScopeType.Global, tree, strict):
            self.visit_children(tree)

        return self.manager

    @property
    def scope(self) -> Scope:
        assert self.current is not None
        return self.current

    @contextmanager
    def nest(self, type: ScopeType, block: AST, strict: bool | None = None):
        prev = self.current
        if strict is None:
            strict = prev is not None and prev.strict

        scope = self.manager.add(Scope(type, block, upper=prev, strict=strict))
        self.current = scope
        try:
            yield scope
            scope.close()
        finally:
            self.current = prev

    def bind_pattern(
        self,
        scope: Scope,
        pattern: AST,
        definition_of: Callable[[Identifier], Definition],
    ) -> list[Identifier]:
        expressions: list[AST] = []
        targets = list(pattern_targets(pattern, expressions))

        for id in targets:
            scope.define(id, definition_of(id))

        for e in expressions:
            self.visit(e)

        return targets

    def visit_identifier(self, e: Identifier):
        self.scope.reference(e)

    def visit_variable_declaration(self, d: VariableDeclaration):
        target_scope = (
            self.scope.variable_scope if d.kind == DeclarationKind.Var else self.scope
        )

        for decl in d.declarations:
            targets = self.bind_pattern(
                target_scope,
                decl.id,
                lambda id: Definition(DefinitionType.Variable, id, decl, d, d.kind),
            )

            if decl.init is not None:
                for id in targets:
                    self.scope.reference(
                        id,
                        ReferenceFlag.Write,
                        write_expr=decl.init,
                        init=True,
                    )
                self.visit(decl.init)

    def visit_function_declaration(self, f: FunctionDeclaration):
        # The name of a function declaration binds in the enclosing scope, not in the
        # function's own scope.
        self.scope.define(f.id, Definition(DefinitionType.FunctionName, f.id, f))
        self.visit_function(f)

    def visit_function_expression(self, f: FunctionExpression):
        self.visit_function(f)

    def visit_arrow_function(self, f: ArrowFunctionExpression):
        self.visit_function(f)

    def visit_function(self, f: Function):
        strict = self.scope.strict or (
            isinstance(f.body, BlockStatement) and has_use_strict(f.body.body)
        )

        with self.nest(ScopeType.Function, f, strict) as scope:
            if not isinstance(f, ArrowFunctionExpression):
                scope.define(Identifier(f.span, "arguments"))

            if isinstance(f, FunctionExpression) and f.id is not None:
                scope.define(f.id, Definition(DefinitionType.FunctionName, f.id, f))

            for param in f.params:
                self.bind_pattern(
                    scope,
                    param,
                    lambda id: Definition(DefinitionType.Parameter, id, f),
                )

            # A function body block does not open a scope of its own.
            match f.body:
                case BlockStatement() as body:
                    self.visit_children(body)
                case body:
                    self.visit(body)

    def visit_class(self, c: Class):
        if isinstance(c, ClassDeclaration):
            self.scope.define(c.id, Definition(DefinitionType.ClassName, c.id, c))

        if c.superclass is not None:
            self.visit(c.superclass)

        def visit_body():
            with self.strict_mode():
                for member in c.body:
                    self.visit(member)

        # Only a named class expression needs a scope: its name is visible in the
        # class body alone.
        if isinstance(c, ClassDeclaration) or c.id is None:
            visit_body()
        else:
            with self.nest(ScopeType.Class, c, strict=True) as scope:
                scope.define(c.id, Definition(DefinitionType.ClassName, c.id, c))
                visit_body()

    @contextmanager
    def strict_mode(self):
        scope = self.scope
        prev = scope.strict
        scope.strict = True
        try:
            yield scope
        finally:
            scope.strict = prev

    def visit_method_definition(self, m: MethodDefinition):
        if m.computed:
            self.visit(m.key)
        self.visit_function(m.value)

    def visit_block(self, b: BlockStatement):
        with self.nest(ScopeType.Block, b):
            self.visit_children(b)

    def visit_for(self, s: ForStatement):
        match s.init:
            case VariableDeclaration(kind=kind) if kind != DeclarationKind.Var:
                with self.nest(ScopeType.For, s):
                    self.visit_children(s)
            case _:
                self.visit_children(s)

    def visit_for_in(self, s: ForInStatement):
        match s.left:
            case VariableDeclaration(kind=kind) if kind != DeclarationKind.Var:
                with self.nest(ScopeType.For, s):
                    self.visit_for_in_head(s)
                    self.visit(s.right)
                    self.visit(s.body)
            case _:
                self.visit_for_in_head(s)
                self.visit(s.right)
                self.visit(s.body)

    def visit_for_in_head(self, s: ForInStatement):
        match s.left:
            case VariableDeclaration() as d:
                self.visit_variable_declaration(d)
                for decl in d.declarations:
                    for id in pattern_targets(decl.id, []):
                        self.scope.reference(
                            id,
                            ReferenceFlag.Write,
                            write_expr=s.right,
                            init=True,
                        )
            case pattern:
                self.assign(pattern, s.right)

    def visit_catch_clause(self, c: CatchClause):
        with self.nest(ScopeType.Catch, c) as scope:
            if c.param is not None:
                self.bind_pattern(
                    scope,
                    c.param,
                    lambda id: Definition(DefinitionType.CatchClause, id, c),
                )
            self.visit(c.body)

    def visit_switch(self, s: SwitchStatement):
        self.visit(s.discriminant)
        with self.nest(ScopeType.Switch, s):
            for case in s.cases:
                self.visit(case)

    def visit_with(self, s: WithStatement):
        self.visit(s.object)
        with self.nest(ScopeType.With, s):
            self.visit(s.body)

    def assign(self, pattern: AST, value: AST):
        expressions: list[AST] = []
        for id in pattern_targets(pattern, expressions):
            self.scope.reference(
                id,
                ReferenceFlag.Write,
                write_expr=value,
                maybe_implicit_global=True,
            )

        for e in expressions:
            self.visit(e)

    def visit_assignment(self, e: AssignmentExpression):
        if e.operator == "=":
            self.assign(e.left, e.right)
        else:
            match e.left:
                case Identifier() as id:
                    self.scope.reference(
                        id, ReferenceFlag.ReadWrite, write_expr=e.right
                    )
                case left:
                    self.visit(left)

        self.visit(e.right)

    def visit_update(self, e: UpdateExpression):
        match e.argument:
            case Identifier() as id:
                self.scope.reference(id, ReferenceFlag.ReadWrite)
            case argument:
                self.visit(argument)

    def visit_call(self, e: CallExpression):
        if isinstance(e.callee, Identifier) and e.callee.name == "eval":
            self.scope.variable_scope.detect_eval()

        super().visit_call(e)

    def visit_import(self, d: ImportDeclaration):
        for id in d.specifiers:
            self.scope.define(id, Definition(DefinitionType.ImportBinding, id, d))
