import dataclasses as D
from contextlib import contextmanager
from enum import IntFlag, StrEnum
from typing import Any, Iterator

from rescope.ast import AST, DeclarationKind, Identifier
from rescope.pretty import PrettyTree


class ScopeType(StrEnum):
    Global = "global"
    Function = "function"
    Class = "class"
    Block = "block"
    For = "for"
    Catch = "catch"
    Switch = "switch"
    With = "with"


class DefinitionType(StrEnum):
    Variable = "Variable"
    Parameter = "Parameter"
    FunctionName = "FunctionName"
    ClassName = "ClassName"
    CatchClause = "CatchClause"
    ImportBinding = "ImportBinding"
    ImplicitGlobalVariable = "ImplicitGlobalVariable"


class ReferenceFlag(IntFlag):
    Read = 1
    Write = 2
    ReadWrite = Read | Write


@D.dataclass(eq=False)
class Definition:
    type: DefinitionType
    name: Identifier
    node: AST
    parent: AST | None = None
    kind: DeclarationKind | None = None

    @property
    def is_lexical(self) -> bool:
        match self.type:
            case DefinitionType.ClassName:
                return True
            case DefinitionType.Variable:
                return self.kind is not None and self.kind != DeclarationKind.Var
            case _:
                return False


@D.dataclass(eq=False)
class Variable:
    name: str
    scope: "Scope"
    defs: list[Definition] = D.field(default_factory=list)
    identifiers: list[Identifier] = D.field(default_factory=list)
    references: list["Reference"] = D.field(default_factory=list)


@D.dataclass(eq=False)
class Reference:
    identifier: Identifier
    from_scope: "Scope"
    flag: ReferenceFlag = ReferenceFlag.Read
    write_expr: AST | None = None
    init: bool = False
    maybe_implicit_global: bool = False
    resolved: Variable | None = None

    @property
    def is_write(self) -> bool:
        return bool(self.flag & ReferenceFlag.Write)

    @property
    def is_read(self) -> bool:
        return bool(self.flag & ReferenceFlag.Read)


@D.dataclass(eq=False)
class Scope:
    type: ScopeType
    block: AST
    upper: "Scope | None" = None
    strict: bool = False

    def __post_init__(self):
        self.variables: list[Variable] = []
        self.set: dict[str, Variable] = {}
        self.references: list[Reference] = []
        self.through: list[Reference] = []
        self.child_scopes: list[Scope] = []
        self.dynamic = self.type in [ScopeType.Global, ScopeType.With]

        # References made in this scope or passed up by child scopes, not yet
        # resolved. Drained when the scope closes.
        self.left: list[Reference] = []

        if self.upper is not None:
            self.upper.child_scopes.append(self)

    @property
    def is_variable_scope(self) -> bool:
        return self.type in [ScopeType.Global, ScopeType.Function]

    @property
    def variable_scope(self) -> "Scope":
        """The nearest enclosing function or global scope."""
        scope = self
        while not scope.is_variable_scope and scope.upper is not None:
            scope = scope.upper
        return scope

    def define(
        self,
        name: Identifier,
        definition: Definition | None = None,
    ) -> Variable:
        variable = self.set.get(name.name)

        if variable is None:
            variable = Variable(name.name, self)
            self.set[name.name] = variable
            self.variables.append(variable)

        if definition is not None:
            variable.defs.append(definition)
            variable.identifiers.append(name)

        return variable

    def reference(
        self,
        identifier: Identifier,
        flag: ReferenceFlag = ReferenceFlag.Read,
        write_expr: AST | None = None,
        maybe_implicit_global: bool = False,
        init: bool = False,
    ) -> Reference:
        ref = Reference(
            identifier,
            self,
            flag,
            write_expr,
            init,
            maybe_implicit_global and not self.strict,
        )
        self.references.append(ref)
        self.left.append(ref)
        return ref

    def detect_eval(self):
        """Marks this scope and all enclosing ones as dynamic after a direct `eval`."""
        scope: Scope | None = self
        while scope is not None:
            scope.dynamic = True
            scope = scope.upper

    def close(self):
        if self.type is ScopeType.Global:
            self.define_implicit_globals()

        for ref in self.left:
            if self.type is ScopeType.Global:
                if not self.resolve_lexical(ref):
                    self.through.append(ref)
            elif self.dynamic:
                self.pass_through(ref)
            elif not self.resolve(ref):
                self.delegate(ref)

        self.left = []

    def define_implicit_globals(self):
        for ref in self.left:
            if not ref.maybe_implicit_global:
                continue

            variable = self.set.get(ref.identifier.name)
            declared = variable is not None and any(
                d.type is not DefinitionType.ImplicitGlobalVariable
                for d in variable.defs
            )

            if not declared:
                self.define(
                    ref.identifier,
                    Definition(
                        DefinitionType.ImplicitGlobalVariable,
                        ref.identifier,
                        ref.write_expr or ref.identifier,
                    ),
                )

    def resolve(self, ref: Reference) -> bool:
        variable = self.set.get(ref.identifier.name)
        if variable is None:
            return False

        variable.references.append(ref)
        ref.resolved = variable
        return True

    def resolve_lexical(self, ref: Reference) -> bool:
        # Global `var`s, functions and implicit globals may be shadowed or extended by
        # other scripts, so only `let`, `const` and class bindings resolve statically.
        variable = self.set.get(ref.identifier.name)
        if variable is None or not variable.defs:
            return False
        if not all(d.is_lexical for d in variable.defs):
            return False
        return self.resolve(ref)

    def delegate(self, ref: Reference):
        self.through.append(ref)
        if self.upper is not None:
            self.upper.left.append(ref)

    def pass_through(self, ref: Reference):
        scope: Scope | None = self
        while scope is not None:
            scope.through.append(ref)
            scope = scope.upper

    @property
    def pretty_tree(self) -> str:
        return str(PrettyScope(self))


class ScopeManager:
    """Owns the scope tree of one program and maps blocks to the scopes they open.

    `acquire` and `release` are only meaningful while the manager is attached to the
    tree, i.e. inside `attached()` or between `attach()` and `detach()`.
    """

    def __init__(self) -> None:
        self.scopes: list[Scope] = []
        self.block_scopes: dict[AST, list[Scope]] = {}
        self.is_attached = False

    @property
    def global_scope(self) -> Scope:
        return self.scopes[0]

    def add(self, scope: Scope) -> Scope:
        self.scopes.append(scope)
        self.block_scopes.setdefault(scope.block, []).append(scope)
        return scope

    def attach(self):
        self.is_attached = True

    def detach(self):
        self.is_attached = False

    @contextmanager
    def attached(self) -> Iterator["ScopeManager"]:
        was_attached = self.is_attached
        self.attach()
        try:
            yield self
        finally:
            self.is_attached = was_attached

    def acquire(self, node: AST, inner: bool = False) -> Scope | None:
        assert self.is_attached, "Scope manager is not attached"
        match self.block_scopes.get(node):
            case None | []:
                return None
            case [*_, last] if inner:
                return last
            case [first, *_]:
                return first

    def release(self, node: AST) -> Scope | None:
        scope = self.acquire(node)
        return None if scope is None else scope.upper


@D.dataclass
class PrettyScope(PrettyTree):
    """A class for pretty-printing a scope tree."""

    node: Any
    label: str | None = None

    def node_text(self) -> str:
        match self.node:
            case Scope() as scope:
                flags = " strict" if scope.strict else ""
                flags += " dynamic" if scope.dynamic else ""
                where = f"{scope.block.__class__.__qualname__} [{scope.block.span}]"
                repr = f"{scope.type.title()}Scope{flags} @ {where}"
            case Variable(name, _, defs):
                kinds = ", ".join(d.type for d in defs) or "no definitions"
                repr = f'"{name}" ({kinds})'
            case Reference() as ref:
                target = "unresolved"
                if ref.resolved is not None:
                    target = f'-> "{ref.resolved.name}"'
                repr = f'"{ref.identifier.name}" [{ref.identifier.span}] {target}'
            case []:
                repr = "[]"
            case list():
                repr = "[...]"
            case _:
                repr = str(self.node)

        return repr if self.label is None else f"{self.label}={repr}"

    def children(self) -> list[PrettyTree]:
        match self.node:
            case Scope() as scope:
                return [
                    PrettyScope(scope.variables, "variables"),
                    PrettyScope(scope.references, "references"),
                    PrettyScope(scope.child_scopes, "children"),
                ]
            case list() as array:
                return [PrettyScope(value, f"[{i}]") for i, value in enumerate(array)]
            case _:
                return []

    def __repr__(self):
        return super().__repr__()
