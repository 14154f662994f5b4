import dataclasses as D
import logging

from rescope.ast import AST, Identifier
from rescope.scope import Scope, ScopeManager

from .document import Document
from .resolver import resolve_declaration
from .traversal import TraversalContext, traverse

log = logging.root


@D.dataclass
class Identification:
    identifier: Identifier
    declaration: Identifier | None
    # May contain `identifier` itself.
    references: list[Identifier] = D.field(default_factory=list)
    # Whether `identifier` is the name of a function declaration.
    func: bool = False

    @property
    def occurrences(self) -> list[Identifier]:
        """The identifier, its declaration and its references, each listed once."""
        candidates = [self.identifier, *self.references]
        if self.declaration is not None:
            candidates.insert(1, self.declaration)

        seen: set[int] = set()
        occurrences = []
        for id in candidates:
            if id.span.start not in seen:
                seen.add(id.span.start)
                occurrences.append(id)

        return sorted(occurrences, key=lambda id: id.span)


@D.dataclass(frozen=True)
class Binding:
    # `None` when the occurrence has no real declaration, e.g. an implicit global.
    declaration: Identifier | None


def lookup(scope: Scope, identifier: Identifier) -> Binding | None:
    """Finds what `identifier` is bound to, looking at `scope` alone.

    The identifier is either one of the scope's references, or one of the occurrences
    of a variable declared in the scope's variable scope, in which case it is its own
    declaration.
    """
    for ref in scope.references:
        if ref.identifier is identifier:
            return Binding(resolve_declaration(ref))

    for variable in scope.variable_scope.variables:
        if any(id is identifier for id in variable.identifiers):
            return Binding(identifier)

    return None


def collect_references(
    scope: Scope,
    scopes: ScopeManager,
    name: str,
    declaration: Identifier | None,
) -> list[Identifier]:
    """Collects every reference under `scope` named `name` bound to `declaration`."""

    def enter(node: AST, context: TraversalContext[list[Identifier]]):
        del node
        if context.acquired is None:
            return

        for ref in context.acquired.references:
            if ref.identifier.name != name:
                continue

            binding = lookup(context.acquired, ref.identifier)
            if binding is not None and binding.declaration is declaration:
                context.state.append(ref.identifier)

    return traverse(scope.block, scopes, [], enter).state


def identify(document: Document, offset: int) -> Identification | None:
    if (entry := document.index.at(offset)) is None:
        return None

    scope, identifier = entry.scope, entry.identifier
    binding = lookup(scope, identifier)

    # A function declaration's name binds in the scope enclosing the function.
    if binding is None and entry.func and scope.upper is not None:
        scope = scope.upper
        binding = lookup(scope, identifier)

    if binding is None:
        return None

    references = collect_references(
        scope,
        document.scopes,
        identifier.name,
        binding.declaration,
    )

    log.debug(
        'Identified "%s" [%s]: declaration=%s, %d reference(s)',
        identifier.name,
        identifier.span,
        binding.declaration and binding.declaration.span,
        len(references),
    )

    return Identification(identifier, binding.declaration, references, entry.func)
