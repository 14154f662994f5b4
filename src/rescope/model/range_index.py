import dataclasses as D

from rescope.ast import AST, FunctionDeclaration, Identifier, Program
from rescope.scope import Scope, ScopeManager

from .traversal import TraversalContext, traverse


@D.dataclass(frozen=True)
class IndexEntry:
    # Whether `identifier` is the name of a function declaration.
    func: bool
    scope: Scope
    identifier: Identifier


class RangeIndex:
    """Maps the start offset of every identifier in a tree to where it occurs.

    The index is a snapshot of one tree: it goes stale as soon as the tree or its
    source changes, including after a tree-mode rename.
    """

    def __init__(self) -> None:
        self.entries: dict[int, IndexEntry] = {}

    def __len__(self) -> int:
        return len(self.entries)

    def at(self, offset: int) -> IndexEntry | None:
        return self.entries.get(offset)

    def add(self, identifier: Identifier, func: bool, scope: Scope):
        # The first identifier seen at an offset wins.
        self.entries.setdefault(
            identifier.span.start,
            IndexEntry(func, scope, identifier),
        )

    @staticmethod
    def build(tree: Program, scopes: ScopeManager) -> "RangeIndex":
        def enter(node: AST, context: TraversalContext[RangeIndex]):
            assert context.scope is not None
            match node:
                case FunctionDeclaration(id=id):
                    context.state.add(id, True, context.scope)
                case Identifier():
                    context.state.add(node, False, context.scope)

        return traverse(tree, scopes, RangeIndex(), enter).state
