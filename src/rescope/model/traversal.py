import dataclasses as D
from typing import Callable, Generic, TypeVar

from rescope.ast import AST
from rescope.scope import Scope, ScopeManager

State = TypeVar("State")


@D.dataclass
class TraversalContext(Generic[State]):
    """What a traversal callback sees: the active scope and the caller's accumulator.

    `acquired` is the scope opened by the node being entered, if any, and `scope` is
    the innermost scope enclosing it (that scope included).
    """

    scopes: ScopeManager
    state: State
    scope: Scope | None = None
    acquired: Scope | None = None

    def enter(self, node: AST):
        self.acquired = self.scopes.acquire(node)
        self.scope = self.acquired or self.scope

    def leave(self, node: AST):
        self.scope = self.scopes.release(node) or self.scope


Callback = Callable[[AST, TraversalContext[State]], None]


def traverse(
    root: AST,
    scopes: ScopeManager,
    state: State,
    enter: Callback | None = None,
    leave: Callback | None = None,
) -> TraversalContext[State]:
    """Walks `root` depth-first, tracking the active scope on the way down and up."""
    context = TraversalContext(scopes, state)

    with scopes.attached():
        stack: list[tuple[AST, bool]] = [(root, False)]

        while stack:
            node, leaving = stack.pop()

            if leaving:
                if leave is not None:
                    leave(node, context)
                context.leave(node)
                continue

            context.enter(node)
            if enter is not None:
                enter(node, context)

            stack.append((node, True))
            stack.extend((child, False) for child in reversed(list(node.children)))

    return context
