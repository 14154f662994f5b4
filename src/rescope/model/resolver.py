from rescope.ast import Identifier
from rescope.scope import Definition, DefinitionType, Reference, Scope


def is_implicit_global(d: Definition) -> bool:
    return d.type is DefinitionType.ImplicitGlobalVariable


def preferred_definition(defs: list[Definition]) -> Definition | None:
    """Picks the definition that stands for a variable's declaration.

    Explicit definitions outrank implicit globals; among the preferred ones the most
    recently added wins.
    """
    if len(defs) > 1:
        defs = [d for d in defs if not is_implicit_global(d)] or defs

    return defs[-1] if defs else None


def declaration_of(defs: list[Definition]) -> Identifier | None:
    match preferred_definition(defs):
        case None:
            return None
        case d if is_implicit_global(d):
            # A name that only leaked into the global scope has no real declaration.
            return None
        case d:
            return d.name


def resolve_declaration(ref: Reference) -> Identifier | None:
    """Returns the identifier declaring what `ref` refers to, if there is one."""
    if ref.resolved is not None:
        return declaration_of(ref.resolved.defs)

    name = ref.identifier.name
    scope: Scope | None = ref.from_scope

    while scope is not None:
        for variable in scope.variables:
            if variable.name == name and variable.defs:
                return declaration_of(variable.defs)
        scope = scope.upper

    return None
