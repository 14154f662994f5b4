import dataclasses as D
import logging

from rescope.ast import Program, Span
from rescope.parsing import SourceText, parse_javascript
from rescope.scope import ScopeManager

from .range_index import RangeIndex
from .scope_analyzer import AnalyzerOptions, ScopeAnalyzer

log = logging.root


@D.dataclass
class SourceDocument:
    """A program loaded from source text. Renaming it produces new text."""

    source: str
    tree: Program
    scopes: ScopeManager
    index: RangeIndex


@D.dataclass
class TreeDocument:
    """A program loaded from a tree alone. Renaming it mutates the tree in place."""

    tree: Program
    scopes: ScopeManager
    index: RangeIndex


Document = SourceDocument | TreeDocument


def load(
    program: str | Program,
    options: AnalyzerOptions | None = None,
) -> Document:
    """Parses (if needed) and analyzes a program, and indexes its identifiers.

    Raises `JsSyntaxError` for source text that does not parse, and `ValueError` for
    a tree whose root carries no span.
    """
    match program:
        case str() as source:
            text = SourceText(source)
            tree = Program.from_cst(text, parse_javascript(text))
        case Program(span=Span()) as tree:
            source = None
        case Program():
            raise ValueError("Program tree has no span on its root")
        case _:
            raise TypeError(
                f"Expected source text or a Program, but got {type(program).__name__}"
            )

    scopes = ScopeAnalyzer(options).analyze(tree)
    index = RangeIndex.build(tree, scopes)
    log.debug(
        "Loaded program [%s] with %d scope(s) and %d identifier(s)",
        tree.span,
        len(scopes.scopes),
        len(index),
    )

    if source is None:
        return TreeDocument(tree, scopes, index)
    else:
        return SourceDocument(source, tree, scopes, index)
