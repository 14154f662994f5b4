from rescope.ast import Program, Span
from rescope.util import must

from .document import Document, SourceDocument, TreeDocument
from .identification import Identification


def rename_spans(identification: Identification) -> list[Span]:
    """Spans to rewrite, sorted by descending start offset, one per start offset."""
    spans = [identification.identifier.span]
    if identification.declaration is not None:
        spans.append(identification.declaration.span)
    spans.extend(id.span for id in identification.references)

    spans.sort(key=lambda span: span.start, reverse=True)

    return [
        span
        for i, span in enumerate(spans)
        if i == 0 or spans[i - 1].start != span.start
    ]


def rename(
    document: Document,
    identification: Identification | None,
    name: str,
) -> str | Program:
    """Renames every occurrence in `identification` to `name`.

    Returns the new source text for a `SourceDocument`. A `TreeDocument` is renamed in
    place and its tree returned; its index is stale afterwards if `name` differs in
    length from the old name.
    """
    spans = [] if identification is None else rename_spans(identification)

    match document:
        case SourceDocument(source=source):
            # Right to left, so pending spans keep their offsets.
            for span in spans:
                source = source[: span.start] + name + source[span.end :]
            return source

        case TreeDocument(tree=tree, index=index):
            for span in spans:
                entry = must(index.at(span.start), f"No identifier at {span.start}")
                entry.identifier.name = name
            return tree
