import lsprotocol.types as L

from rescope.util import maybe
from rescope.workspace_model import DocumentIndex


class DocumentHighlightProvider:
    def __init__(self, doc: DocumentIndex) -> None:
        self.doc = doc

    def serve(self, pos: L.Position) -> list[L.DocumentHighlight]:
        from lsprotocol.types import DocumentHighlightKind as K

        return [
            L.DocumentHighlight(self.doc.lines.range_of(id.span), kind)
            for identification in maybe(self.doc.identify(pos))
            for id in identification.occurrences
            if (kind := K.Write if id is identification.declaration else K.Read,)
        ]
