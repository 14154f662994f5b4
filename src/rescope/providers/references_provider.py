import lsprotocol.types as L

from rescope.util import maybe
from rescope.workspace_model import DocumentIndex


class ReferencesProvider:
    def __init__(self, doc: DocumentIndex) -> None:
        self.doc = doc

    def serve(
        self,
        pos: L.Position,
        include_declaration: bool = True,
    ) -> list[L.Location] | None:
        refs = [
            self.doc.location(self.doc.lines.range_of(id.span))
            for identification in maybe(self.doc.identify(pos))
            for id in identification.occurrences
            if include_declaration or id is not identification.declaration
        ]
        return refs if len(refs) > 0 else None
