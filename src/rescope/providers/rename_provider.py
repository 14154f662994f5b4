import lsprotocol.types as L

from rescope.model import rename_spans
from rescope.workspace_model import DocumentIndex


class RenameProvider:
    def __init__(self, doc: DocumentIndex) -> None:
        self.doc = doc

    def prepare(self, pos: L.Position) -> L.PrepareRenamePlaceholder | None:
        match self.doc.identify(pos):
            case None:
                return None
            case identification:
                id = identification.identifier
                return L.PrepareRenamePlaceholder(
                    range=self.doc.lines.range_of(id.span),
                    placeholder=id.name,
                )

    def serve(self, pos: L.Position, new_name: str) -> L.WorkspaceEdit | None:
        match self.doc.identify(pos):
            case None:
                return None
            case identification:
                text_edits = [
                    L.TextEdit(range=self.doc.lines.range_of(span), new_text=new_name)
                    for span in reversed(rename_spans(identification))
                ]

        return L.WorkspaceEdit(changes={self.doc.uri: text_edits})
