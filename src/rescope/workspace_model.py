import logging
import re

import lsprotocol.types as L
from pygls.workspace import PositionCodec

from rescope.lines import LineIndex
from rescope.model import AnalyzerOptions, Document, Identification, identify, load
from rescope.parsing import JsSyntaxError
from rescope.util import maybe

log = logging.root

URI = str

IDENTIFIER_CHAR = re.compile(r"[\w$]")


class DocumentIndex:
    """One open document: its analysis, or the reason it could not be analyzed."""

    def __init__(
        self,
        uri: URI,
        source: str,
        document: Document | None,
        error: JsSyntaxError | None = None,
        codec: PositionCodec | None = None,
    ) -> None:
        self.uri = uri
        self.source = source
        self.document = document
        self.error = error
        self.lines = LineIndex(source, codec)

    @staticmethod
    def load(
        uri: URI,
        source: str,
        options: AnalyzerOptions | None = None,
        codec: PositionCodec | None = None,
    ) -> "DocumentIndex":
        try:
            document = load(source, options)
        except JsSyntaxError as error:
            log.warning("Failed to parse %s: %s", uri, error)
            return DocumentIndex(uri, source, None, error, codec)

        return DocumentIndex(uri, source, document, None, codec)

    def token_start(self, offset: int) -> int:
        """Moves an offset inside or right after a name to its first character."""
        while offset > 0 and IDENTIFIER_CHAR.match(self.source, offset - 1):
            offset -= 1
        return offset

    def identify(self, pos: L.Position) -> Identification | None:
        return next(
            (
                identification
                for document in maybe(self.document)
                for offset in [self.token_start(self.lines.offset_at(pos))]
                for identification in maybe(identify(document, offset))
            ),
            None,
        )

    def location(self, range: L.Range) -> L.Location:
        return L.Location(self.uri, range)


class WorkspaceIndex:
    def __init__(
        self,
        options: AnalyzerOptions | None = None,
        codec: PositionCodec | None = None,
    ) -> None:
        self.options = options or AnalyzerOptions()
        self.codec = codec
        self.docs: dict[URI, DocumentIndex] = {}

    def load(self, uri: URI, source: str) -> DocumentIndex:
        doc = DocumentIndex.load(uri, source, self.options, self.codec)
        self.docs[uri] = doc
        return doc

    def get(self, uri: URI) -> DocumentIndex | None:
        return self.docs.get(uri)

    def close(self, uri: URI):
        self.docs.pop(uri, None)
