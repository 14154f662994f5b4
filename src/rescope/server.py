import logging

import lsprotocol.types as L
from pygls.lsp.server import LanguageServer

from rescope.model import AnalyzerOptions
from rescope.providers import (
    DocumentHighlightProvider,
    ReferencesProvider,
    RenameProvider,
)
from rescope.workspace_model import DocumentIndex, WorkspaceIndex

log = logging.root


class RescopeLanguageServer(LanguageServer):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.workspace_index = WorkspaceIndex()

    def configure(self, options: AnalyzerOptions):
        log.info("Analyzer options: %s", options)
        self.workspace_index = WorkspaceIndex(options, self.workspace.position_codec)

    def get_document(self, uri: str) -> DocumentIndex:
        if (doc_index := self.workspace_index.get(uri)) is None:
            doc = self.workspace.get_text_document(uri)
            doc_index = self.workspace_index.load(doc.uri, doc.source)
        return doc_index


server = RescopeLanguageServer("rescope", "v0.1")


@server.feature(L.INITIALIZE)
def initialize(ls: RescopeLanguageServer, params: L.InitializeParams):
    match params.initialization_options:
        case {"impliedStrict": bool(implied_strict)}:
            ls.configure(AnalyzerOptions(implied_strict=implied_strict))
        case _:
            ls.configure(AnalyzerOptions())

    return L.InitializeResult(
        capabilities=L.ServerCapabilities(
            document_highlight_provider=True,
            references_provider=True,
            rename_provider=L.RenameOptions(prepare_provider=True),
            text_document_sync=L.TextDocumentSyncKind.Full,
        ),
        server_info=L.ServerInfo(
            name=ls.name,
            version=ls.version,
        ),
    )


@server.feature(L.TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: RescopeLanguageServer, params: L.DidOpenTextDocumentParams):
    doc = params.text_document
    log.info("Opened %s", doc.uri)
    ls.workspace_index.load(doc.uri, doc.text)


@server.feature(L.TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: RescopeLanguageServer, params: L.DidChangeTextDocumentParams):
    doc = ls.workspace.get_text_document(params.text_document.uri)
    ls.workspace_index.load(doc.uri, doc.source)


@server.feature(L.TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: RescopeLanguageServer, params: L.DidCloseTextDocumentParams):
    log.info("Closed %s", params.text_document.uri)
    ls.workspace_index.close(params.text_document.uri)


@server.feature(L.TEXT_DOCUMENT_PREPARE_RENAME)
def prepare_rename(ls: RescopeLanguageServer, params: L.PrepareRenameParams):
    doc_index = ls.get_document(params.text_document.uri)
    return RenameProvider(doc_index).prepare(params.position)


@server.feature(L.TEXT_DOCUMENT_RENAME)
def rename(ls: RescopeLanguageServer, params: L.RenameParams):
    doc_index = ls.get_document(params.text_document.uri)
    return RenameProvider(doc_index).serve(params.position, params.new_name)


@server.feature(L.TEXT_DOCUMENT_REFERENCES)
def references(ls: RescopeLanguageServer, params: L.ReferenceParams):
    doc_index = ls.get_document(params.text_document.uri)
    return ReferencesProvider(doc_index).serve(
        params.position,
        params.context.include_declaration,
    )


@server.feature(L.TEXT_DOCUMENT_DOCUMENT_HIGHLIGHT)
def document_highlight(ls: RescopeLanguageServer, params: L.DocumentHighlightParams):
    doc_index = ls.get_document(params.text_document.uri)
    return DocumentHighlightProvider(doc_index).serve(params.position)
