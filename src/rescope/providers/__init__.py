from .document_highlight_provider import DocumentHighlightProvider
from .references_provider import ReferencesProvider
from .rename_provider import RenameProvider

__all__ = [
    "DocumentHighlightProvider",
    "ReferencesProvider",
    "RenameProvider",
]
