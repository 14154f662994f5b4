from .document import Document, SourceDocument, TreeDocument, load
from .identification import Identification, identify
from .range_index import IndexEntry, RangeIndex
from .rename import rename, rename_spans
from .resolver import preferred_definition, resolve_declaration
from .scope_analyzer import AnalyzerOptions, ScopeAnalyzer

__all__ = [
    "AnalyzerOptions",
    "Document",
    "Identification",
    "IndexEntry",
    "RangeIndex",
    "ScopeAnalyzer",
    "SourceDocument",
    "TreeDocument",
    "identify",
    "load",
    "preferred_definition",
    "rename",
    "rename_spans",
    "resolve_declaration",
]
