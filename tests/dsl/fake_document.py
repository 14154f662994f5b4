from textwrap import dedent

from rich.text import Text

from rescope.ast import Identifier, Program, Span
from rescope.model import (
    AnalyzerOptions,
    Identification,
    SourceDocument,
    TreeDocument,
    identify,
    load,
    rename,
)

from .marked_range import parse_marked_source


class FakeDocument:
    """A JavaScript document written with marks under its lines.

    ```plaintext
    var x = 1; x
        ^1     ^2
    ```

    The mark lines are stripped from the source; `at(1)` is then the span of the first
    `x`, and `offset(2)` the start offset of the second one.
    """

    def __init__(self, source: str, implied_strict: bool = False) -> None:
        self.source, self.spans = parse_marked_source(dedent(source))
        self.options = AnalyzerOptions(implied_strict=implied_strict)
        self.document = load(self.source, self.options)
        assert isinstance(self.document, SourceDocument)

    @property
    def tree(self) -> Program:
        return self.document.tree

    def at(self, mark: int) -> Span:
        return self.spans[mark]

    def offset(self, mark: int) -> int:
        return self.at(mark).start

    def node_at(self, mark: int) -> Identifier:
        entry = self.document.index.at(self.offset(mark))
        assert entry is not None, f"No identifier at mark {mark}"
        return entry.identifier

    def identify(self, mark: int) -> Identification | None:
        return identify(self.document, self.offset(mark))

    def rename(self, mark: int, name: str) -> str:
        renamed = rename(self.document, self.identify(mark), name)
        assert isinstance(renamed, str)
        return renamed

    def tree_document(self) -> TreeDocument:
        """Loads a fresh copy of the tree alone, as a document renamed in place."""
        document = load(load(self.source, self.options).tree, self.options)
        assert isinstance(document, TreeDocument)
        return document

    def highlight(self, spans: tuple[Span, str] | list[tuple[Span, str]]) -> Text:
        """Renders the document with given spans highlighted.

        The document is rendered with a top ruler and a line number gutter:

        ```plaintext
          0    5   10   15       <-- Top ruler
          |''''|''''|''''|''''
        1 |var x = { f: 1 };
        2 |var y = x.f;
        ^^
          Line number gutter
        ```
        """
        if isinstance(spans, tuple):
            spans = [spans]

        styled = Text.styled
        rendered = []

        rendered_source = styled(self.source, "default")
        for span, style in spans:
            rendered_source.stylize(style, start=span.start, end=span.end)

        raw_lines = self.source.splitlines() or [""]
        width = max(map(len, raw_lines))
        line_no_width = len(str(len(raw_lines)))
        gutter_width = line_no_width + 2

        # Numbers every 5 columns, right aligned above the "|" marks of the guide line.
        every_5_chars = range(0, width // 5 * 5 + 1, 5)
        header_line = styled("".join(f"{i:>5}" for i in every_5_chars)[4:], "grey50")
        guide_line = styled(("|''''" * (width // 5 + 1))[: width + 1], "grey50")
        header_line.pad_left(gutter_width)
        guide_line.pad_left(gutter_width)
        rendered.extend([header_line, guide_line])

        for i, line in enumerate(rendered_source.split()):
            line_no = styled(f"{i + 1:>{line_no_width}} |", "grey50")
            rendered.append(line_no + line)

        return Text("\n").join(rendered)
