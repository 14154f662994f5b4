from bisect import bisect_right
from itertools import accumulate, chain

import lsprotocol.types as L
from pygls.workspace import PositionCodec

from rescope.ast import Span


class LineIndex:
    """Converts between character offsets and LSP positions.

    Positions handed in and out are in the client's units (UTF-16 by default), as
    negotiated by the language server; `codec` converts them from and to characters.
    """

    def __init__(self, source: str, codec: PositionCodec | None = None) -> None:
        self.codec = codec or PositionCodec()
        self.lines = source.splitlines(keepends=True)

        # When the source ends with a newline, `str.splitlines` does not preserve the
        # last empty line.
        if source == "" or source.endswith(("\n", "\r")):
            self.lines.append("")

        # The character offset of the first character in each line.
        self.line_offsets: list[int] = list(
            accumulate(chain([0], map(len, self.lines)))
        )

    def offset_at(self, pos: L.Position) -> int:
        pos = self.codec.position_from_client_units(self.lines, pos)
        line = min(max(pos.line, 0), len(self.lines) - 1)
        return min(self.line_offsets[line] + pos.character, self.line_offsets[line + 1])

    def char_position_at(self, offset: int) -> L.Position:
        line = min(bisect_right(self.line_offsets, offset) - 1, len(self.lines) - 1)
        return L.Position(line, offset - self.line_offsets[line])

    def position_at(self, offset: int) -> L.Position:
        return self.codec.position_to_client_units(
            self.lines, self.char_position_at(offset)
        )

    def range_of(self, span: Span) -> L.Range:
        return L.Range(self.position_at(span.start), self.position_at(span.end))
