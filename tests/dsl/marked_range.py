import dataclasses as D
from itertools import accumulate, chain

import parsy as P

from rescope.ast import Span


@D.dataclass
class Mark:
    id: int | None
    open: bool
    close: bool

    def __post_init__(self):
        if self.open:
            assert self.id is not None
            assert not self.close


@D.dataclass
class MarkedRange:
    start: int
    length: int
    marks: list[Mark]


uint = P.string("0").map(int) | (P.regex("[1-9]") + P.regex("[0-9]*")).map(int)

open_mark = P.seq(
    id=uint,
    open=P.string(":").result(True),
    close=P.success(False),
).combine_dict(Mark)

close_mark = P.seq(
    open=P.success(False),
    close=P.string(":").result(True),
    id=uint,
).combine_dict(Mark)

close_last = P.seq(
    id=P.success(None),
    open=P.success(False),
    close=P.string(":").result(True),
).combine_dict(Mark)

closed_mark = P.seq(
    id=uint,
    open=P.success(False),
    close=P.success(False),
).combine_dict(Mark)

mark = open_mark | close_mark | close_last | closed_mark

marked_range = P.seq(
    start=P.whitespace.optional() >> P.index,
    length=P.string("^").at_least(1).map(len),
    marks=mark.sep_by(P.string(","), min=1),
).combine_dict(MarkedRange)

marked_ranges = marked_range.at_least(1)

# A (line, column) pair within the unmarked source.
Point = tuple[int, int]


def parse_marked_source(source: str) -> tuple[str, dict[int, Span]]:
    """Strips mark lines from `source` and returns the spans they mark.

    A mark line marks the source line right above it. `^^^1` marks a span with id 1,
    `^1:` and `^:1` (or `^:` for the last opened mark) open and close a span running
    across lines.
    """
    line_no = -1
    source_lines: list[str] = []
    open_marks: dict[int, Point] = {}
    last: int | None = None
    points: dict[int, tuple[Point, Point]] = {}

    for line in source.splitlines():
        try:
            parsed: list[MarkedRange] = marked_ranges.parse(line)

            for start, length, mark in [
                (span.start, span.length, mark)
                for span in parsed
                for mark in span.marks
            ]:
                match mark:
                    case _ if mark.open and mark.id is not None:
                        assert mark.id not in open_marks, f"Duplicate mark: {mark.id}"
                        open_marks[mark.id] = (line_no, start)
                        last = mark.id

                    case _ if mark.close and mark.id:
                        assert mark.id in open_marks, f"Open mark not found: {mark.id}"
                        points[mark.id] = (
                            open_marks.pop(mark.id),
                            (line_no, start + length),
                        )

                    case _ if mark.close and last:
                        points[last] = (open_marks.pop(last), (line_no, start + length))
                        last = None

                    case _ if mark.id:
                        points[mark.id] = ((line_no, start), (line_no, start + length))

                    case _:
                        assert False, f"Invalid mark: mark={mark}, last={last}"

        except P.ParseError:
            if line.strip().startswith("^"):
                marked_ranges.parse(line)
            line_no += 1
            source_lines.append(line)

    pending_marks = ", ".join([str(k) for k in open_marks.keys()])
    assert len(open_marks) == 0, f"Closing mark(s) missing: {pending_marks}"

    # The offset of the first character of each line, counting the joining newlines.
    line_offsets = list(
        accumulate(chain([0], (len(line) + 1 for line in source_lines)))
    )

    def offset_of(point: Point) -> int:
        line, column = point
        return line_offsets[line] + column

    spans = {
        id: Span(offset_of(start), offset_of(end))
        for id, (start, end) in points.items()
    }

    return "\n".join(source_lines), spans
