class PrettyTree:
    """An abstract class for pretty-printing tree-like structures."""

    def node_text(self) -> str:
        """Returns a single-line string representing a tree node."""
        ...

    def children(self) -> list["PrettyTree"]:
        """Returns a list of child nodes."""
        ...

    def __repr__(self):
        lines = [self.node_text()]

        def grow(nodes: list[PrettyTree], branches: str):
            for i, node in enumerate(nodes):
                last = i == len(nodes) - 1
                lines.append(f"{branches}{'`-- ' if last else '|-- '}{node.node_text()}")
                grow(node.children(), branches + (".   " if last else "|   "))

        grow(self.children(), "")
        return "\n".join(lines)


def escape(s: str, size: int = 50) -> str:
    escaped = s[0:size].translate(ESCAPE_TABLE)
    postfix = "" if len(s) <= size else f"[{len(s) - size} characters]"
    return f'"{escaped}{postfix}"'


ESCAPE_TABLE: dict[int, str] = str.maketrans(
    {"\n": r"\n", "\t": r"\t", "\r": r"\r", '"': r"\""}
)
