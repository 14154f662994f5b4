import tree_sitter as T
import tree_sitter_javascript as JS

LANG_JAVASCRIPT = T.Language(JS.language())
JAVASCRIPT_TS_PARSER = T.Parser(LANG_JAVASCRIPT)


class JsSyntaxError(SyntaxError):
    def __init__(self, message: str, offset: int) -> None:
        super().__init__(f"{message} at offset {offset}")
        self.message = message
        self.offset = offset


class SourceText:
    """Source text together with its UTF-8 encoding.

    tree-sitter reports byte offsets, while spans and renames work on `str` character
    offsets. For ASCII sources the two coincide and no table is built.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.data = text.encode()
        self.char_offsets: list[int] | None = None

        if not text.isascii():
            offsets = [0] * (len(self.data) + 1)
            byte = 0
            for i, c in enumerate(text):
                width = len(c.encode())
                offsets[byte : byte + width] = [i] * width
                byte += width
            offsets[byte] = len(text)
            self.char_offsets = offsets

    def offset(self, byte: int) -> int:
        return byte if self.char_offsets is None else self.char_offsets[byte]


def first_error(node: T.Node) -> T.Node | None:
    if node.is_error or node.is_missing:
        return node

    for child in node.children:
        if child.has_error or child.is_missing:
            if (found := first_error(child)) is not None:
                return found

    return None


def parse_javascript(source: SourceText | str) -> T.Node:
    if isinstance(source, str):
        source = SourceText(source)

    root = JAVASCRIPT_TS_PARSER.parse(source.data).root_node

    if root.has_error:
        error = first_error(root) or root
        what = f'missing "{error.type}"' if error.is_missing else "unexpected input"
        raise JsSyntaxError(f"Syntax error: {what}", source.offset(error.start_byte))

    return root
