import unittest
from itertools import zip_longest
from textwrap import dedent

from rich.console import Console
from rich.text import Text

from rescope.ast import Program, Span
from rescope.model import (
    SourceDocument,
    TreeDocument,
    identify,
    load,
    rename,
    rename_spans,
)
from rescope.parsing import JsSyntaxError

from tests.dsl import FakeDocument


class TestRename(unittest.TestCase):
    def dump_renamed(
        self,
        doc: FakeDocument,
        mark: int,
        actual: str,
        expected: str,
    ) -> str:
        identification = doc.identify(mark)
        spans = [] if identification is None else rename_spans(identification)
        console = Console()

        with console.capture() as capture:
            console.print("Occurrences to rename:\n")
            console.print(doc.highlight([(span, "black on yellow") for span in spans]))
            console.print("\nRenamed (expected lines below mismatches):\n")

            for actual_line, expected_line in zip_longest(
                actual.splitlines(), expected.splitlines(), fillvalue=""
            ):
                if actual_line == expected_line:
                    console.print(Text(f"  {actual_line}"))
                else:
                    console.print(Text(f"- {actual_line}", "red"))
                    console.print(Text(f"+ {expected_line}", "green"))

        return capture.get()

    def assertRenamed(self, doc: FakeDocument, mark: int, name: str, expected: str):
        expected = dedent(expected)
        actual = doc.rename(mark, name)
        message = self.dump_renamed(doc, mark, actual, expected)
        self.assertEqual(actual, expected, message)

    def test_var(self):
        t = FakeDocument(
            """\
            var x; x; x = 42
                ^1
            """
        )

        self.assertRenamed(t, 1, "y", "var y; y; y = 42")

    def test_function_declaration(self):
        t = FakeDocument(
            """\
            function f(){} f();
                     ^1
            """
        )

        self.assertRenamed(t, 1, "g", "function g(){} g();")

    def test_sibling_blocks(self):
        t = FakeDocument(
            """\
            { let a = 1; a; }
                  ^1
            { let a = 2; a; }
            """
        )

        self.assertRenamed(
            t,
            1,
            "b",
            """\
            { let b = 1; b; }
            { let a = 2; a; }""",
        )

    def test_implicit_global(self):
        t = FakeDocument(
            """\
            x = 1; x + x;
            ^1
            """
        )

        identification = t.identify(1)
        assert identification is not None
        self.assertIsNone(identification.declaration)
        self.assertRenamed(t, 1, "y", "y = 1; y + y;")

    def test_longer_name(self):
        t = FakeDocument(
            """\
            var x = 1; x + x; x(x, x);
                       ^1
            """
        )

        self.assertRenamed(
            t,
            1,
            "longName",
            "var longName = 1; longName + longName; longName(longName, longName);",
        )

    def test_shorter_name(self):
        t = FakeDocument(
            """\
            function handler(event) { return event.type + event; }
                             ^1
            """
        )

        self.assertRenamed(t, 1, "e", "function handler(e) { return e.type + e; }")

    def test_same_name(self):
        for mark, source in [
            (1, "var x; x; x = 42\n    ^1"),
            (1, "function f(){} f();\n         ^1"),
            (1, "x = 1; x;\n^1"),
        ]:
            t = FakeDocument(source)
            with self.subTest(source=t.source):
                identification = t.identify(mark)
                assert identification is not None
                name = identification.identifier.name
                self.assertEqual(t.rename(mark, name), t.source)

    def test_absent_identification(self):
        t = FakeDocument("var x; x;")
        self.assertEqual(rename(t.document, None, "y"), t.source)

        document = t.tree_document()
        self.assertIs(rename(document, None, "y"), document.tree)
        self.assertEqual(
            [entry.identifier.name for entry in document.index.entries.values()],
            ["x", "x"],
        )

    def test_non_ascii_source(self):
        t = FakeDocument(
            """\
            var s = "é"; var x = s + s;
                                 ^1
            """
        )

        self.assertRenamed(t, 1, "text", 'var text = "é"; var x = text + text;')

    def test_rename_spans(self):
        t = FakeDocument(
            """\
            var x; x; x = 42
                ^1 ^2 ^3
            """
        )

        identification = t.identify(2)
        assert identification is not None
        # The queried occurrence is also one of the references, but rewritten once.
        self.assertEqual(rename_spans(identification), [t.at(3), t.at(2), t.at(1)])


class TestTreeRename(unittest.TestCase):
    def test_rename_in_place(self):
        t = FakeDocument(
            """\
            var x = 1; x; var z = x;
                ^1     ^2     ^3  ^4
            """
        )

        document = t.tree_document()
        identification = identify(document, t.offset(1))
        tree = rename(document, identification, "y")

        self.assertIs(tree, document.tree)
        names = {
            mark: entry.identifier.name
            for mark in [1, 2, 3, 4]
            if (entry := document.index.at(t.offset(mark))) is not None
        }
        self.assertEqual(names, {1: "y", 2: "y", 3: "z", 4: "y"})

    def test_index_is_a_snapshot(self):
        t = FakeDocument(
            """\
            var x; x;
                ^1 ^2
            """
        )

        document = t.tree_document()
        rename(document, identify(document, t.offset(1)), "longer")

        # Spans keep their old offsets until the tree is loaded again.
        entry = document.index.at(t.offset(2))
        assert entry is not None
        self.assertEqual(entry.identifier.name, "longer")
        self.assertEqual(entry.identifier.span, t.at(2))


class TestLoad(unittest.TestCase):
    def test_source(self):
        document = load("var x;")
        self.assertIsInstance(document, SourceDocument)

    def test_tree(self):
        tree = load("var x;").tree
        document = load(tree)
        self.assertIsInstance(document, TreeDocument)
        self.assertIs(document.tree, tree)

    def test_syntax_error(self):
        with self.assertRaises(JsSyntaxError):
            load("let x = (1;")

    def test_tree_without_span(self):
        with self.assertRaises(ValueError):
            load(Program(None, []))  # type: ignore[arg-type]

    def test_invalid_input(self):
        with self.assertRaises(TypeError):
            load(42)  # type: ignore[arg-type]

    def test_span_type(self):
        self.assertEqual(load("x;").tree.span, Span(0, 2))
