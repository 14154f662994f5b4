import unittest
from textwrap import indent

from rescope.scope import DefinitionType, ReferenceFlag, Scope, ScopeType
from rescope.util import head

from tests.dsl import FakeDocument


class TestScoping(unittest.TestCase):
    def scope_of(self, doc: FakeDocument, type: ScopeType) -> Scope:
        return head(s for s in doc.document.scopes.scopes if s.type is type)

    def checkDefined(
        self,
        scope: Scope,
        name: str,
        *types: DefinitionType,
    ):
        def message():
            return "\n".join(
                [
                    f'Variable "{name}" not defined as {", ".join(types)}. Scope:',
                    indent(scope.pretty_tree, " " * 4),
                ]
            )

        self.assertIn(name, scope.set, message())
        self.assertEqual([d.type for d in scope.set[name].defs], list(types), message())

    def test_var_hoisting(self):
        t = FakeDocument(
            """\
            x; var x;
            ^1
            """
        )

        scope = t.document.scopes.global_scope
        self.checkDefined(scope, "x", DefinitionType.Variable)

        [ref] = scope.references
        self.assertIs(ref.identifier, t.node_at(1))
        # Global `var`s are left for the declaration resolver.
        self.assertIsNone(ref.resolved)
        self.assertIn(ref, scope.through)

    def test_global_lexical_binding(self):
        t = FakeDocument("let x = 1; x;")
        scope = t.document.scopes.global_scope

        write, read = scope.references
        self.assertTrue(write.init)
        self.assertEqual(write.flag, ReferenceFlag.Write)
        self.assertIs(read.resolved, scope.set["x"])
        self.assertIs(write.resolved, scope.set["x"])

    def test_implicit_global(self):
        t = FakeDocument("function f() { y = 1; }")
        self.checkDefined(
            t.document.scopes.global_scope,
            "y",
            DefinitionType.ImplicitGlobalVariable,
        )

    def test_declared_global_is_not_implicit(self):
        t = FakeDocument("var y; y = 1;")
        self.checkDefined(t.document.scopes.global_scope, "y", DefinitionType.Variable)

    def test_strict_mode(self):
        for t in [
            FakeDocument("function f() { y = 1; }", implied_strict=True),
            FakeDocument("'use strict'; function f() { y = 1; }"),
            FakeDocument("function f() { 'use strict'; y = 1; }"),
        ]:
            with self.subTest(source=t.source):
                global_scope = t.document.scopes.global_scope
                self.assertNotIn("y", global_scope.set)
                self.assertTrue(self.scope_of(t, ScopeType.Function).strict)

    def test_directive_after_statement(self):
        t = FakeDocument("x; 'use strict'; y = 1;")
        self.assertFalse(t.document.scopes.global_scope.strict)
        self.assertIn("y", t.document.scopes.global_scope.set)

    def test_function_declaration_name(self):
        t = FakeDocument(
            """\
            function f(a) { return a; }
                     ^1            ^3
            """
        )

        self.checkDefined(
            t.document.scopes.global_scope,
            "f",
            DefinitionType.FunctionName,
        )

        function_scope = self.scope_of(t, ScopeType.Function)
        self.assertNotIn("f", function_scope.set)
        self.checkDefined(function_scope, "arguments")
        self.checkDefined(function_scope, "a", DefinitionType.Parameter)

        [ref] = function_scope.references
        self.assertIs(ref.identifier, t.node_at(3))
        self.assertIs(ref.resolved, function_scope.set["a"])

    def test_named_function_expression(self):
        t = FakeDocument("var g = function f() { f(); };")
        scope = self.scope_of(t, ScopeType.Function)
        self.checkDefined(scope, "f", DefinitionType.FunctionName)
        self.assertNotIn("f", t.document.scopes.global_scope.set)

        [ref] = scope.references
        self.assertIs(ref.resolved, scope.set["f"])

    def test_arrow_function(self):
        t = FakeDocument("var g = (a) => a;")
        scope = self.scope_of(t, ScopeType.Function)
        self.assertNotIn("arguments", scope.set)
        self.checkDefined(scope, "a", DefinitionType.Parameter)

    def test_block_scope(self):
        t = FakeDocument("{ let a = 1; var b = 2; }")
        block = self.scope_of(t, ScopeType.Block)
        self.checkDefined(block, "a", DefinitionType.Variable)
        self.assertNotIn("b", block.set)
        self.checkDefined(t.document.scopes.global_scope, "b", DefinitionType.Variable)

    def test_for_scope(self):
        t = FakeDocument("for (let i = 0; i < 3; i++) {}")
        scope = self.scope_of(t, ScopeType.For)
        self.checkDefined(scope, "i", DefinitionType.Variable)

        flags = [ref.flag for ref in scope.references]
        self.assertEqual(
            flags,
            [ReferenceFlag.Write, ReferenceFlag.Read, ReferenceFlag.ReadWrite],
        )
        self.assertTrue(all(ref.resolved is scope.set["i"] for ref in scope.references))

    def test_for_of_scope(self):
        t = FakeDocument("for (const x of xs) { x; }")
        scope = self.scope_of(t, ScopeType.For)
        self.checkDefined(scope, "x", DefinitionType.Variable)
        self.assertIn("x", [ref.identifier.name for ref in scope.references])

    def test_catch_scope(self):
        t = FakeDocument("try {} catch (e) { e; }")
        scope = self.scope_of(t, ScopeType.Catch)
        self.checkDefined(scope, "e", DefinitionType.CatchClause)
        self.assertEqual(scope.set["e"].references[0].identifier.name, "e")

    def test_class_declaration(self):
        t = FakeDocument("class C { m() { return C; } }")
        global_scope = t.document.scopes.global_scope
        self.checkDefined(global_scope, "C", DefinitionType.ClassName)
        self.assertEqual(
            [s.type for s in global_scope.child_scopes],
            [ScopeType.Function],
        )
        # Class bodies are strict.
        self.assertTrue(global_scope.child_scopes[0].strict)
        self.assertFalse(global_scope.strict)

    def test_class_expression(self):
        t = FakeDocument("var D = class C {};")
        scope = self.scope_of(t, ScopeType.Class)
        self.checkDefined(scope, "C", DefinitionType.ClassName)
        self.assertNotIn("C", t.document.scopes.global_scope.set)

    def test_destructuring(self):
        t = FakeDocument("var {a, b: [c], d = a, ...e} = o;")
        scope = t.document.scopes.global_scope
        for name in ["a", "c", "d", "e"]:
            self.checkDefined(scope, name, DefinitionType.Variable)
        self.assertNotIn("b", scope.set)

    def test_import_bindings(self):
        t = FakeDocument("import x, { y as z } from 'm';")
        scope = t.document.scopes.global_scope
        self.checkDefined(scope, "x", DefinitionType.ImportBinding)
        self.checkDefined(scope, "z", DefinitionType.ImportBinding)
        self.assertNotIn("y", scope.set)

    def test_eval(self):
        t = FakeDocument("function f() { var a; eval('a'); a; }")
        scope = self.scope_of(t, ScopeType.Function)
        self.assertTrue(scope.dynamic)
        self.assertTrue(all(ref.resolved is None for ref in scope.references))

    def test_with(self):
        t = FakeDocument("var x; with (o) { x; }")
        scope = self.scope_of(t, ScopeType.With)
        self.assertTrue(scope.dynamic)

        block = self.scope_of(t, ScopeType.Block)
        self.assertIs(block.upper, scope)
        self.assertIsNone(block.references[0].resolved)

    def test_member_properties_are_not_references(self):
        t = FakeDocument("a.b; a[c]; ({ d: e });")
        global_scope = t.document.scopes.global_scope
        names = [ref.identifier.name for ref in global_scope.references]
        self.assertEqual(names, ["a", "a", "c", "e"])
