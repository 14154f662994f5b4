from rescope.ast import (
    AST,
    ArrowFunctionExpression,
    AssignmentExpression,
    BlockStatement,
    CallExpression,
    CatchClause,
    Class,
    FieldDefinition,
    ForInStatement,
    ForStatement,
    FunctionDeclaration,
    FunctionExpression,
    Identifier,
    ImportDeclaration,
    MemberExpression,
    MethodDefinition,
    Program,
    Property,
    PropertyKey,
    SwitchStatement,
    UpdateExpression,
    VariableDeclaration,
    WithStatement,
)


class Visitor:
    def visit(self, tree: AST):
        match tree:
            case Program():
                self.visit_program(tree)
            case PropertyKey():
                self.visit_property_key(tree)
            case Identifier():
                self.visit_identifier(tree)
            case VariableDeclaration():
                self.visit_variable_declaration(tree)
            case FunctionDeclaration():
                self.visit_function_declaration(tree)
            case FunctionExpression():
                self.visit_function_expression(tree)
            case ArrowFunctionExpression():
                self.visit_arrow_function(tree)
            case Class():
                self.visit_class(tree)
            case MethodDefinition():
                self.visit_method_definition(tree)
            case FieldDefinition():
                self.visit_field_definition(tree)
            case BlockStatement():
                self.visit_block(tree)
            case ForStatement():
                self.visit_for(tree)
            case ForInStatement():
                self.visit_for_in(tree)
            case CatchClause():
                self.visit_catch_clause(tree)
            case SwitchStatement():
                self.visit_switch(tree)
            case WithStatement():
                self.visit_with(tree)
            case AssignmentExpression():
                self.visit_assignment(tree)
            case UpdateExpression():
                self.visit_update(tree)
            case MemberExpression():
                self.visit_member(tree)
            case CallExpression():
                self.visit_call(tree)
            case Property():
                self.visit_property(tree)
            case ImportDeclaration():
                self.visit_import(tree)
            case _:
                self.visit_children(tree)

    def visit_children(self, tree: AST):
        for child in tree.children:
            self.visit(child)

    def visit_program(self, e: Program):
        self.visit_children(e)

    def visit_identifier(self, e: Identifier):
        del e

    def visit_property_key(self, e: PropertyKey):
        del e

    def visit_variable_declaration(self, d: VariableDeclaration):
        self.visit_children(d)

    def visit_function_declaration(self, f: FunctionDeclaration):
        self.visit_children(f)

    def visit_function_expression(self, f: FunctionExpression):
        self.visit_children(f)

    def visit_arrow_function(self, f: ArrowFunctionExpression):
        self.visit_children(f)

    def visit_class(self, c: Class):
        self.visit_children(c)

    def visit_method_definition(self, m: MethodDefinition):
        if m.computed:
            self.visit(m.key)
        self.visit(m.value)

    def visit_field_definition(self, f: FieldDefinition):
        if f.computed:
            self.visit(f.key)
        if f.value is not None:
            self.visit(f.value)

    def visit_block(self, b: BlockStatement):
        self.visit_children(b)

    def visit_for(self, s: ForStatement):
        self.visit_children(s)

    def visit_for_in(self, s: ForInStatement):
        self.visit_children(s)

    def visit_catch_clause(self, c: CatchClause):
        self.visit_children(c)

    def visit_switch(self, s: SwitchStatement):
        self.visit_children(s)

    def visit_with(self, s: WithStatement):
        self.visit_children(s)

    def visit_assignment(self, e: AssignmentExpression):
        self.visit_children(e)

    def visit_update(self, e: UpdateExpression):
        self.visit_children(e)

    def visit_member(self, e: MemberExpression):
        self.visit(e.object)
        if e.computed:
            self.visit(e.property)

    def visit_call(self, e: CallExpression):
        self.visit_children(e)

    def visit_property(self, p: Property):
        # Shorthand members share one identifier between key and value.
        if p.computed and p.key is not p.value:
            self.visit(p.key)
        self.visit(p.value)

    def visit_import(self, d: ImportDeclaration):
        self.visit_children(d)
