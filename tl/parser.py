import ply.yacc
import dataclasses as dc

from .expression import *
from .statement  import *
from .lexer      import Lexer, Token
from .reporter   import Reporter, ParseError
from .program    import Program

class Parser:
    tokens      = Lexer.tokens
    start       = 'program'
    precedence  = (
        ('left'     , 'BOOL_OR'                                     ),
        ('left'     , 'BOOL_AND'                                    ),
        ('left'     , 'BOOL_EQ', 'BOOL_NEQ', 'BOOL_LT', 'BOOL_GT'   ),
        ('left'     , 'PLUS', 'DASH'                                ),
        ('left'     , 'STAR', 'SLASH'                               ),
        ('right'    , 'UMINUS', 'BOOL_NOT'                          ),
    )

    def __init__(self, reporter: Reporter = None):
        self.reporter       = reporter
        self.lexer          = Lexer()
        self.parser         = ply.yacc.yacc(
            module          = self,
            debug           = False,
            write_tables    = False,
        )
        self.class_names    = set()
        self.eof            = None

    def to_prgm(self, source: str):
        return Program(self.parse(source), self.reporter)

    def parse(self, source: str) -> Block:
        return self.parse_tokens(self.lexer.tokenize(source))

    def parse_tokens(self, tokens: list[Token]) -> Block:
        """
        tokens (ending with EOF) -> top level statements
        the class name registry starts empty and fills up as class
        declarations are reduced, identifiers naming a registered class
        are handed to the grammar as TYPENAME
        """
        self.class_names = set()
        self.eof = tokens[-1]
        stream = iter(tokens)

        def next_token():
            tok = next(stream, None)
            if tok is None or tok.kind == 'EOF':
                return None
            if tok.kind == 'IDENT' and tok.lexeme in self.class_names:
                return dc.replace(tok, kind = 'TYPENAME')
            return tok

        return self.parser.parse(
            lexer       = self.lexer.lexer,
            tokenfunc   = next_token,
        )

    ### HELPERS ###

    @staticmethod
    def at(p, n):
        """
        position of the n-th symbol, a token or a node
        """
        sym = p.slice[n]
        if not isinstance(sym, Token):
            sym = p[n]
        return dict(line = sym.line, column = sym.column)

    def fail(self, message, where):
        raise ParseError(message, where.line, where.column)

    def serialize(self, target):
        """
        chained member target -> "p.x" / "pts[2].x" / "a.b.c"
        only constant indices can be serialized
        """
        match target:
            case Name(name):
                return name
            case MemberAccess(base, member):
                return f"{self.serialize(base)}.{member}"
            case ArrayAccess(Name(name), IntLiteral(index)):
                return f"{name}[{index}]"
            case ArrayAccess(Name(_), index):
                self.fail("array index in a chained assignment target "
                          "must be an integer constant", index)
            case _:
                self.fail(f"cannot assign to {{{target.pprint()}}}", target)

    def assignment(self, target, value, where):
        match target:
            case Name(name):
                return Assignment(target = name, value = value, **where)
            case ArrayAccess(Name(name), index):
                return ArrayAssignment(name = name, index = index, value = value, **where)
            case MemberAccess():
                return Assignment(target = self.serialize(target), value = value, **where)
            case _:
                self.fail(f"cannot assign to {{{target.pprint()}}}", target)

    ### EXPRESSIONS ###

    def p_int(self, p):
        """expr : INT_LITERAL"""
        p[0] = IntLiteral(value = p[1], **self.at(p, 1))

    def p_float(self, p):
        """expr : FLOAT_LITERAL"""
        p[0] = FloatLiteral(value = p[1], **self.at(p, 1))

    def p_char(self, p):
        """expr : CHAR_LITERAL"""
        p[0] = CharLiteral(value = p[1], **self.at(p, 1))

    def p_string(self, p):
        """expr : STRING_LITERAL"""
        p[0] = StringLiteral(value = p[1], **self.at(p, 1))

    def p_bool(self, p):
        """expr : TRUE
                | FALSE"""
        p[0] = BoolLiteral(value = p[1], **self.at(p, 1))

    def p_postfix_expr(self, p):
        """expr : postfix"""
        p[0] = p[1]

    def p_name(self, p):
        """postfix : IDENT"""
        p[0] = Name(name = p[1], **self.at(p, 1))

    def p_call(self, p):
        """postfix : IDENT LPAREN args RPAREN"""
        p[0] = Call(callee = p[1], arguments = p[3], **self.at(p, 1))

    def p_array_access(self, p):
        """postfix : postfix LBRACKET expr RBRACKET"""
        p[0] = ArrayAccess(array = p[1], index = p[3], **self.at(p, 2))

    def p_member_access(self, p):
        """postfix : postfix DOT IDENT"""
        p[0] = MemberAccess(base = p[1], member = p[3], **self.at(p, 3))

    def p_method_call(self, p):
        """postfix : postfix DOT IDENT LPAREN args RPAREN"""
        p[0] = MethodCall(base = p[1], method = p[3], arguments = p[5], **self.at(p, 3))

    def p_array_literal_expr(self, p):
        """expr : array_literal"""
        p[0] = p[1]

    def p_array_literal(self, p):
        """array_literal : LBRACE args RBRACE"""
        p[0] = ArrayLiteral(elements = p[2], **self.at(p, 1))

    def p_input(self, p):
        """expr : INPUT LPAREN RPAREN"""
        p[0] = Input(**self.at(p, 1))

    def p_read(self, p):
        """expr : READ LPAREN STRING_LITERAL RPAREN"""
        p[0] = Read(filename = p[3], **self.at(p, 1))

    def p_unary_operation(self, p):
        """expr : DASH expr %prec UMINUS
                | BOOL_NOT expr"""
        p[0] = UnaryOperation(operator = p[1], operand = p[2], **self.at(p, 1))

    def p_binary_operation(self, p):
        """expr : expr PLUS     expr
                | expr DASH     expr
                | expr STAR     expr
                | expr SLASH    expr
                | expr BOOL_EQ  expr
                | expr BOOL_NEQ expr
                | expr BOOL_LT  expr
                | expr BOOL_GT  expr
                | expr BOOL_AND expr
                | expr BOOL_OR  expr"""
        p[0] = BinaryOperation(
            operator    = p[2],
            left        = p[1],
            right       = p[3],
            **self.at(p, 2),
        )

    def p_parentheses(self, p):
        """expr : LPAREN expr RPAREN"""
        p[0] = p[2]

    def p_args(self, p):
        """args :
                | arglist"""
        p[0] = [] if len(p) == 1 else p[1]

    def p_arglist(self, p):
        """arglist : expr
                   | arglist COMMA expr"""
        if len(p) == 2:
            p[0] = [p[1]]
        else:
            p[0] = p[1]
            p[0].append(p[3])

    ### TYPES ###

    def p_scalar_type(self, p):
        """scalar_type : INT
                       | FLOAT
                       | CHAR
                       | BOOL
                       | STRING"""
        p[0] = p.slice[1]

    ### SIMPLE STATEMENTS ###

    # the statements allowed as for-loop clauses, without their ';'

    def p_simple_expression(self, p):
        """simple : expr"""
        p[0] = ExprStatement(expr = p[1], line = p[1].line, column = p[1].column)

    def p_simple_assignment(self, p):
        """simple : postfix EQ expr"""
        p[0] = self.assignment(p[1], p[3], self.at(p, 2))

    def p_simple_declaration(self, p):
        """simple : scalar_type IDENT
                  | scalar_type IDENT EQ expr"""
        p[0] = Assignment(
            target      = p[2],
            value       = p[4] if len(p) == 5 else None,
            type_       = p[1].lexeme,
            **self.at(p, 2),
        )

    def p_opt_simple(self, p):
        """opt_simple :
                      | simple"""
        p[0] = None if len(p) == 1 else p[1]

    def p_opt_expr(self, p):
        """opt_expr :
                    | expr"""
        p[0] = None if len(p) == 1 else p[1]

    ### STATEMENTS ###

    def p_simple_statement(self, p):
        """stmt : simple SEMICOLON"""
        p[0] = p[1]

    def p_array_declaration(self, p):
        """stmt : scalar_type IDENT LBRACKET RBRACKET SEMICOLON
                | scalar_type IDENT LBRACKET RBRACKET EQ array_literal SEMICOLON
                | scalar_type IDENT LBRACKET expr RBRACKET SEMICOLON"""
        size, elements = None, None
        if len(p) == 8:
            elements = p[6]
        elif len(p) == 7:
            size = p[4]
        p[0] = ArrayDeclaration(
            name        = p[2],
            type_       = p[1].lexeme,
            size        = size,
            elements    = elements,
            **self.at(p, 2),
        )

    def p_object_declaration(self, p):
        """stmt : TYPENAME IDENT SEMICOLON
                | TYPENAME IDENT LPAREN args RPAREN SEMICOLON"""
        p[0] = ObjectDeclaration(
            class_name  = p[1],
            name        = p[2],
            arguments   = p[4] if len(p) == 7 else None,
            **self.at(p, 2),
        )

    def p_object_array_declaration(self, p):
        """stmt : TYPENAME IDENT LBRACKET expr RBRACKET SEMICOLON"""
        p[0] = ArrayDeclaration(
            name        = p[2],
            type_       = p[1],
            size        = p[4],
            elements    = None,
            **self.at(p, 2),
        )

    def p_print(self, p):
        """stmt : PRINT LPAREN expr RPAREN SEMICOLON"""
        p[0] = Print(value = p[3], **self.at(p, 1))

    def p_return(self, p):
        """stmt : RETURN SEMICOLON
                | RETURN expr SEMICOLON"""
        p[0] = Return(value = p[2] if len(p) == 4 else None, **self.at(p, 1))

    def p_block(self, p):
        """block : LBRACE stmts RBRACE"""
        p[0] = p[2]

    def p_ifelse_stmt(self, p):
        """stmt : ifelse"""
        p[0] = p[1]

    def p_ifelse(self, p):
        """ifelse : IF LPAREN expr RPAREN block ifrest"""
        p[0] = Ifelse(
            condition   = p[3],
            success     = p[5],
            failure     = p[6],
            **self.at(p, 1),
        )

    def p_ifrest(self, p):
        """ifrest :
                  | ELSE ifelse
                  | ELSE block"""
        if len(p) == 1:
            p[0] = []
        elif isinstance(p[2], Ifelse):
            p[0] = [p[2]]
        else:
            p[0] = p[2]

    def p_while(self, p):
        """stmt : WHILE LPAREN expr RPAREN block"""
        p[0] = While(condition = p[3], body = p[5], **self.at(p, 1))

    def p_for(self, p):
        """stmt : FOR LPAREN opt_simple SEMICOLON opt_expr SEMICOLON opt_simple RPAREN block"""
        p[0] = For(
            init        = p[3],
            condition   = p[5],
            step        = p[7],
            body        = p[9],
            **self.at(p, 1),
        )

    def p_function_stmt(self, p):
        """stmt : function"""
        p[0] = p[1]

    def p_function(self, p):
        """function : COMEANDDO IDENT LPAREN params RPAREN block"""
        p[0] = FunctionDef(
            name        = p[2],
            parameters  = p[4],
            body        = p[6],
            **self.at(p, 2),
        )

    def p_params(self, p):
        """params :
                  | paramlist"""
        p[0] = [] if len(p) == 1 else p[1]

    def p_paramlist(self, p):
        """paramlist : param
                     | paramlist COMMA param"""
        if len(p) == 2:
            p[0] = [p[1]]
        else:
            p[0] = p[1]
            p[0].append(p[3])

    def p_param(self, p):
        """param : IDENT
                 | scalar_type IDENT
                 | TYPENAME IDENT"""
        # parameter types are not checked, only the name is kept
        p[0] = p[len(p) - 1]

    ### CLASSES ###

    def p_class(self, p):
        """stmt : CLASS class_name class_base LBRACE members RBRACE"""
        name, where = p[2]
        if p[3] == name:
            self.fail(f"class {{{name}}} cannot inherit from itself", p.slice[1])
        fields  = [m for m in p[5] if isinstance(m, tuple)]
        methods = [m for m in p[5] if isinstance(m, FunctionDef)]
        p[0] = ClassDef(
            name        = name,
            base        = p[3],
            fields      = fields,
            methods     = methods,
            **where,
        )

    def p_class_name(self, p):
        """class_name : IDENT
                      | TYPENAME"""
        # registered before the body and base clause are read
        self.class_names.add(p[1])
        p[0] = (p[1], self.at(p, 1))

    def p_class_base(self, p):
        """class_base :
                      | COLON TYPENAME
                      | COLON IDENT"""
        if len(p) == 1:
            p[0] = None
            return

        tok = p.slice[2]
        if tok.kind == 'IDENT':
            self.fail(f"base class {{{tok.lexeme}}} is not a declared class", tok)
        p[0] = p[2]

    def p_members(self, p):
        """members :
                   | members member"""
        if len(p) == 1:
            p[0] = []
        else:
            p[0] = p[1]
            p[0].append(p[2])

    def p_field(self, p):
        """member : scalar_type IDENT SEMICOLON"""
        p[0] = (p[1].lexeme, p[2])

    def p_method(self, p):
        """member : function"""
        p[0] = p[1]

    ### PROGRAM ###

    def p_stmts(self, p):
        """stmts :
                 | stmts stmt"""
        if len(p) == 1:
            p[0] = []
        else:
            p[0] = p[1]
            p[0].append(p[2])

    def p_program(self, p):
        """program : stmts"""
        p[0] = p[1]

    def p_error(self, p):
        expected = [
            Lexer.describe.get(kind, kind)
            for kind in self.parser.action.get(self.parser.state, {})
            if kind != 'error'
        ]

        where = p if p is not None else self.eof

        if len(expected) == 1:
            message = f"expected {expected[0]} but found {where.pprint()}"
        elif len(expected) <= 4:
            message = f"expected one of {', '.join(sorted(expected))} but found {where.pprint()}"
        else:
            message = f"unexpected {where.pprint()}"

        self.fail(message, where)
