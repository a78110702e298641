import dataclasses as dc
import ply.lex
import re

from .reporter import LexError

@dc.dataclass
class Token:
    kind        : str
    lexeme      : str
    line        : int
    column      : int
    value       : object = None

    # ply.yacc reads tokens through these names
    @property
    def type(self):
        return self.kind

    @property
    def lineno(self):
        return self.line

    def pprint(self):
        return f"'{self.lexeme}'" if self.kind != 'EOF' else "end of input"

class Lexer:
    keywords = {
        x: x.upper() for x in (
            'if'        ,
            'else'      ,
            'while'     ,
            'for'       ,
            'return'    ,
            'print'     ,
            'class'     ,
            'ComeAndDo' ,
            'int'       ,
            'float'     ,
            'char'      ,
            'bool'      ,
            'string'    ,
            'input'     ,
            'read'      ,
            'true'      ,
            'false'     ,
        )
    }

    tokens = (
        'IDENT'         ,       # : str
        'TYPENAME'      ,       # : str, IDENT naming a declared class
        'INT_LITERAL'   ,       # : int
        'FLOAT_LITERAL' ,       # : float
        'CHAR_LITERAL'  ,       # : str of length 1
        'STRING_LITERAL',       # : str

        # Punctuation
        'LPAREN'        ,
        'RPAREN'        ,
        'LBRACE'        ,
        'RBRACE'        ,
        'LBRACKET'      ,
        'RBRACKET'      ,
        'COMMA'         ,
        'SEMICOLON'     ,
        'DOT'           ,
        'COLON'         ,

        'DASH'          ,
        'EQ'            ,
        'PLUS'          ,
        'SLASH'         ,
        'STAR'          ,

        'BOOL_EQ'       ,
        'BOOL_NEQ'      ,
        'BOOL_LT'       ,
        'BOOL_GT'       ,
        'BOOL_AND'      ,
        'BOOL_OR'       ,
        'BOOL_NOT'      ,
    ) + tuple(keywords.values())

    # used in parse error messages
    describe = {
        'IDENT'         : "identifier",
        'TYPENAME'      : "class name",
        'INT_LITERAL'   : "integer",
        'FLOAT_LITERAL' : "float",
        'CHAR_LITERAL'  : "character",
        'STRING_LITERAL': "string",
        'LPAREN'        : "'('",
        'RPAREN'        : "')'",
        'LBRACE'        : "'{'",
        'RBRACE'        : "'}'",
        'LBRACKET'      : "'['",
        'RBRACKET'      : "']'",
        'COMMA'         : "','",
        'SEMICOLON'     : "';'",
        'DOT'           : "'.'",
        'COLON'         : "':'",
        'DASH'          : "'-'",
        'EQ'            : "'='",
        'PLUS'          : "'+'",
        'SLASH'         : "'/'",
        'STAR'          : "'*'",
        'BOOL_EQ'       : "'=='",
        'BOOL_NEQ'      : "'!='",
        'BOOL_LT'       : "'<'",
        'BOOL_GT'       : "'>'",
        'BOOL_AND'      : "'&&'",
        'BOOL_OR'       : "'||'",
        'BOOL_NOT'      : "'!'",
        '$end'          : "end of input",
    } | {kind: f"'{word}'" for word, kind in keywords.items()}

    # raw lexeme -> token value
    decoders = {
        'INT_LITERAL'   : int,
        'FLOAT_LITERAL' : float,
        'CHAR_LITERAL'  : lambda s: s[1],
        'STRING_LITERAL': lambda s: s[1:-1],
        'TRUE'          : lambda s: True,
        'FALSE'         : lambda s: False,
    }

    t_LPAREN    = re.escape('(')
    t_RPAREN    = re.escape(')')
    t_LBRACE    = re.escape('{')
    t_RBRACE    = re.escape('}')
    t_LBRACKET  = re.escape('[')
    t_RBRACKET  = re.escape(']')
    t_COMMA     = re.escape(',')
    t_SEMICOLON = re.escape(';')
    t_DOT       = re.escape('.')
    t_COLON     = re.escape(':')

    t_DASH      = re.escape('-')
    t_EQ        = re.escape('=')
    t_PLUS      = re.escape('+')
    t_SLASH     = re.escape('/')
    t_STAR      = re.escape('*')

    t_BOOL_EQ   = re.escape('==')
    t_BOOL_LT   = re.escape('<')
    t_BOOL_GT   = re.escape('>')
    t_BOOL_AND  = re.escape('&&')
    t_BOOL_OR   = re.escape('||')

    t_ignore = ' \t\r'          # Ignore all whitespaces
    t_ignore_comment = r'//.*'

    # characters that may directly follow a unary '!'
    operand_start = re.compile(r'[A-Za-z0-9_(!\'"-]')

    def __init__(self):
        self.lexer = ply.lex.lex(module = self)

    def column(self, lexpos):
        line_start = self.lexer.lexdata.rfind('\n', 0, lexpos) + 1
        return lexpos - line_start + 1

    def fail(self, message, t):
        raise LexError(message, t.lineno, self.column(t.lexpos))

    def t_newline(self, t):
        r'\n+'
        t.lexer.lineno += len(t.value)

    def t_FLOAT_LITERAL(self, t):
        r'\d+\.\d*'
        return t

    def t_INT_LITERAL(self, t):
        r'\d+'
        return t

    def t_IDENT(self, t):
        r'[a-zA-Z_][a-zA-Z0-9_]*'
        if t.value in self.keywords:
            t.type  = self.keywords[t.value]
        return t

    def t_STRING_LITERAL(self, t):
        r'"[^"]*"?'
        if len(t.value) < 2 or not t.value.endswith('"'):
            self.fail("unterminated string literal", t)
        t.lexer.lineno += t.value.count('\n')
        return t

    def t_CHAR_LITERAL(self, t):
        r"'[^']*'?"
        if len(t.value) < 2 or not t.value.endswith("'"):
            self.fail("unterminated character literal", t)
        if len(t.value) != 3:
            self.fail(f"invalid character literal {t.value}", t)
        t.lexer.lineno += t.value.count('\n')
        return t

    def t_BOOL_NEQ(self, t):
        r'!=?'
        if t.value == '!':
            following = t.lexer.lexdata[t.lexer.lexpos:t.lexer.lexpos + 1]
            if not self.operand_start.match(following):
                self.fail("unexpected '!' (expected '!=' or an operand)", t)
            t.type = 'BOOL_NOT'
        return t

    def t_error(self, t):
        self.fail(f"illegal character '{t.value[0]}'", t)

    def tokenize(self, source: str) -> list[Token]:
        """
        source text -> tokens, always terminated by an EOF token
        """
        self.lexer.lineno = 1
        self.lexer.input(source)

        tokens = []
        for tok in self.lexer:
            decode = self.decoders.get(tok.type, lambda s: s)
            tokens.append(Token(
                kind        = tok.type,
                lexeme      = tok.value,
                line        = tok.lineno,
                column      = self.column(tok.lexpos),
                value       = decode(tok.value),
            ))

        tokens.append(Token(
            kind        = 'EOF',
            lexeme      = '',
            line        = self.lexer.lineno,
            column      = self.column(len(source)),
        ))
        return tokens
