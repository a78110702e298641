import sys

class Reporter():
    """
    report errors
    """
    def __init__(self, stream = None):
        self.errors  = []
        self.section = None
        self.stream  = stream or sys.stderr

    def crash(self, errstr):
        print("=== Error backlog ===", file=self.stream)

        for err in self.errors:
            print(f"[ Error ] {err}", file=self.stream)

        errstr = f"{{{self.section}}} \t| " + errstr if self.section else errstr
        print(f"[ Fatal Error ] | {errstr}", file=self.stream)

        sys.exit(1)

    def log(self, error):
        self.errors.append(f"{{{self.section}}} \t| " + str(error))

    def warn(self, message):
        print(f"[ Warning ] {{{self.section}}} \t| {message}", file=self.stream)

    def checkpoint(self, section = None):
        if self.errors:
            self.crash("error backlog at checkpoint")

        self.section = section

class TLError(Exception):
    """
    base of every error raised by the lexer, parser and interpreter
    carries the source position when one is known
    """
    kind = "error"

    def __init__(self, message, line = None, column = None):
        super().__init__(message)
        self.message    = message
        self.line       = line
        self.column     = column

    def locate(self, line, column):
        if self.line is None:
            self.line   = line
            self.column = column
        return self

    def __str__(self):
        where = ""
        if self.line is not None:
            where = f"line {self.line}, column {self.column}: "
        return f"{self.kind}: {where}{self.message}"

class LexError(TLError):
    kind = "lex error"

class ParseError(TLError):
    kind = "parse error"

### RUNTIME ERRORS ###

class TLRuntimeError(TLError):
    kind = "runtime error"

class UndefinedName(TLRuntimeError):
    kind = "undefined name"

class ArgumentCountMismatch(TLRuntimeError):
    kind = "argument count mismatch"

class DivisionByZero(TLRuntimeError):
    kind = "division by zero"

class IndexOutOfBounds(TLRuntimeError):
    kind = "index out of bounds"

class TypeMismatch(TLRuntimeError):
    kind = "type mismatch"

class UnsupportedConstruct(TLRuntimeError):
    kind = "unsupported construct"

class InputFailure(TLRuntimeError):
    kind = "input failure"
