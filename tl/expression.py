import dataclasses as dc

from .ast import AST

### EXPRESSIONS ###

# types of expressions:
# literals (int, float, char, string, bool), name
# unary operation, binary operation, call
# array literal, array access, member access, method call
# input(), read("path")
# every expression is owned by its parent node, trees are never shared

@dc.dataclass
class Expression(AST):

    def pprint(self):
        return "base expression"

def pprint_list(expressions):
    return ", ".join(e.pprint() for e in expressions)

@dc.dataclass
class IntLiteral(Expression):
    value       : int

    def pprint(self):
        return str(self.value)

@dc.dataclass
class FloatLiteral(Expression):
    value       : float

    def pprint(self):
        return repr(self.value)

@dc.dataclass
class CharLiteral(Expression):
    value       : str

    def pprint(self):
        return f"'{self.value}'"

@dc.dataclass
class StringLiteral(Expression):
    value       : str

    def pprint(self):
        return f'"{self.value}"'

@dc.dataclass
class BoolLiteral(Expression):
    value       : bool

    def pprint(self):
        return "true" if self.value else "false"

@dc.dataclass
class Name(Expression):
    name        : str

    def pprint(self):
        return self.name

@dc.dataclass
class UnaryOperation(Expression):
    operator    : str
    operand     : Expression

    def pprint(self):
        return f"{self.operator}{self.operand.pprint()}"

@dc.dataclass
class BinaryOperation(Expression):
    operator    : str
    left        : Expression
    right       : Expression

    def pprint(self):
        return f"({self.left.pprint()} {self.operator} {self.right.pprint()})"

@dc.dataclass
class Call(Expression):
    callee      : str
    arguments   : list[Expression]

    def pprint(self):
        return f"{self.callee}({pprint_list(self.arguments)})"

@dc.dataclass
class ArrayLiteral(Expression):
    elements    : list[Expression]

    def pprint(self):
        return f"{{{pprint_list(self.elements)}}}"

@dc.dataclass
class ArrayAccess(Expression):
    array       : Expression            # Name of an array, or a string valued expression
    index       : Expression

    def pprint(self):
        return f"{self.array.pprint()}[{self.index.pprint()}]"

@dc.dataclass
class MemberAccess(Expression):
    base        : Expression
    member      : str

    def pprint(self):
        return f"{self.base.pprint()}.{self.member}"

@dc.dataclass
class MethodCall(Expression):
    base        : Expression
    method      : str
    arguments   : list[Expression]

    def pprint(self):
        return f"{self.base.pprint()}.{self.method}({pprint_list(self.arguments)})"

@dc.dataclass
class Input(Expression):

    def pprint(self):
        return "input()"

@dc.dataclass
class Read(Expression):
    filename    : str

    def pprint(self):
        return f'read("{self.filename}")'
