import dataclasses as dc

from typing import Optional as Opt

from .ast        import AST
from .expression import Expression, ArrayLiteral, pprint_list

### STATEMENTS ###

# holds a line number for the beginning of each statement
# holds the expressions and nested statement lists of one statement
# every statement list ends at its matching close brace
# pprint() -> str representation of statement

@dc.dataclass
class Statement(AST):

    def pprint(self):
        return "base statement"

Block   = list[Statement]

def pprint_block(block: Block):
    contents = "\n"
    for statement in block:
        contents += statement.pprint() + "\n"
    return contents

@dc.dataclass
class Assignment(Statement):
    target      : str                   # name, or serialized target like "p.x" / "pts[2].x"
    value       : Opt[Expression]
    type_       : Opt[str] = None       # declared type, a declaration if set

    def pprint(self):
        kind  = f"declaration of {self.type_}" if self.type_ else "assignment of"
        value = self.value.pprint() if self.value else "default"
        return (f"line {self.line}: {kind} {{{self.target}}} "
                f"with value {{{value}}}")

@dc.dataclass
class ArrayDeclaration(Statement):
    name        : str
    type_       : str                   # element type, or a class name for object arrays
    size        : Opt[Expression]       # arr[size]
    elements    : Opt[ArrayLiteral]     # arr[] = {...}

    def pprint(self):
        if self.size is not None:
            shape = f"of size {{{self.size.pprint()}}}"
        elif self.elements is not None:
            shape = f"with elements {{{pprint_list(self.elements.elements)}}}"
        else:
            shape = "without elements"
        return f"line {self.line}: {self.type_} array {{{self.name}}} {shape}"

@dc.dataclass
class ArrayAssignment(Statement):
    name        : str
    index       : Expression
    value       : Expression

    def pprint(self):
        return (f"line {self.line}: assignment of {{{self.name}[{self.index.pprint()}]}} "
                f"with value {{{self.value.pprint()}}}")

@dc.dataclass
class Print(Statement):
    value       : Expression

    def pprint(self):
        return f"line {self.line}: printing of {{{self.value.pprint()}}}"

@dc.dataclass
class FunctionDef(Statement):
    name        : str
    parameters  : list[str]
    body        : Block

    def pprint(self):
        return (f"line {self.line}: function {{{self.name}}} "
                f"with parameters {{{', '.join(self.parameters)}}}, "
                f"body: {{{pprint_block(self.body)}}}")

@dc.dataclass
class Return(Statement):
    value       : Opt[Expression]

    def pprint(self):
        value = self.value.pprint() if self.value else ""
        return f"line {self.line}: return {{{value}}}"

@dc.dataclass
class Ifelse(Statement):
    condition   : Expression
    success     : Block
    failure     : Block                 # empty, or [Ifelse] for "else if"

    def pprint(self):
        return (f"line {self.line}: ifelse block "
                f"with condition: {{{self.condition.pprint()}}}, "
                f"then: {{{pprint_block(self.success)}}}, "
                f"else: {{{pprint_block(self.failure)}}}")

@dc.dataclass
class While(Statement):
    condition   : Expression
    body        : Block

    def pprint(self):
        return (f"line {self.line}: while loop "
                f"with condition: {{{self.condition.pprint()}}}, "
                f"loop: {{{pprint_block(self.body)}}}")

@dc.dataclass
class For(Statement):
    init        : Opt[Statement]
    condition   : Opt[Expression]
    step        : Opt[Statement]
    body        : Block

    def pprint(self):
        init      = self.init.pprint() if self.init else ""
        condition = self.condition.pprint() if self.condition else ""
        step      = self.step.pprint() if self.step else ""
        return (f"line {self.line}: for loop "
                f"with init: {{{init}}}, condition: {{{condition}}}, step: {{{step}}}, "
                f"loop: {{{pprint_block(self.body)}}}")

@dc.dataclass
class ExprStatement(Statement):
    expr        : Expression

    def pprint(self):
        return f"line {self.line}: expression {{{self.expr.pprint()}}}"

@dc.dataclass
class ClassDef(Statement):
    name        : str
    base        : Opt[str]
    fields      : list[tuple[str, str]] # (type, name)
    methods     : list[FunctionDef]

    def pprint(self):
        base    = f" : {self.base}" if self.base else ""
        fields  = ", ".join(f"{type_} {name}" for type_, name in self.fields)
        return (f"line {self.line}: class {{{self.name}{base}}} "
                f"with fields {{{fields}}}, "
                f"methods: {{{pprint_block(self.methods)}}}")

@dc.dataclass
class ObjectDeclaration(Statement):
    class_name  : str
    name        : str
    arguments   : Opt[list[Expression]] # None for "C v;", a list for "C v(...);"

    def pprint(self):
        arguments = "" if self.arguments is None else f"({pprint_list(self.arguments)})"
        return f"line {self.line}: object {{{self.class_name} {self.name}{arguments}}}"
