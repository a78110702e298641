import contextlib as cl
import dataclasses as dc
import re
import sys

from typing import Optional as Opt

from .expression import *
from .statement  import *
from .objects    import Class, Instance, Array
from .scope      import Scope
from .value      import Value, Type, ZERO, SCALAR_TYPES, infer_type
from .reporter   import (
    TLError,
    TLRuntimeError,
    UndefinedName,
    ArgumentCountMismatch,
    DivisionByZero,
    IndexOutOfBounds,
    TypeMismatch,
    UnsupportedConstruct,
    InputFailure,
)

# ====================================================================
# Tree walking evaluator

@dc.dataclass(frozen = True)
class Completion:
    """
    signals that a `return` ran, unwinding every enclosing block
    up to the call; statements completing normally yield None
    """
    value       : Value

class Interpreter:
    CONSTRUCTOR = 'init'

    # host frames allowed while running, each TinyLang call takes about five
    RECURSION_LIMIT = 10_000

    # serialized assignment target head: "p" or "pts[2]"
    TARGET      = re.compile(r'(?P<name>\w+)(\[(?P<index>\d+)\])?$')

    def __init__(self, stdin = None, stdout = None):
        self.scope      = Scope()
        self.functions  : dict[str, FunctionDef] = dict()
        self.classes    : dict[str, Class]       = dict()
        self.arrays     : dict[str, Array]       = dict()
        self.objects    : dict[str, Instance]    = dict()

        self.stdin      = sys.stdin  if stdin  is None else stdin
        self.stdout     = sys.stdout if stdout is None else stdout
        self._words     = []            # stdin words read but not consumed

    @cl.contextmanager
    def at(self, node):
        """
        attach the position of `node` to errors raised below it
        that do not know where they happened
        """
        try:
            yield
        except TLError as e:
            e.locate(node.line, node.column)
            raise

    def run(self, prgm: Block):
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(max(limit, self.RECURSION_LIMIT))

        try:
            for stmt in prgm:
                match stmt:
                    case ClassDef() | FunctionDef():
                        self.for_statement(stmt)

            for stmt in prgm:
                match stmt:
                    case ObjectDeclaration(arguments = None):
                        self.for_statement(stmt)

            for stmt in prgm:
                match stmt:
                    case ClassDef() | FunctionDef() | ObjectDeclaration(arguments = None):
                        continue

                if self.for_statement(stmt) is not None:
                    break

        except RecursionError:
            raise TLRuntimeError("call depth exceeded")

        finally:
            sys.setrecursionlimit(limit)

    ### STATEMENTS ###

    def for_block(self, block: Block) -> Opt[Completion]:
        for stmt in block:
            completion = self.for_statement(stmt)
            if completion is not None:
                return completion
        return None

    def for_statement(self, stmt: Statement) -> Opt[Completion]:
        with self.at(stmt):
            match stmt:
                case Assignment():
                    self.assign(stmt)

                case ArrayDeclaration(name, type_, size, elements):
                    self.arrays[name] = self.allocate(type_, size, elements)

                case ArrayAssignment(name, index, value):
                    self.assign_element(name, index, value)

                case Print(value):
                    self.write(value)

                case FunctionDef(name):
                    self.functions[name] = stmt

                case Return(value):
                    if value is None:
                        return Completion(Value.of_int(0))
                    return Completion(self.for_expression(value))

                case Ifelse(condition, success, failure):
                    if self.condition(condition):
                        return self.for_block(success)
                    return self.for_block(failure)

                case While(condition, body):
                    while self.condition(condition):
                        completion = self.for_block(body)
                        if completion is not None:
                            return completion

                case For(init, condition, step, body):
                    if init is not None:
                        self.for_statement(init)

                    while condition is None or self.condition(condition):
                        completion = self.for_block(body)
                        if completion is not None:
                            return completion
                        if step is not None:
                            self.for_statement(step)

                case ExprStatement(expr):
                    self.for_expression(expr)

                case ClassDef():
                    self.declare_class(stmt)

                case ObjectDeclaration(class_name, name, arguments):
                    self.declare_object(class_name, name, arguments)

                case _:
                    raise UnsupportedConstruct(f"cannot execute {{{stmt.pprint()}}}")

        return None

    def assign(self, stmt: Assignment):
        target, value, type_ = stmt.target, stmt.value, stmt.type_

        if '.' in target:
            self.assign_member(target, self.for_expression(value))

        elif isinstance(value, ArrayLiteral):
            self.arrays[target] = self.allocate(type_, None, value)

        elif type_ is None:
            self.scope.assign(target, self.for_expression(value))

        elif value is None:
            self.scope.push(target, ZERO[type_])

        else:
            self.scope.push(target, self.for_expression(value).coerce(type_))

    def assign_element(self, name: str, index: Expression, value: Expression):
        array    = self.array(name)
        position = self.offset(self.for_expression(index), array, name)
        value    = self.for_expression(value)

        if array.holds_objects():
            raise TypeMismatch(f"cannot store a value in {array.type_} array {{{name}}}")

        value = value.coerce(array.type_)
        if position == len(array):
            array.items.append(value)
        else:
            array.items[position] = value

    def assign_member(self, target: str, value: Value):
        head, *path, field = target.split('.')
        instance = self.target_object(head)

        if path:
            raise TypeMismatch(f"{{{head}.{path[0]}}} is not an object")

        if field not in instance.fields:
            raise UndefinedName(f"{instance.pprint()} has no field {{{field}}}")
        instance.fields[field] = value.coerce(instance.class_.fields[field])

    def target_object(self, head: str) -> Instance:
        found = self.TARGET.match(head)
        name, index = found['name'], found['index']

        if index is None:
            return self.object(name)

        array = self.array(name)
        return self.object_at(array, self.offset(Value.of_int(int(index)), array, name, grow = False), name)

    def allocate(self, type_: Opt[str], size: Opt[Expression], elements: Opt[ArrayLiteral]) -> Array:
        if elements is not None:
            values = [self.for_expression(e) for e in elements.elements]
            if type_ is None:
                if not values:
                    raise TypeMismatch("cannot infer the element type of an empty array literal")
                type_ = infer_type(values[0])
            if type_ not in SCALAR_TYPES:
                raise TypeMismatch(f"{type_} arrays cannot be initialized from a literal")
            return Array(type_, [v.coerce(type_) for v in values], growable = True)

        if type_ not in SCALAR_TYPES:
            # object array, every slot holds its own instance
            class_ = self.class_(type_)
            length = self.length(size)
            return Array(type_, [class_.instantiate() for _ in range(length)])

        if size is None:
            return Array(type_, [], growable = True)

        return Array(type_, [ZERO[type_]] * self.length(size))

    def length(self, size: Opt[Expression]) -> int:
        if size is None:
            raise TypeMismatch("object arrays need a size")

        length = self.for_expression(size)
        if length.type_ is not Type.INT:
            raise TypeMismatch(f"array size must be an integer, not {length.type_.pprint()}")
        if length.data < 0:
            raise IndexOutOfBounds(f"negative array size {length.data}")
        return length.data

    def offset(self, index: Value, array: Array | str, name: str, grow = True) -> int:
        """
        bounds checked position, growable arrays accept one past the end
        when `grow` is set
        """
        if index.type_ is not Type.INT:
            raise TypeMismatch(f"index must be an integer, not {index.type_.pprint()}")

        length = len(array)
        if grow and isinstance(array, Array) and array.growable and index.data == length:
            return index.data

        if index.data not in range(length):
            raise IndexOutOfBounds(f"index {index.data} out of bounds for {{{name}}} of size {length}")
        return index.data

    def write(self, value: Expression):
        match value:
            case BoolLiteral(flag):
                text = "true" if flag else "false"
            case _:
                text = self.for_expression(value).pprint()
        print(text, file = self.stdout)

    ### CLASSES AND OBJECTS ###

    def declare_class(self, definition: ClassDef):
        base = None
        if definition.base is not None:
            base = self.class_(definition.base)
        self.classes[definition.name] = Class.resolve(definition, base)

    def declare_object(self, class_name: str, name: str, arguments: Opt[list[Expression]]):
        instance = self.class_(class_name).instantiate()
        values   = None
        if arguments is not None:
            values = [self.for_expression(a) for a in arguments]

        self.objects[name] = instance

        if values is None:
            return

        if self.CONSTRUCTOR in instance.class_.methods:
            self.invoke(instance, self.CONSTRUCTOR, values)
        elif values:
            raise UndefinedName(f"class {{{class_name}}} has no constructor {{{self.CONSTRUCTOR}}}")

    def class_(self, name: str) -> Class:
        if name not in self.classes:
            raise UndefinedName(f"class {{{name}}} is not declared")
        return self.classes[name]

    def object(self, name: str) -> Instance:
        if name not in self.objects:
            raise UndefinedName(f"object {{{name}}} is not declared")
        return self.objects[name]

    def object_at(self, array: Array, position: int, name: str) -> Instance:
        item = array.items[position]
        if not isinstance(item, Instance):
            raise TypeMismatch(f"{{{name}[{position}]}} is not an object")
        return item

    def array(self, name: str) -> Array:
        if name not in self.arrays:
            raise UndefinedName(f"array {{{name}}} is not declared")
        return self.arrays[name]

    def for_object(self, expr: Expression) -> Instance:
        match expr:
            case Name(name):
                return self.object(name)

            case ArrayAccess(Name(name), index) if name in self.arrays:
                array    = self.arrays[name]
                position = self.offset(self.for_expression(index), array, name, grow = False)
                return self.object_at(array, position, name)

            case _:
                raise TypeMismatch(f"{{{expr.pprint()}}} is not an object")

    def field(self, instance: Instance, member: str) -> Value:
        if member not in instance.fields:
            raise UndefinedName(f"{instance.pprint()} has no field {{{member}}}")
        return instance.fields[member]

    def invoke(self, instance: Instance, method: str, values: list[Value]) -> Value:
        """
        fields are copied in as locals, and copied back out once the
        body is done, so field writes inside the method stick
        """
        class_ = instance.class_
        if method not in class_.methods:
            raise UndefinedName(f"no method {{{method}}} in class "
                                f"{{{' : '.join(class_.lineage())}}}")

        function = class_.methods[method]
        self.check_arity(function, values)

        with self.scope.in_subscope():
            for name, value in instance.fields.items():
                self.scope.push(name, value)
            for parameter, value in zip(function.parameters, values):
                self.scope.push(parameter, value)

            completion = self.for_block(function.body)

            for name in instance.fields:
                instance.fields[name] = self.scope.local(name)

        return self.returned(completion)

    ### FUNCTIONS ###

    def check_arity(self, function: FunctionDef, values: list):
        if len(values) != len(function.parameters):
            raise ArgumentCountMismatch(
                f"{{{function.name}}} takes {len(function.parameters)} "
                f"argument(s), got {len(values)}"
            )

    def call(self, callee: str, arguments: list[Expression]) -> Value:
        if callee not in self.functions:
            raise UndefinedName(f"function {{{callee}}} is not defined")

        function = self.functions[callee]
        self.check_arity(function, arguments)

        # arguments are evaluated in the caller's scope
        values = [self.for_expression(a) for a in arguments]

        with self.scope.in_subscope():
            for parameter, value in zip(function.parameters, values):
                self.scope.push(parameter, value)

            completion = self.for_block(function.body)

        return self.returned(completion)

    @staticmethod
    def returned(completion: Opt[Completion]) -> Value:
        return Value.of_int(0) if completion is None else completion.value

    ### EXPRESSIONS ###

    def condition(self, expr: Expression) -> bool:
        return self.for_expression(expr).truthy()

    def for_expression(self, expr: Expression) -> Value:
        with self.at(expr):
            match expr:
                case IntLiteral(value):
                    return Value.of_int(value)

                case FloatLiteral(value):
                    return Value.of_float(value)

                case CharLiteral(value):
                    return Value.of_char(value)

                case StringLiteral(value):
                    return Value.of_string(value)

                case BoolLiteral(value):
                    return Value.of_bool(value)

                case Name(name):
                    return self.variable(name)

                case UnaryOperation(operator, operand):
                    return self.unary(operator, self.for_expression(operand))

                case BinaryOperation('&&', left, right):
                    return Value.of_bool(self.condition(left) and self.condition(right))

                case BinaryOperation('||', left, right):
                    return Value.of_bool(self.condition(left) or self.condition(right))

                case BinaryOperation(operator, left, right):
                    return self.binary(
                        operator,
                        self.for_expression(left),
                        self.for_expression(right),
                    )

                case Call(callee, arguments):
                    return self.call(callee, arguments)

                case ArrayLiteral():
                    raise TypeMismatch("an array literal can only initialize an array")

                case ArrayAccess(array, index):
                    return self.element(array, index)

                case MemberAccess(base, member):
                    return self.field(self.for_object(base), member)

                case MethodCall(base, method, arguments):
                    instance = self.for_object(base)
                    values   = [self.for_expression(a) for a in arguments]
                    return self.invoke(instance, method, values)

                case Input():
                    return self.input()

                case Read(filename):
                    return self.read(filename)

                case _:
                    raise UnsupportedConstruct(f"cannot evaluate {{{expr.pprint()}}}")

    def variable(self, name: str) -> Value:
        if name in self.scope:
            return self.scope[name]
        if name in self.arrays or name in self.objects:
            raise TypeMismatch(f"{{{name}}} is not a scalar value")
        raise UndefinedName(f"variable {{{name}}} is not defined")

    def element(self, array: Expression, index: Expression) -> Value:
        match array:
            case Name(name) if name in self.arrays:
                items    = self.arrays[name]
                position = self.offset(self.for_expression(index), items, name, grow = False)
                item     = items.items[position]
                if isinstance(item, Instance):
                    raise TypeMismatch(f"{item.pprint()} used as a value")
                return item

        text = self.for_expression(array)
        if text.type_ is not Type.STRING:
            raise TypeMismatch(f"{{{array.pprint()}}} cannot be indexed")

        position = self.offset(self.for_expression(index), text.data, array.pprint())
        return Value.of_char(text.data[position])

    def unary(self, operator: str, operand: Value) -> Value:
        match operator:
            case '-':
                if operand.type_ is Type.FLOAT:
                    return Value.of_float(-operand.data)
                return Value.of_int(-operand.number())
            case '!':
                return Value.of_bool(not operand.truthy())
            case _:
                raise UnsupportedConstruct(f"unknown unary operator {operator}")

    def binary(self, operator: str, left: Value, right: Value) -> Value:
        types = (left.type_, right.type_)

        if Type.STRING in types:
            if operator == '+':
                return Value.of_string(left.pprint() + right.pprint())
            if types == (Type.STRING, Type.STRING) and operator in ('==', '!='):
                return Value.of_bool((left.data == right.data) == (operator == '=='))
            raise TypeMismatch(f"operator {operator} is not defined on strings")

        if Type.FLOAT in types:
            return self.arithmetic(operator, float(left.number()), float(right.number()), True)

        if types == (Type.CHAR, Type.CHAR) and operator not in ('==', '!='):
            raise TypeMismatch(f"operator {operator} is not defined on two chars")

        return self.arithmetic(operator, left.number(), right.number(), False)

    def arithmetic(self, operator: str, a, b, floating: bool) -> Value:
        make = Value.of_float if floating else Value.of_int

        match operator:
            case '+':
                return make(a + b)
            case '-':
                return make(a - b)
            case '*':
                return make(a * b)
            case '/':
                if b == 0:
                    raise DivisionByZero(f"{a} divided by zero")
                if floating:
                    return make(a / b)
                # truncate toward zero
                quotient = abs(a) // abs(b)
                return make(quotient if (a < 0) == (b < 0) else -quotient)
            case '>':
                return Value.of_bool(a > b)
            case '<':
                return Value.of_bool(a < b)
            case '==':
                return Value.of_bool(a == b)
            case '!=':
                return Value.of_bool(a != b)
            case _:
                raise UnsupportedConstruct(f"unknown binary operator {operator}")

    ### INPUT ###

    @staticmethod
    def integer(word: str, origin: str) -> Value:
        try:
            return Value.of_int(int(word))
        except ValueError:
            raise InputFailure(f"expected an integer from {origin}, got {{{word}}}") from None

    def input(self) -> Value:
        while not self._words:
            line = self.stdin.readline()
            if not line:
                raise InputFailure("standard input is exhausted")
            self._words.extend(line.split())
        return self.integer(self._words.pop(0), "standard input")

    def read(self, filename: str) -> Value:
        try:
            with open(filename, "r") as f:
                words = f.read().split()
        except OSError as e:
            raise InputFailure(f"cannot open file {{{filename}}}: {e.strerror}") from None
        except UnicodeDecodeError:
            raise InputFailure(f"file {{{filename}}} is not readable text") from None

        if not words:
            raise InputFailure(f"file {{{filename}}} holds no integer")
        return self.integer(words[0], f"file {{{filename}}}")
