import dataclasses as dc
import enum

from .reporter import TypeMismatch

class Type(enum.Enum):
    INT    = 0
    FLOAT  = 1
    CHAR   = 2
    STRING = 3

    def pprint(self):
        return self.name.lower()

### VALUES ###

# one tagged runtime value, copied on assignment
# booleans are INT 0 / 1, there is no separate boolean type

@dc.dataclass(frozen = True)
class Value:
    type_       : Type
    data        : int | float | str

    @staticmethod
    def of_int(data: int):
        return Value(Type.INT, int(data))

    @staticmethod
    def of_float(data: float):
        return Value(Type.FLOAT, float(data))

    @staticmethod
    def of_char(data: str):
        return Value(Type.CHAR, data)

    @staticmethod
    def of_string(data: str):
        return Value(Type.STRING, data)

    @staticmethod
    def of_bool(data: bool):
        return Value(Type.INT, 1 if data else 0)

    def pprint(self):
        match self.type_:
            case Type.FLOAT:
                return f"{self.data:g}"
            case Type.INT:
                return str(self.data)
            case _:
                return self.data

    def number(self):
        """
        numeric view: chars are their ordinal
        """
        match self.type_:
            case Type.INT | Type.FLOAT:
                return self.data
            case Type.CHAR:
                return ord(self.data)
            case Type.STRING:
                raise TypeMismatch(f"string {{{self.data}}} used as a number")

    def truthy(self):
        match self.type_:
            case Type.CHAR:
                return self.data != '\0'
            case Type.STRING:
                raise TypeMismatch(f"string {{{self.data}}} used as a condition")
            case _:
                return self.data != 0

    def coerce(self, type_: str):
        """
        convert to a declared scalar type: int, bool, float, char, string
        """
        match type_:
            case 'int':
                return Value.of_int(self.number())
            case 'bool':
                return Value.of_bool(self.number() != 0)
            case 'float':
                return Value.of_float(self.number())
            case 'char':
                if self.type_ is Type.CHAR:
                    return self
                code = int(self.number())
                if code not in range(0, 0x110000):
                    raise TypeMismatch(f"{code} is not a character code")
                return Value.of_char(chr(code))
            case 'string':
                if self.type_ is not Type.STRING:
                    raise TypeMismatch(f"{self.type_.pprint()} {{{self.pprint()}}} "
                                       f"assigned to a string")
                return self
            case _:
                raise TypeMismatch(f"{{{type_}}} is not a scalar type")

SCALAR_TYPES = ('int', 'bool', 'float', 'char', 'string')

ZERO = {
    'int'       : Value.of_int(0),
    'bool'      : Value.of_int(0),
    'float'     : Value.of_float(0.0),
    'char'      : Value.of_char('\0'),
    'string'    : Value.of_string(''),
}

def infer_type(value: Value):
    """
    declared type name matching a value, used for literal-initialized arrays
    """
    return value.type_.pprint()
