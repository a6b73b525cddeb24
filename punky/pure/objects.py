"""Runtime values produced by the evaluator.

ReturnValue and Error are control signals rather than ordinary values: blocks stop at the first one they see and pass
it upward, and operators never receive them as operands. Both are unwrapped or reported before anything is displayed.

Integers are fixed-width: 64-bit signed, wrapping around on overflow like two's complement machine integers.
"""

import enum
from dataclasses import dataclass

from punky.pure.ast import FunctionLiteral

INT_BITS = 64
INT_MIN = -2 ** (INT_BITS - 1)
INT_MAX = 2 ** (INT_BITS - 1) - 1


def wrap_int(value):
    """Wraps an arbitrary Python int into the 64-bit signed range."""
    return (value - INT_MIN) % 2 ** INT_BITS + INT_MIN


class ObjectType(enum.Enum):
    """Object types, valued by the name used in error messages."""
    NULL = "null"
    INT = "int"
    BOOLEAN = "boolean"
    RETURN = "return"
    ERROR = "error"
    FUNCTION = "function"
    EMPTY = "empty"


class Object:
    """Superclass of all runtime values."""
    type: ObjectType

    def inspect(self) -> str:
        raise NotImplementedError()

    def __str__(self):
        return self.inspect()


class Null(Object):
    type = ObjectType.NULL

    def inspect(self):
        return "null"

    def __repr__(self):
        return "NULL"


class Empty(Object):
    """Value of statements that produce nothing to display, such as let bindings."""
    type = ObjectType.EMPTY

    def inspect(self):
        return ""

    def __repr__(self):
        return "EMPTY"


@dataclass(frozen=True)
class Int(Object):
    value: int
    type = ObjectType.INT

    def inspect(self):
        return str(self.value)


@dataclass(frozen=True)
class Boolean(Object):
    value: bool
    type = ObjectType.BOOLEAN

    def inspect(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class ReturnValue(Object):
    """Value in flight out of the blocks enclosing a return statement."""
    value: Object
    type = ObjectType.RETURN

    def inspect(self):
        return self.value.inspect()


@dataclass(frozen=True)
class Error(Object):
    message: str
    type = ObjectType.ERROR

    def inspect(self):
        return f"ERROR: {self.message}"


@dataclass(frozen=True, eq=False, repr=False)
class Function(Object):
    """Function value: the literal it was built from plus the environment it was defined in. Holding env keeps the
    defining scope alive for as long as this function can be called.
    """
    literal: FunctionLiteral
    env: "Environment"
    type = ObjectType.FUNCTION

    @property
    def parameters(self):
        return self.literal.parameters

    @property
    def body(self):
        return self.literal.body

    def inspect(self):
        return str(self.literal)

    def __repr__(self):
        return f"Function({self.literal})"


NULL = Null()
EMPTY = Empty()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool(value):
    """Maps a Python bool onto the shared TRUE/FALSE objects."""
    return TRUE if value else FALSE
