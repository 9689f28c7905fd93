from typing import Optional


class ToysError(Exception):
    """Base exception for every failure raised by the Toys engine.

    `kind` names the error class of the language (for example
    'UnboundVariable'); `message` is the human readable detail.
    """
    kind = 'ToysError'

    def __init__(self, message: str, kind: Optional[str] = None):
        if kind is not None:
            self.kind = kind
        super().__init__(f"{self.kind}: {message}")
        self.message = message


class ParseError(ToysError):
    """Source text does not match the grammar."""
    kind = 'SyntaxError'


class UndefinedFunctionError(ToysError):
    kind = 'UndefinedFunction'


class UnboundVariableError(ToysError):
    kind = 'UnboundVariable'


class UnknownLabelError(ToysError):
    kind = 'UnknownLabel'


class DivisionByZeroError(ToysError):
    kind = 'DivisionByZero'


class MissingMainError(ToysError):
    kind = 'MissingMain'


class StackExhaustionError(ToysError):
    kind = 'StackExhaustion'


class ArityError(ToysError):
    kind = 'ArityError'
