from rinha.ast import Location
from rinha.types import ErrorVal, Reason


class RinhaError(Exception):
    """Exception type used to propagate Rinha runtime errors."""
    def __init__(self, err: ErrorVal):
        super().__init__(str(err))
        self.err = err

    @property
    def reason(self) -> Reason:
        return self.err.reason

    @property
    def location(self) -> Location:
        return self.err.location


class ParseError(Exception):
    """Raised when source text does not match the Rinha grammar."""
    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(f"{message} at {line}:{column}" if line else message)
        self.line = line
        self.column = column
