"""
Cog Compiler Errors

Defines exception classes for compilation errors.
"""

from typing import Optional


class CogError(Exception):
    """
    Base exception for all Cog errors.

    Renders as 'line L:C: message', or 'path:L:C: message' once the file
    being compiled has been attached through `filename`.
    """

    def __init__(self, message: str, line: Optional[int] = None,
                 column: Optional[int] = None, filename: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.filename = filename

    @property
    def location(self) -> str:
        """Source position of the error, empty when unknown."""
        if self.line is None:
            return self.filename or ''

        position = str(self.line)
        if self.column is not None:
            position += f":{self.column}"

        if self.filename:
            return f"{self.filename}:{position}"
        return f"line {position}"

    def __str__(self) -> str:
        location = self.location
        if location:
            return f"{location}: {self.message}"
        return self.message


class SyntaxError(CogError):
    """Raised for grammar violations during parsing."""
    pass


class CompileError(CogError):
    """Raised when the code generator meets a node it cannot lower."""
    pass
