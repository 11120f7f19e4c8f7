# Custom exceptions for sourcepin


class SourcepinError(Exception):
    """Base exception for all application-specific errors."""
    pass


class ConfigError(SourcepinError):
    """Raised for configuration-related problems."""
    pass


class ParserError(SourcepinError):
    """Raised when a file cannot be parsed into a markup tree."""
    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        self.message = message
        super().__init__(f"Failed to parse {file_path}: {message}")


class LocationNotFoundError(SourcepinError):
    """Raised when no element starts at the requested coordinate."""
    def __init__(self, file_path: str, line: int, column: int, reason: str = ""):
        self.file_path = file_path
        self.line = line
        self.column = column
        self.reason = reason
        message = f"No element found at {file_path}:{line}:{column}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class AttributeShapeError(SourcepinError):
    """Raised when an edit needs a literal but the source holds an expression."""
    def __init__(self, attribute: str, message: str = ""):
        self.attribute = attribute
        super().__init__(
            message or f"Attribute '{attribute}' is a dynamic expression, not a literal"
        )


class StaleEditError(SourcepinError):
    """Raised when the source no longer holds the value the editor saw."""
    def __init__(self, expected: str, found: str):
        self.expected = expected
        self.found = found
        super().__init__(
            f"Source changed since the element was captured: expected {expected!r}, found {found!r}"
        )
