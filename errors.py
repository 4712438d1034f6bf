"""
Exception types for the Chameleon Sum API.

Every request-level failure ends up as a 500 response carrying the
exception text, so messages here are written for the caller to read.
"""


class ChameleonError(Exception):
    """Base class for all errors raised by this project."""


# ---------------------------------------------------------------------------
# Input errors (Number Parser)
# ---------------------------------------------------------------------------

class InvalidInputError(ChameleonError, ValueError):
    """The query string could not be turned into two operands."""


class InvalidInputCount(InvalidInputError):
    def __init__(self, count: int):
        self.count = count
        super().__init__("the two integers were not received in the URL")


class InvalidNumber(InvalidInputError):
    def __init__(self, name: str, value: str):
        self.name = name
        self.value = value
        super().__init__(f'"{value}" is not a valid value for "{name}"')


# ---------------------------------------------------------------------------
# Storage / transport errors
# ---------------------------------------------------------------------------

class StorageError(ChameleonError):
    """The SQLite database could not be opened, written or queried."""


class WriteError(ChameleonError, OSError):
    """The response could not be sent back to the client."""
