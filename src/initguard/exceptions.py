"""Exceptions raised by initguard."""


class InitGuardError(Exception):
    """Base class for all initguard errors."""


class ParseError(InitGuardError):
    """Raised when a target script cannot be parsed into a syntax tree.

    Attributes:
        file_path: Script that failed to parse
        line: 1-based line of the first syntax error, if known
    """

    def __init__(self, message: str, file_path: str = "", line: int | None = None) -> None:
        super().__init__(message)
        self.file_path = file_path
        self.line = line


class ArtifactError(InitGuardError):
    """Raised when a contract's compiled artifact is missing, ambiguous or unreadable."""

    def __init__(self, contract_name: str, message: str) -> None:
        super().__init__(message)
        self.contract_name = contract_name


class ConfigError(InitGuardError):
    """Raised when the configuration file is invalid."""
