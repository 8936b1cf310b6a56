"""Core value types shared across models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Outcome(Enum):
    """Verdict of a single audited site."""

    OK = "OK"
    FAIL = "FAIL"


@dataclass(frozen=True)
class SourceLocation:
    """A position in a source file.

    Attributes:
        file_path: Path of the file
        line_number: 1-based line number
        column: 1-based column (if known)
        line_content: Text of the line (if captured)
    """

    file_path: str
    line_number: int
    column: Optional[int] = None
    line_content: str = ""

    def __str__(self) -> str:
        return f"{self.file_path}:{self.line_number}"


@dataclass(frozen=True)
class SourceFragment:
    """A contiguous snippet of source code."""

    start_line: int
    end_line: int
    content: str
