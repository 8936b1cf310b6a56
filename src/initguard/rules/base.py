"""Base classes for source rules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from initguard.config import CacheGateConfig
from initguard.models.core import SourceFragment, SourceLocation
from initguard.models.rules import Rule, RuleViolation


@dataclass(frozen=True)
class ContractSource:
    """A contract source file handed to source rules.

    Attributes:
        path: Absolute path of the file
        relative_path: Path relative to the scanned root, used in reports
        text: File contents
    """

    path: Path
    relative_path: str
    text: str

    @property
    def lines(self) -> list[str]:
        return self.text.splitlines()

    def line_of(self, index: int) -> int:
        """Convert a character index to a 1-based line number."""
        return self.text.count("\n", 0, index) + 1

    def location(self, line_number: int) -> SourceLocation:
        lines = self.lines
        content = lines[line_number - 1].strip() if 0 < line_number <= len(lines) else ""
        return SourceLocation(
            file_path=self.relative_path, line_number=line_number, line_content=content
        )

    def fragment(self, line_number: int) -> SourceFragment:
        return SourceFragment(
            start_line=line_number,
            end_line=line_number,
            content=self.location(line_number).line_content,
        )


class StaticRule(ABC):
    """A lexical rule run over one contract source file.

    Rules are heuristic: they look for textual evidence and are expected to
    produce false negatives and INFO rows that need human review.
    """

    def __init__(self, rule: Rule) -> None:
        self.rule = rule

    @property
    def rule_id(self) -> str:
        return self.rule.rule_id

    @abstractmethod
    def check(self, source: ContractSource, settings: CacheGateConfig) -> list[RuleViolation]:
        """Check one source file.

        Args:
            source: Contract source file
            settings: Pattern settings

        Returns:
            Findings for this file (failures and INFO evidence rows)
        """
