"""Models for the rule system."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from initguard.models.core import Outcome, SourceFragment, SourceLocation


class Severity(Enum):
    """Severity levels for rule violations."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


class RuleCategory(Enum):
    """Categories of rules."""

    CACHE = "cache"


@dataclass(frozen=True)
class Rule:
    """Metadata describing a rule.

    Attributes:
        rule_id: Unique identifier (e.g., "CACHE_REFRESH_GATE")
        name: Human readable name
        description: What the rule detects
        severity: Severity of a failing finding
        category: Rule category
        references: Links to background material
        remediation: Short fix guidance
    """

    rule_id: str
    name: str
    description: str
    severity: Severity
    category: RuleCategory
    references: list[str] = field(default_factory=list)
    remediation: str = ""


@dataclass
class RuleViolation:
    """A single finding produced by a rule.

    Attributes:
        rule: Rule that produced the finding
        severity: Severity of this finding (INFO for evidence rows)
        message: Description of the finding
        recommendation: How to fix it
        location: Where it was found
        source_fragment: Snippet of the offending source
        context: Extra structured data
    """

    rule: Rule
    severity: Severity
    message: str
    recommendation: str = ""
    location: Optional[SourceLocation] = None
    source_fragment: Optional[SourceFragment] = None
    context: dict[str, Any] = field(default_factory=dict)

    @property
    def rule_id(self) -> str:
        return self.rule.rule_id

    @property
    def is_failure(self) -> bool:
        return self.severity != Severity.INFO

    @property
    def outcome(self) -> Outcome:
        """Row verdict: INFO evidence rows are OK, anything else FAIL."""
        return Outcome.FAIL if self.is_failure else Outcome.OK
