"""Models for analysis reports."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from initguard.models.core import Outcome
from initguard.models.rules import RuleViolation
from initguard.models.script import InitializerIntent


@dataclass(frozen=True)
class VerdictRow:
    """Verdict for one deployment call site.

    Attributes:
        contract_name: Contract name, "(non-literal)" when unresolved
        deployment_key: Registry key the proxy is stored under (if found)
        line: 1-based line of the deployment call
        intent: Initializer intent of the deployment call
        args_count: Initializer arg count, None when unknown
        outcome: OK or FAIL
        signature: Resolved ABI signature (if any)
        reason: Why the row failed
        notes: Extra detail for passing rows
    """

    contract_name: str
    deployment_key: Optional[str]
    line: int
    intent: InitializerIntent
    args_count: Optional[int]
    outcome: Outcome
    signature: Optional[str] = None
    reason: Optional[str] = None
    notes: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.outcome == Outcome.OK


@dataclass
class AuditReport:
    """Initializer audit report for one script.

    Attributes:
        script_path: Path of the audited script
        rows: One verdict per deployment call site, in source order
    """

    script_path: str
    rows: list[VerdictRow] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.rows)

    @property
    def fail_count(self) -> int:
        return sum(1 for row in self.rows if not row.passed)

    @property
    def ok_count(self) -> int:
        return self.total - self.fail_count

    @property
    def passed(self) -> bool:
        return self.fail_count == 0

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1


@dataclass
class SourceAuditReport:
    """Report produced by the source rule variants.

    Attributes:
        root: Directory that was scanned
        files_scanned: Files the rules were run against
        violations: All findings, failures and info rows alike
    """

    root: Path
    files_scanned: list[Path] = field(default_factory=list)
    violations: list[RuleViolation] = field(default_factory=list)

    @property
    def errors(self) -> list[RuleViolation]:
        return [v for v in self.violations if v.is_failure]

    @property
    def infos(self) -> list[RuleViolation]:
        return [v for v in self.violations if not v.is_failure]

    def for_rule(self, rule_id: str) -> list[RuleViolation]:
        return [v for v in self.violations if v.rule_id == rule_id]

    @property
    def exit_code(self) -> int:
        return 1 if self.errors else 0
