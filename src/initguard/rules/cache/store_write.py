"""CACHE_STORE_WRITE: Module Cache Write Callsites.

Lists every mutating call into the module cache library so reviewers can
confirm each write happens behind the maintenance gate. Every finding is an
INFO row, so its ``outcome`` is OK and it never fails the run.
"""

import re

from initguard.config import CacheGateConfig
from initguard.models.rules import Rule, RuleCategory, RuleViolation, Severity
from initguard.rules.base import ContractSource, StaticRule

COMMENT_PREFIXES = ("//", "*", "/*", "*/")


def is_comment_line(line: str) -> bool:
    return line.strip().startswith(COMMENT_PREFIXES)


class StoreWriteRule(StaticRule):
    """Report ``ModuleCache.set/batchSet/remove(...)`` callsites as INFO rows."""

    def check(self, source: ContractSource, settings: CacheGateConfig) -> list[RuleViolation]:
        if f"{settings.store_library}." not in source.text:
            return []

        methods = "|".join(re.escape(m) for m in settings.write_methods)
        pattern = re.compile(rf"\b{re.escape(settings.store_library)}\.({methods})\s*\(")
        lines = source.lines

        violations = []
        for match in pattern.finditer(source.text):
            line = source.line_of(match.start())
            # Best-effort: skip matches in comments and docstrings
            if is_comment_line(lines[line - 1] if line <= len(lines) else ""):
                continue
            violations.append(
                RuleViolation(
                    rule=self.rule,
                    severity=self.rule.severity,
                    message=f"{settings.store_library}.{match.group(1)}(...) callsite (write)",
                    location=source.location(line),
                    source_fragment=source.fragment(line),
                    context={"method": match.group(1)},
                )
            )
        return violations


RULE_CACHE_STORE_WRITE = Rule(
    rule_id="CACHE_STORE_WRITE",
    name="Module Cache Write Callsite",
    description="Mutating call into the module cache store (review that it is gated)",
    severity=Severity.INFO,
    category=RuleCategory.CACHE,
)

rule_cache_store_write = StoreWriteRule(RULE_CACHE_STORE_WRITE)
