"""Rule executors."""

from __future__ import annotations

import logging

from initguard.config import InitGuardConfig
from initguard.models.rules import RuleViolation
from initguard.rules.base import ContractSource
from initguard.rules.registry import registry

logger = logging.getLogger(__name__)


class StaticRuleExecutor:
    """Run every enabled registered rule over a source file."""

    def __init__(self, config: InitGuardConfig | None = None) -> None:
        self.config = config or InitGuardConfig()

    def execute(self, source: ContractSource) -> list[RuleViolation]:
        """Run rules against one file.

        Args:
            source: Contract source file

        Returns:
            Findings from all enabled rules, in registration order
        """
        violations: list[RuleViolation] = []
        for rule in registry.get_static_rules():
            if not self.config.is_rule_enabled(rule.rule_id):
                logger.debug("Skipping disabled rule %s", rule.rule_id)
                continue
            violations.extend(rule.check(source, self.config.cache_gates))
        return violations
