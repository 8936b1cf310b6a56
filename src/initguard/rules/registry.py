"""Rule registry."""

from __future__ import annotations

from initguard.rules.base import StaticRule


class RuleRegistry:
    """Holds every registered rule instance, keyed by rule ID."""

    def __init__(self) -> None:
        self._static: dict[str, StaticRule] = {}

    def register_static(self, rule: StaticRule) -> StaticRule:
        if rule.rule_id in self._static:
            raise ValueError(f"Rule {rule.rule_id} is already registered")
        self._static[rule.rule_id] = rule
        return rule

    def get_static_rules(self) -> list[StaticRule]:
        return list(self._static.values())

    def get_rule_by_id(self, rule_id: str) -> StaticRule | None:
        return self._static.get(rule_id)


registry = RuleRegistry()
