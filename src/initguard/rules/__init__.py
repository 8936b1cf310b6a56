"""Rule system for initguard.

Rules are lexical, best-effort checks over contract sources. They are
registered when their modules are imported.

Available rule categories:
- Cache rules: refresh entrypoint gating, module cache write callsites
"""

from initguard.rules.base import ContractSource, StaticRule
from initguard.rules.executors import StaticRuleExecutor
from initguard.rules.registry import registry

# Import rule modules to trigger registration
import initguard.rules.cache  # noqa: F401

__all__ = [
    "ContractSource",
    "StaticRule",
    "StaticRuleExecutor",
    "registry",
]


def get_all_static_rules():
    """Get all registered static rules.

    Returns:
        List of all static rule instances
    """
    return registry.get_static_rules()


def get_rule_by_id(rule_id: str):
    """Get a specific rule by ID.

    Args:
        rule_id: Rule identifier (e.g., "CACHE_REFRESH_GATE")

    Returns:
        Rule instance if found, None otherwise
    """
    return registry.get_rule_by_id(rule_id)
