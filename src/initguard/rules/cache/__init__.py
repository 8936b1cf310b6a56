"""Cache maintenance rules for contract sources."""

from initguard.rules.cache.refresh_gate import RULE_CACHE_REFRESH_GATE, rule_cache_refresh_gate
from initguard.rules.cache.store_write import RULE_CACHE_STORE_WRITE, rule_cache_store_write
from initguard.rules.registry import registry

# Register all cache rules
registry.register_static(rule_cache_refresh_gate)
registry.register_static(rule_cache_store_write)

__all__ = [
    "RULE_CACHE_REFRESH_GATE",
    "RULE_CACHE_STORE_WRITE",
    "rule_cache_refresh_gate",
    "rule_cache_store_write",
]
