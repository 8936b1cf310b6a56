"""CACHE_REFRESH_GATE: Cache Refresh Entrypoint Not Gated.

Every implemented ``refreshModuleCache()`` must be callable only by the
cache maintenance manager registered under ``KEY_CACHE_MAINTENANCE_MANAGER``.

Findings use the audit row shape: ``location`` gives file and line,
``message`` the notes, and ``outcome`` is FAIL for the HIGH finding and OK for
the INFO "appears gated" row.
"""

import re

from initguard.config import CacheGateConfig
from initguard.models.rules import Rule, RuleCategory, RuleViolation, Severity
from initguard.rules.base import ContractSource, StaticRule


class RefreshGateRule(StaticRule):
    """Detect refresh entrypoints without evidence of a maintainer gate.

    The check is file-wide: a file passes when it contains both a reference
    to the maintenance manager key and a sender check (inline
    ``msg.sender != maint`` or a ``_requireCacheMaintainer()`` helper).
    Interface declarations (no body) are not entrypoints and are ignored.
    """

    def check(self, source: ContractSource, settings: CacheGateConfig) -> list[RuleViolation]:
        """Check refresh entrypoint gating.

        Args:
            source: Contract source file
            settings: Entrypoint name and gate markers

        Returns:
            One finding per file holding an implementation (HIGH or INFO)
        """
        if settings.entrypoint not in source.text:
            return []

        match = self._implementation_pattern(settings.entrypoint).search(source.text)
        if match is None:
            return []

        line = source.line_of(match.start())
        has_key_check = any(marker in source.text for marker in settings.key_markers)
        has_sender_gate = any(gate in source.text for gate in settings.sender_gates)

        context = {
            "entrypoint": settings.entrypoint,
            "has_key_check": has_key_check,
            "has_sender_gate": has_sender_gate,
        }

        if has_key_check and has_sender_gate:
            return [
                RuleViolation(
                    rule=self.rule,
                    severity=Severity.INFO,
                    message=f"{settings.entrypoint}() appears to be gated by CacheMaintenanceManager.",
                    location=source.location(line),
                    source_fragment=source.fragment(line),
                    context=context,
                )
            ]

        return [
            RuleViolation(
                rule=self.rule,
                severity=self.rule.severity,
                message=(
                    f"{settings.entrypoint}() found but could not prove it is gated by "
                    f"KEY_CACHE_MAINTENANCE_MANAGER (only CacheMaintenanceManager)."
                ),
                recommendation=(
                    "Resolve the maintainer from the registry and reject other callers:\n\n"
                    "  address maint = Registry(registry).getModuleOrRevert(\n"
                    "      ModuleKeys.KEY_CACHE_MAINTENANCE_MANAGER\n"
                    "  );\n"
                    "  if (msg.sender != maint) revert NotCacheMaintainer();"
                ),
                location=source.location(line),
                source_fragment=source.fragment(line),
                context=context,
            )
        ]

    def _implementation_pattern(self, entrypoint: str) -> re.Pattern[str]:
        return re.compile(
            rf"function\s+{re.escape(entrypoint)}\s*\([^;{{]*\)\s*external[^;{{]*\{{"
        )


RULE_CACHE_REFRESH_GATE = Rule(
    rule_id="CACHE_REFRESH_GATE",
    name="Cache Refresh Entrypoint Not Gated",
    description="refreshModuleCache() must only be callable by the cache maintenance manager",
    severity=Severity.HIGH,
    category=RuleCategory.CACHE,
    remediation="Gate the entrypoint on KEY_CACHE_MAINTENANCE_MANAGER",
)

rule_cache_refresh_gate = RefreshGateRule(RULE_CACHE_REFRESH_GATE)
