"""Verdict rows for deployment call sites.

Each deployment call site becomes exactly one VerdictRow. Problems are
recovered into FAIL rows; nothing here aborts the run or prints.
"""

from __future__ import annotations

from typing import Optional

from initguard.models.report import AuditReport, Outcome, VerdictRow
from initguard.models.script import (
    DeploymentCallSite,
    InitializerIntent,
    InitializerKind,
    PostDeployInitializeCall,
)
from initguard.static.matcher import InterfaceSignatureMatcher

NON_LITERAL_CONTRACT = "(non-literal)"


def _row(
    site: DeploymentCallSite,
    outcome: Outcome,
    signature: Optional[str] = None,
    reason: Optional[str] = None,
    notes: Optional[str] = None,
) -> VerdictRow:
    return VerdictRow(
        contract_name=NON_LITERAL_CONTRACT if site.contract_name is None else site.contract_name,
        deployment_key=site.deployment_key,
        line=site.line,
        intent=site.intent,
        args_count=site.args_count,
        outcome=outcome,
        signature=signature,
        reason=reason,
        notes=notes,
    )


def _fail(site: DeploymentCallSite, reason: str, signature: Optional[str] = None) -> VerdictRow:
    return _row(site, Outcome.FAIL, signature=signature, reason=reason)


def evaluate_disabled(
    site: DeploymentCallSite,
    follow_ups: dict[str, list[PostDeployInitializeCall]],
    matcher: InterfaceSignatureMatcher,
    callee: str = "deployProxy",
    registry_name: str = "deployed",
) -> VerdictRow:
    """Evaluate a deployment made with the initializer disabled.

    The deployment must pass no initializer args, be stored under a registry
    key, and have at least one later initialize call on that key whose arity
    resolves against the ABI.
    """
    if site.args_count is None:
        return _fail(site, "initializer=false but args array is not statically countable")
    if site.args_count != 0:
        return _fail(
            site,
            f"non-zero args with initializer disabled: {callee} args length={site.args_count} "
            f"(expected 0)",
        )
    if not site.deployment_key:
        return _fail(
            site,
            f"initializer=false but could not map this deployment to a "
            f"{registry_name}.<Key> assignment",
        )

    calls = follow_ups.get(site.deployment_key, [])
    if not calls:
        return _fail(
            site,
            f"initializer=false but no explicit initialize(...) call found for "
            f"{registry_name}.{site.deployment_key}",
        )

    results = [
        (call, matcher.match(site.contract_name, InitializerIntent.default(), call.args_count))
        for call in calls
    ]
    for call, result in results:
        if not result.ok:
            return _fail(
                site,
                f"post-deploy initialize(...) check failed at line {call.line}: {result.reason}",
                signature=result.signature,
            )

    first_call, first_result = results[0]
    notes = f"initializer=false; found initialize({first_call.args_count} args) later"
    if len(calls) > 1:
        notes += f" ({len(calls)} calls)"
    return _row(site, Outcome.OK, signature=first_result.signature, notes=notes)


def evaluate_call_site(
    site: DeploymentCallSite,
    follow_ups: dict[str, list[PostDeployInitializeCall]],
    matcher: InterfaceSignatureMatcher,
    require_deployment_key: bool = True,
    callee: str = "deployProxy",
    registry_name: str = "deployed",
) -> VerdictRow:
    """Produce the verdict row for one deployment call site.

    Args:
        site: Deployment call site
        follow_ups: Correlated initialize calls by deployment key
        matcher: Interface-signature matcher
        require_deployment_key: Fail otherwise passing rows that have no key
        callee: Deployment helper name, used in reasons
        registry_name: Registry object name, used in reasons

    Returns:
        VerdictRow for the call site
    """
    if not site.has_literal_name:
        return _fail(
            site, f"{callee} contract name is not a string literal; cannot audit reliably"
        )

    if site.intent.kind == InitializerKind.DISABLED:
        return evaluate_disabled(site, follow_ups, matcher, callee, registry_name)

    result = matcher.match(site.contract_name, site.intent, site.args_count)
    if not result.ok:
        return _fail(site, result.reason or "initializer did not match ABI")

    if require_deployment_key and not site.deployment_key:
        return _fail(
            site,
            f"could not map this deployment to a {registry_name}.<Key> assignment",
            signature=result.signature,
        )
    return _row(site, Outcome.OK, signature=result.signature)


def build_report(
    script_path: str,
    call_sites: list[DeploymentCallSite],
    follow_ups: dict[str, list[PostDeployInitializeCall]],
    matcher: InterfaceSignatureMatcher,
    require_deployment_key: bool = True,
    callee: str = "deployProxy",
    registry_name: str = "deployed",
) -> AuditReport:
    """Build the audit report, one row per call site in source order."""
    rows = [
        evaluate_call_site(
            site, follow_ups, matcher, require_deployment_key, callee, registry_name
        )
        for site in call_sites
    ]
    return AuditReport(script_path=script_path, rows=rows)
