"""Deployment-key correlation.

Resolves the chain::

    deployed.K = await deployProxy("X", [], { initializer: false });
    const v = await ethers.getContractAt("X", deployed.K);
    await v.initialize(owner);

into ``{"K": [PostDeployInitializeCall(args_count=1, ...)]}``.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from tree_sitter import Node

from initguard.config import ScriptAuditConfig
from initguard.models.script import PostDeployInitializeCall, RawInitializeCall
from initguard.static.parsers.typescript import ParsedScript, call_arguments, unwrap_await

logger = logging.getLogger(__name__)


class DeploymentKeyCorrelator:
    """Correlate explicit initialize calls with deployment keys."""

    def __init__(self, config: ScriptAuditConfig) -> None:
        self.config = config

    def collect_handle_bindings(self, script: ParsedScript) -> dict[str, str]:
        """Map variables obtained as handles at `deployed.K` to K.

        Args:
            script: Parsed script

        Returns:
            Mapping of variable name to deployment key
        """
        bindings: dict[str, str] = {}
        for node in script.walk():
            if node.type != "variable_declarator":
                continue
            name = script.identifier_name(node.child_by_field_name("name"))
            if name is None:
                continue
            key = self._handle_key(unwrap_await(node.child_by_field_name("value")), script)
            if key is not None:
                bindings[name] = key
        return bindings

    def correlate(
        self,
        script: ParsedScript,
        deployment_keys: Iterable[str],
        initialize_calls: list[RawInitializeCall],
    ) -> dict[str, list[PostDeployInitializeCall]]:
        """Find the initialize calls made on each deployment key's proxy.

        Args:
            script: Parsed script
            deployment_keys: Keys of the deployments being audited
            initialize_calls: Raw initialize calls from the extractor

        Returns:
            Follow-up calls by key. Keys with no follow-up call are absent.
        """
        wanted = set(deployment_keys)
        handles = self.collect_handle_bindings(script)

        follow_ups: dict[str, list[PostDeployInitializeCall]] = {}
        for call in initialize_calls:
            key = handles.get(call.receiver)
            if key is None or key not in wanted:
                continue
            follow_ups.setdefault(key, []).append(
                PostDeployInitializeCall(
                    deployment_key=key,
                    args_count=call.args_count,
                    line=call.line,
                    receiver=call.receiver,
                )
            )

        logger.debug(
            "Correlated %d handle variables, follow-up calls for %s",
            len(handles),
            sorted(follow_ups) or "no keys",
        )
        return follow_ups

    def _handle_key(self, value: Optional[Node], script: ParsedScript) -> Optional[str]:
        if value is None or value.type != "call_expression":
            return None
        callee = value.child_by_field_name("function")
        if callee is None or callee.type != "member_expression":
            return None

        factory_object, factory_method = self.config.handle_factory_parts
        prop = callee.child_by_field_name("property")
        if script.identifier_name(callee.child_by_field_name("object")) != factory_object:
            return None
        if prop is None or script.text(prop) != factory_method:
            return None

        args = call_arguments(value)
        if len(args) < 2:
            return None
        return script.member_key(args[1], self.config.registry_name)
