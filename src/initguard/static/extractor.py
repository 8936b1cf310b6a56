"""Call-site extraction for proxy deployment scripts.

Collects two kinds of calls in a single walk of the tree:

- deployment calls: ``deployProxy(name, args, options)``
- explicit initialize calls: ``handle.initialize(...)`` on a plain identifier

Calls nested in conditionals or loops are extracted like any other; control
flow is not modelled.
"""

from __future__ import annotations

import logging
from typing import Optional

from tree_sitter import Node

from initguard.config import ScriptAuditConfig
from initguard.models.script import (
    DeploymentCallSite,
    InitializerIntent,
    RawInitializeCall,
)
from initguard.static.bindings import LiteralBindingResolver
from initguard.static.parsers.typescript import (
    ParsedScript,
    call_arguments,
    named_children,
)

logger = logging.getLogger(__name__)


class CallSiteExtractor:
    """Extract deployment and initialize call sites from a parsed script."""

    def __init__(self, config: ScriptAuditConfig, resolver: LiteralBindingResolver) -> None:
        """Initialize the extractor.

        Args:
            config: Script audit settings (callee names, registry name)
            resolver: Resolver already indexed for the script being extracted
        """
        self.config = config
        self.resolver = resolver

    def extract(
        self, script: ParsedScript
    ) -> tuple[list[DeploymentCallSite], list[RawInitializeCall]]:
        """Walk the tree once and collect call sites.

        Args:
            script: Parsed script

        Returns:
            Deployment call sites and raw initialize calls, in source order
        """
        deployments: list[DeploymentCallSite] = []
        initialize_calls: list[RawInitializeCall] = []

        for node in script.walk():
            if node.type != "call_expression":
                continue
            callee = node.child_by_field_name("function")
            if callee is None:
                continue

            if script.identifier_name(callee) == self.config.deploy_callee:
                deployments.append(self._parse_deployment(node, script))
            elif self._is_initialize_callee(callee, script):
                receiver = script.text(callee.child_by_field_name("object"))
                initialize_calls.append(
                    RawInitializeCall(
                        receiver=receiver,
                        args_count=self._count_call_args(node),
                        line=script.line(node),
                    )
                )

        logger.debug(
            "Found %d %s() calls and %d %s() calls in %s",
            len(deployments),
            self.config.deploy_callee,
            len(initialize_calls),
            self.config.initialize_method,
            script.file_path,
        )
        return deployments, initialize_calls

    def _is_initialize_callee(self, callee: Node, script: ParsedScript) -> bool:
        if callee.type != "member_expression":
            return False
        prop = callee.child_by_field_name("property")
        if prop is None or script.text(prop) != self.config.initialize_method:
            return False
        return script.identifier_name(callee.child_by_field_name("object")) is not None

    def _count_call_args(self, call: Node) -> Optional[int]:
        args = call_arguments(call)
        if any(arg.type == "spread_element" for arg in args):
            return None
        return len(args)

    def _parse_deployment(self, call: Node, script: ParsedScript) -> DeploymentCallSite:
        """Build a call site from a deployment call expression."""
        args = call_arguments(call)
        name_arg = args[0] if len(args) > 0 else None
        args_arg = args[1] if len(args) > 1 else None
        opts_arg = args[2] if len(args) > 2 else None

        return DeploymentCallSite(
            contract_name=script.string_value(name_arg),
            args_node=args_arg,
            options_node=opts_arg,
            line=script.line(call),
            deployment_key=self.find_deployment_key(call, script),
            intent=self._initializer_intent(opts_arg, script),
            args_count=self._count_initializer_args(args_arg, script),
        )

    def _count_initializer_args(self, args_arg: Optional[Node], script: ParsedScript) -> Optional[int]:
        # No args argument at all means no initializer args.
        if args_arg is None:
            return 0
        array = self.resolver.resolve_array(args_arg, script)
        if array is None:
            return None
        if any(el.type == "spread_element" for el in named_children(array)):
            return None
        return self._array_length(array)

    def _array_length(self, array: Node) -> int:
        # Holes (`[a, , b]`) have no node of their own, so count comma-separated slots.
        length = 0
        open_slot = False
        for child in array.children:
            if child.type in ("[", "]", "comment"):
                continue
            if child.type == ",":
                length += 1
                open_slot = False
            else:
                open_slot = True
        return length + 1 if open_slot else length

    def _initializer_intent(self, opts_arg: Optional[Node], script: ParsedScript) -> InitializerIntent:
        if opts_arg is None:
            return InitializerIntent.default()
        obj = self.resolver.resolve_object(opts_arg, script)
        if obj is None:
            return InitializerIntent.unresolved()

        # Later members override earlier ones, so a spread or shorthand after the
        # explicit property makes the effective value unknown. So does any member
        # whose key cannot be read statically (`[k]: false`).
        option = self.config.initializer_option
        intent = InitializerIntent.default()
        for member in named_children(obj):
            if member.type == "pair":
                key = member.child_by_field_name("key")
                name = self._property_name(key, script)
                if name is None:
                    intent = InitializerIntent.unresolved()
                elif name == option:
                    intent = self._intent_from_value(member.child_by_field_name("value"), script)
            elif member.type == "method_definition":
                name = self._property_name(member.child_by_field_name("name"), script)
                if name is None or name == option:
                    intent = InitializerIntent.unresolved()
            elif member.type == "spread_element" or (
                member.type == "shorthand_property_identifier" and script.text(member) == option
            ):
                intent = InitializerIntent.unresolved()
        return intent

    def _intent_from_value(self, value: Optional[Node], script: ParsedScript) -> InitializerIntent:
        if value is not None and value.type == "false":
            return InitializerIntent.disabled()
        name = script.string_value(value)
        if name is not None:
            return InitializerIntent.named(name)
        return InitializerIntent.unresolved()

    def _property_name(self, key: Optional[Node], script: ParsedScript) -> Optional[str]:
        """Static name of an object key, None when it is computed at runtime."""
        if key is None:
            return None
        if key.type in ("property_identifier", "number"):
            return script.text(key)
        if key.type == "computed_property_name":
            inner = named_children(key)
            return script.string_value(inner[0]) if len(inner) == 1 else None
        return script.string_value(key)

    def find_deployment_key(self, call: Node, script: ParsedScript) -> Optional[str]:
        """Find K in an enclosing `deployed.K = (await) call` assignment.

        Args:
            call: Deployment call expression
            script: Parsed script

        Returns:
            The registry key, or None if the call is not assigned to one
        """
        current: Optional[Node] = call
        while current is not None:
            if current.type == "assignment_expression":
                key = script.member_key(
                    current.child_by_field_name("left"), self.config.registry_name
                )
                if key is not None:
                    return key
            current = current.parent
        return None
