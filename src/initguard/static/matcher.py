"""Interface-signature matching for proxy initializers."""

from __future__ import annotations

import logging
from typing import Optional

from initguard.exceptions import ArtifactError
from initguard.models.interface import InterfaceDescriptor, MatchResult
from initguard.models.script import InitializerIntent, InitializerKind
from initguard.static.artifacts import ArtifactStore

logger = logging.getLogger(__name__)

DISABLED_SIGNATURE = "(disabled)"


def normalize_signature(sig: str) -> str:
    """Strip all whitespace from a function signature."""
    return "".join(sig.split())


class InterfaceSignatureMatcher:
    """Decide whether an initializer resolves to exactly one ABI function.

    Never picks a best guess: unresolvable inputs, missing artifacts,
    missing functions, arity mismatches and ambiguous overloads all fail.
    """

    def __init__(self, store: ArtifactStore, default_initializer: str = "initialize") -> None:
        """Initialize the matcher.

        Args:
            store: Source of contract interfaces
            default_initializer: Name used for DEFAULT intents
        """
        self.store = store
        self.default_initializer = default_initializer

    def match(
        self, contract_name: str, intent: InitializerIntent, args_count: Optional[int]
    ) -> MatchResult:
        """Match an initializer intent against a contract interface.

        Args:
            contract_name: Contract whose interface is searched
            intent: Requested initializer
            args_count: Observed argument count (None when unknown)

        Returns:
            MatchResult with the resolved signature or a failure reason
        """
        if intent.kind == InitializerKind.DISABLED:
            return MatchResult.passed(DISABLED_SIGNATURE)
        if intent.kind == InitializerKind.UNRESOLVED:
            return MatchResult.failed("initializer is not statically resolvable")
        if args_count is None:
            return MatchResult.failed(
                "initializer args are not statically countable (non-literal args array)"
            )

        try:
            interface = self.store.read_interface(contract_name)
        except ArtifactError as e:
            logger.debug("No interface for %s: %s", contract_name, e)
            return MatchResult.failed(str(e))

        if intent.kind == InitializerKind.NAMED:
            requested = normalize_signature(intent.value or "")
        else:
            requested = normalize_signature(self.default_initializer)

        if intent.has_signature:
            return self._match_signature(interface, requested, args_count)
        return self._match_name(interface, requested, args_count)

    def _match_signature(
        self, interface: InterfaceDescriptor, requested: str, args_count: int
    ) -> MatchResult:
        name = requested.split("(", 1)[0]
        matches = [fn for fn in interface.functions_named(name) if fn.signature == requested]

        if not matches:
            return MatchResult.failed(f'initializer signature "{requested}" not found in ABI')
        if len(matches) > 1:
            return MatchResult.failed(
                f'initializer signature "{requested}" appears {len(matches)} times in ABI'
            )

        expected = matches[0].arity
        if expected != args_count:
            return MatchResult.failed(
                f"args length mismatch: deployment args={args_count}, "
                f"initializer signature expects {expected}"
            )
        return MatchResult.passed(requested)

    def _match_name(
        self, interface: InterfaceDescriptor, name: str, args_count: int
    ) -> MatchResult:
        candidates = interface.functions_named(name)
        if not candidates:
            return MatchResult.failed(f'initializer "{name}" not found in ABI')

        arity_matches = [fn for fn in candidates if fn.arity == args_count]
        if not arity_matches:
            arities = ",".join(str(a) for a in sorted({fn.arity for fn in candidates}))
            return MatchResult.failed(
                f"no overload matches args length={args_count} (available arities={arities})"
            )
        if len(arity_matches) > 1:
            sigs = " | ".join(fn.signature for fn in arity_matches)
            return MatchResult.failed(
                f"ambiguous overload for args length={args_count}; "
                f"specify signature (candidates: {sigs})"
            )
        return MatchResult.passed(arity_matches[0].signature)
