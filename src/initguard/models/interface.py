"""Models for compiled contract interfaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class AbiFunction:
    """A function exposed by a contract ABI.

    Attributes:
        name: Function name
        parameter_types: Canonical parameter types, in order
    """

    name: str
    parameter_types: tuple[str, ...] = ()

    @property
    def arity(self) -> int:
        return len(self.parameter_types)

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.parameter_types)})"


@dataclass(frozen=True)
class InterfaceDescriptor:
    """The functions a compiled contract exposes.

    Attributes:
        contract_name: Contract name as requested
        functions: ABI functions in declaration order
        source_path: Artifact file the interface was read from
    """

    contract_name: str
    functions: tuple[AbiFunction, ...] = field(default_factory=tuple)
    source_path: str = ""

    def functions_named(self, name: str) -> list[AbiFunction]:
        return [fn for fn in self.functions if fn.name == name]


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching an initializer against an interface.

    Attributes:
        ok: True if exactly one function matched
        signature: The matched signature (or "(disabled)")
        reason: Why matching failed
    """

    ok: bool
    signature: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def passed(cls, signature: str) -> MatchResult:
        return cls(ok=True, signature=signature)

    @classmethod
    def failed(cls, reason: str) -> MatchResult:
        return cls(ok=False, reason=reason)
