"""Models for static analysis of proxy deployment scripts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from tree_sitter import Node

    from initguard.static.parsers.typescript import ParsedScript


class LiteralKind(Enum):
    """Kinds of literal a variable binding can hold."""

    OBJECT = "object"
    ARRAY = "array"


@dataclass(frozen=True)
class LiteralBinding:
    """A variable declaration initialized to an object or array literal.

    Attributes:
        name: Declared variable name
        kind: Object or array literal
        node: The literal's syntax node
        line: Line of the declaration
    """

    name: str
    kind: LiteralKind
    node: Node
    line: int


class InitializerKind(Enum):
    """How a deployment call asks for its proxy to be initialized."""

    DEFAULT = "default"
    DISABLED = "disabled"
    NAMED = "named"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class InitializerIntent:
    """The initializer a deployment call requests.

    Attributes:
        kind: Intent kind
        value: Initializer name or signature for NAMED intents
    """

    kind: InitializerKind
    value: Optional[str] = None

    @classmethod
    def default(cls) -> InitializerIntent:
        return cls(InitializerKind.DEFAULT)

    @classmethod
    def disabled(cls) -> InitializerIntent:
        return cls(InitializerKind.DISABLED)

    @classmethod
    def named(cls, value: str) -> InitializerIntent:
        return cls(InitializerKind.NAMED, value)

    @classmethod
    def unresolved(cls) -> InitializerIntent:
        return cls(InitializerKind.UNRESOLVED)

    @property
    def has_signature(self) -> bool:
        """True if the named value carries an explicit parameter type list."""
        if self.kind != InitializerKind.NAMED or not self.value:
            return False
        compact = "".join(self.value.split())
        return "(" in compact and compact.endswith(")")

    def describe(self) -> str:
        """Short human readable form used in reports."""
        if self.kind == InitializerKind.DEFAULT:
            return "(default: initialize)"
        if self.kind == InitializerKind.DISABLED:
            return "false"
        if self.kind == InitializerKind.NAMED:
            return self.value or ""
        return "(unknown)"


@dataclass(frozen=True)
class DeploymentCallSite:
    """A proxy deployment call found in a script.

    Attributes:
        contract_name: Contract name literal, None when not a literal
        args_node: Args expression as written (None when absent)
        options_node: Options expression as written (None when absent)
        line: 1-based line of the call
        deployment_key: Registry field the result is assigned to, if any
        intent: Initializer intent resolved from the options
        args_count: Number of initializer args, None when not statically countable
    """

    contract_name: Optional[str]
    args_node: Optional[Node]
    options_node: Optional[Node]
    line: int
    deployment_key: Optional[str]
    intent: InitializerIntent
    args_count: Optional[int]

    @property
    def has_literal_name(self) -> bool:
        return self.contract_name is not None


@dataclass(frozen=True)
class RawInitializeCall:
    """An `<identifier>.initialize(...)` call before correlation."""

    receiver: str
    args_count: Optional[int]
    line: int


@dataclass(frozen=True)
class PostDeployInitializeCall:
    """An initialize call proven to target the proxy stored under a deployment key."""

    deployment_key: str
    args_count: Optional[int]
    line: int
    receiver: str = ""


@dataclass
class ScriptAnalysis:
    """Everything extracted from one deployment script.

    Attributes:
        file_path: Path to the analyzed script
        script: Parsed syntax tree
        bindings: Literal bindings by variable name
        deployments: Deployment call sites in source order
        initialize_calls: Raw initialize calls in source order
        follow_ups: Correlated initialize calls by deployment key
    """

    file_path: str
    script: ParsedScript
    bindings: dict[str, LiteralBinding] = field(default_factory=dict)
    deployments: list[DeploymentCallSite] = field(default_factory=list)
    initialize_calls: list[RawInitializeCall] = field(default_factory=list)
    follow_ups: dict[str, list[PostDeployInitializeCall]] = field(default_factory=dict)
