"""Literal-binding resolution.

Maps variable names to the object/array literal they are declared with, so
that `deployProxy("X", args, opts)` can be audited when `args` or `opts` are
identifiers rather than inline literals. Resolution is purely syntactic: only
declarations whose initializer *is* a literal are indexed, and nested-scope
shadowing is not modelled.
"""

from __future__ import annotations

import logging
from typing import Iterator, Optional

from tree_sitter import Node

from initguard.models.script import LiteralBinding, LiteralKind
from initguard.static.parsers.typescript import ParsedScript, named_children

logger = logging.getLogger(__name__)

DECLARATION_TYPES: set[str] = {"lexical_declaration", "variable_declaration"}

LITERAL_KINDS: dict[str, LiteralKind] = {
    "object": LiteralKind.OBJECT,
    "array": LiteralKind.ARRAY,
}


class LiteralBindingResolver:
    """Index and resolve literal variable bindings.

    Args:
        scope: "module" to index top-level declarations only, "all" to index
            every declaration in the file (last declaration wins)
    """

    def __init__(self, scope: str = "module") -> None:
        self.scope = scope
        self.bindings: dict[str, LiteralBinding] = {}

    def index(self, script: ParsedScript) -> dict[str, LiteralBinding]:
        """Build the name -> literal table for a script.

        Args:
            script: Parsed script

        Returns:
            Mapping of variable name to its literal binding (may be empty)
        """
        bindings: dict[str, LiteralBinding] = {}
        for declarator in self._declarators(script):
            name = script.identifier_name(declarator.child_by_field_name("name"))
            value = declarator.child_by_field_name("value")
            if name is None or value is None:
                continue
            kind = LITERAL_KINDS.get(value.type)
            if kind is None:
                continue
            bindings[name] = LiteralBinding(
                name=name, kind=kind, node=value, line=script.line(declarator)
            )

        logger.debug("Indexed %d literal bindings in %s", len(bindings), script.file_path)
        self.bindings = bindings
        return bindings

    def resolve_array(self, node: Optional[Node], script: ParsedScript) -> Optional[Node]:
        """Return the array literal `node` denotes, or None if it is not one."""
        return self._resolve(node, script, LiteralKind.ARRAY)

    def resolve_object(self, node: Optional[Node], script: ParsedScript) -> Optional[Node]:
        """Return the object literal `node` denotes, or None if it is not one."""
        return self._resolve(node, script, LiteralKind.OBJECT)

    def _resolve(
        self, node: Optional[Node], script: ParsedScript, kind: LiteralKind
    ) -> Optional[Node]:
        if node is None:
            return None
        if LITERAL_KINDS.get(node.type) == kind:
            return node
        name = script.identifier_name(node)
        if name is None:
            return None
        binding = self.bindings.get(name)
        if binding is None or binding.kind != kind:
            return None
        return binding.node

    def _declarators(self, script: ParsedScript) -> Iterator[Node]:
        if self.scope == "all":
            for node in script.walk():
                if node.type == "variable_declarator":
                    yield node
            return

        for statement in named_children(script.root):
            if statement.type == "export_statement":
                declaration = statement.child_by_field_name("declaration")
                if declaration is None:
                    continue
                statement = declaration
            if statement.type in DECLARATION_TYPES:
                for child in named_children(statement):
                    if child.type == "variable_declarator":
                        yield child
