"""Parser for TypeScript/JavaScript deployment scripts using tree-sitter.

The parser produces a read-only syntax tree plus the small set of node
helpers the analysis passes share (text, line numbers, literal values).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Node, Parser, Tree

from initguard.exceptions import ParseError
from initguard.models.core import SourceLocation

logger = logging.getLogger(__name__)

_PARSERS: dict[str, Parser] = {}

# Extensions parsed with the TSX grammar; everything else uses plain TypeScript.
TSX_SUFFIXES: set[str] = {".tsx", ".jsx"}

STRING_NODE_TYPES: set[str] = {"string", "template_string"}


def _get_parser(dialect: str) -> Parser:
    """Return a cached tree-sitter parser for "typescript" or "tsx"."""
    parser = _PARSERS.get(dialect)
    if parser is None:
        if dialect == "tsx":
            lang = Language(ts_typescript.language_tsx())
        else:
            lang = Language(ts_typescript.language_typescript())
        parser = Parser(lang)
        _PARSERS[dialect] = parser
    return parser


@dataclass(frozen=True)
class ParsedScript:
    """An immutable parse of one script.

    Attributes:
        file_path: Path used for reporting
        source: Raw source bytes the tree was built from
        tree: tree-sitter syntax tree
    """

    file_path: str
    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf8", errors="replace")

    def line(self, node: Node) -> int:
        return node.start_point[0] + 1

    def location(self, node: Node) -> SourceLocation:
        lines = self.source.decode("utf8", errors="replace").split("\n")
        line_number = self.line(node)
        return SourceLocation(
            file_path=self.file_path,
            line_number=line_number,
            column=node.start_point[1] + 1,
            line_content=lines[line_number - 1].strip() if line_number <= len(lines) else "",
        )

    def walk(self, node: Optional[Node] = None) -> Iterator[Node]:
        """Yield every node of the tree in source order (pre-order)."""
        stack = [node or self.root]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    def string_value(self, node: Optional[Node]) -> Optional[str]:
        """Return the value of a string literal node.

        Only plain string literals and template strings without
        substitutions count; anything else returns None.
        """
        if node is None or node.type not in STRING_NODE_TYPES:
            return None
        if node.type == "template_string" and any(
            child.type == "template_substitution" for child in node.named_children
        ):
            return None
        return self.text(node)[1:-1]

    def identifier_name(self, node: Optional[Node]) -> Optional[str]:
        if node is not None and node.type == "identifier":
            return self.text(node)
        return None

    def member_key(self, node: Optional[Node], object_name: str) -> Optional[str]:
        """Return K for `object_name.K` or `object_name["K"]`, else None."""
        if node is None:
            return None
        if node.type == "member_expression":
            if self.identifier_name(node.child_by_field_name("object")) != object_name:
                return None
            prop = node.child_by_field_name("property")
            return self.text(prop) if prop is not None else None
        if node.type == "subscript_expression":
            if self.identifier_name(node.child_by_field_name("object")) != object_name:
                return None
            return self.string_value(node.child_by_field_name("index"))
        return None


def unwrap_await(node: Optional[Node]) -> Optional[Node]:
    """Return the operand of an await expression, or the node itself."""
    if node is not None and node.type == "await_expression":
        operands = named_children(node)
        return operands[0] if operands else None
    return node


def named_children(node: Node) -> list[Node]:
    """Named children without comments (tree-sitter keeps them as extras)."""
    return [child for child in node.named_children if child.type != "comment"]


def call_arguments(call: Node) -> list[Node]:
    """Positional argument nodes of a call expression."""
    args = call.child_by_field_name("arguments")
    if args is None:
        return []
    return named_children(args)


class ScriptParser:
    """Parser for deployment scripts using the tree-sitter TypeScript grammar."""

    def parse_file(self, file_path: Path) -> ParsedScript:
        """Parse a deployment script file.

        Args:
            file_path: Path to the script

        Returns:
            ParsedScript for the file

        Raises:
            ParseError: If the file cannot be read or contains syntax errors
        """
        try:
            source = file_path.read_bytes()
        except OSError as e:
            raise ParseError(f"cannot read script {file_path}: {e}", str(file_path)) from e
        dialect = "tsx" if file_path.suffix.lower() in TSX_SUFFIXES else "typescript"
        return self.parse_source(source, str(file_path), dialect=dialect)

    def parse_source(
        self, source: str | bytes, file_path: str = "<source>", dialect: str = "typescript"
    ) -> ParsedScript:
        """Parse script source code.

        Args:
            source: Script source
            file_path: Path for error reporting
            dialect: "typescript" or "tsx"

        Returns:
            ParsedScript for the source

        Raises:
            ParseError: If the source contains syntax errors
        """
        raw = source.encode("utf8") if isinstance(source, str) else source
        tree = _get_parser(dialect).parse(raw)
        script = ParsedScript(file_path=file_path, source=raw, tree=tree)

        if tree.root_node.has_error:
            error_node = self._first_error(script)
            line = script.line(error_node) if error_node is not None else None
            where = f" at line {line}" if line is not None else ""
            raise ParseError(f"syntax error in {file_path}{where}", file_path, line)

        logger.debug("Parsed %s (%d bytes, %s grammar)", file_path, len(raw), dialect)
        return script

    def _first_error(self, script: ParsedScript) -> Optional[Node]:
        for node in script.walk():
            if node.type == "ERROR" or node.is_missing:
                return node
        return None
