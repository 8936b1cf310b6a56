"""Tests for literal-binding resolution."""

from initguard.models.script import LiteralKind
from initguard.static.bindings import LiteralBindingResolver

SOURCE = """
const ARGS = [owner, 100];
let OPTS = { initializer: false };
var NAME = "Vault";
export const EXPORTED = [1];
const computed = buildArgs();
const casted = [1, 2] as const;

async function main() {
  const inner = [a, b, c];
  const ARGS = [];
}
"""


class TestLiteralBindingResolver:
    """Test suite for LiteralBindingResolver."""

    def test_index_module_scope(self, parse) -> None:
        script = parse(SOURCE)
        bindings = LiteralBindingResolver().index(script)

        assert set(bindings) == {"ARGS", "OPTS", "EXPORTED"}
        assert bindings["ARGS"].kind == LiteralKind.ARRAY
        assert bindings["OPTS"].kind == LiteralKind.OBJECT
        assert bindings["ARGS"].line == 2

    def test_index_all_scopes_last_wins(self, parse) -> None:
        script = parse(SOURCE)
        resolver = LiteralBindingResolver(scope="all")
        bindings = resolver.index(script)

        assert "inner" in bindings
        assert bindings["ARGS"].line == 11

    def test_empty_tree(self, parse) -> None:
        assert LiteralBindingResolver().index(parse("")) == {}

    def test_resolve_literal_and_identifier(self, parse) -> None:
        script = parse(SOURCE + "\nf(ARGS, OPTS, [x], computed, NAME);\n")
        resolver = LiteralBindingResolver()
        resolver.index(script)

        call = [n for n in script.walk() if n.type == "call_expression"][-1]
        args = call.child_by_field_name("arguments").named_children
        ident_args, ident_opts, inline, computed, name = args

        assert resolver.resolve_array(ident_args, script).type == "array"
        assert resolver.resolve_object(ident_opts, script).type == "object"
        assert resolver.resolve_array(inline, script) is inline
        assert resolver.resolve_array(computed, script) is None
        assert resolver.resolve_array(name, script) is None

    def test_kind_mismatch_is_unresolved(self, parse) -> None:
        script = parse(SOURCE + "\nf(OPTS, ARGS);\n")
        resolver = LiteralBindingResolver()
        resolver.index(script)

        call = [n for n in script.walk() if n.type == "call_expression"][-1]
        opts, args = call.child_by_field_name("arguments").named_children
        assert resolver.resolve_array(opts, script) is None
        assert resolver.resolve_object(args, script) is None
        assert resolver.resolve_array(None, script) is None
