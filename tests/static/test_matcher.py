"""Tests for interface-signature matching."""

import pytest

from initguard.models.script import InitializerIntent
from initguard.static.matcher import InterfaceSignatureMatcher, normalize_signature


@pytest.fixture
def matcher(store, write_artifact, abi_fn) -> InterfaceSignatureMatcher:
    write_artifact("Widget", [abi_fn("initialize", "address")])
    write_artifact(
        "Vault",
        [
            abi_fn("initialize", "address"),
            abi_fn("initialize", "address", "uint256"),
            abi_fn("initialize", "bytes32", "uint256"),
            abi_fn("setup", "address"),
        ],
    )
    return InterfaceSignatureMatcher(store)


def test_normalize_signature() -> None:
    assert normalize_signature(" initialize( address , uint256 ) ") == "initialize(address,uint256)"


class TestMatchByName:
    """DEFAULT and bare-name intents."""

    def test_unique_overload(self, matcher) -> None:
        result = matcher.match("Widget", InitializerIntent.default(), 1)
        assert result.ok
        assert result.signature == "initialize(address)"

    def test_arity_mismatch_lists_arities(self, matcher) -> None:
        result = matcher.match("Widget", InitializerIntent.default(), 3)
        assert not result.ok
        assert result.reason == "no overload matches args length=3 (available arities=1)"

    def test_ambiguous_overload_never_guesses(self, matcher) -> None:
        result = matcher.match("Vault", InitializerIntent.default(), 2)
        assert not result.ok
        assert result.signature is None
        assert "ambiguous overload for args length=2" in result.reason
        assert "initialize(address,uint256) | initialize(bytes32,uint256)" in result.reason

    def test_named_function(self, matcher) -> None:
        result = matcher.match("Vault", InitializerIntent.named("setup"), 1)
        assert result.ok
        assert result.signature == "setup(address)"

    def test_missing_function(self, matcher) -> None:
        result = matcher.match("Widget", InitializerIntent.named("setup"), 1)
        assert result.reason == 'initializer "setup" not found in ABI'

    def test_custom_default_initializer(self, store, write_artifact, abi_fn) -> None:
        write_artifact("Legacy", [abi_fn("init", "address")])
        matcher = InterfaceSignatureMatcher(store, default_initializer="init")
        assert matcher.match("Legacy", InitializerIntent.default(), 1).signature == "init(address)"


class TestMatchBySignature:
    """Explicit signatures are exact."""

    def test_exact_signature(self, matcher) -> None:
        intent = InitializerIntent.named("initialize(bytes32, uint256)")
        result = matcher.match("Vault", intent, 2)
        assert result.ok
        assert result.signature == "initialize(bytes32,uint256)"

    def test_signature_not_in_abi(self, matcher) -> None:
        result = matcher.match("Vault", InitializerIntent.named("initialize(uint256)"), 1)
        assert result.reason == 'initializer signature "initialize(uint256)" not found in ABI'

    def test_signature_arity_mismatch(self, matcher) -> None:
        result = matcher.match("Vault", InitializerIntent.named("initialize(address)"), 2)
        assert result.reason == (
            "args length mismatch: deployment args=2, initializer signature expects 1"
        )


class TestUnauditableInputs:
    """Unknown inputs fail rather than pass."""

    def test_disabled_passes_without_artifact(self, matcher) -> None:
        result = matcher.match("Missing", InitializerIntent.disabled(), None)
        assert result.ok
        assert result.signature == "(disabled)"

    def test_unresolved_intent(self, matcher) -> None:
        result = matcher.match("Widget", InitializerIntent.unresolved(), 1)
        assert result.reason == "initializer is not statically resolvable"

    def test_unknown_args_count(self, matcher) -> None:
        result = matcher.match("Widget", InitializerIntent.default(), None)
        assert not result.ok
        assert "not statically countable" in result.reason

    def test_missing_artifact(self, matcher) -> None:
        result = matcher.match("Ghost", InitializerIntent.default(), 0)
        assert not result.ok
        assert result.reason.startswith('artifact not found for "Ghost"')

    def test_empty_name_is_not_the_default(self, matcher) -> None:
        result = matcher.match("Widget", InitializerIntent.named(""), 1)
        assert not result.ok
        assert result.reason == 'initializer "" not found in ABI'
