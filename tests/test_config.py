"""Tests for configuration loading."""

from pathlib import Path

import pytest

from initguard.config import InitGuardConfig, ScriptAuditConfig, load_config
from initguard.exceptions import ConfigError


class TestDefaults:
    def test_defaults(self) -> None:
        config = InitGuardConfig()
        assert config.script.deploy_callee == "deployProxy"
        assert config.script.binding_scope == "module"
        assert config.script.require_deployment_key is True
        assert config.script.handle_factory_parts == ("ethers", "getContractAt")
        assert config.cache_gates.write_methods == ["set", "batchSet", "remove"]
        assert config.is_rule_enabled("CACHE_REFRESH_GATE")

    def test_resolve_artifact_paths(self, tmp_path: Path) -> None:
        config = InitGuardConfig.model_validate(
            {"artifacts": {"paths": ["build/artifacts", str(tmp_path / "abs")]}}
        )
        assert config.resolve_artifact_paths(tmp_path) == [
            tmp_path / "build" / "artifacts",
            tmp_path / "abs",
        ]

    def test_invalid_handle_factory(self) -> None:
        with pytest.raises(ValueError):
            ScriptAuditConfig(handle_factory="getContractAt")


class TestLoadConfig:
    """Config file discovery and validation."""

    def test_no_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_config(start=tmp_path) == InitGuardConfig()

    def test_dedicated_file(self, tmp_path: Path) -> None:
        (tmp_path / "initguard.toml").write_text(
            '[script]\ndeploy_callee = "deployUpgradeable"\n\n'
            '[cache_gates]\nentrypoint = "rebuildCache"\n'
        )
        config = load_config(start=tmp_path)
        assert config.script.deploy_callee == "deployUpgradeable"
        assert config.cache_gates.entrypoint == "rebuildCache"

    def test_pyproject_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "x"\n\n[tool.initguard]\ndisabled_rules = ["CACHE_STORE_WRITE"]\n'
        )
        config = load_config(start=tmp_path)
        assert not config.is_rule_enabled("CACHE_STORE_WRITE")

    def test_dedicated_file_wins(self, tmp_path: Path) -> None:
        (tmp_path / "initguard.toml").write_text('disabled_rules = ["A"]\n')
        (tmp_path / "pyproject.toml").write_text('[tool.initguard]\ndisabled_rules = ["B"]\n')
        assert load_config(start=tmp_path).disabled_rules == ["A"]

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        path.write_text('[script]\nbinding_scope = "all"\n')
        assert load_config(path).script.binding_scope == "all"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[script\n")
        with pytest.raises(ConfigError, match="cannot read config file"):
            load_config(path)

    def test_invalid_values(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text('[script]\nbinding_scope = "function"\n')
        with pytest.raises(ConfigError, match="invalid configuration"):
            load_config(path)
