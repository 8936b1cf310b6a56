"""Tests for the command line interface."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from initguard.cli import EXIT_FATAL, cli
from initguard.exceptions import ParseError

pytestmark = pytest.mark.slow

GOOD_SCRIPT = """
async function main() {
  deployed.Widget = await deployProxy("Widget", [], { initializer: false });
  const w = await ethers.getContractAt("Widget", deployed.Widget);
  await w.initialize(ownerAddr);
}
"""

BAD_SCRIPT = 'deployed.Widget = await deployProxy("Widget", [a, b]);\n'


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, abi_fn) -> Path:
    artifact_dir = tmp_path / "artifacts" / "contracts" / "Widget.sol"
    artifact_dir.mkdir(parents=True)
    (artifact_dir / "Widget.json").write_text(
        json.dumps({"contractName": "Widget", "abi": [abi_fn("initialize", "address")]})
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestAuditInitializers:
    """audit-initializers command."""

    def test_pass(self, runner: CliRunner, project: Path) -> None:
        (project / "deploy.ts").write_text(GOOD_SCRIPT)
        result = runner.invoke(cli, ["audit-initializers", "deploy.ts"])

        assert result.exit_code == 0, result.output
        assert "| 1 | 3 | Widget | Widget | false | 0 | initialize(address) | OK |" in result.output
        assert "Summary: OK=1, FAIL=0, TOTAL=1" in result.output

    def test_fail(self, runner: CliRunner, project: Path) -> None:
        (project / "deploy.ts").write_text(BAD_SCRIPT)
        result = runner.invoke(cli, ["audit-initializers", "deploy.ts", "-o", "console"])

        assert result.exit_code == 1
        assert "Summary: OK=0, FAIL=1, TOTAL=1" in result.output

    def test_explicit_artifacts(self, runner: CliRunner, project: Path) -> None:
        (project / "deploy.ts").write_text(GOOD_SCRIPT)
        empty = project / "elsewhere"
        empty.mkdir()
        result = runner.invoke(
            cli, ["audit-initializers", "deploy.ts", "--artifacts", str(empty)]
        )
        assert result.exit_code == 1
        assert "artifact not found" in result.output

    def test_parse_error_is_fatal(self, runner: CliRunner, project: Path) -> None:
        (project / "deploy.ts").write_text('deployProxy("Widget", [;\n')
        result = runner.invoke(cli, ["audit-initializers", "deploy.ts"])

        assert result.exit_code == EXIT_FATAL
        assert "Error:" in result.output
        assert "syntax error" in result.output

    def test_debug_reraises(self, runner: CliRunner, project: Path) -> None:
        (project / "deploy.ts").write_text('deployProxy("Widget", [;\n')
        result = runner.invoke(cli, ["--debug", "audit-initializers", "deploy.ts"])
        assert isinstance(result.exception, ParseError)

    def test_invalid_config_is_fatal(self, runner: CliRunner, project: Path) -> None:
        (project / "deploy.ts").write_text(GOOD_SCRIPT)
        (project / "initguard.toml").write_text('[script]\nbinding_scope = "nope"\n')
        result = runner.invoke(cli, ["audit-initializers", "deploy.ts"])
        assert result.exit_code == EXIT_FATAL
        assert "invalid configuration" in result.output

    def test_config_file_option(self, runner: CliRunner, project: Path) -> None:
        (project / "deploy.ts").write_text(BAD_SCRIPT.replace("deployProxy", "deployUpgradeable"))
        config = project / "custom.toml"
        config.write_text('[script]\ndeploy_callee = "deployUpgradeable"\n')
        result = runner.invoke(
            cli, ["audit-initializers", "deploy.ts", "--config", str(config)]
        )
        assert result.exit_code == 1
        assert "TOTAL=1" in result.output

    def test_missing_script(self, runner: CliRunner, project: Path) -> None:
        result = runner.invoke(cli, ["audit-initializers", "nope.ts"])
        assert result.exit_code == 2


class TestCacheGates:
    """cache-gates command."""

    def test_pass(self, runner: CliRunner, tmp_path: Path) -> None:
        contracts = tmp_path / "contracts"
        contracts.mkdir()
        (contracts / "Vault.sol").write_text(
            "contract Vault {\n"
            "    function refreshModuleCache() external {\n"
            "        _requireCacheMaintainer(KEY_CACHE_MAINTENANCE_MANAGER);\n"
            "        ModuleCache.set(cache, K, v);\n"
            "    }\n"
            "}\n"
        )
        result = runner.invoke(cli, ["cache-gates", str(contracts)])

        assert result.exit_code == 0, result.output
        assert "## refreshModuleCache() implementations" in result.output
        assert "ModuleCache.set(...) callsite (write)" in result.output
        assert "PASS" in result.output

    def test_fail(self, runner: CliRunner, tmp_path: Path) -> None:
        contracts = tmp_path / "contracts"
        contracts.mkdir()
        (contracts / "Pool.sol").write_text(
            "contract Pool {\n    function refreshModuleCache() external {\n    }\n}\n"
        )
        result = runner.invoke(cli, ["cache-gates", str(contracts)])

        assert result.exit_code == 1
        assert "## FAILURES" in result.output
        assert "Pool.sol" in result.output

    def test_exclude(self, runner: CliRunner, tmp_path: Path) -> None:
        contracts = tmp_path / "contracts"
        (contracts / "mocks").mkdir(parents=True)
        (contracts / "mocks" / "Pool.sol").write_text(
            "contract Pool {\n    function refreshModuleCache() external {\n    }\n}\n"
        )
        result = runner.invoke(cli, ["cache-gates", str(contracts), "--exclude", "**/mocks/**"])
        assert result.exit_code == 0


def test_rules_command(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["rules"])
    assert result.exit_code == 0
    assert "CACHE_REFRESH_GATE" in result.output
    assert "CACHE_STORE_WRITE" in result.output
