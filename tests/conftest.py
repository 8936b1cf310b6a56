"""Pytest configuration and fixtures."""

import json
from pathlib import Path
from typing import Callable

import pytest

from initguard.config import InitGuardConfig
from initguard.static.analyzer import InitializerAuditor
from initguard.static.artifacts import ArtifactStore
from initguard.static.parsers.typescript import ParsedScript, ScriptParser


def _abi_function(name: str, *types: str) -> dict:
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": f"arg{i}", "type": t} for i, t in enumerate(types)],
        "outputs": [],
        "stateMutability": "nonpayable",
    }


@pytest.fixture
def abi_fn() -> Callable[..., dict]:
    """Build an ABI function entry: abi_fn("initialize", "address")."""
    return _abi_function


@pytest.fixture
def artifacts_dir(tmp_path: Path) -> Path:
    """Empty Hardhat-style artifacts directory."""
    path = tmp_path / "artifacts"
    (path / "contracts").mkdir(parents=True)
    return path


@pytest.fixture
def write_artifact(artifacts_dir: Path) -> Callable[..., Path]:
    """Write artifacts/contracts/<Name>.sol/<Name>.json with the given ABI."""

    def _write(contract_name: str, abi: list[dict], source_dir: str | None = None) -> Path:
        folder = artifacts_dir / "contracts" / (source_dir or f"{contract_name}.sol")
        folder.mkdir(parents=True, exist_ok=True)
        artifact = folder / f"{contract_name}.json"
        artifact.write_text(
            json.dumps(
                {
                    "_format": "hh-sol-artifact-1",
                    "contractName": contract_name,
                    "sourceName": f"contracts/{contract_name}.sol",
                    "abi": abi,
                    "bytecode": "0x",
                }
            )
        )
        (folder / f"{contract_name}.dbg.json").write_text(json.dumps({"buildInfo": "x"}))
        return artifact

    return _write


@pytest.fixture
def store(artifacts_dir: Path) -> ArtifactStore:
    return ArtifactStore([artifacts_dir])


@pytest.fixture
def auditor(store: ArtifactStore) -> InitializerAuditor:
    return InitializerAuditor(InitGuardConfig(), store)


@pytest.fixture
def parse() -> Callable[[str], ParsedScript]:
    parser = ScriptParser()
    return lambda source: parser.parse_source(source, "deploy.ts")


@pytest.fixture
def widget_single(write_artifact: Callable[..., Path]) -> Path:
    """Widget exposing only initialize(address)."""
    return write_artifact("Widget", [_abi_function("initialize", "address")])
