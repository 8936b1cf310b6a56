"""Configuration for initguard.

Settings are read from an explicit TOML file, from ``initguard.toml`` or from
the ``[tool.initguard]`` table of ``pyproject.toml``. Every setting has a
default matching a Hardhat + OpenZeppelin upgrades project.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from initguard.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "initguard.toml"
PYPROJECT_FILENAME = "pyproject.toml"


class ScriptAuditConfig(BaseModel):
    """How deployment scripts are read."""

    deploy_callee: str = Field("deployProxy", description="Name of the proxy deployment helper")
    registry_name: str = Field("deployed", description="Object that records deployed addresses by key")
    handle_factory: str = Field(
        "ethers.getContractAt", description="Call that obtains a contract handle at an address"
    )
    initialize_method: str = Field("initialize", description="Method name of explicit initialize calls")
    default_initializer: str = Field("initialize", description="Initializer used when none is named")
    initializer_option: str = Field("initializer", description="Options key naming the initializer")
    binding_scope: Literal["module", "all"] = Field(
        "module", description="Index literal bindings at module scope only, or everywhere"
    )
    require_deployment_key: bool = Field(
        True, description="Fail deployments whose result is not stored under a registry key"
    )

    @field_validator("handle_factory")
    @classmethod
    def validate_handle_factory(cls, v: str) -> str:
        parts = v.split(".")
        if len(parts) != 2 or not all(parts):
            raise ValueError("handle_factory must look like 'object.method'")
        return v

    @property
    def handle_factory_parts(self) -> tuple[str, str]:
        obj, method = self.handle_factory.split(".")
        return obj, method


class ArtifactsConfig(BaseModel):
    """Where compiled contract artifacts live."""

    paths: list[Path] = Field(
        default_factory=lambda: [Path("artifacts"), Path("out")],
        description="Artifact directories (Hardhat 'artifacts', Foundry 'out')",
    )


class CacheGateConfig(BaseModel):
    """Patterns used by the cache gating rules."""

    entrypoint: str = "refreshModuleCache"
    key_markers: list[str] = Field(
        default_factory=lambda: ["KEY_CACHE_MAINTENANCE_MANAGER", "CACHE_MAINTENANCE_MANAGER"]
    )
    sender_gates: list[str] = Field(
        default_factory=lambda: [
            "msg.sender != maint",
            "msg.sender==maint",
            "msg.sender == maint",
            "_requireCacheMaintainer(",
            "Only CacheMaintenanceManager can refresh",
        ]
    )
    store_library: str = "ModuleCache"
    write_methods: list[str] = Field(default_factory=lambda: ["set", "batchSet", "remove"])
    include: list[str] = Field(default_factory=lambda: ["**/*.sol"])
    exclude: list[str] = Field(default_factory=list)


class InitGuardConfig(BaseModel):
    """Top-level configuration."""

    script: ScriptAuditConfig = Field(default_factory=ScriptAuditConfig)
    artifacts: ArtifactsConfig = Field(default_factory=ArtifactsConfig)
    cache_gates: CacheGateConfig = Field(default_factory=CacheGateConfig)
    disabled_rules: list[str] = Field(default_factory=list)

    def is_rule_enabled(self, rule_id: str) -> bool:
        return rule_id not in self.disabled_rules

    def resolve_artifact_paths(self, base: Path) -> list[Path]:
        """Return artifact paths, relative ones anchored at ``base``."""
        return [p if p.is_absolute() else base / p for p in self.artifacts.paths]


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e


def load_config(path: Path | None = None, start: Path | None = None) -> InitGuardConfig:
    """Load configuration.

    Args:
        path: Explicit TOML file; its top level is the config table
        start: Directory searched for initguard.toml / pyproject.toml

    Returns:
        Validated configuration (defaults if no file is found)

    Raises:
        ConfigError: If the file cannot be read or fails validation
    """
    data: dict[str, Any] = {}
    if path is not None:
        data = _read_toml(path)
        source = str(path)
    else:
        directory = start or Path.cwd()
        dedicated = directory / CONFIG_FILENAME
        pyproject = directory / PYPROJECT_FILENAME
        if dedicated.is_file():
            data = _read_toml(dedicated)
            source = str(dedicated)
        elif pyproject.is_file():
            data = _read_toml(pyproject).get("tool", {}).get("initguard", {})
            source = f"{pyproject} [tool.initguard]"
        else:
            source = "defaults"

    try:
        config = InitGuardConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration in {source}: {e}") from e

    logger.debug("Loaded configuration from %s", source)
    return config
