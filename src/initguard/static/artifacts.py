"""Contract artifact store.

Reads interface descriptors (ABIs) from Hardhat ``artifacts/`` and Foundry
``out/`` directories. Lookups are memoised for the life of the store, which is
one analysis run.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath
from typing import Any

from initguard.exceptions import ArtifactError
from initguard.models.interface import AbiFunction, InterfaceDescriptor

logger = logging.getLogger(__name__)

# Directories inside an artifact root that never hold contract artifacts
SKIPPED_DIRS: set[str] = {"build-info", "cache"}


def canonical_type(param: dict[str, Any]) -> str:
    """Return the canonical ABI type of a parameter.

    Tuples are expanded to ``(t1,t2)`` and keep any array suffix, so
    ``tuple[]`` with address/uint256 components becomes ``(address,uint256)[]``.
    """
    abi_type = str(param.get("type", ""))
    if not abi_type.startswith("tuple"):
        return abi_type
    suffix = abi_type[len("tuple") :]
    inner = ",".join(canonical_type(c) for c in param.get("components") or [])
    return f"({inner}){suffix}"


def parse_abi(contract_name: str, abi: list[Any], source_path: str = "") -> InterfaceDescriptor:
    """Build an interface descriptor from a raw ABI list."""
    functions = tuple(
        AbiFunction(
            name=entry["name"],
            parameter_types=tuple(canonical_type(p) for p in entry.get("inputs") or []),
        )
        for entry in abi
        if isinstance(entry, dict)
        and entry.get("type") == "function"
        and isinstance(entry.get("name"), str)
    )
    return InterfaceDescriptor(
        contract_name=contract_name, functions=functions, source_path=source_path
    )


class ArtifactStore:
    """Look up compiled contract interfaces by contract name.

    Args:
        roots: Artifact directories to search; missing ones are ignored
    """

    def __init__(self, roots: list[Path]) -> None:
        self.roots = roots
        self._index: dict[str, list[Path]] | None = None
        self._cache: dict[str, InterfaceDescriptor | ArtifactError] = {}

    def read_interface(self, contract_name: str) -> InterfaceDescriptor:
        """Return the interface of a contract.

        Args:
            contract_name: Bare name ("Vault") or fully qualified
                ("contracts/Vault.sol:Vault")

        Returns:
            InterfaceDescriptor for the contract

        Raises:
            ArtifactError: If no artifact or more than one matches, or it is unreadable
        """
        cached = self._cache.get(contract_name)
        if cached is None:
            try:
                cached = self._load(contract_name)
            except ArtifactError as e:
                cached = e
            self._cache[contract_name] = cached

        if isinstance(cached, ArtifactError):
            raise cached
        return cached

    def _load(self, contract_name: str) -> InterfaceDescriptor:
        source_file, _, bare_name = contract_name.rpartition(":")
        candidates = self._artifact_index().get(bare_name, [])
        if source_file:
            candidates = self._filter_by_source(candidates, source_file)

        if not candidates:
            searched = ", ".join(str(r) for r in self.roots) or "(no artifact paths)"
            raise ArtifactError(
                contract_name, f'artifact not found for "{contract_name}" (searched: {searched})'
            )
        if len(candidates) > 1:
            listed = ", ".join(str(p) for p in candidates)
            raise ArtifactError(
                contract_name,
                f'multiple artifacts found for "{contract_name}"; use a fully qualified name ({listed})',
            )

        path = candidates[0]
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ArtifactError(contract_name, f'artifact unreadable for "{contract_name}" ({e})') from e

        logger.debug("Read interface for %s from %s", contract_name, path)
        return parse_abi(contract_name, data["abi"], str(path))

    def _filter_by_source(self, candidates: list[Path], source_file: str) -> list[Path]:
        """Keep artifacts compiled from `source_file`.

        Hardhat nests artifacts under the full source path
        (`contracts/a/Token.sol/Token.json`); Foundry keeps only the file name
        (`out/Token.sol/Token.json`). Paths are compared whole segments at a time.
        """
        wanted = PurePosixPath(source_file.removeprefix("./")).parts
        by_path = [p for p in candidates if p.parent.parts[-len(wanted) :] == wanted]
        if by_path:
            return by_path
        return [p for p in candidates if wanted and p.parent.name == wanted[-1]]

    def _artifact_index(self) -> dict[str, list[Path]]:
        """Index artifact files by contract name (built once)."""
        if self._index is not None:
            return self._index

        index: dict[str, list[Path]] = {}
        for root in self.roots:
            if not root.is_dir():
                logger.debug("Artifact path %s does not exist, skipping", root)
                continue
            for path in sorted(root.rglob("*.json")):
                if path.name.endswith(".dbg.json"):
                    continue
                if SKIPPED_DIRS.intersection(path.relative_to(root).parts[:-1]):
                    continue
                if not self._is_artifact(path):
                    continue
                index.setdefault(path.stem, []).append(path)

        logger.debug("Indexed %d contract artifacts", sum(len(v) for v in index.values()))
        self._index = index
        return index

    def _is_artifact(self, path: Path) -> bool:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return False
        return isinstance(data, dict) and isinstance(data.get("abi"), list)
