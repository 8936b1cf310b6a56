"""Source-tree auditor for the lexical rule variants."""

from __future__ import annotations

import logging
from fnmatch import fnmatch
from pathlib import Path
from typing import Callable, Optional

from initguard.config import InitGuardConfig
from initguard.models.report import SourceAuditReport
from initguard.rules import ContractSource, StaticRuleExecutor

logger = logging.getLogger(__name__)


def _matches_any(relative: Path, patterns: list[str]) -> bool:
    # "**/" may also match zero directories
    text = relative.as_posix()
    for pattern in patterns:
        if fnmatch(text, pattern):
            return True
        if pattern.startswith("**/") and fnmatch(text, pattern[3:]):
            return True
    return False


class SourceAuditor:
    """Run the registered source rules over a directory of contracts."""

    def __init__(self, config: InitGuardConfig | None = None) -> None:
        self.config = config or InitGuardConfig()
        self.executor = StaticRuleExecutor(self.config)

    def discover(
        self,
        root: Path,
        include: Optional[list[str]] = None,
        exclude: Optional[list[str]] = None,
    ) -> list[Path]:
        """Find source files under root.

        Args:
            root: Directory (or single file) to scan
            include: Glob patterns to include (config default if None)
            exclude: Glob patterns to exclude (config default if None)

        Returns:
            Sorted list of matching files
        """
        if root.is_file():
            return [root]

        include = include or self.config.cache_gates.include
        exclude = exclude if exclude is not None else self.config.cache_gates.exclude

        files = []
        for path in sorted(root.rglob("*")):
            if not path.is_file():
                continue
            relative = path.relative_to(root)
            if not _matches_any(relative, include):
                continue
            if exclude and _matches_any(relative, exclude):
                continue
            files.append(path)
        return files

    def audit(
        self,
        root: Path,
        include: Optional[list[str]] = None,
        exclude: Optional[list[str]] = None,
        progress_callback: Optional[Callable[[Path, int, int], None]] = None,
    ) -> SourceAuditReport:
        """Audit every matching file under root.

        Args:
            root: Directory (or single file) to scan
            include: Glob patterns to include
            exclude: Glob patterns to exclude
            progress_callback: Called with (file, current, total) per file

        Returns:
            SourceAuditReport with all findings
        """
        files = self.discover(root, include, exclude)
        base = root.parent if root.is_file() else root
        report = SourceAuditReport(root=root)

        for i, path in enumerate(files, 1):
            if progress_callback:
                progress_callback(path, i, len(files))
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Skipping unreadable file %s: %s", path, e)
                continue

            source = ContractSource(
                path=path, relative_path=path.relative_to(base).as_posix(), text=text
            )
            report.files_scanned.append(path)
            report.violations.extend(self.executor.execute(source))

        logger.debug(
            "Scanned %d files under %s: %d failures, %d info rows",
            len(report.files_scanned),
            root,
            len(report.errors),
            len(report.infos),
        )
        return report
