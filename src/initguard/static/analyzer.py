"""Initializer auditor for proxy deployment scripts.

This module provides the main entry point for the initializer audit:
parse -> literal bindings -> call sites -> key correlation -> verdict rows.
"""

from __future__ import annotations

import logging
from pathlib import Path

from initguard.config import InitGuardConfig
from initguard.models.report import AuditReport
from initguard.models.script import ScriptAnalysis
from initguard.static.artifacts import ArtifactStore
from initguard.static.bindings import LiteralBindingResolver
from initguard.static.correlator import DeploymentKeyCorrelator
from initguard.static.diagnostics import build_report
from initguard.static.extractor import CallSiteExtractor
from initguard.static.matcher import InterfaceSignatureMatcher
from initguard.static.parsers.typescript import ParsedScript, ScriptParser

logger = logging.getLogger(__name__)


class InitializerAuditor:
    """Audit deployProxy(...) initializer correctness in a deployment script.

    Checks that every proxy deployment names an initializer that exists in
    the contract ABI with a matching arity, and that deployments made with
    the initializer disabled are followed by an explicit initialize call.
    """

    def __init__(
        self,
        config: InitGuardConfig | None = None,
        store: ArtifactStore | None = None,
        project_root: Path | None = None,
    ) -> None:
        """Initialize the auditor.

        Args:
            config: Optional configuration (defaults if omitted)
            store: Artifact store; built from config artifact paths if omitted
            project_root: Base for relative artifact paths (defaults to cwd)
        """
        self.config = config or InitGuardConfig()
        root = project_root or Path.cwd()
        self.store = store or ArtifactStore(self.config.resolve_artifact_paths(root))
        self.parser = ScriptParser()

    def analyze_file(self, file_path: Path | str) -> ScriptAnalysis:
        """Analyze a deployment script file.

        Args:
            file_path: Path to the deployment script

        Returns:
            ScriptAnalysis with call sites and correlations

        Raises:
            FileNotFoundError: If the script does not exist
            ParseError: If the script cannot be parsed
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path

        if not path.exists():
            raise FileNotFoundError(f"Script file not found: {path}")

        return self._analyze(self.parser.parse_file(path))

    def analyze_source(self, source: str, file_path: str = "<source>") -> ScriptAnalysis:
        """Analyze deployment script source code.

        Args:
            source: TypeScript/JavaScript source
            file_path: Path for error reporting

        Returns:
            ScriptAnalysis with call sites and correlations
        """
        return self._analyze(self.parser.parse_source(source, file_path))

    def _analyze(self, script: ParsedScript) -> ScriptAnalysis:
        settings = self.config.script

        resolver = LiteralBindingResolver(settings.binding_scope)
        bindings = resolver.index(script)

        extractor = CallSiteExtractor(settings, resolver)
        deployments, initialize_calls = extractor.extract(script)

        keys = [d.deployment_key for d in deployments if d.deployment_key]
        follow_ups = DeploymentKeyCorrelator(settings).correlate(script, keys, initialize_calls)

        return ScriptAnalysis(
            file_path=script.file_path,
            script=script,
            bindings=bindings,
            deployments=deployments,
            initialize_calls=initialize_calls,
            follow_ups=follow_ups,
        )

    def audit(self, analysis: ScriptAnalysis) -> AuditReport:
        """Produce verdict rows for every deployment call site.

        Args:
            analysis: Result of analyze_file / analyze_source

        Returns:
            AuditReport with one row per deployment call site
        """
        settings = self.config.script
        matcher = InterfaceSignatureMatcher(self.store, settings.default_initializer)
        report = build_report(
            analysis.file_path,
            analysis.deployments,
            analysis.follow_ups,
            matcher,
            require_deployment_key=settings.require_deployment_key,
            callee=settings.deploy_callee,
            registry_name=settings.registry_name,
        )
        logger.debug(
            "Audited %s: OK=%d FAIL=%d", analysis.file_path, report.ok_count, report.fail_count
        )
        return report


def audit_script(
    file_path: str | Path,
    config: InitGuardConfig | None = None,
    store: ArtifactStore | None = None,
) -> AuditReport:
    """Analyze and audit a deployment script in one call.

    Args:
        file_path: Path to the deployment script
        config: Optional configuration
        store: Optional artifact store

    Returns:
        AuditReport for the script

    Raises:
        FileNotFoundError: If script file doesn't exist
        ParseError: If script cannot be parsed
    """
    auditor = InitializerAuditor(config, store)
    return auditor.audit(auditor.analyze_file(file_path))
