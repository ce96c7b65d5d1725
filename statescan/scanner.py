"""Scan orchestrator.

Runs every detector against one project root and assembles a ProjectState.

Phases:
    0. Manifests are parsed once (package.json, Python, .NET, CI).
    1. Independent detectors run concurrently.
    2. Platform analyzers run (they can use the identity).
    3. Guidance is synthesized from the enhanced results.

Each detector runs through ``_attempt``: a failure is logged with the
detector name and replaced by an empty default, so one broken detector
never takes down the scan.
"""

import asyncio
import logging
import os
import time
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

from statescan.config import Settings, get_settings
from statescan.detectors import (
    PLATFORM_ANALYZERS,
    ArchitectureDetector,
    CapabilityExtractor,
    DependencyPurposeMapper,
    InfrastructureDetector,
    Manifests,
    MetricsDetector,
    PlatformAnalyzer,
    ProjectIdentityDetector,
    StackDetector,
)
from statescan.exceptions import NotApplicableError, ScanTimeoutError
from statescan.fs import ProjectFS
from statescan.guidance import AgentGuidanceGenerator
from statescan.models import (
    AgentGuidance,
    EnhancedDependencies,
    EnhancedProjectState,
    PlatformContext,
    ProjectIdentity,
    ProjectState,
)
from statescan.parsers import CIParser, DotNetParser, NodeParser, ParserResult, PythonParser
from statescan.registries import DEFAULT_REGISTRIES, Registries
from statescan.utils import deduplicate_array, deduplicate_dependencies, normalize_dependency_name

logger = logging.getLogger(__name__)

T = TypeVar("T")


class StateScanner:
    """Scan a single project root.

    Args:
        root: Project directory
        registries: Pattern tables (defaults to the built-in tables)
        settings: Scanner settings (defaults to the process-wide settings)
    """

    def __init__(
        self,
        root: str | Path,
        registries: Registries | None = None,
        settings: Settings | None = None,
        platform_analyzers: tuple[type[PlatformAnalyzer], ...] = PLATFORM_ANALYZERS,
    ):
        self.settings = settings or get_settings()
        self.registries = registries or DEFAULT_REGISTRIES
        self.fs = ProjectFS(root, ignored_dirs=self.registries.ignored_dirs)
        self.root = self.fs.root
        self.platform_analyzers = platform_analyzers

        # Parsers
        self.node_parser = NodeParser(self.registries)
        self.python_parser = PythonParser(self.registries)
        self.dotnet_parser = DotNetParser(max_depth=self.settings.max_search_depth)
        self.ci_parser = CIParser()

        # Detectors
        self.stack = StackDetector(self.registries, dependency_limit=self.settings.important_dependency_limit)
        self.infrastructure = InfrastructureDetector(self.registries)
        self.metrics = MetricsDetector(self.registries, max_files=self.settings.max_walk_files)
        self.identity = ProjectIdentityDetector(self.registries)
        self.capabilities = CapabilityExtractor(
            self.registries,
            description_max_chars=self.settings.description_max_chars,
            max_features=self.settings.max_features,
        )
        self.architecture = ArchitectureDetector(self.registries, max_files=self.settings.max_walk_files)
        self.dependencies = DependencyPurposeMapper(self.registries)
        self.guidance = AgentGuidanceGenerator()

    # =========================================================================
    # Public API
    # =========================================================================

    async def scan_state(self) -> ProjectState:
        """Full scan. Never raises; an unreadable root gives an empty ProjectState."""
        start = time.perf_counter()
        logger.info(f"Scanning {self.root}", extra={"root": str(self.root)})

        if not await self._root_accessible():
            logger.error(f"Project root {self.root} is not an accessible directory", extra={"root": str(self.root)})
            return ProjectState()

        manifests = await self._load_manifests()
        state, enhanced = await asyncio.gather(
            self._scan_basic(manifests),
            self._scan_enhanced(),
        )

        dependencies = deduplicate_dependencies(
            self._legacy_dependencies(enhanced.dependencies, self.stack.detect_dependencies(manifests))
        )
        state = state.model_copy(update={
            "dependencies": dependencies,
            "identity": enhanced.identity,
            "capabilities": enhanced.capabilities,
            "enhanced_architecture": enhanced.architecture,
            "enhanced_dependencies": enhanced.dependencies,
            "platform_context": enhanced.platform_context,
            "agent_guidance": enhanced.agent_guidance,
        })

        self._log_finished(start, "Scan")
        return state

    async def scan_enhanced_state(self) -> EnhancedProjectState:
        """Enhanced sections only. Never raises."""
        start = time.perf_counter()
        if not await self._root_accessible():
            logger.error(f"Project root {self.root} is not an accessible directory", extra={"root": str(self.root)})
            return EnhancedProjectState()
        enhanced = await self._scan_enhanced()
        self._log_finished(start, "Enhanced scan")
        return enhanced

    # =========================================================================
    # Phases
    # =========================================================================

    async def _attempt(self, name: str, work: Awaitable[T], default_factory: Callable[[], T]) -> T:
        """Await ``work``; on failure log it and return ``default_factory()``."""
        try:
            return await work
        except Exception as e:
            logger.warning(
                f"Detector {name} failed: {e}",
                exc_info=True,
                extra={"detector": name, "root": str(self.root)},
            )
            return default_factory()

    async def _root_accessible(self) -> bool:
        root = self.root
        try:
            return await asyncio.to_thread(lambda: root.is_dir() and os.access(root, os.R_OK | os.X_OK))
        except OSError as e:
            logger.debug(f"Cannot stat {root}: {e}", extra={"root": str(root)})
            return False

    async def _load_manifests(self) -> Manifests:
        fs = self.fs
        node, python, dotnet, ci = await asyncio.gather(
            self._attempt("node_parser", self.node_parser.parse(fs), ParserResult),
            self._attempt("python_parser", self.python_parser.parse_projects(fs), ParserResult),
            self._attempt("dotnet_parser", self.dotnet_parser.parse_projects(fs), ParserResult),
            self._attempt("ci_parser", self.ci_parser.parse_configurations(fs), ParserResult),
        )

        for name, result in (("package.json", node), ("python", python), (".NET", dotnet), ("CI", ci)):
            for error in result.errors:
                logger.debug(
                    f"{name} parser: {error}",
                    extra={"detector": f"{name} parser", "error_count": len(result.errors)},
                )

        return Manifests(
            node=node.data,
            python=python.data if python.data is not None and python.data.found else None,
            dotnet=dotnet.data or [],
            workflows=ci.data or [],
        )

    async def _scan_basic(self, manifests: Manifests) -> ProjectState:
        fs = self.fs
        stack = self.stack
        infra = self.infrastructure
        (
            languages, frameworks, build_tools, testing, code_quality, development_tools,
            architecture, configuration, documentation,
            infrastructure, security, api, deployment,
        ) = await asyncio.gather(
            self._attempt("languages", stack.detect_languages(fs, manifests), list),
            self._attempt("frameworks", stack.detect_frameworks(fs, manifests), list),
            self._attempt("build_tools", stack.detect_build_tools(fs, manifests), list),
            self._attempt("testing", stack.detect_testing(fs, manifests), list),
            self._attempt("code_quality", stack.detect_code_quality(fs, manifests), list),
            self._attempt("development_tools", stack.detect_development_tools(fs, manifests), list),
            self._attempt("architecture", stack.detect_architecture(fs, manifests), list),
            self._attempt("configuration", stack.detect_configuration(fs, manifests), list),
            self._attempt("documentation", stack.detect_documentation(fs, manifests), list),
            self._attempt("infrastructure", infra.detect_infrastructure(fs, manifests), _none),
            self._attempt("security", infra.detect_security(fs, manifests), _none),
            self._attempt("api", infra.detect_api(fs, manifests), _none),
            self._attempt("deployment", infra.detect_deployment(fs, manifests), _none),
        )
        languages = deduplicate_array(languages)
        metrics = await self._attempt("metrics", self.metrics.detect(fs, len(languages)), _none)

        return ProjectState(
            languages=languages,
            frameworks=deduplicate_array(frameworks),
            build_tools=deduplicate_array(build_tools),
            testing=deduplicate_array(testing),
            code_quality=deduplicate_array(code_quality),
            development_tools=deduplicate_array(development_tools),
            architecture=deduplicate_array(architecture),
            configuration=deduplicate_array(configuration),
            documentation=deduplicate_array(documentation),
            infrastructure=_with_content(infrastructure),
            security=_with_content(security),
            api=_with_content(api),
            deployment=_with_content(deployment),
            project_metrics=metrics,
        )

    async def _scan_enhanced(self) -> EnhancedProjectState:
        fs = self.fs
        identity, capabilities, architecture, dependencies = await asyncio.gather(
            self._attempt("identity", self.identity.detect(fs), _none),
            self._attempt("capabilities", self.capabilities.extract(fs), _none),
            self._attempt("enhanced_architecture", self.architecture.detect(fs), _none),
            self._attempt("enhanced_dependencies", self.dependencies.map(fs), _none),
        )

        platform_context = await self._analyze_platforms(identity)

        partial = EnhancedProjectState(
            identity=identity,
            capabilities=capabilities,
            architecture=architecture,
            dependencies=dependencies,
            platform_context=platform_context,
        )
        guidance = await self._attempt("agent_guidance", self._generate_guidance(partial), _none)
        return partial.model_copy(update={"agent_guidance": guidance})

    async def _analyze_platforms(self, identity: ProjectIdentity | None) -> PlatformContext | None:
        analyzers = [cls() for cls in self.platform_analyzers]
        analyzers = [a for a in analyzers if a.applies(identity)]
        results = await asyncio.gather(*(
            self._attempt(f"platform:{a.platform}", self._run_platform(a), _none)
            for a in analyzers
        ))
        found = {a.platform: result for a, result in zip(analyzers, results) if result is not None}
        if not found:
            return None
        return PlatformContext(**found)

    async def _run_platform(self, analyzer: PlatformAnalyzer) -> Any:
        try:
            return await analyzer.analyze(self.fs)
        except NotApplicableError as e:
            logger.debug(str(e), extra={"platform": analyzer.platform})
            return None

    async def _generate_guidance(self, state: EnhancedProjectState) -> AgentGuidance:
        return self.guidance.generate(state)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _legacy_dependencies(self, enhanced: EnhancedDependencies | None, important: list[str]) -> list[str]:
        """``name (version)`` for every known dependency, plus parser-reported extras."""
        legacy = []
        if enhanced is not None:
            legacy = [
                f"{dep.name} ({dep.version})" if dep.version else dep.name
                for dep in enhanced.all_dependencies()
            ]
        known = {normalize_dependency_name(dep) for dep in legacy}
        for dep in important:
            # Parser entries read "name major.x"
            if dep.split(" ", 1)[0].lower() not in known:
                legacy.append(dep)
        return legacy

    def _log_finished(self, start: float, what: str) -> None:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{what} of {self.root} finished in {duration_ms:.0f}ms",
            extra={"root": str(self.root), "duration_ms": duration_ms},
        )


def _none() -> None:
    return None


def _with_content(section):
    return section if section is not None and section.has_content() else None


async def scan_project(
    root: str | Path,
    timeout: float | None = None,
    enhanced: bool = False,
    registries: Registries | None = None,
    settings: Settings | None = None,
) -> ProjectState | EnhancedProjectState:
    """Scan ``root`` within a time budget.

    Raises:
        ScanTimeoutError: The scan took longer than ``timeout`` seconds
            (default ``settings.scan_timeout``). Nothing partial is returned.
    """
    settings = settings or get_settings()
    timeout = timeout if timeout is not None else settings.scan_timeout
    scanner = StateScanner(root, registries=registries, settings=settings)
    work = scanner.scan_enhanced_state() if enhanced else scanner.scan_state()
    try:
        return await asyncio.wait_for(work, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.warning(
            f"Scan of {scanner.root} timed out after {timeout:.1f}s",
            extra={"root": str(scanner.root)},
        )
        raise ScanTimeoutError(str(scanner.root), timeout) from e
