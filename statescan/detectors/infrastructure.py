"""Infrastructure, security, API and deployment detection."""

import asyncio
import logging

from statescan.detectors.manifests import Manifests
from statescan.fs import ProjectFS
from statescan.models import APIInfo, DeploymentInfo, InfrastructureInfo, SecurityInfo
from statescan.registries import DEFAULT_REGISTRIES, Registries
from statescan.utils import deduplicate_array

logger = logging.getLogger(__name__)

COMPOSE_FILES = ("docker-compose.yml", "docker-compose.yaml", "compose.yaml")
DOTENV_FILE = ".env"


class InfrastructureDetector:
    """Dependency- and file-based detection of the optional report sections.

    Dependency names come from both package.json and the Python manifests.
    Every returned list is de-duplicated and sorted.
    """

    def __init__(self, registries: Registries = DEFAULT_REGISTRIES):
        self.registries = registries

    async def _labels(self, fs: ProjectFS, table) -> list[str]:
        found = await asyncio.gather(*(fs.exists_any(candidates) for candidates, _ in table))
        return [label for (_, label), ok in zip(table, found) if ok]

    async def _read_first(self, fs: ProjectFS, candidates) -> str | None:
        """Content of the first candidate file that exists and is readable."""
        for path in candidates:
            try:
                text = await fs.read_text(path)
            except OSError as e:
                logger.debug(f"Could not read {path} in {fs.root}: {e}")
                continue
            if text is not None:
                return text
        return None

    async def detect_infrastructure(self, fs: ProjectFS, manifests: Manifests) -> InfrastructureInfo:
        registries = self.registries
        names = manifests.dependency_names()
        sections: dict[str, list[str]] = {
            "databases": [
                *registries.match_labels(registries.databases, names),
                *registries.match_labels(registries.orms, names),
            ],
            "cache": registries.match_labels(registries.caches, names),
            "queues": registries.match_labels(registries.queues, names),
            "storage": registries.match_labels(registries.storage, names),
            "messaging": registries.match_labels(registries.messaging, names),
        }

        compose = await self._read_first(fs, COMPOSE_FILES)
        if compose is not None:
            for markers, section, label in registries.compose_services:
                if any(marker in compose for marker in markers):
                    sections[section].append(label)

        # Only the first env file present is inspected
        env = await self._read_first(fs, registries.env_files)
        if env is not None:
            for markers, section, label in registries.env_markers:
                if any(marker in env for marker in markers):
                    sections[section].append(label)

        return InfrastructureInfo(**{section: deduplicate_array(labels) for section, labels in sections.items()})

    async def detect_security(self, fs: ProjectFS, manifests: Manifests) -> SecurityInfo:
        registries = self.registries
        names = manifests.dependency_names()

        vulnerability_scanning = registries.match_labels(registries.vulnerability_scanning, names)
        vulnerability_scanning += await self._labels(fs, registries.vulnerability_scanning_files)

        secrets = registries.match_labels(registries.secrets, names)
        if await fs.is_file(DOTENV_FILE):
            secrets.append(".env files")

        return SecurityInfo(
            auth_frameworks=deduplicate_array(registries.match_labels(registries.auth, names)),
            encryption=deduplicate_array(registries.match_labels(registries.encryption, names)),
            vulnerability_scanning=deduplicate_array(vulnerability_scanning),
            secrets_management=deduplicate_array(secrets),
        )

    async def detect_api(self, fs: ProjectFS, manifests: Manifests) -> APIInfo:
        registries = self.registries
        names = manifests.dependency_names()

        api_types = registries.match_labels(registries.api_types, names)
        documentation = registries.match_labels(registries.api_docs, names)
        documentation += await self._labels(fs, registries.api_doc_files)
        if await fs.exists_any(registries.graphql_schema_files):
            api_types.append("GraphQL")
            documentation.append("GraphQL Schema")

        # Authentication only means something for projects that expose an API
        authentication = registries.match_labels(registries.auth, names) if api_types else []

        versioning_dirs = registries.api_versioning_dirs
        present = await fs.existing_dirs(path for path, _ in versioning_dirs)
        versioning = [label for path, label in versioning_dirs if path in present]

        return APIInfo(
            type=deduplicate_array(api_types),
            documentation=deduplicate_array(documentation),
            authentication=deduplicate_array(authentication),
            versioning=deduplicate_array(versioning),
        )

    async def detect_deployment(self, fs: ProjectFS, manifests: Manifests) -> DeploymentInfo:
        registries = self.registries
        names = manifests.dependency_names()

        orchestration = await self._labels(fs, registries.orchestration_files)
        orchestration += registries.match_labels(registries.orchestration, names)

        platforms = registries.match_labels(registries.deployment_platforms, names)
        platforms += await self._labels(fs, registries.deployment_platform_files)

        env_files = registries.environment_files
        present = await fs.existing(path for path, _ in env_files)
        environments = [env for path, env in env_files if path in present]

        return DeploymentInfo(
            environments=deduplicate_array(environments),
            platforms=deduplicate_array(platforms),
            orchestration=deduplicate_array(orchestration),
        )
