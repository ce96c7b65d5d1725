"""CI/CD configuration parser.

Supports GitHub Actions, Azure Pipelines, GitLab CI, CircleCI and Jenkins.
YAML files are loaded with ``yaml.safe_load``; Jenkinsfiles are Groovy and
only their ``stage('...')`` names are extracted.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from statescan.fs import ProjectFS, as_fs
from statescan.parsers.base import ParserResult, first_seen, format_dependency

logger = logging.getLogger(__name__)

GITHUB_WORKFLOWS_DIR = ".github/workflows"
AZURE_PIPELINE_FILES = ("azure-pipelines.yml", "azure-pipelines.yaml")
GITLAB_CI_FILE = ".gitlab-ci.yml"
CIRCLECI_FILE = ".circleci/config.yml"
JENKINSFILE = "Jenkinsfile"

# Top-level .gitlab-ci.yml keys that are not jobs
GITLAB_RESERVED_KEYS = frozenset({
    "image", "services", "before_script", "after_script", "stages", "variables",
    "include", "default", "workflow", "cache", "pages:deploy",
})

# setup-* inputs / Azure tasks that pin a runtime
AZURE_RUNTIME_TASKS = {
    "usepythonversion": "python",
    "nodetool": "node",
    "usenode": "node",
    "usedotnet": "dotnet",
    "gotool": "go",
    "javatoolinstaller": "java",
}

# Container image name -> runtime
RUNTIME_IMAGES = {
    "python": "python",
    "node": "node",
    "golang": "go",
    "openjdk": "java",
    "eclipse-temurin": "java",
    "ruby": "ruby",
    "rust": "rust",
    "sdk": "dotnet",
}

_VERSION_KEY_RE = re.compile(r"^(?P<runtime>[a-z]+)-version$")
_EXPRESSION_RE = re.compile(r"\$\{\{\s*matrix\.([\w-]+)\s*\}\}")
_JENKINS_STAGE_RE = re.compile(r"""\bstage\s*\(\s*['"]([^'"]+)['"]\s*\)""")


@dataclass
class CIWorkflowInfo:
    """One CI workflow / pipeline definition."""

    type: str  # github-actions, azure-pipelines, gitlab-ci, circleci, jenkins
    name: str
    path: str = ""
    on_events: list[str] = field(default_factory=list)
    jobs: list[str] = field(default_factory=list)
    environments: list[str] = field(default_factory=list)
    runtime_versions: list[tuple[str, str]] = field(default_factory=list)
    actions: list[tuple[str, str | None]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "name": self.name,
            "path": self.path,
            "on_events": self.on_events,
            "jobs": self.jobs,
            "environments": self.environments,
            "runtime_versions": [f"{runtime} {version}" for runtime, version in self.runtime_versions],
            "actions": [format_dependency(name, version) for name, version in self.actions],
        }


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _stringify_versions(value: Any) -> list[str]:
    return [str(v) for v in _as_list(value) if isinstance(v, (str, int, float)) and str(v).strip()]


def _image_runtime(image: Any) -> tuple[str, str] | None:
    """"python:3.12-slim" -> ("python", "3.12")."""
    if isinstance(image, dict):
        image = image.get("name")
    if not isinstance(image, str) or ":" not in image:
        return None
    repository, _, tag = image.rpartition(":")
    runtime = RUNTIME_IMAGES.get(repository.rsplit("/", 1)[-1].lower())
    version = tag.split("-", 1)[0]
    if not runtime or not version or version == "latest":
        return None
    return runtime, version


class CIParser:
    """Parse every CI configuration found under a root."""

    async def parse_configurations(self, root: str | Path | ProjectFS) -> ParserResult[list[CIWorkflowInfo]]:
        fs = as_fs(root)
        result: ParserResult[list[CIWorkflowInfo]] = ParserResult(data=[])

        for path in await fs.glob(f"{GITHUB_WORKFLOWS_DIR}/*.y*ml"):
            if not path.endswith((".yml", ".yaml")):
                continue
            data = await self._load_yaml(fs, path, result)
            if data is not None:
                result.data.append(self._parse_github(path, data))

        for path in await fs.existing(AZURE_PIPELINE_FILES):
            data = await self._load_yaml(fs, path, result)
            if data is not None:
                result.data.append(self._parse_azure(path, data))

        data = await self._load_yaml(fs, GITLAB_CI_FILE, result)
        if data is not None:
            result.data.append(self._parse_gitlab(GITLAB_CI_FILE, data))

        data = await self._load_yaml(fs, CIRCLECI_FILE, result)
        if data is not None:
            result.data.append(self._parse_circleci(CIRCLECI_FILE, data))

        try:
            jenkinsfile = await fs.read_text(JENKINSFILE)
        except OSError as e:
            result.add_error(f"Failed to read {JENKINSFILE}: {e}")
            jenkinsfile = None
        if jenkinsfile is not None:
            result.data.append(CIWorkflowInfo(
                type="jenkins",
                name="Jenkinsfile",
                path=JENKINSFILE,
                jobs=first_seen(_JENKINS_STAGE_RE.findall(jenkinsfile)),
            ))

        # Partial success still counts when at least one workflow was read
        result.success = bool(result.data) or not result.errors
        if result.errors:
            logger.debug(f"CI configurations in {fs.root}: {len(result.errors)} errors")
        return result

    async def _load_yaml(self, fs: ProjectFS, path: str, result: ParserResult) -> dict[str, Any] | None:
        try:
            text = await fs.read_text(path)
        except OSError as e:
            result.add_error(f"Failed to read {path}: {e}")
            return None
        if text is None:
            return None
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            result.add_error(f"Failed to parse {path}: {e}")
            return None
        if data is None:
            return {}
        if not isinstance(data, dict):
            result.add_error(f"Failed to parse {path}: top-level value is not a mapping")
            return None
        return data

    # =========================================================================
    # Providers
    # =========================================================================

    def _parse_github(self, path: str, data: dict[str, Any]) -> CIWorkflowInfo:
        workflow = CIWorkflowInfo(
            type="github-actions",
            name=Path(path).stem,
            path=path,
        )

        # YAML 1.1 reads a bare `on:` key as boolean True
        triggers = data.get("on", data.get(True))
        if isinstance(triggers, dict):
            workflow.on_events = [str(event) for event in triggers]
        else:
            workflow.on_events = [str(event) for event in _as_list(triggers)]

        jobs = data.get("jobs")
        if not isinstance(jobs, dict):
            return workflow
        workflow.jobs = [str(job) for job in jobs]

        for job in jobs.values():
            if not isinstance(job, dict):
                continue
            environment = job.get("environment")
            if isinstance(environment, dict):
                environment = environment.get("name")
            if isinstance(environment, str):
                workflow.environments.append(environment)

            matrix = job.get("strategy", {}).get("matrix", {}) if isinstance(job.get("strategy"), dict) else {}
            matrix = matrix if isinstance(matrix, dict) else {}

            for step in _as_list(job.get("steps")):
                if not isinstance(step, dict):
                    continue
                uses = step.get("uses")
                if isinstance(uses, str) and not uses.startswith(("./", "docker://")):
                    name, _, version = uses.partition("@")
                    workflow.actions.append((name, version or None))
                inputs = step.get("with")
                if not isinstance(inputs, dict):
                    continue
                for key, value in inputs.items():
                    match = _VERSION_KEY_RE.match(str(key))
                    if not match:
                        continue
                    runtime = match.group("runtime")
                    if isinstance(value, str) and (expr := _EXPRESSION_RE.search(value)):
                        value = matrix.get(expr.group(1))
                    for version in _stringify_versions(value):
                        workflow.runtime_versions.append((runtime, version))

        workflow.environments = first_seen(workflow.environments)
        return workflow

    def _parse_azure(self, path: str, data: dict[str, Any]) -> CIWorkflowInfo:
        pipeline = CIWorkflowInfo(type="azure-pipelines", name=Path(path).stem, path=path)

        if "trigger" in data:
            pipeline.on_events.append("push")
        if "pr" in data:
            pipeline.on_events.append("pull_request")
        if "schedules" in data:
            pipeline.on_events.append("schedule")

        jobs: list[dict] = []
        for stage in _as_list(data.get("stages")):
            if not isinstance(stage, dict):
                continue
            label = stage.get("displayName") or stage.get("stage")
            if label:
                pipeline.jobs.append(str(label))
            jobs.extend(j for j in _as_list(stage.get("jobs")) if isinstance(j, dict))
        top_level_jobs = [j for j in _as_list(data.get("jobs")) if isinstance(j, dict)]
        if not pipeline.jobs:
            pipeline.jobs = [
                str(j.get("displayName") or j.get("job") or j.get("deployment"))
                for j in top_level_jobs
                if j.get("displayName") or j.get("job") or j.get("deployment")
            ]
        jobs.extend(top_level_jobs)

        steps = list(_as_list(data.get("steps")))
        for job in jobs:
            if isinstance(job.get("environment"), str):
                pipeline.environments.append(job["environment"])
            steps.extend(_as_list(job.get("steps")))

        for step in steps:
            if not isinstance(step, dict) or not isinstance(step.get("task"), str):
                continue
            task, _, _ = step["task"].partition("@")
            runtime = AZURE_RUNTIME_TASKS.get(task.lower())
            inputs = step.get("inputs") if isinstance(step.get("inputs"), dict) else {}
            version = inputs.get("versionSpec") or inputs.get("version")
            if runtime and version is not None:
                pipeline.runtime_versions.append((runtime, str(version)))

        pipeline.environments = first_seen(pipeline.environments)
        return pipeline

    def _parse_gitlab(self, path: str, data: dict[str, Any]) -> CIWorkflowInfo:
        pipeline = CIWorkflowInfo(type="gitlab-ci", name="gitlab-ci", path=path)

        images = [data.get("image")]
        if isinstance(data.get("default"), dict):
            images.append(data["default"].get("image"))

        for key, body in data.items():
            key = str(key)
            if key in GITLAB_RESERVED_KEYS or key.startswith(".") or not isinstance(body, dict):
                continue
            pipeline.jobs.append(key)
            environment = body.get("environment")
            if isinstance(environment, dict):
                environment = environment.get("name")
            if isinstance(environment, str):
                pipeline.environments.append(environment)
            images.append(body.get("image"))

        for image in images:
            runtime = _image_runtime(image)
            if runtime:
                pipeline.runtime_versions.append(runtime)

        pipeline.environments = first_seen(pipeline.environments)
        return pipeline

    def _parse_circleci(self, path: str, data: dict[str, Any]) -> CIWorkflowInfo:
        pipeline = CIWorkflowInfo(type="circleci", name="circleci", path=path)

        jobs = data.get("jobs")
        if isinstance(jobs, dict):
            pipeline.jobs = [str(job) for job in jobs]
            for body in jobs.values():
                if not isinstance(body, dict):
                    continue
                for container in _as_list(body.get("docker")):
                    runtime = _image_runtime(container.get("image") if isinstance(container, dict) else None)
                    if runtime:
                        pipeline.runtime_versions.append(runtime)

        workflows = data.get("workflows")
        if isinstance(workflows, dict):
            pipeline.on_events = [str(name) for name in workflows if name != "version"]

        orbs = data.get("orbs")
        if isinstance(orbs, dict):
            for orb in orbs.values():
                if isinstance(orb, str):
                    name, _, version = orb.partition("@")
                    pipeline.actions.append((name, version or None))
        return pipeline

    # =========================================================================
    # Queries
    # =========================================================================

    def get_runtime_versions(self, workflows: list[CIWorkflowInfo]) -> list[str]:
        """Runtime versions pinned in CI, e.g. "python 3.12", first-seen order."""
        return first_seen(
            f"{runtime} {version}"
            for workflow in workflows
            for runtime, version in workflow.runtime_versions
        )

    def get_important_dependencies(self, workflows: list[CIWorkflowInfo], limit: int | None = None) -> list[str]:
        """Actions and orbs as ``name major.x``, one entry per name."""
        seen: set[str] = set()
        formatted = []
        for workflow in workflows:
            for name, version in workflow.actions:
                if name.lower() in seen:
                    continue
                seen.add(name.lower())
                formatted.append(format_dependency(name, version))
        return first_seen(formatted, limit)
