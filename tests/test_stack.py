"""Tests for the flat stack, infrastructure and metrics detectors."""

import pytest

from statescan.detectors import InfrastructureDetector, Manifests, MetricsDetector, StackDetector
from statescan.detectors.metrics import estimate_size, rate_complexity
from statescan.fs import ProjectFS
from statescan.parsers import CIParser, DotNetParser, NodeParser, PythonParser


async def load(root) -> tuple[ProjectFS, Manifests]:
    fs = ProjectFS(root)
    node = await NodeParser().parse_project(fs)
    python = await PythonParser().parse_project(fs)
    dotnet = await DotNetParser().parse_projects(fs)
    ci = await CIParser().parse_configurations(fs)
    return fs, Manifests(node=node, python=python, dotnet=dotnet.data, workflows=ci.data)


class TestStackDetector:
    """Tests for languages, frameworks and tooling."""

    @pytest.mark.asyncio
    async def test_node_project(self, make_project):
        root = make_project({
            "package.json": {
                "engines": {"node": ">=18"},
                "dependencies": {"react": "18.2.0", "@azure/storage-blob": "12.0.0"},
                "devDependencies": {"vitest": "1.0.0"},
            },
            "tsconfig.json": "{}",
            "vite.config.ts": "",
            ".eslintrc.json": "{}",
            "yarn.lock": "",
            "README.md": "# x",
            "docs/": None,
        })
        fs, manifests = await load(root)
        stack = StackDetector()

        assert await stack.detect_languages(fs, manifests) == ["JavaScript/TypeScript (>=18)"]
        assert await stack.detect_frameworks(fs, manifests) == ["Node.js", "React", "Azure SDK"]
        assert await stack.detect_build_tools(fs, manifests) == ["Vite", "TypeScript Compiler"]
        assert await stack.detect_testing(fs, manifests) == ["Vitest"]
        assert await stack.detect_code_quality(fs, manifests) == ["ESLint", "TypeScript"]
        assert await stack.detect_development_tools(fs, manifests) == ["yarn"]
        assert await stack.detect_documentation(fs, manifests) == ["README.md", "docs/ directory"]

    @pytest.mark.asyncio
    async def test_python_project(self, make_project):
        root = make_project({
            "pyproject.toml": (
                '[build-system]\nrequires = ["setuptools>=68"]\nbuild-backend = "setuptools.build_meta"\n'
                '[project]\nname = "svc"\nrequires-python = ">=3.11"\n'
                'dependencies = ["flask>=3", "boto3"]\n'
                '[project.optional-dependencies]\ndev = ["pytest"]\n'
            ),
            ".github/workflows/ci.yml": (
                "on: push\njobs:\n  test:\n    steps:\n"
                "      - uses: actions/setup-python@v5\n        with:\n          python-version: '3.12'\n"
            ),
        })
        fs, manifests = await load(root)
        stack = StackDetector(dependency_limit=2)

        assert await stack.detect_languages(fs, manifests) == ["Python >=3.11"]
        assert await stack.detect_frameworks(fs, manifests) == ["Python", "Flask", "Pytest", "AWS SDK"]
        assert await stack.detect_build_tools(fs, manifests) == [
            "Python Build: setuptools>=68",
            "github-actions (ci)",
            "CI runtime: python 3.12",
        ]
        assert "Python build backend: setuptools.build_meta" in await stack.detect_development_tools(fs, manifests)
        assert stack.detect_dependencies(manifests) == ["flask 3.x", "boto3"]

    @pytest.mark.asyncio
    async def test_dotnet_project(self, make_project):
        root = make_project({"Api.Tests.csproj": (
            '<Project Sdk="Microsoft.NET.Sdk.Web"><PropertyGroup>'
            "<TargetFramework>net8.0</TargetFramework></PropertyGroup>"
            '<ItemGroup><PackageReference Include="xunit" Version="2.6.0" /></ItemGroup></Project>'
        )})
        fs, manifests = await load(root)
        stack = StackDetector()

        assert await stack.detect_languages(fs, manifests) == ["C# (net8.0)"]
        assert await stack.detect_frameworks(fs, manifests) == ["ASP.NET Core", "xUnit (testing)", ".NET net8.0"]
        assert await stack.detect_build_tools(fs, manifests) == [".NET SDK net8.0"]
        assert await stack.detect_testing(fs, manifests) == ["xUnit framework"]
        assert stack.detect_dependencies(manifests) == ["xunit 2.x"]

    @pytest.mark.asyncio
    async def test_unparseable_package_json_still_javascript(self, make_project):
        root = make_project({"package.json": "{oops", "go.mod": "module x\n"})
        fs, manifests = await load(root)
        assert await StackDetector().detect_languages(fs, manifests) == ["JavaScript/TypeScript", "Go"]

    @pytest.mark.asyncio
    async def test_architecture_notes(self, make_project):
        root = make_project({
            "src/providers/": None,
            "src/commands/": None,
            "src/utils/": None,
            "tests/": None,
            "manage.py": "",
        })
        fs, manifests = await load(root)

        notes = await StackDetector().detect_architecture(fs, manifests)

        assert notes == [
            "VS Code extension architecture (providers + commands)",
            "src/ structure with 3 subdirectories (commands, providers, utils)",
            "Utility functions (helper/shared functions)",
            "Test structure (organized test suite)",
            "Django project layout (manage.py)",
        ]

    @pytest.mark.asyncio
    async def test_empty_directory(self, tmp_path):
        fs, manifests = await load(tmp_path)
        stack = StackDetector()
        assert await stack.detect_languages(fs, manifests) == []
        assert await stack.detect_frameworks(fs, manifests) == []
        assert await stack.detect_architecture(fs, manifests) == []
        assert await stack.detect_configuration(fs, manifests) == []
        assert stack.detect_dependencies(manifests) == []


class TestInfrastructureDetector:
    """Tests for infrastructure, security, API and deployment sections."""

    @pytest.mark.asyncio
    async def test_infrastructure_from_dependencies_and_files(self, make_project):
        root = make_project({
            "package.json": {"dependencies": {"pg": "8", "prisma": "5", "ioredis": "5"}},
            "requirements.txt": "celery\n",
            "docker-compose.yml": "services:\n  db:\n    image: postgres:16\n  mq:\n    image: rabbitmq:3\n",
            ".env": "MONGO_URL=mongodb://localhost\n",
        })
        fs, manifests = await load(root)

        info = await InfrastructureDetector().detect_infrastructure(fs, manifests)

        assert info.databases == ["MongoDB", "PostgreSQL", "PostgreSQL (Docker)", "Prisma (ORM)"]
        assert info.cache == ["Redis"]
        assert info.queues == ["Celery", "RabbitMQ (Docker)"]
        assert info.storage == []
        assert info.has_content()

    @pytest.mark.asyncio
    async def test_security(self, make_project):
        root = make_project({
            "package.json": {"dependencies": {"jsonwebtoken": "9", "bcrypt": "5", "dotenv": "16"}},
            ".github/dependabot.yml": "version: 2\n",
            ".env": "",
        })
        fs, manifests = await load(root)

        security = await InfrastructureDetector().detect_security(fs, manifests)

        assert security.auth_frameworks == ["JWT"]
        assert security.encryption == ["bcrypt"]
        assert security.vulnerability_scanning == ["Dependabot"]
        assert security.secrets_management == [".env files", "dotenv"]

    @pytest.mark.asyncio
    async def test_api(self, make_project):
        root = make_project({
            "requirements.txt": "fastapi\npyjwt\n",
            "openapi.yaml": "openapi: 3.0.0\n",
            "schema.graphql": "type Query { a: Int }\n",
            "api/v1/": None,
        })
        fs, manifests = await load(root)

        api = await InfrastructureDetector().detect_api(fs, manifests)

        assert api.type == ["GraphQL", "REST API"]
        assert api.documentation == ["GraphQL Schema", "OpenAPI"]
        assert api.authentication == ["JWT"]
        assert api.versioning == ["URL path versioning (/v1)"]

    @pytest.mark.asyncio
    async def test_auth_without_api_is_not_api_authentication(self, make_project):
        root = make_project({"package.json": {"dependencies": {"jsonwebtoken": "9"}}})
        fs, manifests = await load(root)
        api = await InfrastructureDetector().detect_api(fs, manifests)
        assert not api.has_content()

    @pytest.mark.asyncio
    async def test_deployment(self, make_project):
        root = make_project({
            "Dockerfile": "FROM python:3.12\n",
            "k8s/": None,
            "vercel.json": "{}",
            ".env.production": "",
            ".env.staging": "",
        })
        fs, manifests = await load(root)

        deployment = await InfrastructureDetector().detect_deployment(fs, manifests)

        assert deployment.orchestration == ["Docker", "Kubernetes"]
        assert deployment.platforms == ["Vercel"]
        assert deployment.environments == ["production", "staging"]

    @pytest.mark.asyncio
    async def test_empty_directory(self, tmp_path):
        fs, manifests = await load(tmp_path)
        detector = InfrastructureDetector()
        assert not (await detector.detect_infrastructure(fs, manifests)).has_content()
        assert not (await detector.detect_security(fs, manifests)).has_content()
        assert not (await detector.detect_api(fs, manifests)).has_content()
        assert not (await detector.detect_deployment(fs, manifests)).has_content()


class TestMetrics:
    """Tests for size and complexity estimates."""

    @pytest.mark.parametrize("files,expected", [(0, "small"), (49, "small"), (50, "medium"), (199, "medium"), (200, "large")])
    def test_estimate_size(self, files, expected):
        assert estimate_size(files) == expected

    @pytest.mark.parametrize("score,expected", [(0, "low"), (1, "low"), (2, "medium"), (3, "medium"), (4, "high")])
    def test_rate_complexity(self, score, expected):
        assert rate_complexity(score) == expected

    @pytest.mark.asyncio
    async def test_detect(self, make_project):
        root = make_project({
            "src/a.ts": "",
            "src/b.py": "",
            "notes.txt": "",
            "tests/": None,
            "Dockerfile": "",
            ".github/workflows/": None,
        })

        metrics = await MetricsDetector().detect(ProjectFS(root), language_count=2)

        assert metrics.files_analyzed == 2
        assert metrics.estimated_size == "small"
        assert metrics.complexity == "high"
        assert metrics.last_analyzed.endswith("+00:00")

    @pytest.mark.asyncio
    async def test_empty_directory(self, tmp_path):
        metrics = await MetricsDetector().detect(ProjectFS(tmp_path))
        assert metrics.files_analyzed == 0
        assert metrics.complexity == "low"
