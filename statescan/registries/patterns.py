"""Name, file and keyword tables used by the parsers and detectors.

Name patterns are ``fnmatch`` patterns applied to lowercased package names
("react" is exact, "@angular/*" a prefix, "*jest*" a substring).
Order matters wherever a table is a tuple: the first matching row wins.
"""

# =============================================================================
# Package name patterns
# =============================================================================

NODE_FRAMEWORK_PATTERNS: dict[str, tuple[str, ...]] = {
    "React": ("*react*",),
    "Vue": ("*vue*", "@vue/*"),
    "Angular": ("@angular/*",),
    "Express": ("*express*",),
    "Fastify": ("*fastify*",),
    "Koa": ("*koa*",),
    "Next.js": ("next",),
    "Nuxt.js": ("nuxt",),
    "Svelte": ("svelte", "@sveltejs/kit"),
    "NestJS": ("@nestjs/core",),
}

PYTHON_FRAMEWORK_PATTERNS: dict[str, tuple[str, ...]] = {
    "Django": ("django", "djangorestframework"),
    "Flask": ("flask",),
    "FastAPI": ("fastapi",),
    "Starlette": ("starlette",),
    "aiohttp": ("aiohttp",),
    "Tornado": ("tornado",),
    "Streamlit": ("streamlit",),
}

CLOUD_SDK_PATTERNS: dict[str, tuple[str, ...]] = {
    "AWS SDK": ("@aws-sdk/*", "aws-sdk*", "boto3", "botocore"),
    "Azure SDK": ("@azure/*", "azure-*"),
    "Google Cloud SDK": ("@google-cloud/*", "@google/gcp*", "google-cloud-*"),
}

NODE_TESTING_PATTERNS: dict[str, tuple[str, ...]] = {
    "Jest": ("*jest*",),
    "Mocha": ("mocha",),
    "Jasmine": ("jasmine", "jasmine-core"),
    "Vitest": ("vitest",),
    "Cypress": ("cypress",),
    "Playwright": ("playwright", "@playwright/test"),
}

PYTHON_TESTING_PATTERNS: dict[str, tuple[str, ...]] = {
    "Pytest": ("pytest", "pytest-*"),
    "Hypothesis": ("hypothesis",),
    "tox": ("tox",),
    "nox": ("nox",),
}

# =============================================================================
# File markers for the flat stack report
# =============================================================================

# Other-language markers: (candidate files, language)
LANGUAGE_MARKERS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("Cargo.toml",), "Rust"),
    (("go.mod",), "Go"),
    (("composer.json",), "PHP"),
    (("Gemfile",), "Ruby"),
    (("pom.xml", "build.gradle"), "Java"),
)

# Framework markers for ecosystems without a parser
FRAMEWORK_MARKERS: tuple[tuple[str, str], ...] = (
    ("Cargo.toml", "Rust"),
    ("go.mod", "Go"),
    ("composer.json", "PHP"),
    ("Gemfile", "Ruby"),
    ("pom.xml", "Java"),
    ("build.gradle", "Java/Gradle"),
)

BUILD_TOOL_FILES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("webpack.config.js", "webpack.config.ts"), "Webpack"),
    (("vite.config.js", "vite.config.ts", "vite.config.mjs"), "Vite"),
    (("rollup.config.js", "rollup.config.mjs"), "Rollup"),
    (("parcel.config.js", ".parcelrc"), "Parcel"),
    (("esbuild.config.js", "esbuild.config.mjs"), "ESBuild"),
    (("tsconfig.json",), "TypeScript Compiler"),
    (("babel.config.js", ".babelrc"), "Babel"),
    (("Makefile",), "Make"),
    (("CMakeLists.txt",), "CMake"),
)

TESTING_FILES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("jest.config.js", "jest.config.ts"), "Jest"),
    (("vitest.config.js", "vitest.config.ts"), "Vitest"),
    (("cypress.config.js", "cypress.config.ts"), "Cypress"),
    (("playwright.config.js", "playwright.config.ts"), "Playwright"),
    (("pytest.ini", "conftest.py", "tests/conftest.py"), "Pytest"),
    (("tox.ini",), "tox"),
    (("noxfile.py",), "nox"),
    (("test", "tests", "__tests__"), "Test directory structure"),
)

CODE_QUALITY_FILES: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        (
            ".eslintrc.json", ".eslintrc.yaml", ".eslintrc.yml", ".eslintrc.js",
            ".eslintrc", "eslint.config.js", "eslint.config.mjs", "eslint.config.cjs",
        ),
        "ESLint",
    ),
    ((".prettierrc", ".prettierrc.json", ".prettierrc.js", "prettier.config.js"), "Prettier"),
    ((".stylelintrc", ".stylelintrc.json"), "Stylelint"),
    (("tsconfig.json",), "TypeScript"),
    ((".editorconfig",), "EditorConfig"),
    (("ruff.toml", ".ruff.toml"), "Ruff"),
    ((".flake8",), "Flake8"),
    ((".pylintrc", "pylintrc"), "Pylint"),
    (("mypy.ini", ".mypy.ini"), "mypy"),
    ((".pre-commit-config.yaml",), "pre-commit"),
)

DEVELOPMENT_TOOL_FILES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("package-lock.json",), "npm"),
    (("yarn.lock",), "yarn"),
    (("pnpm-lock.yaml",), "pnpm"),
    (("bun.lockb",), "bun"),
    (("poetry.lock",), "Poetry"),
    (("Pipfile", "Pipfile.lock"), "Pipenv"),
    (("uv.lock",), "uv"),
    ((".git",), "Git"),
    ((".gitignore",), "Git ignore configured"),
    (("Dockerfile",), "Docker"),
    (("docker-compose.yml", "docker-compose.yaml"), "Docker Compose"),
    ((".devcontainer",), "Dev Container"),
)

CONFIGURATION_FILES: tuple[str, ...] = (
    ".gitignore", ".gitattributes",
    ".env", ".env.local", ".env.example",
    "tailwind.config.js", "postcss.config.js",
    "docker-compose.yml", "Dockerfile",
    ".github/workflows", "azure-pipelines.yml",
    "Makefile", "CMakeLists.txt",
    "setup.cfg", "tox.ini",
)

DOCUMENTATION_FILES: tuple[str, ...] = (
    "README.md", "README.rst", "README.txt", "README.adoc",
    "CHANGELOG.md", "CHANGELOG.rst", "CHANGELOG.txt",
    "CONTRIBUTING.md", "CONTRIBUTING.rst",
    "CODE_OF_CONDUCT.md", "CODE_OF_CONDUCT.rst",
    "SECURITY.md", "SECURITY.rst",
    "LICENSE", "LICENSE.md", "LICENSE.txt",
)

DOCUMENTATION_DIRS: tuple[tuple[str, str], ...] = (
    ("docs", "docs/ directory"),
    ("documentation", "documentation/ directory"),
    ("wiki", "wiki/ directory"),
)

API_DOCUMENTATION_FILES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("swagger.json", "swagger.yaml"), "Swagger/OpenAPI"),
    (("api.md",), "API documentation"),
    (("mkdocs.yml",), "MkDocs"),
)

# Directory layout notes: (directory, note)
ARCHITECTURE_NOTES: tuple[tuple[str, str], ...] = (
    ("lib", "lib/ structure (library code)"),
    ("components", "Component-based (React/Vue/Angular components)"),
    ("pages", "Page-based routing (Next.js/Nuxt/file-based routing)"),
    ("api", "API layer (RESTful or GraphQL endpoints)"),
    ("src/services", "Service layer (business logic encapsulation)"),
    ("models", "Model layer (data models/schemas)"),
    ("controllers", "MVC pattern (controllers handle requests)"),
    ("middleware", "Middleware pattern (request/response processing)"),
    ("src/utils", "Utility functions (helper/shared functions)"),
    ("tests", "Test structure (organized test suite)"),
    ("__tests__", "Test structure (organized test suite)"),
)

ARCHITECTURE_FILE_NOTES: tuple[tuple[str, str], ...] = (
    ("next.config.js", "Next.js framework (React SSR/SSG)"),
    ("nuxt.config.js", "Nuxt.js framework (Vue SSR/SSG)"),
    ("angular.json", "Angular framework (component-based)"),
    ("manage.py", "Django project layout (manage.py)"),
)

# =============================================================================
# Identity
# =============================================================================

# Project types when there is no package.json: (candidates, project type)
FALLBACK_PROJECT_TYPES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("*.csproj", "*.fsproj", "*.sln"), "dotnet-application"),
    (("setup.py", "pyproject.toml"), "python-package"),
    (("go.mod",), "go-application"),
    (("Cargo.toml",), "rust-application"),
)

PRIMARY_LANGUAGE_MARKERS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("*.csproj",), "C#"),
    (("setup.py", "pyproject.toml"), "Python"),
    (("go.mod",), "Go"),
    (("Cargo.toml",), "Rust"),
    (("pom.xml", "build.gradle"), "Java"),
)

WEB_APP_DEPENDENCIES = ("react", "vue", "@angular/core")
API_SERVER_DEPENDENCIES = ("express", "fastify", "koa")

DOMAIN_KEYWORDS: tuple[tuple[str, frozenset[str]], ...] = (
    ("developer-tools", frozenset({"vscode", "developer", "tools", "development"})),
    ("ui-components", frozenset({"ui", "component", "design", "css", "styling"})),
    ("backend-services", frozenset({"api", "rest", "graphql", "server", "backend"})),
    ("frontend-applications", frozenset({"frontend", "webapp", "react", "vue", "angular"})),
    ("testing-tools", frozenset({"test", "testing", "qa", "automation"})),
    ("cli-tools", frozenset({"cli", "command-line", "terminal"})),
    ("libraries", frozenset({"library", "utility", "helper", "utils"})),
    ("data-tools", frozenset({"data", "database", "orm", "sql"})),
)

CHANGELOG_FILES = (
    "CHANGELOG.md",
    "CHANGELOG.rst",
    "CHANGELOG.txt",
    "CHANGELOG",
    "HISTORY.md",
    "RELEASES.md",
)

# =============================================================================
# Capabilities
# =============================================================================

README_FILES = ("README.md", "readme.md", "README.rst", "README.txt")

# Data formats beyond JSON: (format, serialization libraries)
DATA_FORMATS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("YAML", ("yaml", "js-yaml", "gray-matter", "pyyaml", "ruamel-yaml", "python-frontmatter")),
    ("MDC", ("gray-matter", "python-frontmatter")),
    ("Markdown", ("marked", "markdown-it", "remark", "markdown", "mistune")),
    ("CSV", ("csv-parser", "papaparse", "pandas")),
    ("XML", ("xml2js", "fast-xml-parser", "lxml")),
    ("TOML", ("toml", "@iarna/toml", "tomli", "tomlkit")),
    ("Protocol Buffers", ("protobufjs", "protobuf")),
    ("GraphQL", ("graphql", "graphene", "strawberry-graphql")),
)

# =============================================================================
# Architecture
# =============================================================================

SOURCE_DIR = "src"

# (required subdirectories, style, organization); two present is a match
ORGANIZATION_RULES: tuple[tuple[tuple[str, ...], str, str], ...] = (
    (("providers", "services", "commands"), "layered", "service-oriented"),
    (("controllers", "models", "views"), "layered", "mvc"),
    (("components", "pages", "layouts"), "component-oriented", "feature-based"),
    (("scanner", "providers"), "modular", "feature-based"),
)

# (key, label, file-name prefixes, directory names holding files, directories)
PATTERN_SIGNATURES: tuple[tuple[str, str, tuple[str, ...], tuple[str, ...], tuple[str, ...]], ...] = (
    ("provider", "Provider Pattern", ("provider",), ("providers",), ()),
    ("command", "Command Pattern", ("command",), ("commands",), ()),
    ("factory", "Factory Pattern (object creation abstraction)", ("factory",), (), ()),
    ("singleton", "Singleton Pattern (single instance management)", ("singleton",), (), ()),
    ("observer", "Observer Pattern (event-driven notifications)", ("observer",), (), ()),
    ("adapter", "Adapter Pattern (interface compatibility)", ("adapter",), (), ()),
    ("builder", "Builder Pattern (fluent object construction)", ("builder",), (), ()),
    ("strategy", "Strategy Pattern (pluggable algorithms)", ("strategy",), (), ()),
    ("middleware", "Middleware Pattern (request/response processing pipeline)", (), (), ("src/middleware",)),
    ("decorator", "Decorator Pattern (runtime behavior enhancement)", (), (), ("src/decorators",)),
    ("repository", "Repository Pattern (data access abstraction)", ("repository",), (), ("src/repositories",)),
    ("service", "Service Layer Pattern (business logic encapsulation)", (), (), ("src/services",)),
)

# Provider file-name prefixes and the detail they contribute
PROVIDER_DETAILS: tuple[tuple[str, str], ...] = (
    ("treedataprovider", "tree views"),
    ("completionprovider", "code completion"),
    ("hoverprovider", "hover tooltips"),
)

# More command files than this gets the "multiple command handlers" detail
COMMAND_HANDLER_THRESHOLD = 3

ENTRY_POINTS = (
    "src/extension.ts",
    "src/index.ts",
    "src/main.ts",
    "src/app.ts",
    "src/server.ts",
    "index.ts",
    "main.ts",
    "app.ts",
    "server.ts",
    # JavaScript
    "src/index.js",
    "index.js",
    "server.js",
    "app.js",
    # Python
    "main.py",
    "app.py",
    "manage.py",
    "src/main.py",
    # .NET
    "Program.cs",
)

SOURCE_EXTENSIONS = (
    ".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs",
    ".py", ".cs", ".fs", ".java", ".kt", ".go", ".rs", ".rb", ".php",
    ".vue", ".svelte",
)

METRIC_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx", ".py", ".cs", ".java")

# =============================================================================
# Infrastructure / security / API / deployment
# =============================================================================

DATABASE_PATTERNS: dict[str, tuple[str, ...]] = {
    "PostgreSQL": ("pg", "postgres", "pg-promise", "postgresql", "psycopg2", "psycopg2-binary", "psycopg", "asyncpg"),
    "MySQL/MariaDB": ("mysql", "mysql2", "mariadb", "pymysql", "mysqlclient", "aiomysql"),
    "MongoDB": ("mongodb", "mongoose", "@azure/cosmos", "pymongo", "motor"),
    "SQLite": ("sqlite", "sqlite3", "better-sqlite3", "aiosqlite"),
    "SQL Server": ("mssql", "tedious", "pyodbc", "pymssql"),
    "Oracle": ("oracledb", "cx-oracle"),
    "Cassandra": ("cassandra-driver",),
    "Elasticsearch": ("@elastic/elasticsearch", "elasticsearch"),
    "Amazon DynamoDB": ("@aws-sdk/client-dynamodb", "dynamodb"),
}

ORM_PATTERNS: dict[str, tuple[str, ...]] = {
    "Prisma (ORM)": ("prisma", "@prisma/client"),
    "Sequelize (ORM)": ("sequelize",),
    "TypeORM (ORM)": ("typeorm",),
    "Mongoose (ODM)": ("mongoose",),
    "SQLAlchemy (ORM)": ("sqlalchemy",),
    "Django ORM": ("django",),
    "Tortoise ORM": ("tortoise-orm",),
}

CACHE_PATTERNS: dict[str, tuple[str, ...]] = {
    "Redis": ("redis", "ioredis", "@azure/redis-cache", "aioredis"),
    "Memcached": ("memcached", "pymemcache"),
}

QUEUE_PATTERNS: dict[str, tuple[str, ...]] = {
    "RabbitMQ": ("amqplib", "pika", "aio-pika"),
    "Amazon SQS": ("@aws-sdk/client-sqs",),
    "Azure Service Bus": ("@azure/service-bus", "azure-servicebus"),
    "Redis Queue (Bull/BeeQueue)": ("bull", "bullmq", "bee-queue"),
    "Celery": ("celery",),
    "RQ": ("rq",),
}

MESSAGING_PATTERNS: dict[str, tuple[str, ...]] = {
    "Apache Kafka": ("kafkajs", "kafka-python", "confluent-kafka", "aiokafka"),
    "Google Pub/Sub": ("@google-cloud/pubsub", "google-cloud-pubsub"),
    "NATS": ("nats", "nats-py"),
}

STORAGE_PATTERNS: dict[str, tuple[str, ...]] = {
    "Amazon S3": ("@aws-sdk/client-s3", "@aws-sdk/lib-storage", "aws-sdk-s3"),
    "Azure Blob Storage": ("@azure/storage-blob", "azure-storage-blob"),
    "Google Cloud Storage": ("@google-cloud/storage", "google-cloud-storage"),
    "MinIO": ("minio",),
}

# docker-compose service markers: (substring, section, label)
COMPOSE_SERVICES: tuple[tuple[tuple[str, ...], str, str], ...] = (
    (("postgres:", "postgresql:"), "databases", "PostgreSQL (Docker)"),
    (("mysql:", "mariadb:"), "databases", "MySQL/MariaDB (Docker)"),
    (("mongo:", "mongodb:"), "databases", "MongoDB (Docker)"),
    (("redis:",), "cache", "Redis (Docker)"),
    (("rabbitmq:",), "queues", "RabbitMQ (Docker)"),
    (("kafka:",), "messaging", "Apache Kafka (Docker)"),
    (("elasticsearch:",), "databases", "Elasticsearch (Docker)"),
    (("minio:",), "storage", "MinIO (Docker)"),
)

# .env connection-string markers: (substrings, section, label)
ENV_MARKERS: tuple[tuple[tuple[str, ...], str, str], ...] = (
    (("postgres://", "postgresql://"), "databases", "PostgreSQL"),
    (("mysql://", "DATABASE_URL=mysql"), "databases", "MySQL/MariaDB"),
    (("mongodb://", "MONGO_URL"), "databases", "MongoDB"),
    (("REDIS_URL", "redis://"), "cache", "Redis"),
    (("amqp://",), "queues", "RabbitMQ"),
)

ENV_FILES = (".env", ".env.local", ".env.example")

AUTH_PATTERNS: dict[str, tuple[str, ...]] = {
    "JWT": ("jsonwebtoken", "pyjwt", "jose", "python-jose"),
    "OAuth": ("passport-oauth", "authlib", "oauthlib"),
    "Passport.js": ("passport",),
    "Auth0": ("auth0", "@auth0/*"),
    "Okta": ("@okta/*",),
    "Firebase Auth": ("firebase-auth", "firebase-admin"),
    "AWS Cognito": ("@aws-sdk/client-cognito*",),
    "NextAuth.js": ("next-auth",),
}

ENCRYPTION_PATTERNS: dict[str, tuple[str, ...]] = {
    "bcrypt": ("bcrypt", "bcryptjs"),
    "Argon2": ("argon2", "argon2-cffi"),
    "cryptography": ("cryptography",),
    "passlib": ("passlib",),
}

VULNERABILITY_SCANNING_PATTERNS: dict[str, tuple[str, ...]] = {
    "Snyk": ("snyk",),
    "Safety": ("safety",),
    "pip-audit": ("pip-audit",),
    "Bandit": ("bandit",),
}

VULNERABILITY_SCANNING_FILES: tuple[tuple[tuple[str, ...], str], ...] = (
    ((".snyk", "snyk.json"), "Snyk"),
    ((".github/dependabot.yml", ".github/dependabot.yaml"), "Dependabot"),
    ((".trivyignore",), "Trivy"),
    (("sonar-project.properties",), "SonarQube"),
)

SECRETS_PATTERNS: dict[str, tuple[str, ...]] = {
    "dotenv": ("dotenv", "python-dotenv"),
    "HashiCorp Vault": ("node-vault", "hvac"),
    "Azure Key Vault": ("@azure/keyvault-secrets", "azure-keyvault-secrets"),
    "AWS Secrets Manager": ("@aws-sdk/client-secrets-manager",),
    "GCP Secret Manager": ("@google-cloud/secret-manager", "google-cloud-secret-manager"),
}

API_TYPE_PATTERNS: dict[str, tuple[str, ...]] = {
    "REST API": ("express", "fastify", "koa", "flask", "fastapi", "djangorestframework"),
    "GraphQL": ("graphql", "apollo-server", "@apollo/server", "graphene", "strawberry-graphql", "@nestjs/graphql"),
    "gRPC": ("@grpc/grpc-js", "grpc", "grpcio"),
    "WebSocket": ("ws", "socket.io", "websockets", "python-socketio"),
}

API_DOC_PATTERNS: dict[str, tuple[str, ...]] = {
    "Swagger/OpenAPI": ("swagger-ui*", "swagger-jsdoc", "@nestjs/swagger", "drf-yasg", "drf-spectacular"),
}

API_DOC_FILES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("swagger.json", "swagger.yaml", "swagger.yml"), "Swagger/OpenAPI"),
    (("openapi.json", "openapi.yaml", "openapi.yml"), "OpenAPI"),
)

GRAPHQL_SCHEMA_FILES = ("graphql.schema", "schema.graphql")

# Versioned route directories: (directory, label)
API_VERSIONING_DIRS: tuple[tuple[str, str], ...] = (
    ("api/v1", "URL path versioning (/v1)"),
    ("src/api/v1", "URL path versioning (/v1)"),
    ("app/api/v1", "URL path versioning (/v1)"),
    ("routes/v1", "URL path versioning (/v1)"),
    ("api/v2", "URL path versioning (/v2)"),
    ("src/api/v2", "URL path versioning (/v2)"),
)

ORCHESTRATION_FILES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("Dockerfile",), "Docker"),
    (("docker-compose.yml", "docker-compose.yaml", "compose.yaml"), "Docker Compose"),
    (("k8s", "kubernetes"), "Kubernetes"),
    (("helm", "Chart.yaml"), "Helm"),
)

ORCHESTRATION_PATTERNS: dict[str, tuple[str, ...]] = {
    "Kubernetes": ("@kubernetes/client-node", "kubernetes"),
}

DEPLOYMENT_PLATFORM_PATTERNS: dict[str, tuple[str, ...]] = {
    "AWS ECS": ("@aws-sdk/client-ecs",),
    "Azure AKS": ("@azure/arm-containerservice",),
    "Google GKE": ("@google-cloud/container",),
}

DEPLOYMENT_PLATFORM_FILES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("vercel.json",), "Vercel"),
    (("netlify.toml",), "Netlify"),
    (("heroku.yml", "Procfile"), "Heroku"),
    (("fly.toml",), "Fly.io"),
    (("app.yaml",), "Google App Engine"),
    (("serverless.yml",), "Serverless Framework"),
)

ENVIRONMENT_FILES: tuple[tuple[str, str], ...] = (
    (".env.development", "development"),
    (".env.staging", "staging"),
    (".env.production", "production"),
)
