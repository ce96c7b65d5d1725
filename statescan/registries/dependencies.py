"""Dependency purpose table.

Maps a package name to ``(category, purpose, critical)``. Node names are
matched case-insensitively; Python names are compared in their normalized
form (lowercase, ``_`` and ``.`` replaced by ``-``).
"""

DEPENDENCY_PURPOSES: dict[str, tuple[str, str, bool]] = {
    # ---------------------------------------------------------------------
    # Parsing
    # ---------------------------------------------------------------------
    "gray-matter": ("parsing", "Parse YAML frontmatter", True),
    "yaml": ("parsing", "Parse/stringify YAML", True),
    "js-yaml": ("parsing", "Parse/stringify YAML", True),
    "marked": ("parsing", "Parse Markdown", False),
    "markdown-it": ("parsing", "Parse Markdown", False),
    "remark": ("parsing", "Parse Markdown", False),
    "csv-parser": ("parsing", "Parse CSV files", False),
    "papaparse": ("parsing", "Parse CSV files", False),
    "xml2js": ("parsing", "Parse XML", False),
    "fast-xml-parser": ("parsing", "Parse XML (fast)", False),
    "@iarna/toml": ("parsing", "Parse TOML", False),
    "protobufjs": ("parsing", "Protocol Buffers serialization", False),
    # Python
    "pyyaml": ("parsing", "Parse/stringify YAML", True),
    "ruamel-yaml": ("parsing", "Round-trip YAML parsing", True),
    "toml": ("parsing", "Parse TOML", False),
    "tomli": ("parsing", "Parse TOML", False),
    "tomlkit": ("parsing", "Style-preserving TOML editing", False),
    "markdown": ("parsing", "Parse Markdown", False),
    "mistune": ("parsing", "Parse Markdown", False),
    "lxml": ("parsing", "Parse XML/HTML", False),
    "beautifulsoup4": ("parsing", "Parse HTML", False),
    "python-frontmatter": ("parsing", "Parse YAML frontmatter", True),
    "protobuf": ("parsing", "Protocol Buffers serialization", False),
    "orjson": ("parsing", "Fast JSON serialization", False),

    # ---------------------------------------------------------------------
    # Testing
    # ---------------------------------------------------------------------
    "mocha": ("testing", "Test runner", False),
    "jest": ("testing", "Test framework", False),
    "vitest": ("testing", "Fast test framework", False),
    "@vitest/ui": ("testing", "Visual test runner", False),
    "cypress": ("testing", "E2E testing", False),
    "playwright": ("testing", "E2E testing", False),
    "@playwright/test": ("testing", "E2E testing", False),
    "@vscode/test-electron": ("testing", "VS Code extension testing", False),
    "chai": ("testing", "Assertion library", False),
    "sinon": ("testing", "Test spies/stubs/mocks", False),
    # Python
    "pytest": ("testing", "Test framework", False),
    "pytest-asyncio": ("testing", "Async test support", False),
    "pytest-cov": ("testing", "Coverage reporting", False),
    "pytest-mock": ("testing", "Test spies/stubs/mocks", False),
    "hypothesis": ("testing", "Property-based testing", False),
    "coverage": ("testing", "Coverage measurement", False),
    "tox": ("testing", "Test environment automation", False),
    "nox": ("testing", "Test session automation", False),

    # ---------------------------------------------------------------------
    # Linting / quality
    # ---------------------------------------------------------------------
    "eslint": ("code-quality", "Code linting", False),
    "prettier": ("code-quality", "Code formatting", False),
    "stylelint": ("code-quality", "CSS linting", False),
    "@typescript-eslint/parser": ("code-quality", "TypeScript ESLint parser", False),
    "@typescript-eslint/eslint-plugin": ("code-quality", "TypeScript ESLint rules", False),
    # Python
    "ruff": ("code-quality", "Code linting and formatting", False),
    "black": ("code-quality", "Code formatting", False),
    "flake8": ("code-quality", "Code linting", False),
    "pylint": ("code-quality", "Code linting", False),
    "isort": ("code-quality", "Import sorting", False),
    "mypy": ("code-quality", "Static type checking", False),
    "pyright": ("code-quality", "Static type checking", False),
    "pre-commit": ("code-quality", "Git hook management", False),

    # ---------------------------------------------------------------------
    # VS Code platform
    # ---------------------------------------------------------------------
    "vscode": ("platform", "VS Code API", True),
    "@types/vscode": ("platform", "VS Code API types", True),

    # ---------------------------------------------------------------------
    # Build tools
    # ---------------------------------------------------------------------
    "typescript": ("build", "Type checking and compilation", True),
    "webpack": ("build", "Module bundling", False),
    "vite": ("build", "Fast build tool", False),
    "rollup": ("build", "Module bundler", False),
    "esbuild": ("build", "Fast JavaScript bundler", False),
    "parcel": ("build", "Zero-config bundler", False),
    "@vscode/vsce": ("build", "VS Code extension packaging", False),
    # Python
    "setuptools": ("build", "Package building", False),
    "wheel": ("build", "Wheel packaging", False),
    "hatchling": ("build", "Package build backend", False),
    "poetry-core": ("build", "Package build backend", False),
    "flit-core": ("build", "Package build backend", False),
    "build": ("build", "PEP 517 build frontend", False),
    "cython": ("build", "C extension compilation", False),

    # ---------------------------------------------------------------------
    # Utility libraries
    # ---------------------------------------------------------------------
    "lodash": ("utility", "Utility functions", False),
    "underscore": ("utility", "Utility functions", False),
    "ramda": ("utility", "Functional programming utilities", False),
    "date-fns": ("utility", "Date manipulation", False),
    "moment": ("utility", "Date manipulation", False),
    "dayjs": ("utility", "Date manipulation (lightweight)", False),
    # Python
    "pydantic": ("utility", "Data validation and settings", True),
    "pydantic-settings": ("utility", "Settings management", False),
    "python-dateutil": ("utility", "Date manipulation", False),
    "arrow": ("utility", "Date manipulation", False),
    "attrs": ("utility", "Class boilerplate generation", False),
    "click": ("utility", "CLI framework", True),
    "typer": ("utility", "CLI framework", True),
    "rich": ("utility", "Terminal formatting", False),
    "tenacity": ("utility", "Retry helpers", False),
    "python-dotenv": ("utility", "Load .env files", False),

    # ---------------------------------------------------------------------
    # HTTP clients
    # ---------------------------------------------------------------------
    "axios": ("http", "HTTP client", True),
    "node-fetch": ("http", "Fetch API for Node.js", True),
    "got": ("http", "HTTP client", True),
    "superagent": ("http", "HTTP client", True),
    # Python
    "requests": ("http", "HTTP client", True),
    "httpx": ("http", "HTTP client (sync/async)", True),
    "aiohttp": ("http", "Async HTTP client/server", True),
    "urllib3": ("http", "HTTP connection pooling", False),

    # ---------------------------------------------------------------------
    # Frameworks
    # ---------------------------------------------------------------------
    "express": ("framework", "Web server framework", True),
    "fastify": ("framework", "Fast web framework", True),
    "koa": ("framework", "Web framework", True),
    "react": ("framework", "UI library", True),
    "react-dom": ("framework", "React DOM rendering", True),
    "vue": ("framework", "Progressive framework", True),
    "@angular/core": ("framework", "Angular framework", True),
    "next": ("framework", "React framework", True),
    "nuxt": ("framework", "Vue framework", True),
    "svelte": ("framework", "Compiler framework", True),
    # Python
    "django": ("framework", "Full-stack web framework", True),
    "flask": ("framework", "Web micro-framework", True),
    "fastapi": ("framework", "Async API framework", True),
    "starlette": ("framework", "ASGI toolkit", True),
    "sqlalchemy": ("framework", "SQL toolkit and ORM", True),
    "celery": ("framework", "Distributed task queue", True),
}
