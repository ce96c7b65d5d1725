"""Project size and complexity estimates."""

import logging
from datetime import datetime, timezone

from statescan.fs import ProjectFS
from statescan.models import ProjectMetrics
from statescan.registries import DEFAULT_REGISTRIES, Registries

logger = logging.getLogger(__name__)

SMALL_PROJECT_FILES = 50
MEDIUM_PROJECT_FILES = 200
MANY_FILES = 100

TEST_DIRS = ("test", "tests", "__tests__")
DOCKER_FILES = ("Dockerfile",)
CI_MARKERS = (".github/workflows", "azure-pipelines.yml")


def estimate_size(files_analyzed: int) -> str:
    if files_analyzed < SMALL_PROJECT_FILES:
        return "small"
    if files_analyzed < MEDIUM_PROJECT_FILES:
        return "medium"
    return "large"


def rate_complexity(score: int) -> str:
    if score <= 1:
        return "low"
    if score <= 3:
        return "medium"
    return "high"


class MetricsDetector:
    def __init__(self, registries: Registries = DEFAULT_REGISTRIES, max_files: int = 5000):
        self.registries = registries
        self.max_files = max_files

    async def detect(self, fs: ProjectFS, language_count: int = 0) -> ProjectMetrics:
        """Count source files and score complexity.

        One point each for a test directory, a Dockerfile, CI configuration,
        more than one language, and more than 100 source files.
        """
        source_files = await fs.walk(max_files=self.max_files, extensions=self.registries.metric_extensions)
        files_analyzed = len(source_files)

        score = sum((
            bool(await fs.existing_dirs(TEST_DIRS)),
            await fs.exists_any(DOCKER_FILES),
            await fs.exists_any(CI_MARKERS),
            language_count > 1,
            files_analyzed > MANY_FILES,
        ))

        metrics = ProjectMetrics(
            estimated_size=estimate_size(files_analyzed),
            complexity=rate_complexity(score),
            files_analyzed=files_analyzed,
            last_analyzed=datetime.now(timezone.utc).isoformat(),
        )
        logger.debug(f"Metrics for {fs.root}: {files_analyzed} files, complexity score {score}")
        return metrics
