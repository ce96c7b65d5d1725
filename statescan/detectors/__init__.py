"""Detectors. Each takes the registries in its constructor and inspects a root."""

from statescan.detectors.architecture import ArchitectureDetector
from statescan.detectors.capabilities import CapabilityExtractor
from statescan.detectors.dependency_purpose import DependencyPurposeMapper
from statescan.detectors.identity import ProjectIdentityDetector
from statescan.detectors.infrastructure import InfrastructureDetector
from statescan.detectors.manifests import Manifests
from statescan.detectors.maturity import MaturityDetector
from statescan.detectors.metrics import MetricsDetector
from statescan.detectors.platforms import PLATFORM_ANALYZERS, PlatformAnalyzer, VSCodeAnalyzer
from statescan.detectors.stack import StackDetector

__all__ = [
    "PLATFORM_ANALYZERS",
    "ArchitectureDetector",
    "CapabilityExtractor",
    "DependencyPurposeMapper",
    "InfrastructureDetector",
    "Manifests",
    "MaturityDetector",
    "MetricsDetector",
    "PlatformAnalyzer",
    "ProjectIdentityDetector",
    "StackDetector",
    "VSCodeAnalyzer",
]
