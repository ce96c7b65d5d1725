"""Project state detection.

Scans a project directory and reports its technology stack, structure,
purpose and maturity, plus guidance for agents working on it.

    from statescan import scan_project

    state = await scan_project("path/to/project")
    print(state.to_dict())
"""

from statescan.exceptions import NotApplicableError, RegistryError, ScanTimeoutError, StateScanError
from statescan.models import EnhancedProjectState, ProjectState
from statescan.scanner import StateScanner, scan_project

__version__ = "0.1.0"

__all__ = [
    "EnhancedProjectState",
    "NotApplicableError",
    "ProjectState",
    "RegistryError",
    "ScanTimeoutError",
    "StateScanError",
    "StateScanner",
    "scan_project",
]
