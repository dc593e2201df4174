"""Result and state types shared by the diagnostic checks."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class CheckStatus(Enum):
    """Status of a diagnostic check."""

    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"
    SKIP = "skip"
    INFO = "info"


@dataclass
class CheckResult:
    """Result of a diagnostic check.

    Attributes:
        name: Human-readable name of the check.
        status: Status indicating pass, warn, fail, skip or info.
        message: Brief summary message.
        details: Optional detailed information for verbose output.
    """

    name: str
    status: CheckStatus
    message: str
    details: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == CheckStatus.PASS


@dataclass
class DistroInfo:
    """One row of `wsl --list --verbose`."""

    name: str
    state: str
    version: Optional[str] = None
    is_default: bool = False

    @property
    def running(self) -> bool:
        # wsl.exe localizes this column; only the English state is recognised
        return self.state.lower() == "running"

    @property
    def is_podman_machine(self) -> bool:
        return self.name.lower().startswith("podman-machine")

    @property
    def is_general_purpose(self) -> bool:
        lowered = self.name.lower()
        return not self.is_podman_machine and not lowered.startswith("docker-desktop")


@dataclass
class MachineInfo:
    """One entry of `podman machine list`."""

    name: str
    running: bool = False
    default: bool = False


@dataclass
class DiagnosticReport:
    """Everything a run produced, in the order it was produced."""

    sections: Dict[str, List[CheckResult]] = field(default_factory=dict)
    issues: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    distros: List[DistroInfo] = field(default_factory=list)
    host_pipe_exists: bool = False
    wsl_socket_path: Optional[str] = None
    wsl_socket_distro: Optional[str] = None

    @property
    def results(self) -> List[CheckResult]:
        return [result for results in self.sections.values() for result in results]

    def find(self, name: str) -> Optional[CheckResult]:
        """Return the first result with the given check name."""
        for result in self.results:
            if result.name == name:
                return result
        return None


class DiagnosticAborted(Exception):
    """Raised when a prerequisite is missing and no further checks make sense."""


class UnreadableFileError(Exception):
    """A config file exists but its contents could not be read or decoded."""

    def __init__(self, path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
