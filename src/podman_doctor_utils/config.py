"""Runtime settings for podman-doctor, read from the environment and the CLI."""

import os
from dataclasses import dataclass
from typing import Optional

ARTIFACTORY_URL_ENV = "PODMAN_DOCTOR_ARTIFACTORY_URL"
COMMAND_TIMEOUT_ENV = "PODMAN_DOCTOR_COMMAND_TIMEOUT"
HTTP_TIMEOUT_ENV = "PODMAN_DOCTOR_HTTP_TIMEOUT"

DEFAULT_COMMAND_TIMEOUT = 15.0
DEFAULT_HTTP_TIMEOUT = 10.0


def _safe_float_from_env(var_name: str, default: float) -> float:
    raw_value = os.getenv(var_name)
    if raw_value is None:
        return default
    try:
        parsed = float(raw_value)
        return parsed if parsed > 0 else default
    except (TypeError, ValueError):
        return default


@dataclass
class DoctorConfig:
    """Settings for a single diagnostic run.

    Attributes:
        artifactory_url: Base URL probed for corporate connectivity, if any.
        command_timeout: Seconds allowed for each external command.
        http_timeout: Seconds allowed for the reachability request.
        verbose: Print check details in the report.
    """

    artifactory_url: Optional[str] = None
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    verbose: bool = False

    @classmethod
    def from_env(
        cls,
        artifactory_url: Optional[str] = None,
        verbose: bool = False,
    ) -> "DoctorConfig":
        """Build a config from environment variables; explicit arguments win."""
        url = artifactory_url or os.getenv(ARTIFACTORY_URL_ENV) or None
        return cls(
            artifactory_url=url.strip() if url else None,
            command_timeout=_safe_float_from_env(COMMAND_TIMEOUT_ENV, DEFAULT_COMMAND_TIMEOUT),
            http_timeout=_safe_float_from_env(HTTP_TIMEOUT_ENV, DEFAULT_HTTP_TIMEOUT),
            verbose=verbose,
        )
