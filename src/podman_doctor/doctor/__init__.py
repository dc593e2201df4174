"""
Podman Doctor - diagnostics for Podman-based Dev Containers on Windows.

This module surveys WSL, Podman on the Windows host, Podman inside WSL
distributions, the VS Code Dev Containers settings and corporate registry
connectivity, then prints issues, recommendations and a settings snippet.

Usage:
    podman-doctor                                  # Run all diagnostic checks
    podman-doctor -v                               # Include check details
    podman-doctor --artifactory-url https://...    # Also probe the artifact repository
"""

from podman_doctor.doctor.checks import run_all_checks
from podman_doctor.doctor.models import DiagnosticAborted, DiagnosticReport

__all__ = ["run_all_checks", "DiagnosticAborted", "DiagnosticReport"]
