#!/usr/bin/env python3
"""
Podman Doctor CLI - inspect a Windows host's WSL, Podman and VS Code setup.

The run is read-only. The exit status is 1 only when WSL is missing, since
every other section depends on it; issues found elsewhere are reported and
the command still exits 0.
"""

import argparse
import sys

from podman_doctor.doctor import DiagnosticAborted, run_all_checks
from podman_doctor_utils.config import DoctorConfig
from podman_doctor_utils.logging_config import get_logger, set_log_level

logger = get_logger("podman_doctor.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="podman-doctor",
        description="Diagnose WSL, Podman and VS Code Dev Containers configuration on Windows",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  podman-doctor                                                # Run all checks
  podman-doctor -v                                             # Show check details
  podman-doctor --artifactory-url https://artifactory.example.com  # Also test the artifact repository
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show details for each check")
    parser.add_argument(
        "--artifactory-url",
        type=str,
        default=None,
        help="Artifact repository base URL to test for reachability",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        set_log_level("DEBUG")

    # Windows consoles may not encode the status icons
    if hasattr(sys.stdout, "reconfigure"):
        try:
            sys.stdout.reconfigure(errors="replace")
        except ValueError:
            pass

    config = DoctorConfig.from_env(artifactory_url=args.artifactory_url, verbose=args.verbose)
    try:
        run_all_checks(config)
    except DiagnosticAborted as e:
        logger.error(f"Diagnostics aborted: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
