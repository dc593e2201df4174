"""Terminal rendering for diagnostic results and the generated settings snippet."""

import json
from typing import Any, Dict

from podman_doctor.doctor.models import CheckResult, CheckStatus, DiagnosticReport

PODMAN_PIPE_URI = "npipe:////./pipe/podman-machine-default"
RULE_WIDTH = 60


class Colors:
    """ANSI color codes for terminal output."""

    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


def _colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{color}{text}{Colors.RESET}"


def _status_icon(status: CheckStatus) -> str:
    """Get status icon with color."""
    icons = {
        CheckStatus.PASS: _colorize("✓", Colors.GREEN),
        CheckStatus.WARN: _colorize("⚠", Colors.YELLOW),
        CheckStatus.FAIL: _colorize("✗", Colors.RED),
        CheckStatus.SKIP: _colorize("○", Colors.BLUE),
        CheckStatus.INFO: _colorize("i", Colors.CYAN),
    }
    return icons.get(status, "?")


def print_header(title: str) -> None:
    print(f"\n{Colors.BOLD}{title}{Colors.RESET}")
    print("=" * RULE_WIDTH)


def print_section(title: str) -> None:
    print(f"\n{Colors.BOLD}{title}{Colors.RESET}")
    print("-" * RULE_WIDTH)


def print_result(result: CheckResult, verbose: bool = False) -> None:
    icon = _status_icon(result.status)
    print(f"  {icon} {result.name}: {result.message}")

    if verbose and result.details:
        for line in result.details.split("\n"):
            print(f"      {_colorize(line, Colors.CYAN)}")


def print_fatal(message: str) -> None:
    print(f"\n{_colorize('FATAL: ' + message, Colors.RED)}")
    print(_colorize("Diagnostics aborted; remaining checks depend on WSL.", Colors.RED))


def build_settings_snippet(report: DiagnosticReport) -> Dict[str, Any]:
    """Choose the Dev Containers settings that match what was found.

    The host named pipe wins over a WSL rootless socket when both exist.
    """
    settings: Dict[str, Any] = {"dev.containers.dockerPath": "podman"}
    if report.host_pipe_exists:
        settings["dev.containers.dockerSocketPath"] = PODMAN_PIPE_URI
        settings["docker.host"] = PODMAN_PIPE_URI
    elif report.wsl_socket_path:
        settings["dev.containers.executeInWSL"] = True
        if report.wsl_socket_distro:
            settings["dev.containers.executeInWSLDistro"] = report.wsl_socket_distro
        settings["dev.containers.dockerSocketPath"] = f"unix://{report.wsl_socket_path}"
    return settings


def render_settings_snippet(report: DiagnosticReport) -> str:
    return json.dumps(build_settings_snippet(report), indent=4)


def print_summary(report: DiagnosticReport) -> None:
    """Print issue counts, the issues, numbered recommendations and the snippet."""
    results = report.results
    passed = sum(1 for r in results if r.status == CheckStatus.PASS)
    warned = sum(1 for r in results if r.status == CheckStatus.WARN)
    failed = sum(1 for r in results if r.status == CheckStatus.FAIL)
    skipped = sum(1 for r in results if r.status == CheckStatus.SKIP)

    print("\n" + "=" * RULE_WIDTH)
    print(f"{Colors.BOLD}Summary:{Colors.RESET}")
    print(
        f"  {_colorize(f'{passed} passed', Colors.GREEN)}, "
        f"{_colorize(f'{warned} warnings', Colors.YELLOW)}, "
        f"{_colorize(f'{failed} failed', Colors.RED)}, "
        f"{_colorize(f'{skipped} skipped', Colors.BLUE)}"
    )

    print(f"\n{Colors.BOLD}Issues:{Colors.RESET}")
    if report.issues:
        for issue in report.issues:
            print(f"  {_colorize('✗', Colors.RED)} {issue}")
    else:
        print(f"  {_colorize('No blocking issues found.', Colors.GREEN)}")

    print(f"\n{Colors.BOLD}Recommendations:{Colors.RESET}")
    if report.recommendations:
        for index, recommendation in enumerate(report.recommendations, start=1):
            lines = recommendation.split("\n")
            print(f"  {index}. {lines[0]}")
            for line in lines[1:]:
                print(f"     {line}")
    else:
        print("  None.")

    print(f"\n{Colors.BOLD}Recommended VS Code settings (settings.json):{Colors.RESET}")
    for line in render_settings_snippet(report).split("\n"):
        print(f"  {line}")
    print()
