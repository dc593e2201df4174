"""Tests for report rendering and the generated settings snippet."""

import json

from podman_doctor.doctor.models import CheckResult, CheckStatus, DiagnosticReport
from podman_doctor.doctor.report import (
    PODMAN_PIPE_URI,
    build_settings_snippet,
    print_result,
    print_summary,
    render_settings_snippet,
)

SOCKET = "/run/user/1000/podman/podman.sock"


class TestSettingsSnippet:
    """Tests for choosing between the named pipe and the WSL socket."""

    def test_pipe_preferred_when_both_exist(self):
        report = DiagnosticReport(host_pipe_exists=True, wsl_socket_path=SOCKET, wsl_socket_distro="Ubuntu")
        settings = build_settings_snippet(report)
        assert settings["dev.containers.dockerSocketPath"] == PODMAN_PIPE_URI
        assert "dev.containers.executeInWSL" not in settings

    def test_wsl_socket_when_no_pipe(self):
        report = DiagnosticReport(wsl_socket_path=SOCKET, wsl_socket_distro="Ubuntu")
        settings = build_settings_snippet(report)
        assert settings["dev.containers.dockerSocketPath"] == f"unix://{SOCKET}"
        assert settings["dev.containers.executeInWSL"] is True
        assert settings["dev.containers.executeInWSLDistro"] == "Ubuntu"

    def test_neither_found(self):
        assert build_settings_snippet(DiagnosticReport()) == {"dev.containers.dockerPath": "podman"}

    def test_rendered_snippet_is_json(self):
        report = DiagnosticReport(host_pipe_exists=True)
        assert json.loads(render_settings_snippet(report))["dev.containers.dockerPath"] == "podman"


class TestPrinting:
    """Tests for terminal output."""

    def test_details_only_when_verbose(self, capsys):
        result = CheckResult(name="Podman CLI", status=CheckStatus.PASS, message="found", details="C:\\podman.exe")
        print_result(result, verbose=False)
        quiet = capsys.readouterr().out
        print_result(result, verbose=True)
        loud = capsys.readouterr().out

        assert "Podman CLI: found" in quiet
        assert "podman.exe" not in quiet
        assert "podman.exe" in loud

    def test_summary_clean_bill(self, capsys):
        print_summary(DiagnosticReport())
        captured = capsys.readouterr()
        assert "No blocking issues found" in captured.out
        assert "Recommendations:" in captured.out

    def test_summary_numbers_recommendations(self, capsys):
        report = DiagnosticReport(
            issues=["Podman is not installed"],
            recommendations=["First fix", "Second fix:\n    run this"],
        )
        print_summary(report)
        captured = capsys.readouterr()

        assert "Podman is not installed" in captured.out
        assert "No blocking issues found" not in captured.out
        assert "1. First fix" in captured.out
        assert "2. Second fix:" in captured.out
        assert "    run this" in captured.out

    def test_summary_counts(self, capsys):
        report = DiagnosticReport(
            sections={
                "Host": [
                    CheckResult("a", CheckStatus.PASS, "ok"),
                    CheckResult("b", CheckStatus.WARN, "hmm"),
                    CheckResult("c", CheckStatus.FAIL, "bad"),
                    CheckResult("d", CheckStatus.INFO, "fyi"),
                ]
            }
        )
        print_summary(report)
        captured = capsys.readouterr()
        assert "1 passed" in captured.out
        assert "1 warnings" in captured.out
        assert "1 failed" in captured.out
        assert "0 skipped" in captured.out
