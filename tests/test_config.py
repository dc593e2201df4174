"""Tests for DoctorConfig, logging setup and the real probe's error handling."""

import logging
import subprocess
from unittest.mock import patch

import pytest

from podman_doctor.doctor.models import UnreadableFileError
from podman_doctor.doctor.probe import SubsystemProbe
from podman_doctor_utils.config import DEFAULT_COMMAND_TIMEOUT, DoctorConfig
from podman_doctor_utils.logging_config import _safe_int_from_env, get_logger


class TestDoctorConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PODMAN_DOCTOR_ARTIFACTORY_URL", raising=False)
        monkeypatch.delenv("PODMAN_DOCTOR_COMMAND_TIMEOUT", raising=False)
        config = DoctorConfig.from_env()
        assert config.artifactory_url is None
        assert config.command_timeout == DEFAULT_COMMAND_TIMEOUT

    def test_env_timeouts(self, monkeypatch):
        monkeypatch.setenv("PODMAN_DOCTOR_COMMAND_TIMEOUT", "3.5")
        monkeypatch.setenv("PODMAN_DOCTOR_HTTP_TIMEOUT", "not-a-number")
        config = DoctorConfig.from_env()
        assert config.command_timeout == 3.5
        assert config.http_timeout == 10.0

    def test_argument_overrides_env(self, monkeypatch):
        monkeypatch.setenv("PODMAN_DOCTOR_ARTIFACTORY_URL", "https://env.example.com")
        config = DoctorConfig.from_env(artifactory_url="https://cli.example.com")
        assert config.artifactory_url == "https://cli.example.com"


class TestLogging:
    def test_loggers_share_package_namespace(self):
        assert get_logger("cli").name == "podman_doctor.cli"
        assert get_logger("podman_doctor.doctor.checks").name == "podman_doctor.doctor.checks"
        assert logging.getLogger("podman_doctor").propagate is False

    def test_safe_int_from_env(self, monkeypatch):
        monkeypatch.setenv("PODMAN_DOCTOR_TEST_INT", "-4")
        assert _safe_int_from_env("PODMAN_DOCTOR_TEST_INT", 7) == 7
        monkeypatch.setenv("PODMAN_DOCTOR_TEST_INT", "12")
        assert _safe_int_from_env("PODMAN_DOCTOR_TEST_INT", 7) == 12


class TestSubsystemProbe:
    """The real probe degrades failures to CommandResult instead of raising."""

    @patch("podman_doctor.doctor.probe.subprocess.run")
    def test_missing_executable(self, mock_run):
        mock_run.side_effect = FileNotFoundError()
        result = SubsystemProbe(timeout=1).wsl("--version")
        assert result.ok is False
        assert "not found" in result.error

    @patch("podman_doctor.doctor.probe.subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="podman", timeout=1)
        result = SubsystemProbe(timeout=1).podman("info")
        assert result.ok is False
        assert "timed out" in result.error

    @patch("podman_doctor.doctor.probe.subprocess.run")
    def test_decodes_utf16_output(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(
            args=["wsl"], returncode=0, stdout="* Ubuntu Running 2\r\n".encode("utf-16-le"), stderr=b""
        )
        result = SubsystemProbe(timeout=1).wsl("--list", "--verbose")
        assert result.ok is True
        assert result.output == "* Ubuntu Running 2"
        assert mock_run.call_args.kwargs["timeout"] == 1

    def test_wsl_exec_command_line(self):
        probe = SubsystemProbe(timeout=1)
        with patch.object(probe, "run") as mock_run:
            probe.wsl_exec("Ubuntu", "id", "-u")
        mock_run.assert_called_once_with(["wsl", "-d", "Ubuntu", "--", "id", "-u"])

    def test_proxy_settings_accept_lowercase(self):
        probe = SubsystemProbe(environ={"https_proxy": "http://proxy:3128"})
        assert probe.proxy_settings() == {"HTTPS_PROXY": "http://proxy:3128"}

    def test_read_text_missing_file(self, tmp_path):
        assert SubsystemProbe().read_text(tmp_path / "missing.json") is None

    def test_read_text_strips_bom(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_bytes(b"\xef\xbb\xbf{}")
        assert SubsystemProbe().read_text(path) == "{}"

    def test_read_text_utf16(self, tmp_path):
        path = tmp_path / ".wslconfig"
        path.write_bytes("[wsl2]\nmemory=8GB\n".encode("utf-16"))
        assert SubsystemProbe().read_text(path) == "[wsl2]\nmemory=8GB\n"

    def test_read_text_utf16_without_bom(self, tmp_path):
        path = tmp_path / ".wslconfig"
        path.write_bytes("[wsl2]\n".encode("utf-16-le"))
        assert SubsystemProbe().read_text(path) == "[wsl2]\n"

    def test_read_text_undecodable_raises(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_bytes(b'{"editor.fontFamily": "Caf\xe9"}')
        with pytest.raises(UnreadableFileError) as excinfo:
            SubsystemProbe().read_text(path)
        assert excinfo.value.path == path
        assert "UTF-8" in excinfo.value.reason

    def test_read_text_directory_raises(self, tmp_path):
        with pytest.raises(UnreadableFileError):
            SubsystemProbe().read_text(tmp_path)

    @patch("podman_doctor.doctor.probe.requests.get")
    def test_http_get_passes_timeout(self, mock_get):
        SubsystemProbe().http_get("https://artifactory.corp.example.com", timeout=2)
        assert mock_get.call_args.kwargs["timeout"] == 2
