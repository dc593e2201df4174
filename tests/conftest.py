"""Shared fixtures built on the helpers module."""

from pathlib import Path

import pytest

from helpers import (
    APPDATA,
    AUTH_JSON,
    CONNECTION_LIST_OUTPUT,
    HOME,
    MACHINE_LIST_JSON,
    REGISTRIES_CONF,
    SETTINGS_JSON,
    WSL_LIST_OUTPUT,
    WSL_VERSION_OUTPUT,
    WSLCONFIG_WITH_CGROUPS,
    FakeProbe,
    ok,
    wsl_in,
)
from podman_doctor_utils.config import DoctorConfig


@pytest.fixture
def healthy_probe():
    """A probe describing a fully working setup with one Ubuntu distro."""
    probe = FakeProbe()
    probe.commands.update(
        {
            ("wsl", "--version"): ok(WSL_VERSION_OUTPUT),
            ("wsl", "--list", "--verbose"): ok(WSL_LIST_OUTPUT),
            ("podman", "--version"): ok("podman version 5.2.5\n"),
            ("podman", "machine", "list", "--format", "json"): ok(MACHINE_LIST_JSON),
            ("podman", "system", "connection", "list"): ok(CONNECTION_LIST_OUTPUT),
            ("podman", "info"): ok("host:\n  arch: amd64\n"),
            ("podman", "images", "--format", "{{.Repository}}:{{.Tag}}"): ok(
                "mcr.microsoft.com/devcontainers/python:3.12\n"
            ),
            wsl_in("Ubuntu", "which", "podman"): ok("/usr/bin/podman\n"),
            wsl_in("Ubuntu", "podman", "--version"): ok("podman version 4.9.3\n"),
            wsl_in("Ubuntu", "ps", "-p", "1", "-o", "comm="): ok("systemd\n"),
            wsl_in("Ubuntu", "id", "-u"): ok("1000\n"),
            wsl_in("Ubuntu", "test", "-S", "/run/user/1000/podman/podman.sock"): ok(),
            wsl_in("Ubuntu", "podman", "images", "--format", "{{.Repository}}:{{.Tag}}"): ok(
                "docker.io/library/alpine:latest\n"
            ),
            wsl_in("Ubuntu", "cat", "/etc/containers/registries.conf"): ok(REGISTRIES_CONF),
        }
    )
    probe.executables.update(
        {
            "podman": r"C:\Program Files\RedHat\Podman\podman.exe",
            "code": r"C:\Users\dev\AppData\Local\Programs\Microsoft VS Code\bin\code.cmd",
        }
    )
    probe.files.update(
        {
            str(Path(HOME) / ".wslconfig"): WSLCONFIG_WITH_CGROUPS,
            str(Path(APPDATA) / "Code" / "User" / "settings.json"): SETTINGS_JSON,
            str(Path(HOME) / ".config" / "containers" / "auth.json"): AUTH_JSON,
        }
    )
    probe.existing_paths.add(r"\\.\pipe\podman-machine-default")
    return probe


@pytest.fixture
def config():
    return DoctorConfig(command_timeout=1, http_timeout=1)
