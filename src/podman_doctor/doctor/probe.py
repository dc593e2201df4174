"""
Host access for the diagnostic checks.

`SubsystemProbe` is the only place that runs external commands, reads files
or talks to the network. Checks receive a probe instance, so tests swap in a
fake that returns canned output instead of invoking wsl.exe or podman.
Nothing here mutates host state.
"""

import os
import platform
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

import requests

from podman_doctor.doctor.models import UnreadableFileError
from podman_doctor.doctor.parsers import decode_command_output, decode_file_content
from podman_doctor_utils.config import DEFAULT_COMMAND_TIMEOUT
from podman_doctor_utils.logging_config import get_logger

logger = get_logger(__name__)

PROXY_ENV_VARS = ("HTTP_PROXY", "HTTPS_PROXY", "NO_PROXY")


@dataclass
class CommandResult:
    """Outcome of one external command; `ok` means it ran and exited 0."""

    ok: bool
    returncode: Optional[int] = None
    stdout: str = ""
    stderr: str = ""

    @property
    def output(self) -> str:
        return self.stdout.strip()

    @property
    def error(self) -> str:
        return self.stderr.strip() or self.stdout.strip()


class SubsystemProbe:
    """Read-only access to WSL, Podman, the filesystem and the network."""

    def __init__(
        self,
        timeout: float = DEFAULT_COMMAND_TIMEOUT,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.timeout = timeout
        self.environ = environ if environ is not None else os.environ

    # -- processes -------------------------------------------------------

    def run(self, args: List[str]) -> CommandResult:
        """Run a command and capture its output. Never raises."""
        logger.debug(f"Running: {' '.join(args)}")
        try:
            completed = subprocess.run(
                args,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            logger.debug(f"Command not found: {args[0]}")
            return CommandResult(ok=False, stderr=f"{args[0]}: command not found")
        except subprocess.TimeoutExpired:
            logger.warning(f"Command timed out after {self.timeout}s: {' '.join(args)}")
            return CommandResult(ok=False, stderr=f"timed out after {self.timeout}s")
        except OSError as e:
            logger.debug(f"Command failed to start ({args[0]}): {e}")
            return CommandResult(ok=False, stderr=str(e))

        result = CommandResult(
            ok=completed.returncode == 0,
            returncode=completed.returncode,
            stdout=decode_command_output(completed.stdout),
            stderr=decode_command_output(completed.stderr),
        )
        logger.debug(f"Exit code {completed.returncode}: {' '.join(args)}")
        return result

    def wsl(self, *args: str) -> CommandResult:
        return self.run(["wsl", *args])

    def wsl_exec(self, distro: str, *args: str) -> CommandResult:
        """Run a command inside the named distribution."""
        return self.run(["wsl", "-d", distro, "--", *args])

    def podman(self, *args: str) -> CommandResult:
        return self.run(["podman", *args])

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name)

    # -- host ------------------------------------------------------------

    def os_info(self) -> Tuple[str, str, str]:
        """Return (system, release, version), e.g. ("Windows", "10", "10.0.19045")."""
        return platform.system(), platform.release(), platform.version()

    def is_elevated(self) -> bool:
        try:
            if platform.system() == "Windows":
                import ctypes

                return bool(ctypes.windll.shell32.IsUserAnAdmin())
            return os.geteuid() == 0
        except (AttributeError, OSError):
            return False

    def proxy_settings(self) -> Dict[str, str]:
        found = {}
        for name in PROXY_ENV_VARS:
            value = self.environ.get(name) or self.environ.get(name.lower())
            if value:
                found[name] = value
        return found

    def home_dir(self) -> Path:
        profile = self.environ.get("USERPROFILE")
        return Path(profile) if profile else Path.home()

    def appdata_dir(self) -> Path:
        appdata = self.environ.get("APPDATA")
        return Path(appdata) if appdata else self.home_dir() / "AppData" / "Roaming"

    # -- files -----------------------------------------------------------

    def path_exists(self, path) -> bool:
        try:
            return os.path.exists(path)
        except OSError:
            return False

    def read_text(self, path) -> Optional[str]:
        """Return the file contents decoded as UTF-8 or UTF-16.

        Returns None when the file does not exist. Raises UnreadableFileError
        when it exists but cannot be opened or decoded.
        """
        try:
            with open(path, "rb") as f:
                raw = f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.debug(f"Could not read {path}: {e}")
            raise UnreadableFileError(path, e.strerror or str(e)) from e
        try:
            return decode_file_content(raw)
        except UnicodeDecodeError as e:
            logger.debug(f"Could not decode {path}: {e}")
            raise UnreadableFileError(path, "not UTF-8 or UTF-16 text") from e

    # -- network ---------------------------------------------------------

    def http_get(self, url: str, timeout: float) -> requests.Response:
        """GET a URL. Raises requests.RequestException on failure."""
        logger.debug(f"GET {url} (timeout {timeout}s)")
        return requests.get(url, timeout=timeout, allow_redirects=True)
