"""
Parsers for the raw output of wsl.exe, podman and the config files they read.

Every function here is pure: text in, plain values out. Nothing touches the
host, so each one can be exercised against captured sample output.
"""

import codecs
import configparser
import json
import re
from typing import Any, Dict, List, Optional

from podman_doctor.doctor.models import DistroInfo, MachineInfo

CGROUP_V2_SETTING = "cgroup_no_v1=all"
REGISTRY_MIRROR_MARKERS = ("[[registry.mirror]]", "mirror =")
EDITOR_SETTING_KEYS = (
    "dev.containers.dockerPath",
    "dev.containers.dockerSocketPath",
    "docker.host",
)


def _looks_utf16le(raw: bytes) -> bool:
    # every other byte of ASCII text is NUL
    return len(raw) >= 2 and raw[1:2] == b"\x00"


def decode_command_output(raw: bytes) -> str:
    """Decode process output, including the UTF-16LE that wsl.exe emits."""
    if not raw:
        return ""
    if raw.startswith(codecs.BOM_UTF16_LE):
        return raw[2:].decode("utf-16-le", errors="replace")
    if _looks_utf16le(raw):
        return raw.decode("utf-16-le", errors="replace")
    return raw.decode("utf-8", errors="replace").replace("\x00", "")


def decode_file_content(raw: bytes) -> str:
    """Decode a config file written as UTF-8 or UTF-16 (with or without BOM).

    PowerShell 5 redirection and Notepad's "Unicode" option both produce
    UTF-16. Raises UnicodeDecodeError when the bytes fit none of these.
    """
    if raw.startswith(codecs.BOM_UTF8):
        return raw[len(codecs.BOM_UTF8):].decode("utf-8")
    if raw.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        return raw.decode("utf-16")
    if _looks_utf16le(raw):
        return raw.decode("utf-16-le")
    return raw.decode("utf-8")


def parse_windows_build(version: str) -> Optional[int]:
    """Extract the build number from `platform.version()` ("10.0.19045")."""
    parts = [p for p in version.strip().split(".") if p]
    if len(parts) < 3:
        return None
    try:
        return int(parts[2])
    except ValueError:
        return None


def parse_wsl_version(text: str) -> Optional[str]:
    """Return the WSL package version from `wsl --version` output."""
    for line in text.splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        if key.strip().lower() == "wsl version":
            return value.strip()
    for line in text.splitlines():
        match = re.search(r"\d+(\.\d+)+", line)
        if match:
            return match.group(0)
    return None


def parse_distro_list(text: str) -> List[DistroInfo]:
    """Parse `wsl --list --verbose`.

    Expected shape::

          NAME                      STATE           VERSION
        * Ubuntu                    Running         2
          podman-machine-default    Stopped         2

    Columns are separated by runs of two or more spaces, so localized
    states such as "Wird ausgeführt" stay in one piece. Output that lost
    its column padding falls back to single-space splitting.
    """
    distros = []
    header_consumed = False
    for line in text.splitlines():
        if not line.strip():
            continue
        if not header_consumed:
            header_consumed = True
            if line.split()[0].upper() == "NAME":
                continue
        is_default = line.lstrip().startswith("*")
        normalized = line.strip().lstrip("*").strip()
        if not normalized:
            continue

        parts = re.split(r"\s{2,}", normalized)
        if len(parts) >= 3:
            name, state, version = parts[0], parts[1], parts[2]
        else:
            tokens = normalized.split()
            if len(tokens) >= 3:
                name = " ".join(tokens[:-2])
                state, version = tokens[-2], tokens[-1]
            elif len(tokens) == 2:
                name, state, version = tokens[0], tokens[1], None
            else:
                continue
        distros.append(
            DistroInfo(name=name.strip(), state=state.strip(), version=version, is_default=is_default)
        )
    return distros


def parse_machine_list(text: str) -> List[MachineInfo]:
    """Parse `podman machine list`, preferring its JSON form.

    Falls back to the table form where the LAST UP column reads
    "Currently running" for a live machine and the default carries a "*".
    """
    stripped = text.strip()
    if not stripped:
        return []
    try:
        data = json.loads(stripped)
    except ValueError:
        data = None

    if isinstance(data, list):
        machines = []
        for entry in data:
            if not isinstance(entry, dict) or not entry.get("Name"):
                continue
            machines.append(
                MachineInfo(
                    name=str(entry["Name"]).rstrip("*"),
                    running=bool(entry.get("Running")),
                    default=bool(entry.get("Default")),
                )
            )
        return machines

    machines = []
    for line in stripped.splitlines():
        tokens = line.split()
        if not tokens or tokens[0].upper() == "NAME":
            continue
        name = tokens[0]
        lowered = line.lower()
        machines.append(
            MachineInfo(
                name=name.rstrip("*"),
                running="currently running" in lowered or " running" in lowered,
                default=name.endswith("*"),
            )
        )
    return machines


def parse_table_rows(text: str) -> List[str]:
    """Return the data rows of a CLI table, dropping its header line."""
    rows = [line.rstrip() for line in text.splitlines() if line.strip()]
    if rows and rows[0].split()[0].lower() == "name":
        rows = rows[1:]
    return rows


def parse_image_list(text: str) -> List[str]:
    """Parse `podman images --format "{{.Repository}}:{{.Tag}}"` output."""
    images = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.upper().startswith("REPOSITORY"):
            continue
        images.append(line)
    return images


def parse_uid(text: str) -> Optional[int]:
    try:
        return int(text.strip().splitlines()[0])
    except (IndexError, ValueError):
        return None


def has_cgroup_v2_setting(text: str) -> bool:
    """True when the `[wsl2]` section sets `kernelCommandLine` with `cgroup_no_v1=all`.

    Raises configparser.Error when the text is not INI.
    """
    parser = configparser.ConfigParser(
        strict=False,
        interpolation=None,
        inline_comment_prefixes=("#", ";"),
    )
    parser.read_string(text)
    for section in parser.sections():
        if section.strip().lower() != "wsl2":
            continue
        if not parser.has_option(section, "kernelCommandLine"):
            continue
        if CGROUP_V2_SETTING in parser.get(section, "kernelCommandLine"):
            return True
    return False


def registries_has_mirrors(text: str) -> bool:
    return any(marker in text for marker in REGISTRY_MIRROR_MARKERS)


def strip_json_comments(text: str) -> str:
    """Remove // and /* */ comments and trailing commas from JSONC text.

    String literals are left untouched, so values such as
    "npipe:////./pipe/podman-machine-default" or "a,}" survive.
    """
    out = []
    i = 0
    length = len(text)
    in_string = False
    # index in out of a comma that only whitespace has followed so far
    pending_comma = None
    while i < length:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < length:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue
        if ch == '"':
            in_string = True
            pending_comma = None
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = length if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = length if end == -1 else end + 2
        else:
            if ch in "}]" and pending_comma is not None:
                del out[pending_comma]
                pending_comma = None
            elif ch == ",":
                pending_comma = len(out)
            elif not ch.isspace():
                pending_comma = None
            out.append(ch)
            i += 1
    return "".join(out)


def load_jsonc(text: str) -> Any:
    """Parse VS Code style JSON. Raises ValueError when the text is not JSON."""
    return json.loads(strip_json_comments(text))


def extract_editor_settings(data: Any) -> Dict[str, Optional[Any]]:
    """Pick the container-related keys out of a parsed settings.json."""
    if not isinstance(data, dict):
        raise ValueError("settings.json does not contain a JSON object")
    return {key: data.get(key) for key in EDITOR_SETTING_KEYS}


def parse_registry_auths(text: str) -> List[str]:
    """List registry hostnames under the `auths` map of an auth.json/config.json.

    Raises ValueError when the file is not valid JSON.
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("credentials file does not contain a JSON object")
    auths = data.get("auths") or {}
    if not isinstance(auths, dict):
        return []
    return sorted(auths.keys())
