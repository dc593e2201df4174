"""
Diagnostic checks for Podman-based Dev Containers on Windows.

Sections run in a fixed order because later ones build on earlier findings
(the WSL distribution list decides which distributions are probed for a
native Podman). Each check returns a CheckResult; a check that raises is
recorded as FAIL and the run carries on. The only exception that escapes is
DiagnosticAborted, raised when WSL itself is missing.
"""

import configparser
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import requests

from podman_doctor.doctor import report as out
from podman_doctor.doctor.models import (
    CheckResult,
    CheckStatus,
    DiagnosticAborted,
    DiagnosticReport,
    DistroInfo,
    UnreadableFileError,
)
from podman_doctor.doctor.parsers import (
    extract_editor_settings,
    has_cgroup_v2_setting,
    load_jsonc,
    parse_distro_list,
    parse_image_list,
    parse_machine_list,
    parse_registry_auths,
    parse_table_rows,
    parse_uid,
    parse_windows_build,
    parse_wsl_version,
    registries_has_mirrors,
)
from podman_doctor.doctor.probe import SubsystemProbe
from podman_doctor_utils.config import DoctorConfig
from podman_doctor_utils.logging_config import get_logger

logger = get_logger(__name__)

MIN_WINDOWS_BUILD = 19041
PODMAN_INSTALL_URL = "https://podman.io/docs/installation"
PODMAN_PIPE_PATH = r"\\.\pipe\podman-machine-default"
REGISTRIES_CONF = "/etc/containers/registries.conf"
IMAGE_FORMAT = "{{.Repository}}:{{.Tag}}"
EDITOR_ENGINE_KEY = "dev.containers.dockerPath"
MAX_LISTED = 10


class DiagnosticContext:
    """Mutable state for one run: config, probe and the report being built."""

    def __init__(self, config: DoctorConfig, probe: SubsystemProbe):
        self.config = config
        self.probe = probe
        self.report = DiagnosticReport()
        self._section: Optional[str] = None

    def begin_section(self, title: str) -> None:
        self._section = title
        self.report.sections.setdefault(title, [])
        out.print_section(title)

    def record(self, result: CheckResult) -> CheckResult:
        self.report.sections.setdefault(self._section or "General", []).append(result)
        out.print_result(result, verbose=self.config.verbose)
        return result

    def check(self, name: str, check_fn: Callable, *args) -> CheckResult:
        """Run one check, turning an unexpected exception into a FAIL result."""
        try:
            result = check_fn(self, *args)
        except DiagnosticAborted:
            raise
        except Exception as e:
            logger.debug(f"Check {name} raised", exc_info=True)
            result = CheckResult(
                name=name,
                status=CheckStatus.FAIL,
                message="Check raised exception",
                details=str(e),
            )
        return self.record(result)

    def issue(self, text: str) -> None:
        logger.info(f"Issue: {text}")
        self.report.issues.append(text)

    def recommend(self, text: str) -> None:
        self.report.recommendations.append(text)


def _listing(items: List[str]) -> Optional[str]:
    if not items:
        return None
    shown = "\n".join(items[:MAX_LISTED])
    if len(items) > MAX_LISTED:
        shown += f"\n... and {len(items) - MAX_LISTED} more"
    return shown


def wslconfig_path(probe: SubsystemProbe) -> Path:
    return probe.home_dir() / ".wslconfig"


def editor_settings_path(probe: SubsystemProbe) -> Path:
    return probe.appdata_dir() / "Code" / "User" / "settings.json"


def credentials_candidates(probe: SubsystemProbe) -> List[Path]:
    home = probe.home_dir()
    return [
        home / ".config" / "containers" / "auth.json",
        probe.appdata_dir() / "containers" / "auth.json",
        home / ".docker" / "config.json",
    ]


def cgroup_recommendation(path: Path) -> str:
    return (
        f"Enable cgroups v2 for WSL (needed for container stats) by adding to {path}:\n"
        "    [wsl2]\n"
        "    kernelCommandLine = cgroup_no_v1=all\n"
        "then restart WSL with: wsl --shutdown"
    )


# -- 1. host environment ---------------------------------------------------


def check_os_version(ctx: DiagnosticContext) -> CheckResult:
    """Windows build 19041 is the minimum for WSL 2."""
    system, release, version = ctx.probe.os_info()
    if system != "Windows":
        return CheckResult(
            name="Operating System",
            status=CheckStatus.WARN,
            message=f"{system} {release} (not Windows)",
            details="These checks target a Windows host running WSL 2.",
        )

    build = parse_windows_build(version)
    if build is None:
        return CheckResult(
            name="Operating System",
            status=CheckStatus.WARN,
            message=f"Windows {release}, build unknown",
            details=f"Unrecognised version string: {version!r}",
        )
    if build < MIN_WINDOWS_BUILD:
        ctx.issue(
            f"Windows build {build} is older than {MIN_WINDOWS_BUILD}; "
            "WSL 2 and the virtualization features Podman needs are unavailable."
        )
        return CheckResult(
            name="Operating System",
            status=CheckStatus.FAIL,
            message=f"Windows {release} build {build} is too old",
            details=f"Build {MIN_WINDOWS_BUILD} or later is required.",
        )
    return CheckResult(
        name="Operating System",
        status=CheckStatus.PASS,
        message=f"Windows {release} (build {build})",
    )


def check_elevation(ctx: DiagnosticContext) -> CheckResult:
    elevated = ctx.probe.is_elevated()
    return CheckResult(
        name="Elevation",
        status=CheckStatus.INFO,
        message="Running as administrator" if elevated else "Running without elevation",
    )


def check_proxy(ctx: DiagnosticContext) -> CheckResult:
    proxies = ctx.probe.proxy_settings()
    if not proxies:
        return CheckResult(name="Proxy", status=CheckStatus.INFO, message="No proxy variables set")
    return CheckResult(
        name="Proxy",
        status=CheckStatus.INFO,
        message=f"Configured: {', '.join(proxies)}",
        details="\n".join(f"{k}={v}" for k, v in proxies.items()),
    )


def check_host_environment(ctx: DiagnosticContext) -> None:
    ctx.check("Operating System", check_os_version)
    ctx.check("Elevation", check_elevation)
    ctx.check("Proxy", check_proxy)


# -- 2. WSL ----------------------------------------------------------------


def check_wsl_installed(ctx: DiagnosticContext) -> CheckResult:
    result = ctx.probe.wsl("--version")
    if not result.ok:
        ctx.record(
            CheckResult(
                name="WSL",
                status=CheckStatus.FAIL,
                message="WSL not detected",
                details=result.error or None,
            )
        )
        out.print_fatal("WSL is not installed or 'wsl --version' failed. Install it with: wsl --install")
        raise DiagnosticAborted("WSL is not available")
    version = parse_wsl_version(result.stdout)
    return CheckResult(
        name="WSL",
        status=CheckStatus.PASS,
        message=f"WSL {version}" if version else "WSL detected",
    )


def check_wsl_distros(ctx: DiagnosticContext) -> CheckResult:
    result = ctx.probe.wsl("--list", "--verbose")
    distros = parse_distro_list(result.stdout) if result.ok else []
    ctx.report.distros = distros
    if not distros:
        return CheckResult(
            name="Distributions",
            status=CheckStatus.WARN,
            message="No WSL distributions installed",
            details=result.error or None,
        )
    return CheckResult(
        name="Distributions",
        status=CheckStatus.PASS,
        message=f"{len(distros)} installed",
        details="\n".join(
            f"{'* ' if d.is_default else ''}{d.name} ({d.state}, WSL {d.version or '?'})"
            for d in distros
        ),
    )


def check_machine_distro(ctx: DiagnosticContext) -> CheckResult:
    machines = [d for d in ctx.report.distros if d.is_podman_machine]
    if not machines:
        return CheckResult(
            name="Podman machine distro",
            status=CheckStatus.WARN,
            message="No podman-machine distribution",
        )
    return CheckResult(
        name="Podman machine distro",
        status=CheckStatus.PASS,
        message=", ".join(f"{d.name} ({d.state})" for d in machines),
    )


def check_general_distro(ctx: DiagnosticContext) -> CheckResult:
    general = [d for d in ctx.report.distros if d.is_general_purpose]
    if not general:
        return CheckResult(
            name="General-purpose distro",
            status=CheckStatus.WARN,
            message="None installed; native Podman in WSL is unavailable",
        )
    return CheckResult(
        name="General-purpose distro",
        status=CheckStatus.PASS,
        message=", ".join(f"{d.name} ({d.state})" for d in general),
    )


def check_wslconfig_cgroups(ctx: DiagnosticContext) -> CheckResult:
    path = wslconfig_path(ctx.probe)
    try:
        text = ctx.probe.read_text(path)
        enabled = text is not None and has_cgroup_v2_setting(text)
    except (UnreadableFileError, configparser.Error) as e:
        return CheckResult(
            name="cgroups v2",
            status=CheckStatus.INFO,
            message=f"{path} present but contents unknown",
            details=str(e),
        )
    if enabled:
        return CheckResult(
            name="cgroups v2",
            status=CheckStatus.PASS,
            message=f"Enabled in {path}",
        )
    ctx.recommend(cgroup_recommendation(path))
    return CheckResult(
        name="cgroups v2",
        status=CheckStatus.WARN,
        message=f"{path} not found" if text is None else "cgroup_no_v1=all not set",
    )


def check_wsl(ctx: DiagnosticContext) -> None:
    ctx.check("WSL", check_wsl_installed)
    ctx.check("Distributions", check_wsl_distros)
    ctx.check("Podman machine distro", check_machine_distro)
    ctx.check("General-purpose distro", check_general_distro)
    ctx.check("cgroups v2", check_wslconfig_cgroups)


# -- 3. Podman on the Windows host -------------------------------------------


def check_host_podman_installed(ctx: DiagnosticContext) -> CheckResult:
    path = ctx.probe.which("podman")
    if not path:
        ctx.issue(f"Podman is not installed on the Windows host. Install it from {PODMAN_INSTALL_URL}")
        return CheckResult(name="Podman CLI", status=CheckStatus.FAIL, message="Not found on PATH")
    return CheckResult(name="Podman CLI", status=CheckStatus.PASS, message=path)


def check_host_podman_version(ctx: DiagnosticContext) -> CheckResult:
    result = ctx.probe.podman("--version")
    if not result.ok:
        return CheckResult(
            name="Podman version",
            status=CheckStatus.WARN,
            message="Could not query version",
            details=result.error or None,
        )
    return CheckResult(name="Podman version", status=CheckStatus.PASS, message=result.output)


def check_host_machines(ctx: DiagnosticContext) -> CheckResult:
    result = ctx.probe.podman("machine", "list", "--format", "json")
    if not result.ok:
        result = ctx.probe.podman("machine", "list")
    machines = parse_machine_list(result.stdout) if result.ok else []
    if not machines:
        ctx.recommend("Create and start a Podman machine:\n    podman machine init\n    podman machine start")
        return CheckResult(
            name="Podman machines",
            status=CheckStatus.WARN,
            message="No Podman machines found",
            details=result.error or None,
        )

    details = "\n".join(
        f"{m.name}{' (default)' if m.default else ''}: {'running' if m.running else 'stopped'}"
        for m in machines
    )
    running = [m for m in machines if m.running]
    if not running:
        target = next((m for m in machines if m.default), machines[0])
        ctx.recommend(f"Start the Podman machine: podman machine start {target.name}")
        return CheckResult(
            name="Podman machines",
            status=CheckStatus.WARN,
            message=f"{len(machines)} found, none running",
            details=details,
        )
    return CheckResult(
        name="Podman machines",
        status=CheckStatus.PASS,
        message=f"Running: {', '.join(m.name for m in running)}",
        details=details,
    )


def check_host_connections(ctx: DiagnosticContext) -> CheckResult:
    result = ctx.probe.podman("system", "connection", "list")
    rows = parse_table_rows(result.stdout) if result.ok else []
    if not rows:
        return CheckResult(
            name="System connections",
            status=CheckStatus.WARN,
            message="No connections configured",
            details=result.error or None,
        )
    return CheckResult(
        name="System connections",
        status=CheckStatus.PASS,
        message=f"{len(rows)} configured",
        details="\n".join(rows),
    )


def check_host_connectivity(ctx: DiagnosticContext) -> CheckResult:
    result = ctx.probe.podman("info")
    if not result.ok:
        return CheckResult(
            name="Podman connectivity",
            status=CheckStatus.FAIL,
            message="Cannot reach the Podman service",
            details=result.error or None,
        )
    return CheckResult(name="Podman connectivity", status=CheckStatus.PASS, message="Connected")


def check_host_images(ctx: DiagnosticContext) -> CheckResult:
    result = ctx.probe.podman("images", "--format", IMAGE_FORMAT)
    if not result.ok:
        return CheckResult(
            name="Host images",
            status=CheckStatus.WARN,
            message="Could not list images",
            details=result.error or None,
        )
    images = parse_image_list(result.stdout)
    return CheckResult(
        name="Host images",
        status=CheckStatus.INFO,
        message=f"{len(images)} image(s)",
        details=_listing(images),
    )


def check_host_pipe(ctx: DiagnosticContext) -> CheckResult:
    exists = ctx.probe.path_exists(PODMAN_PIPE_PATH)
    ctx.report.host_pipe_exists = exists
    if not exists:
        return CheckResult(
            name="Named pipe",
            status=CheckStatus.WARN,
            message=f"{PODMAN_PIPE_PATH} not found",
            details="The default Podman machine is not running or not exposing its API pipe.",
        )
    return CheckResult(name="Named pipe", status=CheckStatus.PASS, message=PODMAN_PIPE_PATH)


def check_podman_host(ctx: DiagnosticContext) -> None:
    installed = ctx.check("Podman CLI", check_host_podman_installed)
    if installed.passed:
        ctx.check("Podman version", check_host_podman_version)
        ctx.check("Podman machines", check_host_machines)
        ctx.check("System connections", check_host_connections)
        connected = ctx.check("Podman connectivity", check_host_connectivity)
        if connected.passed:
            ctx.check("Host images", check_host_images)
    ctx.check("Named pipe", check_host_pipe)


# -- 4. Podman inside WSL ----------------------------------------------------


def check_distro_podman_installed(ctx: DiagnosticContext, distro: DistroInfo) -> CheckResult:
    name = f"{distro.name}: Podman"
    result = ctx.probe.wsl_exec(distro.name, "which", "podman")
    if not result.ok or not result.output:
        ctx.recommend(
            f"Install Podman inside {distro.name} for a native rootless engine, e.g.:\n"
            f"    wsl -d {distro.name} -- sudo apt-get install -y podman"
        )
        return CheckResult(name=name, status=CheckStatus.WARN, message="Not installed")
    return CheckResult(name=name, status=CheckStatus.PASS, message=result.output)


def check_distro_podman_version(ctx: DiagnosticContext, distro: DistroInfo) -> CheckResult:
    name = f"{distro.name}: Podman version"
    result = ctx.probe.wsl_exec(distro.name, "podman", "--version")
    if not result.ok:
        return CheckResult(
            name=name,
            status=CheckStatus.WARN,
            message="Could not query version",
            details=result.error or None,
        )
    return CheckResult(name=name, status=CheckStatus.PASS, message=result.output)


def check_distro_systemd(ctx: DiagnosticContext, distro: DistroInfo) -> CheckResult:
    name = f"{distro.name}: systemd"
    result = ctx.probe.wsl_exec(distro.name, "ps", "-p", "1", "-o", "comm=")
    init = result.output if result.ok else ""
    if init == "systemd":
        return CheckResult(name=name, status=CheckStatus.PASS, message="PID 1 is systemd")
    ctx.recommend(
        f"Enable systemd in {distro.name} by adding to /etc/wsl.conf:\n"
        "    [boot]\n"
        "    systemd=true\n"
        "then restart WSL with: wsl --shutdown"
    )
    return CheckResult(
        name=name,
        status=CheckStatus.WARN,
        message=f"PID 1 is {init or 'unknown'}, not systemd",
    )


def check_distro_socket(
    ctx: DiagnosticContext, distro: DistroInfo, has_systemd: bool
) -> CheckResult:
    name = f"{distro.name}: rootless socket"
    uid = parse_uid(ctx.probe.wsl_exec(distro.name, "id", "-u").stdout)
    if uid is None:
        return CheckResult(name=name, status=CheckStatus.WARN, message="Could not determine user id")

    socket_path = f"/run/user/{uid}/podman/podman.sock"
    if ctx.probe.wsl_exec(distro.name, "test", "-S", socket_path).ok:
        if ctx.report.wsl_socket_path is None:
            ctx.report.wsl_socket_path = socket_path
            ctx.report.wsl_socket_distro = distro.name
        return CheckResult(name=name, status=CheckStatus.PASS, message=socket_path)

    if has_systemd:
        ctx.recommend(
            f"Enable the rootless Podman socket in {distro.name} as your own user:\n"
            f"    wsl -d {distro.name} -- systemctl --user enable --now podman.socket"
        )
    return CheckResult(name=name, status=CheckStatus.WARN, message=f"{socket_path} not found")


def check_distro_images(ctx: DiagnosticContext, distro: DistroInfo) -> CheckResult:
    name = f"{distro.name}: images"
    result = ctx.probe.wsl_exec(distro.name, "podman", "images", "--format", IMAGE_FORMAT)
    if not result.ok:
        return CheckResult(
            name=name,
            status=CheckStatus.WARN,
            message="Could not list images",
            details=result.error or None,
        )
    images = parse_image_list(result.stdout)
    return CheckResult(
        name=name,
        status=CheckStatus.INFO,
        message=f"{len(images)} image(s)",
        details=_listing(images),
    )


def check_distro_registries(ctx: DiagnosticContext, distro: DistroInfo) -> CheckResult:
    name = f"{distro.name}: registry mirrors"
    result = ctx.probe.wsl_exec(distro.name, "cat", REGISTRIES_CONF)
    if not result.ok:
        return CheckResult(name=name, status=CheckStatus.INFO, message=f"{REGISTRIES_CONF} not found")
    if registries_has_mirrors(result.stdout):
        return CheckResult(name=name, status=CheckStatus.PASS, message="Mirrors configured")
    return CheckResult(name=name, status=CheckStatus.INFO, message="No mirrors configured")


def _check_distro(ctx: DiagnosticContext, distro: DistroInfo) -> None:
    installed = ctx.check(f"{distro.name}: Podman", check_distro_podman_installed, distro)
    if not installed.passed:
        return
    ctx.check(f"{distro.name}: Podman version", check_distro_podman_version, distro)
    systemd = ctx.check(f"{distro.name}: systemd", check_distro_systemd, distro)
    ctx.check(f"{distro.name}: rootless socket", check_distro_socket, distro, systemd.passed)
    ctx.check(f"{distro.name}: images", check_distro_images, distro)
    ctx.check(f"{distro.name}: registry mirrors", check_distro_registries, distro)


def check_podman_wsl(ctx: DiagnosticContext) -> None:
    candidates = [d for d in ctx.report.distros if d.is_general_purpose]
    if not candidates:
        ctx.record(
            CheckResult(
                name="Native Podman",
                status=CheckStatus.SKIP,
                message="No general-purpose WSL distribution",
            )
        )
        return
    for distro in candidates:
        if not distro.running:
            # wsl -d would boot it
            ctx.record(
                CheckResult(
                    name=f"{distro.name}: Podman",
                    status=CheckStatus.SKIP,
                    message=f"Distribution is {distro.state}; start it with 'wsl -d {distro.name}' to include it",
                )
            )
            continue
        _check_distro(ctx, distro)


# -- 5. VS Code --------------------------------------------------------------


def check_editor_cli(ctx: DiagnosticContext) -> CheckResult:
    path = ctx.probe.which("code")
    if not path:
        return CheckResult(name="VS Code CLI", status=CheckStatus.WARN, message="'code' not found on PATH")
    return CheckResult(name="VS Code CLI", status=CheckStatus.PASS, message=path)


def check_editor_settings(ctx: DiagnosticContext) -> CheckResult:
    path = editor_settings_path(ctx.probe)
    try:
        text = ctx.probe.read_text(path)
    except UnreadableFileError as e:
        return CheckResult(
            name="Dev Containers settings",
            status=CheckStatus.INFO,
            message="settings.json present but could not be read",
            details=str(e),
        )
    if text is None:
        ctx.recommend(f'Set "{EDITOR_ENGINE_KEY}": "podman" in {path}')
        return CheckResult(name="Dev Containers settings", status=CheckStatus.WARN, message=f"{path} not found")

    try:
        settings = extract_editor_settings(load_jsonc(text))
    except ValueError as e:
        return CheckResult(
            name="Dev Containers settings",
            status=CheckStatus.INFO,
            message="settings.json present but could not be parsed",
            details=str(e),
        )

    details = "\n".join(f"{key}: {value if value is not None else '(not set)'}" for key, value in settings.items())
    if settings[EDITOR_ENGINE_KEY] == "podman":
        return CheckResult(
            name="Dev Containers settings",
            status=CheckStatus.PASS,
            message=f"{EDITOR_ENGINE_KEY} is podman",
            details=details,
        )
    ctx.recommend(f'Set "{EDITOR_ENGINE_KEY}": "podman" in {path}')
    return CheckResult(
        name="Dev Containers settings",
        status=CheckStatus.WARN,
        message=f"{EDITOR_ENGINE_KEY} is {settings[EDITOR_ENGINE_KEY] or 'not set'}",
        details=details,
    )


def check_editor(ctx: DiagnosticContext) -> None:
    ctx.check("VS Code CLI", check_editor_cli)
    ctx.check("Dev Containers settings", check_editor_settings)


# -- 6. corporate connectivity ----------------------------------------------


def check_artifactory(ctx: DiagnosticContext) -> CheckResult:
    url = ctx.config.artifactory_url
    if not url:
        return CheckResult(
            name="Artifact repository",
            status=CheckStatus.SKIP,
            message="No --artifactory-url given",
        )
    try:
        response = ctx.probe.http_get(url, timeout=ctx.config.http_timeout)
    except requests.RequestException as e:
        ctx.issue(f"Cannot reach {url}: {e}")
        return CheckResult(
            name="Artifact repository",
            status=CheckStatus.FAIL,
            message=f"Unreachable: {url}",
            details=str(e),
        )
    status = CheckStatus.WARN if response.status_code >= 500 else CheckStatus.PASS
    return CheckResult(
        name="Artifact repository",
        status=status,
        message=f"HTTP {response.status_code} from {url}",
    )


def _find_credentials(probe: SubsystemProbe) -> Tuple[Optional[Path], Optional[str]]:
    """Return the first credentials file that exists and its text.

    Raises UnreadableFileError when that file exists but cannot be read.
    """
    for path in credentials_candidates(probe):
        text = probe.read_text(path)
        if text is not None:
            return path, text
    return None, None


def check_registry_credentials(ctx: DiagnosticContext) -> CheckResult:
    try:
        path, text = _find_credentials(ctx.probe)
    except UnreadableFileError as e:
        return CheckResult(
            name="Registry credentials",
            status=CheckStatus.INFO,
            message=f"{e.path} present but could not be read",
            details=e.reason,
        )
    if path is None:
        return CheckResult(
            name="Registry credentials",
            status=CheckStatus.INFO,
            message="No credentials file found",
        )
    try:
        registries = parse_registry_auths(text)
    except ValueError as e:
        return CheckResult(
            name="Registry credentials",
            status=CheckStatus.INFO,
            message=f"{path} present but could not be parsed",
            details=str(e),
        )
    if not registries:
        return CheckResult(
            name="Registry credentials",
            status=CheckStatus.INFO,
            message=f"No registries in {path}",
        )
    return CheckResult(
        name="Registry credentials",
        status=CheckStatus.PASS,
        message=f"{len(registries)} registr{'y' if len(registries) == 1 else 'ies'} in {path}",
        details="\n".join(registries),
    )


def check_corporate(ctx: DiagnosticContext) -> None:
    ctx.check("Artifact repository", check_artifactory)
    ctx.check("Registry credentials", check_registry_credentials)


SECTIONS: List[Tuple[str, Callable[[DiagnosticContext], None]]] = [
    ("Host Environment", check_host_environment),
    ("WSL", check_wsl),
    ("Podman (Windows host)", check_podman_host),
    ("Podman (inside WSL)", check_podman_wsl),
    ("VS Code Dev Containers", check_editor),
    ("Corporate Connectivity", check_corporate),
]


def run_all_checks(
    config: Optional[DoctorConfig] = None,
    probe: Optional[SubsystemProbe] = None,
) -> DiagnosticReport:
    """Run every section in order, print the report and return it.

    Args:
        config: Run settings; read from the environment when omitted.
        probe: Host access; a real SubsystemProbe when omitted.

    Returns:
        The DiagnosticReport with all results, issues and recommendations.

    Raises:
        DiagnosticAborted: WSL is missing. The fatal notice has been printed
            and no later section ran.
    """
    config = config or DoctorConfig.from_env()
    probe = probe or SubsystemProbe(timeout=config.command_timeout)
    ctx = DiagnosticContext(config, probe)

    out.print_header("Podman Dev Containers Doctor")
    for title, section_fn in SECTIONS:
        logger.debug(f"Section: {title}")
        ctx.begin_section(title)
        section_fn(ctx)

    out.print_summary(ctx.report)
    logger.info(
        f"Diagnostics complete: {len(ctx.report.issues)} issue(s), "
        f"{len(ctx.report.recommendations)} recommendation(s)"
    )
    return ctx.report
