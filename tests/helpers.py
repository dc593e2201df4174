"""Canned host output and a scriptable stand-in for SubsystemProbe."""

from podman_doctor.doctor.probe import CommandResult, SubsystemProbe

HOME = "/fake/home"
APPDATA = "/fake/appdata"

WSL_VERSION_OUTPUT = """WSL version: 2.3.26.0
Kernel version: 5.15.167.4-1
WSLg version: 1.0.65
Windows version: 10.0.22631.4460
"""

WSL_LIST_OUTPUT = """  NAME                      STATE           VERSION
* Ubuntu                    Running         2
  podman-machine-default    Running         2
"""

WSLCONFIG_WITH_CGROUPS = """[wsl2]
memory=8GB
kernelCommandLine = cgroup_no_v1=all
"""

MACHINE_LIST_JSON = """[
  {"Name": "podman-machine-default", "Default": true, "Running": true, "VMType": "wsl"}
]"""

CONNECTION_LIST_OUTPUT = """Name                         URI                                                          Identity    Default     ReadWrite
podman-machine-default       ssh://user@127.0.0.1:52307/run/user/1000/podman/podman.sock  C:\\key      true        true
podman-machine-default-root  ssh://root@127.0.0.1:52307/run/podman/podman.sock            C:\\key      false       true
"""

SETTINGS_JSON = """{
    // Dev Containers
    "dev.containers.dockerPath": "podman",
    "dev.containers.dockerSocketPath": "npipe:////./pipe/podman-machine-default",
    "editor.fontSize": 14,
}"""

AUTH_JSON = '{"auths": {"artifactory.corp.example.com": {"auth": "eDp5"}, "quay.io": {}}}'

REGISTRIES_CONF = """unqualified-search-registries = ["docker.io"]

[[registry]]
location = "docker.io"

[[registry.mirror]]
location = "artifactory.corp.example.com/docker-remote"
"""


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(ok=True, returncode=0, stdout=stdout)


def failed(stderr: str = "") -> CommandResult:
    return CommandResult(ok=False, returncode=1, stderr=stderr)


class FakeProbe(SubsystemProbe):
    """SubsystemProbe backed by dictionaries instead of the real host."""

    def __init__(self):
        super().__init__(timeout=1, environ={"USERPROFILE": HOME, "APPDATA": APPDATA})
        self.commands = {}
        self.executables = {}
        self.files = {}
        self.existing_paths = set()
        self.system = ("Windows", "10", "10.0.22631")
        self.elevated = False
        self.proxies = {}
        self.http_response = None
        self.http_error = None
        self.calls = []

    def run(self, args):
        self.calls.append(tuple(args))
        return self.commands.get(tuple(args), failed("not scripted"))

    def which(self, name):
        return self.executables.get(name)

    def os_info(self):
        return self.system

    def is_elevated(self):
        return self.elevated

    def proxy_settings(self):
        return dict(self.proxies)

    def path_exists(self, path):
        return str(path) in self.existing_paths

    def read_text(self, path):
        content = self.files.get(str(path))
        if isinstance(content, Exception):
            raise content
        return content

    def http_get(self, url, timeout):
        self.calls.append(("GET", url))
        if self.http_error is not None:
            raise self.http_error
        return self.http_response


def wsl_in(distro, *args):
    return ("wsl", "-d", distro, "--", *args)


