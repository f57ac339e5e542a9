import shutil
from collections.abc import Iterable

from .subprocess_runner import CommandResult, run_command


def find_powershell_executable() -> str:
    """Finds a usable PowerShell executable.

    Prefers PowerShell 7 (`pwsh`) when available, otherwise falls back to Windows
    PowerShell (`powershell`).

    Returns:
        The executable path or name to use with subprocess.
    """
    return shutil.which("pwsh") or shutil.which("powershell") or "powershell"


def build_powershell_argv(command: str, shell: str | None = None) -> list[str]:
    """Builds an argv list to execute a PowerShell command.

    Args:
        command: PowerShell command string to execute.
        shell: PowerShell executable path/name. If omitted, it will be auto-detected.

    Returns:
        Argument vector suitable for `subprocess.run(...)`.
    """
    exe = shell or find_powershell_executable()
    return [
        exe,
        "-NoLogo",
        "-NoProfile",
        "-NonInteractive",
        "-ExecutionPolicy",
        "Bypass",
        "-Command",
        command,
    ]


def ps_quote(value: str) -> str:
    """Quotes a value for PowerShell single-quoted literals."""
    return "'" + value.replace("'", "''") + "'"


def ps_array(values: Iterable[str]) -> str:
    """Renders values as a PowerShell array of single-quoted literals."""
    return "@(" + ",".join(ps_quote(v) for v in values) + ")"


class PowerShellRunner:
    """Executes PowerShell scripts synchronously.

    Every script runs with `$ErrorActionPreference='Stop'` so that cmdlet errors
    turn into a non-zero exit code.
    """

    def __init__(self, shell: str | None = None, timeout_sec: int | None = None):
        self._shell = shell
        self._timeout_sec = timeout_sec

    def run(self, script: str) -> CommandResult:
        command = f"$ErrorActionPreference='Stop'; $ProgressPreference='SilentlyContinue'; {script}"
        argv = build_powershell_argv(command, shell=self._shell)
        return run_command(argv, timeout_sec=self._timeout_sec)
