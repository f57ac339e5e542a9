from dataclasses import dataclass
from typing import Final

from logly import logger

from gallery_search.application.backends import (
    PowerShellGetBackend,
    PSResourceGetBackend,
    ScriptRunner,
    SearchBackend,
)
from gallery_search.infra.powershell import ps_quote

PSRESOURCEGET_MODULE: Final[str] = "Microsoft.PowerShell.PSResourceGet"
FALLBACK_WARNING: Final[str] = (
    f"{PSRESOURCEGET_MODULE} not found; falling back to PowerShellGet"
)


@dataclass(frozen=True, slots=True)
class BackendSelection:
    """The backend chosen for one invocation and the warning raised, if any."""

    backend: SearchBackend
    warning: str | None = None


def probe_psresourceget(runner: ScriptRunner) -> bool:
    """Checks once whether PSResourceGet is installed.

    A failing probe counts as "not installed". There is no retry.
    """
    script = (
        f"if (Get-Module -ListAvailable -Name {ps_quote(PSRESOURCEGET_MODULE)}) "
        "{ 'available' } else { 'missing' }"
    )
    result = runner.run(script)
    if not result.ok:
        logger.warning(f"Capability probe failed (code={result.returncode})")
        return False
    return "available" in result.stdout.split()


def select_backend(runner: ScriptRunner, repository: str = "PSGallery") -> BackendSelection:
    """Probes the capability and picks the matching backend for the whole call."""
    if probe_psresourceget(runner):
        logger.info(f"Using {PSRESOURCEGET_MODULE}")
        return BackendSelection(PSResourceGetBackend(runner, repository))

    logger.warning(FALLBACK_WARNING)
    return BackendSelection(PowerShellGetBackend(runner, repository), FALLBACK_WARNING)
