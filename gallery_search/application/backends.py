from abc import ABC, abstractmethod
from typing import Protocol

from logly import logger

from gallery_search.core.errors import RegistryError
from gallery_search.core.gallery_result_parser import (
    is_no_match_message,
    parse_gallery_results,
    sanitize,
)
from gallery_search.core.gallery_types import (
    ByCommand,
    ByDscResource,
    ByName,
    RawResult,
    ResourceType,
    SearchQuery,
)
from gallery_search.infra.powershell import ps_array, ps_quote
from gallery_search.infra.subprocess_runner import CommandResult


class ScriptRunner(Protocol):
    def run(self, script: str) -> CommandResult: ...


# Command and DSC hits point at their owning module; report that module instead.
_NORMALIZE_PIPELINE = (
    "ForEach-Object { "
    "$r = $_; "
    "if ($r.ParentResource) { $r = $r.ParentResource } "
    "elseif ($r.PSGetModuleInfo) { $r = $r.PSGetModuleInfo }; "
    '[pscustomobject]@{ Name = "$($r.Name)"; Version = "$($r.Version)"; '
    'Prerelease = "$($r.Prerelease)"; Description = "$($r.Description)"; '
    'Author = "$($r.Author)"; AdditionalMetadata = $r.AdditionalMetadata } '
    "}"
)


class SearchBackend(ABC):
    """A registry search primitive executed through PowerShell.

    Subclasses only decide which cmdlets to call. Running the script, parsing its
    JSON payload and mapping failures are shared.
    """

    label: str = ""
    is_fallback: bool = False

    def __init__(self, runner: ScriptRunner, repository: str = "PSGallery"):
        self._runner = runner
        self._repository = repository

    @abstractmethod
    def search_command(self, query: SearchQuery) -> str:
        """Returns the PowerShell statements that emit the raw registry hits."""

    def build_script(self, query: SearchQuery) -> str:
        """Wraps the search statements into a pipeline that emits compact JSON.

        Only the first `max_results` hits are serialized, in registry order.
        """
        return (
            f"$items = @(& {{ {self.search_command(query)} }} "
            f"| Select-Object -First {query.max_results} | {_NORMALIZE_PIPELINE}); "
            "ConvertTo-Json -InputObject $items -Depth 3 -Compress"
        )

    def search(self, query: SearchQuery) -> list[RawResult]:
        """Runs one registry query.

        Returns:
            Raw hits in registry order; empty when nothing matched.

        Raises:
            RegistryError: If PowerShell reports a failure other than "no match".
        """
        logger.info(f"Searching {self._repository} via {self.label}")
        result = self._runner.run(self.build_script(query))

        if not result.ok:
            # Both PowerShellGet and PSResourceGet write an error record for an empty search.
            if is_no_match_message(result.stdout + "\n" + result.stderr):
                logger.info("Registry reported no match")
                return []
            message = sanitize(result.stderr).strip() or sanitize(result.stdout).strip()
            raise RegistryError(
                message or f"{self.label} failed (code={result.returncode})",
                returncode=result.returncode,
            )

        return parse_gallery_results(result.stdout)

    def _common_args(self) -> str:
        return f"-Repository {ps_quote(self._repository)} -ErrorAction Stop"


class PSResourceGetBackend(SearchBackend):
    """Searches with `Find-PSResource` (Microsoft.PowerShell.PSResourceGet)."""

    label = "Find-PSResource"

    def search_command(self, query: SearchQuery) -> str:
        mode = query.mode
        if isinstance(mode, ByName):
            parts = [f"Find-PSResource -Name {ps_quote(mode.name_pattern)}"]
            if query.resource_type is not ResourceType.ALL:
                parts.append(f"-Type {query.resource_type.value}")
            if mode.tags:
                parts.append(f"-Tag {ps_array(mode.tags)}")
        elif isinstance(mode, ByCommand):
            parts = [f"Find-PSResource -CommandName {ps_quote(mode.command_name)}"]
        elif isinstance(mode, ByDscResource):
            parts = [f"Find-PSResource -DscResourceName {ps_quote(mode.resource_name)}"]
        else:
            raise TypeError(f"unsupported search mode: {mode!r}")

        if query.include_prerelease:
            parts.append("-Prerelease")
        parts.append(self._common_args())
        return " ".join(parts)


class PowerShellGetBackend(SearchBackend):
    """Searches with the legacy PowerShellGet cmdlets (`Find-Module` and friends)."""

    label = "PowerShellGet"
    is_fallback = True

    def search_command(self, query: SearchQuery) -> str:
        mode = query.mode
        suffix = self._common_args()
        if query.include_prerelease:
            suffix = f"-AllowPrerelease {suffix}"

        if isinstance(mode, ByName):
            filters = f"-Name {ps_quote(mode.name_pattern)}"
            if mode.tags:
                filters += f" -Tag {ps_array(mode.tags)}"
            cmdlets = {
                ResourceType.MODULE: ["Find-Module"],
                ResourceType.SCRIPT: ["Find-Script"],
                ResourceType.ALL: ["Find-Module", "Find-Script"],
            }[query.resource_type]
            if len(cmdlets) == 1:
                return f"{cmdlets[0]} {filters} {suffix}"
            # A name may match only modules or only scripts; a miss on one side is not fatal.
            return "; ".join(
                f"try {{ {cmdlet} {filters} {suffix} }} "
                "catch { if ($_.FullyQualifiedErrorId -notlike 'NoMatchFound*') { throw } }"
                for cmdlet in cmdlets
            )
        if isinstance(mode, ByCommand):
            return f"Find-Command -Name {ps_quote(mode.command_name)} {suffix}"
        if isinstance(mode, ByDscResource):
            return f"Find-DscResource -Name {ps_quote(mode.resource_name)} {suffix}"
        raise TypeError(f"unsupported search mode: {mode!r}")
