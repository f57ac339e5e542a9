from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from .errors import ConfigurationError


class ResourceType(str, Enum):
    """Kind of gallery resource to search for."""

    MODULE = "Module"
    SCRIPT = "Script"
    ALL = "All"

    @classmethod
    def parse(cls, value: str) -> "ResourceType":
        """Parses a resource type name case-insensitively.

        Raises:
            ConfigurationError: If the value is not one of Module, Script or All.
        """
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        raise ConfigurationError(
            f"invalid resource type {value!r} (expected Module, Script or All)"
        )


@dataclass(frozen=True, slots=True)
class ByName:
    """Searches resources by name pattern and optional tags."""

    name_pattern: str = "*"
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name_pattern.strip():
            object.__setattr__(self, "name_pattern", "*")
        object.__setattr__(
            self, "tags", tuple(t.strip() for t in self.tags if t.strip())
        )


@dataclass(frozen=True, slots=True)
class ByCommand:
    """Searches resources that export a command."""

    command_name: str

    def __post_init__(self) -> None:
        if not (self.command_name or "").strip():
            raise ConfigurationError("a command name is required to search by command")


@dataclass(frozen=True, slots=True)
class ByDscResource:
    """Searches resources that provide a DSC resource."""

    resource_name: str

    def __post_init__(self) -> None:
        if not (self.resource_name or "").strip():
            raise ConfigurationError(
                "a DSC resource name is required to search by DSC resource"
            )


SearchMode = Union[ByName, ByCommand, ByDscResource]


@dataclass(frozen=True, slots=True)
class SearchQuery:
    """A single gallery search request.

    Attributes:
        mode: Exactly one of `ByName`, `ByCommand` or `ByDscResource`.
        resource_type: Resource kind filter (only honored by `ByName`).
        include_prerelease: Whether prerelease versions are returned.
        max_results: Maximum number of records to project (>= 0).
    """

    mode: SearchMode = field(default_factory=ByName)
    resource_type: ResourceType = ResourceType.MODULE
    include_prerelease: bool = False
    max_results: int = 20

    def __post_init__(self) -> None:
        if not isinstance(self.mode, (ByName, ByCommand, ByDscResource)):
            raise ConfigurationError(f"unsupported search mode: {self.mode!r}")
        if self.max_results < 0:
            raise ConfigurationError(
                f"max results must be >= 0 (got {self.max_results})"
            )

    @classmethod
    def from_options(
        cls,
        name: str | None = None,
        tags: tuple[str, ...] | list[str] = (),
        command: str | None = None,
        dsc_resource: str | None = None,
        resource_type: ResourceType | str = ResourceType.MODULE,
        include_prerelease: bool = False,
        max_results: int = 20,
    ) -> "SearchQuery":
        """Builds a query from CLI-style options.

        The mode is picked from the option group that was supplied. Options from
        more than one group are rejected.

        Raises:
            ConfigurationError: On conflicting groups or missing mandatory values.
        """
        groups = []
        if name is not None or tags:
            groups.append("--name/--tag")
        if command is not None:
            groups.append("--command")
        if dsc_resource is not None:
            groups.append("--dsc-resource")
        if len(groups) > 1:
            raise ConfigurationError(
                f"options {', '.join(groups)} are mutually exclusive"
            )

        mode: SearchMode
        if command is not None:
            mode = ByCommand(command)
        elif dsc_resource is not None:
            mode = ByDscResource(dsc_resource)
        else:
            mode = ByName(name_pattern=name or "*", tags=tuple(tags))

        if isinstance(resource_type, str) and not isinstance(
            resource_type, ResourceType
        ):
            resource_type = ResourceType.parse(resource_type)

        return cls(
            mode=mode,
            resource_type=resource_type,
            include_prerelease=include_prerelease,
            max_results=max_results,
        )


@dataclass(frozen=True, slots=True)
class RawResult:
    """A registry hit as reported by the PowerShell pipeline."""

    name: str
    version: str = ""
    description: str = ""
    author: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ResultRecord:
    """A registry hit projected into the display schema.

    Attributes:
        name: Resource name.
        version: Version string (prerelease label included).
        description: Description, ellipsized to at most 80 characters.
        author: Author string.
        download_count: Download counter, or "N/A" when the registry has none.
    """

    name: str
    version: str = ""
    description: str = ""
    author: str = ""
    download_count: int | str = "N/A"


@dataclass(frozen=True, slots=True)
class SearchOutcome:
    """Result of one dispatcher call."""

    records: tuple[ResultRecord, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.records
