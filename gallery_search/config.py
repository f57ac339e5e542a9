import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from gallery_search.core.errors import ConfigurationError

DEFAULT_REPOSITORY: Final[str] = "PSGallery"
DEFAULT_FIRST: Final[int] = 20
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_LOG_DIR_PATH: Final[Path] = Path.home() / ".gallery-search" / "logs"

_LOG_LEVELS: Final[tuple[str, ...]] = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class SearchSettings:
    """Runtime settings. CLI options take precedence over these values.

    Attributes:
        repository: Registered PowerShell repository to search.
        shell: PowerShell executable. Auto-detected when None.
        timeout_sec: Optional limit for each PowerShell call. None means no limit.
        log_dir: Directory of the log file.
        log_level: logly level name.
    """

    repository: str = DEFAULT_REPOSITORY
    shell: str | None = None
    timeout_sec: int | None = None
    log_dir: Path = DEFAULT_LOG_DIR_PATH
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SearchSettings":
        """Reads `GALLERY_SEARCH_*` environment variables.

        Raises:
            ConfigurationError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ

        timeout_sec = None
        raw_timeout = env.get("GALLERY_SEARCH_TIMEOUT", "").strip()
        if raw_timeout:
            try:
                timeout_sec = int(raw_timeout)
            except ValueError:
                raise ConfigurationError(
                    f"GALLERY_SEARCH_TIMEOUT must be an integer (got {raw_timeout!r})"
                ) from None
            if timeout_sec <= 0:
                raise ConfigurationError("GALLERY_SEARCH_TIMEOUT must be positive")

        log_level = env.get("GALLERY_SEARCH_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        if log_level not in _LOG_LEVELS:
            raise ConfigurationError(f"unknown log level {log_level!r}")

        log_dir = env.get("GALLERY_SEARCH_LOG_DIR", "").strip()

        return cls(
            repository=env.get("GALLERY_SEARCH_REPOSITORY", "").strip() or DEFAULT_REPOSITORY,
            shell=env.get("GALLERY_SEARCH_SHELL", "").strip() or None,
            timeout_sec=timeout_sec,
            log_dir=Path(log_dir) if log_dir else DEFAULT_LOG_DIR_PATH,
            log_level=log_level,
        )
