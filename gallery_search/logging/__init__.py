from pathlib import Path

from logly import _LoggerProxy, logger

from gallery_search.config import DEFAULT_LOG_DIR_PATH, DEFAULT_LOG_LEVEL


def init_logger(
    level: str = DEFAULT_LOG_LEVEL,
    console: bool = False,
    log_dir: Path = DEFAULT_LOG_DIR_PATH,
) -> _LoggerProxy:
    """Initialize the logger.

    Console output is off by default so that stdout only carries the result table.

    Args:
        level: Minimum level name.
        console: Whether to also log to the console.
        log_dir: Directory of the rotating log file.
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.configure(
        level=level,
        color=True,
        console=console,
        auto_sink=True,
    )

    logger.add(f"{log_dir}/gallery-search.log", size_limit="10MB", retention=3)

    logger.success("logger initialized!")

    return logger
