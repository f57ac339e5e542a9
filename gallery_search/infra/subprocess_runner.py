import os
import subprocess
from dataclasses import dataclass
from typing import Final

from logly import logger

_CREATE_NO_WINDOW: Final[int] = 0x08000000
TIMEOUT_RETURNCODE: Final[int] = 124


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Decoded output of a finished process."""

    stdout: str
    stderr: str
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def decode_output(data: bytes) -> str:
    """Decodes process output bytes with a small encoding fallback list.

    Args:
        data: Raw bytes to decode.

    Returns:
        Decoded text.
    """
    for enc in ("utf-8", "cp932"):
        try:
            return data.decode(enc)
        except UnicodeDecodeError:
            continue
    return data.decode("utf-8", errors="replace")


def run_command(argv: list[str], timeout_sec: int | None = None) -> CommandResult:
    """Runs a command to completion and captures its output.

    Launch failures and timeouts are reported as a failed `CommandResult` rather
    than raised, so callers handle every failure through the return code.

    Args:
        argv: Argument vector.
        timeout_sec: Optional time limit. No limit when omitted.

    Returns:
        The decoded stdout/stderr and the return code.
    """
    try:
        logger.info(f"Starting subprocess timeout={timeout_sec}s argv={' '.join(argv)}")
        kwargs: dict = {"capture_output": True}
        if timeout_sec is not None:
            kwargs["timeout"] = timeout_sec

        if os.name == "nt":
            kwargs["creationflags"] = _CREATE_NO_WINDOW

        result = subprocess.run(argv, **kwargs)
        logger.info(f"Subprocess finished returncode={result.returncode}")
        return CommandResult(
            stdout=decode_output(result.stdout),
            stderr=decode_output(result.stderr),
            returncode=result.returncode,
        )

    except subprocess.TimeoutExpired:
        logger.warning("Subprocess timed out")
        return CommandResult("", "timeout: command exceeded limit", TIMEOUT_RETURNCODE)
    except OSError as e:
        logger.exception("Subprocess execution failed")
        return CommandResult("", str(e), 1)
