from collections.abc import Iterable, Mapping
from typing import Final

from .gallery_types import RawResult, ResultRecord

DESCRIPTION_MAX_LENGTH: Final[int] = 80
ELLIPSIS: Final[str] = "..."
NOT_AVAILABLE: Final[str] = "N/A"


def truncate_description(text: str, limit: int = DESCRIPTION_MAX_LENGTH) -> str:
    """Ellipsizes a description that is longer than `limit` characters.

    Args:
        text: Original description.
        limit: Maximum length of the returned text.

    Returns:
        `text` unchanged when it fits, otherwise its first `limit - 3`
        characters followed by "...".
    """
    if len(text) > limit:
        return text[: limit - len(ELLIPSIS)] + ELLIPSIS
    return text


def resolve_download_count(metadata: Mapping[str, object]) -> int | str:
    """Reads the download counter from registry metadata.

    Args:
        metadata: Additional metadata of a registry hit.

    Returns:
        The counter as an int, or "N/A" when it is missing or not numeric.
    """
    value: object = None
    for key, candidate in metadata.items():
        if key.lower() == "downloadcount":
            value = candidate
            break

    if isinstance(value, bool):
        return NOT_AVAILABLE
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return NOT_AVAILABLE


def project_result(raw: RawResult) -> ResultRecord:
    """Maps one raw registry hit onto the display schema."""
    return ResultRecord(
        name=raw.name,
        version=raw.version,
        description=truncate_description(raw.description),
        author=raw.author,
        download_count=resolve_download_count(raw.metadata),
    )


def project_results(
    raw_results: Iterable[RawResult], max_results: int
) -> list[ResultRecord]:
    """Projects at most `max_results` hits, keeping registry order."""
    records: list[ResultRecord] = []
    if max_results <= 0:
        return records
    for raw in raw_results:
        records.append(project_result(raw))
        if len(records) >= max_results:
            break
    return records
