import json
import re
from typing import Any

from .gallery_types import RawResult

# PowerShell error records can include ANSI sequences when rendered by pwsh 7.2+.
_ANSI_OSC_RE = re.compile(r"\x1b\][^\x07]*(?:\x07|\x1b\\)")
_ANSI_CSI_RE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]")
_ANSI_2CHAR_RE = re.compile(r"\x1b[@-Z\\-_]")

# Messages PowerShellGet / PSResourceGet write when a search simply has no hits.
_NO_MATCH_MARKERS = (
    "no match was found for the specified search criteria",
    "could not be found in",
)


def extract_first_json_value(text: str) -> Any | None:
    """Extracts the first JSON value from a noisy text stream.

    This is tolerant to non-JSON prefixes (e.g. banner/log lines). It attempts to decode
    JSON starting at each '{' or '[' occurrence.

    Args:
        text: Text that may contain a JSON value.

    Returns:
        The parsed JSON value, or None if no valid JSON value is found.
    """
    decoder = json.JSONDecoder()
    for i, ch in enumerate(text):
        if ch not in "{[":
            continue
        try:
            value, _ = decoder.raw_decode(text, i)
            return value
        except json.JSONDecodeError:
            continue
    return None


def _coerce_text(value: object) -> str:
    """Converts parsed JSON field values into plain display text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float, bool)):
        return str(value).strip()
    if isinstance(value, list):
        parts = []
        for v in value:
            text = _coerce_text(v)
            if text:
                parts.append(text)
        return ", ".join(parts).strip()
    # PowerShell can serialize JsonElement-like values into only `ValueKind`.
    return ""


def sanitize(text: str) -> str:
    """Normalizes newlines and strips common ANSI escape sequences."""
    if not text:
        return ""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _ANSI_OSC_RE.sub("", text)
    text = _ANSI_CSI_RE.sub("", text)
    text = _ANSI_2CHAR_RE.sub("", text)
    return text


def is_no_match_message(text: str) -> bool:
    """Tells whether PowerShell output reports an empty search rather than a failure."""
    lower = sanitize(text).lower()
    return any(marker in lower for marker in _NO_MATCH_MARKERS)


def _field(item: dict, key: str) -> object:
    value = item.get(key)
    if value is None:
        value = item.get(key.lower())
    return value


def _join_version(version: str, prerelease: str) -> str:
    if not prerelease or version.endswith(f"-{prerelease}"):
        return version
    return f"{version}-{prerelease}"


def parse_gallery_results(text: str) -> list[RawResult]:
    """Parses the JSON emitted by the search pipeline into raw results.

    `ConvertTo-Json` emits a bare object for a single hit and nothing at all for
    zero hits; both are accepted.

    Args:
        text: PowerShell stdout text (may contain extra non-JSON lines).

    Returns:
        Raw results in registry order. Items without a name are skipped.
    """
    data = extract_first_json_value(text)
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        return []

    results: list[RawResult] = []
    for item in data:
        if not isinstance(item, dict):
            continue

        name = _coerce_text(_field(item, "Name"))
        if not name:
            continue

        metadata = _field(item, "AdditionalMetadata")
        results.append(
            RawResult(
                name=name,
                version=_join_version(
                    _coerce_text(_field(item, "Version")),
                    _coerce_text(_field(item, "Prerelease")),
                ),
                description=_coerce_text(_field(item, "Description")),
                author=_coerce_text(_field(item, "Author")),
                metadata=dict(metadata) if isinstance(metadata, dict) else {},
            )
        )
    return results
