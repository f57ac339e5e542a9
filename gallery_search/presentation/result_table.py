from collections.abc import Sequence
from typing import Final

from rich.console import Console
from rich.table import Table
from rich.text import Text

from gallery_search.core.gallery_types import ResultRecord, SearchOutcome

HEADERS: Final[tuple[str, ...]] = ("Name", "Version", "Description", "Author", "Downloads")
NO_RESULTS_MESSAGE: Final[str] = "No results found."


def _row(record: ResultRecord) -> tuple[Text, ...]:
    # Registry text is shown literally, never parsed as console markup.
    values = (
        record.name,
        record.version,
        record.description,
        record.author,
        str(record.download_count),
    )
    return tuple(Text(value) for value in values)


def build_result_table(records: Sequence[ResultRecord]) -> Table:
    """Builds a rich table with one row per record, in the given order."""
    table = Table(show_lines=False, header_style="bold cyan")
    for header in HEADERS:
        justify = "right" if header == "Downloads" else "left"
        table.add_column(header, justify=justify, overflow="fold")
    for record in records:
        table.add_row(*_row(record))
    return table


def summary_line(count: int) -> str:
    return f"Found {count} result(s)"


def render_outcome(outcome: SearchOutcome, console: Console) -> None:
    """Prints the result table and its summary, or the no-results message."""
    if outcome.is_empty:
        console.print(NO_RESULTS_MESSAGE)
        return

    console.print(build_result_table(outcome.records))
    console.print(summary_line(len(outcome.records)))
