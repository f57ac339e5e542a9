import json

import pytest

from gallery_search.application.backends import PowerShellGetBackend, PSResourceGetBackend
from gallery_search.application.capability import FALLBACK_WARNING
from gallery_search.application.dispatcher import GallerySearchDispatcher
from gallery_search.core.errors import ConfigurationError, RegistryError
from gallery_search.core.gallery_types import SearchQuery
from gallery_search.infra.subprocess_runner import CommandResult


class _ScriptedRunner:
    """Answers the capability probe, then returns canned search output."""

    def __init__(self, available: bool, search_result: CommandResult) -> None:
        self._available = available
        self._search_result = search_result
        self.probes: list[str] = []
        self.searches: list[str] = []

    def run(self, script: str) -> CommandResult:
        if "Get-Module -ListAvailable" in script:
            self.probes.append(script)
            return CommandResult("available" if self._available else "missing", "", 0)
        self.searches.append(script)
        return self._search_result


def _hits(count: int) -> str:
    items = []
    for i in range(count):
        item = {
            "Name": f"Pester{i:02d}",
            "Version": "5.0.0",
            "Description": "Pester provides a framework for running BDD style tests.",
            "Author": "Pester Team",
        }
        if i % 2 == 0:
            item["AdditionalMetadata"] = {"downloadCount": str(1000 + i)}
        items.append(item)
    return json.dumps(items)


def test_name_search_caps_records_and_keeps_order() -> None:
    runner = _ScriptedRunner(True, CommandResult(_hits(12), "", 0))
    dispatcher = GallerySearchDispatcher.create(runner)

    outcome = dispatcher.search(SearchQuery.from_options(name="Pester", max_results=5))

    assert [r.name for r in outcome.records] == [f"Pester{i:02d}" for i in range(5)]
    assert all(
        isinstance(r.download_count, int) or r.download_count == "N/A"
        for r in outcome.records
    )
    assert outcome.records[0].download_count == 1000
    assert outcome.records[1].download_count == "N/A"
    assert dispatcher.warnings == ()
    assert isinstance(dispatcher.backend, PSResourceGetBackend)


def test_fewer_hits_than_max_returns_all() -> None:
    runner = _ScriptedRunner(True, CommandResult(_hits(3), "", 0))

    outcome = GallerySearchDispatcher.create(runner).search(SearchQuery(max_results=20))

    assert len(outcome.records) == 3


def test_zero_hits_is_no_results_outcome() -> None:
    runner = _ScriptedRunner(True, CommandResult("[]", "", 0))

    outcome = GallerySearchDispatcher.create(runner).search(
        SearchQuery.from_options(name="ZzNoSuchModule*")
    )

    assert outcome.is_empty


def test_unavailable_capability_uses_fallback_once_and_records_warning() -> None:
    runner = _ScriptedRunner(False, CommandResult(_hits(2), "", 0))
    dispatcher = GallerySearchDispatcher.create(runner)

    outcome = dispatcher.search(SearchQuery.from_options(name="Pester"))

    assert isinstance(dispatcher.backend, PowerShellGetBackend)
    assert len(runner.probes) == 1
    assert len(runner.searches) == 1
    assert "Find-Module -Name 'Pester'" in runner.searches[0]
    assert dispatcher.backend.is_fallback
    assert dispatcher.warnings == (FALLBACK_WARNING,)
    assert len(outcome.records) == 2


def test_command_mode_without_name_fails_before_registry_call() -> None:
    runner = _ScriptedRunner(True, CommandResult(_hits(1), "", 0))
    dispatcher = GallerySearchDispatcher.create(runner)

    with pytest.raises(ConfigurationError):
        dispatcher.search(SearchQuery.from_options(command=""))

    assert runner.searches == []


def test_registry_failure_propagates() -> None:
    runner = _ScriptedRunner(True, CommandResult("", "Response status code does not indicate success: 503", 1))

    with pytest.raises(RegistryError, match="503"):
        GallerySearchDispatcher.create(runner).search(SearchQuery())

    assert len(runner.searches) == 1
