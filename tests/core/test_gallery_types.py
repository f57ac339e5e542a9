from dataclasses import FrozenInstanceError

import pytest

from gallery_search.core.errors import ConfigurationError
from gallery_search.core.gallery_types import (
    ByCommand,
    ByDscResource,
    ByName,
    ResourceType,
    ResultRecord,
    SearchOutcome,
    SearchQuery,
)


def test_search_query_defaults_to_name_search_for_everything() -> None:
    query = SearchQuery()

    assert query.mode == ByName(name_pattern="*", tags=())
    assert query.resource_type is ResourceType.MODULE
    assert query.include_prerelease is False
    assert query.max_results == 20


def test_by_name_blank_pattern_becomes_wildcard_and_blank_tags_are_dropped() -> None:
    mode = ByName(name_pattern="  ", tags=("Azure", " ", "Cloud "))

    assert mode.name_pattern == "*"
    assert mode.tags == ("Azure", "Cloud")


@pytest.mark.parametrize("value", ["", "   "])
def test_by_command_requires_command_name(value: str) -> None:
    with pytest.raises(ConfigurationError):
        ByCommand(value)


def test_by_dsc_resource_requires_resource_name() -> None:
    with pytest.raises(ConfigurationError):
        ByDscResource("")


def test_search_query_rejects_negative_max_results() -> None:
    with pytest.raises(ConfigurationError, match="max results"):
        SearchQuery(max_results=-1)


def test_search_query_accepts_zero_max_results() -> None:
    assert SearchQuery(max_results=0).max_results == 0


def test_from_options_picks_command_mode() -> None:
    query = SearchQuery.from_options(command="Invoke-Pester", max_results=5)

    assert query.mode == ByCommand("Invoke-Pester")
    assert query.max_results == 5


def test_from_options_picks_dsc_resource_mode() -> None:
    query = SearchQuery.from_options(dsc_resource="xWebsite")

    assert query.mode == ByDscResource("xWebsite")


def test_from_options_builds_name_mode_with_tags_and_type() -> None:
    query = SearchQuery.from_options(
        name="Az.*", tags=["Azure"], resource_type="all", include_prerelease=True
    )

    assert query.mode == ByName(name_pattern="Az.*", tags=("Azure",))
    assert query.resource_type is ResourceType.ALL
    assert query.include_prerelease is True


def test_from_options_empty_command_is_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="command name"):
        SearchQuery.from_options(command="")


@pytest.mark.parametrize(
    "options",
    [
        {"command": "Get-Foo", "dsc_resource": "xFoo"},
        {"name": "Pester", "command": "Invoke-Pester"},
        {"tags": ["Azure"], "dsc_resource": "xWebsite"},
    ],
)
def test_from_options_rejects_mixed_groups(options: dict) -> None:
    with pytest.raises(ConfigurationError, match="mutually exclusive"):
        SearchQuery.from_options(**options)


def test_resource_type_parse_rejects_unknown_value() -> None:
    with pytest.raises(ConfigurationError):
        ResourceType.parse("Package")


def test_result_record_defaults_and_frozen() -> None:
    record = ResultRecord(name="alpha-module")

    assert record.download_count == "N/A"
    with pytest.raises(FrozenInstanceError):
        record.name = "changed"  # type: ignore[misc]


def test_search_outcome_is_empty_without_records() -> None:
    assert SearchOutcome().is_empty
    assert not SearchOutcome(records=(ResultRecord(name="x"),)).is_empty
