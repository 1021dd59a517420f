import logging

import pytest

from searchbar import plugin
from searchbar.core.exceptions import UnknownHandleError
from searchbar.core.host import MappingHostAPI
from searchbar.services.history_service import BINARY_NOT_FOUND
from searchbar.services.measure_service import INVALID_TYPE, Measure


class FixedTrends:
    def __init__(self, value):
        self.value = value

    def get_top_trends(self, options):
        return self.value


class ExplodingTrends:
    def get_top_trends(self, options):
        raise RuntimeError("event loop already running")


def test_lifecycle(registry, history, executor, sqlite_binary):
    executor.output = "Alpha\nBeta\n"
    api = MappingHostAPI({"Type": "RecentHistory", "Limit": 2, "SQLitePath": str(sqlite_binary)})

    handle = plugin.initialize(api, registry=registry, measure=Measure(history=history))

    assert plugin.update(handle, registry=registry) == 0.0
    assert plugin.get_string(handle, registry=registry) == "Alpha|Beta"

    plugin.reload(handle, MappingHostAPI({"Type": "RecentHistory", "SQLitePath": ""}), registry=registry)
    assert plugin.get_string(handle, registry=registry) == BINARY_NOT_FOUND

    plugin.finalize(handle, registry=registry)
    assert registry.handles() == []


def test_handles_are_independent(registry):
    first = plugin.create_measure({"Type": "Bogus"}, registry=registry)
    second = plugin.create_measure({"Type": "Other"}, registry=registry)

    assert first != second
    plugin.finalize(first, registry=registry)
    assert plugin.get_string(second, registry=registry) == INVALID_TYPE


def test_empty_result_is_none(registry):
    measure = Measure(trends=FixedTrends(""))
    handle = plugin.initialize(MappingHostAPI({"Type": "TopTrends"}), registry=registry, measure=measure)

    assert plugin.get_string(handle, registry=registry) is None


def test_on_complete_action_sent_to_host(registry):
    api = MappingHostAPI({"Type": "TopTrends", "OnCompleteAction": "!Redraw"})
    handle = plugin.initialize(api, registry=registry, measure=Measure(trends=FixedTrends("A")))

    plugin.get_string(handle, registry=registry)

    assert api.executed == ["!Redraw"]


def test_unknown_handle_never_raises(registry, caplog):
    with caplog.at_level(logging.ERROR):
        assert plugin.get_string(42, registry=registry) is None
        assert plugin.update(42, registry=registry) == 0.0
        plugin.reload(42, MappingHostAPI({}), registry=registry)
        plugin.finalize(42, registry=registry)

    assert len([r for r in caplog.records if r.levelno == logging.ERROR]) == 4


def test_unexpected_failure_is_contained(registry, caplog):
    handle = plugin.initialize(
        MappingHostAPI({"Type": "TopTrends"}), registry=registry, measure=Measure(trends=ExplodingTrends())
    )

    with caplog.at_level(logging.ERROR):
        assert plugin.get_string(handle, registry=registry) is None
    assert "event loop already running" in caplog.text


def test_initialize_without_api_uses_defaults(registry):
    handle = plugin.initialize(registry=registry)

    assert registry.get(handle).options.type == "RecentHistory"
    assert registry.get(handle).options.limit == 6


def test_registry_names(registry):
    handle = registry.create()
    registry.bind_name("history", handle)

    assert registry.resolve("history") == handle
    registry.release(handle)
    with pytest.raises(UnknownHandleError):
        registry.resolve("history")
