"""Tests for the proximity resource matcher and in-memory index."""

import pytest

from relief_api.exceptions import DisasterNotFoundError, ResourceLookupError
from relief_api.services.events import RESOURCES_UPDATED
from relief_api.services.resources import ProximityResourceMatcher
from relief_api.storage.resources import InMemoryResourceIndex


@pytest.fixture
def index(recording_index):
    return recording_index()


@pytest.fixture
def matcher(repository, index, cache, event_bus, settings):
    return ProximityResourceMatcher(
        repository=repository,
        index=index,
        cache=cache,
        event_bus=event_bus,
        settings=settings,
    )


async def test_origin_comes_from_stored_point(matcher, repository, index, cache, make_disaster):
    await repository.insert(make_disaster("d-1", "POINT(-73.9857 40.7484)"))

    resources = await matcher.find_near("d-1")

    assert index.calls == [{"lat": 40.7484, "lng": -73.9857, "distance_km": 10.0}]
    assert [r.id for r in resources] == ["res-1"]
    assert await cache.get("resources:d-1:40.7484:-73.9857:10") is not None


async def test_explicit_coordinates_skip_the_repository(matcher, index):
    await matcher.find_near("missing", lat=42.36, lng=-71.06, radius_km=5)

    assert index.calls == [{"lat": 42.36, "lng": -71.06, "distance_km": 5}]


async def test_partial_coordinates_fall_back_to_stored_point(matcher, repository, index, make_disaster):
    await repository.insert(make_disaster("d-1", "POINT(-73.9857 40.7484)"))

    await matcher.find_near("d-1", lat=1.0)

    assert index.calls[0]["lat"] == 40.7484


async def test_cache_hit_skips_query_and_publish(matcher, repository, index, event_bus, make_disaster):
    await repository.insert(make_disaster("d-1"))
    subscription = event_bus.subscribe()

    first = await matcher.find_near("d-1")
    second = await matcher.find_near("d-1")

    assert first == second
    assert len(index.calls) == 1
    assert subscription.pending() == 1


async def test_publishes_resources_updated(matcher, repository, event_bus, make_disaster):
    await repository.insert(make_disaster("d-1"))
    subscription = event_bus.subscribe(disaster_id="d-1")

    await matcher.find_near("d-1")

    message = await subscription.get()
    assert message["event"] == RESOURCES_UPDATED
    assert message["data"]["disaster_id"] == "d-1"
    assert message["data"]["resources"][0]["id"] == "res-1"


async def test_different_disasters_do_not_share_cache_entries(matcher, repository, index, make_disaster):
    await repository.insert(make_disaster("d-1", "POINT(-73.9857 40.7484)"))
    await repository.insert(make_disaster("d-2", "POINT(-71.06 42.36)"))

    await matcher.find_near("d-1")
    await matcher.find_near("d-2")

    assert [call["lat"] for call in index.calls] == [40.7484, 42.36]


async def test_empty_result_is_cached(repository, recording_index, cache, event_bus, settings, make_disaster):
    empty_index = recording_index(resources=[])
    matcher = ProximityResourceMatcher(repository, empty_index, cache, event_bus, settings)
    await repository.insert(make_disaster("d-1"))

    assert await matcher.find_near("d-1") == []
    assert await matcher.find_near("d-1") == []
    assert len(empty_index.calls) == 1


async def test_expired_entry_queries_again(matcher, repository, index, clock, make_disaster):
    await repository.insert(make_disaster("d-1"))

    await matcher.find_near("d-1")
    clock.advance(3600)
    await matcher.find_near("d-1")

    assert len(index.calls) == 2


async def test_malformed_stored_point(matcher, repository, index, make_disaster):
    await repository.insert(make_disaster("d-1", "POINT(-73.9857,40.7484)"))

    with pytest.raises(ResourceLookupError):
        await matcher.find_near("d-1")

    assert index.calls == []


async def test_unknown_disaster(matcher):
    with pytest.raises(DisasterNotFoundError):
        await matcher.find_near("missing")


async def test_in_memory_index_sorts_by_distance():
    index = InMemoryResourceIndex()

    resources = await index.find_resources_near(lat=40.7484, lng=-73.9857, distance_km=10)

    assert resources
    assert all(r.distance_km <= 10 for r in resources)
    assert [r.distance_km for r in resources] == sorted(r.distance_km for r in resources)
    assert "res-008" not in {r.id for r in resources}


async def test_in_memory_index_far_away_is_empty():
    index = InMemoryResourceIndex()

    assert await index.find_resources_near(lat=42.36, lng=-71.06, distance_km=10) == []
