"""
Tests for the match gateway: bounded parallel downloads with partial success.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from riftcoach.core.riot_api.constants import QueueType, Region
from riftcoach.core.riot_api.errors import NotFoundError, RateLimitError
from riftcoach.features.matches.gateway import MatchGateway

from tests.builders import build_match, build_timeline


@pytest.fixture
def mock_riot_client():
    return AsyncMock()


async def test_fetch_match_ids_passes_queue_and_region(mock_riot_client):
    mock_riot_client.get_match_ids.return_value = ["EUW1_1", "EUW1_2"]
    gateway = MatchGateway(mock_riot_client)

    ids = await gateway.fetch_match_ids(
        "abc", Region.EUROPE, count=2, queue=QueueType.RANKED_FLEX_5X5
    )

    assert ids == ["EUW1_1", "EUW1_2"]
    mock_riot_client.get_match_ids.assert_awaited_once_with(
        "abc", count=2, queue=QueueType.RANKED_FLEX_5X5, start=0, region=Region.EUROPE
    )


async def test_fetch_match_ids_propagates_rate_limit(mock_riot_client):
    mock_riot_client.get_match_ids.side_effect = RateLimitError(
        "Rate limit exceeded", status_code=429
    )
    gateway = MatchGateway(mock_riot_client)

    with pytest.raises(RateLimitError):
        await gateway.fetch_match_ids("abc", Region.EUROPE)


async def test_fetch_matches_keeps_order_and_drops_failures(mock_riot_client):
    async def get_match(match_id, region=None):
        if match_id == "EUW1_2":
            raise NotFoundError("Resource not found", status_code=404)
        if match_id == "EUW1_3":
            raise RateLimitError("Rate limit exceeded", status_code=429)
        return build_match(match_id)

    mock_riot_client.get_match.side_effect = get_match
    gateway = MatchGateway(mock_riot_client, concurrency=2)

    matches = await gateway.fetch_matches(
        ["EUW1_1", "EUW1_2", "EUW1_3", "EUW1_4"], Region.EUROPE
    )

    assert [m.match_id for m in matches] == ["EUW1_1", "EUW1_4"]


async def test_fetch_matches_drops_unexpected_errors(mock_riot_client):
    async def get_match(match_id, region=None):
        if match_id == "EUW1_2":
            raise KeyError("malformed")
        return build_match(match_id)

    mock_riot_client.get_match.side_effect = get_match
    gateway = MatchGateway(mock_riot_client)

    matches = await gateway.fetch_matches(["EUW1_1", "EUW1_2"], Region.EUROPE)

    assert [m.match_id for m in matches] == ["EUW1_1"]


async def test_fetch_matches_respects_concurrency_cap(mock_riot_client):
    in_flight = 0
    peak = 0

    async def get_match(match_id, region=None):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return build_match(match_id)

    mock_riot_client.get_match.side_effect = get_match
    gateway = MatchGateway(mock_riot_client, concurrency=3)

    matches = await gateway.fetch_matches(
        [f"EUW1_{i}" for i in range(10)], Region.EUROPE
    )

    assert len(matches) == 10
    assert peak <= 3


async def test_fetch_matches_abandons_slow_downloads(mock_riot_client):
    async def get_match(match_id, region=None):
        if match_id == "EUW1_slow":
            await asyncio.sleep(10)
        return build_match(match_id)

    mock_riot_client.get_match.side_effect = get_match
    gateway = MatchGateway(mock_riot_client, timeout=0.2)

    matches = await gateway.fetch_matches(["EUW1_fast", "EUW1_slow"], Region.EUROPE)

    assert [m.match_id for m in matches] == ["EUW1_fast"]


async def test_fetch_matches_empty_input(mock_riot_client):
    gateway = MatchGateway(mock_riot_client)
    assert await gateway.fetch_matches([], Region.EUROPE) == []
    mock_riot_client.get_match.assert_not_called()


async def test_fetch_timelines_keyed_by_match_id(mock_riot_client):
    async def get_match_timeline(match_id, region=None):
        if match_id == "EUW1_2":
            raise NotFoundError("Resource not found", status_code=404)
        return build_timeline(match_id)

    mock_riot_client.get_match_timeline.side_effect = get_match_timeline
    gateway = MatchGateway(mock_riot_client, concurrency=2)

    timelines = await gateway.fetch_timelines(
        ["EUW1_1", "EUW1_2", "EUW1_3"], Region.EUROPE
    )

    assert sorted(timelines) == ["EUW1_1", "EUW1_3"]
    assert timelines["EUW1_3"].match_id == "EUW1_3"
    mock_riot_client.get_match_timeline.assert_any_await("EUW1_1", region=Region.EUROPE)


async def test_fetch_timelines_abandons_slow_downloads(mock_riot_client):
    async def get_match_timeline(match_id, region=None):
        if match_id == "EUW1_slow":
            await asyncio.sleep(10)
        return build_timeline(match_id)

    mock_riot_client.get_match_timeline.side_effect = get_match_timeline
    gateway = MatchGateway(mock_riot_client, timeout=0.2)

    timelines = await gateway.fetch_timelines(["EUW1_fast", "EUW1_slow"], Region.EUROPE)

    assert list(timelines) == ["EUW1_fast"]


async def test_fetch_timelines_empty_input(mock_riot_client):
    gateway = MatchGateway(mock_riot_client)
    assert await gateway.fetch_timelines([], Region.EUROPE) == {}
    mock_riot_client.get_match_timeline.assert_not_called()
