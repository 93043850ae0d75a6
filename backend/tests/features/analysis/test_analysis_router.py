from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from riftcoach.core.enums import QueueFilter
from riftcoach.core.exceptions import (
    NoMatchesAvailable,
    ServiceException,
    ValidationError,
)
from riftcoach.core.riot_api.errors import RateLimitError
from riftcoach.features.analysis.dependencies import get_player_analysis_service
from riftcoach.features.analysis.service import PlayerAnalysisService
from riftcoach.main import app

from tests.builders import PLAYER_PUUID, build_normalized

URL = f"/api/v1/analysis/{PLAYER_PUUID}"


@pytest.fixture
def mock_service():
    return AsyncMock()


@pytest.fixture
def client(mock_service):
    app.dependency_overrides[get_player_analysis_service] = lambda: mock_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def _analysis():
    matches = [build_normalized(f"EUW1_{i}") for i in range(3)]
    return PlayerAnalysisService(AsyncMock(), AsyncMock()).build_analysis(
        matches,
        {},
        puuid=PLAYER_PUUID,
        region="euw1",
        game_name="Player",
        tag_line="EUW",
        queue_name="Solo/Duo",
    )


def test_get_player_analysis(client, mock_service):
    mock_service.analyze_player.return_value = _analysis()

    response = client.get(
        URL,
        params={
            "region": "euw",
            "gameName": "Player",
            "tagLine": "EUW",
            "queue": "flex",
            "count": 20,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["analyzedGames"] == 3
    assert body["dataQuality"] == "insufficient"
    assert body["overallStats"]["avgKDA"] == pytest.approx(3.0)
    assert "MIDDLE" in body["roleStats"]
    assert body["championAnalysis"][0]["championName"] == "Ahri"
    assert body["trends"]["kdaTrend"] == "stable"
    mock_service.analyze_player.assert_awaited_once_with(
        PLAYER_PUUID,
        "euw",
        game_name="Player",
        tag_line="EUW",
        queue=QueueFilter.FLEX,
        count=20,
    )


def test_defaults(client, mock_service):
    mock_service.analyze_player.return_value = _analysis()

    response = client.get(URL, params={"region": "euw"})

    assert response.status_code == 200
    kwargs = mock_service.analyze_player.await_args.kwargs
    assert kwargs["queue"] == QueueFilter.SOLO
    assert kwargs["count"] == 50


@pytest.mark.parametrize(
    "params",
    [
        {},
        {"region": "euw", "queue": "aram"},
        {"region": "euw", "count": 0},
        {"region": "euw", "count": 101},
    ],
)
def test_invalid_query(client, params):
    response = client.get(URL, params=params)

    assert response.status_code == 422


@pytest.mark.parametrize(
    "error, status_code",
    [
        (ValidationError("Invalid region: xx"), 400),
        (NoMatchesAvailable(PLAYER_PUUID, "solo"), 404),
        (RateLimitError("Rate limited", status_code=429), 429),
        (ServiceException("boom"), 500),
    ],
)
def test_error_mapping(client, mock_service, error, status_code):
    mock_service.analyze_player.side_effect = error

    response = client.get(URL, params={"region": "xx"})

    assert response.status_code == status_code


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
